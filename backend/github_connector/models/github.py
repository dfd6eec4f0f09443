"""Pydantic models for the GitHub REST records the connector reads.

Only the fields used to build external items are declared. Repositories keep
every other field too, because private repositories are indexed as their JSON.
"""

from pydantic import BaseModel, ConfigDict, Field


class GitHubUser(BaseModel):
    login: str
    id: int | None = None
    html_url: str | None = None


class GitHubLabel(BaseModel):
    name: str | None = None


class GitHubIssue(BaseModel):
    number: int
    title: str
    body: str | None = None
    state: str | None = None
    html_url: str | None = None
    created_at: str | None = None
    updated_at: str | None = None
    user: GitHubUser | None = None
    assignees: list[GitHubUser] = Field(default_factory=list)
    # Labels come back either as plain names or as label objects
    labels: list[GitHubLabel | str] = Field(default_factory=list)


class IssueEvent(BaseModel):
    event: str
    created_at: str | None = None
    actor: GitHubUser | None = None


class IssueComment(BaseModel):
    body: str | None = None
    created_at: str | None = None
    user: GitHubUser | None = None


class GitHubRepository(BaseModel):
    model_config = ConfigDict(extra="allow")

    id: int
    name: str
    description: str | None = None
    visibility: str | None = None
    html_url: str | None = None
    created_at: str | None = None
    updated_at: str | None = None
    owner: GitHubUser


class RepoEvent(BaseModel):
    type: str | None = None
    created_at: str | None = None
    actor: GitHubUser


class Readme(BaseModel):
    name: str | None = None
    encoding: str | None = None
    content: str
