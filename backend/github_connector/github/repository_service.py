"""Read-only access to GitHub issues and repositories.

Uses the PyGithub SDK. Its calls are blocking, so each read runs in the
default thread pool; paginated lists are fully drained there before returning.
"""

import asyncio
import logging
from collections.abc import Callable
from typing import Any, TypeVar

from github import Auth, Github, GithubException, UnknownObjectException
from pydantic import BaseModel

from github_connector.config import Settings
from github_connector.errors import ConfigurationError, RemoteCallError
from github_connector.models.github import (
    GitHubIssue,
    GitHubRepository,
    IssueComment,
    IssueEvent,
    Readme,
    RepoEvent,
)

logger = logging.getLogger(__name__)

ModelT = TypeVar("ModelT", bound=BaseModel)


def _to_models(model: type[ModelT], objects: Any) -> list[ModelT]:
    """Convert PyGithub objects (or a paginated list of them) to models."""
    return [model.model_validate(obj.raw_data) for obj in objects]


class RepositoryService:
    """Reads issues, comments, events and repositories for one owner."""

    def __init__(
        self,
        github_owner: str,
        github_repo: str,
        github_token: str | None = None,
        client: Github | None = None,
    ) -> None:
        if not github_owner or not github_repo or (client is None and not github_token):
            raise ConfigurationError("Invalid GitHub details: owner, repository and token are required")

        self._owner = github_owner
        self._repo = github_repo
        self._client = client or Github(auth=Auth.Token(github_token))

    @classmethod
    def from_settings(cls, settings: Settings) -> "RepositoryService":
        return cls(settings.github_owner, settings.github_repo, settings.github_token)

    @property
    def full_name(self) -> str:
        return f"{self._owner}/{self._repo}"

    async def _run(self, func: Callable[[], Any]) -> Any:
        loop = asyncio.get_running_loop()
        try:
            return await loop.run_in_executor(None, func)
        except GithubException as e:
            raise RemoteCallError(f"GitHub request failed ({e.status}): {e.data}") from e

    async def list_issues(self) -> list[GitHubIssue]:
        """List open issues for the configured repository."""

        def fetch() -> list[GitHubIssue]:
            repo = self._client.get_repo(self.full_name)
            return _to_models(GitHubIssue, repo.get_issues())

        return await self._run(fetch)

    async def list_events_for_issue(self, issue_number: int) -> list[IssueEvent]:
        def fetch() -> list[IssueEvent]:
            issue = self._client.get_repo(self.full_name).get_issue(issue_number)
            return _to_models(IssueEvent, issue.get_events())

        return await self._run(fetch)

    async def list_comments_for_issue(self, issue_number: int) -> list[IssueComment]:
        def fetch() -> list[IssueComment]:
            issue = self._client.get_repo(self.full_name).get_issue(issue_number)
            return _to_models(IssueComment, issue.get_comments())

        return await self._run(fetch)

    async def list_repositories(self) -> list[GitHubRepository]:
        """List repositories of the owner.

        The owner is tried as an organization first, then as a user.
        """

        def fetch() -> list[GitHubRepository]:
            try:
                repos = list(self._client.get_organization(self._owner).get_repos())
            except UnknownObjectException:
                logger.debug(f"{self._owner} is not an organization, listing user repositories")
                repos = list(self._client.get_user(self._owner).get_repos())
            return _to_models(GitHubRepository, repos)

        return await self._run(fetch)

    async def list_events_for_repo(self, repo_name: str) -> list[RepoEvent]:
        def fetch() -> list[RepoEvent]:
            repo = self._client.get_repo(f"{self._owner}/{repo_name}")
            return _to_models(RepoEvent, repo.get_events())

        return await self._run(fetch)

    async def get_readme(self, repo_name: str) -> Readme | None:
        """Get a repository's README, or None if it has none."""

        def fetch() -> Readme | None:
            repo = self._client.get_repo(f"{self._owner}/{repo_name}")
            try:
                readme = repo.get_readme()
            except UnknownObjectException:
                return None
            return Readme.model_validate(readme.raw_data)

        return await self._run(fetch)
