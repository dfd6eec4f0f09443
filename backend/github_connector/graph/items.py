"""Build external items from GitHub records and push them to a connection."""

import logging

from github_connector.graph.client import GraphClient
from github_connector.graph.connections import CONNECTIONS_PATH
from github_connector.models.github import (
    GitHubIssue,
    GitHubLabel,
    GitHubRepository,
    GitHubUser,
    IssueEvent,
    RepoEvent,
)
from github_connector.models.item import (
    ActivityType,
    ExternalActivity,
    ExternalItem,
    Identity,
)

logger = logging.getLogger(__name__)

GITHUB_ICON_URL = "https://pngimg.com/uploads/github/github_PNG40.png"


class ItemBuilder:
    """Converts GitHub records into Graph external items.

    Every GitHub login maps to the same placeholder user. A real mapping of
    GitHub logins to directory users would plug in at ``identity_for``.
    """

    def __init__(self, placeholder_user_id: str) -> None:
        self._placeholder_user_id = placeholder_user_id

    def identity_for(self, login: str | None) -> Identity:
        return Identity(type="user", id=self._placeholder_user_id)

    def issue_item(self, issue: GitHubIssue, events: list[IssueEvent]) -> ExternalItem:
        """Build an item from an issue.

        The last event's actor (when known) is reported as the last modifier.
        """
        author = issue.user.login if issue.user else None
        last_modified_by = author
        if events and events[-1].actor:
            last_modified_by = events[-1].actor.login

        return ExternalItem(
            id=str(issue.number),
            properties={
                "title": issue.title,
                "body": issue.body,
                "assignees": assignees_to_string(issue.assignees),
                "labels": labels_to_string(issue.labels),
                "state": issue.state,
                "issueUrl": issue.html_url,
                "lastModifiedBy": last_modified_by,
                "updatedAt": issue.updated_at,
                "icon": GITHUB_ICON_URL,
            },
            activities=[
                ExternalActivity(
                    type=ActivityType.CREATED,
                    start_date_time=issue.created_at,
                    performed_by=self.identity_for(author),
                )
            ],
        )

    def repository_item(self, repo: GitHubRepository, events: list[RepoEvent]) -> ExternalItem:
        last_modified_by = repo.owner.login
        if events:
            last_modified_by = events[-1].actor.login

        return ExternalItem(
            id=str(repo.id),
            properties={
                "title": repo.name,
                "description": repo.description,
                "visibility": repo.visibility or "unknown",
                "createdBy": repo.owner.login,
                "updatedAt": repo.updated_at,
                "lastModifiedBy": last_modified_by,
                "repoUrl": repo.html_url,
                "userUrl": repo.owner.html_url,
                "icon": GITHUB_ICON_URL,
            },
            activities=[
                ExternalActivity(
                    type=ActivityType.CREATED,
                    start_date_time=repo.created_at,
                    performed_by=self.identity_for(repo.owner.login),
                )
            ],
        )

    def issue_activities(self, events: list[IssueEvent]) -> list[ExternalActivity]:
        """Convert issue events to activities (comments vs. everything else)."""
        return [
            ExternalActivity(
                type=ActivityType.COMMENTED if event.event == "commented" else ActivityType.MODIFIED,
                start_date_time=event.created_at,
                performed_by=self.identity_for(event.actor.login if event.actor else None),
            )
            for event in events
        ]


def assignees_to_string(assignees: list[GitHubUser]) -> str:
    """Comma-delimited logins, or ``None`` when unassigned."""
    if not assignees:
        return "None"
    return ",".join(a.login for a in assignees)


def labels_to_string(labels: list[GitHubLabel | str]) -> str:
    """Comma-delimited label names, or ``None`` when unlabeled."""
    if not labels:
        return "None"
    return ",".join(label if isinstance(label, str) else (label.name or "") for label in labels)


class ItemPusher:
    """Writes items and activities into a connection."""

    def __init__(self, graph: GraphClient) -> None:
        self._graph = graph

    async def add_or_update_item(self, connection_id: str, item: ExternalItem) -> None:
        await self._graph.put(f"{CONNECTIONS_PATH}/{connection_id}/items/{item.id}", item.to_graph())

    async def add_activities(
        self, connection_id: str, item_id: str, activities: list[ExternalActivity]
    ) -> None:
        """Append activities to an existing item. No call is made for an empty list."""
        if not activities:
            return
        await self._graph.post(
            f"{CONNECTIONS_PATH}/{connection_id}/items/{item_id}/addActivities",
            {"activities": [a.to_graph() for a in activities]},
        )
        logger.debug(f"Added {len(activities)} activities to item {item_id}")
