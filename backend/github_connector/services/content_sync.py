"""Push GitHub issues and repositories into a connection."""

import base64
import binascii
import logging

from github_connector.github.repository_service import RepositoryService
from github_connector.graph.items import ItemBuilder, ItemPusher
from github_connector.markdown.plain_text import render_plain_text
from github_connector.models.github import GitHubIssue, GitHubRepository, IssueComment, IssueEvent, RepoEvent
from github_connector.models.item import ExternalItemContent

logger = logging.getLogger(__name__)


class ContentSync:
    """Reads from GitHub and writes external items to Graph.

    A failure on one issue or repository is logged and the rest are still
    pushed.
    """

    def __init__(
        self,
        repositories: RepositoryService,
        builder: ItemBuilder,
        pusher: ItemPusher,
    ) -> None:
        self._repositories = repositories
        self._builder = builder
        self._pusher = pusher

    async def push_all_issues(self, connection_id: str) -> int:
        """Push every open issue with its comments and events.

        Returns:
            Number of issues pushed successfully.
        """
        try:
            issues = await self._repositories.list_issues()
        except Exception:
            logger.exception("Error getting issues")
            return 0

        pushed = 0
        for issue in issues:
            logger.info(f"Adding/updating issue {issue.number}")
            if await self._push_issue(connection_id, issue):
                pushed += 1
        return pushed

    async def _push_issue(self, connection_id: str, issue: GitHubIssue) -> bool:
        events: list[IssueEvent] = []
        try:
            events = await self._repositories.list_events_for_issue(issue.number)
        except Exception:
            logger.exception(f"Error getting events for issue {issue.number}")

        comments: list[IssueComment] = []
        try:
            comments = await self._repositories.list_comments_for_issue(issue.number)
        except Exception:
            logger.exception(f"Error getting comments for issue {issue.number}")

        try:
            item = self._builder.issue_item(issue, events)
            item.content = ExternalItemContent(value=issue_content(issue, comments))
            await self._pusher.add_or_update_item(connection_id, item)

            activities = self._builder.issue_activities(events)
            await self._pusher.add_activities(connection_id, item.id, activities)
        except Exception:
            logger.exception(f"Error adding/updating issue {issue.number}")
            return False
        return True

    async def push_all_repositories(self, connection_id: str) -> int:
        """Push every repository of the owner.

        Public repositories are indexed by their README, others by their
        repository metadata as JSON.

        Returns:
            Number of repositories pushed successfully.
        """
        try:
            repos = await self._repositories.list_repositories()
        except Exception:
            logger.exception("Error getting repositories")
            return 0

        pushed = 0
        for repo in repos:
            logger.info(f"Adding/updating repository {repo.name}")
            if await self._push_repository(connection_id, repo):
                pushed += 1
        return pushed

    async def _push_repository(self, connection_id: str, repo: GitHubRepository) -> bool:
        events: list[RepoEvent] = []
        try:
            events = await self._repositories.list_events_for_repo(repo.name)
        except Exception:
            logger.exception(f"Error getting events for repository {repo.name}")

        try:
            item = self._builder.repository_item(repo, events)

            if repo.visibility == "public":
                readme = await self._repositories.get_readme(repo.name)
                if readme:
                    item.content = ExternalItemContent(
                        value=render_plain_text(decode_readme(readme.content))
                    )
            else:
                item.content = ExternalItemContent(value=repo.model_dump_json())

            await self._pusher.add_or_update_item(connection_id, item)
        except Exception:
            logger.exception(f"Error adding/updating repository {repo.name}")
            return False
        return True


def issue_content(issue: GitHubIssue, comments: list[IssueComment]) -> str:
    """Plain text of the issue body followed by each comment."""
    content = render_plain_text(issue.body)
    for comment in comments:
        content += f"\n{render_plain_text(comment.body)}"
    return content


def decode_readme(encoded: str) -> str:
    """Decode base64 README content from the contents API."""
    try:
        return base64.b64decode(encoded).decode("utf-8", errors="replace")
    except (binascii.Error, ValueError):
        logger.warning("README content is not valid base64")
        return ""
