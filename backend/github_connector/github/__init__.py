"""GitHub data source."""

from github_connector.github.repository_service import RepositoryService

__all__ = ["RepositoryService"]
