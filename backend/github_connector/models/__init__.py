"""Pydantic models for the GitHub connector."""

from github_connector.models.connection import (
    ActivitySettings,
    ConnectionOperation,
    DisplayTemplate,
    ExternalConnection,
    ExternalConnectionCreate,
    ItemIdResolver,
    ItemType,
    OperationError,
    OperationStatus,
    SearchSettings,
    UrlMatchInfo,
)
from github_connector.models.github import (
    GitHubIssue,
    GitHubLabel,
    GitHubRepository,
    GitHubUser,
    IssueComment,
    IssueEvent,
    Readme,
    RepoEvent,
)
from github_connector.models.item import (
    Acl,
    ActivityType,
    ExternalActivity,
    ExternalItem,
    ExternalItemContent,
    Identity,
)
from github_connector.models.notification import (
    ChangeNotification,
    ChangeNotificationCollection,
    ConnectorResourceData,
    ResourceDataKind,
)
from github_connector.models.schema import Label, Property, PropertyType, Schema

__all__ = [
    # Connections
    "ActivitySettings",
    "ConnectionOperation",
    "DisplayTemplate",
    "ExternalConnection",
    "ExternalConnectionCreate",
    "ItemIdResolver",
    "ItemType",
    "OperationError",
    "OperationStatus",
    "SearchSettings",
    "UrlMatchInfo",
    # Schemas
    "Label",
    "Property",
    "PropertyType",
    "Schema",
    # Items
    "Acl",
    "ActivityType",
    "ExternalActivity",
    "ExternalItem",
    "ExternalItemContent",
    "Identity",
    # Notifications
    "ChangeNotification",
    "ChangeNotificationCollection",
    "ConnectorResourceData",
    "ResourceDataKind",
    # GitHub
    "GitHubIssue",
    "GitHubLabel",
    "GitHubRepository",
    "GitHubUser",
    "IssueComment",
    "IssueEvent",
    "Readme",
    "RepoEvent",
]
