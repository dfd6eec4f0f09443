"""Services for connector lifecycle and content sync."""

from github_connector.services.content_sync import ContentSync
from github_connector.services.notification_dispatcher import (
    ConnectionLookup,
    NotificationDispatcher,
    NotificationOutcome,
    RegistryConnectionLookup,
)

__all__ = [
    "ConnectionLookup",
    "ContentSync",
    "NotificationDispatcher",
    "NotificationOutcome",
    "RegistryConnectionLookup",
]
