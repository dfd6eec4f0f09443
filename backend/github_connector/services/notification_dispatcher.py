"""Connector lifecycle notifications from Microsoft 365 apps.

When an admin enables the app's connector, Graph posts a notification with the
connector ID and a one-time ticket; the dispatcher creates a connection bound to
that connector and registers the issues schema. When the connector is disabled,
the matching connection is deleted.

Enable/disable is expressed only through whether a connection with the
connector ID exists, so both transitions are idempotent.
"""

from __future__ import annotations

import logging
from enum import Enum
from typing import Any, Protocol

from pydantic import ValidationError

from github_connector.auth.token_validator import TokenValidator
from github_connector.graph.connections import ConnectionRegistryClient
from github_connector.graph.schemas import ISSUES_SCHEMA
from github_connector.models.connection import ExternalConnection, ItemType
from github_connector.models.notification import (
    ChangeNotification,
    ChangeNotificationCollection,
    ConnectorResourceData,
    ResourceDataKind,
)

logger = logging.getLogger(__name__)

# Connection created on behalf of a Microsoft 365 app
APP_CONNECTION_ID = "GitHubIssuesM365"
APP_CONNECTION_NAME = "GitHub Issues for M365 App"
APP_CONNECTION_DESCRIPTION = "This connector was created by an M365 app"


class NotificationOutcome(str, Enum):
    """What the dispatcher did with one notification."""

    SKIPPED = "skipped"
    ALREADY_ENABLED = "already_enabled"
    CREATED = "created"
    DELETED = "deleted"
    ALREADY_DISABLED = "already_disabled"
    FAILED = "failed"


class ConnectionLookup(Protocol):
    """Finds the connection bound to a connector ID."""

    async def find_by_connector_id(self, connector_id: str) -> ExternalConnection | None: ...


class RegistryConnectionLookup:
    """Linear scan over a fresh connection list.

    Connection counts are expected to be in the tens, and nothing is cached
    between calls.
    """

    def __init__(self, registry: ConnectionRegistryClient) -> None:
        self._registry = registry

    async def find_by_connector_id(self, connector_id: str) -> ExternalConnection | None:
        for connection in await self._registry.list_connections():
            if connection.connector_id == connector_id:
                return connection
        return None


class NotificationDispatcher:
    """Validates notification batches and reconciles connector state."""

    def __init__(
        self,
        validator: TokenValidator,
        registry: ConnectionRegistryClient,
        lookup: ConnectionLookup | None = None,
    ) -> None:
        self._validator = validator
        self._registry = registry
        self._lookup = lookup or RegistryConnectionLookup(registry)

    async def dispatch(self, payload: Any) -> list[NotificationOutcome]:
        """Process a notification batch.

        The batch is ignored unless it has a notification list and at least
        one validation token, and every token is valid. Failures while
        handling one notification are logged and do not stop the others.

        Returns:
            One outcome per processed notification, in batch order. Empty when
            the batch was rejected.
        """
        collection = self._parse(payload)
        if collection is None:
            return []

        if not await self._validator.validate_all(collection.validation_tokens):
            logger.warning(
                f"Rejected notification batch of {len(collection.value)}: invalid validation token"
            )
            return []

        outcomes = []
        for notification in collection.value:
            outcomes.append(await self._process_notification(notification))
        return outcomes

    def _parse(self, payload: Any) -> ChangeNotificationCollection | None:
        if not isinstance(payload, dict):
            logger.info("Ignoring notification payload that is not a JSON object")
            return None

        try:
            collection = ChangeNotificationCollection.model_validate(payload)
        except ValidationError as e:
            logger.info(f"Ignoring malformed notification payload: {e.error_count()} error(s)")
            return None

        if not collection.validation_tokens:
            logger.info("Ignoring notification payload without validation tokens")
            return None
        return collection

    async def _process_notification(self, notification: ChangeNotification) -> NotificationOutcome:
        kind = notification.resource_kind

        if kind is ResourceDataKind.CONNECTOR:
            try:
                data = ConnectorResourceData.model_validate(notification.resource_data)
            except ValidationError:
                logger.warning("Skipping connector notification with incomplete resource data")
                return NotificationOutcome.SKIPPED
            return await self._reconcile_connector(data)

        # UNRECOGNIZED: newer payload types are skipped
        logger.debug("Skipping notification with unrecognized resource data")
        return NotificationOutcome.SKIPPED

    async def _reconcile_connector(self, data: ConnectorResourceData) -> NotificationOutcome:
        logger.info(f"Checking for existence of connection with connector ID: {data.id}")
        try:
            existing = await self._lookup.find_by_connector_id(data.id)
        except Exception:
            logger.exception(f"Error looking up connection for connector {data.id}")
            return NotificationOutcome.FAILED

        if data.is_enabled:
            logger.info("Received request to enable connector")
            if existing:
                logger.info(f"Connection {existing.id} already exists")
                return NotificationOutcome.ALREADY_ENABLED
            return await self._enable(data)

        logger.info("Received request to disable connector")
        if existing is None:
            return NotificationOutcome.ALREADY_DISABLED
        return await self._disable(existing)

    async def _enable(self, data: ConnectorResourceData) -> NotificationOutcome:
        try:
            await self._registry.create_connection(
                APP_CONNECTION_ID,
                APP_CONNECTION_NAME,
                ItemType.ISSUES,
                description=APP_CONNECTION_DESCRIPTION,
                connector_ticket=data.connectors_ticket,
                connector_id=data.id,
            )
            logger.info("Created connection successfully")
            logger.info("Registering schema, this may take some time...")

            await self._registry.register_schema(APP_CONNECTION_ID, ISSUES_SCHEMA)
            logger.info("Registered schema successfully")
        except Exception:
            logger.exception(f"Error creating connection for connector {data.id}")
            return NotificationOutcome.FAILED
        return NotificationOutcome.CREATED

    async def _disable(self, connection: ExternalConnection) -> NotificationOutcome:
        try:
            await self._registry.delete_connection(connection.id)
            logger.info(f"Connection {connection.id} deleted successfully")
        except Exception:
            logger.exception(f"Error deleting connection {connection.id}")
            return NotificationOutcome.FAILED
        return NotificationOutcome.DELETED
