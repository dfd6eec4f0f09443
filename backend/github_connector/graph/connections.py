"""External connection management: create, list, delete, register schema.

Schema registration is asynchronous on the Graph side. The POST returns a
``Location`` header pointing at a connection operation, which is polled until
it completes or fails.
"""

import asyncio
import logging

from github_connector.errors import OperationFailedError, RemoteCallError
from github_connector.graph.client import GraphClient
from github_connector.graph.schemas import load_result_card
from github_connector.models.connection import (
    ActivitySettings,
    ConnectionOperation,
    DisplayTemplate,
    ExternalConnection,
    ExternalConnectionCreate,
    ItemIdResolver,
    ItemType,
    SearchSettings,
    UrlMatchInfo,
)
from github_connector.models.schema import Schema

logger = logging.getLogger(__name__)

CONNECTIONS_PATH = "/external/connections"
GITHUB_BASE_URL = "https://github.com"
CONNECTOR_TICKET_HEADER = "GraphConnectors-Ticket"

# Poll schema provisioning once a minute
DEFAULT_POLL_INTERVAL = 60.0
DEFAULT_FAILURE_MESSAGE = "Registering schema failed"


class OperationPoller:
    """Polls a connection operation until it reaches a terminal state.

    There is no timeout and no cap on attempts: an operation that never
    finishes is polled forever. Callers that need a bound should wrap
    ``wait`` in ``asyncio.wait_for``.
    """

    def __init__(self, graph: GraphClient, poll_interval: float = DEFAULT_POLL_INTERVAL) -> None:
        self._graph = graph
        self.poll_interval = poll_interval

    async def get_operation(self, connection_id: str, operation_id: str) -> ConnectionOperation:
        data = await self._graph.get(f"{CONNECTIONS_PATH}/{connection_id}/operations/{operation_id}")
        return ConnectionOperation.model_validate(data)

    async def wait(self, connection_id: str, operation_id: str) -> ConnectionOperation:
        """Wait for an operation to complete.

        Returns:
            The completed operation.

        Raises:
            OperationFailedError: If the operation ends in the failed state.
            RemoteCallError: If a status read fails. Reads are not retried.
        """
        while True:
            operation = await self.get_operation(connection_id, operation_id)

            if operation.is_completed:
                logger.info(f"Operation {operation_id} on {connection_id} completed")
                return operation

            if operation.is_failed:
                message = (
                    operation.error.message
                    if operation.error and operation.error.message
                    else DEFAULT_FAILURE_MESSAGE
                )
                raise OperationFailedError(message)

            logger.debug(
                f"Operation {operation_id} on {connection_id} is {operation.status}, "
                f"checking again in {self.poll_interval}s"
            )
            await asyncio.sleep(self.poll_interval)


def _operation_id_from_location(location: str | None) -> str | None:
    """The operation ID is the last path segment of the Location header."""
    if not location:
        return None
    segment = location.rstrip().split("?")[0].split("/")[-1]
    return segment or None


class ConnectionRegistryClient:
    """Client for the Graph external connections API."""

    def __init__(
        self,
        graph: GraphClient,
        github_owner: str,
        github_repo: str,
        poller: OperationPoller | None = None,
    ) -> None:
        self._graph = graph
        self._github_owner = github_owner
        self._github_repo = github_repo
        self.poller = poller or OperationPoller(graph)

    async def list_connections(self) -> list[ExternalConnection]:
        """List every existing connection, across all pages."""
        raw_connections = await self._graph.get_all(CONNECTIONS_PATH)
        return [ExternalConnection.model_validate(c) for c in raw_connections]

    def build_connection(
        self,
        connection_id: str,
        name: str,
        item_type: ItemType,
        description: str | None = None,
    ) -> ExternalConnectionCreate:
        """Build the create request for a connection holding ``item_type`` items.

        Raises:
            pydantic.ValidationError: If the ID is not 3-32 alphanumerics or the
                name is empty.
        """
        if item_type == ItemType.ISSUES:
            item_id = "{issueId}"
            url_pattern = (
                f"/{self._github_owner}/{self._github_repo}"
                "/issues/(?<issueId>[0-9]+)"
            )
            template_id = "issueDisplay"
        else:
            item_id = "{repo}"
            url_pattern = f"/{self._github_owner}/(?<repo>.*)/"
            template_id = "repoDisplay"

        resolver = ItemIdResolver(
            priority=1,
            item_id=item_id,
            url_match_info=UrlMatchInfo(base_urls=[GITHUB_BASE_URL], url_pattern=url_pattern),
        )

        return ExternalConnectionCreate(
            id=connection_id,
            name=name,
            description=description or None,
            activity_settings=ActivitySettings(url_to_item_resolvers=[resolver]),
            search_settings=SearchSettings(
                search_result_templates=[
                    DisplayTemplate(
                        id=template_id,
                        priority=1,
                        layout=load_result_card(item_type),
                    )
                ]
            ),
        )

    async def create_connection(
        self,
        connection_id: str,
        name: str,
        item_type: ItemType,
        description: str | None = None,
        connector_ticket: str | None = None,
        connector_id: str | None = None,
    ) -> ExternalConnection:
        """Create a new connection.

        Args:
            connection_id: Unique ID (3-32 alphanumeric characters)
            name: Display name
            item_type: Whether the connection holds issues or repositories
            description: Optional description
            connector_ticket: Ticket from a Microsoft 365 app enable notification
            connector_id: Connector ID from the same notification

        The ticket and connector ID are only sent when both are present;
        Graph rejects a create call that carries just one of them.
        """
        connection = self.build_connection(connection_id, name, item_type, description)

        headers: dict[str, str] | None = None
        if connector_ticket and connector_id:
            connection.connector_id = connector_id
            headers = {CONNECTOR_TICKET_HEADER: connector_ticket}

        response = await self._graph.post(CONNECTIONS_PATH, connection.to_graph(), headers=headers)
        logger.info(f"Created connection {connection_id}")

        if response.content:
            return ExternalConnection.model_validate(response.json())
        return ExternalConnection.model_validate(connection.to_graph())

    async def delete_connection(self, connection_id: str | None) -> None:
        """Delete a connection. Does nothing when no ID is given."""
        if not connection_id:
            return
        await self._graph.delete(f"{CONNECTIONS_PATH}/{connection_id}")
        logger.info(f"Deleted connection {connection_id}")

    async def get_operation(self, connection_id: str, operation_id: str) -> ConnectionOperation:
        return await self.poller.get_operation(connection_id, operation_id)

    async def register_schema(self, connection_id: str, schema: Schema) -> None:
        """Register a schema and wait for provisioning to finish.

        Raises:
            GraphError: If Graph rejects the schema.
            RemoteCallError: If the response carries no operation ID.
            OperationFailedError: If provisioning fails.
        """
        response = await self._graph.post(
            f"{CONNECTIONS_PATH}/{connection_id}/schema", schema.to_graph()
        )

        operation_id = _operation_id_from_location(response.headers.get("Location"))
        if not operation_id:
            raise RemoteCallError("Could not get operation ID from Location header")

        logger.info(f"Schema submitted for {connection_id}, waiting on operation {operation_id}")
        await self.poller.wait(connection_id, operation_id)
