"""Microsoft Graph external connectors API."""

from github_connector.graph.client import ClientCredentialsAuth, GraphClient
from github_connector.graph.connections import ConnectionRegistryClient, OperationPoller
from github_connector.graph.items import ItemBuilder, ItemPusher
from github_connector.graph.schemas import ISSUES_SCHEMA, REPOS_SCHEMA, schema_for

__all__ = [
    "ClientCredentialsAuth",
    "ConnectionRegistryClient",
    "GraphClient",
    "ISSUES_SCHEMA",
    "ItemBuilder",
    "ItemPusher",
    "OperationPoller",
    "REPOS_SCHEMA",
    "schema_for",
]
