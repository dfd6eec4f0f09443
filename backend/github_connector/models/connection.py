"""Pydantic models for external connections and their operations."""

from enum import Enum
from typing import Any

from pydantic import Field

from github_connector.models.base import GraphModel

ITEM_ID_RESOLVER_TYPE = "#microsoft.graph.externalConnectors.itemIdResolver"

# Connection IDs must be 3-32 alphanumeric characters
CONNECTION_ID_PATTERN = r"^[0-9a-zA-Z]{3,32}$"


class ItemType(str, Enum):
    """Kind of GitHub content a connection holds."""

    ISSUES = "issues"
    REPOSITORIES = "repositories"


class OperationStatus(str, Enum):
    """Status of a long-running connection operation."""

    UNSPECIFIED = "unspecified"
    IN_PROGRESS = "inprogress"
    COMPLETED = "completed"
    FAILED = "failed"


class UrlMatchInfo(GraphModel):
    """URL pattern used to map a URL to an item ID."""

    base_urls: list[str]
    url_pattern: str


class ItemIdResolver(GraphModel):
    """Resolves a shared URL to an external item in the connection."""

    odata_type: str = Field(ITEM_ID_RESOLVER_TYPE, alias="@odata.type")
    priority: int = 1
    item_id: str
    url_match_info: UrlMatchInfo


class ActivitySettings(GraphModel):
    url_to_item_resolvers: list[ItemIdResolver] = Field(default_factory=list)


class DisplayTemplate(GraphModel):
    """Result template (adaptive card layout) for search results."""

    id: str
    priority: int = 1
    layout: dict[str, Any] | None = None


class SearchSettings(GraphModel):
    search_result_templates: list[DisplayTemplate] = Field(default_factory=list)


class ExternalConnection(GraphModel):
    """An external connection as returned by Graph."""

    id: str
    name: str | None = None
    description: str | None = None
    connector_id: str | None = None
    state: str | None = None
    activity_settings: ActivitySettings | None = None
    search_settings: SearchSettings | None = None


class ExternalConnectionCreate(GraphModel):
    """Request body for creating an external connection."""

    id: str = Field(..., pattern=CONNECTION_ID_PATTERN)
    name: str = Field(..., min_length=1)
    description: str | None = None
    connector_id: str | None = None
    activity_settings: ActivitySettings
    search_settings: SearchSettings


class OperationError(GraphModel):
    code: str | None = None
    message: str | None = None


class ConnectionOperation(GraphModel):
    """A long-running operation, e.g. schema provisioning."""

    id: str | None = None
    status: str
    error: OperationError | None = None

    @property
    def is_completed(self) -> bool:
        return self.status == OperationStatus.COMPLETED.value

    @property
    def is_failed(self) -> bool:
        return self.status == OperationStatus.FAILED.value
