"""Pydantic models for external items and activities."""

from enum import Enum
from typing import Any

from pydantic import Field

from github_connector.models.base import GraphModel

EXTERNAL_ACTIVITY_TYPE = "#microsoft.graph.externalConnectors.externalActivity"


class ActivityType(str, Enum):
    CREATED = "created"
    MODIFIED = "modified"
    COMMENTED = "commented"


class Identity(GraphModel):
    type: str = "user"
    id: str


class ExternalActivity(GraphModel):
    """An activity on an external item.

    Graph answers 400 InvalidRequest when ``@odata.type`` is absent, so the
    default value is always serialized.
    """

    odata_type: str = Field(EXTERNAL_ACTIVITY_TYPE, alias="@odata.type")
    type: ActivityType
    start_date_time: str | None = None
    performed_by: Identity


class Acl(GraphModel):
    type: str = "everyone"
    value: str = "everyone"
    access_type: str = "grant"


class ExternalItemContent(GraphModel):
    type: str = "text"
    value: str


class ExternalItem(GraphModel):
    """An item pushed into an external connection."""

    id: str
    acl: list[Acl] = Field(default_factory=lambda: [Acl()])
    properties: dict[str, Any] = Field(default_factory=dict)
    content: ExternalItemContent | None = None
    activities: list[ExternalActivity] | None = None
