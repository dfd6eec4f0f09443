"""Pydantic models for Graph change notifications.

Graph posts a ``changeNotificationCollection`` to the webhook when a
Microsoft 365 app enables or disables the connector. Only the parts the
dispatcher acts on are modeled; everything else is ignored.
"""

from enum import Enum
from typing import Any

from pydantic import ConfigDict, Field, field_validator

from github_connector.models.base import GraphModel

ENABLED_STATE = "enabled"


class ResourceDataKind(str, Enum):
    """Recognized ``resourceData`` payload types."""

    CONNECTOR = "#microsoft.graph.connector"
    UNRECOGNIZED = "unrecognized"

    @classmethod
    def from_odata_type(cls, odata_type: Any) -> "ResourceDataKind":
        """Classify a discriminator, ignoring case.

        Anything not listed (including a missing or non-string value) is
        UNRECOGNIZED so newer payload types are skipped rather than rejected.
        """
        if isinstance(odata_type, str):
            normalized = odata_type.lower()
            for kind in cls:
                if kind is not cls.UNRECOGNIZED and kind.value == normalized:
                    return kind
        return cls.UNRECOGNIZED


class ConnectorResourceData(GraphModel):
    """Resource data for a connector lifecycle notification."""

    odata_type: str = Field(..., alias="@odata.type")
    id: str = Field(..., min_length=1, description="Connector ID")
    # Missing, null or non-string states all mean "not enabled"
    state: Any = None
    connectors_ticket: str | None = None

    @property
    def is_enabled(self) -> bool:
        # Any state other than "enabled" is a disable request
        return self.state == ENABLED_STATE


class ChangeNotification(GraphModel):
    model_config = ConfigDict(extra="allow")

    # Kept untyped so an unexpected shape only affects this notification
    resource_data: Any = None

    @property
    def resource_kind(self) -> ResourceDataKind:
        if not isinstance(self.resource_data, dict):
            return ResourceDataKind.UNRECOGNIZED
        return ResourceDataKind.from_odata_type(self.resource_data.get("@odata.type"))


class ChangeNotificationCollection(GraphModel):
    value: list[ChangeNotification]
    validation_tokens: list[str] = Field(default_factory=list)

    @field_validator("value", mode="before")
    @classmethod
    def _non_object_entries_are_empty(cls, value: Any) -> Any:
        # A non-object entry becomes an empty notification, which is skipped
        if isinstance(value, list):
            return [entry if isinstance(entry, dict) else {} for entry in value]
        return value
