"""Shared configuration for Microsoft Graph payload models."""

from typing import Any

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class GraphModel(BaseModel):
    """Base model for Graph resources.

    Python attributes are snake_case; the wire format is camelCase.
    """

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="ignore",
    )

    def to_graph(self) -> dict[str, Any]:
        """Serialize to a Graph request body."""
        return self.model_dump(by_alias=True, exclude_none=True, mode="json")
