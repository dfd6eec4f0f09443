"""Pydantic models for connection schemas."""

from enum import Enum

from pydantic import Field

from github_connector.models.base import GraphModel


class PropertyType(str, Enum):
    STRING = "string"
    INT64 = "int64"
    DOUBLE = "double"
    DATE_TIME = "dateTime"
    BOOLEAN = "boolean"
    STRING_COLLECTION = "stringCollection"


class Label(str, Enum):
    """Semantic labels Microsoft Search understands."""

    TITLE = "title"
    URL = "url"
    CREATED_BY = "createdBy"
    LAST_MODIFIED_BY = "lastModifiedBy"
    AUTHORS = "authors"
    CREATED_DATE_TIME = "createdDateTime"
    LAST_MODIFIED_DATE_TIME = "lastModifiedDateTime"
    ICON_URL = "iconUrl"
    CONTAINER_NAME = "containerName"
    CONTAINER_URL = "containerUrl"


class Property(GraphModel):
    """A single schema property.

    Graph rejects properties that are both searchable and refinable.
    """

    name: str
    type: PropertyType
    is_searchable: bool | None = None
    is_queryable: bool | None = None
    is_retrievable: bool | None = None
    is_refinable: bool | None = None
    is_exact_match_required: bool | None = None
    labels: list[Label] | None = None
    aliases: list[str] | None = None


class Schema(GraphModel):
    base_type: str = "microsoft.graph.externalItem"
    properties: list[Property] = Field(default_factory=list)

    def property_names(self) -> list[str]:
        return [p.name for p in self.properties]
