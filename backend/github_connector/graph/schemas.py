"""Static schemas and result cards for the two kinds of GitHub content."""

import json
from functools import lru_cache
from pathlib import Path
from typing import Any

from github_connector.models.connection import ItemType
from github_connector.models.schema import Label, Property, PropertyType, Schema

RESULT_CARDS_DIR = Path(__file__).parent / "result_cards"

ISSUES_SCHEMA = Schema(
    properties=[
        Property(
            name="title",
            type=PropertyType.STRING,
            is_queryable=True,
            is_searchable=True,
            is_retrievable=True,
            labels=[Label.TITLE],
        ),
        Property(name="body", type=PropertyType.STRING, is_searchable=True, is_retrievable=True),
        Property(
            name="assignees",
            type=PropertyType.STRING,
            is_queryable=True,
            is_searchable=True,
            is_retrievable=True,
        ),
        Property(
            name="labels",
            type=PropertyType.STRING,
            is_queryable=True,
            is_searchable=True,
            is_retrievable=True,
        ),
        Property(
            name="state",
            type=PropertyType.STRING,
            is_queryable=True,
            is_retrievable=True,
            is_refinable=True,
        ),
        Property(name="issueUrl", type=PropertyType.STRING, is_retrievable=True, labels=[Label.URL]),
        Property(name="icon", type=PropertyType.STRING, is_retrievable=True, labels=[Label.ICON_URL]),
        Property(
            name="updatedAt",
            type=PropertyType.DATE_TIME,
            is_queryable=True,
            is_retrievable=True,
            is_refinable=True,
            labels=[Label.LAST_MODIFIED_DATE_TIME],
        ),
        Property(
            name="lastModifiedBy",
            type=PropertyType.STRING,
            is_queryable=True,
            is_searchable=True,
            is_retrievable=True,
            labels=[Label.LAST_MODIFIED_BY],
        ),
    ]
)

REPOS_SCHEMA = Schema(
    properties=[
        Property(
            name="title",
            type=PropertyType.STRING,
            is_queryable=True,
            is_searchable=True,
            is_retrievable=True,
            labels=[Label.TITLE],
        ),
        Property(
            name="description",
            type=PropertyType.STRING,
            is_searchable=True,
            is_retrievable=True,
        ),
        Property(
            name="visibility",
            type=PropertyType.STRING,
            is_queryable=True,
            is_retrievable=True,
            is_refinable=True,
        ),
        Property(
            name="createdBy",
            type=PropertyType.STRING,
            is_queryable=True,
            is_searchable=True,
            is_retrievable=True,
            labels=[Label.CREATED_BY],
        ),
        Property(
            name="updatedAt",
            type=PropertyType.DATE_TIME,
            is_queryable=True,
            is_retrievable=True,
            is_refinable=True,
            labels=[Label.LAST_MODIFIED_DATE_TIME],
        ),
        Property(
            name="lastModifiedBy",
            type=PropertyType.STRING,
            is_queryable=True,
            is_searchable=True,
            is_retrievable=True,
            labels=[Label.LAST_MODIFIED_BY],
        ),
        Property(name="repoUrl", type=PropertyType.STRING, is_retrievable=True, labels=[Label.URL]),
        Property(name="userUrl", type=PropertyType.STRING, is_retrievable=True),
        Property(name="icon", type=PropertyType.STRING, is_retrievable=True, labels=[Label.ICON_URL]),
    ]
)

_SCHEMAS = {
    ItemType.ISSUES: ISSUES_SCHEMA,
    ItemType.REPOSITORIES: REPOS_SCHEMA,
}


def schema_for(item_type: ItemType) -> Schema:
    """Get the schema for an item type."""
    return _SCHEMAS[item_type]


@lru_cache(maxsize=None)
def load_result_card(item_type: ItemType) -> dict[str, Any]:
    """Load the adaptive card layout used to display search results."""
    card_path = RESULT_CARDS_DIR / f"{item_type.value}.json"
    return json.loads(card_path.read_text(encoding="utf-8"))
