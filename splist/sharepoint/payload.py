"""Request payload construction for SharePoint verbose OData writes.

SharePoint expects every entity written over the verbose OData
protocol to carry a ``__metadata.type`` discriminator. The helpers here
build new payload dictionaries and never mutate the caller's input.
"""

from collections.abc import Mapping
from enum import Enum
from typing import Any

METADATA_KEY = "__metadata"


class EntityType(str, Enum):
    """SharePoint entity type names used as payload discriminators."""

    LIST_ITEM = "SP.ListItem"
    LIST = "SP.List"
    FIELD = "SP.Field"
    FOLDER = "SP.Folder"
    EMAIL_PROPERTIES = "SP.Utilities.EmailProperties"


def with_metadata(
    body: Mapping[str, Any],
    entity_type: EntityType | str = EntityType.LIST_ITEM,
) -> dict[str, Any]:
    """Return a copy of ``body`` tagged with ``__metadata`` if it has none.

    An existing discriminator is kept as-is.

    Args:
        body: Field values to write
        entity_type: Discriminator used when ``body`` carries none

    Returns:
        New payload dictionary
    """
    payload = dict(body)
    if METADATA_KEY not in payload:
        type_name = (
            entity_type.value if isinstance(entity_type, EntityType) else entity_type
        )
        payload[METADATA_KEY] = {"type": type_name}
    return payload


def entity(entity_type: EntityType | str, **fields: Any) -> dict[str, Any]:
    """Build a tagged payload from keyword fields."""
    return with_metadata(fields, entity_type)


def unwrap(data: Any) -> Any:
    """Strip the verbose OData ``d`` envelope from a response body."""
    if isinstance(data, dict) and "d" in data:
        return data["d"]
    return data


def unwrap_results(data: Any) -> list[dict[str, Any]]:
    """Extract the row collection from a verbose or minimal OData response.

    Verbose responses use ``{"d": {"results": [...]}}`` and minimal
    metadata responses use ``{"value": [...]}``. Anything else yields
    an empty list.
    """
    body = unwrap(data)
    if isinstance(body, dict):
        rows = body.get("results", body.get("value"))
    else:
        rows = body
    if not isinstance(rows, list):
        return []
    return rows
