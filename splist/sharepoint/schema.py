"""List and field provisioning."""

from typing import Any

from splist.core.logging import get_logger
from splist.sharepoint.base import SharePointEndpoint, response_json
from splist.sharepoint.payload import EntityType, entity, unwrap
from splist.sharepoint.transport import HttpVerb

logger = get_logger(__name__)

# SharePoint list template for a generic custom list
GENERIC_LIST_TEMPLATE = 100


class SchemaClient(SharePointEndpoint):
    """Client for creating lists and list fields."""

    async def create_list(
        self,
        title: str,
        base_template: int = GENERIC_LIST_TEMPLATE,
        description: str = "",
    ) -> dict[str, Any]:
        """Create a list in the working web."""
        payload = entity(
            EntityType.LIST,
            BaseTemplate=base_template,
            Description=description,
            Title=title,
        )
        response = await self._send(
            HttpVerb.POST,
            self._location.lists_url,
            f"create list {title}",
            json=payload,
            mutating=True,
        )
        logger.info("sharepoint_list_created", title=title, base_template=base_template)
        return unwrap(response_json(response)) or {}

    async def create_field(
        self,
        list_name: str,
        field_name: str,
        field_type: int | str,
    ) -> dict[str, Any]:
        """Add a field to a list.

        Args:
            list_name: List title
            field_name: Field title
            field_type: SharePoint ``FieldTypeKind`` (e.g. 3 for multi-line text)
        """
        payload = entity(EntityType.FIELD, Title=field_name, FieldTypeKind=field_type)
        response = await self._send(
            HttpVerb.POST,
            f"{self._location.list_url(list_name)}/fields",
            f"create field {field_name} in {list_name}",
            json=payload,
            mutating=True,
        )
        logger.info(
            "sharepoint_field_created",
            list_name=list_name,
            field_name=field_name,
        )
        return unwrap(response_json(response)) or {}
