"""SharePoint list item CRUD over the REST API.

Wraps ``/_api/web/lists/GetByTitle('<list>')/items`` endpoints:
create, read (with OData clauses), read one, update and delete.
Updates and deletes overwrite unconditionally (``If-Match: *``), so the
last writer wins.
"""

from collections.abc import Mapping
from typing import Any

from splist.core.logging import get_logger
from splist.sharepoint.base import SharePointEndpoint, response_json
from splist.sharepoint.payload import EntityType, unwrap, unwrap_results, with_metadata
from splist.sharepoint.query import QuerySpec, build_query
from splist.sharepoint.transport import HttpVerb

logger = get_logger(__name__)

MATCH_ANY = {"If-Match": "*"}


class ListClient(SharePointEndpoint):
    """Client for list item operations against one web."""

    # ------------------------------------------------------------------
    # Create
    # ------------------------------------------------------------------

    async def create(self, list_name: str, body: Mapping[str, Any]) -> dict[str, Any]:
        """Add an item to a list.

        Args:
            list_name: List title
            body: Field values; tagged as ``SP.ListItem`` unless it
                already carries ``__metadata``

        Returns:
            The created item as returned by SharePoint

        Raises:
            SharePointTokenAbsentError: If no request digest is cached
            SharePointError: For transport or backend failures
        """
        payload = with_metadata(body, EntityType.LIST_ITEM)
        url = self._location.list_items_url(list_name)

        logger.info("sharepoint_item_create_start", list_name=list_name)

        response = await self._send(
            HttpVerb.POST,
            url,
            f"create item in {list_name}",
            json=payload,
            mutating=True,
        )

        item = unwrap(response_json(response)) or {}
        logger.info(
            "sharepoint_item_created",
            list_name=list_name,
            item_id=item.get("Id") if isinstance(item, dict) else None,
        )
        return item

    # ------------------------------------------------------------------
    # Read
    # ------------------------------------------------------------------

    async def read(
        self,
        list_name: str,
        spec: QuerySpec | None = None,
    ) -> list[dict[str, Any]]:
        """Read items from a list.

        Args:
            list_name: List title
            spec: Optional OData clauses

        Returns:
            Matching items, possibly empty

        Raises:
            SharePointError: For transport or backend failures
        """
        url = build_query(self._location.list_items_url(list_name), spec)

        operation = f"read items from {list_name}"
        response = await self._send(HttpVerb.GET, url, operation)

        rows = unwrap_results(response_json(response, operation))
        logger.debug(
            "sharepoint_items_read",
            list_name=list_name,
            count=len(rows),
        )
        return rows

    async def read_one(
        self,
        list_name: str,
        item_id: int | str,
        spec: QuerySpec | None = None,
    ) -> dict[str, Any]:
        """Read a single item by ID.

        Args:
            list_name: List title
            item_id: Item ID
            spec: Optional ``$select``/``$expand`` clauses

        Returns:
            The item

        Raises:
            SharePointNotFoundError: If no item has this ID
            SharePointError: For other transport or backend failures
        """
        url = build_query(self._location.item_url(list_name, item_id), spec)

        response = await self._send(
            HttpVerb.GET,
            url,
            f"read item {item_id} from {list_name}",
        )
        return unwrap(response_json(response)) or {}

    # ------------------------------------------------------------------
    # Update / delete
    # ------------------------------------------------------------------

    async def update(
        self,
        list_name: str,
        item_id: int | str,
        body: Mapping[str, Any],
    ) -> None:
        """Merge field values into an existing item.

        Args:
            list_name: List title
            item_id: Item ID
            body: Field values to overwrite

        Raises:
            SharePointTokenAbsentError: If no request digest is cached
            SharePointAuthenticationError: If the digest was rejected
            SharePointNotFoundError: If no item has this ID
            SharePointError: For other transport or backend failures
        """
        payload = with_metadata(body, EntityType.LIST_ITEM)
        url = self._location.item_url(list_name, item_id)

        logger.info(
            "sharepoint_item_update_start",
            list_name=list_name,
            item_id=item_id,
        )

        await self._send(
            HttpVerb.MERGE,
            url,
            f"update item {item_id} in {list_name}",
            json=payload,
            headers=MATCH_ANY,
            mutating=True,
        )

        logger.info("sharepoint_item_updated", list_name=list_name, item_id=item_id)

    async def delete(self, list_name: str, item_id: int | str) -> None:
        """Delete an item (moves it to the recycle bin).

        Args:
            list_name: List title
            item_id: Item ID

        Raises:
            SharePointTokenAbsentError: If no request digest is cached
            SharePointNotFoundError: If no item has this ID
            SharePointError: For other transport or backend failures
        """
        url = self._location.item_url(list_name, item_id)

        await self._send(
            HttpVerb.DELETE,
            url,
            f"delete item {item_id} from {list_name}",
            headers=MATCH_ANY,
            mutating=True,
        )

        logger.info("sharepoint_item_deleted", list_name=list_name, item_id=item_id)
