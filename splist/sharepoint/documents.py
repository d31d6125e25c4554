"""Per-user JSON document store layered on a SharePoint list.

The target list needs two columns: ``Title`` (indexed, holds the
normalized login) and ``JSON`` (multi-line text, holds the serialized
value). One row per user, e.g. a ``JSON-Settings`` list of user
preferences.

Writes follow a fixed sequence:
    1. Refresh the request digest
    2. Resolve the current principal (once per call)
    3. Look up the principal's row by Title
    4. Update that row, or create one when none exists

Concurrent ``set()`` calls on one store instance are serialized with an
``asyncio.Lock``. Writers in other processes or store instances are
not coordinated: two of them that both see "no row" each create one.
"""

import asyncio
import json
from dataclasses import dataclass
from typing import Any

from splist.core.logging import generate_operation_id, get_logger, operation_id_ctx
from splist.sharepoint.client import ListClient
from splist.sharepoint.exceptions import SharePointDocumentError
from splist.sharepoint.identity import IdentityResolver
from splist.sharepoint.query import QuerySpec, encode_odata_literal
from splist.sharepoint.token import SecurityTokenManager

logger = get_logger(__name__)

TITLE_FIELD = "Title"
JSON_FIELD = "JSON"
ID_FIELD = "Id"


@dataclass(frozen=True)
class JsonDocument:
    """A user's stored document and the row holding it."""

    id: int | str
    title: str
    value: Any


class JsonDocumentStore:
    """Get/set an arbitrary JSON value keyed by the current user.

    Attributes:
        _lists: List item client
        _identity: Resolver for the current principal
        _tokens: Request digest manager refreshed before each write
        _write_lock: Serializes ``set()`` within this instance
    """

    def __init__(
        self,
        lists: ListClient,
        identity: IdentityResolver,
        tokens: SecurityTokenManager,
    ) -> None:
        self._lists = lists
        self._identity = identity
        self._tokens = tokens
        self._write_lock = asyncio.Lock()

    def rebind(self, lists: ListClient, identity: IdentityResolver) -> None:
        """Point the store at clients for another web.

        The write lock is kept, so later ``set()`` calls still queue
        behind one already in progress. That call finishes against the
        clients it started with.
        """
        self._lists = lists
        self._identity = identity

    async def get(self, list_name: str) -> JsonDocument | None:
        """Read the current user's document.

        Args:
            list_name: List holding the documents

        Returns:
            The document, or None when the user has no row

        Raises:
            SharePointUnauthenticatedError: If the user cannot be resolved
            SharePointDocumentError: If the stored JSON is malformed
            SharePointError: For other transport or backend failures
        """
        principal = await self._identity.resolve_current_principal()
        return await self._lookup(list_name, principal)

    async def get_value(self, list_name: str, default: Any = None) -> Any:
        """Read the current user's value, or ``default`` when absent."""
        document = await self.get(list_name)
        if document is None or document.value is None:
            return default
        return document.value

    async def set(self, list_name: str, value: Any) -> JsonDocument:
        """Store ``value`` as the current user's document (upsert).

        Args:
            list_name: List holding the documents
            value: JSON-serializable value

        Returns:
            The written document

        Raises:
            TypeError: If ``value`` is not JSON-serializable
            SharePointUnauthenticatedError: If the user cannot be resolved
            SharePointError: For digest refresh, transport or backend
                failures; nothing is retried
        """
        serialized = json.dumps(value)

        token = operation_id_ctx.set(generate_operation_id())
        try:
            async with self._write_lock:
                # Bound to the web that was current when the write started
                lists, identity = self._lists, self._identity
                await self._tokens.refresh()

                principal = await identity.resolve_current_principal()
                existing = await self._lookup(list_name, principal, lists)

                if existing is not None:
                    await lists.update(
                        list_name,
                        existing.id,
                        {JSON_FIELD: serialized},
                    )
                    logger.info(
                        "json_document_updated",
                        list_name=list_name,
                        principal=principal,
                        item_id=existing.id,
                    )
                    return JsonDocument(id=existing.id, title=principal, value=value)

                created = await lists.create(
                    list_name,
                    {TITLE_FIELD: principal, JSON_FIELD: serialized},
                )
                item_id = created.get(ID_FIELD, created.get("ID"))
                logger.info(
                    "json_document_created",
                    list_name=list_name,
                    principal=principal,
                    item_id=item_id,
                )
                return JsonDocument(id=item_id, title=principal, value=value)
        finally:
            operation_id_ctx.reset(token)

    async def _lookup(
        self,
        list_name: str,
        principal: str,
        lists: ListClient | None = None,
    ) -> JsonDocument | None:
        spec = QuerySpec(
            select=[JSON_FIELD, ID_FIELD, TITLE_FIELD],
            filter=f"{TITLE_FIELD} eq {encode_odata_literal(principal)}",
            top=1,
        )
        rows = await (lists or self._lists).read(list_name, spec)
        if not rows:
            logger.debug(
                "json_document_absent",
                list_name=list_name,
                principal=principal,
            )
            return None

        row = rows[0]
        item_id = row.get(ID_FIELD, row.get("ID"))
        return JsonDocument(
            id=item_id,
            title=row.get(TITLE_FIELD) or principal,
            value=_decode(row.get(JSON_FIELD), item_id),
        )


def _decode(raw: Any, item_id: int | str | None) -> Any:
    if raw is None or raw == "":
        return None
    try:
        return json.loads(raw)
    except (TypeError, ValueError) as e:
        logger.error(
            "json_document_decode_failed",
            item_id=item_id,
            error=str(e),
        )
        raise SharePointDocumentError(
            f"Stored JSON for item {item_id} is not valid: {e}",
            item_id=item_id,
        ) from e
