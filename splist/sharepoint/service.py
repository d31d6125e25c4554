"""Composed SharePoint REST client for one working web.

``SharePointRestService`` is the single entry point. Each instance owns
its transport, its request digest and its endpoint clients; nothing is
shared between instances.

Usage::

    async with SharePointRestService("https://contoso.sharepoint.com/sites/team") as sp:
        await sp.tokens.refresh()
        items = await sp.lists.read("Tasks", QuerySpec(top=10))
        prefs = await sp.documents.get_value("JSON-Settings", default={})
"""

from splist.config import Settings, get_settings
from splist.core.logging import get_logger
from splist.sharepoint.client import ListClient
from splist.sharepoint.context import ResourceLocation, SiteContext
from splist.sharepoint.documents import JsonDocumentStore
from splist.sharepoint.files import FilesClient
from splist.sharepoint.identity import IdentityResolver
from splist.sharepoint.mail import MailClient
from splist.sharepoint.profiles import ProfileClient
from splist.sharepoint.schema import SchemaClient
from splist.sharepoint.token import SecurityTokenManager
from splist.sharepoint.transport import HttpxTransport, Transport

logger = get_logger(__name__)


class SharePointRestService:
    """SharePoint REST client exposing all endpoint clients.

    Args:
        web_url: Working web; falls back to ``SHAREPOINT_WEB_URL``
        transport: Injected transport; an ``HttpxTransport`` is built
            from settings when omitted
        settings: Settings override, mainly for tests
    """

    def __init__(
        self,
        web_url: str | None = None,
        *,
        transport: Transport | None = None,
        settings: Settings | None = None,
    ) -> None:
        self._settings = settings or get_settings()
        self._transport: Transport = transport or HttpxTransport(settings=self._settings)

        context = SiteContext.resolve(web_url, settings=self._settings)
        self._context = context
        self._tokens = SecurityTokenManager(
            self._transport,
            context.location,
            initial_token=context.request_digest,
        )
        self._documents: JsonDocumentStore | None = None
        self._build_clients(context.location)

        logger.info("sharepoint_service_initialized", web_url=context.web_url)

    def _build_clients(self, location: ResourceLocation) -> None:
        args = (self._transport, location, self._tokens)
        self._lists = ListClient(*args)
        self._identity = IdentityResolver(*args)
        self._files = FilesClient(*args)
        self._mail = MailClient(*args)
        self._profiles = ProfileClient(*args)
        self._schema = SchemaClient(*args)
        if self._documents is None:
            self._documents = JsonDocumentStore(self._lists, self._identity, self._tokens)
        else:
            self._documents.rebind(self._lists, self._identity)

    def set_base_url(self, web_url: str | None = None) -> None:
        """Re-resolve the working web and rebind every client to it.

        The cached digest belongs to the previous web and is replaced by
        the new context's digest (usually none). The document store is
        kept and rebound, so its write lock still orders ``set()`` calls.

        Args:
            web_url: New working web; None re-reads settings
        """
        context = SiteContext.resolve(web_url, settings=self._settings)
        self._context = context
        self._tokens.rebind(context.location, initial_token=context.request_digest)
        self._build_clients(context.location)
        logger.info("sharepoint_service_rebound", web_url=context.web_url)

    # ------------------------------------------------------------------
    # Accessors
    # ------------------------------------------------------------------

    @property
    def web_url(self) -> str:
        return self._context.web_url

    @property
    def location(self) -> ResourceLocation:
        return self._context.location

    @property
    def tokens(self) -> SecurityTokenManager:
        """Request digest manager."""
        return self._tokens

    @property
    def lists(self) -> ListClient:
        """List item CRUD."""
        return self._lists

    @property
    def identity(self) -> IdentityResolver:
        """Current user lookups."""
        return self._identity

    @property
    def documents(self) -> JsonDocumentStore:
        """Per-user JSON documents."""
        return self._documents

    @property
    def files(self) -> FilesClient:
        """Folders, files and attachments."""
        return self._files

    @property
    def mail(self) -> MailClient:
        return self._mail

    @property
    def profiles(self) -> ProfileClient:
        return self._profiles

    @property
    def schema(self) -> SchemaClient:
        return self._schema

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    async def close(self) -> None:
        """Close the transport and release resources."""
        await self._transport.close()
        logger.debug("sharepoint_service_closed")

    async def __aenter__(self) -> "SharePointRestService":
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.close()
