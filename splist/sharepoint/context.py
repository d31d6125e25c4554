"""Site context and REST endpoint locations.

``SiteContext`` stands in for the hosting page's context object: it
supplies the absolute web URL and, optionally, a request digest the
host already holds. ``ResourceLocation`` derives every endpoint URL
from that web URL and never changes once built; re-resolving the
context yields a new location.
"""

from dataclasses import dataclass

from splist.config import Settings, get_settings
from splist.core.exceptions import ConfigurationError
from splist.core.logging import get_logger

logger = get_logger(__name__)


@dataclass(frozen=True)
class ResourceLocation:
    """Endpoint URLs under one SharePoint web."""

    web_url: str

    @property
    def api_url(self) -> str:
        return f"{self.web_url}/_api"

    @property
    def context_info_url(self) -> str:
        return f"{self.api_url}/contextinfo"

    @property
    def current_user_url(self) -> str:
        return f"{self.api_url}/web/currentuser"

    @property
    def lists_url(self) -> str:
        return f"{self.api_url}/web/lists"

    def list_url(self, list_name: str) -> str:
        """URL of a list addressed by its title."""
        return f"{self.lists_url}/GetByTitle('{list_name}')"

    def list_items_url(self, list_name: str) -> str:
        """Collection URL for the items of ``list_name``."""
        return f"{self.list_url(list_name)}/items"

    def item_url(self, list_name: str, item_id: int | str) -> str:
        """URL of a single list item."""
        return f"{self.list_items_url(list_name)}({item_id})"


@dataclass(frozen=True)
class SiteContext:
    """Resolved working context for a client instance."""

    web_url: str
    request_digest: str | None = None

    @classmethod
    def resolve(
        cls,
        web_url: str | None = None,
        *,
        settings: Settings | None = None,
    ) -> "SiteContext":
        """Resolve the working web from an explicit URL or from settings.

        Args:
            web_url: Target web URL; falls back to ``SHAREPOINT_WEB_URL``
            settings: Settings override, mainly for tests

        Returns:
            SiteContext for the resolved web

        Raises:
            ConfigurationError: If no web URL is available
        """
        settings = settings or get_settings()
        resolved = (web_url or settings.sharepoint_web_url or "").strip().rstrip("/")

        if not resolved:
            logger.error("sharepoint_context_unresolved", reason="missing_web_url")
            raise ConfigurationError(
                "SharePoint web URL is required. Set SHAREPOINT_WEB_URL or pass web_url."
            )

        # A page-embedded digest only belongs to the page's own web
        digest = None
        if web_url is None or resolved == settings.sharepoint_web_url:
            digest = settings.sharepoint_request_digest or None

        logger.debug(
            "sharepoint_context_resolved",
            web_url=resolved,
            has_digest=digest is not None,
        )
        return cls(web_url=resolved, request_digest=digest)

    @property
    def location(self) -> ResourceLocation:
        return ResourceLocation(self.web_url)
