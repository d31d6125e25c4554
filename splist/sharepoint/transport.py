"""HTTP transport used by the SharePoint clients.

The clients speak in terms of ``HttpVerb`` and never build method
override headers themselves. ``HttpxTransport`` maps the verbs onto
what SharePoint accepts: GET as GET, everything else as POST, with
``X-HTTP-Method`` carrying PUT/MERGE/DELETE.

Authentication is the host's concern: pass a preconfigured
``httpx.AsyncClient`` (cookies, bearer auth, NTLM) when needed.
"""

from enum import Enum
from typing import Any, Protocol

import httpx

from splist.config import Settings, get_settings
from splist.core.logging import get_logger
from splist.sharepoint.exceptions import SharePointNetworkError

logger = get_logger(__name__)

ODATA_VERBOSE = "application/json;odata=verbose"
DEFAULT_HEADERS = {
    "Accept": ODATA_VERBOSE,
    "Content-Type": ODATA_VERBOSE,
}
METHOD_OVERRIDE_HEADER = "X-HTTP-Method"


class HttpVerb(str, Enum):
    """Logical HTTP verbs understood by the SharePoint REST API."""

    GET = "GET"
    POST = "POST"
    PUT = "PUT"
    MERGE = "MERGE"
    DELETE = "DELETE"

    @property
    def is_override(self) -> bool:
        """True when the verb travels as POST plus ``X-HTTP-Method``."""
        return self in (HttpVerb.PUT, HttpVerb.MERGE, HttpVerb.DELETE)


class Transport(Protocol):
    """Asynchronous HTTP capability injected into the clients."""

    async def request(
        self,
        verb: HttpVerb,
        url: str,
        *,
        headers: dict[str, str] | None = None,
        json: Any = None,
        content: bytes | None = None,
    ) -> httpx.Response: ...

    async def close(self) -> None: ...


class HttpxTransport:
    """``Transport`` implementation on top of ``httpx.AsyncClient``.

    Attributes:
        _client: Underlying httpx client (created lazily unless injected)
        _owns_client: Whether ``close()`` should close the client
    """

    def __init__(
        self,
        client: httpx.AsyncClient | None = None,
        *,
        settings: Settings | None = None,
    ) -> None:
        """Initialize the transport.

        Args:
            client: Preconfigured httpx client; the transport will not
                close a client it did not create
            settings: Settings for timeout and TLS verification
        """
        self._settings = settings or get_settings()
        self._client = client
        self._owns_client = client is None

    def _get_client(self) -> httpx.AsyncClient:
        if self._client is None:
            self._client = httpx.AsyncClient(
                headers=DEFAULT_HEADERS,
                timeout=self._settings.http_timeout,
                verify=self._settings.verify_ssl,
            )
        return self._client

    async def request(
        self,
        verb: HttpVerb,
        url: str,
        *,
        headers: dict[str, str] | None = None,
        json: Any = None,
        content: bytes | None = None,
    ) -> httpx.Response:
        """Send one request, applying the verb override convention.

        Args:
            verb: Logical verb for the call
            url: Absolute request URL
            headers: Extra headers merged over the defaults
            json: JSON-serializable body
            content: Raw body (file uploads); takes precedence over ``json``

        Returns:
            httpx.Response with any status code

        Raises:
            SharePointNetworkError: If no response was received
        """
        merged = dict(DEFAULT_HEADERS)
        if headers:
            merged.update(headers)

        method = "GET" if verb is HttpVerb.GET else "POST"
        if verb.is_override:
            merged[METHOD_OVERRIDE_HEADER] = verb.value

        kwargs: dict[str, Any] = {"headers": merged}
        if content is not None:
            kwargs["content"] = content
        elif json is not None:
            kwargs["json"] = json

        logger.debug(
            "sharepoint_request",
            verb=verb.value,
            method=method,
            url=url,
        )

        try:
            return await self._get_client().request(method, url, **kwargs)
        except httpx.RequestError as e:
            logger.error(
                "sharepoint_network_error",
                verb=verb.value,
                url=url,
                error_type=type(e).__name__,
                error=str(e),
            )
            raise SharePointNetworkError(
                f"Network error during {verb.value} {url}: {e}",
                url=url,
            ) from e

    async def close(self) -> None:
        """Close the HTTP client if this transport created it."""
        if self._client is not None and self._owns_client:
            await self._client.aclose()
            self._client = None
            logger.debug("sharepoint_transport_closed")
