"""Request digest (form digest) management for SharePoint writes.

SharePoint rejects POST-based writes that lack a valid
``X-RequestDigest`` header. The digest is issued by the context-info
endpoint and expires with the server session, so writers refresh it
before use. Each manager owns exactly one cached digest.
"""

from typing import Any

from splist.core.logging import get_logger
from splist.sharepoint.base import raise_for_response, response_json
from splist.sharepoint.context import ResourceLocation
from splist.sharepoint.exceptions import SharePointBackendError
from splist.sharepoint.transport import HttpVerb, Transport

logger = get_logger(__name__)

REQUEST_DIGEST_HEADER = "X-RequestDigest"


class SecurityTokenManager:
    """Holds the current request digest for one client instance.

    Two states: unset (no digest) and valid (one digest). ``refresh()``
    replaces the digest wholesale on success and leaves it untouched on
    failure.

    Attributes:
        _token: Cached digest, or None while unset
    """

    def __init__(
        self,
        transport: Transport,
        location: ResourceLocation,
        initial_token: str | None = None,
    ) -> None:
        """Initialize the manager.

        Args:
            transport: Transport used for the context-info call
            location: Endpoint locations of the working web
            initial_token: Digest already known to the host, if any
        """
        self._transport = transport
        self._location = location
        self._token: str | None = initial_token or None

    def current_token(self) -> str | None:
        """Return the cached digest, or None if none has been issued."""
        return self._token

    @property
    def is_valid(self) -> bool:
        return self._token is not None

    def headers(self) -> dict[str, str]:
        """Headers carrying the cached digest (empty while unset)."""
        if self._token is None:
            return {}
        return {REQUEST_DIGEST_HEADER: self._token}

    def rebind(self, location: ResourceLocation, initial_token: str | None = None) -> None:
        """Point the manager at another web, dropping the old web's digest."""
        self._location = location
        self._token = initial_token or None

    def clear(self) -> None:
        """Forget the cached digest."""
        self._token = None

    async def refresh(self) -> str:
        """Fetch a new digest from the context-info endpoint.

        Returns:
            The newly issued digest

        Raises:
            SharePointNetworkError: If the request could not be sent
            SharePointBackendError: If SharePoint rejects the call or
                the response is not JSON or lacks a digest
        """
        url = self._location.context_info_url
        logger.debug("sharepoint_digest_refreshing", url=url)

        response = await self._transport.request(HttpVerb.POST, url)
        raise_for_response(response, "refresh request digest")

        token = _extract_digest(response_json(response, "refresh request digest"))
        if not token:
            logger.error(
                "sharepoint_digest_refresh_failed",
                reason="missing_form_digest",
                url=url,
            )
            raise SharePointBackendError(
                "Context info response did not contain FormDigestValue",
                status=response.status_code,
            )

        self._token = token
        logger.info("sharepoint_digest_refreshed", url=url)
        return token


def _extract_digest(data: Any) -> str | None:
    if not isinstance(data, dict):
        return None
    info = data
    if isinstance(data.get("d"), dict):
        info = data["d"].get("GetContextWebInformation")
    if not isinstance(info, dict):
        return None
    return info.get("FormDigestValue") or None
