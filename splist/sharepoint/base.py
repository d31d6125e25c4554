"""Shared request plumbing for the SharePoint endpoint clients.

Provides status-to-exception mapping and a base class that attaches the
request digest to writes. No retries happen here; retry policy belongs
to the caller.
"""

from typing import TYPE_CHECKING, Any

import httpx

from splist.core.logging import get_logger
from splist.sharepoint.context import ResourceLocation
from splist.sharepoint.exceptions import (
    SharePointAuthenticationError,
    SharePointBackendError,
    SharePointNotFoundError,
    SharePointTokenAbsentError,
)
from splist.sharepoint.transport import HttpVerb, Transport

if TYPE_CHECKING:
    from splist.sharepoint.token import SecurityTokenManager

logger = get_logger(__name__)


def error_message(response: httpx.Response) -> str:
    """Extract a readable message from a SharePoint error response.

    Handles the verbose (``error.message.value``) and minimal
    (``odata.error.message.value``) OData error shapes, falling back
    to the raw body.
    """
    try:
        data = response.json()
    except ValueError:
        data = None

    if isinstance(data, dict):
        error = data.get("error") or data.get("odata.error")
        if isinstance(error, dict):
            message = error.get("message")
            if isinstance(message, dict) and message.get("value"):
                return str(message["value"])
            if isinstance(message, str) and message:
                return message

    return (response.text or f"HTTP {response.status_code}")[:500]


def raise_for_response(response: httpx.Response, operation: str) -> None:
    """Raise the SharePoint exception matching a non-2xx response.

    Args:
        response: Response to check
        operation: Human-readable operation name for messages and logs

    Raises:
        SharePointAuthenticationError: On HTTP 401/403
        SharePointNotFoundError: On HTTP 404
        SharePointBackendError: On any other non-2xx status
    """
    status = response.status_code
    if 200 <= status < 300:
        return

    message = error_message(response)

    if status in (401, 403):
        logger.error(
            "sharepoint_authentication_error",
            operation=operation,
            status_code=status,
            message=message,
        )
        raise SharePointAuthenticationError(
            f"Unauthorized during '{operation}': {message}",
            status=status,
        )

    if status == 404:
        logger.warning(
            "sharepoint_not_found",
            operation=operation,
            status_code=status,
        )
        raise SharePointNotFoundError(f"Resource not found during '{operation}': {message}")

    logger.error(
        "sharepoint_backend_error",
        operation=operation,
        status_code=status,
        message=message,
    )
    raise SharePointBackendError(
        f"SharePoint error {status} during '{operation}': {message}",
        status=status,
    )


def response_json(response: httpx.Response, operation: str = "decode response") -> Any:
    """Decode a response body, treating an empty body as None.

    Raises:
        SharePointBackendError: If the body is not JSON, such as an HTML
            sign-in page served by a proxy
    """
    if not response.content:
        return None
    try:
        return response.json()
    except ValueError as e:
        content_type = response.headers.get("content-type", "")
        logger.error(
            "sharepoint_invalid_json",
            operation=operation,
            status_code=response.status_code,
            content_type=content_type,
        )
        raise SharePointBackendError(
            f"Response to '{operation}' is not JSON ({content_type or 'no content type'})",
            status=response.status_code,
        ) from e


class SharePointEndpoint:
    """Base class for clients bound to one web and one digest manager.

    Attributes:
        _transport: Transport used for all calls
        _location: Endpoint locations of the working web
        _tokens: Request digest manager shared across the instance's clients
    """

    def __init__(
        self,
        transport: Transport,
        location: ResourceLocation,
        tokens: "SecurityTokenManager",
    ) -> None:
        self._transport = transport
        self._location = location
        self._tokens = tokens

    @property
    def location(self) -> ResourceLocation:
        return self._location

    async def _send(
        self,
        verb: HttpVerb,
        url: str,
        operation: str,
        *,
        json: Any = None,
        content: bytes | None = None,
        headers: dict[str, str] | None = None,
        mutating: bool = False,
    ) -> httpx.Response:
        """Send a request and map failures to SharePoint exceptions.

        Args:
            verb: Logical HTTP verb
            url: Absolute request URL
            operation: Operation name for messages and logs
            json: JSON body
            content: Raw body
            headers: Extra headers
            mutating: Attach the request digest; fail fast without one

        Returns:
            The successful response

        Raises:
            SharePointTokenAbsentError: If ``mutating`` and no digest is cached
            SharePointNetworkError: If no response was received
            SharePointBackendError: (or a subclass) on non-2xx responses
        """
        request_headers = dict(headers or {})
        if mutating:
            digest_headers = self._tokens.headers()
            if not digest_headers:
                logger.warning("sharepoint_digest_absent", operation=operation)
                raise SharePointTokenAbsentError(operation)
            request_headers.update(digest_headers)

        response = await self._transport.request(
            verb,
            url,
            headers=request_headers or None,
            json=json,
            content=content,
        )
        raise_for_response(response, operation)

        logger.debug(
            "sharepoint_request_success",
            operation=operation,
            status_code=response.status_code,
        )
        return response
