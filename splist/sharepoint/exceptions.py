"""SharePoint-specific exception classes.

These exceptions map to the failure modes of SharePoint REST list
operations. Every failure is scoped to the call that raised it.
"""

from splist.core.exceptions import ExternalServiceError


class SharePointError(ExternalServiceError):
    """Base exception for SharePoint operations.

    All SharePoint-related errors inherit from this class
    to allow catching all SharePoint errors with a single except clause.
    """

    pass


class SharePointNetworkError(SharePointError):
    """Raised when the transport fails before any response arrives.

    Wraps connection errors, timeouts and other httpx.RequestError cases.
    """

    def __init__(self, message: str, url: str | None = None):
        super().__init__(message)
        self.url = url


class SharePointBackendError(SharePointError):
    """Raised when SharePoint answers with a non-2xx status.

    Carries the HTTP status and the message extracted from the
    OData error payload (or the raw body when none is present).
    """

    def __init__(self, message: str, status: int | None = None):
        super().__init__(message)
        self.status = status
        self.message = message


class SharePointNotFoundError(SharePointBackendError):
    """Raised when a requested list item, file or folder does not exist.

    This maps to HTTP 404 responses.
    """

    def __init__(self, message: str, status: int | None = 404):
        super().__init__(message, status=status)


class SharePointAuthenticationError(SharePointBackendError):
    """Raised when SharePoint rejects a call as unauthorized.

    This maps to HTTP 401 and 403 responses, including writes carrying
    an expired request digest.
    """

    pass


class SharePointTokenAbsentError(SharePointAuthenticationError):
    """Raised when a write is attempted with no cached request digest.

    No request is sent. Refreshing the token and retrying recovers.
    """

    def __init__(self, operation: str):
        super().__init__(
            f"No request digest cached for '{operation}'; refresh the token first",
            status=None,
        )
        self.operation = operation


class SharePointUnauthenticatedError(SharePointError):
    """Raised when the calling principal cannot be resolved.

    Occurs when the current-user call fails or its response lacks
    a login name.
    """

    pass


class SharePointDocumentError(SharePointError):
    """Raised when a stored JSON document cannot be decoded."""

    def __init__(self, message: str, item_id: int | str | None = None):
        super().__init__(message)
        self.item_id = item_id
