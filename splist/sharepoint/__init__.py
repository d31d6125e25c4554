"""SharePoint list REST integration.

Modules:
    - exceptions: SharePoint-specific exception classes
    - transport: HTTP verbs and the httpx-based transport
    - context: site context and endpoint URLs
    - query: OData query-string builder
    - payload: ``__metadata`` payload tagging
    - token: request digest management
    - client: list item CRUD
    - identity: current principal resolution
    - documents: per-user JSON document store
    - files, mail, profiles, schema: remaining REST endpoints
    - service: composed client for one web
"""

from splist.sharepoint.client import ListClient
from splist.sharepoint.context import ResourceLocation, SiteContext
from splist.sharepoint.documents import JsonDocument, JsonDocumentStore
from splist.sharepoint.exceptions import (
    SharePointAuthenticationError,
    SharePointBackendError,
    SharePointDocumentError,
    SharePointError,
    SharePointNetworkError,
    SharePointNotFoundError,
    SharePointTokenAbsentError,
    SharePointUnauthenticatedError,
)
from splist.sharepoint.identity import IdentityResolver, normalize_login
from splist.sharepoint.query import QuerySpec, build_query
from splist.sharepoint.service import SharePointRestService
from splist.sharepoint.token import SecurityTokenManager
from splist.sharepoint.transport import HttpVerb, HttpxTransport, Transport

__all__ = [
    # Exceptions
    "SharePointError",
    "SharePointNetworkError",
    "SharePointBackendError",
    "SharePointNotFoundError",
    "SharePointAuthenticationError",
    "SharePointTokenAbsentError",
    "SharePointUnauthenticatedError",
    "SharePointDocumentError",
    # Transport and context
    "HttpVerb",
    "Transport",
    "HttpxTransport",
    "ResourceLocation",
    "SiteContext",
    # Query
    "QuerySpec",
    "build_query",
    # Clients
    "SecurityTokenManager",
    "ListClient",
    "IdentityResolver",
    "normalize_login",
    "JsonDocument",
    "JsonDocumentStore",
    "SharePointRestService",
]
