"""Resolution of the calling principal's login name.

The login is used as the natural key of per-user rows, so it is
normalized: lower-cased with any ``DOMAIN\\`` prefix removed.
"""

from typing import Any

from splist.core.logging import get_logger
from splist.sharepoint.base import SharePointEndpoint, response_json
from splist.sharepoint.exceptions import (
    SharePointError,
    SharePointUnauthenticatedError,
)
from splist.sharepoint.payload import unwrap
from splist.sharepoint.query import QuerySpec, build_query
from splist.sharepoint.transport import HttpVerb

logger = get_logger(__name__)


def normalize_login(login: str) -> str:
    """Lower-case a login and strip everything through the first backslash.

    ``"DOMAIN\\Alice"`` becomes ``"alice"``; bare names pass through.
    """
    name = login.strip().lower()
    _, sep, rest = name.partition("\\")
    return rest if sep else name


class IdentityResolver(SharePointEndpoint):
    """Looks up the current user of the working web.

    Results are never cached; capture the value once when a sequence
    of calls needs a stable key.
    """

    async def get_current_user(self, expand_groups: bool = True) -> dict[str, Any]:
        """Return the raw current-user record.

        Args:
            expand_groups: Include the user's site groups

        Raises:
            SharePointError: For transport or backend failures
        """
        spec = QuerySpec(expand="Groups") if expand_groups else None
        url = build_query(self._location.current_user_url, spec)
        response = await self._send(HttpVerb.GET, url, "get current user")
        return unwrap(response_json(response, "get current user")) or {}

    async def resolve_current_principal(self) -> str:
        """Resolve the normalized login name of the calling user.

        Returns:
            Lower-cased login without domain prefix

        Raises:
            SharePointUnauthenticatedError: If the lookup fails or the
                response has no login name
        """
        try:
            user = await self.get_current_user(expand_groups=False)
        except SharePointError as e:
            logger.error(
                "sharepoint_principal_unresolved",
                reason="current_user_call_failed",
                error=str(e),
            )
            raise SharePointUnauthenticatedError(
                f"Could not resolve current user: {e}"
            ) from e

        login = user.get("LoginName") if isinstance(user, dict) else None
        if not isinstance(login, str) or not login.strip():
            logger.error(
                "sharepoint_principal_unresolved",
                reason="missing_login_name",
            )
            raise SharePointUnauthenticatedError(
                "Current user response did not contain LoginName"
            )

        principal = normalize_login(login)
        logger.debug("sharepoint_principal_resolved", principal=principal)
        return principal
