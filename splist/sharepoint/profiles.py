"""User profile and site user lookups."""

from typing import Any

from splist.core.logging import get_logger
from splist.sharepoint.base import SharePointEndpoint, response_json
from splist.sharepoint.payload import unwrap
from splist.sharepoint.query import encode_odata_literal
from splist.sharepoint.transport import HttpVerb

logger = get_logger(__name__)

PEOPLE_MANAGER = "SP.UserProfiles.PeopleManager"


class ProfileClient(SharePointEndpoint):
    """Client for PeopleManager profiles and site users."""

    async def get_my_profile(self) -> dict[str, Any]:
        """Return the calling user's profile properties."""
        url = f"{self._location.api_url}/{PEOPLE_MANAGER}/GetMyProperties?$select=*"
        response = await self._send(HttpVerb.GET, url, "get my profile")
        return unwrap(response_json(response)) or {}

    async def get_profile(self, login: str) -> dict[str, Any]:
        """Return the profile properties of any account.

        Args:
            login: Account name, e.g. ``i:0#.f|membership|alice@contoso.com``
        """
        url = (
            f"{self._location.api_url}/{PEOPLE_MANAGER}"
            f"/GetPropertiesFor(accountName=@v)?@v={encode_odata_literal(login)}&$select=*"
        )
        response = await self._send(HttpVerb.GET, url, f"get profile for {login}")
        return unwrap(response_json(response)) or {}

    async def get_user_info(self, user_id: int | str) -> dict[str, Any]:
        """Return the site user with the given ID."""
        url = f"{self._location.api_url}/web/getUserById({user_id})"
        response = await self._send(HttpVerb.GET, url, f"get user {user_id}")
        return unwrap(response_json(response)) or {}

    async def ensure_user(self, login: str) -> dict[str, Any]:
        """Make sure ``login`` exists as a user of the web and return it."""
        url = f"{self._location.api_url}/web/ensureuser"
        response = await self._send(
            HttpVerb.POST,
            url,
            f"ensure user {login}",
            json={"logonName": login},
            mutating=True,
        )
        user = unwrap(response_json(response)) or {}
        logger.info("sharepoint_user_ensured", user_id=user.get("Id"))
        return user
