"""Shared fixtures for splist tests.

``FakeSharePoint`` is a small in-memory SharePoint web served through
``httpx.MockTransport``. It implements just enough of the REST surface
(context info, current user, list items) to exercise the clients over
real httpx requests.
"""

import asyncio
import itertools
import json
import re
from typing import Any
from unittest.mock import AsyncMock, MagicMock

import httpx
import pytest
import pytest_asyncio

from splist.config import Settings
from splist.sharepoint.context import ResourceLocation
from splist.sharepoint.token import SecurityTokenManager
from splist.sharepoint.transport import HttpxTransport

WEB_URL = "https://contoso.sharepoint.com/sites/team"

_ITEMS_PATH = re.compile(r"/_api/web/lists/GetByTitle\('([^']+)'\)/items(?:\((\d+)\))?$")
_TITLE_FILTER = re.compile(r"^Title eq '((?:[^']|'')*)'$")


class FakeSharePoint:
    """In-memory SharePoint web for MockTransport-based tests.

    Attributes:
        lists: Rows per list title
        login: LoginName returned by the current-user endpoint
        digest: Most recently issued request digest (None until issued)
        issued_digests: Every digest the web still honours
        requests: Every request received, in order
        read_barrier: Optional barrier awaited by list reads
    """

    def __init__(self, login: str = "CONTOSO\\Alice") -> None:
        self.lists: dict[str, list[dict[str, Any]]] = {}
        self.login: str | None = login
        self.digest: str | None = None
        self.issued_digests: set[str] = set()
        self.requests: list[httpx.Request] = []
        self.read_barrier: asyncio.Barrier | None = None
        self.read_delay: float = 0.0
        self.fail_context_info = False
        self._digests = itertools.count(1)
        self._ids = itertools.count(1)

    def add_row(self, list_name: str, **fields: Any) -> dict[str, Any]:
        row = {"Id": next(self._ids), **fields}
        self.lists.setdefault(list_name, []).append(row)
        return row

    def rows(self, list_name: str) -> list[dict[str, Any]]:
        return self.lists.get(list_name, [])

    async def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        path = request.url.path

        if path.endswith("/_api/contextinfo") and request.method == "POST":
            if self.fail_context_info:
                return httpx.Response(500, json={"error": {"message": {"value": "boom"}}})
            self.digest = f"digest-{next(self._digests)}"
            self.issued_digests.add(self.digest)
            return httpx.Response(
                200,
                json={"d": {"GetContextWebInformation": {"FormDigestValue": self.digest}}},
            )

        if path.endswith("/_api/web/currentuser"):
            if self.login is None:
                return httpx.Response(401, text="Unauthorized")
            return httpx.Response(200, json={"d": {"LoginName": self.login, "Id": 7}})

        match = _ITEMS_PATH.search(path)
        if match:
            list_name, item_id = match.group(1), match.group(2)
            if request.method == "GET":
                return await self._read(request, list_name, item_id)
            if request.headers.get("X-RequestDigest") not in self.issued_digests:
                return httpx.Response(
                    403,
                    json={"error": {"message": {"value": "The security validation for this page is invalid."}}},
                )
            verb = request.headers.get("X-HTTP-Method", "POST")
            if item_id is None and verb == "POST":
                return self._create(request, list_name)
            return self._write(request, list_name, int(item_id), verb)

        return httpx.Response(404, text=f"Unknown endpoint {path}")

    async def _read(self, request: httpx.Request, list_name: str, item_id: str | None) -> httpx.Response:
        rows = self.rows(list_name)
        if item_id is not None:
            for row in rows:
                if row["Id"] == int(item_id):
                    return httpx.Response(200, json={"d": row})
            return httpx.Response(
                404,
                json={"error": {"message": {"value": "Item does not exist."}}},
            )

        params = request.url.params
        selected = list(rows)
        title_filter = params.get("$filter")
        if title_filter:
            found = _TITLE_FILTER.match(title_filter)
            assert found, f"unsupported filter {title_filter!r}"
            title = found.group(1).replace("''", "'")
            selected = [r for r in selected if r.get("Title") == title]
        if params.get("$top"):
            selected = selected[: int(params["$top"])]

        if self.read_barrier is not None:
            await self.read_barrier.wait()
        if self.read_delay:
            await asyncio.sleep(self.read_delay)

        return httpx.Response(200, json={"d": {"results": [dict(r) for r in selected]}})

    def _create(self, request: httpx.Request, list_name: str) -> httpx.Response:
        body = json.loads(request.content)
        assert body.get("__metadata", {}).get("type") == "SP.ListItem"
        fields = {k: v for k, v in body.items() if k != "__metadata"}
        row = self.add_row(list_name, **fields)
        return httpx.Response(201, json={"d": dict(row)})

    def _write(self, request: httpx.Request, list_name: str, item_id: int, verb: str) -> httpx.Response:
        rows = self.rows(list_name)
        for row in rows:
            if row["Id"] == item_id:
                break
        else:
            return httpx.Response(404, json={"error": {"message": {"value": "Item does not exist."}}})

        if verb == "MERGE":
            body = json.loads(request.content)
            row.update({k: v for k, v in body.items() if k != "__metadata"})
            return httpx.Response(204)
        if verb == "DELETE":
            rows.remove(row)
            return httpx.Response(200)
        return httpx.Response(400, text=f"Unsupported verb {verb}")


@pytest.fixture
def settings() -> Settings:
    """Settings isolated from the process environment."""
    return Settings(
        _env_file=None,
        sharepoint_web_url=WEB_URL,
        sharepoint_request_digest="",
        environment="development",
    )


@pytest.fixture
def location() -> ResourceLocation:
    return ResourceLocation(WEB_URL)


@pytest.fixture
def fake_sharepoint() -> FakeSharePoint:
    return FakeSharePoint()


@pytest_asyncio.fixture
async def fake_transport(fake_sharepoint: FakeSharePoint, settings: Settings):
    """HttpxTransport wired to the in-memory SharePoint web."""
    client = httpx.AsyncClient(transport=httpx.MockTransport(fake_sharepoint.handler))
    transport = HttpxTransport(client, settings=settings)
    yield transport
    await client.aclose()


def make_response(
    status_code: int,
    json_data: Any = None,
    text: str | None = None,
    url: str = WEB_URL,
) -> httpx.Response:
    """Build a real httpx.Response bound to a request."""
    request = httpx.Request("GET", url)
    if json_data is not None:
        return httpx.Response(status_code, json=json_data, request=request)
    return httpx.Response(status_code, text=text or "", request=request)


@pytest.fixture
def mock_transport():
    """Transport double whose ``request`` returns queued responses."""
    transport = MagicMock()
    transport.request = AsyncMock()
    transport.close = AsyncMock()
    return transport


@pytest.fixture
def tokens(mock_transport, location) -> SecurityTokenManager:
    """Digest manager already holding a digest."""
    return SecurityTokenManager(mock_transport, location, initial_token="digest-0")


@pytest.fixture
def response_factory():
    """Factory building real httpx responses for mocked transports."""
    return make_response
