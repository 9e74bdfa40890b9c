"""
Shared pytest fixtures for SLAPI tests.

Provides an in-process SoftLayer API served through httpx.MockTransport so
request builders exercise their real HTTP code path.
"""

from typing import Any, Callable, Dict, List, Optional

import httpx
import pytest
import pytest_asyncio

from slapi.api_clients.request_client import SLAPIRequest
from slapi.config import ClientSettings

TEST_ENDPOINT = "https://api.softlayer.test/rest/v3.1/"

Handler = Callable[[httpx.Request], httpx.Response]


class FakeSoftLayerAPI:
    """Routes requests by ``<service>/<function>`` and records every request."""

    def __init__(self):
        self.requests: List[httpx.Request] = []
        self._routes: Dict[str, Handler] = {}

    @property
    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self.handle)

    def add_route(self, service: str, function: str, handler: Handler) -> None:
        self._routes[f"{service}/{function}"] = handler

    def add_json(
        self,
        service: str,
        function: str,
        payload: Any,
        status_code: int = 200,
        headers: Optional[Dict[str, str]] = None,
    ) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(status_code, json=payload, headers=headers)

        self.add_route(service, function, handler)

    def handle(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        segments = request.url.path.rstrip("/").split("/")
        route = "/".join(segments[-2:])
        handler = self._routes.get(route)
        if handler is None:
            return httpx.Response(
                404,
                json={
                    "error": f"Function ({route}) is not a valid method.",
                    "code": "SoftLayer_Exception_Public",
                },
            )
        return handler(request)


@pytest.fixture
def fake_api() -> FakeSoftLayerAPI:
    """Fresh fake API per test."""
    return FakeSoftLayerAPI()


@pytest.fixture
def settings() -> ClientSettings:
    """Settings pointing at the fake endpoint without page pacing."""
    return ClientSettings(
        endpoint=TEST_ENDPOINT,
        timeout=5,
        page_delay=0,
        username=None,
        password=None,
    )


@pytest_asyncio.fixture
async def request_builder(fake_api, settings):
    """Authenticated SLAPIRequest wired to the fake API."""
    builder = SLAPIRequest(
        username="testuser",
        password="testapikey",
        settings=settings,
        transport=fake_api.transport,
    )
    try:
        yield builder
    finally:
        await builder.close()
