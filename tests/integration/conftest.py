"""Integration test configuration.

Provides an in-process stand-in for the Places Nearby Search and Place
Details endpoints,
served through httpx.MockTransport so the real GooglePlacesClient runs
end to end without network access.
"""

import asyncio
from typing import Any, Callable, Optional

import httpx
import pytest

from sweetspot.collectors.google_places import GooglePlacesClient


class FakePlacesServer:
    """Answers Places requests from scripted payloads.

    Nearby Search scripts are keyed by keyword, Place Details scripts by
    place id.

    A script is a JSON payload dict, an int HTTP status, or a callable
    taking the request and returning an httpx.Response. Unknown keywords
    get ZERO_RESULTS and unknown place ids get NOT_FOUND.
    """

    def __init__(self, scripts: Optional[dict[str, Any]] = None, delay: float = 0.0):
        self.scripts = scripts or {}
        self.delay = delay
        self.requests: list[httpx.Request] = []

    async def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if self.delay:
            await asyncio.sleep(self.delay)

        params = request.url.params
        if "place_id" in params:
            script = self.scripts.get(params["place_id"])
            if script is None:
                return httpx.Response(200, json={"status": "NOT_FOUND"})
        else:
            script = self.scripts.get(params.get("keyword"))
            if script is None:
                return httpx.Response(200, json={"status": "ZERO_RESULTS", "results": []})
        if isinstance(script, int):
            return httpx.Response(script)
        if callable(script):
            return script(request)
        return httpx.Response(200, json=script)

    @property
    def keywords(self) -> list[str]:
        return [
            request.url.params["keyword"]
            for request in self.requests
            if "keyword" in request.url.params
        ]


@pytest.fixture
def places_server() -> Callable[..., FakePlacesServer]:
    """Return a factory for FakePlacesServer instances."""

    def _make(scripts: Optional[dict[str, Any]] = None, **kwargs: Any) -> FakePlacesServer:
        return FakePlacesServer(scripts, **kwargs)

    return _make


@pytest.fixture
def google_client():
    """Return a factory wiring a GooglePlacesClient to a FakePlacesServer."""

    def _make(server: FakePlacesServer, **kwargs: Any) -> GooglePlacesClient:
        http_client = httpx.AsyncClient(transport=httpx.MockTransport(server.handler))
        kwargs.setdefault("timeout", 1.0)
        kwargs.setdefault("max_requests_per_second", 100)
        return GooglePlacesClient(api_key="integration-key", http_client=http_client, **kwargs)

    return _make
