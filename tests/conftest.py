"""Shared test fixtures for the SalesBot test suite."""

import asyncio
import json
from collections.abc import Callable
from typing import Any

import httpx
import pytest
import pytest_asyncio

from salesbot.settings.gateway import GatewayConfig

GATEWAY_URL = "http://gateway.test"
BACKEND_URL = "http://backend.test"
API_KEY = "test-key"


class FakeService:
    """
    Scripted HTTP peer for httpx.MockTransport.

    Routes are keyed by (method, path). A route holds either a single
    response or a list consumed in order, the last entry repeating. Entries
    may be responses, exceptions to raise, or callables taking the request.
    """

    def __init__(self) -> None:
        self.routes: dict[tuple[str, str], list[Any]] = {}
        self.requests: list[httpx.Request] = []

    def on(self, method: str, path: str, *responses: Any) -> "FakeService":
        self.routes[(method.upper(), path)] = list(responses)
        return self

    def calls(self, method: str, path: str) -> list[httpx.Request]:
        return [r for r in self.requests if r.method == method.upper() and r.url.path == path]

    async def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        script = self.routes.get((request.method, request.url.path))
        if not script:
            return httpx.Response(404, json={"error": "no route"})
        entry = script.pop(0) if len(script) > 1 else script[0]
        if isinstance(entry, BaseException):
            raise entry
        if callable(entry):
            entry = entry(request)
            if asyncio.iscoroutine(entry):
                entry = await entry
        # Scripted responses may repeat; hand out a fresh copy each time
        return httpx.Response(entry.status_code, headers=entry.headers, content=entry.content)


def json_body(request: httpx.Request) -> Any:
    return json.loads(request.content)


async def wait_until(predicate: Callable[[], bool], timeout: float = 2.0) -> None:
    """Yield to the loop until the predicate holds."""

    async def _poll() -> None:
        while not predicate():
            await asyncio.sleep(0.005)

    await asyncio.wait_for(_poll(), timeout)


@pytest.fixture
def fake_service() -> FakeService:
    return FakeService()


@pytest_asyncio.fixture
async def http_client(fake_service: FakeService):
    async with httpx.AsyncClient(transport=httpx.MockTransport(fake_service)) as client:
        yield client


@pytest.fixture
def gateway_config() -> GatewayConfig:
    """Gateway settings without the settle and poll pauses."""
    return GatewayConfig(
        URL=GATEWAY_URL,
        API_KEY=API_KEY,
        SESSION_NAME="default_bot",
        SETTLE_DELAY=0,
        POLL_INTERVAL=0,
    )
