"""Shared fixtures: settings, a recording fake upstream, and a dispatcher wired to it."""

import httpx
import pytest

from core.client import PolyPizzaClient
from core.config import Settings
from core.dispatcher import Dispatcher
from tools.registry import build_registry

TOKEN = "test-token"


class FakeUpstream:
    """httpx transport that records requests and replies from a queue of responses."""

    def __init__(self):
        self.requests: list[httpx.Request] = []
        self.responses: list[httpx.Response | Exception] = []

    def reply(self, status: int = 200, **kwargs) -> None:
        self.responses.append(httpx.Response(status, **kwargs))

    def fail(self, exc: Exception) -> None:
        self.responses.append(exc)

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        outcome = self.responses.pop(0) if self.responses else httpx.Response(200, json={})
        if isinstance(outcome, Exception):
            raise outcome
        return outcome

    @property
    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self.handler)

    @property
    def last_path(self) -> str:
        """Raw path and query of the last request, relative to the API base."""
        return self.requests[-1].url.raw_path.decode().removeprefix("/v1.1")


@pytest.fixture
def settings():
    return Settings(auth_token=TOKEN)


@pytest.fixture
def upstream():
    return FakeUpstream()


@pytest.fixture
async def client(settings, upstream):
    c = PolyPizzaClient(settings, transport=upstream.transport)
    yield c
    await c.aclose()


@pytest.fixture
def registry():
    return build_registry()


@pytest.fixture
def dispatcher(registry, client):
    return Dispatcher(registry, client)
