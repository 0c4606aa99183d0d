import asyncio
from typing import Any, Dict, List, Tuple

import httpx
import pytest
import pytest_asyncio
from managed_http.client import RequestClient
from managed_http.core.transport import HttpxTransport

BASE_URL = "https://api.test"


class FakeBackend:
    """An httpx MockTransport handler whose responses can be held open per path."""

    def __init__(self) -> None:
        self.requests: List[httpx.Request] = []
        self.responses: Dict[str, Tuple[int, Any]] = {}
        self._gates: Dict[str, asyncio.Event] = {}

    def hold(self, path: str) -> asyncio.Event:
        """Keep requests to ``path`` in flight until the returned event is set."""
        gate = asyncio.Event()
        self._gates[path] = gate
        return gate

    def respond(self, path: str, status_code: int, payload: Any) -> None:
        self.responses[path] = (status_code, payload)

    def arrived(self, path: str) -> int:
        return sum(1 for request in self.requests if request.url.path == path)

    async def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        path = request.url.path
        gate = self._gates.get(path)
        if gate is not None:
            await gate.wait()
        status_code, payload = self.responses.get(path, (200, {"path": path}))
        return httpx.Response(status_code, json=payload)


async def _wait_for(predicate, attempts: int = 200) -> None:
    for _ in range(attempts):
        if predicate():
            return
        await asyncio.sleep(0)
    pytest.fail("Condition was not reached while waiting on the event loop")


@pytest.fixture(autouse=True)
def clean_environment(monkeypatch):
    """AUTOUSE: Isolate tests from request-layer variables set in the shell or a .env file."""
    for name in ("MANAGED_HTTP_BASE_URL", "MANAGED_HTTP_TIMEOUT_SECONDS", "LOG_LEVEL"):
        monkeypatch.delenv(name, raising=False)


@pytest.fixture
def wait_for():
    """Provides a coroutine that yields to the event loop until a predicate holds."""
    return _wait_for


@pytest.fixture
def backend() -> FakeBackend:
    return FakeBackend()


@pytest_asyncio.fixture
async def http_client(backend: FakeBackend):
    client = httpx.AsyncClient(transport=httpx.MockTransport(backend.handler), base_url=BASE_URL)
    yield client
    await client.aclose()


@pytest.fixture
def transport(http_client: httpx.AsyncClient) -> HttpxTransport:
    return HttpxTransport(client=http_client)


@pytest.fixture
def request_client(transport: HttpxTransport) -> RequestClient:
    return RequestClient(transport=transport)
