"""Functional test bootstrap.

Each test gets a fresh in-memory SQLite database: the cached engine is
disposed and `create_app()` re-applies the migrations. Client controllers
talk to the reference backend through a FastAPI `TestClient`, which is an
`httpx.Client`, injected into `BackendClient`.
"""

from __future__ import annotations

import os
from typing import Callable, Iterator, List

import httpx
import pytest

# Point the app at in-memory SQLite before anything imports eforms.db
os.environ["DATABASE_URL"] = "sqlite+pysqlite:///:memory:"
os.environ["AUTO_APPLY_MIGRATIONS"] = "1"
# Cheapest bcrypt cost keeps account fixtures fast
os.environ.setdefault("EFORMS_BCRYPT_ROUNDS", "4")

from fastapi.testclient import TestClient  # noqa: E402

from eforms.client.api import BackendClient  # noqa: E402
from eforms.db.base import reset_engine  # noqa: E402
from eforms.logic.navigation import HistoryNavigator  # noqa: E402
from eforms.logic.notifications import LoggingNotifier  # noqa: E402
from eforms.main import create_app  # noqa: E402

OWNER_EMAIL = "owner@bfar.example"
OWNER_PASSWORD = "s3cret-pass"


@pytest.fixture()
def app():
    reset_engine()
    application = create_app()
    yield application
    reset_engine()


@pytest.fixture()
def http(app) -> Iterator[TestClient]:
    with TestClient(app) as client:
        yield client


@pytest.fixture()
def anon_client(http) -> BackendClient:
    return BackendClient(http=http)


@pytest.fixture()
def owner_client(http) -> BackendClient:
    client = BackendClient(http=http)
    client.register("Juan", "", "Dela Cruz", OWNER_EMAIL, OWNER_PASSWORD)
    client.login(OWNER_EMAIL, OWNER_PASSWORD)
    return client


@pytest.fixture()
def notifier() -> LoggingNotifier:
    return LoggingNotifier()


@pytest.fixture()
def navigator() -> HistoryNavigator:
    return HistoryNavigator()


class RecordingBackend:
    """httpx.MockTransport handler that records requests and replays canned replies."""

    def __init__(self) -> None:
        self.requests: List[httpx.Request] = []
        self.routes: dict[tuple[str, str], Callable[[httpx.Request], httpx.Response]] = {}

    def on(self, method: str, path: str, status: int = 200, json=None, exc: Exception | None = None) -> None:
        def reply(request: httpx.Request) -> httpx.Response:
            if exc is not None:
                raise exc
            return httpx.Response(status, json=json)

        self.routes[(method.upper(), path)] = reply

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        handler = self.routes.get((request.method, request.url.path))
        if handler is None:
            return httpx.Response(404, json={"title": "Not Found", "status": 404, "detail": "no route"})
        return handler(request)

    def calls(self, method: str, path: str) -> List[httpx.Request]:
        return [r for r in self.requests if r.method == method and r.url.path == path]


@pytest.fixture()
def backend() -> RecordingBackend:
    return RecordingBackend()


@pytest.fixture()
def mock_client(backend) -> Iterator[BackendClient]:
    http_client = httpx.Client(transport=httpx.MockTransport(backend), base_url="http://backend.test")
    yield BackendClient(http=http_client)
    http_client.close()
