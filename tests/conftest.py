"""Shared fixtures for MindsDB client tests."""

import json as json_module
from typing import Any, Callable, Dict, List, Optional, Tuple

import httpx
import pytest

from mindsdb_client.sql import QueryResult, ResultType, SqlExecutor
from mindsdb_client.transport import HttpTransport


LOCAL_HOST = "http://127.0.0.1:47334"


class RecordingExecutor(SqlExecutor):
    """SQL executor that records statements and returns queued results."""

    def __init__(self):
        self.statements: List[str] = []
        self.results: List[QueryResult] = []

    def queue(self, rows: Optional[List[Dict[str, Any]]] = None, error: Optional[str] = None) -> None:
        if error is not None:
            self.results.append(QueryResult(type=ResultType.ERROR, error_message=error))
        elif rows is None:
            self.results.append(QueryResult(type=ResultType.OK))
        else:
            columns = list(rows[0].keys()) if rows else []
            self.results.append(QueryResult(column_names=columns, rows=rows, type=ResultType.TABLE))

    @property
    def last_statement(self) -> str:
        return self.statements[-1]

    async def run_query(self, statement: str) -> QueryResult:
        self.statements.append(statement)
        if self.results:
            return self.results.pop(0)
        return QueryResult(type=ResultType.OK)


class FakeMindsDB:
    """In-memory MindsDB HTTP API for httpx.MockTransport.

    Tracks every request per path. Logins hand out ``token-1``, ``token-2``,
    ... and requests carrying an expired session get a 401.
    """

    def __init__(self, require_session: bool = False):
        self.require_session = require_session
        self.requests: List[httpx.Request] = []
        self.login_count = 0
        self.valid_session: Optional[str] = None
        self.login_status = 200
        self.query_payloads: List[Dict[str, Any]] = []
        self.status_overrides: List[int] = []
        self.projects: List[Dict[str, Any]] = []
        # Session carried by each non-login request, in arrival order.
        self.seen_sessions: List[Optional[str]] = []

    def calls(self, path: str) -> List[httpx.Request]:
        return [r for r in self.requests if r.url.path == path]

    def expire_session(self) -> None:
        self.valid_session = None

    def _session_of(self, request: httpx.Request) -> Optional[str]:
        cookie = request.headers.get("cookie", "")
        for pair in cookie.split(";"):
            key, _, value = pair.strip().partition("=")
            if key == "session":
                return value
        return None

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        path = request.url.path

        if path in ("/cloud/login", "/api/login"):
            self.login_count += 1
            if self.login_status != 200:
                return httpx.Response(self.login_status, json={"error": "bad credentials"})
            self.valid_session = f"token-{self.login_count}"
            return httpx.Response(
                200,
                headers=[
                    ("set-cookie", "other=1; Path=/"),
                    ("set-cookie", f"session={self.valid_session}; Domain=127.0.0.1; Path=/; HttpOnly"),
                ],
                json={},
            )

        self.seen_sessions.append(self._session_of(request))

        if self.status_overrides:
            return httpx.Response(self.status_overrides.pop(0), json={})

        if self.require_session and self._session_of(request) != self.valid_session:
            return httpx.Response(401, json={"error": "session expired"})

        if path == "/api/sql/query":
            if self.query_payloads:
                return httpx.Response(200, json=self.query_payloads.pop(0))
            return httpx.Response(200, json={"type": "ok", "column_names": [], "data": []})

        if path == "/api/projects":
            return httpx.Response(200, json=self.projects)

        return httpx.Response(404, json={})


class FakeRestApi:
    """Canned JSON answers keyed by method and path.

    Unknown routes get a 404. A route registered with ``json=None`` answers
    with an empty body.
    """

    def __init__(self):
        self.routes: Dict[Tuple[str, str], Tuple[int, Any]] = {}
        self.requests: List[httpx.Request] = []

    def route(self, method: str, path: str, json: Any = None, status: int = 200) -> None:
        self.routes[(method, path)] = (status, json)

    def body(self, index: int = -1) -> Any:
        return json_module.loads(self.requests[index].content)

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        status, payload = self.routes.get((request.method, request.url.path), (404, {}))
        if payload is None:
            return httpx.Response(status)
        return httpx.Response(status, json=payload)


@pytest.fixture
def rest_api() -> FakeRestApi:
    return FakeRestApi()


@pytest.fixture
def executor() -> RecordingExecutor:
    return RecordingExecutor()


@pytest.fixture
def fake_server() -> FakeMindsDB:
    return FakeMindsDB()


@pytest.fixture
def make_transport() -> Callable[..., HttpTransport]:
    """Build a transport whose HTTP client talks to a mock handler."""

    def _make(handler: Callable, base_url: str = LOCAL_HOST) -> HttpTransport:
        client = httpx.AsyncClient(transport=httpx.MockTransport(handler), base_url=base_url)
        return HttpTransport(client=client)

    return _make


@pytest.fixture
def make_status_error() -> Callable[..., httpx.HTTPStatusError]:
    """Build an HTTPStatusError as raised for a failed query request."""

    def _make(status: int, session: Optional[str] = None) -> httpx.HTTPStatusError:
        headers = {"Cookie": f"session={session}"} if session else {}
        request = httpx.Request("POST", f"{LOCAL_HOST}/api/sql/query", headers=headers)
        response = httpx.Response(status, request=request)
        return httpx.HTTPStatusError(f"HTTP {status}", request=request, response=response)

    return _make


@pytest.fixture
def clean_settings(monkeypatch):
    """Settings loaded from config.yaml only, restored after the test."""
    from mindsdb_client.config import settings

    for name in (
        "MINDSDB_HOST",
        "MINDSDB_USER",
        "MINDSDB_PASSWORD",
        "MINDSDB_MANAGED",
        "MINDSDB_HTTP_TIMEOUT",
        "MINDSDB_LOG_LEVEL",
    ):
        monkeypatch.delenv(name, raising=False)
    settings.reload()
    yield settings
    monkeypatch.undo()
    settings.reload()
