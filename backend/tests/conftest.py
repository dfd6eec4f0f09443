"""Pytest configuration and fixtures."""

import time
from collections.abc import AsyncGenerator, Callable
from dataclasses import dataclass
from typing import Any

import httpx
import jwt
import pytest
from cryptography.hazmat.primitives.asymmetric import rsa
from httpx import ASGITransport, AsyncClient

from github_connector.api.notifications import get_dispatcher
from github_connector.auth.token_validator import TokenValidator
from github_connector.errors import GraphError, RemoteCallError
from github_connector.graph.client import GraphClient
from github_connector.graph.connections import ConnectionRegistryClient, OperationPoller
from github_connector.main import app
from github_connector.models.connection import ExternalConnection

CLIENT_ID = "11111111-2222-3333-4444-555555555555"
TENANT_ID = "66666666-7777-8888-9999-000000000000"
GITHUB_OWNER = "octo-org"
GITHUB_REPO = "widgets"
GRAPH_BASE_URL = "https://graph.test/beta"


# =============================================================================
# Tokens
# =============================================================================


@pytest.fixture(scope="session")
def signing_key() -> rsa.RSAPrivateKey:
    return rsa.generate_private_key(public_exponent=65537, key_size=2048)


@pytest.fixture(scope="session")
def other_signing_key() -> rsa.RSAPrivateKey:
    """A key the key set does not publish."""
    return rsa.generate_private_key(public_exponent=65537, key_size=2048)


@dataclass
class FakeSigningKey:
    key: Any


class FakeJWKClient:
    """Stands in for ``PyJWKClient``: always serves the same public key."""

    def __init__(self, public_key: Any, fail: bool = False) -> None:
        self.public_key = public_key
        self.fail = fail
        self.calls = 0

    def get_signing_key_from_jwt(self, token: str) -> FakeSigningKey:
        self.calls += 1
        if self.fail:
            raise jwt.PyJWKClientError("Fail to fetch data from the url")
        return FakeSigningKey(self.public_key)


@pytest.fixture
def jwks_client(signing_key) -> FakeJWKClient:
    return FakeJWKClient(signing_key.public_key())


@pytest.fixture
def token_validator(jwks_client) -> TokenValidator:
    return TokenValidator(CLIENT_ID, TENANT_ID, jwks_client=jwks_client)


@pytest.fixture
def make_token(signing_key) -> Callable[..., str]:
    """Factory for signed notification tokens. Defaults produce a valid token."""

    def _make(
        audience: str = CLIENT_ID,
        issuer: str = f"https://login.microsoftonline.com/{TENANT_ID}/v2.0",
        key: Any = None,
        expires_in: int = 3600,
    ) -> str:
        now = int(time.time())
        claims = {
            "aud": audience,
            "iss": issuer,
            "iat": now,
            "nbf": now,
            "exp": now + expires_in,
            "azp": "0bf30f3b-4a52-48df-9a82-234910c4a086",
        }
        return jwt.encode(
            claims, key or signing_key, algorithm="RS256", headers={"kid": "test-key"}
        )

    return _make


# =============================================================================
# Graph
# =============================================================================


class GraphRecorder:
    """MockTransport handler that records requests and replays queued responses.

    Responses are matched by ``(method, path)``; each queued response is used
    once, the last one for a route is reused.
    """

    def __init__(self) -> None:
        self.requests: list[httpx.Request] = []
        self._routes: dict[tuple[str, str], list[httpx.Response]] = {}

    def add(self, method: str, path: str, response: httpx.Response) -> None:
        self._routes.setdefault((method, path), []).append(response)

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        queued = self._routes.get((request.method, request.url.path))
        if not queued:
            return httpx.Response(404, json={"error": {"code": "itemNotFound", "message": "Not found"}})
        return queued.pop(0) if len(queued) > 1 else queued[0]

    def calls(self, method: str | None = None) -> list[tuple[str, str]]:
        return [
            (r.method, r.url.path) for r in self.requests if method is None or r.method == method
        ]


@pytest.fixture
def graph_recorder() -> GraphRecorder:
    return GraphRecorder()


@pytest.fixture
async def graph(graph_recorder) -> AsyncGenerator[GraphClient, None]:
    async with GraphClient(
        base_url=GRAPH_BASE_URL, transport=httpx.MockTransport(graph_recorder)
    ) as client:
        yield client


@pytest.fixture
def registry(graph) -> ConnectionRegistryClient:
    return ConnectionRegistryClient(
        graph, GITHUB_OWNER, GITHUB_REPO, poller=OperationPoller(graph, poll_interval=0)
    )


class FakeRegistry:
    """In-memory connection registry that records every call."""

    def __init__(
        self,
        connections: list[ExternalConnection] | None = None,
        fail_list: bool = False,
        fail_create: bool = False,
    ) -> None:
        self.connections = list(connections or [])
        self.fail_list = fail_list
        self.fail_create = fail_create
        self.created: list[dict[str, Any]] = []
        self.schemas: list[tuple[str, Any]] = []
        self.deleted: list[str] = []

    async def list_connections(self) -> list[ExternalConnection]:
        if self.fail_list:
            raise RemoteCallError("GET /external/connections failed")
        return list(self.connections)

    async def create_connection(
        self,
        connection_id,
        name,
        item_type,
        description=None,
        connector_ticket=None,
        connector_id=None,
    ) -> ExternalConnection:
        if self.fail_create:
            raise GraphError("Connection already exists", status_code=409, code="Conflict")
        self.created.append(
            {
                "id": connection_id,
                "name": name,
                "item_type": item_type,
                "description": description,
                "connector_ticket": connector_ticket,
                "connector_id": connector_id,
            }
        )
        connection = ExternalConnection(
            id=connection_id, name=name, description=description, connector_id=connector_id
        )
        self.connections.append(connection)
        return connection

    async def register_schema(self, connection_id, schema) -> None:
        self.schemas.append((connection_id, schema))

    async def delete_connection(self, connection_id) -> None:
        if not connection_id:
            return
        self.deleted.append(connection_id)
        self.connections = [c for c in self.connections if c.id != connection_id]


@pytest.fixture
def fake_registry() -> FakeRegistry:
    return FakeRegistry()


# =============================================================================
# HTTP app
# =============================================================================


class RecordingDispatcher:
    def __init__(self) -> None:
        self.payloads: list[Any] = []

    async def dispatch(self, payload: Any) -> list:
        self.payloads.append(payload)
        return []


@pytest.fixture
def recording_dispatcher() -> RecordingDispatcher:
    return RecordingDispatcher()


@pytest.fixture
async def client(recording_dispatcher) -> AsyncGenerator[AsyncClient, None]:
    """Create an async test client with a recording dispatcher."""
    app.dependency_overrides[get_dispatcher] = lambda: recording_dispatcher
    async with AsyncClient(
        transport=ASGITransport(app=app),
        base_url="http://test",
    ) as client:
        yield client
    app.dependency_overrides.clear()
