"""Async Microsoft Graph client with client-credentials authentication."""

import logging
import time
from collections.abc import Generator
from typing import Any

import httpx

from github_connector.config import DEFAULT_GRAPH_BASE_URL, Settings
from github_connector.errors import GraphError, RemoteCallError

logger = logging.getLogger(__name__)

AUTHORITY_URL = "https://login.microsoftonline.com"
GRAPH_SCOPE = "https://graph.microsoft.com/.default"

# Refresh tokens this many seconds before they expire
TOKEN_EXPIRY_MARGIN = 60.0
DEFAULT_TIMEOUT = 30.0


class ClientCredentialsAuth(httpx.Auth):
    """httpx auth flow that acquires an app-only token for Graph.

    The token is cached on the instance and re-acquired shortly before it
    expires.
    """

    requires_response_body = True

    def __init__(
        self,
        tenant_id: str,
        client_id: str,
        client_secret: str,
        authority: str = AUTHORITY_URL,
        scope: str = GRAPH_SCOPE,
    ) -> None:
        self._token_url = f"{authority}/{tenant_id}/oauth2/v2.0/token"
        self._client_id = client_id
        self._client_secret = client_secret
        self._scope = scope
        self._access_token: str | None = None
        self._expires_at = 0.0

    def auth_flow(self, request: httpx.Request) -> Generator[httpx.Request, httpx.Response, None]:
        if self._access_token is None or time.monotonic() >= self._expires_at:
            token_response = yield self._build_token_request()
            self._update_token(token_response)

        request.headers["Authorization"] = f"Bearer {self._access_token}"
        yield request

    def _build_token_request(self) -> httpx.Request:
        return httpx.Request(
            "POST",
            self._token_url,
            data={
                "grant_type": "client_credentials",
                "client_id": self._client_id,
                "client_secret": self._client_secret,
                "scope": self._scope,
            },
        )

    def _update_token(self, response: httpx.Response) -> None:
        if response.status_code != 200:
            raise RemoteCallError(
                f"Token request failed with status {response.status_code}: {response.text[:500]}"
            )
        data = response.json()
        access_token = data.get("access_token") if isinstance(data, dict) else None
        if not access_token:
            raise RemoteCallError("Token response did not include an access token")
        self._access_token = access_token
        expires_in = float(data.get("expires_in", 3600))
        self._expires_at = time.monotonic() + max(expires_in - TOKEN_EXPIRY_MARGIN, 0.0)
        logger.debug(f"Acquired Graph token, expires in {expires_in:.0f}s")


def _graph_error(response: httpx.Response) -> GraphError:
    """Build a GraphError from an error response body."""
    code = None
    message = response.reason_phrase or "Graph request failed"
    try:
        error = response.json().get("error") or {}
        code = error.get("code")
        message = error.get("message") or message
    except (ValueError, AttributeError):
        pass
    return GraphError(message, status_code=response.status_code, code=code)


class GraphClient:
    """Thin wrapper around ``httpx.AsyncClient`` for Graph REST calls.

    Non-success responses raise ``GraphError``; transport failures raise
    ``RemoteCallError``.
    """

    def __init__(
        self,
        base_url: str = DEFAULT_GRAPH_BASE_URL,
        auth: httpx.Auth | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
        timeout: float = DEFAULT_TIMEOUT,
    ) -> None:
        self._client = httpx.AsyncClient(
            base_url=base_url,
            auth=auth,
            transport=transport,
            timeout=timeout,
        )

    @classmethod
    def from_settings(cls, settings: Settings) -> "GraphClient":
        auth = ClientCredentialsAuth(
            tenant_id=settings.tenant_id,
            client_id=settings.client_id,
            client_secret=settings.client_secret,
        )
        return cls(base_url=settings.graph_base_url, auth=auth)

    async def request(
        self,
        method: str,
        url: str,
        json: Any = None,
        headers: dict[str, str] | None = None,
    ) -> httpx.Response:
        """Send a request and return the successful response."""
        try:
            response = await self._client.request(method, url, json=json, headers=headers)
        except httpx.HTTPError as e:
            raise RemoteCallError(f"{method} {url} failed: {e}") from e

        if response.is_error:
            raise _graph_error(response)
        return response

    async def get(self, url: str) -> dict[str, Any]:
        response = await self.request("GET", url)
        return response.json()

    async def get_all(self, url: str) -> list[dict[str, Any]]:
        """GET a collection, following ``@odata.nextLink`` until exhausted."""
        results: list[dict[str, Any]] = []
        next_url: str | None = url
        while next_url:
            page = await self.get(next_url)
            results.extend(page.get("value", []))
            next_url = page.get("@odata.nextLink")
        return results

    async def post(
        self, url: str, body: Any, headers: dict[str, str] | None = None
    ) -> httpx.Response:
        return await self.request("POST", url, json=body, headers=headers)

    async def put(self, url: str, body: Any) -> httpx.Response:
        return await self.request("PUT", url, json=body)

    async def delete(self, url: str) -> None:
        await self.request("DELETE", url)

    async def aclose(self) -> None:
        await self._client.aclose()

    async def __aenter__(self) -> "GraphClient":
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.aclose()
