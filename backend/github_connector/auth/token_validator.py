"""Validation of the signed tokens Graph attaches to change notifications.

Each token is a JWT signed by the Microsoft identity platform. The signing key
is looked up by the token's ``kid`` in the platform's published key set; PyJWT's
``PyJWKClient`` caches keys between calls.
"""

import asyncio
import logging
from typing import Any

import jwt
from jwt import PyJWKClient

from github_connector.config import DEFAULT_JWKS_URI
from github_connector.errors import AuthenticationError, ConfigurationError

logger = logging.getLogger(__name__)

ISSUER_TEMPLATES = (
    "https://login.microsoftonline.com/{tenant_id}/v2.0",
    "https://sts.windows.net/{tenant_id}/",
)
ALGORITHMS = ["RS256"]


class TokenValidator:
    """Verifies signature, audience and issuer of notification tokens."""

    def __init__(
        self,
        client_id: str,
        tenant_id: str,
        jwks_uri: str = DEFAULT_JWKS_URI,
        jwks_client: PyJWKClient | None = None,
    ) -> None:
        """Initialize the validator.

        Args:
            client_id: This app's client ID, the only accepted audience
            tenant_id: Tenant ID used to build the accepted issuers
            jwks_uri: Key set endpoint, used when no client is supplied
            jwks_client: Pre-built key client (shares its key cache)
        """
        if not client_id or not tenant_id:
            raise ConfigurationError("Token validation needs both a client ID and a tenant ID")

        self._client_id = client_id
        self._issuers = [template.format(tenant_id=tenant_id) for template in ISSUER_TEMPLATES]
        self._jwks_client = jwks_client or PyJWKClient(jwks_uri, cache_keys=True)

    @property
    def issuers(self) -> list[str]:
        return list(self._issuers)

    def verify(self, token: str) -> dict[str, Any]:
        """Verify a token and return its claims.

        Blocking: the key lookup may fetch the key set over HTTP.

        Raises:
            AuthenticationError: For any verification or key lookup failure.
        """
        try:
            signing_key = self._jwks_client.get_signing_key_from_jwt(token)
        except jwt.PyJWTError as e:
            raise AuthenticationError(f"Could not get signing key: {e}") from e

        try:
            return jwt.decode(
                token,
                signing_key.key,
                algorithms=ALGORITHMS,
                audience=self._client_id,
                issuer=self._issuers,
            )
        except jwt.PyJWTError as e:
            raise AuthenticationError(str(e)) from e

    async def is_valid(self, token: str) -> bool:
        """Check a token without raising. Failures are logged."""
        loop = asyncio.get_running_loop()
        try:
            await loop.run_in_executor(None, self.verify, token)
        except AuthenticationError as e:
            logger.warning(f"Token validation error: {e.message}")
            return False
        except Exception as e:
            logger.exception(f"Unexpected token validation error: {e}")
            return False
        return True

    async def validate_all(self, tokens: list[str]) -> bool:
        """Validate every token concurrently.

        True only if there is at least one token and all of them are valid.
        """
        if not tokens:
            return False
        results = await asyncio.gather(*(self.is_valid(token) for token in tokens))
        return all(results)
