"""Environment-based settings.

Values are read from the process environment after loading a local ``.env``
file. Every required value must be present; ``Settings.from_env`` reports all
missing names at once.
"""

import os
from functools import lru_cache

from dotenv import load_dotenv
from pydantic import BaseModel, Field, ValidationError

from github_connector.errors import ConfigurationError

DEFAULT_PORT = 5001
DEFAULT_GRAPH_BASE_URL = "https://graph.microsoft.com/beta"
DEFAULT_JWKS_URI = "https://login.microsoftonline.com/common/discovery/v2.0/keys"

# Environment variable -> Settings field
REQUIRED_ENV_VARS = {
    "CLIENT_ID": "client_id",
    "TENANT_ID": "tenant_id",
    "CLIENT_SECRET": "client_secret",
    "GITHUB_REPO_OWNER": "github_owner",
    "GITHUB_REPO": "github_repo",
    "GITHUB_TOKEN": "github_token",
    "PLACEHOLDER_USER_ID": "placeholder_user_id",
}


class Settings(BaseModel):
    """Application settings."""

    client_id: str = Field(..., min_length=1, description="Application (client) ID")
    tenant_id: str = Field(..., min_length=1, description="Directory (tenant) ID")
    client_secret: str = Field(..., min_length=1)
    github_owner: str = Field(..., min_length=1, description="GitHub user or organization")
    github_repo: str = Field(..., min_length=1, description="Repository to ingest issues from")
    github_token: str = Field(..., min_length=1)
    placeholder_user_id: str = Field(
        ..., min_length=1, description="User ID that every GitHub login maps to"
    )
    port: int = Field(DEFAULT_PORT, ge=1, le=65535)
    graph_base_url: str = DEFAULT_GRAPH_BASE_URL
    jwks_uri: str = DEFAULT_JWKS_URI

    @classmethod
    def from_env(cls, environ: dict[str, str] | None = None) -> "Settings":
        """Build settings from environment variables.

        Args:
            environ: Mapping to read from. Defaults to ``os.environ`` after
                loading ``.env``.

        Raises:
            ConfigurationError: If a required value is missing or the port is
                not a number.
        """
        if environ is None:
            load_dotenv()
            environ = dict(os.environ)

        missing = [name for name in REQUIRED_ENV_VARS if not environ.get(name)]
        if missing:
            raise ConfigurationError(
                f"Missing required settings: {', '.join(missing)}. "
                "Set them in the environment or a .env file."
            )

        values: dict[str, object] = {
            field: environ[name] for name, field in REQUIRED_ENV_VARS.items()
        }

        port = environ.get("PORT_NUMBER")
        if port:
            try:
                values["port"] = int(port)
            except ValueError as e:
                raise ConfigurationError(f"PORT_NUMBER must be an integer, got {port!r}") from e

        if environ.get("GRAPH_BASE_URL"):
            values["graph_base_url"] = environ["GRAPH_BASE_URL"]
        if environ.get("JWKS_URI"):
            values["jwks_uri"] = environ["JWKS_URI"]

        try:
            return cls(**values)
        except ValidationError as e:
            raise ConfigurationError(f"Invalid settings: {e}") from e


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Get the process-wide settings, loading them on first use."""
    return Settings.from_env()
