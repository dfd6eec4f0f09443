"""Validation of inbound notification tokens."""

from github_connector.auth.token_validator import TokenValidator

__all__ = ["TokenValidator"]
