"""Exception hierarchy for the GitHub connector.

Remote failures are raised where the call is made and caught by whoever
issued it (the dispatcher per notification, the CLI per action).
"""


class ConnectorError(Exception):
    """Base exception for connector errors."""

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ConfigurationError(ConnectorError):
    """Required settings are missing or invalid."""

    pass


class AuthenticationError(ConnectorError):
    """A validation token failed verification."""

    pass


class RemoteCallError(ConnectorError):
    """An outbound call (Graph, JWKS, GitHub) failed."""

    pass


class GraphError(RemoteCallError):
    """Microsoft Graph returned a non-success status."""

    def __init__(self, message: str, status_code: int, code: str | None = None):
        super().__init__(message)
        self.status_code = status_code
        self.code = code

    def __str__(self) -> str:
        if self.code:
            return f"{self.status_code} {self.code}: {self.message}"
        return f"{self.status_code}: {self.message}"


class OperationFailedError(ConnectorError):
    """A long-running connection operation ended in the failed state."""

    pass
