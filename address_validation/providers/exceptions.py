"""Custom exceptions for provider lookup clients.

These describe what went wrong on the wire. The validation layer never lets
them reach callers: it re-classifies them into the service error taxonomy.
"""


class ProviderError(Exception):
    """Base exception for all provider client errors.

    Catching this exception catches any failure raised by a lookup client.
    """

    pass


class ProviderHTTPError(ProviderError):
    """HTTP request failed with a 4xx or 5xx error, or could not be sent at all.

    Authentication failures (401/403), exhausted subscriptions (402) and rate
    limiting (429) all arrive here with their status code.
    """

    def __init__(self, message: str, status_code: int, url: str) -> None:
        """Initialize HTTP error with status code and URL.

        Args:
            message: Human-readable error message
            status_code: HTTP status code (0 when no response was received)
            url: Endpoint that failed (without query string)
        """
        super().__init__(message)
        self.status_code = status_code
        self.url = url


class ProviderRequestTimeoutError(ProviderError):
    """HTTP request did not complete within the client's socket timeout."""

    def __init__(self, message: str, url: str) -> None:
        """Initialize timeout error with URL.

        Args:
            message: Human-readable error message
            url: Endpoint that timed out (without query string)
        """
        super().__init__(message)
        self.url = url


class ProviderResponseError(ProviderError):
    """Response parsing or validation failed.

    The provider answered, but the body was not JSON or did not have the
    expected shape.
    """

    pass


class ProviderConfigurationError(ProviderError):
    """Invalid provider client configuration (missing credentials, bad timeout)."""

    pass
