"""Exceptions raised by the circuit breaker itself."""


class CallTimeoutError(Exception):
    """A call through the breaker did not finish within its timeout.

    The call is abandoned (its worker thread is left to finish on its own)
    and the timeout is recorded as a failure.
    """

    def __init__(self, message: str, timeout_seconds: float) -> None:
        """Initialize timeout error.

        Args:
            message: Human-readable error message
            timeout_seconds: The timeout that was exceeded
        """
        super().__init__(message)
        self.timeout_seconds = timeout_seconds
