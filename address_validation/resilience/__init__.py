"""Fail-fast protection for calls to the external address provider.

Construct one CircuitBreaker per external dependency at startup and inject
it wherever that dependency is called:

    from address_validation.resilience import CircuitBreaker
    breaker = CircuitBreaker(name="smarty", timeout_seconds=10.0)
    candidates = breaker.call(provider.lookup, address)
"""

from .breaker import CircuitBreaker, CircuitState
from .exceptions import CallTimeoutError

__all__ = [
    "CircuitBreaker",
    "CircuitState",
    "CallTimeoutError",
]
