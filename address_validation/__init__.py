"""Address validation service.

Normalizes free-form postal addresses through an external verification
provider, guarded by a circuit breaker, and reports one of four statuses:
valid, corrected, unverifiable or invalid.
"""

__version__ = "1.0.0"
