"""Error taxonomy for address validation.

Every failure the service can report maps to exactly one ErrorKind. Each
exception carries a human-readable message and a context dictionary
(original address, provider name, reason) for diagnostics, plus the
caller-facing category: error code, HTTP status and whether a retry can help.

Classification outcomes (valid, corrected, unverifiable, invalid) are never
errors; they are returned as ValidationResult objects.
"""

from enum import Enum
from typing import Any, Dict, List, Optional

from address_validation.utils.timestamps import format_timestamp, utc_now


class ErrorKind(str, Enum):
    """Closed set of failure kinds."""

    INVALID_INPUT = "invalid_input"
    NO_CANDIDATES = "no_candidates"
    CIRCUIT_OPEN = "circuit_open"
    TIMEOUT = "timeout"
    EXTERNAL_SERVICE_ERROR = "external_service_error"
    CONFIGURATION = "configuration"


class AddressValidationError(Exception):
    """Base exception for all address validation failures.

    Subclasses fix the kind, error code, HTTP status code and retry semantics.
    Catching this exception catches every failure the service reports.

    Attributes:
        message: Human-readable error message
        context: Diagnostic fields (address, provider, reason, ...)
        timestamp: UTC time the error was created
    """

    kind: ErrorKind
    code: str = "INTERNAL_SERVER_ERROR"
    status_code: int = 500
    is_operational: bool = True
    retriable: bool = False
    default_message: str = "Address validation failed"

    def __init__(self, message: Optional[str] = None, context: Optional[Dict[str, Any]] = None) -> None:
        self.message = message or self.default_message
        self.context = dict(context or {})
        self.timestamp = utc_now()
        super().__init__(self.message)

    def to_dict(self) -> Dict[str, Any]:
        """Serialize to the caller-facing error payload."""
        return {
            "code": self.code,
            "kind": self.kind.value,
            "message": self.message,
            "status_code": self.status_code,
            "retriable": self.retriable,
            "context": self.context,
            "timestamp": format_timestamp(self.timestamp),
        }

    def __repr__(self) -> str:
        return f"{type(self).__name__}(kind={self.kind.value!r}, message={self.message!r})"


class InvalidInputError(AddressValidationError):
    """Address is missing, not a string, or whitespace-only.

    Raised by the orchestrator before the provider is ever called.
    """

    kind = ErrorKind.INVALID_INPUT
    code = "INVALID_ADDRESS"
    status_code = 400
    default_message = "Address is required and must be a non-empty string"


class NoCandidatesError(AddressValidationError):
    """Provider returned zero candidates for the address.

    Distinct from an `invalid` classification: the provider could not make
    sense of the input at all, so there is nothing to classify.
    """

    kind = ErrorKind.NO_CANDIDATES
    code = "NO_CANDIDATES"
    status_code = 400
    default_message = "Address could not be matched to any known address"


class CircuitOpenError(AddressValidationError):
    """Circuit breaker rejected the call without contacting the provider."""

    kind = ErrorKind.CIRCUIT_OPEN
    code = "CIRCUIT_BREAKER_OPEN"
    status_code = 503
    retriable = True
    default_message = "Address validation service is experiencing issues - please try again later"


class ProviderTimeoutError(AddressValidationError):
    """Provider call exceeded the configured per-call timeout."""

    kind = ErrorKind.TIMEOUT
    code = "REQUEST_TIMEOUT"
    status_code = 408
    retriable = True
    default_message = "Address validation request timed out"


class ExternalServiceError(AddressValidationError):
    """Any other provider or network failure (auth, rate limit, 5xx, bad payload)."""

    kind = ErrorKind.EXTERNAL_SERVICE_ERROR
    code = "EXTERNAL_SERVICE_ERROR"
    status_code = 502
    retriable = True
    default_message = "Address validation service temporarily unavailable"


class ConfigurationError(AddressValidationError):
    """
    Exception raised when startup configuration is missing or invalid.

    Non-operational: it halts startup instead of being handled per request.
    Stores multiple validation errors and formats them in a human-readable
    way with helpful suggestions.
    """

    kind = ErrorKind.CONFIGURATION
    code = "CONFIGURATION_ERROR"
    status_code = 500
    is_operational = False

    def __init__(
        self,
        message: str,
        errors: Optional[List[str]] = None,
        suggestions: Optional[List[str]] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        """
        Initialize ConfigurationError.

        Args:
            message: Primary error message
            errors: List of specific validation errors
            suggestions: List of helpful suggestions to fix the errors
            context: Optional diagnostic fields
        """
        self.errors = errors or []
        self.suggestions = suggestions or []
        super().__init__(message, context)

    def __str__(self) -> str:
        return self._format_message()

    def _format_message(self) -> str:
        """Format the error message with all errors and suggestions."""
        parts = [self.message]

        if self.errors:
            parts.append("\nValidation Errors:")
            for i, error in enumerate(self.errors, 1):
                parts.append(f"  {i}. {error}")

        if self.suggestions:
            parts.append("\nSuggestions:")
            for suggestion in self.suggestions:
                parts.append(f"  - {suggestion}")

        return "\n".join(parts)

    def to_dict(self) -> Dict[str, Any]:
        payload = super().to_dict()
        payload["errors"] = list(self.errors)
        return payload

    def add_error(self, error: str) -> None:
        """Add a validation error to the list."""
        self.errors.append(error)

    def add_suggestion(self, suggestion: str) -> None:
        """Add a helpful suggestion to the list."""
        self.suggestions.append(suggestion)


def is_operational_error(error: BaseException) -> bool:
    """Return True for expected per-request failures, False for startup/programming errors."""
    return isinstance(error, AddressValidationError) and error.is_operational


def error_response(error: BaseException, request_id: Optional[str] = None) -> Dict[str, Any]:
    """Build the caller-facing error envelope for any exception.

    Known errors are serialized with their own code and status. Anything else
    is reported as a generic internal error without leaking its message.

    Args:
        error: Exception to report
        request_id: Optional request identifier to echo back

    Returns:
        Dictionary of the form {"error": {...}}
    """
    if isinstance(error, AddressValidationError):
        body = error.to_dict()
    else:
        body = {
            "code": "INTERNAL_SERVER_ERROR",
            "kind": None,
            "message": "An unexpected error occurred",
            "status_code": 500,
            "retriable": False,
            "context": {},
            "timestamp": format_timestamp(utc_now()),
        }

    if request_id is not None:
        body["request_id"] = request_id

    return {"error": body}
