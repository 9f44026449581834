"""Validation orchestrator: the single inbound entry point."""

import uuid
from typing import Any, Optional

from address_validation.domain.models import ValidationResult
from address_validation.exceptions import AddressValidationError, InvalidInputError
from address_validation.logging import get_logger, log_context

from .adapter import ProviderAdapter

logger = get_logger(__name__, component="service")


class AddressValidationService:
    """Rejects unusable input, then hands the trimmed address to the adapter."""

    def __init__(self, adapter: ProviderAdapter):
        self.adapter = adapter

    def validate_address(self, address: Any, request_id: Optional[str] = None) -> ValidationResult:
        """Validate one address.

        Args:
            address: Caller-supplied address text
            request_id: Correlation ID added to every log record (generated if omitted)

        Returns:
            ValidationResult from the provider adapter

        Raises:
            InvalidInputError: Address is not a string, or empty after trimming
            AddressValidationError: Any other classified failure from the adapter
        """
        if not isinstance(address, str):
            raise InvalidInputError(
                "Address must be a string",
                context={"input_type": type(address).__name__},
            )

        trimmed = address.strip()
        if not trimmed:
            raise InvalidInputError("Address is required and must be a non-empty string")

        request_id = request_id or uuid.uuid4().hex

        with log_context(request_id=request_id):
            logger.info(
                "Validating address",
                extra={
                    "event": "validation.request.started",
                    "provider": self.adapter.provider_name,
                    "address_length": len(trimmed),
                },
            )

            try:
                result = self.adapter.validate(trimmed)
            except AddressValidationError as e:
                logger.info(
                    f"Validation failed: {e.code}",
                    extra={
                        "event": "validation.request.failed",
                        "error_code": e.code,
                        "error_kind": e.kind,
                        "retriable": e.retriable,
                    },
                )
                raise

            logger.info(
                "Validation completed",
                extra={
                    "event": "validation.request.completed",
                    "status": result.status,
                    "correction_count": len(result.corrections),
                    "processing_time_ms": result.metadata.processing_time_ms,
                },
            )

        return result
