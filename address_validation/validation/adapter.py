"""Provider adapter: turns a raw provider lookup into a ValidationResult.

This module implements the interpretation layer that:
1. Calls the provider through the circuit breaker
2. Picks the authoritative (first) candidate
3. Compares the standardized address with the caller's input
4. Classifies the match signal into a ValidationStatus
5. Re-classifies every failure into the service error taxonomy
"""

import logging
import time
from typing import List, Optional

from address_validation.domain.models import (
    AddressCorrection,
    ProviderCandidate,
    StandardizedAddress,
    ValidationMetadata,
    ValidationResult,
)
from address_validation.exceptions import (
    CircuitOpenError,
    ExternalServiceError,
    NoCandidatesError,
    ProviderTimeoutError,
)
from address_validation.logging import get_logger
from address_validation.normalization import build_full_address, normalize_address
from address_validation.providers.base import BaseProvider
from address_validation.providers.exceptions import (
    ProviderHTTPError,
    ProviderRequestTimeoutError,
)
from address_validation.resilience import CallTimeoutError, CircuitBreaker
from address_validation.utils.timestamps import elapsed_ms

from .classifier import classify_status

logger = get_logger(__name__, component="adapter")


class ProviderAdapter:
    """Validates addresses against one provider, protected by one circuit breaker.

    The breaker is owned by the caller (constructed once at startup) so its
    state is shared by every request that goes through this adapter.
    """

    def __init__(
        self,
        provider: BaseProvider,
        breaker: CircuitBreaker,
        logger_instance: Optional[logging.Logger] = None,
    ):
        """Initialize ProviderAdapter.

        Args:
            provider: Lookup client for the external provider
            breaker: Circuit breaker guarding calls to that provider
            logger_instance: Logger instance (defaults to module logger)
        """
        self.provider = provider
        self.breaker = breaker
        self.logger = logger_instance or logger

    @property
    def provider_name(self) -> str:
        return self.provider.name

    def validate(self, address: str) -> ValidationResult:
        """Validate a single trimmed, non-empty address.

        Steps:
        1. Look up the address through the circuit breaker
        2. Fail with NoCandidatesError when the provider found nothing
        3. Build the standardized address from the first candidate
        4. Normalize input and standardized text and classify the match signal
        5. Record a correction when the normalized forms differ

        Args:
            address: Address text, already trimmed by the caller

        Returns:
            ValidationResult with status, standardized address and corrections

        Raises:
            NoCandidatesError: Provider returned zero candidates
            CircuitOpenError: Breaker rejected the call
            ProviderTimeoutError: Call exceeded the per-call timeout
            ExternalServiceError: Any other provider or network failure
        """
        started_at = time.monotonic()
        candidates = self._lookup(address, started_at)
        processing_time_ms = elapsed_ms(started_at)

        if not candidates:
            self.logger.info(
                "Provider returned no candidates",
                extra={
                    "event": "validation.lookup.no_candidates",
                    "provider": self.provider_name,
                    "processing_time_ms": processing_time_ms,
                },
            )
            raise NoCandidatesError(
                context={
                    "address": address,
                    "provider": self.provider_name,
                    "reason": "no_candidates",
                }
            )

        candidate = candidates[0]
        standardized = self._build_standardized_address(candidate)

        input_normalized = normalize_address(address)
        standardized_normalized = normalize_address(standardized.full_address)

        status = classify_status(candidate.match_signal, input_normalized, standardized_normalized)
        corrections = self._build_corrections(
            address, standardized.full_address, input_normalized, standardized_normalized
        )

        self.logger.info(
            f"Address classified as {status.value}",
            extra={
                "event": "validation.lookup.classified",
                "provider": self.provider_name,
                "status": status.value,
                "match_signal": candidate.match_signal.value,
                "candidate_count": len(candidates),
                "correction_count": len(corrections),
                "processing_time_ms": processing_time_ms,
            },
        )
        self.logger.debug(
            "Standardized address",
            extra={
                "event": "validation.lookup.standardized",
                "address": address,
                "standardized_address": standardized.full_address,
            },
        )

        return ValidationResult(
            status=status,
            original_input=address,
            standardized_address=standardized,
            corrections=corrections,
            errors=[],
            metadata=ValidationMetadata(
                provider=self.provider_name,
                processing_time_ms=processing_time_ms,
                match_signal=candidate.match_signal,
                vacant=candidate.vacant,
                undeliverable=candidate.undeliverable,
                footnotes=candidate.footnotes,
            ),
        )

    def _lookup(self, address: str, started_at: float) -> List[ProviderCandidate]:
        """Run the provider lookup through the breaker and translate failures."""
        context = {"address": address, "provider": self.provider_name}

        try:
            return self.breaker.call(self.provider.lookup, address)
        except CircuitOpenError as e:
            self.logger.warning(
                "Provider call rejected by open circuit",
                extra={
                    "event": "validation.lookup.circuit_open",
                    "provider": self.provider_name,
                    "reason": e.context.get("reason"),
                },
            )
            e.context.update(context)
            raise
        except (CallTimeoutError, ProviderRequestTimeoutError) as e:
            self.logger.warning(
                "Provider call timed out",
                extra={
                    "event": "validation.lookup.timeout",
                    "provider": self.provider_name,
                    "error_type": type(e).__name__,
                    "processing_time_ms": elapsed_ms(started_at),
                },
            )
            raise ProviderTimeoutError(context={**context, "reason": str(e)}) from e
        except Exception as e:
            reason = str(e)
            if isinstance(e, ProviderHTTPError):
                context["status_code"] = e.status_code

            self.logger.warning(
                "Provider call failed",
                extra={
                    "event": "validation.lookup.failed",
                    "provider": self.provider_name,
                    "error_type": type(e).__name__,
                    "status_code": context.get("status_code"),
                    "processing_time_ms": elapsed_ms(started_at),
                },
            )
            raise ExternalServiceError(
                f"Address provider '{self.provider_name}' request failed",
                context={**context, "reason": reason},
            ) from e

    def _build_standardized_address(self, candidate: ProviderCandidate) -> StandardizedAddress:
        """Map the authoritative candidate onto the caller-facing address shape."""
        components = candidate.components
        return StandardizedAddress(
            street=components.street,
            number=components.primary_number,
            city=components.city,
            state=components.state,
            zipcode=components.full_zipcode,
            delivery_line_1=candidate.delivery_line_1,
            delivery_line_2=candidate.delivery_line_2,
            last_line=candidate.last_line,
            full_address=build_full_address(
                candidate.delivery_line_1, candidate.delivery_line_2, candidate.last_line
            ),
        )

    def _build_corrections(
        self,
        original: str,
        standardized: str,
        input_normalized: str,
        standardized_normalized: str,
    ) -> List[AddressCorrection]:
        """One whole-address correction when the normalized forms differ."""
        if input_normalized == standardized_normalized:
            return []
        return [AddressCorrection(field="address", original=original, corrected=standardized)]
