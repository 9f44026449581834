"""Domain models for the address validation service."""

from .models import (
    AddressComponents,
    AddressCorrection,
    MatchSignal,
    ProviderCandidate,
    StandardizedAddress,
    ValidationMetadata,
    ValidationResult,
    ValidationStatus,
)

__all__ = [
    "AddressComponents",
    "AddressCorrection",
    "MatchSignal",
    "ProviderCandidate",
    "StandardizedAddress",
    "ValidationMetadata",
    "ValidationResult",
    "ValidationStatus",
]
