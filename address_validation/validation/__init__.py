"""Address validation core: status classification, provider adapter and orchestrator."""

from .adapter import ProviderAdapter
from .classifier import base_status, classify_status
from .service import AddressValidationService

__all__ = [
    "AddressValidationService",
    "ProviderAdapter",
    "base_status",
    "classify_status",
]
