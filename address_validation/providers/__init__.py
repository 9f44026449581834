"""Address provider clients.

Every client implements BaseProvider.lookup(address) and returns
provider-neutral ProviderCandidate objects:
- Smarty US Street API: smarty.SmartyStreetProvider

Use the factory function to instantiate the configured client:
    from address_validation.providers.factory import get_provider
    provider = get_provider(app_config.provider, env_config)
    candidates = provider.lookup("1600 Amphitheatre Pkwy, Mountain View, CA")

Exception handling:
    from address_validation.providers.exceptions import ProviderError, ProviderHTTPError
"""

from .base import BaseProvider
from .exceptions import (
    ProviderConfigurationError,
    ProviderError,
    ProviderHTTPError,
    ProviderRequestTimeoutError,
    ProviderResponseError,
)
from .factory import get_provider
from .smarty import SmartyStreetProvider

__all__ = [
    # Base and factory
    "BaseProvider",
    "get_provider",
    # Providers
    "SmartyStreetProvider",
    # Exceptions
    "ProviderError",
    "ProviderHTTPError",
    "ProviderRequestTimeoutError",
    "ProviderResponseError",
    "ProviderConfigurationError",
]
