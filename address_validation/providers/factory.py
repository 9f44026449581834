"""Factory function for instantiating provider clients."""

import logging

from address_validation.config.environment import EnvironmentConfig
from address_validation.config.models import ProviderConfig
from address_validation.exceptions import ConfigurationError

from .base import BaseProvider
from .smarty import SmartyStreetProvider

logger = logging.getLogger(__name__)


def get_provider(
    provider_config: ProviderConfig,
    env_config: EnvironmentConfig,
    timeout: float = 10.0,
) -> BaseProvider:
    """Factory function to instantiate the configured provider client.

    Args:
        provider_config: Provider settings from the config file
        env_config: Environment configuration holding provider credentials
        timeout: HTTP socket timeout in seconds (normally the breaker's per-call timeout)

    Returns:
        Instantiated provider client

    Raises:
        ConfigurationError: If the provider type is not supported or its settings are invalid

    Example:
        >>> provider = get_provider(app_config.provider, env_config)
        >>> candidates = provider.lookup("1600 Amphitheatre Pkwy, Mountain View, CA")
    """
    provider_map = {
        "smarty": SmartyStreetProvider,
    }

    provider_type = str(getattr(provider_config.type, "value", provider_config.type)).lower()
    provider_class = provider_map.get(provider_type)

    if not provider_class:
        supported_types = ", ".join(sorted(provider_map.keys()))
        raise ConfigurationError(
            f"Unknown provider type: {provider_config.type}. Supported types: {supported_types}"
        )

    logger.debug(
        "Creating provider instance",
        extra={
            "provider_type": provider_type,
            "provider_class": provider_class.__name__,
        },
    )

    try:
        return provider_class(
            auth_id=env_config.smarty_auth_id,
            auth_token=env_config.smarty_auth_token,
            base_url=provider_config.base_url,
            max_candidates=provider_config.max_candidates,
            match_strategy=str(getattr(provider_config.match_strategy, "value", provider_config.match_strategy)),
            licenses=provider_config.licenses,
            timeout=timeout,
            user_agent=provider_config.user_agent,
        )
    except Exception as e:
        raise ConfigurationError(
            f"Failed to create {provider_type} provider: {e}",
            context={"provider": provider_type},
        ) from e
