"""Configuration management module for the address validation service."""

from address_validation.exceptions import ConfigurationError

from .environment import EnvironmentConfig, load_environment_config
from .loader import apply_overrides, load_config, validate_config_file
from .models import (
    AppConfig,
    CircuitBreakerConfig,
    LogFormat,
    LoggingConfig,
    LogLevel,
    MatchStrategy,
    ProviderConfig,
    ProviderType,
)

__all__ = [
    # Main loader functions
    "load_config",
    "validate_config_file",
    "load_environment_config",
    "apply_overrides",
    # Configuration models
    "AppConfig",
    "ProviderConfig",
    "CircuitBreakerConfig",
    "LoggingConfig",
    "EnvironmentConfig",
    # Enums
    "ProviderType",
    "MatchStrategy",
    "LogLevel",
    "LogFormat",
    # Exceptions
    "ConfigurationError",
]
