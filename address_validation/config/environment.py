"""Environment variable loading and validation."""

import os
from typing import Any, Dict, List, Optional

from address_validation.exceptions import ConfigurationError

VALID_LOG_LEVELS = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]

# Environment variable -> (config section, field) for numeric overrides
NUMERIC_OVERRIDES = {
    "CIRCUIT_BREAKER_TIMEOUT": ("circuit_breaker", "timeout_ms"),
    "CIRCUIT_BREAKER_ERROR_THRESHOLD": ("circuit_breaker", "error_threshold_percentage"),
    "CIRCUIT_BREAKER_RESET_TIMEOUT": ("circuit_breaker", "reset_timeout_ms"),
    "SMARTY_MAX_CANDIDATES": ("provider", "max_candidates"),
}


class EnvironmentConfig:
    """Environment variable configuration holder."""

    def __init__(
        self,
        smarty_auth_id: str,
        smarty_auth_token: str,
        log_level: Optional[str] = None,
        environment: Optional[str] = None,
        overrides: Optional[Dict[str, Dict[str, Any]]] = None,
    ):
        """Initialize environment configuration.

        Args:
            smarty_auth_id: Provider secret key ID
            smarty_auth_token: Provider secret key token
            log_level: Optional log level override
            environment: Environment label for logs (default "local")
            overrides: Config values from the environment, keyed by section then field
        """
        self.smarty_auth_id = smarty_auth_id
        self.smarty_auth_token = smarty_auth_token
        self.log_level = log_level.upper() if log_level else None
        self.environment = environment or "local"
        self.overrides = overrides or {}

    def __repr__(self) -> str:
        # Credentials are never rendered
        return (
            f"EnvironmentConfig(log_level={self.log_level!r}, "
            f"environment={self.environment!r}, overrides={self.overrides!r})"
        )


def load_environment_config() -> EnvironmentConfig:
    """
    Load and validate environment variables.

    Required environment variables:
    - SMARTY_AUTH_ID: Provider secret key ID
    - SMARTY_AUTH_TOKEN: Provider secret key token

    Optional environment variables:
    - LOG_LEVEL: Override log level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
    - ENVIRONMENT: Environment label for logs (production, staging, local)
    - CIRCUIT_BREAKER_TIMEOUT: Per-call timeout in milliseconds
    - CIRCUIT_BREAKER_ERROR_THRESHOLD: Error percentage that opens the circuit
    - CIRCUIT_BREAKER_RESET_TIMEOUT: Milliseconds the circuit stays open
    - SMARTY_MAX_CANDIDATES: Candidates to request per lookup
    - SMARTY_LICENSES: Comma-separated license names
    - SMARTY_MATCH_STRATEGY: strict, invalid or enhanced
    - LOG_FORMAT: json or key-value

    Returns:
        EnvironmentConfig object with validated values

    Raises:
        ConfigurationError: If required variables are missing or invalid
    """
    errors: List[str] = []

    smarty_auth_id = os.getenv("SMARTY_AUTH_ID")
    smarty_auth_token = os.getenv("SMARTY_AUTH_TOKEN")
    log_level = os.getenv("LOG_LEVEL")
    environment = os.getenv("ENVIRONMENT")

    if not smarty_auth_id or not smarty_auth_id.strip():
        errors.append("Missing required environment variable: SMARTY_AUTH_ID")

    if not smarty_auth_token or not smarty_auth_token.strip():
        errors.append("Missing required environment variable: SMARTY_AUTH_TOKEN")

    if log_level and log_level.upper() not in VALID_LOG_LEVELS:
        errors.append(
            f"Invalid LOG_LEVEL: '{log_level}'. Must be one of: {', '.join(VALID_LOG_LEVELS)}"
        )

    overrides: Dict[str, Dict[str, Any]] = {}

    for name, (section, field) in NUMERIC_OVERRIDES.items():
        raw_value = os.getenv(name)
        if not raw_value:
            continue
        try:
            overrides.setdefault(section, {})[field] = int(raw_value.strip())
        except ValueError:
            errors.append(
                f"Environment variable {name} must be a valid number, got: {raw_value}"
            )

    licenses = os.getenv("SMARTY_LICENSES")
    if licenses:
        overrides.setdefault("provider", {})["licenses"] = [
            item.strip() for item in licenses.split(",") if item.strip()
        ]

    match_strategy = os.getenv("SMARTY_MATCH_STRATEGY")
    if match_strategy:
        overrides.setdefault("provider", {})["match_strategy"] = match_strategy.strip().lower()

    log_format = os.getenv("LOG_FORMAT")
    if log_format:
        overrides.setdefault("logging", {})["format"] = log_format.strip().lower()

    if errors:
        raise ConfigurationError(
            "Environment variable validation failed",
            errors=errors,
            suggestions=[
                "Copy .env.example to .env and fill in your provider credentials",
                "Ensure all required environment variables are set",
                "Numeric overrides must be plain integers (milliseconds for timeouts)",
            ],
        )

    return EnvironmentConfig(
        smarty_auth_id=smarty_auth_id.strip(),
        smarty_auth_token=smarty_auth_token.strip(),
        log_level=log_level,
        environment=environment,
        overrides=overrides,
    )
