"""Additional validation utilities for configuration."""

import warnings
from typing import Any, Dict, List


def check_for_warnings(config_dict: Dict[str, Any]) -> List[str]:
    """
    Check configuration for potential issues and return warnings.

    Args:
        config_dict: Raw configuration dictionary (after environment overrides)

    Returns:
        List of warning messages
    """
    warning_messages = []

    provider = config_dict.get("provider", {})
    if isinstance(provider, dict):
        max_candidates = provider.get("max_candidates", 1)
        if isinstance(max_candidates, int) and max_candidates > 1:
            warning_messages.append(
                f"max_candidates is {max_candidates} but only the first candidate is used"
            )

        licenses = provider.get("licenses")
        if isinstance(licenses, list) and not licenses:
            warning_messages.append(
                "No provider licenses configured; the provider default license will apply"
            )

    breaker = config_dict.get("circuit_breaker", {})
    if isinstance(breaker, dict):
        threshold = breaker.get("error_threshold_percentage", 50)
        if isinstance(threshold, int) and threshold >= 100:
            warning_messages.append(
                "error_threshold_percentage of 100 opens the circuit only when every call fails"
            )

        timeout_ms = breaker.get("timeout_ms", 10000)
        reset_timeout_ms = breaker.get("reset_timeout_ms", 30000)
        if (
            isinstance(timeout_ms, int)
            and isinstance(reset_timeout_ms, int)
            and reset_timeout_ms < timeout_ms
        ):
            warning_messages.append(
                f"reset_timeout_ms ({reset_timeout_ms}) is shorter than timeout_ms ({timeout_ms}); "
                "the circuit may half-open before abandoned calls finish"
            )

    logging_section = config_dict.get("logging", {})
    if isinstance(logging_section, dict):
        level = logging_section.get("level")
        if isinstance(level, str) and level.upper() == "DEBUG":
            warning_messages.append(
                "DEBUG logging records full addresses; do not enable it in production"
            )

    return warning_messages


def emit_warnings(warning_messages: List[str]) -> None:
    """
    Emit warning messages using Python's warnings module.

    Args:
        warning_messages: List of warning messages to emit
    """
    for message in warning_messages:
        warnings.warn(message, UserWarning, stacklevel=2)
