"""Configuration loader for the address validation service.

Every section of the YAML file is optional, so a missing file is not an
error unless it was asked for explicitly. Environment variables are merged
over the file before pydantic validation, and non-fatal issues are emitted
as UserWarnings.
"""

import copy
from pathlib import Path
from typing import Any, Dict, List, Optional

import yaml
from pydantic import ValidationError

from address_validation.exceptions import ConfigurationError

from .environment import EnvironmentConfig, load_environment_config
from .models import AppConfig
from .validators import check_for_warnings, emit_warnings

# Searched in order when no path is given
DEFAULT_CONFIG_LOCATIONS = (
    Path("config.yaml"),
    Path("config") / "config.yaml",
)

SCALAR_TYPE_ERRORS = {
    "string_type": "string",
    "int_type": "integer",
    "int_parsing": "integer",
    "int_from_float": "integer",
    "bool_type": "boolean",
    "bool_parsing": "boolean",
    "list_type": "list",
}


def load_config(config_path: Optional[Path] = None) -> tuple[AppConfig, EnvironmentConfig]:
    """Load the YAML file (if any), apply environment overrides and validate.

    Args:
        config_path: Explicit config file; must exist when given

    Returns:
        (AppConfig, EnvironmentConfig)

    Raises:
        ConfigurationError: On a missing explicit file, unreadable YAML,
            missing credentials or values outside their bounds
    """
    config_file = config_path if config_path else locate_config_file()
    if config_path and not config_path.exists():
        raise ConfigurationError(
            f"Specified configuration file not found: {config_path}",
            suggestions=[
                f"Ensure {config_path} exists",
                "Omit --config to use config.yaml or the built-in defaults",
            ],
        )

    raw = _read_config_file(config_file) if config_file else {}
    env_config = load_environment_config()
    raw = apply_overrides(raw, env_config.overrides)

    emit_warnings(check_for_warnings(raw))

    return _validate_app_config(raw), env_config


def locate_config_file() -> Optional[Path]:
    """Return the first default location that exists, or None for built-in defaults."""
    return next((path for path in DEFAULT_CONFIG_LOCATIONS if path.exists()), None)


def apply_overrides(config_dict: Dict[str, Any], overrides: Dict[str, Dict[str, Any]]) -> Dict[str, Any]:
    """Merge per-section overrides into a copy of a raw config dict.

    Sections that are absent or not mappings in config_dict are replaced.
    """
    merged = copy.deepcopy(config_dict)
    for section, values in overrides.items():
        existing = merged.get(section)
        merged[section] = {**(existing if isinstance(existing, dict) else {}), **values}
    return merged


def _read_config_file(config_file: Path) -> Dict[str, Any]:
    try:
        content = config_file.read_text()
    except FileNotFoundError as e:
        raise ConfigurationError(
            f"Configuration file not found: {config_file}",
            suggestions=[
                "Copy config.example.yaml to config.yaml",
                f"Ensure {config_file} exists and is readable",
            ],
        ) from e
    except OSError as e:
        raise ConfigurationError(
            f"Failed to read configuration file: {e}",
            suggestions=[f"Check permissions on {config_file}"],
        ) from e

    try:
        parsed = yaml.safe_load(content)
    except yaml.YAMLError as e:
        raise ConfigurationError(
            f"Failed to parse YAML configuration: {e}",
            suggestions=[
                "Check YAML syntax in your config file",
                "Ensure proper indentation (use spaces, not tabs)",
            ],
        ) from e

    if parsed is None:
        return {}
    if not isinstance(parsed, dict):
        raise ConfigurationError(
            f"Configuration file must contain a mapping, got {type(parsed).__name__}",
            suggestions=["Review config.example.yaml for correct format"],
        )
    return parsed


def _describe_validation_error(error: Dict[str, Any]) -> str:
    """Turn one pydantic error entry into a single readable line."""
    field_path = " -> ".join(str(loc) for loc in error["loc"])
    error_type = error["type"]

    if error_type == "missing":
        return f"Missing required field: {field_path}"
    if error_type in SCALAR_TYPE_ERRORS:
        return (
            f"Invalid type for '{field_path}': expected {SCALAR_TYPE_ERRORS[error_type]}, "
            f"got {error.get('input')!r}"
        )
    if error_type == "enum":
        return f"Invalid value for '{field_path}': {error['msg']}"
    return f"{field_path}: {error['msg']}"


def _validate_app_config(config_dict: Dict[str, Any]) -> AppConfig:
    try:
        return AppConfig.model_validate(config_dict)
    except ValidationError as e:
        errors: List[str] = [_describe_validation_error(error) for error in e.errors()]
        raise ConfigurationError(
            "Configuration validation failed",
            errors=errors,
            suggestions=[
                "Review config.example.yaml for correct format",
                "Check environment variable overrides (CIRCUIT_BREAKER_*, SMARTY_*, LOG_FORMAT)",
            ],
        ) from e


def validate_config_file(config_path: Path) -> bool:
    """Validate a config file on its own, without credentials.

    Prints a ✓/✗ summary to stdout and returns whether the file is valid.
    """
    try:
        _validate_app_config(_read_config_file(config_path))
    except ConfigurationError as e:
        print(f"✗ Configuration validation failed:\n{e}")
        return False

    print(f"✓ Configuration file {config_path} is valid")
    return True
