"""Command-line entry point for the address validation service."""

from dotenv import load_dotenv
load_dotenv()

import argparse
import json
import sys
import uuid
from pathlib import Path
from typing import List, Optional, Tuple

from address_validation.config import AppConfig, EnvironmentConfig, load_config
from address_validation.exceptions import (
    AddressValidationError,
    ConfigurationError,
    ErrorKind,
    error_response,
)
from address_validation.logging import get_logger
from address_validation.logging.config import configure_logging
from address_validation.providers import get_provider
from address_validation.resilience import CircuitBreaker
from address_validation.validation import AddressValidationService, ProviderAdapter

logger = get_logger(__name__, component="cli")

EXIT_OK = 0
EXIT_FAILURE = 1
EXIT_CLIENT_ERROR = 2
EXIT_RETRIABLE_ERROR = 3

CLIENT_ERROR_KINDS = {ErrorKind.INVALID_INPUT, ErrorKind.NO_CANDIDATES}


def load_runtime_config(
    config_path: Optional[Path], log_level_override: Optional[str]
) -> Tuple[AppConfig, EnvironmentConfig]:
    """
    Load configuration and resolve the effective log level.

    Log level priority: CLI > environment > config file.

    Args:
        config_path: Optional path to configuration file
        log_level_override: Log level from CLI

    Returns:
        Tuple of (AppConfig, EnvironmentConfig) with env_config.log_level resolved

    Raises:
        ConfigurationError: If configuration is invalid
    """
    app_config, env_config = load_config(config_path)

    if log_level_override:
        env_config.log_level = log_level_override
    elif not env_config.log_level:
        env_config.log_level = app_config.logging.level

    return app_config, env_config


def build_breaker(app_config: AppConfig, name: str) -> CircuitBreaker:
    """Create the provider circuit breaker from configuration."""
    settings = app_config.circuit_breaker
    return CircuitBreaker(
        name=name,
        timeout_seconds=settings.timeout_seconds,
        error_threshold_percentage=settings.error_threshold_percentage,
        reset_timeout_seconds=settings.reset_timeout_seconds,
        rolling_window_seconds=settings.rolling_window_seconds,
        rolling_window_buckets=settings.rolling_window_buckets,
        volume_threshold=settings.volume_threshold,
        max_workers=settings.max_workers,
    )


def build_service(app_config: AppConfig, env_config: EnvironmentConfig) -> AddressValidationService:
    """
    Wire provider, circuit breaker, adapter and orchestrator.

    The breaker is created once here and shared by every request served by
    the returned service.

    Raises:
        ConfigurationError: If the provider cannot be constructed
    """
    breaker = build_breaker(app_config, name=f"{app_config.provider.type}-lookup")
    provider = get_provider(
        app_config.provider,
        env_config,
        timeout=app_config.circuit_breaker.timeout_seconds,
    )
    adapter = ProviderAdapter(provider=provider, breaker=breaker)
    return AddressValidationService(adapter)


def exit_code_for(error: AddressValidationError) -> int:
    """Map a classified failure to the CLI exit code."""
    if error.kind in CLIENT_ERROR_KINDS:
        return EXIT_CLIENT_ERROR
    if error.retriable:
        return EXIT_RETRIABLE_ERROR
    return EXIT_FAILURE


def main(argv: Optional[List[str]] = None) -> int:
    """
    Main entry point for the address validator CLI.

    Args:
        argv: Argument list (defaults to sys.argv[1:])

    Returns:
        Exit code (0 for success, non-zero for failure).
    """
    parser = argparse.ArgumentParser(
        description="Address Validation Service - validate and standardize a US street address"
    )
    parser.add_argument(
        "address",
        nargs="?",
        default=None,
        help="Free-form address to validate (e.g. \"1600 Amphitheatre Pkwy, Mountain View, CA\")",
    )
    parser.add_argument(
        "--config",
        type=Path,
        default=None,
        help="Path to configuration file (default: config.yaml if present, else built-in defaults)",
    )
    parser.add_argument(
        "--log-level",
        default=None,
        choices=["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"],
        help="Log level (overrides config and environment)",
    )
    parser.add_argument(
        "--check-config",
        action="store_true",
        help="Validate configuration and environment, then exit",
    )

    args = parser.parse_args(argv)

    if not args.check_config and args.address is None:
        parser.error("ADDRESS is required unless --check-config is given")

    service = None
    request_id = uuid.uuid4().hex

    try:
        app_config, env_config = load_runtime_config(args.config, args.log_level)

        configure_logging(
            level=env_config.log_level,
            format_type=app_config.logging.format,
            environment=env_config.environment,
        )

        if args.check_config:
            print("✓ Configuration is valid")
            return EXIT_OK

        service = build_service(app_config, env_config)

        logger.info(
            "Address validator ready",
            extra={
                "event": "service.ready",
                "provider": app_config.provider.type,
                "timeout_ms": app_config.circuit_breaker.timeout_ms,
                "error_threshold_percentage": app_config.circuit_breaker.error_threshold_percentage,
                "reset_timeout_ms": app_config.circuit_breaker.reset_timeout_ms,
            },
        )

        result = service.validate_address(args.address, request_id=request_id)
        print(json.dumps(result.to_response(), indent=2))
        return EXIT_OK

    except ConfigurationError as e:
        print(f"Configuration Error: {e}", file=sys.stderr)
        logger.error(
            f"Configuration error: {e.message}",
            extra={"event": "config.error", "error_type": "ConfigurationError"},
        )
        return EXIT_FAILURE
    except AddressValidationError as e:
        print(json.dumps(error_response(e, request_id=request_id), indent=2))
        return exit_code_for(e)
    except KeyboardInterrupt:
        print("\nInterrupted by user", file=sys.stderr)
        return EXIT_FAILURE
    except Exception as e:
        logger.critical(
            "Unexpected error during validation",
            extra={
                "event": "service.failed",
                "error_type": type(e).__name__,
                "error": str(e),
            },
            exc_info=True,
        )
        print(json.dumps(error_response(e, request_id=request_id), indent=2))
        return EXIT_FAILURE
    finally:
        if service is not None:
            service.adapter.provider.close()
            service.adapter.breaker.shutdown(wait=False)


if __name__ == "__main__":
    sys.exit(main())
