"""Configuration schema models using Pydantic."""

from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, Field, field_validator


class ProviderType(str, Enum):
    """Supported address verification providers."""

    SMARTY = "smarty"


class MatchStrategy(str, Enum):
    """Smarty match strategies."""

    STRICT = "strict"
    INVALID = "invalid"
    ENHANCED = "enhanced"


class LogLevel(str, Enum):
    """Logging levels."""

    DEBUG = "DEBUG"
    INFO = "INFO"
    WARNING = "WARNING"
    ERROR = "ERROR"
    CRITICAL = "CRITICAL"


class LogFormat(str, Enum):
    """Log output formats."""

    JSON = "json"
    KEY_VALUE = "key-value"


class ProviderConfig(BaseModel):
    """Settings for the external address provider."""

    type: ProviderType = Field(ProviderType.SMARTY, description="Provider implementation")
    max_candidates: int = Field(
        1, ge=1, le=10, description="Candidates to request per lookup (only the first is used)"
    )
    match_strategy: MatchStrategy = Field(MatchStrategy.STRICT, description="Provider match strategy")
    licenses: List[str] = Field(
        default_factory=lambda: ["us-core-cloud"], description="Provider license names"
    )
    base_url: Optional[str] = Field(None, description="Override for the provider endpoint")
    user_agent: str = Field(
        "AddressValidationService/1.0",
        min_length=1,
        description="User-Agent string for HTTP requests",
    )

    @field_validator("licenses")
    @classmethod
    def normalize_licenses(cls, v: List[str]) -> List[str]:
        """Strip whitespace and drop empty license names."""
        return [name.strip() for name in v if name and name.strip()]

    @field_validator("base_url")
    @classmethod
    def validate_base_url(cls, v: Optional[str]) -> Optional[str]:
        if v is None:
            return None
        stripped = v.strip()
        if not stripped:
            return None
        if not stripped.startswith(("http://", "https://")):
            raise ValueError(f"base_url must start with http:// or https://, got: {stripped}")
        return stripped

    @field_validator("user_agent")
    @classmethod
    def strip_user_agent(cls, v: str) -> str:
        stripped = v.strip()
        if not stripped:
            raise ValueError("user_agent cannot be empty")
        return stripped

    model_config = {"use_enum_values": True, "validate_default": True}


class CircuitBreakerConfig(BaseModel):
    """Resilience settings for provider calls. Durations are in milliseconds."""

    timeout_ms: int = Field(10000, ge=100, le=120000, description="Per-call timeout")
    error_threshold_percentage: int = Field(
        50, ge=1, le=100, description="Error rate in the rolling window that opens the circuit"
    )
    reset_timeout_ms: int = Field(
        30000, ge=1000, le=3600000, description="Time spent open before a trial call"
    )
    rolling_window_ms: int = Field(
        10000, ge=1000, le=600000, description="Length of the error-rate window"
    )
    rolling_window_buckets: int = Field(
        10, ge=1, le=100, description="Buckets the rolling window is split into"
    )
    volume_threshold: int = Field(
        0, ge=0, description="Minimum calls in the window before the circuit may open"
    )
    max_workers: Optional[int] = Field(
        None, ge=1, le=256, description="Worker threads for provider calls (default: Python's pool size)"
    )

    @property
    def timeout_seconds(self) -> float:
        return self.timeout_ms / 1000.0

    @property
    def reset_timeout_seconds(self) -> float:
        return self.reset_timeout_ms / 1000.0

    @property
    def rolling_window_seconds(self) -> float:
        return self.rolling_window_ms / 1000.0


class LoggingConfig(BaseModel):
    """Logging configuration."""

    level: LogLevel = Field(LogLevel.INFO, description="Log level")
    format: LogFormat = Field(
        LogFormat.KEY_VALUE, description="Log output format (json or key-value)"
    )

    model_config = {"use_enum_values": True, "validate_default": True}


class AppConfig(BaseModel):
    """Root configuration object for the address validation service."""

    provider: ProviderConfig = Field(default_factory=ProviderConfig, description="Provider settings")
    circuit_breaker: CircuitBreakerConfig = Field(
        default_factory=CircuitBreakerConfig, description="Circuit breaker settings"
    )
    logging: LoggingConfig = Field(
        default_factory=LoggingConfig, description="Logging configuration"
    )
