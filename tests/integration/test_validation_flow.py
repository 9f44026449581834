"""End-to-end validation tests.

Exercises the complete flow from configuration through the orchestrator,
adapter, circuit breaker and Smarty client, with only the HTTP session
replaced. Demonstrates:

- Classification of recorded provider responses
- Error translation for provider failures
- Fail-fast behavior once the circuit opens, and recovery after reset
"""

import json
from pathlib import Path
from unittest.mock import Mock, patch

import pytest
import requests

from address_validation.config import load_config
from address_validation.domain.models import ValidationStatus
from address_validation.exceptions import (
    CircuitOpenError,
    ExternalServiceError,
    NoCandidatesError,
    ProviderTimeoutError,
)
from address_validation.main import build_service
from address_validation.resilience import CircuitState

FIXTURES_DIR = Path(__file__).parent.parent / "fixtures" / "smarty_responses"


def recorded(name):
    with open(FIXTURES_DIR / name) as f:
        body = json.load(f)
    response = Mock()
    response.status_code = 200
    response.reason = "OK"
    response.json.return_value = body
    return response


def http_error(status_code, reason):
    response = Mock()
    response.status_code = status_code
    response.reason = reason
    return response


@pytest.fixture
def service(mock_env_vars, tmp_path):
    """Service built from a config file, as the CLI builds it."""
    config_path = tmp_path / "config.yaml"
    config_path.write_text(
        "circuit_breaker:\n"
        "  timeout_ms: 2000\n"
        "  error_threshold_percentage: 50\n"
        "  reset_timeout_ms: 2000\n"
        "  volume_threshold: 2\n"
    )
    app_config, env_config = load_config(config_path)
    service = build_service(app_config, env_config)

    yield service

    service.adapter.provider.close()
    service.adapter.breaker.shutdown(wait=True)


@pytest.fixture
def session_request(service):
    with patch.object(service.adapter.provider._session, "request") as mock_request:
        yield mock_request


class TestValidationFlow:
    """Recorded provider responses through the whole stack."""

    def test_reworded_address_is_corrected(self, service, session_request):
        session_request.return_value = recorded("valid_address_response.json")

        result = service.validate_address("1600 Amphitheatre Parkway, Mountain View, CA 94043")

        assert result.status == ValidationStatus.CORRECTED
        assert result.standardized_address.full_address == (
            "1600 Amphitheatre Pkwy, Mountain View CA 94043-1351"
        )
        assert result.corrections[0].field == "address"
        params = session_request.call_args.kwargs["params"]
        assert params["street"] == "1600 Amphitheatre Parkway, Mountain View, CA 94043"
        assert params["auth-id"] == "test-auth-id"
        assert params["license"] == "us-core-cloud"

    def test_missing_unit_is_unverifiable(self, service, session_request):
        session_request.return_value = recorded("missing_secondary_response.json")

        result = service.validate_address("350 5th Ave, New York, NY")

        assert result.status == ValidationStatus.UNVERIFIABLE
        assert result.standardized_address.zipcode == "10118-0110"

    def test_unmatched_address_raises_no_candidates(self, service, session_request):
        session_request.return_value = recorded("empty_response.json")

        with pytest.raises(NoCandidatesError):
            service.validate_address("This is not a real address at all")

    def test_socket_timeout_is_reported_as_timeout(self, service, session_request):
        session_request.side_effect = requests.exceptions.ReadTimeout()

        with pytest.raises(ProviderTimeoutError):
            service.validate_address("1 Main St")

    def test_auth_failure_is_external_service_error(self, service, session_request):
        session_request.return_value = http_error(401, "Unauthorized")

        with pytest.raises(ExternalServiceError) as exc_info:
            service.validate_address("1 Main St")

        assert exc_info.value.context["status_code"] == 401
        assert "test-auth-token" not in json.dumps(exc_info.value.to_dict())


class TestCircuitBreakerFlow:
    """Breaker behavior observed through the service."""

    def test_repeated_failures_open_circuit_and_fail_fast(self, service, session_request):
        session_request.return_value = http_error(503, "Service Unavailable")
        breaker = service.adapter.breaker

        for _ in range(2):
            with pytest.raises(ExternalServiceError):
                service.validate_address("1 Main St")

        assert breaker.state == CircuitState.OPEN
        calls_before = session_request.call_count

        with pytest.raises(CircuitOpenError):
            service.validate_address("1600 Amphitheatre Pkwy")

        assert session_request.call_count == calls_before

    def test_recovers_after_reset_timeout(self, service, session_request):
        session_request.return_value = http_error(503, "Service Unavailable")
        breaker = service.adapter.breaker
        for _ in range(2):
            with pytest.raises(ExternalServiceError):
                service.validate_address("1 Main St")
        assert breaker.state == CircuitState.OPEN

        session_request.return_value = recorded("valid_address_response.json")
        with patch.object(breaker, "_clock", return_value=breaker._opened_at + 2.0):
            result = service.validate_address("1600 Amphitheatre Pkwy, Mountain View CA 94043-1351")

            assert result.status == ValidationStatus.VALID
            assert breaker.state == CircuitState.CLOSED
