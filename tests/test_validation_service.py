"""Unit tests for the validation orchestrator."""

import logging
from unittest.mock import Mock

import pytest

from address_validation.domain.models import ValidationStatus
from address_validation.exceptions import ErrorKind, InvalidInputError, NoCandidatesError
from address_validation.logging.context import get_log_context
from address_validation.resilience import CircuitBreaker
from address_validation.validation import AddressValidationService, ProviderAdapter

from tests.helpers import FakeProvider


@pytest.fixture
def breaker():
    breaker = CircuitBreaker(name="fake-lookup", timeout_seconds=2.0)
    yield breaker
    breaker.shutdown(wait=True)


@pytest.fixture
def provider(confirmed_candidate):
    return FakeProvider(candidates=[confirmed_candidate])


@pytest.fixture
def service(provider, breaker):
    return AddressValidationService(ProviderAdapter(provider=provider, breaker=breaker))


class TestInputValidation:
    """Tests for rejecting unusable input before any provider call."""

    @pytest.mark.parametrize("address", ["", "   ", "\t\n"])
    def test_blank_input_is_rejected(self, service, provider, address):
        with pytest.raises(InvalidInputError) as exc_info:
            service.validate_address(address)

        assert exc_info.value.kind == ErrorKind.INVALID_INPUT
        assert exc_info.value.status_code == 400
        assert provider.calls == []

    @pytest.mark.parametrize("address", [None, 123, ["1600 Amphitheatre Pkwy"]])
    def test_non_string_input_is_rejected(self, service, provider, address):
        with pytest.raises(InvalidInputError) as exc_info:
            service.validate_address(address)

        assert exc_info.value.context["input_type"] == type(address).__name__
        assert provider.calls == []

    def test_blank_input_does_not_touch_breaker(self, service, breaker):
        with pytest.raises(InvalidInputError):
            service.validate_address("   ")

        assert breaker.get_state()["total_calls"] == 0


class TestValidateAddress:
    """Tests for the happy path and delegation."""

    def test_input_is_trimmed_before_lookup(self, service, provider):
        result = service.validate_address("  1600 Amphitheatre Pkwy, Mountain View CA 94043-1351  ")

        assert provider.calls == ["1600 Amphitheatre Pkwy, Mountain View CA 94043-1351"]
        assert result.original_input == "1600 Amphitheatre Pkwy, Mountain View CA 94043-1351"
        assert result.status == ValidationStatus.VALID

    def test_adapter_errors_propagate(self, breaker):
        service = AddressValidationService(
            ProviderAdapter(provider=FakeProvider(candidates=[]), breaker=breaker)
        )

        with pytest.raises(NoCandidatesError):
            service.validate_address("nowhere in particular")

    def test_request_id_is_scoped_to_the_call(self, breaker):
        """Test that the request ID is visible during validation and gone afterwards."""
        seen = {}
        adapter = Mock(spec=ProviderAdapter)
        adapter.provider_name = "fake"

        def capture(address):
            seen.update(get_log_context())
            raise NoCandidatesError()

        adapter.validate.side_effect = capture
        service = AddressValidationService(adapter)

        with pytest.raises(NoCandidatesError):
            service.validate_address("1 Main St", request_id="req-123")

        assert seen["request_id"] == "req-123"
        assert "request_id" not in get_log_context()

    def test_address_is_not_logged_at_info(self, service, caplog):
        with caplog.at_level(logging.INFO):
            service.validate_address("1600 Amphitheatre Parkway, Mountain View, CA 94043")

        info_records = [r for r in caplog.records if r.levelno >= logging.INFO]
        assert info_records
        for record in info_records:
            assert "Amphitheatre" not in record.getMessage()
            assert "Amphitheatre" not in str(getattr(record, "address", ""))
            assert "Amphitheatre" not in str(getattr(record, "standardized_address", ""))
