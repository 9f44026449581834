"""Shared pytest fixtures."""

import pytest

from address_validation.domain.models import AddressComponents, ProviderCandidate
from address_validation.logging.context import clear_log_context

ENV_VARS = (
    "SMARTY_AUTH_ID",
    "SMARTY_AUTH_TOKEN",
    "SMARTY_LICENSES",
    "SMARTY_MAX_CANDIDATES",
    "SMARTY_MATCH_STRATEGY",
    "CIRCUIT_BREAKER_TIMEOUT",
    "CIRCUIT_BREAKER_ERROR_THRESHOLD",
    "CIRCUIT_BREAKER_RESET_TIMEOUT",
    "LOG_LEVEL",
    "LOG_FORMAT",
    "ENVIRONMENT",
)


@pytest.fixture
def clean_env(monkeypatch):
    """Remove every variable the service reads from the environment."""
    for name in ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    return monkeypatch


@pytest.fixture
def mock_env_vars(clean_env):
    """Set the required provider credentials."""
    clean_env.setenv("SMARTY_AUTH_ID", "test-auth-id")
    clean_env.setenv("SMARTY_AUTH_TOKEN", "test-auth-token")
    return clean_env


@pytest.fixture(autouse=True)
def reset_log_context():
    """Keep logging context from leaking between tests."""
    clear_log_context()
    yield
    clear_log_context()


@pytest.fixture
def confirmed_candidate():
    """Deliverable candidate matching '1600 Amphitheatre Pkwy, Mountain View CA 94043-1351'."""
    return ProviderCandidate(
        delivery_line_1="1600 Amphitheatre Pkwy",
        last_line="Mountain View CA 94043-1351",
        components=AddressComponents(
            primary_number="1600",
            street_name="Amphitheatre",
            street_suffix="Pkwy",
            city="Mountain View",
            state="CA",
            zipcode="94043",
            plus4_code="1351",
        ),
        match_signal="Y",
    )


@pytest.fixture
def missing_unit_candidate():
    """Candidate for a building that requires a unit the caller did not give."""
    return ProviderCandidate(
        delivery_line_1="350 5th Ave",
        last_line="New York NY 10118-0110",
        components=AddressComponents(
            primary_number="350",
            street_name="5th",
            street_suffix="Ave",
            city="New York",
            state="NY",
            zipcode="10118",
            plus4_code="0110",
        ),
        match_signal="D",
        footnotes=["AA", "N1"],
    )
