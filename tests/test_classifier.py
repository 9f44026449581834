"""Unit tests for match-signal status classification."""

import pytest

from address_validation.domain.models import MatchSignal, ValidationStatus
from address_validation.validation.classifier import base_status, classify_status


class TestBaseStatus:
    """Tests for the signal -> status table."""

    @pytest.mark.parametrize(
        "signal,expected",
        [
            ("Y", ValidationStatus.VALID),
            ("S", ValidationStatus.CORRECTED),
            ("D", ValidationStatus.UNVERIFIABLE),
            ("N", ValidationStatus.INVALID),
            ("", ValidationStatus.INVALID),
            (None, ValidationStatus.INVALID),
            ("X", ValidationStatus.INVALID),
        ],
    )
    def test_raw_codes(self, signal, expected):
        assert base_status(signal) == expected

    def test_accepts_enum_members(self):
        assert base_status(MatchSignal.SECONDARY_MISSING) == ValidationStatus.UNVERIFIABLE

    @pytest.mark.parametrize("raw", ["y", " Y", "Y ", "s", "d", "YES", "X", None])
    def test_codes_outside_the_table_are_invalid(self, raw):
        """Test that only the exact Y, S and D codes leave the invalid bucket."""
        assert base_status(raw) == ValidationStatus.INVALID
        assert classify_status(raw, "1 main st", "1 main st") == ValidationStatus.INVALID


class TestClassifyStatus:
    """Tests for classification with the valid -> corrected promotion."""

    def test_confirmed_and_identical_is_valid(self):
        assert classify_status("Y", "1 main st", "1 main st") == ValidationStatus.VALID

    def test_confirmed_but_different_is_corrected(self):
        """Test that a confirmed match whose text changed is reported as corrected."""
        assert classify_status("Y", "1 main street", "1 main st") == ValidationStatus.CORRECTED

    @pytest.mark.parametrize(
        "signal,expected",
        [
            ("S", ValidationStatus.CORRECTED),
            ("D", ValidationStatus.UNVERIFIABLE),
            ("N", ValidationStatus.INVALID),
            ("", ValidationStatus.INVALID),
        ],
    )
    def test_other_signals_are_never_promoted(self, signal, expected):
        """Test that only a valid base status is affected by text differences."""
        assert classify_status(signal, "1 main street", "1 main st") == expected
        assert classify_status(signal, "1 main st", "1 main st") == expected
