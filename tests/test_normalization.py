"""Unit tests for address normalization."""

import pytest

from address_validation.normalization import (
    addresses_match,
    build_full_address,
    normalize_address,
)


class TestNormalizeAddress:
    """Tests for normalize_address function."""

    def test_lowercases_and_strips_punctuation(self):
        assert normalize_address("1600 Amphitheatre Pkwy., Mountain View!!") == (
            "1600 amphitheatre pkwy mountain view"
        )

    def test_collapses_whitespace(self):
        """Test that tabs, newlines and runs of spaces become a single space."""
        assert normalize_address("  123   Main\tSt\n Apt 4 ") == "123 main st apt 4"

    def test_punctuation_between_words_becomes_separator(self):
        """Test that punctuation never glues two tokens together."""
        assert normalize_address("Main St,Springfield") == "main st springfield"
        assert normalize_address("Apt#4") == "apt 4"

    def test_underscore_is_treated_as_punctuation(self):
        assert normalize_address("main_st") == "main st"

    @pytest.mark.parametrize("value", [None, "", "   ", ",.;!#"])
    def test_empty_like_input_normalizes_to_empty(self, value):
        assert normalize_address(value) == ""

    def test_non_ascii_letters_are_kept(self):
        assert normalize_address("Cañon City, CO") == "cañon city co"

    @pytest.mark.parametrize(
        "value",
        [
            "1600 Amphitheatre Parkway, Mountain View, CA 94043",
            "  350 5TH AVE -- NEW YORK, NY ",
            "100 N. Main St. Ste #200",
        ],
    )
    def test_normalization_is_idempotent(self, value):
        once = normalize_address(value)
        assert normalize_address(once) == once


class TestAddressesMatch:
    """Tests for addresses_match function."""

    def test_formatting_differences_match(self):
        assert addresses_match(
            "1600 Amphitheatre Pkwy, Mountain View CA 94043-1351",
            "1600 AMPHITHEATRE PKWY MOUNTAIN VIEW CA 94043 1351",
        )

    def test_wording_differences_do_not_match(self):
        assert not addresses_match(
            "1600 Amphitheatre Parkway, Mountain View, CA 94043",
            "1600 Amphitheatre Pkwy, Mountain View CA 94043-1351",
        )


class TestBuildFullAddress:
    """Tests for build_full_address function."""

    def test_single_delivery_line(self):
        assert build_full_address("1600 Amphitheatre Pkwy", None, "Mountain View CA 94043-1351") == (
            "1600 Amphitheatre Pkwy, Mountain View CA 94043-1351"
        )

    def test_second_delivery_line_is_joined_with_space(self):
        assert build_full_address("100 Main St", "Ste 200", "Springfield IL 62701") == (
            "100 Main St Ste 200, Springfield IL 62701"
        )

    def test_blank_second_line_is_ignored(self):
        assert build_full_address("100 Main St", "   ", "Springfield IL 62701") == (
            "100 Main St, Springfield IL 62701"
        )

    def test_missing_last_line(self):
        assert build_full_address("100 Main St", None, "") == "100 Main St"
