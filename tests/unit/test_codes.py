"""Unit tests for HS code helpers.

Tests cover:
- Digit-wise cleaning and comparison
- Dotted display formatting
- Structural repair (padding, lost leading zero, trailing zeros)
- Unrepairable codes
"""
import pytest

from customs_engine.services.classification.codes import (
    clean_code,
    codes_equal,
    format_code,
    repair_code,
)


class TestCleanAndCompare:
    """Tests for clean_code / codes_equal."""

    def test_clean_strips_non_digits(self):
        """Dots, spaces and letters are removed."""
        assert clean_code("4820.10.2060") == "4820102060"
        assert clean_code(" HS 4820 10 2060 ") == "4820102060"

    def test_clean_none(self):
        """None cleans to an empty string."""
        assert clean_code(None) == ""

    def test_codes_equal_ignores_formatting(self):
        """Formatting differences do not make codes different."""
        assert codes_equal("4820.10.2060", "4820102060")
        assert not codes_equal("4820.10.2060", "4820.10.2099")

    def test_codes_equal_both_missing(self):
        """Two missing codes compare equal."""
        assert codes_equal(None, "")


class TestFormatCode:
    """Tests for format_code."""

    def test_ten_digits_dotted(self):
        """10-digit codes render as 4-2-4."""
        assert format_code("4820102010") == "4820.10.2010"

    def test_other_lengths_bare(self):
        """Other lengths are returned as bare digits."""
        assert format_code("4820.10") == "482010"


class TestRepairCode:
    """Tests for structural code repair."""

    @pytest.mark.parametrize("raw,expected", [
        ("4820.10.2060", "4820102060"),
        ("4820 10 2060", "4820102060"),
        ("482010", "4820100000"),
        ("4820.10.20", "4820102000"),
        ("901.10.0000", "0901100000"),
        ("482010206000", "4820102060"),
    ])
    def test_structural_repairs(self, raw, expected):
        """Pure structural fixes yield a 10-digit code."""
        assert repair_code(raw) == expected

    @pytest.mark.parametrize("raw", [
        "12345",
        "4820102",
        "482010206012",
        "482.01.02060",
        "482.10.00000",
        "abc",
        "",
        None,
    ])
    def test_unrepairable(self, raw):
        """Codes that would need a guess are not repaired."""
        assert repair_code(raw) is None

    def test_repaired_code_is_ten_digits(self):
        """Every repaired code is exactly 10 numeric characters."""
        for raw in ("4820.10.2060", "482010", "901.10.0000", "48201020600"):
            repaired = repair_code(raw)
            assert repaired is not None
            assert len(repaired) == 10
            assert repaired.isdigit()
