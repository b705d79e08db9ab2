"""Unit tests for utils.py functions."""

from __future__ import annotations

import pytest

from chainkit.utils import format_units, hex_to_int, parse_units, strip_0x


class TestStrip0x:
    def test_strips_lower_and_upper(self) -> None:
        assert strip_0x("0xabc") == "abc"
        assert strip_0x("0XABC") == "ABC"

    def test_leaves_bare_hex(self) -> None:
        assert strip_0x("abc") == "abc"


class TestHexToInt:
    def test_values(self) -> None:
        assert hex_to_int("0x10") == 16
        assert hex_to_int("0x7a69") == 31337

    def test_empty(self) -> None:
        assert hex_to_int(None) == 0
        assert hex_to_int("") == 0
        assert hex_to_int("0x") == 0


class TestFormatUnits:
    """Test raw-amount rendering."""

    def test_whole_and_fraction(self) -> None:
        assert format_units(10**18) == "1"
        assert format_units(15 * 10**17) == "1.5"
        assert format_units(1) == "0.000000000000000001"

    def test_zero(self) -> None:
        assert format_units(0) == "0"

    def test_custom_decimals(self) -> None:
        assert format_units(1_234_500, 6) == "1.2345"
        assert format_units(42, 0) == "42"


class TestParseUnits:
    """Test human-amount parsing."""

    def test_values(self) -> None:
        assert parse_units("1") == 10**18
        assert parse_units("1.5") == 15 * 10**17
        assert parse_units("0.001") == 10**15
        assert parse_units("2", 6) == 2_000_000

    def test_too_many_decimals(self) -> None:
        with pytest.raises(ValueError, match="decimal places"):
            parse_units("0.0000001", 6)

    def test_invalid(self) -> None:
        with pytest.raises(ValueError, match="Invalid amount"):
            parse_units("ten")

    def test_non_finite(self) -> None:
        for text in ("Infinity", "-inf", "NaN"):
            with pytest.raises(ValueError, match="Invalid amount"):
                parse_units(text)

    def test_inverse_of_format(self) -> None:
        for raw in (0, 1, 10**18, 123456789012345678901):
            assert parse_units(format_units(raw)) == raw
