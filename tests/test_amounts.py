"""Tests for minor unit conversion."""

from decimal import Decimal

import pytest

from dex_quoter.core.amounts import from_minor_units, parse_usd, to_minor_units
from dex_quoter.core.errors import ResponseParseError


def test_to_minor_units():
    """Test scaling human amounts to integers."""
    assert to_minor_units(Decimal("1"), 18) == 10**18
    assert to_minor_units(Decimal("1.5"), 6) == 1_500_000
    assert to_minor_units("0.000001", 6) == 1
    assert to_minor_units(Decimal("42"), 0) == 42


def test_to_minor_units_rounds_half_up():
    """Test that sub-unit remainders round half-up."""
    assert to_minor_units(Decimal("0.0000005"), 6) == 1
    assert to_minor_units(Decimal("0.0000004"), 6) == 0
    assert to_minor_units(Decimal("1.2345675"), 6) == 1_234_568


def test_to_minor_units_large_values():
    """Test amounts beyond 2**64 keep full precision."""
    assert to_minor_units(Decimal("123456789012345678.123456789012345678"), 18) == (
        123456789012345678123456789012345678
    )


def test_to_minor_units_rejects_negative_decimals():
    """Test that negative decimals are refused."""
    with pytest.raises(ValueError):
        to_minor_units(Decimal("1"), -1)


def test_from_minor_units():
    """Test scaling raw provider amounts down."""
    assert from_minor_units("2500000000", 6) == Decimal("2500")
    assert from_minor_units(1_500_000_000_000_000_000, 18) == Decimal("1.5")
    assert from_minor_units("1e6", 6) == Decimal("1")


def test_conversion_stays_within_one_minor_unit():
    """Test that converting back and forth loses at most one minor unit."""
    for amount, decimals in [("1.23456789", 6), ("0.1", 18), ("99999.999999", 6)]:
        raw = to_minor_units(Decimal(amount), decimals)
        back = from_minor_units(raw, decimals)
        assert abs(back - Decimal(amount)) <= Decimal(1).scaleb(-decimals)


@pytest.mark.parametrize("raw", [None, True, "abc", "", "NaN", "Infinity"])
def test_from_minor_units_rejects_invalid(raw):
    """Test that missing or non-numeric amounts are parse errors."""
    with pytest.raises(ResponseParseError):
        from_minor_units(raw, 6)


def test_parse_usd():
    """Test optional USD figures."""
    assert parse_usd("3.2") == Decimal("3.2")
    assert parse_usd(1.25) == Decimal("1.25")
    assert parse_usd(None) is None
    assert parse_usd("0") is None
    assert parse_usd("n/a") is None
