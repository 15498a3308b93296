"""Conversion between human-readable amounts and integer minor units."""

from decimal import ROUND_HALF_UP, Decimal, InvalidOperation, localcontext
from typing import Any

from dex_quoter.core.errors import ResponseParseError

# Enough digits for 2**256 scaled by any realistic decimals value
_PRECISION = 120


def to_minor_units(amount: Decimal | int | str, decimals: int) -> int:
    """
    Convert a human-readable amount to minor units.

    Parameters
    ----------
    amount : Decimal | int | str
        Human amount (e.g., Decimal('1.5') ETH)
    decimals : int
        Token decimals

    Returns
    -------
    int
        amount * 10**decimals, rounded half-up to the nearest integer

    Examples
    --------
    >>> to_minor_units(Decimal("1.5"), 18)
    1500000000000000000

    """
    if decimals < 0:
        msg = f"decimals must be non-negative, got {decimals}"
        raise ValueError(msg)

    with localcontext() as ctx:
        ctx.prec = _PRECISION
        scaled = Decimal(str(amount)).scaleb(decimals)
        return int(scaled.quantize(Decimal(1), rounding=ROUND_HALF_UP))


def from_minor_units(raw: Any, decimals: int) -> Decimal:
    """
    Convert a raw provider amount to a human-readable Decimal.

    Parameters
    ----------
    raw : Any
        Integer amount as int, str, or float (some providers send scientific notation)
    decimals : int
        Token decimals

    Returns
    -------
    Decimal
        raw / 10**decimals

    Raises
    ------
    ResponseParseError
        If raw is missing or not numeric

    """
    if raw is None or isinstance(raw, bool):
        msg = f"Amount is missing or invalid: {raw!r}"
        raise ResponseParseError(msg)

    try:
        value = Decimal(str(raw).strip())
    except InvalidOperation as e:
        msg = f"Amount is not numeric: {raw!r}"
        raise ResponseParseError(msg) from e

    if not value.is_finite():
        msg = f"Amount is not finite: {raw!r}"
        raise ResponseParseError(msg)

    with localcontext() as ctx:
        ctx.prec = _PRECISION
        return value.scaleb(-decimals)


def parse_usd(raw: Any) -> Decimal | None:
    """
    Parse an optional USD figure from a provider payload.

    Returns None when the value is missing, non-numeric, or zero, so callers
    can substitute the chain's fallback fee.
    """
    if raw is None or isinstance(raw, bool):
        return None
    try:
        value = Decimal(str(raw).strip())
    except InvalidOperation:
        return None
    if not value.is_finite() or value == 0:
        return None
    return value
