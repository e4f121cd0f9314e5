"""
Math utilities for SWAPSIM.

Amounts are converted through Decimal so that human amounts like 1.999999999
are never rounded up when turned into base units.
"""

from decimal import Decimal, InvalidOperation, ROUND_FLOOR
from typing import Sequence, Union

from core.exceptions import InvalidInputError

Number = Union[str, int, float, Decimal]


def safe_decimal(value: Union[Number, None], default: Decimal = Decimal("0")) -> Decimal:
    """
    Safely convert value to Decimal.

    Floats go through str() so 0.1 stays 0.1 instead of its binary expansion.

    Args:
        value: Value to convert
        default: Default if conversion fails

    Returns:
        Decimal value
    """
    if value is None:
        return default

    try:
        if isinstance(value, Decimal):
            return value
        if isinstance(value, bool):
            return default
        return Decimal(str(value))
    except (InvalidOperation, ValueError, TypeError):
        return default


def to_base_units(amount: Number, decimals: int) -> int:
    """
    Convert a human amount to integer base units, truncating.

    Never rounds up, so the request never exceeds what the user typed:
    to_base_units("1.999999999", 6) -> 1999999

    Raises:
        InvalidInputError: amount is not a finite number or decimals < 0
    """
    if decimals < 0:
        raise InvalidInputError(
            f"Token decimals must be non-negative, got {decimals}",
            details={"decimals": decimals},
        )
    try:
        amt = amount if isinstance(amount, Decimal) else Decimal(str(amount))
    except (InvalidOperation, ValueError, TypeError):
        raise InvalidInputError(
            f"Amount is not a number: {amount!r}",
            details={"amount": str(amount)},
        )
    if not amt.is_finite():
        raise InvalidInputError(
            f"Amount is not finite: {amount!r}",
            details={"amount": str(amount)},
        )

    scaled = amt.scaleb(decimals)
    return int(scaled.to_integral_value(rounding=ROUND_FLOOR))


def from_base_units(amount: Union[str, int, Decimal], decimals: int) -> Decimal:
    """
    Convert base units back to a human amount.

    Args:
        amount: Amount in smallest unit
        decimals: Token decimals

    Returns:
        Normalized Decimal amount
    """
    return safe_decimal(amount).scaleb(-decimals)


def ceil_div(numerator: int, denominator: int) -> int:
    """Integer division rounding towards +inf for non-negative inputs."""
    if denominator <= 0:
        raise ValueError("denominator must be positive")
    return -(-numerator // denominator)


def percentile_index(fraction: Decimal, size: int) -> int:
    """
    Index of the given percentile in a sorted sample of `size` items.

    floor(fraction * size), clamped to [0, size - 1].
    """
    if size <= 0:
        raise ValueError("percentile of an empty sample")
    index = int((fraction * size).to_integral_value(rounding=ROUND_FLOOR))
    return max(0, min(index, size - 1))


def percentile(sorted_samples: Sequence[int], fraction: Decimal) -> int:
    """Sample value at the given percentile of an ascending sequence."""
    return sorted_samples[percentile_index(fraction, len(sorted_samples))]
