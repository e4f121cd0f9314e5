"""
Safe money formatting utilities for SWAPSIM.

All display strings handed to renderers are produced here, so consumers
never recompute or reformat numeric fields.
"""

from decimal import Decimal, InvalidOperation, ROUND_HALF_UP, localcontext
from typing import Union

from core.constants import SOL_DECIMALS


def format_money(value: Union[str, Decimal, int, float, None], decimals: int = 6) -> str:
    """
    Safely format a money value to string with specified decimal places.

    Handles str, Decimal, int, float (via str), bool and None.
    Uses ROUND_HALF_UP (0.005 -> 0.01 with 2 decimals).
    Never raises on valid numeric input.

    Example:
        >>> format_money("123.45")
        '123.450000'
        >>> format_money(None)
        '0.000000'
    """
    zero = f"0.{'0' * decimals}" if decimals > 0 else "0"
    if value is None:
        return zero

    try:
        if isinstance(value, str):
            if not value.strip():
                return zero
            dec_value = Decimal(value)
        elif isinstance(value, Decimal):
            dec_value = value
        elif isinstance(value, bool):
            # bool is a subclass of int
            dec_value = Decimal(1 if value else 0)
        else:
            dec_value = Decimal(str(value))

        with localcontext() as ctx:
            ctx.prec = 50
            quantize_str = "0." + "0" * decimals if decimals > 0 else "0"
            rounded = dec_value.quantize(Decimal(quantize_str), rounding=ROUND_HALF_UP)

        return f"{rounded:.{decimals}f}"

    except (InvalidOperation, ValueError, TypeError):
        return zero


def format_lamports_as_sol(lamports: int) -> str:
    """
    Format a lamport amount as SOL.

    Example:
        >>> format_lamports_as_sol(5000)
        '0.000005000 SOL'
    """
    sol = Decimal(lamports).scaleb(-SOL_DECIMALS)
    return f"{format_money(sol, SOL_DECIMALS)} SOL"


def format_usd(value: Union[str, Decimal, int, float, None]) -> str:
    """Format a fiat value as dollars with cents, e.g. "$0.14"."""
    return f"${format_money(value, 2)}"


def format_pct(value: Union[str, Decimal, int, float, None]) -> str:
    """
    Format a percentage value.

    Args:
        value: Percentage value (0.1 = 0.1%)

    Returns:
        Formatted string like "0.105%"
    """
    return f"{format_money(value, 3)}%"
