"""Utilities for working with minute amounts in TimeBank."""

from __future__ import annotations

import math
from decimal import Decimal, InvalidOperation, ROUND_FLOOR
from typing import Union

MinutesLike = Union[int, float, str, Decimal]


def to_minutes(value: MinutesLike) -> int:
    """Convert ``value`` to a whole number of minutes, rejecting fractions."""

    if isinstance(value, bool):
        raise TypeError("Booleans are not minute amounts.")
    if isinstance(value, int):
        return value
    if isinstance(value, (float, Decimal, str)):
        try:
            number = Decimal(str(value).strip())
        except InvalidOperation as exc:
            raise ValueError(f"Not a number of minutes: {value!r}") from exc
        if not number.is_finite() or number != number.to_integral_value():
            raise ValueError(f"Minutes must be a whole number, got {value!r}.")
        return int(number)
    raise TypeError(f"Unsupported minute type: {type(value)!r}")


def require_positive(minutes: int, *, allow_zero: bool = False) -> int:
    """Ensure ``minutes`` is positive (or non-negative when ``allow_zero`` is true)."""

    if allow_zero:
        if minutes < 0:
            raise ValueError("Minutes must be zero or greater.")
    else:
        if minutes <= 0:
            raise ValueError("Minutes must be greater than zero.")
    return minutes


def apply_multiplier(minutes: int, multiplier: float) -> int:
    """Return ``floor(minutes * multiplier)`` computed in decimal arithmetic."""

    if not math.isfinite(multiplier):
        raise ValueError("multiplier must be finite")
    product = Decimal(minutes) * Decimal(str(multiplier))
    return int(product.to_integral_value(rounding=ROUND_FLOOR))


def format_minutes(minutes: int) -> str:
    """Return ``minutes`` as a short human readable string (e.g. ``2h 05m``)."""

    sign = "-" if minutes < 0 else ""
    hours, rest = divmod(abs(minutes), 60)
    if not hours:
        return f"{sign}{rest}m"
    return f"{sign}{hours}h {rest:02d}m"
