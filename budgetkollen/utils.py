"""Assorted utility helpers."""
from __future__ import annotations

import math


def nz(x, default=0.0):
    """Return a float for ``x`` or a fallback value.

    Form fields arrive as ``None``, empty strings or half-typed text while the
    user is still editing.  This helper mirrors the spreadsheet ``NZ()``
    function and keeps later math from breaking when a value is missing or
    not a finite number.
    """

    try:
        if x is None or isinstance(x, bool):
            return default
        if isinstance(x, str):
            x = x.strip().replace("\u00a0", "").replace(" ", "").replace(",", ".")
            if not x:
                return default
        value = float(x)
    except (TypeError, ValueError):
        return default
    if not math.isfinite(value):
        return default
    return value


def non_negative(x) -> float:
    """Coerce to a finite float and clamp below at zero."""
    return max(0.0, nz(x))


def is_finite_number(value) -> bool:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return False
    return math.isfinite(value)


def safe_div(num: float, denom: float) -> float:
    """Divide, returning ``0`` for a non-positive denominator."""
    return num / denom if denom > 0 else 0.0
