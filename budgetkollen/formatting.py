"""Display helpers pinned to Swedish formatting (sv-SE, SEK).

Grouping uses a non-breaking space, the decimal separator is a comma and the
currency unit ``kr`` is attached with a non-breaking space so it never wraps
onto its own line.  Negative amounts use the Unicode minus sign like the
sv-SE locale does.  Nothing here raises for odd input: non-finite values are
formatted as zero, and ``safe_display`` is available when the UI should show
"no value" instead.
"""
from __future__ import annotations

from budgetkollen.utils import is_finite_number, nz

NBSP = "\u00a0"
MINUS = "\u2212"
NO_VALUE = None


def _sv_number(value: float, decimals: int) -> str:
    text = f"{abs(value):,.{decimals}f}"
    text = text.replace(",", NBSP).replace(".", ",")
    if value < 0 and float(f"{abs(value):.{decimals}f}") != 0:
        return MINUS + text
    return text


def format_currency(amount) -> str:
    """``1234.5`` -> ``"1 234,50 kr"``"""
    return f"{_sv_number(nz(amount), 2)}{NBSP}kr"


def format_currency_no_decimals(amount) -> str:
    """``123456.78`` -> ``"123 457 kr"``"""
    return f"{_sv_number(nz(amount), 0)}{NBSP}kr"


def format_percentage(value) -> str:
    """Percent value with two decimals, ``5.5`` -> ``"5,50 %"``."""
    return f"{_sv_number(nz(value), 2)}{NBSP}%"


def format_percent(value) -> str:
    """Fraction with one decimal, ``0.254`` -> ``"25.4%"``."""
    return f"{nz(value) * 100:.1f}%"


def format_number(value) -> str:
    """Grouped number with up to three decimals, ``123456.78`` -> ``"123 456,78"``."""
    text = _sv_number(nz(value), 3)
    if "," in text:
        text = text.rstrip("0").rstrip(",")
    return text


def _plain(value: float) -> str:
    if float(value).is_integer():
        return str(int(value))
    return str(value)


def format_compact_currency(value) -> str:
    """Short form for chart axes: ``1500000`` -> ``"1.5m"``, ``25000`` -> ``"25k"``."""
    v = nz(value)
    if v >= 1_000_000:
        return f"{v / 1_000_000:.{0 if v >= 10_000_000 else 1}f}m"
    if v >= 1000:
        return f"{v / 1000:.{0 if v >= 10_000 else 1}f}k"
    return _plain(v)


def format_dti_ratio(value) -> str:
    """Debt-to-income multiplier, ``2.5`` -> ``"2.5x"``."""
    return f"{nz(value):.1f}x"


def safe_display(value):
    """Return ``value`` when it is a finite number, else ``NO_VALUE``."""
    return value if is_finite_number(value) else NO_VALUE


def display_currency(value, placeholder: str = "–") -> str:
    shown = safe_display(value)
    if shown is NO_VALUE:
        return placeholder
    return format_currency_no_decimals(shown)
