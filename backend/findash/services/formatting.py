"""
formatting.py — Display formatting for metric values

Purpose:
- Render metric values by display unit for cards, tooltips and chart axes.
- Money is Brazilian real with pt-BR separators ("R$ 1.234.567").

Rules:
- None, NaN and infinities always render as NOT_AVAILABLE, never as "0".
- currency   → "R$ 1.234" (no decimals)
- percentage → "12.35%"
- ratio      → "2.50"
"""

import math
from typing import Optional

from findash.core.metric_registry import UNIT_CURRENCY, UNIT_PERCENTAGE, UNIT_RATIO

NOT_AVAILABLE = "N/A"
CURRENCY_SYMBOL = "R$"
MILLIONS_SUFFIX = "milhões"

# en-US grouping → pt-BR grouping
_PT_BR_SEPARATORS = str.maketrans({",": ".", ".": ","})


def is_missing(value: Optional[float]) -> bool:
    """True for None, NaN and infinities."""
    if value is None:
        return True
    try:
        return not math.isfinite(value)
    except TypeError:
        return False


def format_pt_br_number(value: float, decimals: int) -> str:
    """Group thousands with '.' and use ',' as decimal separator."""
    return f"{value:,.{decimals}f}".translate(_PT_BR_SEPARATORS)


def format_currency(value: Optional[float]) -> str:
    if is_missing(value):
        return NOT_AVAILABLE
    digits = format_pt_br_number(abs(value), 0)
    sign = "-" if value < 0 and digits != "0" else ""
    return f"{sign}{CURRENCY_SYMBOL} {digits}"


def format_value(value: Optional[float], unit: str = UNIT_CURRENCY) -> str:
    """
    Format a metric value for display according to its unit.

    Unknown units fall back to the plain string representation.
    """
    if is_missing(value):
        return NOT_AVAILABLE

    if unit == UNIT_CURRENCY:
        return format_currency(value)
    if unit == UNIT_PERCENTAGE:
        return f"{value:.2f}%"
    if unit == UNIT_RATIO:
        return f"{value:.2f}"
    return str(value)


def format_axis_value(value: Optional[float], unit: str = UNIT_CURRENCY) -> str:
    """
    Compact label for chart axes.

    Currency magnitudes are abbreviated (1.5B, 2.3M, 4.0K); anything below
    one thousand, and non-currency units, use format_value.
    """
    if is_missing(value):
        return NOT_AVAILABLE

    if unit == UNIT_CURRENCY:
        if value >= 1_000_000_000:
            return f"{value / 1_000_000_000:.1f}B"
        if value >= 1_000_000:
            return f"{value / 1_000_000:.1f}M"
        if value >= 1_000:
            return f"{value / 1_000:.1f}K"
    return format_value(value, unit)


def format_millions(value: Optional[float]) -> str:
    """
    Headline money figure in millions: "R$ 145,0 milhões".

    Exactly zero renders as "R$ 0".
    """
    if is_missing(value):
        return NOT_AVAILABLE
    if value == 0:
        return f"{CURRENCY_SYMBOL} 0"
    millions = value / 1_000_000
    return f"{CURRENCY_SYMBOL} {format_pt_br_number(millions, 1)} {MILLIONS_SUFFIX}"


def format_change(change_percent: Optional[float]) -> str:
    """Percentage change label shown next to a trend arrow, e.g. "10.0"."""
    if is_missing(change_percent):
        return NOT_AVAILABLE
    return f"{change_percent:.1f}"
