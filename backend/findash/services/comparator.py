"""
comparator.py — Quarter-over-quarter and year-over-year comparisons

Given a company's quarterly history, this module locates the record holding a
value, then pulls the previous quarter and the same quarter of the prior year
for the same field, and turns (current, previous) pairs into a percentage
change with a trend direction.

Records may be ORM objects or plain dicts; both expose `year`,
`quarter_number`, `quarter` and the metric fields.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Any, List, Mapping, Optional, Sequence

TREND_UP = "up"
TREND_DOWN = "down"
TREND_NEUTRAL = "neutral"


@dataclass
class Comparison:
    change_percent: float
    trend: str


@dataclass
class ComparisonPoints:
    previous_quarter: Optional[float]
    same_quarter_last_year: Optional[float]


@dataclass
class ChartPoint:
    quarter: str
    value: float


def _field(record: Any, name: str) -> Any:
    if record is None:
        return None
    if isinstance(record, Mapping):
        return record.get(name)
    return getattr(record, name, None)


def sort_quarters(records: Sequence[Any]) -> List[Any]:
    """Most recent first: year descending, then quarter_number descending."""
    return sorted(
        records,
        key=lambda r: (_field(r, "year"), _field(r, "quarter_number")),
        reverse=True,
    )


def classify_trend(change_percent: float) -> str:
    if change_percent > 0:
        return TREND_UP
    if change_percent < 0:
        return TREND_DOWN
    return TREND_NEUTRAL


def compare(current: Optional[float], previous: Optional[float]) -> Optional[Comparison]:
    """
    Percentage change from `previous` to `current`.

    Returns None when either side is missing or previous is zero, so callers
    never see inf or NaN.
    """
    if current is None or previous is None or previous == 0:
        return None
    if math.isnan(current) or math.isnan(previous):
        return None

    change = (current - previous) / abs(previous) * 100
    return Comparison(change_percent=change, trend=classify_trend(change))


def find_comparison_points(
    records: Sequence[Any],
    current: Optional[float],
    field: str,
) -> Optional[ComparisonPoints]:
    """
    Locate `current` in `records[*].field` and return its comparison values.

    Args:
        records: A company's quarterly records, in any order
        current: The value being compared (matched by equality; first wins)
        field: Metric field name

    Returns:
        ComparisonPoints, or None when current is None or 0, the series is
        empty, or no record carries `current` for `field`.
    """
    if current is None or current == 0 or not records:
        return None

    ordered = sort_quarters(records)
    index = next(
        (i for i, record in enumerate(ordered) if _field(record, field) == current),
        None,
    )
    if index is None:
        return None

    match = ordered[index]
    previous = ordered[index + 1] if index + 1 < len(ordered) else None
    last_year = next(
        (
            record for record in ordered
            if _field(record, "year") == _field(match, "year") - 1
            and _field(record, "quarter_number") == _field(match, "quarter_number")
        ),
        None,
    )

    return ComparisonPoints(
        previous_quarter=_field(previous, field),
        same_quarter_last_year=_field(last_year, field),
    )


def chart_series(records: Sequence[Any], field: str) -> List[ChartPoint]:
    """Reported values of `field`, oldest quarter first."""
    ordered = sort_quarters(records)
    ordered.reverse()
    return [
        ChartPoint(quarter=_field(record, "quarter"), value=_field(record, field))
        for record in ordered
        if _field(record, field) is not None
    ]
