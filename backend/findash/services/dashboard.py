"""
dashboard.py — Company dashboard view model

Purpose:
- Assemble what the dashboard page shows for one company:
    * headline revenue / net income of the latest quarter (in millions)
    * per metric: chart series, formatted value, comparison card
- Metrics and their order come from core.metric_registry.

Inputs:
- A Company and its quarterly records (any order).

This module does NOT:
- Query the database (callers pass the records in).
"""

from typing import Any, Dict, List, Optional, Sequence

from findash.core.metric_registry import (
    CATEGORIES,
    CATEGORY_LABELS,
    fields_for_category,
    title_for,
    unit_for,
)
from findash.models.company import Company
from findash.models.financial_indicator import FinancialIndicator
from findash.services.comparator import (
    Comparison,
    chart_series,
    compare,
    find_comparison_points,
    sort_quarters,
)
from findash.services.formatting import (
    format_axis_value,
    format_change,
    format_millions,
    format_value,
)


def _comparison_out(comparison: Optional[Comparison]) -> Optional[Dict[str, Any]]:
    if comparison is None:
        return None
    return {
        "change_percent": comparison.change_percent,
        "label": format_change(comparison.change_percent),
        "trend": comparison.trend,
    }


def build_comparison_card(
    records: Sequence[FinancialIndicator],
    field: str,
    current: Optional[float],
) -> Dict[str, Any]:
    """
    Comparison card for `current` against the previous quarter and the same
    quarter of the prior year.
    """
    unit = unit_for(field)
    points = find_comparison_points(records, current, field)
    previous_quarter = points.previous_quarter if points else None
    same_quarter_last_year = points.same_quarter_last_year if points else None

    return {
        "field": field,
        "title": title_for(field),
        "unit": unit,
        "current": current,
        "formatted": format_value(current, unit),
        "previous_quarter": previous_quarter,
        "same_quarter_last_year": same_quarter_last_year,
        "quarter_comparison": _comparison_out(compare(current, previous_quarter)),
        "year_comparison": _comparison_out(compare(current, same_quarter_last_year)),
    }


def build_metric_view(
    records: Sequence[FinancialIndicator],
    latest: FinancialIndicator,
    field: str,
) -> Dict[str, Any]:
    unit = unit_for(field)
    value = getattr(latest, field)
    return {
        "field": field,
        "title": title_for(field),
        "unit": unit,
        "value": value,
        "formatted": format_value(value, unit),
        "chart": [
            {
                "quarter": point.quarter,
                "value": point.value,
                "label": format_value(point.value, unit),
                "axis_label": format_axis_value(point.value, unit),
            }
            for point in chart_series(records, field)
        ],
        "comparison": build_comparison_card(records, field, value),
    }


def build_dashboard(company: Company, records: Sequence[FinancialIndicator]) -> Dict[str, Any]:
    """
    Full dashboard for a company.

    Metrics not reported in the latest quarter are left out of the sections.
    """
    ordered = sort_quarters(records)
    latest = ordered[0] if ordered else None

    sections: List[Dict[str, Any]] = []
    if latest is not None:
        for category in CATEGORIES:
            metrics = [
                build_metric_view(ordered, latest, field)
                for field in fields_for_category(category)
                if getattr(latest, field) is not None
            ]
            if metrics:
                sections.append(
                    {
                        "category": category,
                        "label": CATEGORY_LABELS[category],
                        "metrics": metrics,
                    }
                )

    return {
        "company_id": company.id,
        "nome": company.nome,
        "ticker": company.ticker,
        "link_ri": company.link_ri,
        "latest_quarter": latest.quarter if latest else None,
        "revenue_millions": format_millions(latest.receitas_bens_servicos if latest else None),
        "net_income_millions": format_millions(
            latest.lucro_liquido_apos_impostos if latest else None
        ),
        "sections": sections,
    }
