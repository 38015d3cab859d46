"""
ORM models. Importing this package registers every table on core.database.Base.
"""

from findash.models.company import Company
from findash.models.financial_indicator import FinancialIndicator, quarter_key
from findash.models.indicator_definition import IndicatorDefinition

__all__ = [
    "Company",
    "FinancialIndicator",
    "IndicatorDefinition",
    "quarter_key",
]
