"""
brapi_schema.py — Typed view of a brapi.dev quote payload.

Every field is optional: a missing section or value is None (or an empty
list), never zero. Validating the raw JSON into these models happens before
any derived value is computed, so a change in the provider's payload shape
fails here and not inside the mapping arithmetic.

The provider has served the quarterly histories both as bare lists and
wrapped in an object, e.g. `{"balanceSheetStatements": [...]}`; both are
accepted.
"""

from __future__ import annotations

import datetime
from typing import Annotated, Any, List, Optional

from pydantic import BaseModel, BeforeValidator, ConfigDict, Field, field_validator


def _coerce_number(value: Any) -> Any:
    # Yahoo-style {"raw": 1.0, "fmt": "1.00"} wrappers
    if isinstance(value, dict):
        return value.get("raw")
    if isinstance(value, str) and not value.strip():
        return None
    return value


def _coerce_date(value: Any) -> Any:
    if isinstance(value, dict):
        value = value.get("raw")
    if value is None or isinstance(value, datetime.date):
        return value
    if isinstance(value, (int, float)):
        # epoch seconds
        try:
            return datetime.datetime.fromtimestamp(value, tz=datetime.timezone.utc).date()
        except (OverflowError, OSError) as e:
            raise ValueError(f"endDate fora do intervalo: {value}") from e
    if isinstance(value, str):
        text = value.strip()
        if not text:
            return None
        return datetime.date.fromisoformat(text[:10])
    return value


Amount = Annotated[Optional[float], BeforeValidator(_coerce_number)]
PeriodEnd = Annotated[Optional[datetime.date], BeforeValidator(_coerce_date)]


def _unwrap_statements(value: Any, key: str) -> Any:
    if value is None:
        return []
    if isinstance(value, dict):
        value = value.get(key) or []
    if isinstance(value, list):
        return [item for item in value if item is not None]
    return value


class _Section(BaseModel):
    model_config = ConfigDict(extra="ignore", populate_by_name=True)


class BalanceSheetEntry(_Section):
    end_date: PeriodEnd = Field(None, alias="endDate")
    cash: Amount = None
    total_current_assets: Amount = Field(None, alias="totalCurrentAssets")
    total_current_liabilities: Amount = Field(None, alias="totalCurrentLiabilities")
    total_assets: Amount = Field(None, alias="totalAssets")
    total_liab: Amount = Field(None, alias="totalLiab")
    total_debt: Amount = Field(None, alias="totalDebt")


class IncomeStatementEntry(_Section):
    end_date: PeriodEnd = Field(None, alias="endDate")
    total_revenue: Amount = Field(None, alias="totalRevenue")
    cost_of_revenue: Amount = Field(None, alias="costOfRevenue")
    gross_profit: Amount = Field(None, alias="grossProfit")
    total_operating_expenses: Amount = Field(None, alias="totalOperatingExpenses")
    operating_income: Amount = Field(None, alias="operatingIncome")
    ebit: Amount = None
    ebitda: Amount = None
    net_income: Amount = Field(None, alias="netIncome")
    net_income_ratio: Amount = Field(None, alias="netIncomeRatio")
    eps: Amount = None


class CashFlowEntry(_Section):
    end_date: PeriodEnd = Field(None, alias="endDate")
    total_cash_from_operating_activities: Amount = Field(
        None, alias="totalCashFromOperatingActivities"
    )
    change_in_cash: Amount = Field(None, alias="changeInCash")


class FinancialDataSection(_Section):
    return_on_equity: Amount = Field(None, alias="returnOnEquity")
    return_on_assets: Amount = Field(None, alias="returnOnAssets")
    return_on_invested_capital: Amount = Field(None, alias="returnOnInvestedCapital")
    dividend_yield: Amount = Field(None, alias="dividendYield")
    earnings_per_share: Amount = Field(None, alias="earningsPerShare")


class QuoteResult(_Section):
    symbol: Optional[str] = None
    regular_market_price: Amount = Field(None, alias="regularMarketPrice")
    balance_sheets: List[BalanceSheetEntry] = Field(
        default_factory=list, alias="balanceSheetHistoryQuarterly"
    )
    income_statements: List[IncomeStatementEntry] = Field(
        default_factory=list, alias="incomeStatementHistory"
    )
    cash_flows: List[CashFlowEntry] = Field(
        default_factory=list, alias="cashflowHistoryQuarterly"
    )
    financial_data: Optional[FinancialDataSection] = Field(None, alias="financialData")

    @field_validator("balance_sheets", mode="before")
    @classmethod
    def unwrap_balance_sheets(cls, v: Any) -> Any:
        return _unwrap_statements(v, "balanceSheetStatements")

    @field_validator("income_statements", mode="before")
    @classmethod
    def unwrap_income_statements(cls, v: Any) -> Any:
        return _unwrap_statements(v, "incomeStatementHistory")

    @field_validator("cash_flows", mode="before")
    @classmethod
    def unwrap_cash_flows(cls, v: Any) -> Any:
        return _unwrap_statements(v, "cashflowStatements")

    @property
    def latest_balance_sheet(self) -> Optional[BalanceSheetEntry]:
        return self.balance_sheets[0] if self.balance_sheets else None

    @property
    def latest_income_statement(self) -> Optional[IncomeStatementEntry]:
        return self.income_statements[0] if self.income_statements else None

    @property
    def latest_cash_flow(self) -> Optional[CashFlowEntry]:
        return self.cash_flows[0] if self.cash_flows else None


class QuoteResponse(_Section):
    results: List[Optional[QuoteResult]] = Field(default_factory=list)

    @field_validator("results", mode="before")
    @classmethod
    def none_as_empty(cls, v: Any) -> Any:
        return [] if v is None else v

    @property
    def first_result(self) -> Optional[QuoteResult]:
        return self.results[0] if self.results else None
