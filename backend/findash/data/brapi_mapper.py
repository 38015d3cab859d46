"""
brapi_mapper.py — Map a brapi.dev quote payload onto a quarterly record.

This module converts the most recent balance sheet, income statement, cash
flow statement and financialData block of one quote result into the fields
of a `financial_indicators` row, including the values derived from raw
statement lines (working capital, liquidity ratios, margins).
"""

from __future__ import annotations

import datetime
from dataclasses import asdict, dataclass
from typing import Any, Dict, Optional, Tuple

from pydantic import ValidationError

from findash.core.logging import get_logger
from findash.data.brapi_schema import QuoteResponse, QuoteResult
from findash.models.financial_indicator import quarter_key

logger = get_logger(__name__)


class QuotePayloadError(ValueError):
    """The quote payload has no usable data for a quarterly record."""


@dataclass
class QuarterRecord:
    """
    One quarter of metrics mapped from the external API.

    Field names match FinancialIndicator columns; None means not reported.
    """
    year: int
    quarter_number: int
    quarter: str

    # Revenue and operational
    receitas_bens_servicos: Optional[float] = None
    custo_receita_operacional: Optional[float] = None
    despesas_operacionais_total: Optional[float] = None
    lucro_operacional_antes_receita_despesa_nao_recorrente: Optional[float] = None
    lucro_liquido_apos_impostos: Optional[float] = None
    lucro_por_acao: Optional[float] = None

    # Cash flow
    caixa_equivalentes_caixa: Optional[float] = None
    fluxo_caixa_liquido_atividades_operacionais: Optional[float] = None
    variacao_liquida_caixa_total: Optional[float] = None

    # Working capital and debt
    capital_giro: Optional[float] = None
    endividamento_total: Optional[float] = None
    percentual_divida_total_ativo_total: Optional[float] = None

    # Liquidity
    liquidez_geral: Optional[float] = None
    liquidez_corrente: Optional[float] = None

    # Profitability
    ebit: Optional[float] = None
    ebitda: Optional[float] = None
    margem_ebitda_percent: Optional[float] = None
    margem_lucro_bruto_percent: Optional[float] = None
    margem_operacional_percent: Optional[float] = None
    margem_liquida_percent: Optional[float] = None

    # Returns
    roic: Optional[float] = None
    roe: Optional[float] = None
    roa: Optional[float] = None
    dividend_yield: Optional[float] = None

    def to_row(self) -> Dict[str, Any]:
        return asdict(self)


# -----------------------------------------------------------------------------
# Helpers
# -----------------------------------------------------------------------------

def _nonzero(*values: Optional[float]) -> bool:
    """True when every operand is reported and different from zero."""
    return all(v is not None and v != 0 for v in values)


def _ratio(numerator: Optional[float], denominator: Optional[float], scale: float = 1.0) -> Optional[float]:
    if not _nonzero(numerator, denominator):
        return None
    return numerator / denominator * scale


def _difference(minuend: Optional[float], subtrahend: Optional[float]) -> Optional[float]:
    if not _nonzero(minuend, subtrahend):
        return None
    return minuend - subtrahend


def _as_percent(fraction: Optional[float]) -> Optional[float]:
    if fraction is None:
        return None
    return fraction * 100


def quarter_from_date(period_end: datetime.date) -> Tuple[int, int, str]:
    """(year, quarter_number, quarter key) of the quarter containing `period_end`."""
    quarter_number = (period_end.month + 2) // 3
    return period_end.year, quarter_number, quarter_key(period_end.year, quarter_number)


# -----------------------------------------------------------------------------
# Mapping
# -----------------------------------------------------------------------------

def map_quote_result(result: QuoteResult) -> QuarterRecord:
    """
    Build a QuarterRecord from one validated quote result.

    Raises:
        QuotePayloadError: no quarterly section, or no period end date
    """
    balance_sheet = result.latest_balance_sheet
    income_stmt = result.latest_income_statement
    cash_flow = result.latest_cash_flow
    financial_data = result.financial_data

    if not balance_sheet and not income_stmt and not cash_flow:
        raise QuotePayloadError("Nenhum dado trimestral encontrado na API")

    period_end = next(
        (
            section.end_date
            for section in (balance_sheet, income_stmt, cash_flow)
            if section is not None and section.end_date is not None
        ),
        None,
    )
    if period_end is None:
        raise QuotePayloadError("Data de encerramento do trimestre ausente na API")

    year, quarter_number, quarter = quarter_from_date(period_end)
    record = QuarterRecord(year=year, quarter_number=quarter_number, quarter=quarter)

    if income_stmt:
        revenue = income_stmt.total_revenue
        record.receitas_bens_servicos = revenue
        record.custo_receita_operacional = income_stmt.cost_of_revenue
        record.despesas_operacionais_total = income_stmt.total_operating_expenses
        record.lucro_operacional_antes_receita_despesa_nao_recorrente = income_stmt.operating_income
        record.lucro_liquido_apos_impostos = income_stmt.net_income
        record.lucro_por_acao = income_stmt.eps
        record.ebit = income_stmt.ebit
        record.ebitda = income_stmt.ebitda

        record.margem_ebitda_percent = _ratio(income_stmt.ebitda, revenue, 100)
        record.margem_operacional_percent = _ratio(income_stmt.operating_income, revenue, 100)
        record.margem_lucro_bruto_percent = _ratio(income_stmt.gross_profit, revenue, 100)
        if _nonzero(income_stmt.net_income_ratio):
            record.margem_liquida_percent = income_stmt.net_income_ratio * 100

    if balance_sheet:
        record.caixa_equivalentes_caixa = balance_sheet.cash
        record.endividamento_total = balance_sheet.total_debt
        record.capital_giro = _difference(
            balance_sheet.total_current_assets, balance_sheet.total_current_liabilities
        )
        record.percentual_divida_total_ativo_total = _ratio(
            balance_sheet.total_debt, balance_sheet.total_assets, 100
        )
        record.liquidez_corrente = _ratio(
            balance_sheet.total_current_assets, balance_sheet.total_current_liabilities
        )
        record.liquidez_geral = _ratio(balance_sheet.total_assets, balance_sheet.total_liab)

    if cash_flow:
        record.fluxo_caixa_liquido_atividades_operacionais = (
            cash_flow.total_cash_from_operating_activities
        )
        record.variacao_liquida_caixa_total = cash_flow.change_in_cash

    if financial_data:
        record.roe = _as_percent(financial_data.return_on_equity)
        record.roa = _as_percent(financial_data.return_on_assets)
        record.roic = _as_percent(financial_data.return_on_invested_capital)
        record.dividend_yield = _as_percent(financial_data.dividend_yield)
        if record.lucro_por_acao is None:
            record.lucro_por_acao = financial_data.earnings_per_share

    logger.debug(f"Mapped quote {result.symbol or '?'} to quarter {quarter}")
    return record


def map_quote_payload(payload: Dict[str, Any]) -> QuarterRecord:
    """
    Validate a raw quote payload and map its first result.

    Raises:
        QuotePayloadError: payload shape is invalid, has no result, or has no
            usable quarterly section
    """
    try:
        response = QuoteResponse.model_validate(payload)
    except ValidationError as e:
        logger.warning("Quote payload failed validation: %s", e)
        raise QuotePayloadError("Formato inesperado na resposta da API") from e

    result = response.first_result
    if result is None:
        raise QuotePayloadError("Dados não encontrados na API")

    return map_quote_result(result)
