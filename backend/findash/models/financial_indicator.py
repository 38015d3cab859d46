"""
financial_indicator.py — ORM Model for Quarterly Financial Records

Purpose:
- One row per (company, year, quarter_number) holding the reported metrics.
- `quarter` is the string key "{year}TRI{quarter_number}" (e.g. "2024TRI1").

Key Rules:
- Every metric column is nullable: NULL means "not reported", never zero.
- (company_id, year, quarter_number) uniqueness is enforced by an existence
  check before insertion (see services/financials.py), not by a constraint.
- Metric columns mirror core.metric_registry.METRIC_FIELDS.
"""

import datetime

from sqlalchemy import Column, DateTime, Float, ForeignKey, Index, Integer, String
from sqlalchemy.orm import relationship

from findash.core.database import Base


def quarter_key(year: int, quarter_number: int) -> str:
    return f"{year}TRI{quarter_number}"


class FinancialIndicator(Base):
    __tablename__ = "financial_indicators"

    id = Column(Integer, primary_key=True, index=True)

    company_id = Column(
        Integer, ForeignKey("companies.id", ondelete="CASCADE"), nullable=False
    )

    # Period identity
    year = Column(Integer, nullable=False)
    quarter_number = Column(Integer, nullable=False)  # 1-4
    quarter = Column(String, nullable=False)

    # Revenue and operational
    receitas_bens_servicos = Column(Float, nullable=True)
    custo_receita_operacional = Column(Float, nullable=True)
    despesas_operacionais_total = Column(Float, nullable=True)
    lucro_operacional_antes_receita_despesa_nao_recorrente = Column(Float, nullable=True)
    lucro_liquido_apos_impostos = Column(Float, nullable=True)
    lucro_por_acao = Column(Float, nullable=True)

    # Cash flow
    caixa_equivalentes_caixa = Column(Float, nullable=True)
    fluxo_caixa_liquido_atividades_operacionais = Column(Float, nullable=True)
    variacao_liquida_caixa_total = Column(Float, nullable=True)

    # Working capital and debt
    capital_giro = Column(Float, nullable=True)
    endividamento_total = Column(Float, nullable=True)
    percentual_divida_total_ativo_total = Column(Float, nullable=True)

    # Liquidity
    liquidez_geral = Column(Float, nullable=True)
    liquidez_corrente = Column(Float, nullable=True)

    # Profitability
    ebit = Column(Float, nullable=True)
    ebitda = Column(Float, nullable=True)
    margem_ebitda_percent = Column(Float, nullable=True)
    margem_lucro_bruto_percent = Column(Float, nullable=True)
    margem_operacional_percent = Column(Float, nullable=True)
    margem_liquida_percent = Column(Float, nullable=True)

    # Returns (percent)
    roic = Column(Float, nullable=True)
    roe = Column(Float, nullable=True)
    roa = Column(Float, nullable=True)
    dividend_yield = Column(Float, nullable=True)

    created_at = Column(DateTime, default=datetime.datetime.utcnow, nullable=False)
    updated_at = Column(
        DateTime,
        default=datetime.datetime.utcnow,
        onupdate=datetime.datetime.utcnow,
        nullable=False,
    )

    company = relationship("Company", back_populates="indicators")

    __table_args__ = (
        Index("idx_indicators_company_period", "company_id", "year", "quarter_number"),
        Index("idx_indicators_company_quarter", "company_id", "quarter"),
    )

    def __repr__(self):
        return f"<FinancialIndicator company={self.company_id} {self.quarter}>"
