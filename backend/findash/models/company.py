"""
company.py — ORM Model for Company Entities

Purpose:
- Represent a listed company tracked by the dashboard.
- `ticker` is the lookup key against the brapi.dev quote API.
- `categoria` is an optional sector bucket ("Industria" | "Financas").

Important Design Rule:
- This table stores *metadata only*, not financial values.
- Quarterly values live in financial_indicators (see financial_indicator.py).
"""

import datetime

from sqlalchemy import Column, DateTime, Index, Integer, String
from sqlalchemy.orm import relationship

from findash.core.database import Base

CATEGORIA_INDUSTRIA = "Industria"
CATEGORIA_FINANCAS = "Financas"
CATEGORIAS = (CATEGORIA_INDUSTRIA, CATEGORIA_FINANCAS)


class Company(Base):
    __tablename__ = "companies"

    id = Column(Integer, primary_key=True, index=True)

    # Display metadata
    nome = Column(String, nullable=False)
    ticker = Column(String, nullable=False, index=True)
    link_ri = Column(String, nullable=True)  # investor-relations site
    categoria = Column(String, nullable=True)

    created_at = Column(DateTime, default=datetime.datetime.utcnow, nullable=False)
    updated_at = Column(
        DateTime,
        default=datetime.datetime.utcnow,
        onupdate=datetime.datetime.utcnow,
        nullable=False,
    )

    # Deleting a company removes its quarterly records
    indicators = relationship(
        "FinancialIndicator",
        back_populates="company",
        cascade="all, delete-orphan",
    )

    __table_args__ = (
        Index("idx_companies_nome", "nome"),
    )

    def __repr__(self):
        return f"<Company {self.ticker} | {self.nome}>"
