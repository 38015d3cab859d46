"""
companies.py — Company registry operations

Purpose:
- List, search, create, update and delete Company rows.
- Normalize user input (ticker upper-cased, empty categoria stored as NULL).

This module does NOT:
- Raise HTTP errors (the API layer maps None → 404).
"""

from typing import List, Optional

from sqlalchemy import func, or_
from sqlalchemy.orm import Session

from findash.core.database import commit_or_rollback
from findash.core.logging import get_logger
from findash.models.company import CATEGORIAS, Company

logger = get_logger(__name__)


def _clean_categoria(categoria: Optional[str]) -> Optional[str]:
    if not categoria:
        return None
    if categoria not in CATEGORIAS:
        raise ValueError(f"Categoria inválida: {categoria}")
    return categoria


def list_companies(db: Session, search: Optional[str] = None) -> List[Company]:
    """
    All companies ordered by name.

    `search` matches name or ticker, case-insensitively.
    """
    query = db.query(Company)
    if search and search.strip():
        pattern = f"%{search.strip().lower()}%"
        query = query.filter(
            or_(
                func.lower(Company.nome).like(pattern),
                func.lower(Company.ticker).like(pattern),
            )
        )
    return query.order_by(Company.nome).all()


def get_company(db: Session, company_id: int) -> Optional[Company]:
    return db.query(Company).filter(Company.id == company_id).first()


def create_company(
    db: Session,
    nome: str,
    ticker: str,
    link_ri: Optional[str] = None,
    categoria: Optional[str] = None,
) -> Company:
    company = Company(
        nome=nome.strip(),
        ticker=ticker.strip().upper(),
        link_ri=link_ri or None,
        categoria=_clean_categoria(categoria),
    )
    db.add(company)
    commit_or_rollback(db)
    db.refresh(company)
    logger.info("Created company %s (%s)", company.ticker, company.id)
    return company


def update_company(
    db: Session,
    company: Company,
    nome: str,
    ticker: str,
    link_ri: Optional[str] = None,
    categoria: Optional[str] = None,
) -> Company:
    company.nome = nome.strip()
    company.ticker = ticker.strip().upper()
    company.link_ri = link_ri or None
    company.categoria = _clean_categoria(categoria)
    commit_or_rollback(db)
    db.refresh(company)
    logger.info("Updated company %s (%s)", company.ticker, company.id)
    return company


def delete_company(db: Session, company: Company) -> None:
    """Delete a company together with its quarterly records."""
    db.delete(company)
    commit_or_rollback(db)
    logger.info("Deleted company %s (%s)", company.ticker, company.id)
