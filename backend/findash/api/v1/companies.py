"""
companies.py — Company registry endpoints (API Layer)

Purpose:
- List and search the companies followed on the dashboard.
- Create / update / delete a company.
    • GET    /companies?search=   → companies ordered by name
    • GET    /companies/{id}      → single company or 404
    • POST   /companies           → create
    • PUT    /companies/{id}      → update
    • DELETE /companies/{id}      → delete (quarterly records go with it)

Key Interactions:
- findash.services.companies → queries and writes.
- findash.core.database → DB session.

This module does NOT:
- Touch financial records directly (see api/v1/financials.py).
"""

from datetime import datetime
from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Response
from pydantic import BaseModel, ConfigDict, Field
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from findash.core.database import get_db
from findash.core.logging import get_logger
from findash.services import companies as company_service

logger = get_logger(__name__)

router = APIRouter(
    prefix="/companies",
    tags=["companies"]
)

# -----------------------------------------------------------------------------
# Schemas
# -----------------------------------------------------------------------------

class CompanyIn(BaseModel):
    nome: str = Field(..., min_length=1)
    ticker: str = Field(..., min_length=1)
    link_ri: Optional[str] = None
    categoria: Optional[str] = None


class CompanyOut(BaseModel):
    """Response schema for a company."""
    id: int
    nome: str
    ticker: str
    link_ri: Optional[str] = None
    categoria: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)


# -----------------------------------------------------------------------------
# Helpers
# -----------------------------------------------------------------------------

def _company_or_404(db: Session, company_id: int):
    company = company_service.get_company(db, company_id)
    if company is None:
        raise HTTPException(status_code=404, detail="Empresa não encontrada")
    return company


# -----------------------------------------------------------------------------
# Routes
# -----------------------------------------------------------------------------

@router.get("/", response_model=List[CompanyOut])
def list_companies(search: Optional[str] = None, db: Session = Depends(get_db)):
    """
    GET /companies?search=petro

    Returns every company ordered by name, optionally filtered by a
    case-insensitive match on name or ticker.
    """
    try:
        return company_service.list_companies(db, search=search)
    except SQLAlchemyError as exc:
        logger.exception("Error listing companies: %s", exc)
        raise HTTPException(status_code=500, detail="Erro ao carregar empresas")


@router.get("/{company_id}", response_model=CompanyOut)
def get_company(company_id: int, db: Session = Depends(get_db)):
    return _company_or_404(db, company_id)


@router.post("/", response_model=CompanyOut, status_code=201)
def create_company(payload: CompanyIn, db: Session = Depends(get_db)):
    try:
        return company_service.create_company(
            db,
            nome=payload.nome,
            ticker=payload.ticker,
            link_ri=payload.link_ri,
            categoria=payload.categoria,
        )
    except ValueError as exc:
        raise HTTPException(status_code=422, detail=str(exc))
    except SQLAlchemyError as exc:
        logger.exception("Error creating company %s: %s", payload.ticker, exc)
        raise HTTPException(status_code=500, detail="Erro ao salvar empresa")


@router.put("/{company_id}", response_model=CompanyOut)
def update_company(company_id: int, payload: CompanyIn, db: Session = Depends(get_db)):
    company = _company_or_404(db, company_id)
    try:
        return company_service.update_company(
            db,
            company,
            nome=payload.nome,
            ticker=payload.ticker,
            link_ri=payload.link_ri,
            categoria=payload.categoria,
        )
    except ValueError as exc:
        raise HTTPException(status_code=422, detail=str(exc))
    except SQLAlchemyError as exc:
        logger.exception("Error updating company %s: %s", company_id, exc)
        raise HTTPException(status_code=500, detail="Erro ao salvar empresa")


@router.delete("/{company_id}", status_code=204)
def delete_company(company_id: int, db: Session = Depends(get_db)):
    company = _company_or_404(db, company_id)
    try:
        company_service.delete_company(db, company)
    except SQLAlchemyError as exc:
        logger.exception("Error deleting company %s: %s", company_id, exc)
        raise HTTPException(status_code=500, detail="Erro ao excluir empresa")
    return Response(status_code=204)
