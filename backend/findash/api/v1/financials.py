"""
financials.py — Quarterly financial data endpoints (API Layer)

Purpose:
- Expose a company's quarterly indicator history and the dashboard built on it.
    • GET    /financials/{company_id}                     → records, latest first
    • POST   /financials/{company_id}                     → manual entry (409 on duplicate quarter)
    • PUT    /financials/records/{record_id}              → edit a record
    • DELETE /financials/records/{record_id}              → delete a record
    • GET    /financials/{company_id}/dashboard           → dashboard view model
    • GET    /financials/{company_id}/comparison/{field}  → comparison card for one metric
    • POST   /financials/{company_id}/import              → import latest quarter from brapi.dev

Key Interactions:
- findash.services.financials → record queries and writes.
- findash.services.dashboard → charts, formatted values, comparisons.
- findash.services.ingestion.import_orchestrator → external import pipeline.

This module does NOT:
- Compute comparisons or format values itself.
- Call the market-data API directly.
"""

from datetime import datetime
from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Response
from pydantic import BaseModel, ConfigDict, Field
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from findash.core.database import get_db
from findash.core.logging import get_logger
from findash.core.metric_registry import METRIC_FIELDS
from findash.services import financials as financial_service
from findash.services.companies import get_company
from findash.services.dashboard import build_comparison_card, build_dashboard
from findash.services.ingestion.import_orchestrator import (
    BalanceImportOrchestrator,
    ImportStatus,
)

logger = get_logger(__name__)

router = APIRouter(
    prefix="/financials",
    tags=["financials"]
)

# -----------------------------------------------------------------------------
# Schemas
# -----------------------------------------------------------------------------

class MetricValues(BaseModel):
    """The reported metrics of one quarter. Missing means not reported."""
    receitas_bens_servicos: Optional[float] = None
    custo_receita_operacional: Optional[float] = None
    despesas_operacionais_total: Optional[float] = None
    lucro_operacional_antes_receita_despesa_nao_recorrente: Optional[float] = None
    lucro_liquido_apos_impostos: Optional[float] = None
    lucro_por_acao: Optional[float] = None
    caixa_equivalentes_caixa: Optional[float] = None
    fluxo_caixa_liquido_atividades_operacionais: Optional[float] = None
    variacao_liquida_caixa_total: Optional[float] = None
    capital_giro: Optional[float] = None
    endividamento_total: Optional[float] = None
    percentual_divida_total_ativo_total: Optional[float] = None
    liquidez_geral: Optional[float] = None
    liquidez_corrente: Optional[float] = None
    ebit: Optional[float] = None
    ebitda: Optional[float] = None
    margem_ebitda_percent: Optional[float] = None
    margem_lucro_bruto_percent: Optional[float] = None
    margem_operacional_percent: Optional[float] = None
    margem_liquida_percent: Optional[float] = None
    roic: Optional[float] = None
    roe: Optional[float] = None
    roa: Optional[float] = None
    dividend_yield: Optional[float] = None


class FinancialRecordIn(MetricValues):
    year: int = Field(..., ge=1900, le=2100)
    quarter_number: int = Field(..., ge=1, le=4)

    def metric_values(self):
        return self.model_dump(include=set(METRIC_FIELDS))


class FinancialRecordOut(MetricValues):
    id: int
    company_id: int
    year: int
    quarter_number: int
    quarter: str
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)


class ImportOut(BaseModel):
    status: ImportStatus
    message: str
    quarter: Optional[str] = None
    record: Optional[FinancialRecordOut] = None


# -----------------------------------------------------------------------------
# Dependencies / Helpers
# -----------------------------------------------------------------------------

def get_import_orchestrator(db: Session = Depends(get_db)) -> BalanceImportOrchestrator:
    return BalanceImportOrchestrator(db)


def _company_or_404(db: Session, company_id: int):
    company = get_company(db, company_id)
    if company is None:
        raise HTTPException(status_code=404, detail="Empresa não encontrada")
    return company


def _record_or_404(db: Session, record_id: int):
    record = financial_service.get_record(db, record_id)
    if record is None:
        raise HTTPException(status_code=404, detail="Registro não encontrado")
    return record


# Import outcome → HTTP status for the non-success tags
_IMPORT_ERROR_STATUS = {
    ImportStatus.DUPLICATE: 409,
    ImportStatus.EXTERNAL_ERROR: 502,
    ImportStatus.PERSISTENCE_ERROR: 500,
}

# -----------------------------------------------------------------------------
# Records
# -----------------------------------------------------------------------------

@router.get("/{company_id}", response_model=List[FinancialRecordOut])
def list_financials(company_id: int, db: Session = Depends(get_db)):
    """
    GET /financials/{company_id}

    Quarterly records of the company, most recent first.
    """
    _company_or_404(db, company_id)
    try:
        return financial_service.list_records(db, company_id)
    except SQLAlchemyError as exc:
        logger.exception("Error loading financials for company %s: %s", company_id, exc)
        raise HTTPException(status_code=500, detail="Erro ao carregar dados financeiros")


@router.post("/{company_id}", response_model=FinancialRecordOut, status_code=201)
def create_financial_record(
    company_id: int,
    payload: FinancialRecordIn,
    db: Session = Depends(get_db),
):
    _company_or_404(db, company_id)
    try:
        return financial_service.create_record(
            db,
            company_id,
            year=payload.year,
            quarter_number=payload.quarter_number,
            values=payload.metric_values(),
        )
    except financial_service.DuplicateQuarterError as exc:
        raise HTTPException(status_code=409, detail=str(exc))
    except SQLAlchemyError as exc:
        logger.exception("Error saving financials for company %s: %s", company_id, exc)
        raise HTTPException(status_code=500, detail="Erro ao salvar dados financeiros")


@router.put("/records/{record_id}", response_model=FinancialRecordOut)
def update_financial_record(
    record_id: int,
    payload: FinancialRecordIn,
    db: Session = Depends(get_db),
):
    record = _record_or_404(db, record_id)
    try:
        return financial_service.update_record(
            db,
            record,
            year=payload.year,
            quarter_number=payload.quarter_number,
            values=payload.metric_values(),
        )
    except financial_service.DuplicateQuarterError as exc:
        raise HTTPException(status_code=409, detail=str(exc))
    except SQLAlchemyError as exc:
        logger.exception("Error updating record %s: %s", record_id, exc)
        raise HTTPException(status_code=500, detail="Erro ao salvar dados financeiros")


@router.delete("/records/{record_id}", status_code=204)
def delete_financial_record(record_id: int, db: Session = Depends(get_db)):
    record = _record_or_404(db, record_id)
    try:
        financial_service.delete_record(db, record)
    except SQLAlchemyError as exc:
        logger.exception("Error deleting record %s: %s", record_id, exc)
        raise HTTPException(status_code=500, detail="Erro ao excluir dados financeiros")
    return Response(status_code=204)


# -----------------------------------------------------------------------------
# Dashboard
# -----------------------------------------------------------------------------

@router.get("/{company_id}/dashboard")
def get_dashboard(company_id: int, db: Session = Depends(get_db)):
    """
    GET /financials/{company_id}/dashboard

    Returns:
    - latest quarter, revenue / net income in millions
    - per category, each metric reported in the latest quarter with its
      chart series, formatted value and quarter / year comparisons
    """
    company = _company_or_404(db, company_id)
    try:
        records = financial_service.list_records(db, company_id)
    except SQLAlchemyError as exc:
        logger.exception("Error loading dashboard for company %s: %s", company_id, exc)
        raise HTTPException(status_code=500, detail="Erro ao carregar dados financeiros")
    return build_dashboard(company, records)


@router.get("/{company_id}/comparison/{field}")
def get_comparison(company_id: int, field: str, db: Session = Depends(get_db)):
    """
    GET /financials/{company_id}/comparison/{field}

    Comparison card for the latest reported value of `field`.
    """
    if field not in METRIC_FIELDS:
        raise HTTPException(status_code=404, detail=f"Indicador desconhecido: {field}")

    _company_or_404(db, company_id)
    try:
        records = financial_service.list_records(db, company_id)
    except SQLAlchemyError as exc:
        logger.exception("Error loading comparison %s for company %s: %s", field, company_id, exc)
        raise HTTPException(status_code=500, detail="Erro ao carregar dados financeiros")
    if not records:
        raise HTTPException(status_code=404, detail="Nenhum dado financeiro encontrado")

    return build_comparison_card(records, field, getattr(records[0], field))


# -----------------------------------------------------------------------------
# External import
# -----------------------------------------------------------------------------

@router.post("/{company_id}/import", response_model=ImportOut, status_code=201)
def import_latest_quarter(
    company_id: int,
    db: Session = Depends(get_db),
    orchestrator: BalanceImportOrchestrator = Depends(get_import_orchestrator),
):
    """
    POST /financials/{company_id}/import

    Fetches the latest quarter from brapi.dev and stores it.

    Responses:
    - 201 imported
    - 404 unknown company
    - 409 quarter already stored
    - 502 market-data API failed or returned unusable data
    - 500 database failure
    """
    company = _company_or_404(db, company_id)
    result = orchestrator.import_latest_quarter(company)

    if result.status is not ImportStatus.SUCCESS:
        raise HTTPException(status_code=_IMPORT_ERROR_STATUS[result.status], detail=result.message)

    return ImportOut(
        status=result.status,
        message=result.message,
        quarter=result.quarter,
        record=FinancialRecordOut.model_validate(result.record),
    )
