"""
import_orchestrator.py — External quarter import workflow.

Runs the "Dados de Balanço" action for one company as a single pipeline:

    fetch quote (brapi.dev) → validate + map → existence probe → insert

and reports the outcome as a tagged ImportResult instead of raising, so each
failure mode can be handled (and tested) on its own:

    success | duplicate | external_error | persistence_error

Nothing is retried. The probe and the insert are separate statements, so two
concurrent imports of the same quarter can race.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable, Dict, Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from findash.core.logging import get_logger
from findash.data.brapi_client import MarketDataError, fetch_quote
from findash.data.brapi_mapper import QuotePayloadError, map_quote_payload
from findash.models.company import Company
from findash.models.financial_indicator import FinancialIndicator
from findash.services.companies import get_company
from findash.services.financials import add_record, find_quarter

logger = get_logger(__name__)

QuoteFetcher = Callable[[str], Dict[str, Any]]


class ImportStatus(str, Enum):
    SUCCESS = "success"
    DUPLICATE = "duplicate"
    EXTERNAL_ERROR = "external_error"
    PERSISTENCE_ERROR = "persistence_error"


@dataclass
class ImportResult:
    status: ImportStatus
    message: str
    quarter: Optional[str] = None
    record: Optional[FinancialIndicator] = None

    @property
    def ok(self) -> bool:
        return self.status is ImportStatus.SUCCESS


class BalanceImportOrchestrator:
    """
    Imports the latest reported quarter of a company from the market-data API.
    """

    def __init__(self, db: Session, fetcher: QuoteFetcher = fetch_quote) -> None:
        self._db = db
        self._fetch = fetcher

    # ------------------------------------------------------------------ #
    def import_latest_quarter(self, company: Company) -> ImportResult:
        logger.info("Importing latest quarter for %s (%s)", company.ticker, company.id)

        try:
            payload = self._fetch(company.ticker)
            mapped = map_quote_payload(payload)
        except (MarketDataError, QuotePayloadError) as exc:
            logger.error("External data unavailable for %s: %s", company.ticker, exc)
            return ImportResult(
                status=ImportStatus.EXTERNAL_ERROR,
                message=f"Erro ao buscar dados da API: {exc}",
            )

        try:
            existing = find_quarter(self._db, company.id, mapped.quarter)
        except SQLAlchemyError as exc:
            logger.exception("Existence check failed for %s %s: %s", company.ticker, mapped.quarter, exc)
            return ImportResult(
                status=ImportStatus.PERSISTENCE_ERROR,
                message="Erro ao consultar o banco de dados.",
                quarter=mapped.quarter,
            )

        if existing is not None:
            logger.warning("Quarter %s already stored for %s", mapped.quarter, company.ticker)
            return ImportResult(
                status=ImportStatus.DUPLICATE,
                message="Os dados para este trimestre já foram importados.",
                quarter=mapped.quarter,
                record=existing,
            )

        try:
            record = add_record(self._db, company.id, mapped.to_row())
        except SQLAlchemyError as exc:
            logger.exception("Insert failed for %s %s: %s", company.ticker, mapped.quarter, exc)
            return ImportResult(
                status=ImportStatus.PERSISTENCE_ERROR,
                message="Erro ao salvar os dados no banco de dados.",
                quarter=mapped.quarter,
            )

        logger.info("Imported %s for %s", mapped.quarter, company.ticker)
        return ImportResult(
            status=ImportStatus.SUCCESS,
            message=f"Dados de balanço importados com sucesso para {company.nome}.",
            quarter=mapped.quarter,
            record=record,
        )


def import_quarter(db: Session, company_id: int, fetcher: QuoteFetcher = fetch_quote) -> ImportResult:
    """
    Look up `company_id` and import its latest quarter.

    An unknown company is reported as a persistence error; nothing is fetched.
    """
    try:
        company = get_company(db, company_id)
    except SQLAlchemyError as exc:
        logger.exception("Company lookup failed for %s: %s", company_id, exc)
        return ImportResult(
            status=ImportStatus.PERSISTENCE_ERROR,
            message="Erro ao consultar o banco de dados.",
        )

    if company is None:
        logger.warning("Import requested for unknown company %s", company_id)
        return ImportResult(
            status=ImportStatus.PERSISTENCE_ERROR,
            message="Empresa não encontrada",
        )

    return BalanceImportOrchestrator(db, fetcher).import_latest_quarter(company)
