"""
financials.py — Quarterly financial record operations

Purpose:
- Read a company's quarterly history (most recent first).
- Create / update / delete FinancialIndicator rows.
- Provide the existence probe used before every insert so a quarter is never
  stored twice for the same company.

Key Rule:
- Uniqueness of (company, quarter) is checked here, not by a DB constraint.
  The check-then-insert sequence is not atomic.
"""

from typing import Any, Dict, List, Mapping, Optional

from sqlalchemy.exc import NoResultFound
from sqlalchemy.orm import Session

from findash.core.database import commit_or_rollback
from findash.core.logging import get_logger
from findash.core.metric_registry import METRIC_FIELDS
from findash.models.financial_indicator import FinancialIndicator, quarter_key

logger = get_logger(__name__)


class DuplicateQuarterError(RuntimeError):
    """A record already exists for this company and quarter."""

    def __init__(self, company_id: int, quarter: str):
        super().__init__(f"Já existem dados para o trimestre {quarter}")
        self.company_id = company_id
        self.quarter = quarter


def _metric_values(values: Mapping[str, Any]) -> Dict[str, Optional[float]]:
    return {field: values.get(field) for field in METRIC_FIELDS if field in values}


def list_records(db: Session, company_id: int) -> List[FinancialIndicator]:
    return (
        db.query(FinancialIndicator)
        .filter(FinancialIndicator.company_id == company_id)
        .order_by(FinancialIndicator.year.desc(), FinancialIndicator.quarter_number.desc())
        .all()
    )


def get_record(db: Session, record_id: int) -> Optional[FinancialIndicator]:
    return db.query(FinancialIndicator).filter(FinancialIndicator.id == record_id).first()


def find_quarter(db: Session, company_id: int, quarter: str) -> Optional[FinancialIndicator]:
    """
    Single-row existence probe for (company_id, quarter).

    Returns None when no row exists. Any other database failure, including
    more than one matching row, propagates.
    """
    try:
        return (
            db.query(FinancialIndicator)
            .filter(
                FinancialIndicator.company_id == company_id,
                FinancialIndicator.quarter == quarter,
            )
            .one()
        )
    except NoResultFound:
        return None


def add_record(db: Session, company_id: int, row: Mapping[str, Any]) -> FinancialIndicator:
    """
    Insert a record without the duplicate check.

    `row` must carry year and quarter_number; quarter is derived from them.
    """
    year = int(row["year"])
    quarter_number = int(row["quarter_number"])
    record = FinancialIndicator(
        company_id=company_id,
        year=year,
        quarter_number=quarter_number,
        quarter=quarter_key(year, quarter_number),
        **_metric_values(row),
    )
    db.add(record)
    commit_or_rollback(db)
    db.refresh(record)
    logger.info("Stored %s for company %s", record.quarter, company_id)
    return record


def create_record(
    db: Session,
    company_id: int,
    year: int,
    quarter_number: int,
    values: Mapping[str, Any],
) -> FinancialIndicator:
    """
    Insert a quarterly record after checking the quarter is free.

    Raises:
        DuplicateQuarterError: the company already has this quarter
    """
    quarter = quarter_key(year, quarter_number)
    if find_quarter(db, company_id, quarter) is not None:
        raise DuplicateQuarterError(company_id, quarter)

    row = dict(values)
    row.update(year=year, quarter_number=quarter_number)
    return add_record(db, company_id, row)


def update_record(
    db: Session,
    record: FinancialIndicator,
    year: int,
    quarter_number: int,
    values: Mapping[str, Any],
) -> FinancialIndicator:
    """
    Replace the period and metric values of an existing record.

    Raises:
        DuplicateQuarterError: the new period belongs to another record
    """
    quarter = quarter_key(year, quarter_number)
    if quarter != record.quarter:
        existing = find_quarter(db, record.company_id, quarter)
        if existing is not None and existing.id != record.id:
            raise DuplicateQuarterError(record.company_id, quarter)

    record.year = year
    record.quarter_number = quarter_number
    record.quarter = quarter
    for field, value in _metric_values(values).items():
        setattr(record, field, value)

    commit_or_rollback(db)
    db.refresh(record)
    logger.info("Updated %s for company %s", record.quarter, record.company_id)
    return record


def delete_record(db: Session, record: FinancialIndicator) -> None:
    db.delete(record)
    commit_or_rollback(db)
    logger.info("Deleted %s for company %s", record.quarter, record.company_id)
