"""
indicators.py — Indicator metadata endpoints (API Layer)

Purpose:
- Maintain the documentation of each metric (name, field name, unit, category).
    • GET    /indicators                  → all definitions, by name
    • POST   /indicators                  → create
    • PUT    /indicators/{id}             → update
    • DELETE /indicators/{id}             → delete
    • GET    /indicators/field-name?name=&unit= → preview the field name and column derived from a display name
    • POST   /indicators/defaults         → insert the built-in metric definitions

This module does NOT:
- Alter the financial_indicators table (`sql_column` is informational).
"""

from datetime import datetime
from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query, Response
from pydantic import BaseModel, ConfigDict, Field
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from findash.core.database import get_db
from findash.core.logging import get_logger
from findash.core.metric_registry import UNIT_CURRENCY, UNITS
from findash.services import indicator_definitions as definition_service

logger = get_logger(__name__)

router = APIRouter(
    prefix="/indicators",
    tags=["indicators"]
)

# -----------------------------------------------------------------------------
# Schemas
# -----------------------------------------------------------------------------

class IndicatorIn(BaseModel):
    name: str = Field(..., min_length=1)
    field_name: Optional[str] = None  # derived from name when empty
    category: str
    unit: str
    description: str = ""
    categoria: Optional[str] = None


class IndicatorOut(BaseModel):
    id: int
    name: str
    field_name: str
    category: str
    unit: str
    description: Optional[str] = None
    sql_column: str
    categoria: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)


def _definition_or_404(db: Session, definition_id: int):
    definition = definition_service.get_definition(db, definition_id)
    if definition is None:
        raise HTTPException(status_code=404, detail="Indicador não encontrado")
    return definition


def _save(db: Session, payload: IndicatorIn, definition=None):
    try:
        return definition_service.save_definition(
            db,
            name=payload.name,
            category=payload.category,
            unit=payload.unit,
            description=payload.description,
            field_name=payload.field_name,
            categoria=payload.categoria,
            definition=definition,
        )
    except ValueError as exc:
        raise HTTPException(status_code=422, detail=str(exc))
    except SQLAlchemyError as exc:
        logger.exception("Error saving indicator %s: %s", payload.name, exc)
        raise HTTPException(status_code=500, detail="Erro ao salvar indicador")


# -----------------------------------------------------------------------------
# Routes
# -----------------------------------------------------------------------------

@router.get("/", response_model=List[IndicatorOut])
def list_indicators(db: Session = Depends(get_db)):
    try:
        return definition_service.list_definitions(db)
    except SQLAlchemyError as exc:
        logger.exception("Error listing indicators: %s", exc)
        raise HTTPException(status_code=500, detail="Erro ao carregar indicadores")


@router.get("/field-name")
def preview_field_name(
    name: str = Query(..., min_length=1),
    unit: str = Query(UNIT_CURRENCY),
):
    """
    GET /indicators/field-name?name=Margem Líquida&unit=percentage

    Returns the field name and column declaration a new indicator would get.
    `unit` defaults to currency.
    """
    if unit not in UNITS:
        raise HTTPException(status_code=422, detail=f"Unidade inválida: {unit}")
    field_name = definition_service.generate_field_name(name)
    return {
        "name": name,
        "field_name": field_name,
        "sql_column": definition_service.generate_sql_column(field_name, unit),
    }


@router.post("/defaults")
def load_defaults(db: Session = Depends(get_db)):
    """
    POST /indicators/defaults

    Inserts a definition for every built-in metric not documented yet.
    """
    try:
        inserted = definition_service.load_default_definitions(db)
    except SQLAlchemyError as exc:
        logger.exception("Error loading default indicators: %s", exc)
        raise HTTPException(status_code=500, detail="Erro ao carregar indicadores padrão")
    return {"inserted": inserted}


@router.post("/", response_model=IndicatorOut, status_code=201)
def create_indicator(payload: IndicatorIn, db: Session = Depends(get_db)):
    return _save(db, payload)


@router.put("/{definition_id}", response_model=IndicatorOut)
def update_indicator(definition_id: int, payload: IndicatorIn, db: Session = Depends(get_db)):
    definition = _definition_or_404(db, definition_id)
    return _save(db, payload, definition=definition)


@router.delete("/{definition_id}", status_code=204)
def delete_indicator(definition_id: int, db: Session = Depends(get_db)):
    definition = _definition_or_404(db, definition_id)
    try:
        definition_service.delete_definition(db, definition)
    except SQLAlchemyError as exc:
        logger.exception("Error deleting indicator %s: %s", definition_id, exc)
        raise HTTPException(status_code=500, detail="Erro ao excluir indicador")
    return Response(status_code=204)
