"""
indicator_definitions.py — Indicator metadata operations

Purpose:
- Derive a field name from an indicator's display name.
- Generate the notional column declaration for a field.
- CRUD for IndicatorDefinition rows, plus loading the registry defaults.
"""

import re
import unicodedata
from typing import List, Optional

from sqlalchemy.orm import Session

from findash.core.database import commit_or_rollback
from findash.core.logging import get_logger
from findash.core.metric_registry import CATEGORIES, METRIC_REGISTRY, UNIT_CURRENCY, UNITS
from findash.models.company import CATEGORIAS
from findash.models.indicator_definition import IndicatorDefinition

logger = get_logger(__name__)

_NON_ALNUM = re.compile(r"[^a-z0-9]")
_UNDERSCORE_RUN = re.compile(r"_+")


def generate_field_name(name: str) -> str:
    """
    Slug of an indicator name usable as a column name.

    Example:
        generate_field_name("Margem Líquida %") → "margem_liquida"
    """
    decomposed = unicodedata.normalize("NFD", name.lower())
    without_marks = "".join(ch for ch in decomposed if not "\u0300" <= ch <= "\u036f")
    slug = _NON_ALNUM.sub("_", without_marks)
    slug = _UNDERSCORE_RUN.sub("_", slug)
    return slug.strip("_")


def generate_sql_column(field_name: str, unit: str) -> str:
    data_type = "DECIMAL(15,2)" if unit == UNIT_CURRENCY else "DECIMAL(10,4)"
    return f"{field_name} {data_type}"


def _validate(category: str, unit: str, categoria: Optional[str]) -> None:
    if category not in CATEGORIES:
        raise ValueError(f"Categoria de indicador inválida: {category}")
    if unit not in UNITS:
        raise ValueError(f"Unidade inválida: {unit}")
    if categoria and categoria not in CATEGORIAS:
        raise ValueError(f"Categoria inválida: {categoria}")


def list_definitions(db: Session) -> List[IndicatorDefinition]:
    return db.query(IndicatorDefinition).order_by(IndicatorDefinition.name).all()


def get_definition(db: Session, definition_id: int) -> Optional[IndicatorDefinition]:
    return (
        db.query(IndicatorDefinition)
        .filter(IndicatorDefinition.id == definition_id)
        .first()
    )


def save_definition(
    db: Session,
    name: str,
    category: str,
    unit: str,
    description: str = "",
    field_name: Optional[str] = None,
    categoria: Optional[str] = None,
    definition: Optional[IndicatorDefinition] = None,
) -> IndicatorDefinition:
    """
    Create a definition, or overwrite `definition` when given.

    An empty `field_name` is derived from `name`; `sql_column` is always
    regenerated from the final field name and unit.
    """
    _validate(category, unit, categoria)
    resolved_field = (field_name or "").strip() or generate_field_name(name)

    if definition is None:
        definition = IndicatorDefinition()
        db.add(definition)

    definition.name = name
    definition.field_name = resolved_field
    definition.category = category
    definition.unit = unit
    definition.description = description
    definition.sql_column = generate_sql_column(resolved_field, unit)
    definition.categoria = categoria or None

    commit_or_rollback(db)
    db.refresh(definition)
    logger.info("Saved indicator definition %s", definition.field_name)
    return definition


def delete_definition(db: Session, definition: IndicatorDefinition) -> None:
    db.delete(definition)
    commit_or_rollback(db)
    logger.info("Deleted indicator definition %s", definition.field_name)


def load_default_definitions(db: Session) -> int:
    """
    Insert a definition for every registry metric not defined yet.

    Returns:
        Number of definitions inserted
    """
    known = {row.field_name for row in db.query(IndicatorDefinition.field_name).all()}
    inserted = 0
    for metric in METRIC_REGISTRY.values():
        if metric.field_name in known:
            continue
        db.add(
            IndicatorDefinition(
                name=metric.title,
                field_name=metric.field_name,
                category=metric.category,
                unit=metric.unit,
                description=metric.description,
                sql_column=generate_sql_column(metric.field_name, metric.unit),
            )
        )
        inserted += 1

    if inserted:
        commit_or_rollback(db)
    logger.info("Loaded %s default indicator definitions", inserted)
    return inserted
