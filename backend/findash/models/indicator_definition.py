"""
indicator_definition.py — ORM Model for Indicator Metadata

Purpose:
- Document a metric: display name, internal field name, category, unit and
  the notional column declaration (`sql_column`) backing it.
- Independent metadata: not linked to financial_indicators by a foreign key.
"""

import datetime

from sqlalchemy import Column, DateTime, Integer, String, Text

from findash.core.database import Base


class IndicatorDefinition(Base):
    __tablename__ = "indicator_definitions"

    id = Column(Integer, primary_key=True, index=True)

    name = Column(String, nullable=False)
    field_name = Column(String, nullable=False, index=True)
    category = Column(String, nullable=False)  # see metric_registry.CATEGORIES
    unit = Column(String, nullable=False)      # currency | percentage | ratio
    description = Column(Text, nullable=True)
    sql_column = Column(String, nullable=False)
    categoria = Column(String, nullable=True)  # Industria | Financas

    created_at = Column(DateTime, default=datetime.datetime.utcnow, nullable=False)
    updated_at = Column(
        DateTime,
        default=datetime.datetime.utcnow,
        onupdate=datetime.datetime.utcnow,
        nullable=False,
    )

    def __repr__(self):
        return f"<IndicatorDefinition {self.field_name} ({self.unit})>"
