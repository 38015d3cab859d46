"""
Unit tests for indicator_definitions.py
"""

import pytest

from findash.core.metric_registry import METRIC_FIELDS
from findash.models import IndicatorDefinition
from findash.services.indicator_definitions import (
    generate_field_name,
    generate_sql_column,
    list_definitions,
    load_default_definitions,
    save_definition,
)


@pytest.mark.parametrize(
    "name, expected",
    [
        ("Margem Líquida %", "margem_liquida"),
        ("Receitas de Bens e Serviços", "receitas_de_bens_e_servicos"),
        ("  Dívida / Ativo  ", "divida_ativo"),
        ("ROE", "roe"),
        ("Ação---Preço", "acao_preco"),
    ],
)
def test_generate_field_name(name, expected):
    assert generate_field_name(name) == expected


def test_generate_sql_column():
    assert generate_sql_column("ebitda", "currency") == "ebitda DECIMAL(15,2)"
    assert generate_sql_column("roe", "percentage") == "roe DECIMAL(10,4)"
    assert generate_sql_column("liquidez_geral", "ratio") == "liquidez_geral DECIMAL(10,4)"


def test_save_definition_derives_field_name(db):
    definition = save_definition(
        db, name="Margem Líquida %", category="profitability", unit="percentage"
    )
    assert definition.id is not None
    assert definition.field_name == "margem_liquida"
    assert definition.sql_column == "margem_liquida DECIMAL(10,4)"
    assert definition.categoria is None


def test_save_definition_updates_in_place(db):
    definition = save_definition(db, name="Caixa", category="cash_flow", unit="currency")
    updated = save_definition(
        db,
        name="Caixa",
        category="cash_flow",
        unit="ratio",
        field_name="caixa_ratio",
        categoria="Financas",
        definition=definition,
    )
    assert updated.id == definition.id
    assert updated.sql_column == "caixa_ratio DECIMAL(10,4)"
    assert db.query(IndicatorDefinition).count() == 1


@pytest.mark.parametrize(
    "kwargs",
    [
        {"category": "nope", "unit": "currency"},
        {"category": "debt", "unit": "euros"},
        {"category": "debt", "unit": "currency", "categoria": "Varejo"},
    ],
)
def test_save_definition_rejects_invalid_values(db, kwargs):
    with pytest.raises(ValueError):
        save_definition(db, name="X", **kwargs)
    assert db.query(IndicatorDefinition).count() == 0


def test_load_default_definitions_is_idempotent(db):
    assert load_default_definitions(db) == len(METRIC_FIELDS)
    assert load_default_definitions(db) == 0

    definitions = list_definitions(db)
    assert {d.field_name for d in definitions} == set(METRIC_FIELDS)
    names = [d.name for d in definitions]
    assert names == sorted(names)


def test_load_default_definitions_skips_existing(db):
    save_definition(db, name="ROE", category="returns", unit="percentage", field_name="roe")
    assert load_default_definitions(db) == len(METRIC_FIELDS) - 1
