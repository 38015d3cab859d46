"""
API tests for the companies, financials and indicators routers.
"""

from unittest.mock import patch

from sqlalchemy.exc import SQLAlchemyError

from findash.api.v1.financials import get_import_orchestrator
from findash.data.brapi_client import MarketDataHTTPError
from findash.main import app
from findash.models import FinancialIndicator
from findash.services.ingestion.import_orchestrator import BalanceImportOrchestrator

API = "/api/v1"

RECORD_BODY = {
    "year": 2024,
    "quarter_number": 2,
    "receitas_bens_servicos": 160_000_000.0,
    "liquidez_corrente": 2.1,
}


def test_health(client):
    response = client.get("/")
    assert response.status_code == 200
    assert response.json()["status"] == "ok"


# -----------------------------------------------------------------------------
# Companies
# -----------------------------------------------------------------------------

def test_company_crud(client):
    response = client.post(f"{API}/companies/", json={"nome": "Petrobras", "ticker": "petr4"})
    assert response.status_code == 201
    company = response.json()
    assert company["ticker"] == "PETR4"

    response = client.put(
        f"{API}/companies/{company['id']}",
        json={"nome": "Petrobras SA", "ticker": "PETR4", "categoria": "Industria"},
    )
    assert response.status_code == 200
    assert response.json()["categoria"] == "Industria"

    assert client.get(f"{API}/companies/{company['id']}").json()["nome"] == "Petrobras SA"
    assert client.delete(f"{API}/companies/{company['id']}").status_code == 204
    assert client.get(f"{API}/companies/{company['id']}").status_code == 404


def test_company_search(client, company):
    client.post(f"{API}/companies/", json={"nome": "Vale", "ticker": "VALE3"})

    names = [c["nome"] for c in client.get(f"{API}/companies/").json()]
    assert names == ["Indústrias Romi", "Vale"]

    found = client.get(f"{API}/companies/", params={"search": "romi"}).json()
    assert [c["ticker"] for c in found] == ["ROMI3"]
    found = client.get(f"{API}/companies/", params={"search": "vale3"}).json()
    assert [c["nome"] for c in found] == ["Vale"]


def test_company_invalid_categoria(client):
    response = client.post(
        f"{API}/companies/", json={"nome": "X", "ticker": "XXXX3", "categoria": "Varejo"}
    )
    assert response.status_code == 422


def test_delete_company_removes_records(client, db, company, history):
    company_id = company.id
    assert client.delete(f"{API}/companies/{company_id}").status_code == 204
    assert client.get(f"{API}/financials/{company_id}").status_code == 404
    assert db.query(FinancialIndicator).filter(FinancialIndicator.company_id == company_id).count() == 0


# -----------------------------------------------------------------------------
# Financial records
# -----------------------------------------------------------------------------

def test_list_financials_most_recent_first(client, company, history):
    response = client.get(f"{API}/financials/{company.id}")
    assert response.status_code == 200
    quarters = [r["quarter"] for r in response.json()]
    assert quarters == ["2024TRI1", "2023TRI4", "2023TRI3", "2023TRI2", "2023TRI1"]


def test_create_update_delete_record(client, company):
    response = client.post(f"{API}/financials/{company.id}", json=RECORD_BODY)
    assert response.status_code == 201
    record = response.json()
    assert record["quarter"] == "2024TRI2"
    assert record["roe"] is None

    response = client.put(
        f"{API}/financials/records/{record['id']}",
        json={**RECORD_BODY, "quarter_number": 3, "roe": 12.5},
    )
    assert response.status_code == 200
    assert response.json()["quarter"] == "2024TRI3"
    assert response.json()["roe"] == 12.5

    assert client.delete(f"{API}/financials/records/{record['id']}").status_code == 204
    assert client.get(f"{API}/financials/{company.id}").json() == []


def test_create_record_duplicate_quarter(client, company):
    assert client.post(f"{API}/financials/{company.id}", json=RECORD_BODY).status_code == 201
    response = client.post(f"{API}/financials/{company.id}", json=RECORD_BODY)
    assert response.status_code == 409
    assert "2024TRI2" in response.json()["detail"]


def test_update_record_onto_taken_quarter(client, company):
    client.post(f"{API}/financials/{company.id}", json=RECORD_BODY)
    other = client.post(f"{API}/financials/{company.id}", json={**RECORD_BODY, "quarter_number": 3}).json()

    response = client.put(f"{API}/financials/records/{other['id']}", json=RECORD_BODY)
    assert response.status_code == 409
    assert "2024TRI2" in response.json()["detail"]

    quarters = [r["quarter"] for r in client.get(f"{API}/financials/{company.id}").json()]
    assert quarters == ["2024TRI3", "2024TRI2"]


def test_create_record_invalid_quarter(client, company):
    response = client.post(f"{API}/financials/{company.id}", json={**RECORD_BODY, "quarter_number": 5})
    assert response.status_code == 422


def test_financials_unknown_company(client):
    assert client.get(f"{API}/financials/999").status_code == 404
    assert client.post(f"{API}/financials/999", json=RECORD_BODY).status_code == 404


# -----------------------------------------------------------------------------
# Dashboard
# -----------------------------------------------------------------------------

def test_dashboard(client, company, history):
    response = client.get(f"{API}/financials/{company.id}/dashboard")
    assert response.status_code == 200
    dashboard = response.json()

    assert dashboard["latest_quarter"] == "2024TRI1"
    assert dashboard["revenue_millions"] == "R$ 150,0 milhões"
    assert dashboard["net_income_millions"] == "R$ 12,5 milhões"

    sections = {s["category"]: s for s in dashboard["sections"]}
    assert list(sections) == ["revenue", "liquidity", "profitability"]

    revenue = sections["revenue"]["metrics"][0]
    assert revenue["field"] == "receitas_bens_servicos"
    assert revenue["formatted"] == "R$ 150.000.000"
    assert [p["quarter"] for p in revenue["chart"]][0] == "2023TRI1"
    assert revenue["chart"][-1]["axis_label"] == "150.0M"
    assert revenue["comparison"]["previous_quarter"] == 130.0
    assert revenue["comparison"]["same_quarter_last_year"] == 100.0
    assert revenue["comparison"]["quarter_comparison"]["trend"] == "up"

    margin = sections["profitability"]["metrics"][0]
    assert margin["formatted"] == "12.00%"
    # 2023TRI4 has no margin reported
    assert margin["comparison"]["previous_quarter"] is None
    assert margin["comparison"]["quarter_comparison"] is None
    assert margin["comparison"]["year_comparison"]["label"] == "20.0"


def test_dashboard_without_records(client, company):
    dashboard = client.get(f"{API}/financials/{company.id}/dashboard").json()
    assert dashboard["latest_quarter"] is None
    assert dashboard["revenue_millions"] == "N/A"
    assert dashboard["sections"] == []


def test_comparison_endpoint(client, company, history):
    response = client.get(f"{API}/financials/{company.id}/comparison/liquidez_corrente")
    assert response.status_code == 200
    card = response.json()
    assert card["unit"] == "ratio"
    assert card["formatted"] == "2.50"
    assert card["previous_quarter"] is None


def test_comparison_endpoint_unknown_field(client, company, history):
    response = client.get(f"{API}/financials/{company.id}/comparison/not_a_metric")
    assert response.status_code == 404


def test_comparison_endpoint_database_error(client, company, history):
    with patch("findash.services.financials.list_records", side_effect=SQLAlchemyError("boom")):
        response = client.get(f"{API}/financials/{company.id}/comparison/roe")
    assert response.status_code == 500
    assert response.json()["detail"] == "Erro ao carregar dados financeiros"


# -----------------------------------------------------------------------------
# Import
# -----------------------------------------------------------------------------

QUOTE = {
    "results": [
        {
            "symbol": "ROMI3",
            "incomeStatementHistory": [
                {"endDate": "2024-06-30", "totalRevenue": 200.0, "ebitda": 50.0}
            ],
        }
    ]
}


def _use_fetcher(db, fetch):
    app.dependency_overrides[get_import_orchestrator] = lambda: BalanceImportOrchestrator(db, fetch)


def test_import_endpoint_success_then_duplicate(client, db, company):
    _use_fetcher(db, lambda ticker: QUOTE)

    response = client.post(f"{API}/financials/{company.id}/import")
    assert response.status_code == 201
    body = response.json()
    assert body["status"] == "success"
    assert body["record"]["quarter"] == "2024TRI2"
    assert body["record"]["margem_ebitda_percent"] == 25.0

    response = client.post(f"{API}/financials/{company.id}/import")
    assert response.status_code == 409
    assert response.json()["detail"] == "Os dados para este trimestre já foram importados."


def test_import_endpoint_external_error(client, db, company):
    def fetch(ticker):
        raise MarketDataHTTPError(503, "Erro na API: 503")

    _use_fetcher(db, fetch)
    response = client.post(f"{API}/financials/{company.id}/import")
    assert response.status_code == 502
    assert "Erro na API: 503" in response.json()["detail"]


def test_import_endpoint_unknown_company(client, db):
    _use_fetcher(db, lambda ticker: QUOTE)
    assert client.post(f"{API}/financials/999/import").status_code == 404


# -----------------------------------------------------------------------------
# Indicators
# -----------------------------------------------------------------------------

def test_indicator_crud(client):
    response = client.post(
        f"{API}/indicators/",
        json={"name": "Margem Líquida %", "category": "profitability", "unit": "percentage"},
    )
    assert response.status_code == 201
    indicator = response.json()
    assert indicator["field_name"] == "margem_liquida"
    assert indicator["sql_column"] == "margem_liquida DECIMAL(10,4)"

    response = client.put(
        f"{API}/indicators/{indicator['id']}",
        json={"name": "Margem Líquida", "category": "profitability", "unit": "currency"},
    )
    assert response.status_code == 200
    assert response.json()["sql_column"] == "margem_liquida DECIMAL(15,2)"

    assert client.delete(f"{API}/indicators/{indicator['id']}").status_code == 204
    assert client.get(f"{API}/indicators/").json() == []


def test_indicator_invalid_unit(client):
    response = client.post(
        f"{API}/indicators/", json={"name": "X", "category": "debt", "unit": "euros"}
    )
    assert response.status_code == 422


def test_indicator_field_name_preview(client):
    response = client.get(f"{API}/indicators/field-name", params={"name": "Dívida Líquida"})
    assert response.status_code == 200
    assert response.json()["field_name"] == "divida_liquida"


def test_indicator_defaults(client):
    first = client.post(f"{API}/indicators/defaults").json()
    second = client.post(f"{API}/indicators/defaults").json()
    assert first["inserted"] == 24
    assert second["inserted"] == 0
    assert len(client.get(f"{API}/indicators/").json()) == 24


def test_indicator_field_name_preview_with_unit(client):
    response = client.get(
        f"{API}/indicators/field-name", params={"name": "Margem Líquida %", "unit": "percentage"}
    )
    assert response.json()["sql_column"] == "margem_liquida DECIMAL(10,4)"

    response = client.get(f"{API}/indicators/field-name", params={"name": "Caixa"})
    assert response.json()["sql_column"] == "caixa DECIMAL(15,2)"

    response = client.get(f"{API}/indicators/field-name", params={"name": "Caixa", "unit": "euros"})
    assert response.status_code == 422


def test_list_indicators_database_error(client):
    with patch(
        "findash.services.indicator_definitions.list_definitions",
        side_effect=SQLAlchemyError("boom"),
    ):
        response = client.get(f"{API}/indicators/")
    assert response.status_code == 500
    assert response.json()["detail"] == "Erro ao carregar indicadores"
