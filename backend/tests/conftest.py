"""
Shared fixtures: an in-memory SQLite database and a TestClient bound to it.
"""

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from findash.core.database import Base, get_db, init_db
from findash.main import app
from findash.models import Company, FinancialIndicator, quarter_key


@pytest.fixture
def engine():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    init_db(bind=engine)
    yield engine
    Base.metadata.drop_all(bind=engine)
    engine.dispose()


@pytest.fixture
def db(engine):
    TestingSession = sessionmaker(autocommit=False, autoflush=False, bind=engine)
    session = TestingSession()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def client(db):
    def override_get_db():
        yield db

    app.dependency_overrides[get_db] = override_get_db
    try:
        yield TestClient(app)
    finally:
        app.dependency_overrides.clear()


@pytest.fixture
def company(db) -> Company:
    company = Company(nome="Indústrias Romi", ticker="ROMI3", categoria="Industria")
    db.add(company)
    db.commit()
    db.refresh(company)
    return company


def make_record(company_id: int, year: int, quarter_number: int, **values) -> FinancialIndicator:
    return FinancialIndicator(
        company_id=company_id,
        year=year,
        quarter_number=quarter_number,
        quarter=quarter_key(year, quarter_number),
        **values,
    )


@pytest.fixture
def history(db, company):
    """Five quarters of revenue / margin data for `company`."""
    rows = [
        make_record(company.id, 2023, 1, receitas_bens_servicos=100.0, margem_liquida_percent=10.0),
        make_record(company.id, 2023, 2, receitas_bens_servicos=110.0, margem_liquida_percent=11.0),
        make_record(company.id, 2023, 3, receitas_bens_servicos=120.0, margem_liquida_percent=9.0),
        make_record(company.id, 2023, 4, receitas_bens_servicos=130.0),
        make_record(
            company.id, 2024, 1,
            receitas_bens_servicos=150_000_000.0,
            lucro_liquido_apos_impostos=12_500_000.0,
            margem_liquida_percent=12.0,
            liquidez_corrente=2.5,
        ),
    ]
    db.add_all(rows)
    db.commit()
    return rows
