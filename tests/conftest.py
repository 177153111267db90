"""Shared fixtures: sample ledgers, a controllable clock and an API client."""

from datetime import date
from decimal import Decimal

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import text

from datamag.core.application import create_application
from datamag.domain.models import SalesRecord
from datamag.infra.db import build_engine
from datamag.repositories.frame_repository import FrameSalesRepository
from datamag.repositories.sales_repository import SalesRepository

SALES_DDL = """
CREATE TABLE sales (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    date TEXT NOT NULL,
    region TEXT NOT NULL,
    category TEXT NOT NULL,
    product TEXT NOT NULL,
    quantity INTEGER NOT NULL,
    revenue REAL NOT NULL,
    cost REAL NOT NULL
)
"""


def make_record(day, region="North", category="Electronics", revenue=1000, product="Laptop", quantity=1):
    revenue = Decimal(str(revenue))
    return SalesRecord(
        date=day,
        region=region,
        category=category,
        product=product,
        quantity=quantity,
        revenue=revenue,
        cost=revenue * Decimal("0.6"),
    )


class FakeClock:
    """Monotonic clock advanced by hand."""

    def __init__(self, start: float = 1000.0):
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def two_year_records():
    return [
        make_record(date(2024, 6, 1), region="North", category="Electronics", revenue=1000),
        make_record(date(2023, 6, 1), region="South", category="Clothing", revenue=500),
    ]


@pytest.fixture
def mixed_records():
    return [
        make_record(date(2024, 4, 1), region="North", category="Electronics", revenue=3000),
        make_record(date(2024, 9, 15), region="South", category="Clothing", revenue=1000),
        make_record(date(2024, 12, 20), region="North", category="Food", revenue=500),
        make_record(date(2025, 3, 31), region="East", category="Electronics", revenue=500),
        make_record(date(2025, 4, 1), region="West", category="Home", revenue=9999),
        make_record(date(2023, 7, 1), region="North", category="Electronics", revenue=4000),
        make_record(date(2022, 7, 1), region="North", category="Electronics", revenue=2000),
    ]


@pytest.fixture
def frame_repository(mixed_records):
    return FrameSalesRepository.from_records(mixed_records)


@pytest.fixture
def sqlite_ledger(tmp_path):
    """Factory: load row dicts into a fresh SQLite ledger and wrap it in a SalesRepository."""
    engines = []

    def load(rows, name="ledger.db"):
        engine = build_engine(f"sqlite:///{tmp_path / name}")
        engines.append(engine)
        with engine.begin() as conn:
            conn.execute(text(SALES_DDL))
            if rows:
                conn.execute(
                    text(
                        "INSERT INTO sales (date, region, category, product, quantity, revenue, cost) "
                        "VALUES (:date, :region, :category, :product, :quantity, :revenue, :cost)"
                    ),
                    rows,
                )
        return SalesRepository(engine)

    yield load
    for engine in engines:
        engine.dispose()


@pytest.fixture
def sql_repository(sqlite_ledger, mixed_records):
    return sqlite_ledger(
        [
            {
                "date": r.date.isoformat(),
                "region": r.region,
                "category": r.category,
                "product": r.product,
                "quantity": r.quantity,
                "revenue": float(r.revenue),
                "cost": float(r.cost),
            }
            for r in mixed_records
        ]
    )


@pytest.fixture
def client(two_year_records):
    app = create_application(repository=FrameSalesRepository.from_records(two_year_records))
    with TestClient(app) as test_client:
        yield test_client
