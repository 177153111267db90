"""Ledger repositories: SQL (SQLite) and DataFrame backends answer alike."""

from datetime import date
from decimal import Decimal

import pandas as pd
import pytest

from datamag.domain.filters import DataFilters
from datamag.repositories.frame_repository import FrameSalesRepository

FY_2024 = DataFilters(start_date=date(2024, 4, 1), end_date=date(2025, 3, 31))
EMPTY = DataFilters(start_date=date(2010, 4, 1), end_date=date(2011, 3, 31))


@pytest.fixture(params=["sql", "frame"])
def repository(request, sql_repository, frame_repository):
    return sql_repository if request.param == "sql" else frame_repository


class TestLedgerRepositories:

    def test_totals_cover_whole_fiscal_year(self, repository):
        revenue, orders = repository.get_totals(FY_2024)
        assert revenue == Decimal(5000)
        assert orders == 4

    def test_totals_of_empty_period(self, repository):
        assert repository.get_totals(EMPTY) == (Decimal(0), 0)

    def test_revenue_by_category_largest_first(self, repository):
        rows = repository.get_revenue_by(FY_2024, "category")
        assert [name for name, _ in rows] == ["Electronics", "Clothing", "Food"]
        assert rows[0][1] == Decimal(3500)

    def test_revenue_by_region(self, repository):
        assert dict(repository.get_revenue_by(FY_2024, "region")) == {
            "North": Decimal(3500),
            "South": Decimal(1000),
            "East": Decimal(500),
        }

    def test_group_by_empty_period(self, repository):
        assert repository.get_revenue_by(EMPTY, "region") == []

    def test_unknown_dimension_is_rejected(self, repository):
        with pytest.raises(ValueError):
            repository.get_revenue_by(FY_2024, "product; DROP TABLE sales")

    def test_health_check(self, repository):
        assert repository.health_check()["ok"] is True


class TestFrameRepository:

    def test_from_csv(self, tmp_path):
        path = tmp_path / "sales.csv"
        pd.DataFrame(
            [
                {"date": "2024-05-01", "region": "North", "category": "Food", "product": "Snacks",
                 "quantity": 3, "revenue": 120.5, "cost": 70.0},
                {"date": "2024-05-02", "region": "West", "category": "Home", "product": "Decor",
                 "quantity": 1, "revenue": 79.5, "cost": 40.0},
            ]
        ).to_csv(path, index=False)

        repository = FrameSalesRepository.from_csv(str(path))
        assert len(repository) == 2
        assert repository.get_totals(FY_2024) == (Decimal("200.0"), 2)

    def test_missing_columns(self):
        with pytest.raises(ValueError, match="revenue"):
            FrameSalesRepository(pd.DataFrame([{"date": "2024-05-01", "region": "North"}]))


TIMESTAMPED_ROWS = [
    {"date": "2024-04-01 00:00:00", "region": "North", "category": "Food", "product": "Snacks",
     "quantity": 1, "revenue": 40.0, "cost": 20.0},
    {"date": "2025-03-31 10:00:00", "region": "East", "category": "Home", "product": "Lamp",
     "quantity": 1, "revenue": 100.0, "cost": 60.0},
    {"date": "2025-04-01 00:00:00", "region": "West", "category": "Home", "product": "Rug",
     "quantity": 1, "revenue": 999.0, "cost": 500.0},
]


@pytest.fixture(params=["sql", "frame"])
def timestamped_repository(request, sqlite_ledger):
    if request.param == "frame":
        return FrameSalesRepository(pd.DataFrame(TIMESTAMPED_ROWS))
    return sqlite_ledger(TIMESTAMPED_ROWS, name="timestamped.db")


class TestTimestampedLedger:

    def test_rows_during_last_day_are_counted(self, timestamped_repository):
        assert timestamped_repository.get_totals(FY_2024) == (Decimal(140), 2)

    def test_grouping_sees_the_same_rows(self, timestamped_repository):
        assert dict(timestamped_repository.get_revenue_by(FY_2024, "region")) == {
            "East": Decimal(100),
            "North": Decimal(40),
        }


class TestDataFilters:

    def test_sql_bounds(self):
        conditions, params = FY_2024.to_sql_conditions()
        assert conditions == ["s.date >= :start_date", "s.date < :end_exclusive"]
        assert params == {"start_date": "2024-04-01", "end_exclusive": "2025-04-01"}

    def test_contains_whole_days(self):
        assert FY_2024.contains(date(2025, 3, 31))
        assert not FY_2024.contains(date(2025, 4, 1))
