"""
Reusable data filters.
Centralizes the ledger filtering so every aggregate query of a period uses
the same date bounds.
"""

from dataclasses import dataclass
from datetime import date, timedelta

from datamag.domain.models import PeriodRange


@dataclass(frozen=True)
class DataFilters:
    """
    Filters applied to every ledger query.
    Covers whole days from ``start_date`` through ``end_date``, matching
    PeriodRange; rows timestamped during the last day are included.
    """

    start_date: date
    end_date: date

    @classmethod
    def for_range(cls, period_range: PeriodRange) -> "DataFilters":
        return cls(start_date=period_range.start, end_date=period_range.end)

    @property
    def end_exclusive(self) -> date:
        """First day after the period."""
        return self.end_date + timedelta(days=1)

    def to_sql_conditions(self, alias: str = "s") -> tuple[list[str], dict]:
        """
        Convert the filters into SQL conditions and parameters.

        Returns:
            Tuple of WHERE conditions and bound parameters
        """
        conditions = [
            f"{alias}.date >= :start_date",
            f"{alias}.date < :end_exclusive",
        ]
        params = {
            "start_date": self.start_date.isoformat(),
            "end_exclusive": self.end_exclusive.isoformat(),
        }
        return conditions, params

    def apply_to_query(self, base_query: str, alias: str = "s") -> tuple[str, dict]:
        """
        Append the WHERE clause to a base query (which must not have one).

        Returns:
            Tuple of the full query and its parameters
        """
        conditions, params = self.to_sql_conditions(alias)
        where_clause = " AND ".join(conditions)
        return f"{base_query} WHERE {where_clause}", params

    def contains(self, day: date) -> bool:
        return self.start_date <= day <= self.end_date
