"""
Fiscal period resolution.

A fiscal period runs from April 1 of its start year to March 31 of its end
year. Period strings are loose: ``"2024"``, ``"2024-25"``, ``"2024-2025"`` and
``"FY 2024-25"`` all resolve to the same range.
"""

from __future__ import annotations

import re
from datetime import MAXYEAR, MINYEAR, date

from datamag.domain.errors import PeriodParseError
from datamag.domain.models import PeriodRange

FISCAL_START_MONTH = 4
FISCAL_END_MONTH = 3
FISCAL_END_DAY = 31

_PERIOD_RE = re.compile(r"(\d{4})-?(\d{4}|\d{2})?")


def parse_years(period: str) -> tuple[int, int]:
    """Return ``(start_year, end_year)`` for a period string."""
    match = _PERIOD_RE.search(period or "")
    if not match:
        raise PeriodParseError(period)

    start_year = int(match.group(1))
    fragment = match.group(2)
    if fragment is None:
        end_year = start_year + 1
    elif len(fragment) == 2:
        end_year = 2000 + int(fragment)
    else:
        end_year = int(fragment)

    if end_year <= start_year:
        raise PeriodParseError(period, f"end year {end_year} is not after start year {start_year}")
    # the comparison period one year back must be representable too
    if start_year - 1 < MINYEAR or end_year > MAXYEAR:
        raise PeriodParseError(period, "year out of range")
    return start_year, end_year


def fiscal_range(start_year: int, end_year: int, label: str = "") -> PeriodRange:
    """
    Raises:
        PeriodParseError: a year falls outside what ``datetime.date`` supports
    """
    if start_year < MINYEAR or end_year > MAXYEAR:
        raise PeriodParseError(label, "year out of range")
    return PeriodRange(
        start=date(start_year, FISCAL_START_MONTH, 1),
        end=date(end_year, FISCAL_END_MONTH, FISCAL_END_DAY),
        label=label,
    )


def resolve(period: str) -> PeriodRange:
    """
    Resolve *period* into its fiscal PeriodRange.

    Raises:
        PeriodParseError: no 4-digit year in the string, the end year does
            not come after the start year, or a year is out of range.
    """
    start_year, end_year = parse_years(period)
    return fiscal_range(start_year, end_year, label=period)


def previous(period_range: PeriodRange, years: int = 1) -> PeriodRange:
    """Same fiscal construction shifted back by *years*."""
    return fiscal_range(
        period_range.start_year - years,
        period_range.end_year - years,
        label=period_range.label,
    )


def resolve_with_previous(period: str) -> tuple[PeriodRange, PeriodRange]:
    current = resolve(period)
    return current, previous(current)
