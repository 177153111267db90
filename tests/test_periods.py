"""Fiscal period resolution."""

from datetime import date

import pytest

from datamag.domain.errors import PeriodParseError
from datamag.domain.periods import previous, resolve, resolve_with_previous


class TestResolve:

    @pytest.mark.parametrize("period", ["2024-25", "2024-2025", "2024", "FY 2024-25", "fy2024-25 report"])
    def test_forms_of_the_same_fiscal_year(self, period):
        period_range = resolve(period)
        assert period_range.start == date(2024, 4, 1)
        assert period_range.end == date(2025, 3, 31)

    def test_label_keeps_source_string(self):
        assert resolve("FY 2024-25").label == "FY 2024-25"

    def test_two_year_span(self):
        period_range = resolve("2023-2025")
        assert period_range.start == date(2023, 4, 1)
        assert period_range.end == date(2025, 3, 31)

    @pytest.mark.parametrize("period", ["", "FY", "24-25", "Q4 of 202", "abc-de"])
    def test_no_four_digit_year(self, period):
        with pytest.raises(PeriodParseError):
            resolve(period)

    @pytest.mark.parametrize("period", ["2024-24", "2024-2023", "2024-23"])
    def test_end_year_not_after_start_year(self, period):
        with pytest.raises(PeriodParseError) as exc_info:
            resolve(period)
        assert exc_info.value.period == period

    @pytest.mark.parametrize("period", ["9999", "0000", "0001-02", "FY 9999"])
    def test_year_out_of_range(self, period):
        with pytest.raises(PeriodParseError) as exc_info:
            resolve(period)
        assert exc_info.value.reason == "year out of range"

    def test_earliest_and_latest_supported_years(self):
        assert resolve("0002").start == date(2, 4, 1)
        assert resolve("9998").end == date(9999, 3, 31)

    def test_parse_error_is_value_error(self):
        with pytest.raises(ValueError):
            resolve("no year here")


class TestPrevious:

    def test_previous_shifts_both_years(self):
        current, prior = resolve_with_previous("2024-25")
        assert current.start == date(2024, 4, 1)
        assert prior.start == date(2023, 4, 1)
        assert prior.end == date(2024, 3, 31)

    def test_previous_by_several_years(self):
        prior = previous(resolve("2024-25"), years=2)
        assert prior.start == date(2022, 4, 1)
        assert prior.end == date(2023, 3, 31)

    def test_previous_before_year_one_is_a_parse_error(self):
        with pytest.raises(PeriodParseError):
            previous(resolve("0002-03"), years=2)
