"""Chart data normalization."""

import math
from decimal import Decimal

import pytest

from datamag.domain.charts import coerce_value, infer_chart_type, normalize
from datamag.domain.models import ChartPoint


class TestChartTypeInference:

    @pytest.mark.parametrize(
        "title, expected",
        [
            ("Regional Breakdown", "pie"),
            ("Market Share", "pie"),
            ("Revenue Distribution by Product", "pie"),
            ("Growth Trend", "line"),
            ("Year over Year", "line"),
            ("Category Sales", "bar"),
            ("Top Products", "bar"),
            ("Quarterly numbers", "bar"),
            ("", "bar"),
        ],
    )
    def test_keyword_rules(self, title, expected):
        assert infer_chart_type(title) == expected

    def test_region_rule_wins_over_later_rules(self):
        assert infer_chart_type("Sales growth by region") == "pie"


class TestValueCoercion:

    @pytest.mark.parametrize(
        "raw, expected",
        [
            (1200, 1200.0),
            (12.5, 12.5),
            (Decimal("7.25"), 7.25),
            ("1,200 units", 1200.0),
            ("$2.4", 2.4),
            ("-35%", -35.0),
            ("n/a", 0.0),
            ("1.2.3", 0.0),
            (None, 0.0),
            (True, 0.0),
            (float("nan"), 0.0),
            (float("inf"), 0.0),
            ({"nested": 1}, 0.0),
            (10**400, 0.0),
            (-(10**400), 0.0),
            (Decimal("sNaN"), 0.0),
            ("9" * 400, 0.0),
        ],
    )
    def test_coerce(self, raw, expected):
        assert coerce_value(raw) == expected


class TestNormalize:

    def test_empty_regional_input_uses_region_fallback(self):
        series = normalize([], "Regional Breakdown")
        assert series.type == "pie"
        assert series.is_fallback is True
        assert [p.name for p in series.points] == ["North", "South", "East", "West"]

    def test_string_value_is_parsed(self):
        series = normalize([{"name": "X", "value": "1,200 units"}], "Category Sales")
        assert series.type == "bar"
        assert series.is_fallback is False
        assert series.points == (ChartPoint(name="X", value=1200.0),)

    def test_explicit_type_beats_title(self):
        series = normalize(None, "Growth Trend", "line")
        assert series.type == "line"
        assert len(series) > 0
        assert all(math.isfinite(p.value) for p in series.points)

        assert normalize([{"name": "A", "value": 1}], "Regional Breakdown", "bar").type == "bar"

    def test_growth_fallback_has_three_year_buckets(self):
        series = normalize(None, "Revenue growth")
        assert [p.name for p in series.points] == ["2022", "2023", "2024"]

    def test_category_fallback(self):
        series = normalize(None, "Product mix")
        assert [p.name for p in series.points] == ["Electronics", "Clothing", "Food", "Home"]

    def test_default_fallback_is_quarters(self):
        series = normalize(None, "Overview")
        assert series.type == "bar"
        assert [p.name for p in series.points] == ["Q1", "Q2", "Q3", "Q4"]

    def test_all_zero_values_are_replaced(self):
        series = normalize([{"name": "North", "value": 0}, {"name": "South", "value": "none"}], "Regional Breakdown")
        assert series.is_fallback is True
        assert len(series) == 4

    def test_records_without_name_are_kept(self):
        series = normalize([{"value": 5}, {"name": "B", "value": "oops"}], "Category Sales")
        assert series.points == (ChartPoint(name="", value=5.0), ChartPoint(name="B", value=0.0))

    def test_oversized_value_becomes_zero(self):
        series = normalize([{"name": "A", "value": 10**400}, {"name": "B", "value": 7}], "Category Sales")
        assert series.points == (ChartPoint(name="A", value=0.0), ChartPoint(name="B", value=7.0))

    def test_duplicate_names_stay_separate(self):
        series = normalize([{"name": "A", "value": 1}, {"name": "A", "value": 2}], "Category Sales")
        assert [p.value for p in series.points] == [1.0, 2.0]

    def test_non_mapping_records_degrade_to_zero(self):
        series = normalize(["junk", {"name": "A", "value": 3}], "Top products")
        assert series.points[0] == ChartPoint(name="", value=0.0)
        assert series.points[1].value == 3.0

    def test_custom_keys(self):
        series = normalize([{"region": "North", "revenue": "847,000"}], "Regions", name_key="region", value_key="revenue")
        assert series.points == (ChartPoint(name="North", value=847000.0),)

    def test_to_dict_shape(self):
        assert normalize([{"name": "A", "value": 1}], "Category Sales").to_dict() == {
            "type": "bar",
            "isFallback": False,
            "data": [{"name": "A", "value": 1.0}],
        }
