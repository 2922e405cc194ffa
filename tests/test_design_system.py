"""Tests for dashboard value formatting."""

import pytest

from deals_dashboard.schema.design_system import (
    format_currency,
    format_deal_count,
    format_integer,
    format_link,
    format_platform_cell,
    group_indian,
    sort_indicator,
)
from deals_dashboard.schema.models import PlatformTotals, SortField, SortOrder, SortSpec


class TestGroupIndian:
    @pytest.mark.parametrize("digits,expected", [
        ("5", "5"),
        ("999", "999"),
        ("1000", "1,000"),
        ("100000", "1,00,000"),
        ("1234567", "12,34,567"),
        ("12345678", "1,23,45,678"),
    ])
    def test_grouping(self, digits, expected):
        assert group_indian(digits) == expected


class TestFormatCurrency:
    def test_lakh(self):
        assert format_currency(1234567) == "₹12,34,567"

    def test_small(self):
        assert format_currency(500) == "₹500"

    def test_zero(self):
        assert format_currency(0) == "₹0"

    def test_whole_float(self):
        assert format_currency(150000.0) == "₹1,50,000"

    def test_fraction(self):
        assert format_currency(1500.5) == "₹1,500.5"

    def test_negative(self):
        assert format_currency(-2500) == "-₹2,500"

    def test_custom_symbol(self):
        assert format_currency(1000, symbol="$") == "$1,000"

    def test_none(self):
        assert format_currency(None) == "N/A"

    def test_nan(self):
        assert format_currency(float("nan")) == "N/A"


class TestCounts:
    def test_integer(self):
        assert format_integer(1234) == "1,234"
        assert format_integer(None) == "N/A"

    def test_deal_count(self):
        assert format_deal_count(3) == "3 deals"


class TestPlatformCell:
    def test_with_deals(self):
        assert format_platform_cell(PlatformTotals(2, 1500)) == "2 deals / ₹1,500"

    def test_empty(self):
        assert format_platform_cell(PlatformTotals()) == "-"
        assert format_platform_cell(None) == "-"


class TestFormatLink:
    def test_real_link(self):
        assert format_link("https://youtu.be/abc") == "View"

    def test_placeholder(self):
        assert format_link("Yet to share link") == "Yet to share link"

    def test_empty(self):
        assert format_link("") == "-"
        assert format_link(None) == "-"

    def test_custom_placeholders(self):
        assert format_link("TBD", placeholders=("TBD",)) == "TBD"
        assert format_link("NA", placeholders=("TBD",)) == "View"


class TestSortIndicator:
    def test_active_ascending(self):
        spec = SortSpec(SortField.POC, SortOrder.ASC)
        assert sort_indicator(SortField.POC, spec) == "↑"

    def test_active_descending(self):
        assert sort_indicator(SortField.DEAL_SIZE, SortSpec()) == "↓"

    def test_inactive(self):
        assert sort_indicator(SortField.CAMPAIGN, SortSpec()) == ""
