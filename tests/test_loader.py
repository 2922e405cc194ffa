"""Tests for YAML config round-trips."""

import pytest

from deals_dashboard.schema.loader import load_config, save_config
from deals_dashboard.schema.models import (
    DashboardConfig,
    SortField,
    SortOrder,
    SortSpec,
)


class TestConfigRoundTrip:
    def test_save_and_load(self, tmp_path):
        config = DashboardConfig(
            title="Creator Deals",
            default_sort=SortSpec(SortField.CAMPAIGN, SortOrder.ASC),
        )
        path = tmp_path / "nested" / "dashboard.yaml"
        save_config(config, path)
        assert path.exists()
        assert load_config(path) == config

    def test_unicode_symbol_survives(self, tmp_path):
        path = tmp_path / "dashboard.yaml"
        save_config(DashboardConfig(), path)
        assert "₹" in path.read_text(encoding="utf-8")

    def test_no_path_gives_defaults(self):
        assert load_config() == DashboardConfig()

    def test_empty_file_gives_defaults(self, tmp_path):
        path = tmp_path / "empty.yaml"
        path.write_text("", encoding="utf-8")
        assert load_config(path) == DashboardConfig()

    def test_partial_file(self, tmp_path):
        path = tmp_path / "dashboard.yaml"
        path.write_text("currency_symbol: Rs\ntable_rows_per_slide: 5\n",
                        encoding="utf-8")
        config = load_config(path)
        assert config.currency_symbol == "Rs"
        assert config.table_rows_per_slide == 5
        assert config.title == "Deals Dashboard"

    def test_not_a_mapping(self, tmp_path):
        path = tmp_path / "bad.yaml"
        path.write_text("- a\n- b\n", encoding="utf-8")
        with pytest.raises(ValueError, match="mapping"):
            load_config(path)

