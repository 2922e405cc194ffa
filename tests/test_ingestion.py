"""Tests for the data ingestion module."""

import json

import pandas as pd
import pytest

from deals_dashboard.processor.ingestion import (
    SOURCE_TYPES,
    clean_columns,
    detect_encoding,
    frame_to_deals,
    infer_source_type,
    ingest,
    ingest_csv,
    ingest_excel,
    ingest_json,
    ingest_yaml,
    normalize_columns,
    parse_deal_size,
)
from deals_dashboard.schema.models import Deal, DealValidationError


_CSV_HEADER = "POC,Creator Name,Campaign,Agency,Deliverables,Link,Deal Size\n"


# ---------------------------------------------------------------------------
# parse_deal_size
# ---------------------------------------------------------------------------

class TestParseDealSize:
    def test_plain_integer(self):
        assert parse_deal_size(42) == 42

    def test_whole_float_becomes_int(self):
        result = parse_deal_size(1500.0)
        assert result == 1500
        assert isinstance(result, int)

    def test_fraction(self):
        assert parse_deal_size(1500.5) == 1500.5

    def test_comma_formatted(self):
        assert parse_deal_size("63,571") == 63571

    def test_indian_grouping(self):
        assert parse_deal_size("1,50,000") == 150000

    def test_rupee_prefix(self):
        assert parse_deal_size("₹ 75,000") == 75000

    def test_rs_prefix(self):
        assert parse_deal_size("Rs. 1200.50") == 1200.5

    def test_whitespace(self):
        assert parse_deal_size("  800 ") == 800

    @pytest.mark.parametrize("value", ["TBD", "abc", "12k", "-500", "1.2.3"])
    def test_non_numeric_raises(self, value):
        with pytest.raises(DealValidationError, match="non-negative number"):
            parse_deal_size(value)

    @pytest.mark.parametrize("value", [None, "", "   ", float("nan")])
    def test_missing_raises(self, value):
        with pytest.raises(DealValidationError, match="missing"):
            parse_deal_size(value)

    def test_negative_number_raises(self):
        with pytest.raises(DealValidationError):
            parse_deal_size(-1)

    def test_bool_raises(self):
        with pytest.raises(DealValidationError):
            parse_deal_size(True)


# ---------------------------------------------------------------------------
# Column cleaning
# ---------------------------------------------------------------------------

class TestColumns:
    def test_clean_columns(self):
        df = pd.DataFrame({" POC ": [1], "Deal Size": [2]})
        assert list(clean_columns(df).columns) == ["POC", "Deal Size"]

    def test_normalize_aliases(self):
        df = pd.DataFrame(columns=["POC", "Creator Name", "Campaign", "Agency",
                                   "Deliverables", "Link", "Deal Size"])
        assert list(normalize_columns(df).columns) == [
            "poc", "creatorName", "campaign", "agency",
            "deliverables", "link", "dealSize",
        ]

    def test_camel_case_kept(self):
        df = pd.DataFrame(columns=["poc", "creatorName", "dealSize"])
        assert list(normalize_columns(df).columns) == ["poc", "creatorName", "dealSize"]

    def test_unknown_columns_kept(self):
        df = pd.DataFrame(columns=["POC", "Notes"])
        assert list(normalize_columns(df).columns) == ["poc", "Notes"]

    def test_canonical_column_not_shadowed_by_alias(self):
        df = pd.DataFrame(columns=["poc", "creatorName", "Creator", "dealSize"])
        assert list(normalize_columns(df).columns) == [
            "poc", "creatorName", "Creator", "dealSize",
        ]

    def test_first_alias_wins(self):
        df = pd.DataFrame(columns=["Creator Name", "Influencer"])
        assert list(normalize_columns(df).columns) == ["creatorName", "Influencer"]


class TestDetectEncoding:
    def test_utf8(self, tmp_path):
        p = tmp_path / "a.csv"
        p.write_text("a,b\n1,2\n", encoding="utf-8")
        assert detect_encoding(p) == ("utf-8-sig", ",")

    def test_utf16(self, tmp_path):
        p = tmp_path / "a.csv"
        p.write_bytes(b"\xff\xfe" + "a\tb\n".encode("utf-16-le"))
        assert detect_encoding(p) == ("utf-16", "\t")


# ---------------------------------------------------------------------------
# Readers
# ---------------------------------------------------------------------------

class TestIngestCsv:
    def test_basic(self, tmp_path):
        p = tmp_path / "deals.csv"
        p.write_text(
            _CSV_HEADER
            + 'Asha,Ravi,Diwali,,IG Reel,NA,"50,000"\n'
            + "Vikram,Meera,Launch,Pixel Media,YT video,https://youtu.be/abc,1200\n",
            encoding="utf-8",
        )
        deals = ingest(p)
        assert len(deals) == 2
        assert deals[0] == Deal("Asha", "Ravi", "Diwali", "", "IG Reel", "NA", 50000)
        assert deals[1].deal_size == 1200
        assert deals[1].has_link()

    def test_na_link_not_treated_as_missing(self, tmp_path):
        p = tmp_path / "deals.csv"
        p.write_text(_CSV_HEADER + "Asha,Ravi,Diwali,NA,IG Reel,NA,100\n",
                     encoding="utf-8")
        df = ingest_csv(p)
        assert df["link"].iloc[0] == "NA"
        assert df["agency"].iloc[0] == "NA"

    def test_utf16_tab_delimited(self, tmp_path):
        p = tmp_path / "deals.csv"
        content = (
            "POC\tCreator\tCampaign\tDeliverables\tDeal Size\n"
            "Asha\tRavi\tDiwali\tIG Story\t1,500\n"
        )
        p.write_bytes(b"\xff\xfe" + content.encode("utf-16-le"))
        deals = ingest(p)
        assert deals[0].creator_name == "Ravi"
        assert deals[0].deal_size == 1500
        assert deals[0].link == ""

    def test_bad_rows_reported_together(self, tmp_path):
        p = tmp_path / "deals.csv"
        p.write_text(
            _CSV_HEADER
            + "Asha,Ravi,Diwali,,IG Reel,NA,TBD\n"
            + "Asha,Ravi,Diwali,,IG Reel,NA,100\n"
            + ",Ravi,Diwali,,IG Reel,NA,\n",
            encoding="utf-8",
        )
        with pytest.raises(DealValidationError) as exc_info:
            ingest(p)
        errors = exc_info.value.errors
        assert errors[0].startswith("row 1:")
        assert errors[1].startswith("row 3:")
        assert len(errors) == 2

    def test_missing_required_column(self, tmp_path):
        p = tmp_path / "deals.csv"
        p.write_text("POC,Campaign\nAsha,Diwali\n", encoding="utf-8")
        with pytest.raises(DealValidationError) as exc_info:
            ingest(p)
        assert "missing required column 'creatorName'" in exc_info.value.errors
        assert "missing required column 'dealSize'" in exc_info.value.errors

    def test_header_only(self, tmp_path):
        p = tmp_path / "deals.csv"
        p.write_text(_CSV_HEADER, encoding="utf-8")
        assert ingest(p) == ()


class TestIngestExcel:
    def test_basic(self, tmp_path):
        p = tmp_path / "deals.xlsx"
        pd.DataFrame({
            "POC": ["Asha", "Neha"],
            "Creator": ["Ravi", "Kabir"],
            "Campaign": ["Diwali", "Launch"],
            "Deliverables": ["IG Post", "Blog"],
            "Link": ["NA", "Brand Deal Screenshots"],
            "Deal Size": [25000, 8000],
        }).to_excel(p, index=False, engine="openpyxl")
        df = ingest_excel(p)
        assert "creatorName" in df.columns
        deals = ingest(p)
        assert [d.deal_size for d in deals] == [25000, 8000]
        assert deals[0].link == "NA"
        assert deals[1].agency == ""


class TestIngestYamlJson:
    def test_yaml(self, tmp_path):
        p = tmp_path / "deals.yaml"
        p.write_text(
            "- poc: Asha\n"
            "  creatorName: Ravi\n"
            "  campaign: Diwali\n"
            "  deliverables: YT Short\n"
            "  dealSize: 3000\n",
            encoding="utf-8",
        )
        df = ingest_yaml(p)
        assert len(df) == 1
        deals = ingest(p)
        assert deals[0].deliverables == "YT Short"
        assert deals[0].agency == ""

    def test_json(self, tmp_path):
        p = tmp_path / "deals.json"
        p.write_text(json.dumps([
            {"poc": "Asha", "creatorName": "Ravi", "campaign": "Diwali",
             "agency": "NA", "deliverables": "IG Reel", "link": "NA",
             "dealSize": 12000},
            {"poc": "Vikram", "creatorName": "Meera", "campaign": "Launch",
             "deliverables": "YT", "dealSize": 4500.5},
        ]), encoding="utf-8")
        assert len(ingest_json(p)) == 2
        deals = ingest(p)
        assert deals[0].link == "NA"
        assert deals[1].deal_size == 4500.5
        assert deals[1].link == ""

    def test_json_not_a_list(self, tmp_path):
        p = tmp_path / "deals.json"
        p.write_text('{"poc": "Asha"}', encoding="utf-8")
        with pytest.raises(DealValidationError, match="expected a list"):
            ingest(p)

    def test_json_empty_list(self, tmp_path):
        p = tmp_path / "deals.json"
        p.write_text("[]", encoding="utf-8")
        assert ingest(p) == ()


# ---------------------------------------------------------------------------
# frame_to_deals
# ---------------------------------------------------------------------------

class TestFrameToDeals:
    def test_numeric_text_cells(self):
        df = pd.DataFrame({
            "poc": ["Asha"], "creatorName": ["Ravi"], "campaign": [2024],
            "dealSize": ["900"],
        })
        deals = frame_to_deals(df)
        assert deals[0].campaign == "2024"

    def test_strips_whitespace(self):
        df = pd.DataFrame({
            "poc": [" Asha "], "creatorName": ["Ravi"], "campaign": ["Diwali"],
            "dealSize": [1],
        })
        assert frame_to_deals(df)[0].poc == "Asha"

    def test_canonical_column_kept_next_to_alias(self):
        df = normalize_columns(pd.DataFrame({
            "poc": ["Asha"], "creatorName": ["Ravi"], "Creator": ["Meera"],
            "campaign": ["Diwali"], "dealSize": [100],
        }))
        assert frame_to_deals(df)[0].creator_name == "Ravi"


# ---------------------------------------------------------------------------
# ingest() dispatcher
# ---------------------------------------------------------------------------

class TestIngestDispatcher:
    def test_unknown_type(self):
        with pytest.raises(ValueError, match="Unknown source type"):
            ingest("/fake/path.csv", "nonexistent_type")

    def test_all_types_registered(self):
        assert set(SOURCE_TYPES) == {"csv", "excel", "yaml", "json"}

    @pytest.mark.parametrize("name,expected", [
        ("deals.csv", "csv"),
        ("deals.TSV", "csv"),
        ("deals.xlsx", "excel"),
        ("deals.xlsm", "excel"),
        ("deals.yml", "yaml"),
        ("deals.json", "json"),
    ])
    def test_infer_source_type(self, name, expected):
        assert infer_source_type(name) == expected

    def test_infer_unknown_suffix(self):
        with pytest.raises(ValueError, match="Cannot infer source type"):
            infer_source_type("deals.parquet")

    def test_explicit_type_overrides_suffix(self, tmp_path):
        p = tmp_path / "deals.txt"
        p.write_text("- {poc: A, creatorName: B, campaign: C, dealSize: 1}\n",
                     encoding="utf-8")
        assert len(ingest(p, "yaml")) == 1
