"""Data ingestion module for the deals dashboard.

Loads the deal collection once, from one of the static file types the
tracking sheet gets exported as, and turns it into validated Deal records:
- Deal tracker export (CSV, UTF-8 comma-delimited or UTF-16 LE tab-delimited)
- Deal tracker workbook (Excel .xlsx / .xlsm)
- Hand-maintained deal lists (YAML or JSON list of mappings)

Header spellings vary between exports ("Creator Name", "creatorName",
"Deal Size", ...); they are normalised onto the canonical camelCase keys
before rows are converted.
"""

import json
import math
import numbers
import re
from pathlib import Path

import pandas as pd
import yaml

from deals_dashboard.schema.models import Deal, DealValidationError


CANONICAL_COLUMNS = [
    "poc", "creatorName", "campaign", "agency",
    "deliverables", "link", "dealSize",
]
REQUIRED_COLUMNS = ["poc", "creatorName", "campaign", "dealSize"]

# Header aliases, keyed by the header lowercased with non-letters removed
COLUMN_ALIASES = {
    "poc": "poc",
    "pointofcontact": "poc",
    "owner": "poc",
    "creatorname": "creatorName",
    "creator": "creatorName",
    "influencer": "creatorName",
    "campaign": "campaign",
    "campaignname": "campaign",
    "brand": "campaign",
    "agency": "agency",
    "deliverables": "deliverables",
    "deliverable": "deliverables",
    "link": "link",
    "url": "link",
    "contentlink": "link",
    "dealsize": "dealSize",
    "dealvalue": "dealSize",
    "amount": "dealSize",
}


# ---------------------------------------------------------------------------
# Value parsers
# ---------------------------------------------------------------------------

_CURRENCY_PREFIX = re.compile(r"^(₹|rs\.?|inr|\$)\s*", re.IGNORECASE)
_AMOUNT = re.compile(r"^\d+(\.\d+)?$")


def parse_deal_size(value):
    """Parse a deal amount, rejecting anything that is not a plain number.

    Examples:
        50000         -> 50000
        "1,50,000"    -> 150000
        "₹ 75,000"    -> 75000
        "Rs. 1200.50" -> 1200.5
        "TBD"         -> DealValidationError

    Whole amounts come back as int. Empty, NaN, negative and non-numeric
    values raise instead of being coerced to zero.
    """
    if isinstance(value, bool):
        raise DealValidationError(f"deal size must be a number, got {value!r}")
    if isinstance(value, numbers.Real):
        f = float(value)
        if math.isnan(f):
            raise DealValidationError("deal size is missing")
        if math.isinf(f) or f < 0:
            raise DealValidationError(f"deal size must be a non-negative number, got {value!r}")
        return int(f) if f.is_integer() else f
    if value is None:
        raise DealValidationError("deal size is missing")

    s = str(value).strip()
    s = _CURRENCY_PREFIX.sub("", s).replace(",", "").strip()
    if not s:
        raise DealValidationError("deal size is missing")
    if not _AMOUNT.match(s):
        raise DealValidationError(f"deal size must be a non-negative number, got {value!r}")
    f = float(s)
    return int(f) if f.is_integer() else f


def _clean_text(value):
    """Normalise a text cell: NaN/None -> "", numbers -> str, strip whitespace."""
    if value is None:
        return ""
    if isinstance(value, float) and math.isnan(value):
        return ""
    if isinstance(value, str):
        return value.strip()
    if isinstance(value, numbers.Real) and float(value).is_integer():
        return str(int(value))
    return str(value).strip()


# ---------------------------------------------------------------------------
# Column cleaning
# ---------------------------------------------------------------------------

def clean_columns(df):
    """Strip whitespace from column names."""
    df.columns = [c.strip() if isinstance(c, str) else c for c in df.columns]
    return df


def normalize_columns(df):
    """Rename known header spellings onto the canonical column names.

    Unknown columns are kept unchanged so nothing is silently dropped. An
    alias is left as-is when its canonical column is already present, or
    already claimed by an earlier alias.
    """
    clean_columns(df)
    rename_map = {}
    for col in df.columns:
        if not isinstance(col, str):
            continue
        key = re.sub(r"[^a-z]", "", col.lower())
        canonical = COLUMN_ALIASES.get(key)
        if not canonical or canonical == col:
            continue
        if canonical in df.columns or canonical in rename_map.values():
            continue
        rename_map[col] = canonical
    if rename_map:
        df = df.rename(columns=rename_map)
    return df


# ---------------------------------------------------------------------------
# Encoding detection and CSV reading
# ---------------------------------------------------------------------------

def detect_encoding(path):
    """Detect whether a file is UTF-16 LE (with BOM) or UTF-8.

    Returns (encoding, delimiter) tuple.
    """
    with open(path, "rb") as f:
        raw = f.read(4)
    if raw[:2] == b"\xff\xfe":
        return "utf-16", "\t"
    return "utf-8-sig", ","


def read_csv_auto(path):
    """Read a CSV file with automatic encoding and delimiter detection.

    Every cell is read as text and "NA" is kept literally, because it is one
    of the link placeholders rather than a missing value.
    """
    encoding, sep = detect_encoding(path)
    df = pd.read_csv(path, encoding=encoding, sep=sep, dtype=str,
                     keep_default_na=False)
    return clean_columns(df)


# ---------------------------------------------------------------------------
# Source-specific readers
# ---------------------------------------------------------------------------

def ingest_csv(path):
    """Read a deal tracker CSV export into a DataFrame of canonical columns."""
    return normalize_columns(read_csv_auto(path))


def ingest_excel(path, sheet_name=0):
    """Read a deal tracker workbook (.xlsx / .xlsm) sheet."""
    df = pd.read_excel(path, sheet_name=sheet_name, engine="openpyxl",
                       keep_default_na=False)
    return normalize_columns(df)


def _records_frame(records, path):
    if records is None:
        return pd.DataFrame(columns=CANONICAL_COLUMNS)
    if not isinstance(records, list) or not all(isinstance(r, dict) for r in records):
        raise DealValidationError(f"{path}: expected a list of deal mappings")
    if not records:
        return pd.DataFrame(columns=CANONICAL_COLUMNS)
    return normalize_columns(pd.DataFrame.from_records(records))


def ingest_yaml(path):
    """Read a YAML list of deal mappings."""
    with open(path, encoding="utf-8") as f:
        return _records_frame(yaml.safe_load(f), path)


def ingest_json(path):
    """Read a JSON list of deal mappings."""
    with open(path, encoding="utf-8") as f:
        return _records_frame(json.load(f), path)


# ---------------------------------------------------------------------------
# Row conversion
# ---------------------------------------------------------------------------

def frame_to_deals(df):
    """Convert a DataFrame of canonical columns into a tuple of Deals.

    Every failing row is collected (rows numbered from 1, data rows only)
    and reported together in a single DealValidationError.
    """
    missing_cols = [c for c in REQUIRED_COLUMNS if c not in df.columns]
    if missing_cols:
        raise DealValidationError(
            [f"missing required column '{c}'" for c in missing_cols]
        )

    deals = []
    errors = []
    for row_no, row in enumerate(df.to_dict(orient="records"), start=1):
        try:
            size = parse_deal_size(row.get("dealSize"))
            deals.append(Deal(
                poc=_clean_text(row.get("poc")),
                creator_name=_clean_text(row.get("creatorName")),
                campaign=_clean_text(row.get("campaign")),
                agency=_clean_text(row.get("agency")),
                deliverables=_clean_text(row.get("deliverables")),
                link=_clean_text(row.get("link")),
                deal_size=size,
            ))
        except DealValidationError as exc:
            errors.extend(f"row {row_no}: {msg}" for msg in exc.errors)

    if errors:
        raise DealValidationError(errors)
    return tuple(deals)


# ---------------------------------------------------------------------------
# Source type registry
# ---------------------------------------------------------------------------

SOURCE_TYPES = {
    "csv": ingest_csv,
    "excel": ingest_excel,
    "yaml": ingest_yaml,
    "json": ingest_json,
}

_SUFFIX_TYPES = {
    ".csv": "csv",
    ".tsv": "csv",
    ".txt": "csv",
    ".xlsx": "excel",
    ".xlsm": "excel",
    ".yaml": "yaml",
    ".yml": "yaml",
    ".json": "json",
}


def infer_source_type(path):
    """Guess the source type from the file suffix."""
    suffix = Path(path).suffix.lower()
    if suffix not in _SUFFIX_TYPES:
        raise ValueError(
            f"Cannot infer source type from '{suffix or path}'. "
            f"Valid types: {', '.join(sorted(SOURCE_TYPES))}"
        )
    return _SUFFIX_TYPES[suffix]


def ingest(path, source_type=None):
    """Load and validate a deal file.

    Args:
        path: Path to the data file.
        source_type: One of 'csv', 'excel', 'yaml', 'json'. Inferred from
            the file suffix when omitted.

    Returns:
        Tuple of Deal records, in file order.

    Raises:
        ValueError: If source_type is not recognized.
        DealValidationError: If any row fails validation.
    """
    if source_type is None:
        source_type = infer_source_type(path)
    if source_type not in SOURCE_TYPES:
        raise ValueError(
            f"Unknown source type '{source_type}'. "
            f"Valid types: {', '.join(sorted(SOURCE_TYPES))}"
        )
    df = SOURCE_TYPES[source_type](path)
    return frame_to_deals(df)
