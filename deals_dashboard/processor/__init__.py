"""Data processor module for the deals dashboard."""

from .aggregator import (
    categorize_platform,
    compute_summary,
    filter_deals,
    group_by_creator,
    group_by_field,
    search_matches,
    sort_deals,
    total_deal_size,
    validate_deals,
)
from .ingestion import (
    ingest,
    ingest_csv,
    ingest_excel,
    ingest_json,
    ingest_yaml,
    infer_source_type,
    frame_to_deals,
    parse_deal_size,
    clean_columns,
    normalize_columns,
    read_csv_auto,
    detect_encoding,
    SOURCE_TYPES,
)
from .transform import (
    CREATOR_PLATFORM_COLUMNS,
    DashboardState,
    DashboardTransformer,
    DashboardView,
)
