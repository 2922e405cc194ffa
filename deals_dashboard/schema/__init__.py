"""Deal schema package - typed models and display rules for the dashboard.

Provides the contract between ingestion, the aggregator, and the
presentation layer:

- models.py: Deal record, selector enums, aggregate records, config
- design_system.py: Value formatting functions (currency, counts, links)
- loader.py: YAML serialization/deserialization
"""

from .design_system import (
    format_currency,
    format_deal_count,
    format_integer,
    format_link,
    format_platform_cell,
    group_indian,
    sort_indicator,
)
from .loader import load_config, save_config
from .models import (
    LINK_PLACEHOLDERS,
    CreatorAggregate,
    DashboardConfig,
    Deal,
    DealValidationError,
    DesignSystem,
    FilterCriteria,
    GroupField,
    KeyAggregate,
    PlatformCategory,
    PlatformTotals,
    Position,
    SortField,
    SortOrder,
    SortSpec,
    SummaryStats,
)

__all__ = [
    # Models
    "LINK_PLACEHOLDERS",
    "CreatorAggregate",
    "DashboardConfig",
    "Deal",
    "DealValidationError",
    "DesignSystem",
    "FilterCriteria",
    "GroupField",
    "KeyAggregate",
    "PlatformCategory",
    "PlatformTotals",
    "Position",
    "SortField",
    "SortOrder",
    "SortSpec",
    "SummaryStats",
    # Loader
    "load_config",
    "save_config",
    # Formatting
    "format_currency",
    "format_deal_count",
    "format_integer",
    "format_link",
    "format_platform_cell",
    "group_indian",
    "sort_indicator",
]
