"""Deal models - the contract between ingestion, aggregator, and presentation.

Defines the typed structure of a deal record, the closed selector enums used
to sort, filter and group deals, the aggregate records the aggregator
produces, and the design system used when rendering dashboard snapshots.
"""

import math
from dataclasses import dataclass, field
from enum import Enum
from typing import Any


# ---------------------------------------------------------------------------
# Errors
# ---------------------------------------------------------------------------

class DealValidationError(ValueError):
    """Raised when one or more deal records fail validation.

    ``errors`` holds every individual problem so the caller can report them
    all at once instead of fixing a data file one row at a time.
    """

    def __init__(self, errors: list[str] | str):
        if isinstance(errors, str):
            errors = [errors]
        self.errors = list(errors)
        super().__init__("; ".join(self.errors))


# ---------------------------------------------------------------------------
# Enums
# ---------------------------------------------------------------------------

class PlatformCategory(Enum):
    """Platform bucket derived from a deal's deliverables text."""
    YOUTUBE = "YouTube"
    INSTAGRAM_STORY = "Instagram-Story"
    INSTAGRAM_REELS = "Instagram-Reels"
    INSTAGRAM_POST = "Instagram-Post"
    INSTAGRAM_OTHER = "Instagram-Other"
    OTHER = "Other"


class SortField(Enum):
    """Fields the deals table can be sorted by."""
    POC = "poc"
    CREATOR_NAME = "creatorName"
    CAMPAIGN = "campaign"
    DEAL_SIZE = "dealSize"


class SortOrder(Enum):
    ASC = "asc"
    DESC = "desc"


class GroupField(Enum):
    """Fields deals can be partitioned by for key aggregates."""
    POC = "poc"
    CAMPAIGN = "campaign"


# Values of the link column that mean "no link yet"
LINK_PLACEHOLDERS = ("NA", "Yet to share link", "Brand Deal Screenshots")

_REQUIRED_TEXT = ("poc", "creator_name", "campaign")
_OPTIONAL_TEXT = ("agency", "deliverables", "link")

# Accepted source keys per attribute (camelCase export keys first)
_KEY_ALIASES = {
    "poc": ("poc",),
    "creator_name": ("creatorName", "creator_name"),
    "campaign": ("campaign",),
    "agency": ("agency",),
    "deliverables": ("deliverables",),
    "link": ("link",),
    "deal_size": ("dealSize", "deal_size"),
}


def _lookup(d: dict, attr: str):
    for key in _KEY_ALIASES[attr]:
        if key in d:
            return True, d[key]
    return False, None


def is_valid_amount(value: Any) -> bool:
    """True if *value* is a finite, non-negative int/float (bools excluded)."""
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return False
    if isinstance(value, float) and (math.isnan(value) or math.isinf(value)):
        return False
    return value >= 0


# ---------------------------------------------------------------------------
# Deal
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class Deal:
    """One sponsorship deal. Immutable; validated on construction."""
    poc: str
    creator_name: str
    campaign: str
    agency: str = ""
    deliverables: str = ""
    link: str = ""
    deal_size: int | float | None = None

    def __post_init__(self):
        errors = []
        for name in _REQUIRED_TEXT:
            value = getattr(self, name)
            if not isinstance(value, str):
                errors.append(f"{name} must be a string, got {type(value).__name__}")
            elif not value.strip():
                errors.append(f"{name} must not be empty")
        for name in _OPTIONAL_TEXT:
            value = getattr(self, name)
            if not isinstance(value, str):
                errors.append(f"{name} must be a string, got {type(value).__name__}")
        if self.deal_size is None:
            errors.append("deal_size is required")
        elif not is_valid_amount(self.deal_size):
            errors.append(f"deal_size must be a non-negative number, got {self.deal_size!r}")
        if errors:
            raise DealValidationError(errors)

    def has_link(self, placeholders=LINK_PLACEHOLDERS) -> bool:
        """True if the link column holds an actual link, not a placeholder."""
        return bool(self.link) and self.link not in placeholders

    def field_values(self) -> tuple:
        """All field values in declaration order (used by free-text search)."""
        return (self.poc, self.creator_name, self.campaign, self.agency,
                self.deliverables, self.link, self.deal_size)

    def to_dict(self) -> dict:
        return {
            "poc": self.poc,
            "creatorName": self.creator_name,
            "campaign": self.campaign,
            "agency": self.agency,
            "deliverables": self.deliverables,
            "link": self.link,
            "dealSize": self.deal_size,
        }

    @classmethod
    def from_dict(cls, d: dict) -> "Deal":
        """Build a Deal from a camelCase or snake_case mapping.

        Raises:
            DealValidationError: If a required key is missing or a value
                fails validation.
        """
        missing = []
        kwargs: dict[str, Any] = {}
        for attr in _KEY_ALIASES:
            found, value = _lookup(d, attr)
            if found:
                kwargs[attr] = value
            elif attr in _REQUIRED_TEXT or attr == "deal_size":
                missing.append(_KEY_ALIASES[attr][0])
        if missing:
            raise DealValidationError(
                [f"missing required field '{name}'" for name in missing]
            )
        return cls(**kwargs)


# ---------------------------------------------------------------------------
# Filter and sort state
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class FilterCriteria:
    """Optional predicates; an empty string or None means "not filtered"."""
    poc: str | None = None
    creator_name: str | None = None
    campaign: str | None = None
    search_term: str | None = None

    @property
    def is_empty(self) -> bool:
        return not (self.poc or self.creator_name or self.campaign or self.search_term)

    def to_dict(self) -> dict:
        d: dict[str, Any] = {}
        if self.poc:
            d["poc"] = self.poc
        if self.creator_name:
            d["creatorName"] = self.creator_name
        if self.campaign:
            d["campaign"] = self.campaign
        if self.search_term:
            d["search"] = self.search_term
        return d


@dataclass(frozen=True)
class SortSpec:
    """Current sort state of the deals table (default: largest deals first)."""
    field: SortField = SortField.DEAL_SIZE
    order: SortOrder = SortOrder.DESC

    def to_dict(self) -> dict:
        return {"field": self.field.value, "order": self.order.value}

    @classmethod
    def from_dict(cls, d: dict) -> "SortSpec":
        return cls(
            field=SortField(d.get("field", SortField.DEAL_SIZE.value)),
            order=SortOrder(d.get("order", SortOrder.DESC.value)),
        )


# ---------------------------------------------------------------------------
# Aggregate records
# ---------------------------------------------------------------------------

@dataclass
class KeyAggregate:
    """Count and sum of deals sharing one POC or campaign value."""
    key: str
    deal_count: int = 0
    total_amount: int | float = 0

    def to_dict(self) -> dict:
        return {"key": self.key, "deal_count": self.deal_count,
                "total_amount": self.total_amount}


@dataclass
class PlatformTotals:
    deal_count: int = 0
    total_amount: int | float = 0

    def add(self, deal: Deal) -> None:
        self.deal_count += 1
        self.total_amount += deal.deal_size

    def to_dict(self) -> dict:
        return {"deal_count": self.deal_count, "total_amount": self.total_amount}


def _empty_platforms() -> dict:
    return {category: PlatformTotals() for category in PlatformCategory}


@dataclass
class CreatorAggregate:
    """Per-creator totals with a breakdown by platform category.

    ``per_platform`` always holds every PlatformCategory, zeroed when unused.
    """
    creator: str
    deal_count: int = 0
    total_amount: int | float = 0
    per_platform: dict[PlatformCategory, PlatformTotals] = field(
        default_factory=_empty_platforms
    )

    def to_dict(self) -> dict:
        return {
            "creator": self.creator,
            "deal_count": self.deal_count,
            "total_amount": self.total_amount,
            "per_platform": {
                category.value: totals.to_dict()
                for category, totals in self.per_platform.items()
            },
        }


@dataclass
class SummaryStats:
    """Headline numbers over the full (unfiltered) deal collection."""
    total_deals: int = 0
    total_deal_size: int | float = 0
    unique_pocs: int = 0
    unique_creators: int = 0
    unique_campaigns: int = 0
    poc_list: list[str] = field(default_factory=list)
    creator_list: list[str] = field(default_factory=list)
    campaign_list: list[str] = field(default_factory=list)

    def to_dict(self) -> dict:
        return {
            "total_deals": self.total_deals,
            "total_deal_size": self.total_deal_size,
            "unique_pocs": self.unique_pocs,
            "unique_creators": self.unique_creators,
            "unique_campaigns": self.unique_campaigns,
            "poc_list": list(self.poc_list),
            "creator_list": list(self.creator_list),
            "campaign_list": list(self.campaign_list),
        }


# ---------------------------------------------------------------------------
# Position and styling primitives
# ---------------------------------------------------------------------------

@dataclass
class Position:
    """Shape position and dimensions in inches."""
    left: float
    top: float
    width: float
    height: float


# ---------------------------------------------------------------------------
# DesignSystem - styling for dashboard snapshots
# ---------------------------------------------------------------------------

@dataclass
class DesignSystem:
    """Colors and typography applied to exported dashboard slides."""
    # Colors
    primary: str = "#007BFF"
    dark_text: str = "#333333"
    white: str = "#FFFFFF"
    table_header: str = "#343A40"
    poc_header: str = "#007BFF"
    creator_header: str = "#28A745"
    campaign_header: str = "#FFC107"
    muted: str = "#6C757D"
    youtube: str = "#DC3545"
    instagram_reels: str = "#E91E63"
    instagram_story: str = "#9C27B0"
    instagram_post: str = "#673AB7"

    # Typography
    primary_font: str = "Arial"
    title_size_pt: float = 28.0
    body_size_pt: float = 12.0
    kpi_number_size_pt: float = 32.0
    kpi_label_size_pt: float = 12.0
    table_size_pt: float = 10.0
    caption_size_pt: float = 9.0

    def to_dict(self) -> dict:
        return {
            "colors": {
                "primary": self.primary,
                "dark_text": self.dark_text,
                "white": self.white,
                "table_header": self.table_header,
                "poc_header": self.poc_header,
                "creator_header": self.creator_header,
                "campaign_header": self.campaign_header,
                "muted": self.muted,
                "youtube": self.youtube,
                "instagram_reels": self.instagram_reels,
                "instagram_story": self.instagram_story,
                "instagram_post": self.instagram_post,
            },
            "typography": {
                "primary_font": self.primary_font,
                "title_size_pt": self.title_size_pt,
                "body_size_pt": self.body_size_pt,
                "kpi_number_size_pt": self.kpi_number_size_pt,
                "kpi_label_size_pt": self.kpi_label_size_pt,
                "table_size_pt": self.table_size_pt,
                "caption_size_pt": self.caption_size_pt,
            },
        }

    @classmethod
    def from_dict(cls, d: dict) -> "DesignSystem":
        defaults = cls()
        colors = d.get("colors", {})
        typo = d.get("typography", {})
        kwargs = {}
        for name, value in defaults.to_dict()["colors"].items():
            kwargs[name] = colors.get(name, value)
        for name, value in defaults.to_dict()["typography"].items():
            kwargs[name] = typo.get(name, value)
        return cls(**kwargs)


# ---------------------------------------------------------------------------
# DashboardConfig - top-level container
# ---------------------------------------------------------------------------

@dataclass
class DashboardConfig:
    """Presentation settings for the dashboard.

    Kept separate from the deal data: the same config can be reused across
    data files, and every key is optional when loaded from YAML.
    """
    title: str = "Deals Dashboard"
    currency_symbol: str = "₹"
    link_placeholders: tuple[str, ...] = LINK_PLACEHOLDERS
    default_sort: SortSpec = field(default_factory=SortSpec)
    table_rows_per_slide: int = 15
    width_inches: float = 13.333
    height_inches: float = 7.5
    design: DesignSystem = field(default_factory=DesignSystem)

    def to_dict(self) -> dict:
        return {
            "title": self.title,
            "currency_symbol": self.currency_symbol,
            "link_placeholders": list(self.link_placeholders),
            "default_sort": self.default_sort.to_dict(),
            "table_rows_per_slide": self.table_rows_per_slide,
            "dimensions": {
                "width_inches": self.width_inches,
                "height_inches": self.height_inches,
            },
            "design": self.design.to_dict(),
        }

    @classmethod
    def from_dict(cls, d: dict | None) -> "DashboardConfig":
        d = d or {}
        dims = d.get("dimensions", {})
        rows = d.get("table_rows_per_slide", 15)
        if not isinstance(rows, int) or rows < 1:
            raise ValueError(f"table_rows_per_slide must be a positive integer, got {rows!r}")
        return cls(
            title=d.get("title", "Deals Dashboard"),
            currency_symbol=d.get("currency_symbol", "₹"),
            link_placeholders=tuple(d.get("link_placeholders", LINK_PLACEHOLDERS)),
            default_sort=SortSpec.from_dict(d.get("default_sort", {})),
            table_rows_per_slide=rows,
            width_inches=dims.get("width_inches", 13.333),
            height_inches=dims.get("height_inches", 7.5),
            design=DesignSystem.from_dict(d.get("design", {})),
        )
