"""Deal aggregator - filter, search, sort, group and summarise deals.

Every function here is pure: it takes the deal collection as an argument,
never mutates it, and returns new lists/records. Formatting is left to the
presentation layer (``deals_dashboard.schema.design_system``).

Field access goes through closed enums (SortField, GroupField) mapped to
explicit accessor functions rather than attribute lookup by name.

Usage::

    from deals_dashboard.processor.aggregator import (
        compute_summary, filter_deals, group_by_creator, sort_deals,
    )

    summary = compute_summary(deals)          # always over the full set
    view = filter_deals(deals, FilterCriteria(poc="Asha", search_term="reel"))
    view = sort_deals(view, SortField.DEAL_SIZE, SortOrder.DESC)
    creators = group_by_creator(view)
"""

from collections.abc import Callable, Iterable, Sequence

from deals_dashboard.schema.models import (
    CreatorAggregate,
    Deal,
    DealValidationError,
    FilterCriteria,
    GroupField,
    KeyAggregate,
    PlatformCategory,
    SortField,
    SortOrder,
    SummaryStats,
)


# ---------------------------------------------------------------------------
# Field accessors
# ---------------------------------------------------------------------------

_SORT_ACCESSORS: dict[SortField, Callable[[Deal], object]] = {
    SortField.POC: lambda d: d.poc,
    SortField.CREATOR_NAME: lambda d: d.creator_name,
    SortField.CAMPAIGN: lambda d: d.campaign,
    SortField.DEAL_SIZE: lambda d: d.deal_size,
}

_GROUP_ACCESSORS: dict[GroupField, Callable[[Deal], str]] = {
    GroupField.POC: lambda d: d.poc,
    GroupField.CAMPAIGN: lambda d: d.campaign,
}


# ---------------------------------------------------------------------------
# Platform categorisation
# ---------------------------------------------------------------------------

# Ordered rules, first match wins. "yt" and "ig" are short substrings and
# also match words such as "digital"; that matching is kept as-is.
_YOUTUBE_MARKERS = ("yt", "youtube")
_INSTAGRAM_MARKERS = ("ig", "insta")
_INSTAGRAM_FORMATS = (
    ("story", PlatformCategory.INSTAGRAM_STORY),
    ("reel", PlatformCategory.INSTAGRAM_REELS),
    ("post", PlatformCategory.INSTAGRAM_POST),
)


def categorize_platform(deliverable_text: str | None) -> PlatformCategory:
    """Bucket a deliverables description into a PlatformCategory.

    Examples:
        "YT Short"       -> YouTube
        "IG Story"       -> Instagram-Story
        "Instagram Reel" -> Instagram-Reels
        "Print Ad"       -> Other
    """
    text = (deliverable_text or "").lower()
    if any(marker in text for marker in _YOUTUBE_MARKERS):
        return PlatformCategory.YOUTUBE
    if any(marker in text for marker in _INSTAGRAM_MARKERS):
        for keyword, category in _INSTAGRAM_FORMATS:
            if keyword in text:
                return category
        return PlatformCategory.INSTAGRAM_OTHER
    return PlatformCategory.OTHER


# ---------------------------------------------------------------------------
# Validation
# ---------------------------------------------------------------------------

def validate_deals(deals: Iterable) -> tuple[Deal, ...]:
    """Return *deals* as a tuple, checking every item is a Deal record.

    Deal validates its own fields on construction, so this only has to
    reject foreign objects (raw dicts, None) that slipped past ingestion.
    """
    result = tuple(deals)
    errors = [
        f"item {idx}: expected Deal, got {type(item).__name__}"
        for idx, item in enumerate(result, start=1)
        if not isinstance(item, Deal)
    ]
    if errors:
        raise DealValidationError(errors)
    return result


def total_deal_size(deals: Iterable[Deal]) -> int | float:
    return sum(deal.deal_size for deal in deals)


# ---------------------------------------------------------------------------
# Filtering
# ---------------------------------------------------------------------------

def _search_text(value) -> str:
    # Whole-number floats read the same as the int they hold
    if isinstance(value, float) and value.is_integer():
        value = int(value)
    return str(value).lower()


def search_matches(deal: Deal, term: str) -> bool:
    """True if *term* occurs (case-insensitively) in any field of *deal*."""
    needle = term.lower()
    return any(needle in _search_text(value) for value in deal.field_values())


def filter_deals(deals: Sequence[Deal], criteria: FilterCriteria | None = None) -> list[Deal]:
    """Apply every active predicate in *criteria* (AND).

    Exact-match predicates compare equality on poc, creator name and
    campaign; the search term is a case-insensitive substring match over
    all fields. Order of the matching deals is preserved. With no active
    predicate the result holds the same deals in the same order.
    """
    result = list(deals)
    if criteria is None or criteria.is_empty:
        return result

    if criteria.poc:
        result = [d for d in result if d.poc == criteria.poc]
    if criteria.creator_name:
        result = [d for d in result if d.creator_name == criteria.creator_name]
    if criteria.campaign:
        result = [d for d in result if d.campaign == criteria.campaign]
    if criteria.search_term:
        result = [d for d in result if search_matches(d, criteria.search_term)]
    return result


# ---------------------------------------------------------------------------
# Sorting
# ---------------------------------------------------------------------------

def sort_deals(
    deals: Sequence[Deal],
    field: SortField | str = SortField.DEAL_SIZE,
    order: SortOrder | str = SortOrder.DESC,
    accessor: Callable[[Deal], object] | None = None,
) -> list[Deal]:
    """Return a new list of *deals* ordered by *field*.

    Strings compare lexicographically, deal sizes numerically. Descending
    is the reverse of ascending. Deals whose key is None sort last in both
    directions. Relative order of equal keys is not part of the contract.

    Args:
        field: A SortField or its value ("poc", "creatorName", "campaign",
            "dealSize").
        order: A SortOrder or its value ("asc", "desc").
        accessor: Overrides the key function for *field*.

    Raises:
        ValueError: If field or order is not recognised.
    """
    field = SortField(field)
    order = SortOrder(order)
    key = accessor or _SORT_ACCESSORS[field]

    present = [d for d in deals if key(d) is not None]
    missing = [d for d in deals if key(d) is None]
    present.sort(key=key, reverse=order == SortOrder.DESC)
    return present + missing


# ---------------------------------------------------------------------------
# Grouping
# ---------------------------------------------------------------------------

def group_by_field(deals: Iterable[Deal], field: GroupField | str) -> list[KeyAggregate]:
    """Count and sum deals per distinct POC or campaign value.

    Sorted by total amount, largest first; equal totals keep the order in
    which their key first appeared.
    """
    key = _GROUP_ACCESSORS[GroupField(field)]
    grouped: dict[str, KeyAggregate] = {}
    for deal in deals:
        value = key(deal)
        agg = grouped.get(value)
        if agg is None:
            agg = grouped[value] = KeyAggregate(key=value)
        agg.deal_count += 1
        agg.total_amount += deal.deal_size
    return sorted(grouped.values(), key=lambda a: a.total_amount, reverse=True)


def group_by_creator(deals: Iterable[Deal]) -> list[CreatorAggregate]:
    """Per-creator totals with every deal routed into one platform bucket.

    Sorted by total amount, largest first, stable on ties.
    """
    grouped: dict[str, CreatorAggregate] = {}
    for deal in deals:
        agg = grouped.get(deal.creator_name)
        if agg is None:
            agg = grouped[deal.creator_name] = CreatorAggregate(creator=deal.creator_name)
        agg.deal_count += 1
        agg.total_amount += deal.deal_size
        agg.per_platform[categorize_platform(deal.deliverables)].add(deal)
    return sorted(grouped.values(), key=lambda a: a.total_amount, reverse=True)


# ---------------------------------------------------------------------------
# Summary
# ---------------------------------------------------------------------------

def compute_summary(all_deals: Sequence[Deal]) -> SummaryStats:
    """Headline statistics over the full, unfiltered collection.

    The sorted distinct lists populate the POC / creator / campaign
    filter options, so this must not be fed a filtered view.
    """
    pocs = sorted({d.poc for d in all_deals})
    creators = sorted({d.creator_name for d in all_deals})
    campaigns = sorted({d.campaign for d in all_deals})
    return SummaryStats(
        total_deals=len(all_deals),
        total_deal_size=total_deal_size(all_deals),
        unique_pocs=len(pocs),
        unique_creators=len(creators),
        unique_campaigns=len(campaigns),
        poc_list=pocs,
        creator_list=creators,
        campaign_list=campaigns,
    )
