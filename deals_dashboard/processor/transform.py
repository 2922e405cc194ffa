"""Dashboard transformation module.

Takes the loaded deal collection plus the current dashboard state (filters,
sort, active view) and produces a flat data payload for the presentation
layer - the CLI tables and the PPTX snapshot both read from it.

The ``DashboardTransformer`` holds the full collection and its summary,
which is computed once and never filtered. Each call to ``transform``
recomputes the filtered view and every grouped aggregate from scratch.

Data key convention:
    <view>.<field>        - single value
    <view>.rows           - list of row dicts for a table
    <view>.chart_cats     - category labels for a chart
    <view>.chart_values   - values for a single-series chart
"""

from dataclasses import dataclass, field, replace
from enum import Enum

from deals_dashboard.schema.models import (
    DashboardConfig,
    Deal,
    FilterCriteria,
    GroupField,
    PlatformCategory,
    SortField,
    SortOrder,
    SortSpec,
)

from .aggregator import (
    categorize_platform,
    compute_summary,
    filter_deals,
    group_by_creator,
    group_by_field,
    sort_deals,
    total_deal_size,
    validate_deals,
)


# ---------------------------------------------------------------------------
# Dashboard state
# ---------------------------------------------------------------------------

class DashboardView(Enum):
    TABLE = "table"
    SUMMARY = "summary"
    BY_POC = "by_poc"
    BY_CREATOR = "by_creator"
    BY_CAMPAIGN = "by_campaign"


@dataclass(frozen=True)
class DashboardState:
    """What the user currently has selected. Immutable; update via replace()."""
    filters: FilterCriteria = field(default_factory=FilterCriteria)
    sort: SortSpec = field(default_factory=SortSpec)
    view: DashboardView = DashboardView.TABLE

    def reset_filters(self) -> "DashboardState":
        """Clear every filter and the search term; sort and view are kept."""
        return replace(self, filters=FilterCriteria())

    def toggle_sort(self, sort_field: SortField | str) -> "DashboardState":
        """Select *sort_field* and flip the direction, like a header click."""
        order = SortOrder.DESC if self.sort.order == SortOrder.ASC else SortOrder.ASC
        return replace(self, sort=SortSpec(field=SortField(sort_field), order=order))


# Platform columns shown in the creator breakdown. Instagram posts that fit
# no format are shown together with everything else under "Other".
CREATOR_PLATFORM_COLUMNS = [
    ("youtube", "YouTube", (PlatformCategory.YOUTUBE,)),
    ("instagram_reels", "IG Reels", (PlatformCategory.INSTAGRAM_REELS,)),
    ("instagram_story", "IG Story", (PlatformCategory.INSTAGRAM_STORY,)),
    ("instagram_post", "IG Post", (PlatformCategory.INSTAGRAM_POST,)),
    ("other", "Other", (PlatformCategory.INSTAGRAM_OTHER, PlatformCategory.OTHER)),
]


# ---------------------------------------------------------------------------
# DashboardTransformer
# ---------------------------------------------------------------------------

class DashboardTransformer:
    """Transforms the deal collection into a dashboard data payload.

    Args:
        deals: The full deal collection, loaded once by the caller.
        config: Presentation settings (link placeholders, default sort).

    Usage::

        transformer = DashboardTransformer(ingest("deals.csv"))
        state = transformer.initial_state()
        state = replace(state, filters=FilterCriteria(poc="Asha"))
        payload = transformer.transform(state)
        payload["table.total_amount"]
    """

    def __init__(self, deals, config: DashboardConfig | None = None):
        self.config = config or DashboardConfig()
        self.deals: tuple[Deal, ...] = validate_deals(deals)
        self.summary = compute_summary(self.deals)

    def initial_state(self) -> DashboardState:
        return DashboardState(sort=self.config.default_sort)

    def filtered(self, state: DashboardState) -> list[Deal]:
        """Deals matching the state's filters, in the state's sort order."""
        matches = filter_deals(self.deals, state.filters)
        return sort_deals(matches, state.sort.field, state.sort.order)

    def transform(self, state: DashboardState | None = None) -> dict:
        """Build the payload for every view from the given state.

        Returns:
            Flat dict mapping data keys to values.
        """
        if state is None:
            state = self.initial_state()
        deals = self.filtered(state)

        payload = {"view": state.view.value}
        payload.update(self._transform_filters(state))
        payload.update(self._transform_table(deals, state))
        payload.update(self._transform_summary())
        payload.update(self._transform_groups(deals, GroupField.POC, "by_poc"))
        payload.update(self._transform_creators(deals))
        payload.update(self._transform_groups(deals, GroupField.CAMPAIGN, "by_campaign"))
        return payload

    # -------------------------------------------------------------------
    # Views
    # -------------------------------------------------------------------

    def _transform_filters(self, state: DashboardState) -> dict:
        return {
            "filters.poc_options": list(self.summary.poc_list),
            "filters.creator_options": list(self.summary.creator_list),
            "filters.campaign_options": list(self.summary.campaign_list),
            "filters.active": state.filters.to_dict(),
        }

    def _transform_table(self, deals: list[Deal], state: DashboardState) -> dict:
        placeholders = self.config.link_placeholders
        rows = []
        for deal in deals:
            rows.append({
                "poc": deal.poc,
                "creator_name": deal.creator_name,
                "campaign": deal.campaign,
                "agency": deal.agency,
                "deliverables": deal.deliverables,
                "link": deal.link,
                "link_url": deal.link if deal.has_link(placeholders) else None,
                "deal_size": deal.deal_size,
                "platform": categorize_platform(deal.deliverables).value,
            })
        return {
            "table.rows": rows,
            "table.deal_count": len(deals),
            "table.total_amount": total_deal_size(deals),
            "table.sort_field": state.sort.field.value,
            "table.sort_order": state.sort.order.value,
        }

    def _transform_summary(self) -> dict:
        return {f"summary.{k}": v for k, v in self.summary.to_dict().items()}

    def _transform_groups(self, deals: list[Deal], group_field: GroupField,
                          prefix: str) -> dict:
        groups = group_by_field(deals, group_field)
        return {
            f"{prefix}.rows": [g.to_dict() for g in groups],
            f"{prefix}.chart_cats": [g.key for g in groups],
            f"{prefix}.chart_values": [g.total_amount for g in groups],
        }

    def _transform_creators(self, deals: list[Deal]) -> dict:
        rows = []
        for agg in group_by_creator(deals):
            row = {
                "creator": agg.creator,
                "deal_count": agg.deal_count,
                "total_amount": agg.total_amount,
            }
            for key, _, categories in CREATOR_PLATFORM_COLUMNS:
                row[key] = {
                    "deal_count": sum(agg.per_platform[c].deal_count for c in categories),
                    "total_amount": sum(agg.per_platform[c].total_amount for c in categories),
                }
            rows.append(row)
        return {"by_creator.rows": rows}
