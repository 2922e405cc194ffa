"""CLI entry point for the deals dashboard.

Loads the deal file once, applies the requested filters and sort, and
prints one dashboard view - or exports all of them as a PPTX snapshot.

Usage::

    # All deals, largest first (the default sort)
    python -m deals_dashboard.cli table --data data/deals.csv

    # Filter by POC and search across every field, sort by creator A-Z
    python -m deals_dashboard.cli table --data data/deals.csv \\
        --poc "Asha" --search reel --sort creatorName --order asc

    # Aggregated views
    python -m deals_dashboard.cli summary --data data/deals.csv
    python -m deals_dashboard.cli by-poc --data data/deals.csv
    python -m deals_dashboard.cli by-creator --data data/deals.csv --campaign "Diwali"
    python -m deals_dashboard.cli by-campaign --data data/deals.xlsx

    # Export every view as a PowerPoint snapshot
    python -m deals_dashboard.cli export --data data/deals.csv \\
        --config dashboard.yaml -o output/dashboard.pptx

    # Show record count and filter options
    python -m deals_dashboard.cli inspect --data data/deals.csv
"""

import argparse
import sys
from pathlib import Path

from deals_dashboard.generator.pptx_builder import DashboardDeckBuilder
from deals_dashboard.processor.ingestion import SOURCE_TYPES, ingest
from deals_dashboard.processor.transform import (
    CREATOR_PLATFORM_COLUMNS,
    DashboardState,
    DashboardTransformer,
    DashboardView,
)
from deals_dashboard.schema.design_system import (
    format_currency,
    format_link,
    format_platform_cell,
    sort_indicator,
)
from deals_dashboard.schema.loader import load_config
from deals_dashboard.schema.models import (
    DealValidationError,
    FilterCriteria,
    PlatformTotals,
    SortField,
    SortOrder,
    SortSpec,
)


# ---------------------------------------------------------------------------
# Loading
# ---------------------------------------------------------------------------

def _load_config(args):
    """Load a DashboardConfig from --config, or defaults."""
    path = getattr(args, "config", None)
    if not path:
        return load_config()
    p = Path(path)
    if not p.exists():
        _error(f"Config file not found: {p}")
    try:
        return load_config(p)
    except ValueError as exc:
        _error(f"Invalid config {p}: {exc}")


def _load_deals(args):
    """Ingest the deal file named by --data, reporting every bad row."""
    p = Path(args.data)
    if not p.exists():
        _error(f"Data file not found: {p}")
    try:
        deals = ingest(p, getattr(args, "source_type", None))
    except DealValidationError as exc:
        for msg in exc.errors:
            _warn(msg)
        _error(f"{len(exc.errors)} validation error(s) in {p}")
    except ValueError as exc:
        _error(str(exc))
    _info(f"Loaded {len(deals)} deals from {p}")
    if not deals:
        _warn("Data file contains no deals")
    return deals


def _build_state(args, config, view):
    """Turn filter/sort flags into a DashboardState."""
    filters = FilterCriteria(
        poc=getattr(args, "poc", None),
        creator_name=getattr(args, "creator", None),
        campaign=getattr(args, "campaign", None),
        search_term=getattr(args, "search", None),
    )
    sort = config.default_sort
    if getattr(args, "sort", None) or getattr(args, "order", None):
        sort = SortSpec(
            field=SortField(args.sort or sort.field.value),
            order=SortOrder(args.order or sort.order.value),
        )
    return DashboardState(filters=filters, sort=sort, view=view)


def _prepare(args, view):
    config = _load_config(args)
    deals = _load_deals(args)
    transformer = DashboardTransformer(deals, config)
    state = _build_state(args, config, view)
    if not state.filters.is_empty:
        _info(f"Filters: {state.filters.to_dict()}")
    return config, transformer.transform(state)


# ---------------------------------------------------------------------------
# Text rendering
# ---------------------------------------------------------------------------

def _print_table(headers, rows, right_align=()):
    """Print a plain-text table with padded columns."""
    widths = [len(h) for h in headers]
    for row in rows:
        for idx, cell in enumerate(row):
            widths[idx] = max(widths[idx], len(cell))

    def fmt(cells):
        parts = []
        for idx, cell in enumerate(cells):
            if idx in right_align:
                parts.append(cell.rjust(widths[idx]))
            else:
                parts.append(cell.ljust(widths[idx]))
        return "  ".join(parts).rstrip()

    print(fmt(headers))
    print("  ".join("-" * w for w in widths))
    for row in rows:
        print(fmt(row))


def _filtered_banner(payload, symbol):
    total = format_currency(payload["table.total_amount"], symbol)
    print(f"Showing {payload['table.deal_count']} deals | Total: {total}")


# ---------------------------------------------------------------------------
# Commands
# ---------------------------------------------------------------------------

def cmd_table(args):
    """Print the filtered, sorted deals table."""
    config, payload = _prepare(args, DashboardView.TABLE)
    symbol = config.currency_symbol
    sort = SortSpec(SortField(payload["table.sort_field"]),
                    SortOrder(payload["table.sort_order"]))

    def header(text, field):
        return f"{text} {sort_indicator(field, sort)}".strip()

    headers = [
        header("POC", SortField.POC),
        header("Creator", SortField.CREATOR_NAME),
        header("Campaign", SortField.CAMPAIGN),
        "Agency",
        "Deliverables",
        "Link",
        header("Deal Size", SortField.DEAL_SIZE),
    ]
    rows = []
    for deal in payload["table.rows"]:
        link = deal["link_url"] if args.full_links and deal["link_url"] else \
            format_link(deal["link"], config.link_placeholders)
        rows.append([
            deal["poc"], deal["creator_name"], deal["campaign"],
            deal["agency"] or "-", deal["deliverables"], link,
            format_currency(deal["deal_size"], symbol),
        ])

    _filtered_banner(payload, symbol)
    if rows:
        print()
        _print_table(headers, rows, right_align=(6,))


def cmd_summary(args):
    """Print the headline statistics for the full collection."""
    config, payload = _prepare(args, DashboardView.SUMMARY)
    print(f"Total Deals:      {payload['summary.total_deals']}")
    print(f"Total Value:      "
          f"{format_currency(payload['summary.total_deal_size'], config.currency_symbol)}")
    print(f"Unique POCs:      {payload['summary.unique_pocs']}")
    print(f"Unique Creators:  {payload['summary.unique_creators']}")
    print(f"Unique Campaigns: {payload['summary.unique_campaigns']}")


def _print_key_view(args, view, prefix, key_header):
    config, payload = _prepare(args, view)
    rows = [
        [g["key"], str(g["deal_count"]),
         format_currency(g["total_amount"], config.currency_symbol)]
        for g in payload[f"{prefix}.rows"]
    ]
    _filtered_banner(payload, config.currency_symbol)
    if rows:
        print()
        _print_table([key_header, "Number of Deals", "Total Amount"], rows,
                     right_align=(1, 2))


def cmd_by_poc(args):
    """Print deal count and total per point of contact."""
    _print_key_view(args, DashboardView.BY_POC, "by_poc", "POC")


def cmd_by_campaign(args):
    """Print deal count and total per campaign."""
    _print_key_view(args, DashboardView.BY_CAMPAIGN, "by_campaign", "Campaign")


def cmd_by_creator(args):
    """Print per-creator totals with the platform breakdown."""
    config, payload = _prepare(args, DashboardView.BY_CREATOR)
    symbol = config.currency_symbol
    headers = ["Creator", "Total Deals", "Total Amount"]
    headers += [label for _, label, _ in CREATOR_PLATFORM_COLUMNS]

    rows = []
    for item in payload["by_creator.rows"]:
        row = [item["creator"], str(item["deal_count"]),
               format_currency(item["total_amount"], symbol)]
        for key, _, _ in CREATOR_PLATFORM_COLUMNS:
            cell = item[key]
            row.append(format_platform_cell(
                PlatformTotals(cell["deal_count"], cell["total_amount"]), symbol))
        rows.append(row)

    _filtered_banner(payload, symbol)
    if rows:
        print()
        _print_table(headers, rows, right_align=tuple(range(1, len(headers))))


def cmd_export(args):
    """Export every dashboard view as a PPTX snapshot."""
    config, payload = _prepare(args, DashboardView.TABLE)

    _info("Building PPTX...")
    pptx_bytes = DashboardDeckBuilder(config).build(payload)

    output = Path(args.output)
    output.parent.mkdir(parents=True, exist_ok=True)
    output.write_bytes(pptx_bytes)
    _info(f"Written: {output} ({len(pptx_bytes):,} bytes)")


def cmd_inspect(args):
    """Show record count and the filter option lists."""
    config, payload = _prepare(args, DashboardView.SUMMARY)

    print(f"Deals:     {payload['summary.total_deals']}")
    print(f"POCs:      {payload['summary.unique_pocs']}")
    print(f"Creators:  {payload['summary.unique_creators']}")
    print(f"Campaigns: {payload['summary.unique_campaigns']}")

    if args.verbose:
        for label, key in (("POC", "filters.poc_options"),
                           ("Creator", "filters.creator_options"),
                           ("Campaign", "filters.campaign_options")):
            print()
            print(f"{label} options:")
            for option in payload[key]:
                print(f"  {option}")


# ---------------------------------------------------------------------------
# Output helpers
# ---------------------------------------------------------------------------

def _info(msg):
    print(f"  {msg}", file=sys.stderr)


def _warn(msg):
    print(f"  WARNING: {msg}", file=sys.stderr)


def _error(msg):
    print(f"  ERROR: {msg}", file=sys.stderr)
    sys.exit(1)


# ---------------------------------------------------------------------------
# Argument parsing
# ---------------------------------------------------------------------------

def build_parser():
    """Build the argument parser."""
    parser = argparse.ArgumentParser(
        prog="deals-dashboard",
        description="Filter, sort and aggregate sponsorship deals.",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    # ---- table ----
    tbl = subparsers.add_parser(
        "table",
        help="Show the filtered, sorted deals table.",
    )
    _add_data_args(tbl)
    _add_filter_args(tbl)
    _add_sort_args(tbl)
    tbl.add_argument(
        "--full-links",
        action="store_true",
        default=False,
        help="Print link URLs instead of 'View'.",
    )
    tbl.set_defaults(func=cmd_table)

    # ---- summary ----
    summ = subparsers.add_parser(
        "summary",
        help="Show headline statistics over all deals.",
    )
    _add_data_args(summ)
    summ.set_defaults(func=cmd_summary)

    # ---- grouped views ----
    for name, func, help_text in (
        ("by-poc", cmd_by_poc, "Deal count and total per POC."),
        ("by-creator", cmd_by_creator, "Per-creator totals with platform breakdown."),
        ("by-campaign", cmd_by_campaign, "Deal count and total per campaign."),
    ):
        sub = subparsers.add_parser(name, help=help_text)
        _add_data_args(sub)
        _add_filter_args(sub)
        sub.set_defaults(func=func)

    # ---- export ----
    exp = subparsers.add_parser(
        "export",
        help="Export every view as a PPTX snapshot.",
    )
    _add_data_args(exp)
    _add_filter_args(exp)
    _add_sort_args(exp)
    exp.add_argument(
        "-o", "--output",
        required=True,
        help="Output PPTX file path.",
    )
    exp.set_defaults(func=cmd_export)

    # ---- inspect ----
    insp = subparsers.add_parser(
        "inspect",
        help="Show record count and filter options.",
    )
    _add_data_args(insp)
    insp.add_argument(
        "-v", "--verbose",
        action="store_true",
        default=False,
        help="List every POC, creator and campaign.",
    )
    insp.set_defaults(func=cmd_inspect)

    return parser


def _add_data_args(parser):
    """Add --data / --source-type / --config args to a subparser."""
    parser.add_argument(
        "--data",
        required=True,
        help="Deal file (.csv, .xlsx, .yaml or .json).",
    )
    parser.add_argument(
        "--source-type",
        dest="source_type",
        choices=sorted(SOURCE_TYPES),
        help="Override the source type inferred from the file suffix.",
    )
    parser.add_argument(
        "--config",
        help="Path to a dashboard YAML config file.",
    )


def _add_filter_args(parser):
    """Add exact-match filters and the free-text search."""
    filters = parser.add_argument_group("filters")
    filters.add_argument("--poc", help="Only deals owned by this POC.")
    filters.add_argument("--creator", help="Only deals with this creator.")
    filters.add_argument("--campaign", help="Only deals in this campaign.")
    filters.add_argument(
        "--search",
        help="Case-insensitive text matched against every field.",
    )


def _add_sort_args(parser):
    parser.add_argument(
        "--sort",
        choices=[f.value for f in SortField],
        help="Sort field (default from config: dealSize).",
    )
    parser.add_argument(
        "--order",
        choices=[o.value for o in SortOrder],
        help="Sort direction (default from config: desc).",
    )


# ---------------------------------------------------------------------------
# Main
# ---------------------------------------------------------------------------

def main(argv=None):
    """CLI entry point."""
    parser = build_parser()
    args = parser.parse_args(argv)
    args.func(args)


if __name__ == "__main__":
    main()
