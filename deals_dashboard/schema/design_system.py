"""Design system utilities - value formatting for dashboard views.

Implements the display rules of the deals dashboard:
- Currency: rupee symbol with Indian digit grouping (₹12,34,567)
- Counts: "N deals"
- Platform cells: "N deals / amount", or "-" when empty
- Links: "View" for real links, placeholder text otherwise
- Sort indicators: arrow next to the active column
"""

import math

from .models import LINK_PLACEHOLDERS, PlatformTotals, SortField, SortOrder, SortSpec

_NA = "N/A"
_EMPTY_CELL = "-"


def _is_missing(value) -> bool:
    return value is None or (isinstance(value, float) and math.isnan(value))


def group_indian(digits: str) -> str:
    """Insert Indian-style separators into a string of digits.

    The last three digits form one group, every group before that has two:
        "1234567" -> "12,34,567"
    """
    if len(digits) <= 3:
        return digits
    head, tail = digits[:-3], digits[-3:]
    groups = []
    while len(head) > 2:
        groups.insert(0, head[-2:])
        head = head[:-2]
    if head:
        groups.insert(0, head)
    return ",".join(groups + [tail])


def format_currency(value: float | int | None, symbol: str = "₹") -> str:
    """Format an amount with the currency symbol and Indian grouping.

    Whole amounts carry no decimals; fractional amounts keep up to two.
    """
    if _is_missing(value):
        return _NA
    sign = "-" if value < 0 else ""
    v = abs(value)
    if isinstance(v, float) and v != int(v):
        whole, frac = f"{v:.2f}".split(".")
        frac = frac.rstrip("0")
        if frac:
            return f"{sign}{symbol}{group_indian(whole)}.{frac}"
        return f"{sign}{symbol}{group_indian(whole)}"
    return f"{sign}{symbol}{group_indian(str(int(round(v))))}"


def format_integer(value: float | int | None) -> str:
    """Format a whole number with comma separators."""
    if _is_missing(value):
        return _NA
    return f"{int(value):,}"


def format_deal_count(count: int | None) -> str:
    if _is_missing(count):
        return _NA
    return f"{int(count)} deals"


def format_platform_cell(totals: PlatformTotals | None, symbol: str = "₹") -> str:
    """Render one platform bucket of the creator breakdown."""
    if totals is None or totals.deal_count <= 0:
        return _EMPTY_CELL
    return f"{format_deal_count(totals.deal_count)} / {format_currency(totals.total_amount, symbol)}"


def format_link(link: str | None, placeholders=LINK_PLACEHOLDERS) -> str:
    """Show "View" for a usable link, else the placeholder text or "-"."""
    if not link:
        return _EMPTY_CELL
    if link in placeholders:
        return link
    return "View"


def sort_indicator(field: SortField, sort: SortSpec) -> str:
    """Arrow shown next to a column header when it is the active sort."""
    if sort.field != field:
        return ""
    return "↑" if sort.order == SortOrder.ASC else "↓"
