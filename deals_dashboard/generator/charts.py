"""Chart generation module - renders chart shapes on dashboard slides.

Converts aggregate chart series (categories + values from the transformer
payload) into python-pptx chart shapes with proper styling and positioning.

Supported chart types:
    COLUMN_CLUSTERED - single-series column chart (totals per POC/campaign)
    DOUGHNUT         - share of total per category (platform mix)

Usage:
    from deals_dashboard.generator.charts import add_bar_chart

    added = add_bar_chart(slide, cats, values, position, design)
"""

from __future__ import annotations

import math
from typing import Any, Sequence

from pptx.chart.data import CategoryChartData
from pptx.dml.color import RGBColor
from pptx.enum.chart import XL_CHART_TYPE, XL_LEGEND_POSITION
from pptx.util import Inches, Pt

from deals_dashboard.schema.models import DesignSystem, Position


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

def _hex_to_rgb(hex_color: str) -> RGBColor:
    """Convert a hex color string (#RRGGBB) to an RGBColor."""
    hex_color = hex_color.lstrip("#")
    return RGBColor(
        int(hex_color[0:2], 16),
        int(hex_color[2:4], 16),
        int(hex_color[4:6], 16),
    )


def _safe_value(value: Any) -> float:
    """Coerce a value to a safe float for chart data.  None/NaN/inf -> 0."""
    if value is None or isinstance(value, bool):
        return 0.0
    if isinstance(value, (int, float)):
        if math.isnan(value) or math.isinf(value):
            return 0.0
        return float(value)
    return 0.0


# ---------------------------------------------------------------------------
# Chart data builders
# ---------------------------------------------------------------------------

def _build_chart_data(
    categories: Sequence[str] | None,
    values: Sequence[Any] | None,
    series_name: str,
) -> CategoryChartData | None:
    """Build single-series chart data.

    Values are padded with zeros or truncated to match the categories.
    Returns None if there are no categories or every value is zero.
    """
    if not categories:
        return None

    values = list(values or [])
    if len(values) < len(categories):
        values += [0.0] * (len(categories) - len(values))
    elif len(values) > len(categories):
        values = values[: len(categories)]

    safe_values = tuple(_safe_value(v) for v in values)
    if all(v == 0.0 for v in safe_values):
        return None

    chart_data = CategoryChartData()
    chart_data.categories = [str(c) for c in categories]
    chart_data.add_series(series_name, safe_values)
    return chart_data


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------

def add_bar_chart(
    slide,
    categories: Sequence[str] | None,
    values: Sequence[Any] | None,
    position: Position,
    design: DesignSystem,
    series_name: str = "Total Amount",
    color: str | None = None,
) -> bool:
    """Add a single-series clustered column chart to a slide.

    Returns:
        True if the chart was added, False if skipped due to missing data.
    """
    chart_data = _build_chart_data(categories, values, series_name)
    if chart_data is None:
        return False

    graphic_frame = slide.shapes.add_chart(
        XL_CHART_TYPE.COLUMN_CLUSTERED,
        Inches(position.left),
        Inches(position.top),
        Inches(position.width),
        Inches(position.height),
        chart_data,
    )
    chart = graphic_frame.chart

    series = chart.plots[0].series[0]
    series.format.fill.solid()
    series.format.fill.fore_color.rgb = _hex_to_rgb(color or design.primary)

    chart.font.name = design.primary_font
    chart.font.size = Pt(design.caption_size_pt)
    chart.has_legend = False
    return True


def add_doughnut_chart(
    slide,
    slices: Sequence[tuple[str, Any, str | None]],
    position: Position,
    design: DesignSystem,
) -> bool:
    """Add a doughnut chart, one slice per (label, value, color) tuple.

    Returns:
        True if the chart was added, False if every slice is zero.
    """
    chart_data = _build_chart_data(
        [label for label, _, _ in slices],
        [value for _, value, _ in slices],
        "Share",
    )
    if chart_data is None:
        return False

    graphic_frame = slide.shapes.add_chart(
        XL_CHART_TYPE.DOUGHNUT,
        Inches(position.left),
        Inches(position.top),
        Inches(position.width),
        Inches(position.height),
        chart_data,
    )
    chart = graphic_frame.chart

    points = chart.plots[0].series[0].points
    for idx, (_, _, color) in enumerate(slices):
        if color:
            point = points[idx]
            point.format.fill.solid()
            point.format.fill.fore_color.rgb = _hex_to_rgb(color)

    chart.font.name = design.primary_font
    chart.font.size = Pt(design.caption_size_pt)
    chart.has_legend = True
    chart.legend.include_in_layout = False
    chart.legend.position = XL_LEGEND_POSITION.BOTTOM
    return True
