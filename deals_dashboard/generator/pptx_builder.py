"""PPTX builder engine - exports a dashboard snapshot as a PowerPoint deck.

Consumes the flat payload produced by ``DashboardTransformer.transform`` and
renders one slide (or a run of slides, for long tables) per dashboard view
using python-pptx:

    1. Summary   - KPI boxes, current filter banner, platform mix
    2. All Deals - the filtered, sorted deals table
    3. By POC    - table + column chart
    4. By Creator - table with per-platform columns
    5. By Campaign - table + column chart

Usage::

    from deals_dashboard.generator.pptx_builder import DashboardDeckBuilder

    payload = DashboardTransformer(deals).transform(state)
    pptx_bytes = DashboardDeckBuilder(config).build(payload)

    with open("dashboard.pptx", "wb") as f:
        f.write(pptx_bytes)
"""

import io
from pathlib import Path
from typing import Any

from pptx import Presentation
from pptx.enum.text import MSO_ANCHOR, PP_ALIGN
from pptx.util import Inches, Pt

from deals_dashboard.processor.transform import CREATOR_PLATFORM_COLUMNS
from deals_dashboard.schema.design_system import (
    format_currency,
    format_integer,
    format_link,
    format_platform_cell,
    sort_indicator,
)
from deals_dashboard.schema.models import (
    DashboardConfig,
    PlatformTotals,
    Position,
    SortField,
    SortOrder,
    SortSpec,
)

from .charts import _hex_to_rgb, add_bar_chart, add_doughnut_chart


# ---------------------------------------------------------------------------
# Constants
# ---------------------------------------------------------------------------

_ALIGN_MAP = {
    "left": PP_ALIGN.LEFT,
    "center": PP_ALIGN.CENTER,
    "right": PP_ALIGN.RIGHT,
}

_NO_MATCHES = "No deals match the current filters."

# (header, sort field or None, alignment) for the deals table
_DEAL_COLUMNS = [
    ("POC", SortField.POC, "left"),
    ("Creator", SortField.CREATOR_NAME, "left"),
    ("Campaign", SortField.CAMPAIGN, "left"),
    ("Agency", None, "left"),
    ("Deliverables", None, "left"),
    ("Link", None, "left"),
    ("Deal Size", SortField.DEAL_SIZE, "right"),
]

_SUMMARY_KPIS = [
    ("Total Deals", "summary.total_deals", "integer", "#E3F2FD"),
    ("Total Value", "summary.total_deal_size", "currency", "#E8F5E9"),
    ("Unique POCs", "summary.unique_pocs", "integer", "#FFF3E0"),
    ("Unique Creators", "summary.unique_creators", "integer", "#FCE4EC"),
    ("Unique Campaigns", "summary.unique_campaigns", "integer", "#F3E5F5"),
]


def _chunks(rows: list, size: int) -> list[list]:
    """Split rows into slide-sized pages; an empty table still gets one page."""
    if not rows:
        return [[]]
    return [rows[i:i + size] for i in range(0, len(rows), size)]


# ---------------------------------------------------------------------------
# DashboardDeckBuilder
# ---------------------------------------------------------------------------

class DashboardDeckBuilder:
    """Builds a PowerPoint snapshot of the dashboard from a payload.

    Parameters
    ----------
    config : DashboardConfig
        Title, currency symbol, link placeholders, rows per table slide and
        the design system.
    """

    def __init__(self, config: DashboardConfig | None = None) -> None:
        self.config = config or DashboardConfig()
        self.design = self.config.design

    def build(self, payload: dict[str, Any]) -> bytes:
        """Build the PPTX and return it as bytes."""
        prs = Presentation()
        prs.slide_width = Inches(self.config.width_inches)
        prs.slide_height = Inches(self.config.height_inches)

        self._build_summary(prs, payload)
        self._build_deals_table(prs, payload)
        self._build_key_view(prs, payload, "by_poc", "Deals by POC", "POC",
                             self.design.poc_header)
        self._build_creators(prs, payload)
        self._build_key_view(prs, payload, "by_campaign", "Deals by Campaign",
                             "Campaign", self.design.campaign_header,
                             header_text=self.design.dark_text)

        buf = io.BytesIO()
        prs.save(buf)
        return buf.getvalue()

    def build_to_file(self, payload: dict[str, Any], path: str | Path) -> None:
        """Build the PPTX and write it to a file path."""
        data = self.build(payload)
        Path(path).write_bytes(data)

    # ------------------------------------------------------------------
    # Shared pieces
    # ------------------------------------------------------------------

    def _money(self, value) -> str:
        return format_currency(value, self.config.currency_symbol)

    def _new_slide(self, prs, title: str):
        layout = prs.slide_layouts[6]  # Blank layout
        slide = prs.slides.add_slide(layout)
        self._add_text(slide, title, Position(0.5, 0.3, 12.3, 0.7),
                       size_pt=self.design.title_size_pt, bold=True)
        return slide

    def _add_text(self, slide, text: str, pos: Position, size_pt: float | None = None,
                  bold: bool = False, color: str | None = None,
                  alignment: str = "left"):
        txbox = slide.shapes.add_textbox(
            Inches(pos.left), Inches(pos.top),
            Inches(pos.width), Inches(pos.height),
        )
        tf = txbox.text_frame
        tf.word_wrap = True
        p = tf.paragraphs[0]
        p.alignment = _ALIGN_MAP.get(alignment, PP_ALIGN.LEFT)
        run = p.add_run()
        run.text = text
        run.font.name = self.design.primary_font
        run.font.size = Pt(size_pt or self.design.body_size_pt)
        run.font.bold = bold
        run.font.color.rgb = _hex_to_rgb(color or self.design.dark_text)
        return txbox

    def _add_table(self, slide, headers: list[tuple[str, str]],
                   rows: list[list[str]], pos: Position, header_color: str,
                   header_text: str | None = None) -> None:
        """Render a table; *headers* is a list of (text, alignment)."""
        if not rows:
            self._add_text(slide, _NO_MATCHES, pos, color=self.design.muted)
            return

        shape = slide.shapes.add_table(
            len(rows) + 1, len(headers),
            Inches(pos.left), Inches(pos.top),
            Inches(pos.width), Inches(pos.height),
        )
        table = shape.table

        for col_idx, (text, alignment) in enumerate(headers):
            cell = table.cell(0, col_idx)
            cell.text = text
            cell.fill.solid()
            cell.fill.fore_color.rgb = _hex_to_rgb(header_color)
            self._style_cell(cell, alignment, bold=True,
                             color=header_text or self.design.white)

        for row_idx, row in enumerate(rows, start=1):
            for col_idx, text in enumerate(row):
                cell = table.cell(row_idx, col_idx)
                cell.text = text
                self._style_cell(cell, headers[col_idx][1])

    def _style_cell(self, cell, alignment: str, bold: bool = False,
                    color: str | None = None) -> None:
        cell.vertical_anchor = MSO_ANCHOR.MIDDLE
        for paragraph in cell.text_frame.paragraphs:
            paragraph.alignment = _ALIGN_MAP.get(alignment, PP_ALIGN.LEFT)
            for run in paragraph.runs:
                run.font.name = self.design.primary_font
                run.font.size = Pt(self.design.table_size_pt)
                run.font.bold = bold
                run.font.color.rgb = _hex_to_rgb(color or self.design.dark_text)

    # ------------------------------------------------------------------
    # Slide builders
    # ------------------------------------------------------------------

    def _build_summary(self, prs, payload: dict[str, Any]) -> None:
        slide = self._new_slide(prs, self.config.title)

        width = 2.3
        for idx, (label, key, kind, fill) in enumerate(_SUMMARY_KPIS):
            left = 0.5 + idx * (width + 0.2)
            box = slide.shapes.add_textbox(Inches(left), Inches(1.3),
                                           Inches(width), Inches(1.4))
            box.fill.solid()
            box.fill.fore_color.rgb = _hex_to_rgb(fill)
            tf = box.text_frame
            tf.word_wrap = True

            p_label = tf.paragraphs[0]
            p_label.alignment = PP_ALIGN.CENTER
            run = p_label.add_run()
            run.text = label
            run.font.name = self.design.primary_font
            run.font.size = Pt(self.design.kpi_label_size_pt)
            run.font.color.rgb = _hex_to_rgb(self.design.dark_text)

            value = payload.get(key)
            p_value = tf.add_paragraph()
            p_value.alignment = PP_ALIGN.CENTER
            run = p_value.add_run()
            run.text = self._money(value) if kind == "currency" else format_integer(value)
            run.font.name = self.design.primary_font
            run.font.size = Pt(self.design.kpi_number_size_pt)
            run.font.bold = True

        banner = (f"Showing {payload.get('table.deal_count', 0)} deals | "
                  f"Total: {self._money(payload.get('table.total_amount', 0))}")
        self._add_text(slide, banner, Position(0.5, 3.0, 6.0, 0.5), bold=True)

        active = payload.get("filters.active") or {}
        if active:
            desc = ", ".join(f"{k}: {v}" for k, v in active.items())
            self._add_text(slide, f"Filters: {desc}", Position(0.5, 3.5, 6.0, 0.5),
                           size_pt=self.design.caption_size_pt, color=self.design.muted)

        slices = []
        colors = {
            "youtube": self.design.youtube,
            "instagram_reels": self.design.instagram_reels,
            "instagram_story": self.design.instagram_story,
            "instagram_post": self.design.instagram_post,
            "other": self.design.muted,
        }
        for key, label, _ in CREATOR_PLATFORM_COLUMNS:
            amount = sum(row[key]["total_amount"]
                         for row in payload.get("by_creator.rows", []))
            slices.append((label, amount, colors[key]))
        add_doughnut_chart(slide, slices, Position(7.0, 3.0, 5.8, 4.2), self.design)

    def _build_deals_table(self, prs, payload: dict[str, Any]) -> None:
        sort = SortSpec(
            field=SortField(payload.get("table.sort_field", SortField.DEAL_SIZE.value)),
            order=SortOrder(payload.get("table.sort_order", SortOrder.DESC.value)),
        )
        headers = []
        for text, sort_field, alignment in _DEAL_COLUMNS:
            arrow = sort_indicator(sort_field, sort) if sort_field else ""
            headers.append((f"{text} {arrow}".strip(), alignment))

        placeholders = self.config.link_placeholders
        rows = [
            [
                deal["poc"],
                deal["creator_name"],
                deal["campaign"],
                deal["agency"] or "-",
                deal["deliverables"],
                format_link(deal["link"], placeholders),
                self._money(deal["deal_size"]),
            ]
            for deal in payload.get("table.rows", [])
        ]

        pages = _chunks(rows, self.config.table_rows_per_slide)
        for page_no, page in enumerate(pages, start=1):
            title = "All Deals"
            if len(pages) > 1:
                title = f"All Deals ({page_no}/{len(pages)})"
            slide = self._new_slide(prs, title)
            banner = (f"Showing {payload.get('table.deal_count', 0)} deals | "
                      f"Total: {self._money(payload.get('table.total_amount', 0))}")
            self._add_text(slide, banner, Position(0.5, 0.95, 12.3, 0.4),
                           size_pt=self.design.caption_size_pt, color=self.design.muted)
            self._add_table(slide, headers, page, Position(0.5, 1.4, 12.3, 5.6),
                            self.design.table_header)

    def _build_key_view(self, prs, payload: dict[str, Any], prefix: str,
                        title: str, key_header: str, header_color: str,
                        header_text: str | None = None) -> None:
        headers = [(key_header, "left"), ("Number of Deals", "right"),
                   ("Total Amount", "right")]
        rows = [
            [g["key"], str(g["deal_count"]), self._money(g["total_amount"])]
            for g in payload.get(f"{prefix}.rows", [])
        ]
        pages = _chunks(rows, self.config.table_rows_per_slide)
        for page_no, page in enumerate(pages, start=1):
            slide = self._new_slide(
                prs, title if len(pages) == 1 else f"{title} ({page_no}/{len(pages)})"
            )
            self._add_table(slide, headers, page, Position(0.5, 1.2, 6.0, 5.8),
                            header_color, header_text)
            if page_no == 1:
                add_bar_chart(
                    slide,
                    payload.get(f"{prefix}.chart_cats"),
                    payload.get(f"{prefix}.chart_values"),
                    Position(6.8, 1.2, 6.0, 5.8),
                    self.design,
                    color=header_color,
                )

    def _build_creators(self, prs, payload: dict[str, Any]) -> None:
        headers = [("Creator", "left"), ("Total Deals", "right"),
                   ("Total Amount", "right")]
        headers += [(label, "right") for _, label, _ in CREATOR_PLATFORM_COLUMNS]

        symbol = self.config.currency_symbol
        rows = []
        for item in payload.get("by_creator.rows", []):
            row = [item["creator"], str(item["deal_count"]),
                   self._money(item["total_amount"])]
            for key, _, _ in CREATOR_PLATFORM_COLUMNS:
                cell = item[key]
                totals = PlatformTotals(cell["deal_count"], cell["total_amount"])
                row.append(format_platform_cell(totals, symbol))
            rows.append(row)

        pages = _chunks(rows, self.config.table_rows_per_slide)
        for page_no, page in enumerate(pages, start=1):
            title = "Deals by Creator"
            if len(pages) > 1:
                title = f"{title} ({page_no}/{len(pages)})"
            slide = self._new_slide(prs, title)
            self._add_table(slide, headers, page, Position(0.5, 1.2, 12.3, 5.8),
                            self.design.creator_header)


# ---------------------------------------------------------------------------
# Convenience function
# ---------------------------------------------------------------------------

def build_dashboard_deck(payload: dict[str, Any],
                         config: DashboardConfig | None = None) -> bytes:
    """One-shot convenience: build a PPTX from a dashboard payload."""
    return DashboardDeckBuilder(config).build(payload)
