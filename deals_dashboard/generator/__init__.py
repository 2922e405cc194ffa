"""Snapshot generator package - PPTX export of the dashboard views.

Consumes a dashboard payload to produce PowerPoint files.

Modules:
    pptx_builder: Core deck generation
    charts: Chart generation (column, doughnut)
"""

from .pptx_builder import DashboardDeckBuilder, build_dashboard_deck
from .charts import add_bar_chart, add_doughnut_chart

__all__ = [
    "DashboardDeckBuilder",
    "build_dashboard_deck",
    "add_bar_chart",
    "add_doughnut_chart",
]
