"""Renderers: read a finished ScanTable and write it out.

- render_pdf: one page per histogram, all scan points overlaid (matplotlib)
- export_table: long-format CSV/TSV plus a JSON sidecar (pandas)

Renderers never modify the table.
"""

from .export import export_table, table_metadata
from .pdf import padded_y_range, plot_histogram, render_pdf

__all__ = [
    "export_table",
    "padded_y_range",
    "plot_histogram",
    "render_pdf",
    "table_metadata",
]
