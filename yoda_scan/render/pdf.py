"""Multi-page PDF rendering of a ScanTable.

One page per tracked histogram, in table order. Every scan point is drawn as
a step line over the same categorical axis; bins are labelled with their
``[xlow,xhigh)`` range rather than placed on a numeric axis, so histograms
with irregular or open-ended binning stay readable.
"""
from __future__ import annotations

from pathlib import Path
from typing import Optional, Tuple

import matplotlib.pyplot as plt
import numpy as np
from matplotlib.backends.backend_pdf import PdfPages

from yoda_scan.models.histogram import AggregatedHistogram
from yoda_scan.models.scan import ScanTable
from yoda_scan.utils.logging import get_logger

logger = get_logger(__name__)

# fraction of the value span added below and above the data
Y_PAD = 1.0 / 18.0
MAX_LEGEND_ENTRIES = 12


def padded_y_range(values: np.ndarray) -> Tuple[float, float]:
    """
    Y-axis limits covering all values with a 1/18 margin on each side.

    If every value is positive the lower limit is clamped at zero.
    A constant (or empty) input gets a unit-wide window around it.
    """
    v = np.asarray(values, dtype=np.float64)
    v = v[np.isfinite(v)]
    if v.size == 0:
        return 0.0, 1.0
    ymin = float(v.min())
    ymax = float(v.max())
    if ymin == ymax:
        return ymin - 0.5, ymax + 0.5
    lo = (1.0 + Y_PAD) * ymin - Y_PAD * ymax
    hi = (1.0 + Y_PAD) * ymax - Y_PAD * ymin
    if ymin > 0 and lo < 0:
        lo = 0.0
    return lo, hi


def plot_histogram(ax, table: ScanTable, h: AggregatedHistogram, legend: Optional[bool] = None) -> None:
    """Draw every scan-point column of *h* onto *ax*."""
    vals = h.values_matrix()
    nb = h.n_bins
    edges = np.arange(nb + 1, dtype=np.float64)

    for j in range(vals.shape[1]):
        col = table.columns[j]
        ax.stairs(vals[:, j], edges, linewidth=2, label=col.parameters.label() or col.point_id)

    ax.set_title(h.title or h.name)
    ax.set_xlim(0, max(nb, 1))
    ax.set_ylim(*padded_y_range(vals))
    ax.set_xticks(edges[:-1] + 0.5)
    ax.set_xticklabels(h.bin_labels(), rotation=45 if nb > 6 else 0, ha="right" if nb > 6 else "center", fontsize=8)
    ax.text(0.99, 0.99, h.name, transform=ax.transAxes, ha="right", va="top", fontsize=8, color="grey")

    if legend is None:
        legend = 0 < vals.shape[1] <= MAX_LEGEND_ENTRIES
    if legend:
        ax.legend(fontsize=6, loc="best")


def render_pdf(table: ScanTable, path: str | Path, *, legend: Optional[bool] = None) -> Path:
    """
    Write one PDF page per tracked histogram.

    Parameters
    ----------
    table : ScanTable
        Validated scan table.
    path : str or Path
        Output file (parent directories are created).
    legend : bool, optional
        Force the per-point legend on/off. By default it is shown when there
        are at most 12 scan points.

    Returns
    -------
    Path
        The written file.
    """
    out = Path(path)
    out.parent.mkdir(parents=True, exist_ok=True)
    with PdfPages(out) as pdf:
        for h in table:
            fig, ax = plt.subplots(figsize=(8, 5))
            try:
                plot_histogram(ax, table, h, legend=legend)
                fig.tight_layout()
                pdf.savefig(fig, facecolor="white")
            finally:
                plt.close(fig)
    logger.debug("wrote %s", out)
    return out
