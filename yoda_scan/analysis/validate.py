"""End-of-scan validation and construction of the finished ScanTable.

A table is only handed out once every tracked histogram was filled the same
number of times, from the same scan points. Anything else means at least one
bundle was partial or corrupted, and the whole table is rejected.
"""
from __future__ import annotations

from typing import Iterable, Optional, Sequence

from yoda_scan.errors import ColumnMismatch, MissingHistogram, UnevenFillCounts
from yoda_scan.models.histogram import AggregatedHistogram
from yoda_scan.models.scan import ScanPoint, ScanTable
from yoda_scan.utils.logging import get_logger

logger = get_logger(__name__)


def validate_fill_counts(histograms: Sequence[AggregatedHistogram]) -> int:
    """
    Check that all fill counters are equal and return the common count.

    The first histogram is the reference. Raises UnevenFillCounts naming the
    first histogram that differs, with its count and the reference count.
    An empty sequence is trivially valid (count 0).
    """
    if not histograms:
        return 0
    ref = histograms[0]
    for h in histograms[1:]:
        if h.fill_count != ref.fill_count:
            raise UnevenFillCounts(h.name, actual=h.fill_count, expected=ref.fill_count, reference=ref.name)
    return ref.fill_count


def validate_column_alignment(histograms: Sequence[AggregatedHistogram], point_ids: Optional[Sequence[str]] = None) -> None:
    """
    Check that column i of every histogram comes from the same scan point.

    Only meaningful once fill counts are equal.
    """
    if not histograms:
        return
    ref = histograms[0]
    for h in histograms[1:]:
        for col, (a, b) in enumerate(zip(ref.points, h.points)):
            if a != b:
                point = point_ids[b] if point_ids is not None and b < len(point_ids) else None
                raise ColumnMismatch(h.name, point, reference=ref.name, column=col)


def check_point_presence(point: ScanPoint, histograms: Iterable[str]) -> None:
    """Strict mode: every tracked histogram must occur in the scan point."""
    present = set(point.names())
    for name in histograms:
        if name not in present:
            raise MissingHistogram(name, point.point_id)


def validate_scan(aggregator) -> ScanTable:
    """
    Validate a finished :class:`~yoda_scan.analysis.aggregate.Aggregator` and
    build the read-only ScanTable.

    Columns of the table are the scan points that contributed to the
    histograms. Registered points without any tracked histogram are left out
    (logged); with no tracked histogram at all, every registered point is a
    column.
    """
    histograms = aggregator.histograms
    points = aggregator.points
    n = validate_fill_counts(histograms)
    validate_column_alignment(histograms, [p.point_id for p in points])

    if histograms:
        columns = tuple(points[i] for i in histograms[0].points)
    else:
        columns = tuple(points)

    if len(columns) != len(points):
        used = {c.point_id for c in columns}
        for p in points:
            if p.point_id not in used:
                logger.warning("%s: no tracked histogram in bundle; not a table column", p.point_id)

    logger.info("validated %d histogram(s) x %d scan point(s)", len(histograms), n if histograms else len(columns))
    return ScanTable(
        names=tuple(h.name for h in histograms),
        histograms={h.name: h for h in histograms},
        columns=columns,
    )
