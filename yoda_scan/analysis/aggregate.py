"""Fold per-point histogram occurrences into one table per tracked histogram.

The first occurrence of a name fixes its reference binning (bin count and
exact edges). Every later occurrence must match it bit for bit: bin edges
come from the same binning configuration at every scan point, so any float
difference is an inconsistency, not noise.

All checks of an occurrence run before anything is appended, so a rejected
occurrence never leaves a partial column behind.
"""
from __future__ import annotations

from typing import Dict, Iterable, List, Optional, Tuple

from yoda_scan.errors import BinCountMismatch, DuplicateOccurrence, EdgeMismatch
from yoda_scan.models.histogram import AggregatedBin, AggregatedHistogram, HistogramOccurrence
from yoda_scan.models.scan import ParameterSet, ScanColumn, ScanPoint
from yoda_scan.utils.logging import get_logger

logger = get_logger(__name__)


class Aggregator:
    """
    Running aggregate of a scan.

    Usage::

        agg = Aggregator(config.histograms)
        for point in points:          # in scan order
            agg.add_point(point)
        table = validate_scan(agg)

    ``ingest`` can also be driven directly with explicit scan-point indices;
    indices must never decrease. An index never registered through
    ``add_point`` gets a column named after the index, with no parameters.
    """

    def __init__(self, histograms: Iterable[str]):
        self.names: Tuple[str, ...] = tuple(histograms)
        self._hists: Dict[str, AggregatedHistogram] = {n: AggregatedHistogram(name=n) for n in self.names}
        self._points: List[ScanColumn] = []
        self._last_index: Optional[int] = None

    # ------------------------------------------------------------------
    # Access
    # ------------------------------------------------------------------

    def __getitem__(self, name: str) -> AggregatedHistogram:
        return self._hists[name]

    def __contains__(self, name: object) -> bool:
        return name in self._hists

    @property
    def histograms(self) -> List[AggregatedHistogram]:
        """Aggregates in tracked-name order."""
        return [self._hists[n] for n in self.names]

    @property
    def points(self) -> List[ScanColumn]:
        """Scan points registered through :meth:`add_point`, by index."""
        return list(self._points)

    def fill_counts(self) -> Dict[str, int]:
        return {n: self._hists[n].fill_count for n in self.names}

    # ------------------------------------------------------------------
    # Ingest
    # ------------------------------------------------------------------

    def add_point(self, point: ScanPoint) -> int:
        """Register a scan point, ingest all its tracked occurrences, return its index."""
        index = len(self._points)
        self._points.append(ScanColumn(point_id=point.point_id, parameters=point.parameters))
        for occ in point.occurrences:
            self.ingest(index, occ, scan_point=point.point_id)
        logger.debug("%s: ingested %d histogram(s) as scan point #%d", point.point_id, len(point.occurrences), index)
        return index

    def ingest(
        self,
        scan_point_index: int,
        occurrence: HistogramOccurrence,
        scan_point: Optional[str] = None,
    ) -> AggregatedHistogram:
        """
        Append one occurrence as the next value column of its histogram.

        Raises
        ------
        DuplicateOccurrence
            The histogram already received a column for this scan point.
        BinCountMismatch
            Bin count differs from the reference binning.
        EdgeMismatch
            An (xlow, xhigh) pair differs from the reference binning.
        ValueError
            Untracked name, negative index, or scan-point index lower than a
            previous one.
        """
        name = occurrence.name
        h = self._hists.get(name)
        if h is None:
            raise ValueError(f"'{name}' is not a tracked histogram")
        index = int(scan_point_index)
        if index < 0:
            raise ValueError(f"scan-point index must be non-negative, got {index}")
        if self._last_index is not None and index < self._last_index:
            raise ValueError(
                f"scan points must be ingested in order: got index {index} after {self._last_index}"
            )
        if scan_point is None:
            scan_point = self._points[index].point_id if index < len(self._points) else str(index)

        if h.last_scan_point == index:
            raise DuplicateOccurrence(name, scan_point)

        if not h.established:
            h.title = occurrence.title
            h.bins = [AggregatedBin(xlow=b.xlow, xhigh=b.xhigh) for b in occurrence.bins]
        else:
            self._check_binning(h, occurrence, scan_point)

        for ref, b in zip(h.bins, occurrence.bins):
            ref.values.append(b.value)
        self._register_index(index, scan_point)
        h.fill_count += 1
        h.points.append(index)
        self._last_index = index
        return h

    def _register_index(self, index: int, point_id: str) -> None:
        while len(self._points) <= index:
            i = len(self._points)
            self._points.append(ScanColumn(point_id=point_id if i == index else str(i), parameters=ParameterSet()))

    @staticmethod
    def _check_binning(h: AggregatedHistogram, occ: HistogramOccurrence, scan_point: Optional[str]) -> None:
        if occ.n_bins != h.n_bins:
            raise BinCountMismatch(h.name, scan_point, expected=h.n_bins, actual=occ.n_bins)
        for i, (ref, b) in enumerate(zip(h.bins, occ.bins)):
            if b.xlow != ref.xlow:
                raise EdgeMismatch(h.name, scan_point, bin_index=i, edge="xlow", expected=ref.xlow, actual=b.xlow)
            if b.xhigh != ref.xhigh:
                raise EdgeMismatch(h.name, scan_point, bin_index=i, edge="xhigh", expected=ref.xhigh, actual=b.xhigh)
