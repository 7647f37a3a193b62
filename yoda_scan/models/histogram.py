from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Optional, Tuple

import numpy as np


@dataclass(frozen=True)
class Bin:
    """
    One parsed bin of a single histogram occurrence: [xlow, xhigh) and its value.

    The value is the third column of a bundle data line (sum of weights).
    """
    xlow: float
    xhigh: float
    value: float

    @property
    def edges(self) -> Tuple[float, float]:
        return (self.xlow, self.xhigh)

    def label(self) -> str:
        return f"[{self.xlow:g},{self.xhigh:g})"


@dataclass(frozen=True)
class HistogramOccurrence:
    """
    One histogram block as parsed from one scan point's bundle.

    name: tracked histogram name (last path component of the block path).
    path: full histogram path as written after the block-open marker.
    title: text of the Title= line ("" if the block has none).
    bins: bins in file order.
    """
    name: str
    title: str
    bins: Tuple[Bin, ...]
    path: str = ""

    @property
    def n_bins(self) -> int:
        return len(self.bins)

    @property
    def values(self) -> np.ndarray:
        return np.array([b.value for b in self.bins], dtype=np.float64)


@dataclass
class AggregatedBin:
    """Reference edges of one bin plus one value per contributing scan point."""
    xlow: float
    xhigh: float
    values: List[float] = field(default_factory=list)

    def __getitem__(self, column: int) -> float:
        return self.values[column]

    def label(self) -> str:
        return f"[{self.xlow:g},{self.xhigh:g})"


@dataclass
class AggregatedHistogram:
    """
    Running aggregate of one tracked histogram across the scan.

    The reference binning is carried here: it is "established" once the first
    occurrence has been ingested (fill_count > 0). Columns are appended in
    ingest order; column i belongs to the scan point with index ``points[i]``.
    """
    name: str
    title: str = ""
    bins: List[AggregatedBin] = field(default_factory=list)
    fill_count: int = 0
    points: List[int] = field(default_factory=list)

    @property
    def established(self) -> bool:
        return self.fill_count > 0

    @property
    def last_scan_point(self) -> Optional[int]:
        return self.points[-1] if self.points else None

    @property
    def n_bins(self) -> int:
        return len(self.bins)

    def __getitem__(self, i: int) -> AggregatedBin:
        return self.bins[i]

    @property
    def xlow(self) -> np.ndarray:
        return np.array([b.xlow for b in self.bins], dtype=np.float64)

    @property
    def xhigh(self) -> np.ndarray:
        return np.array([b.xhigh for b in self.bins], dtype=np.float64)

    def values_matrix(self) -> np.ndarray:
        """Values as an array of shape ``(n_bins, fill_count)``."""
        if not self.bins:
            return np.zeros((0, self.fill_count), dtype=np.float64)
        return np.array([b.values for b in self.bins], dtype=np.float64).reshape(self.n_bins, self.fill_count)

    def column(self, i: int) -> np.ndarray:
        """Values contributed by the i-th scan point, one per bin."""
        if not 0 <= i < self.fill_count:
            raise IndexError(f"column {i} out of range for '{self.name}' (fill_count={self.fill_count})")
        return np.array([b.values[i] for b in self.bins], dtype=np.float64)

    def bin_labels(self) -> List[str]:
        return [b.label() for b in self.bins]
