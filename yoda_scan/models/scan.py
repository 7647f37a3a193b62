from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from pathlib import Path
from types import MappingProxyType
from typing import Dict, Iterable, Iterator, List, Optional, Tuple

import numpy as np
import pandas as pd

from yoda_scan.errors import DuplicateOccurrence
from yoda_scan.models.histogram import AggregatedHistogram, HistogramOccurrence


class ParameterSet(Mapping):
    """
    Coefficient name -> raw text value, as read from a scan point's parameter file.

    Values are kept verbatim (opaque text); use :meth:`numeric` when floats are
    needed. Keys are unique; iteration follows file order.
    """

    def __init__(self, values: Optional[Iterable[Tuple[str, str]]] = None) -> None:
        d: Dict[str, str] = {}
        for k, v in (values or ()):
            if k in d:
                raise ValueError(f"Duplicate parameter name '{k}'")
            d[str(k)] = str(v)
        self._values = d

    def __getitem__(self, key: str) -> str:
        return self._values[key]

    def __iter__(self) -> Iterator[str]:
        return iter(self._values)

    def __len__(self) -> int:
        return len(self._values)

    def __repr__(self) -> str:
        return f"ParameterSet({self._values!r})"

    def __eq__(self, other: object) -> bool:
        if isinstance(other, Mapping):
            return dict(self.items()) == dict(other.items())
        return NotImplemented

    __hash__ = None  # type: ignore[assignment]

    def numeric(self) -> Dict[str, float]:
        """All values as floats. Raises ValueError on the first non-numeric value."""
        out: Dict[str, float] = {}
        for k, v in self._values.items():
            try:
                out[k] = float(v)
            except ValueError:
                raise ValueError(f"Parameter '{k}' has non-numeric value '{v}'") from None
        return out

    def label(self) -> str:
        """``name=value`` pairs joined by spaces, in file order."""
        return " ".join(f"{k}={v}" for k, v in self._values.items())

    def to_dict(self) -> Dict[str, str]:
        return dict(self._values)


@dataclass(frozen=True)
class ScanPointSpec:
    """
    A scan-point directory with its resolved input paths.

    Files are not required to exist here; the extractor checks them.
    """
    point_id: str
    parameters_path: Path
    bundle_path: Path


@dataclass(frozen=True)
class ScanPoint:
    """
    Result of extracting one scan point.

    occurrences keeps every tracked block in bundle order, duplicates included,
    so that the aggregator can reject them with full context.
    """
    point_id: str
    parameters: ParameterSet
    occurrences: Tuple[HistogramOccurrence, ...] = ()
    warnings: Tuple[str, ...] = ()

    @property
    def histograms(self) -> Dict[str, HistogramOccurrence]:
        """Tracked name -> occurrence. Raises DuplicateOccurrence on a repeated name."""
        out: Dict[str, HistogramOccurrence] = {}
        for occ in self.occurrences:
            if occ.name in out:
                raise DuplicateOccurrence(occ.name, self.point_id)
            out[occ.name] = occ
        return out

    def names(self) -> List[str]:
        return [occ.name for occ in self.occurrences]


@dataclass(frozen=True)
class ScanColumn:
    """Identity of one value column: the scan point and its parameters."""
    point_id: str
    parameters: ParameterSet


@dataclass(frozen=True)
class ScanTable:
    """
    Finished, validated aggregate handed to renderers.

    names: tracked histogram names in caller order.
    histograms: name -> AggregatedHistogram (read-only view).
    columns: one entry per contributing scan point, in value-column order.

    A ScanTable is only built after the fill-count validation passed, so every
    histogram has exactly ``n_points`` values per bin.
    """
    names: Tuple[str, ...]
    histograms: Mapping
    columns: Tuple[ScanColumn, ...] = field(default_factory=tuple)

    def __post_init__(self) -> None:
        if not isinstance(self.histograms, MappingProxyType):
            object.__setattr__(self, "histograms", MappingProxyType(dict(self.histograms)))

    @property
    def n_points(self) -> int:
        return len(self.columns)

    @property
    def point_ids(self) -> List[str]:
        return [c.point_id for c in self.columns]

    def __getitem__(self, name: str) -> AggregatedHistogram:
        return self.histograms[name]

    def __iter__(self) -> Iterator[AggregatedHistogram]:
        for name in self.names:
            yield self.histograms[name]

    def __len__(self) -> int:
        return len(self.names)

    def values(self, name: str) -> np.ndarray:
        """Value matrix of one histogram, shape ``(n_bins, n_points)``."""
        return self.histograms[name].values_matrix()

    def to_frame(self) -> pd.DataFrame:
        """
        Long-format table: one row per (histogram, bin, scan point).

        Columns: histogram, title, bin, xlow, xhigh, point, value.
        """
        rows = []
        for h in self:
            for i, b in enumerate(h.bins):
                for j, v in enumerate(b.values):
                    rows.append((h.name, h.title, i, b.xlow, b.xhigh, self.columns[j].point_id, v))
        return pd.DataFrame(
            rows,
            columns=["histogram", "title", "bin", "xlow", "xhigh", "point", "value"],
        ).astype({"bin": np.int64, "xlow": np.float64, "xhigh": np.float64, "value": np.float64})

    def parameters_frame(self) -> pd.DataFrame:
        """One row per scan point (index = point id), one column per parameter name."""
        df = pd.DataFrame(
            [c.parameters.to_dict() for c in self.columns],
            index=pd.Index(self.point_ids, name="point"),
        )
        return df
