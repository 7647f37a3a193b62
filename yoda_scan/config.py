"""Scan configuration -- everything the caller decides before a run.

A ScanConfig groups the file names looked up in each scan-point directory,
the tracked histogram names (in the order the renderer will use) and the
strictness switches. It can be:

- Constructed with defaults matching the Higgs coefficient-scan layout
- Overridden field-by-field via ``dataclasses.replace()``
- Serialized to/from a dict, or loaded from a JSON file
"""

from __future__ import annotations

import json
from dataclasses import asdict, dataclass
from pathlib import Path
from typing import Any, Dict, Tuple


DEFAULT_PARAMETERS_FILE = "param.dat"
DEFAULT_BUNDLE_FILE = "Higgs-scaled.yoda"
DEFAULT_HISTOGRAMS: Tuple[str, ...] = (
    "N_j_30",
    "pT_yy",
    "pT_j1_30",
    "m_jj_30",
    "Dphi_j_j_30",
    "Dphi_j_j_30_signed",
)


@dataclass(frozen=True)
class ScanConfig:
    """Frozen configuration of one scan.

    Fields
    ------
    parameters_file : str
        Name of the parameter file inside each scan-point directory.
    bundle_file : str
        Name of the histogram bundle inside each scan-point directory.
    histograms : tuple of str
        Tracked histogram names. Order is preserved in the output table.
    strict_points : bool
        If True, every tracked histogram must be present in every scan point;
        a missing one is fatal as soon as the point is extracted. If False,
        absences only surface through the final fill-count check.
    parse_numeric_parameters : bool
        If True, every parameter value must parse as a float.
    """

    parameters_file: str = DEFAULT_PARAMETERS_FILE
    bundle_file: str = DEFAULT_BUNDLE_FILE
    histograms: Tuple[str, ...] = DEFAULT_HISTOGRAMS
    strict_points: bool = False
    parse_numeric_parameters: bool = False

    def __post_init__(self) -> None:
        if isinstance(self.histograms, str):
            raise ValueError(f"histograms must be a list of names, not a string: {self.histograms!r}")
        # callers may pass a list
        if not isinstance(self.histograms, tuple):
            object.__setattr__(self, "histograms", tuple(self.histograms))
        if len(set(self.histograms)) != len(self.histograms):
            raise ValueError(f"Duplicate tracked histogram names: {list(self.histograms)}")
        if not self.parameters_file or not self.bundle_file:
            raise ValueError("parameters_file and bundle_file must be non-empty file names.")

    # ------------------------------------------------------------------
    # Serialization
    # ------------------------------------------------------------------

    def to_dict(self) -> Dict[str, Any]:
        """Return a JSON-friendly dict (tuples become lists)."""
        d = asdict(self)
        d["histograms"] = list(d["histograms"])
        return d

    @classmethod
    def from_dict(cls, d: Dict[str, Any]) -> ScanConfig:
        """Reconstruct from a dict; unknown keys are rejected."""
        d = dict(d)
        known = set(cls.__dataclass_fields__)
        unknown = sorted(set(d) - known)
        if unknown:
            raise ValueError(f"Unknown ScanConfig keys: {unknown}")
        if "histograms" in d:
            if isinstance(d["histograms"], str):
                raise ValueError(f"histograms must be a list of names, not a string: {d['histograms']!r}")
            d["histograms"] = tuple(d["histograms"])
        return cls(**d)

    @classmethod
    def from_json(cls, path: str | Path) -> ScanConfig:
        p = Path(path).expanduser()
        with open(p, "r", encoding="utf-8") as f:
            return cls.from_dict(json.load(f))
