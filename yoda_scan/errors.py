"""Structured diagnostics and the exception hierarchy of the scan.

Two families:

- ``ScanError`` (a ``ValueError``): fatal. Parsing and consistency failures
  abort the run; a table built by a failed run must not be used.
- ``MissingInputFile`` (a ``FileNotFoundError``): recoverable per scan point.
  The pipeline skips the point and keeps going.

Every exception carries a :class:`Diagnostic` so that reporters (logging, CLI,
GUI) can format it without parsing the message text.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Optional


@dataclass(frozen=True)
class Diagnostic:
    """
    Machine-readable description of a scan problem.

    kind: short identifier, e.g. "bin_count_mismatch", "missing_parameters".
    histogram: tracked histogram name, if the problem is histogram-scoped.
    scan_point: scan point identifier (directory name), if known.
    context: numeric/textual details (expected/actual values, bin index, ...).
    """
    kind: str
    message: str
    histogram: Optional[str] = None
    scan_point: Optional[str] = None
    context: Dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "kind": self.kind,
            "message": self.message,
            "histogram": self.histogram,
            "scan_point": self.scan_point,
            "context": dict(self.context),
        }

    def __str__(self) -> str:
        where = []
        if self.histogram is not None:
            where.append(f"histogram '{self.histogram}'")
        if self.scan_point is not None:
            where.append(f"scan point '{self.scan_point}'")
        prefix = f"[{self.kind}]"
        if where:
            prefix += " " + ", ".join(where) + ":"
        return f"{prefix} {self.message}"


class ScanError(ValueError):
    """Base class of every fatal scan error."""

    kind = "scan_error"

    def __init__(
        self,
        message: str,
        *,
        histogram: Optional[str] = None,
        scan_point: Optional[str] = None,
        **context: Any,
    ) -> None:
        self.diagnostic = Diagnostic(
            kind=self.kind,
            message=message,
            histogram=histogram,
            scan_point=scan_point,
            context=context,
        )
        super().__init__(str(self.diagnostic))

    @property
    def histogram(self) -> Optional[str]:
        return self.diagnostic.histogram

    @property
    def scan_point(self) -> Optional[str]:
        return self.diagnostic.scan_point

    @property
    def context(self) -> Dict[str, Any]:
        return self.diagnostic.context


class BundleParseError(ScanError):
    """Malformed bin data line in a histogram bundle."""

    kind = "bundle_parse_error"


class BinCountMismatch(ScanError):
    kind = "bin_count_mismatch"

    def __init__(self, histogram: str, scan_point: Optional[str], *, expected: int, actual: int) -> None:
        super().__init__(
            f"nbins mismatch: got {actual} bins, reference binning has {expected}",
            histogram=histogram,
            scan_point=scan_point,
            expected=expected,
            actual=actual,
        )
        self.expected = expected
        self.actual = actual


class EdgeMismatch(ScanError):
    kind = "edge_mismatch"

    def __init__(
        self,
        histogram: str,
        scan_point: Optional[str],
        *,
        bin_index: int,
        edge: str,
        expected: float,
        actual: float,
    ) -> None:
        super().__init__(
            f"{edge} mismatch in bin {bin_index}: got {actual!r}, reference is {expected!r}",
            histogram=histogram,
            scan_point=scan_point,
            bin_index=bin_index,
            edge=edge,
            expected=expected,
            actual=actual,
        )
        self.bin_index = bin_index
        self.edge = edge
        self.expected = expected
        self.actual = actual


class DuplicateOccurrence(ScanError):
    kind = "duplicate_occurrence"

    def __init__(self, histogram: str, scan_point: Optional[str]) -> None:
        super().__init__(
            "multiple histograms with this name found in the same bundle",
            histogram=histogram,
            scan_point=scan_point,
        )


class UnevenFillCounts(ScanError):
    kind = "uneven_fill_counts"

    def __init__(self, histogram: str, *, actual: int, expected: int, reference: Optional[str] = None) -> None:
        super().__init__(
            f"filled a different number of times: {actual} instead of {expected}",
            histogram=histogram,
            actual=actual,
            expected=expected,
            reference=reference,
        )
        self.actual = actual
        self.expected = expected


class MissingHistogram(ScanError):
    """A tracked histogram is absent from one scan point (strict mode only)."""

    kind = "missing_histogram"

    def __init__(self, histogram: str, scan_point: Optional[str]) -> None:
        super().__init__(
            "no histogram with this name found in the bundle",
            histogram=histogram,
            scan_point=scan_point,
        )


class MissingInputFile(FileNotFoundError):
    """A scan point lacks its parameter file or its bundle. Recoverable."""

    def __init__(self, kind: str, path: Path, scan_point: Optional[str] = None) -> None:
        path = Path(path)
        self.diagnostic = Diagnostic(
            kind=kind,
            message=f"No {path.name} in {path.parent}",
            scan_point=scan_point,
            context={"path": str(path)},
        )
        super().__init__(str(self.diagnostic))
        self.path = path


class ParameterParseError(ScanError):
    """Non-numeric parameter value while numeric parameters are required."""

    kind = "parameter_parse_error"


class ColumnMismatch(ScanError):
    """Equal fill counts, but value columns come from different scan points."""

    kind = "column_mismatch"

    def __init__(self, histogram: str, scan_point: Optional[str], *, reference: str, column: int) -> None:
        super().__init__(
            f"value column {column} does not come from the same scan point as in '{reference}'",
            histogram=histogram,
            scan_point=scan_point,
            reference=reference,
            column=column,
        )
