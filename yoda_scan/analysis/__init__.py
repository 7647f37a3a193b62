"""Aggregation and validation of a coefficient scan.

Design principle:
  - Ingest produces immutable :class:`~yoda_scan.models.scan.ScanPoint` objects.
  - The Aggregator folds them, in scan order, into one AggregatedHistogram per
    tracked name and rejects any binning inconsistency immediately.
  - Validation runs once at the end and is the only way to obtain a ScanTable.
"""

from .aggregate import Aggregator
from .pipeline import ScanResult, run_scan
from .validate import (
    check_point_presence,
    validate_column_alignment,
    validate_fill_counts,
    validate_scan,
)

__all__ = [
    "Aggregator",
    "ScanResult",
    "check_point_presence",
    "run_scan",
    "validate_column_alignment",
    "validate_fill_counts",
    "validate_scan",
]
