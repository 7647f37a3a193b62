"""yoda_scan -- aggregate YODA histograms across a coefficient scan.

A scan is a directory with one subdirectory per scan point; every scan point
holds a parameter file (coefficient name/value pairs) and a YODA bundle with
the 1D histograms produced for those coefficient values.

This package provides tools for:
- Streaming YODA bundles and extracting a fixed set of tracked histograms
- Reading the per-point parameter files
- Aggregating every tracked histogram into one value column per scan point
- Validating that binning is identical at every scan point and that every
  histogram was filled by the same scan points
- Rendering the validated table as PDF pages or exporting it as CSV/TSV

Key principles:
- No tolerance: bin edges must match exactly across scan points
- No partial output: a table exists only after the whole scan validated
- Recoverable vs fatal: missing inputs skip a point, inconsistencies abort

Main subpackages:
- ingest: discovery, parameter files, YODA bundle reader, per-point extractor
- analysis: Aggregator, end-of-scan validation, run_scan pipeline
- models: Bin, HistogramOccurrence, AggregatedHistogram, ScanPoint, ScanTable
- render: PDF pages (matplotlib) and table export (pandas)
"""

from yoda_scan.config import ScanConfig
from yoda_scan.errors import Diagnostic, MissingInputFile, ScanError

__all__ = [
    "Diagnostic",
    "MissingInputFile",
    "ScanConfig",
    "ScanError",
]
