"""Ingest package - scan-point discovery and file readers.

This package handles:
- Discovery of scan-point directories under a scan root
- Reading parameter files (whitespace-separated name/value pairs)
- Streaming YODA bundles and keeping only the tracked 1D histograms

Key classes:
- YodaBundleReader: line classifier + block parser for one bundle
- ScanPointExtractor: parameter file + bundle -> ScanPoint

Design principle:
- Readers never aggregate; they produce immutable ScanPoint objects
- A missing input file is recoverable (MissingInputFile), a malformed one is not
"""

from .discovery import discover_scan_points
from .extract import ScanPointExtractor, extract_scan_point
from .parameters import parse_parameter_tokens, read_parameter_file
from .yoda_reader import (
    ClassifiedLine,
    LineKind,
    Mode,
    YodaBundleReader,
    classify_line,
    iter_occurrences,
)

__all__ = [
    "ClassifiedLine",
    "LineKind",
    "Mode",
    "ScanPointExtractor",
    "YodaBundleReader",
    "classify_line",
    "discover_scan_points",
    "extract_scan_point",
    "iter_occurrences",
    "parse_parameter_tokens",
    "read_parameter_file",
]
