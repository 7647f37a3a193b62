from .histogram import AggregatedBin, AggregatedHistogram, Bin, HistogramOccurrence
from .scan import ParameterSet, ScanColumn, ScanPoint, ScanPointSpec, ScanTable

__all__ = [
    "AggregatedBin",
    "AggregatedHistogram",
    "Bin",
    "HistogramOccurrence",
    "ParameterSet",
    "ScanColumn",
    "ScanPoint",
    "ScanPointSpec",
    "ScanTable",
]
