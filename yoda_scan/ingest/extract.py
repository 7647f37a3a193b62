from __future__ import annotations

from pathlib import Path
from typing import Dict, Iterable, List, Optional, Tuple

from yoda_scan.config import ScanConfig
from yoda_scan.errors import MissingInputFile, ParameterParseError
from yoda_scan.ingest.parameters import read_parameter_file
from yoda_scan.ingest.yoda_reader import YodaBundleReader
from yoda_scan.models.histogram import HistogramOccurrence
from yoda_scan.models.scan import ParameterSet, ScanPoint, ScanPointSpec


class ScanPointExtractor:
    """
    Reads one scan point: its parameter file and its histogram bundle.

    Contract:
      - Both files must exist, otherwise MissingInputFile is raised (the
        caller skips the point). The parameter file is checked first.
      - Each file is opened, read to the end and closed before returning.
      - Only tracked histograms are kept; their order follows the bundle.
      - Parse errors (bundle data lines, numeric parameters) are fatal and
        propagate as ScanError subclasses.
    """

    def __init__(self, config: Optional[ScanConfig] = None):
        self.config = config or ScanConfig()
        self._bundle_reader = YodaBundleReader(self.config.histograms)

    def extract(self, spec: ScanPointSpec) -> ScanPoint:
        if not Path(spec.parameters_path).is_file():
            raise MissingInputFile("missing_parameters", spec.parameters_path, scan_point=spec.point_id)
        if not Path(spec.bundle_path).is_file():
            raise MissingInputFile("missing_bundle", spec.bundle_path, scan_point=spec.point_id)

        try:
            params, warnings = read_parameter_file(
                spec.parameters_path, numeric=self.config.parse_numeric_parameters
            )
        except ValueError as e:
            raise ParameterParseError(
                str(e), scan_point=spec.point_id, path=str(spec.parameters_path)
            ) from None

        occurrences = self._bundle_reader.read(spec.bundle_path, scan_point=spec.point_id)

        return ScanPoint(
            point_id=spec.point_id,
            parameters=params,
            occurrences=occurrences,
            warnings=tuple(f"{spec.point_id}: {w}" for w in warnings),
        )


def extract_scan_point(
    parameters_path: str | Path,
    bundle_path: str | Path,
    histograms: Iterable[str],
    point_id: Optional[str] = None,
) -> Tuple[ParameterSet, Dict[str, HistogramOccurrence]]:
    """
    Functional form of :meth:`ScanPointExtractor.extract`.

    Returns (parameters, tracked name -> occurrence). A tracked name occurring
    twice in the bundle raises DuplicateOccurrence.
    """
    bundle = Path(bundle_path)
    spec = ScanPointSpec(
        point_id=point_id if point_id is not None else bundle.parent.name,
        parameters_path=Path(parameters_path),
        bundle_path=bundle,
    )
    hist_names: List[str] = list(histograms)
    cfg = ScanConfig(histograms=tuple(hist_names))
    point = ScanPointExtractor(cfg).extract(spec)
    return point.parameters, point.histograms
