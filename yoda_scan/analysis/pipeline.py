from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Iterable, List, Optional, Tuple, Union

from yoda_scan.analysis.aggregate import Aggregator
from yoda_scan.analysis.validate import check_point_presence, validate_scan
from yoda_scan.config import ScanConfig
from yoda_scan.errors import Diagnostic, MissingInputFile
from yoda_scan.ingest.discovery import discover_scan_points
from yoda_scan.ingest.extract import ScanPointExtractor
from yoda_scan.models.scan import ScanPointSpec, ScanTable
from yoda_scan.utils.logging import get_logger

logger = get_logger(__name__)


@dataclass(frozen=True)
class ScanResult:
    """
    Outcome of a successful scan.

    table: the validated table (the only thing renderers need).
    skipped: one diagnostic per scan point left out for a missing input file.
    warnings: non-fatal remarks collected while reading.
    """
    table: ScanTable
    config: ScanConfig
    skipped: Tuple[Diagnostic, ...] = ()
    warnings: Tuple[str, ...] = ()

    @property
    def n_points(self) -> int:
        return self.table.n_points


def run_scan(
    source: Union[str, Path, Iterable[ScanPointSpec]],
    config: Optional[ScanConfig] = None,
) -> ScanResult:
    """
    Read, aggregate and validate a whole scan.

    Parameters
    ----------
    source:
        A scan root directory (scan points are its subdirectories, sorted by
        name) or an explicit iterable of ScanPointSpec in the desired column
        order.
    config:
        ScanConfig; defaults apply if omitted.

    Scan points missing an input file are skipped and reported in
    ``ScanResult.skipped``. Every other problem raises a ScanError and no
    table is returned.
    """
    cfg = config or ScanConfig()
    if isinstance(source, (str, Path)):
        specs: List[ScanPointSpec] = discover_scan_points(source, cfg)
    else:
        specs = list(source)

    extractor = ScanPointExtractor(cfg)
    aggregator = Aggregator(cfg.histograms)
    skipped: List[Diagnostic] = []
    warnings: List[str] = []

    for spec in specs:
        logger.info("%s", spec.point_id)
        try:
            point = extractor.extract(spec)
        except MissingInputFile as e:
            logger.warning("%s", e.diagnostic)
            skipped.append(e.diagnostic)
            continue

        for w in point.warnings:
            logger.warning("%s", w)
        warnings.extend(point.warnings)

        if cfg.strict_points:
            check_point_presence(point, cfg.histograms)
        aggregator.add_point(point)

    table = validate_scan(aggregator)
    if skipped:
        logger.info("skipped %d scan point(s) with missing input files", len(skipped))
    logger.debug("scan complete: %d valid scan point(s)", table.n_points)

    return ScanResult(table=table, config=cfg, skipped=tuple(skipped), warnings=tuple(warnings))
