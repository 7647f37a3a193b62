from __future__ import annotations

import argparse
import dataclasses
import textwrap
from pathlib import Path
from typing import Optional, Sequence

from yoda_scan.analysis.pipeline import run_scan
from yoda_scan.config import ScanConfig
from yoda_scan.errors import ScanError
from yoda_scan.utils.logging import configure_logging, get_logger

logger = get_logger(__name__)

PDF_SUFFIXES = {".pdf"}
TABLE_SUFFIXES = {".csv", ".tsv", ".txt"}


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(
        prog="python -m yoda_scan",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        description=textwrap.dedent(
            """\
            Collect tracked 1D histograms from every scan-point directory of a
            coefficient scan and render them side by side.

            Each subdirectory of INPUT_DIR is one scan point and must contain a
            parameter file and a YODA bundle. Points missing either file are
            skipped; binning or fill-count inconsistencies abort the run.
            """
        ),
    )
    p.add_argument("input_dir", help="Scan directory (one subdirectory per scan point)")
    p.add_argument("output", help="Output file: .pdf (plots) or .csv/.tsv/.txt (table + JSON sidecar)")
    p.add_argument(
        "--hist",
        action="append",
        default=None,
        metavar="NAME",
        help="Tracked histogram name (repeatable). Replaces the default list.",
    )
    p.add_argument("--param-file", default=None, help="Parameter file name inside each scan point")
    p.add_argument("--bundle-file", default=None, help="YODA bundle file name inside each scan point")
    p.add_argument("--config", default=None, help="JSON file with ScanConfig fields; CLI flags override it")
    p.add_argument(
        "--strict-points",
        action="store_true",
        help="Require every tracked histogram in every scan point",
    )
    p.add_argument("--log-level", default=None, help="DEBUG, INFO, WARNING, ... (default: $YODA_SCAN_LOG_LEVEL or INFO)")
    return p


def config_from_args(ns: argparse.Namespace) -> ScanConfig:
    cfg = ScanConfig.from_json(ns.config) if ns.config else ScanConfig()
    overrides = {}
    if ns.hist:
        overrides["histograms"] = tuple(ns.hist)
    if ns.param_file:
        overrides["parameters_file"] = ns.param_file
    if ns.bundle_file:
        overrides["bundle_file"] = ns.bundle_file
    if ns.strict_points:
        overrides["strict_points"] = True
    return dataclasses.replace(cfg, **overrides) if overrides else cfg


def main(argv: Optional[Sequence[str]] = None) -> int:
    ns = build_parser().parse_args(list(argv) if argv is not None else None)
    configure_logging(ns.log_level)

    out = Path(ns.output)
    suffix = out.suffix.lower()
    if suffix not in PDF_SUFFIXES | TABLE_SUFFIXES:
        logger.error('output file name "%s" doesn\'t end with .pdf, .csv, .tsv or .txt', ns.output)
        return 1

    try:
        cfg = config_from_args(ns)
    except (OSError, ValueError) as e:
        logger.error("invalid configuration: %s", e)
        return 1

    try:
        result = run_scan(ns.input_dir, cfg)
    except FileNotFoundError as e:
        logger.error("%s", e)
        return 1
    except ScanError as e:
        logger.error("%s", e.diagnostic)
        return 1

    print(f"\nNum coeff variations: {result.n_points}\n")

    if suffix in PDF_SUFFIXES:
        import matplotlib
        matplotlib.use("Agg")
        from yoda_scan.render.pdf import render_pdf

        render_pdf(result.table, out)
    else:
        from yoda_scan.render.export import export_table

        export_table(
            result.table,
            out,
            metadata={
                "config": cfg.to_dict(),
                "skipped": [d.to_dict() for d in result.skipped],
                "warnings": list(result.warnings),
            },
        )
    print(f"Output file: {out}")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
