from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Dict, Optional

from yoda_scan.models.scan import ScanTable
from yoda_scan.utils.logging import get_logger

logger = get_logger(__name__)


def _separator_for(path: Path) -> str:
    return "," if path.suffix.lower() == ".csv" else "\t"


def table_metadata(table: ScanTable, extra: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
    """Provenance dict written next to an exported table."""
    meta: Dict[str, Any] = {
        "histograms": [
            {"name": h.name, "title": h.title, "n_bins": h.n_bins, "fill_count": h.fill_count}
            for h in table
        ],
        "points": [
            {"point": c.point_id, "parameters": c.parameters.to_dict()}
            for c in table.columns
        ],
    }
    if extra:
        meta.update(extra)
    return meta


def export_table(
    table: ScanTable,
    output_path: str | Path,
    metadata: Optional[Dict[str, Any]] = None,
    *,
    write_sidecar_json: bool = True,
) -> Path:
    """Export a ScanTable as a long-format text table with an optional JSON sidecar.

    Parameters
    ----------
    table : ScanTable
        Validated scan table.
    output_path : Path
        ``.csv`` is comma separated, any other suffix is tab separated.
    metadata : dict, optional
        Extra provenance merged into the sidecar (config, skipped points...).
    write_sidecar_json : bool
        If True, write scan-point parameters and metadata to ``<output>.json``.

    Returns
    -------
    Path
        Path to the written table.
    """
    output_path = Path(output_path)
    output_path.parent.mkdir(parents=True, exist_ok=True)

    df = table.to_frame()
    df.to_csv(output_path, sep=_separator_for(output_path), index=False, float_format="%.17g")

    if write_sidecar_json:
        json_path = output_path.with_suffix(".json")
        with open(json_path, "w", encoding="utf-8") as f:
            json.dump(table_metadata(table, metadata), f, indent=2, default=str)

    logger.debug("wrote %s", output_path)
    return output_path
