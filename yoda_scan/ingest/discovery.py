from __future__ import annotations

from pathlib import Path
from typing import List, Optional

from yoda_scan.config import ScanConfig
from yoda_scan.models.scan import ScanPointSpec


def _point_sort_key(p: Path) -> str:
    return p.name


def discover_scan_points(root: str | Path, config: Optional[ScanConfig] = None) -> List[ScanPointSpec]:
    """
    List the scan points of a scan directory.

    Every immediate subdirectory of ``root`` is one scan point, identified by
    its name; plain files next to them are ignored. The list is sorted by
    directory name, which fixes the value-column order of the whole run.

    Input files are resolved but not checked: a point with a missing file is
    reported (and skipped) by the extractor.
    """
    cfg = config or ScanConfig()
    r = Path(root).expanduser().resolve()
    if not r.exists() or not r.is_dir():
        raise FileNotFoundError(f"Not a directory: {r}")

    dirs = sorted((p for p in r.iterdir() if p.is_dir()), key=_point_sort_key)
    return [
        ScanPointSpec(
            point_id=d.name,
            parameters_path=d / cfg.parameters_file,
            bundle_path=d / cfg.bundle_file,
        )
        for d in dirs
    ]
