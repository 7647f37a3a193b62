from __future__ import annotations

from pathlib import Path
from typing import Dict, Iterable, Optional, Sequence, Tuple

import pytest

ANALYSIS = "/HiggsTemplateCrossSections"

# (xlow, xhigh, sumw)
PT_YY_BINS = [(0.0, 50.0, 1.23), (50.0, 100.0, 4.56)]
NJ_BINS = [(-0.5, 0.5, 10.0), (0.5, 1.5, 6.5), (1.5, 2.5, 2.25)]


def make_block(
    name: str,
    bins: Iterable[Tuple[float, float, float]],
    title: Optional[str] = None,
    analysis: str = ANALYSIS,
) -> str:
    """A YODA1 Histo1D block laid out the way Rivet writes it."""
    lines = [f"BEGIN YODA_HISTO1D {analysis}/{name}", f"Path={analysis}/{name}"]
    if title is not None:
        lines.append(f"Title={title}")
    lines += [
        "Type=Histo1D",
        "---",
        "# Mean: 0.000000e+00",
        "# Area: 0.000000e+00",
        "# ID\t ID\t sumw\t sumw2\t sumwx\t sumwx2\t numEntries",
        "Total   \tTotal   \t0\t0\t0\t0\t0",
        "Underflow\tUnderflow\t0\t0\t0\t0\t0",
        "Overflow\tOverflow\t0\t0\t0\t0\t0",
        "# xlow\t xhigh\t sumw\t sumw2\t sumwx\t sumwx2\t numEntries",
    ]
    for xlow, xhigh, v in bins:
        lines.append(f"{float(xlow)}\t{float(xhigh)}\t{float(v)}\t0\t0\t0\t1")
    lines.append("END YODA_HISTO1D")
    return "\n".join(lines) + "\n\n"


def make_bundle(blocks: Sequence[str]) -> str:
    return "".join(blocks)


@pytest.fixture
def scan_root(tmp_path: Path) -> Path:
    root = tmp_path / "scan"
    root.mkdir()
    return root


@pytest.fixture
def write_point(scan_root: Path):
    """Factory writing one scan-point directory under ``scan_root``."""

    def _write(
        point_id: str,
        blocks: Sequence[str] = (),
        params: Optional[Dict[str, str]] = None,
        *,
        with_params: bool = True,
        with_bundle: bool = True,
        param_file: str = "param.dat",
        bundle_file: str = "Higgs-scaled.yoda",
    ) -> Path:
        d = scan_root / point_id
        d.mkdir(parents=True, exist_ok=True)
        if with_params:
            params = params if params is not None else {"cHW": "0.0"}
            (d / param_file).write_text("\n".join(f"{k} {v}" for k, v in params.items()) + "\n", encoding="utf-8")
        if with_bundle:
            (d / bundle_file).write_text(make_bundle(blocks), encoding="utf-8")
        return d

    return _write


@pytest.fixture
def block():
    """``make_block`` as a fixture, so test modules need not import conftest."""
    return make_block
