"""End-to-end scan tests: discovery -> extraction -> aggregation -> validation."""

from __future__ import annotations

import numpy as np
import pytest

from yoda_scan.analysis.pipeline import run_scan
from yoda_scan.config import ScanConfig
from yoda_scan.errors import (
    BinCountMismatch,
    BundleParseError,
    DuplicateOccurrence,
    EdgeMismatch,
    MissingHistogram,
    ParameterParseError,
    UnevenFillCounts,
)
from yoda_scan.ingest.discovery import discover_scan_points

PT = [(0.0, 50.0, 1.23), (50.0, 100.0, 4.56)]
NJ = [(-0.5, 0.5, 10.0), (0.5, 1.5, 6.5), (1.5, 2.5, 2.25)]
CFG = ScanConfig(histograms=("pT_yy", "N_j_30"))


def _scaled(bins, k):
    return [(a, b, v * k) for a, b, v in bins]


def test_full_scan(scan_root, write_point, block) -> None:
    for i in range(3):
        write_point(
            f"point_{i}",
            [block("N_j_30", _scaled(NJ, i + 1), title="jets"), block("pT_yy", _scaled(PT, i + 1), title="transverse momentum")],
            params={"cHW": str(0.1 * i), "cHB": "0"},
        )
    result = run_scan(scan_root, CFG)
    table = result.table

    assert result.n_points == 3
    assert result.skipped == ()
    assert table.names == ("pT_yy", "N_j_30")
    assert table.point_ids == ["point_0", "point_1", "point_2"]
    assert table["pT_yy"].title == "transverse momentum"
    np.testing.assert_allclose(table.values("pT_yy"), [[1.23, 2.46, 3.69], [4.56, 9.12, 13.68]])
    for h in table:
        assert h.fill_count == 3
        assert all(len(b.values) == 3 for b in h.bins)
    assert table.columns[1].parameters["cHW"] == str(0.1)


def test_missing_parameter_file_skips_point_without_gap(scan_root, write_point, block) -> None:
    blocks = [block("pT_yy", PT), block("N_j_30", NJ)]
    write_point("a", blocks, params={"c": "1"})
    write_point("b", blocks, with_params=False)
    write_point("c", [block("pT_yy", _scaled(PT, 3)), block("N_j_30", NJ)], params={"c": "3"})

    result = run_scan(scan_root, CFG)
    assert result.table.point_ids == ["a", "c"]
    assert len(result.skipped) == 1
    d = result.skipped[0]
    assert d.kind == "missing_parameters"
    assert d.scan_point == "b"
    np.testing.assert_allclose(result.table.values("pT_yy")[0], [1.23, 3.69])


def test_missing_bundle_skips_point(scan_root, write_point, block) -> None:
    write_point("a", [block("pT_yy", PT), block("N_j_30", NJ)])
    write_point("b", with_bundle=False)
    result = run_scan(scan_root, CFG)
    assert result.table.point_ids == ["a"]
    assert result.skipped[0].kind == "missing_bundle"


def test_untracked_histograms_do_not_count(scan_root, write_point, block) -> None:
    write_point("a", [block("pT_yy", PT), block("m_jj_30", [(0, 1, 1)]), block("N_j_30", NJ)])
    write_point("b", [block("pT_yy", PT), block("N_j_30", NJ)])
    result = run_scan(scan_root, CFG)
    assert "m_jj_30" not in result.table.histograms
    assert [h.fill_count for h in result.table] == [2, 2]


def test_histogram_missing_at_one_point_is_uneven(scan_root, write_point, block) -> None:
    write_point("a", [block("pT_yy", PT), block("N_j_30", NJ)])
    write_point("b", [block("pT_yy", PT)])
    with pytest.raises(UnevenFillCounts) as exc:
        run_scan(scan_root, CFG)
    assert exc.value.histogram == "N_j_30"
    assert exc.value.actual == 1
    assert exc.value.expected == 2


def test_strict_points_fails_at_the_point(scan_root, write_point, block) -> None:
    write_point("a", [block("pT_yy", PT), block("N_j_30", NJ)])
    write_point("b", [block("pT_yy", PT)])
    with pytest.raises(MissingHistogram) as exc:
        run_scan(scan_root, ScanConfig(histograms=CFG.histograms, strict_points=True))
    assert exc.value.scan_point == "b"
    assert exc.value.histogram == "N_j_30"


def test_bin_count_mismatch_across_points(scan_root, write_point, block) -> None:
    write_point("a", [block("pT_yy", PT), block("N_j_30", NJ)])
    write_point("b", [block("pT_yy", PT + [(100.0, 200.0, 1.0)]), block("N_j_30", NJ)])
    with pytest.raises(BinCountMismatch) as exc:
        run_scan(scan_root, CFG)
    assert exc.value.scan_point == "b"
    assert exc.value.histogram == "pT_yy"


def test_edge_mismatch_across_points(scan_root, write_point, block) -> None:
    write_point("a", [block("pT_yy", PT), block("N_j_30", NJ)])
    write_point("b", [block("pT_yy", [(0.0, 40.0, 1.0), (40.0, 100.0, 1.0)]), block("N_j_30", NJ)])
    with pytest.raises(EdgeMismatch):
        run_scan(scan_root, CFG)


def test_duplicate_block_in_bundle(scan_root, write_point, block) -> None:
    write_point("a", [block("pT_yy", PT), block("N_j_30", NJ), block("pT_yy", PT)])
    with pytest.raises(DuplicateOccurrence) as exc:
        run_scan(scan_root, CFG)
    assert exc.value.scan_point == "a"


def test_malformed_bundle_is_fatal(scan_root, write_point, block) -> None:
    d = write_point("a", [block("pT_yy", PT), block("N_j_30", NJ)])
    bundle = d / "Higgs-scaled.yoda"
    bundle.write_text(bundle.read_text(encoding="utf-8").replace("4.56", "4.5.6"), encoding="utf-8")
    with pytest.raises(BundleParseError):
        run_scan(scan_root, CFG)


def test_numeric_parameters(scan_root, write_point, block) -> None:
    write_point("a", [block("pT_yy", PT), block("N_j_30", NJ)], params={"cHW": "abc"})
    cfg = ScanConfig(histograms=CFG.histograms, parse_numeric_parameters=True)
    with pytest.raises(ParameterParseError) as exc:
        run_scan(scan_root, cfg)
    assert exc.value.scan_point == "a"


def test_explicit_spec_order_defines_columns(scan_root, write_point, block) -> None:
    for name in ("a", "b", "c"):
        write_point(name, [block("pT_yy", PT), block("N_j_30", NJ)])
    specs = list(reversed(discover_scan_points(scan_root, CFG)))
    result = run_scan(specs, CFG)
    assert result.table.point_ids == ["c", "b", "a"]


def test_custom_file_names(scan_root, write_point, block) -> None:
    write_point("a", [block("pT_yy", PT)], param_file="wc.txt", bundle_file="Higgs.yoda")
    cfg = ScanConfig(parameters_file="wc.txt", bundle_file="Higgs.yoda", histograms=("pT_yy",))
    assert run_scan(scan_root, cfg).n_points == 1


def test_empty_scan(scan_root) -> None:
    result = run_scan(scan_root, CFG)
    assert result.n_points == 0
    assert all(h.fill_count == 0 for h in result.table)


def test_warnings_are_collected(scan_root, write_point, block) -> None:
    d = write_point("a", [block("pT_yy", PT), block("N_j_30", NJ)])
    (d / "param.dat").write_text("cHW 0.1 dangling\n", encoding="utf-8")
    result = run_scan(scan_root, CFG)
    assert len(result.warnings) == 1
    assert result.warnings[0].startswith("a: ")
