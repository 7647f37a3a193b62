import unittest
import tempfile
from pathlib import Path

from yoda_scan.config import ScanConfig
from yoda_scan.errors import MissingInputFile
from yoda_scan.ingest.discovery import discover_scan_points
from yoda_scan.ingest.extract import ScanPointExtractor, extract_scan_point


BUNDLE = (
    "BEGIN YODA_HISTO1D /H/pT_yy\n"
    "Title=pt\n"
    "# xlow\t xhigh\t sumw\n"
    "0 50 1.5\n"
    "END YODA_HISTO1D\n"
)


class TestDiscovery(unittest.TestCase):
    def test_subdirectories_sorted_by_name(self):
        with tempfile.TemporaryDirectory() as d:
            root = Path(d)
            for name in ("cHW_0.2", "cHW_-0.1", "cHW_0.0"):
                (root / name).mkdir()
            (root / "notes.txt").write_text("not a scan point", encoding="utf-8")

            specs = discover_scan_points(root)
            self.assertEqual([s.point_id for s in specs], ["cHW_-0.1", "cHW_0.0", "cHW_0.2"])
            self.assertEqual(specs[0].parameters_path.name, "param.dat")
            self.assertEqual(specs[0].bundle_path.name, "Higgs-scaled.yoda")

    def test_file_names_follow_config(self):
        with tempfile.TemporaryDirectory() as d:
            root = Path(d)
            (root / "p").mkdir()
            cfg = ScanConfig(parameters_file="wc.dat", bundle_file="out.yoda")
            spec = discover_scan_points(root, cfg)[0]
            self.assertEqual(spec.parameters_path, (root / "p" / "wc.dat").resolve())
            self.assertEqual(spec.bundle_path, (root / "p" / "out.yoda").resolve())

    def test_missing_root(self):
        with tempfile.TemporaryDirectory() as d:
            with self.assertRaises(FileNotFoundError):
                discover_scan_points(Path(d) / "nope")

    def test_empty_root(self):
        with tempfile.TemporaryDirectory() as d:
            self.assertEqual(discover_scan_points(d), [])


class TestExtractor(unittest.TestCase):
    def _point(self, root: Path, params: bool = True, bundle: bool = True) -> Path:
        p = root / "pt0"
        p.mkdir()
        if params:
            (p / "param.dat").write_text("cHW 0.5\n", encoding="utf-8")
        if bundle:
            (p / "Higgs-scaled.yoda").write_text(BUNDLE, encoding="utf-8")
        return p

    def test_extract(self):
        with tempfile.TemporaryDirectory() as d:
            self._point(Path(d))
            spec = discover_scan_points(d)[0]
            point = ScanPointExtractor(ScanConfig(histograms=("pT_yy",))).extract(spec)
            self.assertEqual(point.point_id, "pt0")
            self.assertEqual(point.parameters["cHW"], "0.5")
            self.assertEqual(point.names(), ["pT_yy"])
            self.assertEqual(point.histograms["pT_yy"].title, "pt")

    def test_parameter_file_checked_first(self):
        with tempfile.TemporaryDirectory() as d:
            self._point(Path(d), params=False, bundle=False)
            spec = discover_scan_points(d)[0]
            with self.assertRaises(MissingInputFile) as ctx:
                ScanPointExtractor().extract(spec)
            self.assertEqual(ctx.exception.diagnostic.kind, "missing_parameters")
            self.assertEqual(ctx.exception.diagnostic.scan_point, "pt0")
            self.assertEqual(ctx.exception.path.name, "param.dat")

    def test_missing_bundle(self):
        with tempfile.TemporaryDirectory() as d:
            self._point(Path(d), bundle=False)
            spec = discover_scan_points(d)[0]
            with self.assertRaises(MissingInputFile) as ctx:
                ScanPointExtractor().extract(spec)
            self.assertEqual(ctx.exception.diagnostic.kind, "missing_bundle")
            self.assertIn("Higgs-scaled.yoda", str(ctx.exception))

    def test_functional_form(self):
        with tempfile.TemporaryDirectory() as d:
            p = self._point(Path(d))
            params, hists = extract_scan_point(p / "param.dat", p / "Higgs-scaled.yoda", ["pT_yy", "N_j_30"])
            self.assertEqual(dict(params), {"cHW": "0.5"})
            self.assertEqual(list(hists), ["pT_yy"])
            self.assertEqual(hists["pT_yy"].bins[0].value, 1.5)


if __name__ == "__main__":
    unittest.main()
