import unittest

from sheet_quality import __version__
from sheet_quality.contracts import CONTRACT_VERSIONS, RunSummary, build_contract, scan_run_summary
from sheet_quality.report import build_scan_report, render_scan_text

DATASET = [
    ["Name", "Email", "Age"],
    ["Ann", "ann@example", 30],
    ["Bob", "", -1],
]


class ContractTests(unittest.TestCase):
    def test_contract_names_are_versioned(self):
        for name, version in CONTRACT_VERSIONS.items():
            with self.subTest(name=name):
                self.assertEqual(build_contract(name), {"name": name, "version": version})
        with self.assertRaises(KeyError):
            build_contract("sheet_quality.unknown")

    def test_run_summary_shape(self):
        summary = RunSummary(command="insights", input_file="a.xlsx", warnings=("w",)).to_dict()
        self.assertEqual(summary["tool"], "sheet-quality")
        self.assertEqual(summary["command"], "insights")
        self.assertEqual(summary["warnings"], ["w"])
        self.assertEqual(summary["warnings_count"], 1)
        self.assertEqual(summary["metrics"], {})
        self.assertTrue(summary["generated_at"].endswith("Z"))

    def test_scan_run_summary_reports_scan_metrics(self):
        clean = scan_run_summary(
            file_name="ok.csv",
            sheet_name="Sheet1",
            issue_summary={"issue_count": 0, "by_severity": {"high": 0}},
            shape={"rows": 4, "columns": 2},
        )
        self.assertEqual(clean.status, "clean")
        self.assertEqual(
            clean.metrics,
            {"issues_found": 0, "high_severity": 0, "rows_scanned": 4, "columns_scanned": 2},
        )

        dirty = scan_run_summary(
            file_name="bad.csv",
            sheet_name=None,
            issue_summary={"issue_count": 3, "by_severity": {"high": 2, "medium": 1}},
            shape={"rows": 2, "columns": 3},
            warnings=["Sheet 'Blank' is empty."],
        )
        self.assertEqual(dirty.status, "issues_found")
        self.assertEqual(dirty.metrics["high_severity"], 2)
        self.assertEqual(dirty.to_dict()["warnings_count"], 1)


class ScanReportTests(unittest.TestCase):
    def test_scan_report_emits_contract_and_issues(self):
        report = build_scan_report(DATASET, file_name="people.xlsx", sheet_name="Sheet1")
        self.assertEqual(report["contract"]["name"], "sheet_quality.scan")
        self.assertEqual(report["schema_version"], report["contract"]["version"])
        self.assertEqual(report["tool_version"], __version__)
        self.assertEqual(report["shape"], {"rows": 2, "columns": 3})
        self.assertEqual(report["summary"]["issue_count"], 3)
        self.assertEqual(
            [issue["issue_type"] for issue in report["issues"]],
            ["invalid_format", "empty", "outlier"],
        )
        self.assertEqual(report["issues"][0]["row_index"], 2)
        self.assertEqual(report["run_summary"]["metrics"]["issues_found"], 3)

    def test_text_rendering(self):
        text = render_scan_text(build_scan_report(DATASET, file_name="people.xlsx", sheet_name="Sheet1"))
        self.assertIn("Sheet: Sheet1", text)
        self.assertIn("Issues: 3", text)
        self.assertIn("Negative age value", text)

        clean = render_scan_text(build_scan_report([["A"], ["x"]], file_name="ok.csv"))
        self.assertIn("No data quality issues found!", clean)

    def test_text_rendering_truncates_long_lists(self):
        dataset = [["Code"]] + [["same"]] * 8
        text = render_scan_text(build_scan_report(dataset, file_name="d.csv"), limit=3)
        self.assertIn("... 4 more", text)


if __name__ == "__main__":
    unittest.main()
