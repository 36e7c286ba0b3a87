import unittest

from sheet_quality.detectors import DEFAULT_RULES, Rule, header_contains
from sheet_quality.scanner import column_label, scan_dataset, summarize_issues


def kinds(issues):
    return [(issue.row_index, issue.column_name, issue.issue_type) for issue in issues]


class ScanDatasetTests(unittest.TestCase):
    def test_missing_or_header_only_dataset_yields_nothing(self):
        self.assertEqual(scan_dataset(None), [])
        self.assertEqual(scan_dataset([]), [])
        self.assertEqual(scan_dataset([["Name", "Email"]]), [])

    def test_first_data_row_reports_row_two(self):
        issues = scan_dataset([["Name"], [""]])
        self.assertEqual(len(issues), 1)
        self.assertEqual(issues[0].row_index, 2)
        self.assertEqual(issues[0].column_index, 0)

    def test_three_equal_values_give_two_duplicates(self):
        issues = scan_dataset([["Code"], ["A"], ["A"], ["A"]])
        self.assertEqual(
            kinds(issues),
            [(3, "Code", "duplicate"), (4, "Code", "duplicate")],
        )

    def test_empty_email_cell_is_only_empty(self):
        issues = scan_dataset([["Email"], [""]])
        self.assertEqual([issue.issue_type for issue in issues], ["empty"])

    def test_email_detection(self):
        bad = scan_dataset([["Contact Email"], ["not-an-email"]])
        self.assertEqual([(i.issue_type, i.severity) for i in bad], [("invalid_format", "high")])
        self.assertEqual(scan_dataset([["Contact Email"], ["a@b.com"]]), [])

    def test_outlier_detection(self):
        negative = scan_dataset([["Age"], ["-5"]])
        self.assertEqual([(i.issue_type, i.severity) for i in negative], [("outlier", "high")])
        self.assertEqual(scan_dataset([["Age"], ["5"]]), [])
        self.assertEqual(scan_dataset([["Age"], ["abc"]]), [])
        self.assertEqual(scan_dataset([["Age"], ["-\uff15"]]), [])
        self.assertEqual(scan_dataset([["Age"], ["-\u0665"]]), [])

    def test_byte_order_mark_cell_is_empty_and_header_is_clean(self):
        issues = scan_dataset([["\ufeffName"], ["\ufeff"]])
        self.assertEqual(kinds(issues), [(2, "Name", "empty")])

    def test_row_major_then_column_order(self):
        dataset = [
            ["Email", "Age"],
            ["bad", -1],
            ["bad", ""],
        ]
        self.assertEqual(
            kinds(scan_dataset(dataset)),
            [
                (2, "Email", "invalid_format"),
                (2, "Age", "outlier"),
                (3, "Email", "duplicate"),
                (3, "Email", "invalid_format"),
                (3, "Age", "empty"),
            ],
        )

    def test_blank_header_gets_placeholder_name(self):
        issues = scan_dataset([["Name", "", None], ["x", "", "y"]])
        self.assertEqual(kinds(issues), [(2, "Column 2", "empty")])
        self.assertEqual(column_label(["Name", "  "], 1), "Column 2")
        self.assertEqual(column_label(["Name"], 4), "Column 5")

    def test_short_rows_treat_absent_cells_as_empty(self):
        issues = scan_dataset([["A", "B"], ["x"]])
        self.assertEqual(kinds(issues), [(2, "B", "empty")])

    def test_null_row_is_an_empty_row(self):
        issues = scan_dataset([["A"], None, ["z"]])
        self.assertEqual(kinds(issues), [(2, "A", "empty")])

    def test_duplicates_are_tracked_per_column(self):
        issues = scan_dataset([["Left", "Right"], ["same", "same"], ["other", "same"]])
        self.assertEqual(kinds(issues), [(3, "Right", "duplicate")])

    def test_mixed_cell_types_never_raise(self):
        dataset = [["Value"], [None], [True], [3.0], [float("nan")], [object()]]
        issues = scan_dataset(dataset)
        self.assertEqual([issue.row_index for issue in issues], [2, 5])

    def test_scan_is_deterministic_and_does_not_leak_state(self):
        dataset = [
            ["Name", "Email", "Age"],
            ["Ann", "ann@example.com", 30],
            ["Ann", "broken", -2],
            ["", "broken", "x"],
        ]
        first = scan_dataset(dataset)
        second = scan_dataset(dataset)
        self.assertEqual(first, second)
        self.assertEqual([issue.to_dict() for issue in first], [issue.to_dict() for issue in second])

    def test_dataset_is_not_mutated(self):
        dataset = [["Email"], [" a@b.com "], ["a@b.com"]]
        snapshot = [list(row) for row in dataset]
        scan_dataset(dataset)
        self.assertEqual(dataset, snapshot)

    def test_extra_rules_extend_without_touching_the_scanner(self):
        def check_phone(ctx):
            if ctx.cell.text and not ctx.cell.text.replace("-", "").isdigit():
                return ctx.issue("invalid_email")
            return None

        rules = DEFAULT_RULES + (Rule("phone", check_phone, header_contains("phone")),)
        issues = scan_dataset([["Phone"], ["call me"]], rules=rules)
        self.assertEqual([issue.issue_type for issue in issues], ["invalid_format"])


class SummarizeIssuesTests(unittest.TestCase):
    def test_counts_by_severity_and_type(self):
        issues = scan_dataset([["Email", "Age"], ["", -1], ["x", -1]])
        summary = summarize_issues(issues)
        self.assertEqual(summary["issue_count"], 5)
        self.assertEqual(summary["by_severity"], {"low": 1, "medium": 1, "high": 3})
        self.assertEqual(
            summary["by_type"],
            {"empty": 1, "invalid_format": 1, "outlier": 2, "duplicate": 1},
        )
        self.assertEqual(summary["columns_affected"], ["Age", "Email"])

    def test_empty_summary(self):
        summary = summarize_issues([])
        self.assertEqual(summary["issue_count"], 0)
        self.assertEqual(summary["columns_affected"], [])


if __name__ == "__main__":
    unittest.main()
