"""
Filter, selection and export state over one scan's issue list.

Selection is keyed by position in the *current* filtered list, the same
way the checker table keys its checkboxes. Changing the filter leaves the
selected positions untouched, so they may now point at different issues;
callers that need stable identity should use ``Issue.key``.
"""

from __future__ import annotations

import csv
import io
from dataclasses import dataclass
from typing import Optional, Sequence

from sheet_quality.issue_taxonomy import ISSUE_TYPES, SEVERITIES, Issue
from sheet_quality.pagination import DEFAULT_PAGE_SIZE, Page, paginate

ALL = "all"
SEVERITY_FILTERS = (ALL, *SEVERITIES)
TYPE_FILTERS = (ALL, *ISSUE_TYPES)
EXPORT_HEADER = ["Row", "Column", "Issue Type", "Severity", "Description", "Suggested Fix"]
EXPORT_LINE_TERMINATOR = "\n"


@dataclass(frozen=True)
class IssueExport:
    filename: str
    text: str
    mime_type: str = "text/csv"

    @property
    def content(self) -> bytes:
        return self.text.encode("utf-8")


def export_filename(sheet_label: str) -> str:
    return f"data_quality_issues_{sheet_label}.csv"


def issues_to_csv(issues: Sequence[Issue]) -> str:
    buffer = io.StringIO()
    writer = csv.writer(buffer, quoting=csv.QUOTE_ALL, lineterminator=EXPORT_LINE_TERMINATOR)
    writer.writerow(EXPORT_HEADER)
    for issue in issues:
        writer.writerow(
            [
                issue.row_index,
                issue.column_name,
                issue.issue_type,
                issue.severity,
                issue.description,
                issue.suggested_fix,
            ]
        )
    # rows are newline-joined, no trailing terminator
    return buffer.getvalue()[: -len(EXPORT_LINE_TERMINATOR)]


def parse_issue_csv(text: str) -> list[list[str]]:
    return list(csv.reader(io.StringIO(text)))


class IssueViewModel:
    def __init__(self, issues: Optional[Sequence[Issue]] = None) -> None:
        self.issues: list[Issue] = list(issues or [])
        self.severity_filter = ALL
        self.type_filter = ALL
        self.selected: set[int] = set()
        self.filtered: list[Issue] = list(self.issues)

    def set_filter(self, severity: str = ALL, issue_type: str = ALL) -> list[Issue]:
        if severity not in SEVERITY_FILTERS or issue_type not in TYPE_FILTERS:
            return self.filtered
        self.severity_filter = severity
        self.type_filter = issue_type
        self.filtered = [
            issue
            for issue in self.issues
            if (severity == ALL or issue.severity == severity)
            and (issue_type == ALL or issue.issue_type == issue_type)
        ]
        return self.filtered

    def toggle_select(self, index: int) -> None:
        if not 0 <= index < len(self.filtered):
            return
        if index in self.selected:
            self.selected.discard(index)
        else:
            self.selected.add(index)

    def is_selected(self, index: int) -> bool:
        return index in self.selected

    @property
    def all_selected(self) -> bool:
        return len(self.selected) == len(self.filtered)

    def select_all(self) -> None:
        if self.all_selected:
            self.selected = set()
        else:
            self.selected = set(range(len(self.filtered)))

    def deselect_all(self) -> None:
        self.selected = set()

    def selected_issues(self) -> list[Issue]:
        return [issue for index, issue in enumerate(self.filtered) if index in self.selected]

    def page(self, page: int = 1, page_size: int = DEFAULT_PAGE_SIZE) -> Page:
        return paginate(self.filtered, page=page, page_size=page_size)

    def export_selected(self, sheet_label: str) -> IssueExport:
        return IssueExport(
            filename=export_filename(sheet_label),
            text=issues_to_csv(self.selected_issues()),
        )
