"""
Single-pass data-quality scan over a header-plus-rows grid.

Row 0 is the header. Every data cell is normalised once and handed to the
rule registry; per-column state (seen values for duplicate detection) is
created lazily and thrown away when the scan returns.
"""

from __future__ import annotations

from collections import Counter
from typing import Any, Optional, Sequence

from sheet_quality.detectors import DEFAULT_RULES, CellContext, ColumnState, Rule, evaluate_cell
from sheet_quality.issue_taxonomy import ISSUE_TYPES, SEVERITIES, Issue
from sheet_quality.normalize import canonical_string, normalize_cell

HEADER_ROW_OFFSET = 2

Dataset = Sequence[Sequence[Any]]


def column_label(headers: Sequence[Any], column_index: int) -> str:
    if column_index < len(headers):
        text = canonical_string(headers[column_index])
        if text:
            return text
    return f"Column {column_index + 1}"


def scan_dataset(
    dataset: Optional[Dataset],
    rules: tuple[Rule, ...] = DEFAULT_RULES,
) -> list[Issue]:
    if not dataset:
        return []

    headers = list(dataset[0] or [])
    column_states: dict[int, ColumnState] = {}
    issues: list[Issue] = []

    for data_offset, row in enumerate(dataset[1:]):
        cells = list(row or [])
        width = max(len(headers), len(cells))
        for column_index in range(width):
            value = cells[column_index] if column_index < len(cells) else None
            state = column_states.setdefault(column_index, ColumnState())
            ctx = CellContext(
                row_index=data_offset + HEADER_ROW_OFFSET,
                column_index=column_index,
                column_name=column_label(headers, column_index),
                cell=normalize_cell(value),
                state=state,
            )
            issues.extend(evaluate_cell(ctx, rules))

    return issues


def summarize_issues(issues: Sequence[Issue]) -> dict[str, Any]:
    by_severity = Counter(issue.severity for issue in issues)
    by_type = Counter(issue.issue_type for issue in issues)
    return {
        "issue_count": len(issues),
        "by_severity": {severity: by_severity.get(severity, 0) for severity in SEVERITIES},
        "by_type": {issue_type: by_type.get(issue_type, 0) for issue_type in ISSUE_TYPES},
        "columns_affected": sorted({issue.column_name for issue in issues}),
    }
