"""Scan report assembly and text rendering for the CLI and web UI."""

from __future__ import annotations

from typing import Any, Optional

from sheet_quality import __version__ as TOOL_VERSION
from sheet_quality.contracts import build_contract, scan_run_summary
from sheet_quality.issue_taxonomy import TYPE_LABELS, Issue
from sheet_quality.scanner import Dataset, scan_dataset, summarize_issues

TEXT_ISSUE_LIMIT = 50


def dataset_shape(dataset: Optional[Dataset]) -> dict[str, int]:
    if not dataset:
        return {"rows": 0, "columns": 0}
    return {"rows": len(dataset) - 1, "columns": len(dataset[0] or [])}


def build_scan_report(
    dataset: Optional[Dataset],
    *,
    file_name: str,
    sheet_name: Optional[str] = None,
    issues: Optional[list[Issue]] = None,
    warnings: Optional[list[str]] = None,
) -> dict[str, Any]:
    if issues is None:
        issues = scan_dataset(dataset)
    contract = build_contract("sheet_quality.scan")
    summary = summarize_issues(issues)
    shape = dataset_shape(dataset)
    return {
        "contract": contract,
        "schema_version": contract["version"],
        "tool_version": TOOL_VERSION,
        "file": file_name,
        "sheet_name": sheet_name,
        "shape": shape,
        "summary": summary,
        "issues": [issue.to_dict() for issue in issues],
        "run_summary": scan_run_summary(
            file_name=file_name,
            sheet_name=sheet_name,
            issue_summary=summary,
            shape=shape,
            warnings=warnings,
        ).to_dict(),
    }


def render_scan_text(report: dict[str, Any], limit: int = TEXT_ISSUE_LIMIT) -> str:
    summary = report.get("summary", {})
    shape = report.get("shape", {})
    lines = [
        "sheet-quality scan",
        f"File: {report.get('file', '[unknown]')}",
    ]
    if report.get("sheet_name"):
        lines.append(f"Sheet: {report['sheet_name']}")
    lines.extend(
        [
            f"Rows: {shape.get('rows', 0)}",
            f"Columns: {shape.get('columns', 0)}",
            f"Issues: {summary.get('issue_count', 0)}",
        ]
    )
    if not summary.get("issue_count"):
        lines.append("No data quality issues found!")
        return "\n".join(lines) + "\n"

    by_severity = summary.get("by_severity", {})
    lines.append(
        "Severity: "
        + ", ".join(f"{severity} {count}" for severity, count in by_severity.items())
    )
    by_type = summary.get("by_type", {})
    lines.append(
        "Types: "
        + ", ".join(f"{TYPE_LABELS.get(issue_type, issue_type)} {count}" for issue_type, count in by_type.items())
    )
    lines.append("")
    issues = report.get("issues", [])
    for issue in issues[:limit]:
        lines.append(
            f"  row {issue['row_index']:>5}  {issue['column_name']:<20}  "
            f"{issue['severity']:<6}  {issue['description']}"
        )
    if len(issues) > limit:
        lines.append(f"  ... {len(issues) - limit} more (use --json for the full list)")
    return "\n".join(lines) + "\n"
