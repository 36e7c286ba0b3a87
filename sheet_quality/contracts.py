"""Versioned output contracts for the JSON that sheet-quality writes."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Optional

TOOL_NAME = "sheet-quality"

CONTRACT_VERSIONS = {
    "sheet_quality.scan": "1.0.0",
    "sheet_quality.preview": "1.0.0",
    "sheet_quality.insights": "1.0.0",
}


def utc_now_iso() -> str:
    return datetime.now(timezone.utc).replace(microsecond=0).isoformat().replace("+00:00", "Z")


def build_contract(name: str) -> dict[str, str]:
    if name not in CONTRACT_VERSIONS:
        raise KeyError(f"Unknown output contract: {name}")
    return {"name": name, "version": CONTRACT_VERSIONS[name]}


@dataclass(frozen=True)
class RunSummary:
    """What one CLI run did to one sheet, attached to every JSON payload."""

    command: str
    input_file: str
    sheet_name: Optional[str] = None
    status: str = "ok"
    warnings: tuple[str, ...] = ()
    metrics: dict[str, Any] = field(default_factory=dict)
    generated_at: str = field(default_factory=utc_now_iso)

    def to_dict(self) -> dict[str, Any]:
        return {
            "tool": TOOL_NAME,
            "command": self.command,
            "status": self.status,
            "generated_at": self.generated_at,
            "input_file": self.input_file,
            "sheet_name": self.sheet_name,
            "warnings_count": len(self.warnings),
            "warnings": list(self.warnings),
            "metrics": dict(self.metrics),
        }


def scan_run_summary(
    *,
    file_name: str,
    sheet_name: Optional[str],
    issue_summary: dict[str, Any],
    shape: dict[str, int],
    warnings: Optional[list[str]] = None,
) -> RunSummary:
    issue_count = issue_summary.get("issue_count", 0)
    return RunSummary(
        command="scan",
        input_file=file_name,
        sheet_name=sheet_name,
        status="issues_found" if issue_count else "clean",
        warnings=tuple(warnings or ()),
        metrics={
            "issues_found": issue_count,
            "high_severity": issue_summary.get("by_severity", {}).get("high", 0),
            "rows_scanned": shape.get("rows", 0),
            "columns_scanned": shape.get("columns", 0),
        },
    )
