"""
Shared data-quality issue taxonomy.

This keeps severity, description and fix wording in one place so the
rules, the reports and the UI do not drift.
"""

from __future__ import annotations

from dataclasses import asdict, dataclass
from typing import Any

SEVERITIES = ("low", "medium", "high")
ISSUE_TYPES = ("empty", "invalid_format", "outlier", "duplicate")

ISSUE_DEFINITIONS = {
    "empty": {
        "severity": "medium",
        "description": "Empty cell detected",
        "suggested_fix": "Fill with appropriate value or mark as N/A",
    },
    "duplicate": {
        "severity": "low",
        "description": 'Duplicate value: "{value}"',
        "suggested_fix": "Review if duplicate is intentional or needs correction",
    },
    "invalid_email": {
        "issue_type": "invalid_format",
        "severity": "high",
        "description": "Invalid email format",
        "suggested_fix": "Correct email format (example@domain.com)",
    },
    "negative_age": {
        "issue_type": "outlier",
        "severity": "high",
        "description": "Negative age value",
        "suggested_fix": "Verify age value is correct",
    },
}

TYPE_LABELS = {
    "empty": "Empty Values",
    "invalid_format": "Invalid Format",
    "outlier": "Outliers",
    "duplicate": "Duplicates",
}


@dataclass(frozen=True)
class Issue:
    row_index: int
    column_index: int
    column_name: str
    issue_type: str
    severity: str
    description: str
    suggested_fix: str

    @property
    def key(self) -> tuple[int, int, str]:
        return (self.row_index, self.column_index, self.issue_type)

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


def build_issue(
    *,
    definition_id: str,
    row_index: int,
    column_index: int,
    column_name: str,
    value: str = "",
) -> Issue:
    definition = ISSUE_DEFINITIONS[definition_id]
    return Issue(
        row_index=row_index,
        column_index=column_index,
        column_name=column_name,
        issue_type=definition.get("issue_type", definition_id),
        severity=definition["severity"],
        description=definition["description"].format(value=value),
        suggested_fix=definition["suggested_fix"],
    )
