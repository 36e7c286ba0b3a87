"""
Per-cell quality rules.

Each rule pairs a column predicate (which headers it cares about) with a
check that looks at one normalised cell plus that column's scan state.
Rules are evaluated in registry order, so adding a rule means appending a
Rule to DEFAULT_RULES; the scanner does not change.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from typing import Callable, Optional

from sheet_quality.issue_taxonomy import Issue, build_issue
from sheet_quality.normalize import NormalizedCell

EMAIL_RE = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")


@dataclass
class ColumnState:
    seen_values: set[str] = field(default_factory=set)


@dataclass(frozen=True)
class CellContext:
    row_index: int
    column_index: int
    column_name: str
    cell: NormalizedCell
    state: ColumnState

    def issue(self, definition_id: str, value: str = "") -> Issue:
        return build_issue(
            definition_id=definition_id,
            row_index=self.row_index,
            column_index=self.column_index,
            column_name=self.column_name,
            value=value,
        )


def any_column(column_name: str) -> bool:
    return True


def header_contains(keyword: str) -> Callable[[str], bool]:
    needle = keyword.lower()

    def predicate(column_name: str) -> bool:
        return needle in column_name.lower()

    return predicate


@dataclass(frozen=True)
class Rule:
    name: str
    check: Callable[[CellContext], Optional[Issue]]
    applies_to: Callable[[str], bool] = any_column

    def evaluate(self, ctx: CellContext) -> Optional[Issue]:
        if not self.applies_to(ctx.column_name):
            return None
        return self.check(ctx)


def is_valid_email(text: str) -> bool:
    return bool(EMAIL_RE.match(text))


def check_empty(ctx: CellContext) -> Optional[Issue]:
    if ctx.cell.is_empty:
        return ctx.issue("empty")
    return None


def check_duplicate(ctx: CellContext) -> Optional[Issue]:
    """Flag repeats of a value already seen in this column.

    The first occurrence is recorded and never flagged, so N identical
    values produce N-1 issues.
    """
    text = ctx.cell.text
    if not text:
        return None
    if text in ctx.state.seen_values:
        return ctx.issue("duplicate", value=text)
    ctx.state.seen_values.add(text)
    return None


def check_email(ctx: CellContext) -> Optional[Issue]:
    if ctx.cell.is_empty or is_valid_email(ctx.cell.text):
        return None
    return ctx.issue("invalid_email")


def check_negative_age(ctx: CellContext) -> Optional[Issue]:
    number = ctx.cell.number
    if number is not None and number < 0:
        return ctx.issue("negative_age")
    return None


DEFAULT_RULES: tuple[Rule, ...] = (
    Rule("empty_cell", check_empty),
    Rule("duplicate_value", check_duplicate),
    Rule("email_format", check_email, header_contains("email")),
    Rule("negative_age", check_negative_age, header_contains("age")),
)


def evaluate_cell(ctx: CellContext, rules: tuple[Rule, ...] = DEFAULT_RULES) -> list[Issue]:
    issues: list[Issue] = []
    for rule in rules:
        issue = rule.evaluate(ctx)
        if issue is not None:
            issues.append(issue)
    return issues
