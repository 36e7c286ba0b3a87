"""
Cell value normalisation shared by every quality rule.

A spreadsheet cell can arrive as a string, int, float, bool, date, None or
a pandas NaN. Rules never look at the raw value directly: they compare the
trimmed canonical string and, where relevant, the parsed number.
"""

from __future__ import annotations

import math
import re
from dataclasses import dataclass
from datetime import date, datetime, time
from typing import Any, Optional

DECIMAL_RE = re.compile(r"^[+-]?(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?$", re.ASCII)


@dataclass(frozen=True)
class NormalizedCell:
    raw: Any
    text: str
    number: Optional[float]

    @property
    def is_empty(self) -> bool:
        return self.text == ""


def _is_missing(value: Any) -> bool:
    if value is None:
        return True
    if isinstance(value, float) and math.isnan(value):
        return True
    # pandas.NA / NaT compare oddly; they all stringify to these markers
    return type(value).__name__ in {"NAType", "NaTType"}


def _trim(text: str) -> str:
    # str.strip() keeps U+FEFF; treat a byte-order mark at either edge as whitespace
    trimmed = text.strip()
    while trimmed[:1] == "\ufeff" or trimmed[-1:] == "\ufeff":
        trimmed = trimmed.strip("\ufeff").strip()
    return trimmed


def canonical_string(value: Any) -> str:
    if _is_missing(value):
        return ""
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, float):
        if math.isfinite(value) and value.is_integer():
            return str(int(value))
        return str(value)
    if isinstance(value, datetime):
        if value.time() == time(0, 0):
            return value.date().isoformat()
        return value.isoformat(sep=" ")
    if isinstance(value, (date, time)):
        return value.isoformat()
    if isinstance(value, bytes):
        return _trim(value.decode("utf-8", errors="replace"))
    return _trim(str(value))


def parse_number(text: str) -> Optional[float]:
    candidate = _trim(text or "")
    if not DECIMAL_RE.match(candidate):
        return None
    try:
        number = float(candidate)
    except (OverflowError, ValueError):
        return None
    if not math.isfinite(number):
        return None
    return number


def normalize_cell(value: Any) -> NormalizedCell:
    text = canonical_string(value)
    return NormalizedCell(raw=value, text=text, number=parse_number(text))
