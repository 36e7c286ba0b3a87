"""Whole-sheet CSV/JSON exports for the preview panel."""

from __future__ import annotations

import json
from typing import Any, Optional

from sheet_quality.scanner import Dataset


def _cell_text(value: Any) -> str:
    # blank, zero and False all export as an empty field, like the preview table
    if value is None or value == "" or value is False or value == 0:
        return ""
    if isinstance(value, float) and value != value:
        return ""
    return str(value)


def dataset_to_csv(dataset: Optional[Dataset]) -> str:
    lines = []
    for row in dataset or []:
        fields = ('"' + _cell_text(cell).replace('"', '""') + '"' for cell in row or [])
        lines.append(",".join(fields))
    return "\n".join(lines)


def dataset_to_records(dataset: Optional[Dataset]) -> list[dict[str, Any]]:
    if not dataset:
        return []
    headers = list(dataset[0] or [])
    keys = [str(header) if header not in (None, "") else f"Column_{index + 1}" for index, header in enumerate(headers)]
    records = []
    for row in dataset[1:]:
        cells = list(row or [])
        records.append(
            {
                key: (cells[index] if index < len(cells) and _cell_text(cells[index]) else "")
                for index, key in enumerate(keys)
            }
        )
    return records


def dataset_to_json(dataset: Optional[Dataset]) -> str:
    return json.dumps(dataset_to_records(dataset), indent=2, ensure_ascii=False, default=str)


def export_filename(sheet_name: Optional[str], fmt: str) -> str:
    return f"{sheet_name or 'data'}.{fmt}"
