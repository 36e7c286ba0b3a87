"""
loader.py - Spreadsheet loader for sheet-quality

Supports: .xlsx .xlsm .xls .csv .tsv .txt

Public API:
    result = load_file("path/to/file.xlsx")
    grid   = result["sheets"][result["sheet_names"][0]]

Result dict keys:
    sheets            - sheet name -> grid (list of rows, row 0 is the header)
    sheet_names       - sheet names in workbook order
    detected_format   - "xlsx", "csv", etc.
    detected_encoding - encoding name for text files; None for workbooks
    delimiter         - delimiter char for text files; None otherwise
    warnings          - list of warning strings

Cells keep their native type (numbers stay numbers). Blank cells inside
the sheet range become "" so every row has the sheet's full width.
"""

from __future__ import annotations

import codecs
import csv
import io
from collections import Counter
from pathlib import Path
from typing import Any

import chardet
import pandas as pd

# ── Format groups ──────────────────────────────────────────────────────────────
TEXT_FORMATS  = {".csv", ".tsv", ".txt"}
EXCEL_FORMATS = {".xlsx", ".xlsm", ".xls"}
ALL_FORMATS   = TEXT_FORMATS | EXCEL_FORMATS

TEXT_SHEET_NAME = "Sheet1"

Grid = list[list[Any]]


# ══════════════════════════════════════════════════════════════════════════════
# TEXT FILES
# ══════════════════════════════════════════════════════════════════════════════

def _detect_encoding(raw: bytes) -> str:
    result = chardet.detect(raw)
    return result.get("encoding") or "utf-8"


def _read_text_safely(raw: bytes, preferred_encoding: str) -> str:
    """
    Decode raw bytes line-by-line.

    Each line tries UTF-8, then the detected encoding, then latin-1, and
    finally CP1252 with replacement so decoding never fails outright.
    Embedded null bytes and a leading UTF-8 byte-order mark are stripped.
    """
    if raw.startswith(codecs.BOM_UTF8):
        raw = raw[len(codecs.BOM_UTF8):]
    decoded_lines: list[str] = []
    for raw_line in raw.split(b"\n"):
        decoded: str | None = None
        for enc in ("utf-8", preferred_encoding, "latin-1"):
            if not enc:
                continue
            try:
                decoded = raw_line.decode(enc)
                break
            except (LookupError, UnicodeDecodeError):
                continue
        if decoded is None:
            decoded = raw_line.decode("cp1252", errors="replace")
        decoded_lines.append(decoded.replace("\x00", "").rstrip("\r"))
    return "\n".join(decoded_lines)


def _detect_delimiter(text: str) -> str:
    """
    Infer the delimiter from sample lines.

    csv.Sniffer goes first; when it gives up, each candidate is scored by
    how consistently it splits rows into the same number of fields.
    """
    sample_lines = [line for line in text.splitlines() if line.strip()][:50]
    sample = "\n".join(sample_lines[:25])

    if sample:
        try:
            return csv.Sniffer().sniff(sample, delimiters=",;\t|").delimiter
        except csv.Error:
            pass

    best_delim = ","
    best_score = float("-inf")
    for delim in (",", ";", "\t", "|"):
        rows = [
            row
            for row in csv.reader(io.StringIO("\n".join(sample_lines)), delimiter=delim)
            if any(cell.strip() for cell in row)
        ]
        if len(rows) < 2:
            continue
        mode_width, mode_count = Counter(len(row) for row in rows).most_common(1)[0]
        score = mode_width * 2.0 + (mode_count / len(rows)) * mode_width
        if mode_width == 1:
            score -= 10.0
        if score > best_score:
            best_score = score
            best_delim = delim
    return best_delim


def _pad_grid(rows: Grid) -> Grid:
    width = max((len(row) for row in rows), default=0)
    return [list(row) + [""] * (width - len(row)) for row in rows]


def _load_text(content: bytes, suffix: str) -> dict:
    encoding = _detect_encoding(content)
    text = _read_text_safely(content, encoding)
    delimiter = "\t" if suffix == ".tsv" else _detect_delimiter(text)

    rows = [row for row in csv.reader(io.StringIO(text), delimiter=delimiter)]
    while rows and not any(cell.strip() for cell in rows[-1]):
        rows.pop()

    return {
        "sheets":            {TEXT_SHEET_NAME: _pad_grid(rows)},
        "sheet_names":       [TEXT_SHEET_NAME],
        "detected_format":   suffix.lstrip("."),
        "detected_encoding": encoding,
        "delimiter":         delimiter,
        "warnings":          [],
    }


# ══════════════════════════════════════════════════════════════════════════════
# WORKBOOKS
# ══════════════════════════════════════════════════════════════════════════════

def frame_to_grid(df: pd.DataFrame) -> Grid:
    """Convert a header=None DataFrame to a grid with "" for blank cells."""
    if df.empty:
        return []
    cleaned = df.astype(object).where(pd.notna(df), "")
    return [list(row) for row in cleaned.itertuples(index=False, name=None)]


def _load_excel(content: bytes, suffix: str) -> dict:
    # .xls requires xlrd; give a clear error if missing.
    if suffix == ".xls":
        try:
            import xlrd  # noqa: F401
        except ImportError:
            raise ImportError(
                ".xls files require xlrd - run: pip install xlrd"
            )

    try:
        frames = pd.read_excel(io.BytesIO(content), sheet_name=None, header=None, dtype=object)
    except Exception as exc:
        raise ValueError(f"Could not read workbook: {exc}") from exc

    warnings: list[str] = []
    sheets: dict[str, Grid] = {}
    for name, df in frames.items():
        grid = frame_to_grid(df)
        if not grid:
            warnings.append(f"Sheet '{name}' is empty.")
        sheets[str(name)] = grid

    return {
        "sheets":            sheets,
        "sheet_names":       list(sheets),
        "detected_format":   suffix.lstrip("."),
        "detected_encoding": None,
        "delimiter":         None,
        "warnings":          warnings,
    }


# ══════════════════════════════════════════════════════════════════════════════
# PUBLIC API
# ══════════════════════════════════════════════════════════════════════════════

def load_bytes(content: bytes, filename: str) -> dict:
    """
    Load uploaded file content into per-sheet grids.

    Raises:
        ValueError   if the format is unsupported or unreadable.
        ImportError  if a required optional dependency is missing.
    """
    suffix = Path(filename).suffix.lower()
    if suffix not in ALL_FORMATS:
        supported = ", ".join(sorted(ALL_FORMATS))
        raise ValueError(
            f"Unsupported format '{suffix or '[missing extension]'}'. Supported: {supported}"
        )
    if suffix in TEXT_FORMATS:
        return _load_text(content, suffix)
    return _load_excel(content, suffix)


def load_file(path: "str | Path") -> dict:
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"File not found: {path}")
    return load_bytes(path.read_bytes(), path.name)


def select_sheet(loaded: dict, sheet_name: str | None = None) -> tuple[str, Grid]:
    names = loaded["sheet_names"]
    if not names:
        raise ValueError("Workbook contains no sheets.")
    if sheet_name is None:
        return names[0], loaded["sheets"][names[0]]
    if sheet_name not in loaded["sheets"]:
        raise ValueError(f"Sheet '{sheet_name}' not found. Available: {names}")
    return sheet_name, loaded["sheets"][sheet_name]
