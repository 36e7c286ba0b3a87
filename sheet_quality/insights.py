"""
Optional AI summary of a sheet, generated through the Gemini REST API.

This is independent of the rule-based scan: neither uses the other's
output. generate_insights never raises; analyze_data raises InsightsError
so callers can show a retryable failure.
"""

from __future__ import annotations

import json
import os
from typing import Any, Optional

import requests

from sheet_quality.normalize import canonical_string
from sheet_quality.scanner import Dataset, column_label

API_ROOT = "https://generativelanguage.googleapis.com/v1beta/models"
DEFAULT_MODEL = "gemini-2.0-flash"
REQUEST_TIMEOUT = 60
SAMPLE_ROWS = 5

FALLBACK_INSIGHTS = {
    "summary": "AI analysis unavailable",
    "patterns": [],
    "suggestions": [],
}

INSIGHTS_SCHEMA = {
    "type": "object",
    "properties": {
        "summary": {"type": "string"},
        "patterns": {"type": "array", "items": {"type": "string"}},
        "suggestions": {"type": "array", "items": {"type": "string"}},
    },
    "required": ["summary", "patterns", "suggestions"],
}


class InsightsError(Exception):
    pass


def unavailable_insights() -> dict[str, Any]:
    return {"summary": FALLBACK_INSIGHTS["summary"], "patterns": [], "suggestions": []}


def api_key_from_env() -> str:
    return os.environ.get("GEMINI_API_KEY", "")


def model_from_env() -> str:
    return os.environ.get("SHEET_QUALITY_GEMINI_MODEL", DEFAULT_MODEL)


def column_stats(dataset: Optional[Dataset]) -> list[dict[str, Any]]:
    if not dataset:
        return []
    headers = list(dataset[0] or [])
    rows = [list(row or []) for row in dataset[1:]]
    stats = []
    for index in range(len(headers)):
        values = [canonical_string(row[index]) if index < len(row) else "" for row in rows]
        filled = [value for value in values if value]
        stats.append(
            {
                "column": column_label(headers, index),
                "total_values": len(rows),
                "non_empty_values": len(filled),
                "empty_values": len(rows) - len(filled),
                "unique_values": len(set(filled)),
            }
        )
    return stats


def build_insights_prompt(dataset: Dataset) -> str:
    headers = [column_label(dataset[0] or [], index) for index in range(len(dataset[0] or []))]
    stats_lines = "\n".join(
        f"{stat['column']}: {stat['non_empty_values']}/{stat['total_values']} filled "
        f"({stat['unique_values']} unique)"
        for stat in column_stats(dataset)
    )
    return (
        "Analyze this spreadsheet data structure and provide structured insights:\n\n"
        f"Headers: {', '.join(headers)}\n"
        f"Rows: {len(dataset) - 1}\n"
        "Column Statistics:\n"
        f"{stats_lines}\n\n"
        "Respond with JSON containing a brief dataset summary, three patterns and three suggestions."
    )


def build_analysis_prompt(dataset: Dataset, filename: str) -> str:
    headers = [canonical_string(header) for header in dataset[0] or []]
    sample = "\n".join(
        " | ".join(canonical_string(cell) for cell in row or [])
        for row in dataset[1 : SAMPLE_ROWS + 1]
    )
    return (
        "Analyze this Excel data and provide insights:\n\n"
        f"File: {filename}\n"
        f"Headers: {', '.join(headers)}\n"
        f"Sample Data (first {SAMPLE_ROWS} rows):\n{sample}\n"
        f"Total Rows: {len(dataset) - 1}\n"
        f"Total Columns: {len(headers)}\n\n"
        "Please provide:\n"
        "1. A brief summary of what this data appears to contain\n"
        "2. Key patterns or trends you notice\n"
        "3. Data quality observations (missing values, inconsistencies, etc.)\n"
        "4. Suggested improvements or next steps for analysis\n\n"
        "Keep the response concise and practical."
    )


def _generate(
    prompt: str,
    *,
    api_key: str,
    model: str,
    generation_config: Optional[dict[str, Any]] = None,
    http: Any = requests,
) -> str:
    if not api_key:
        raise InsightsError("GEMINI_API_KEY is not set.")
    payload: dict[str, Any] = {"contents": [{"parts": [{"text": prompt}]}]}
    if generation_config:
        payload["generationConfig"] = generation_config
    try:
        response = http.post(
            f"{API_ROOT}/{model}:generateContent",
            params={"key": api_key},
            json=payload,
            timeout=REQUEST_TIMEOUT,
        )
        response.raise_for_status()
        body = response.json()
    except (requests.RequestException, ValueError) as exc:
        raise InsightsError(f"AI analysis failed: {exc}") from exc

    try:
        parts = body["candidates"][0]["content"]["parts"]
    except (KeyError, IndexError, TypeError):
        return ""
    if not isinstance(parts, list):
        return ""
    return "".join(
        part["text"] for part in parts if isinstance(part, dict) and isinstance(part.get("text"), str)
    )


def analyze_data(
    dataset: Dataset,
    filename: str,
    *,
    api_key: Optional[str] = None,
    model: Optional[str] = None,
    http: Any = requests,
) -> str:
    text = _generate(
        build_analysis_prompt(dataset, filename),
        api_key=api_key if api_key is not None else api_key_from_env(),
        model=model or model_from_env(),
        http=http,
    )
    return text or "Analysis could not be completed"


def _string_list(value: Any) -> list[str]:
    # the schema asks for string arrays; anything else is dropped
    if not isinstance(value, list):
        return []
    return [item for item in value if isinstance(item, str) and item.strip()]


def generate_insights(
    dataset: Optional[Dataset],
    *,
    api_key: Optional[str] = None,
    model: Optional[str] = None,
    http: Any = requests,
) -> dict[str, Any]:
    if not dataset:
        return unavailable_insights()
    try:
        text = _generate(
            build_insights_prompt(dataset),
            api_key=api_key if api_key is not None else api_key_from_env(),
            model=model or model_from_env(),
            generation_config={
                "responseMimeType": "application/json",
                "responseSchema": INSIGHTS_SCHEMA,
            },
            http=http,
        )
        result = json.loads(text or "{}")
    except (InsightsError, ValueError):
        return unavailable_insights()
    if not isinstance(result, dict):
        return unavailable_insights()
    summary = result.get("summary")
    return {
        "summary": summary if isinstance(summary, str) and summary.strip() else "No summary available",
        "patterns": _string_list(result.get("patterns")),
        "suggestions": _string_list(result.get("suggestions")),
    }
