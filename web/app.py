#!/usr/bin/env python3
from __future__ import annotations

import sys
from pathlib import Path
from typing import Any, Optional

import pandas as pd
import streamlit as st

ROOT = Path(__file__).resolve().parent.parent
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from sheet_quality.exporters import dataset_to_csv, dataset_to_json, export_filename
from sheet_quality.insights import api_key_from_env, generate_insights
from sheet_quality.issue_taxonomy import TYPE_LABELS
from sheet_quality.normalize import canonical_string
from sheet_quality.pagination import PAGE_SIZES, paginate
from sheet_quality.samples import SAMPLE_DATASETS, sample_dataset, sample_filename
from sheet_quality.scanner import column_label, scan_dataset
from sheet_quality.session import MAX_UPLOAD_BYTES, FileRegistry, UploadError, process_upload
from sheet_quality.view_model import SEVERITY_FILTERS, TYPE_FILTERS, IssueViewModel

MAX_UPLOAD_MB = MAX_UPLOAD_BYTES // (1024 * 1024)
SEVERITY_LABELS = {"all": "All Severity", "high": "High", "medium": "Medium", "low": "Low"}


def ensure_state() -> None:
    st.session_state.setdefault("registry", FileRegistry())
    st.session_state.setdefault("active", None)
    st.session_state.setdefault("current_sheet", None)
    st.session_state.setdefault("preview_page", 1)
    st.session_state.setdefault("insights", None)
    st.session_state.setdefault("view", None)
    st.session_state.setdefault("view_key", None)


def set_active(payload: dict) -> None:
    st.session_state["active"] = payload
    st.session_state["current_sheet"] = payload["sheets"][0] if payload["sheets"] else None
    st.session_state["preview_page"] = 1
    st.session_state["insights"] = None
    st.session_state["view"] = None
    st.session_state["view_key"] = None


def clear_active() -> None:
    active = st.session_state.get("active")
    if active and active.get("id") is not None:
        st.session_state["registry"].delete_file(active["id"])
    st.session_state["active"] = None
    st.session_state["current_sheet"] = None
    st.session_state["insights"] = None
    st.session_state["view"] = None
    st.session_state["view_key"] = None


def current_dataset() -> Optional[list[list[Any]]]:
    active = st.session_state.get("active")
    sheet = st.session_state.get("current_sheet")
    if not active or sheet is None:
        return None
    return active["data"].get(sheet)


def current_view(dataset: Optional[list[list[Any]]]) -> IssueViewModel:
    # re-scan whenever the file or sheet changes; otherwise keep filter/selection
    active = st.session_state.get("active") or {}
    key = (active.get("id"), active.get("filename"), st.session_state.get("current_sheet"))
    if st.session_state.get("view_key") != key or st.session_state.get("view") is None:
        st.session_state["view"] = IssueViewModel(scan_dataset(dataset))
        st.session_state["view_key"] = key
    return st.session_state["view"]


def handle_upload(upload) -> None:
    registry: FileRegistry = st.session_state["registry"]
    try:
        record = process_upload(registry, upload.name, upload.getvalue(), upload.type or "")
    except UploadError as exc:
        st.error(str(exc))
        return
    set_active(
        {
            "id": record.id,
            "filename": record.original_name,
            "size": record.size,
            "sheets": record.sheet_names,
            "data": record.data,
        }
    )
    st.success(f"Processed {record.original_name}")


def handle_sample(key: str) -> None:
    set_active(
        {
            "id": None,
            "filename": sample_filename(key),
            "size": 0,
            "sheets": ["Sheet1"],
            "data": {"Sheet1": sample_dataset(key)},
        }
    )


def render_upload() -> None:
    st.subheader("Upload")
    upload = st.file_uploader(
        "Excel file",
        type=["xls", "xlsx"],
        key="upload_input",
        help=f"Up to {MAX_UPLOAD_MB} MB",
    )
    if upload is not None and st.button("Process file", type="primary"):
        handle_upload(upload)

    with st.expander("Sample data"):
        key = st.selectbox(
            "Dataset",
            options=list(SAMPLE_DATASETS),
            format_func=lambda item: SAMPLE_DATASETS[item]["name"],
        )
        if st.button("Load sample"):
            handle_sample(key)


def render_preview(dataset: list[list[Any]]) -> None:
    active = st.session_state["active"]
    st.subheader("Data Preview")
    if len(active["sheets"]) > 1:
        sheet = st.selectbox(
            "Sheet",
            options=active["sheets"],
            index=active["sheets"].index(st.session_state["current_sheet"]),
        )
        if sheet != st.session_state["current_sheet"]:
            st.session_state["current_sheet"] = sheet
            st.session_state["preview_page"] = 1
            st.rerun()

    headers = dataset[0] if dataset else []
    columns = [column_label(headers, index) for index in range(len(headers))]
    page_size = st.selectbox("Rows per page", options=PAGE_SIZES, index=0)
    page = paginate(dataset[1:], page=st.session_state["preview_page"], page_size=page_size)
    st.session_state["preview_page"] = page.page

    frame = pd.DataFrame(
        [[canonical_string(row[index]) if index < len(row) else "" for index in range(len(columns))] for row in page.rows],
        columns=columns,
    )
    st.dataframe(frame, width="stretch", hide_index=True)

    nav = st.columns([1, 1, 2, 1, 1])
    if nav[0].button("First", disabled=not page.has_previous):
        st.session_state["preview_page"] = 1
        st.rerun()
    if nav[1].button("Prev", disabled=not page.has_previous):
        st.session_state["preview_page"] = page.page - 1
        st.rerun()
    nav[2].caption(page.describe())
    if nav[3].button("Next", disabled=not page.has_next):
        st.session_state["preview_page"] = page.page + 1
        st.rerun()
    if nav[4].button("Last", disabled=not page.has_next):
        st.session_state["preview_page"] = page.total_pages
        st.rerun()

    stats = st.columns(2)
    stats[0].metric("Rows", max(len(dataset) - 1, 0))
    stats[1].metric("Columns", len(columns))


def render_quality_checker(dataset: list[list[Any]]) -> None:
    view = current_view(dataset)
    st.subheader(f"Data Quality Issues ({len(view.filtered)} issues found)")

    filters = st.columns(3)
    severity = filters[0].selectbox(
        "Severity",
        options=SEVERITY_FILTERS,
        index=SEVERITY_FILTERS.index(view.severity_filter),
        format_func=lambda item: SEVERITY_LABELS[item],
    )
    issue_type = filters[1].selectbox(
        "Issue Type",
        options=TYPE_FILTERS,
        index=TYPE_FILTERS.index(view.type_filter),
        format_func=lambda item: "All Types" if item == "all" else TYPE_LABELS[item],
    )
    if (severity, issue_type) != (view.severity_filter, view.type_filter):
        view.set_filter(severity, issue_type)

    label = "Deselect All" if view.all_selected and view.filtered else "Select All"
    if filters[2].button(label):
        view.select_all()
        st.rerun()

    if not view.filtered:
        st.success("No data quality issues found! Your data appears to be clean and well-formatted.")
        return

    for index, issue in enumerate(view.filtered):
        cols = st.columns([0.5, 1, 2, 2, 1, 3, 3])
        key = f"issue_{index}"
        st.session_state[key] = view.is_selected(index)
        cols[0].checkbox(
            "select",
            key=key,
            on_change=view.toggle_select,
            args=(index,),
            label_visibility="collapsed",
        )
        cols[1].write(issue.row_index)
        cols[2].write(issue.column_name)
        cols[3].write(issue.issue_type.replace("_", " ").capitalize())
        cols[4].write(issue.severity)
        cols[5].write(issue.description)
        cols[6].caption(issue.suggested_fix)

    if view.selected:
        export = view.export_selected(st.session_state["current_sheet"])
        st.download_button(
            "Export Selected",
            data=export.content,
            file_name=export.filename,
            mime=export.mime_type,
        )


def render_insights(dataset: list[list[Any]]) -> None:
    st.subheader("AI Insights")
    if not api_key_from_env():
        st.caption("Set GEMINI_API_KEY to enable AI insights.")
    if st.button("Generate insights"):
        with st.spinner("Analyzing data..."):
            st.session_state["insights"] = generate_insights(dataset)
    insights = st.session_state.get("insights")
    if not insights:
        return
    st.write(insights["summary"])
    if insights["patterns"]:
        st.markdown("**Patterns**")
        for pattern in insights["patterns"]:
            st.markdown(f"- {pattern}")
    if insights["suggestions"]:
        st.markdown("**Suggestions**")
        for suggestion in insights["suggestions"]:
            st.markdown(f"- {suggestion}")


def render_export_controls(dataset: list[list[Any]]) -> None:
    sheet = st.session_state["current_sheet"]
    cols = st.columns(3)
    cols[0].download_button(
        "Export JSON",
        data=dataset_to_json(dataset).encode("utf-8"),
        file_name=export_filename(sheet, "json"),
        mime="application/json",
    )
    cols[1].download_button(
        "Export CSV",
        data=dataset_to_csv(dataset).encode("utf-8"),
        file_name=export_filename(sheet, "csv"),
        mime="text/csv",
    )
    if cols[2].button("Clear"):
        clear_active()
        st.rerun()


def main() -> None:
    st.set_page_config(page_title="sheet-quality", layout="wide")
    ensure_state()

    st.title("sheet-quality")
    st.caption("Upload a spreadsheet, browse its rows, and check it for data-quality issues.")

    render_upload()

    dataset = current_dataset()
    if not dataset:
        st.info("Upload data to check for quality issues")
        return

    render_preview(dataset)
    render_export_controls(dataset)
    render_quality_checker(dataset)
    render_insights(dataset)


if __name__ == "__main__":
    main()
