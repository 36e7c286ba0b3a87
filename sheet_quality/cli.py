from __future__ import annotations

import argparse
import json
import os
import sys
from datetime import datetime, timezone
from pathlib import Path
from typing import Any

from sheet_quality import __version__ as TOOL_VERSION
from sheet_quality.contracts import RunSummary, build_contract
from sheet_quality.insights import InsightsError, analyze_data, generate_insights
from sheet_quality.loader import ALL_FORMATS, load_file, select_sheet
from sheet_quality.normalize import canonical_string
from sheet_quality.pagination import DEFAULT_PAGE_SIZE, PAGE_SIZES, paginate
from sheet_quality.report import build_scan_report, render_scan_text
from sheet_quality.samples import sample_filename, sample_keys, write_sample_workbook
from sheet_quality.scanner import column_label, scan_dataset
from sheet_quality.view_model import SEVERITY_FILTERS, TYPE_FILTERS, IssueViewModel

EXIT_SUCCESS = 0
EXIT_COMMAND_ERROR = 1
EXIT_PARSE_FAILED = 2
EXIT_ISSUES_FOUND = 3


class CliError(Exception):
    def __init__(self, message: str, code: int = EXIT_COMMAND_ERROR) -> None:
        super().__init__(message)
        self.code = code


class SheetQualityArgumentParser(argparse.ArgumentParser):
    def error(self, message: str) -> None:
        raise CliError(message, EXIT_COMMAND_ERROR)


def eprint(message: str) -> None:
    print(message, file=sys.stderr)


def emit_human(message: str, *, quiet: bool = False) -> None:
    if not quiet:
        eprint(message)


def json_dumps(payload: Any) -> str:
    return json.dumps(payload, indent=2, ensure_ascii=False, sort_keys=True, default=str)


def timestamp_token() -> str:
    override = os.environ.get("SHEET_QUALITY_OUTPUT_STAMP")
    if override:
        return override
    return datetime.now(timezone.utc).strftime("%Y%m%dT%H%M%SZ")


def default_output_dir(input_path: Path) -> Path:
    return Path.cwd() / "sheet-quality-output" / f"{input_path.stem}-{timestamp_token()}"


def determine_output_dir(args: argparse.Namespace, input_path: Path) -> Path:
    if getattr(args, "out_dir", None):
        return Path(args.out_dir)
    return default_output_dir(input_path)


def write_text(path: Path, payload: str) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(payload, encoding="utf-8")


def write_json(path: Path, payload: Any) -> None:
    write_text(path, json_dumps(payload))


def maybe_emit_json_stdout(payload: Any, enabled: bool) -> None:
    if enabled:
        print(json_dumps(payload))


def classify_backend_exception(exc: Exception) -> int:
    if isinstance(exc, CliError):
        return exc.code
    if isinstance(exc, (ImportError, UnicodeDecodeError)):
        return EXIT_PARSE_FAILED
    if isinstance(exc, FileNotFoundError):
        return EXIT_COMMAND_ERROR
    if isinstance(exc, ValueError):
        return EXIT_PARSE_FAILED
    return EXIT_COMMAND_ERROR


def resolve_input(raw: str) -> Path:
    input_path = Path(raw)
    suffix = input_path.suffix.lower()
    if suffix not in ALL_FORMATS:
        raise CliError(
            f"Unsupported file type '{suffix or '[missing extension]'}'. "
            f"Supported: {', '.join(sorted(ALL_FORMATS))}",
            EXIT_COMMAND_ERROR,
        )
    if not input_path.exists():
        raise CliError(f"File not found: {input_path}", EXIT_COMMAND_ERROR)
    return input_path


def load_sheet(args: argparse.Namespace) -> tuple[Path, str, list[list[Any]], list[str]]:
    input_path = resolve_input(args.input)
    loaded = load_file(input_path)
    sheet_name, grid = select_sheet(loaded, getattr(args, "sheet_name", None))
    return input_path, sheet_name, grid, loaded["warnings"]


def filtered_view(grid: list[list[Any]], args: argparse.Namespace) -> IssueViewModel:
    view = IssueViewModel(scan_dataset(grid))
    view.set_filter(args.severity, args.issue_type)
    return view


def render_preview_text(payload: dict[str, Any]) -> str:
    headers = payload["headers"]
    lines = [
        "sheet-quality preview",
        f"File: {payload['file']}",
        f"Sheet: {payload['sheet_name']}",
        " | ".join(headers),
        "-" * max(len(" | ".join(headers)), 3),
    ]
    for row in payload["rows"]:
        lines.append(" | ".join(row))
    lines.append(payload["page_info"])
    return "\n".join(lines) + "\n"


def render_insights_text(insights: dict[str, Any]) -> str:
    lines = ["sheet-quality insights", f"Summary: {insights['summary']}"]
    if insights["patterns"]:
        lines.append("Patterns:")
        lines.extend(f"  - {pattern}" for pattern in insights["patterns"])
    if insights["suggestions"]:
        lines.append("Suggestions:")
        lines.extend(f"  - {suggestion}" for suggestion in insights["suggestions"])
    return "\n".join(lines) + "\n"


def add_common_flags(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("input", help="Input file path")
    parser.add_argument("--sheet", dest="sheet_name", help="Workbook sheet name (default: first sheet)")
    parser.add_argument("-q", "--quiet", action="store_true", help="Minimal human logs")


def add_filter_flags(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("--severity", choices=SEVERITY_FILTERS, default="all", help="Only keep issues of this severity")
    parser.add_argument("--type", dest="issue_type", choices=TYPE_FILTERS, default="all", help="Only keep issues of this type")


def build_parser() -> argparse.ArgumentParser:
    parser = SheetQualityArgumentParser(prog="sheet-quality")
    subparsers = parser.add_subparsers(dest="command", required=True, parser_class=SheetQualityArgumentParser)

    scan = subparsers.add_parser("scan", help="Run data-quality checks on a sheet.")
    add_common_flags(scan)
    add_filter_flags(scan)
    scan.add_argument("-o", "--out", dest="out_dir", help="Output directory")
    scan.add_argument("--output", help="Explicit report output path")
    scan.add_argument("--json", action="store_true", help="Write machine JSON to stdout")

    export = subparsers.add_parser("export", help="Export quality issues as CSV.")
    add_common_flags(export)
    add_filter_flags(export)
    export.add_argument("-o", "--out", dest="out_dir", help="Output directory")
    export.add_argument("--output", help="Explicit CSV output path")

    preview = subparsers.add_parser("preview", help="Show one page of a sheet.")
    add_common_flags(preview)
    preview.add_argument("--page", type=int, default=1, help="Page number (1-based)")
    preview.add_argument("--page-size", type=int, choices=PAGE_SIZES, default=DEFAULT_PAGE_SIZE, help="Rows per page")
    preview.add_argument("--json", action="store_true", help="Write machine JSON to stdout")

    insights = subparsers.add_parser("insights", help="Ask the AI service for a summary of a sheet.")
    add_common_flags(insights)
    insights.add_argument("--text", action="store_true", help="Free-text analysis instead of structured insights")
    insights.add_argument("--json", action="store_true", help="Write machine JSON to stdout")

    sample = subparsers.add_parser("sample", help="Write a sample workbook.")
    sample.add_argument("dataset", choices=sample_keys(), help="Sample dataset name")
    sample.add_argument("--output", help="Explicit workbook output path")

    subparsers.add_parser("version", help="Print version")
    return parser


def run_scan(args: argparse.Namespace) -> int:
    try:
        input_path, sheet_name, grid, warnings = load_sheet(args)
        view = filtered_view(grid, args)
        report = build_scan_report(
            grid,
            file_name=input_path.name,
            sheet_name=sheet_name,
            issues=view.filtered,
            warnings=warnings,
        )
        if args.output or args.out_dir:
            out_dir = determine_output_dir(args, input_path)
            output_path = Path(args.output) if args.output else out_dir / "scan.json"
            write_json(output_path, report)
            emit_human(f"Report written: {output_path}", quiet=args.quiet)
        if args.json:
            maybe_emit_json_stdout(report, True)
        else:
            emit_human(render_scan_text(report).rstrip(), quiet=args.quiet)
        return EXIT_ISSUES_FOUND if report["summary"]["issue_count"] else EXIT_SUCCESS
    except Exception as exc:
        eprint(str(exc))
        return classify_backend_exception(exc)


def run_export(args: argparse.Namespace) -> int:
    try:
        input_path, sheet_name, grid, _ = load_sheet(args)
        view = filtered_view(grid, args)
        view.select_all()
        export = view.export_selected(sheet_name)
        if args.output:
            output_path = Path(args.output)
        else:
            output_path = determine_output_dir(args, input_path) / export.filename
        output_path.parent.mkdir(parents=True, exist_ok=True)
        output_path.write_bytes(export.content)
        emit_human(f"Exported {len(view.selected)} issues: {output_path}", quiet=args.quiet)
        return EXIT_SUCCESS
    except Exception as exc:
        eprint(str(exc))
        return classify_backend_exception(exc)


def run_preview(args: argparse.Namespace) -> int:
    try:
        input_path, sheet_name, grid, _ = load_sheet(args)
        headers = list(grid[0]) if grid else []
        page = paginate(grid[1:], page=args.page, page_size=args.page_size)
        payload = {
            "contract": build_contract("sheet_quality.preview"),
            "file": input_path.name,
            "sheet_name": sheet_name,
            "headers": [column_label(headers, index) for index in range(len(headers))],
            "rows": [[canonical_string(cell) for cell in row] for row in page.rows],
            "page": page.page,
            "page_size": page.page_size,
            "total_pages": page.total_pages,
            "total_rows": page.total,
            "page_info": page.describe(),
        }
        if args.json:
            maybe_emit_json_stdout(payload, True)
        else:
            print(render_preview_text(payload), end="")
        return EXIT_SUCCESS
    except Exception as exc:
        eprint(str(exc))
        return classify_backend_exception(exc)


def run_insights(args: argparse.Namespace) -> int:
    try:
        input_path, sheet_name, grid, _ = load_sheet(args)
        if args.text:
            insights = {"analysis": analyze_data(grid, input_path.name)}
        else:
            insights = generate_insights(grid)
        payload = {
            "contract": build_contract("sheet_quality.insights"),
            "file": input_path.name,
            "sheet_name": sheet_name,
            "insights": insights,
            "run_summary": RunSummary(
                command="insights",
                input_file=input_path.name,
                sheet_name=sheet_name,
            ).to_dict(),
        }
        if args.json:
            maybe_emit_json_stdout(payload, True)
        elif args.text:
            print(insights["analysis"])
        else:
            print(render_insights_text(insights), end="")
        return EXIT_SUCCESS
    except InsightsError as exc:
        eprint(str(exc))
        return EXIT_COMMAND_ERROR
    except Exception as exc:
        eprint(str(exc))
        return classify_backend_exception(exc)


def run_sample(args: argparse.Namespace) -> int:
    output_path = Path(args.output) if args.output else Path.cwd() / sample_filename(args.dataset)
    write_sample_workbook(args.dataset, output_path)
    emit_human(f"Sample written: {output_path}")
    return EXIT_SUCCESS


def run_version() -> int:
    print(TOOL_VERSION)
    return EXIT_SUCCESS


def main(argv: list[str] | None = None) -> int:
    try:
        parser = build_parser()
        args = parser.parse_args(argv)
        if args.command == "scan":
            return run_scan(args)
        if args.command == "export":
            return run_export(args)
        if args.command == "preview":
            return run_preview(args)
        if args.command == "insights":
            return run_insights(args)
        if args.command == "sample":
            return run_sample(args)
        if args.command == "version":
            return run_version()
        raise CliError(f"Unknown command: {args.command}", EXIT_COMMAND_ERROR)
    except CliError as exc:
        eprint(str(exc))
        return exc.code


if __name__ == "__main__":
    raise SystemExit(main())
