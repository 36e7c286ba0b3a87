"""
Upload registry owned by one session.

There is no process-wide store: the web app keeps a FileRegistry in its
session state and passes it to process_upload, and tests build their own.
"""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Optional

from sheet_quality.loader import load_bytes

MAX_UPLOAD_BYTES = 10 * 1024 * 1024
ALLOWED_MIME_TYPES = {
    "application/vnd.ms-excel",
    "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet",
}
ALLOWED_SUFFIXES = {".xls", ".xlsx"}
STATUSES = ("pending", "processing", "completed", "failed")


class UploadError(Exception):
    pass


def _now() -> datetime:
    return datetime.now(timezone.utc)


@dataclass(frozen=True)
class UploadedFile:
    id: int
    filename: str
    original_name: str
    mime_type: str
    size: int
    status: str = "pending"
    uploaded_at: datetime = field(default_factory=_now)
    processed_at: Optional[datetime] = None
    data: Optional[dict[str, list[list[Any]]]] = None
    error_message: Optional[str] = None

    @property
    def sheet_names(self) -> list[str]:
        return list(self.data or {})


class FileRegistry:
    def __init__(self) -> None:
        self._files: dict[int, UploadedFile] = {}
        self._next_id = 1

    def create_file(
        self,
        *,
        filename: str,
        original_name: str,
        mime_type: str,
        size: int,
        status: str = "pending",
    ) -> UploadedFile:
        record = UploadedFile(
            id=self._next_id,
            filename=filename,
            original_name=original_name,
            mime_type=mime_type,
            size=size,
            status=status,
        )
        self._files[record.id] = record
        self._next_id += 1
        return record

    def get_file(self, file_id: int) -> Optional[UploadedFile]:
        return self._files.get(file_id)

    def update_file(self, file_id: int, **updates: Any) -> Optional[UploadedFile]:
        record = self._files.get(file_id)
        if record is None:
            return None
        updated = replace(record, **updates)
        self._files[file_id] = updated
        return updated

    def delete_file(self, file_id: int) -> bool:
        return self._files.pop(file_id, None) is not None

    def all_files(self) -> list[UploadedFile]:
        return list(self._files.values())


def check_upload(original_name: str, size: int, mime_type: str = "") -> None:
    if size > MAX_UPLOAD_BYTES:
        raise UploadError(f"File is larger than {MAX_UPLOAD_BYTES // (1024 * 1024)} MB.")
    if mime_type in ALLOWED_MIME_TYPES:
        return
    if Path(original_name).suffix.lower() not in ALLOWED_SUFFIXES:
        raise UploadError("Only .xls and .xlsx files are allowed")


def process_upload(
    registry: FileRegistry,
    original_name: str,
    content: bytes,
    mime_type: str = "",
) -> UploadedFile:
    """Validate, register and parse one uploaded workbook.

    A parse failure is recorded on the registry entry (status "failed",
    error_message set) and re-raised as UploadError.
    """
    check_upload(original_name, len(content), mime_type)
    stamp = int(_now().timestamp() * 1000)
    record = registry.create_file(
        filename=f"{stamp}-{original_name}",
        original_name=original_name,
        mime_type=mime_type,
        size=len(content),
        status="processing",
    )
    try:
        loaded = load_bytes(content, original_name)
    except (ValueError, ImportError) as exc:
        registry.update_file(
            record.id,
            status="failed",
            error_message=str(exc) or "Processing failed",
            processed_at=_now(),
        )
        raise UploadError(f"Failed to process Excel file: {exc}") from exc

    return registry.update_file(
        record.id,
        status="completed",
        data=loaded["sheets"],
        processed_at=_now(),
    )
