"""renderers/base.py — Shared helpers for every output format."""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from pathlib import Path

from errors import FileWriteError, OutputExistsError, RunWarning
from models import Book


@dataclass
class RenderResult:
    """Standard return type for all renderers."""
    output_path: Path
    warnings: list[RunWarning] = field(default_factory=list)


def archive_timestamp(now: datetime | None = None) -> str:
    now = now or datetime.now(timezone.utc)
    return now.strftime("%Y-%m-%d %H:%M:%S UTC")


def output_path_for(book: Book, output_dir: Path, extension: str) -> Path:
    return Path(output_dir) / f"{book.safe_title}.{extension}"


def write_new_file(path: Path, data: bytes) -> Path:
    """
    Create path and write data to it. An existing file is never touched.
    A partially written file is removed before the error propagates.
    """
    try:
        handle = open(path, "xb")
    except FileExistsError as e:
        raise OutputExistsError(path) from e
    except OSError as e:
        raise FileWriteError(path, e) from e

    try:
        with handle:
            handle.write(data)
    except OSError as e:
        Path(path).unlink(missing_ok=True)
        raise FileWriteError(path, e) from e
    return Path(path)
