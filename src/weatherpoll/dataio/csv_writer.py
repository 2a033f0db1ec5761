"""CSV writing helpers for recorded runs."""

import csv
from pathlib import Path
from typing import Any, Iterable, Sequence

from ..core.sample_buffer import CSV_HEADERS, BufferSnapshot
from ..errors import ExportError


def write_rows(path: Path, headers: Sequence[str], rows: Iterable[Sequence[Any]]) -> None:
    """
    Write a header row and all data rows to a CSV file.

    Directories are created as needed. Any I/O failure is raised as
    :class:`ExportError`; rows written before the failure stay on disk.
    """
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        with path.open("w", newline="", encoding="utf-8") as csvfile:
            writer = csv.writer(csvfile)
            writer.writerow(headers)
            writer.writerows(rows)
    except OSError as exc:
        raise ExportError(f"unable to create CSV file {path}: {exc}") from exc


def write_samples(path: Path, snapshot: BufferSnapshot) -> int:
    """Dump ``snapshot`` as ``Time,Temperature,Pressure,Humidity``; return the row count."""
    write_rows(path, CSV_HEADERS, snapshot.rows())
    return len(snapshot)
