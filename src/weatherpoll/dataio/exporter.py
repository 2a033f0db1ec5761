"""End-of-run export: CSV dump plus one PNG per quantity."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import datetime
from pathlib import Path
from typing import List

from ..config.runtime import PollerConfig
from ..core.models import QUANTITIES, RunSession
from ..core.ranges import resolve_ranges
from ..core.sample_buffer import BufferSnapshot
from ..errors import ExportError
from . import csv_writer, file_paths
from .plots import save_quantity_plot

logger = logging.getLogger(__name__)


@dataclass
class ExportResult:
    written: List[Path] = field(default_factory=list)
    errors: List[ExportError] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not self.errors


def export_session(
    snapshot: BufferSnapshot,
    session: RunSession,
    config: PollerConfig | None = None,
    *,
    now: datetime | None = None,
) -> ExportResult:
    """
    Write the CSV and the static plots for a stopped run.

    Must be called once, after the acquisition loop has been joined. A failing
    file is logged and recorded in the result; files already written are kept
    and the remaining outputs are still attempted.
    """
    cfg = config or PollerConfig()
    result = ExportResult()
    out_dir = session.output_directory

    target = file_paths.csv_path(out_dir, session.zone, now)
    try:
        rows = csv_writer.write_samples(target, snapshot)
    except ExportError as exc:
        logger.error("CSV export failed: %s", exc)
        result.errors.append(exc)
    else:
        logger.info("CSV file created: %s (%d rows)", target, rows)
        result.written.append(target)

    if snapshot.is_empty:
        logger.warning("No samples recorded; skipping plot images")
        return result

    ranges = resolve_ranges(snapshot, cfg)
    for quantity in QUANTITIES:
        path = file_paths.image_path(out_dir, quantity.file_tag, session.zone)
        try:
            save_quantity_plot(
                snapshot,
                quantity,
                ranges[quantity.key],
                path,
                size_px=cfg.image_size,
                dpi=cfg.image_dpi,
            )
        except ExportError as exc:
            logger.error("%s plot export failed: %s", quantity.label, exc)
            result.errors.append(exc)
            continue
        logger.info("Plot saved: %s", path)
        result.written.append(path)

    return result
