"""Helpers for constructing output directories and file names."""

from __future__ import annotations

import os
import re
from datetime import datetime
from pathlib import Path

DEFAULT_ANALYSIS_DIRNAME = "analisi ventole"
DATA_ROOT_ENV = "WEATHERPOLL_DATA_ROOT"

# Allow only alphanumerics, underscore, dot, and dash.
_ZONE_NAME_RE = re.compile(r"[^A-Za-z0-9_.-]+")


def sanitize_zone(zone: str) -> str:
    """
    Sanitize a zone label for use in directory and file names.

    - Replace disallowed characters with '_'.
    - Strip leading/trailing underscores.
    - Fall back to 'zone' if nothing remains.
    """
    cleaned = _ZONE_NAME_RE.sub("_", zone).strip("_")
    return cleaned or "zone"


def analysis_root(override: str | Path | None = None) -> Path:
    """
    Root folder holding one sub-folder per zone.

    Precedence: explicit ``override``, then ``WEATHERPOLL_DATA_ROOT``, then
    ``~/Desktop/analisi ventole``.
    """
    if override:
        return Path(override).expanduser()
    env_root = os.environ.get(DATA_ROOT_ENV)
    if env_root:
        return Path(env_root).expanduser()
    return Path.home() / "Desktop" / DEFAULT_ANALYSIS_DIRNAME


def zone_directory(zone: str, base: Path | None = None) -> Path:
    root = base if base is not None else analysis_root()
    return root / sanitize_zone(zone)


def ensure_directory(path: Path) -> Path:
    """Create ``path`` and its parents; OSError propagates to the caller."""
    path.mkdir(parents=True, exist_ok=True)
    return path


def csv_path(output_dir: Path, zone: str, when: datetime | None = None) -> Path:
    """
    Example: ``data_A1_2024-3-7_9-5-2.csv`` (fields are not zero padded).
    """
    ts = when or datetime.now()
    stamp = f"{ts.year}-{ts.month}-{ts.day}_{ts.hour}-{ts.minute}-{ts.second}"
    return output_dir / f"data_{sanitize_zone(zone)}_{stamp}.csv"


def image_path(output_dir: Path, quantity_tag: str, zone: str) -> Path:
    return output_dir / f"realtime_plot_{quantity_tag}_{sanitize_zone(zone)}.png"
