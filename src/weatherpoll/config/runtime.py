"""Runtime configuration for the polling loop, buffer and exports."""

from __future__ import annotations

import logging
from dataclasses import dataclass, fields
from pathlib import Path
from typing import Any, Mapping, MutableMapping

import yaml

logger = logging.getLogger(__name__)


def _as_number(value: Any, default: float, minimum: float, cast=float):
    try:
        number = cast(value)
    except (TypeError, ValueError, OverflowError):
        logger.warning("Ignoring invalid config value %r; using %r", value, default)
        return default
    return max(cast(minimum), number)


def _as_range(value: Any, default: tuple[float, float]) -> tuple[float, float]:
    try:
        low, high = (float(v) for v in value)
    except (TypeError, ValueError):
        return default
    if high <= low:
        return default
    return (low, high)


def _as_size(value: Any, default: tuple[int, int]) -> tuple[int, int]:
    try:
        width, height = (int(v) for v in value)
    except (TypeError, ValueError):
        return default
    return (max(100, width), max(100, height))


@dataclass(slots=True)
class PollerConfig:
    """
    Tuning knobs for acquisition and output.

    The defaults match the sensor page firmware: one request every 5 s, a
    10 s request timeout and a 300-sample rolling window.
    """

    poll_interval_s: float = 5.0
    request_timeout_s: float = 10.0
    buffer_capacity: int = 300

    temperature_range: tuple[float, float] = (20.0, 45.0)
    humidity_range: tuple[float, float] = (10.0, 70.0)
    pressure_half_span: float = 50.0

    output_root: str | None = None
    image_size: tuple[int, int] = (800, 600)
    image_dpi: int = 100

    gui_enabled: bool = True

    def sanitized(self) -> PollerConfig:
        """Return a copy with derived limits applied."""
        defaults = PollerConfig()
        output_root = self.output_root
        if output_root is not None:
            output_root = str(output_root).strip() or None
        return PollerConfig(
            poll_interval_s=_as_number(self.poll_interval_s, defaults.poll_interval_s, 0.01),
            request_timeout_s=_as_number(
                self.request_timeout_s, defaults.request_timeout_s, 0.1
            ),
            buffer_capacity=_as_number(self.buffer_capacity, defaults.buffer_capacity, 1, int),
            temperature_range=_as_range(self.temperature_range, defaults.temperature_range),
            humidity_range=_as_range(self.humidity_range, defaults.humidity_range),
            pressure_half_span=_as_number(
                self.pressure_half_span, defaults.pressure_half_span, 0.1
            ),
            output_root=output_root,
            image_size=_as_size(self.image_size, defaults.image_size),
            image_dpi=_as_number(self.image_dpi, defaults.image_dpi, 10, int),
            gui_enabled=bool(self.gui_enabled),
        )


def _recognized_fields() -> set[str]:
    """Return the dataclass field names accepted by :class:`PollerConfig`."""
    return {f.name for f in fields(PollerConfig)}


def _normalize_mapping(data: Mapping[str, Any]) -> MutableMapping[str, Any]:
    """Flatten an optional top-level ``poller`` block."""
    if "poller" in data and isinstance(data["poller"], Mapping):
        merged: MutableMapping[str, Any] = {}
        for key, value in data.items():
            if key == "poller":
                merged.update(value)
            else:
                merged[key] = value
        return merged
    return dict(data)


def config_from_mapping(data: Mapping[str, Any] | None) -> PollerConfig:
    """Build :class:`PollerConfig` from ``data`` (ignoring unknown keys)."""
    if not data:
        return PollerConfig()
    normalized = _normalize_mapping(data)
    known = _recognized_fields()
    payload = {key: normalized[key] for key in normalized.keys() & known}
    return PollerConfig(**payload).sanitized()


def load_config(path: str | Path | None) -> PollerConfig:
    """
    Load configuration from ``path``.

    Missing, unreadable or malformed files fall back to default
    :class:`PollerConfig` with a warning; a bad config never aborts a run.
    """
    if path is None:
        return PollerConfig()
    cfg_path = Path(path)
    if not cfg_path.exists():
        return PollerConfig()
    try:
        with cfg_path.open("r", encoding="utf-8") as fh:
            raw = yaml.safe_load(fh) or {}
    except (OSError, UnicodeDecodeError, yaml.YAMLError) as exc:
        logger.warning("Cannot read config %s (%s); using defaults", cfg_path, exc)
        return PollerConfig()
    if not isinstance(raw, Mapping):
        logger.warning(
            "Expected mapping in %s, got %s; using defaults", cfg_path, type(raw).__name__
        )
        return PollerConfig()
    return config_from_mapping(raw)


__all__ = ["PollerConfig", "config_from_mapping", "load_config"]
