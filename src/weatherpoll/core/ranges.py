"""Axis ranges shared by the live window and the static image export."""

from __future__ import annotations

from typing import Dict, Tuple

from ..config.runtime import PollerConfig
from .models import HUMIDITY, PRESSURE, TEMPERATURE
from .sample_buffer import BufferSnapshot

AxisRange = Tuple[float, float]

# Used until the first sample fixes the pressure range.
FALLBACK_PRESSURE_RANGE: AxisRange = (950.0, 1050.0)


def resolve_ranges(snapshot: BufferSnapshot, config: PollerConfig | None = None) -> Dict[str, AxisRange]:
    """Return the y-range for each quantity key."""
    cfg = config or PollerConfig()
    pressure = snapshot.pressure_range or FALLBACK_PRESSURE_RANGE
    return {
        TEMPERATURE.key: tuple(cfg.temperature_range),
        PRESSURE.key: tuple(pressure),
        HUMIDITY.key: tuple(cfg.humidity_range),
    }


def x_window(snapshot: BufferSnapshot) -> AxisRange:
    """Time-axis window covering one buffer's worth of indices."""
    start = snapshot.first_index or 0
    return (float(start), float(start + snapshot.capacity))
