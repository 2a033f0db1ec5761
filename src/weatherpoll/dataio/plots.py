"""Static PNG plots of a finished run, one per quantity."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Tuple

from matplotlib.backends.backend_agg import FigureCanvasAgg
from matplotlib.figure import Figure

from ..core.models import Quantity
from ..core.ranges import x_window
from ..core.sample_buffer import BufferSnapshot
from ..errors import ExportError

logger = logging.getLogger(__name__)

DEFAULT_SIZE_PX: Tuple[int, int] = (800, 600)
DEFAULT_DPI = 100


def build_quantity_figure(
    snapshot: BufferSnapshot,
    quantity: Quantity,
    y_range: Tuple[float, float],
    *,
    size_px: Tuple[int, int] = DEFAULT_SIZE_PX,
    dpi: int = DEFAULT_DPI,
) -> Figure:
    """Return a Figure plotting ``quantity`` over the time index."""
    width, height = size_px
    fig = Figure(figsize=(width / dpi, height / dpi), dpi=dpi)
    FigureCanvasAgg(fig)
    ax = fig.add_subplot(111)

    times = snapshot.time_indices()
    values = snapshot.series(quantity.key)
    ax.plot(times, values, color=quantity.color, label=quantity.label)

    ax.set_xlim(*x_window(snapshot))
    ax.set_ylim(*y_range)
    ax.set_xlabel("Time")
    ax.set_ylabel(quantity.label)
    ax.grid(True)
    ax.legend(loc="upper right")
    return fig


def save_quantity_plot(
    snapshot: BufferSnapshot,
    quantity: Quantity,
    y_range: Tuple[float, float],
    path: Path,
    *,
    size_px: Tuple[int, int] = DEFAULT_SIZE_PX,
    dpi: int = DEFAULT_DPI,
) -> Path:
    """Render and save one PNG; failures are raised as :class:`ExportError`."""
    fig = build_quantity_figure(snapshot, quantity, y_range, size_px=size_px, dpi=dpi)
    try:
        fig.savefig(path, format="png")
    except (OSError, ValueError) as exc:
        raise ExportError(f"unable to write image {path}: {exc}") from exc
    logger.debug("Saved %s plot to %s", quantity.key, path)
    return path
