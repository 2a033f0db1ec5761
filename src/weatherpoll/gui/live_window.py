"""Live three-panel chart of the rolling sample buffer."""

from __future__ import annotations

import logging
from typing import Dict, Optional

import pyqtgraph as pg
from PySide6.QtCore import QObject, Signal, Slot
from PySide6.QtGui import QCloseEvent
from PySide6.QtWidgets import QLabel, QMainWindow, QVBoxLayout, QWidget

from ..config.runtime import PollerConfig
from ..core.models import QUANTITIES
from ..core.ranges import resolve_ranges, x_window
from ..core.sample_buffer import BufferSnapshot, SampleBuffer

logger = logging.getLogger(__name__)

_PEN_COLORS = {"r": (220, 40, 40), "b": (40, 90, 220), "g": (30, 160, 60)}


class RefreshBridge(QObject):
    """
    Thread hop between the acquisition loop and the GUI thread.

    The loop calls :meth:`request_refresh` / :meth:`notify_finished` from its
    own thread; because the bridge lives on the GUI thread the connected slots
    run there (queued connection). A refresh is only a hint: several requests
    may collapse into one redraw of the latest snapshot.
    """

    refresh_requested = Signal()
    finished = Signal()

    def request_refresh(self) -> None:
        self.refresh_requested.emit()

    def notify_finished(self) -> None:
        self.finished.emit()


class LiveWindow(QMainWindow):
    """Temperature, pressure and humidity stacked over a shared time axis."""

    closed = Signal()

    def __init__(
        self,
        buffer: SampleBuffer,
        config: PollerConfig | None = None,
        *,
        title: str = "Real-time Plotting",
        parent: Optional[QWidget] = None,
    ) -> None:
        super().__init__(parent)
        self.setWindowTitle(title)
        self.resize(900, 800)
        self._buffer = buffer
        self._config = config or PollerConfig()
        self.draw_count = 0

        central = QWidget(self)
        layout = QVBoxLayout(central)
        self._status = QLabel("Waiting for first sample…", central)
        layout.addWidget(self._status)
        self._glw = pg.GraphicsLayoutWidget(central)
        layout.addWidget(self._glw)
        self.setCentralWidget(central)

        self._plots: Dict[str, pg.PlotItem] = {}
        self._lines: Dict[str, pg.PlotDataItem] = {}
        self._build_plots()
        self.draw(buffer.snapshot())

    def _build_plots(self) -> None:
        first: pg.PlotItem | None = None
        for row, quantity in enumerate(QUANTITIES):
            plot = self._glw.addPlot(row=row, col=0)
            plot.setMenuEnabled(False)
            plot.hideButtons()
            plot.showGrid(x=True, y=True, alpha=0.3)
            plot.enableAutoRange(x=False, y=False)
            plot.setLabel("left", quantity.label)
            plot.addLegend(offset=(-10, 10))
            if row == len(QUANTITIES) - 1:
                plot.setLabel("bottom", "Time")
            if first is None:
                first = plot
            else:
                plot.setXLink(first)
            pen = pg.mkPen(color=_PEN_COLORS.get(quantity.color, quantity.color), width=2)
            self._lines[quantity.key] = plot.plot([], [], pen=pen, name=quantity.label)
            self._plots[quantity.key] = plot

    # ---------------------------------------------------------------- drawing
    def draw(self, snapshot: BufferSnapshot) -> None:
        """Redraw all panels from ``snapshot``; must run on the GUI thread."""
        self.draw_count += 1
        ranges = resolve_ranges(snapshot, self._config)
        xmin, xmax = x_window(snapshot)
        times = snapshot.time_indices()
        for quantity in QUANTITIES:
            plot = self._plots[quantity.key]
            self._lines[quantity.key].setData(times, snapshot.series(quantity.key))
            low, high = ranges[quantity.key]
            plot.setYRange(low, high, padding=0.0)
            plot.setXRange(xmin, xmax, padding=0.0)

        if not snapshot.is_empty:
            latest = snapshot.samples[-1]
            self._status.setText(
                f"Samples {len(snapshot)}/{snapshot.capacity}   "
                f"T={latest.temperature:.2f}   P={latest.pressure:.2f}   H={latest.humidity:.2f}"
            )

    @Slot()
    def refresh(self) -> None:
        self.draw(self._buffer.snapshot())

    def closeEvent(self, event: QCloseEvent) -> None:
        self.closed.emit()
        super().closeEvent(event)
