"""Qt application wiring for the live window.

The acquisition loop is built by the caller through ``build_loop`` so that it
receives the bridge callbacks before it starts. Closing the window stops the
loop; the loop finishing (duration elapsed, ``q`` entered) closes the window.
"""

from __future__ import annotations

import logging
import sys
from typing import Callable

import pyqtgraph as pg
from PySide6.QtCore import QLoggingCategory
from PySide6.QtWidgets import QApplication

from ..config.runtime import PollerConfig
from ..core.acquisition import AcquisitionLoop
from ..core.sample_buffer import SampleBuffer
from .live_window import LiveWindow, RefreshBridge

logger = logging.getLogger(__name__)

LoopFactory = Callable[[Callable[[], None], Callable[[], None]], AcquisitionLoop]

_PG_CONFIGURED = False


def configure_pyqtgraph() -> None:
    """Apply global pyqtgraph options once, before any widgets exist."""
    global _PG_CONFIGURED
    if _PG_CONFIGURED:
        return
    pg.setConfigOptions(antialias=True, background="w", foreground="k")
    _PG_CONFIGURED = True


def create_app(argv: list[str] | None = None) -> QApplication:
    qt_args = argv if argv is not None else sys.argv[:1]
    configure_pyqtgraph()
    app = QApplication.instance() or QApplication(qt_args)
    QLoggingCategory.setFilterRules("qt.core.qobject.connect=false")
    return app


def run_live_window(
    buffer: SampleBuffer,
    build_loop: LoopFactory,
    config: PollerConfig | None = None,
    *,
    title: str = "Real-time Plotting",
    argv: list[str] | None = None,
) -> AcquisitionLoop:
    """
    Show the live window, run acquisition until either side stops, and
    return the loop (already asked to stop; the caller joins it).
    """
    app = create_app(argv)
    bridge = RefreshBridge()
    window = LiveWindow(buffer, config, title=title)

    loop = build_loop(bridge.request_refresh, bridge.notify_finished)

    bridge.refresh_requested.connect(window.refresh)
    bridge.finished.connect(window.close)
    window.closed.connect(loop.stop)

    window.show()
    loop.start()
    exit_code = app.exec()
    logger.debug("Qt event loop exited with code %s", exit_code)
    loop.stop()
    return loop
