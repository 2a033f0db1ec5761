"""Renderer capability used by the acquisition loop's refresh hint."""

from __future__ import annotations

import logging
from typing import Protocol, runtime_checkable

from .sample_buffer import BufferSnapshot, SampleBuffer

logger = logging.getLogger(__name__)


@runtime_checkable
class Renderable(Protocol):
    """Anything that can draw a buffer snapshot (Qt window, logger, test double)."""

    def draw(self, snapshot: BufferSnapshot) -> None:  # pragma: no cover - protocol
        ...


class DirectRefresh:
    """
    Refresh hint that snapshots the buffer and draws in the calling thread.

    Only suitable when the renderer is touched from that one thread, e.g. the
    headless mode where the acquisition thread is the only caller.
    """

    def __init__(self, buffer: SampleBuffer, renderer: Renderable) -> None:
        self._buffer = buffer
        self._renderer = renderer

    def __call__(self) -> None:
        self._renderer.draw(self._buffer.snapshot())


class LogRenderer:
    """Text stand-in for the chart when running without a window."""

    def __init__(self) -> None:
        self.draw_count = 0

    def draw(self, snapshot: BufferSnapshot) -> None:
        self.draw_count += 1
        if snapshot.is_empty:
            return
        latest = snapshot.samples[-1]
        logger.debug(
            "[%d/%d] t=%d T=%.2f P=%.2f H=%.2f",
            len(snapshot),
            snapshot.capacity,
            latest.time_index,
            latest.temperature,
            latest.pressure,
            latest.humidity,
        )
