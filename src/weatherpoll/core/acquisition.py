"""
Background acquisition loop: fetch a reading, append it to the buffer,
hint the renderer, wait, repeat until told to stop.
"""

from __future__ import annotations

import enum
import logging
import threading
import time
from typing import Callable, Optional, Protocol

from ..errors import FetchError, ParseError
from .cancellation import CancellationToken
from .models import Reading, Sample
from .sample_buffer import SampleBuffer

logger = logging.getLogger(__name__)

DEFAULT_INTERVAL_S = 5.0

STOP_REQUESTED = "requested"
STOP_DURATION = "duration"
STOP_CANCELLED = "cancelled"
STOP_ERROR = "error"


class SampleSource(Protocol):
    """Returns one reading per call or raises FetchError / ParseError."""

    def fetch(self) -> Reading:  # pragma: no cover - protocol
        ...


class LoopState(enum.Enum):
    IDLE = "idle"
    RUNNING = "running"
    STOPPING = "stopping"
    STOPPED = "stopped"


class AcquisitionLoop:
    """
    Sole writer of a :class:`SampleBuffer`.

    The loop runs on its own daemon thread. It stops when :meth:`stop` is
    called, when ``duration_s`` has elapsed since :meth:`start`, or when
    ``cancel_token`` is cancelled. Waiting between ticks is interruptible, so
    a stop or cancellation is honoured immediately rather than at the next
    interval boundary. A fetch in flight is bounded by the source's own
    timeout.

    ``time_index`` advances only on successful fetches, so the series stays
    dense; failed ticks leave no gap.
    """

    def __init__(
        self,
        source: SampleSource,
        buffer: SampleBuffer,
        *,
        cancel_token: CancellationToken | None = None,
        interval_s: float = DEFAULT_INTERVAL_S,
        duration_s: float | None = None,
        on_refresh: Callable[[], None] | None = None,
        on_finished: Callable[[], None] | None = None,
        thread_name: str | None = None,
    ) -> None:
        if interval_s <= 0:
            raise ValueError("interval_s must be positive")
        if duration_s is not None and duration_s <= 0:
            raise ValueError("duration_s must be positive when given")
        self._source = source
        self._buffer = buffer
        self._token = cancel_token or CancellationToken()
        self._interval_s = float(interval_s)
        self._duration_s = None if duration_s is None else float(duration_s)
        self._on_refresh = on_refresh
        self._on_finished = on_finished
        self._thread_name = thread_name or "WeatherPollAcquisition"

        self._state = LoopState.IDLE
        self._state_lock = threading.Lock()
        self._stop_requested = threading.Event()
        self._wake = threading.Event()
        self._thread: threading.Thread | None = None
        self._deadline: float | None = None
        self._next_index = 0

        self.stop_reason: Optional[str] = None
        self.ticks = 0
        self.failures = 0

    # ------------------------------------------------------------------ state
    @property
    def state(self) -> LoopState:
        with self._state_lock:
            return self._state

    @property
    def buffer(self) -> SampleBuffer:
        return self._buffer

    @property
    def cancel_token(self) -> CancellationToken:
        return self._token

    def is_alive(self) -> bool:
        return self._thread is not None and self._thread.is_alive()

    # ---------------------------------------------------------------- control
    def start(self) -> None:
        with self._state_lock:
            if self._state is not LoopState.IDLE:
                raise RuntimeError(f"Acquisition loop cannot start from state {self._state.value}")
            self._state = LoopState.RUNNING
        if self._duration_s is not None:
            self._deadline = time.monotonic() + self._duration_s
        self._token.register(self._wake.set)
        self._thread = threading.Thread(target=self._run, name=self._thread_name, daemon=True)
        self._thread.start()
        logger.info(
            "Acquisition started (interval %.1f s, duration %s)",
            self._interval_s,
            "unlimited" if self._duration_s is None else f"{self._duration_s:g} s",
        )

    def stop(self, *, join: bool = False, timeout: float | None = None) -> None:
        """Request the loop to stop; optionally wait for the thread to exit."""
        self._stop_requested.set()
        self._wake.set()
        with self._state_lock:
            never_started = self._state is LoopState.IDLE
        if never_started:
            self._finish(STOP_REQUESTED)
            return
        if join:
            self.join(timeout)

    def join(self, timeout: float | None = None) -> bool:
        """Wait for the loop thread; return True once it has fully stopped."""
        if self._thread is not None:
            self._thread.join(timeout)
            if self._thread.is_alive():
                return False
        return self.state is LoopState.STOPPED

    # ------------------------------------------------------------------- loop
    def _run(self) -> None:
        reason: str | None = None
        try:
            while reason is None:
                reason = self._stop_condition()
                if reason is not None:
                    break
                self._tick()
                reason = self._wait_interval()
        except Exception:
            logger.exception("Acquisition loop failed")
            reason = STOP_ERROR
        finally:
            self._finish(reason or STOP_REQUESTED)

    def _tick(self) -> None:
        self.ticks += 1
        try:
            reading = self._source.fetch()
        except (FetchError, ParseError) as exc:
            self.failures += 1
            logger.warning("Tick %d skipped: %s", self.ticks, exc)
            return

        if self._stop_requested.is_set() or self._token.cancelled:
            logger.debug("Discarding reading received after stop request: %r", reading)
            return

        sample = Sample.from_reading(self._next_index, reading)
        self._buffer.append(sample)
        self._next_index += 1
        logger.info(
            "Data updated: Temp=%g, Pressure=%g, Humidity=%g",
            sample.temperature,
            sample.pressure,
            sample.humidity,
        )

        if self._on_refresh is not None:
            try:
                self._on_refresh()
            except Exception:
                logger.exception("Render refresh callback failed")

    def _wait_interval(self) -> str | None:
        timeout = self._interval_s
        capped = False
        if self._deadline is not None:
            remaining = self._deadline - time.monotonic()
            if remaining <= timeout:
                timeout = max(0.0, remaining)
                capped = True
        self._wake.wait(timeout)
        reason = self._stop_condition()
        if reason is None and capped:
            reason = STOP_DURATION
        return reason

    def _stop_condition(self) -> str | None:
        if self._stop_requested.is_set():
            return STOP_REQUESTED
        if self._token.cancelled:
            return STOP_CANCELLED
        if self._deadline is not None and time.monotonic() >= self._deadline:
            return STOP_DURATION
        return None

    def _finish(self, reason: str) -> None:
        with self._state_lock:
            if self._state is LoopState.STOPPED:
                return
            self._state = LoopState.STOPPING
            self.stop_reason = reason
        self._buffer.close()
        with self._state_lock:
            self._state = LoopState.STOPPED
        logger.info(
            "Acquisition stopped (%s): %d ticks, %d samples, %d failures",
            reason,
            self.ticks,
            self._next_index,
            self.failures,
        )
        if self._on_finished is not None:
            try:
                self._on_finished()
            except Exception:
                logger.exception("Acquisition finished callback failed")

    @property
    def samples_recorded(self) -> int:
        return self._next_index
