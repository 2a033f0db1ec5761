"""Bounded, thread-safe buffer of the most recent samples of a run."""

from __future__ import annotations

import threading
from collections.abc import Iterator
from dataclasses import dataclass
from typing import Optional

import numpy as np

from ..errors import BufferClosedError
from .models import Sample

DEFAULT_CAPACITY = 300
DEFAULT_PRESSURE_HALF_SPAN = 50.0

CSV_HEADERS = ("Time", "Temperature", "Pressure", "Humidity")

_SERIES_KEYS = ("temperature", "pressure", "humidity")


@dataclass(frozen=True)
class BufferSnapshot:
    """
    Immutable copy of the buffer taken under its lock.

    Renderers and exporters only ever see snapshots, never the live buffer.
    """

    samples: tuple[Sample, ...]
    capacity: int
    pressure_range: Optional[tuple[float, float]] = None

    def __len__(self) -> int:
        return len(self.samples)

    def __iter__(self) -> Iterator[Sample]:
        return iter(self.samples)

    @property
    def is_empty(self) -> bool:
        return not self.samples

    @property
    def first_index(self) -> int | None:
        return self.samples[0].time_index if self.samples else None

    @property
    def last_index(self) -> int | None:
        return self.samples[-1].time_index if self.samples else None

    def time_indices(self) -> np.ndarray:
        return np.fromiter(
            (s.time_index for s in self.samples), dtype=np.int64, count=len(self.samples)
        )

    def series(self, key: str) -> np.ndarray:
        """Return the values of ``key`` (temperature/pressure/humidity) as float64."""
        if key not in _SERIES_KEYS:
            raise KeyError(f"Unknown series {key!r}")
        return np.fromiter(
            (getattr(s, key) for s in self.samples), dtype=np.float64, count=len(self.samples)
        )

    def rows(self) -> Iterator[tuple[int, float, float, float]]:
        for sample in self.samples:
            yield sample.as_row()


class SampleBuffer:
    """
    Fixed-capacity FIFO of :class:`Sample` objects.

    One acquisition thread appends while the GUI thread and the exporter take
    snapshots. Every access goes through a single lock so a reader never sees
    the buffer mid-eviction. The pressure display range is derived from the
    first sample of the run and stored under the same lock.
    """

    def __init__(
        self,
        capacity: int = DEFAULT_CAPACITY,
        *,
        pressure_half_span: float = DEFAULT_PRESSURE_HALF_SPAN,
    ) -> None:
        if capacity <= 0:
            raise ValueError("capacity must be positive")
        self._capacity = int(capacity)
        self._pressure_half_span = float(pressure_half_span)
        self._data: list[Sample | None] = [None] * self._capacity
        self._start = 0
        self._size = 0
        self._pressure_range: tuple[float, float] | None = None
        self._closed = False
        self._lock = threading.Lock()

    @property
    def capacity(self) -> int:
        return self._capacity

    @property
    def closed(self) -> bool:
        with self._lock:
            return self._closed

    def append(self, sample: Sample) -> None:
        """Add ``sample`` at the end, evicting the oldest entry when full."""
        with self._lock:
            if self._closed:
                raise BufferClosedError("sample buffer is closed")
            if self._size:
                newest = self._data[(self._start + self._size - 1) % self._capacity]
                assert newest is not None
                if sample.time_index <= newest.time_index:
                    raise ValueError(
                        f"time_index must increase: {sample.time_index} after {newest.time_index}"
                    )
            idx = (self._start + self._size) % self._capacity
            self._data[idx] = sample
            if self._size < self._capacity:
                self._size += 1
            else:
                self._start = (self._start + 1) % self._capacity

            if self._pressure_range is None:
                half = self._pressure_half_span
                self._pressure_range = (sample.pressure - half, sample.pressure + half)

    def snapshot(self) -> BufferSnapshot:
        """Return a consistent, immutable copy of the current contents."""
        with self._lock:
            samples = tuple(self._iter_unlocked())
            return BufferSnapshot(
                samples=samples,
                capacity=self._capacity,
                pressure_range=self._pressure_range,
            )

    def latest(self) -> Sample | None:
        with self._lock:
            if self._size == 0:
                return None
            return self._data[(self._start + self._size - 1) % self._capacity]

    def close(self) -> None:
        """Refuse any further appends; snapshots keep working."""
        with self._lock:
            self._closed = True

    def __len__(self) -> int:
        with self._lock:
            return self._size

    def _iter_unlocked(self) -> Iterator[Sample]:
        for i in range(self._size):
            item = self._data[(self._start + i) % self._capacity]
            assert item is not None
            yield item
