"""Acquisition core: samples, the bounded buffer and the polling loop.

Nothing in this package depends on Qt, matplotlib or HTTP. The loop talks to
its sample source and renderer through small protocols so the GUI, the
headless runner and the tests can plug in their own implementations.
"""

from .acquisition import AcquisitionLoop, LoopState, SampleSource
from .cancellation import CancellationToken
from .models import QUANTITIES, Quantity, Reading, RunSession, Sample
from .rendering import DirectRefresh, LogRenderer, Renderable
from .sample_buffer import BufferSnapshot, SampleBuffer

__all__ = [
    "AcquisitionLoop",
    "LoopState",
    "SampleSource",
    "CancellationToken",
    "QUANTITIES",
    "Quantity",
    "Reading",
    "RunSession",
    "Sample",
    "DirectRefresh",
    "LogRenderer",
    "Renderable",
    "BufferSnapshot",
    "SampleBuffer",
]
