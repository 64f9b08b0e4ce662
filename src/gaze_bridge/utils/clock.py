import time
from typing import Callable

class Stopwatch:
    """
    Pausable elapsed-time measurement.

    `start()` opens a new segment, `stop()` closes it. The segment length is
    available as `elapsed`; `total_elapsed` sums every segment since the
    stopwatch was created.
    """
    __slots__ = ("_clock", "_segment_start", "_segment", "_total")

    def __init__(self, clock: Callable[[], float] = time.monotonic):
        self._clock = clock
        self._segment_start: float | None = None
        self._segment: float = 0.0
        self._total: float = 0.0

    @property
    def is_running(self) -> bool:
        return self._segment_start is not None

    def start(self) -> None:
        if self.is_running:
            return
        self._segment = 0.0
        self._segment_start = self._clock()

    def stop(self) -> float:
        if self._segment_start is None:
            return self._segment
        self._segment = self._clock() - self._segment_start
        self._total += self._segment
        self._segment_start = None
        return self._segment

    @property
    def elapsed(self) -> float:
        if self._segment_start is not None:
            return self._clock() - self._segment_start
        return self._segment

    @property
    def total_elapsed(self) -> float:
        if self._segment_start is not None:
            return self._total + (self._clock() - self._segment_start)
        return self._total
