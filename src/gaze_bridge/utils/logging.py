import time
import logging

class ThrottledLogger:
    """
    Collapses high-rate repeated messages into one line per interval.
    The emitted line carries the number of occurrences since the last one.
    """
    def __init__(self, logger: logging.Logger, interval_sec: float = 5.0) -> None:
        self._logger = logger
        self._interval = interval_sec
        self._last_log_time: float | None = None
        self._counter = 0

    def _emit(self, level: int, message: str, *args, **kwargs) -> None:
        self._counter += 1
        now = time.monotonic()

        if self._last_log_time is None or now - self._last_log_time >= self._interval:
            self._logger.log(level, "[%d] " + message, self._counter, *args, **kwargs)
            self._last_log_time = now
            self._counter = 0

    def info(self, message: str, *args, **kwargs):
        self._emit(logging.INFO, message, *args, **kwargs)

    def warning(self, message: str, *args, **kwargs):
        self._emit(logging.WARNING, message, *args, **kwargs)
