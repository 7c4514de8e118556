import threading
import time
from abc import ABC, abstractmethod


class Clock(ABC):

    @abstractmethod
    def now(self) -> int:
        """Current time in microseconds since the epoch."""


class SystemClock(Clock):
    """Wall clock that never goes backwards, even if the system time does."""

    def __init__(self):
        self._lock = threading.Lock()
        self._last = 0

    def now(self) -> int:
        current = time.time_ns() // 1000
        with self._lock:
            self._last = max(self._last, current)
            return self._last
