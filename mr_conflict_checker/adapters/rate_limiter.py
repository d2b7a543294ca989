"""Fixed-interval request gate owned by a client."""

import threading
import time

from mr_conflict_checker.adapters.base import GitPlatformError, OperationCancelled

DEFAULT_INTERVAL = 0.1
# Upper bound on how long a cancellable wait goes without checking close()
CLOSE_POLL = 0.01


class RateLimiter:
    """Lets one request through per interval (10/s at the default 100 ms).

    Ticks are aligned to the construction time, like a periodic timer: a
    caller arriving between ticks waits for the next one. Waiting observes an
    optional cancellation event and raises OperationCancelled once it fires.
    """

    def __init__(self, interval: float = DEFAULT_INTERVAL) -> None:
        if interval <= 0:
            raise ValueError("interval must be positive")
        self._interval = interval
        self._start = time.monotonic()
        self._last_tick = 0
        self._lock = threading.Lock()
        self._closed = threading.Event()

    @property
    def interval(self) -> float:
        return self._interval

    @property
    def closed(self) -> bool:
        return self._closed.is_set()

    def _next_tick(self) -> float:
        """Reserve the next free tick and return its monotonic time."""
        elapsed = time.monotonic() - self._start
        tick = max(int(elapsed // self._interval) + 1, self._last_tick + 1)
        self._last_tick = tick
        return self._start + tick * self._interval

    def wait(self, cancel_event: threading.Event | None = None) -> None:
        """Block until the next tick.

        Raises:
            OperationCancelled: If cancel_event is set before the tick
            GitPlatformError: If the limiter was closed
        """
        if self.closed:
            raise GitPlatformError("rate limiter is closed")
        if cancel_event is not None and cancel_event.is_set():
            raise OperationCancelled()
        with self._lock:
            deadline = self._next_tick()
        while True:
            remaining = deadline - time.monotonic()
            if remaining <= 0:
                return
            if cancel_event is not None:
                if cancel_event.wait(min(remaining, CLOSE_POLL)):
                    raise OperationCancelled()
                if self.closed:
                    raise GitPlatformError("rate limiter is closed")
            elif self._closed.wait(remaining):
                raise GitPlatformError("rate limiter is closed")

    def close(self) -> None:
        """Stop the limiter; later waits fail."""
        self._closed.set()
