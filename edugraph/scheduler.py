"""Tick sources that drive the epidemic engine.

The engine itself never schedules anything; a tick source calls back into it.
"""

import threading
from typing import Callable, Optional, Protocol
from loguru import logger

from edugraph.errors import InvalidParameterError


TickCallback = Callable[[], None]


class TickSource(Protocol):
    """Periodic trigger that invokes a callback once per tick."""

    @property
    def running(self) -> bool: ...

    def start(self, callback: TickCallback) -> None: ...

    def stop(self) -> None: ...


class ManualTickSource:
    """Tick source driven synchronously by the caller via `tick()`."""

    def __init__(self):
        self._callback: Optional[TickCallback] = None
        self._running = False
        self.ticks = 0

    @property
    def running(self) -> bool:
        return self._running

    def start(self, callback: TickCallback) -> None:
        self._callback = callback
        self._running = True

    def stop(self) -> None:
        self._running = False

    def tick(self) -> bool:
        """Fire one tick. Returns False if the source is stopped."""
        if not self._running or self._callback is None:
            return False
        self.ticks += 1
        self._callback()
        return True


class IntervalTickSource:
    """Background thread firing the callback at a fixed interval."""

    def __init__(self, interval_ms: int = 300):
        if interval_ms <= 0:
            raise InvalidParameterError(f"interval_ms must be positive, got {interval_ms}")
        self.interval = interval_ms / 1000.0
        self._stop_event = threading.Event()
        self._thread: Optional[threading.Thread] = None

    @property
    def running(self) -> bool:
        return self._thread is not None and self._thread.is_alive() and not self._stop_event.is_set()

    def start(self, callback: TickCallback) -> None:
        if self.running:
            return
        self._stop_event = threading.Event()
        self._thread = threading.Thread(
            target=self._loop, args=(callback, self._stop_event), daemon=True, name="edugraph-ticks"
        )
        self._thread.start()
        logger.debug(f"Interval tick source started: every {self.interval:.3f}s")

    def stop(self) -> None:
        thread = self._thread
        self._stop_event.set()
        # Stopping from inside the callback must not join the current thread
        if thread is not None and thread is not threading.current_thread():
            thread.join()
        logger.debug("Interval tick source stopped")

    def _loop(self, callback: TickCallback, stop_event: threading.Event) -> None:
        while not stop_event.wait(self.interval):
            callback()
