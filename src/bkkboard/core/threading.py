"""Thread-safe primitives shared by the poller and the web layer."""

import logging
import threading
from typing import Any, Callable, Generic, TypeVar

logger = logging.getLogger(__name__)

T = TypeVar("T")


class LockedValue(Generic[T]):
    """A single value guarded by a lock.

    Usage:
        departures = LockedValue([])
        departures.set(fresh)
        current = departures.get()
    """

    def __init__(self, value: T) -> None:
        self._value = value
        self._lock = threading.RLock()

    def get(self) -> T:
        with self._lock:
            return self._value

    def set(self, value: T) -> None:
        with self._lock:
            self._value = value

    def __repr__(self) -> str:
        return f"LockedValue({self.get()!r})"


class StoppableThread(threading.Thread):
    """Daemon thread whose target receives the thread and polls for stop.

    Usage:
        def worker(thread: StoppableThread) -> None:
            while not thread.should_stop():
                ...
                thread.wait(5.0)

        thread = StoppableThread(worker, name="Poller")
        thread.start()
        thread.stop()
    """

    def __init__(
        self,
        target: Callable[..., Any],
        name: str | None = None,
        args: tuple[Any, ...] = (),
        daemon: bool = True,
    ) -> None:
        super().__init__(name=name, daemon=daemon)
        self._work = target
        self._work_args = args
        self._stop_event = threading.Event()

    def run(self) -> None:
        self._work(self, *self._work_args)

    def stop(self, timeout: float = 5.0) -> bool:
        """Request stop and wait for the thread to finish.

        Returns:
            True if the thread has exited
        """
        logger.debug("Stopping thread: %s", self.name)
        self._stop_event.set()
        if self.is_alive() and threading.current_thread() is not self:
            self.join(timeout=timeout)
        if self.is_alive():
            logger.warning("Thread %s did not stop within %.1fs", self.name, timeout)
            return False
        return True

    def should_stop(self) -> bool:
        return self._stop_event.is_set()

    def wait(self, timeout: float) -> bool:
        """Sleep up to ``timeout`` seconds; returns True early if stopped."""
        return self._stop_event.wait(timeout)
