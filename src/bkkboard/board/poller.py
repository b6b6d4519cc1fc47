"""Background refresh loop for departure boards."""

import logging
import threading
from collections import OrderedDict

from ..core.threading import StoppableThread
from .board import DepartureBoard

logger = logging.getLogger(__name__)


class BoardPoller:
    """Refreshes registered boards every ``interval`` seconds.

    Failures are logged and counted; the next tick simply tries again.

    Boards added on demand (from web requests) are kept in least recently
    used order and the oldest is dropped once there are ``max_boards`` of
    them. Pinned boards are never dropped and do not count.

    Usage:
        poller = BoardPoller(interval=5.0)
        poller.add_board(board)
        poller.start()
        ...
        poller.stop()
    """

    MAX_CONSECUTIVE_ERRORS = 3

    def __init__(self, interval: float = 5.0, max_boards: int = 20) -> None:
        if max_boards < 1:
            raise ValueError("max_boards must be >= 1")
        self._interval = interval
        self._max_boards = max_boards
        self._boards: OrderedDict[str, DepartureBoard] = OrderedDict()
        self._pinned: set[str] = set()
        self._errors: dict[str, int] = {}
        self._lock = threading.RLock()
        self._thread: StoppableThread | None = None

    @property
    def is_running(self) -> bool:
        return self._thread is not None and self._thread.is_alive()

    @property
    def interval(self) -> float:
        return self._interval

    @property
    def max_boards(self) -> int:
        return self._max_boards

    def add_board(self, board: DepartureBoard, pinned: bool = False) -> DepartureBoard:
        """Register a board; an existing board for the same stop is kept."""
        with self._lock:
            existing = self._boards.get(board.stop_id)
            if existing is None:
                self._boards[board.stop_id] = existing = board
                logger.info("Polling stop %s every %.1fs", board.stop_id, self._interval)
            self._boards.move_to_end(board.stop_id)
            if pinned:
                self._pinned.add(board.stop_id)
            self._evict()
            return existing

    def get_board(self, stop_id: str) -> DepartureBoard | None:
        """Look up a board and mark it as recently used."""
        with self._lock:
            board = self._boards.get(stop_id)
            if board is not None:
                self._boards.move_to_end(stop_id)
            return board

    def _evict(self) -> None:
        unpinned = [stop_id for stop_id in self._boards if stop_id not in self._pinned]
        for stop_id in unpinned[: max(0, len(unpinned) - self._max_boards)]:
            del self._boards[stop_id]
            self._errors.pop(stop_id, None)
            logger.info("Stopped polling %s", stop_id)

    def boards(self) -> list[DepartureBoard]:
        with self._lock:
            return list(self._boards.values())

    def error_count(self, stop_id: str) -> int:
        with self._lock:
            return self._errors.get(stop_id, 0)

    def start(self) -> None:
        if self.is_running:
            logger.warning("Poller already running")
            return
        self._thread = StoppableThread(self._poll_loop, name="BoardPoller")
        self._thread.start()

    def stop(self) -> None:
        if self._thread is not None:
            self._thread.stop(timeout=self._interval + 2.0)
            self._thread = None

    def poll_once(self) -> None:
        """Refresh every registered board once."""
        for board in self.boards():
            try:
                board.update_data()
                if board.last_error:
                    self._record_error(board.stop_id, board.last_error)
                else:
                    with self._lock:
                        self._errors[board.stop_id] = 0
            except Exception as e:
                logger.exception("Unexpected error refreshing %s", board.stop_id)
                self._record_error(board.stop_id, str(e))

    def _record_error(self, stop_id: str, message: str) -> None:
        with self._lock:
            count = self._errors.get(stop_id, 0) + 1
            self._errors[stop_id] = count
        if count == self.MAX_CONSECUTIVE_ERRORS:
            logger.error("Stop %s failed %d times in a row: %s", stop_id, count, message)

    def _poll_loop(self, thread: StoppableThread) -> None:
        logger.debug("Poll loop started")
        while not thread.should_stop():
            self.poll_once()
            thread.wait(self._interval)
        logger.debug("Poll loop stopped")
