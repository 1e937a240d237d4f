"""Single-threaded event loop that owns all controller state changes.

Worker threads never touch the controller directly: they ``post`` a callback
and the UI thread runs it on its next ``run_pending``. Timers registered with
``call_later`` are checked against an injectable clock so tests can move time
by hand.
"""
from __future__ import annotations
from functools import partial
from typing import Any, Callable, List, Optional, Tuple
import heapq
import itertools
import queue
import threading
import time

from snaptext.logging import get_logger

logger = get_logger(__name__)


class TimerHandle:
    def __init__(self, deadline: float, callback: Callable[[], Any]):
        self.deadline = deadline
        self._callback = callback
        self.cancelled = False

    def cancel(self) -> None:
        self.cancelled = True


class EventLoop:
    def __init__(self, clock: Callable[[], float] = time.monotonic):
        self._clock = clock
        self._queue: "queue.Queue[Callable[[], Any]]" = queue.Queue()
        self._timers: List[Tuple[float, int, TimerHandle]] = []
        self._timers_lock = threading.Lock()
        self._seq = itertools.count()

    def post(self, callback: Callable[..., Any], *args: Any) -> None:
        """Queue a callback for the UI thread. Safe to call from any thread."""
        self._queue.put(partial(callback, *args))

    def call_later(self, delay: float, callback: Callable[..., Any], *args: Any) -> TimerHandle:
        handle = TimerHandle(self._clock() + delay, partial(callback, *args))
        with self._timers_lock:
            heapq.heappush(self._timers, (handle.deadline, next(self._seq), handle))
        return handle

    def pending(self) -> bool:
        with self._timers_lock:
            live_timers = any(not h.cancelled for _, _, h in self._timers)
        return not self._queue.empty() or live_timers

    def run_pending(self) -> int:
        """Run every queued callback, then every due timer. Returns how many ran."""
        ran = 0
        while True:
            try:
                callback = self._queue.get_nowait()
            except queue.Empty:
                break
            self._invoke(callback)
            ran += 1

        for handle in self._pop_due_timers():
            self._invoke(handle._callback)
            ran += 1
        return ran

    def run_until(
        self,
        predicate: Callable[[], bool],
        timeout: Optional[float] = None,
        poll_interval: float = 0.05,
    ) -> bool:
        """
        Block the calling thread, running callbacks as they arrive, until
        predicate() holds. Returns False if timeout (seconds) expires first.
        """
        deadline = None if timeout is None else self._clock() + timeout
        self.run_pending()
        while not predicate():
            if deadline is not None and self._clock() >= deadline:
                return False
            try:
                callback = self._queue.get(timeout=poll_interval)
            except queue.Empty:
                pass
            else:
                self._invoke(callback)
            self.run_pending()
        return True

    # ---------- internal helpers ----------

    def _pop_due_timers(self) -> List[TimerHandle]:
        now = self._clock()
        due: List[TimerHandle] = []
        with self._timers_lock:
            while self._timers and self._timers[0][0] <= now:
                _, _, handle = heapq.heappop(self._timers)
                if not handle.cancelled:
                    due.append(handle)
        return due

    def _invoke(self, callback: Callable[[], Any]) -> None:
        try:
            callback()
        except Exception:
            logger.exception("Unhandled error in UI callback")
