"""Main-context event queue.

Background threads (stream readers, process watchers) never touch the
progress display or the notification sink directly. They schedule work
here, and the owning thread runs it in FIFO order.
"""

import queue
import threading
import time
from typing import Callable


class MainContext:
    def __init__(self):
        self._queue: queue.Queue = queue.Queue()
        self._owner = threading.get_ident()

    def schedule(self, fn: Callable, *args) -> None:
        """Queue fn(*args) for the main context. Safe to call from any thread."""
        self._queue.put((fn, args))

    def _check_owner(self) -> None:
        if threading.get_ident() != self._owner:
            raise RuntimeError("MainContext drained from a thread that does not own it")

    def run_pending(self) -> int:
        """Run everything queued so far without blocking. Returns the number of calls run."""
        self._check_owner()
        count = 0
        while True:
            try:
                fn, args = self._queue.get_nowait()
            except queue.Empty:
                return count
            fn(*args)
            count += 1

    def run_until(
        self, done: Callable[[], bool], timeout: float | None = None, poll: float = 0.1
    ) -> bool:
        """Run queued calls until done() is true. Returns False if timeout expires first."""
        self._check_owner()
        deadline = None if timeout is None else time.monotonic() + timeout
        while not done():
            wait = poll
            if deadline is not None:
                remaining = deadline - time.monotonic()
                if remaining <= 0:
                    return False
                wait = min(poll, remaining)
            try:
                fn, args = self._queue.get(timeout=wait)
            except queue.Empty:
                continue
            fn(*args)
        return True
