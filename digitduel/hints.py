"""
Runs hint lookups in the background and keeps only the newest answer.

Every request gets a token. When the answer comes back we compare its token
with the current one: if another request (or a change to the history) came in
meanwhile, the answer is stale and gets dropped.
"""

import logging
from concurrent.futures import Executor, Future
from threading import RLock
from typing import Callable, Optional, Tuple

from .hint_client import FALLBACK_MESSAGE, Hint, suggest_next
from .types import History

logger = logging.getLogger(__name__)

Advisor = Callable[[History, int], Hint]


class HintTracker:
    def __init__(self, executor: Executor, advisor: Optional[Advisor] = None) -> None:
        self._executor = executor
        self._advisor = advisor or suggest_next
        self._lock = RLock()
        self._token = 0
        self._pending: Optional[Future] = None
        self._latest: Optional[Hint] = None

    def request(self, history: History, secret_length: int) -> int:
        # Snapshot the history so later moves cannot change what was asked
        snapshot = list(history)
        with self._lock:
            self._supersede()
            token = self._token
            future = self._executor.submit(self._advisor, snapshot, secret_length)
            self._pending = future
        future.add_done_callback(lambda done: self._deliver(token, done))
        return token

    def invalidate(self) -> None:
        """Forget pending and delivered hints; the history they were based on changed."""
        with self._lock:
            self._supersede()

    def _supersede(self) -> None:
        self._token += 1
        self._latest = None
        if self._pending is not None:
            self._pending.cancel()
            self._pending = None

    def _deliver(self, token: int, future: Future) -> None:
        if future.cancelled():
            return
        try:
            hint = future.result()
        except Exception:
            logger.exception("Hint advisor raised")
            hint = Hint(ok=False, message=FALLBACK_MESSAGE)

        with self._lock:
            if token != self._token:
                logger.debug("Dropping stale hint for token %d (current %d)", token, self._token)
                return
            self._latest = hint
            self._pending = None

    def status(self) -> Tuple[int, str, Optional[Hint]]:
        """
        Returns (token, status, hint) where status is one of:
          "idle"    -> nothing requested since the last change
          "pending" -> waiting for the service
          "ready"   -> hint holds the answer
        """
        with self._lock:
            if self._latest is not None:
                return (self._token, "ready", self._latest)
            if self._pending is not None:
                return (self._token, "pending", None)
            return (self._token, "idle", None)
