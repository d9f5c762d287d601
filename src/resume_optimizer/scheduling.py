"""Timer scheduling: fire-and-forget callbacks and debounced writes."""

from __future__ import annotations

import logging
import threading
from typing import Any, Callable, Protocol

logger = logging.getLogger(__name__)


class Cancellable(Protocol):
    def cancel(self) -> None: ...


class Scheduler(Protocol):
    def call_later(self, delay: float, callback: Callable[[], None]) -> Cancellable: ...


class ThreadingScheduler:
    """Runs callbacks on daemon timer threads."""

    def call_later(self, delay: float, callback: Callable[[], None]) -> threading.Timer:
        timer = threading.Timer(delay, callback)
        timer.daemon = True
        timer.start()
        return timer


class DebouncedWriter:
    """Coalesce rapid submits into a single write after a quiet period.

    Each submit supersedes the pending one. Writes are serialized, and a
    timer that fires after a newer submit drops its stale payload.
    """

    def __init__(
        self,
        write: Callable[[Any], None],
        delay: float,
        scheduler: Scheduler | None = None,
    ):
        self._write = write
        self.delay = delay
        self._scheduler = scheduler or ThreadingScheduler()
        self._lock = threading.Lock()
        self._write_lock = threading.Lock()
        self._generation = 0
        self._pending: Any = None
        self._has_pending = False
        self._handle: Cancellable | None = None

    @property
    def pending(self) -> bool:
        return self._has_pending

    def submit(self, payload: Any) -> None:
        with self._lock:
            self._generation += 1
            generation = self._generation
            self._pending = payload
            self._has_pending = True
            if self._handle is not None:
                self._handle.cancel()
            self._handle = self._scheduler.call_later(
                self.delay, lambda: self._fire(generation)
            )

    def flush(self) -> None:
        """Write the pending payload now, if any."""
        with self._lock:
            if self._handle is not None:
                self._handle.cancel()
                self._handle = None
            generation = self._generation
        self._fire(generation)

    def cancel(self, then: Callable[[], None] | None = None) -> None:
        """Drop the pending payload without writing it.

        Waits for a write already in progress. ``then`` runs while later
        writes are held off.
        """
        with self._write_lock:
            with self._lock:
                self._generation += 1
                self._pending = None
                self._has_pending = False
                if self._handle is not None:
                    self._handle.cancel()
                    self._handle = None
            if then is not None:
                then()

    def _fire(self, generation: int) -> None:
        with self._write_lock:
            with self._lock:
                if generation != self._generation or not self._has_pending:
                    return
                payload = self._pending
                self._pending = None
                self._has_pending = False
                self._handle = None
            try:
                self._write(payload)
            except Exception:
                logger.exception("Debounced write failed")
