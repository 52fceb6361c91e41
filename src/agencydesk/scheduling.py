"""Thread-based periodic trigger for batch passes.

Drives ``agencydesk approvals watch``: the callback runs on a daemon
thread, first immediately and then every ``interval_seconds``. Ticks never
overlap within one scheduler; separate processes are not coordinated.

Example:
    >>> scheduler = ThreadScheduler()
    >>> scheduler.start(run_pass, interval_seconds=300)
    >>> # ... later ...
    >>> scheduler.stop()
"""

from __future__ import annotations

import threading
from collections.abc import Callable
from datetime import UTC, datetime
from typing import Any

from agencydesk.core.logging import get_logger

logger = get_logger(__name__)

TickCallback = Callable[[], Any]


class ThreadScheduler:
    """Run a callback on a fixed interval in a daemon thread."""

    name = "thread"

    def __init__(self) -> None:
        self._stop_event = threading.Event()
        self._thread: threading.Thread | None = None
        self._tick_count = 0
        self._failed_ticks = 0
        self._last_tick: datetime | None = None
        self._interval: float = 300.0
        self._started = False
        self._lock = threading.Lock()

    def start(
        self,
        tick_callback: TickCallback,
        interval_seconds: float = 300.0,
        *,
        max_ticks: int | None = None,
    ) -> None:
        """Start the loop.

        Args:
            tick_callback: Called once per tick; exceptions are logged, not raised.
            interval_seconds: Delay between the end of one tick and the next.
            max_ticks: Stop after this many ticks (``None`` runs until :meth:`stop`).
        """
        if self._started:
            logger.warning("scheduler.already_started")
            return

        self._interval = interval_seconds
        self._stop_event.clear()

        def _loop() -> None:
            logger.info("scheduler.started", interval_s=interval_seconds)
            while not self._stop_event.is_set():
                with self._lock:
                    self._tick_count += 1
                    self._last_tick = datetime.now(UTC)
                    tick = self._tick_count

                try:
                    tick_callback()
                except Exception:
                    self._failed_ticks += 1
                    logger.exception("scheduler.tick_failed", tick=tick)

                if max_ticks is not None and tick >= max_ticks:
                    break
                self._stop_event.wait(interval_seconds)
            logger.info("scheduler.stopped", ticks=self._tick_count)

        self._thread = threading.Thread(target=_loop, daemon=True, name="agencydesk-scheduler")
        self._thread.start()
        self._started = True

    def wait(self, timeout: float | None = None) -> None:
        """Block until the loop exits (``max_ticks`` reached or :meth:`stop`)."""
        if self._thread is not None:
            self._thread.join(timeout)

    def stop(self) -> None:
        """Stop the loop, waiting up to 5 seconds for the current tick."""
        if not self._started:
            return

        self._stop_event.set()
        if self._thread:
            self._thread.join(timeout=5.0)
            if self._thread.is_alive():
                logger.warning("scheduler.stop_timeout")

        self._started = False

    def health(self) -> dict[str, Any]:
        return {
            "healthy": self.is_running,
            "backend": self.name,
            "tick_count": self._tick_count,
            "failed_ticks": self._failed_ticks,
            "last_tick": self._last_tick.isoformat() if self._last_tick else None,
            "interval_seconds": self._interval,
        }

    @property
    def is_running(self) -> bool:
        return self._started and self._thread is not None and self._thread.is_alive()

    @property
    def tick_count(self) -> int:
        return self._tick_count
