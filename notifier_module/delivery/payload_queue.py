"""
Payload queue with periodic, rate-limited delivery

Built payloads are queued and handed to the transport by a drain task
that runs on a fixed interval.
"""

from __future__ import annotations

import logging
import threading
import time
from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Any, Callable, Dict, List, Optional

from notifier_module.core.errors import RateLimitError
from notifier_module.delivery.rate_limiter import RateLimiter
from notifier_module.delivery.transport import Transport

logger = logging.getLogger(__name__)


def _noop_callback(err=None, response=None) -> None:
    pass


@dataclass
class QueueEntry:
    """A payload waiting for the next drain."""

    payload: Dict[str, Any]
    endpoint_url: str
    callback: Optional[Callable[..., None]] = None


@dataclass
class DeliveryStats:
    """
    Statistics for delivery monitoring.

    Tracks queued, dispatched, rate-limited and failed items.
    """

    entries_enqueued: int = 0
    entries_dispatched: int = 0
    entries_rate_limited: int = 0
    entries_failed: int = 0
    drains: int = 0
    total_drain_time_ms: float = 0.0
    last_drain_time: Optional[datetime] = None
    max_queue_size_reached: int = 0

    def record_enqueue(self, queue_size: int) -> None:
        self.entries_enqueued += 1
        if queue_size > self.max_queue_size_reached:
            self.max_queue_size_reached = queue_size

    def record_drain(self, drain_time_ms: float) -> None:
        self.drains += 1
        self.total_drain_time_ms += drain_time_ms
        self.last_drain_time = datetime.now()

    def to_dict(self) -> dict:
        """Convert stats to dictionary for serialization."""
        return {
            "entries_enqueued": self.entries_enqueued,
            "entries_dispatched": self.entries_dispatched,
            "entries_rate_limited": self.entries_rate_limited,
            "entries_failed": self.entries_failed,
            "drains": self.drains,
            "total_drain_time_ms": self.total_drain_time_ms,
            "average_drain_time_ms": (
                self.total_drain_time_ms / self.drains
                if self.drains > 0
                else 0.0
            ),
            "last_drain_time": (
                self.last_drain_time.isoformat()
                if self.last_drain_time
                else None
            ),
            "max_queue_size_reached": self.max_queue_size_reached,
        }


class PayloadQueue:
    """
    Unbounded payload queue drained on a timer.

    Every drain dispatches the entries present when it starts, oldest
    first. The next drain is armed only after the current one returns,
    so drains never overlap. Each entry gets exactly one delivery
    attempt; its callback receives a ``RateLimitError`` when the
    per-minute cap is reached, or the transport's error or response.

    Thread Safety:
        This class is thread-safe. The entry list is guarded by a lock;
        callbacks and transport calls run outside it.

    Example:
        queue = PayloadQueue(HTTPTransport(), RateLimiter(GlobalOptions()))
        queue.start()
        queue.enqueue(QueueEntry(payload, "https://api.rollbar.com/api/1/item/"))
    """

    def __init__(
        self,
        transport: Transport,
        rate_limiter: RateLimiter,
        flush_interval: Optional[timedelta] = None,
    ):
        """
        Initialize payload queue.

        Args:
            transport: Transport receiving dispatched payloads
            rate_limiter: Per-minute send cap
            flush_interval: Drain interval (default: 1 second)
        """
        self.transport = transport
        self.rate_limiter = rate_limiter
        self.flush_interval = flush_interval or timedelta(seconds=1)

        self._entries: List[QueueEntry] = []
        self._lock = threading.Lock()
        self._drain_lock = threading.Lock()
        self._timer_lock = threading.Lock()
        self._timer: Optional[threading.Timer] = None
        self._running = False
        self._stats = DeliveryStats()

    def enqueue(self, entry: QueueEntry) -> None:
        """Add an entry for the next drain."""
        with self._lock:
            self._entries.append(entry)
            self._stats.record_enqueue(len(self._entries))

    def drain(self) -> int:
        """
        Dispatch every entry queued before this call.

        Entries enqueued while the drain runs wait for the next one.

        Returns:
            Number of entries processed
        """
        with self._drain_lock:
            with self._lock:
                batch = self._entries
                self._entries = []

            start_time = time.perf_counter()
            for entry in batch:
                self._process_entry(entry)

            with self._lock:
                self._stats.record_drain((time.perf_counter() - start_time) * 1000)

        if batch:
            logger.debug("Drained %d queued item(s)", len(batch))
        return len(batch)

    def _process_entry(self, entry: QueueEntry) -> None:
        """Apply the rate limit and hand one entry to the transport."""
        callback = entry.callback or _noop_callback

        if not self.rate_limiter.acquire():
            with self._lock:
                self._stats.entries_rate_limited += 1
            self._invoke(callback, RateLimitError(self.rate_limiter.items_per_min))
            return

        with self._lock:
            self._stats.entries_dispatched += 1

        def on_complete(err=None, response=None):
            if err is not None:
                with self._lock:
                    self._stats.entries_failed += 1
                self._invoke(callback, err)
            else:
                self._invoke(callback, None, response)

        try:
            self.transport.post(entry.endpoint_url, entry.payload, on_complete)
        except Exception as e:
            on_complete(e)

    @staticmethod
    def _invoke(callback: Callable[..., None], *args) -> None:
        try:
            callback(*args)
        except Exception:
            logger.exception("Item callback raised")

    def start(self) -> None:
        """Arm the periodic drain."""
        with self._timer_lock:
            if self._running:
                return
            self._running = True
        logger.info(
            "Payload queue started (interval=%.3fs)",
            self.flush_interval.total_seconds(),
        )
        self._schedule_drain()

    def _schedule_drain(self) -> None:
        """Schedule the next periodic drain."""
        with self._timer_lock:
            if not self._running:
                return

            self._timer = threading.Timer(
                self.flush_interval.total_seconds(),
                self._periodic_drain,
            )
            self._timer.daemon = True
            self._timer.start()

    def _periodic_drain(self) -> None:
        """Called by the timer; re-arms after the drain completes."""
        if not self._running:
            return

        try:
            self.drain()
        except Exception:
            logger.exception("Payload drain failed")

        self._schedule_drain()

    def stop(self) -> None:
        """
        Cancel the pending drain.

        A drain already in progress runs to completion. Queued entries
        stay queued.
        """
        with self._timer_lock:
            if not self._running:
                return
            self._running = False
            if self._timer:
                self._timer.cancel()
                self._timer = None
        logger.info("Payload queue stopped")

    def is_running(self) -> bool:
        with self._timer_lock:
            return self._running

    def get_stats(self) -> DeliveryStats:
        """
        Get delivery statistics.

        Returns:
            Copy of current delivery statistics
        """
        with self._lock:
            return DeliveryStats(
                entries_enqueued=self._stats.entries_enqueued,
                entries_dispatched=self._stats.entries_dispatched,
                entries_rate_limited=self._stats.entries_rate_limited,
                entries_failed=self._stats.entries_failed,
                drains=self._stats.drains,
                total_drain_time_ms=self._stats.total_drain_time_ms,
                last_drain_time=self._stats.last_drain_time,
                max_queue_size_reached=self._stats.max_queue_size_reached,
            )

    def get_queue_size(self) -> int:
        """
        Get current queue size.

        Returns:
            Number of entries waiting for the next drain
        """
        with self._lock:
            return len(self._entries)

    def __len__(self) -> int:
        return self.get_queue_size()

    def __enter__(self) -> "PayloadQueue":
        """Context manager entry."""
        self.start()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        """Context manager exit."""
        self.stop()
