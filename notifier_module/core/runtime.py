"""
Process-wide notifier state

A runtime bundles the global options, the rate limiter and the payload
queue shared by every notifier attached to it. Applications normally use
the default runtime; tests create fresh ones.
"""

import threading
from datetime import timedelta
from typing import Any, Callable, Mapping, Optional

from notifier_module.core.notifier_config import GlobalOptions
from notifier_module.delivery.payload_queue import PayloadQueue
from notifier_module.delivery.rate_limiter import RateLimiter
from notifier_module.delivery.transport import HTTPTransport, Transport


class NotifierRuntime:
    """Shared global options and delivery queue."""

    def __init__(
        self,
        transport: Optional[Transport] = None,
        global_options: Optional[GlobalOptions] = None,
        flush_interval: Optional[timedelta] = None,
        clock: Optional[Callable[[], int]] = None,
    ):
        """
        Initialize runtime.

        Args:
            transport: Payload transport (default: HTTPTransport)
            global_options: Initial global options
            flush_interval: Drain interval (default: 1 second)
            clock: Millisecond clock for the rate-limit window
        """
        self.global_options = global_options or GlobalOptions()
        self.transport = transport or HTTPTransport()
        self.rate_limiter = RateLimiter(self.global_options, clock=clock)
        self.queue = PayloadQueue(
            self.transport,
            self.rate_limiter,
            flush_interval=flush_interval,
        )

    def configure_global(self, options: Mapping[str, Any]) -> None:
        """Merge options into the global options; last writer wins."""
        self.global_options.merge(options)

    def start(self) -> None:
        """Start the periodic drain."""
        self.queue.start()

    def stop(self) -> None:
        """Stop the periodic drain."""
        self.queue.stop()

    def flush(self) -> int:
        """Drain the queue immediately."""
        return self.queue.drain()

    def shutdown(self) -> None:
        """Stop draining, send what is queued and close the transport."""
        self.queue.stop()
        self.queue.drain()
        self.transport.close()


_default_runtime: Optional[NotifierRuntime] = None
_default_lock = threading.Lock()


def get_default_runtime() -> NotifierRuntime:
    """Return the process-wide runtime, creating it on first use."""
    global _default_runtime
    with _default_lock:
        if _default_runtime is None:
            _default_runtime = NotifierRuntime()
        return _default_runtime


def set_default_runtime(runtime: Optional[NotifierRuntime]) -> None:
    """Replace the process-wide runtime (None resets it)."""
    global _default_runtime
    with _default_lock:
        _default_runtime = runtime
