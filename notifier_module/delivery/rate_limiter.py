"""
Fixed-window rate limiting for outgoing items
"""

import time
from dataclasses import dataclass
from typing import Callable, Optional

from notifier_module.core.notifier_config import GlobalOptions


WINDOW_MS = 60000


def _now_ms() -> int:
    return int(time.time() * 1000)


@dataclass
class RateLimitWindow:
    """
    One accounting window.

    Attributes:
        start_ms: Window start in epoch milliseconds
        counter: Send attempts allowed in this window
    """

    start_ms: int
    counter: int = 0

    def elapsed(self, now_ms: int) -> int:
        return now_ms - self.start_ms

    def reset(self, now_ms: int) -> None:
        self.start_ms = now_ms
        self.counter = 0

    def to_dict(self) -> dict:
        return {"start_ms": self.start_ms, "counter": self.counter}


class RateLimiter:
    """
    Per-minute cap on send attempts.

    The window is fixed, not sliding: it restarts once 60 seconds have
    passed since it opened. The cap is read from the runtime's global
    options on every check, so ``configure_global`` takes effect
    immediately. With no cap every send is allowed.

    Example:
        limiter = RateLimiter(GlobalOptions(items_per_min=2))
        limiter.acquire()  # True
        limiter.acquire()  # True
        limiter.acquire()  # False until the window rolls over
    """

    def __init__(
        self,
        global_options: GlobalOptions,
        clock: Optional[Callable[[], int]] = None,
        window_ms: int = WINDOW_MS,
    ):
        """
        Initialize rate limiter.

        Args:
            global_options: Source of the ``items_per_min`` cap
            clock: Returns the current time in epoch milliseconds
            window_ms: Window length in milliseconds
        """
        self.global_options = global_options
        self.clock = clock or _now_ms
        self.window_ms = window_ms
        self._window = RateLimitWindow(start_ms=self.clock())

    @property
    def items_per_min(self) -> Optional[int]:
        return self.global_options.items_per_min

    def acquire(self) -> bool:
        """
        Count one send attempt if the cap allows it.

        Returns:
            True if the send may proceed, False if the cap is reached
        """
        now = self.clock()
        if self._window.elapsed(now) >= self.window_ms:
            self._window.reset(now)

        cap = self.items_per_min
        if cap is not None and self._window.counter >= cap:
            return False

        self._window.counter += 1
        return True

    def get_window(self) -> RateLimitWindow:
        """Return a copy of the current window."""
        return RateLimitWindow(
            start_ms=self._window.start_ms,
            counter=self._window.counter,
        )

    def __repr__(self) -> str:
        return (
            f"RateLimiter(items_per_min={self.items_per_min}, "
            f"counter={self._window.counter})"
        )
