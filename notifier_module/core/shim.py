"""
Pre-initialization shims

A shim stands in for a notifier before the library is ready. Calls made
on it are recorded in a shared ``ShimQueue``; once the real notifier
exists the queue is replayed with ``Notifier.process_shim_queue`` and
every shim is bound to its notifier, after which calls are forwarded.
"""

import itertools
import threading
import uuid
from dataclasses import dataclass, field
from typing import Any, Dict, Iterator, List, Optional, Tuple


@dataclass
class ShimRecord:
    """One call recorded against a shim."""

    shim_id: str
    method: str
    args: Tuple[Any, ...] = ()
    kwargs: Dict[str, Any] = field(default_factory=dict)
    parent_shim_id: Optional[str] = None
    position: int = 0


class ShimQueue:
    """
    Ordered record of shim calls.

    Records are consumed front to back by ``pop_next``; each record is
    handed out exactly once.
    """

    def __init__(self):
        self._records: List[ShimRecord] = []
        self._shims: Dict[str, "Shim"] = {}
        self._positions = itertools.count()
        self._lock = threading.Lock()

    def register(self, shim: "Shim") -> None:
        with self._lock:
            self._shims[shim.shim_id] = shim

    def record(self, shim: "Shim", method: str, args: tuple, kwargs: dict) -> ShimRecord:
        """Append a call made on ``shim``."""
        with self._lock:
            record = ShimRecord(
                shim_id=shim.shim_id,
                parent_shim_id=shim.parent_shim_id,
                method=method,
                args=tuple(args),
                kwargs=dict(kwargs),
                position=next(self._positions),
            )
            self._records.append(record)
            return record

    def pop_next(self) -> Optional[ShimRecord]:
        with self._lock:
            if not self._records:
                return None
            return self._records.pop(0)

    def shims(self) -> List["Shim"]:
        """Every shim registered on this queue, in registration order."""
        with self._lock:
            return list(self._shims.values())

    def get_shim(self, shim_id: str) -> Optional["Shim"]:
        with self._lock:
            return self._shims.get(shim_id)

    def __len__(self) -> int:
        with self._lock:
            return len(self._records)

    def __iter__(self) -> Iterator[ShimRecord]:
        with self._lock:
            return iter(list(self._records))


class Shim:
    """
    Lightweight stand-in for a notifier.

    Example:
        queue = ShimQueue()
        shim = Shim(queue)
        shim.info("starting up")
        checkout = shim.scope({"component": "checkout"})
        checkout.error("payment failed", err)

        notifier = Notifier()
        notifier.process_shim_queue(queue)
        shim.info("now forwarded directly")
    """

    def __init__(
        self,
        queue: Optional[ShimQueue] = None,
        parent: Optional["Shim"] = None,
        shim_id: Optional[str] = None,
    ):
        """
        Initialize shim.

        Args:
            queue: Shared call record (default: the parent's, or a new one)
            parent: Parent shim for scoped shims
            shim_id: Identity (default: random)
        """
        if queue is None:
            queue = parent.queue if parent is not None else ShimQueue()
        self.queue = queue
        self.parent = parent
        self.shim_id = shim_id or uuid.uuid4().hex
        # Set when the real notifier takes over
        self.notifier = None
        queue.register(self)

    @property
    def parent_shim_id(self) -> Optional[str]:
        return self.parent.shim_id if self.parent is not None else None

    def _call(self, method: str, *args, **kwargs) -> Any:
        if self.notifier is not None:
            return getattr(self.notifier, method)(*args, **kwargs)
        self.queue.record(self, method, args, kwargs)
        return None

    def log(self, *args, **kwargs):
        return self._call("log", *args, **kwargs)

    def debug(self, *args, **kwargs):
        return self._call("debug", *args, **kwargs)

    def info(self, *args, **kwargs):
        return self._call("info", *args, **kwargs)

    def warning(self, *args, **kwargs):
        return self._call("warning", *args, **kwargs)

    def error(self, *args, **kwargs):
        return self._call("error", *args, **kwargs)

    def critical(self, *args, **kwargs):
        return self._call("critical", *args, **kwargs)

    def configure(self, *args, **kwargs):
        return self._call("configure", *args, **kwargs)

    def configure_global(self, *args, **kwargs):
        return self._call("configure_global", *args, **kwargs)

    def handle_exception(self, *args, **kwargs):
        return self._call("handle_exception", *args, **kwargs)

    def scope(self, payload_overrides: Optional[Dict[str, Any]] = None, **kwargs):
        """
        Create a child shim.

        Once bound, this behaves like ``Notifier.scope``. Before that the
        child records a payload override that is applied during replay.
        """
        if self.notifier is not None:
            return self.notifier.scope(payload_overrides, **kwargs)
        overrides = dict(payload_overrides or {}, **kwargs)
        child = Shim(self.queue, parent=self)
        if overrides:
            child.configure({"payload": overrides})
        return child

    def __repr__(self) -> str:
        return f"Shim(id={self.shim_id!r}, parent={self.parent_shim_id!r})"
