"""
Main Notifier class - builds items from log calls and queues them

A notifier owns its options; scoped child notifiers get a snapshot of
the parent's options at creation time. All notifiers on one runtime
share its global options and delivery queue.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any, Callable, Dict, Iterable, Optional, Union

from notifier_module.core.log_level import LogLevel
from notifier_module.core.notifier_config import NotifierOptions
from notifier_module.core.runtime import NotifierRuntime, get_default_runtime
from notifier_module.core.shim import Shim, ShimQueue, ShimRecord
from notifier_module.delivery.payload_queue import QueueEntry
from notifier_module.environment.probe import EnvironmentProbe, ProcessEnvironmentProbe
from notifier_module.environment.stack_trace import StackTraceParser, TracebackParser
from notifier_module.payload.payload_builder import PayloadBuilder

logger = logging.getLogger(__name__)

VERSION = "0.10.8"

ITEM_PATH = "item/"

_LOG_KEYWORDS = ("message", "err", "custom", "callback", "timestamp")


@dataclass
class LogArgs:
    """Arguments of one log call, sorted by kind."""

    message: Optional[str] = None
    err: Optional[BaseException] = None
    custom: Optional[Any] = None
    callback: Optional[Callable[..., None]] = None
    timestamp: Optional[datetime] = None


class Notifier:
    """Error notifier with scoped configuration."""

    VERSION = VERSION

    def __init__(
        self,
        parent: Optional[Union["Notifier", Shim]] = None,
        runtime: Optional[NotifierRuntime] = None,
        probe: Optional[EnvironmentProbe] = None,
        stack_parser: Optional[StackTraceParser] = None,
        options: Optional[Mapping] = None,
    ):
        """
        Initialize notifier.

        Args:
            parent: Notifier whose options are copied, or a shim that
                will forward its calls to this notifier
            runtime: Shared runtime (default: parent's, else process-wide)
            probe: Environment probe (default: parent's, else process probe)
            stack_parser: Frame parser (default: parent's, else traceback)
            options: Options merged over the defaults (and parent's)
        """
        parent_notifier = parent if isinstance(parent, Notifier) else None

        if parent_notifier is not None:
            runtime = runtime or parent_notifier.runtime
            probe = probe or parent_notifier.probe
            stack_parser = stack_parser or parent_notifier.stack_parser

        self.runtime = runtime or get_default_runtime()
        self.probe = probe or ProcessEnvironmentProbe()
        self.stack_parser = stack_parser or TracebackParser()

        self.options = NotifierOptions.default(self.probe.protocol)
        self.plugins: Dict[str, Any] = {}

        if isinstance(parent, Shim):
            parent.notifier = self
        elif parent_notifier is not None:
            self.configure(parent_notifier.options.to_dict())

        if options:
            self.configure(options)

        self._builder = PayloadBuilder(
            self.options,
            self.runtime.global_options,
            self.probe,
            self.stack_parser,
            self.VERSION,
        )

    # Configuration

    def configure(self, options: Optional[Mapping] = None, **kwargs) -> "Notifier":
        """
        Deep-merge options into this notifier's options.

        Args:
            options: Option values keyed by field name
            **kwargs: More option values

        Returns:
            Self for method chaining
        """
        if options:
            self.options.merge(options)
        if kwargs:
            self.options.merge(kwargs)
        return self

    def configure_global(self, options: Optional[Mapping] = None, **kwargs) -> None:
        """
        Merge options shared by every notifier on this runtime.

        Example:
            notifier.configure_global({"items_per_min": 60})
        """
        self.runtime.configure_global(dict(options or {}, **kwargs))

    def scope(self, payload_overrides: Optional[Mapping] = None, **kwargs) -> "Notifier":
        """
        Create a child notifier with extra payload fields.

        The child starts from a copy of this notifier's options; the
        overrides are merged into its payload template only.

        Example:
            checkout = notifier.scope({"person": {"id": 42}})
        """
        child = Notifier(self)
        overrides = dict(payload_overrides or {}, **kwargs)
        if overrides:
            child.configure({"payload": overrides})
        return child

    def add_plugin(self, name: str, plugin: Any) -> None:
        """Register a plugin under a name."""
        self.plugins[name] = plugin

    def get_plugin(self, name: str) -> Optional[Any]:
        return self.plugins.get(name)

    # Logging

    def log(self, *args, **kwargs) -> Optional[str]:
        """Report an item at the configured default level."""
        return self._log_call(None, args, kwargs)

    def debug(self, *args, **kwargs) -> Optional[str]:
        """Report a debug item."""
        return self._log_call(LogLevel.DEBUG, args, kwargs)

    def info(self, *args, **kwargs) -> Optional[str]:
        """Report an info item."""
        return self._log_call(LogLevel.INFO, args, kwargs)

    def warning(self, *args, **kwargs) -> Optional[str]:
        """Report a warning item."""
        return self._log_call(LogLevel.WARNING, args, kwargs)

    def error(self, *args, **kwargs) -> Optional[str]:
        """Report an error item."""
        return self._log_call(LogLevel.ERROR, args, kwargs)

    def critical(self, *args, **kwargs) -> Optional[str]:
        """Report a critical item."""
        return self._log_call(LogLevel.CRITICAL, args, kwargs)

    def handle_exception(self, exc_type, exc_value, exc_tb) -> Optional[str]:
        """
        Report an uncaught exception.

        The signature matches ``sys.excepthook``:

            sys.excepthook = notifier.handle_exception
        """
        if exc_value is None:
            exc_value = exc_type()
        if exc_value.__traceback__ is None and exc_tb is not None:
            exc_value = exc_value.with_traceback(exc_tb)
        return self._log(LogLevel.CRITICAL, err=exc_value)

    def _log_call(self, level: Optional[LogLevel], args: tuple, kwargs: dict) -> Optional[str]:
        unexpected = set(kwargs) - set(_LOG_KEYWORDS)
        if unexpected:
            raise TypeError(f"Unexpected keyword arguments: {sorted(unexpected)}")

        call = self._get_log_args(args)
        for key, value in kwargs.items():
            setattr(call, key, value)

        return self._log(
            level or self.options.default_log_level,
            call.message,
            call.err,
            call.custom,
            call.callback,
            call.timestamp,
        )

    @staticmethod
    def _get_log_args(args: Iterable[Any]) -> LogArgs:
        """
        Sort positional log arguments by kind.

        Checked in order: str is the message, an exception or any
        object carrying a ``__traceback__`` is the error, a callable is
        the callback, a datetime is the timestamp, anything else is
        custom data. Later arguments of the same kind win.
        """
        call = LogArgs()
        for arg in args:
            if arg is None:
                continue
            if isinstance(arg, str):
                call.message = arg
            elif isinstance(arg, BaseException) or hasattr(arg, "__traceback__"):
                call.err = arg
            elif callable(arg):
                call.callback = arg
            elif isinstance(arg, datetime):
                call.timestamp = arg
            else:
                call.custom = arg
        return call

    def _log(
        self,
        level: Union[str, LogLevel],
        message: Optional[str] = None,
        err: Optional[BaseException] = None,
        custom: Optional[Any] = None,
        callback: Optional[Callable[..., None]] = None,
        timestamp: Optional[datetime] = None,
    ) -> str:
        """
        Build an item and queue it for delivery.

        Returns:
            The item's uuid

        Raises:
            ValidationError: On an invalid level or an empty call
        """
        payload = self._builder.build(
            timestamp or datetime.now(timezone.utc),
            level,
            message,
            err,
            custom,
        )

        # check_ignore is reserved; every item is sent.
        self.runtime.queue.enqueue(
            QueueEntry(
                payload=payload,
                endpoint_url=self._route(ITEM_PATH),
                callback=callback,
            )
        )
        return payload["data"]["uuid"]

    def _route(self, path: str) -> str:
        """Join the endpoint and a path with exactly one slash."""
        endpoint = self.options.endpoint
        if endpoint.endswith("/") and path.startswith("/"):
            path = path[1:]
        elif not endpoint.endswith("/") and not path.startswith("/"):
            path = "/" + path
        return endpoint + path

    # Shim replay

    def process_shim_queue(self, shim_queue: Union[ShimQueue, list]) -> None:
        """
        Replay calls recorded on shims before this notifier existed.

        Records are consumed front to back. A shim without a parent maps
        to this notifier; a scoped shim maps to a child of its parent's
        notifier. Unknown methods are skipped. Once replay finishes,
        every shim in a ``ShimQueue`` is bound to its notifier.

        Args:
            shim_queue: ShimQueue, or a list of ShimRecord consumed in place
        """
        resolved: Dict[str, Notifier] = {}

        while True:
            record = self._next_record(shim_queue)
            if record is None:
                break

            notifier = self._resolve_shim(
                record.shim_id, record.parent_shim_id, resolved, shim_queue
            )

            if record.method.startswith("_"):
                logger.debug("Skipping private shim method %r", record.method)
                continue
            method = getattr(notifier, record.method, None)
            if not callable(method):
                logger.debug("Skipping unknown shim method %r", record.method)
                continue
            method(*record.args, **record.kwargs)

        if isinstance(shim_queue, ShimQueue):
            # Shims that recorded nothing still need a notifier to forward to
            for shim in shim_queue.shims():
                if shim.notifier is not None:
                    continue
                shim.notifier = self._resolve_shim(
                    shim.shim_id, shim.parent_shim_id, resolved, shim_queue
                )

    @staticmethod
    def _next_record(shim_queue: Union[ShimQueue, list]) -> Optional[ShimRecord]:
        if isinstance(shim_queue, ShimQueue):
            return shim_queue.pop_next()
        return shim_queue.pop(0) if shim_queue else None

    def _resolve_shim(
        self,
        shim_id: str,
        parent_shim_id: Optional[str],
        resolved: Dict[str, "Notifier"],
        shim_queue: Union[ShimQueue, list],
    ) -> "Notifier":
        notifier = resolved.get(shim_id)
        if notifier is not None:
            return notifier

        if parent_shim_id is None:
            notifier = self
        elif parent_shim_id in resolved:
            notifier = Notifier(resolved[parent_shim_id])
        else:
            parent_shim = (
                shim_queue.get_shim(parent_shim_id)
                if isinstance(shim_queue, ShimQueue)
                else None
            )
            if parent_shim is not None:
                parent = self._resolve_shim(
                    parent_shim.shim_id,
                    parent_shim.parent_shim_id,
                    resolved,
                    shim_queue,
                )
                notifier = Notifier(parent)
            else:
                logger.warning(
                    "Shim %s references unresolved parent %s; "
                    "using default options",
                    shim_id,
                    parent_shim_id,
                )
                notifier = Notifier(
                    runtime=self.runtime,
                    probe=self.probe,
                    stack_parser=self.stack_parser,
                )

        resolved[shim_id] = notifier
        return notifier

    def __repr__(self) -> str:
        return (
            f"Notifier(environment={self.options.environment!r}, "
            f"endpoint={self.options.endpoint!r})"
        )
