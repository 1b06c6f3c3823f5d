"""
Payload construction

Turns a log call into the canonical item sent to the collection
endpoint, then scrubs it.
"""

from __future__ import annotations

import uuid
from datetime import datetime
from typing import TYPE_CHECKING, Any, Dict, List, Optional

from notifier_module.core.errors import ValidationError
from notifier_module.core.log_level import LogLevel
from notifier_module.core.merge import deep_copy, merged
from notifier_module.payload.body import Body, MessageBody, TraceBody
from notifier_module.payload.scrubber import Scrubber

if TYPE_CHECKING:
    from notifier_module.core.notifier_config import GlobalOptions, NotifierOptions
    from notifier_module.environment.probe import EnvironmentProbe
    from notifier_module.environment.stack_trace import StackTraceParser


NOTIFIER_NAME = "rollbar-browser-js"
PLATFORM = "browser"
FRAMEWORK = "browser-js"
LANGUAGE = "javascript"


def _to_millis(timestamp: datetime) -> int:
    return int(round(timestamp.timestamp() * 1000))


class PayloadBuilder:
    """
    Builds scrubbed payloads for one notifier.

    The builder reads the notifier's options at build time, so options
    merged in with ``configure`` apply to the next item. The probe's
    plugin list is read once and reused for the builder's lifetime.
    """

    def __init__(
        self,
        options: "NotifierOptions",
        global_options: "GlobalOptions",
        probe: "EnvironmentProbe",
        stack_parser: "StackTraceParser",
        version: str,
    ):
        """
        Initialize payload builder.

        Args:
            options: Options of the owning notifier
            global_options: Runtime-wide options (start time)
            probe: Environment probe for client facts
            stack_parser: Parser producing frames for trace bodies
            version: Notifier version reported in every payload
        """
        self.options = options
        self.global_options = global_options
        self.probe = probe
        self.stack_parser = stack_parser
        self.version = version
        self._plugins: Optional[List[Dict[str, Any]]] = None

    def get_plugins(self) -> List[Dict[str, Any]]:
        """Return the cached plugin list, probing on first use."""
        if self._plugins is None:
            self._plugins = self.probe.plugins()
        return self._plugins

    def build(
        self,
        timestamp: datetime,
        level: Any,
        message: Optional[str] = None,
        err: Optional[BaseException] = None,
        custom: Optional[Dict[str, Any]] = None,
    ) -> Dict[str, Any]:
        """
        Build a payload.

        Args:
            timestamp: Time of the log call
            level: One of debug, info, warning, error, critical
            message: Message text (description when ``err`` is given)
            err: Error to report as a stack trace
            custom: Custom data attached as ``extra``

        Returns:
            ``{"access_token": ..., "data": {...}}``, already scrubbed

        Raises:
            ValidationError: On an invalid level or when message, err and
                custom are all missing
        """
        level = LogLevel.from_string(level)

        if not message and err is None and custom is None:
            raise ValidationError("No message, error or custom data")

        template = deep_copy(self.options.payload)
        template.pop("body", None)

        timestamp_ms = _to_millis(timestamp)
        data = {
            "environment": self.options.environment,
            "endpoint": self.options.endpoint,
            "uuid": str(uuid.uuid4()),
            "level": level.value,
            "platform": PLATFORM,
            "framework": FRAMEWORK,
            "language": LANGUAGE,
            "body": self.build_body(message, err, custom).to_dict(),
            "request": {
                "url": self.probe.url,
                "query_string": self.probe.query_string,
                "user_ip": "$remote_ip",
            },
            "client": {
                "runtime_ms": timestamp_ms - self.global_options.start_time,
                "timestamp": int(round(timestamp_ms / 1000)),
                "javascript": {
                    "browser": self.probe.user_agent,
                    "language": self.probe.language,
                    "cookie_enabled": self.probe.cookie_enabled,
                    "screen": {
                        "width": self.probe.screen_width,
                        "height": self.probe.screen_height,
                    },
                    "plugins": deep_copy(self.get_plugins()),
                },
            },
            "server": {},
            "notifier": {
                "name": NOTIFIER_NAME,
                "version": self.version,
            },
        }

        payload = {
            "access_token": self.options.access_token,
            "data": merged(data, template),
        }

        Scrubber(self.options.scrub_fields).scrub(payload)
        return payload

    def build_body(
        self,
        message: Optional[str],
        err: Optional[BaseException],
        custom: Optional[Dict[str, Any]],
    ) -> Body:
        """Build a trace body when an error is given, else a message body."""
        if err is not None:
            return self.build_trace_body(message, err, custom)
        extra = deep_copy(custom) if custom is not None else None
        return MessageBody(text=message, extra=extra)

    def build_trace_body(
        self,
        description: Optional[str],
        err: BaseException,
        custom: Optional[Dict[str, Any]],
    ) -> Body:
        """
        Build a trace body for an error.

        Falls back to a ``"<class>: <message>"`` message body when the
        parser finds no frames.
        """
        if isinstance(err, BaseException):
            class_name = type(err).__name__
            err_message = str(err)
        else:
            # error-like objects may carry their own name and message
            class_name = getattr(err, "name", None) or type(err).__name__
            err_message = getattr(err, "message", None) or str(err)
        extra = deep_copy(custom) if custom is not None else None

        frames = self.stack_parser.parse(err)
        if not frames:
            return MessageBody(text=f"{class_name}: {err_message}", extra=extra)

        return TraceBody(
            class_name=class_name,
            message=err_message,
            frames=list(frames),
            description=description or None,
            extra=extra,
        )
