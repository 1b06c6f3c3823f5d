"""Notifier builder pattern"""

from datetime import timedelta
from typing import Any, Dict, List, Optional

from notifier_module.core.notifier import Notifier
from notifier_module.core.runtime import NotifierRuntime, get_default_runtime
from notifier_module.delivery.transport import Transport
from notifier_module.environment.probe import EnvironmentProbe
from notifier_module.environment.stack_trace import StackTraceParser


class NotifierBuilder:
    """Builder pattern for notifier construction."""

    def __init__(self):
        self._options: Dict[str, Any] = {}
        self._global_options: Dict[str, Any] = {}
        self._transport: Optional[Transport] = None
        self._runtime: Optional[NotifierRuntime] = None
        self._probe: Optional[EnvironmentProbe] = None
        self._stack_parser: Optional[StackTraceParser] = None
        self._flush_interval: Optional[timedelta] = None
        self._autostart = False

    def with_access_token(self, token: str) -> "NotifierBuilder":
        """Set the project access token."""
        self._options["access_token"] = token
        return self

    def with_environment(self, environment: str) -> "NotifierBuilder":
        """Set the environment tag (default: production)."""
        self._options["environment"] = environment
        return self

    def with_endpoint(self, endpoint: str) -> "NotifierBuilder":
        """Set the collection endpoint URL."""
        self._options["endpoint"] = endpoint
        return self

    def with_scrub_fields(self, fields: List[str]) -> "NotifierBuilder":
        """Replace the list of scrubbed field names."""
        self._options["scrub_fields"] = list(fields)
        return self

    def with_payload(self, payload: Dict[str, Any]) -> "NotifierBuilder":
        """
        Merge fields into the payload template.

        Example:
            notifier = (NotifierBuilder()
                .with_access_token("POST_SERVER_ITEM_TOKEN")
                .with_payload({"person": {"id": 42}})
                .build())
        """
        self._options.setdefault("payload", {}).update(payload)
        return self

    def with_default_level(self, level: str) -> "NotifierBuilder":
        """Set the level used by ``log()``."""
        self._options["default_log_level"] = level
        return self

    def with_items_per_minute(self, items_per_min: Optional[int]) -> "NotifierBuilder":
        """Cap send attempts per minute for the whole runtime."""
        self._global_options["items_per_min"] = items_per_min
        return self

    def with_flush_interval(self, interval: timedelta) -> "NotifierBuilder":
        """Set the drain interval of a runtime created by this builder."""
        self._flush_interval = interval
        return self

    def with_transport(self, transport: Transport) -> "NotifierBuilder":
        """Use a custom transport for a runtime created by this builder."""
        self._transport = transport
        return self

    def with_runtime(self, runtime: NotifierRuntime) -> "NotifierBuilder":
        """Attach to an existing runtime instead of the default one."""
        self._runtime = runtime
        return self

    def with_probe(self, probe: EnvironmentProbe) -> "NotifierBuilder":
        """Use a custom environment probe."""
        self._probe = probe
        return self

    def with_stack_parser(self, parser: StackTraceParser) -> "NotifierBuilder":
        """Use a custom stack trace parser."""
        self._stack_parser = parser
        return self

    def with_autostart(self, enabled: bool = True) -> "NotifierBuilder":
        """Start the runtime's periodic drain on build."""
        self._autostart = enabled
        return self

    def build(self) -> Notifier:
        """Build and return configured notifier."""
        runtime = self._runtime
        if runtime is None:
            if self._transport is not None or self._flush_interval is not None:
                runtime = NotifierRuntime(
                    transport=self._transport,
                    flush_interval=self._flush_interval,
                )
            else:
                runtime = get_default_runtime()

        if self._global_options:
            runtime.configure_global(self._global_options)

        notifier = Notifier(
            runtime=runtime,
            probe=self._probe,
            stack_parser=self._stack_parser,
            options=self._options,
        )

        if self._autostart:
            runtime.start()

        return notifier
