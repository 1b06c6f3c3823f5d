"""
Notifier configuration management

Per-notifier options and the process-wide global options shared by
every notifier attached to the same runtime.
"""

import time
from dataclasses import dataclass, field, fields, replace
from typing import Any, Callable, Dict, List, Mapping, Optional

from notifier_module.core.log_level import LogLevel
from notifier_module.core.merge import deep_copy, deep_merge


DEFAULT_ENDPOINT = "api.rollbar.com/api/1/"
DEFAULT_SCRUB_FIELDS = [
    "passwd",
    "password",
    "secret",
    "confirm_password",
    "password_confirmation",
]


def endpoint_for_protocol(protocol: Optional[str]) -> str:
    """
    Build the default endpoint URL for an originating protocol.

    http-family protocols are kept, anything else is forced to https.
    """
    if not protocol or not protocol.startswith("http"):
        protocol = "https:"
    return f"{protocol}//{DEFAULT_ENDPOINT}"


@dataclass
class NotifierOptions:
    """
    Options owned by a single notifier.

    Child notifiers receive a deep copy of their parent's options at
    creation time; later changes to either side are not shared.
    """

    endpoint: str = field(default_factory=lambda: endpoint_for_protocol(None))
    environment: str = "production"
    scrub_fields: List[str] = field(
        default_factory=lambda: list(DEFAULT_SCRUB_FIELDS)
    )
    # Reserved suppression hook; stored but never invoked.
    check_ignore: Optional[Callable[..., bool]] = None
    payload: Dict[str, Any] = field(default_factory=dict)
    default_log_level: str = LogLevel.DEBUG.value
    access_token: Optional[str] = None
    extra: Dict[str, Any] = field(default_factory=dict)

    def __post_init__(self):
        """Validate options after initialization."""
        self._validate()

    def _validate(self) -> None:
        self.default_log_level = LogLevel.from_string(self.default_log_level).value
        if not isinstance(self.scrub_fields, list):
            raise TypeError("scrub_fields must be a list")
        if not isinstance(self.payload, dict):
            raise TypeError("payload must be a dict")
        if self.check_ignore is not None and not callable(self.check_ignore):
            raise TypeError("check_ignore must be callable")

    @classmethod
    def default(cls, protocol: Optional[str] = None) -> "NotifierOptions":
        """Create default options for the given originating protocol."""
        return cls(endpoint=endpoint_for_protocol(protocol))

    def merge(self, options: Mapping[str, Any]) -> "NotifierOptions":
        """
        Deep-merge a mapping into these options in place.

        Mapping values merge key-wise and recursively; primitives and
        lists overwrite. Keys that are not option fields are kept in
        ``extra``.

        Args:
            options: Option values keyed by field name

        Returns:
            Self for method chaining
        """
        known = {f.name for f in fields(self)}
        staged: Dict[str, Any] = {}
        for key, value in options.items():
            if key not in known:
                key, value = "extra", {key: value}
            current = staged[key] if key in staged else getattr(self, key)
            if isinstance(current, dict) and isinstance(value, Mapping):
                if key not in staged:
                    current = staged[key] = deep_copy(current)
                deep_merge(current, value)
            else:
                staged[key] = deep_copy(value)

        # Validated on a candidate so a rejected merge changes nothing
        candidate = replace(self, **staged)
        for f in fields(self):
            setattr(self, f.name, getattr(candidate, f.name))
        return self

    def copy(self) -> "NotifierOptions":
        """Return a deep, independent copy."""
        return deep_copy(self)

    def to_dict(self) -> Dict[str, Any]:
        """Convert options to a plain dictionary."""
        return {
            "endpoint": self.endpoint,
            "environment": self.environment,
            "scrub_fields": list(self.scrub_fields),
            "check_ignore": self.check_ignore,
            "payload": deep_copy(self.payload),
            "default_log_level": self.default_log_level,
            "access_token": self.access_token,
            "extra": deep_copy(self.extra),
        }


@dataclass
class GlobalOptions:
    """
    Options shared by every notifier on one runtime.

    Attributes:
        start_time: Process start time in epoch milliseconds
        items_per_min: Optional cap on send attempts per minute
        extra: Any other global keys, stored as given
    """

    start_time: int = field(default_factory=lambda: int(time.time() * 1000))
    items_per_min: Optional[int] = None
    extra: Dict[str, Any] = field(default_factory=dict)

    def __post_init__(self):
        if self.items_per_min is not None and self.items_per_min < 0:
            raise ValueError("items_per_min cannot be negative")

    def merge(self, options: Mapping[str, Any]) -> "GlobalOptions":
        """Merge a mapping in place; last writer wins."""
        staged: Dict[str, Any] = {"extra": deep_copy(self.extra)}
        for key, value in options.items():
            if key in ("start_time", "items_per_min"):
                staged[key] = value
            else:
                deep_merge(staged["extra"], {key: value})

        candidate = replace(self, **staged)
        self.start_time = candidate.start_time
        self.items_per_min = candidate.items_per_min
        self.extra = candidate.extra
        return self

    def to_dict(self) -> Dict[str, Any]:
        return {
            "start_time": self.start_time,
            "items_per_min": self.items_per_min,
            "extra": deep_copy(self.extra),
        }
