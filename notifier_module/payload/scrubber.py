"""
Recursive field scrubbing for built payloads

Removes the values of sensitive fields before an item leaves the process.
Two independent checks run on every field:

- query-string match: inside string values, ``key=value`` segments whose
  key is a scrub field keep the ``key=`` prefix but lose the value
- key match: a mapping key that matches a scrub field has its whole value
  replaced, whatever the value's type

Both checks tolerate array suffixes on the key, raw or URL-encoded
(``password[]``, ``password[0]``, ``password%5B%5D``), and ignore case.
"""

import re
from functools import lru_cache
from typing import Any, Iterable, List, Pattern, Tuple


REDACTED = "********"

_FIELD_PATTERN = (
    r"\[?(?:%5[bB])?{name}"
    r"(?:(?:\[|%5[bB])[^\]=&%]*)?(?:\]|%5[dD])?"
)


@lru_cache(maxsize=64)
def _compile(scrub_fields: Tuple[str, ...]) -> Tuple[List[Pattern], List[Pattern]]:
    key_patterns = []
    query_patterns = []
    for name in scrub_fields:
        pattern = _FIELD_PATTERN.format(name=re.escape(name))
        key_patterns.append(re.compile(pattern, re.IGNORECASE))
        query_patterns.append(
            re.compile(
                rf"(?P<key>{pattern}=)(?P<value>[^&\n]+)",
                re.IGNORECASE | re.MULTILINE,
            )
        )
    return key_patterns, query_patterns


def redact(value: Any) -> str:
    """Return the fixed redaction marker for any value."""
    return REDACTED


class Scrubber:
    """
    In-place scrubber for nested mappings and lists.

    Scrubbing is idempotent: running it on already scrubbed data changes
    nothing, since the marker itself never matches a value pattern.

    Example:
        scrubber = Scrubber(["password"])
        scrubber.scrub({"url": "http://x?password=abc&x=1"})
        # {"url": "http://x?password=********&x=1"}
    """

    def __init__(self, scrub_fields: Iterable[str]):
        """
        Initialize scrubber.

        Args:
            scrub_fields: Field names whose values must be redacted
        """
        self.scrub_fields = tuple(scrub_fields)
        self._key_patterns, self._query_patterns = _compile(self.scrub_fields)

    def matches_key(self, key: Any) -> bool:
        """Check whether a mapping key names a scrub field."""
        key = str(key)
        return any(p.search(key) for p in self._key_patterns)

    def scrub_query_params(self, value: Any) -> Any:
        """Redact matching ``key=value`` segments of a string value."""
        if not isinstance(value, str):
            return value
        for pattern in self._query_patterns:
            value = pattern.sub(lambda m: m.group("key") + REDACTED, value)
        return value

    def scrub_field(self, key: Any, value: Any) -> Any:
        """
        Apply both checks to a single field.

        Args:
            key: Mapping key (or None for list elements)
            value: Field value

        Returns:
            Scrubbed value
        """
        value = self.scrub_query_params(value)
        if key is not None and self.matches_key(key):
            value = redact(value)
        return value

    def scrub(self, obj: Any) -> Any:
        """
        Scrub a payload in place.

        Args:
            obj: Mapping or list tree; other values are returned as-is

        Returns:
            The same object, scrubbed
        """
        if isinstance(obj, dict):
            for key in list(obj.keys()):
                value = self.scrub_field(key, obj[key])
                obj[key] = self.scrub(value)
        elif isinstance(obj, list):
            for index, value in enumerate(obj):
                obj[index] = self.scrub(self.scrub_field(None, value))
        return obj

    def __call__(self, obj: Any) -> Any:
        return self.scrub(obj)

    def __repr__(self) -> str:
        return f"Scrubber(fields={list(self.scrub_fields)})"
