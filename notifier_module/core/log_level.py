"""
Severity levels accepted by the collection endpoint
"""

from enum import Enum
from typing import Union

from notifier_module.core.errors import ValidationError


class LogLevel(str, Enum):
    """
    Item severity.

    Values are the exact strings sent in the ``level`` field.
    """

    DEBUG = "debug"
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"
    CRITICAL = "critical"

    def __str__(self) -> str:
        return self.value

    @classmethod
    def from_string(cls, level: Union[str, "LogLevel"]) -> "LogLevel":
        """
        Convert a level name to LogLevel.

        Args:
            level: Level name (exact, lower-case) or LogLevel

        Returns:
            LogLevel enum value

        Raises:
            ValidationError: If level is not one of the five severities
        """
        if isinstance(level, cls):
            return level
        try:
            return cls(level)
        except ValueError:
            raise ValidationError(f"Invalid level: {level!r}") from None


LEVEL_NAMES = tuple(level.value for level in LogLevel)
