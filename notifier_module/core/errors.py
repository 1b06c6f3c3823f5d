"""
Notifier exceptions

Validation failures are raised to the caller. Delivery failures are
never raised; they are handed to the item's completion callback.
"""


class NotifierError(Exception):
    """Base class for all notifier errors."""


class ValidationError(NotifierError, ValueError):
    """Raised when a log call cannot be turned into a payload."""


class RateLimitError(NotifierError):
    """Passed to a callback when the per-minute item cap is reached."""

    def __init__(self, items_per_min: int):
        super().__init__(f"{items_per_min} items per minute reached")
        self.items_per_min = items_per_min


class TransportError(NotifierError):
    """Passed to a callback when the transport could not deliver an item."""

    def __init__(self, message: str, status_code=None):
        super().__init__(message)
        self.status_code = status_code
