"""
Payload body variants

An item body is either a message or a stack trace, never both.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Union

from notifier_module.core.merge import deep_copy


@dataclass
class MessageBody:
    """Plain message body, optionally carrying custom data."""

    text: Optional[str]
    extra: Optional[Dict[str, Any]] = None

    def to_dict(self) -> Dict[str, Any]:
        """
        Convert body to its wire form.

        Returns:
            ``{"message": {"body": ..., "extra": ...}}``
        """
        message: Dict[str, Any] = {"body": self.text}
        if self.extra is not None:
            message["extra"] = deep_copy(self.extra)
        return {"message": message}


@dataclass
class TraceBody:
    """
    Stack trace body.

    A trace body always has at least one frame; ``__post_init__``
    rejects an empty frame list.
    """

    class_name: str
    message: str
    frames: List[Dict[str, Any]] = field(default_factory=list)
    description: Optional[str] = None
    extra: Optional[Dict[str, Any]] = None

    def __post_init__(self):
        if not self.frames:
            raise ValueError("TraceBody requires at least one frame")

    def to_dict(self) -> Dict[str, Any]:
        """
        Convert body to its wire form.

        Returns:
            ``{"trace": {"exception": {...}, "frames": [...], "extra": ...}}``
        """
        exception: Dict[str, Any] = {
            "class": self.class_name,
            "message": self.message,
        }
        if self.description:
            exception["description"] = self.description

        trace: Dict[str, Any] = {
            "exception": exception,
            "frames": deep_copy(self.frames),
        }
        if self.extra is not None:
            trace["extra"] = deep_copy(self.extra)
        return {"trace": trace}


Body = Union[MessageBody, TraceBody]
