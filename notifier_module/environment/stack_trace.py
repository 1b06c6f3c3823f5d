"""
Stack trace parsing

Turns an exception into an ordered list of frames for trace bodies.
"""

import traceback
from abc import ABC, abstractmethod
from typing import Any, Dict, List


class StackTraceParser(ABC):
    """Abstract base class for stack trace parsers."""

    @abstractmethod
    def parse(self, err: BaseException) -> List[Dict[str, Any]]:
        """
        Extract frames from an error.

        Args:
            err: The error to parse

        Returns:
            Ordered frames, oldest call first (possibly empty)
        """
        pass

    def __call__(self, err: BaseException) -> List[Dict[str, Any]]:
        return self.parse(err)


class TracebackParser(StackTraceParser):
    """
    Parser backed by the ``traceback`` module.

    An exception that was never raised has no traceback and therefore
    no frames.
    """

    def __init__(self, include_code: bool = True):
        self.include_code = include_code

    def parse(self, err: BaseException) -> List[Dict[str, Any]]:
        tb = getattr(err, "__traceback__", None)
        if tb is None:
            return []

        frames = []
        for summary in traceback.extract_tb(tb):
            frame = {
                "filename": summary.filename,
                "lineno": summary.lineno,
                "method": summary.name,
            }
            if self.include_code and summary.line:
                frame["code"] = summary.line
            frames.append(frame)
        return frames

    def __repr__(self) -> str:
        return f"TracebackParser(include_code={self.include_code})"
