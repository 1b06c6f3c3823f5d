"""Environment module - client facts and stack frame extraction"""

from notifier_module.environment.probe import (
    EnvironmentProbe,
    ProcessEnvironmentProbe,
    StaticEnvironmentProbe,
)
from notifier_module.environment.stack_trace import StackTraceParser, TracebackParser

__all__ = [
    "EnvironmentProbe",
    "ProcessEnvironmentProbe",
    "StaticEnvironmentProbe",
    "StackTraceParser",
    "TracebackParser",
]
