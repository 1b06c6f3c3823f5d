"""
Core module for the notifier

This module contains the fundamental classes:
- Notifier: Builds items from log calls and queues them
- NotifierBuilder: Builder pattern for notifier construction
- NotifierOptions / GlobalOptions: Configuration management
- NotifierRuntime: Process-wide state shared by notifiers
- Shim / ShimQueue: Pre-initialization call recording
- LogLevel: Item severity enumeration
"""

from notifier_module.core.log_level import LogLevel
from notifier_module.core.notifier import Notifier
from notifier_module.core.notifier_builder import NotifierBuilder
from notifier_module.core.notifier_config import NotifierOptions, GlobalOptions
from notifier_module.core.runtime import NotifierRuntime
from notifier_module.core.shim import Shim, ShimQueue, ShimRecord

__all__ = [
    "LogLevel",
    "Notifier",
    "NotifierBuilder",
    "NotifierOptions",
    "GlobalOptions",
    "NotifierRuntime",
    "Shim",
    "ShimQueue",
    "ShimRecord",
]
