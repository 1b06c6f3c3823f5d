"""
BSD 3-Clause License

Copyright (c) 2021, 🍀☀🌕🌥 🌊
All rights reserved.

Python Error Notifier - asynchronous, rate-limited error reporting client
"""

__version__ = "0.10.8"
__author__ = "kcenon"
__email__ = "kcenon@naver.com"

from notifier_module.core.errors import (
    NotifierError,
    ValidationError,
    RateLimitError,
    TransportError,
)
from notifier_module.core.log_level import LogLevel
from notifier_module.core.notifier import Notifier
from notifier_module.core.notifier_builder import NotifierBuilder
from notifier_module.core.notifier_config import NotifierOptions, GlobalOptions
from notifier_module.core.runtime import (
    NotifierRuntime,
    get_default_runtime,
    set_default_runtime,
)
from notifier_module.core.shim import Shim, ShimQueue, ShimRecord

# Import submodules (not all classes by default)
from notifier_module import delivery
from notifier_module import environment
from notifier_module import payload

__all__ = [
    "Notifier",
    "NotifierBuilder",
    "NotifierOptions",
    "GlobalOptions",
    "NotifierRuntime",
    "get_default_runtime",
    "set_default_runtime",
    "LogLevel",
    "Shim",
    "ShimQueue",
    "ShimRecord",
    "NotifierError",
    "ValidationError",
    "RateLimitError",
    "TransportError",
    "delivery",
    "environment",
    "payload",
]
