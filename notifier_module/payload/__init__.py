"""
Payload module

Builds and scrubs the items sent to the collection endpoint.
"""

from notifier_module.payload.body import MessageBody, TraceBody
from notifier_module.payload.payload_builder import PayloadBuilder
from notifier_module.payload.scrubber import Scrubber, REDACTED

__all__ = [
    "MessageBody",
    "TraceBody",
    "PayloadBuilder",
    "Scrubber",
    "REDACTED",
]
