"""Delivery module - queueing, rate limiting and transports"""

from notifier_module.delivery.payload_queue import PayloadQueue, QueueEntry, DeliveryStats
from notifier_module.delivery.rate_limiter import RateLimiter, RateLimitWindow
from notifier_module.delivery.transport import Transport, HTTPTransport, TransportStats

__all__ = [
    "PayloadQueue",
    "QueueEntry",
    "DeliveryStats",
    "RateLimiter",
    "RateLimitWindow",
    "Transport",
    "HTTPTransport",
    "TransportStats",
]
