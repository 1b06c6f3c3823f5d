"""
Transports for delivering payloads to the collection endpoint

A transport never blocks the caller: ``post`` returns at once and the
result is reported through the completion callback.
"""

from __future__ import annotations

import json
import logging
import threading
from abc import ABC, abstractmethod
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
from datetime import datetime
from typing import Any, Callable, Dict, Optional

import requests

from notifier_module.core.errors import TransportError

logger = logging.getLogger(__name__)

Callback = Callable[..., None]


@dataclass
class TransportStats:
    """
    Statistics for transport monitoring.

    Tracks delivered and failed items and the most recent error.
    """

    messages_sent: int = 0
    messages_failed: int = 0
    bytes_sent: int = 0
    last_error: Optional[str] = None
    last_error_time: Optional[datetime] = None

    def record_success(self, bytes_count: int) -> None:
        """Record a successful delivery."""
        self.messages_sent += 1
        self.bytes_sent += bytes_count

    def record_failure(self, error: str) -> None:
        """Record a failed delivery."""
        self.messages_failed += 1
        self.last_error = error
        self.last_error_time = datetime.now()

    def to_dict(self) -> dict:
        """Convert stats to dictionary for serialization."""
        return {
            "messages_sent": self.messages_sent,
            "messages_failed": self.messages_failed,
            "bytes_sent": self.bytes_sent,
            "last_error": self.last_error,
            "last_error_time": (
                self.last_error_time.isoformat()
                if self.last_error_time
                else None
            ),
        }


class Transport(ABC):
    """Abstract base class for payload transports."""

    @abstractmethod
    def post(self, url: str, payload: Dict[str, Any], callback: Callback) -> None:
        """
        Send a payload.

        Args:
            url: Destination URL
            payload: Scrubbed payload
            callback: Called as ``callback(err, response)`` when done;
                ``err`` is None on success
        """
        pass

    def close(self) -> None:
        """Release transport resources."""
        pass

    def __enter__(self) -> "Transport":
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.close()


class HTTPTransport(Transport):
    """
    HTTP transport posting JSON with ``requests``.

    Requests run on a small worker pool so the drain loop is never held
    up by the network. Each payload is attempted once; failures are
    passed to the callback and not retried.

    Thread Safety:
        This class is thread-safe. Stats are updated under a lock.

    Example:
        transport = HTTPTransport(timeout=5.0)
        runtime = NotifierRuntime(transport=transport)
    """

    def __init__(
        self,
        timeout: float = 5.0,
        max_workers: int = 2,
        session: Optional[requests.Session] = None,
        headers: Optional[Dict[str, str]] = None,
    ):
        """
        Initialize HTTP transport.

        Args:
            timeout: Request timeout in seconds
            max_workers: Worker threads performing requests
            session: Optional pre-configured requests session
            headers: Extra request headers
        """
        self.timeout = timeout
        self.max_workers = max_workers
        self.headers = dict(headers or {})
        self._session = session or requests.Session()
        self._executor = ThreadPoolExecutor(
            max_workers=max_workers,
            thread_name_prefix="notifier-transport",
        )
        self._lock = threading.Lock()
        self._stats = TransportStats()
        self._closed = False

    def post(self, url: str, payload: Dict[str, Any], callback: Callback) -> None:
        if self._closed:
            callback(TransportError("transport is closed"), None)
            return
        self._executor.submit(self._send, url, payload, callback)

    def _send(self, url: str, payload: Dict[str, Any], callback: Callback) -> None:
        """Perform one request (worker thread)."""
        body = json.dumps(payload, default=str)
        try:
            response = self._session.post(
                url,
                data=body,
                headers={"Content-Type": "application/json", **self.headers},
                timeout=self.timeout,
            )
        except requests.RequestException as e:
            self._record_failure(str(e))
            callback(TransportError(str(e)), None)
            return

        if not response.ok:
            error = TransportError(
                f"HTTP {response.status_code} from {url}",
                status_code=response.status_code,
            )
            self._record_failure(str(error))
            callback(error, None)
            return

        with self._lock:
            self._stats.record_success(len(body))
        callback(None, self._parse_response(response))

    def _record_failure(self, error: str) -> None:
        logger.debug("Transport failure: %s", error)
        with self._lock:
            self._stats.record_failure(error)

    @staticmethod
    def _parse_response(response: requests.Response) -> Any:
        try:
            return response.json()
        except ValueError:
            return response.text

    def get_stats(self) -> TransportStats:
        """
        Get transport statistics.

        Returns:
            Copy of current statistics
        """
        with self._lock:
            return TransportStats(
                messages_sent=self._stats.messages_sent,
                messages_failed=self._stats.messages_failed,
                bytes_sent=self._stats.bytes_sent,
                last_error=self._stats.last_error,
                last_error_time=self._stats.last_error_time,
            )

    def close(self, wait: bool = True) -> None:
        """Stop accepting posts and wait for in-flight requests."""
        if self._closed:
            return
        self._closed = True
        self._executor.shutdown(wait=wait)
        self._session.close()

    def __repr__(self) -> str:
        return f"HTTPTransport(timeout={self.timeout}, max_workers={self.max_workers})"
