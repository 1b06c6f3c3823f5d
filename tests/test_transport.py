"""Tests for the HTTP transport"""

import json

import pytest
import requests
from unittest.mock import Mock

from notifier_module import TransportError
from notifier_module.delivery.transport import HTTPTransport, TransportStats


URL = "https://api.example.com/api/1/item/"


def make_session(status_code=200, body=None):
    session = Mock(spec=requests.Session)
    response = Mock(spec=requests.Response)
    response.status_code = status_code
    response.ok = status_code < 400
    response.json.return_value = body if body is not None else {"err": 0}
    response.text = "raw"
    session.post.return_value = response
    return session


class TestTransportStats:
    """Test transport statistics."""

    def test_initial_stats(self):
        stats = TransportStats()
        assert stats.messages_sent == 0
        assert stats.messages_failed == 0
        assert stats.last_error is None

    def test_record(self):
        stats = TransportStats()
        stats.record_success(100)
        stats.record_failure("timeout")

        data = stats.to_dict()
        assert data["messages_sent"] == 1
        assert data["bytes_sent"] == 100
        assert data["messages_failed"] == 1
        assert data["last_error"] == "timeout"
        assert data["last_error_time"] is not None


class TestHTTPTransport:
    """Test HTTP delivery."""

    def test_success(self):
        session = make_session(body={"err": 0, "result": {"uuid": "u"}})
        transport = HTTPTransport(session=session, timeout=2.0)
        callback = Mock()

        transport.post(URL, {"access_token": "t", "data": {}}, callback)
        transport.close()

        callback.assert_called_once_with(None, {"err": 0, "result": {"uuid": "u"}})
        args, kwargs = session.post.call_args
        assert args == (URL,)
        assert json.loads(kwargs["data"]) == {"access_token": "t", "data": {}}
        assert kwargs["headers"]["Content-Type"] == "application/json"
        assert kwargs["timeout"] == 2.0
        assert transport.get_stats().messages_sent == 1

    def test_extra_headers(self):
        session = make_session()
        transport = HTTPTransport(session=session, headers={"X-Test": "1"})
        transport.post(URL, {}, Mock())
        transport.close()

        assert session.post.call_args.kwargs["headers"]["X-Test"] == "1"

    def test_http_error(self):
        transport = HTTPTransport(session=make_session(status_code=429))
        callback = Mock()

        transport.post(URL, {}, callback)
        transport.close()

        error, response = callback.call_args.args
        assert isinstance(error, TransportError)
        assert error.status_code == 429
        assert response is None
        assert transport.get_stats().messages_failed == 1

    def test_connection_error(self):
        session = make_session()
        session.post.side_effect = requests.ConnectionError("refused")
        transport = HTTPTransport(session=session)
        callback = Mock()

        transport.post(URL, {}, callback)
        transport.close()

        error = callback.call_args.args[0]
        assert isinstance(error, TransportError)
        assert "refused" in str(error)

    def test_non_json_response(self):
        session = make_session()
        session.post.return_value.json.side_effect = ValueError("not json")
        transport = HTTPTransport(session=session)
        callback = Mock()

        transport.post(URL, {}, callback)
        transport.close()

        callback.assert_called_once_with(None, "raw")

    def test_no_retry(self):
        session = make_session(status_code=500)
        transport = HTTPTransport(session=session)
        transport.post(URL, {}, Mock())
        transport.close()

        assert session.post.call_count == 1

    def test_post_after_close(self):
        session = make_session()
        transport = HTTPTransport(session=session)
        transport.close()
        callback = Mock()

        transport.post(URL, {}, callback)

        assert isinstance(callback.call_args.args[0], TransportError)
        session.post.assert_not_called()

    def test_context_manager(self):
        session = make_session()
        with HTTPTransport(session=session) as transport:
            transport.post(URL, {}, Mock())
        session.close.assert_called_once()
