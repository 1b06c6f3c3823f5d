"""Tests for payload construction"""

from datetime import datetime, timezone

import pytest
from unittest.mock import Mock

from notifier_module import LogLevel, ValidationError
from notifier_module.core.notifier_config import GlobalOptions, NotifierOptions
from notifier_module.payload.body import MessageBody, TraceBody
from notifier_module.payload.payload_builder import PayloadBuilder
from notifier_module.payload.scrubber import REDACTED

from conftest import FixedFrameParser


TS = datetime(2024, 1, 1, 12, 0, 0, tzinfo=timezone.utc)
TS_MS = int(TS.timestamp() * 1000)


def make_builder(probe, options=None, frames=None, start_time=TS_MS - 1500):
    return PayloadBuilder(
        options or NotifierOptions(access_token="token-123"),
        GlobalOptions(start_time=start_time),
        probe,
        FixedFrameParser(frames),
        "1.2.3",
    )


class TestValidation:
    """Test payload validation."""

    @pytest.mark.parametrize("level", ["debug", "info", "warning", "error", "critical"])
    def test_valid_levels(self, probe, level):
        payload = make_builder(probe).build(TS, level, message="hi")
        assert payload["data"]["level"] == level

    def test_level_enum_accepted(self, probe):
        payload = make_builder(probe).build(TS, LogLevel.WARNING, message="hi")
        assert payload["data"]["level"] == "warning"

    @pytest.mark.parametrize("level", ["warn", "INFO", "fatal", "", None])
    def test_invalid_level(self, probe, level):
        with pytest.raises(ValidationError):
            make_builder(probe).build(TS, level, message="hi")

    def test_no_content(self, probe):
        with pytest.raises(ValidationError):
            make_builder(probe).build(TS, "info")

    def test_custom_only_is_enough(self, probe):
        payload = make_builder(probe).build(TS, "info", custom={"a": 1})
        assert payload["data"]["body"] == {"message": {"body": None, "extra": {"a": 1}}}


class TestPayloadSchema:
    """Test the canonical payload layout."""

    def test_top_level(self, probe):
        payload = make_builder(probe).build(TS, "info", message="hello")
        assert set(payload) == {"access_token", "data"}
        assert payload["access_token"] == "token-123"

    def test_data_fields(self, probe):
        data = make_builder(probe).build(TS, "info", message="hello")["data"]

        assert data["environment"] == "production"
        assert data["platform"] == "browser"
        assert data["framework"] == "browser-js"
        assert data["language"] == "javascript"
        assert data["server"] == {}
        assert data["notifier"] == {"name": "rollbar-browser-js", "version": "1.2.3"}
        assert data["request"] == {
            "url": "http://example.com/cart?id=1",
            "query_string": "?id=1",
            "user_ip": "$remote_ip",
        }

    def test_client_block(self, probe):
        client = make_builder(probe).build(TS, "info", message="hello")["data"]["client"]

        assert client["runtime_ms"] == 1500
        assert client["timestamp"] == round(TS_MS / 1000)
        assert client["javascript"] == {
            "browser": "Mozilla/5.0 (test)",
            "language": "en-US",
            "cookie_enabled": True,
            "screen": {"width": 1280, "height": 800},
            "plugins": [{"name": "pdf", "description": "PDF viewer"}],
        }

    def test_unique_uuid(self, probe):
        builder = make_builder(probe)
        uuids = {builder.build(TS, "info", message="x")["data"]["uuid"] for _ in range(50)}
        assert len(uuids) == 50

    def test_plugins_cached_per_builder(self, probe):
        probe.plugins = Mock(return_value=[{"name": "a", "description": ""}])
        builder = make_builder(probe)

        builder.build(TS, "info", message="one")
        builder.build(TS, "info", message="two")

        assert probe.plugins.call_count == 1

    def test_payload_template_merged(self, probe):
        options = NotifierOptions(payload={"person": {"id": 7}, "environment": "staging"})
        data = make_builder(probe, options=options).build(TS, "info", message="x")["data"]

        assert data["person"] == {"id": 7}
        assert data["environment"] == "staging"

    def test_template_body_is_dropped(self, probe):
        options = NotifierOptions(payload={"body": {"message": {"body": "clobbered"}}})
        data = make_builder(probe, options=options).build(TS, "info", message="real")["data"]

        assert data["body"] == {"message": {"body": "real"}}
        assert options.payload["body"] == {"message": {"body": "clobbered"}}

    def test_template_deep_merges(self, probe):
        options = NotifierOptions(payload={"client": {"javascript": {"code_version": "abc"}}})
        client = make_builder(probe, options=options).build(TS, "info", message="x")["data"]["client"]

        assert client["javascript"]["code_version"] == "abc"
        assert client["javascript"]["browser"] == "Mozilla/5.0 (test)"

    def test_payload_is_scrubbed(self, probe):
        data = make_builder(probe).build(
            TS, "info", message="x", custom={"password": "p", "next": "/a?secret=1"}
        )["data"]

        extra = data["body"]["message"]["extra"]
        assert extra == {"password": REDACTED, "next": f"/a?secret={REDACTED}"}


class TestBodies:
    """Test message and trace bodies."""

    def test_message_body(self, probe):
        body = make_builder(probe).build(TS, "info", message="hello")["data"]["body"]
        assert body == {"message": {"body": "hello"}}

    def test_message_body_extra_is_copy(self, probe):
        custom = {"cart": {"items": 2}}
        body = make_builder(probe).build(TS, "info", message="x", custom=custom)["data"]["body"]

        body["message"]["extra"]["cart"]["items"] = 99
        assert custom == {"cart": {"items": 2}}

    def test_trace_body(self, probe):
        err = ValueError("bad value")
        body = make_builder(probe).build(
            TS, "error", message="while saving", err=err, custom={"k": 1}
        )["data"]["body"]

        assert body == {
            "trace": {
                "exception": {
                    "class": "ValueError",
                    "message": "bad value",
                    "description": "while saving",
                },
                "frames": [{"filename": "app.py", "lineno": 10, "method": "main"}],
                "extra": {"k": 1},
            }
        }

    def test_trace_without_description(self, probe):
        body = make_builder(probe).build(TS, "error", err=KeyError("k"))["data"]["body"]
        assert "description" not in body["trace"]["exception"]

    def test_zero_frames_downgrades_to_message(self, probe):
        builder = make_builder(probe, frames=[])
        body = builder.build(TS, "error", err=RuntimeError("boom"), custom={"k": 1})["data"]["body"]

        assert body == {"message": {"body": "RuntimeError: boom", "extra": {"k": 1}}}

    def test_error_like_object(self, probe):
        class JSError:
            name = "TypeError"
            message = "undefined is not a function"

        body = make_builder(probe).build(TS, "error", err=JSError())["data"]["body"]
        assert body["trace"]["exception"]["class"] == "TypeError"
        assert body["trace"]["exception"]["message"] == "undefined is not a function"

    def test_build_body_types(self, probe):
        builder = make_builder(probe)
        assert isinstance(builder.build_body("x", None, None), MessageBody)
        assert isinstance(builder.build_body(None, ValueError("v"), None), TraceBody)

    def test_trace_body_requires_frames(self):
        with pytest.raises(ValueError):
            TraceBody(class_name="E", message="m", frames=[])
