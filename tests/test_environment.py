"""Tests for environment probes and stack trace parsing"""

from notifier_module.environment.probe import (
    ProcessEnvironmentProbe,
    StaticEnvironmentProbe,
)
from notifier_module.environment.stack_trace import TracebackParser


def _raise_value_error():
    raise ValueError("deep")


class TestTracebackParser:
    """Test traceback-based frame extraction."""

    def test_unraised_error_has_no_frames(self):
        assert TracebackParser().parse(ValueError("x")) == []

    def test_frames_oldest_first(self):
        try:
            _raise_value_error()
        except ValueError as e:
            frames = TracebackParser().parse(e)

        assert [f["method"] for f in frames] == [
            "test_frames_oldest_first",
            "_raise_value_error",
        ]
        assert frames[-1]["filename"].endswith("test_environment.py")
        assert frames[-1]["code"] == 'raise ValueError("deep")'
        assert isinstance(frames[-1]["lineno"], int)

    def test_without_code(self):
        try:
            _raise_value_error()
        except ValueError as e:
            frames = TracebackParser(include_code=False).parse(e)

        assert all("code" not in f for f in frames)

    def test_callable(self):
        assert TracebackParser()(KeyError("k")) == []


class TestProbes:
    """Test environment probes."""

    def test_static_probe(self):
        probe = StaticEnvironmentProbe(
            user_agent="ua",
            language="fr",
            protocol="file:",
            plugins=[{"name": "a", "description": "b"}],
        )
        snapshot = probe.snapshot()

        assert snapshot["user_agent"] == "ua"
        assert snapshot["language"] == "fr"
        assert snapshot["protocol"] == "file:"
        assert probe.plugins() == [{"name": "a", "description": "b"}]

    def test_static_plugins_are_copies(self):
        probe = StaticEnvironmentProbe(plugins=[{"name": "a", "description": ""}])
        probe.plugins()[0]["name"] = "changed"
        assert probe.plugins()[0]["name"] == "a"

    def test_process_probe(self):
        probe = ProcessEnvironmentProbe(url="app://main")

        assert "Python" in probe.user_agent or "PyPy" in probe.user_agent
        assert probe.url == "app://main"
        assert probe.protocol == "https:"
        assert probe.screen_width >= 0

    def test_process_probe_plugins(self):
        plugins = ProcessEnvironmentProbe().plugins()
        names = [p["name"].lower() for p in plugins]

        assert "requests" in names
        assert names == sorted(names)
