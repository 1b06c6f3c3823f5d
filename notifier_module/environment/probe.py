"""
Environment probes

Supply the client facts attached to every payload: user agent, language,
cookie flag, screen size, originating URL and the plugin list.
"""

import locale
import platform
import shutil
from abc import ABC, abstractmethod
from importlib import metadata
from typing import Any, Dict, List, Optional


class EnvironmentProbe(ABC):
    """
    Abstract base class for environment probes.

    ``plugins()`` may be expensive; callers cache its result.
    """

    user_agent: str = ""
    language: Optional[str] = None
    cookie_enabled: bool = False
    screen_width: int = 0
    screen_height: int = 0
    protocol: str = "https:"
    url: str = ""
    query_string: str = ""

    @abstractmethod
    def plugins(self) -> List[Dict[str, Any]]:
        """
        List installed plugins.

        Returns:
            ``[{"name": ..., "description": ...}, ...]``
        """
        pass

    def snapshot(self) -> Dict[str, Any]:
        """Return the probe's scalar facts as a dictionary."""
        return {
            "user_agent": self.user_agent,
            "language": self.language,
            "cookie_enabled": self.cookie_enabled,
            "screen_width": self.screen_width,
            "screen_height": self.screen_height,
            "protocol": self.protocol,
            "url": self.url,
            "query_string": self.query_string,
        }


class StaticEnvironmentProbe(EnvironmentProbe):
    """
    Probe returning fixed values.

    Example:
        probe = StaticEnvironmentProbe(
            user_agent="Mozilla/5.0",
            url="https://example.com/cart?id=1",
            query_string="?id=1",
            protocol="https:",
        )
    """

    def __init__(
        self,
        user_agent: str = "",
        language: Optional[str] = None,
        cookie_enabled: bool = False,
        screen_width: int = 0,
        screen_height: int = 0,
        protocol: str = "https:",
        url: str = "",
        query_string: str = "",
        plugins: Optional[List[Dict[str, Any]]] = None,
    ):
        self.user_agent = user_agent
        self.language = language
        self.cookie_enabled = cookie_enabled
        self.screen_width = screen_width
        self.screen_height = screen_height
        self.protocol = protocol
        self.url = url
        self.query_string = query_string
        self._plugins = list(plugins or [])

    def plugins(self) -> List[Dict[str, Any]]:
        return [dict(p) for p in self._plugins]


class ProcessEnvironmentProbe(EnvironmentProbe):
    """
    Probe describing the running Python process.

    The interpreter and OS stand in for the user agent, the terminal size
    for the screen, and installed distributions for the plugin list.
    """

    def __init__(self, url: str = "", query_string: str = "", protocol: str = "https:"):
        self.url = url
        self.query_string = query_string
        self.protocol = protocol
        self.user_agent = (
            f"{platform.python_implementation()}/{platform.python_version()} "
            f"({platform.system()} {platform.release()})"
        )
        self.language = locale.getlocale()[0]
        size = shutil.get_terminal_size(fallback=(0, 0))
        self.screen_width = size.columns
        self.screen_height = size.lines

    def plugins(self) -> List[Dict[str, Any]]:
        plugins = []
        for dist in metadata.distributions():
            name = dist.metadata.get("Name")
            if not name:
                continue
            plugins.append({
                "name": name,
                "description": dist.metadata.get("Summary") or "",
            })
        plugins.sort(key=lambda p: p["name"].lower())
        return plugins
