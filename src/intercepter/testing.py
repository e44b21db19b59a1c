"""Test utilities for intercepter.

Provides a recording WSGI application and an environ builder for
exercising InterceptMiddleware without a server. These are NOT production
adapters.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any
from urllib.parse import unquote, urlsplit
from wsgiref.util import setup_testing_defaults

if TYPE_CHECKING:
    from collections.abc import Callable


@dataclass(slots=True)
class RecordingApp:
    """WSGI app that records every environ it receives.

    >>> from intercepter.testing import RecordingApp, make_environ
    >>> app = RecordingApp()
    >>> app(make_environ("GET", "http://example.com/"), lambda s, h: None)
    [b'downstream']
    >>> len(app.calls)
    1
    """

    status: str = "200 OK"
    headers: list[tuple[str, str]] = field(
        default_factory=lambda: [("Content-Type", "text/plain")]
    )
    body: bytes = b"downstream"
    calls: list[dict[str, Any]] = field(default_factory=list)

    def __call__(
        self, environ: dict[str, Any], start_response: Callable[..., Any]
    ) -> list[bytes]:
        self.calls.append(environ)
        start_response(self.status, list(self.headers))
        return [self.body]


def make_environ(method: str, url: str, **extra: Any) -> dict[str, Any]:
    """Build a minimal WSGI environ for a request to ``url``."""
    parts = urlsplit(url)
    environ: dict[str, Any] = {
        "REQUEST_METHOD": method,
        "wsgi.url_scheme": parts.scheme or "http",
        "HTTP_HOST": parts.netloc,
        "SCRIPT_NAME": "",
        "PATH_INFO": unquote(parts.path or "/", encoding="latin-1"),
        "QUERY_STRING": parts.query,
    }
    environ.update(extra)
    setup_testing_defaults(environ)
    return environ


@dataclass(slots=True)
class StartResponseRecorder:
    """Callable standing in for WSGI start_response."""

    status: str | None = None
    headers: list[tuple[str, str]] | None = None

    def __call__(
        self, status: str, headers: list[tuple[str, str]], exc_info: Any = None
    ) -> None:
        self.status = status
        self.headers = headers
