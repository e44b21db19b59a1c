"""HttpRequest — the (method, url) pair the registry matches on.

Built from a WSGI environ: the full URL is reconstructed from the scheme,
host, script name, path info and query string.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Any
from urllib.parse import quote

if TYPE_CHECKING:
    from collections.abc import Mapping

# RFC 3986 pchar sub-delims plus ":" "@" and the segment separator.
PATH_SAFE = "/:@!$&'()*+,;="

# Request-target as sent by the client, set by gunicorn and most CGI servers.
_RAW_URI_KEYS = ("RAW_URI", "REQUEST_URI")

_DEFAULT_PORTS = {"http": "80", "https": "443"}


@dataclass(frozen=True, slots=True)
class HttpRequest:
    """HTTP request context for matching.

    The method is kept as sent (case-sensitive). The url is the full URL
    including scheme, host and query string.
    """

    method: str
    url: str

    @classmethod
    def from_environ(cls, environ: Mapping[str, Any]) -> HttpRequest:
        """Build a request from a WSGI environ."""
        return cls(
            method=environ.get("REQUEST_METHOD", "GET"),
            url=request_url(environ),
        )


def request_url(environ: Mapping[str, Any]) -> str:
    """Rebuild the full request URL from a WSGI environ.

    The raw request-target (RAW_URI or REQUEST_URI) is used verbatim when
    the server provides an origin-form one. Otherwise SCRIPT_NAME and
    PATH_INFO are re-quoted, leaving every legal path character as is.
    Uses HTTP_HOST when present, SERVER_NAME and SERVER_PORT otherwise.
    """
    base = _origin(environ)

    for key in _RAW_URI_KEYS:
        raw = environ.get(key)
        if raw and raw.startswith("/"):
            return base + raw

    path = environ.get("SCRIPT_NAME", "") + environ.get("PATH_INFO", "")
    url = base + quote(path or "/", safe=PATH_SAFE, encoding="latin-1")
    query = environ.get("QUERY_STRING")
    if query:
        url += "?" + query
    return url


def _origin(environ: Mapping[str, Any]) -> str:
    scheme = environ.get("wsgi.url_scheme", "http")
    host = environ.get("HTTP_HOST")
    if not host:
        host = environ.get("SERVER_NAME", "")
        port = environ.get("SERVER_PORT", "")
        if port and port != _DEFAULT_PORTS.get(scheme):
            host += ":" + port
    return f"{scheme}://{host}"
