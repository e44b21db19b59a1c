"""WSGI middleware that answers intercepted requests with canned responses.

Requests matching a rule never reach the wrapped application; everything
else is passed through untouched.
"""

from __future__ import annotations

import logging
from http import HTTPStatus
from typing import TYPE_CHECKING, Any, TypeAlias

from intercepter._registry import InterceptRegistry
from intercepter.http._request import HttpRequest

if TYPE_CHECKING:
    from collections.abc import Callable, Iterable

    from intercepter._config import Response

    StartResponse: TypeAlias = Callable[..., Any]
    WSGIApp: TypeAlias = Callable[[dict[str, Any], "StartResponse"], Iterable[bytes]]

logger = logging.getLogger(__name__)


class InterceptMiddleware:
    """Wrap a WSGI application with an intercept registry.

    ``rules`` is an InterceptRegistry or anything InterceptRegistry accepts.
    The registry is built here, once; malformed rules raise ConfigError
    before the first request is served.
    """

    def __init__(self, app: WSGIApp, rules: Any) -> None:
        self.app = app
        if isinstance(rules, InterceptRegistry):
            self.registry = rules
        else:
            self.registry = InterceptRegistry(rules)

    def __call__(
        self, environ: dict[str, Any], start_response: StartResponse
    ) -> Iterable[bytes]:
        request = HttpRequest.from_environ(environ)
        response = self.registry.match(request.method, request.url)
        if response is None:
            return self.app(environ, start_response)

        logger.debug(
            "intercepted %s %s -> %d", request.method, request.url, response.status
        )
        return _respond(response, start_response)


def status_line(status: int) -> str:
    """Format a WSGI status line, e.g. ``"403 Forbidden"``."""
    try:
        phrase = HTTPStatus(status).phrase
    except ValueError:
        phrase = "Unknown"
    return f"{status} {phrase}"


def _respond(response: Response, start_response: StartResponse) -> list[bytes]:
    start_response(status_line(response.status), list(response.headers.items()))
    return [response.body.encode("utf-8")]
