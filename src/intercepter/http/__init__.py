"""intercepter.http — WSGI integration.

Provides the HttpRequest context built from a WSGI environ and the
InterceptMiddleware that short-circuits matching requests.
"""

from intercepter.http._middleware import InterceptMiddleware, status_line
from intercepter.http._request import HttpRequest, request_url

__all__ = [
    # Context
    "HttpRequest",
    "request_url",
    # Middleware
    "InterceptMiddleware",
    "status_line",
]
