"""FuzzyURL — URL equality that ignores the domain and TLD of the host.

A FuzzyURL keeps only what matters for matching an intercept rule:

- scheme (exact)
- subdomain label (the leading host label; domain + TLD are dropped)
- path (exact, no trailing-slash normalization)
- query (key order ignored, per-key value order and duplicates kept)

So ``https://abc.domain.com/path`` and ``https://abc.domain.local/path``
compare equal, which lets one rule set serve dev, staging and production.

Subdomain extraction uses ``google-re2``, whose word class is ASCII-only.
"""

from __future__ import annotations

import ipaddress
from dataclasses import dataclass, field
from typing import TypeAlias
from urllib.parse import unquote_plus, urlsplit

import re2

# Anchored prefix match: "a.b.c.d" yields "a", "domain.com" yields nothing.
SUBDOMAIN_PATTERN = r"^([\w-]+)\.\w+\.\w+"

_SUBDOMAIN_RE = re2.compile(SUBDOMAIN_PATTERN)

QueryItems: TypeAlias = tuple[tuple[str, tuple[str, ...]], ...]


class InvalidURLError(ValueError):
    """A string could not be parsed into scheme, host, path and query."""

    def __init__(self, url: object, reason: str) -> None:
        self.url = url
        self.reason = reason
        super().__init__(f"invalid url {url!r}: {reason}")


@dataclass(frozen=True, slots=True)
class FuzzyURL:
    """A URL reduced to its comparison-relevant fields.

    Equality is plain value equality over (scheme, subdomain, path, query).
    ``host`` is carried for diagnostics only and never compared.

    INV: equality is symmetric and never looks at domain + TLD.
    """

    scheme: str
    subdomain: str | None
    path: str
    query: QueryItems = ()
    host: str = field(default="", compare=False)

    @classmethod
    def parse(cls, raw_url: str) -> FuzzyURL:
        """Parse a full URL string.

        Raises:
            InvalidURLError: If no scheme/host structure can be recovered.
        """
        if not isinstance(raw_url, str):
            raise InvalidURLError(raw_url, f"expected str, got {type(raw_url).__name__}")

        try:
            parts = urlsplit(raw_url)
        except ValueError as e:
            raise InvalidURLError(raw_url, str(e)) from e

        if not parts.scheme:
            raise InvalidURLError(raw_url, "missing scheme")

        host = _host_from_netloc(parts.netloc)
        if not host:
            raise InvalidURLError(raw_url, "missing host")

        return cls(
            scheme=parts.scheme,
            subdomain=extract_subdomain(host),
            path=parts.path,
            query=parse_query(parts.query),
            host=host,
        )

    @property
    def query_params(self) -> dict[str, list[str]]:
        """Query as a mapping of key to list of values."""
        return {key: list(values) for key, values in self.query}


def parse_url(raw_url: str) -> FuzzyURL:
    """Shorthand for FuzzyURL.parse()."""
    return FuzzyURL.parse(raw_url)


def fuzzy_equals(a: FuzzyURL, b: FuzzyURL) -> bool:
    """True iff scheme, subdomain, path and query all agree."""
    return (
        a.scheme == b.scheme
        and a.subdomain == b.subdomain
        and a.path == b.path
        and a.query == b.query
    )


def extract_subdomain(host: str) -> str | None:
    """Return the leading label of a ``label.domain.tld`` host, or None.

    Hosts with fewer than three labels and IP literals have no subdomain.
    """
    if _is_ip_literal(host):
        return None
    m = _SUBDOMAIN_RE.match(host)
    if m is None:
        return None
    return m.group(1)


def parse_query(query: str) -> QueryItems:
    """Decode a raw query string into key-sorted ``(key, values)`` pairs.

    Values for a repeated key keep their order of appearance. A bare key
    (``?a``) has no values, unlike an empty one (``?a=``). Bytes that are
    not valid UTF-8 survive as surrogate escapes, so distinct escapes stay
    distinct.
    """
    grouped: dict[str, list[str]] = {}
    for part in query.split("&"):
        if not part:
            continue
        key, sep, value = part.partition("=")
        values = grouped.setdefault(_unquote(key), [])
        if sep:
            values.append(_unquote(value))
    return tuple(sorted((key, tuple(values)) for key, values in grouped.items()))


def _unquote(s: str) -> str:
    return unquote_plus(s, encoding="utf-8", errors="surrogateescape")


def _host_from_netloc(netloc: str) -> str:
    """Strip userinfo, port and IPv6 brackets without changing case."""
    hostport = netloc.rpartition("@")[2]
    if hostport.startswith("["):
        return hostport[1 : hostport.find("]")]
    return hostport.partition(":")[0]


def _is_ip_literal(host: str) -> bool:
    try:
        ipaddress.ip_address(host)
    except ValueError:
        return False
    return True
