"""InterceptRegistry — ordered rules with first-match-wins lookup.

The registry is built once at startup and is immutable afterwards, so a
single instance can be shared by every request-handling thread or task.

Example::

    registry = InterceptRegistry([
        ("GET", "https://abc.domain.com/path?param=value", 403, {}, "Forbidden"),
    ])
    registry.match("GET", "https://abc.domain.local/path?param=value")
    # Response(status=403, headers={}, body='Forbidden')
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

from intercepter._config import Rule, coerce_rules
from intercepter._fuzzy_url import FuzzyURL, InvalidURLError

if TYPE_CHECKING:
    from collections.abc import Iterator

    from intercepter._config import Response

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True, init=False)
class InterceptRegistry:
    """Immutable, ordered collection of intercept rules.

    Accepts any sequence of rule inputs (tuples, mappings, Rule instances).
    Configuration order is preserved and significant.

    Unparsable request URLs never match: lookups fail open so the request
    is passed through to the wrapped application.

    INV: first match wins; later rules are never consulted.

    Raises:
        ConfigError: If the rules are malformed (at construction time).
    """

    rules: tuple[Rule, ...]

    def __init__(self, rules: Any = ()) -> None:
        object.__setattr__(self, "rules", coerce_rules(rules))
        logger.info("intercept registry built with %d rule(s)", len(self.rules))

    def __len__(self) -> int:
        return len(self.rules)

    def __iter__(self) -> Iterator[Rule]:
        return iter(self.rules)

    def find(self, method: str, url: str) -> Rule | None:
        """Return the first rule matching (method, url), or None."""
        if not self.rules:
            return None
        try:
            request_url = FuzzyURL.parse(url)
        except InvalidURLError as e:
            logger.warning("not intercepting %s %r: %s", method, url, e.reason)
            return None

        for rule in self.rules:
            if rule.matches(method, request_url):
                return rule
        return None

    def match(self, method: str, url: str) -> Response | None:
        """Return the canned response for (method, url), or None to pass through."""
        rule = self.find(method, url)
        if rule is None:
            return None
        return rule.response
