"""Rule configuration — rule records, coercion and config loading.

A rule pairs a (method, URL pattern) predicate with a canned response.
Rules come from static configuration in any of these shapes:

| Input shape                                  | Example                               |
|----------------------------------------------|---------------------------------------|
| 3-to-5 element sequence                      | ("GET", "https://a.b.com/x", 404)     |
| mapping with method/url/status[/headers/body] | {"method": "GET", "url": ..., ...}    |
| Rule instance                                | Rule("GET", "https://a.b.com/x", 404) |

Config-document loading path:
  YAML/JSON file → load_rules_file() → parse_rules_config() → tuple[Rule, ...]

Every failure raises ConfigError. Configuration is validated once at
startup and never at request time.
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from dataclasses import dataclass, field
from pathlib import Path
from types import MappingProxyType
from typing import TYPE_CHECKING, Any

import yaml

from intercepter._fuzzy_url import FuzzyURL, InvalidURLError

if TYPE_CHECKING:
    from collections.abc import Iterator
    from os import PathLike

MIN_STATUS = 100
MAX_STATUS = 599

_RULE_FIELDS = ("method", "url", "status", "headers", "body")
_REQUIRED_FIELDS = frozenset({"method", "url", "status"})


class ConfigError(Exception):
    """Rule configuration is malformed. Fatal at startup."""


# ═══════════════════════════════════════════════════════════════════════════════
# Rule types
# ═══════════════════════════════════════════════════════════════════════════════


@dataclass(frozen=True, slots=True)
class Response:
    """Canned response returned for an intercepted request.

    Unpacks like the (status, headers, body) triple it stands for.
    """

    status: int
    headers: Mapping[str, str] = field(hash=False)
    body: str

    def __iter__(self) -> Iterator[Any]:
        return iter((self.status, self.headers, self.body))


@dataclass(frozen=True, slots=True)
class Rule:
    """One interception case: (method, url, status, headers, body).

    Defaults are resolved once at construction time:
    - headers -> empty mapping
    - body -> "STATUS {status}" when missing or empty

    The URL pattern is parsed into a FuzzyURL here, so an unparsable
    pattern fails at startup rather than on the first request.

    Raises:
        ConfigError: If any field is missing or has the wrong type.
    """

    method: str
    url: str
    status: int
    headers: Mapping[str, str] | None = field(default=None, hash=False)
    body: str | None = None
    pattern: FuzzyURL = field(init=False, repr=False, compare=False)
    response: Response = field(init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        if not isinstance(self.method, str) or not self.method:
            msg = f"'method' must be a non-empty string, got {self.method!r}"
            raise ConfigError(msg)
        if not isinstance(self.url, str) or not self.url:
            msg = f"'url' must be a non-empty string, got {self.url!r}"
            raise ConfigError(msg)
        if (
            not isinstance(self.status, int)
            or isinstance(self.status, bool)
            or not MIN_STATUS <= self.status <= MAX_STATUS
        ):
            msg = f"'status' must be an HTTP status code, got {self.status!r}"
            raise ConfigError(msg)

        headers = _freeze_headers(self.headers)
        body = self.body if self.body else f"STATUS {self.status}"
        if not isinstance(body, str):
            msg = f"'body' must be a string, got {type(body).__name__}"
            raise ConfigError(msg)

        try:
            pattern = FuzzyURL.parse(self.url)
        except InvalidURLError as e:
            raise ConfigError(f"'url' is not a valid URL: {e.reason}") from e

        object.__setattr__(self, "headers", headers)
        object.__setattr__(self, "body", body)
        object.__setattr__(self, "pattern", pattern)
        object.__setattr__(self, "response", Response(self.status, headers, body))

    def matches(self, method: str, url: FuzzyURL) -> bool:
        """Check method (case-sensitive) and fuzzy URL equality."""
        return self.method == method and self.pattern == url


def _freeze_headers(headers: Any) -> Mapping[str, str]:
    if headers is None:
        return MappingProxyType({})
    if not isinstance(headers, Mapping):
        msg = f"'headers' must be a mapping, got {type(headers).__name__}"
        raise ConfigError(msg)
    for name, value in headers.items():
        if not isinstance(name, str) or not isinstance(value, str):
            msg = f"header {name!r} must map a string to a string, got {value!r}"
            raise ConfigError(msg)
    return MappingProxyType(dict(headers))


# ═══════════════════════════════════════════════════════════════════════════════
# Coercion (rule inputs → Rule)
# ═══════════════════════════════════════════════════════════════════════════════


def coerce_rule(value: Any, index: int | None = None) -> Rule:
    """Build a Rule from a sequence, mapping, or existing Rule.

    Raises:
        ConfigError: If the value has the wrong shape or invalid fields.
    """
    where = "rule" if index is None else f"rule {index}"

    if isinstance(value, Rule):
        return value

    try:
        if isinstance(value, Mapping):
            return _rule_from_mapping(value)
        if isinstance(value, Sequence) and not isinstance(value, (str, bytes)):
            if not 3 <= len(value) <= len(_RULE_FIELDS):
                msg = (
                    "expected (method, url, status[, headers[, body]]), "
                    f"got {len(value)} elements"
                )
                raise ConfigError(msg)
            return Rule(*value)
    except ConfigError as e:
        raise ConfigError(f"{where}: {e}") from e

    msg = f"{where}: expected a sequence, mapping or Rule, got {type(value).__name__}"
    raise ConfigError(msg)


def coerce_rules(values: Any) -> tuple[Rule, ...]:
    """Build rules from an ordered sequence of rule inputs.

    Order is preserved; it decides which rule wins when several match.

    Raises:
        ConfigError: If values is not a sequence or any element is invalid.
    """
    if not isinstance(values, Sequence) or isinstance(values, (str, bytes)):
        msg = f"rules must be a sequence, got {type(values).__name__}"
        raise ConfigError(msg)
    return tuple(coerce_rule(v, i) for i, v in enumerate(values))


def _rule_from_mapping(data: Mapping[Any, Any]) -> Rule:
    missing = _REQUIRED_FIELDS - set(data.keys())
    if missing:
        msg = f"missing required field(s): {', '.join(sorted(missing))}"
        raise ConfigError(msg)
    unknown = set(data.keys()) - set(_RULE_FIELDS)
    if unknown:
        msg = f"unknown field(s): {', '.join(sorted(map(str, unknown)))}"
        raise ConfigError(msg)
    return Rule(**data)


# ═══════════════════════════════════════════════════════════════════════════════
# Parsing (dict / file → rules)
# ═══════════════════════════════════════════════════════════════════════════════


def parse_rules_config(data: Any) -> tuple[Rule, ...]:
    """Parse a ``{"rules": [...]}`` document into rules.

    Each entry must be a mapping with method, url, status and optional
    headers and body.

    Raises:
        ConfigError: If the document is malformed.
    """
    if not isinstance(data, Mapping):
        msg = f"expected dict, got {type(data).__name__}"
        raise ConfigError(msg)

    raw_rules = data.get("rules")
    if raw_rules is None:
        msg = "missing required field 'rules'"
        raise ConfigError(msg)
    if not isinstance(raw_rules, list):
        msg = f"'rules' must be a list, got {type(raw_rules).__name__}"
        raise ConfigError(msg)

    for i, entry in enumerate(raw_rules):
        if not isinstance(entry, Mapping):
            msg = f"rule {i}: must be a dict, got {type(entry).__name__}"
            raise ConfigError(msg)

    return coerce_rules(raw_rules)


def load_rules_file(path: str | PathLike[str]) -> tuple[Rule, ...]:
    """Load rules from a YAML (or JSON) file.

    Raises:
        ConfigError: If the file cannot be read or parsed.
    """
    path = Path(path)
    try:
        with path.open(encoding="utf-8") as f:
            data = yaml.safe_load(f)
    except OSError as e:
        msg = f"cannot read rules file {str(path)!r}: {e}"
        raise ConfigError(msg) from e
    except yaml.YAMLError as e:
        msg = f"malformed rules file {str(path)!r}: {e}"
        raise ConfigError(msg) from e

    try:
        return parse_rules_config(data)
    except ConfigError as e:
        raise ConfigError(f"{path}: {e}") from e
