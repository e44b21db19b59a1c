"""intercepter — short-circuit HTTP requests with canned responses.

Rules match on HTTP method and a fuzzy URL that ignores the domain and TLD
of the host, so one rule set serves every environment. All public types are
exported from this module for flat imports:

    from intercepter import InterceptRegistry, Rule, FuzzyURL
"""

__version__ = "0.1.0"

# Config types, see intercepter._config for details
from intercepter._config import (
    MAX_STATUS,
    MIN_STATUS,
    ConfigError,
    Response,
    Rule,
    coerce_rule,
    coerce_rules,
    load_rules_file,
    parse_rules_config,
)

# URL matching
from intercepter._fuzzy_url import (
    SUBDOMAIN_PATTERN,
    FuzzyURL,
    InvalidURLError,
    extract_subdomain,
    fuzzy_equals,
    parse_query,
    parse_url,
)

# Registry
from intercepter._registry import InterceptRegistry

__all__ = [
    # URL matching
    "FuzzyURL",
    "InvalidURLError",
    "extract_subdomain",
    "fuzzy_equals",
    "parse_query",
    "parse_url",
    "SUBDOMAIN_PATTERN",
    # Config types
    "Rule",
    "Response",
    "ConfigError",
    "coerce_rule",
    "coerce_rules",
    "parse_rules_config",
    "load_rules_file",
    "MIN_STATUS",
    "MAX_STATUS",
    # Registry
    "InterceptRegistry",
]
