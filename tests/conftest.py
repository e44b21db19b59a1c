"""Conformance fixture loader for intercepter.

Loads YAML fixtures from tests/fixtures/ and converts them to intercepter
types for parametrized testing. Handles both the FuzzyURL equality format
(fuzzy_url.yaml) and the registry lookup format (registry.yaml).
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Any

import yaml

from intercepter import FuzzyURL, InterceptRegistry, Response

FIXTURE_DIR = Path(__file__).resolve().parent / "fixtures"


@dataclass
class FuzzyURLCase:
    """A single FuzzyURL equality case."""

    fixture_name: str
    case_name: str
    a: FuzzyURL
    b: FuzzyURL
    equal: bool


@dataclass
class RegistryCase:
    """A single registry lookup case."""

    fixture_name: str
    case_name: str
    registry: InterceptRegistry
    method: str
    url: str
    expect: Response | None


# ─── Fixture loading ────────────────────────────────────────────────────────


def _load_documents(name: str) -> list[dict[str, Any]]:
    """Load every non-empty YAML document from a fixture file."""
    with (FIXTURE_DIR / name).open() as f:
        return [doc for doc in yaml.safe_load_all(f) if doc is not None]


def load_fuzzy_url_fixtures() -> list[FuzzyURLCase]:
    """Load all FuzzyURL equality fixtures."""
    cases: list[FuzzyURLCase] = []
    for doc in _load_documents("fuzzy_url.yaml"):
        for case in doc["cases"]:
            cases.append(
                FuzzyURLCase(
                    fixture_name=doc["name"],
                    case_name=case["name"],
                    a=FuzzyURL.parse(case["a"]),
                    b=FuzzyURL.parse(case["b"]),
                    equal=case["equal"],
                )
            )
    return cases


def load_registry_fixtures() -> list[RegistryCase]:
    """Load all registry lookup fixtures."""
    cases: list[RegistryCase] = []
    for doc in _load_documents("registry.yaml"):
        registry = InterceptRegistry(doc["rules"])
        for case in doc["cases"]:
            cases.append(
                RegistryCase(
                    fixture_name=doc["name"],
                    case_name=case["name"],
                    registry=registry,
                    method=case["method"],
                    url=case["url"],
                    expect=_parse_expect(case["expect"]),
                )
            )
    return cases


def _parse_expect(spec: dict[str, Any] | None) -> Response | None:
    """Parse a YAML expect spec into a Response."""
    if spec is None:
        return None
    return Response(
        status=spec["status"],
        headers={str(k): str(v) for k, v in spec.get("headers", {}).items()},
        body=spec["body"],
    )
