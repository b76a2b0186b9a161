"""Kubernetes resource checks: ignore globs, namespace selection and health judgement."""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Any

__all__ = [
    "HEALTHY",
    "ResourceHealth",
    "filter_resources",
    "resolve_namespaces",
    "health_failures",
]

HEALTHY = "healthy"


@dataclass(frozen=True)
class ResourceHealth:
    """Health of a Kubernetes resource as judged from its status."""

    health: str = "unknown"
    ready: bool = False
    status: str = ""
    message: str = ""

    def to_dict(self) -> dict[str, Any]:
        return {
            "health": self.health,
            "ready": self.ready,
            "status": self.status,
            "message": self.message,
        }


def _compile_glob(pattern: str) -> re.Pattern[str]:
    parts: list[str] = []
    depth = 0
    chars = iter(pattern)
    for char in chars:
        if char == "\\":
            escaped = next(chars, None)
            if escaped is None:
                raise ValueError("unexpected end of pattern after escape")
            parts.append(re.escape(escaped))
        elif char == "*":
            parts.append(".*")
        elif char == "?":
            parts.append(".")
        elif char == "[":
            body: list[str] = []
            for inner in chars:
                if inner == "]":
                    break
                body.append(inner)
            else:
                raise ValueError("unclosed character class")
            negate = bool(body) and body[0] == "!"
            if negate:
                body = body[1:]
            if not body:
                raise ValueError("empty character class")
            text = "".join(c if c == "-" else re.escape(c) for c in body)
            parts.append(f"[{'^' if negate else ''}{text}]")
        elif char == "{":
            depth += 1
            parts.append("(?:")
        elif char == "}" and depth:
            depth -= 1
            parts.append(")")
        elif char == "," and depth:
            parts.append("|")
        else:
            parts.append(re.escape(char))
    if depth:
        raise ValueError("unclosed alternatives")
    return re.compile("".join(parts), re.DOTALL)


def _metadata(resource: dict[str, Any]) -> dict[str, Any]:
    return resource.get("metadata") or {}


def filter_resources(resources: list[dict[str, Any]], pattern: str) -> list[dict[str, Any]]:
    """Drop the resources whose name matches the ignore glob.

    Raises ValueError when the glob cannot be compiled.
    """
    try:
        matcher = _compile_glob(pattern)
    except ValueError as err:
        raise ValueError(f"failed to compile glob: {err}") from err
    return [
        resource
        for resource in resources
        if not matcher.fullmatch(_metadata(resource).get("name", ""))
    ]


def resolve_namespaces(
    name: str, label_selector: str, field_selector: str
) -> list[str] | None:
    """Namespaces to search without asking the cluster.

    A named namespace is searched alone; with no selectors every namespace is
    searched (given as ``[""]``). None means the namespaces must be listed from
    the cluster using the selectors.
    """
    if name:
        return [name]
    if not field_selector and not label_selector:
        return [""]
    return None


def health_failures(
    resource: dict[str, Any],
    health: ResourceHealth,
    require_healthy: bool,
    require_ready: bool,
) -> list[str]:
    """Messages for each health requirement the resource does not meet."""
    metadata = _metadata(resource)
    ident = f"{resource.get('kind', '')}/{metadata.get('namespace', '')}/{metadata.get('name', '')}"
    failures = []
    if require_healthy and health.health != HEALTHY:
        failures.append(
            f"{ident} is not healthy (health: {health.health}, status: {health.status}): "
            f"{health.message}"
        )
    if require_ready and not health.ready:
        failures.append(f"{ident} is not ready (status: {health.status}): {health.message}")
    return failures