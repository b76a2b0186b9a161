"""Pod checks: node rotation, pod condition timings, selectors and HTTP retry rules."""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Any

__all__ = [
    "NAME_LABEL",
    "POD_CHECK_SELECTOR",
    "POD_GENERAL_SELECTOR",
    "DEFAULT_HTTP_TIMEOUT",
    "DEFAULT_INGRESS_TIMEOUT",
    "DEFAULT_RETRY_INTERVAL",
    "HttpTimeouts",
    "next_node",
    "condition_diff",
    "pod_check_selector_value",
    "pod_check_selector",
    "pod_fail_message",
    "should_retry_status",
]

NAME_LABEL = "kubernetes.io/metadata.name"
POD_CHECK_SELECTOR = "canary-checker.flanksource.com/podCheck"
POD_GENERAL_SELECTOR = "canary-checker.flanksource.com/generated"

DEFAULT_HTTP_TIMEOUT = 5000
DEFAULT_INGRESS_TIMEOUT = 5000
DEFAULT_RETRY_INTERVAL = 750

_SERVICE_UNAVAILABLE = 503
_NOT_FOUND = 404


@dataclass
class HttpTimeouts:
    """Millisecond timeouts for probing a pod over HTTP; zero means the default."""

    http_timeout: int = 0
    ingress_timeout: int = 0
    retry_interval: int = 0

    def __post_init__(self) -> None:
        self.http_timeout = self.http_timeout or DEFAULT_HTTP_TIMEOUT
        self.ingress_timeout = self.ingress_timeout or DEFAULT_INGRESS_TIMEOUT
        self.retry_interval = self.retry_interval or DEFAULT_RETRY_INTERVAL

    @property
    def retry(self) -> timedelta:
        """Pause between attempts."""
        return timedelta(milliseconds=self.retry_interval)

    @property
    def hard_timeout(self) -> int:
        """The larger of the HTTP and ingress timeouts."""
        return max(self.http_timeout, self.ingress_timeout)

    def effective_deadline(self, deadline: datetime, now: datetime | None = None) -> datetime:
        """The earlier of ``deadline`` and ``now`` plus the hard timeout counted in seconds."""
        start = now if now is not None else datetime.now(deadline.tzinfo)
        candidate = start + timedelta(seconds=self.hard_timeout)
        return candidate if candidate < deadline else deadline


def next_node(node_names: Iterable[str], last_index: int) -> tuple[str, int]:
    """Pick the node after ``last_index`` in name order, wrapping around.

    Raises ValueError when there are no nodes.
    """
    names = sorted(node_names)
    if not names:
        raise ValueError("no nodes available")
    index = (last_index + 1) % len(names)
    return names[index], index


def condition_diff(times: Mapping[str, datetime], first: str, second: str) -> int:
    """Milliseconds from condition ``first`` to ``second``, or -1 if either is missing."""
    if first not in times or second not in times:
        return -1
    return int((times[second] - times[first]) / timedelta(milliseconds=1))


def pod_check_selector_value(name: str, namespace: str) -> str:
    """The label value that marks resources belonging to a pod check."""
    return f"{name}.{namespace}"


def pod_check_selector(name: str, namespace: str) -> str:
    """The label selector matching resources belonging to a pod check."""
    return f"{POD_CHECK_SELECTOR}={pod_check_selector_value(name, namespace)}"


def pod_fail_message(phase: str, container_statuses: Iterable[Mapping[str, Any]]) -> str:
    """Describe why a pod is not running, from its phase and waiting containers.

    Container statuses follow the Kubernetes shape: ``name``, ``ready`` and
    ``state.waiting.{message,reason}``. A running pod gives an empty string.
    """
    if phase == "Running":
        return ""
    messages = []
    for status in container_statuses:
        waiting = (status.get("state") or {}).get("waiting")
        if not status.get("ready", False) and waiting is not None:
            messages.append(
                f"[container={status.get('name', '')} "
                f"message={waiting.get('message', '')} reason={waiting.get('reason', '')}]"
            )
    return f"podPhase={phase} {' '.join(messages)}"


def should_retry_status(status: int, expected: Iterable[int]) -> bool:
    """Whether a response status means the pod is not reachable yet.

    An unexpected 503 is retried, and so is any 404.
    """
    found = status in set(expected)
    return (not found and status == _SERVICE_UNAVAILABLE) or status == _NOT_FOUND