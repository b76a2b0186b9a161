"""Kubernetes resource checks: ownership labels, selectors, wait and retry settings."""

from __future__ import annotations

import copy
from dataclasses import dataclass
from datetime import timedelta
from typing import Any

from canarykit.folder import parse_duration

__all__ = [
    "DEFAULT_MAX_RESOURCES_ALLOWED",
    "RESOURCE_WAIT_TIMEOUT_DEFAULT",
    "RESOURCE_WAIT_INTERVAL_DEFAULT",
    "WAIT_FOR_EXPR_DEFAULT",
    "WaitFor",
    "CheckRetries",
    "resource_label_key",
    "label_selector",
    "apply_check_labels",
    "validate_resource_count",
]

DEFAULT_MAX_RESOURCES_ALLOWED = 10
RESOURCE_WAIT_TIMEOUT_DEFAULT = timedelta(minutes=10)
RESOURCE_WAIT_INTERVAL_DEFAULT = timedelta(seconds=5)
WAIT_FOR_EXPR_DEFAULT = "dyn(resources).all(r, k8s.isReady(r))"

_LABEL_PREFIX = "canaries.flanksource.com/"


def _duration(spec: str, what: str) -> timedelta:
    try:
        value = parse_duration(spec)
    except ValueError as err:
        raise ValueError(f"invalid {what} ({spec}): {err}") from err
    return value if value is not None else timedelta(0)


def _positive_or(value: timedelta, default: timedelta) -> timedelta:
    return value if value > timedelta(0) else default


@dataclass
class WaitFor:
    """How to wait for applied resources to reach their desired state."""

    expr: str = ""
    disable: bool = False
    delete: bool = False
    timeout_spec: str = ""
    interval_spec: str = ""

    @property
    def expression(self) -> str:
        """The wait expression, falling back to the readiness of every resource."""
        return self.expr or WAIT_FOR_EXPR_DEFAULT

    def timeout(self) -> timedelta:
        """How long to wait in total; the default applies unless a positive value is set.

        Raises ValueError when the timeout cannot be parsed.
        """
        return _positive_or(
            _duration(self.timeout_spec, "wait timeout"), RESOURCE_WAIT_TIMEOUT_DEFAULT
        )

    def interval(self) -> timedelta:
        """How long to pause between attempts; the default applies unless a positive value is set.

        Raises ValueError when the interval cannot be parsed.
        """
        return _positive_or(
            _duration(self.interval_spec, "wait interval"), RESOURCE_WAIT_INTERVAL_DEFAULT
        )


@dataclass
class CheckRetries:
    """Delay and retry settings for the checks run against applied resources.

    Each duration is zero when unset: no initial delay, no retries, no limit.
    """

    delay: str = ""
    interval: str = ""
    timeout: str = ""

    @property
    def initial_delay(self) -> timedelta:
        """Pause before the first attempt. Raises ValueError if unparseable."""
        return _duration(self.delay, "check initial delay")

    @property
    def retry_interval(self) -> timedelta:
        """Pause between retries. Raises ValueError if unparseable."""
        return _duration(self.interval, "check retry interval")

    @property
    def max_duration(self) -> timedelta:
        """Upper bound on the time spent retrying. Raises ValueError if unparseable."""
        return _duration(self.timeout, "check timeout")


def resource_label_key(key: str) -> str:
    """The full label key used to mark resources created by a canary."""
    return f"{_LABEL_PREFIX}{key}"


def label_selector(canary_id: str, check_id: str, delete_static: bool) -> str:
    """Selector for the resources a canary check owns.

    Static resources are excluded unless ``delete_static`` is set.
    """
    selector = f"{resource_label_key('canary-id')}={canary_id}"
    if check_id:
        selector += f",{resource_label_key('check-id')}={check_id}"
    if not delete_static:
        selector += f",!{resource_label_key('is-static')}"
    return selector


def apply_check_labels(
    resource: dict[str, Any], canary_id: str, check_id: str, is_static: bool = False
) -> dict[str, Any]:
    """Return a copy of the resource carrying the canary's ownership labels.

    Existing labels are kept; the ownership labels take precedence.
    """
    labelled = copy.deepcopy(resource)
    metadata = labelled.setdefault("metadata", {})
    labels = dict(metadata.get("labels") or {})
    labels[resource_label_key("canary-id")] = canary_id
    labels[resource_label_key("check-id")] = check_id
    if is_static:
        labels[resource_label_key("is-static")] = "true"
    metadata["labels"] = labels
    return labelled


def validate_resource_count(total: int, max_allowed: int = DEFAULT_MAX_RESOURCES_ALLOWED) -> None:
    """Raise ValueError when a check declares more resources than allowed."""
    if total > max_allowed:
        raise ValueError(f"too many resources ({total}). only {max_allowed} supported")