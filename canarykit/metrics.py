"""Custom check metrics kept in an in-process registry of counters, gauges and histograms."""

from __future__ import annotations

import enum
import logging
import re
import threading
from dataclasses import dataclass, field

__all__ = [
    "MetricType",
    "Metric",
    "MetricsRegistry",
    "label_names",
    "label_string",
]

_log = logging.getLogger(__name__)

_METRIC_NAME = re.compile(r"^[a-zA-Z_:][a-zA-Z0-9_:]*$")
_LABEL_NAME = re.compile(r"^[a-zA-Z_][a-zA-Z0-9_]*$")


class MetricType(str, enum.Enum):
    """Kinds of metric a check may export."""

    HISTOGRAM = "histogram"
    COUNTER = "counter"
    GAUGE = "gauge"


@dataclass
class Metric:
    """A single metric sample produced by a check."""

    name: str
    type: MetricType
    value: float
    labels: dict[str, str] = field(default_factory=dict)


def label_names(labels: dict[str, str]) -> list[str]:
    """The label names in sorted order."""
    return sorted(labels)


def label_string(labels: dict[str, str]) -> str:
    """Render labels as ``{k=v, k=v}`` for log output."""
    return "{" + ", ".join(f"{key}={value}" for key, value in labels.items()) + "}"


def _go_list(items: list[str]) -> str:
    return "[" + " ".join(items) + "]"


@dataclass
class _Collector:
    name: str
    type: MetricType
    label_names: tuple[str, ...]
    series: dict[tuple[str, ...], float | list[float]] = field(default_factory=dict)

    def _key(self, labels: dict[str, str]) -> tuple[str, ...]:
        if set(labels) != set(self.label_names):
            raise KeyError(
                f"labels {_go_list(sorted(labels))} do not match {_go_list(list(self.label_names))}"
            )
        return tuple(labels[name] for name in self.label_names)

    def record(self, labels: dict[str, str], value: float) -> None:
        key = self._key(labels)
        if self.type is MetricType.HISTOGRAM:
            observations = self.series.setdefault(key, [])
            assert isinstance(observations, list)
            observations.append(value)
        elif self.type is MetricType.GAUGE:
            self.series[key] = value
        else:
            current = self.series.get(key, 0.0)
            assert isinstance(current, float)
            self.series[key] = current + value


class MetricsRegistry:
    """Registry of metric collectors, keyed by name, type and label names."""

    def __init__(self) -> None:
        self._collectors: dict[tuple[str, MetricType, tuple[str, ...]], _Collector] = {}
        self._by_name: dict[str, _Collector] = {}
        self._lock = threading.Lock()

    def get_or_add(
        self, name: str, metric_type: str | MetricType, label_names: list[str]
    ) -> _Collector:
        """Return the collector for this metric, creating and registering it if new.

        Raises ValueError for an unknown type, an invalid name or label, or a
        name already registered with another type or other labels.
        """
        try:
            kind = MetricType(metric_type)
        except ValueError:
            raise ValueError(f"unknown metric type {metric_type}") from None
        names = tuple(label_names)
        key = (name, kind, names)
        with self._lock:
            existing = self._collectors.get(key)
            if existing is not None:
                return existing
            if not _METRIC_NAME.match(name):
                raise ValueError(f"{name!r} is not a valid metric name")
            for label in names:
                if not _LABEL_NAME.match(label) or label.startswith("__"):
                    raise ValueError(f"{label!r} is not a valid label name")
            if len(set(names)) != len(names):
                raise ValueError(f"duplicate label names in {_go_list(list(names))}")
            if name in self._by_name:
                raise ValueError(
                    f"a metric named {name} is already registered with different type or labels"
                )
            collector = _Collector(name=name, type=kind, label_names=names)
            self._collectors[key] = collector
            self._by_name[name] = collector
            return collector

    def export(self, metric: Metric) -> None:
        """Record a metric sample; counters ignore values that are not positive.

        Raises ValueError when the metric cannot be created.
        """
        names = label_names(metric.labels)
        try:
            collector = self.get_or_add(metric.name, metric.type, names)
        except ValueError as err:
            kind = metric.type.value if isinstance(metric.type, MetricType) else metric.type
            raise ValueError(
                f"failed to create metric {metric.name} ({kind}) {_go_list(names)}: {err}"
            ) from err

        _log.debug("%s%s=%0.3f", metric.name, label_string(metric.labels), metric.value)

        if collector.type is MetricType.COUNTER and metric.value <= 0:
            return
        with self._lock:
            collector.record(metric.labels, float(metric.value))

    def value(self, name: str, labels: dict[str, str]) -> float | list[float]:
        """Current value of a series: the total or last value, or a histogram's observations.

        Raises KeyError when the metric or series does not exist.
        """
        with self._lock:
            collector = self._by_name[name]
            result = collector.series[collector._key(labels)]
            return list(result) if isinstance(result, list) else result