"""Building blocks for synthetic health checks: folders, DNS, JUnit, JMeter, metrics and Kubernetes helpers."""

__version__ = "0.1.0"

__all__ = [
    "dns",
    "folder",
    "jmeter",
    "junit",
    "junit_pod",
    "kubernetes",
    "metrics",
    "paths",
    "pods",
    "resources",
]