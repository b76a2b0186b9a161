import pytest

from canarykit.kubernetes import (
    HEALTHY,
    ResourceHealth,
    filter_resources,
    health_failures,
    resolve_namespaces,
)


def _resource(name, kind="Pod", namespace="default"):
    return {"kind": kind, "metadata": {"name": name, "namespace": namespace}}


NAMES = ["web-1", "web-2", "db-1", "cache"]


def _names(resources):
    return [r["metadata"]["name"] for r in resources]


def test_filter_star_glob():
    resources = [_resource(n) for n in NAMES]
    assert _names(filter_resources(resources, "web-*")) == ["db-1", "cache"]


def test_filter_question_mark():
    resources = [_resource(n) for n in NAMES]
    assert _names(filter_resources(resources, "db-?")) == ["web-1", "web-2", "cache"]


def test_filter_alternatives():
    resources = [_resource(n) for n in NAMES]
    assert _names(filter_resources(resources, "{db,cache}*")) == ["web-1", "web-2"]


def test_filter_character_class():
    resources = [_resource(n) for n in NAMES]
    assert _names(filter_resources(resources, "web-[1]")) == ["web-2", "db-1", "cache"]


def test_filter_negated_character_class():
    resources = [_resource(n) for n in NAMES]
    assert _names(filter_resources(resources, "web-[!1]")) == ["web-1", "db-1", "cache"]


def test_filter_exact_name_only_full_match():
    resources = [_resource(n) for n in NAMES]
    assert _names(filter_resources(resources, "web")) == NAMES


def test_filter_keeps_order_and_is_subset():
    resources = [_resource(n) for n in NAMES]
    kept = filter_resources(resources, "*-1")
    assert all(r in resources for r in kept)
    assert _names(kept) == ["web-2", "cache"]


def test_filter_invalid_glob():
    with pytest.raises(ValueError, match="failed to compile glob"):
        filter_resources([_resource("a")], "web-[1")


def test_filter_unclosed_braces():
    with pytest.raises(ValueError, match="failed to compile glob"):
        filter_resources([_resource("a")], "{a,b")


def test_resolve_named_namespace():
    assert resolve_namespaces("kube-system", "app=x", "") == ["kube-system"]


def test_resolve_all_namespaces():
    assert resolve_namespaces("", "", "") == [""]


def test_resolve_needs_cluster_with_selector():
    assert resolve_namespaces("", "team=a", "") is None
    assert resolve_namespaces("", "", "metadata.name=x") is None


def test_health_failures_none_when_healthy_and_ready():
    health = ResourceHealth(health=HEALTHY, ready=True, status="Running")
    assert health_failures(_resource("web-1"), health, True, True) == []


def test_health_failures_unhealthy():
    health = ResourceHealth(health="unhealthy", ready=True, status="CrashLoop", message="boom")
    assert health_failures(_resource("web-1"), health, True, False) == [
        "Pod/default/web-1 is not healthy (health: unhealthy, status: CrashLoop): boom"
    ]


def test_health_failures_not_ready():
    health = ResourceHealth(health=HEALTHY, ready=False, status="Pending", message="waiting")
    assert health_failures(_resource("web-1"), health, False, True) == [
        "Pod/default/web-1 is not ready (status: Pending): waiting"
    ]


def test_health_failures_ignored_when_not_required():
    health = ResourceHealth(health="unhealthy", ready=False)
    assert health_failures(_resource("web-1"), health, False, False) == []


def test_health_failures_both():
    health = ResourceHealth(health="degraded", ready=False, status="s", message="m")
    assert len(health_failures(_resource("x"), health, True, True)) == 2


def test_resource_health_to_dict_round_trip():
    health = ResourceHealth(health=HEALTHY, ready=True, status="Running", message="ok")
    assert ResourceHealth(**health.to_dict()) == health