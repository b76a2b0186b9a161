"""DNS checks: record lookups compared against expected replies."""

from __future__ import annotations

import concurrent.futures
import time
from dataclasses import dataclass, field

import dns.exception
import dns.resolver
import dns.reversename

__all__ = [
    "QUERY_TYPES",
    "DNSCheck",
    "DNSResult",
    "srv_info",
    "check_result",
    "lookup",
    "run_dns_check",
]

QUERY_TYPES = ("A", "CNAME", "SRV", "MX", "PTR", "TXT", "NS")
DEFAULT_TIMEOUT = 10
DEFAULT_PORT = 53


@dataclass
class DNSCheck:
    """A DNS query and the expectations its answer must meet."""

    query: str
    query_type: str = ""
    server: str = ""
    port: int = 0
    min_records: int = 0
    exact_reply: list[str] = field(default_factory=list)
    timeout: int = 0
    threshold_millis: int = 0
    name: str = ""


@dataclass(frozen=True)
class DNSResult:
    """Outcome of running a DNS check."""

    passed: bool
    message: str
    duration_ms: int = 0


def _go_list(items: list[str]) -> str:
    return "[" + " ".join(items) + "]"


def srv_info(srv: str) -> tuple[str, str, str]:
    """Split ``_service._proto.name`` into service, protocol and name."""
    parts = srv.split(".")
    if len(parts) < 3:
        raise ValueError("srvInfo: wrong srv string")
    return parts[0].replace("_", ""), parts[1].replace("_", ""), parts[2]


def check_result(got: list[str], check: DNSCheck) -> tuple[bool, str]:
    """Compare records against the check's minimum count and exact reply."""
    got = list(got)
    passed = True
    error = ""
    if len(got) < check.min_records:
        passed = False
        error = f"returned {len(got)} results, expecting {check.min_records}"
    if check.exact_reply:
        got = sorted(s.lower() for s in got)
        expected = sorted(s.lower() for s in check.exact_reply)
        if got != expected:
            passed = False
            error = f"Got {_go_list(got)}, expected {_go_list(check.exact_reply)}"
    if passed:
        return True, f"got {_go_list(got)}"
    return False, f"{check.query_type} {check.query} on {check.server}: {error}"


def _query_type(check: DNSCheck) -> str:
    query_type = (check.query_type or "A").upper()
    if query_type not in QUERY_TYPES:
        raise ValueError(f"unknown query type: {check.query_type or 'A'}")
    return query_type


def _resolver(check: DNSCheck) -> dns.resolver.Resolver:
    timeout = check.timeout or DEFAULT_TIMEOUT
    if check.server:
        resolver = dns.resolver.Resolver(configure=False)
        resolver.nameservers = [check.server]
        resolver.port = check.port or DEFAULT_PORT
    else:
        resolver = dns.resolver.Resolver()
    resolver.lifetime = timeout
    return resolver


def _addresses(resolver: dns.resolver.Resolver, name: str) -> list[str]:
    addresses: list[str] = []
    missing = 0
    for rdtype in ("A", "AAAA"):
        try:
            addresses.extend(r.address for r in resolver.resolve(name, rdtype))
        except dns.resolver.NoAnswer:
            missing += 1
    if missing == 2:
        raise dns.resolver.NoAnswer(f"no addresses for {name}")
    return addresses


def lookup(check: DNSCheck) -> tuple[bool, str]:
    """Query DNS as the check describes and judge the answer.

    Raises ValueError for an unknown query type and dns.exception.DNSException
    when the lookup fails.
    """
    query_type = _query_type(check)
    resolver = _resolver(check)
    if query_type == "A":
        return check_result(_addresses(resolver, check.query), check)
    if query_type == "PTR":
        reverse = dns.reversename.from_address(check.query)
        names = [str(r.target) for r in resolver.resolve(reverse, "PTR")]
        return check_result(names, check)
    if query_type == "CNAME":
        try:
            target = str(next(iter(resolver.resolve(check.query, "CNAME"))).target)
        except dns.resolver.NoAnswer:
            target = check.query if check.query.endswith(".") else check.query + "."
        return check_result([target], check)
    if query_type == "SRV":
        service, proto, name = srv_info(check.query)
        qname = f"_{service}._{proto}.{name}"
        answer = resolver.resolve(qname, "SRV")
        cname = str(answer.canonical_name)
        records = " ".join(
            f"{r.target}:{r.port} priority={r.priority} weight={r.weight}" for r in answer
        )
        return True, f"got: {cname} [{records}]"
    if query_type == "MX":
        hosts = [f"{r.exchange} {r.preference}" for r in resolver.resolve(check.query, "MX")]
        return check_result(hosts, check)
    if query_type == "TXT":
        texts = [
            b"".join(r.strings).decode(errors="replace")
            for r in resolver.resolve(check.query, "TXT")
        ]
        return check_result(texts, check)
    hosts = [str(r.target) for r in resolver.resolve(check.query, "NS")]
    return check_result(hosts, check)


def run_dns_check(check: DNSCheck) -> DNSResult:
    """Run a DNS check within its timeout and threshold, never raising."""
    try:
        _query_type(check)
    except ValueError as err:
        return DNSResult(False, str(err))

    timeout = check.timeout or DEFAULT_TIMEOUT
    start = time.monotonic()
    executor = concurrent.futures.ThreadPoolExecutor(max_workers=1)
    future = executor.submit(lookup, check)
    try:
        passed, message = future.result(timeout=timeout)
    except concurrent.futures.TimeoutError:
        elapsed = int((time.monotonic() - start) * 1000)
        return DNSResult(False, f"timed out after {timeout} seconds", elapsed)
    except (dns.exception.DNSException, ValueError, OSError) as err:
        passed, message = False, str(err)
    finally:
        executor.shutdown(wait=False)

    duration = max(int((time.monotonic() - start) * 1000), 1)
    if check.threshold_millis > 0 and duration > check.threshold_millis:
        return DNSResult(False, f"{duration}ms > {check.threshold_millis}ms", duration)
    return DNSResult(passed, message, duration)