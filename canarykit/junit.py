"""JUnit XML reports: parsing, per-suite totals and failure summaries."""

from __future__ import annotations

import enum
import xml.etree.ElementTree as ET
from dataclasses import dataclass, field

__all__ = [
    "FAIL_TEST_COUNT",
    "JunitStatus",
    "JunitTest",
    "Totals",
    "JunitTestSuite",
    "JunitTestSuites",
    "parse_junit",
]

FAIL_TEST_COUNT = 10


class JunitStatus(str, enum.Enum):
    """Outcome of a single test case."""

    PASSED = "passed"
    SKIPPED = "skipped"
    FAILED = "failed"
    ERROR = "error"


@dataclass
class JunitTest:
    """The result of a single test run."""

    name: str = ""
    classname: str = ""
    duration: float = 0.0
    status: JunitStatus = JunitStatus.PASSED
    message: str = ""
    error: str | None = None
    properties: dict[str, str] = field(default_factory=dict)
    system_out: str = ""
    system_err: str = ""


def _go_duration(seconds: int) -> str:
    if seconds == 0:
        return "0s"
    sign = "-" if seconds < 0 else ""
    seconds = abs(seconds)
    hours, rest = divmod(seconds, 3600)
    minutes, secs = divmod(rest, 60)
    if hours:
        return f"{sign}{hours}h{minutes}m{secs}s"
    if minutes:
        return f"{sign}{minutes}m{secs}s"
    return f"{sign}{secs}s"


@dataclass(frozen=True)
class Totals:
    """Counts of test outcomes and the total run time in seconds."""

    passed: int = 0
    failed: int = 0
    skipped: int = 0
    error: int = 0
    duration: float = 0.0

    def add(self, other: Totals) -> Totals:
        """Return the sum of these totals and ``other``."""
        return Totals(
            passed=self.passed + other.passed,
            failed=self.failed + other.failed,
            skipped=self.skipped + other.skipped,
            error=self.error + other.error,
            duration=self.duration + other.duration,
        )

    def __str__(self) -> str:
        parts = [
            f"{count} {label}"
            for count, label in (
                (self.passed, "passed"),
                (self.failed, "failed"),
                (self.error, "errors"),
                (self.skipped, "skipped"),
            )
            if count > 0
        ]
        text = ", ".join(parts)
        if self.duration > 0:
            if text:
                text += " "
            text += f" in {_go_duration(int(self.duration))}"
        return text


@dataclass
class JunitTestSuite:
    """A named group of tests with their totals."""

    name: str = ""
    totals: Totals = field(default_factory=Totals)
    tests: list[JunitTest] = field(default_factory=list)


@dataclass
class JunitTestSuites:
    """All suites gathered from one or more reports, with overall totals."""

    suites: list[JunitTestSuite] = field(default_factory=list)
    totals: Totals = field(default_factory=Totals)

    @property
    def failed(self) -> int:
        return self.totals.failed

    @property
    def duration(self) -> float:
        return self.totals.duration

    def append(self, suite: JunitTestSuite) -> JunitTestSuites:
        """Add a suite and fold its totals into the overall totals."""
        self.suites.append(suite)
        self.totals = self.totals.add(suite.totals)
        return self

    def ingest(self, xml: str | bytes) -> JunitTestSuites:
        """Parse a JUnit report and add every suite in it.

        Raises ValueError if the report is not well-formed XML.
        """
        for suite in parse_junit(xml):
            self.append(suite)
        return self

    def failure_messages(self) -> str:
        """Names of the first failed tests, each on its own line."""
        failed = [
            test.name
            for suite in self.suites
            for test in suite.tests
            if test.status is JunitStatus.FAILED
        ]
        return "".join(f"\n{name}" for name in failed[:FAIL_TEST_COUNT])


def _seconds(value: str | None) -> float:
    if not value:
        return 0.0
    try:
        return float(value.replace(",", ""))
    except ValueError:
        return 0.0


def _parse_test(element: ET.Element) -> JunitTest:
    properties = dict(element.attrib)
    test = JunitTest(
        name=properties.get("name", ""),
        classname=properties.get("classname", ""),
        duration=_seconds(properties.get("time")),
    )
    for child in element:
        text = child.text or ""
        if child.tag == "skipped":
            test.status = JunitStatus.SKIPPED
            test.message = child.get("message", "")
        elif child.tag in ("failure", "error"):
            test.status = JunitStatus.FAILED if child.tag == "failure" else JunitStatus.ERROR
            test.message = child.get("message", "")
            test.error = text.strip() or test.message
        elif child.tag == "system-out":
            test.system_out = text
        elif child.tag == "system-err":
            test.system_err = text
    if test.classname:
        properties.pop("classname", None)
    if test.name:
        properties.pop("name", None)
    properties.pop("time", None)
    test.properties = properties
    return test


def _aggregate(tests: list[JunitTest]) -> Totals:
    counts = {status: 0 for status in JunitStatus}
    for test in tests:
        counts[test.status] += 1
    return Totals(
        passed=counts[JunitStatus.PASSED],
        failed=counts[JunitStatus.FAILED],
        skipped=counts[JunitStatus.SKIPPED],
        error=counts[JunitStatus.ERROR],
        duration=sum(test.duration for test in tests),
    )


def parse_junit(xml: str | bytes) -> list[JunitTestSuite]:
    """Parse a JUnit XML document into suites with aggregated totals.

    Raises ValueError if the document is not well-formed XML.
    """
    try:
        root = ET.fromstring(xml)
    except ET.ParseError as err:
        raise ValueError(f"invalid junit xml: {err}") from err
    suites = []
    for element in root.iter("testsuite"):
        tests = [_parse_test(case) for case in element.findall("testcase")]
        suites.append(
            JunitTestSuite(name=element.get("name", ""), totals=_aggregate(tests), tests=tests)
        )
    return suites