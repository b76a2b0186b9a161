import pytest

from canarykit.junit import (
    JunitStatus,
    JunitTestSuite,
    JunitTestSuites,
    Totals,
    parse_junit,
)

REPORT = """<?xml version="1.0"?>
<testsuites>
  <testsuite name="alpha">
    <testcase name="ok-one" classname="pkg.A" time="1.5" file="a.py"/>
    <testcase name="ok-two" classname="pkg.A" time="0.5"/>
    <testcase name="broken" classname="pkg.A" time="1">
      <failure message="assert failed">trace here</failure>
    </testcase>
    <testcase name="later" classname="pkg.A">
      <skipped message="not today"/>
    </testcase>
  </testsuite>
  <testsuite name="beta">
    <testcase name="crash" classname="pkg.B" time="2">
      <error message="boom"/>
      <system-out>stdout text</system-out>
    </testcase>
  </testsuite>
</testsuites>
"""


def test_parse_junit_counts_each_status():
    suites = parse_junit(REPORT)
    assert [s.name for s in suites] == ["alpha", "beta"]
    alpha = suites[0].totals
    assert (alpha.passed, alpha.failed, alpha.skipped, alpha.error) == (2, 1, 1, 0)
    assert alpha.duration == pytest.approx(3.0)
    assert suites[1].totals.error == 1


def test_parse_junit_test_details():
    alpha, beta = parse_junit(REPORT)
    broken = alpha.tests[2]
    assert broken.status is JunitStatus.FAILED
    assert broken.message == "assert failed"
    assert broken.error == "trace here"
    skipped = alpha.tests[3]
    assert skipped.status is JunitStatus.SKIPPED
    assert skipped.message == "not today"
    crash = beta.tests[0]
    assert crash.status is JunitStatus.ERROR
    assert crash.error == "boom"
    assert crash.system_out == "stdout text"


def test_known_attributes_removed_from_properties():
    first = parse_junit(REPORT)[0].tests[0]
    assert first.properties == {"file": "a.py"}
    assert first.name == "ok-one"
    assert first.classname == "pkg.A"


def test_single_testsuite_root():
    suites = parse_junit('<testsuite name="solo"><testcase name="t"/></testsuite>')
    assert len(suites) == 1
    assert suites[0].totals.passed == 1


def test_ingest_accumulates_totals():
    suites = JunitTestSuites().ingest(REPORT).ingest(REPORT)
    assert len(suites.suites) == 4
    per_suite = Totals()
    for suite in suites.suites:
        per_suite = per_suite.add(suite.totals)
    assert suites.totals == per_suite
    assert suites.failed == 2


def test_ingest_rejects_malformed_xml():
    with pytest.raises(ValueError):
        JunitTestSuites().ingest("<testsuite><testcase>")


def test_append_adds_suite_totals():
    suites = JunitTestSuites()
    suite = JunitTestSuite(name="x", totals=Totals(passed=3, duration=1.0))
    suites.append(suite)
    assert suites.suites == [suite]
    assert suites.totals.passed == 3
    assert suites.duration == 1.0


def test_totals_add_is_componentwise():
    a = Totals(passed=1, failed=2, skipped=3, error=4, duration=1.5)
    b = Totals(passed=10, failed=20, skipped=30, error=40, duration=2.5)
    total = a.add(b)
    assert total == Totals(passed=11, failed=22, skipped=33, error=44, duration=4.0)
    assert a.add(Totals()) == a


def test_totals_string_without_duration():
    assert str(Totals(failed=1, error=2)) == "1 failed, 2 errors"
    assert str(Totals()) == ""


def test_totals_string_with_duration():
    assert str(Totals(passed=2, duration=90.0)) == "2 passed  in 1m30s"


def test_failure_messages_limited():
    cases = "".join(f'<testcase name="f{i}"><failure/></testcase>' for i in range(12))
    suites = JunitTestSuites().ingest(f"<testsuite>{cases}</testsuite>")
    lines = suites.failure_messages().split("\n")
    assert lines[0] == ""
    assert lines[1:] == [f"f{i}" for i in range(10)]


def test_failure_messages_empty_when_all_pass():
    suites = JunitTestSuites().ingest('<testsuite><testcase name="a"/></testsuite>')
    assert suites.failure_messages() == ""