import pytest

from canarykit.junit import JunitTestSuites
from canarykit.junit_pod import (
    JUNIT_CHECK_LABEL_VALUE,
    MAX_LOG_LENGTH,
    junit_check_label,
    summarize_suites,
    truncate_logs,
    wrap_command,
)

FAILING_XML = """<testsuites>
  <testsuite name="suite">
    <testcase name="ok" classname="pkg"/>
    <testcase name="bad" classname="pkg"><failure message="boom">trace</failure></testcase>
  </testsuite>
</testsuites>"""

PASSING_XML = """<testsuites>
  <testsuite name="suite">
    <testcase name="ok" classname="pkg"/>
  </testsuite>
</testsuites>"""


def _suites(xml):
    return JunitTestSuites().ingest(xml)


def test_junit_check_label_joins_parts():
    assert junit_check_label(JUNIT_CHECK_LABEL_VALUE, "canary", "default") == (
        "junit-check-canary-default"
    )


def test_wrap_command_without_command_is_unchanged():
    command, args = wrap_command([], ["--flag"], "/tmp/results")
    assert command == []
    assert args == ["--flag"]


def test_wrap_command_runs_through_bash():
    command, args = wrap_command(["ls", "-la"], ["/data"], "/tmp/results")
    assert command == ["bash", "-c"]
    assert len(args) == 1
    script = args[0]
    assert "ls -la /data || EXIT_CODE=$?" in script
    assert "echo $EXIT_CODE > /tmp/results/exit-code" in script
    assert "set -e" in script
    assert script.rstrip().endswith("exit 0")


@pytest.mark.parametrize("size", [0, 10, MAX_LOG_LENGTH])
def test_truncate_logs_keeps_short_messages(size):
    message = "x" * size
    assert truncate_logs(message) == message


def test_truncate_logs_keeps_tail_of_long_messages():
    message = "a" * 100 + "b" * MAX_LOG_LENGTH
    result = truncate_logs(message)
    assert len(result) == MAX_LOG_LENGTH
    assert result == message[-MAX_LOG_LENGTH:]
    assert "a" not in result


def test_truncate_logs_verbose_keeps_everything():
    message = "z" * (MAX_LOG_LENGTH + 50)
    assert truncate_logs(message, verbose=True) == message


def test_summarize_passing_suites():
    assert summarize_suites(_suites(PASSING_XML), has_test=False, has_display=False) is None


def test_summarize_failing_suites_reports_totals():
    suites = _suites(FAILING_XML)
    message = summarize_suites(suites, has_test=False, has_display=False)
    assert message == str(suites.totals)
    assert "1 failed" in message


def test_summarize_failing_suites_with_display_is_empty():
    assert summarize_suites(_suites(FAILING_XML), has_test=False, has_display=True) == ""


def test_summarize_with_custom_test_defers_judgement():
    assert summarize_suites(_suites(FAILING_XML), has_test=True, has_display=False) is None