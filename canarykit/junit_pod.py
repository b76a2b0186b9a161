"""JUnit checks run in a pod: labels, command wrapping, log trimming and verdicts."""

from __future__ import annotations

from canarykit.junit import JunitTestSuites

__all__ = [
    "VOLUME_NAME",
    "MOUNT_PATH",
    "CONTAINER_NAME",
    "CONTAINER_IMAGE",
    "POD_KIND",
    "JUNIT_CHECK_SELECTOR",
    "JUNIT_CHECK_LABEL_VALUE",
    "MAX_LOG_LENGTH",
    "junit_check_label",
    "wrap_command",
    "truncate_logs",
    "summarize_suites",
]

VOLUME_NAME = "junit-results"
MOUNT_PATH = "/tmp/junit-results"
CONTAINER_NAME = "junit-results"
CONTAINER_IMAGE = "ubuntu"
POD_KIND = "Pod"
JUNIT_CHECK_SELECTOR = "canary-checker.flanksource.com/check"
JUNIT_CHECK_LABEL_VALUE = "junit-check"
MAX_LOG_LENGTH = 3000

_WRAPPED_SCRIPT = """
\t\t\tset -e
\t\t\tEXIT_CODE=0
\t\t\t{command} {args} || EXIT_CODE=$?
\t\t\techo "Completed with exit code of $EXIT_CODE"
\t\t\techo $EXIT_CODE > {results_dir}/exit-code
\t\t\texit 0
\t\t\t"""


def junit_check_label(label: str, name: str, namespace: str) -> str:
    """The label value that marks the pods of one junit check."""
    return f"{label}-{name}-{namespace}"


def wrap_command(
    command: list[str], args: list[str], results_dir: str
) -> tuple[list[str], list[str]]:
    """Wrap a container's command so it always completes and records its exit code.

    The exit code is written to ``exit-code`` in ``results_dir``, leaving the
    junit results readable even when the tests fail. A container without a
    command is returned unchanged. Returns the new command and arguments.
    """
    if not command:
        return list(command), list(args)
    script = _WRAPPED_SCRIPT.format(
        command=" ".join(command), args=" ".join(args), results_dir=results_dir
    )
    return ["bash", "-c"], [script]


def truncate_logs(message: str, verbose: bool = False) -> str:
    """Keep only the tail of long pod logs unless verbose output is wanted."""
    if not verbose and len(message) > MAX_LOG_LENGTH:
        return message[-MAX_LOG_LENGTH:]
    return message


def summarize_suites(
    suites: JunitTestSuites, has_test: bool, has_display: bool
) -> str | None:
    """Judge the collected suites when the check has no custom test.

    Returns None when the check passes, otherwise the failure message: the
    totals, or an empty message when a custom display will describe it.
    """
    if has_test or suites.failed <= 0:
        return None
    if has_display:
        return ""
    return str(suites.totals)