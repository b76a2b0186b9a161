"""Reading JMeter result logs and building JMeter command-line properties."""

from __future__ import annotations

import csv
import io
from dataclasses import dataclass

__all__ = [
    "JMeterRecord",
    "JMeterFailure",
    "check_logs",
    "properties_args",
    "system_properties_args",
]

_TRUE = {"1", "t", "T", "TRUE", "true", "True"}
_FALSE = {"0", "f", "F", "FALSE", "false", "False"}


@dataclass(frozen=True)
class JMeterRecord:
    """One sample line from a JMeter results log."""

    elapsed: int = 0
    success: bool = False
    failure_message: str = ""


class JMeterFailure(Exception):
    """Raised when a results log holds failed samples."""

    def __init__(self, message: str, elapsed: int) -> None:
        super().__init__(message)
        self.message = message
        self.elapsed = elapsed


def _parse_bool(value: str) -> bool:
    if value == "":
        return False
    if value in _TRUE:
        return True
    if value in _FALSE:
        return False
    raise ValueError(f"invalid boolean {value!r}")


def _parse_int(value: str) -> int:
    if value == "":
        return 0
    try:
        return int(value)
    except ValueError:
        raise ValueError(f"invalid integer {value!r}") from None


def _records(data: str) -> list[JMeterRecord]:
    reader = csv.DictReader(io.StringIO(data))
    if not reader.fieldnames:
        raise ValueError("results log is empty")
    return [
        JMeterRecord(
            elapsed=_parse_int(row.get("elapsed") or ""),
            success=_parse_bool(row.get("success") or ""),
            failure_message=row.get("failureMessage") or "",
        )
        for row in reader
    ]


def check_logs(data: str | bytes) -> int:
    """Sum the elapsed milliseconds of every sample in a CSV results log.

    Raises JMeterFailure, carrying the elapsed total, when any sample failed,
    and ValueError when the log cannot be read.
    """
    text = data.decode() if isinstance(data, bytes) else data
    records = _records(text)
    elapsed = sum(record.elapsed for record in records)
    failures = [record.failure_message for record in records if not record.success]
    if failures:
        raise JMeterFailure("".join(f"\n{message}" for message in failures), elapsed)
    return elapsed


def properties_args(properties: list[str]) -> str:
    """Render JMeter properties as ``-J`` arguments."""
    return "".join(f" -J{prop}" for prop in properties)


def system_properties_args(properties: list[str]) -> str:
    """Render Java system properties as ``-D`` arguments."""
    return "".join(f" -D{prop}" for prop in properties)