"""Folder statistics and the tests run against them."""

from __future__ import annotations

import os
import re
import stat
from dataclasses import dataclass, field
from datetime import datetime, timedelta, timezone
from typing import Any

__all__ = [
    "SIZE_NOT_SUPPORTED",
    "File",
    "FolderTest",
    "FolderStats",
    "parse_duration",
    "parse_size",
    "file_info",
    "scan_folder",
]

SIZE_NOT_SUPPORTED = -1

_DURATION_UNITS = {
    "ns": timedelta(microseconds=0.001),
    "us": timedelta(microseconds=1),
    "µs": timedelta(microseconds=1),
    "ms": timedelta(milliseconds=1),
    "s": timedelta(seconds=1),
    "m": timedelta(minutes=1),
    "h": timedelta(hours=1),
    "d": timedelta(days=1),
    "w": timedelta(weeks=1),
    "y": timedelta(days=365),
}
_DURATION_PART = re.compile(r"(\d+(?:\.\d*)?|\.\d+)(ns|us|µs|ms|s|m|h|d|w|y)")

_SIZE_PATTERN = re.compile(r"^\s*(\d+(?:\.\d+)?)\s*([kmgtpe]?)(i?)(b?)\s*$", re.IGNORECASE)
_SIZE_POWERS = {"": 0, "k": 1, "m": 2, "g": 3, "t": 4, "p": 5, "e": 6}


def parse_duration(value: str | None) -> timedelta | None:
    """Parse a duration such as ``1h30m`` or ``2d``; empty input gives None."""
    if not value:
        return None
    text = value.strip()
    sign = 1
    if text[:1] in "+-":
        sign = -1 if text[0] == "-" else 1
        text = text[1:]
    if text == "0":
        return timedelta(0)
    total = timedelta(0)
    pos = 0
    for match in _DURATION_PART.finditer(text):
        if match.start() != pos:
            break
        total += _DURATION_UNITS[match.group(2)] * float(match.group(1))
        pos = match.end()
    if pos == 0 or pos != len(text):
        raise ValueError(f"invalid duration {value!r}")
    return total * sign


def parse_size(value: str) -> int:
    """Parse a byte size such as ``512``, ``10kb`` or ``1.5GB`` (binary multiples)."""
    match = _SIZE_PATTERN.match(value)
    if not match:
        raise ValueError(f"invalid size {value!r}")
    number, unit = float(match.group(1)), match.group(2).lower()
    if match.group(3) and not unit:
        raise ValueError(f"invalid size {value!r}")
    return int(number * 1024 ** _SIZE_POWERS[unit])


def _mb(size: int) -> str:
    return f"{size / (1024 * 1024):.2f}MB"


def _age(moment: datetime) -> str:
    elapsed = datetime.now(timezone.utc) - moment
    return str(elapsed - timedelta(microseconds=elapsed.microseconds))


@dataclass(frozen=True)
class File:
    """A file or directory entry seen during a folder scan."""

    name: str
    size: int
    mode: str
    modified: datetime
    is_dir: bool = False

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {"modified": self.modified.isoformat()}
        if self.name:
            data["name"] = self.name
        if self.size:
            data["size"] = self.size
        if self.mode:
            data["mode"] = self.mode
        if self.is_dir:
            data["is_dir"] = True
        return data


@dataclass
class FolderTest:
    """Expectations checked against a folder's statistics; unset fields are skipped."""

    min_age: str | None = None
    max_age: str | None = None
    min_count: int | None = None
    max_count: int | None = None
    min_size: str | None = None
    max_size: str | None = None
    available_size: str | None = None
    total_size: str | None = None


@dataclass
class FolderStats:
    """Aggregated view of the files in a folder."""

    oldest: File | None = None
    newest: File | None = None
    smallest: File | None = None
    largest: File | None = None
    total_size: int = 0
    available_size: int = 0
    files: list[File] = field(default_factory=list)

    def append(self, file: File) -> None:
        """Add a file, updating the oldest, newest, smallest and largest entries."""
        if self.oldest is None or self.oldest.modified > file.modified:
            self.oldest = file
        if self.newest is None or self.newest.modified < file.modified:
            self.newest = file
        if self.smallest is None or self.smallest.size > file.size:
            self.smallest = file
        if self.largest is None or self.largest.size < file.size:
            self.largest = file
        self.files.append(file)

    def test(self, test: FolderTest) -> str | None:
        """Return a description of the first failed expectation, or None if all pass."""
        try:
            min_age = parse_duration(test.min_age)
        except ValueError as err:
            return f"invalid duration {test.min_age}: {err}"
        try:
            max_age = parse_duration(test.max_age)
        except ValueError as err:
            return f"invalid duration {test.max_age}: {err}"

        count = len(self.files)
        if test.min_count is not None and count < test.min_count:
            return f"too few files {count} < {test.min_count}"
        if test.max_count is not None and count > test.max_count:
            return f"too many files {count} > {test.max_count}"

        for label, wanted, actual in (
            ("available", test.available_size, self.available_size),
            ("total", test.total_size, self.total_size),
        ):
            if not wanted:
                continue
            if actual == SIZE_NOT_SUPPORTED:
                return f"{label} size not supported"
            try:
                size = parse_size(wanted)
            except ValueError as err:
                return f"{wanted} is an invalid size: {err}"
            if actual < size:
                return f"{label} size too small: {_mb(actual)} < {wanted}"

        if not self.files:
            return None

        now = datetime.now(timezone.utc)
        assert self.newest and self.oldest and self.smallest and self.largest
        if min_age is not None and now - self.newest.modified < min_age:
            return f"{self.newest.name} is too new: {_age(self.newest.modified)} < {test.min_age}"
        if max_age is not None and now - self.oldest.modified > max_age:
            return f"{self.oldest.name} is too old {_age(self.oldest.modified)} > {test.max_age}"

        if test.min_size:
            try:
                size = parse_size(test.min_size)
            except ValueError as err:
                return f"{test.min_size} is an invalid size: {err}"
            if self.smallest.size < size:
                return f"{self.smallest.name} is too small: {_mb(self.smallest.size)} < {test.min_size}"

        if test.max_size:
            try:
                size = parse_size(test.max_size)
            except ValueError as err:
                return f"{test.max_size} is an invalid size: {err}"
            if self.largest.size > size:
                return f"{self.largest.name} is too large: {_mb(self.largest.size)} > {test.max_size}"
        return None

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {"files": [f.to_dict() for f in self.files]}
        for key, entry in (
            ("oldest", self.oldest),
            ("newest", self.newest),
            ("smallest", self.smallest),
            ("largest", self.largest),
        ):
            if entry is not None:
                data[key] = entry.to_dict()
        if self.total_size:
            data["size"] = self.total_size
        if self.available_size:
            data["availableSize"] = self.available_size
        return data


def _from_stat(name: str, st: os.stat_result) -> File:
    return File(
        name=name,
        size=st.st_size,
        mode=stat.filemode(st.st_mode),
        modified=datetime.fromtimestamp(st.st_mtime, tz=timezone.utc),
        is_dir=stat.S_ISDIR(st.st_mode),
    )


def file_info(path: str | os.PathLike[str]) -> File:
    """Describe the file or directory at ``path``."""
    return _from_stat(os.path.basename(os.path.normpath(os.fspath(path))), os.stat(path))


def scan_folder(path: str | os.PathLike[str], recursive: bool = False) -> FolderStats:
    """List a local folder and gather statistics on its entries.

    Directories are counted only when ``recursive`` is set. A missing folder
    gives empty statistics; an empty one reports the folder itself as both
    oldest and newest, with sizes marked as not supported.
    """
    try:
        with os.scandir(path) as entries:
            files = [
                _from_stat(entry.name, entry.stat())
                for entry in entries
                if recursive or not entry.is_dir()
            ]
    except FileNotFoundError:
        return FolderStats()

    if not files:
        folder = file_info(path)
        return FolderStats(
            oldest=folder,
            newest=folder,
            total_size=SIZE_NOT_SUPPORTED,
            available_size=SIZE_NOT_SUPPORTED,
        )

    stats = FolderStats()
    for file in files:
        stats.append(file)
    return stats