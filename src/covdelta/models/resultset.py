"""Raw coverage result models and their schema boundary.

A result set is the decoded form of a SimpleCov-style ``.resultset.json``::

    {
        "RSpec": {
            "coverage": {
                "app/models/user.rb": {
                    "lines": [1, 0, null],
                    "branches": {"[:if, 0, 3, 4]": {"[:then, 1]": 2, "[:else, 2]": 0}}
                }
            },
            "timestamp": 1700000000
        }
    }
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any, TypeGuard

Lines = tuple[int | None, ...]
"""One slot per source line; ``None`` marks a line that is not instrumented."""

Branches = dict[str, dict[str, int]]
"""Branch-group identifier -> branch index -> execution count."""


class ResultSetError(ValueError):
    """Raised when decoded result-set data does not match the expected schema."""

    def __init__(self, location: str, message: str) -> None:
        self.location = location
        super().__init__(f"{location}: {message}")


def is_present(count: int | None) -> TypeGuard[int]:
    """Return True for a real execution count (including zero)."""
    return count is not None


@dataclass(frozen=True)
class FileEntry:
    """Line and branch counters for a single source file."""

    lines: Lines = ()
    """Per-line execution counts."""

    branches: Branches | None = None
    """Per-branch execution counts, or None when branch data was not collected."""


@dataclass(frozen=True)
class RawRecord:
    """One run's unreduced coverage payload."""

    coverage: dict[str, FileEntry] = field(default_factory=dict)
    """Counters keyed by file path."""

    timestamp: float = 0.0
    """Unix timestamp when the record was produced."""


ResultSet = dict[str, RawRecord]
"""Run identifier -> raw record for that run."""


def _is_count(value: Any) -> bool:
    # bool is an int subclass; JSON true/false are never counts
    return isinstance(value, int) and not isinstance(value, bool) and value >= 0


def _parse_lines(raw: Any, location: str) -> Lines:
    if not isinstance(raw, list | tuple):
        raise ResultSetError(location, f"expected a list of line counts, got {type(raw).__name__}")
    for index, count in enumerate(raw):
        if count is not None and not _is_count(count):
            raise ResultSetError(f"{location}[{index}]", f"invalid line count {count!r}")
    return tuple(raw)


def _parse_branches(raw: Any, location: str) -> Branches:
    if not isinstance(raw, Mapping):
        raise ResultSetError(location, f"expected a mapping, got {type(raw).__name__}")

    branches: Branches = {}
    for group, entries in raw.items():
        group_location = f"{location}.{group}"
        if not isinstance(entries, Mapping):
            raise ResultSetError(
                group_location, f"expected a mapping, got {type(entries).__name__}"
            )
        counts: dict[str, int] = {}
        for index, count in entries.items():
            if not _is_count(count):
                raise ResultSetError(f"{group_location}.{index}", f"invalid branch count {count!r}")
            counts[str(index)] = count
        branches[str(group)] = counts
    return branches


def parse_file_entry(raw: Any, location: str = "entry") -> FileEntry:
    """Validate and build a :class:`FileEntry`.

    Older result sets store a bare list of line counts per file instead of
    an object; that form is accepted as a line-only entry.
    """
    if isinstance(raw, list | tuple):
        return FileEntry(lines=_parse_lines(raw, location))
    if not isinstance(raw, Mapping):
        raise ResultSetError(location, f"expected an object, got {type(raw).__name__}")
    if "lines" not in raw:
        raise ResultSetError(location, "missing required key 'lines'")

    lines = _parse_lines(raw["lines"], f"{location}.lines")
    branches_raw = raw.get("branches")
    if branches_raw is None:
        return FileEntry(lines=lines)
    return FileEntry(lines=lines, branches=_parse_branches(branches_raw, f"{location}.branches"))


def parse_raw_record(raw: Any, location: str = "record") -> RawRecord:
    """Validate and build a :class:`RawRecord`."""
    if not isinstance(raw, Mapping):
        raise ResultSetError(location, f"expected an object, got {type(raw).__name__}")

    coverage_raw = raw.get("coverage")
    if not isinstance(coverage_raw, Mapping):
        raise ResultSetError(f"{location}.coverage", "expected a mapping of file paths")

    timestamp = raw.get("timestamp")
    if isinstance(timestamp, bool) or not isinstance(timestamp, int | float):
        raise ResultSetError(f"{location}.timestamp", f"expected a number, got {timestamp!r}")

    coverage = {
        str(path): parse_file_entry(entry, f"{location}.coverage.{path}")
        for path, entry in coverage_raw.items()
    }
    return RawRecord(coverage=coverage, timestamp=timestamp)


def parse_result_set(data: Any) -> ResultSet:
    """Validate decoded JSON and build a :class:`ResultSet`.

    Raises:
        ResultSetError: If any part of *data* does not match the schema.
    """
    if not isinstance(data, Mapping):
        raise ResultSetError("resultset", f"expected an object, got {type(data).__name__}")
    return {str(run): parse_raw_record(record, str(run)) for run, record in data.items()}
