"""Pairwise merge of raw coverage records."""

from __future__ import annotations

from itertools import zip_longest

from covdelta.models.resultset import Branches, FileEntry, Lines, RawRecord


def merge_results(a: RawRecord, b: RawRecord) -> RawRecord:
    """Merge two raw records into one.

    Files present on either side are kept.  Line and branch counts are
    summed so a line executed in any run counts as executed, and the most
    recent timestamp wins.
    """
    merged: dict[str, FileEntry] = dict(a.coverage)
    for path, entry in b.coverage.items():
        if path in merged:
            merged[path] = merge_file_entries(merged[path], entry)
        else:
            merged[path] = entry

    return RawRecord(coverage=merged, timestamp=max(a.timestamp, b.timestamp))


def merge_file_entries(a: FileEntry, b: FileEntry) -> FileEntry:
    """Merge two entries for the same file."""
    return FileEntry(
        lines=_merge_lines(a.lines, b.lines),
        branches=_merge_branches(a.branches, b.branches),
    )


def _merge_lines(a: Lines, b: Lines) -> Lines:
    """Sum line counts positionally; a line stays absent only if absent on both sides."""
    return tuple(_merge_count(x, y) for x, y in zip_longest(a, b))


def _merge_count(x: int | None, y: int | None) -> int | None:
    if x is None:
        return y
    if y is None:
        return x
    return x + y


def _merge_branches(a: Branches | None, b: Branches | None) -> Branches | None:
    """Sum branch counts per group and index; a missing index counts as zero."""
    if a is None:
        return None if b is None else {group: dict(counts) for group, counts in b.items()}
    if b is None:
        return {group: dict(counts) for group, counts in a.items()}

    merged: Branches = {group: dict(counts) for group, counts in a.items()}
    for group, counts in b.items():
        target = merged.setdefault(group, {})
        for index, count in counts.items():
            target[index] = target.get(index, 0) + count
    return merged
