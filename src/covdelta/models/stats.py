"""Coverage statistics and diff models."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import ClassVar, Literal


def _percentage(covered: int, total: int) -> float:
    if total == 0:
        return 100.0
    return (covered / total) * 100.0


@dataclass(frozen=True)
class LineStats:
    """Line counts for a file (or a sum of files) without branch data."""

    includes_branches: ClassVar[Literal[False]] = False

    lines: int = 0
    """Number of instrumented lines."""

    lines_covered: int = 0
    """Number of instrumented lines executed at least once."""

    @property
    def line_coverage(self) -> float:
        """Return line coverage percentage (0.0-100.0)."""
        return _percentage(self.lines_covered, self.lines)


@dataclass(frozen=True)
class BranchStats:
    """Line and branch counts for a file (or a sum of files)."""

    includes_branches: ClassVar[Literal[True]] = True

    lines: int = 0
    lines_covered: int = 0

    branches: int = 0
    """Number of branches across all branch groups."""

    branches_covered: int = 0
    """Number of branches executed at least once."""

    @property
    def line_coverage(self) -> float:
        """Return line coverage percentage (0.0-100.0)."""
        return _percentage(self.lines_covered, self.lines)

    @property
    def branch_coverage(self) -> float:
        """Return branch coverage percentage (0.0-100.0)."""
        return _percentage(self.branches_covered, self.branches)


Stats = LineStats | BranchStats


def combine_stats(a: Stats | None, b: Stats | None) -> Stats:
    """Sum two stats; a missing side counts as zero.

    The result carries branch counts when either input does.
    """
    lines = _lines(a) + _lines(b)
    lines_covered = _lines_covered(a) + _lines_covered(b)

    if isinstance(a, BranchStats) or isinstance(b, BranchStats):
        return BranchStats(
            lines=lines,
            lines_covered=lines_covered,
            branches=_branches(a) + _branches(b),
            branches_covered=_branches_covered(a) + _branches_covered(b),
        )
    return LineStats(lines=lines, lines_covered=lines_covered)


def _lines(stats: Stats | None) -> int:
    return stats.lines if stats is not None else 0


def _lines_covered(stats: Stats | None) -> int:
    return stats.lines_covered if stats is not None else 0


def _branches(stats: Stats | None) -> int:
    return stats.branches if isinstance(stats, BranchStats) else 0


def _branches_covered(stats: Stats | None) -> int:
    return stats.branches_covered if isinstance(stats, BranchStats) else 0


def changed(a: Stats | None, b: Stats | None) -> bool:
    """Return True if two stats differ in kind or in any count."""
    if a is None and b is None:
        return False
    if a is None or b is None:
        return True
    return (
        a.includes_branches != b.includes_branches
        or a.lines != b.lines
        or a.lines_covered != b.lines_covered
        or _branches(a) != _branches(b)
        or _branches_covered(a) != _branches_covered(b)
    )


@dataclass(frozen=True)
class Coverage:
    """A fully reduced coverage snapshot."""

    includes_branches: bool
    """True if any file carries branch data."""

    file_stats: dict[str, Stats]
    """Statistics keyed by file path."""

    total_stats: Stats
    """Sum of all file statistics."""


@dataclass(frozen=True)
class StatsDiff:
    """Baseline and current statistics for the same subject."""

    baseline: Stats | None
    """Baseline statistics, or None when the subject is new."""

    current: Stats
    """Current statistics."""


@dataclass(frozen=True)
class FileDiff(StatsDiff):
    """Statistics change for a single file."""

    filename: str = field(kw_only=True)
    """Path relative to the base directory."""


@dataclass(frozen=True)
class OwnerDiff(StatsDiff):
    """Aggregate statistics for every file attributed to one owner."""

    owner_name: str = field(kw_only=True)
    """Owner identifier as written in CODEOWNERS (e.g. ``@org/team``)."""


def _dropped(diff: StatsDiff, line_tolerance: float, branch_tolerance: float) -> bool:
    base, cur = diff.baseline, diff.current
    if base is None:
        return False
    if base.line_coverage - cur.line_coverage > line_tolerance:
        return True
    if isinstance(base, BranchStats) and isinstance(cur, BranchStats):
        return base.branch_coverage - cur.branch_coverage > branch_tolerance
    return False


@dataclass(frozen=True)
class CoverageDiff:
    """Baseline-vs-current comparison at file, owner, and total granularity."""

    includes_branches: bool
    file_diffs: list[FileDiff] = field(default_factory=list)
    """Changed files, ordered by path."""

    owner_diffs: list[OwnerDiff] = field(default_factory=list)
    """Per-owner aggregates, in order of first encounter."""

    total_diff: StatsDiff = field(default_factory=lambda: StatsDiff(None, LineStats()))

    def regressed_files(
        self, line_tolerance: float = 0.0, branch_tolerance: float = 0.0
    ) -> list[FileDiff]:
        """Return changed files whose coverage percentage dropped.

        Args:
            line_tolerance: Percentage points of line coverage a file may lose.
            branch_tolerance: Percentage points of branch coverage a file may lose.
        """
        return [d for d in self.file_diffs if _dropped(d, line_tolerance, branch_tolerance)]

    def sorted_owner_diffs(self) -> list[OwnerDiff]:
        """Return owner diffs ordered by owner name."""
        return sorted(self.owner_diffs, key=lambda d: d.owner_name)
