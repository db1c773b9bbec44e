"""Reduce raw line/branch counters to coverage statistics."""

from __future__ import annotations

import logging
from functools import reduce

from covdelta.consolidation.consolidator import MergeFn, consolidate
from covdelta.consolidation.merger import merge_results
from covdelta.models.resultset import FileEntry, RawRecord, ResultSet, is_present
from covdelta.models.stats import BranchStats, Coverage, LineStats, Stats, combine_stats

logger = logging.getLogger(__name__)


def file_stats(entry: FileEntry) -> Stats:
    """Count instrumented/covered lines and, when collected, branches for one file."""
    counts = [count for count in entry.lines if is_present(count)]
    lines = len(counts)
    lines_covered = sum(1 for count in counts if count > 0)

    if entry.branches is None:
        return LineStats(lines=lines, lines_covered=lines_covered)

    branch_counts = [count for group in entry.branches.values() for count in group.values()]
    return BranchStats(
        lines=lines,
        lines_covered=lines_covered,
        branches=len(branch_counts),
        branches_covered=sum(1 for count in branch_counts if count > 0),
    )


def reduce_record(record: RawRecord) -> Coverage:
    """Build a coverage snapshot from a consolidated record.

    A record without files reduces to a zero :class:`LineStats` total.
    """
    stats = {path: file_stats(entry) for path, entry in record.coverage.items()}
    total = reduce(combine_stats, stats.values(), LineStats())

    logger.debug(
        "Reduced %d file(s): %d/%d lines covered", len(stats), total.lines_covered, total.lines
    )
    return Coverage(
        includes_branches=any(s.includes_branches for s in stats.values()),
        file_stats=stats,
        total_stats=total,
    )


def to_coverage(result_set: ResultSet, merge: MergeFn = merge_results) -> Coverage:
    """Consolidate *result_set* and reduce it to a coverage snapshot."""
    return reduce_record(consolidate(result_set, merge))
