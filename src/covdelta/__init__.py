"""Consolidate coverage result sets, reduce them to statistics, and diff snapshots."""

from covdelta.consolidation import consolidate, merge_results
from covdelta.diff import diff_coverage
from covdelta.models import Coverage, CoverageDiff, parse_result_set
from covdelta.stats import to_coverage

__all__ = [
    "Coverage",
    "CoverageDiff",
    "consolidate",
    "diff_coverage",
    "merge_results",
    "parse_result_set",
    "to_coverage",
]
