"""Data models for covdelta."""

from covdelta.models.resultset import (
    Branches,
    FileEntry,
    Lines,
    RawRecord,
    ResultSet,
    ResultSetError,
    is_present,
    parse_result_set,
)
from covdelta.models.stats import (
    BranchStats,
    Coverage,
    CoverageDiff,
    FileDiff,
    LineStats,
    OwnerDiff,
    Stats,
    StatsDiff,
    changed,
    combine_stats,
)

__all__ = [
    "BranchStats",
    "Branches",
    "Coverage",
    "CoverageDiff",
    "FileDiff",
    "FileEntry",
    "LineStats",
    "Lines",
    "OwnerDiff",
    "RawRecord",
    "ResultSet",
    "ResultSetError",
    "Stats",
    "StatsDiff",
    "changed",
    "combine_stats",
    "is_present",
    "parse_result_set",
]
