"""Baseline-vs-current coverage diffing."""

from covdelta.diff.engine import diff_coverage, relative_path

__all__ = [
    "diff_coverage",
    "relative_path",
]
