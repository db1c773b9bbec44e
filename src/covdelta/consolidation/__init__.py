"""Consolidation of per-run coverage records."""

from covdelta.consolidation.consolidator import MergeFn, consolidate
from covdelta.consolidation.merger import merge_file_entries, merge_results

__all__ = [
    "MergeFn",
    "consolidate",
    "merge_file_entries",
    "merge_results",
]
