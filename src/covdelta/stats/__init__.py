"""Coverage statistics reduction."""

from covdelta.stats.reducer import file_stats, reduce_record, to_coverage

__all__ = [
    "file_stats",
    "reduce_record",
    "to_coverage",
]
