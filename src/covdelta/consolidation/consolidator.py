"""Fold a result set into a single raw record."""

from __future__ import annotations

import logging
import time
from collections.abc import Callable
from functools import reduce

from covdelta.consolidation.merger import merge_results
from covdelta.models.resultset import RawRecord, ResultSet

logger = logging.getLogger(__name__)

MergeFn = Callable[[RawRecord, RawRecord], RawRecord]


def consolidate(result_set: ResultSet, merge: MergeFn = merge_results) -> RawRecord:
    """Merge every run in *result_set* into one record.

    Runs are folded in mapping order.  *merge* must be commutative and
    associative on counters so the order never changes the result.  An
    empty result set yields an empty record stamped with the current time.
    """
    records = list(result_set.values())
    if not records:
        logger.debug("Result set is empty; returning an empty record")
        return RawRecord(coverage={}, timestamp=time.time())

    logger.debug("Consolidating %d run(s): %s", len(records), ", ".join(result_set))
    return reduce(merge, records)
