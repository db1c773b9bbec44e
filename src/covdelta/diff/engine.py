"""Compare two coverage snapshots and attribute changes to owners."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from covdelta.models.stats import (
    Coverage,
    CoverageDiff,
    FileDiff,
    OwnerDiff,
    StatsDiff,
    changed,
    combine_stats,
)
from covdelta.owners import CodeOwners

if TYPE_CHECKING:
    from collections.abc import Sequence

    from covdelta.owners import OwnerResolver

logger = logging.getLogger(__name__)


def relative_path(path: str, base_dir: str | None) -> str:
    """Strip *base_dir* (with or without a trailing ``/``) from the front of *path*.

    Only a whole leading path segment is stripped, so ``repo`` removes the
    prefix of ``repo/src/a.ts`` but not of ``repository/a.ts``.
    """
    if not base_dir:
        return path
    prefix = base_dir.rstrip("/")
    if not prefix:
        return path.lstrip("/")
    if path == prefix:
        return ""
    if path.startswith(prefix + "/"):
        return path[len(prefix) + 1 :]
    return path


def diff_coverage(
    baseline: Coverage,
    current: Coverage,
    base_dir: str | None = None,
    owners: OwnerResolver | None = None,
) -> CoverageDiff:
    """Diff two snapshots file by file and roll the results up per owner.

    Args:
        baseline: Snapshot to compare against.
        current: Snapshot under review.
        base_dir: Prefix stripped from paths before display and owner lookup.
        owners: Owner resolver; defaults to the nearest CODEOWNERS file
            at or above *base_dir*.

    Returns:
        File diffs for changed files present in *current*, ordered by
        filename;
        owner aggregates over every file (changed or not, including files
        removed since *baseline*), in order of first encounter; and the
        diff of the two snapshot totals.
    """
    if owners is None:
        owners = CodeOwners.from_directory(base_dir)

    includes_branches = baseline.includes_branches or current.includes_branches
    # Ordered by display name; the raw path breaks ties between paths that
    # strip to the same name.
    paths = sorted(
        baseline.file_stats.keys() | current.file_stats.keys(),
        key=lambda p: (relative_path(p, base_dir), p),
    )

    resolved: dict[str, Sequence[str]] = {}
    file_diffs: list[FileDiff] = []
    owner_diffs: dict[str, OwnerDiff] = {}

    for path in paths:
        filename = relative_path(path, base_dir)
        base_stats = baseline.file_stats.get(path)
        cur_stats = current.file_stats.get(path)

        if cur_stats is not None and changed(base_stats, cur_stats):
            file_diffs.append(FileDiff(filename=filename, baseline=base_stats, current=cur_stats))

        if filename not in resolved:
            resolved[filename] = owners.resolve_owners(filename)

        for owner_name in resolved[filename]:
            prev = owner_diffs.get(owner_name)
            owner_diffs[owner_name] = OwnerDiff(
                owner_name=owner_name,
                baseline=combine_stats(prev.baseline if prev else None, base_stats),
                current=combine_stats(prev.current if prev else None, cur_stats),
            )

    logger.debug(
        "Diffed %d file(s): %d changed, %d owner(s)",
        len(paths),
        len(file_diffs),
        len(owner_diffs),
    )
    return CoverageDiff(
        includes_branches=includes_branches,
        file_diffs=file_diffs,
        owner_diffs=list(owner_diffs.values()),
        total_diff=StatsDiff(baseline=baseline.total_stats, current=current.total_stats),
    )
