"""Directory tree views over download plans."""

from __future__ import annotations

from typing import Dict, Iterable, List, Sequence

from .models import ROOT_DIRECTORY_KEY, DownloadTree, PlannedDownload, TreeEntry, TreeStats


def build_tree(plan: Sequence[PlannedDownload]) -> DownloadTree:
    """Group plan entries by their exact directory string.

    Entries keep their position in the flat plan as ``plan_index`` so edits
    made through the tree can be written back to the plan.
    """
    tree: DownloadTree = {}
    for index, entry in enumerate(plan):
        key = entry.directory or ROOT_DIRECTORY_KEY
        tree.setdefault(key, []).append(
            TreeEntry(
                filename=entry.filename,
                url=entry.url,
                has_conflict=entry.has_conflict,
                will_rename=entry.will_rename is not False,
                plan_index=index,
                group_id=entry.group_id,
            )
        )
    return tree


def sorted_directories(tree: DownloadTree) -> List[str]:
    """Return the tree's directories in lexicographic order."""
    return sorted(tree)


def tree_stats(tree: DownloadTree) -> TreeStats:
    """Count files, conflicts and conflicts set to overwrite."""
    stats = TreeStats()
    for entries in tree.values():
        for entry in entries:
            stats.total += 1
            if entry.has_conflict:
                stats.conflicts += 1
                if not entry.will_rename:
                    stats.will_overwrite += 1
    return stats


def unique_directories(plan: Iterable[PlannedDownload]) -> List[str]:
    """Return the distinct non-empty directories of ``plan``, sorted."""
    return sorted({entry.directory for entry in plan if entry.directory})


def group_by_directory(plan: Iterable[PlannedDownload]) -> Dict[str, List[PlannedDownload]]:
    """Group plan entries by directory, keeping plan order within each group."""
    grouped: Dict[str, List[PlannedDownload]] = {}
    for entry in plan:
        grouped.setdefault(entry.directory, []).append(entry)
    return grouped


__all__ = [
    "build_tree",
    "sorted_directories",
    "tree_stats",
    "unique_directories",
    "group_by_directory",
]
