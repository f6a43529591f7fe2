"""Interactive review of a download plan."""

from __future__ import annotations

import logging
from typing import Iterable, List, Sequence

from .conflicts import detect_conflicts, has_any_conflicts, has_overwrite_conflicts
from .errors import PlanEditError
from .filenames import compose_renamed_filename
from .models import DownloadRequest, DownloadTree, PlannedDownload, TreeStats
from .tree import build_tree, sorted_directories, tree_stats

LOGGER = logging.getLogger(__name__)


class PreviewSession:
    """Own the mutable copy of a plan while it is being reviewed.

    Every edit re-runs conflict detection; the planner itself is never re-run
    so in-progress renames survive.
    """

    def __init__(self, plan: Sequence[PlannedDownload], auto_rename_default: bool = False) -> None:
        self._auto_rename_default = auto_rename_default
        self._plan: List[PlannedDownload] = detect_conflicts(plan, auto_rename_default)

    @property
    def plan(self) -> List[PlannedDownload]:
        """Return a copy of the annotated plan."""
        return list(self._plan)

    @property
    def tree(self) -> DownloadTree:
        """Return the plan grouped by directory."""
        return build_tree(self._plan)

    @property
    def directories(self) -> List[str]:
        """Return the plan's directories in display order."""
        return sorted_directories(self.tree)

    @property
    def stats(self) -> TreeStats:
        """Return aggregate counts for the plan."""
        return tree_stats(self.tree)

    @property
    def is_empty(self) -> bool:
        """Return True when nothing would be downloaded."""
        return not self._plan

    @property
    def has_conflicts(self) -> bool:
        """Return True when any entry collides with another."""
        return has_any_conflicts(self._plan)

    @property
    def has_overwrite_conflicts(self) -> bool:
        """Return True when a colliding entry is set to overwrite."""
        return has_overwrite_conflicts(self._plan)

    def rename(self, plan_index: int, new_name: str) -> str:
        """Rename a planned file, keeping its extension.

        Args:
            plan_index: Position of the entry in the plan.
            new_name: New name, with or without an image extension.

        Returns:
            str: The full filename now stored on the entry, suitable for
            persisting as the image's custom filename.

        Raises:
            PlanEditError: If the index is out of range or the name is blank.
        """
        entry = self._entry(plan_index)
        filename = compose_renamed_filename(new_name, entry.filename, entry.url)
        if not filename:
            raise PlanEditError("Filename cannot be empty.")

        if filename != entry.filename:
            LOGGER.debug("Renaming plan entry %d to %s", plan_index, filename)
            self._replace(plan_index, entry.model_copy(update={"filename": filename}))
        return filename

    def set_will_rename(self, plan_index: int, value: bool) -> None:
        """Choose between renaming (True) and overwriting (False) for an entry."""
        entry = self._entry(plan_index)
        self._replace(plan_index, entry.model_copy(update={"will_rename": value}))

    def toggle_will_rename(self, plan_index: int) -> bool:
        """Flip the rename/overwrite choice of an entry and return the resulting value.

        Entries without a conflict always resolve to rename, so toggling them
        has no lasting effect.
        """
        self.set_will_rename(plan_index, self._entry(plan_index).will_rename is False)
        return self._plan[plan_index].will_rename is not False

    def remove_urls(self, urls: Iterable[str]) -> int:
        """Drop entries whose source image left the collection.

        Returns:
            int: Number of removed entries.
        """
        doomed = set(urls)
        remaining = [entry for entry in self._plan if entry.url not in doomed]
        removed = len(self._plan) - len(remaining)
        if removed:
            self._plan = detect_conflicts(remaining, self._auto_rename_default)
        return removed

    def export_requests(self) -> List[DownloadRequest]:
        """Return one download request per planned entry, in plan order."""
        return [DownloadRequest.from_planned(entry) for entry in self._plan]

    def _entry(self, plan_index: int) -> PlannedDownload:
        if not 0 <= plan_index < len(self._plan):
            raise PlanEditError(f"Plan index {plan_index} is out of range.")
        return self._plan[plan_index]

    def _replace(self, plan_index: int, entry: PlannedDownload) -> None:
        updated = list(self._plan)
        updated[plan_index] = entry
        self._plan = detect_conflicts(updated, self._auto_rename_default)


__all__ = ["PreviewSession"]
