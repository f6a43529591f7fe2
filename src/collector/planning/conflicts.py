"""Conflict detection over finished download plans."""

from __future__ import annotations

from collections import Counter
from typing import Iterable, List, Sequence

from .models import PlannedDownload


def detect_conflicts(
    plan: Sequence[PlannedDownload],
    auto_rename_default: bool = False,
) -> List[PlannedDownload]:
    """Annotate entries that share a full destination path.

    Paths compare case-sensitively. A conflicting entry keeps any resolution
    it already carries and otherwise receives ``auto_rename_default``;
    entries without a conflict always resolve to rename. Running the
    detector again on its own output changes nothing.

    Args:
        plan: Entries to inspect; left untouched.
        auto_rename_default: Resolution for conflicts without a prior choice.

    Returns:
        list[PlannedDownload]: New, annotated entries in the same order.
    """

    counts = Counter(entry.full_path for entry in plan)

    annotated: List[PlannedDownload] = []
    for entry in plan:
        has_conflict = counts[entry.full_path] > 1
        if has_conflict:
            will_rename = (
                entry.will_rename if entry.will_rename is not None else auto_rename_default
            )
        else:
            will_rename = True
        annotated.append(
            entry.model_copy(update={"has_conflict": has_conflict, "will_rename": will_rename})
        )
    return annotated


def has_any_conflicts(plan: Iterable[PlannedDownload]) -> bool:
    """Return True when any entry is flagged as conflicting."""
    return any(entry.has_conflict for entry in plan)


def has_overwrite_conflicts(plan: Iterable[PlannedDownload]) -> bool:
    """Return True when a conflicting entry is set to overwrite."""
    return any(entry.has_conflict and entry.will_rename is False for entry in plan)


__all__ = ["detect_conflicts", "has_any_conflicts", "has_overwrite_conflicts"]
