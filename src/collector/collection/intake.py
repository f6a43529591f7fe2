"""Accept drop-ingestion candidates into a collection snapshot."""

from __future__ import annotations

import logging
from typing import Iterable, Optional

from collector.planning.filenames import DEFAULT_EXTENSION, DEFAULT_NAME, format_extension

from .errors import MissingGroupError
from .models import CollectedImage, CollectionSnapshot, DropCandidate, DropHint

LOGGER = logging.getLogger(__name__)

REJECTED_HINTS: frozenset[DropHint] = frozenset({"ui-element", "duplicate"})


def accept_candidates(
    snapshot: CollectionSnapshot,
    candidates: Iterable[DropCandidate],
    group_id: Optional[str] = None,
) -> CollectionSnapshot:
    """Return a new snapshot with the accepted candidates appended.

    Candidates hinted as UI elements or duplicates are skipped, as are URLs
    already present in the collection (or earlier in ``candidates``).

    Args:
        snapshot: Current collection; left untouched.
        candidates: Candidates produced by drop ingestion.
        group_id: Target group; ``None`` appends to the ungrouped images.

    Returns:
        CollectionSnapshot: Updated copy of the collection.

    Raises:
        MissingGroupError: If ``group_id`` does not name an existing group.
    """

    updated = snapshot.model_copy(deep=True)
    if group_id is None:
        target = updated.ungrouped
    else:
        group = updated.find_group(group_id)
        if group is None:
            raise MissingGroupError(f"No group with id {group_id!r} in the collection")
        target = group.images

    known = set(updated.all_urls())
    for candidate in candidates:
        if candidate.hint in REJECTED_HINTS:
            LOGGER.debug("Skipping %s candidate %s", candidate.hint, candidate.url)
            continue
        if not candidate.url or candidate.url in known:
            continue
        known.add(candidate.url)
        target.append(_to_image(candidate))

    return updated


def _to_image(candidate: DropCandidate) -> CollectedImage:
    return CollectedImage(
        url=candidate.url,
        inferred_filename=candidate.filename or DEFAULT_NAME,
        extension=format_extension(candidate.format) or DEFAULT_EXTENSION,
    )


__all__ = ["accept_candidates", "REJECTED_HINTS"]
