"""Collection persistence helpers for the Collector CLI."""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Optional

from pydantic import ValidationError

from .errors import CollectionError, MissingGroupError, MissingImageError
from .intake import accept_candidates
from .models import CollectedImage, CollectionSnapshot, DropCandidate, DropHint, ImageGroup

LOGGER = logging.getLogger(__name__)

DEFAULT_COLLECTION_PATH = Path("~/.collector/collection.json")


class CollectionRepository:
    """Load and persist the collected images and their custom filenames."""

    def __init__(self, path: Path | None = None) -> None:
        """Initialize the repository.

        Args:
            path: Location of the collection JSON file.
        """
        self._path = (path or DEFAULT_COLLECTION_PATH).expanduser()

    @property
    def path(self) -> Path:
        """Return the resolved collection file path."""
        return self._path

    def load(self) -> CollectionSnapshot:
        """Load the stored collection.

        Returns:
            CollectionSnapshot: Stored collection, or an empty one when no
            file exists yet.

        Raises:
            CollectionError: If the stored data cannot be parsed or validated.
        """
        if not self._path.exists():
            return CollectionSnapshot()

        try:
            data = json.loads(self._path.read_text(encoding="utf-8"))
        except json.JSONDecodeError as exc:
            raise CollectionError(f"Invalid collection data: {exc}") from exc

        try:
            return CollectionSnapshot.model_validate(data)
        except ValidationError as exc:
            raise CollectionError(f"Invalid collection data: {exc}") from exc

    def save(self, snapshot: CollectionSnapshot) -> None:
        """Persist ``snapshot`` to disk.

        Args:
            snapshot: Collection to serialize.
        """
        self._path.parent.mkdir(parents=True, exist_ok=True)
        payload = snapshot.model_dump(mode="json", exclude_none=True)
        self._path.write_text(json.dumps(payload, indent=2), encoding="utf-8")

    def update_custom_filename(
        self,
        url: str,
        filename: str,
        group_id: Optional[str] = None,
    ) -> CollectionSnapshot:
        """Persist a user-chosen filename for the image at ``url``.

        Args:
            url: Image URL to rename.
            filename: New filename including its extension.
            group_id: Group expected to hold the image; ``None`` searches the
                whole collection.

        Returns:
            CollectionSnapshot: The updated, saved collection.

        Raises:
            MissingGroupError: If ``group_id`` is unknown.
            MissingImageError: If no matching image exists.
        """
        snapshot = self.load()

        if group_id is not None:
            group = snapshot.find_group(group_id)
            if group is None:
                raise MissingGroupError(f"No group with id {group_id!r} in the collection")
            image = next((item for item in group.images if item.url == url), None)
        else:
            image = snapshot.find_image(url)

        if image is None:
            raise MissingImageError(f"No collected image with url {url!r}")

        image.custom_filename = filename
        self.save(snapshot)
        LOGGER.info("Stored custom filename %s for %s", filename, url)
        return snapshot


__all__ = [
    "CollectionRepository",
    "DEFAULT_COLLECTION_PATH",
    "CollectedImage",
    "CollectionSnapshot",
    "DropCandidate",
    "DropHint",
    "ImageGroup",
    "accept_candidates",
    "CollectionError",
    "MissingGroupError",
    "MissingImageError",
]
