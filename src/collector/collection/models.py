"""Collection data models consumed by the download planner."""

from __future__ import annotations

from typing import Iterator, List, Literal, Optional

from pydantic import BaseModel, Field

DropHint = Literal["primary", "duplicate", "ui-element", "unknown"]


class CollectedImage(BaseModel):
    """An image collected from the web.

    Attributes:
        url: Source URL; the identity key of the image.
        custom_filename: User-supplied filename (extension included).
        inferred_filename: Name suggested when the image was collected.
        extension: Extension suggested when the image was collected.
    """

    url: str
    custom_filename: Optional[str] = None
    inferred_filename: Optional[str] = None
    extension: Optional[str] = None


class ImageGroup(BaseModel):
    """A named, ordered group of collected images.

    Attributes:
        id: Stable group identifier.
        name: Display name, also the default sub-directory.
        directory: Optional custom sub-directory overriding the name.
        images: Images in stored order.
    """

    id: str
    name: str
    directory: Optional[str] = None
    images: List[CollectedImage] = Field(default_factory=list)


class CollectionSnapshot(BaseModel):
    """Point-in-time view of all groups and ungrouped images."""

    groups: List[ImageGroup] = Field(default_factory=list)
    ungrouped: List[CollectedImage] = Field(default_factory=list)

    def iter_images(self) -> Iterator[CollectedImage]:
        """Yield every image, grouped images first, in stored order."""
        for group in self.groups:
            yield from group.images
        yield from self.ungrouped

    def all_urls(self) -> List[str]:
        """Return every image URL in stored order."""
        return [image.url for image in self.iter_images()]

    def find_image(self, url: str) -> Optional[CollectedImage]:
        """Return the image with ``url`` or ``None``."""
        return next((image for image in self.iter_images() if image.url == url), None)

    def find_group(self, group_id: str) -> Optional[ImageGroup]:
        """Return the group with ``group_id`` or ``None``."""
        return next((group for group in self.groups if group.id == group_id), None)

    def group_for(self, url: str) -> Optional[ImageGroup]:
        """Return the group containing ``url``; ``None`` for ungrouped images."""
        for group in self.groups:
            if any(image.url == url for image in group.images):
                return group
        return None


class DropCandidate(BaseModel):
    """An already-validated image candidate handed over by drop ingestion.

    Attributes:
        url: Source URL of the candidate.
        filename: Name suggested by the ingestion system.
        format: Image format (``png``, ``jpg``...) when known.
        hint: Ingestion recommendation for the candidate.
    """

    url: str
    filename: Optional[str] = None
    format: Optional[str] = None
    hint: DropHint = "unknown"


__all__ = [
    "DropHint",
    "CollectedImage",
    "ImageGroup",
    "CollectionSnapshot",
    "DropCandidate",
]
