"""Download plan data models."""

from __future__ import annotations

from typing import TYPE_CHECKING, Dict, List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field

from .filenames import build_file_path, sanitize_directory_path
from .templates import DEFAULT_TEMPLATE

if TYPE_CHECKING:
    from collector.collection.models import CollectionSnapshot
    from collector.config.models import CollectorConfig

PlanScope = Literal["all", "selected"]
ConflictAction = Literal["uniquify", "overwrite"]

ROOT_DIRECTORY_KEY = "(root)"
DEFAULT_UNGROUPED_DIRECTORY = "Ungrouped"


class DirectorySettings(BaseModel):
    """Immutable settings snapshot for a single planning pass.

    Attributes:
        root_directory: Prefix for every destination directory (may be empty).
        per_group_directory: Custom sub-directories keyed by group id.
        ungrouped_directory: Sub-directory for ungrouped images.
        filename_template: Template applied to inferred filenames.
        auto_rename_default: Default resolution for conflicting entries.
    """

    model_config = ConfigDict(frozen=True)

    root_directory: str = ""
    per_group_directory: Dict[str, str] = Field(default_factory=dict)
    ungrouped_directory: str = ""
    filename_template: str = DEFAULT_TEMPLATE
    auto_rename_default: bool = False

    @property
    def ungrouped_label(self) -> str:
        """Return the ungrouped sub-directory, falling back to ``Ungrouped``."""
        return self.ungrouped_directory or DEFAULT_UNGROUPED_DIRECTORY

    @classmethod
    def from_config(
        cls,
        config: "CollectorConfig",
        snapshot: Optional["CollectionSnapshot"] = None,
    ) -> "DirectorySettings":
        """Build settings from the configuration and the groups' stored directories.

        Args:
            config: Effective Collector configuration.
            snapshot: Collection whose groups may carry custom directories.

        Returns:
            DirectorySettings: Normalized settings snapshot.
        """
        per_group: Dict[str, str] = {}
        if snapshot is not None:
            for group in snapshot.groups:
                directory = sanitize_directory_path(group.directory)
                if directory:
                    per_group[group.id] = directory

        downloads = config.downloads
        return cls(
            root_directory=sanitize_directory_path(downloads.download_directory),
            per_group_directory=per_group,
            ungrouped_directory=sanitize_directory_path(downloads.ungrouped_directory),
            filename_template=downloads.filename_template,
            auto_rename_default=downloads.auto_rename,
        )


class PlannedDownload(BaseModel):
    """A single destination in a download plan.

    Attributes:
        url: Source URL of the image.
        directory: Forward-slash-joined destination directory.
        filename: Destination filename including its extension.
        group_id: Owning group, or ``None`` for ungrouped images.
        has_conflict: Whether another entry targets the same full path.
        will_rename: Conflict resolution; ``None`` until chosen.
    """

    url: str
    directory: str
    filename: str
    group_id: Optional[str] = None
    has_conflict: bool = False
    will_rename: Optional[bool] = None

    @property
    def full_path(self) -> str:
        """Return ``directory/filename`` (just ``filename`` for an empty directory)."""
        if not self.directory:
            return self.filename
        return f"{self.directory}/{self.filename}"

    @property
    def conflict_action(self) -> ConflictAction:
        """Return the write strategy the download executor should apply."""
        return "overwrite" if self.will_rename is False else "uniquify"


class TreeEntry(BaseModel):
    """A file node in the download tree.

    Attributes:
        filename: Destination filename.
        url: Source URL.
        has_conflict: Whether the entry collides with another.
        will_rename: Whether a collision is resolved by renaming.
        plan_index: Position of the entry in the flat plan.
        group_id: Owning group, or ``None``.
    """

    filename: str
    url: str
    has_conflict: bool = False
    will_rename: bool = True
    plan_index: int
    group_id: Optional[str] = None


DownloadTree = Dict[str, List[TreeEntry]]


class TreeStats(BaseModel):
    """Aggregate counts for a download tree."""

    total: int = 0
    conflicts: int = 0
    will_overwrite: int = 0


class DownloadRequest(BaseModel):
    """A single write request handed to the download executor.

    Attributes:
        url: Source URL to fetch.
        path: Relative destination path.
        conflict_action: ``uniquify`` to auto-rename on write, ``overwrite``
            to replace an existing file.
    """

    url: str
    path: str
    conflict_action: ConflictAction

    @classmethod
    def from_planned(cls, entry: PlannedDownload) -> "DownloadRequest":
        """Build the request for a planned download."""
        return cls(
            url=entry.url,
            path=build_file_path(entry.directory, entry.filename),
            conflict_action=entry.conflict_action,
        )


__all__ = [
    "PlanScope",
    "ConflictAction",
    "ROOT_DIRECTORY_KEY",
    "DEFAULT_UNGROUPED_DIRECTORY",
    "DirectorySettings",
    "PlannedDownload",
    "TreeEntry",
    "DownloadTree",
    "TreeStats",
    "DownloadRequest",
]
