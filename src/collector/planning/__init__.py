"""Download planning engine."""

from .conflicts import detect_conflicts, has_any_conflicts, has_overwrite_conflicts
from .errors import PlanEditError
from .filenames import (
    IMAGE_EXTENSIONS,
    ResolvedFilename,
    default_filename,
    resolve_filename,
    sanitize_filename,
    split_filename,
)
from .models import (
    DirectorySettings,
    DownloadRequest,
    DownloadTree,
    PlannedDownload,
    PlanScope,
    TreeEntry,
    TreeStats,
)
from .planner import DownloadPlanner
from .session import PreviewSession
from .templates import FilenameContext, apply_template
from .tree import build_tree, sorted_directories, tree_stats
from .uniqueness import DirectoryClaims, uniquify

__all__ = [
    "IMAGE_EXTENSIONS",
    "DirectoryClaims",
    "DirectorySettings",
    "DownloadPlanner",
    "DownloadRequest",
    "DownloadTree",
    "FilenameContext",
    "PlanEditError",
    "PlanScope",
    "PlannedDownload",
    "PreviewSession",
    "ResolvedFilename",
    "TreeEntry",
    "TreeStats",
    "apply_template",
    "build_tree",
    "default_filename",
    "detect_conflicts",
    "has_any_conflicts",
    "has_overwrite_conflicts",
    "resolve_filename",
    "sanitize_filename",
    "sorted_directories",
    "split_filename",
    "tree_stats",
    "uniquify",
]
