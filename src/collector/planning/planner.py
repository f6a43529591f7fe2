"""Planner for image downloads."""

from __future__ import annotations

import logging
from datetime import datetime
from typing import Iterable, Iterator, List, Mapping, Optional, Tuple

from collector.collection.models import CollectedImage, CollectionSnapshot, ImageGroup

from .filenames import (
    compose_renamed_filename,
    default_filename,
    resolve_filename,
    sanitize_directory_path,
    sanitize_filename,
)
from .models import DirectorySettings, PlanScope, PlannedDownload
from .templates import FilenameContext, apply_template, is_default_template
from .uniqueness import DirectoryClaims

LOGGER = logging.getLogger(__name__)


class DownloadPlanner:
    """Derive download plans from a collection snapshot and directory settings."""

    def build_plan(
        self,
        snapshot: CollectionSnapshot,
        settings: DirectorySettings,
        scope: PlanScope = "all",
        selected_urls: Iterable[str] = (),
        *,
        group_id: Optional[str] = None,
        include_ungrouped: bool = True,
        live_edit_overrides: Optional[Mapping[str, str]] = None,
        now: Optional[datetime] = None,
    ) -> List[PlannedDownload]:
        """Produce the flat download plan for ``snapshot``.

        Images are visited group by group in stored order, ungrouped images
        last. Filenames are unique per directory (case-insensitively) except
        for live edits, which keep the typed name (plus the current extension
        when none is typed) and are never renumbered. Blank live edits are
        ignored.

        Args:
            snapshot: Collection to plan.
            settings: Directory and filename settings for this pass.
            scope: ``all`` images or only ``selected`` ones.
            selected_urls: URLs selected by the user when ``scope`` is ``selected``.
            group_id: Restrict the plan to a single group.
            include_ungrouped: Whether ungrouped images are planned.
            live_edit_overrides: Unsaved names being edited, keyed by URL.
            now: Moment used for date/time template tokens.

        Returns:
            list[PlannedDownload]: Entries without conflict annotations.
        """

        selected = frozenset(selected_urls) if scope == "selected" else None
        overrides = live_edit_overrides or {}
        moment = now or datetime.now()

        plan: List[PlannedDownload] = []
        claims = DirectoryClaims()

        for group, image in self._iter_scope(snapshot, group_id, include_ungrouped):
            if selected is not None and image.url not in selected:
                continue

            directory = self._directory_for(group, settings)
            override = overrides.get(image.url)
            filename = ""
            if override is not None:
                current = image.custom_filename or default_filename(image.url)
                filename = compose_renamed_filename(override, current, image.url)
            if filename:
                claims.claim(directory, filename)
            else:
                candidate = self._filename_for(
                    image,
                    group,
                    settings,
                    index=len(plan) + 1,
                    now=moment,
                )
                filename = claims.uniquify(directory, candidate)

            entry = PlannedDownload(
                url=image.url,
                directory=directory,
                filename=filename,
                group_id=group.id if group is not None else None,
            )
            LOGGER.debug("Planned %s -> %s", entry.url, entry.full_path)
            plan.append(entry)

        LOGGER.info("Planned %d download(s) with scope '%s'", len(plan), scope)
        return plan

    # ------------------------------------------------------------------ #
    # Helpers                                                            #
    # ------------------------------------------------------------------ #

    def _iter_scope(
        self,
        snapshot: CollectionSnapshot,
        group_id: Optional[str],
        include_ungrouped: bool,
    ) -> Iterator[Tuple[Optional[ImageGroup], CollectedImage]]:
        if group_id is not None:
            group = snapshot.find_group(group_id)
            if group is None:
                LOGGER.warning("Group %s not found; nothing to plan", group_id)
                return
            for image in group.images:
                yield group, image
            return

        for group in snapshot.groups:
            for image in group.images:
                yield group, image

        if include_ungrouped:
            for image in snapshot.ungrouped:
                yield None, image

    def _directory_for(self, group: Optional[ImageGroup], settings: DirectorySettings) -> str:
        if group is not None:
            subdirectory = (
                settings.per_group_directory.get(group.id)
                or sanitize_directory_path(group.directory)
                or group.name
            )
        else:
            subdirectory = settings.ungrouped_label

        if not settings.root_directory:
            return subdirectory
        return f"{settings.root_directory}/{subdirectory}"

    def _filename_for(
        self,
        image: CollectedImage,
        group: Optional[ImageGroup],
        settings: DirectorySettings,
        *,
        index: int,
        now: datetime,
    ) -> str:
        custom = image.custom_filename
        if custom and custom != default_filename(image.url):
            return custom

        name, extension = resolve_filename(image.url)
        if is_default_template(settings.filename_template):
            return sanitize_filename(name + extension)

        context = FilenameContext(
            name=name,
            extension=extension,
            index=index,
            group=group.name if group is not None else settings.ungrouped_label,
        )
        return apply_template(settings.filename_template, context, now=now)


__all__ = ["DownloadPlanner"]
