"""Configuration models describing Collector settings."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field, field_validator

from collector.planning.templates import DEFAULT_TEMPLATE


class CollectorBaseModel(BaseModel):
    """Shared configuration for Collector Pydantic models."""

    model_config = ConfigDict(extra="forbid")


class DownloadSettings(CollectorBaseModel):
    """Settings that shape download plans.

    Attributes:
        download_directory: Root directory prefixed to every destination.
        ungrouped_directory: Sub-directory for ungrouped images (``Ungrouped`` when empty).
        filename_template: Template applied to inferred filenames.
        auto_rename: Default resolution for conflicting destinations.
        include_ungrouped: Whether ungrouped images are planned by default.
    """

    download_directory: str = ""
    ungrouped_directory: str = ""
    filename_template: str = DEFAULT_TEMPLATE
    auto_rename: bool = False
    include_ungrouped: bool = True

    @field_validator("filename_template")
    @classmethod
    def _default_blank_template(cls, value: str) -> str:
        return value.strip() or DEFAULT_TEMPLATE


class CollectionSettings(CollectorBaseModel):
    """Location of the stored collection.

    Attributes:
        path: JSON file holding groups, images and custom filenames.
    """

    path: str = "~/.collector/collection.json"


class LoggingSettings(CollectorBaseModel):
    """Runtime logging configuration.

    Attributes:
        level: Logging verbosity level.
    """

    level: str = "WARNING"


class CLIOptions(CollectorBaseModel):
    """CLI behavior defaults and presentation preferences.

    Attributes:
        quiet_default: Whether commands suppress non-error output by default.
        summary_default: Whether commands only print summary lines by default.
    """

    quiet_default: bool = False
    summary_default: bool = False


class CollectorConfig(CollectorBaseModel):
    """Top-level configuration struct for Collector.

    Attributes:
        downloads: Download planning settings.
        collection: Collection storage settings.
        logging: Logging configuration.
        cli: CLI presentation defaults.
    """

    downloads: DownloadSettings = Field(default_factory=DownloadSettings)
    collection: CollectionSettings = Field(default_factory=CollectionSettings)
    logging: LoggingSettings = Field(default_factory=LoggingSettings)
    cli: CLIOptions = Field(default_factory=CLIOptions)


__all__ = [
    "CollectorBaseModel",
    "DownloadSettings",
    "CollectionSettings",
    "LoggingSettings",
    "CLIOptions",
    "CollectorConfig",
]
