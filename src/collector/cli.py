"""Command line interface for the Collector project."""

from __future__ import annotations

import difflib
import logging
from pathlib import Path
from typing import Any

import click
import yaml
from click.core import ParameterSource
from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape
from rich.syntax import Syntax
from rich.tree import Tree

from collector.collection import (
    CollectionError,
    CollectionRepository,
    DropCandidate,
    accept_candidates,
)
from collector.config import (
    ConfigError,
    ConfigManager,
    CollectorConfig,
    parse_override_value,
    resolve_with_precedence,
)
from collector.planning import DirectorySettings, DownloadPlanner, PreviewSession
from collector.planning.filenames import compose_renamed_filename, default_filename

console = Console()

LOGGER = logging.getLogger(__name__)


def _handle_cli_error(
    message: str,
    *,
    code: str,
    json_output: bool,
    details: Any | None = None,
    original: Exception | None = None,
) -> None:
    """Emit a standardized error and terminate the command appropriately.

    Args:
        message: Human-readable error message.
        code: Machine-readable error identifier.
        json_output: Indicates whether JSON mode is active.
        details: Optional structured details to include in the payload.
        original: Original exception for chaining when not using JSON.

    Raises:
        SystemExit: When emitting JSON output to terminate the command.
        click.ClickException: For non-JSON flows to surface the error.
    """

    if json_output:
        payload: dict[str, Any] = {"error": {"code": code, "message": message}}
        if details is not None:
            payload["error"]["details"] = details
        console.print_json(data=payload)
        raise SystemExit(1)

    if isinstance(original, click.ClickException):
        raise original

    raise click.ClickException(message) from original


def _emit_message(message: Any, *, mode: str, quiet: bool, summary_only: bool) -> None:
    """Conditionally print CLI output according to quiet/summary settings.

    Args:
        message: Renderable or string to emit.
        mode: Output mode identifier (`detail`, `summary`, `warning`, or `error`).
        quiet: Whether quiet mode is active.
        summary_only: Whether only summary lines should be emitted.
    """

    if quiet and mode != "error":
        return

    if summary_only and mode not in {"summary", "warning", "error"}:
        return

    console.print(message)


def _format_summary_line(command: str, root: Path | str, metrics: dict[str, Any]) -> str:
    """Return a consistent summary line for CLI commands."""
    parts = ", ".join(f"{key}={value}" for key, value in metrics.items())
    return f"[green]{command} summary for {root}: {parts}.[/green]"


def _resolve_output_modes(
    ctx: click.Context,
    config: CollectorConfig,
    *,
    json_output: bool,
    quiet: bool,
    summary_mode: bool,
) -> tuple[bool, bool]:
    """Combine explicit flags with configured CLI defaults.

    Returns:
        tuple[bool, bool]: Effective ``(quiet, summary_only)`` flags.

    Raises:
        click.ClickException: If the requested modes are incompatible.
    """

    explicit_quiet = ctx.get_parameter_source("quiet") == ParameterSource.COMMANDLINE
    explicit_summary = ctx.get_parameter_source("summary_mode") == ParameterSource.COMMANDLINE

    quiet_enabled = quiet if explicit_quiet else config.cli.quiet_default
    summary_only = summary_mode if explicit_summary else config.cli.summary_default

    if json_output:
        if explicit_quiet and quiet_enabled:
            raise click.ClickException("--json cannot be combined with --quiet.")
        if explicit_summary and summary_only:
            raise click.ClickException("--json cannot be combined with --summary.")
        return False, False

    if quiet_enabled and summary_only:
        raise click.ClickException(
            "Quiet and summary modes cannot both be enabled. Adjust CLI defaults or flags."
        )
    return quiet_enabled, summary_only


def _configure_logging(level_name: str) -> None:
    """Route log records through rich at the configured level.

    Raises:
        ConfigError: If ``level_name`` is not a known logging level.
    """

    level = logging.getLevelName(level_name.strip().upper())
    if not isinstance(level, int):
        raise ConfigError(f"Unknown logging level: {level_name!r}")
    logging.basicConfig(
        level=level,
        format="%(message)s",
        handlers=[RichHandler(console=Console(stderr=True), show_path=False)],
        force=True,
    )


def _load_config(cli_overrides: dict[str, Any] | None = None) -> CollectorConfig:
    config = ConfigManager().load(cli_overrides=cli_overrides)
    _configure_logging(config.logging.level)
    return config


def _repository_for(config: CollectorConfig, collection: str | None) -> CollectionRepository:
    return CollectionRepository(Path(collection or config.collection.path))


def _assign_nested(target: dict[str, Any], path: list[str], value: Any) -> None:
    """Assign a nested value within a dictionary for a dotted path.

    Raises:
        ConfigError: If a non-mapping value is encountered along the path.
    """

    node = target
    for segment in path[:-1]:
        existing = node.get(segment)
        if existing is None:
            existing = {}
            node[segment] = existing
        elif not isinstance(existing, dict):
            raise ConfigError(
                f"Cannot assign into '{segment}' because it is not a mapping in the config file."
            )
        node = existing
    node[path[-1]] = value


def _render_tree(session: PreviewSession, root_label: str) -> Tree:
    """Build a rich tree of destination directories and files."""
    tree = Tree(f"[bold]{escape(root_label)}[/bold]")
    plan_tree = session.tree
    for directory in session.directories:
        branch = tree.add(f"[cyan]{escape(directory)}/[/cyan]")
        for entry in plan_tree[directory]:
            label = escape(entry.filename)
            if entry.has_conflict:
                if entry.will_rename:
                    label += " [yellow](conflict: rename on write)[/yellow]"
                else:
                    label += " [red](conflict: overwrite)[/red]"
            branch.add(label)
    return tree


@click.group(context_settings={"help_option_names": ["-h", "--help"]})
@click.version_option(package_name="collector")
def cli() -> None:
    """Collector plans where collected web images will be downloaded."""


@cli.command()
@click.option(
    "--scope",
    type=click.Choice(["all", "selected"]),
    help="Plan every image or only the ones passed with --select.",
)
@click.option(
    "--select",
    "selected_urls",
    multiple=True,
    metavar="URL",
    help="Image URL to include; implies --scope selected.",
)
@click.option("--group", "group_id", type=str, help="Only plan images of this group id.")
@click.option("--no-ungrouped", is_flag=True, help="Leave ungrouped images out of the plan.")
@click.option("--template", type=str, help="Filename template for this run only.")
@click.option("--download-dir", type=str, help="Download root directory for this run only.")
@click.option(
    "--collection",
    type=click.Path(dir_okay=False, path_type=str),
    help="Collection file to plan (defaults to collection.path).",
)
@click.option("--json", "json_output", is_flag=True, help="Emit the plan as JSON.")
@click.option("--summary", "summary_mode", is_flag=True, help="Only emit summary lines.")
@click.option("--quiet", is_flag=True, help="Suppress non-error output.")
@click.pass_context
def plan(
    ctx: click.Context,
    scope: str | None,
    selected_urls: tuple[str, ...],
    group_id: str | None,
    no_ungrouped: bool,
    template: str | None,
    download_dir: str | None,
    collection: str | None,
    json_output: bool,
    summary_mode: bool,
    quiet: bool,
) -> None:
    """Preview the download plan for the stored collection.

    Args:
        ctx: Click context used for parameter source inspection.
        scope: ``all`` or ``selected``; inferred from ``--select`` when omitted.
        selected_urls: URLs to plan when the scope is ``selected``.
        group_id: Optional group restriction.
        no_ungrouped: When True, skip ungrouped images.
        template: Optional filename template overriding the configured one.
        download_dir: Optional download root overriding the configured one.
        collection: Optional path to the collection file.
        json_output: If True, emit download requests and stats as JSON.
        summary_mode: When True, limit output to summary lines and warnings.
        quiet: When True, suppress non-error CLI output entirely.

    Raises:
        click.ClickException: If configuration or the collection cannot be loaded.
    """

    json_enabled = json_output
    cli_overrides: dict[str, Any] = {}
    if template is not None:
        cli_overrides["downloads.filename_template"] = template
    if download_dir is not None:
        cli_overrides["downloads.download_directory"] = download_dir
    try:
        config = _load_config(cli_overrides)
        quiet_enabled, summary_only = _resolve_output_modes(
            ctx, config, json_output=json_output, quiet=quiet, summary_mode=summary_mode
        )

        repository = _repository_for(config, collection)
        snapshot = repository.load()
        LOGGER.debug("Loaded collection from %s", repository.path)
        settings = DirectorySettings.from_config(config, snapshot)
        effective_scope = scope or ("selected" if selected_urls else "all")

        entries = DownloadPlanner().build_plan(
            snapshot,
            settings,
            scope=effective_scope,  # type: ignore[arg-type]
            selected_urls=selected_urls,
            group_id=group_id,
            include_ungrouped=config.downloads.include_ungrouped and not no_ungrouped,
        )
        session = PreviewSession(entries, auto_rename_default=settings.auto_rename_default)
        stats = session.stats
        root_label = settings.root_directory or "(download root)"

        if json_output:
            console.print_json(
                data={
                    "context": {
                        "collection": repository.path.as_posix(),
                        "scope": effective_scope,
                        "group": group_id,
                        "root_directory": settings.root_directory,
                        "filename_template": settings.filename_template,
                    },
                    "downloads": [
                        request.model_dump(mode="json") for request in session.export_requests()
                    ],
                    "plan": [entry.model_dump(mode="json") for entry in session.plan],
                    "directories": session.directories,
                    "stats": stats.model_dump(),
                }
            )
            return

        if session.is_empty:
            _emit_message(
                "[yellow]Nothing to download; the plan is empty.[/yellow]",
                mode="warning",
                quiet=quiet_enabled,
                summary_only=summary_only,
            )
            return

        _emit_message(
            _render_tree(session, root_label),
            mode="detail",
            quiet=quiet_enabled,
            summary_only=summary_only,
        )
        if session.has_overwrite_conflicts:
            _emit_message(
                f"[yellow]{stats.will_overwrite} conflicting file(s) will be overwritten.[/yellow]",
                mode="warning",
                quiet=quiet_enabled,
                summary_only=summary_only,
            )
        _emit_message(
            _format_summary_line(
                "Plan",
                root_label,
                {
                    "files": stats.total,
                    "directories": len(session.directories),
                    "conflicts": stats.conflicts,
                    "overwrites": stats.will_overwrite,
                },
            ),
            mode="summary",
            quiet=quiet_enabled,
            summary_only=summary_only,
        )
    except ConfigError as exc:
        _handle_cli_error(str(exc), code="config_error", json_output=json_enabled, original=exc)
    except CollectionError as exc:
        _handle_cli_error(
            str(exc), code="collection_error", json_output=json_enabled, original=exc
        )
    except click.ClickException as exc:
        _handle_cli_error(str(exc), code="cli_error", json_output=json_enabled, original=exc)
    except Exception as exc:
        _handle_cli_error(
            f"Unexpected error while planning downloads: {exc}",
            code="internal_error",
            json_output=json_enabled,
            details={"exception": type(exc).__name__},
            original=exc,
        )


@cli.command()
@click.argument("url")
@click.argument("name")
@click.option("--group", "group_id", type=str, help="Group expected to hold the image.")
@click.option(
    "--collection",
    type=click.Path(dir_okay=False, path_type=str),
    help="Collection file to update (defaults to collection.path).",
)
@click.option("--json", "json_output", is_flag=True, help="Emit the stored filename as JSON.")
def rename(
    url: str,
    name: str,
    group_id: str | None,
    collection: str | None,
    json_output: bool,
) -> None:
    """Store NAME as the custom filename of the image at URL.

    The current extension is kept unless NAME ends with an image extension.
    """

    try:
        config = _load_config()
        repository = _repository_for(config, collection)
        image = repository.load().find_image(url)
        current = None
        if image is not None:
            current = image.custom_filename or default_filename(url)

        filename = compose_renamed_filename(name, current, url)
        if not filename:
            raise click.ClickException("NAME cannot be blank.")

        repository.update_custom_filename(url, filename, group_id)
        if json_output:
            console.print_json(data={"url": url, "filename": filename, "group": group_id})
        else:
            console.print(f"[green]Renamed {escape(url)} to {escape(filename)}.[/green]")
    except ConfigError as exc:
        _handle_cli_error(str(exc), code="config_error", json_output=json_output, original=exc)
    except CollectionError as exc:
        _handle_cli_error(
            str(exc), code="collection_error", json_output=json_output, original=exc
        )
    except click.ClickException as exc:
        _handle_cli_error(str(exc), code="cli_error", json_output=json_output, original=exc)


@cli.command()
@click.argument("urls", nargs=-1, required=True)
@click.option("--group", "group_id", type=str, help="Group receiving the images.")
@click.option("--filename", type=str, help="Suggested name for the added images.")
@click.option("--format", "image_format", type=str, help="Image format such as png or jpg.")
@click.option(
    "--hint",
    type=click.Choice(["primary", "duplicate", "ui-element", "unknown"]),
    default="unknown",
    show_default=True,
    help="Ingestion hint; duplicates and UI elements are skipped.",
)
@click.option(
    "--collection",
    type=click.Path(dir_okay=False, path_type=str),
    help="Collection file to update (defaults to collection.path).",
)
@click.option("--json", "json_output", is_flag=True, help="Emit the added URLs as JSON.")
@click.option("--summary", "summary_mode", is_flag=True, help="Only emit summary lines.")
@click.option("--quiet", is_flag=True, help="Suppress non-error output.")
@click.pass_context
def add(
    ctx: click.Context,
    urls: tuple[str, ...],
    group_id: str | None,
    filename: str | None,
    image_format: str | None,
    hint: str,
    collection: str | None,
    json_output: bool,
    summary_mode: bool,
    quiet: bool,
) -> None:
    """Add image URLS to the collection as dropped candidates."""

    json_enabled = json_output
    try:
        config = _load_config()
        quiet_enabled, summary_only = _resolve_output_modes(
            ctx, config, json_output=json_output, quiet=quiet, summary_mode=summary_mode
        )

        repository = _repository_for(config, collection)
        before = repository.load()
        candidates = [
            DropCandidate.model_validate(
                {"url": url, "filename": filename, "format": image_format, "hint": hint}
            )
            for url in urls
        ]
        after = accept_candidates(before, candidates, group_id)

        known = set(before.all_urls())
        added = [url for url in after.all_urls() if url not in known]
        if added:
            repository.save(after)

        if json_output:
            console.print_json(
                data={
                    "added": added,
                    "skipped": len(urls) - len(added),
                    "collection": repository.path.as_posix(),
                }
            )
            return

        for url in added:
            _emit_message(
                f"[cyan]Added {escape(url)}[/cyan]",
                mode="detail",
                quiet=quiet_enabled,
                summary_only=summary_only,
            )
        _emit_message(
            _format_summary_line(
                "Add",
                repository.path,
                {"added": len(added), "skipped": len(urls) - len(added)},
            ),
            mode="summary",
            quiet=quiet_enabled,
            summary_only=summary_only,
        )
    except ConfigError as exc:
        _handle_cli_error(str(exc), code="config_error", json_output=json_enabled, original=exc)
    except CollectionError as exc:
        _handle_cli_error(
            str(exc), code="collection_error", json_output=json_enabled, original=exc
        )
    except click.ClickException as exc:
        _handle_cli_error(str(exc), code="cli_error", json_output=json_enabled, original=exc)


@cli.group()
def config() -> None:
    """Manage Collector configuration files and overrides."""


@config.command("view")
@click.option("--no-env", is_flag=True, help="Ignore environment overrides when displaying output.")
def config_view(no_env: bool) -> None:
    """Display the effective configuration after applying precedence rules.

    Args:
        no_env: If True, ignore environment-derived overrides.

    Raises:
        click.ClickException: If configuration cannot be loaded.
    """
    manager = ConfigManager()
    try:
        manager.ensure_exists()
        config = manager.load(include_env=not no_env)
    except ConfigError as exc:
        raise click.ClickException(str(exc)) from exc

    yaml_text = yaml.safe_dump(config.model_dump(mode="python"), sort_keys=False)
    console.print(Syntax(yaml_text, "yaml", word_wrap=True))


@config.command("set")
@click.argument("key")
@click.option("--value", required=True, help="Value to assign to KEY.")
def config_set(key: str, value: str) -> None:
    """Persist a configuration value expressed as a dotted KEY.

    Args:
        key: Dotted path such as ``downloads.filename_template``.
        value: Scalar value; templates like ``{group}_{index}`` stay strings.

    Raises:
        click.ClickException: If assignment or validation fails.
    """
    manager = ConfigManager()
    try:
        manager.ensure_exists()
        file_data = manager.load_file_overrides()
    except ConfigError as exc:
        raise click.ClickException(str(exc)) from exc

    before = manager.read_text().splitlines()
    segments = [segment.strip() for segment in key.split(".") if segment.strip()]
    if not segments:
        raise click.ClickException(
            "KEY must specify a dotted path such as 'downloads.filename_template'."
        )

    try:
        _assign_nested(file_data, segments, parse_override_value(value))
        resolve_with_precedence(defaults=CollectorConfig(), file_overrides=file_data)
    except ConfigError as exc:
        raise click.ClickException(str(exc)) from exc

    manager.save(file_data)
    after = manager.read_text().splitlines()

    # The timestamp line always changes; only report real edits.
    diff = list(
        difflib.unified_diff(
            before,
            after,
            fromfile="config.yaml (before)",
            tofile="config.yaml (after)",
            lineterm="",
        )
    )
    changed = [
        line
        for line in diff
        if line[:1] in {"+", "-"}
        and not line.startswith(("+++", "---"))
        and "# Last updated:" not in line
    ]

    if not changed:
        console.print("[yellow]No changes applied; value already up to date.[/yellow]")
        return

    console.print(Syntax("\n".join(diff), "diff", word_wrap=False))
    console.print(f"[green]Updated {'.'.join(segments)}.[/green]")


@config.command("edit")
def config_edit() -> None:
    """Open the configuration file in an interactive editor session.

    Raises:
        click.ClickException: If edited content is invalid or cannot be saved.
    """
    manager = ConfigManager()
    manager.ensure_exists()

    original = manager.read_text()
    edited = click.edit(original, extension=".yaml")

    if edited is None:
        console.print("[yellow]Edit cancelled; no changes applied.[/yellow]")
        return

    if edited == original:
        console.print("[yellow]No changes detected.[/yellow]")
        return

    try:
        parsed = yaml.safe_load(edited) or {}
    except yaml.YAMLError as exc:
        raise click.ClickException(f"Invalid YAML: {exc}") from exc

    if not isinstance(parsed, dict):
        raise click.ClickException("Configuration file must contain a top-level mapping.")

    try:
        resolve_with_precedence(defaults=CollectorConfig(), file_overrides=parsed)
    except ConfigError as exc:
        raise click.ClickException(str(exc)) from exc

    manager.save(parsed)
    console.print("[green]Configuration updated successfully.[/green]")


def main() -> None:
    """Invoke the Click CLI as the console script entry point."""
    cli()


if __name__ == "__main__":
    main()
