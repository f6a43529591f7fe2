"""CLI tests for configuration commands."""

import os
from pathlib import Path
from typing import Any

import pytest
from click.testing import CliRunner

from collector.cli import cli
from collector.config import ConfigManager


def _env_with_home(tmp_path: Path) -> dict[str, Any]:
    env = dict(os.environ)
    env["HOME"] = str(tmp_path)
    return env


def _config_path(tmp_path: Path) -> Path:
    return tmp_path / ".collector" / "config.yaml"


def test_config_view_creates_and_displays_config(tmp_path: Path) -> None:
    runner = CliRunner()
    env = _env_with_home(tmp_path)

    result = runner.invoke(cli, ["config", "view"], env=env)

    assert result.exit_code == 0
    assert "downloads:" in result.output
    assert _config_path(tmp_path).exists()


def test_config_set_keeps_templates_as_strings(tmp_path: Path) -> None:
    runner = CliRunner()
    env = _env_with_home(tmp_path)

    result = runner.invoke(
        cli,
        ["config", "set", "downloads.filename_template", "--value", "{group}_{index}"],
        env=env,
    )

    assert result.exit_code == 0
    assert "Updated downloads.filename_template" in result.output

    config = ConfigManager(config_path=_config_path(tmp_path)).load(include_env=False)
    assert config.downloads.filename_template == "{group}_{index}"


def test_config_set_parses_scalars(tmp_path: Path) -> None:
    runner = CliRunner()
    env = _env_with_home(tmp_path)

    args = ["config", "set", "downloads.auto_rename", "--value", "true"]
    result = runner.invoke(cli, args, env=env)
    assert result.exit_code == 0

    again = runner.invoke(cli, args, env=env)
    assert again.exit_code == 0
    assert "No changes applied" in again.output

    config = ConfigManager(config_path=_config_path(tmp_path)).load(include_env=False)
    assert config.downloads.auto_rename is True


def test_config_set_rejects_unknown_keys(tmp_path: Path) -> None:
    runner = CliRunner()
    env = _env_with_home(tmp_path)

    result = runner.invoke(cli, ["config", "set", "downloads.nope", "--value", "1"], env=env)

    assert result.exit_code != 0
    assert "Invalid configuration values" in result.output


def test_config_edit_applies_changes(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    runner = CliRunner()
    env = _env_with_home(tmp_path)

    manager = ConfigManager(config_path=_config_path(tmp_path))
    manager.ensure_exists()

    def _mock_edit(text: str, **_: Any) -> str:
        return text.replace("level: WARNING", "level: DEBUG")

    monkeypatch.setattr("collector.cli.click.edit", _mock_edit)

    result = runner.invoke(cli, ["config", "edit"], env=env)

    assert result.exit_code == 0
    assert "updated" in result.output.lower()

    config = manager.load(include_env=False)
    assert config.logging.level == "DEBUG"


def test_config_edit_rejects_invalid_yaml(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    runner = CliRunner()
    env = _env_with_home(tmp_path)

    monkeypatch.setattr("collector.cli.click.edit", lambda text, **_: "- a list")

    result = runner.invoke(cli, ["config", "edit"], env=env)

    assert result.exit_code != 0
    assert "top-level mapping" in result.output
