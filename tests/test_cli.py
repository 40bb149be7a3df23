"""Tests for the root printzone CLI."""

from pathlib import Path

import pytest
from click.testing import CliRunner

from printzone import __version__
from printzone.cli import cli


def test_cli_help(cli_runner: CliRunner) -> None:
    result = cli_runner.invoke(cli, ["--help"])
    assert result.exit_code == 0
    assert "printzone" in result.output


def test_cli_version(cli_runner: CliRunner) -> None:
    result = cli_runner.invoke(cli, ["--version"])
    assert result.exit_code == 0
    assert __version__ in result.output


def test_cli_no_args(cli_runner: CliRunner) -> None:
    result = cli_runner.invoke(cli, [])
    assert result.exit_code == 0
    assert "Usage" in result.output


# --- Global flags ---


@pytest.mark.parametrize("flag", ["--json", "-q", "-v", "--log-json"])
def test_global_flag_accepted(cli_runner: CliRunner, flag: str) -> None:
    result = cli_runner.invoke(cli, [flag, "--version"])
    assert result.exit_code == 0


def test_config_option_accepted(cli_runner: CliRunner) -> None:
    result = cli_runner.invoke(cli, ["-c", "/tmp/absent-printzone.toml", "--version"])
    assert result.exit_code == 0


def test_config_file_applies(cli_runner: CliRunner, tmp_path: Path) -> None:
    config = tmp_path / "custom.toml"
    config.write_text('[resolver]\nplaceholder_url = "/configured.png"\n')
    empty = tmp_path / "empty.json"
    empty.write_text('{"id": 1}')
    result = cli_runner.invoke(cli, ["-c", str(config), "-q", "resolve", str(empty)])
    assert result.exit_code == 0
    assert result.stdout.strip() == "/configured.png"


def test_invalid_config_reports_error(cli_runner: CliRunner, product_file: Path) -> None:
    (product_file.parent / "printzone.toml").write_text("[resolver\n")
    result = cli_runner.invoke(cli, ["resolve", str(product_file)])
    assert result.exit_code == 1
    assert "Invalid TOML" in result.output


# --- Commands registered ---


@pytest.mark.parametrize("command", ["resolve", "plan", "batch", "check"])
def test_command_registered(cli_runner: CliRunner, command: str) -> None:
    result = cli_runner.invoke(cli, ["--help"])
    assert command in result.output
