"""Tests for `printzone plan`."""

from __future__ import annotations

import json
from pathlib import Path

import pytest
from click.testing import CliRunner

from printzone.cli import cli


def _plan(cli_runner: CliRunner, product_file: Path, *args: str) -> dict:
    result = cli_runner.invoke(cli, ["--json", "plan", str(product_file), *args])
    assert result.exit_code == 0, result.output
    return json.loads(result.stdout)


class TestPlanCommand:
    def test_size_option(self, cli_runner: CliRunner, product_file: Path) -> None:
        payload = _plan(cli_runner, product_file, "--size", "500x500")
        placement = payload["data"]["overlay"]["placement"]
        assert placement["offset_x"] == pytest.approx(150)
        assert placement["offset_y"] == pytest.approx(150)

    def test_container_option(self, cli_runner: CliRunner, product_file: Path) -> None:
        payload = _plan(cli_runner, product_file, "--container", "400x200")
        assert payload["data"]["image_box"]["x"] == pytest.approx(100)
        assert payload["data"]["overlay"]["bleeds"] is True

    def test_zone_selection(self, cli_runner: CliRunner, product_file: Path) -> None:
        payload = _plan(cli_runner, product_file, "--zone", "10")
        assert payload["data"]["zone"]["name"] == "chest"
        payload = _plan(cli_runner, product_file, "--zone-name", "sleeve")
        assert payload["data"]["fallback"] == "NO_ZONE"
        assert payload["data"]["overlay"] is None

    def test_fallback_is_success(self, cli_runner: CliRunner, product_file: Path) -> None:
        result = cli_runner.invoke(cli, ["plan", str(product_file), "--color", "8"])
        assert result.exit_code == 0
        assert "INVALID_REFERENCE" in result.stdout
        assert "WARNING:" in result.stderr

    def test_human_table(self, cli_runner: CliRunner, product_file: Path) -> None:
        result = cli_runner.invoke(cli, ["plan", str(product_file)])
        assert result.exit_code == 0
        assert "Offset X" in result.stdout

    def test_verbose_includes_timings(self, cli_runner: CliRunner, product_file: Path) -> None:
        result = cli_runner.invoke(cli, ["-v", "plan", str(product_file)])
        assert result.exit_code == 0
        assert "compute_placement" in result.stdout

    @pytest.mark.parametrize("size", ["500", "axb", "500x"])
    def test_bad_size(self, cli_runner: CliRunner, product_file: Path, size: str) -> None:
        result = cli_runner.invoke(cli, ["plan", str(product_file), "--size", size])
        assert result.exit_code == 2
        assert "is not a size" in result.output
