"""Tests for ``speccompat scenarios`` command.

Verifies:
    - All scenarios pass (exit code 0) in text and JSON modes.
    - Selecting scenarios by name.
    - Unknown names exit with code 2.
"""

from __future__ import annotations

import json

from click.testing import CliRunner

from speccompat.cli.main import cli
from speccompat.harness import SCENARIOS


class TestScenariosCommand:
    """Tests for running the scenario suite."""

    def test_all_pass_exit_0(self, runner: CliRunner) -> None:
        result = runner.invoke(cli, ["scenarios"])
        assert result.exit_code == 0
        assert f"{len(SCENARIOS)} passed" in result.output

    def test_json_output(self, runner: CliRunner) -> None:
        result = runner.invoke(cli, ["scenarios", "--format", "json"])
        assert result.exit_code == 0
        data = json.loads(result.output)
        assert len(data) == len(SCENARIOS)
        assert all(entry["passed"] for entry in data)
        assert data[0]["message"] == "Success."
        assert "snapshot" in data[0]

    def test_select_by_name(self, runner: CliRunner) -> None:
        result = runner.invoke(
            cli, ["scenarios", "cycle-by-update", "--format", "json"]
        )
        assert result.exit_code == 0
        data = json.loads(result.output)
        assert [entry["name"] for entry in data] == ["cycle-by-update"]

    def test_unknown_name_exit_2(self, runner: CliRunner) -> None:
        result = runner.invoke(cli, ["scenarios", "nope"])
        assert result.exit_code == 2
        assert "Unknown scenario" in result.output

    def test_verbose_runs(self, runner: CliRunner) -> None:
        result = runner.invoke(cli, ["scenarios", "single-version", "-v"])
        assert result.exit_code == 0
