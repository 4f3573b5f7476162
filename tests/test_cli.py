"""Tests for the `ds organize` command."""

import pytest
from typer.testing import CliRunner

from ds_app import cli

runner = CliRunner()


@pytest.fixture(autouse=True)
def quiet_logging(monkeypatch):
    monkeypatch.setattr(cli, "configure_logging", lambda *a, **k: None)


def test_apply_copy(scenario_a):
    result = runner.invoke(
        cli.app, ["organize", str(scenario_a), "--copy", "--no-subfolder", "--apply"]
    )
    assert result.exit_code == 0, result.output
    assert (scenario_a / "2024-01-15" / "f1.jpg").exists()
    assert (scenario_a / "f1.jpg").exists()
    assert "Date folders" in result.output


def test_plan_then_decline(scenario_a):
    result = runner.invoke(
        cli.app,
        ["organize", str(scenario_a), "--move", "--no-subfolder", "--plan"],
        input="n\n",
    )
    assert result.exit_code == 0, result.output
    assert "[PLAN] photos=3 folders=2" in result.output
    assert "2024-02-01/" in result.output
    assert not (scenario_a / "2024-01-15").exists()


def test_failures_give_nonzero_exit(scenario_a):
    (scenario_a / "2024-01-15").write_text("blocks the folder")
    result = runner.invoke(
        cli.app, ["organize", str(scenario_a), "--copy", "--no-subfolder", "--apply"]
    )
    assert result.exit_code == 1
    assert (scenario_a / "2024-02-01" / "f3.jpg").exists()


def test_apply_and_plan_conflict(scenario_a):
    result = runner.invoke(
        cli.app,
        ["organize", str(scenario_a), "--copy", "--no-subfolder", "--apply", "--plan"],
    )
    assert result.exit_code != 0


def test_version():
    result = runner.invoke(cli.app, ["--version"])
    assert result.exit_code == 0
    assert result.output.strip()


def test_escaping_subfolder_name_is_rejected(scenario_a):
    result = runner.invoke(
        cli.app,
        [
            "organize", str(scenario_a), "--copy", "--subfolder",
            "--subfolder-name", "../out", "--apply",
        ],
    )
    assert result.exit_code == 2
    assert not (scenario_a.parent / "out").exists()
    assert sorted(p.name for p in scenario_a.iterdir()) == ["f1.jpg", "f2.jpg", "f3.jpg"]
