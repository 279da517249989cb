from __future__ import annotations

import importlib
from pathlib import Path

import pytest

from colony_planner.cli import parse_placement
from colony_planner.models import ComponentName, WorldPosition


def test_console_entrypoint_exposes_app() -> None:
    pytest.importorskip("typer")

    module = importlib.import_module("colony_planner.main")

    assert hasattr(module, "app")
    assert module.app is not None


def test_parse_placement_accepts_rotation_and_aliases() -> None:
    placement = parse_placement("command-center=30,31@90", "W1N1")

    assert placement.component is ComponentName.COMMAND_CENTER
    assert placement.pos == WorldPosition(30, 31, "W1N1")
    assert placement.rotation == 90


@pytest.mark.parametrize("text", ["bunker", "bunker=25", "bunker=25,25@45", "tower=25,25"])
def test_parse_placement_rejects_malformed_input(text: str) -> None:
    with pytest.raises(ValueError):
        parse_placement(text, "W1N1")


def test_preview_command_renders_structure_map() -> None:
    pytest.importorskip("typer")
    from typer.testing import CliRunner

    from colony_planner.main import app

    result = CliRunner().invoke(app, ["preview", "--place", "bunker=25,25", "--tier", "1"])

    assert result.exit_code == 0
    assert "spawn" in result.output
    assert "29,25" in result.output


def test_finalize_command_persists_and_rejects(tmp_path: Path) -> None:
    pytest.importorskip("typer")
    from typer.testing import CliRunner

    from colony_planner.main import app

    store = str(tmp_path / "plans.json")
    runner = CliRunner()

    rejected = runner.invoke(app, ["finalize", "--colony", "W1N1", "--place", "hatchery=10,10", "--store", store])
    assert rejected.exit_code == 1
    assert "Not a valid room layout" in rejected.output

    accepted = runner.invoke(app, ["finalize", "--colony", "W1N1", "--place", "bunker=25,25", "--store", store])
    assert accepted.exit_code == 0

    shown = runner.invoke(app, ["show", "--colony", "W1N1", "--tier", "1", "--store", store])
    assert shown.exit_code == 0
    assert "bunkerData" in shown.output
