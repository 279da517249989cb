from __future__ import annotations

import json
from pathlib import Path

import pytest

from colony_planner.errors import TemplateError
from colony_planner.models import ComponentName, Coord, StructureKind
from colony_planner.templates import TemplateStore, load_bundled_template, load_template, parse_template


def test_default_store_has_every_component() -> None:
    store = TemplateStore.default()

    for component in ComponentName:
        assert component in store
    assert store.get(ComponentName.BUNKER).anchor == Coord(25, 25)
    assert store.get(ComponentName.HATCHERY).structures_at(1)[StructureKind.SPAWN] == (Coord(25, 23),)


def test_missing_tier_yields_empty_mapping() -> None:
    template = TemplateStore.default().get(ComponentName.COMMAND_CENTER)

    assert dict(template.structures_at(9)) == {}
    assert template.all_coords(9) == []


def test_bundled_templates_respect_tier_allowances() -> None:
    store = TemplateStore.default()

    for component in ComponentName:
        template = store.get(component)
        for tier in range(1, 9):
            for kind, coords in template.structures_at(tier).items():
                assert len(coords) <= kind.allowed_count(tier), (component, tier, kind)


def test_bundled_templates_never_stack_kinds_on_one_cell() -> None:
    store = TemplateStore.default()

    for component in ComponentName:
        template = store.get(component)
        for tier in range(1, 9):
            total = sum(len(coords) for coords in template.structures_at(tier).values())
            assert len(template.all_coords(tier)) == total, (component, tier)


def test_parse_template_rejects_unknown_kind() -> None:
    with pytest.raises(TemplateError):
        parse_template({"name": "x", "anchor": [0, 0], "tiers": {"1": {"moat": [[1, 1]]}}})


def test_parse_template_rejects_out_of_range_tier() -> None:
    with pytest.raises(TemplateError):
        parse_template({"name": "x", "anchor": [0, 0], "tiers": {"9": {"road": [[1, 1]]}}})


def test_parse_template_requires_anchor() -> None:
    with pytest.raises(TemplateError):
        parse_template({"name": "x", "tiers": {}})


def test_load_template_from_file(tmp_path: Path) -> None:
    path = tmp_path / "outpost.json"
    path.write_text(
        json.dumps(
            {
                "name": "outpost",
                "anchor": [3, 3],
                "pointsOfInterest": {"gate": [3, 1]},
                "tiers": {"2": {"tower": [[3, 4]], "road": [[3, 2], [3, 1]]}},
            }
        ),
        encoding="utf-8",
    )

    template = load_template(path)

    assert template.name == "outpost"
    assert template.points_of_interest["gate"] == Coord(3, 1)
    assert template.structures_at(2)[StructureKind.ROAD] == (Coord(3, 2), Coord(3, 1))


def test_template_data_is_read_only() -> None:
    template = TemplateStore.default().get(ComponentName.BUNKER)

    with pytest.raises(TypeError):
        template.structures_at(1)[StructureKind.SPAWN] = ()  # type: ignore[index]


def test_load_template_takes_a_path_and_bundled_data_takes_a_component(tmp_path: Path) -> None:
    with pytest.raises(FileNotFoundError):
        load_template(tmp_path / "bunker.json")

    assert load_bundled_template(ComponentName.BUNKER).anchor == Coord(25, 25)
