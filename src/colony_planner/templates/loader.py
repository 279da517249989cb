"""Reads template JSON documents from disk or from the bundled package data."""

from __future__ import annotations

import json
from importlib import resources
from pathlib import Path
from types import MappingProxyType
from typing import Any

from colony_planner.errors import TemplateError
from colony_planner.models import MAX_TIER, ComponentName, Coord, StructureKind

from .store import Template, TierStructures


def _coord(raw: Any, context: str) -> Coord:
    try:
        x, y = raw
        return Coord(int(x), int(y))
    except (TypeError, ValueError) as exc:
        raise TemplateError(f"Malformed coordinate {raw!r} in {context}") from exc


def _tier_structures(raw: dict[str, Any], context: str) -> TierStructures:
    structures: dict[StructureKind, tuple[Coord, ...]] = {}
    for kind_name, coords in raw.items():
        try:
            kind = StructureKind(kind_name)
        except ValueError as exc:
            raise TemplateError(f"Unknown structure kind {kind_name!r} in {context}") from exc
        structures[kind] = tuple(_coord(item, f"{context}/{kind_name}") for item in coords)
    return MappingProxyType(structures)


def parse_template(payload: dict[str, Any]) -> Template:
    name = str(payload.get("name", "unnamed"))
    if "anchor" not in payload:
        raise TemplateError(f"Template {name!r} declares no anchor")

    tiers: dict[int, TierStructures] = {}
    for tier_key, raw in payload.get("tiers", {}).items():
        tier = int(tier_key)
        if not 1 <= tier <= MAX_TIER:
            raise TemplateError(f"Template {name!r} has tier {tier} outside 1..{MAX_TIER}")
        tiers[tier] = _tier_structures(raw, f"{name}/tier {tier}")

    points = {
        label: _coord(raw, f"{name}/pointsOfInterest/{label}")
        for label, raw in payload.get("pointsOfInterest", {}).items()
    }
    return Template(
        name=name,
        anchor=_coord(payload["anchor"], f"{name}/anchor"),
        tiers=MappingProxyType(tiers),
        points_of_interest=MappingProxyType(points),
    )


def load_template(path: str | Path) -> Template:
    target = Path(path).expanduser()
    if not target.exists():
        raise FileNotFoundError(f"Template not found: {target}")
    return parse_template(json.loads(target.read_text(encoding="utf-8")))


def load_bundled_template(component: ComponentName) -> Template:
    source = resources.files("colony_planner.templates").joinpath("data").joinpath(f"{component.value}.json")
    return parse_template(json.loads(source.read_text(encoding="utf-8")))
