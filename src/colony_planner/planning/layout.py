"""Layout template engine: composes placed components into one structure map."""

from __future__ import annotations

from typing import Iterable

from colony_planner.geometry import rotate, translate
from colony_planner.models import (
    DEFAULT_GRID_BOUND,
    ComponentName,
    ComponentPlan,
    Coord,
    Placement,
    RoomPlan,
    StructureKind,
    StructureMap,
    WorldPosition,
)
from colony_planner.templates import Template, TemplateStore


class LayoutEngine:
    """Pure function of (tier, placements, templates) to a flattened ``StructureMap``."""

    def __init__(self, templates: TemplateStore | None = None, *, bound: int = DEFAULT_GRID_BOUND) -> None:
        self._templates = templates or TemplateStore.default()
        self._bound = bound

    @property
    def templates(self) -> TemplateStore:
        return self._templates

    def component_map(self, template: Template, placement: Placement, tier: int) -> StructureMap:
        """Template-at-tier moved so its anchor lands on the placement (then rotated about it)."""
        target = placement.pos.coord
        component: StructureMap = {}
        for kind, coords in template.structures_at(tier).items():
            moved = translate(coords, template.anchor, target)
            if placement.rotation:
                moved = rotate(moved, target, placement.rotation)
            component[kind] = [WorldPosition.at(coord, placement.pos.area) for coord in moved]
        return component

    def generate_plan(self, placements: Iterable[Placement], tier: int) -> RoomPlan:
        plan: RoomPlan = {}
        for placement in placements:
            if placement.component not in self._templates:
                continue
            template = self._templates.get(placement.component)
            plan[placement.component] = ComponentPlan(
                map=self.component_map(template, placement, tier),
                pos=placement.pos,
                rotation=placement.rotation,
            )
        return plan

    def flatten(self, plan: RoomPlan) -> StructureMap:
        flattened: StructureMap = {}
        seen: dict[StructureKind, set[int]] = {}
        for component_plan in plan.values():
            for kind, positions in component_plan.map.items():
                bucket = flattened.setdefault(kind, [])
                keys = seen.setdefault(kind, set())
                for pos in positions:
                    key = pos.x + self._bound * pos.y
                    if key in keys:
                        continue
                    keys.add(key)
                    bucket.append(pos)
        return flattened

    def make(self, placements: Iterable[Placement], tier: int) -> StructureMap:
        return self.flatten(self.generate_plan(placements, tier))

    def bunker_map(self, anchor: Coord, tier: int, area: str, rotation: int = 0) -> StructureMap:
        """Structure map fully determined by a bunker anchor and rotation, no stored maps needed."""
        return self.make([Placement(ComponentName.BUNKER, WorldPosition.at(anchor, area), rotation)], tier)
