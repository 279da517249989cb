"""CLI-side handler wrapping planner construction and the plan store."""

from __future__ import annotations

import re

from colony_planner.adapters import SimulatedColonyWorld
from colony_planner.config import Settings, settings as default_settings
from colony_planner.memory import PlanMemory, PlanStore
from colony_planner.models import ComponentName, Placement, StructureMap, WorldPosition
from colony_planner.planning import LayoutEngine, RoomPlanner

_PLACEMENT_RE = re.compile(r"^\s*([A-Za-z_-]+)\s*=\s*(\d+)\s*,\s*(\d+)\s*(?:@\s*(\d+))?\s*$")


def parse_placement(text: str, area: str) -> Placement:
    """Parse ``component=x,y`` or ``component=x,y@rotation``."""
    match = _PLACEMENT_RE.match(text)
    if not match:
        raise ValueError(f"Expected component=x,y[@rotation], got {text!r}")
    name, x, y, rotation = match.groups()
    return Placement(
        component=ComponentName.parse(name),
        pos=WorldPosition(int(x), int(y), area),
        rotation=int(rotation or 0),
    )


def render_map(structure_map: StructureMap) -> dict[str, list[str]]:
    return {kind.value: [f"{pos.x},{pos.y}" for pos in positions] for kind, positions in structure_map.items()}


class CliPlanHandler:
    """Sync facade used by the typer commands."""

    def __init__(self, store: PlanStore, *, settings: Settings | None = None) -> None:
        self._store = store
        self._settings = settings or default_settings

    def preview(self, placements: list[Placement], tier: int) -> StructureMap:
        return LayoutEngine(bound=self._settings.grid_bound).make(placements, tier)

    def finalize(self, colony: str, placements: list[Placement], *, tier: int = 1) -> PlanMemory:
        """Finalize against an empty simulated area and persist the record."""
        memory = self._store.load(colony) or PlanMemory()
        world = SimulatedColonyWorld(area=colony, tier=tier, bound=self._settings.grid_bound)
        planner = RoomPlanner(world, memory, settings=self._settings)
        for placement in placements:
            planner.add_component(placement.component, placement.pos, placement.rotation)
        planner.finalize()
        self._store.save(colony, memory)
        return memory

    def load(self, colony: str) -> PlanMemory | None:
        return self._store.load(colony)

    def recall(self, colony: str, tier: int) -> StructureMap:
        memory = self._store.load(colony)
        if memory is None:
            return {}
        world = SimulatedColonyWorld(area=colony, tier=tier, bound=self._settings.grid_bound)
        return RoomPlanner(world, memory, settings=self._settings).recall_map()
