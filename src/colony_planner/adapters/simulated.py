"""In-memory colony world.

Used by the CLI to finalize plans against an empty area and by tests to drive
the reconciliation passes without a live game.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from itertools import count
from typing import Any

from colony_planner.models import DEFAULT_GRID_BOUND, Coord, StructureKind, WorldPosition
from colony_planner.world import CommandResult, ConstructionSite, LiveStructure, Marker, WorkerUnit

MAX_CONSTRUCTION_SITES = 100


@dataclass
class SimulatedColonyWorld:
    area: str = "W1N1"
    colony_id: int = 0
    tick: int = 0
    tier: int = 1
    colony_count: int = 1
    fuel: int = 0
    bound: int = DEFAULT_GRID_BOUND
    walls: set[Coord] = field(default_factory=set)
    deposit: WorldPosition | None = None
    sources: list[WorldPosition] = field(default_factory=list)
    controller: WorldPosition | None = None
    expansion: Coord | None = None
    worker_units: list[WorkerUnit] = field(default_factory=list)
    rejected_sites: set[WorldPosition] = field(default_factory=set)
    indestructible: set[str] = field(default_factory=set)
    evacuations: list[WorldPosition] = field(default_factory=list)
    destroyed: list[LiveStructure] = field(default_factory=list)
    _structures: dict[str, LiveStructure] = field(default_factory=dict)
    _sites: list[ConstructionSite] = field(default_factory=list)
    _markers: dict[str, Marker] = field(default_factory=dict)
    _ids: Any = field(default_factory=lambda: count(1))

    def pos(self, x: int, y: int) -> WorldPosition:
        return WorldPosition(x, y, self.area)

    def add_structure(
        self,
        kind: StructureKind,
        x: int,
        y: int,
        *,
        owned: bool = True,
        store: dict[str, int] | None = None,
    ) -> LiveStructure:
        structure = LiveStructure(
            id=f"{kind.value}-{next(self._ids)}",
            kind=kind,
            pos=self.pos(x, y),
            owned=owned,
            store=dict(store or {}),
        )
        self._structures[structure.id] = structure
        return structure

    def add_marker(self, name: str, x: int, y: int, secondary_attribute: str, payload: dict | None = None) -> Marker:
        marker = Marker(name=name, pos=self.pos(x, y), secondary_attribute=secondary_attribute, payload=dict(payload or {}))
        self._markers[name] = marker
        return marker

    def complete_sites(self) -> None:
        """Turn every pending construction site into a finished structure."""
        sites, self._sites = self._sites, []
        for site in sites:
            self.add_structure(site.kind, site.pos.x, site.pos.y)

    def structures(self, kind: StructureKind | None = None) -> list[LiveStructure]:
        return [s for s in self._structures.values() if kind is None or s.kind is kind]

    def structures_at(self, pos: WorldPosition) -> list[LiveStructure]:
        return [s for s in self._structures.values() if s.pos == pos]

    def construction_sites(self) -> list[ConstructionSite]:
        return list(self._sites)

    def construction_sites_at(self, pos: WorldPosition) -> list[ConstructionSite]:
        return [site for site in self._sites if site.pos == pos]

    def is_wall(self, pos: WorldPosition) -> bool:
        return pos.coord in self.walls

    def deposits(self) -> list[WorldPosition]:
        return [self.deposit] if self.deposit is not None else []

    def harvest_anchors(self) -> list[WorldPosition]:
        anchors = list(self.sources)
        if self.deposit is not None:
            anchors.append(self.deposit)
        if self.controller is not None:
            anchors.append(self.controller)
        return anchors

    def fuel_available(self) -> int:
        return self.fuel

    def workers(self) -> list[WorkerUnit]:
        return list(self.worker_units)

    def expansion_anchor(self) -> Coord | None:
        return self.expansion

    def create_construction_site(self, kind: StructureKind, pos: WorldPosition) -> CommandResult:
        if pos in self.rejected_sites or not pos.coord.in_bounds(self.bound):
            return CommandResult.INVALID_TARGET
        if self.is_wall(pos) and kind is not StructureKind.ROAD:
            return CommandResult.INVALID_TARGET
        if self.construction_sites_at(pos):
            return CommandResult.INVALID_TARGET
        occupants = [s for s in self.structures_at(pos) if s.kind is not StructureKind.RAMPART]
        if occupants and kind is not StructureKind.RAMPART:
            return CommandResult.INVALID_TARGET
        if len(self._sites) >= MAX_CONSTRUCTION_SITES:
            return CommandResult.FULL
        existing = len(self.structures(kind)) + sum(1 for site in self._sites if site.kind is kind)
        if existing >= kind.allowed_count(self.tier):
            return CommandResult.TIER_NOT_ENOUGH
        self._sites.append(ConstructionSite(kind=kind, pos=pos))
        return CommandResult.OK

    def destroy(self, structure: LiveStructure) -> CommandResult:
        if structure.id in self.indestructible:
            return CommandResult.BUSY
        if self._structures.pop(structure.id, None) is None:
            return CommandResult.INVALID_TARGET
        self.destroyed.append(structure)
        return CommandResult.OK

    def begin_terminal_evacuation(self, pos: WorldPosition) -> None:
        if pos not in self.evacuations:
            self.evacuations.append(pos)

    def markers(self) -> list[Marker]:
        return list(self._markers.values())

    def remove_marker(self, marker: Marker) -> None:
        self._markers.pop(marker.name, None)

    def create_marker(self, pos: WorldPosition, secondary_attribute: str) -> str | None:
        if not pos.coord.in_bounds(self.bound):
            return None
        name = f"marker-{next(self._ids)}"
        self._markers[name] = Marker(name=name, pos=pos, secondary_attribute=secondary_attribute)
        return name

    def set_marker_payload(self, name: str, payload: dict[str, Any]) -> None:
        self._markers[name].payload = dict(payload)
