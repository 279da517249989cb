"""Boundary between the planner and the host world it observes and commands."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Protocol

from colony_planner.models import Coord, StructureKind, WorldPosition

PRIMARY_FUEL = "energy"


class CommandResult(str, Enum):
    """Outcome of a construct/destroy command issued to the world."""

    OK = "ok"
    INVALID_TARGET = "invalid_target"
    NOT_OWNER = "not_owner"
    FULL = "full"
    TIER_NOT_ENOUGH = "tier_not_enough"
    BUSY = "busy"


@dataclass(slots=True)
class LiveStructure:
    """A structure that currently exists in the world."""

    id: str
    kind: StructureKind
    pos: WorldPosition
    owned: bool = True
    store: dict[str, int] = field(default_factory=dict)

    def stored_except(self, resource: str = PRIMARY_FUEL) -> int:
        return sum(amount for name, amount in self.store.items() if name != resource)


@dataclass(slots=True)
class ConstructionSite:
    kind: StructureKind
    pos: WorldPosition


@dataclass(slots=True)
class WorkerUnit:
    """A mobile worker; build capacity is ``work_parts`` per tick for ``ticks_to_live`` ticks."""

    work_parts: int
    ticks_to_live: int | None = None

    @property
    def labor(self) -> int:
        return self.work_parts * (self.ticks_to_live or 0)


@dataclass(slots=True)
class Marker:
    """Operator-placed marker consumed on finalize and replayed on reactivation."""

    name: str
    pos: WorldPosition
    secondary_attribute: str
    payload: dict[str, Any] = field(default_factory=dict)


class ColonyWorld(Protocol):
    """World-query and command contract for a single colony."""

    area: str
    colony_id: int
    tick: int
    tier: int
    colony_count: int

    def structures(self, kind: StructureKind | None = None) -> list[LiveStructure]:
        """Live structures in the colony area, optionally filtered by kind."""

    def structures_at(self, pos: WorldPosition) -> list[LiveStructure]:
        ...

    def construction_sites(self) -> list[ConstructionSite]:
        ...

    def construction_sites_at(self, pos: WorldPosition) -> list[ConstructionSite]:
        ...

    def is_wall(self, pos: WorldPosition) -> bool:
        """Whether the terrain at ``pos`` is impassable."""

    def deposits(self) -> list[WorldPosition]:
        """Resource-deposit features that want an extraction structure."""

    def harvest_anchors(self) -> list[WorldPosition]:
        """Energy sources, deposits and the controller; containers/links near them are kept."""

    def fuel_available(self) -> int:
        ...

    def workers(self) -> list[WorkerUnit]:
        ...

    def expansion_anchor(self) -> Coord | None:
        """Bunker anchor chosen when the colony was claimed, if any."""

    def create_construction_site(self, kind: StructureKind, pos: WorldPosition) -> CommandResult:
        ...

    def destroy(self, structure: LiveStructure) -> CommandResult:
        ...

    def begin_terminal_evacuation(self, pos: WorldPosition) -> None:
        """Ask the logistics layer to empty a terminal that is about to move."""

    def markers(self) -> list[Marker]:
        ...

    def remove_marker(self, marker: Marker) -> None:
        ...

    def create_marker(self, pos: WorldPosition, secondary_attribute: str) -> str | None:
        """Recreate a marker; returns its name or ``None`` when the world refuses."""

    def set_marker_payload(self, name: str, payload: dict[str, Any]) -> None:
        ...
