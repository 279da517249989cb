"""Ordering used by the reconciliation passes.

Build order puts critical infrastructure first. Demolish order checks the most
load-bearing kinds first and leaves defensive kinds for last.
"""

from __future__ import annotations

import math
from dataclasses import dataclass

from .models import StructureKind


@dataclass(frozen=True, slots=True)
class DemolishPriority:
    kind: StructureKind
    max_removed: float = math.inf


BUILD_PRIORITIES: tuple[StructureKind, ...] = (
    StructureKind.SPAWN,
    StructureKind.CONTAINER,
    StructureKind.TOWER,
    StructureKind.EXTENSION,
    StructureKind.STORAGE,
    StructureKind.TERMINAL,
    StructureKind.LINK,
    StructureKind.EXTRACTOR,
    StructureKind.LAB,
    StructureKind.FACTORY,
    StructureKind.NUKER,
    StructureKind.OBSERVER,
    StructureKind.POWER_SPAWN,
    StructureKind.ROAD,
    StructureKind.WALL,
    StructureKind.RAMPART,
)

DEMOLISH_PRIORITIES: tuple[DemolishPriority, ...] = (
    DemolishPriority(StructureKind.EXTENSION, max_removed=15),
    DemolishPriority(StructureKind.SPAWN, max_removed=1),
    DemolishPriority(StructureKind.CONTAINER),
    DemolishPriority(StructureKind.TOWER, max_removed=2),
    DemolishPriority(StructureKind.LINK),
    DemolishPriority(StructureKind.LAB),
    DemolishPriority(StructureKind.FACTORY),
    DemolishPriority(StructureKind.NUKER),
    DemolishPriority(StructureKind.OBSERVER),
    DemolishPriority(StructureKind.POWER_SPAWN, max_removed=1),
    DemolishPriority(StructureKind.STORAGE, max_removed=1),
    DemolishPriority(StructureKind.TERMINAL, max_removed=1),
    DemolishPriority(StructureKind.WALL),
    DemolishPriority(StructureKind.RAMPART),
)

# Never cleared opportunistically to make room for a construction site.
PROTECTED_KINDS: frozenset[StructureKind] = frozenset(
    {StructureKind.STORAGE, StructureKind.TERMINAL, StructureKind.SPAWN}
)
