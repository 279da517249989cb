"""Plan reconciliation: converge the live world toward the target structure map.

Each pass starts from the current live state and either completes or stops
early within a single call. A stop caused by a safety check is not an error;
the same pass simply runs again on the next due tick.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field

from colony_planner.config import Settings, settings as default_settings
from colony_planner.memory import PlanMemory
from colony_planner.models import MAX_TIER, StructureKind, StructureMap, WorldPosition
from colony_planner.priorities import BUILD_PRIORITIES, DEMOLISH_PRIORITIES, PROTECTED_KINDS
from colony_planner.world import PRIMARY_FUEL, ColonyWorld, CommandResult, LiveStructure

from .collaborators import BarrierPlanner, RoadPlanner

HARVEST_RANGE = 4


@dataclass(slots=True)
class PassReport:
    """What one demolish or build pass did."""

    destroyed: list[LiveStructure] = field(default_factory=list)
    placed: list[tuple[StructureKind, WorldPosition]] = field(default_factory=list)
    rejected: list[tuple[StructureKind, WorldPosition, CommandResult]] = field(default_factory=list)
    aborted: str | None = None


class Reconciler:
    """Demolish/build passes for one colony against an explicitly owned ``PlanMemory``."""

    def __init__(
        self,
        world: ColonyWorld,
        memory: PlanMemory,
        *,
        road_planner: RoadPlanner,
        barrier_planner: BarrierPlanner,
        settings: Settings | None = None,
        logger: logging.Logger | None = None,
    ) -> None:
        self._world = world
        self._memory = memory
        self._road_planner = road_planner
        self._barrier_planner = barrier_planner
        self._settings = settings or default_settings
        self._logger = logger or logging.getLogger("colony_planner.reconcile")

    def structure_should_be_here(self, kind: StructureKind, pos: WorldPosition, structure_map: StructureMap) -> bool:
        if kind is StructureKind.ROAD:
            return self._road_planner.road_should_be_here(pos)
        if kind is StructureKind.RAMPART:
            return self._barrier_planner.barrier_should_be_here(pos)
        if kind is StructureKind.EXTRACTOR:
            return pos in self._world.deposits()
        if pos in structure_map.get(kind, ()):
            return True
        if kind in (StructureKind.CONTAINER, StructureKind.LINK):
            return any(pos.in_range(anchor, HARVEST_RANGE) for anchor in self._world.harvest_anchors())
        return False

    def can_build(self, kind: StructureKind, pos: WorldPosition) -> bool:
        """A site is wanted only where neither that structure nor any site exists yet."""
        if any(structure.kind is kind for structure in self._world.structures_at(pos)):
            return False
        return not self._world.construction_sites_at(pos)

    def should_recheck(self, offset: int = 0) -> bool:
        world = self._world
        recheck_at = self._memory.recheck_structures_at
        if recheck_at is not None and world.tick == recheck_at + offset:
            return True
        frequency = self._settings.site_check_frequency
        if world.tier == MAX_TIER:
            frequency *= 2
        return world.tick % frequency == world.colony_id + offset

    def demolish(
        self,
        structure_map: StructureMap,
        *,
        skip_barriers: bool = True,
        destroy_all: bool = False,
    ) -> PassReport:
        """Remove structures that the plan no longer wants, a few at a time."""
        world = self._world
        report = PassReport()
        storage = self._first(StructureKind.STORAGE)

        if world.colony_count <= 1 and storage is None and not destroy_all:
            return self._abort(report, "single colony without storage")
        if not structure_map:
            return self._abort(report, "no plan")

        terminal = self._first(StructureKind.TERMINAL)
        if terminal is not None:
            storage_misplaced = storage is not None and not self.structure_should_be_here(
                StructureKind.STORAGE, storage.pos, structure_map
            )
            if storage_misplaced or not self.structure_should_be_here(
                StructureKind.TERMINAL, terminal.pos, structure_map
            ):
                world.begin_terminal_evacuation(terminal.pos)

        for extractor in world.structures(StructureKind.EXTRACTOR):
            if not extractor.owned:
                self._destroy(extractor, report)

        self._memory.relocating = False
        tier = world.tier
        for priority in DEMOLISH_PRIORITIES:
            kind = priority.kind
            if skip_barriers and kind.defensive:
                continue
            structures = world.structures(kind)
            removed = 0
            for structure in structures:
                if self.structure_should_be_here(kind, structure.pos, structure_map):
                    continue
                if tier < self._settings.min_tier_for_storage_relocation and kind in (
                    StructureKind.STORAGE,
                    StructureKind.TERMINAL,
                ):
                    break
                if kind is StructureKind.TERMINAL:
                    storage_present = storage is not None and storage not in report.destroyed
                    reason = self._terminal_blocker(structure, storage_present)
                    if reason is not None:
                        return self._abort(report, reason)
                amount_missing = kind.allowed_count(tier) - len(structures) + removed
                if amount_missing >= priority.max_removed:
                    continue
                if kind is StructureKind.SPAWN and len(structures) - removed <= 1:
                    reason = self._spawn_rebuild_blocker()
                    if reason is not None and not destroy_all:
                        return self._abort(report, reason)
                if self._destroy(structure, report) and not kind.defensive:
                    self._memory.relocating = True
                removed += 1
                self._schedule_recheck()
            if self._memory.relocating and not destroy_all:
                return report
        return report

    def build(self, structure_map: StructureMap) -> PassReport:
        """Place construction sites for missing structures, most critical kinds first."""
        world = self._world
        report = PassReport()
        budget = self._settings.max_sites_per_colony - len(world.construction_sites())
        if not structure_map:
            self._logger.info("build_skipped_no_plan", extra={"colony": world.area})

        for kind in BUILD_PRIORITIES:
            for pos in structure_map.get(kind, ()):
                if budget <= 0:
                    break
                if not self.can_build(kind, pos):
                    continue
                result = world.create_construction_site(kind, pos)
                if result is CommandResult.OK:
                    budget -= 1
                    report.placed.append((kind, pos))
                    self._schedule_recheck()
                    continue
                if result is CommandResult.INVALID_TARGET:
                    self._clear_occupants(pos, structure_map, report)
                report.rejected.append((kind, pos, result))
                self._logger.warning(
                    "construction_site_rejected",
                    extra={"colony": world.area, "kind": kind.value, "position": str(pos), "result": result.value},
                )

        self._ensure_extractors(report)
        return report

    def _clear_occupants(self, pos: WorldPosition, structure_map: StructureMap, report: PassReport) -> None:
        for occupant in self._world.structures_at(pos):
            if occupant.kind in PROTECTED_KINDS:
                continue
            if self.structure_should_be_here(occupant.kind, pos, structure_map):
                continue
            if self._destroy(occupant, report):
                self._schedule_recheck()

    def _ensure_extractors(self, report: PassReport) -> None:
        world = self._world
        for deposit in world.deposits():
            if any(s.kind is StructureKind.EXTRACTOR for s in world.structures_at(deposit)):
                continue
            if world.construction_sites_at(deposit):
                continue
            result = world.create_construction_site(StructureKind.EXTRACTOR, deposit)
            if result is CommandResult.OK:
                report.placed.append((StructureKind.EXTRACTOR, deposit))
            else:
                report.rejected.append((StructureKind.EXTRACTOR, deposit, result))

    def _terminal_blocker(self, terminal: LiveStructure, storage_present: bool) -> str | None:
        if not storage_present:
            self._logger.info("terminal_removal_waiting_on_storage", extra={"colony": self._world.area})
            return "waiting on storage before removing terminal"
        remaining = terminal.stored_except(PRIMARY_FUEL)
        if remaining > self._settings.terminal_evacuation_threshold:
            self._logger.info(
                "terminal_removal_waiting_on_evacuation",
                extra={"colony": self._world.area, "remaining": remaining},
            )
            return "waiting on terminal evacuation"
        return None

    def _spawn_rebuild_blocker(self) -> str | None:
        world = self._world
        cost = self._settings.spawn_rebuild_cost
        fuel = world.fuel_available()
        if fuel < cost:
            self._logger.warning(
                "unsafe_to_destroy_spawn",
                extra={"colony": world.area, "fuel": fuel, "required": cost},
            )
            return f"{fuel}/{cost} fuel available to rebuild spawn"
        labor_needed = cost / self._settings.build_power
        labor = sum(worker.labor for worker in world.workers())
        if labor < labor_needed:
            self._logger.warning(
                "unsafe_to_destroy_spawn",
                extra={"colony": world.area, "labor": labor, "required": labor_needed},
            )
            return f"{labor}/{labor_needed:g} labor available to rebuild spawn"
        return None

    def _destroy(self, structure: LiveStructure, report: PassReport) -> bool:
        result = self._world.destroy(structure)
        context = {"colony": self._world.area, "kind": structure.kind.value, "position": str(structure.pos)}
        if result is not CommandResult.OK:
            report.rejected.append((structure.kind, structure.pos, result))
            self._logger.warning("destroy_rejected", extra={**context, "result": result.value})
            return False
        report.destroyed.append(structure)
        self._logger.info("structure_destroyed", extra=context)
        return True

    def _schedule_recheck(self) -> None:
        self._memory.recheck_structures_at = self._world.tick + self._settings.recheck_after

    def _abort(self, report: PassReport, reason: str) -> PassReport:
        report.aborted = reason
        self._logger.info("pass_deferred", extra={"colony": self._world.area, "reason": reason})
        return report

    def _first(self, kind: StructureKind) -> LiveStructure | None:
        structures = self._world.structures(kind)
        return structures[0] if structures else None
