from __future__ import annotations

from colony_planner.adapters import SimulatedColonyWorld
from colony_planner.config import Settings
from colony_planner.memory import PlanMemory
from colony_planner.models import StructureKind, WorldPosition
from colony_planner.planning import Reconciler, StubBarrierPlanner, StubRoadPlanner
from colony_planner.world import CommandResult


def _reconciler(world: SimulatedColonyWorld, memory: PlanMemory | None = None, **settings_overrides) -> Reconciler:
    return Reconciler(
        world,
        memory or PlanMemory(active=False),
        road_planner=StubRoadPlanner(),
        barrier_planner=StubBarrierPlanner(),
        settings=Settings(**settings_overrides),
    )


def _pos(x: int, y: int) -> WorldPosition:
    return WorldPosition(x, y, "W1N1")


def test_build_places_critical_kinds_first_within_budget() -> None:
    world = SimulatedColonyWorld(tier=2, tick=40)
    structure_map = {
        StructureKind.EXTENSION: [_pos(10 + x, 10) for x in range(5)],
        StructureKind.SPAWN: [_pos(20, 20)],
    }
    memory = PlanMemory(active=False)

    report = _reconciler(world, memory, max_sites_per_colony=3).build(structure_map)

    assert report.placed == [
        (StructureKind.SPAWN, _pos(20, 20)),
        (StructureKind.EXTENSION, _pos(10, 10)),
        (StructureKind.EXTENSION, _pos(11, 10)),
    ]
    assert len(world.construction_sites()) == 3
    assert memory.recheck_structures_at == 90


def test_pending_sites_count_against_budget() -> None:
    world = SimulatedColonyWorld(tier=2)
    world.create_construction_site(StructureKind.ROAD, _pos(1, 1))
    world.create_construction_site(StructureKind.ROAD, _pos(1, 2))

    report = _reconciler(world, max_sites_per_colony=3).build(
        {StructureKind.EXTENSION: [_pos(10 + x, 10) for x in range(5)]}
    )

    assert len(report.placed) == 1


def test_existing_structures_and_sites_are_not_rebuilt() -> None:
    world = SimulatedColonyWorld(tier=2)
    world.add_structure(StructureKind.SPAWN, 20, 20)
    world.create_construction_site(StructureKind.EXTENSION, _pos(10, 10))

    report = _reconciler(world).build(
        {StructureKind.SPAWN: [_pos(20, 20)], StructureKind.EXTENSION: [_pos(10, 10), _pos(11, 10)]}
    )

    assert report.placed == [(StructureKind.EXTENSION, _pos(11, 10))]


def test_misplaced_occupant_is_cleared_to_make_way() -> None:
    world = SimulatedColonyWorld(tier=3)
    occupant = world.add_structure(StructureKind.EXTENSION, 20, 20)
    memory = PlanMemory(active=False)

    report = _reconciler(world, memory).build({StructureKind.TOWER: [_pos(20, 20)]})

    assert world.destroyed == [occupant]
    assert report.rejected == [(StructureKind.TOWER, _pos(20, 20), CommandResult.INVALID_TARGET)]
    assert memory.recheck_structures_at == world.tick + 50


def test_protected_occupant_is_never_cleared() -> None:
    world = SimulatedColonyWorld(tier=4)
    world.add_structure(StructureKind.STORAGE, 20, 20)

    report = _reconciler(world).build({StructureKind.TOWER: [_pos(20, 20)]})

    assert world.destroyed == []
    assert report.placed == []


def test_rightful_occupant_is_kept() -> None:
    world = SimulatedColonyWorld(tier=3)
    world.add_structure(StructureKind.EXTENSION, 20, 20)
    structure_map = {StructureKind.TOWER: [_pos(20, 20)], StructureKind.EXTENSION: [_pos(20, 20)]}

    _reconciler(world).build(structure_map)

    assert world.destroyed == []


def test_extractor_is_placed_on_deposit_even_without_plan() -> None:
    world = SimulatedColonyWorld(tier=6, deposit=_pos(5, 5))

    report = _reconciler(world).build({})

    assert report.placed == [(StructureKind.EXTRACTOR, _pos(5, 5))]

    second = _reconciler(world).build({})
    assert second.placed == []


class TierLimitedWorld(SimulatedColonyWorld):
    def create_construction_site(self, kind, pos):
        return CommandResult.TIER_NOT_ENOUGH


def test_occupants_are_only_cleared_for_blocked_cells() -> None:
    world = TierLimitedWorld(tier=3)
    world.add_structure(StructureKind.EXTENSION, 20, 20)

    report = _reconciler(world).build({StructureKind.TOWER: [_pos(20, 20)]})

    assert world.destroyed == []
    assert report.rejected == [(StructureKind.TOWER, _pos(20, 20), CommandResult.TIER_NOT_ENOUGH)]
