from __future__ import annotations

from colony_planner.adapters import SimulatedColonyWorld
from colony_planner.config import Settings
from colony_planner.memory import PlanMemory
from colony_planner.planning import Reconciler, StubBarrierPlanner, StubRoadPlanner


def _reconciler(world: SimulatedColonyWorld, memory: PlanMemory) -> Reconciler:
    return Reconciler(
        world,
        memory,
        road_planner=StubRoadPlanner(),
        barrier_planner=StubBarrierPlanner(),
        settings=Settings(site_check_frequency=300),
    )


def test_explicit_recheck_runs_demolish_then_build() -> None:
    world = SimulatedColonyWorld(tier=4, colony_id=3, tick=100)
    reconciler = _reconciler(world, PlanMemory(active=False, recheck_structures_at=100))

    assert reconciler.should_recheck() is True
    assert reconciler.should_recheck(1) is False

    world.tick = 101
    assert reconciler.should_recheck() is False
    assert reconciler.should_recheck(1) is True


def test_periodic_cadence_is_phase_spread_by_colony() -> None:
    world = SimulatedColonyWorld(tier=4, colony_id=7, tick=607)
    reconciler = _reconciler(world, PlanMemory(active=False))

    assert reconciler.should_recheck() is True

    world.tick = 608
    assert reconciler.should_recheck() is False
    assert reconciler.should_recheck(1) is True


def test_cadence_doubles_at_max_tier() -> None:
    world = SimulatedColonyWorld(tier=8, colony_id=7, tick=307)
    reconciler = _reconciler(world, PlanMemory(active=False))

    assert reconciler.should_recheck() is False

    world.tick = 607
    assert reconciler.should_recheck() is True
