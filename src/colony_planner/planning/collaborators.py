"""Contracts for the independent road and barrier planners."""

from __future__ import annotations

from typing import Protocol

from colony_planner.models import WorldPosition


class LayoutCollaborator(Protocol):
    """Planner that consumes the same anchor/plan data and runs beside the room planner."""

    def init(self) -> None:
        ...

    def run(self) -> None:
        ...

    def finalize(self) -> None:
        """Persist the collaborator's own layout when the room plan is finalized."""


class RoadPlanner(LayoutCollaborator, Protocol):
    def road_should_be_here(self, pos: WorldPosition) -> bool:
        """Roads answering ``False`` are not maintained."""


class BarrierPlanner(LayoutCollaborator, Protocol):
    def barrier_should_be_here(self, pos: WorldPosition) -> bool:
        ...


class StubRoadPlanner:
    """Placeholder until a real road planner is wired in; keeps every existing road."""

    def init(self) -> None:
        return None

    def run(self) -> None:
        return None

    def finalize(self) -> None:
        return None

    def road_should_be_here(self, pos: WorldPosition) -> bool:
        return True


class StubBarrierPlanner:
    """Placeholder until a real barrier planner is wired in; keeps every existing rampart."""

    def init(self) -> None:
        return None

    def run(self) -> None:
        return None

    def finalize(self) -> None:
        return None

    def barrier_should_be_here(self, pos: WorldPosition) -> bool:
        return True
