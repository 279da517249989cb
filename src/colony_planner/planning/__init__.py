"""Layout planning and plan reconciliation."""

from .collaborators import BarrierPlanner, RoadPlanner, StubBarrierPlanner, StubRoadPlanner
from .layout import LayoutEngine
from .planner import RoomPlanner
from .reconcile import PassReport, Reconciler

__all__ = [
    "BarrierPlanner",
    "LayoutEngine",
    "PassReport",
    "Reconciler",
    "RoadPlanner",
    "RoomPlanner",
    "StubBarrierPlanner",
    "StubRoadPlanner",
]
