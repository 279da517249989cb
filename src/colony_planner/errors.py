"""Planner error taxonomy.

Only configuration problems are raised. Unsafe transitions and rejected world
commands are logged by the reconciliation engine and retried on a later tick.
"""

from __future__ import annotations

from .models import WorldPosition


class PlannerError(RuntimeError):
    """Base class for errors surfaced to the operator."""


class InvalidConfigurationError(PlannerError):
    """Raised when the current placements cannot be finalized."""


class GeometricCollisionError(PlannerError):
    """Raised when a planned structure lands on impassable terrain or off the grid."""

    def __init__(self, position: WorldPosition, kind: str | None = None) -> None:
        self.position = position
        self.kind = kind
        detail = f" ({kind})" if kind else ""
        super().__init__(f"Invalid layout: collision detected at {position}{detail}")


class TemplateError(PlannerError):
    """Raised when template data cannot be parsed."""
