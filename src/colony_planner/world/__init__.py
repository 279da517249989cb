"""World-query contract consumed from the host environment."""

from .contract import (
    PRIMARY_FUEL,
    ColonyWorld,
    CommandResult,
    ConstructionSite,
    LiveStructure,
    Marker,
    WorkerUnit,
)

__all__ = [
    "PRIMARY_FUEL",
    "ColonyWorld",
    "CommandResult",
    "ConstructionSite",
    "LiveStructure",
    "Marker",
    "WorkerUnit",
]
