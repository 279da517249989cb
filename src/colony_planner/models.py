"""Core value types shared by the template, layout and reconciliation layers."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum

DEFAULT_GRID_BOUND = 50
MAX_TIER = 8

# Allowed structure counts indexed by tier 0..8.
_ALLOWED_COUNTS: dict[str, tuple[int, ...]] = {
    "spawn": (0, 1, 1, 1, 1, 1, 1, 2, 3),
    "extension": (0, 0, 5, 10, 20, 30, 40, 50, 60),
    "road": (2500,) * 9,
    "constructedWall": (0, 0, 2500, 2500, 2500, 2500, 2500, 2500, 2500),
    "rampart": (0, 0, 2500, 2500, 2500, 2500, 2500, 2500, 2500),
    "link": (0, 0, 0, 0, 0, 2, 3, 4, 6),
    "storage": (0, 0, 0, 0, 1, 1, 1, 1, 1),
    "tower": (0, 0, 0, 1, 1, 2, 2, 3, 6),
    "observer": (0, 0, 0, 0, 0, 0, 0, 0, 1),
    "powerSpawn": (0, 0, 0, 0, 0, 0, 0, 0, 1),
    "extractor": (0, 0, 0, 0, 0, 0, 1, 1, 1),
    "lab": (0, 0, 0, 0, 0, 0, 3, 6, 10),
    "terminal": (0, 0, 0, 0, 0, 0, 1, 1, 1),
    "container": (5,) * 9,
    "nuker": (0, 0, 0, 0, 0, 0, 0, 0, 1),
    "factory": (0, 0, 0, 0, 0, 0, 0, 1, 1),
}

_PASSABLE = frozenset({"road", "container", "rampart"})
_DEFENSIVE = frozenset({"constructedWall", "rampart"})


class StructureKind(str, Enum):
    """Closed set of structure kinds the planner knows how to place."""

    SPAWN = "spawn"
    EXTENSION = "extension"
    ROAD = "road"
    WALL = "constructedWall"
    RAMPART = "rampart"
    LINK = "link"
    STORAGE = "storage"
    TOWER = "tower"
    OBSERVER = "observer"
    POWER_SPAWN = "powerSpawn"
    EXTRACTOR = "extractor"
    LAB = "lab"
    TERMINAL = "terminal"
    CONTAINER = "container"
    NUKER = "nuker"
    FACTORY = "factory"

    @property
    def passable(self) -> bool:
        """Whether the kind tolerates difficult terrain and doesn't count as an obstacle."""
        return self.value in _PASSABLE

    @property
    def defensive(self) -> bool:
        return self.value in _DEFENSIVE

    def allowed_count(self, tier: int) -> int:
        counts = _ALLOWED_COUNTS[self.value]
        return counts[max(0, min(tier, MAX_TIER))]


class ComponentName(str, Enum):
    """Prefabricated layout components that can be placed in a colony."""

    HATCHERY = "hatchery"
    COMMAND_CENTER = "commandCenter"
    BUNKER = "bunker"

    @classmethod
    def parse(cls, value: str | ComponentName) -> ComponentName:
        if isinstance(value, ComponentName):
            return value
        lowered = value.strip().lower()
        aliases = {
            "hatchery": cls.HATCHERY,
            "commandcenter": cls.COMMAND_CENTER,
            "command-center": cls.COMMAND_CENTER,
            "command_center": cls.COMMAND_CENTER,
            "bunker": cls.BUNKER,
            "compact-bunker": cls.BUNKER,
        }
        if lowered not in aliases:
            raise ValueError(f"Unknown component: {value!r}")
        return aliases[lowered]


@dataclass(frozen=True, slots=True)
class Coord:
    """Grid-local integer coordinate with no area context."""

    x: int
    y: int

    def key(self, bound: int = DEFAULT_GRID_BOUND) -> int:
        return self.x + bound * self.y

    def in_bounds(self, bound: int = DEFAULT_GRID_BOUND) -> bool:
        return 0 <= self.x < bound and 0 <= self.y < bound

    def __add__(self, other: Coord) -> Coord:
        return Coord(self.x + other.x, self.y + other.y)

    def __sub__(self, other: Coord) -> Coord:
        return Coord(self.x - other.x, self.y - other.y)


@dataclass(frozen=True, slots=True)
class WorldPosition:
    """A coordinate inside a named world area."""

    x: int
    y: int
    area: str

    @classmethod
    def at(cls, coord: Coord, area: str) -> WorldPosition:
        return cls(coord.x, coord.y, area)

    @property
    def coord(self) -> Coord:
        return Coord(self.x, self.y)

    def offset(self, dx: int, dy: int) -> WorldPosition:
        return WorldPosition(self.x + dx, self.y + dy, self.area)

    def in_range(self, other: WorldPosition, distance: int) -> bool:
        if self.area != other.area:
            return False
        return max(abs(self.x - other.x), abs(self.y - other.y)) <= distance

    def __str__(self) -> str:
        return f"{self.area}[{self.x},{self.y}]"


StructureMap = dict[StructureKind, list[WorldPosition]]

QUARTER_TURNS = {0: 0, 1: 90, 2: 180, 3: 270, 90: 90, 180: 180, 270: 270}


@dataclass(slots=True)
class Placement:
    """Where an operator (or the planner itself) put a component."""

    component: ComponentName
    pos: WorldPosition
    rotation: int = 0

    def __post_init__(self) -> None:
        if self.rotation not in QUARTER_TURNS:
            raise ValueError(f"Rotation must be 0/90/180/270 (or 0-3), got {self.rotation}")
        self.rotation = QUARTER_TURNS[self.rotation]


@dataclass(slots=True)
class ComponentPlan:
    map: StructureMap = field(default_factory=dict)
    pos: WorldPosition | None = None
    rotation: int = 0


RoomPlan = dict[ComponentName, ComponentPlan]
