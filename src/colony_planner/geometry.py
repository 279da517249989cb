"""Pure coordinate transforms used to lay templates onto a world area.

Every function here returns fresh values; inputs are never mutated, so a cached
template can be shared between any number of derived component maps.
"""

from __future__ import annotations

from typing import Callable, Iterable

from .models import DEFAULT_GRID_BOUND, QUARTER_TURNS, Coord, WorldPosition

_ROTATIONS: dict[int, Callable[[int, int], tuple[int, int]]] = {
    0: lambda x, y: (x, y),
    90: lambda x, y: (-y, x),
    180: lambda x, y: (-x, -y),
    270: lambda x, y: (y, -x),
}


def normalize_rotation(angle: int) -> int:
    """Map 0/90/180/270 or quarter-turn counts 0-3 onto degrees."""
    if angle not in QUARTER_TURNS:
        raise ValueError(f"Unsupported rotation angle: {angle}")
    return QUARTER_TURNS[angle]


def translate(coords: Iterable[Coord], from_anchor: Coord, to_anchor: Coord) -> list[Coord]:
    delta = to_anchor - from_anchor
    return [coord + delta for coord in coords]


def translate_positions(
    positions: Iterable[WorldPosition], from_anchor: Coord, to_anchor: Coord
) -> list[WorldPosition]:
    dx = to_anchor.x - from_anchor.x
    dy = to_anchor.y - from_anchor.y
    return [pos.offset(dx, dy) for pos in positions]


def rotate(coords: Iterable[Coord], pivot: Coord, angle: int) -> list[Coord]:
    """Rotate counter-clockwise about ``pivot``."""
    matrix = _ROTATIONS[normalize_rotation(angle)]
    rotated: list[Coord] = []
    for coord in coords:
        dx, dy = matrix(coord.x - pivot.x, coord.y - pivot.y)
        rotated.append(Coord(pivot.x + dx, pivot.y + dy))
    return rotated


def dedupe(coords: Iterable[Coord], bound: int = DEFAULT_GRID_BOUND) -> list[Coord]:
    seen: set[int] = set()
    unique: list[Coord] = []
    for coord in coords:
        key = coord.key(bound)
        if key in seen:
            continue
        seen.add(key)
        unique.append(coord)
    return unique
