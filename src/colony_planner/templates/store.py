"""Tier-indexed prefabricated structure templates."""

from __future__ import annotations

from dataclasses import dataclass, field
from functools import lru_cache
from types import MappingProxyType
from typing import Mapping

from colony_planner.geometry import dedupe
from colony_planner.models import DEFAULT_GRID_BOUND, ComponentName, Coord, StructureKind

TierStructures = Mapping[StructureKind, tuple[Coord, ...]]

_EMPTY: TierStructures = MappingProxyType({})


@dataclass(frozen=True, slots=True)
class Template:
    """Static, read-only layout data for one component."""

    name: str
    anchor: Coord
    tiers: Mapping[int, TierStructures]
    points_of_interest: Mapping[str, Coord] = field(default_factory=lambda: MappingProxyType({}))

    def structures_at(self, tier: int) -> TierStructures:
        return self.tiers.get(tier, _EMPTY)

    def all_coords(self, tier: int, bound: int = DEFAULT_GRID_BOUND) -> list[Coord]:
        coords: list[Coord] = []
        for positions in self.structures_at(tier).values():
            coords.extend(positions)
        return dedupe(coords, bound)


class TemplateStore:
    """Lookup of templates by component name."""

    def __init__(self, templates: Mapping[ComponentName, Template]) -> None:
        self._templates = dict(templates)

    def get(self, component: ComponentName) -> Template:
        if component not in self._templates:
            raise KeyError(f"No template registered for component: {component.value}")
        return self._templates[component]

    def __contains__(self, component: object) -> bool:
        return component in self._templates

    @classmethod
    def default(cls) -> TemplateStore:
        """Store backed by the bundled JSON template data."""
        return _bundled_store()


@lru_cache(maxsize=1)
def _bundled_store() -> TemplateStore:
    from .loader import load_bundled_template

    return TemplateStore({component: load_bundled_template(component) for component in ComponentName})
