"""Persisted per-colony planner record and the stores that keep it."""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Protocol

from .models import Coord, StructureKind, WorldPosition

TierMaps = dict[int, dict[StructureKind, list[Coord]]]


@dataclass(slots=True)
class SavedMarker:
    secondary_attribute: str
    pos: WorldPosition
    payload: dict[str, Any] = field(default_factory=dict)


@dataclass(slots=True)
class PlanMemory:
    """Durable planner state for one colony.

    Exactly one of ``bunker_anchor`` (derivable mode) and ``maps_by_tier``
    (materialized mode) is set once a plan has been finalized.
    """

    active: bool = True
    relocating: bool = False
    recheck_structures_at: int | None = None
    bunker_anchor: Coord | None = None
    bunker_rotation: int = 0
    last_generated: int | None = None
    maps_by_tier: TierMaps | None = None
    saved_markers: list[SavedMarker] = field(default_factory=list)

    @property
    def has_plan(self) -> bool:
        return self.bunker_anchor is not None or self.maps_by_tier is not None

    def clear_plan(self) -> None:
        self.bunker_anchor = None
        self.bunker_rotation = 0
        self.maps_by_tier = None

    def store_bunker(self, anchor: Coord, rotation: int = 0) -> None:
        self.clear_plan()
        self.bunker_anchor = anchor
        self.bunker_rotation = rotation

    def store_maps(self, maps: TierMaps) -> None:
        self.clear_plan()
        self.maps_by_tier = maps

    def to_dict(self) -> dict[str, Any]:
        payload: dict[str, Any] = {
            "active": self.active,
            "relocating": self.relocating,
            "savedMarkers": [
                {
                    "secondaryAttribute": marker.secondary_attribute,
                    "pos": {"x": marker.pos.x, "y": marker.pos.y, "area": marker.pos.area},
                    "payload": marker.payload,
                }
                for marker in self.saved_markers
            ],
        }
        if self.recheck_structures_at is not None:
            payload["recheckStructuresAt"] = self.recheck_structures_at
        if self.last_generated is not None:
            payload["lastGenerated"] = self.last_generated
        if self.bunker_anchor is not None:
            bunker_data: dict[str, Any] = {"anchor": {"x": self.bunker_anchor.x, "y": self.bunker_anchor.y}}
            if self.bunker_rotation:
                bunker_data["rotation"] = self.bunker_rotation
            payload["bunkerData"] = bunker_data
        if self.maps_by_tier is not None:
            payload["mapsByTier"] = {
                str(tier): {
                    kind.value: [{"x": coord.x, "y": coord.y} for coord in coords]
                    for kind, coords in structures.items()
                }
                for tier, structures in self.maps_by_tier.items()
            }
        return payload

    @classmethod
    def from_dict(cls, payload: dict[str, Any]) -> PlanMemory:
        bunker_data = payload.get("bunkerData") or {}
        anchor = bunker_data.get("anchor")
        maps_payload = payload.get("mapsByTier")
        maps_by_tier: TierMaps | None = None
        if maps_payload is not None:
            maps_by_tier = {
                int(tier): {
                    StructureKind(kind): [Coord(int(item["x"]), int(item["y"])) for item in coords]
                    for kind, coords in structures.items()
                }
                for tier, structures in maps_payload.items()
            }
        if anchor is not None and maps_by_tier is not None:
            raise ValueError("Persisted plan holds both a bunker anchor and per-tier maps")

        return cls(
            active=bool(payload.get("active", True)),
            relocating=bool(payload.get("relocating", False)),
            recheck_structures_at=payload.get("recheckStructuresAt"),
            bunker_anchor=Coord(int(anchor["x"]), int(anchor["y"])) if anchor is not None else None,
            bunker_rotation=int(bunker_data.get("rotation", 0)),
            last_generated=payload.get("lastGenerated"),
            maps_by_tier=maps_by_tier,
            saved_markers=[
                SavedMarker(
                    secondary_attribute=item["secondaryAttribute"],
                    pos=WorldPosition(int(item["pos"]["x"]), int(item["pos"]["y"]), item["pos"]["area"]),
                    payload=dict(item.get("payload") or {}),
                )
                for item in payload.get("savedMarkers", [])
            ],
        )


class PlanStore(Protocol):
    """Persistence contract for planner records keyed by colony."""

    def load(self, colony: str) -> PlanMemory | None:
        """Return the stored record for ``colony`` if one exists."""

    def save(self, colony: str, memory: PlanMemory) -> None:
        """Persist the record for ``colony``."""


class InMemoryPlanStore:
    def __init__(self) -> None:
        self._records: dict[str, dict[str, Any]] = {}

    def load(self, colony: str) -> PlanMemory | None:
        record = self._records.get(colony)
        return PlanMemory.from_dict(record) if record is not None else None

    def save(self, colony: str, memory: PlanMemory) -> None:
        self._records[colony] = memory.to_dict()


class JsonPlanStore:
    """Single JSON document mapping colony names to planner records."""

    def __init__(self, file_path: str | Path) -> None:
        self._path = Path(file_path)

    def load(self, colony: str) -> PlanMemory | None:
        record = self._read().get(colony)
        return PlanMemory.from_dict(record) if record is not None else None

    def save(self, colony: str, memory: PlanMemory) -> None:
        records = self._read()
        records[colony] = memory.to_dict()
        self._path.parent.mkdir(parents=True, exist_ok=True)
        self._path.write_text(json.dumps(records, indent=2, sort_keys=True), encoding="utf-8")

    def _read(self) -> dict[str, Any]:
        if not self._path.exists():
            return {}
        text = self._path.read_text(encoding="utf-8")
        return json.loads(text) if text.strip() else {}
