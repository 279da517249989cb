"""Room planner: owns placements, the planning/maintenance mode and the finalize transition."""

from __future__ import annotations

import logging

from colony_planner.config import Settings, settings as default_settings
from colony_planner.errors import GeometricCollisionError, InvalidConfigurationError, PlannerError
from colony_planner.memory import PlanMemory, SavedMarker, TierMaps
from colony_planner.models import (
    MAX_TIER,
    ComponentName,
    Placement,
    RoomPlan,
    StructureKind,
    StructureMap,
    WorldPosition,
)
from colony_planner.templates import TemplateStore
from colony_planner.world import ColonyWorld, CommandResult

from .collaborators import BarrierPlanner, RoadPlanner, StubBarrierPlanner, StubRoadPlanner
from .layout import LayoutEngine
from .reconcile import PassReport, Reconciler

ACTIVATION_HELP = (
    "Place colony components with room planner markers:",
    "    Place hatchery:        white/green",
    "    Place command center:  white/blue",
    "Finalize layout when done.",
)


class RoomPlanner:
    """Plans one colony's layout and keeps the built environment converging toward it."""

    def __init__(
        self,
        world: ColonyWorld,
        memory: PlanMemory,
        *,
        templates: TemplateStore | None = None,
        road_planner: RoadPlanner | None = None,
        barrier_planner: BarrierPlanner | None = None,
        settings: Settings | None = None,
        automatic: bool = False,
        logger: logging.Logger | None = None,
    ) -> None:
        self.world = world
        self.memory = memory
        self.placements: dict[ComponentName, Placement] = {}
        self.plan: RoomPlan = {}
        self.map: StructureMap = {}
        self.road_planner = road_planner or StubRoadPlanner()
        self.barrier_planner = barrier_planner or StubBarrierPlanner()
        self._settings = settings or default_settings
        self._automatic = automatic
        self._logger = logger or logging.getLogger("colony_planner.planner")
        self._layout = LayoutEngine(templates, bound=self._settings.grid_bound)
        self._reconciler = Reconciler(
            world,
            memory,
            road_planner=self.road_planner,
            barrier_planner=self.barrier_planner,
            settings=self._settings,
        )
        if self.active and world.tick % 25 == 0:
            self._logger.warning("planner_still_active", extra={"colony": world.area})

    @property
    def active(self) -> bool:
        return self.memory.active

    @active.setter
    def active(self, active: bool) -> None:
        self.memory.active = active
        if active:
            self.reactivate()

    @property
    def layout(self) -> str:
        return "bunker" if self.memory.bunker_anchor is not None else "twoPart"

    def add_component(self, component: ComponentName | str, pos: WorldPosition, rotation: int = 0) -> None:
        name = ComponentName.parse(component)
        self.placements[name] = Placement(name, pos, rotation)

    def make(self, tier: int = MAX_TIER) -> StructureMap:
        self.plan = self._layout.generate_plan(self.placements.values(), tier)
        self.map = self._layout.flatten(self.plan)
        return self.map

    def recall_map(self) -> StructureMap:
        """Rebuild the current-tier map from the persisted plan."""
        tier = self.world.tier
        area = self.world.area
        if self.memory.bunker_anchor is not None:
            self.map = self._stored_bunker_map(tier)
        elif self.memory.maps_by_tier is not None:
            stored = self.memory.maps_by_tier.get(tier, {})
            self.map = {kind: [WorldPosition.at(coord, area) for coord in coords] for kind, coords in stored.items()}
        return self.map

    def _stored_bunker_map(self, tier: int) -> StructureMap:
        return self._layout.bunker_map(
            self.memory.bunker_anchor, tier, self.world.area, self.memory.bunker_rotation
        )

    def planned_structure_positions(self, kind: StructureKind) -> list[WorldPosition] | None:
        if kind in self.map:
            return self.map[kind]
        area = self.world.area
        if self.memory.bunker_anchor is not None:
            return self._stored_bunker_map(MAX_TIER).get(kind, [])
        if self.memory.maps_by_tier is not None:
            coords = self.memory.maps_by_tier.get(MAX_TIER, {}).get(kind)
            if coords is not None:
                return [WorldPosition.at(coord, area) for coord in coords]
        return None

    @property
    def storage_pos(self) -> WorldPosition | None:
        if ComponentName.COMMAND_CENTER in self.placements:
            return self.placements[ComponentName.COMMAND_CENTER].pos
        positions = self.planned_structure_positions(StructureKind.STORAGE)
        return positions[0] if positions else None

    @property
    def hatchery_pos(self) -> WorldPosition | None:
        if ComponentName.HATCHERY in self.placements:
            return self.placements[ComponentName.HATCHERY].pos
        positions = self.planned_structure_positions(StructureKind.SPAWN)
        return positions[0] if positions else None

    @property
    def bunker_pos(self) -> WorldPosition | None:
        if ComponentName.BUNKER in self.placements:
            return self.placements[ComponentName.BUNKER].pos
        if self.memory.bunker_anchor is not None:
            return WorldPosition.at(self.memory.bunker_anchor, self.world.area)
        return None

    def obstacles(self) -> list[WorldPosition]:
        """Planned positions of every kind that blocks movement."""
        if self.map:
            structure_map = self.map
        elif self.memory.bunker_anchor is not None:
            structure_map = self._stored_bunker_map(MAX_TIER)
        elif self.memory.maps_by_tier is not None:
            structure_map = {
                kind: [WorldPosition.at(coord, self.world.area) for coord in coords]
                for kind, coords in self.memory.maps_by_tier.get(MAX_TIER, {}).items()
            }
        else:
            return []
        obstacles: list[WorldPosition] = []
        for kind, positions in structure_map.items():
            if kind.passable:
                continue
            for pos in positions:
                if pos not in obstacles:
                    obstacles.append(pos)
        return obstacles

    def structure_should_be_here(self, kind: StructureKind, pos: WorldPosition) -> bool:
        if not self.map:
            self.recall_map()
        return self._reconciler.structure_should_be_here(kind, pos, self.map)

    def road_should_be_here(self, pos: WorldPosition) -> bool:
        return self.road_planner.road_should_be_here(pos)

    def find_collision(self, structure_map: StructureMap) -> tuple[StructureKind, WorldPosition] | None:
        bound = self._settings.grid_bound
        for kind, positions in structure_map.items():
            if kind.passable:
                continue
            for pos in positions:
                if not pos.coord.in_bounds(bound) or self.world.is_wall(pos):
                    return kind, pos
        return None

    def _finalized_placements(self) -> list[Placement]:
        bunker = self.placements.get(ComponentName.BUNKER)
        if bunker is not None:
            # A bunker placed alongside the two-part components takes precedence.
            return [bunker]
        hatchery = self.placements.get(ComponentName.HATCHERY)
        command_center = self.placements.get(ComponentName.COMMAND_CENTER)
        if hatchery is None or command_center is None:
            raise InvalidConfigurationError(
                "Not a valid room layout! Must have both hatchery and commandCenter placements or bunker placement."
            )
        return [hatchery, command_center]

    def finalize(self) -> None:
        """Validate and persist the plan, then switch the colony into maintenance.

        Raises ``InvalidConfigurationError`` or ``GeometricCollisionError`` without
        touching persisted state when the placements cannot be finalized.
        """
        placements = self._finalized_placements()
        maps = {tier: self._layout.make(placements, tier) for tier in range(1, MAX_TIER + 1)}
        for structure_map in maps.values():
            collision = self.find_collision(structure_map)
            if collision is not None:
                kind, pos = collision
                self._logger.warning("layout_collision", extra={"colony": self.world.area, "position": str(pos)})
                raise GeometricCollisionError(pos, kind.value)

        if placements[0].component is ComponentName.BUNKER:
            self.memory.store_bunker(placements[0].pos.coord, placements[0].rotation)
        else:
            tier_maps: TierMaps = {
                tier: {kind: [pos.coord for pos in positions] for kind, positions in structure_map.items()}
                for tier, structure_map in maps.items()
            }
            self.memory.store_maps(tier_maps)

        self.barrier_planner.finalize()
        self.road_planner.finalize()

        for marker in self.world.markers():
            self.memory.saved_markers.append(
                SavedMarker(secondary_attribute=marker.secondary_attribute, pos=marker.pos, payload=dict(marker.payload))
            )
            self.world.remove_marker(marker)
        self.memory.last_generated = self.world.tick
        self._logger.info("plan_finalized", extra={"colony": self.world.area, "layout": self.layout})

        self.placements = {}
        self.plan = {}
        self.recall_map()
        if self.world.tier == 1:
            self.demolish_misplaced_structures(skip_barriers=True, destroy_all=True)
            self._strip_barriers()
        self.memory.recheck_structures_at = self.world.tick + 3
        self.active = False

    def _strip_barriers(self) -> None:
        for barrier in self.world.structures(StructureKind.WALL) + self.world.structures(StructureKind.RAMPART):
            if barrier.kind is not StructureKind.WALL and barrier.owned:
                continue
            result = self.world.destroy(barrier)
            if result is not CommandResult.OK:
                self._logger.warning(
                    "destroy_rejected",
                    extra={
                        "colony": self.world.area,
                        "kind": barrier.kind.value,
                        "position": str(barrier.pos),
                        "result": result.value,
                    },
                )

    def reactivate(self) -> None:
        """Reinstate saved operator markers and drop any unfinalized state."""
        for saved in self.memory.saved_markers:
            name = self.world.create_marker(saved.pos, saved.secondary_attribute)
            if name is not None:
                self.world.set_marker_payload(name, saved.payload)
        self.memory.saved_markers = []
        self.placements = {}
        self.plan = {}
        self.map = {}
        self._logger.info("planner_activated", extra={"colony": self.world.area})
        for line in ACTIVATION_HELP:
            self._logger.info(line)

    def demolish_misplaced_structures(self, skip_barriers: bool = True, destroy_all: bool = False) -> PassReport:
        self.recall_map()
        return self._reconciler.demolish(self.map, skip_barriers=skip_barriers, destroy_all=destroy_all)

    def build_missing_structures(self) -> PassReport:
        self.recall_map()
        return self._reconciler.build(self.map)

    def should_recheck(self, offset: int = 0) -> bool:
        return self._reconciler.should_recheck(offset)

    def init(self) -> None:
        if self.active and self._automatic:
            anchor = self._automatic_bunker_anchor()
            if anchor is None:
                self._logger.error("bunker_anchor_unknown", extra={"colony": self.world.area})
                return
            self.add_component(ComponentName.BUNKER, anchor)
        self.barrier_planner.init()
        self.road_planner.init()

    def _automatic_bunker_anchor(self) -> WorldPosition | None:
        spawns = self.world.structures(StructureKind.SPAWN)
        if spawns:
            bound = self._settings.grid_bound
            lower_right = max(spawns, key=lambda spawn: bound * spawn.pos.y + spawn.pos.x)
            return lower_right.pos.offset(-4, 0)
        expansion = self.world.expansion_anchor()
        if expansion is not None:
            return WorldPosition.at(expansion, self.world.area)
        return None

    def run(self) -> PassReport | None:
        report: PassReport | None = None
        if self.active:
            self.make()
        elif self.should_recheck():
            report = self.demolish_misplaced_structures(skip_barriers=self.layout == "twoPart")
        elif self.should_recheck(1):
            report = self.build_missing_structures()

        self.barrier_planner.run()
        self.road_planner.run()

        if self.active and self._automatic:
            if ComponentName.BUNKER in self.placements:
                try:
                    self.finalize()
                except PlannerError as exc:
                    self._logger.warning("finalize_failed", extra={"colony": self.world.area, "error": str(exc)})
            else:
                self._logger.warning("no_bunker_placement", extra={"colony": self.world.area})
        return report
