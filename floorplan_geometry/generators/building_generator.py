"""
Building generator orchestrator for the floor-plan geometry engine.

Runs one complete rebuild of a plan, in order:

1. Footprint assembly: room walls, floors, ceilings, exterior shell and
   wall-top cap.
2. Roof over the building outer contours (per-room fallback inside).
3. Opening panels (door leaves, window sashes) in their host walls.

Every artifact is returned together in a BuildingResult. Recoverable
problems are collected as warnings; rebuild_building() does not raise
on bad geometry.
"""

from dataclasses import dataclass, field
from typing import List, Optional
import logging

from ..config import EngineConfig, DEFAULT_CONFIG
from ..models.mesh import MeshArtifact
from ..models.building import BuildingPlan, Opening, WallSegment
from ..processing.footprint import assemble_footprint, FootprintResult
from .openings import build_opening_panel, place_opening, OpeningMeshes
from .roof_builder import build_roofs, RoofResult

logger = logging.getLogger(__name__)


@dataclass
class BuildingResult:
    """
    Result of one rebuild.

    Attributes:
        footprint: Walls, floors, ceilings and caps
        roof: Roof drafts and merged roof
        openings: Placed opening panels, one per hosted opening
        warnings: Recovered problems from every stage
        stats: Counters for reporting
    """
    footprint: FootprintResult = field(default_factory=FootprintResult)
    roof: RoofResult = field(default_factory=RoofResult)
    openings: List[OpeningMeshes] = field(default_factory=list)
    warnings: List[str] = field(default_factory=list)
    stats: dict = field(default_factory=dict)

    @property
    def walls(self) -> List[MeshArtifact]:
        """Every wall mesh: exterior walls first, then room walls."""
        walls = list(self.footprint.exterior_walls)
        for room in self.footprint.rooms:
            walls.extend(room.walls)
        return walls

    @property
    def ceilings(self) -> List[MeshArtifact]:
        return [room.ceiling for room in self.footprint.rooms]

    def artifacts(self) -> List[MeshArtifact]:
        """All non-empty meshes of the building, for export or display."""
        meshes = [self.footprint.merged_walls, self.footprint.floor]
        for room in self.footprint.rooms:
            meshes.extend([room.merged_walls, room.floor, room.ceiling])
        meshes.extend(self.roof.drafts)
        for placed in self.openings:
            meshes.extend([placed.panel, placed.glass])
        return [mesh for mesh in meshes if not mesh.is_empty()]


def rebuild_building(
    plan: BuildingPlan,
    config: EngineConfig = DEFAULT_CONFIG
) -> BuildingResult:
    """
    Generate every mesh of a building plan.

    Args:
        plan: Rooms, openings and roof settings
        config: Engine configuration

    Returns:
        BuildingResult with all artifacts, warnings and stats
    """
    result = BuildingResult()

    result.footprint = assemble_footprint(plan.rooms, plan.openings, config)
    result.warnings.extend(result.footprint.warnings)

    if result.footprint.outer_contours:
        roof_contours = result.footprint.outer_contours
    else:
        roof_contours = result.footprint.building_contours

    if roof_contours:
        result.roof = build_roofs(
            roof_contours,
            result.footprint.room_contours,
            plan.roof,
            config,
            base_height=config.wall_height,
        )
        result.warnings.extend(result.roof.warnings)

    if config.build_opening_panels:
        segments = result.footprint.all_segments()
        for index, opening in enumerate(plan.openings):
            placed = _build_hosted_opening(index, opening, segments, config, result.warnings)
            if placed is not None:
                result.openings.append(placed)

    result.stats = _collect_stats(result)
    logger.info(
        f"Rebuilt building: {result.stats['rooms']} rooms, "
        f"{result.stats['walls']} walls, {result.stats['roof_drafts']} roof drafts, "
        f"{result.stats['triangles']} triangles"
    )
    for warning in result.warnings:
        logger.debug(f"Rebuild warning: {warning}")

    return result


def find_host_segment(
    opening: Opening,
    segments: List[WallSegment]
) -> Optional[tuple]:
    """
    First wall segment hosting an opening.

    Returns:
        (segment, placed opening) or None when no wall hosts the opening
    """
    if opening.position is None:
        return None

    for segment in segments:
        for hosted in segment.openings:
            if hosted.position == opening.position and hosted.kind is opening.kind:
                return segment, hosted
    return None


def _build_hosted_opening(
    index: int,
    opening: Opening,
    segments: List[WallSegment],
    config: EngineConfig,
    warnings: List[str]
) -> Optional[OpeningMeshes]:
    host = find_host_segment(opening, segments)
    if host is None:
        message = f"Opening {index} ({opening.kind.value}) is not on any wall"
        logger.warning(message)
        warnings.append(message)
        return None

    segment, hosted = host
    meshes = build_opening_panel(hosted, segment.height, config)
    if meshes.is_empty():
        return None

    return place_opening(
        meshes, segment.start, segment.end, segment.inward, segment.thickness, config
    )


def _collect_stats(result: BuildingResult) -> dict:
    meshes = result.artifacts()
    return {
        'rooms': len(result.footprint.rooms),
        'building_contours': len(result.footprint.building_contours),
        'walls': len(result.walls),
        'roof_drafts': len(result.roof.drafts),
        'roof_per_room': result.roof.per_room,
        'opening_panels': len(result.openings),
        'vertices': sum(mesh.vertex_count() for mesh in meshes),
        'triangles': sum(mesh.triangle_count() for mesh in meshes),
        'warnings': len(result.warnings),
    }
