"""
Footprint assembly for the floor-plan geometry engine.

Turns the room contours of a plan into the building shell:

1. Per room: normalize (dropping collinear points), build the inner ring (contour shrunk by the
   interior wall thickness), room walls along the inner ring facing the
   room, floor and ceiling.
2. Building: union of the room contours gives the building contours,
   union of the inner rings the merged interior void. Each building
   contour grown by the exterior wall thickness is the outer contour;
   exterior walls run along it facing out.
3. Caps: merged floor and the wall-top cap (outer contours minus void).

Openings are matched to walls by the proximity of their plan position.
"""

from dataclasses import dataclass, field
from typing import List, Optional, Tuple
import logging

from ..config import EngineConfig, DEFAULT_CONFIG
from ..models.geometry import Point2D
from ..models.mesh import MeshArtifact, merge_meshes
from ..models.building import Opening, RoomInput, WallSegment
from ..utils.polygon_utils import normalize_winding, is_degenerate, remove_collinear_points
from ..generators.walls import build_wall_segment, associate_openings
from ..generators.floors import build_floor, build_ceiling, build_wall_top_cap
from .clipper import offset, union, match_ring_lengths, align_ring_start, ClipError

logger = logging.getLogger(__name__)

Contour = List[Point2D]


@dataclass
class RoomGeometry:
    """
    Geometry generated for one room.

    Attributes:
        name: Room label
        contour: Room contour (normalized, CCW)
        inner_ring: Contour shrunk by the interior wall thickness,
            vertex-paired with contour
        segments: Wall segments along the inner ring
        walls: One mesh per wall segment
        merged_walls: All room walls in one mesh
        floor: Room floor
        ceiling: Room ceiling
    """
    name: str
    contour: Contour
    inner_ring: Contour
    segments: List[WallSegment] = field(default_factory=list)
    walls: List[MeshArtifact] = field(default_factory=list)
    merged_walls: MeshArtifact = field(default_factory=MeshArtifact)
    floor: MeshArtifact = field(default_factory=MeshArtifact)
    ceiling: MeshArtifact = field(default_factory=MeshArtifact)


@dataclass
class FootprintResult:
    """
    Result of assemble_footprint().

    Attributes:
        rooms: Per-room geometry
        building_contours: Union of the room contours
        inner_contours: Union of the inner rings (merged interior void)
        outer_contours: Building contours grown by the exterior thickness,
            vertex-paired with building_contours
        exterior_segments: Wall segments along the outer contours
        exterior_walls: One mesh per exterior wall segment
        wall_top: Cap over the tops of the walls
        merged_walls: Exterior walls and wall-top cap in one mesh
        floor: Floor over all building contours
        warnings: Recovered problems, for reporting
    """
    rooms: List[RoomGeometry] = field(default_factory=list)
    building_contours: List[Contour] = field(default_factory=list)
    inner_contours: List[Contour] = field(default_factory=list)
    outer_contours: List[Contour] = field(default_factory=list)
    exterior_segments: List[WallSegment] = field(default_factory=list)
    exterior_walls: List[MeshArtifact] = field(default_factory=list)
    wall_top: MeshArtifact = field(default_factory=MeshArtifact)
    merged_walls: MeshArtifact = field(default_factory=MeshArtifact)
    floor: MeshArtifact = field(default_factory=MeshArtifact)
    warnings: List[str] = field(default_factory=list)

    @property
    def room_contours(self) -> List[Contour]:
        return [room.contour for room in self.rooms]

    def all_segments(self) -> List[WallSegment]:
        """Exterior segments first, then room segments."""
        segments = list(self.exterior_segments)
        for room in self.rooms:
            segments.extend(room.segments)
        return segments


def assemble_footprint(
    rooms: List[RoomInput],
    openings: Optional[List[Opening]] = None,
    config: EngineConfig = DEFAULT_CONFIG
) -> FootprintResult:
    """
    Build walls, floors, ceilings and caps for a set of rooms.

    Degenerate rooms are skipped with a warning; a failing room never
    stops the others.

    Args:
        rooms: Room contours in any winding
        openings: Openings with plan positions
        config: Engine configuration

    Returns:
        FootprintResult with every generated mesh
    """
    openings = openings or []
    result = FootprintResult()

    for index, room in enumerate(rooms):
        name = room.name or f"room_{index}"
        geometry = _assemble_room(name, room.contour, openings, config, result.warnings)
        if geometry is not None:
            result.rooms.append(geometry)

    if not result.rooms:
        logger.info("No buildable rooms in plan")
        return result

    if len(result.rooms) == 1:
        result.building_contours = [result.rooms[0].contour]
        result.inner_contours = [result.rooms[0].inner_ring]
    else:
        try:
            result.building_contours = union([r.contour for r in result.rooms])
            result.inner_contours = union([r.inner_ring for r in result.rooms])
        except ClipError as e:
            message = f"Room union failed ({e}), treating rooms as separate buildings"
            logger.warning(message)
            result.warnings.append(message)
            result.building_contours = [r.contour for r in result.rooms]
            result.inner_contours = [r.inner_ring for r in result.rooms]

    for contour_index, contour in enumerate(result.building_contours):
        _assemble_exterior(contour_index, contour, openings, config, result)

    result.floor = build_floor(result.building_contours, config, name="floor")
    result.wall_top = build_wall_top_cap(
        result.outer_contours, result.inner_contours, config, name="wall_top"
    )
    result.merged_walls = merge_meshes(
        result.exterior_walls + [result.wall_top], name="exterior"
    )

    logger.debug(
        f"Assembled {len(result.rooms)} rooms into {len(result.building_contours)} "
        f"building contours, {len(result.exterior_walls)} exterior walls"
    )
    return result


def paired_rings(
    ring: Contour,
    reference: Contour
) -> Tuple[Contour, Contour]:
    """
    Make an offset ring vertex-paired with its reference ring.

    Lengths are matched by point merging, then the ring is rotated so
    vertex i of both rings are the two ends of the same wall.
    """
    ring, reference = match_ring_lengths(ring, reference)
    return align_ring_start(ring, reference), reference


def _assemble_room(
    name: str,
    contour: Contour,
    openings: List[Opening],
    config: EngineConfig,
    warnings: List[str]
) -> Optional[RoomGeometry]:
    """Walls, floor and ceiling of one room, or None when it cannot be built."""
    if is_degenerate(contour, config.collinear_epsilon):
        message = f"Room {name}: degenerate contour skipped"
        logger.warning(message)
        warnings.append(message)
        return None

    contour = remove_collinear_points(normalize_winding(contour), config.collinear_epsilon)
    try:
        normal_ring = offset(contour, 0.0)
        if config.interior_wall_thickness > 0:
            inner_ring = offset(contour, -config.interior_wall_thickness)
        else:
            inner_ring = list(normal_ring)
    except ClipError as e:
        message = f"Room {name}: offset failed ({e}), skipped"
        logger.warning(message)
        warnings.append(message)
        return None

    inner_ring, normal_ring = paired_rings(inner_ring, normal_ring)
    room = RoomGeometry(name=name, contour=normal_ring, inner_ring=inner_ring)

    n = len(inner_ring)
    for i in range(n):
        start = inner_ring[i]
        end = inner_ring[(i + 1) % n]
        hosted = associate_openings(
            openings, start, end, config.opening_snap_distance,
            normal_ring[i], normal_ring[(i + 1) % n]
        )
        segment = WallSegment(
            start, end, config.wall_height, config.interior_wall_thickness,
            inward=True, openings=hosted
        )
        room.segments.append(segment)
        room.walls.append(build_wall_segment(segment, config, name=f"{name}_wall_{i}"))

    room.merged_walls = merge_meshes(room.walls, name=f"{name}_walls")
    room.floor = build_floor([normal_ring], config, name=f"{name}_floor")
    room.ceiling = build_ceiling(room.floor, config, name=f"{name}_ceiling")
    return room


def _assemble_exterior(
    index: int,
    contour: Contour,
    openings: List[Opening],
    config: EngineConfig,
    result: FootprintResult
) -> None:
    """Outer contour and exterior walls around one building contour."""
    contour = remove_collinear_points(normalize_winding(contour), config.collinear_epsilon)
    try:
        outer = offset(contour, config.exterior_wall_thickness)
    except ClipError as e:
        message = f"Building contour {index}: exterior offset failed ({e}), no exterior walls"
        logger.warning(message)
        result.warnings.append(message)
        return

    outer, contour = paired_rings(outer, contour)
    result.outer_contours.append(outer)

    n = len(outer)
    for i in range(n):
        start = outer[i]
        end = outer[(i + 1) % n]
        hosted = associate_openings(
            openings, start, end, config.opening_snap_distance,
            contour[i], contour[(i + 1) % n]
        )
        segment = WallSegment(
            start, end, config.wall_height, config.exterior_wall_thickness,
            inward=False, openings=hosted
        )
        result.exterior_segments.append(segment)
        result.exterior_walls.append(
            build_wall_segment(segment, config, name=f"exterior_{index}_wall_{i}")
        )
