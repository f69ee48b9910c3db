"""
Wall generator for the floor-plan geometry engine.

Builds one wall panel per wall segment. The panel is generated in a
wall-local frame and then placed in the world:

    local X: along the wall, from start (x = 0) to end (x = L)
    local Y: world up, from floor (y = 0) to wall top (y = H)
    local Z: horizontal, pointing to the interior side of a CCW contour

Openings are cut with polygon difference; each cut gets a frame band
extruded through the wall thickness so the opening reveals read as solid.
"""

from typing import List, Optional, Tuple
import logging

from ..config import EngineConfig, DEFAULT_CONFIG, Plane, DOOR_SILL_EPSILON
from ..models.geometry import Point2D, Polygon, Vector3
from ..models.mesh import MeshArtifact
from ..models.building import Opening, WallSegment
from ..processing.clipper import difference, ClipError
from ..utils.math_utils import clamp, segment_parameter, point_to_line_distance
from ..utils.polygon_utils import unproject, unproject_vector
from ..utils.triangulation import tessellate, TessellationError
from .uv_mapping import apply_planar_uvs

logger = logging.getLogger(__name__)

# Holes thinner than this (meters) after clamping are not cut
MIN_HOLE_SIZE = 1e-4

Rect = Tuple[float, float, float, float]  # left, bottom, right, top


def wall_frame(
    start: Point2D,
    end: Point2D,
    plane: Plane,
    base_height: float = 0.0
) -> Tuple[Vector3, Vector3, Vector3, Vector3]:
    """
    World frame of a wall running from start to end.

    Returns:
        (origin, axis_x, axis_y, axis_z) where axis_x follows the wall,
        axis_y is world up and axis_z points to the left of the wall
        direction (interior side of a CCW contour)
    """
    direction = (end - start).normalized()
    origin = unproject(start, plane, base_height).as_tuple()
    axis_x = unproject_vector(direction, plane)
    axis_z = unproject_vector(direction.left_normal(), plane)
    return origin, axis_x, plane.up, axis_z


def opening_rectangle(
    opening: Opening,
    wall_length: float,
    wall_height: float,
    config: EngineConfig = DEFAULT_CONFIG
) -> Optional[Rect]:
    """
    Hole rectangle of an opening in wall-local coordinates.

    Doors start at the floor and are config.door_height tall (capped by
    the wall). Windows and generic openings are centred at
    vertical_offset above the wall mid-height. The rectangle is clamped
    to the wall.

    Returns:
        (left, bottom, right, top), or None if nothing is left after
        clamping
    """
    half_width = opening.width / 2.0
    left = clamp(opening.offset - half_width, 0.0, wall_length)
    right = clamp(opening.offset + half_width, 0.0, wall_length)

    if opening.is_door:
        bottom = 0.0
        top = config.effective_door_height(wall_height)
    else:
        centre = opening.vertical_offset + wall_height / 2.0
        bottom = clamp(centre - opening.height / 2.0, 0.0, wall_height)
        top = clamp(centre + opening.height / 2.0, 0.0, wall_height)

    if right - left < MIN_HOLE_SIZE or top - bottom < MIN_HOLE_SIZE:
        return None

    return (left, bottom, right, top)


def build_wall(
    start: Point2D,
    end: Point2D,
    height: float,
    openings: List[Opening],
    inward: bool,
    thickness: float,
    config: EngineConfig = DEFAULT_CONFIG,
    name: Optional[str] = None
) -> MeshArtifact:
    """
    Build a wall panel with cut-outs for its openings.

    Args:
        start: Wall start point in the plan
        end: Wall end point in the plan
        height: Wall height
        openings: Openings with offsets measured from start
        inward: Visible face points to the interior side
        thickness: Depth of the frame band around each opening
        config: Engine configuration
        name: Label of the resulting mesh

    Returns:
        Wall mesh in world coordinates. Empty when the wall has no length
        or its openings cover it completely.
    """
    length = start.distance_to(end)
    mesh = MeshArtifact(name=name)
    if length < MIN_HOLE_SIZE or height <= 0:
        logger.debug(f"Skipping degenerate wall {name or ''} (length={length:.4f})")
        return mesh

    rect = [
        Point2D(0.0, 0.0),
        Point2D(length, 0.0),
        Point2D(length, height),
        Point2D(0.0, height),
    ]

    holes: List[Tuple[Rect, bool]] = []
    for opening in openings:
        hole = opening_rectangle(opening, length, height, config)
        if hole is None:
            logger.debug(
                f"Opening at offset {opening.offset:.2f} lies outside wall "
                f"{name or ''} (length={length:.2f})"
            )
            continue
        holes.append((hole, opening.is_door))

    face_normal = (0.0, 0.0, 1.0) if inward else (0.0, 0.0, -1.0)

    if holes:
        clips = [_cut_contour(hole, is_door) for hole, is_door in holes]
        try:
            pieces = difference(rect, clips)
        except ClipError as e:
            logger.warning(f"Wall {name or ''}: opening cut failed ({e}), building it solid")
            pieces = [Polygon(rect)]
            holes = []
    else:
        pieces = [Polygon(rect)]

    if pieces:
        try:
            mesh.merge(tessellate(pieces, face_normal, Plane.XY, 0.0))
        except TessellationError as e:
            logger.warning(f"Wall {name or ''}: tessellation failed ({e}), trying pieces one by one")
            for piece in pieces:
                try:
                    mesh.merge(tessellate([piece], face_normal, Plane.XY, 0.0))
                except TessellationError as piece_error:
                    logger.warning(f"Wall {name or ''}: dropped a wall piece ({piece_error})")

    if thickness > 0 and pieces:
        depth = -thickness if inward else thickness
        for hole, is_door in holes:
            _add_frame_band(mesh, hole, depth, skip_bottom=is_door)

    apply_planar_uvs(mesh, length, height, axes=(0, 1))

    origin, axis_x, axis_y, axis_z = wall_frame(start, end, config.plane)
    mesh.transform(origin, axis_x, axis_y, axis_z)
    return mesh


def build_wall_segment(
    segment: WallSegment,
    config: EngineConfig = DEFAULT_CONFIG,
    name: Optional[str] = None
) -> MeshArtifact:
    """Build a wall from a WallSegment record."""
    return build_wall(
        segment.start,
        segment.end,
        segment.height,
        segment.openings,
        segment.inward,
        segment.thickness,
        config,
        name,
    )


def build_plain_wall(
    start: Point2D,
    end: Point2D,
    height: float,
    inward: bool,
    config: EngineConfig = DEFAULT_CONFIG,
    name: Optional[str] = None
) -> MeshArtifact:
    """
    Build a wall as a single quad, without boolean operations.
    """
    length = start.distance_to(end)
    mesh = MeshArtifact(name=name)
    if length < MIN_HOLE_SIZE or height <= 0:
        return mesh

    normal = (0.0, 0.0, 1.0) if inward else (0.0, 0.0, -1.0)
    mesh.add_flat_quad(
        [(0.0, 0.0, 0.0), (length, 0.0, 0.0), (length, height, 0.0), (0.0, height, 0.0)],
        normal,
    )
    apply_planar_uvs(mesh, length, height, axes=(0, 1))

    origin, axis_x, axis_y, axis_z = wall_frame(start, end, config.plane)
    mesh.transform(origin, axis_x, axis_y, axis_z)
    return mesh


def associate_openings(
    openings: List[Opening],
    start: Point2D,
    end: Point2D,
    tolerance: float,
    paired_start: Optional[Point2D] = None,
    paired_end: Optional[Point2D] = None
) -> List[Opening]:
    """
    Openings whose plan position lies on a wall segment.

    An opening belongs to the wall when its position is within
    `tolerance` of the line through start-end (or through the paired
    segment on the other face of the wall) and projects inside the
    segment. The returned copies carry their offset along start-end.

    Args:
        openings: Candidate openings; those without a position are ignored
        start: Segment start the offsets are measured from
        end: Segment end
        tolerance: Maximum distance from the segment
        paired_start: Start of the segment on the opposite wall face
        paired_end: End of the segment on the opposite wall face

    Returns:
        Openings placed on this wall, sorted by offset
    """
    length = start.distance_to(end)
    if length < MIN_HOLE_SIZE:
        return []

    result = []
    slack = tolerance / length

    for opening in openings:
        if opening.position is None:
            continue

        t = segment_parameter(opening.position, start, end)
        distance = point_to_line_distance(opening.position, start, end)

        if paired_start is not None and paired_end is not None:
            distance = min(
                distance,
                point_to_line_distance(opening.position, paired_start, paired_end)
            )

        if distance > tolerance or t < -slack or t > 1.0 + slack:
            continue

        result.append(opening.at_offset(clamp(t, 0.0, 1.0) * length))

    result.sort(key=lambda o: o.offset)
    return result


def _cut_contour(hole: Rect, is_door: bool) -> List[Point2D]:
    """Clip contour for a hole; doors reach just below the floor."""
    left, bottom, right, top = hole
    if is_door:
        bottom = -DOOR_SILL_EPSILON
    return [
        Point2D(left, bottom),
        Point2D(right, bottom),
        Point2D(right, top),
        Point2D(left, top),
    ]


def _add_frame_band(mesh: MeshArtifact, hole: Rect, depth: float, skip_bottom: bool) -> None:
    """
    Add the reveal quads around a hole, facing into the opening.
    """
    left, bottom, right, top = hole
    sides = [
        ((left, bottom), (right, bottom), (0.0, 1.0, 0.0)),
        ((right, bottom), (right, top), (-1.0, 0.0, 0.0)),
        ((right, top), (left, top), (0.0, -1.0, 0.0)),
        ((left, top), (left, bottom), (1.0, 0.0, 0.0)),
    ]
    if skip_bottom:
        sides = sides[1:]

    for (ax, ay), (bx, by), normal in sides:
        mesh.add_flat_quad(
            [(ax, ay, 0.0), (bx, by, 0.0), (bx, by, depth), (ax, ay, depth)],
            normal,
        )
