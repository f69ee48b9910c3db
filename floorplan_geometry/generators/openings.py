"""
Opening panel generator for the floor-plan geometry engine.

Builds the leaf that fills a wall opening: a door leaf (optionally with a
glazing pane) or a window sash with its glass and mullion bars. Panels
are modelled in an opening-local frame (x across the opening, y up, z
through the wall, centred on z = 0) and placed into the wall with the
same frame the wall itself uses.
"""

from dataclasses import dataclass, field
from typing import List, Optional, Tuple
import logging

from ..config import EngineConfig, DEFAULT_CONFIG, Plane, MULLION_WIDTH
from ..models.geometry import Point2D, Polygon
from ..models.mesh import MeshArtifact
from ..models.building import Opening, OpeningType
from ..processing.clipper import difference, ClipError
from ..utils.math_utils import clamp
from ..utils.triangulation import tessellate, TessellationError
from .uv_mapping import apply_planar_uvs
from .walls import wall_frame

logger = logging.getLogger(__name__)

Rect = Tuple[float, float, float, float]  # left, bottom, right, top


@dataclass
class OpeningMeshes:
    """Meshes generated for one opening."""
    opening: Opening
    panel: MeshArtifact = field(default_factory=MeshArtifact)
    glass: MeshArtifact = field(default_factory=MeshArtifact)

    def is_empty(self) -> bool:
        return self.panel.is_empty() and self.glass.is_empty()


def panel_extent(
    opening: Opening,
    wall_height: float,
    config: EngineConfig = DEFAULT_CONFIG
) -> Tuple[float, float]:
    """
    Bottom and top of the panel filling an opening.

    Returns:
        (bottom, top) in wall-local height
    """
    if opening.is_door:
        return (0.0, config.effective_door_height(wall_height))

    centre = opening.vertical_offset + wall_height / 2.0
    bottom = clamp(centre - opening.height / 2.0, 0.0, wall_height)
    top = clamp(centre + opening.height / 2.0, 0.0, wall_height)
    return (bottom, top)


def glazing_rectangle(
    opening: Opening,
    bottom: float,
    top: float
) -> Optional[Rect]:
    """
    Glass area of a panel, in opening-local coordinates.

    Windows are glazed edge to edge inside their frame. Doors with a
    window get a pane of window_size_h x window_size_v of the leaf,
    hanging from just below the top frame.
    """
    frame = opening.frame_size
    width = opening.width
    height = top - bottom

    if opening.kind is OpeningType.WINDOW:
        rect = (frame, bottom + frame, width - frame, top - frame)
    elif opening.is_door and opening.has_window:
        half = (width / 2.0 - frame) * opening.window_size_h
        pane_height = (height - 2.0 * frame) * opening.window_size_v
        pane_top = top - frame
        rect = (width / 2.0 - half, pane_top - pane_height, width / 2.0 + half, pane_top)
    else:
        return None

    left, low, right, high = rect
    if right - left <= 0 or high - low <= 0:
        return None
    return rect


def build_opening_panel(
    opening: Opening,
    wall_height: float,
    config: EngineConfig = DEFAULT_CONFIG
) -> OpeningMeshes:
    """
    Build the panel meshes of one opening in opening-local coordinates.

    Generic openings are plain holes and produce empty meshes.

    Args:
        opening: Door or window to build
        wall_height: Height of the hosting wall
        config: Engine configuration

    Returns:
        OpeningMeshes with panel and glass
    """
    result = OpeningMeshes(opening)
    if opening.kind is OpeningType.GENERIC:
        return result

    thickness = config.door_thickness if opening.is_door else config.window_thickness
    bottom, top = panel_extent(opening, wall_height, config)
    if top - bottom <= 0:
        return result

    outline = [
        Point2D(0.0, bottom),
        Point2D(opening.width, bottom),
        Point2D(opening.width, top),
        Point2D(0.0, top),
    ]
    glazing = glazing_rectangle(opening, bottom, top)

    pieces = [Polygon(outline)]
    if glazing is not None:
        left, low, right, high = glazing
        try:
            pieces = difference(outline, [[
                Point2D(left, low), Point2D(right, low),
                Point2D(right, high), Point2D(left, high),
            ]])
        except ClipError as e:
            logger.warning(f"Opening panel: glazing cut failed ({e}), building it solid")
            glazing = None

    half = thickness / 2.0
    panel = result.panel
    try:
        for z, normal in ((half, (0.0, 0.0, 1.0)), (-half, (0.0, 0.0, -1.0))):
            face = tessellate(pieces, normal, Plane.XY, 0.0)
            face.translate((0.0, 0.0, z))
            panel.merge(face)
    except TessellationError as e:
        logger.warning(f"Opening panel: tessellation failed ({e})")
        return result

    for piece in pieces:
        _add_ring_sides(panel, piece.outer_ring, half)
        for hole in piece.holes:
            _add_ring_sides(panel, hole, half)

    if glazing is not None:
        _add_mullions(panel, opening, glazing, half)
        result.glass = _glass_pane(glazing)

    apply_planar_uvs(panel, opening.width, max(top - bottom, 1e-6), axes=(0, 1))
    return result


def place_opening(
    meshes: OpeningMeshes,
    start: Point2D,
    end: Point2D,
    inward: bool,
    wall_thickness: float,
    config: EngineConfig = DEFAULT_CONFIG
) -> OpeningMeshes:
    """
    Move opening meshes into the wall they belong to.

    The panel is centred on the opening offset along the wall and in the
    middle of the wall body.
    """
    depth = -wall_thickness / 2.0 if inward else wall_thickness / 2.0
    shift = (meshes.opening.offset - meshes.opening.width / 2.0, 0.0, depth)
    origin, axis_x, axis_y, axis_z = wall_frame(start, end, config.plane)

    for mesh in (meshes.panel, meshes.glass):
        if mesh.is_empty():
            continue
        mesh.translate(shift)
        mesh.transform(origin, axis_x, axis_y, axis_z)

    return meshes


def _add_ring_sides(mesh: MeshArtifact, ring: List[Point2D], half: float) -> None:
    """Side quads of an extruded ring, facing away from the panel material."""
    n = len(ring)
    for i in range(n):
        a = ring[i]
        b = ring[(i + 1) % n]
        edge = (b - a).normalized()
        # Outer rings are CCW and holes CW: material is always on the left
        normal = (edge.y, -edge.x, 0.0)
        mesh.add_flat_quad(
            [(a.x, a.y, -half), (b.x, b.y, -half), (b.x, b.y, half), (a.x, a.y, half)],
            normal,
        )


def _add_mullions(mesh: MeshArtifact, opening: Opening, glazing: Rect, half: float) -> None:
    """Bars dividing the glazing into subdivisions_h x subdivisions_v panes."""
    left, low, right, high = glazing
    bar = MULLION_WIDTH / 2.0

    for i in range(1, opening.subdivisions_h):
        x = left + i * (right - left) / opening.subdivisions_h
        _add_box(mesh, (x - bar, low, x + bar, high), half)

    for j in range(1, opening.subdivisions_v):
        y = high - j * (high - low) / opening.subdivisions_v
        _add_box(mesh, (left, y - bar, right, y + bar), half)


def _add_box(mesh: MeshArtifact, rect: Rect, half: float) -> None:
    left, low, right, high = rect
    mesh.add_flat_quad(
        [(left, low, half), (right, low, half), (right, high, half), (left, high, half)],
        (0.0, 0.0, 1.0),
    )
    mesh.add_flat_quad(
        [(left, low, -half), (right, low, -half), (right, high, -half), (left, high, -half)],
        (0.0, 0.0, -1.0),
    )
    ring = [Point2D(left, low), Point2D(right, low), Point2D(right, high), Point2D(left, high)]
    _add_ring_sides(mesh, ring, half)


def _glass_pane(glazing: Rect) -> MeshArtifact:
    """Double-sided quad covering the glazing."""
    left, low, right, high = glazing
    glass = MeshArtifact(name="glass")
    corners = [(left, low, 0.0), (right, low, 0.0), (right, high, 0.0), (left, high, 0.0)]
    glass.add_flat_quad(corners, (0.0, 0.0, 1.0))
    glass.add_flat_quad(corners, (0.0, 0.0, -1.0))
    apply_planar_uvs(glass, right - left, high - low, axes=(0, 1))
    return glass
