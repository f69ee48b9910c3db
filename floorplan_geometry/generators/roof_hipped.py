"""
Hipped roof generator for the floor-plan geometry engine.

Generates hipped roofs for arbitrary simple footprints from the straight
skeleton of the roof outline (footprint grown by the overhang):

- Each skeleton face becomes one roof slope.
- A point's height above the eaves is tan(pitch) times its distance to
  the line of the face's edge, so adjacent slopes meet exactly along
  the skeleton arcs (hips, valleys and ridges).
- Slopes sit on top of the roof base (border band), `thickness` above
  the wall top.

Rectangles give the classic four-slope hip roof; squares give a pyramid.
"""

from typing import Callable, List
import math
import logging

from ..config import EngineConfig, DEFAULT_CONFIG, Plane, ROOF_UV_TILE
from ..models.geometry import Point2D, Vector3
from ..models.mesh import MeshArtifact, vec_cross, vec_dot, vec_normalize, vec_sub
from ..models.building import RoofConfig
from ..processing.skeleton import compute_straight_skeleton, SkeletonFace
from ..utils.polygon_utils import normalize_winding, remove_duplicate_points, unproject, unproject_vector
from ..utils.triangulation import triangulate_polygon
from .roof_flat import roof_outline, build_roof_base
from .uv_mapping import apply_box_uvs

logger = logging.getLogger(__name__)

FaceBuilder = Callable[[MeshArtifact, SkeletonFace, float, float, Plane], None]


def face_height(point: Point2D, face: SkeletonFace, slope: float) -> float:
    """Height of a plan point above the eaves of a roof face."""
    a = face.edge_start
    inward = (face.edge_end - a).normalized().left_normal()
    return slope * max(0.0, (point - a).dot(inward))


def slope_normal(face: SkeletonFace, slope: float, plane: Plane) -> Vector3:
    """Unit normal of a roof face: up tilted away from the face interior."""
    inward = (face.edge_end - face.edge_start).normalized().left_normal()
    tilt = unproject_vector(inward * -slope, plane)
    up = plane.up
    return vec_normalize((up[0] + tilt[0], up[1] + tilt[1], up[2] + tilt[2]))


def add_pitched_face(
    mesh: MeshArtifact,
    face: SkeletonFace,
    slope: float,
    elevation: float,
    plane: Plane
) -> None:
    """
    Append one sloped skeleton face to a mesh.

    Args:
        mesh: Mesh to extend
        face: Skeleton face (edge first, CCW)
        slope: tan(pitch)
        elevation: Height of the eaves
        plane: Working plane

    Raises:
        TessellationError: If the face cannot be triangulated
    """
    ring = remove_duplicate_points(face.polygon)
    if len(ring) < 3:
        return

    normal = slope_normal(face, slope, plane)
    positions = [
        unproject(p, plane, elevation + face_height(p, face, slope)).as_tuple()
        for p in ring
    ]
    add_oriented_triangles(mesh, positions, triangulate_polygon(ring), normal)


def add_oriented_triangles(
    mesh: MeshArtifact,
    positions: List[Vector3],
    triangles: List[tuple],
    normal: Vector3
) -> None:
    """Add triangles over shared positions, wound to face `normal`."""
    base = mesh.vertex_count()
    for position in positions:
        mesh.add_vertex(position, normal)

    for a, b, c in triangles:
        geometric = vec_cross(
            vec_sub(positions[b], positions[a]),
            vec_sub(positions[c], positions[a])
        )
        if vec_dot(geometric, normal) < 0:
            b, c = c, b
        mesh.add_triangle(base + a, base + b, base + c)


def build_skeleton_roof(
    outline: List[Point2D],
    roof: RoofConfig,
    config: EngineConfig = DEFAULT_CONFIG,
    base_height: float = 0.0,
    face_builder: FaceBuilder = add_pitched_face,
    name: str = "roof_slopes"
) -> MeshArtifact:
    """
    Build the sloped surfaces over an outline from its straight skeleton.

    Raises:
        SkeletonError: If the skeleton cannot be computed
        TessellationError: If a face cannot be triangulated
    """
    skeleton = compute_straight_skeleton(outline)
    slope = math.tan(math.radians(roof.pitch))
    elevation = base_height + roof.thickness

    mesh = MeshArtifact(name=name)
    for face in skeleton.faces:
        face_builder(mesh, face, slope, elevation, config.plane)

    apply_box_uvs(mesh, ROOF_UV_TILE, ROOF_UV_TILE)

    logger.debug(
        f"Skeleton roof: {len(skeleton.faces)} faces, ridge at "
        f"{skeleton.max_height() * slope:.2f} m above eaves"
    )
    return mesh


def build_hipped_roof(
    footprint: List[Point2D],
    roof: RoofConfig,
    config: EngineConfig = DEFAULT_CONFIG,
    base_height: float = 0.0
) -> List[MeshArtifact]:
    """
    Generate a hipped roof over a footprint.

    Args:
        footprint: Contour the roof covers
        roof: Roof settings (pitch, thickness, overhang)
        config: Engine configuration
        base_height: Height the roof sits on (wall top)

    Returns:
        Roof drafts: slopes, then base (border band and soffit)

    Raises:
        ClipError: If the footprint cannot be offset
        SkeletonError: If the skeleton cannot be computed
        TessellationError: If a face cannot be triangulated
    """
    footprint = normalize_winding(footprint)
    outline = roof_outline(footprint, roof)

    drafts = [build_skeleton_roof(outline, roof, config, base_height)]
    base = build_roof_base(footprint, outline, roof, config, base_height)
    if not base.is_empty():
        drafts.append(base)
    return drafts

