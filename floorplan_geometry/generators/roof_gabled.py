"""
Gabled roof generator for the floor-plan geometry engine.

Starts from the hipped roof (straight skeleton of the roof outline) and
turns every triangular skeleton face, the hip ends, into a gable:

    A, B: eave corners of the face edge
    P:    apex of the hip triangle, at ridge height h
    G:    point of AB closest to P, raised to h

The hip triangle is replaced by a vertical gable wall (A, B, G) and two
slope patches (A, G, P) and (B, P, G) that continue the neighbouring
slopes out to the gable. On a rectangle this gives the classic two-slope
roof with a ridge running between the two gables.
"""

from typing import List
import logging

from ..config import EngineConfig, DEFAULT_CONFIG, Plane
from ..models.geometry import Point2D
from ..models.mesh import MeshArtifact, vec_cross, vec_dot, vec_normalize, vec_sub
from ..models.building import RoofConfig
from ..processing.skeleton import SkeletonFace
from ..utils.math_utils import closest_point_on_segment
from ..utils.polygon_utils import normalize_winding, remove_duplicate_points, unproject, unproject_vector
from .roof_flat import roof_outline, build_roof_base
from .roof_hipped import build_skeleton_roof, add_pitched_face, add_oriented_triangles, face_height

logger = logging.getLogger(__name__)

# Triangles smaller than this (m^2) are not emitted
MIN_PATCH_AREA = 1e-9


def add_gabled_face(
    mesh: MeshArtifact,
    face: SkeletonFace,
    slope: float,
    elevation: float,
    plane: Plane
) -> None:
    """
    Append a skeleton face, converting hip triangles into gables.

    Faces with more than three vertices are added as regular slopes.
    """
    ring = remove_duplicate_points(face.polygon)
    if len(ring) != 3:
        add_pitched_face(mesh, face, slope, elevation, plane)
        return

    a, b, apex = ring
    height = elevation + face_height(apex, face, slope)
    gable_top = closest_point_on_segment(apex, a, b)

    a3 = unproject(a, plane, elevation).as_tuple()
    b3 = unproject(b, plane, elevation).as_tuple()
    g3 = unproject(gable_top, plane, height).as_tuple()
    p3 = unproject(apex, plane, height).as_tuple()

    inward = (b - a).normalized().left_normal()
    outward = unproject_vector(inward * -1.0, plane)
    add_oriented_triangles(mesh, [a3, b3, g3], [(0, 1, 2)], outward)

    for corners in ((a3, g3, p3), (b3, p3, g3)):
        _add_slope_patch(mesh, list(corners), plane)


def build_gabled_roof(
    footprint: List[Point2D],
    roof: RoofConfig,
    config: EngineConfig = DEFAULT_CONFIG,
    base_height: float = 0.0
) -> List[MeshArtifact]:
    """
    Generate a gabled roof over a footprint.

    Args:
        footprint: Contour the roof covers
        roof: Roof settings (pitch, thickness, overhang)
        config: Engine configuration
        base_height: Height the roof sits on (wall top)

    Returns:
        Roof drafts: slopes and gables, then base (border band and soffit)

    Raises:
        ClipError: If the footprint cannot be offset
        SkeletonError: If the skeleton cannot be computed
        TessellationError: If a face cannot be triangulated
    """
    footprint = normalize_winding(footprint)
    outline = roof_outline(footprint, roof)

    slopes = build_skeleton_roof(
        outline, roof, config, base_height,
        face_builder=add_gabled_face,
        name="roof_gables",
    )
    drafts = [slopes]
    base = build_roof_base(footprint, outline, roof, config, base_height)
    if not base.is_empty():
        drafts.append(base)
    return drafts


def _add_slope_patch(mesh: MeshArtifact, corners: List[tuple], plane: Plane) -> None:
    """Flat-shaded triangle facing up."""
    normal = vec_cross(vec_sub(corners[1], corners[0]), vec_sub(corners[2], corners[0]))
    if 0.5 * vec_dot(normal, normal) ** 0.5 < MIN_PATCH_AREA:
        return
    if vec_dot(normal, plane.up) < 0:
        normal = (-normal[0], -normal[1], -normal[2])
    add_oriented_triangles(mesh, corners, [(0, 1, 2)], vec_normalize(normal))
