"""
Horizontal surface generator for the floor-plan geometry engine.

Builds room floors, ceilings (the floor lifted to wall height and
flipped) and the cap covering the tops of the walls. Falls back to a
centroid fan when a contour cannot be tessellated.
"""

from typing import List, Optional, Sequence
import logging

from ..config import EngineConfig, DEFAULT_CONFIG, Plane, FLOOR_UV_TILE
from ..models.geometry import Point2D, Polygon, Vector3
from ..models.mesh import MeshArtifact, vec_normalize
from ..processing.clipper import difference, ClipError
from ..utils.polygon_utils import normalize_winding, polygon_centroid, unproject
from ..utils.triangulation import tessellate, TessellationError
from .uv_mapping import apply_planar_uvs, plane_axes

logger = logging.getLogger(__name__)


def build_surface(
    polygons: Sequence[Polygon],
    elevation: float,
    normal: Vector3,
    config: EngineConfig = DEFAULT_CONFIG,
    name: Optional[str] = None
) -> MeshArtifact:
    """
    Tessellate plan polygons into a horizontal surface.

    On tessellation failure each outer ring is fanned from its centroid
    (holes are ignored) and a warning is logged.

    Args:
        polygons: Plan polygons with holes
        elevation: Height of the surface
        normal: Face normal (up or down)
        config: Engine configuration
        name: Label of the resulting mesh

    Returns:
        MeshArtifact with planar ground UVs
    """
    try:
        mesh = tessellate(polygons, normal, config.plane, elevation, name=name)
    except TessellationError as e:
        logger.warning(f"Surface {name or ''}: tessellation failed ({e}), using fan fallback")
        mesh = MeshArtifact(name=name)
        for polygon in polygons:
            mesh.merge(fan_surface(polygon.outer_ring, elevation, normal, config.plane))

    apply_planar_uvs(mesh, FLOOR_UV_TILE, FLOOR_UV_TILE, axes=plane_axes(config.plane))
    return mesh


def fan_surface(
    ring: List[Point2D],
    elevation: float,
    normal: Vector3,
    plane: Plane
) -> MeshArtifact:
    """
    Fan triangulation from the centroid (fallback).

    This works for convex and star-shaped rings and is a last resort
    for when ear clipping fails.
    """
    mesh = MeshArtifact()
    ring = normalize_winding(ring)
    if len(ring) < 3:
        return mesh

    unit = vec_normalize(normal)
    centre = mesh.add_vertex(unproject(polygon_centroid(ring), plane, elevation).as_tuple(), unit)
    indices = [mesh.add_vertex(unproject(p, plane, elevation).as_tuple(), unit) for p in ring]

    for i in range(len(indices)):
        mesh.add_triangle(centre, indices[i], indices[(i + 1) % len(indices)])

    # CCW in the plan faces down on XZ
    if mesh.triangle_count() and _faces_against(mesh, unit):
        mesh.triangles = [(a, c, b) for a, b, c in mesh.triangles]
    return mesh


def build_floor(
    contours: Sequence[List[Point2D]],
    config: EngineConfig = DEFAULT_CONFIG,
    name: Optional[str] = "floor"
) -> MeshArtifact:
    """
    Floor surface at ground level, facing up.

    Args:
        contours: One or more plan contours (merged building or one room)
    """
    polygons = [Polygon(normalize_winding(c)) for c in contours if len(c) >= 3]
    return build_surface(polygons, 0.0, config.plane.up, config, name)


def build_ceiling(
    floor: MeshArtifact,
    config: EngineConfig = DEFAULT_CONFIG,
    name: Optional[str] = "ceiling"
) -> MeshArtifact:
    """
    Ceiling: the floor lifted to wall height, facing down.
    """
    ceiling = floor.copy(name=name)
    up = config.plane.up
    ceiling.translate(tuple(axis * config.wall_height for axis in up))
    ceiling.flip()
    return ceiling


def build_wall_top_cap(
    outer_contours: Sequence[List[Point2D]],
    inner_contours: Sequence[List[Point2D]],
    config: EngineConfig = DEFAULT_CONFIG,
    name: Optional[str] = "wall_top"
) -> MeshArtifact:
    """
    Cap over the tops of all walls.

    Covers the outer contours minus the merged room interiors, at wall
    height, facing up.
    """
    polygons: List[Polygon] = []
    for outer in outer_contours:
        try:
            polygons.extend(difference(outer, list(inner_contours)))
        except ClipError as e:
            logger.warning(f"Wall top cap: difference failed ({e}), skipping contour")

    if not polygons:
        return MeshArtifact(name=name)

    return build_surface(polygons, config.wall_height, config.plane.up, config, name)


def _faces_against(mesh: MeshArtifact, normal: Vector3) -> bool:
    n = mesh.triangle_normal(0)
    return n[0] * normal[0] + n[1] * normal[1] + n[2] * normal[2] < 0
