"""
Tessellation for the floor-plan geometry engine.

Provides ear clipping triangulation with support for polygons with
holes (bridge-and-earclip), and tessellate(), which turns a list of
polygons into an oriented MeshArtifact on a plane.
"""

from typing import List, Sequence, Tuple, Optional
import logging

from shapely.geometry import Polygon as ShapelyPolygon

from ..config import Plane
from ..models.geometry import Point2D, Polygon, Vector3, signed_ring_area
from ..models.mesh import MeshArtifact, vec_cross, vec_dot, vec_normalize, vec_sub
from .polygon_utils import ensure_ccw, ensure_cw, remove_duplicate_points, unproject

logger = logging.getLogger(__name__)

# Polygons below this area (square meters) are rejected as zero-area
MIN_TESSELLATION_AREA = 1e-9

# Orientation tolerance of hole bridge visibility tests
BRIDGE_EPSILON = 1e-10


class TessellationError(Exception):
    """Raised when a polygon cannot be triangulated."""
    pass


def triangulate_polygon(ring: List[Point2D]) -> List[Tuple[int, int, int]]:
    """
    Triangulate a simple polygon using ear clipping algorithm.

    Args:
        ring: List of polygon vertices in CCW order

    Returns:
        List of triangle tuples (i, j, k) as indices into the input ring.
        Zero-area triangles left by collinear runs are dropped.

    Raises:
        TessellationError: If triangulation fails
    """
    n = len(ring)
    if n < 3:
        raise TessellationError("Polygon must have at least 3 vertices")

    if n == 3:
        return [(0, 1, 2)]

    indices = list(range(n))
    triangles = []

    while len(indices) > 3:
        ear_index = _find_ear(ring, indices, strict=True)

        if ear_index is None:
            # Only slivers left: nothing with area remains to cover
            remaining = [ring[i] for i in indices]
            if abs(signed_ring_area(remaining)) < MIN_TESSELLATION_AREA:
                return triangles

            # Bridge duplicates may sit exactly on ear edges
            ear_index = _find_ear(ring, indices, strict=False)

        if ear_index is None:
            raise TessellationError(
                f"Failed to find ear in polygon with {len(indices)} remaining vertices"
            )

        count = len(indices)
        prev_idx = indices[(ear_index - 1) % count]
        curr_idx = indices[ear_index]
        next_idx = indices[(ear_index + 1) % count]
        triangles.append((prev_idx, curr_idx, next_idx))
        indices.pop(ear_index)

    if len(indices) == 3:
        a, b, c = indices
        if abs(_triangle_area(ring[a], ring[b], ring[c])) > 1e-12:
            triangles.append((a, b, c))

    return triangles


def triangulate_with_holes(
    outer: List[Point2D],
    holes: List[List[Point2D]]
) -> Tuple[List[Point2D], List[Tuple[int, int, int]]]:
    """
    Triangulate a polygon with holes using bridge-and-earclip method.

    Creates bridges connecting holes to outer ring, then triangulates
    the resulting simple polygon.

    Args:
        outer: Outer ring vertices (CCW order)
        holes: List of hole rings (CW order each)

    Returns:
        (merged_vertices, triangles) where triangles are indices
        into merged_vertices

    Raises:
        TessellationError: If triangulation fails
    """
    if not holes:
        return (outer, triangulate_polygon(outer))

    # Bridge the rightmost holes first so later bridges never cross them
    sorted_holes = sorted(
        enumerate(holes),
        key=lambda ih: max(p.x for p in ih[1]),
        reverse=True
    )

    merged = list(outer)

    for position, (hole_idx, hole) in enumerate(sorted_holes):
        pending = [other for _, other in sorted_holes[position + 1:]]
        try:
            merged = _bridge_hole(merged, hole, pending)
        except TessellationError as e:
            raise TessellationError(f"Failed to bridge hole {hole_idx}: {e}")

    return (merged, triangulate_polygon(merged))


def tessellate_polygons(
    polygons: Sequence[Polygon]
) -> Tuple[List[Point2D], List[Tuple[int, int, int]]]:
    """
    Triangulate several polygons with holes in one pass.

    Every input vertex appears in the output vertex list. Rings are
    normalized (outer CCW, holes CW) before triangulation.

    Args:
        polygons: Polygons to triangulate

    Returns:
        (vertices, triangles) with triangles CCW in plan coordinates

    Raises:
        TessellationError: On zero-area or self-intersecting input
    """
    vertices: List[Point2D] = []
    triangles: List[Tuple[int, int, int]] = []

    for polygon in polygons:
        outer = ensure_ccw(remove_duplicate_points(polygon.outer_ring))
        holes = [
            ensure_cw(remove_duplicate_points(hole))
            for hole in polygon.holes
            if len(remove_duplicate_points(hole)) >= 3
        ]
        _check_polygon(outer, holes)

        merged, local_triangles = triangulate_with_holes(outer, holes)
        offset = len(vertices)
        vertices.extend(merged)
        triangles.extend((a + offset, b + offset, c + offset) for a, b, c in local_triangles)

    return vertices, triangles


def tessellate(
    polygons: Sequence[Polygon],
    normal: Vector3,
    plane: Plane = Plane.XY,
    elevation: float = 0.0,
    name: Optional[str] = None
) -> MeshArtifact:
    """
    Tessellate polygons into a flat mesh facing `normal`.

    Plan vertices are placed on `plane` at `elevation`; every triangle is
    wound so its geometric normal agrees with `normal`, and every vertex
    carries `normal`. UVs are left at zero for the caller to assign.

    Args:
        polygons: Outer contours with holes, any number of pieces
        normal: Requested face normal in world space
        plane: Plane the plan coordinates live in
        elevation: Offset along the plane's up axis
        name: Label of the resulting mesh

    Returns:
        MeshArtifact (empty when polygons is empty)

    Raises:
        TessellationError: On zero-area or self-intersecting input
    """
    mesh = MeshArtifact(name=name)
    if not polygons:
        return mesh

    vertices, triangles = tessellate_polygons(polygons)
    unit_normal = vec_normalize(normal)

    positions = [unproject(p, plane, elevation).as_tuple() for p in vertices]
    for position in positions:
        mesh.add_vertex(position, unit_normal)

    for a, b, c in triangles:
        geometric = vec_cross(
            vec_sub(positions[b], positions[a]),
            vec_sub(positions[c], positions[a])
        )
        if vec_dot(geometric, unit_normal) < 0:
            mesh.add_triangle(a, c, b)
        else:
            mesh.add_triangle(a, b, c)

    return mesh


def _check_polygon(outer: List[Point2D], holes: List[List[Point2D]]) -> None:
    """Reject input the ear clipper cannot handle correctly."""
    if len(outer) < 3:
        raise TessellationError("Polygon must have at least 3 vertices")

    if abs(signed_ring_area(outer)) < MIN_TESSELLATION_AREA:
        raise TessellationError("Polygon has zero area")

    shape = ShapelyPolygon(
        [(p.x, p.y) for p in outer],
        [[(p.x, p.y) for p in hole] for hole in holes]
    )
    if not shape.is_valid:
        raise TessellationError("Polygon is self-intersecting")


def _bridge_hole(
    merged: List[Point2D],
    hole: List[Point2D],
    pending: List[List[Point2D]]
) -> List[Point2D]:
    """
    Connect a hole to the merged ring with a bridge both can see.

    Hole vertices are tried from the rightmost one, ring vertices from
    the closest one. A bridge is accepted when it leaves both endpoints
    into the polygon interior and touches no edge of the merged ring,
    the hole or the holes still to be bridged.
    """
    if len(hole) < 3:
        raise TessellationError("Hole must have at least 3 vertices")

    obstacles = [merged, hole] + pending
    hole_order = sorted(range(len(hole)), key=lambda i: (-hole[i].x, hole[i].y))

    for h in hole_order:
        point = hole[h]
        ring_order = sorted(range(len(merged)), key=lambda i: merged[i].distance_to(point))
        for v in ring_order:
            target = merged[v]
            if target == point:
                continue
            if not _locally_inside(merged, v, point) or not _locally_inside(hole, h, target):
                continue
            if _bridge_blocked(point, target, obstacles):
                continue

            # merged[0..v] + hole[h..] + hole[h] + merged[v..]
            result = list(merged[:v + 1])
            for i in range(len(hole)):
                result.append(hole[(h + i) % len(hole)])
            result.append(point)
            result.append(target)
            result.extend(merged[v + 1:])
            return result

    rightmost = hole[hole_order[0]]
    raise TessellationError(
        f"No visible vertex found for hole point at ({rightmost.x}, {rightmost.y})"
    )


def _locally_inside(ring: List[Point2D], i: int, target: Point2D) -> bool:
    """True if the direction from ring[i] to target enters the region left of the ring."""
    n = len(ring)
    prev_p = ring[(i - 1) % n]
    curr_p = ring[i]
    next_p = ring[(i + 1) % n]

    direction = target - curr_p
    after = (next_p - curr_p).cross(direction)
    before = direction.cross(prev_p - curr_p)

    if _is_convex_vertex(prev_p, curr_p, next_p):
        return after > BRIDGE_EPSILON and before > BRIDGE_EPSILON
    return after > BRIDGE_EPSILON or before > BRIDGE_EPSILON


def _bridge_blocked(
    start: Point2D,
    end: Point2D,
    rings: List[List[Point2D]]
) -> bool:
    """True if segment start-end crosses or runs along any ring edge."""
    for ring in rings:
        n = len(ring)
        for i in range(n):
            a = ring[i]
            b = ring[(i + 1) % n]
            if a == b:
                continue

            for point in (a, b):
                if point != start and point != end and _on_segment(point, start, end):
                    return True
            for point in (start, end):
                if point != a and point != b and _on_segment(point, a, b):
                    return True

            if start in (a, b) or end in (a, b):
                continue

            d1 = _orientation(start, end, a)
            d2 = _orientation(start, end, b)
            d3 = _orientation(a, b, start)
            d4 = _orientation(a, b, end)
            if d1 * d2 < 0 and d3 * d4 < 0:
                return True

    return False


def _orientation(a: Point2D, b: Point2D, p: Point2D) -> int:
    value = (b - a).cross(p - a)
    if value > BRIDGE_EPSILON:
        return 1
    if value < -BRIDGE_EPSILON:
        return -1
    return 0


def _on_segment(p: Point2D, a: Point2D, b: Point2D) -> bool:
    """True if p lies on segment a-b (endpoints included)."""
    if _orientation(a, b, p) != 0:
        return False
    return (
        min(a.x, b.x) - BRIDGE_EPSILON <= p.x <= max(a.x, b.x) + BRIDGE_EPSILON and
        min(a.y, b.y) - BRIDGE_EPSILON <= p.y <= max(a.y, b.y) + BRIDGE_EPSILON
    )


def _find_ear(
    ring: List[Point2D],
    indices: List[int],
    strict: bool
) -> Optional[int]:
    """
    Position in `indices` of a vertex that forms an ear, or None.

    strict: points on the candidate triangle's boundary block the ear.
    Points equal to one of the triangle's corners never do, which lets
    the duplicated bridge vertices of merged holes pass.
    """
    count = len(indices)
    for i in range(count):
        prev_p = ring[indices[(i - 1) % count]]
        curr_p = ring[indices[i]]
        next_p = ring[indices[(i + 1) % count]]

        if not _is_convex_vertex(prev_p, curr_p, next_p):
            continue

        blocked = False
        for j in range(count):
            if j in ((i - 1) % count, i, (i + 1) % count):
                continue
            p = ring[indices[j]]
            if p == prev_p or p == curr_p or p == next_p:
                continue
            if strict:
                inside = _point_in_triangle(p, prev_p, curr_p, next_p)
            else:
                inside = _strictly_inside_triangle(p, prev_p, curr_p, next_p)
            if inside:
                blocked = True
                break

        if not blocked:
            return i

    return None


def _is_convex_vertex(prev_p: Point2D, curr_p: Point2D, next_p: Point2D) -> bool:
    """
    Check if vertex curr_p is convex (left turn from prev to next).

    For CCW polygon, convex = positive cross product.
    """
    v1_x = curr_p.x - prev_p.x
    v1_y = curr_p.y - prev_p.y
    v2_x = next_p.x - curr_p.x
    v2_y = next_p.y - curr_p.y

    return v1_x * v2_y - v1_y * v2_x > 1e-12


def _sign(p1: Point2D, p2: Point2D, p3: Point2D) -> float:
    return (p1.x - p3.x) * (p2.y - p3.y) - (p2.x - p3.x) * (p1.y - p3.y)


def _point_in_triangle(p: Point2D, v0: Point2D, v1: Point2D, v2: Point2D) -> bool:
    """Check if point is inside triangle or on its boundary."""
    d1 = _sign(p, v0, v1)
    d2 = _sign(p, v1, v2)
    d3 = _sign(p, v2, v0)

    has_neg = (d1 < 0) or (d2 < 0) or (d3 < 0)
    has_pos = (d1 > 0) or (d2 > 0) or (d3 > 0)

    return not (has_neg and has_pos)


def _strictly_inside_triangle(p: Point2D, v0: Point2D, v1: Point2D, v2: Point2D) -> bool:
    """Check if point is strictly inside triangle (not on edge)."""
    d1 = _sign(p, v0, v1)
    d2 = _sign(p, v1, v2)
    d3 = _sign(p, v2, v0)

    return (d1 > 0 and d2 > 0 and d3 > 0) or (d1 < 0 and d2 < 0 and d3 < 0)


def validate_triangulation(
    vertices: List[Point2D],
    triangles: List[Tuple[int, int, int]],
    expected_area: Optional[float] = None
) -> List[str]:
    """
    Validate triangulation result.

    Args:
        vertices: List of vertices
        triangles: List of triangle index tuples
        expected_area: Expected polygon area (optional)

    Returns:
        List of error messages (empty if valid)
    """
    errors = []

    if not triangles:
        errors.append("No triangles generated")
        return errors

    n = len(vertices)

    for i, (a, b, c) in enumerate(triangles):
        if a < 0 or a >= n or b < 0 or b >= n or c < 0 or c >= n:
            errors.append(f"Triangle {i} has invalid index")
            continue
        if _triangle_area(vertices[a], vertices[b], vertices[c]) < 0:
            errors.append(f"Triangle {i} is wound clockwise")

    if expected_area is not None:
        total_area = sum(
            abs(_triangle_area(vertices[a], vertices[b], vertices[c]))
            for a, b, c in triangles
        )
        if abs(total_area - expected_area) > expected_area * 0.01:  # 1% tolerance
            errors.append(
                f"Total triangulated area {total_area:.2f} differs from "
                f"expected {expected_area:.2f}"
            )

    return errors


def _triangle_area(v0: Point2D, v1: Point2D, v2: Point2D) -> float:
    """Compute signed area of triangle."""
    return 0.5 * (
        (v1.x - v0.x) * (v2.y - v0.y) -
        (v2.x - v0.x) * (v1.y - v0.y)
    )
