"""
Contour utilities for the floor-plan geometry engine.

Provides plane projection, winding normalization, degeneracy checks and
the usual ring helpers (area, centroid, point in polygon) used by every
stage before geometry reaches the clipper or the tessellator.
"""

from typing import List
import math

from ..config import Plane, COLLINEAR_EPSILON
from ..models.geometry import Point2D, Point3D, Vector3, signed_ring_area


def project(point: Point3D, plane: Plane) -> Point2D:
    """
    Map a world point onto the working plane.

    Args:
        point: World-space point
        plane: Working plane

    Returns:
        Plan coordinates of the point
    """
    if plane is Plane.XZ:
        return Point2D(point.x, point.z)
    return Point2D(point.x, point.y)


def unproject(point: Point2D, plane: Plane, height: float = 0.0) -> Point3D:
    """
    Map a plan point back into world space at a given height.

    Args:
        point: Plan point
        plane: Working plane
        height: Elevation along the plane's up axis

    Returns:
        World-space point
    """
    if plane is Plane.XZ:
        return Point3D(point.x, height, point.y)
    return Point3D(point.x, point.y, height)


def unproject_vector(vector: Point2D, plane: Plane) -> Vector3:
    """Map a horizontal plan direction into a world vector."""
    return unproject(vector, plane, 0.0).as_tuple()


def polygon_signed_area(ring: List[Point2D]) -> float:
    """
    Compute signed area using shoelace formula.

    Returns:
        Signed area (positive = CCW, negative = CW)
    """
    return signed_ring_area(ring)


def polygon_area(ring: List[Point2D]) -> float:
    """Compute unsigned area of polygon."""
    return abs(signed_ring_area(ring))


def polygon_centroid(ring: List[Point2D]) -> Point2D:
    """
    Compute the area centroid of a ring.

    Falls back to the vertex average for zero-area rings.
    """
    n = len(ring)
    if n == 0:
        return Point2D(0.0, 0.0)

    area = signed_ring_area(ring)
    if abs(area) < 1e-12:
        return Point2D(sum(p.x for p in ring) / n, sum(p.y for p in ring) / n)

    cx = 0.0
    cy = 0.0
    for i in range(n):
        a = ring[i]
        b = ring[(i + 1) % n]
        f = a.x * b.y - b.x * a.y
        cx += (a.x + b.x) * f
        cy += (a.y + b.y) * f

    return Point2D(cx / (6.0 * area), cy / (6.0 * area))


def point_in_polygon(point: Point2D, ring: List[Point2D]) -> bool:
    """
    Test if point is inside a polygon ring using ray casting algorithm.

    Returns:
        True if point is inside or on edge
    """
    n = len(ring)
    if n < 3:
        return False

    inside = False
    j = n - 1

    for i in range(n):
        xi, yi = ring[i].x, ring[i].y
        xj, yj = ring[j].x, ring[j].y

        if _point_on_segment(point, ring[i], ring[j]):
            return True

        if ((yi > point.y) != (yj > point.y)) and \
           (point.x < (xj - xi) * (point.y - yi) / (yj - yi) + xi):
            inside = not inside

        j = i

    return inside


def is_clockwise(ring: List[Point2D]) -> bool:
    """Check if polygon ring is clockwise (negative area)."""
    return signed_ring_area(ring) < 0


def ensure_ccw(ring: List[Point2D]) -> List[Point2D]:
    """Ensure ring is counter-clockwise, reversing if needed."""
    if is_clockwise(ring):
        return list(reversed(ring))
    return list(ring)


def ensure_cw(ring: List[Point2D]) -> List[Point2D]:
    """Ensure ring is clockwise, reversing if needed."""
    if not is_clockwise(ring):
        return list(reversed(ring))
    return list(ring)


def remove_duplicate_points(ring: List[Point2D], tolerance: float = 1e-9) -> List[Point2D]:
    """
    Drop consecutive duplicates, including a closing point equal to the first.
    """
    result: List[Point2D] = []
    for p in ring:
        if result and p.distance_to(result[-1]) <= tolerance:
            continue
        result.append(p)

    while len(result) > 1 and result[0].distance_to(result[-1]) <= tolerance:
        result.pop()

    return result


def normalize_winding(contour: List[Point2D]) -> List[Point2D]:
    """
    Canonical form of a contour: open ring, no duplicate points, CCW.

    Every boolean and offset call works on normalized contours, so the
    winding a host draws rooms with never matters.

    Args:
        contour: Ring in any winding, closed or open

    Returns:
        Counter-clockwise open ring
    """
    return ensure_ccw(remove_duplicate_points(contour))


def is_degenerate(contour: List[Point2D], epsilon: float = COLLINEAR_EPSILON) -> bool:
    """
    True when a contour cannot enclose any area.

    A contour is degenerate with fewer than 3 distinct points or when
    every point lies on one line (all cross products below epsilon).
    """
    points = remove_duplicate_points(contour)
    if len(points) < 3:
        return True

    origin = points[0]
    # Use the farthest point as direction for a stable collinearity test
    far = max(points[1:], key=lambda p: p.distance_to(origin))
    direction = far - origin
    length = direction.length()
    if length < epsilon:
        return True

    for p in points[1:]:
        if abs(direction.cross(p - origin)) / length > epsilon:
            return False

    return True


def remove_collinear_points(
    ring: List[Point2D],
    epsilon: float = COLLINEAR_EPSILON
) -> List[Point2D]:
    """
    Remove collinear points from a polygon ring.

    A point is considered collinear if the triangle formed with its
    neighbors has area less than epsilon. Rings that would drop below
    three points are returned unchanged.
    """
    working = remove_duplicate_points(ring)
    if len(working) < 3:
        return working

    changed = True
    while changed and len(working) > 3:
        changed = False
        n = len(working)
        for i in range(n):
            p_prev = working[(i - 1) % n]
            p_curr = working[i]
            p_next = working[(i + 1) % n]

            area = abs(
                (p_prev.x * (p_curr.y - p_next.y) +
                 p_curr.x * (p_next.y - p_prev.y) +
                 p_next.x * (p_prev.y - p_curr.y)) / 2.0
            )

            if area < epsilon:
                working.pop(i)
                changed = True
                break

    return working


def rotate_ring(ring: List[Point2D], start: int) -> List[Point2D]:
    """Return the ring starting at index `start`, order preserved."""
    if not ring:
        return []
    start %= len(ring)
    return ring[start:] + ring[:start]


def _point_on_segment(p: Point2D, a: Point2D, b: Point2D,
                      tolerance: float = 1e-6) -> bool:
    """Check if point is on line segment (within tolerance)."""
    ab_x = b.x - a.x
    ab_y = b.y - a.y
    ap_x = p.x - a.x
    ap_y = p.y - a.y

    cross = abs(ab_x * ap_y - ab_y * ap_x)

    ab_len = math.sqrt(ab_x * ab_x + ab_y * ab_y)
    if ab_len < 1e-10:
        return p.distance_to(a) < tolerance

    if cross / ab_len > tolerance:
        return False

    dot = ap_x * ab_x + ap_y * ab_y
    t = dot / (ab_len * ab_len)

    return -tolerance <= t <= 1 + tolerance
