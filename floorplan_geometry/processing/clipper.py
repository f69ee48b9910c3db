"""
Polygon clipping for the floor-plan geometry engine.

Union, difference and offset of plan contours, backed by shapely. All
inputs are normalized to CCW contours first; all outputs come back as
CCW outer rings with CW holes and no duplicated closing point.

Also holds the ring pairing helpers used before wall strips are built:
match_ring_lengths() (point-merge correction) and align_ring_start().
"""

from typing import List, Sequence, Tuple, Union
import logging

from shapely.errors import GEOSException
from shapely.geometry import Polygon as ShapelyPolygon, MultiPolygon, GeometryCollection
from shapely.geometry.polygon import orient
from shapely.ops import unary_union

from ..config import OFFSET_MITRE_LIMIT
from ..models.geometry import Point2D, Polygon
from ..utils.polygon_utils import (
    normalize_winding,
    is_degenerate,
    remove_duplicate_points,
    rotate_ring,
)

logger = logging.getLogger(__name__)

Contour = List[Point2D]


class ClipError(Exception):
    """Raised when a boolean or offset operation cannot produce a result."""
    pass


def union(contours: Sequence[Contour]) -> List[Contour]:
    """
    Merge overlapping or touching contours.

    Holes of the merged shape are dropped; use union_polygons() to keep
    them. A single contour is returned normalized without a boolean pass.

    Args:
        contours: Contours in any winding

    Returns:
        Outer contours of the merged shape, CCW

    Raises:
        ClipError: If the boolean operation fails
    """
    return [polygon.outer_ring for polygon in union_polygons(contours)]


def union_polygons(contours: Sequence[Contour]) -> List[Polygon]:
    """
    Merge contours into polygons, keeping enclosed courtyards as holes.

    Raises:
        ClipError: If the boolean operation fails
    """
    shapes = [_to_shapely(c) for c in contours if not is_degenerate(c)]
    if not shapes:
        return []

    if len(shapes) == 1 and len(contours) == 1:
        return [Polygon(normalize_winding(contours[0]))]

    try:
        merged = unary_union(shapes)
    except GEOSException as e:
        raise ClipError(f"Union of {len(shapes)} contours failed: {e}")

    return _from_shapely(merged)


def difference(
    subject: Union[Contour, Polygon],
    clips: Sequence[Contour]
) -> List[Polygon]:
    """
    Subtract clip contours from a subject.

    With no clips the subject comes back unchanged (normalized). An empty
    list means the clips cover the subject completely.

    Args:
        subject: Contour or polygon with holes to cut from
        clips: Contours to remove

    Returns:
        Remaining pieces, each with its holes

    Raises:
        ClipError: If the boolean operation fails
    """
    if isinstance(subject, Polygon):
        subject_polygon = Polygon(
            normalize_winding(subject.outer_ring),
            [list(reversed(normalize_winding(h))) for h in subject.holes]
        )
    else:
        subject_polygon = Polygon(normalize_winding(subject))

    if not clips:
        return [subject_polygon]

    clip_shapes = [_to_shapely(c) for c in clips if not is_degenerate(c)]
    if not clip_shapes:
        return [subject_polygon]

    try:
        shape = ShapelyPolygon(
            [(p.x, p.y) for p in subject_polygon.outer_ring],
            [[(p.x, p.y) for p in hole] for hole in subject_polygon.holes]
        )
        if not shape.is_valid:
            shape = shape.buffer(0)
        result = shape.difference(unary_union(clip_shapes))
    except GEOSException as e:
        raise ClipError(f"Difference with {len(clip_shapes)} clips failed: {e}")

    return _from_shapely(result)


def offset(contour: Contour, distance: float) -> Contour:
    """
    Grow (positive) or shrink (negative) a contour with mitred corners.

    offset(c, 0) returns the normalized input: same points, CCW.

    Args:
        contour: Contour in any winding
        distance: Offset distance in plan units

    Returns:
        Offset contour, CCW. When shrinking splits the shape, the largest
        piece is returned.

    Raises:
        ClipError: If the contour is degenerate or vanishes
    """
    if is_degenerate(contour):
        raise ClipError(f"Cannot offset degenerate contour ({len(contour)} points)")

    normalized = normalize_winding(contour)
    shape = _to_shapely(normalized)

    if distance == 0:
        if shape.is_valid and shape.geom_type == 'Polygon':
            return normalized
        pieces = _from_shapely(shape)
    else:
        try:
            grown = shape.buffer(
                distance,
                join_style="mitre",
                mitre_limit=OFFSET_MITRE_LIMIT
            )
        except GEOSException as e:
            raise ClipError(f"Offset by {distance} failed: {e}")
        pieces = _from_shapely(grown)

    if not pieces:
        raise ClipError(f"Offset by {distance} left nothing of the contour")

    if len(pieces) > 1:
        logger.debug(f"Offset by {distance} split contour into {len(pieces)} pieces")

    return max(pieces, key=lambda p: p.area()).outer_ring


def match_ring_lengths(
    ring: Contour,
    reference: Contour
) -> Tuple[Contour, Contour]:
    """
    Make two paired rings the same length by merging points.

    The longer ring repeatedly loses its closest pair of consecutive
    points: the first point of the pair is replaced by the pair midpoint
    and the second is removed.

    Args:
        ring: First ring
        reference: Second ring

    Returns:
        (ring, reference) with equal vertex counts
    """
    if len(ring) == len(reference):
        return ring, reference

    logger.warning(
        f"Ring length mismatch ({len(ring)} vs {len(reference)} points), "
        f"merging closest points"
    )

    if len(ring) > len(reference):
        return _merge_closest_points(ring, len(reference)), reference
    return ring, _merge_closest_points(reference, len(ring))


def align_ring_start(ring: Contour, reference: Contour) -> Contour:
    """
    Rotate an equal-length ring so vertex i pairs with reference vertex i.

    The rotation minimizing the summed squared distance between paired
    vertices wins.
    """
    n = len(ring)
    if n != len(reference) or n == 0:
        return ring

    best_shift = 0
    best_cost = None
    for shift in range(n):
        cost = 0.0
        for i in range(n):
            p = ring[(i + shift) % n]
            q = reference[i]
            cost += (p.x - q.x) ** 2 + (p.y - q.y) ** 2
        if best_cost is None or cost < best_cost:
            best_cost = cost
            best_shift = shift

    return rotate_ring(ring, best_shift)


def _merge_closest_points(ring: Contour, target_count: int) -> Contour:
    """Merge closest consecutive points until the ring has target_count points."""
    points = list(ring)
    while len(points) > max(target_count, 3):
        n = len(points)
        best = min(range(n), key=lambda i: points[i].distance_to(points[(i + 1) % n]))
        a = points[best]
        b = points[(best + 1) % n]
        points[best] = Point2D((a.x + b.x) / 2.0, (a.y + b.y) / 2.0)
        points.pop((best + 1) % n)
    return points


def _to_shapely(contour: Contour) -> ShapelyPolygon:
    """Build a shapely polygon, repairing self-touching input."""
    shape = ShapelyPolygon([(p.x, p.y) for p in remove_duplicate_points(contour)])
    if not shape.is_valid:
        shape = shape.buffer(0)
    return shape


def _from_shapely(geometry) -> List[Polygon]:
    """Convert a shapely result into oriented Polygon pieces."""
    if geometry is None or geometry.is_empty:
        return []

    if isinstance(geometry, ShapelyPolygon):
        parts = [geometry]
    elif isinstance(geometry, (MultiPolygon, GeometryCollection)):
        parts = [g for g in geometry.geoms if isinstance(g, ShapelyPolygon)]
    else:
        parts = []

    result = []
    for part in parts:
        if part.is_empty or part.area <= 0:
            continue
        part = orient(part, sign=1.0)
        outer = remove_duplicate_points([Point2D(x, y) for x, y in part.exterior.coords])
        holes = [
            remove_duplicate_points([Point2D(x, y) for x, y in interior.coords])
            for interior in part.interiors
        ]
        result.append(Polygon(outer, [h for h in holes if len(h) >= 3]))

    return result
