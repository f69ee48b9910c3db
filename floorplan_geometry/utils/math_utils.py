"""
Mathematical utilities for the floor-plan geometry engine.

Provides distance and projection helpers for points and segments plus
small scalar helpers.
"""

import math

from ..models.geometry import Point2D


def point_to_line_distance(point: Point2D, line_p1: Point2D, line_p2: Point2D) -> float:
    """
    Compute perpendicular distance from point to infinite line.

    Args:
        point: The point
        line_p1, line_p2: Two points defining the line

    Returns:
        Distance from point to line
    """
    dx = line_p2.x - line_p1.x
    dy = line_p2.y - line_p1.y

    length = math.sqrt(dx * dx + dy * dy)
    if length < 1e-10:
        return point.distance_to(line_p1)

    dx /= length
    dy /= length

    px = point.x - line_p1.x
    py = point.y - line_p1.y

    # Perpendicular distance = |cross product|
    return abs(px * dy - py * dx)


def segment_parameter(point: Point2D, seg_p1: Point2D, seg_p2: Point2D) -> float:
    """
    Parameter t of the projection of point onto the segment line.

    t = 0 at seg_p1 and t = 1 at seg_p2; not clamped.
    """
    dx = seg_p2.x - seg_p1.x
    dy = seg_p2.y - seg_p1.y

    length_sq = dx * dx + dy * dy
    if length_sq < 1e-10:
        return 0.0

    return ((point.x - seg_p1.x) * dx + (point.y - seg_p1.y) * dy) / length_sq


def closest_point_on_segment(point: Point2D, seg_p1: Point2D, seg_p2: Point2D) -> Point2D:
    """
    Nearest point to `point` on the segment seg_p1-seg_p2.
    """
    t = clamp(segment_parameter(point, seg_p1, seg_p2), 0.0, 1.0)
    return Point2D(
        seg_p1.x + t * (seg_p2.x - seg_p1.x),
        seg_p1.y + t * (seg_p2.y - seg_p1.y)
    )


def point_to_segment_distance(point: Point2D, seg_p1: Point2D, seg_p2: Point2D) -> float:
    """
    Compute minimum distance from point to line segment.

    Args:
        point: The point
        seg_p1, seg_p2: Segment endpoints

    Returns:
        Distance from point to nearest point on segment
    """
    return point.distance_to(closest_point_on_segment(point, seg_p1, seg_p2))


def clamp(value: float, min_val: float, max_val: float) -> float:
    """
    Clamp value to range [min_val, max_val].
    """
    return max(min_val, min(max_val, value))
