"""
Utility functions for the floor-plan geometry engine.
"""

from .math_utils import (
    point_to_line_distance,
    point_to_segment_distance,
    closest_point_on_segment,
    clamp,
)
from .polygon_utils import (
    project,
    unproject,
    normalize_winding,
    is_degenerate,
    point_in_polygon,
    polygon_signed_area,
    polygon_area,
)
from .triangulation import tessellate, triangulate_polygon, TessellationError

__all__ = [
    'point_to_line_distance',
    'point_to_segment_distance',
    'closest_point_on_segment',
    'clamp',
    'project',
    'unproject',
    'normalize_winding',
    'is_degenerate',
    'point_in_polygon',
    'polygon_signed_area',
    'polygon_area',
    'tessellate',
    'triangulate_polygon',
    'TessellationError',
]
