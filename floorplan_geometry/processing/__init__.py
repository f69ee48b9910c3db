"""
Processing modules for the floor-plan geometry engine.

Contains polygon clipping, the straight skeleton, rebuild scheduling
and footprint assembly (imported from processing.footprint directly,
since it depends on the generators).
"""

from .clipper import (
    union,
    union_polygons,
    difference,
    offset,
    match_ring_lengths,
    align_ring_start,
    ClipError,
)
from .skeleton import (
    compute_straight_skeleton,
    StraightSkeleton,
    SkeletonFace,
    SkeletonError,
)
from .scheduler import RebuildScheduler

__all__ = [
    'union',
    'union_polygons',
    'difference',
    'offset',
    'match_ring_lengths',
    'align_ring_start',
    'ClipError',
    'compute_straight_skeleton',
    'StraightSkeleton',
    'SkeletonFace',
    'SkeletonError',
    'RebuildScheduler',
]
