"""
Data models for the floor-plan geometry engine.
"""

from .geometry import Point2D, Point3D, BBox, Polygon, signed_ring_area
from .mesh import MeshArtifact, merge_meshes
from .building import (
    Opening,
    OpeningType,
    WallSegment,
    RoofConfig,
    RoofType,
    RoomInput,
    BuildingPlan,
)

__all__ = [
    'Point2D', 'Point3D', 'BBox', 'Polygon', 'signed_ring_area',
    'MeshArtifact', 'merge_meshes',
    'Opening', 'OpeningType', 'WallSegment',
    'RoofConfig', 'RoofType', 'RoomInput', 'BuildingPlan',
]
