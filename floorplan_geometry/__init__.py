"""
Floor-plan Geometry Engine

A standalone Python engine that turns 2D floor plans (room contours,
door and window placements, roof settings) into 3D building meshes:
walls with cut-outs, floors, ceilings, wall-top caps and flat, hipped
or gabled roofs.

Can be used as:
- Library: floorplan_geometry.rebuild_building(plan, config)
- CLI tool: python -m floorplan_geometry.main PLAN.json
"""

__version__ = "0.1.0"

from .config import EngineConfig, DEFAULT_CONFIG, Plane
from .generators.building_generator import rebuild_building, BuildingResult

__all__ = [
    'EngineConfig',
    'DEFAULT_CONFIG',
    'Plane',
    'rebuild_building',
    'BuildingResult',
]
