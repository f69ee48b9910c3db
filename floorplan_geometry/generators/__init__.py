"""
Mesh generators for the floor-plan geometry engine.

Contains the wall and opening builders, floor/ceiling surfaces, the
flat, hipped and gabled roof generators and the roof builder. The
orchestrator lives in generators.building_generator.
"""

from .walls import build_wall, build_wall_segment, build_plain_wall, associate_openings
from .openings import build_opening_panel, place_opening, OpeningMeshes
from .floors import build_floor, build_ceiling, build_wall_top_cap
from .roof_flat import build_flat_roof
from .roof_hipped import build_hipped_roof
from .roof_gabled import build_gabled_roof
from .roof_builder import build_roof, build_roofs, RoofResult

__all__ = [
    'build_wall',
    'build_wall_segment',
    'build_plain_wall',
    'associate_openings',
    'build_opening_panel',
    'place_opening',
    'OpeningMeshes',
    'build_floor',
    'build_ceiling',
    'build_wall_top_cap',
    'build_flat_roof',
    'build_hipped_roof',
    'build_gabled_roof',
    'build_roof',
    'build_roofs',
    'RoofResult',
]
