"""
Configuration constants for the floor-plan geometry engine.

Contains all tunable parameters for building generation: wall and
opening dimensions, roof defaults, tolerances and scheduling, plus the
EngineConfig dataclass passed explicitly to every generator.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Optional, Tuple


# =============================================================================
# WORKING PLANE
# =============================================================================

class Plane(Enum):
    """
    Plane the floor plan is drawn in.

    XZ: (Default) plan lies on the ground with Y as world up.
    XY: plan lies on the ground with Z as world up.
    """
    XZ = "xz"
    XY = "xy"

    @property
    def up(self) -> Tuple[float, float, float]:
        """World up vector for this plane."""
        if self is Plane.XZ:
            return (0.0, 1.0, 0.0)
        return (0.0, 0.0, 1.0)


# =============================================================================
# WALL DEFAULTS
# =============================================================================

# Height of every wall (meters)
DEFAULT_WALL_HEIGHT = 3.0

# Door openings always start at floor level and are this tall (meters)
DEFAULT_DOOR_HEIGHT = 2.5

# Wall thicknesses (meters)
DEFAULT_INTERIOR_WALL_THICKNESS = 0.05
DEFAULT_EXTERIOR_WALL_THICKNESS = 0.1

# Floor and ceiling UV tiling (meters per texture repeat)
FLOOR_UV_TILE = 1.0

# =============================================================================
# OPENING DEFAULTS
# =============================================================================

# Thickness of door leaves and window sashes (meters)
DEFAULT_WINDOW_THICKNESS = 0.06
DEFAULT_DOOR_THICKNESS = 0.06

# Door holes are cut slightly below the floor so the remainder never keeps a
# zero-height sliver along the bottom edge
DOOR_SILL_EPSILON = 0.001

# Maximum distance between an opening position and a wall segment for the
# opening to be cut into that wall (meters)
OPENING_SNAP_DISTANCE = 0.25

# Window panel defaults
DEFAULT_WINDOW_FRAME_SIZE = 0.05
DEFAULT_WINDOW_SUBDIVISIONS = 1
MULLION_WIDTH = 0.02

# =============================================================================
# ROOF PARAMETERS
# =============================================================================

# Pitch used by hipped and gabled roofs (degrees)
ROOF_PITCH_DEFAULT = 25.0
ROOF_PITCH_MIN = 5.0
ROOF_PITCH_MAX = 75.0

DEFAULT_ROOF_THICKNESS = 0.2
DEFAULT_ROOF_OVERHANG = 0.2

# Roof UV tiling (meters per texture repeat)
ROOF_UV_TILE = 5.0

# =============================================================================
# GEOMETRY TOLERANCES
# =============================================================================

# Cross-product magnitude below which three points count as collinear
COLLINEAR_EPSILON = 1e-9

# Mitre limit for offsetting (ratio of offset distance)
OFFSET_MITRE_LIMIT = 10.0

# Skeleton nodes closer than this are merged (meters)
SKELETON_NODE_EPSILON = 1e-6

# Relative tolerance when checking that skeleton faces tile the polygon
SKELETON_AREA_TOLERANCE = 1e-3

# =============================================================================
# REBUILD SCHEDULING
# =============================================================================

# Minimum delay between two rebuilds; requests in between are coalesced (s)
REBUILD_COOLDOWN = 0.1


@dataclass
class EngineConfig:
    """
    Dimensional constants and tolerances for one rebuild.

    Replaces host-global settings: generators read every dimension from
    the instance they are handed.
    """
    wall_height: float = DEFAULT_WALL_HEIGHT
    door_height: float = DEFAULT_DOOR_HEIGHT
    interior_wall_thickness: float = DEFAULT_INTERIOR_WALL_THICKNESS
    exterior_wall_thickness: float = DEFAULT_EXTERIOR_WALL_THICKNESS
    window_thickness: float = DEFAULT_WINDOW_THICKNESS
    door_thickness: float = DEFAULT_DOOR_THICKNESS

    # Working plane: XZ means Y is world up
    plane: Plane = Plane.XZ

    opening_snap_distance: float = OPENING_SNAP_DISTANCE
    collinear_epsilon: float = COLLINEAR_EPSILON

    # Build opening panels (door leaves, window sashes)
    build_opening_panels: bool = True

    rebuild_cooldown: float = REBUILD_COOLDOWN

    def __post_init__(self):
        """Validate configuration values."""
        if self.wall_height <= 0:
            raise ValueError("wall_height must be positive")

        if self.door_height <= 0:
            raise ValueError("door_height must be positive")

        for name in (
            'interior_wall_thickness', 'exterior_wall_thickness',
            'window_thickness', 'door_thickness',
        ):
            if getattr(self, name) < 0:
                raise ValueError(f"{name} must be non-negative")

        if self.opening_snap_distance < 0:
            raise ValueError("opening_snap_distance must be non-negative")

        if self.rebuild_cooldown < 0:
            raise ValueError("rebuild_cooldown must be non-negative")

    def effective_door_height(self, wall_height: Optional[float] = None) -> float:
        """Door height capped by a wall height (default: config.wall_height)."""
        if wall_height is None:
            wall_height = self.wall_height
        return min(self.door_height, wall_height)


# Default configuration instance
DEFAULT_CONFIG = EngineConfig()
