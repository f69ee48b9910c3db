"""
Building data model for the floor-plan geometry engine.

Provides the host-facing input records (rooms, openings, roof settings)
and the wall segment record handed to the wall builder.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional, Tuple

from ..config import (
    DEFAULT_ROOF_THICKNESS,
    DEFAULT_ROOF_OVERHANG,
    ROOF_PITCH_DEFAULT,
    ROOF_PITCH_MIN,
    ROOF_PITCH_MAX,
    DEFAULT_WINDOW_FRAME_SIZE,
    DEFAULT_WINDOW_SUBDIVISIONS,
)
from .geometry import Point2D
from .mesh import Color


class OpeningType(Enum):
    """Kind of wall opening."""
    DOOR = "door"
    WINDOW = "window"
    GENERIC = "opening"

    @classmethod
    def from_name(cls, name: str) -> 'OpeningType':
        """
        Parse an opening type from a plan label.

        Unknown labels become GENERIC openings.
        """
        name = name.lower().strip()
        for kind in cls:
            if kind.value == name or kind.name.lower() == name:
                return kind
        return cls.GENERIC


class RoofType(Enum):
    """Roof type classification."""
    FLAT = "flat"
    HIPPED = "hipped"
    GABLED = "gabled"

    @classmethod
    def from_name(cls, name: str) -> 'RoofType':
        """
        Parse a roof type from a plan label.

        Raises:
            ValueError: If the label names no known roof type
        """
        name = name.lower().strip()
        for kind in cls:
            if kind.value == name:
                return kind
        raise ValueError(f"Unknown roof type: {name!r}")

    @property
    def is_pitched(self) -> bool:
        return self is not RoofType.FLAT


@dataclass
class Opening:
    """
    A door, window or plain hole in a wall.

    Attributes:
        kind: Door, window or generic opening
        width: Horizontal size along the wall (meters)
        height: Vertical size (ignored for doors, which use the door height)
        vertical_offset: Centre height relative to the wall mid-height
        offset: Distance from the wall start to the opening centre
        position: World plan position, used to find the hosting wall
        has_window: Door leaf carries a glazing pane
        frame_size: Width of the window frame around the glazing
        window_size_h: Glazing width as a fraction of the available width
        window_size_v: Glazing height as a fraction of the available height
        subdivisions_h: Number of glazing columns
        subdivisions_v: Number of glazing rows
    """
    kind: OpeningType
    width: float
    height: float
    vertical_offset: float = 0.0
    offset: float = 0.0
    position: Optional[Point2D] = None
    has_window: bool = False
    frame_size: float = DEFAULT_WINDOW_FRAME_SIZE
    window_size_h: float = 0.9
    window_size_v: float = 0.5
    subdivisions_h: int = DEFAULT_WINDOW_SUBDIVISIONS
    subdivisions_v: int = DEFAULT_WINDOW_SUBDIVISIONS

    def __post_init__(self):
        if self.width <= 0 or self.height <= 0:
            raise ValueError(
                f"Opening size must be positive (got {self.width}x{self.height})"
            )
        for name in ('subdivisions_h', 'subdivisions_v'):
            value = getattr(self, name)
            if (
                isinstance(value, bool)
                or not isinstance(value, (int, float))
                or not float(value).is_integer()
                or value < 1
            ):
                raise ValueError(f"{name} must be a positive whole number (got {value!r})")
            setattr(self, name, int(value))

    @property
    def is_door(self) -> bool:
        return self.kind is OpeningType.DOOR

    def at_offset(self, offset: float) -> 'Opening':
        """Copy of this opening placed at a given distance along a wall."""
        return Opening(
            kind=self.kind,
            width=self.width,
            height=self.height,
            vertical_offset=self.vertical_offset,
            offset=offset,
            position=self.position,
            has_window=self.has_window,
            frame_size=self.frame_size,
            window_size_h=self.window_size_h,
            window_size_v=self.window_size_v,
            subdivisions_h=self.subdivisions_h,
            subdivisions_v=self.subdivisions_v,
        )


@dataclass
class WallSegment:
    """
    One straight wall between two plan points.

    Attributes:
        start: Wall start point in the plan
        end: Wall end point in the plan
        height: Wall height
        thickness: Depth of the frame band around openings
        inward: Visible face points toward the polygon interior
        openings: Openings with offsets measured from `start`
    """
    start: Point2D
    end: Point2D
    height: float
    thickness: float
    inward: bool
    openings: List[Opening] = field(default_factory=list)

    @property
    def length(self) -> float:
        return self.start.distance_to(self.end)


@dataclass
class RoofConfig:
    """
    Roof settings for one building.

    Attributes:
        kind: Roof type
        thickness: Height of the border band; the roof surface sits on top
        overhang: Outward extension of the roof past the footprint
        pitch: Slope of pitched roof faces (degrees)
        color: Optional RGBA vertex color applied to roof drafts
    """
    kind: RoofType = RoofType.FLAT
    thickness: float = DEFAULT_ROOF_THICKNESS
    overhang: float = DEFAULT_ROOF_OVERHANG
    pitch: float = ROOF_PITCH_DEFAULT
    color: Optional[Color] = None

    def __post_init__(self):
        if self.thickness < 0:
            raise ValueError("roof thickness must be non-negative")
        if self.overhang < 0:
            raise ValueError("roof overhang must be non-negative")
        if not (ROOF_PITCH_MIN <= self.pitch <= ROOF_PITCH_MAX):
            raise ValueError(
                f"roof pitch must be between {ROOF_PITCH_MIN} and {ROOF_PITCH_MAX} degrees "
                f"(got {self.pitch})"
            )


@dataclass
class RoomInput:
    """A room outline as drawn by the host."""
    contour: List[Point2D]
    name: Optional[str] = None


@dataclass
class BuildingPlan:
    """
    Everything needed for one rebuild.

    Openings carry world plan positions and are associated with walls
    by proximity during assembly.
    """
    rooms: List[RoomInput] = field(default_factory=list)
    openings: List[Opening] = field(default_factory=list)
    roof: RoofConfig = field(default_factory=RoofConfig)


def contour_from_tuples(points: List[Tuple[float, float]]) -> List[Point2D]:
    """Convert (x, y) pairs into a contour."""
    return [Point2D(float(x), float(y)) for x, y in points]
