"""
Core geometry types for the floor-plan geometry engine.

Provides Point2D, Point3D, BBox and Polygon used throughout the
generators for plan contours and world-space geometry.
"""

from dataclasses import dataclass, field
from typing import List, Optional, Tuple
import math


Vector3 = Tuple[float, float, float]


@dataclass(frozen=True, slots=True)
class Point2D:
    """2D point in plan coordinates."""
    x: float
    y: float

    def distance_to(self, other: 'Point2D') -> float:
        """Euclidean distance to another point."""
        dx = self.x - other.x
        dy = self.y - other.y
        return math.sqrt(dx * dx + dy * dy)

    def __sub__(self, other: 'Point2D') -> 'Point2D':
        """Vector subtraction."""
        return Point2D(self.x - other.x, self.y - other.y)

    def __add__(self, other: 'Point2D') -> 'Point2D':
        """Vector addition."""
        return Point2D(self.x + other.x, self.y + other.y)

    def __mul__(self, factor: float) -> 'Point2D':
        """Scale by a scalar."""
        return Point2D(self.x * factor, self.y * factor)

    def dot(self, other: 'Point2D') -> float:
        """Dot product."""
        return self.x * other.x + self.y * other.y

    def cross(self, other: 'Point2D') -> float:
        """2D cross product (returns scalar z-component)."""
        return self.x * other.y - self.y * other.x

    def length(self) -> float:
        """Vector length."""
        return math.sqrt(self.x * self.x + self.y * self.y)

    def normalized(self) -> 'Point2D':
        """Unit vector in the same direction (zero vector stays zero)."""
        length = self.length()
        if length < 1e-12:
            return Point2D(0.0, 0.0)
        return Point2D(self.x / length, self.y / length)

    def left_normal(self) -> 'Point2D':
        """Vector rotated 90 degrees counter-clockwise."""
        return Point2D(-self.y, self.x)


@dataclass(frozen=True, slots=True)
class Point3D:
    """3D point in world coordinates."""
    x: float
    y: float
    z: float

    def distance_to(self, other: 'Point3D') -> float:
        """Euclidean distance to another point."""
        dx = self.x - other.x
        dy = self.y - other.y
        dz = self.z - other.z
        return math.sqrt(dx * dx + dy * dy + dz * dz)

    def __sub__(self, other: 'Point3D') -> 'Point3D':
        """Vector subtraction."""
        return Point3D(self.x - other.x, self.y - other.y, self.z - other.z)

    def __add__(self, other: 'Point3D') -> 'Point3D':
        """Vector addition."""
        return Point3D(self.x + other.x, self.y + other.y, self.z + other.z)

    def as_tuple(self) -> Vector3:
        return (self.x, self.y, self.z)


@dataclass(slots=True)
class BBox:
    """Axis-aligned bounding box in 2D."""
    min_x: float
    min_y: float
    max_x: float
    max_y: float

    @property
    def width(self) -> float:
        """Width in X direction."""
        return self.max_x - self.min_x

    @property
    def height(self) -> float:
        """Height in Y direction."""
        return self.max_y - self.min_y

    @property
    def size(self) -> float:
        """Largest extent, used as a scale for tolerances."""
        return max(self.width, self.height)

    @staticmethod
    def from_points(points: List[Point2D]) -> 'BBox':
        """Create bbox from a list of points."""
        if not points:
            raise ValueError("Cannot create BBox from empty point list")

        xs = [p.x for p in points]
        ys = [p.y for p in points]
        return BBox(min(xs), min(ys), max(xs), max(ys))


@dataclass
class Polygon:
    """
    2D polygon with optional holes.

    Attributes:
        outer_ring: List of Point2D forming the outer boundary (should be CCW)
        holes: List of inner rings (each should be CW for proper winding)

    Winding convention:
        - Outer ring: counter-clockwise (positive signed area)
        - Holes: clockwise (negative signed area)
    """
    outer_ring: List[Point2D]
    holes: List[List[Point2D]] = field(default_factory=list)
    _bbox: Optional[BBox] = field(default=None, repr=False)

    @property
    def bbox(self) -> BBox:
        """Get or compute bounding box."""
        if self._bbox is None:
            self._bbox = BBox.from_points(self.outer_ring)
        return self._bbox

    @property
    def vertex_count(self) -> int:
        """Total number of vertices including holes."""
        return len(self.outer_ring) + sum(len(hole) for hole in self.holes)

    @property
    def has_holes(self) -> bool:
        """Check if polygon has any holes."""
        return len(self.holes) > 0

    def signed_area(self) -> float:
        """
        Compute signed area using shoelace formula.
        Positive = CCW, Negative = CW.
        """
        return signed_ring_area(self.outer_ring)

    def area(self) -> float:
        """Compute total area (outer minus holes)."""
        total = abs(self.signed_area())
        for hole in self.holes:
            total -= abs(signed_ring_area(hole))
        return total

    def ensure_winding(self) -> None:
        """Make the outer ring CCW and every hole CW."""
        if self.signed_area() < 0:
            self.outer_ring = list(reversed(self.outer_ring))
            self._bbox = None
        for i, hole in enumerate(self.holes):
            if signed_ring_area(hole) > 0:
                self.holes[i] = list(reversed(hole))


def signed_ring_area(ring: List[Point2D]) -> float:
    """
    Compute signed area of a ring using shoelace formula.
    Positive = CCW, Negative = CW.
    """
    n = len(ring)
    if n < 3:
        return 0.0

    area = 0.0
    for i in range(n):
        j = (i + 1) % n
        area += ring[i].x * ring[j].y
        area -= ring[j].x * ring[i].y

    return area / 2.0
