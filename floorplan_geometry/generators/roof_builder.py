"""
Roof builder for the floor-plan geometry engine.

Dispatches to the flat, hipped or gabled generator and handles failures:

1. Try the roof over every building contour.
2. If any building contour fails, rebuild the roof room by room.
3. A room whose roof still fails gets a flat roof.

A roof failure never aborts a rebuild; every recovery is logged and
reported as a warning.
"""

from dataclasses import dataclass, field
from typing import Callable, Dict, List, Optional, Sequence
import logging

from ..config import EngineConfig, DEFAULT_CONFIG
from ..models.geometry import Point2D
from ..models.mesh import MeshArtifact, merge_meshes
from ..models.building import RoofConfig, RoofType
from ..processing.clipper import ClipError
from ..processing.skeleton import SkeletonError
from ..utils.triangulation import TessellationError
from .roof_flat import build_flat_roof
from .roof_hipped import build_hipped_roof
from .roof_gabled import build_gabled_roof

logger = logging.getLogger(__name__)

RoofGenerator = Callable[
    [List[Point2D], RoofConfig, EngineConfig, float], List[MeshArtifact]
]

ROOF_GENERATORS: Dict[RoofType, RoofGenerator] = {
    RoofType.FLAT: build_flat_roof,
    RoofType.HIPPED: build_hipped_roof,
    RoofType.GABLED: build_gabled_roof,
}

# Errors a roof generator may raise on bad geometry
ROOF_ERRORS = (ClipError, SkeletonError, TessellationError)


@dataclass
class RoofResult:
    """
    Result of build_roofs().

    Attributes:
        drafts: Every roof mesh, in generation order
        merged: All drafts in one mesh
        per_room: True when the building-level roof failed
        flat_fallbacks: Number of rooms that fell back to a flat roof
        warnings: Recovered problems, for reporting
    """
    drafts: List[MeshArtifact] = field(default_factory=list)
    merged: MeshArtifact = field(default_factory=MeshArtifact)
    per_room: bool = False
    flat_fallbacks: int = 0
    warnings: List[str] = field(default_factory=list)


def build_roof(
    footprint: List[Point2D],
    roof: RoofConfig,
    config: EngineConfig = DEFAULT_CONFIG,
    base_height: Optional[float] = None
) -> List[MeshArtifact]:
    """
    Build the roof drafts for one footprint contour.

    Args:
        footprint: Contour the roof covers
        roof: Roof settings
        config: Engine configuration
        base_height: Height the roof sits on (default: wall height)

    Returns:
        List of roof drafts, painted with roof.color when set

    Raises:
        ClipError, SkeletonError, TessellationError: On bad geometry
    """
    if base_height is None:
        base_height = config.wall_height

    generator = ROOF_GENERATORS[roof.kind]
    drafts = generator(footprint, roof, config, base_height)

    if roof.color is not None:
        for draft in drafts:
            draft.paint(roof.color)

    return drafts


def build_roofs(
    building_contours: Sequence[List[Point2D]],
    room_contours: Sequence[List[Point2D]],
    roof: RoofConfig,
    config: EngineConfig = DEFAULT_CONFIG,
    base_height: Optional[float] = None
) -> RoofResult:
    """
    Build roofs over a building, falling back room by room.

    Args:
        building_contours: Contours covered by the roof as a whole
        room_contours: Individual room contours, used on failure
        roof: Roof settings
        config: Engine configuration
        base_height: Height the roof sits on (default: wall height)

    Returns:
        RoofResult with drafts and recovery information
    """
    result = RoofResult()

    try:
        for contour in building_contours:
            result.drafts.extend(build_roof(contour, roof, config, base_height))
    except ROOF_ERRORS as e:
        _warn(result, f"{roof.kind.value} roof failed on building contour ({e}), retrying per room")
        result.drafts = []
        result.per_room = True

        for index, contour in enumerate(room_contours):
            result.drafts.extend(
                _build_room_roof(index, contour, roof, config, base_height, result)
            )

    result.merged = merge_meshes(result.drafts, name="roof")
    logger.debug(
        f"Roof: {len(result.drafts)} drafts, {result.merged.triangle_count()} triangles"
        + (" (per room)" if result.per_room else "")
    )
    return result


def _build_room_roof(
    index: int,
    contour: List[Point2D],
    roof: RoofConfig,
    config: EngineConfig,
    base_height: Optional[float],
    result: RoofResult
) -> List[MeshArtifact]:
    """Roof of one room, flat when the requested kind fails."""
    try:
        return build_roof(contour, roof, config, base_height)
    except ROOF_ERRORS as e:
        if not roof.kind.is_pitched:
            _warn(result, f"Room {index}: flat roof failed ({e}), no roof")
            return []
        _warn(result, f"Room {index}: {roof.kind.value} roof failed ({e}), using flat roof")

    result.flat_fallbacks += 1
    flat = RoofConfig(
        kind=RoofType.FLAT,
        thickness=roof.thickness,
        overhang=roof.overhang,
        pitch=roof.pitch,
        color=roof.color,
    )
    try:
        return build_roof(contour, flat, config, base_height)
    except ROOF_ERRORS as e:
        _warn(result, f"Room {index}: flat roof failed ({e}), no roof")
        return []


def _warn(result: RoofResult, message: str) -> None:
    logger.warning(message)
    result.warnings.append(message)
