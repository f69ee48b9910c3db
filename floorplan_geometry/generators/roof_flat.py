"""
Flat roof generator for the floor-plan geometry engine.

Also provides the roof base shared by every roof type:

- Roof outline: the footprint grown by the overhang.
- Border band: vertical strip around the outline, `thickness` tall.
- Soffit: underside of the overhang (outline minus footprint), facing down.

A flat roof is the base plus the outline tessellated as the top cap at
`thickness` above the base height.
"""

from typing import List, Optional
import logging

from ..config import EngineConfig, DEFAULT_CONFIG, ROOF_UV_TILE
from ..models.geometry import Point2D, Polygon
from ..models.mesh import MeshArtifact
from ..models.building import RoofConfig
from ..processing.clipper import offset, difference, ClipError
from ..utils.polygon_utils import normalize_winding, unproject, unproject_vector
from .floors import build_surface
from .uv_mapping import apply_planar_uvs, plane_axes

logger = logging.getLogger(__name__)


def roof_outline(footprint: List[Point2D], roof: RoofConfig) -> List[Point2D]:
    """
    Footprint grown by the roof overhang.

    Raises:
        ClipError: If the footprint cannot be offset
    """
    return offset(footprint, roof.overhang)


def build_roof_base(
    footprint: List[Point2D],
    outline: List[Point2D],
    roof: RoofConfig,
    config: EngineConfig = DEFAULT_CONFIG,
    base_height: float = 0.0,
    name: Optional[str] = "roof_base"
) -> MeshArtifact:
    """
    Border band and overhang soffit of a roof.

    Args:
        footprint: Contour the roof covers
        outline: Footprint grown by the overhang
        roof: Roof settings
        config: Engine configuration
        base_height: Height the roof sits on (wall top)
        name: Label of the resulting mesh

    Returns:
        MeshArtifact (empty when thickness and overhang are both zero)
    """
    mesh = MeshArtifact(name=name)

    if roof.thickness > 0:
        mesh.merge(_border_band(outline, base_height, roof.thickness, config))

    if roof.overhang > 0:
        try:
            soffit = difference(outline, [footprint])
        except ClipError as e:
            logger.warning(f"Roof soffit failed ({e}), leaving overhang open")
            soffit = []
        if soffit:
            down = tuple(-axis for axis in config.plane.up)
            mesh.merge(build_surface(soffit, base_height, down, config))

    return mesh


def build_flat_roof(
    footprint: List[Point2D],
    roof: RoofConfig,
    config: EngineConfig = DEFAULT_CONFIG,
    base_height: float = 0.0
) -> List[MeshArtifact]:
    """
    Generate a flat roof over a footprint.

    Args:
        footprint: Contour the roof covers
        roof: Roof settings
        config: Engine configuration
        base_height: Height the roof sits on (wall top)

    Returns:
        Roof drafts: top cap, then base (border band and soffit)

    Raises:
        ClipError: If the footprint cannot be offset
    """
    footprint = normalize_winding(footprint)
    outline = roof_outline(footprint, roof)

    top = build_surface(
        [Polygon(outline)],
        base_height + roof.thickness,
        config.plane.up,
        config,
        name="roof_top",
    )
    apply_planar_uvs(top, ROOF_UV_TILE, ROOF_UV_TILE, axes=plane_axes(config.plane))

    drafts = [top]
    base = build_roof_base(footprint, outline, roof, config, base_height)
    if not base.is_empty():
        drafts.append(base)

    return drafts


def _border_band(
    outline: List[Point2D],
    base_height: float,
    thickness: float,
    config: EngineConfig
) -> MeshArtifact:
    """Vertical quads around the outline, facing out."""
    mesh = MeshArtifact()
    plane = config.plane
    n = len(outline)
    travelled = 0.0

    for i in range(n):
        a = outline[i]
        b = outline[(i + 1) % n]
        length = a.distance_to(b)
        if length < 1e-9:
            continue

        edge = (b - a) * (1.0 / length)
        normal = unproject_vector(Point2D(edge.y, -edge.x), plane)
        u0 = travelled / ROOF_UV_TILE
        u1 = (travelled + length) / ROOF_UV_TILE
        v1 = thickness / ROOF_UV_TILE

        mesh.add_flat_quad(
            [
                unproject(a, plane, base_height).as_tuple(),
                unproject(b, plane, base_height).as_tuple(),
                unproject(b, plane, base_height + thickness).as_tuple(),
                unproject(a, plane, base_height + thickness).as_tuple(),
            ],
            normal,
            [(u0, 0.0), (u1, 0.0), (u1, v1), (u0, v1)],
        )
        travelled += length

    return mesh
