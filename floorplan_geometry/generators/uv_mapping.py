"""
UV mapping utilities for the floor-plan geometry engine.

Two projections are used:

- Planar: UVs come from two world (or wall-local) axes divided by tile
  sizes. Walls are mapped in their local XY plane before placement, so
  U runs along the wall and V up the wall. Floors, ceilings and flat
  roofs are mapped on the ground plane.
- Box: each vertex is projected along the dominant axis of its normal.
  Used on pitched roof faces, where a single planar projection would
  stretch texels on steep faces.

UVs can exceed [0, 1]; textures are expected to tile.
"""

from typing import Tuple

from ..config import Plane
from ..models.mesh import MeshArtifact

def plane_axes(plane: Plane) -> Tuple[int, int]:
    """
    Indices of the two world axes spanning the ground plane.

    Returns:
        (u_axis, v_axis) indices into a vertex tuple
    """
    if plane is Plane.XZ:
        return (0, 2)
    return (0, 1)


def apply_planar_uvs(
    mesh: MeshArtifact,
    tile_u: float,
    tile_v: float,
    axes: Tuple[int, int] = (0, 1)
) -> None:
    """
    Assign planar UVs to every vertex of a mesh.

    u = vertex[axes[0]] / tile_u, v = vertex[axes[1]] / tile_v.

    Args:
        mesh: Mesh to update in place
        tile_u: World size of one texture repeat along U
        tile_v: World size of one texture repeat along V
        axes: Vertex components used for U and V
    """
    if tile_u <= 0 or tile_v <= 0:
        raise ValueError(f"UV tile sizes must be positive (got {tile_u}, {tile_v})")

    u_axis, v_axis = axes
    mesh.uvs = [(v[u_axis] / tile_u, v[v_axis] / tile_v) for v in mesh.vertices]


def apply_box_uvs(mesh: MeshArtifact, tile_u: float, tile_v: float) -> None:
    """
    Assign box-projected UVs based on each vertex normal.

    A vertex whose normal is mostly along X is mapped with (z, y), mostly
    along Y with (x, z), and mostly along Z with (x, y).
    """
    if tile_u <= 0 or tile_v <= 0:
        raise ValueError(f"UV tile sizes must be positive (got {tile_u}, {tile_v})")

    uvs = []
    for (x, y, z), (nx, ny, nz) in zip(mesh.vertices, mesh.normals):
        ax, ay, az = abs(nx), abs(ny), abs(nz)
        if ax >= ay and ax >= az:
            uvs.append((z / tile_u, y / tile_v))
        elif ay >= az:
            uvs.append((x / tile_u, z / tile_v))
        else:
            uvs.append((x / tile_u, y / tile_v))
    mesh.uvs = uvs
