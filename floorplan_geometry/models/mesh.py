"""
Mesh data model for the floor-plan geometry engine.

Provides MeshArtifact, the sole output type of every generator: vertex
positions with per-vertex normals and UVs, optional vertex colors and
triangle indices.

Note on indexing:
    - Triangles use 0-based indices into the vertex list
    - When merging, indices are adjusted by vertex offset
"""

from dataclasses import dataclass, field
from typing import List, Tuple, Optional
import math

from .geometry import Vector3

Color = Tuple[float, float, float, float]


def vec_sub(a: Vector3, b: Vector3) -> Vector3:
    return (a[0] - b[0], a[1] - b[1], a[2] - b[2])


def vec_cross(a: Vector3, b: Vector3) -> Vector3:
    return (
        a[1] * b[2] - a[2] * b[1],
        a[2] * b[0] - a[0] * b[2],
        a[0] * b[1] - a[1] * b[0],
    )


def vec_dot(a: Vector3, b: Vector3) -> float:
    return a[0] * b[0] + a[1] * b[1] + a[2] * b[2]


def vec_normalize(v: Vector3) -> Vector3:
    length = math.sqrt(vec_dot(v, v))
    if length < 1e-12:
        return (0.0, 0.0, 0.0)
    return (v[0] / length, v[1] / length, v[2] / length)


@dataclass
class MeshArtifact:
    """
    Generated mesh for one building element (wall, floor, roof draft...).

    Attributes:
        vertices: List of (x, y, z) vertex positions
        normals: List of (x, y, z) unit normals, parallel to vertices
        uvs: List of (u, v) texture coordinates, parallel to vertices
        triangles: List of (a, b, c) vertex indices (0-based)
        colors: Optional RGBA per vertex, parallel to vertices when set
        name: Optional label used in reports
    """
    vertices: List[Vector3] = field(default_factory=list)
    normals: List[Vector3] = field(default_factory=list)
    uvs: List[Tuple[float, float]] = field(default_factory=list)
    triangles: List[Tuple[int, int, int]] = field(default_factory=list)
    colors: List[Color] = field(default_factory=list)
    name: Optional[str] = None

    def vertex_count(self) -> int:
        """Get number of vertices."""
        return len(self.vertices)

    def triangle_count(self) -> int:
        """Get number of triangles."""
        return len(self.triangles)

    def is_empty(self) -> bool:
        """Check if mesh has no geometry."""
        return len(self.triangles) == 0

    def add_vertex(
        self,
        position: Vector3,
        normal: Vector3,
        uv: Tuple[float, float] = (0.0, 0.0)
    ) -> int:
        """
        Add a vertex and return its 0-based index.

        Args:
            position: Vertex coordinates
            normal: Unit normal of the vertex
            uv: Texture coordinates

        Returns:
            Index of the new vertex
        """
        self.vertices.append(position)
        self.normals.append(normal)
        self.uvs.append(uv)
        return len(self.vertices) - 1

    def add_triangle(self, a: int, b: int, c: int) -> None:
        """Add a triangle face."""
        self.triangles.append((a, b, c))

    def add_quad(self, a: int, b: int, c: int, d: int) -> None:
        """
        Add a quad face as two triangles: (a, b, c) and (a, c, d).
        """
        self.triangles.append((a, b, c))
        self.triangles.append((a, c, d))

    def add_flat_quad(
        self,
        corners: List[Vector3],
        normal: Vector3,
        uvs: Optional[List[Tuple[float, float]]] = None
    ) -> None:
        """
        Add a planar quad with a shared normal.

        Triangle winding is chosen so the geometric normal agrees with
        `normal`, whatever order the corners come in (around the quad).
        """
        if uvs is None:
            uvs = [(0.0, 0.0), (1.0, 0.0), (1.0, 1.0), (0.0, 1.0)]
        indices = [
            self.add_vertex(corner, normal, uv)
            for corner, uv in zip(corners, uvs)
        ]
        geometric = vec_cross(
            vec_sub(corners[1], corners[0]),
            vec_sub(corners[2], corners[0])
        )
        if vec_dot(geometric, normal) < 0:
            indices.reverse()
        self.add_quad(*indices)

    def merge(self, other: 'MeshArtifact') -> None:
        """
        Merge another mesh into this one.

        Vertices and attributes are appended, triangle indices adjusted.
        Colors survive only when both sides carry them.
        """
        if not other.vertices:
            return

        had_colors = bool(self.colors) or not self.vertices
        offset = len(self.vertices)

        self.vertices.extend(other.vertices)
        self.normals.extend(other.normals)
        self.uvs.extend(other.uvs)
        if had_colors and other.colors:
            self.colors.extend(other.colors)
        else:
            self.colors = []

        for a, b, c in other.triangles:
            self.triangles.append((a + offset, b + offset, c + offset))

    def copy(self, name: Optional[str] = None) -> 'MeshArtifact':
        """Return an independent copy."""
        return MeshArtifact(
            vertices=list(self.vertices),
            normals=list(self.normals),
            uvs=list(self.uvs),
            triangles=list(self.triangles),
            colors=list(self.colors),
            name=name if name is not None else self.name,
        )

    def translate(self, offset: Vector3) -> None:
        """Move every vertex by offset."""
        dx, dy, dz = offset
        self.vertices = [(x + dx, y + dy, z + dz) for x, y, z in self.vertices]

    def transform(
        self,
        origin: Vector3,
        axis_x: Vector3,
        axis_y: Vector3,
        axis_z: Vector3
    ) -> None:
        """
        Map local coordinates into a world frame.

        world = origin + x * axis_x + y * axis_y + z * axis_z. Normals are
        mapped through the same axes. When the frame is mirrored the
        triangle winding is reversed to keep faces oriented.
        """
        def apply(v: Vector3) -> Vector3:
            return (
                v[0] * axis_x[0] + v[1] * axis_y[0] + v[2] * axis_z[0],
                v[0] * axis_x[1] + v[1] * axis_y[1] + v[2] * axis_z[1],
                v[0] * axis_x[2] + v[1] * axis_y[2] + v[2] * axis_z[2],
            )

        self.vertices = [
            tuple(o + d for o, d in zip(origin, apply(v)))
            for v in self.vertices
        ]
        self.normals = [vec_normalize(apply(n)) for n in self.normals]

        if vec_dot(vec_cross(axis_x, axis_y), axis_z) < 0:
            self.triangles = [(a, c, b) for a, b, c in self.triangles]

    def flip(self) -> None:
        """Reverse triangle winding and negate normals."""
        self.triangles = [(a, c, b) for a, b, c in self.triangles]
        self.normals = [(-x, -y, -z) for x, y, z in self.normals]

    def paint(self, color: Color) -> None:
        """Assign one vertex color to the whole mesh."""
        self.colors = [color] * len(self.vertices)

    def triangle_normal(self, index: int) -> Vector3:
        """Unnormalized geometric normal of a triangle (right-handed)."""
        a, b, c = self.triangles[index]
        return vec_cross(
            vec_sub(self.vertices[b], self.vertices[a]),
            vec_sub(self.vertices[c], self.vertices[a])
        )

    def triangle_area(self, index: int) -> float:
        """Area of one triangle."""
        n = self.triangle_normal(index)
        return 0.5 * math.sqrt(vec_dot(n, n))

    def surface_area(self) -> float:
        """Total area of all triangles."""
        return sum(self.triangle_area(i) for i in range(len(self.triangles)))

    def validate(self) -> List[str]:
        """
        Validate mesh integrity.

        Returns:
            List of validation error messages (empty if valid)
        """
        errors = []

        if not self.vertices:
            errors.append("Mesh has no vertices")
            return errors

        count = len(self.vertices)
        if len(self.normals) != count or len(self.uvs) != count:
            errors.append("Vertex attribute lists have different lengths")
        if self.colors and len(self.colors) != count:
            errors.append("Color list does not match vertex count")

        for i, tri in enumerate(self.triangles):
            for idx in tri:
                if idx < 0 or idx >= count:
                    errors.append(
                        f"Triangle {i} has invalid vertex index {idx} "
                        f"(valid range: 0-{count - 1})"
                    )

        return errors

    def compute_bounds(self) -> Optional[Tuple[Vector3, Vector3]]:
        """
        Compute bounding box of the mesh.

        Returns:
            ((min_x, min_y, min_z), (max_x, max_y, max_z)) or None if empty
        """
        if not self.vertices:
            return None

        xs = [v[0] for v in self.vertices]
        ys = [v[1] for v in self.vertices]
        zs = [v[2] for v in self.vertices]

        return (
            (min(xs), min(ys), min(zs)),
            (max(xs), max(ys), max(zs))
        )

    def __repr__(self) -> str:
        label = f"{self.name!r}, " if self.name else ""
        return (
            f"MeshArtifact({label}vertices={len(self.vertices)}, "
            f"triangles={len(self.triangles)})"
        )


def merge_meshes(meshes: List[MeshArtifact], name: Optional[str] = None) -> MeshArtifact:
    """
    Merge multiple meshes into one.

    Args:
        meshes: List of MeshArtifact to merge
        name: Label for the merged mesh

    Returns:
        Single merged MeshArtifact
    """
    result = MeshArtifact(name=name)

    for mesh in meshes:
        result.merge(mesh)

    return result
