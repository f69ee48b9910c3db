import pytest

from floorplan_geometry.models.mesh import MeshArtifact, merge_meshes


def quad(z=0.0, normal=(0.0, 0.0, 1.0)):
    mesh = MeshArtifact(name="quad")
    mesh.add_flat_quad(
        [(0.0, 0.0, z), (1.0, 0.0, z), (1.0, 1.0, z), (0.0, 1.0, z)],
        normal,
    )
    return mesh


def test_add_flat_quad_follows_requested_normal():
    up = quad(normal=(0.0, 0.0, 1.0))
    down = quad(normal=(0.0, 0.0, -1.0))
    assert up.triangle_normal(0)[2] > 0
    assert down.triangle_normal(0)[2] < 0
    assert up.surface_area() == pytest.approx(1.0)


def test_merge_offsets_indices():
    a = quad()
    b = quad(z=1.0)
    merged = merge_meshes([a, b], name="both")
    assert merged.vertex_count() == 8
    assert merged.triangle_count() == 4
    assert max(max(t) for t in merged.triangles) == 7
    assert merged.validate() == []


def test_merge_drops_colors_unless_both_painted():
    a = quad()
    a.paint((1.0, 0.0, 0.0, 1.0))
    a.merge(quad())
    assert a.colors == []

    b = quad()
    b.paint((1.0, 0.0, 0.0, 1.0))
    c = quad()
    c.paint((0.0, 1.0, 0.0, 1.0))
    b.merge(c)
    assert len(b.colors) == b.vertex_count()


def test_flip_reverses_winding_and_normals():
    mesh = quad()
    mesh.flip()
    assert mesh.triangle_normal(0)[2] < 0
    assert all(n == (0.0, 0.0, -1.0) for n in mesh.normals)


def test_transform_mirrored_frame_keeps_orientation():
    mesh = quad()
    # X and Y kept, Z negated: a mirrored frame
    mesh.transform((0.0, 0.0, 0.0), (1.0, 0.0, 0.0), (0.0, 1.0, 0.0), (0.0, 0.0, -1.0))
    normal = mesh.normals[0]
    geometric = mesh.triangle_normal(0)
    assert normal == (0.0, 0.0, -1.0)
    assert geometric[2] < 0


def test_bounds_and_empty():
    mesh = MeshArtifact()
    assert mesh.is_empty()
    assert mesh.compute_bounds() is None
    assert mesh.validate() == ["Mesh has no vertices"]

    mesh = quad(z=2.0)
    mesh.translate((1.0, 0.0, 0.0))
    assert mesh.compute_bounds() == ((1.0, 0.0, 2.0), (2.0, 1.0, 2.0))
