import pytest

from floorplan_geometry.config import Plane
from floorplan_geometry.models.geometry import Point2D, Polygon
from floorplan_geometry.utils.polygon_utils import polygon_area
from floorplan_geometry.utils.triangulation import (
    tessellate,
    triangulate_polygon,
    TessellationError,
    validate_triangulation,
)

from conftest import rect

UP = (0.0, 1.0, 0.0)


def plan_points(mesh):
    """Vertex positions back on the XZ plan."""
    return {(round(x, 9), round(z, 9)) for x, _, z in mesh.vertices}


@pytest.mark.parametrize("contour_name", ["square", "l_shape", "u_shape"])
def test_area_matches_shoelace(contour_name, l_shape):
    contours = {
        "square": rect(0, 0, 3, 3),
        "l_shape": l_shape,
        "u_shape": [
            Point2D(0, 0), Point2D(6, 0), Point2D(6, 5), Point2D(4, 5),
            Point2D(4, 2), Point2D(2, 2), Point2D(2, 5), Point2D(0, 5),
        ],
    }
    contour = contours[contour_name]
    mesh = tessellate([Polygon(contour)], UP, Plane.XZ, 0.0)
    assert mesh.surface_area() == pytest.approx(polygon_area(contour))


def test_triangles_face_requested_normal(l_shape):
    up = tessellate([Polygon(l_shape)], UP, Plane.XZ, 0.0)
    down = tessellate([Polygon(l_shape)], (0.0, -1.0, 0.0), Plane.XZ, 0.0)
    assert all(up.triangle_normal(i)[1] > 0 for i in range(up.triangle_count()))
    assert all(down.triangle_normal(i)[1] < 0 for i in range(down.triangle_count()))
    assert all(n == (0.0, -1.0, 0.0) for n in down.normals)


def test_polygon_with_hole_keeps_every_vertex():
    outer = rect(0, 0, 10, 10)
    hole = list(reversed(rect(4, 4, 6, 6)))
    mesh = tessellate([Polygon(outer, [hole])], UP, Plane.XZ, 2.5)

    assert mesh.surface_area() == pytest.approx(96.0)
    assert {(p.x, p.y) for p in outer + hole} <= plan_points(mesh)
    assert all(v[1] == 2.5 for v in mesh.vertices)


def test_several_polygons_in_one_call():
    mesh = tessellate(
        [Polygon(rect(0, 0, 2, 2)), Polygon(rect(5, 5, 8, 6))],
        (0.0, 0.0, 1.0), Plane.XY, 0.0,
    )
    assert mesh.surface_area() == pytest.approx(7.0)


def test_empty_input_gives_empty_mesh():
    assert tessellate([], UP).is_empty()


def test_zero_area_polygon_raises():
    flat = [Point2D(0, 0), Point2D(1, 0), Point2D(2, 0)]
    with pytest.raises(TessellationError):
        tessellate([Polygon(flat)], UP, Plane.XZ)


def test_self_intersecting_polygon_raises():
    bowtie = [Point2D(0, 0), Point2D(2, 2), Point2D(2, 0), Point2D(0, 2)]
    with pytest.raises(TessellationError):
        tessellate([Polygon(bowtie)], UP, Plane.XZ)


def test_triangulate_polygon_counts():
    assert len(triangulate_polygon(rect(0, 0, 1, 1))) == 2
    with pytest.raises(TessellationError):
        triangulate_polygon([Point2D(0, 0), Point2D(1, 0)])


def test_validate_triangulation(l_shape):
    triangles = triangulate_polygon(l_shape)
    assert validate_triangulation(l_shape, triangles, expected_area=20.0) == []
    assert validate_triangulation(l_shape, [(0, 1, 9)]) == ["Triangle 0 has invalid index"]
    assert validate_triangulation(l_shape, []) == ["No triangles generated"]


def test_holes_sharing_edge_heights():
    outer = rect(-0.1, -0.1, 8.1, 4.1)
    holes = [rect(0.05, 0.05, 3.95, 3.95), rect(4.05, 0.05, 7.95, 3.95)]
    mesh = tessellate([Polygon(outer, holes)], UP, Plane.XZ, 0.0)
    assert mesh.surface_area() == pytest.approx(8.2 * 4.2 - 2 * 3.9 * 3.9)
    assert all(mesh.triangle_normal(i)[1] > 0 for i in range(mesh.triangle_count()))


@pytest.mark.parametrize("count", [2, 3, 4])
def test_row_of_holes_at_same_height(count):
    outer = rect(0, 0, 2 * count + 1, 3)
    holes = [rect(2 * k + 1, 1, 2 * k + 2, 2) for k in range(count)]
    mesh = tessellate([Polygon(outer, holes)], UP, Plane.XZ, 0.0)
    assert mesh.surface_area() == pytest.approx(3.0 * (2 * count + 1) - count)
    assert plan_points(mesh) >= {(2.0 * k + 1, 1.0) for k in range(count)}


def test_three_holes_with_shared_corner_heights():
    # Neighbouring holes share corner heights
    outer = rect(0, 0, 10, 6)
    holes = [rect(1, 1, 3, 5), rect(6, 2, 8, 4), rect(4, 1, 5, 5)]
    mesh = tessellate([Polygon(outer, holes)], UP, Plane.XZ, 0.0)
    assert mesh.surface_area() == pytest.approx(60.0 - 8.0 - 4.0 - 4.0)
