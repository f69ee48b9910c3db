import pytest

from floorplan_geometry.models.geometry import Point2D, signed_ring_area
from floorplan_geometry.processing.skeleton import compute_straight_skeleton, SkeletonError

from conftest import rect, rounded


def test_rectangle_has_ridge_along_long_side():
    skeleton = compute_straight_skeleton(rect(0, 0, 10, 4))

    assert len(skeleton.faces) == 4
    assert skeleton.max_height() == pytest.approx(2.0)

    ridge = [
        node for node, height in zip(skeleton.nodes, skeleton.node_heights)
        if height == pytest.approx(2.0)
    ]
    assert rounded(ridge) == {(2.0, 2.0), (8.0, 2.0)}

    sizes = sorted(len(face.polygon) for face in skeleton.faces)
    assert sizes == [3, 3, 4, 4]


def test_faces_start_with_their_edge():
    contour = rect(0, 0, 10, 4)
    skeleton = compute_straight_skeleton(contour)
    for face in skeleton.faces:
        i = face.edge_index
        assert face.edge_start == contour[i]
        assert face.edge_end == contour[(i + 1) % 4]
        assert signed_ring_area(face.polygon) > 0


def test_square_collapses_to_apex():
    skeleton = compute_straight_skeleton(rect(0, 0, 6, 6))
    assert skeleton.max_height() == pytest.approx(3.0)
    assert all(len(face.polygon) == 3 for face in skeleton.faces)
    assert all(rounded([face.polygon[2]]) == {(3.0, 3.0)} for face in skeleton.faces)


def test_l_shape_faces_tile_polygon(l_shape):
    skeleton = compute_straight_skeleton(l_shape)
    assert len(skeleton.faces) == 6
    assert sum(signed_ring_area(f.polygon) for f in skeleton.faces) == pytest.approx(20.0)
    assert skeleton.max_height() == pytest.approx(1.0)


def test_clockwise_input_is_normalized():
    skeleton = compute_straight_skeleton(list(reversed(rect(0, 0, 10, 4))))
    assert signed_ring_area(skeleton.contour) > 0
    assert skeleton.max_height() == pytest.approx(2.0)


def test_degenerate_contour_raises():
    with pytest.raises(SkeletonError):
        compute_straight_skeleton([Point2D(0, 0), Point2D(1, 0), Point2D(2, 0)])


def test_self_intersecting_contour_raises():
    bowtie = [Point2D(0, 0), Point2D(2, 2), Point2D(2, 0), Point2D(0, 2)]
    with pytest.raises(SkeletonError):
        compute_straight_skeleton(bowtie)


def ring(*coords):
    return [Point2D(x, y) for x, y in coords]


SHAPES = {
    "t_shape": (
        ring((2, 0), (4, 0), (4, 4), (6, 4), (6, 6), (0, 6), (0, 4), (2, 4)),
        20.0, 1.0,
    ),
    "h_shape": (
        ring((0, 0), (2, 0), (2, 2), (4, 2), (4, 0), (6, 0),
             (6, 6), (4, 6), (4, 4), (2, 4), (2, 6), (0, 6)),
        28.0, 1.0,
    ),
    "wide_h_shape": (
        ring((0, 0), (3, 0), (3, 3), (5, 3), (5, 0), (8, 0),
             (8, 8), (5, 8), (5, 5), (3, 5), (3, 8), (0, 8)),
        52.0, 1.5,
    ),
    "u_shape": (
        ring((0, 0), (6, 0), (6, 4), (4, 4), (4, 2), (2, 2), (2, 4), (0, 4)),
        20.0, 1.0,
    ),
    "plus_shape": (
        ring((2, 0), (4, 0), (4, 2), (6, 2), (6, 4), (4, 4),
             (4, 6), (2, 6), (2, 4), (0, 4), (0, 2), (2, 2)),
        20.0, 1.0,
    ),
    "facing_notches": (
        ring((0, 0), (4, 0), (4, 2), (6, 2), (6, 0), (10, 0),
             (10, 6), (6, 6), (6, 4), (4, 4), (4, 6), (0, 6)),
        52.0, 2.0,
    ),
}


@pytest.mark.parametrize("name", sorted(SHAPES))
def test_faces_tile_polygon_with_simultaneous_events(name):
    contour, area, height = SHAPES[name]
    skeleton = compute_straight_skeleton(contour)

    assert len(skeleton.faces) == len(contour)
    assert sum(signed_ring_area(f.polygon) for f in skeleton.faces) == pytest.approx(area)
    assert all(signed_ring_area(f.polygon) > 0 for f in skeleton.faces)
    assert skeleton.max_height() == pytest.approx(height)


def test_h_shape_ridges_meet_at_bar_ends():
    contour, _, _ = SHAPES["h_shape"]
    skeleton = compute_straight_skeleton(contour)
    top = {
        (round(p.x, 6), round(p.y, 6))
        for p, h in zip(skeleton.nodes, skeleton.node_heights)
        if h == pytest.approx(1.0)
    }
    assert {(1.0, 1.0), (1.0, 3.0), (1.0, 5.0), (5.0, 1.0), (5.0, 3.0), (5.0, 5.0)} <= top


def test_plus_shape_arms_meet_in_centre():
    contour, _, _ = SHAPES["plus_shape"]
    skeleton = compute_straight_skeleton(contour)
    assert rounded([Point2D(3, 3)]) <= rounded(skeleton.nodes)
    assert rounded(skeleton.faces[1].polygon) == {(4.0, 0.0), (4.0, 2.0), (3.0, 3.0), (3.0, 1.0)}
