import pytest

from floorplan_geometry.models.geometry import Point2D, Polygon
from floorplan_geometry.processing.clipper import (
    union,
    union_polygons,
    difference,
    offset,
    match_ring_lengths,
    align_ring_start,
    ClipError,
)
from floorplan_geometry.utils.polygon_utils import normalize_winding, polygon_area, polygon_signed_area

from conftest import rect, rounded


def test_offset_zero_returns_normalized_input():
    clockwise = list(reversed(rect(0, 0, 5, 3)))
    result = offset(clockwise, 0.0)
    assert result == normalize_winding(clockwise)
    assert polygon_signed_area(result) > 0


def test_offset_grows_square_with_mitred_corners():
    grown = offset(rect(0, 0, 10, 10), 0.1)
    assert rounded(grown) == {(-0.1, -0.1), (10.1, -0.1), (10.1, 10.1), (-0.1, 10.1)}
    assert polygon_signed_area(grown) > 0


def test_offset_shrinks_l_shape(l_shape):
    shrunk = offset(l_shape, -0.2)
    assert polygon_area(shrunk) == pytest.approx(15.36)
    assert (0.2, 0.2) in rounded(shrunk)
    assert (1.8, 1.8) in rounded(shrunk)


def test_offset_that_consumes_contour_raises():
    with pytest.raises(ClipError):
        offset(rect(0, 0, 1, 1), -1.0)


def test_offset_degenerate_raises():
    with pytest.raises(ClipError):
        offset([Point2D(0, 0), Point2D(1, 1), Point2D(2, 2)], 0.5)


def test_union_of_disjoint_rectangles_keeps_two_contours():
    result = union([rect(0, 0, 2, 2), rect(5, 0, 7, 2)])
    assert len(result) == 2
    assert sum(polygon_area(c) for c in result) == pytest.approx(8.0)


def test_union_of_overlapping_rectangles_merges():
    result = union([rect(0, 0, 4, 2), rect(3, 0, 6, 2)])
    assert len(result) == 1
    assert polygon_area(result[0]) == pytest.approx(12.0)
    assert polygon_signed_area(result[0]) > 0


def test_union_of_touching_rooms_merges():
    result = union([rect(0, 0, 4, 4), rect(4, 0, 8, 4)])
    assert len(result) == 1
    assert polygon_area(result[0]) == pytest.approx(32.0)


def test_union_polygons_keeps_courtyard():
    ring_rooms = [
        rect(0, 0, 6, 1), rect(5, 0, 6, 6), rect(0, 5, 6, 6), rect(0, 0, 1, 6),
    ]
    polygons = union_polygons(ring_rooms)
    assert len(polygons) == 1
    assert len(polygons[0].holes) == 1
    assert polygons[0].area() == pytest.approx(36.0 - 16.0)


def test_difference_without_clips_returns_subject():
    subject = rect(0, 0, 4, 3)
    result = difference(subject, [])
    assert len(result) == 1
    assert result[0].outer_ring == subject
    assert result[0].holes == []


def test_difference_cuts_hole():
    result = difference(rect(0, 0, 10, 10), [rect(4, 4, 6, 6)])
    assert len(result) == 1
    assert len(result[0].holes) == 1
    assert result[0].area() == pytest.approx(96.0)


def test_difference_splitting_subject():
    result = difference(rect(0, 0, 10, 2), [rect(4, -1, 6, 3)])
    assert len(result) == 2
    assert sum(p.area() for p in result) == pytest.approx(16.0)


def test_difference_covering_clip_leaves_nothing():
    assert difference(rect(0, 0, 2, 2), [rect(-1, -1, 3, 3)]) == []


def test_difference_accepts_polygon_subject():
    subject = Polygon(rect(0, 0, 10, 10), [list(reversed(rect(1, 1, 3, 3)))])
    result = difference(subject, [rect(7, 7, 9, 9)])
    assert len(result) == 1
    assert result[0].area() == pytest.approx(100.0 - 4.0 - 4.0)


def test_match_ring_lengths_merges_closest_points():
    reference = rect(0, 0, 10, 10)
    ring = [
        Point2D(-1, -1), Point2D(11, -1), Point2D(11, 11),
        Point2D(0.05, 11), Point2D(-1, 11),
    ]
    matched, ref = match_ring_lengths(ring, reference)
    assert len(matched) == len(ref) == 4
    assert ref is reference
    assert (-0.475, 11.0) in rounded(matched)


def test_match_ring_lengths_equal_is_noop():
    ring = rect(0, 0, 1, 1)
    assert match_ring_lengths(ring, rect(0, 0, 2, 2)) == (ring, rect(0, 0, 2, 2))


def test_align_ring_start_pairs_vertices():
    reference = rect(0, 0, 10, 10)
    ring = [Point2D(10.1, 10.1), Point2D(-0.1, 10.1), Point2D(-0.1, -0.1), Point2D(10.1, -0.1)]
    aligned = align_ring_start(ring, reference)
    assert aligned[0] == Point2D(-0.1, -0.1)
    assert aligned[2] == Point2D(10.1, 10.1)
