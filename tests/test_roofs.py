import math

import pytest

from floorplan_geometry.config import EngineConfig, Plane
from floorplan_geometry.models.geometry import Point2D
from floorplan_geometry.models.building import RoofConfig, RoofType
from floorplan_geometry.processing.skeleton import SkeletonError
from floorplan_geometry.generators import roof_builder
from floorplan_geometry.generators.roof_builder import build_roof, build_roofs
from floorplan_geometry.generators.roof_hipped import build_hipped_roof
from floorplan_geometry.generators.roof_gabled import build_gabled_roof
from floorplan_geometry.generators.roof_flat import build_flat_roof

from conftest import rect

SLOPE = math.tan(math.radians(25.0))


def bare(kind):
    """Roof without band or overhang, so only the pitched surface is built."""
    return RoofConfig(kind=kind, thickness=0.0, overhang=0.0)


def heights(mesh):
    return [v[1] for v in mesh.vertices]


def projected_area(mesh, up_axis=1):
    """Area of the mesh projected onto the ground plane."""
    total = 0.0
    for i in range(mesh.triangle_count()):
        total += abs(mesh.triangle_normal(i)[up_axis]) / 2.0
    return total


def test_hipped_rectangle_peak_and_ridge(config):
    drafts = build_hipped_roof(rect(0, 0, 10, 4), bare(RoofType.HIPPED), config, 0.0)
    assert len(drafts) == 1
    roof = drafts[0]

    peak = max(heights(roof))
    assert peak == pytest.approx(SLOPE * 2.0)

    ridge = {(round(x, 6), round(z, 6)) for x, y, z in roof.vertices if y == pytest.approx(peak)}
    assert ridge == {(2.0, 2.0), (8.0, 2.0)}


def test_hipped_roof_covers_footprint(config):
    roof = build_hipped_roof(rect(0, 0, 10, 4), bare(RoofType.HIPPED), config, 0.0)[0]
    assert projected_area(roof) == pytest.approx(40.0)
    assert roof.surface_area() == pytest.approx(40.0 / math.cos(math.radians(25.0)))
    assert all(roof.triangle_normal(i)[1] > 0 for i in range(roof.triangle_count()))
    assert all(n[1] > 0 for n in roof.normals)


def test_hipped_l_shape(config, l_shape):
    roof = build_hipped_roof(l_shape, bare(RoofType.HIPPED), config, 0.0)[0]
    assert max(heights(roof)) == pytest.approx(SLOPE * 1.0)
    assert projected_area(roof) == pytest.approx(20.0)


def test_pitch_changes_height(config):
    steep = RoofConfig(kind=RoofType.HIPPED, thickness=0.0, overhang=0.0, pitch=45.0)
    roof = build_hipped_roof(rect(0, 0, 10, 4), steep, config, 0.0)[0]
    assert max(heights(roof)) == pytest.approx(2.0)


def test_hipped_roof_on_xy_plane():
    config = EngineConfig(plane=Plane.XY)
    roof = build_hipped_roof(rect(0, 0, 10, 4), bare(RoofType.HIPPED), config, 0.0)[0]
    assert max(v[2] for v in roof.vertices) == pytest.approx(SLOPE * 2.0)
    assert all(roof.triangle_normal(i)[2] > 0 for i in range(roof.triangle_count()))


def test_gabled_rectangle_has_vertical_gables(config):
    drafts = build_gabled_roof(rect(0, 0, 10, 4), bare(RoofType.GABLED), config, 0.0)
    roof = drafts[0]
    peak = SLOPE * 2.0

    assert max(heights(roof)) == pytest.approx(peak)
    vertical = [
        i for i in range(roof.triangle_count())
        if abs(roof.triangle_normal(i)[1]) < 1e-9
    ]
    assert len(vertical) == 2

    gable_tops = {
        (round(x, 6), round(z, 6)) for x, y, z in roof.vertices
        if y == pytest.approx(peak) and round(x, 6) in (0.0, 10.0)
    }
    assert gable_tops == {(0.0, 2.0), (10.0, 2.0)}

    # Slopes still cover the footprint; gables add two 4 x peak triangles
    assert projected_area(roof) == pytest.approx(40.0)
    assert roof.surface_area() == pytest.approx(
        40.0 / math.cos(math.radians(25.0)) + 2 * 0.5 * 4.0 * peak
    )


def test_gables_face_outward(config):
    roof = build_gabled_roof(rect(0, 0, 10, 4), bare(RoofType.GABLED), config, 0.0)[0]
    for i in range(roof.triangle_count()):
        normal = roof.triangle_normal(i)
        if abs(normal[1]) > 1e-9:
            assert normal[1] > 0
            continue
        a, _, _ = roof.triangles[i]
        x = roof.vertices[a][0]
        assert normal[0] * (x - 5.0) > 0


def test_flat_roof_top_and_base(config):
    roof = RoofConfig(kind=RoofType.FLAT, thickness=0.2, overhang=0.2)
    top, base = build_flat_roof(rect(0, 0, 10, 4), roof, config, 3.0)

    assert all(y == pytest.approx(3.2) for y in heights(top))
    assert top.surface_area() == pytest.approx(10.4 * 4.4)
    assert all(n == (0.0, 1.0, 0.0) for n in top.normals)

    band = 2 * (10.4 + 4.4) * 0.2
    soffit = 10.4 * 4.4 - 40.0
    assert base.surface_area() == pytest.approx(band + soffit)
    assert min(heights(base)) == pytest.approx(3.0)


def test_soffit_faces_down(config):
    roof = RoofConfig(kind=RoofType.FLAT, thickness=0.0, overhang=0.5)
    top, base = build_flat_roof(rect(0, 0, 4, 4), roof, config, 3.0)
    assert base.surface_area() == pytest.approx(5.0 * 5.0 - 16.0)
    assert all(base.triangle_normal(i)[1] < 0 for i in range(base.triangle_count()))


def test_build_roof_defaults_to_wall_height(config):
    drafts = build_roof(rect(0, 0, 4, 4), RoofConfig(kind=RoofType.FLAT), config)
    assert min(heights(drafts[0])) == pytest.approx(config.wall_height + 0.2)


def test_build_roof_paints_drafts(config):
    red = (1.0, 0.0, 0.0, 1.0)
    drafts = build_roof(rect(0, 0, 4, 4), RoofConfig(kind=RoofType.HIPPED, color=red), config)
    assert len(drafts) == 2
    for draft in drafts:
        assert draft.colors == [red] * draft.vertex_count()


def test_build_roofs_over_building(config, l_shape):
    result = build_roofs([l_shape], [], bare(RoofType.HIPPED), config, base_height=0.0)
    assert not result.per_room
    assert result.warnings == []
    assert result.merged.triangle_count() == sum(d.triangle_count() for d in result.drafts)


def test_build_roofs_retries_per_room(config, monkeypatch):
    real = roof_builder.ROOF_GENERATORS[RoofType.HIPPED]

    def fails_on_building(footprint, roof, engine_config, base_height):
        if len(footprint) > 4:
            raise SkeletonError("wavefront stalled")
        return real(footprint, roof, engine_config, base_height)

    monkeypatch.setitem(roof_builder.ROOF_GENERATORS, RoofType.HIPPED, fails_on_building)

    # Collinear vertex on the east side: five points, so the building roof fails
    building = [[Point2D(0, 0), Point2D(8, 0), Point2D(8, 2), Point2D(8, 4), Point2D(0, 4)]]
    rooms = [rect(0, 0, 4, 4), rect(4, 0, 8, 4)]

    result = build_roofs(building, rooms, bare(RoofType.HIPPED), config, base_height=0.0)

    assert result.per_room
    assert result.flat_fallbacks == 0
    assert len(result.drafts) == 2
    assert len(result.warnings) == 1


def test_build_roofs_falls_back_to_flat(config, monkeypatch):
    def always_fails(footprint, roof, engine_config, base_height):
        raise SkeletonError("no skeleton")

    monkeypatch.setitem(roof_builder.ROOF_GENERATORS, RoofType.GABLED, always_fails)

    rooms = [rect(0, 0, 4, 4), rect(4, 0, 8, 4)]
    result = build_roofs([rect(0, 0, 8, 4)], rooms, bare(RoofType.GABLED), config)

    assert result.per_room
    assert result.flat_fallbacks == 2
    assert len(result.drafts) == 2
    assert len(result.warnings) == 3
    assert all(
        v[1] == pytest.approx(config.wall_height)
        for draft in result.drafts for v in draft.vertices
    )


H_SHAPE = [
    Point2D(0, 0), Point2D(2, 0), Point2D(2, 2), Point2D(4, 2), Point2D(4, 0), Point2D(6, 0),
    Point2D(6, 6), Point2D(4, 6), Point2D(4, 4), Point2D(2, 4), Point2D(2, 6), Point2D(0, 6),
]


def test_hipped_h_shape(config):
    roof = build_hipped_roof(H_SHAPE, bare(RoofType.HIPPED), config, 0.0)[0]
    assert max(heights(roof)) == pytest.approx(SLOPE * 1.0)
    assert projected_area(roof) == pytest.approx(28.0)


@pytest.mark.parametrize("overhang", [0.0, 0.2, 0.5])
def test_build_roofs_keeps_hipped_roof_on_h_shape(config, overhang):
    roof = RoofConfig(kind=RoofType.HIPPED, overhang=overhang)
    result = build_roofs([H_SHAPE], [H_SHAPE], roof, config)

    assert not result.per_room
    assert result.flat_fallbacks == 0
    assert result.warnings == []
    top = config.wall_height + roof.thickness + SLOPE * (1.0 + overhang)
    assert max(v[1] for v in result.merged.vertices) == pytest.approx(top)
