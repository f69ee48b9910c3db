import pytest

from floorplan_geometry.config import EngineConfig, Plane, DEFAULT_CONFIG
from floorplan_geometry.models.building import Opening, OpeningType, RoofConfig, RoofType


def test_defaults():
    assert DEFAULT_CONFIG.wall_height == 3.0
    assert DEFAULT_CONFIG.plane is Plane.XZ
    assert RoofConfig().pitch == 25.0


def test_plane_up_vectors():
    assert Plane.XZ.up == (0.0, 1.0, 0.0)
    assert Plane.XY.up == (0.0, 0.0, 1.0)


@pytest.mark.parametrize("field_name", [
    "wall_height", "door_height",
])
def test_non_positive_heights_rejected(field_name):
    with pytest.raises(ValueError):
        EngineConfig(**{field_name: 0.0})


def test_negative_thickness_rejected():
    with pytest.raises(ValueError):
        EngineConfig(exterior_wall_thickness=-0.1)


def test_effective_door_height_capped_by_wall():
    config = EngineConfig(wall_height=2.0, door_height=2.5)
    assert config.effective_door_height() == 2.0
    assert config.effective_door_height(1.8) == 1.8
    assert config.effective_door_height(3.0) == 2.5


def test_roof_config_validation():
    with pytest.raises(ValueError):
        RoofConfig(pitch=90.0)
    with pytest.raises(ValueError):
        RoofConfig(overhang=-1.0)
    with pytest.raises(ValueError):
        RoofConfig(pitch=2.0)
    assert RoofConfig(pitch=75.0).pitch == 75.0


def test_roof_type_from_name():
    assert RoofType.from_name(" Hipped ") is RoofType.HIPPED
    assert RoofType.GABLED.is_pitched
    assert not RoofType.FLAT.is_pitched
    with pytest.raises(ValueError):
        RoofType.from_name("mansard")


def test_opening_type_falls_back_to_generic():
    assert OpeningType.from_name("DOOR") is OpeningType.DOOR
    assert OpeningType.from_name("arch") is OpeningType.GENERIC


def test_opening_requires_positive_size():
    with pytest.raises(ValueError):
        Opening(OpeningType.WINDOW, width=0.0, height=1.0)


def test_opening_subdivisions_must_be_whole():
    window = Opening(OpeningType.WINDOW, 1.0, 1.0, subdivisions_h=3.0)
    assert window.subdivisions_h == 3
    assert isinstance(window.subdivisions_h, int)
    for bad in (1.5, 0, None):
        with pytest.raises(ValueError):
            Opening(OpeningType.WINDOW, 1.0, 1.0, subdivisions_v=bad)


def test_at_offset_copies_opening():
    window = Opening(OpeningType.WINDOW, 1.2, 1.0, vertical_offset=0.3, subdivisions_h=2)
    placed = window.at_offset(2.5)
    assert placed.offset == 2.5
    assert placed.vertical_offset == 0.3
    assert placed.subdivisions_h == 2
    assert window.offset == 0.0
