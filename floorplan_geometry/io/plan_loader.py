"""
JSON plan loader for the floor-plan geometry engine.

Reads a building plan from a JSON document:

    {
      "config":   {"wall_height": 3.0, "plane": "xz", ...},
      "rooms":    [{"name": "kitchen", "contour": [[0, 0], [4, 0], ...]}],
      "openings": [{"kind": "door", "width": 0.9, "height": 2.1,
                    "position": [2, 0]}],
      "roof":     {"kind": "hipped", "thickness": 0.2, "overhang": 0.2}
    }

Every section is optional. Unusable rooms and openings are skipped with
a warning; a malformed document raises PlanLoadError.
"""

from dataclasses import dataclass, field, fields
import json
import logging
from typing import Any, Dict, List, Optional

from ..config import EngineConfig, Plane
from ..models.geometry import Point2D
from ..models.building import (
    BuildingPlan,
    Opening,
    OpeningType,
    RoofConfig,
    RoofType,
    RoomInput,
    contour_from_tuples,
)

logger = logging.getLogger(__name__)


class PlanLoadError(Exception):
    """Raised when a plan document cannot be read."""
    pass


@dataclass
class PlanFile:
    """Result of loading a plan document."""
    plan: BuildingPlan
    config: EngineConfig
    warnings: List[str] = field(default_factory=list)


def load_plan(filepath: str) -> PlanFile:
    """
    Load a building plan from a JSON file.

    Args:
        filepath: Path to the plan document

    Returns:
        PlanFile with plan, engine configuration and warnings

    Raises:
        PlanLoadError: If the file cannot be read or parsed
    """
    logger.info(f"Loading plan: {filepath}")
    try:
        with open(filepath, 'r', encoding='utf-8') as f:
            data = json.load(f)
    except (OSError, json.JSONDecodeError) as e:
        raise PlanLoadError(f"Cannot read plan {filepath}: {e}") from e

    return parse_plan(data)


def parse_plan(data: Dict[str, Any]) -> PlanFile:
    """
    Build a plan from an already-decoded JSON document.

    Raises:
        PlanLoadError: If a section has the wrong shape or invalid values
    """
    if not isinstance(data, dict):
        raise PlanLoadError("Plan document must be a JSON object")

    warnings: List[str] = []
    config = _parse_config(data.get('config') or {})

    rooms = []
    for index, room_data in enumerate(data.get('rooms') or []):
        room = _parse_room(index, room_data, warnings)
        if room is not None:
            rooms.append(room)

    openings = []
    for index, opening_data in enumerate(data.get('openings') or []):
        opening = _parse_opening(index, opening_data, warnings)
        if opening is not None:
            openings.append(opening)

    roof = _parse_roof(data.get('roof') or {})

    logger.debug(
        f"Parsed plan: {len(rooms)} rooms, {len(openings)} openings, "
        f"{roof.kind.value} roof"
    )
    return PlanFile(BuildingPlan(rooms, openings, roof), config, warnings)


def _parse_config(data: Dict[str, Any]) -> EngineConfig:
    known = {f.name for f in fields(EngineConfig)}
    values = {}
    for key, value in data.items():
        if key not in known:
            logger.warning(f"Ignoring unknown config key {key!r}")
            continue
        values[key] = value

    if 'plane' in values:
        try:
            values['plane'] = Plane(str(values['plane']).lower())
        except ValueError as e:
            raise PlanLoadError(f"Unknown plane {values['plane']!r}") from e

    try:
        return EngineConfig(**values)
    except (TypeError, ValueError) as e:
        raise PlanLoadError(f"Invalid config: {e}") from e


def _parse_room(index: int, data: Any, warnings: List[str]) -> Optional[RoomInput]:
    try:
        contour = contour_from_tuples(data['contour'])
    except (KeyError, TypeError, ValueError) as e:
        _warn(warnings, f"Room {index}: unreadable contour ({e}), skipped")
        return None
    return RoomInput(contour, name=data.get('name'))


def _parse_opening(index: int, data: Any, warnings: List[str]) -> Optional[Opening]:
    try:
        kind = OpeningType.from_name(str(data.get('kind', 'opening')))
        position = data.get('position')
        optional = {
            key: data[key]
            for key in (
                'vertical_offset', 'offset', 'has_window', 'frame_size',
                'window_size_h', 'window_size_v', 'subdivisions_h', 'subdivisions_v',
            )
            if key in data
        }
        return Opening(
            kind=kind,
            width=float(data['width']),
            height=float(data['height']),
            position=Point2D(float(position[0]), float(position[1])) if position else None,
            **optional,
        )
    except (AttributeError, KeyError, TypeError, ValueError, IndexError) as e:
        _warn(warnings, f"Opening {index}: invalid record ({e}), skipped")
        return None


def _parse_roof(data: Dict[str, Any]) -> RoofConfig:
    try:
        values = dict(data)
        if 'kind' in values:
            values['kind'] = RoofType.from_name(str(values['kind']))
        if values.get('color') is not None:
            values['color'] = tuple(float(c) for c in values['color'])
        return RoofConfig(**values)
    except (TypeError, ValueError) as e:
        raise PlanLoadError(f"Invalid roof settings: {e}") from e


def _warn(warnings: List[str], message: str) -> None:
    logger.warning(message)
    warnings.append(message)
