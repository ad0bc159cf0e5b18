# =============================================================================
# L3 World Model - Map Configuration Loader
# =============================================================================
# Builds a WorldModel from the JSON map file. Any unreadable or malformed
# file raises ConfigurationError; nothing is returned half-built.
#
# Schema:
#   { width, height, start: [x, y], goal: [x, y],
#     static_obstacles: [ {x, y, radius?} ],
#     dynamic_obstacles: [ {x, y, movement_type: "linear" | "circular",
#                           speed?, direction?, center?, radius?,
#                           angular_speed?} ] }
# =============================================================================

import json
import logging
import math
from typing import Any, Dict, List, Sequence

from .config import (
    MAP_STATIC_OBSTACLE_RADIUS,
    DEFAULT_LINEAR_SPEED,
    DEFAULT_LINEAR_DIRECTION,
    DEFAULT_ANGULAR_SPEED,
    DEFAULT_ORBIT_RADIUS
)
from .obstacles import MotionType, Obstacle, ObstacleGenerator
from .types import Point
from .world import WorldModel

logger = logging.getLogger(__name__)


class ConfigurationError(Exception):
    """Map configuration could not be read or is malformed."""


def _require(data: Dict[str, Any], key: str, where: str) -> Any:
    if key not in data:
        raise ConfigurationError(f"{where}: missing required field '{key}'")
    return data[key]


def _as_number(value: Any, where: str) -> float:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise ConfigurationError(f"{where}: expected a number, got {value!r}")
    if not math.isfinite(value):
        raise ConfigurationError(f"{where}: expected a finite number, got {value!r}")
    return float(value)


def _as_pair(value: Any, where: str) -> Sequence[float]:
    if not isinstance(value, (list, tuple)) or len(value) != 2:
        raise ConfigurationError(f"{where}: expected [x, y], got {value!r}")
    return _as_number(value[0], where), _as_number(value[1], where)


def _as_point(value: Any, where: str) -> Point:
    x, y = _as_pair(value, where)
    return Point(x, y)


def _as_dimension(value: Any, where: str) -> int:
    if isinstance(value, bool) or not isinstance(value, int) or value <= 0:
        raise ConfigurationError(f"{where}: expected a positive integer, got {value!r}")
    return value


def _as_list(data: Dict[str, Any], key: str) -> List[Dict[str, Any]]:
    entries = data.get(key, [])
    if not isinstance(entries, list):
        raise ConfigurationError(f"'{key}' must be a list")
    for i, entry in enumerate(entries):
        if not isinstance(entry, dict):
            raise ConfigurationError(f"{key}[{i}]: expected an object, got {entry!r}")
    return entries


def _build_dynamic_obstacle(entry: Dict[str, Any], where: str) -> Obstacle:
    position = Point(_as_number(_require(entry, 'x', where), f"{where}.x"),
                     _as_number(_require(entry, 'y', where), f"{where}.y"))
    movement = _require(entry, 'movement_type', where)

    if movement == MotionType.LINEAR.value:
        speed = _as_number(entry.get('speed', DEFAULT_LINEAR_SPEED), f"{where}.speed")
        direction = _as_pair(entry.get('direction', list(DEFAULT_LINEAR_DIRECTION)),
                             f"{where}.direction")
        return ObstacleGenerator.create_linear_obstacle(position, speed, direction)

    if movement == MotionType.CIRCULAR.value:
        angular_speed = _as_number(entry.get('angular_speed', DEFAULT_ANGULAR_SPEED),
                                   f"{where}.angular_speed")
        if 'center' in entry:
            center = _as_point(entry['center'], f"{where}.center")
            if 'radius' in entry:
                orbit_radius = _as_number(entry['radius'], f"{where}.radius")
            else:
                orbit_radius = position.distance_to(center)
        else:
            orbit_radius = _as_number(entry.get('radius', DEFAULT_ORBIT_RADIUS),
                                      f"{where}.radius")
            center = Point(position.x - orbit_radius, position.y)
        if orbit_radius < 0:
            raise ConfigurationError(f"{where}.radius: orbit radius must be >= 0")
        return ObstacleGenerator.create_circular_obstacle(
            position, center, orbit_radius, angular_speed
        )

    raise ConfigurationError(
        f"{where}.movement_type: expected 'linear' or 'circular', got {movement!r}"
    )


def world_from_dict(data: Dict[str, Any]) -> WorldModel:
    """
    Build a world from an already-parsed map configuration.

    Obstacles that land out of bounds or on an occupied point are skipped
    with a warning, the same way interactive edits are rejected.

    Args:
        data: Parsed JSON object

    Returns:
        Fully initialized WorldModel

    Raises:
        ConfigurationError: If a required field is missing or has the wrong type
    """
    if not isinstance(data, dict):
        raise ConfigurationError("map configuration must be a JSON object")

    width = _as_dimension(_require(data, 'width', 'map'), 'map.width')
    height = _as_dimension(_require(data, 'height', 'map'), 'map.height')
    start = _as_point(_require(data, 'start', 'map'), 'map.start')
    goal = _as_point(_require(data, 'goal', 'map'), 'map.goal')

    world = WorldModel(width=width, height=height, start=start, goal=goal)

    for i, entry in enumerate(_as_list(data, 'static_obstacles')):
        where = f"static_obstacles[{i}]"
        position = Point(_as_number(_require(entry, 'x', where), f"{where}.x"),
                         _as_number(_require(entry, 'y', where), f"{where}.y"))
        radius = _as_number(entry.get('radius', MAP_STATIC_OBSTACLE_RADIUS), f"{where}.radius")
        if radius <= 0:
            raise ConfigurationError(f"{where}.radius: must be positive")
        if not world.add_static_obstacle(position, radius):
            logger.warning("Skipping %s at %s: out of bounds or occupied", where, position)

    for i, entry in enumerate(_as_list(data, 'dynamic_obstacles')):
        where = f"dynamic_obstacles[{i}]"
        obstacle = _build_dynamic_obstacle(entry, where)
        if not world.add_dynamic_obstacle(obstacle):
            logger.warning("Skipping %s at %s: out of bounds or occupied", where, obstacle.point)

    logger.info("Loaded %dx%d map: %d static, %d dynamic obstacles",
                width, height, len(world.get_static_obstacles()),
                len(world.get_dynamic_obstacles()))
    return world


def load_map(filename: str) -> WorldModel:
    """Load a map configuration file. Raises ConfigurationError on failure."""
    try:
        with open(filename, 'r', encoding='utf-8') as f:
            data = json.load(f)
    except OSError as e:
        raise ConfigurationError(f"cannot read map file {filename}: {e}") from e
    except json.JSONDecodeError as e:
        raise ConfigurationError(f"invalid JSON in {filename}: {e}") from e
    return world_from_dict(data)
