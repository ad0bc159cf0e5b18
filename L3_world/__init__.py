# =============================================================================
# L3 World Model Package
# =============================================================================
# Grid world layer for point-agent navigation.
#
# Responsibilities:
# - Continuous points and grid cells
# - Static and dynamic obstacles (linear / circular motion model)
# - World state: bounds, start/goal, obstruction and collision queries
# - Map configuration loading
#
# Usage:
#   from L3_world import load_map, Point
#   world = load_map("maps/default_maze.json")
#   world.add_static_obstacle(Point(3, 4))
#   world.update(dt=0.1)
# =============================================================================

from .types import Point, GridCell, AgentState, SimulationState
from .obstacles import (
    Obstacle,
    ObstacleKind,
    MotionType,
    LinearMotion,
    CircularMotion,
    ObstacleGenerator
)
from .world import WorldModel
from .map_loader import ConfigurationError, load_map, world_from_dict

# Re-export config for convenience
from .config import (
    AGENT_RADIUS,
    STATIC_OBSTACLE_RADIUS,
    DYNAMIC_OBSTACLE_RADIUS,
    DEFAULT_DT,
    GOAL_THRESHOLD,
    TRAIL_EPSILON,
    STALL_TICKS
)

__all__ = [
    # Types
    'Point',
    'GridCell',
    'AgentState',
    'SimulationState',

    # Obstacles
    'Obstacle',
    'ObstacleKind',
    'MotionType',
    'LinearMotion',
    'CircularMotion',
    'ObstacleGenerator',

    # World
    'WorldModel',

    # Map loading
    'ConfigurationError',
    'load_map',
    'world_from_dict',

    # Config exports
    'AGENT_RADIUS',
    'STATIC_OBSTACLE_RADIUS',
    'DYNAMIC_OBSTACLE_RADIUS',
    'DEFAULT_DT',
    'GOAL_THRESHOLD',
    'TRAIL_EPSILON',
    'STALL_TICKS',
]

__version__ = '3.0.0'
