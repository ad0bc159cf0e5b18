# =============================================================================
# L3 World Model - Grid World
# =============================================================================

import logging
import numpy as np
from typing import List, Optional, Tuple

from .config import (
    DEFAULT_GRID_WIDTH,
    DEFAULT_GRID_HEIGHT,
    AGENT_RADIUS,
    STATIC_OBSTACLE_RADIUS,
    OBSTACLE_REMOVE_TOLERANCE
)
from .obstacles import Obstacle, ObstacleGenerator
from .types import GridCell, Point, cell_in_bounds

logger = logging.getLogger(__name__)


class WorldModel:
    """
    Discretized 2D world.
    Manages grid size, start/goal, static and dynamic obstacles and the
    cached planned path.

    Editing calls never raise: invalid edits are rejected and reported
    through the return value. Every structural change clears the cached
    path and bumps `revision`.
    """

    def __init__(self, width: int = DEFAULT_GRID_WIDTH,
                 height: int = DEFAULT_GRID_HEIGHT,
                 start: Optional[Point] = None,
                 goal: Optional[Point] = None):
        """
        Initialize the grid world.

        Start and goal are stored as given; validity is checked by the
        simulation controller when a run starts.

        Args:
            width: Number of grid columns
            height: Number of grid rows
            start: Start point (defaults to (0, 0))
            goal: Goal point (defaults to the opposite corner)
        """
        self.width = int(width)
        self.height = int(height)
        self._start = start if start is not None else Point(0.0, 0.0)
        self._goal = goal if goal is not None else Point(float(width - 1), float(height - 1))

        self._static_obstacles: List[Obstacle] = []
        self._dynamic_obstacles: List[Obstacle] = []
        self._path: List[Point] = []
        self.revision = 0

    @property
    def bounds(self) -> Tuple[int, int]:
        return self.width, self.height

    def _structure_changed(self):
        self._path = []
        self.revision += 1

    # =========================================================================
    # Queries
    # =========================================================================

    def get_start(self) -> Point:
        return self._start

    def get_goal(self) -> Point:
        return self._goal

    def get_static_obstacles(self) -> Tuple[Obstacle, ...]:
        return tuple(self._static_obstacles)

    def get_dynamic_obstacles(self) -> Tuple[Obstacle, ...]:
        return tuple(self._dynamic_obstacles)

    def get_all_obstacles(self) -> Tuple[Obstacle, ...]:
        return tuple(self._static_obstacles) + tuple(self._dynamic_obstacles)

    def is_in_bounds(self, point: Point) -> bool:
        return cell_in_bounds(point.to_grid_cell(), self.width, self.height)

    def is_cell_in_bounds(self, cell: GridCell) -> bool:
        return cell_in_bounds(cell, self.width, self.height)

    def is_statically_obstructed(self, point: Point) -> bool:
        return any(obs.contains(point) for obs in self._static_obstacles)

    def is_dynamically_obstructed(self, point: Point) -> bool:
        return any(obs.contains(point) for obs in self._dynamic_obstacles)

    def is_obstructed(self, point: Point) -> bool:
        """True if any static or dynamic obstacle footprint contains the point."""
        return self.is_statically_obstructed(point) or self.is_dynamically_obstructed(point)

    def is_cell_free(self, cell: GridCell) -> bool:
        """Cell usable by the global planner: in bounds, no static obstacle."""
        return (self.is_cell_in_bounds(cell) and
                not self.is_statically_obstructed(Point.from_cell(cell)))

    def check_collision(self, point: Point, agent_radius: float = AGENT_RADIUS) -> bool:
        """True if an agent of `agent_radius` at `point` touches any obstacle."""
        return any(obs.intersects(point, agent_radius) for obs in self.get_all_obstacles())

    def min_clearance(self, point: Point, agent_radius: float = AGENT_RADIUS) -> float:
        """
        Smallest gap between the agent surface and any obstacle surface.

        Negative when colliding; +inf in an empty world.
        """
        obstacles = self.get_all_obstacles()
        if not obstacles:
            return float('inf')
        centers = np.array([obs.position for obs in obstacles])
        radii = np.array([obs.radius for obs in obstacles])
        dists = np.linalg.norm(centers - point.as_array(), axis=1)
        return float(np.min(dists - radii - agent_radius))

    # =========================================================================
    # Editing
    # =========================================================================

    def _can_place(self, point: Point) -> bool:
        return self.is_in_bounds(point) and not self.is_obstructed(point)

    def set_start(self, point: Point) -> bool:
        if not self._can_place(point):
            logger.debug("Rejected start %s", point)
            return False
        self._start = point
        self._structure_changed()
        return True

    def set_goal(self, point: Point) -> bool:
        if not self._can_place(point):
            logger.debug("Rejected goal %s", point)
            return False
        self._goal = point
        self._structure_changed()
        return True

    def add_static_obstacle(self, position: Point,
                            radius: float = STATIC_OBSTACLE_RADIUS) -> bool:
        if not self._can_place(position):
            logger.debug("Rejected static obstacle at %s", position)
            return False
        self._static_obstacles.append(
            ObstacleGenerator.create_static_obstacle(position, radius)
        )
        self._structure_changed()
        return True

    def add_dynamic_obstacle(self, obstacle: Obstacle) -> bool:
        position = obstacle.point
        if not obstacle.is_dynamic or not self._can_place(position):
            logger.debug("Rejected dynamic obstacle at %s", position)
            return False
        self._dynamic_obstacles.append(obstacle)
        self._structure_changed()
        return True

    def remove_obstacle(self, point: Point,
                        tolerance: float = OBSTACLE_REMOVE_TOLERANCE) -> int:
        """
        Remove every static or dynamic obstacle within `tolerance` of point.

        Returns:
            Number of obstacles removed
        """
        def keep(obs: Obstacle) -> bool:
            return obs.point.distance_to(point) > tolerance

        before = len(self._static_obstacles) + len(self._dynamic_obstacles)
        self._static_obstacles = [obs for obs in self._static_obstacles if keep(obs)]
        self._dynamic_obstacles = [obs for obs in self._dynamic_obstacles if keep(obs)]
        removed = before - len(self._static_obstacles) - len(self._dynamic_obstacles)

        if removed:
            self._structure_changed()
        return removed

    def clear_obstacles(self):
        self._static_obstacles.clear()
        self._dynamic_obstacles.clear()
        self._structure_changed()

    # =========================================================================
    # Path cache
    # =========================================================================

    def get_path(self) -> List[Point]:
        return list(self._path)

    def set_path(self, path: List[Point]):
        self._path = list(path)

    def clear_path(self):
        self._path = []

    def has_path(self) -> bool:
        return bool(self._path)

    # =========================================================================
    # Time evolution
    # =========================================================================

    def update(self, dt: float):
        for obs in self._dynamic_obstacles:
            obs.advance(dt, self.bounds)

    def reset(self):
        for obs in self._dynamic_obstacles:
            obs.reset()
