# =============================================================================
# L3 World Model - Obstacles and Motion Model
# =============================================================================
# One tagged obstacle type covers static obstacles and dynamic obstacles
# with linear (bouncing) or circular (orbiting) motion. Behaviour is
# dispatched on the kind / motion type tags.
# =============================================================================

import math
import numpy as np
from dataclasses import dataclass, field
from enum import Enum
from typing import Optional, Tuple, Union

from .config import (
    STATIC_OBSTACLE_RADIUS,
    DYNAMIC_OBSTACLE_RADIUS,
    DEFAULT_LINEAR_DIRECTION
)
from .types import Point, round_half_away, cell_in_bounds


class ObstacleKind(Enum):
    STATIC = "STATIC"
    DYNAMIC = "DYNAMIC"


class MotionType(Enum):
    LINEAR = "linear"
    CIRCULAR = "circular"


@dataclass
class LinearMotion:
    """Straight-line motion that bounces off the grid edges."""
    speed: float
    direction: np.ndarray
    type: MotionType = field(default=MotionType.LINEAR, init=False)

    def copy(self) -> 'LinearMotion':
        return LinearMotion(self.speed, self.direction.copy())


@dataclass
class CircularMotion:
    """Orbital motion around a fixed center."""
    center: np.ndarray
    orbit_radius: float
    angular_speed: float
    angle: float = 0.0
    type: MotionType = field(default=MotionType.CIRCULAR, init=False)

    def copy(self) -> 'CircularMotion':
        return CircularMotion(self.center.copy(), self.orbit_radius,
                              self.angular_speed, self.angle)

    def position_at(self, angle: float) -> np.ndarray:
        return self.center + self.orbit_radius * np.array([np.cos(angle), np.sin(angle)])


Motion = Union[LinearMotion, CircularMotion]


def _position_in_bounds(position: np.ndarray, bounds: Tuple[int, int]) -> bool:
    cell = (round_half_away(position[0]), round_half_away(position[1]))
    return cell_in_bounds(cell, bounds[0], bounds[1])


@dataclass(eq=False)
class Obstacle:
    """
    Static or dynamic circular obstacle.

    Dynamic obstacles keep an immutable copy of their initial pose so that
    reset() can restore them exactly, together with the elapsed time since
    the last reset.
    """
    position: np.ndarray
    radius: float
    kind: ObstacleKind = ObstacleKind.STATIC
    motion: Optional[Motion] = None
    elapsed: float = 0.0

    def __post_init__(self):
        self.position = np.asarray(self.position, dtype=float).copy()
        if self.kind == ObstacleKind.DYNAMIC and self.motion is None:
            raise ValueError("dynamic obstacle requires a motion model")
        self._initial_position = self.position.copy()
        self._initial_motion = self.motion.copy() if self.motion is not None else None

    @property
    def is_dynamic(self) -> bool:
        return self.kind == ObstacleKind.DYNAMIC

    @property
    def point(self) -> Point:
        return Point.from_array(self.position)

    @property
    def initial_point(self) -> Point:
        return Point.from_array(self._initial_position)

    # =========================================================================
    # Geometry
    # =========================================================================

    def contains(self, point: Point) -> bool:
        """True if the point lies inside the obstacle footprint."""
        return self.point.distance_to(point) < self.radius

    def intersects(self, point: Point, agent_radius: float) -> bool:
        return self.point.distance_to(point) < self.radius + agent_radius

    # =========================================================================
    # Motion
    # =========================================================================

    def predicted_position(self, horizon: float) -> np.ndarray:
        """
        Position after `horizon` seconds with unchanged motion parameters.

        Pure query: no state is modified. Boundary bounces are not
        anticipated.
        """
        if self.motion is None:
            return self.position.copy()
        if self.motion.type == MotionType.LINEAR:
            return self.position + self.motion.direction * self.motion.speed * horizon
        motion = self.motion
        return motion.position_at(motion.angle + motion.angular_speed * horizon)

    def advance(self, dt: float, bounds: Tuple[int, int]):
        """
        Integrate the motion model by dt, bouncing off the grid edges.

        Args:
            dt: Time step (seconds)
            bounds: Grid size (width, height)
        """
        if self.motion is None:
            return
        if self.motion.type == MotionType.LINEAR:
            self._advance_linear(dt, bounds)
        else:
            self._advance_circular(dt, bounds)
        self.elapsed += dt

    def _advance_linear(self, dt: float, bounds: Tuple[int, int]):
        motion = self.motion
        width, height = bounds
        next_pos = self.predicted_position(dt)
        next_x, next_y = round_half_away(next_pos[0]), round_half_away(next_pos[1])

        reversed_axis = False
        if next_x < 0 or next_x >= width:
            motion.direction[0] = -motion.direction[0]
            reversed_axis = True
        if next_y < 0 or next_y >= height:
            motion.direction[1] = -motion.direction[1]
            reversed_axis = True

        if reversed_axis:
            next_pos = self.position + motion.direction * motion.speed * dt
            next_pos[0] = np.clip(next_pos[0], 0.0, width - 1)
            next_pos[1] = np.clip(next_pos[1], 0.0, height - 1)

        self.position = next_pos

    def _advance_circular(self, dt: float, bounds: Tuple[int, int]):
        motion = self.motion
        if not _position_in_bounds(self.predicted_position(dt), bounds):
            motion.angular_speed = -motion.angular_speed

        motion.angle = (motion.angle + motion.angular_speed * dt) % (2 * np.pi)
        self.position = motion.position_at(motion.angle)

    def reset(self):
        """Restore the initial pose and motion parameters."""
        self.position = self._initial_position.copy()
        self.motion = self._initial_motion.copy() if self._initial_motion is not None else None
        self.elapsed = 0.0


class ObstacleGenerator:
    """
    Obstacle factory for the grid world.
    Supports static, linear and circular obstacles.
    """

    @staticmethod
    def create_static_obstacle(position: Point,
                               radius: float = STATIC_OBSTACLE_RADIUS) -> Obstacle:
        return Obstacle(position=position.as_array(), radius=radius)

    @staticmethod
    def create_linear_obstacle(position: Point,
                               speed: float,
                               direction: Tuple[float, float] = DEFAULT_LINEAR_DIRECTION,
                               radius: float = DYNAMIC_OBSTACLE_RADIUS) -> Obstacle:
        """
        Create a dynamic obstacle moving in a straight line.

        Args:
            position: Initial position
            speed: Travel speed (grid units per second)
            direction: Heading vector; normalized, speed carries the magnitude
            radius: Obstacle body radius

        Returns:
            Dynamic obstacle with linear motion
        """
        direction = np.asarray(direction, dtype=float)
        norm = np.linalg.norm(direction)
        if norm > 0:
            direction = direction / norm
        return Obstacle(
            position=position.as_array(),
            radius=radius,
            kind=ObstacleKind.DYNAMIC,
            motion=LinearMotion(speed=float(speed), direction=direction)
        )

    @staticmethod
    def create_circular_obstacle(position: Point,
                                 center: Point,
                                 orbit_radius: float,
                                 angular_speed: float,
                                 radius: float = DYNAMIC_OBSTACLE_RADIUS) -> Obstacle:
        """
        Create a dynamic obstacle orbiting `center`.

        The starting angle is the bearing from center to position, and the
        obstacle is placed on its orbit at that angle.

        Args:
            position: Requested initial position
            center: Orbit center
            orbit_radius: Orbit radius (grid units)
            angular_speed: Angular speed (rad/s), sign gives the direction
            radius: Obstacle body radius

        Returns:
            Dynamic obstacle with circular motion
        """
        angle = math.atan2(position.y - center.y, position.x - center.x)
        motion = CircularMotion(
            center=center.as_array(),
            orbit_radius=float(orbit_radius),
            angular_speed=float(angular_speed),
            angle=angle
        )
        return Obstacle(
            position=motion.position_at(angle),
            radius=radius,
            kind=ObstacleKind.DYNAMIC,
            motion=motion
        )
