# =============================================================================
# L5 Decision - Base Decision Maker
# =============================================================================
# Abstract base class with common functionality shared by all local
# planners: speed limits, angle normalization, velocity clamping.
# =============================================================================

import numpy as np
from abc import ABC, abstractmethod
from typing import Optional, Tuple

from L3_world import Point, WorldModel, AGENT_RADIUS, DEFAULT_DT

from .types import NavigationDecision

# Import configuration
from .config import (
    MAX_AGENT_SPEED,
    MAX_ROTATION_SPEED,
    REST_SPEED_THRESHOLD
)


class BaseDecisionMaker(ABC):
    """
    Abstract base class for all local planners.

    Provides common functionality:
    - Speed / rotation limits with per-call overrides
    - Angle normalization
    - Velocity clamping to the speed limit

    Subclasses must implement the decide() method with their specific algorithm.
    """

    def __init__(self,
                 max_speed: float = MAX_AGENT_SPEED,
                 max_rotation_speed: float = MAX_ROTATION_SPEED,
                 agent_radius: float = AGENT_RADIUS,
                 control_dt: float = DEFAULT_DT):
        """
        Initialize base decision maker.

        Args:
            max_speed: Maximum agent speed (grid units/s)
            max_rotation_speed: Maximum heading change per decision (rad)
            agent_radius: Agent body radius used for collision checks
            control_dt: Tick length the chosen velocity is applied for (s)
        """
        self.max_speed = max_speed
        self.max_rotation_speed = max_rotation_speed
        self.agent_radius = agent_radius
        self.control_dt = control_dt

    def reset(self):
        """Reset internal state to initial values."""

    # =========================================================================
    # Utility Methods (shared by all algorithms)
    # =========================================================================

    @staticmethod
    def normalize_angle(angle: float) -> float:
        """Normalize angle to [-pi, pi]."""
        while angle > np.pi:
            angle -= 2 * np.pi
        while angle < -np.pi:
            angle += 2 * np.pi
        return angle

    @staticmethod
    def clamp_speed(velocity: np.ndarray, max_speed: float) -> np.ndarray:
        speed = np.linalg.norm(velocity)
        if speed > max_speed > 0:
            return velocity * (max_speed / speed)
        if max_speed <= 0:
            return np.zeros(2)
        return velocity.copy()

    @staticmethod
    def bearing(source: Point, target: Point) -> float:
        return float(np.arctan2(target.y - source.y, target.x - source.x))

    def reference_heading(self, position: Point, velocity: np.ndarray,
                          target: Point) -> float:
        """Current heading, or the bearing to the target when at rest."""
        if np.linalg.norm(velocity) > REST_SPEED_THRESHOLD:
            return float(np.arctan2(velocity[1], velocity[0]))
        return self.bearing(position, target)

    def resolve_limits(self, max_speed: Optional[float],
                       max_rotation_speed: Optional[float]) -> Tuple[float, float]:
        return (self.max_speed if max_speed is None else max_speed,
                self.max_rotation_speed if max_rotation_speed is None else max_rotation_speed)

    @abstractmethod
    def decide(self,
               world: WorldModel,
               position: Point,
               velocity: np.ndarray,
               target: Point,
               rng: Optional[np.random.Generator] = None,
               max_speed: Optional[float] = None,
               max_rotation_speed: Optional[float] = None) -> NavigationDecision:
        """
        Choose the velocity for the next tick.

        Args:
            world: World model (bounds and obstacles, read only)
            position: Agent position
            velocity: Current agent velocity [vx, vy]
            target: Waypoint to move towards
            rng: Random generator scoped to this call
            max_speed: Override of the instance speed limit
            max_rotation_speed: Override of the instance rotation limit

        Returns:
            NavigationDecision with the commanded velocity
        """
