# =============================================================================
# L5 Decision - Pursuit Navigation Algorithm
# =============================================================================
# Constant-speed waypoint follower. Heads straight for the target without
# looking at obstacles; relies entirely on the global path for safety.
# =============================================================================

import numpy as np
from typing import Optional

from L3_world import Point, WorldModel, AGENT_RADIUS, DEFAULT_DT

from ..base import BaseDecisionMaker
from ..types import NavigationDecision

# Import configuration
from ..config import (
    MAX_AGENT_SPEED,
    MAX_ROTATION_SPEED,
    PURSUIT_SPEED,
    PURSUIT_ARRIVAL_DISTANCE
)


class PursuitDecisionMaker(BaseDecisionMaker):
    """
    Direct waypoint pursuit.

    1. Points the velocity at the target waypoint
    2. Moves at a constant cruise speed, capped by max_speed
    3. Stops when within the arrival distance of the target

    Best for: Static worlds where the A* path is already collision free.
    """

    def __init__(self,
                 max_speed: float = MAX_AGENT_SPEED,
                 max_rotation_speed: float = MAX_ROTATION_SPEED,
                 agent_radius: float = AGENT_RADIUS,
                 control_dt: float = DEFAULT_DT,
                 cruise_speed: float = PURSUIT_SPEED,
                 arrival_distance: float = PURSUIT_ARRIVAL_DISTANCE):
        super().__init__(
            max_speed=max_speed,
            max_rotation_speed=max_rotation_speed,
            agent_radius=agent_radius,
            control_dt=control_dt
        )
        self.cruise_speed = cruise_speed
        self.arrival_distance = arrival_distance

    def decide(self,
               world: WorldModel,
               position: Point,
               velocity: np.ndarray,
               target: Point,
               rng: Optional[np.random.Generator] = None,
               max_speed: Optional[float] = None,
               max_rotation_speed: Optional[float] = None) -> NavigationDecision:
        max_speed, _ = self.resolve_limits(max_speed, max_rotation_speed)

        offset = target.as_array() - position.as_array()
        distance = float(np.linalg.norm(offset))

        if distance < self.arrival_distance:
            return NavigationDecision(
                velocity=np.zeros(2),
                target=target,
                reason="Pursuit: at waypoint"
            )

        speed = min(self.cruise_speed, max_speed)
        return NavigationDecision(
            velocity=offset / distance * speed,
            target=target,
            reason=f"Pursuit: v={speed:.2f}, {distance:.2f} to waypoint"
        )
