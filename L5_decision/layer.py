# =============================================================================
# L5 Decision - Local Planning Layer
# =============================================================================
# Wraps a local planner with waypoint selection along the global path.
# This is the single entry point the simulation controller calls per tick.
# =============================================================================

import numpy as np
from typing import Dict, List, Optional, Type

from L3_world import Point, WorldModel

from .base import BaseDecisionMaker
from .types import NavigationDecision
from .algorithms import DWADecisionMaker, PursuitDecisionMaker


# Local planner variants selectable by name
LOCAL_PLANNERS: Dict[str, Type[BaseDecisionMaker]] = {
    'dwa': DWADecisionMaker,
    'pursuit': PursuitDecisionMaker,
}


def get_local_planner_class(variant: str) -> Type[BaseDecisionMaker]:
    """Look up a local planner class by variant name."""
    try:
        return LOCAL_PLANNERS[variant]
    except KeyError:
        raise ValueError(
            f"Unknown local planner '{variant}', expected one of {sorted(LOCAL_PLANNERS)}"
        ) from None


class LocalPlanningLayer:
    """
    Complete local planning layer.

    Integrates:
    - Waypoint selection (nearest path point, then the one after it)
    - The configured local planner for velocity selection
    """

    def __init__(self, navigator: Optional[BaseDecisionMaker] = None):
        """
        Initialize local planning layer.

        Args:
            navigator: Local planner instance (DWA by default)
        """
        self.navigator = navigator if navigator is not None else DWADecisionMaker()
        self.last_decision: Optional[NavigationDecision] = None

    @staticmethod
    def select_target(path: List[Point], position: Point) -> Optional[Point]:
        """
        Waypoint to steer for: the point after the one closest to the agent.

        The last path point is its own successor. Returns None for an
        empty path.
        """
        if not path:
            return None
        nearest = LocalPlanningLayer.nearest_index(path, position)
        return path[min(nearest + 1, len(path) - 1)]

    @staticmethod
    def nearest_index(path: List[Point], position: Point) -> int:
        """Index of the path point closest to the agent, -1 for an empty path."""
        if not path:
            return -1
        points = np.array([[p.x, p.y] for p in path])
        dists = np.linalg.norm(points - position.as_array(), axis=1)
        return int(np.argmin(dists))

    def get_navigation_decision(self,
                                world: WorldModel,
                                path: List[Point],
                                position: Point,
                                velocity: np.ndarray,
                                rng: Optional[np.random.Generator] = None,
                                max_speed: Optional[float] = None,
                                max_rotation_speed: Optional[float] = None
                                ) -> Optional[NavigationDecision]:
        """Get the velocity decision for this tick, or None without a path."""
        target = self.select_target(path, position)
        if target is None:
            return None
        self.last_decision = self.navigator.decide(
            world, position, velocity, target,
            rng=rng,
            max_speed=max_speed,
            max_rotation_speed=max_rotation_speed
        )
        return self.last_decision

    def reset(self):
        """Reset the planning layer."""
        self.navigator.reset()
        self.last_decision = None
