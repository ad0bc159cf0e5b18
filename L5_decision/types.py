# =============================================================================
# L5 Decision - Types and Data Structures
# =============================================================================
# Local planning results passed back to the simulation controller.
# =============================================================================

import numpy as np
from dataclasses import dataclass, field
from typing import List, Optional

from L3_world import Point


# =============================================================================
# Candidate evaluation
# =============================================================================

@dataclass
class TrajectoryCandidate:
    """One sampled velocity and its simulated short-horizon trajectory."""
    velocity: np.ndarray
    points: np.ndarray                  # (K, 2) positions after each step
    valid: bool = True
    invalid_reason: str = ""
    min_clearance: float = float('inf')
    obstacle_score: float = 0.0
    direction_score: float = 0.0
    distance_score: float = 0.0
    score: float = -float('inf')


# =============================================================================
# Navigation Decision Structures
# =============================================================================

@dataclass
class NavigationDecision:
    """Base navigation decision with core details."""
    velocity: np.ndarray                # Commanded velocity [vx, vy]
    target: Optional[Point]             # Waypoint being pursued
    reason: str                         # Decision reason
    fallback: bool = False              # True if no candidate was usable

    @property
    def speed(self) -> float:
        return float(np.linalg.norm(self.velocity))


@dataclass
class DWANavigationDecision(NavigationDecision):
    """DWA-specific navigation decision with trajectory info."""
    score: float = -float('inf')
    predicted_trajectory: List[Point] = field(default_factory=list)
    valid_candidates: int = 0
    total_candidates: int = 0
    min_clearance: float = float('inf')
