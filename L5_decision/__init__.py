# =============================================================================
# L5 Decision Package
# =============================================================================
# Local planning layer for grid navigation with multiple algorithm options.
#
# Responsibilities:
# - Per-tick velocity selection (DWA, Pursuit)
# - Waypoint selection along the global path
# - Avoidance of static and moving obstacles over a short horizon
#
# Usage:
#   # Use the complete layer
#   from L5_decision import LocalPlanningLayer
#   layer = LocalPlanningLayer()
#   decision = layer.get_navigation_decision(world, path, position, velocity)
#
#   # Or import an algorithm maker directly
#   from L5_decision import DWADecisionMaker
#   nav = DWADecisionMaker(max_speed=1.5)
#
# Note: Global routing is handled by the L4_planning package.
# =============================================================================

# Types and data structures
from .types import (
    TrajectoryCandidate,
    NavigationDecision,
    DWANavigationDecision
)

# Core components
from .base import BaseDecisionMaker

# Navigation algorithms
from .algorithms import (
    DWADecisionMaker,
    PursuitDecisionMaker
)

# Complete planning layer
from .layer import (
    LocalPlanningLayer,
    LOCAL_PLANNERS,
    get_local_planner_class
)

__all__ = [
    # Types
    'TrajectoryCandidate',
    'NavigationDecision',
    'DWANavigationDecision',

    # Base class
    'BaseDecisionMaker',

    # Algorithm makers
    'DWADecisionMaker',
    'PursuitDecisionMaker',

    # Complete layer
    'LocalPlanningLayer',
    'LOCAL_PLANNERS',
    'get_local_planner_class',
]

__version__ = '3.0.0'
