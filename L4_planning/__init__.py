# =============================================================================
# L4 Planning Package
# =============================================================================
# Global route planning layer.
#
# Responsibilities:
# - One-shot A* search on the 8-connected grid
# - Static obstacles only; moving obstacles are handled by L5
#
# Usage:
#   from L4_planning import AStarPlanner
#   planner = AStarPlanner()
#   path = planner.plan(world, start=world.get_start())
# =============================================================================

from .types import SearchNode, QueueEntry, NO_PARENT
from .astar import AStarPlanner

__all__ = [
    # Types
    'SearchNode',
    'QueueEntry',
    'NO_PARENT',

    # Planner
    'AStarPlanner',
]

__version__ = '1.0.0'
