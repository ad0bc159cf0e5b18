# =============================================================================
# L4 Planning - A* Global Grid Search
# =============================================================================
# One-shot search over the 8-connected grid from the agent's cell to the
# goal cell. Only static obstacles block cells; moving obstacles are left
# to the local planner.
# =============================================================================

import heapq
import logging
import math
from typing import Dict, List, Optional

from L3_world import Point, WorldModel, GridCell

from .config import (
    NEIGHBOR_OFFSETS,
    ORTHOGONAL_MOVE_COST,
    DIAGONAL_MOVE_COST
)
from .types import SearchNode, QueueEntry, NO_PARENT

logger = logging.getLogger(__name__)


class AStarPlanner:
    """
    A* grid planner.

    Node storage is an arena (list) of SearchNode; each node's parent is an
    index into the same list, so reconstruction is a simple index walk and
    the whole search state is discarded at once when plan() returns.

    The heuristic is the Euclidean distance to the goal. Expansion uses a
    closed set on pop and skips stale queue entries, so results are
    deterministic for a given obstacle set.
    """

    def __init__(self):
        self.last_stats: Dict[str, object] = {}

    @staticmethod
    def heuristic(x1: int, y1: int, x2: int, y2: int) -> float:
        return math.hypot(x1 - x2, y1 - y2)

    @staticmethod
    def move_cost(dx: int, dy: int) -> float:
        return DIAGONAL_MOVE_COST if dx != 0 and dy != 0 else ORTHOGONAL_MOVE_COST

    @staticmethod
    def _reconstruct(arena: List[SearchNode], index: int) -> List[Point]:
        path = []
        while index != NO_PARENT:
            node = arena[index]
            path.append(Point.from_cell(node.cell))
            index = node.parent
        path.reverse()
        return path

    def plan(self, world: WorldModel, start: Point,
             goal: Optional[Point] = None) -> List[Point]:
        """
        Search a route from `start` to `goal` on the world grid.

        Args:
            world: Grid world (bounds and static obstacles)
            start: Start point, snapped to its grid cell
            goal: Goal point, defaults to the world goal

        Returns:
            Ordered list of cell-center points from start to goal,
            or an empty list when no route exists
        """
        if goal is None:
            goal = world.get_goal()

        start_cell: GridCell = start.to_grid_cell()
        goal_cell: GridCell = goal.to_grid_cell()
        gx, gy = goal_cell

        self.last_stats = {'nodes_expanded': 0, 'nodes_generated': 0, 'success': False}

        if not world.is_cell_in_bounds(start_cell) or not world.is_cell_free(goal_cell):
            logger.debug("No search: start %s or goal %s unusable", start_cell, goal_cell)
            return []

        arena: List[SearchNode] = [
            SearchNode(start_cell[0], start_cell[1], 0.0,
                       self.heuristic(start_cell[0], start_cell[1], gx, gy), NO_PARENT)
        ]
        open_set: List[QueueEntry] = [QueueEntry(arena[0].f, 0)]
        best_g: Dict[GridCell, float] = {start_cell: 0.0}
        closed = set()

        while open_set:
            entry = heapq.heappop(open_set)
            node = arena[entry.index]
            cell = node.cell

            if cell in closed:
                continue

            if cell == goal_cell:
                path = self._reconstruct(arena, entry.index)
                self.last_stats.update(
                    nodes_expanded=len(closed),
                    nodes_generated=len(arena),
                    success=True,
                    cost=node.g
                )
                logger.debug("A* found %d-point path (cost %.3f, %d expanded)",
                             len(path), node.g, len(closed))
                return path

            closed.add(cell)

            for dx, dy in NEIGHBOR_OFFSETS:
                neighbor = (node.x + dx, node.y + dy)
                if neighbor in closed or not world.is_cell_free(neighbor):
                    continue

                new_g = node.g + self.move_cost(dx, dy)
                if new_g >= best_g.get(neighbor, float('inf')):
                    continue
                best_g[neighbor] = new_g

                arena.append(SearchNode(
                    neighbor[0], neighbor[1], new_g,
                    self.heuristic(neighbor[0], neighbor[1], gx, gy),
                    entry.index
                ))
                heapq.heappush(open_set, QueueEntry(arena[-1].f, len(arena) - 1))

        self.last_stats.update(nodes_expanded=len(closed), nodes_generated=len(arena))
        logger.debug("A* exhausted open set after %d expansions", len(closed))
        return []
