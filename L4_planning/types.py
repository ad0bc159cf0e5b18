# =============================================================================
# L4 Planning - Types and Data Structures
# =============================================================================
# Search nodes live in an arena (a plain list); parents are arena indices.
# =============================================================================

from dataclasses import dataclass

# Parent index of the root node
NO_PARENT = -1


@dataclass
class SearchNode:
    """A* node stored in the search arena."""
    x: int
    y: int
    g: float            # Cost from start
    h: float            # Heuristic estimate to goal
    parent: int         # Arena index of the parent, NO_PARENT for the root

    @property
    def f(self) -> float:
        return self.g + self.h

    @property
    def cell(self):
        return self.x, self.y


@dataclass(order=True)
class QueueEntry:
    """Priority queue entry; ties on f resolve by arena index (FIFO)."""
    f: float
    index: int
