# =============================================================================
# L3 World Model - Types and Data Structures
# =============================================================================
# Core value types shared by every layer: continuous points, grid cells,
# agent state and the simulation state machine enumeration.
# =============================================================================

import math
import numpy as np
from dataclasses import dataclass, field
from enum import Enum
from typing import Tuple

from .config import POINT_EPSILON

# Integer grid cell (x, y); compared exactly
GridCell = Tuple[int, int]


def round_half_away(value: float) -> int:
    """Round to the nearest integer, halves away from zero."""
    return int(math.copysign(math.floor(abs(value) + 0.5), value))


def cell_in_bounds(cell: GridCell, width: int, height: int) -> bool:
    return 0 <= cell[0] < width and 0 <= cell[1] < height


@dataclass(frozen=True, eq=False)
class Point:
    """
    Continuous 2D coordinate.

    Equality is tolerant (POINT_EPSILON per axis) because positions are
    produced by integration. Use to_grid_cell() whenever an exact,
    hashable grid coordinate is needed.
    """
    x: float
    y: float

    def __eq__(self, other) -> bool:
        if not isinstance(other, Point):
            return NotImplemented
        return (abs(self.x - other.x) < POINT_EPSILON and
                abs(self.y - other.y) < POINT_EPSILON)

    def __add__(self, other: 'Point') -> 'Point':
        return Point(self.x + other.x, self.y + other.y)

    def __sub__(self, other: 'Point') -> 'Point':
        return Point(self.x - other.x, self.y - other.y)

    def distance_to(self, other: 'Point') -> float:
        return math.hypot(self.x - other.x, self.y - other.y)

    def to_grid_cell(self) -> GridCell:
        return round_half_away(self.x), round_half_away(self.y)

    def as_array(self) -> np.ndarray:
        return np.array([self.x, self.y], dtype=float)

    @classmethod
    def from_array(cls, values) -> 'Point':
        return cls(float(values[0]), float(values[1]))

    @classmethod
    def from_cell(cls, cell: GridCell) -> 'Point':
        return cls(float(cell[0]), float(cell[1]))

    def __repr__(self) -> str:
        return f"Point({self.x:.3f}, {self.y:.3f})"


class SimulationState(Enum):
    """Simulation controller states."""
    IDLE = "IDLE"
    RUNNING = "RUNNING"
    FINISHED = "FINISHED"


@dataclass
class AgentState:
    """Kinematic state of the point agent."""
    position: Point
    velocity: np.ndarray = field(default_factory=lambda: np.zeros(2))

    @property
    def speed(self) -> float:
        return float(np.linalg.norm(self.velocity))
