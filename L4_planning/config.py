# =============================================================================
# L4 Planning - Configuration
# =============================================================================
# All configurable parameters for the global grid search layer.
# =============================================================================

import math

# =============================================================================
# GRID CONNECTIVITY
# =============================================================================
# 8-connected neighbourhood, clockwise from "up"
NEIGHBOR_OFFSETS = (
    (-1, 0), (-1, 1), (0, 1), (1, 1),
    (1, 0), (1, -1), (0, -1), (-1, -1),
)

# Move costs
ORTHOGONAL_MOVE_COST = 1.0
DIAGONAL_MOVE_COST = math.sqrt(2.0)
