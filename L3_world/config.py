# =============================================================================
# L3 World Model - Configuration
# =============================================================================
# All configurable parameters for the grid world layer.
# =============================================================================

# =============================================================================
# GRID DEFAULTS
# =============================================================================
# Grid size used when a WorldModel is built without a map file (cells)
DEFAULT_GRID_WIDTH = 50
DEFAULT_GRID_HEIGHT = 50

# Per-axis tolerance for continuous Point equality (grid units)
POINT_EPSILON = 1e-3

# =============================================================================
# AGENT
# =============================================================================
# Agent body radius used by collision queries (grid units)
AGENT_RADIUS = 0.3

# =============================================================================
# OBSTACLE CONFIGURATION
# =============================================================================
# Static obstacle radius when added through the editing API
STATIC_OBSTACLE_RADIUS = 0.5

# Static obstacle radius when a map entry omits "radius"
MAP_STATIC_OBSTACLE_RADIUS = 1.0

# Body radius of every dynamic obstacle
DYNAMIC_OBSTACLE_RADIUS = 0.5

# Tolerance used by remove_obstacle() (grid units)
OBSTACLE_REMOVE_TOLERANCE = 0.5

# =============================================================================
# DYNAMIC OBSTACLE DEFAULTS (map fields that may be omitted)
# =============================================================================
DEFAULT_LINEAR_SPEED = 3.0              # grid units / s
DEFAULT_LINEAR_DIRECTION = (1.0, 0.0)
DEFAULT_ANGULAR_SPEED = 1.0             # rad / s
DEFAULT_ORBIT_RADIUS = 5.0              # grid units

# =============================================================================
# SIMULATION
# =============================================================================
DEFAULT_DT = 0.1                # Tick length (seconds)
GOAL_THRESHOLD = 0.5            # Run finishes when this close to the goal
TRAIL_EPSILON = 0.01            # Minimum displacement recorded in the trail
STALL_TICKS = 100               # Ticks without progress along the route before warning
