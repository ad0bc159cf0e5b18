# =============================================================================
# L5 Decision - Configuration
# =============================================================================
# All configurable parameters for the local planning layer.
# Includes parameters for both local planners (DWA, Pursuit).
# =============================================================================

# =============================================================================
# COMMON AGENT PARAMETERS
# =============================================================================
MAX_AGENT_SPEED = 2.0           # Maximum speed (grid units / s)
MAX_ROTATION_SPEED = 2.0        # Maximum heading perturbation per decision (rad)

# Below this speed the agent counts as "at rest"
REST_SPEED_THRESHOLD = 1e-6

# =============================================================================
# DWA (Dynamic Window Approach) PARAMETERS
# =============================================================================
# Velocity sampling
DWA_VELOCITY_SAMPLES = 20       # Perturbed candidates (baseline not counted)
DWA_MIN_SAMPLE_SPEED = 0.1      # Floor for perturbed speeds

# Trajectory prediction
DWA_PREDICT_TIME = 2.0          # Prediction horizon (seconds)
DWA_PREDICT_STEPS = 10          # Integration steps over the horizon

# Scoring weights
DWA_WEIGHT_OBSTACLE = 0.4       # Obstacle clearance
DWA_WEIGHT_DIRECTION = 0.3      # Heading towards target
DWA_WEIGHT_DISTANCE = 0.3       # Endpoint closeness to target

# Scoring shape
DWA_CLEARANCE_NORM = 2.0        # Clearance (grid units) that earns a full obstacle score
DWA_DISTANCE_DECAY = 10.0       # k in exp(-distance / k)

# =============================================================================
# PURSUIT (direct waypoint following) PARAMETERS
# =============================================================================
PURSUIT_SPEED = 2.0             # Cruise speed (grid units / s)
PURSUIT_ARRIVAL_DISTANCE = 0.1  # Stop when this close to the target
