# =============================================================================
# L5 Decision - DWA (Dynamic Window Approach) Algorithm
# =============================================================================
# Samples velocities around the current one, simulates each over a short
# horizon and scores the trajectories on obstacle clearance, heading
# towards the target and endpoint distance to the target.
# =============================================================================

import logging
import numpy as np
from typing import List, Optional, Tuple

from L3_world import Point, WorldModel, AGENT_RADIUS, DEFAULT_DT

from ..base import BaseDecisionMaker
from ..types import TrajectoryCandidate, DWANavigationDecision

# Import configuration
from ..config import (
    MAX_AGENT_SPEED,
    MAX_ROTATION_SPEED,
    REST_SPEED_THRESHOLD,
    DWA_VELOCITY_SAMPLES,
    DWA_MIN_SAMPLE_SPEED,
    DWA_PREDICT_TIME,
    DWA_PREDICT_STEPS,
    DWA_WEIGHT_OBSTACLE,
    DWA_WEIGHT_DIRECTION,
    DWA_WEIGHT_DISTANCE,
    DWA_CLEARANCE_NORM,
    DWA_DISTANCE_DECAY
)

logger = logging.getLogger(__name__)


def _round_half_away(values: np.ndarray) -> np.ndarray:
    return np.sign(values) * np.floor(np.abs(values) + 0.5)


class DWADecisionMaker(BaseDecisionMaker):
    """
    Dynamic Window Approach based local planner.

    Each call samples velocity candidates around the current velocity and
    evaluates their predicted trajectories based on:
    - Clearance from static obstacles and from moving obstacles at their
      predicted positions
    - Heading towards the target waypoint
    - Closeness of the trajectory endpoint to the target

    The current velocity is always candidate 0, so a stable choice is
    available whenever it is still safe.

    Best for: Worlds with moving hazards where the global path alone is
              not enough to stay clear.
    """

    def __init__(self,
                 max_speed: float = MAX_AGENT_SPEED,
                 max_rotation_speed: float = MAX_ROTATION_SPEED,
                 agent_radius: float = AGENT_RADIUS,
                 control_dt: float = DEFAULT_DT,
                 velocity_samples: int = DWA_VELOCITY_SAMPLES,
                 predict_time: float = DWA_PREDICT_TIME,
                 predict_steps: int = DWA_PREDICT_STEPS,
                 weight_obstacle: float = DWA_WEIGHT_OBSTACLE,
                 weight_direction: float = DWA_WEIGHT_DIRECTION,
                 weight_distance: float = DWA_WEIGHT_DISTANCE):
        """
        Initialize DWA decision maker.

        Args:
            max_speed: Maximum agent speed (grid units/s)
            max_rotation_speed: Maximum heading perturbation (rad)
            agent_radius: Agent body radius
            control_dt: Tick length the chosen velocity is applied for (s)
            velocity_samples: Number of perturbed candidates per call
            predict_time: Trajectory prediction horizon (seconds)
            predict_steps: Integration steps over the horizon
            weight_obstacle: Weight of the clearance term
            weight_direction: Weight of the heading term
            weight_distance: Weight of the endpoint distance term
        """
        super().__init__(
            max_speed=max_speed,
            max_rotation_speed=max_rotation_speed,
            agent_radius=agent_radius,
            control_dt=control_dt
        )

        self.velocity_samples = velocity_samples
        self.predict_time = predict_time
        self.predict_steps = max(1, int(predict_steps))
        self.weight_obstacle = weight_obstacle
        self.weight_direction = weight_direction
        self.weight_distance = weight_distance

    @property
    def step_times(self) -> np.ndarray:
        """
        Elapsed time at each recorded trajectory point: the end of the next
        control tick, then every integration step over the horizon.
        """
        step_dt = self.predict_time / self.predict_steps
        times = step_dt * np.arange(1, self.predict_steps + 1)
        if 0 < self.control_dt < times[-1] and not np.any(np.isclose(times, self.control_dt)):
            times = np.sort(np.append(times, self.control_dt))
        return times

    def sample_velocities(self,
                          position: Point,
                          velocity: np.ndarray,
                          target: Point,
                          rng: np.random.Generator,
                          max_speed: float,
                          max_rotation_speed: float) -> np.ndarray:
        """
        Draw velocity candidates around the current velocity.

        Returns:
            (N + 1, 2) array, row 0 is the current velocity
        """
        speed = float(np.linalg.norm(velocity))
        heading = self.reference_heading(position, velocity, target)

        speeds = np.clip(
            speed + rng.uniform(-max_speed, max_speed, self.velocity_samples),
            min(DWA_MIN_SAMPLE_SPEED, max_speed),
            max_speed
        )
        headings = heading + rng.uniform(-max_rotation_speed, max_rotation_speed,
                                         self.velocity_samples)

        perturbed = np.column_stack([speeds * np.cos(headings), speeds * np.sin(headings)])
        return np.vstack([np.asarray(velocity, dtype=float).reshape(1, 2), perturbed])

    def simulate_trajectory(self, position: Point, velocity: np.ndarray,
                            world: WorldModel) -> Tuple[np.ndarray, bool]:
        """
        Forward-integrate a constant velocity over the horizon.

        Returns:
            (points, in_bounds): points are cut off at the first point that
            leaves the grid, in which case in_bounds is False
        """
        points = position.as_array() + np.outer(self.step_times, velocity)
        cells = _round_half_away(points)
        inside = ((cells[:, 0] >= 0) & (cells[:, 0] < world.width) &
                  (cells[:, 1] >= 0) & (cells[:, 1] < world.height))
        if inside.all():
            return points, True
        first_out = int(np.argmin(inside))
        return points[:first_out], False

    def trajectory_clearance(self, points: np.ndarray, world: WorldModel) -> float:
        """
        Smallest surface gap between the agent and any obstacle along the
        trajectory. Moving obstacles are checked at their predicted position
        at the time each point is reached. +inf without obstacles.
        """
        clearance = float('inf')
        times = self.step_times[:len(points)]

        static = world.get_static_obstacles()
        if static:
            centers = np.array([obs.position for obs in static])
            radii = np.array([obs.radius for obs in static])
            dists = np.linalg.norm(points[:, None, :] - centers[None, :, :], axis=2)
            clearance = min(clearance, float(np.min(dists - radii - self.agent_radius)))

        for obs in world.get_dynamic_obstacles():
            predicted = np.array([obs.predicted_position(t) for t in times])
            dists = np.linalg.norm(points - predicted, axis=1)
            clearance = min(clearance, float(np.min(dists - obs.radius - self.agent_radius)))

        return clearance

    def evaluate_candidate(self,
                           velocity: np.ndarray,
                           position: Point,
                           target: Point,
                           world: WorldModel) -> TrajectoryCandidate:
        """Simulate and score one velocity candidate."""
        points, in_bounds = self.simulate_trajectory(position, velocity, world)
        candidate = TrajectoryCandidate(velocity=velocity, points=points)

        if not in_bounds:
            candidate.valid = False
            candidate.invalid_reason = "leaves bounds"
            return candidate

        candidate.min_clearance = self.trajectory_clearance(points, world)
        if candidate.min_clearance < 0:
            candidate.valid = False
            candidate.invalid_reason = "collision"
            return candidate

        target_pos = target.as_array()
        to_target = target_pos - position.as_array()
        speed = np.linalg.norm(velocity)
        target_dist = np.linalg.norm(to_target)

        # 1. Obstacle score: normalized clearance
        candidate.obstacle_score = float(np.clip(candidate.min_clearance / DWA_CLEARANCE_NORM, 0, 1))

        # 2. Direction score: cosine similarity rescaled to [0, 1]
        if speed > REST_SPEED_THRESHOLD and target_dist > REST_SPEED_THRESHOLD:
            cos_sim = float(np.dot(velocity, to_target) / (speed * target_dist))
            candidate.direction_score = (cos_sim + 1.0) / 2.0
        else:
            candidate.direction_score = 0.5

        # 3. Distance score: endpoint closeness to target
        endpoint_dist = float(np.linalg.norm(points[-1] - target_pos))
        candidate.distance_score = float(np.exp(-endpoint_dist / DWA_DISTANCE_DECAY))

        candidate.score = (
            self.weight_obstacle * candidate.obstacle_score +
            self.weight_direction * candidate.direction_score +
            self.weight_distance * candidate.distance_score
        )
        return candidate

    def decide(self,
               world: WorldModel,
               position: Point,
               velocity: np.ndarray,
               target: Point,
               rng: Optional[np.random.Generator] = None,
               max_speed: Optional[float] = None,
               max_rotation_speed: Optional[float] = None) -> DWANavigationDecision:
        """
        Make a navigation decision using the DWA sampler.

        Args:
            world: World model (bounds and obstacles)
            position: Agent position
            velocity: Current agent velocity [vx, vy]
            target: Waypoint to move towards
            rng: Random generator for this call (fresh one if omitted)
            max_speed: Override of the instance speed limit
            max_rotation_speed: Override of the instance rotation limit

        Returns:
            DWANavigationDecision with the selected velocity
        """
        if rng is None:
            rng = np.random.default_rng()
        max_speed, max_rotation_speed = self.resolve_limits(max_speed, max_rotation_speed)
        velocity = np.asarray(velocity, dtype=float)

        samples = self.sample_velocities(position, velocity, target, rng,
                                         max_speed, max_rotation_speed)
        candidates: List[TrajectoryCandidate] = [
            self.evaluate_candidate(v, position, target, world) for v in samples
        ]
        valid = [c for c in candidates if c.valid]

        if not valid:
            logger.warning("DWA: no valid candidate at %s, keeping current velocity", position)
            return DWANavigationDecision(
                velocity=self.clamp_speed(velocity, max_speed),
                target=target,
                reason="DWA: no valid trajectory, keeping velocity",
                fallback=True,
                total_candidates=len(candidates)
            )

        # First maximum wins, so the current velocity is kept on ties
        best = max(valid, key=lambda c: c.score)
        chosen = self.clamp_speed(best.velocity, max_speed)

        return DWANavigationDecision(
            velocity=chosen,
            target=target,
            reason=f"DWA: v={np.linalg.norm(chosen):.2f}, score={best.score:.3f}",
            score=best.score,
            predicted_trajectory=[Point.from_array(p) for p in best.points],
            valid_candidates=len(valid),
            total_candidates=len(candidates),
            min_clearance=best.min_clearance
        )
