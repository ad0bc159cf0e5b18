# =============================================================================
# SIMULATION - Layer Coordinator
# =============================================================================
# Starts the simulation coordinating:
# - L3: World Model Layer (grid, start/goal, static and moving obstacles)
# - L4: Planning Layer (A* global route)
# - L5: Decision Layer (per-tick local planner)
# =============================================================================

import numpy as np
import sys
import os
import argparse
import logging
import matplotlib.pyplot as plt
import matplotlib.animation as animation
from matplotlib.patches import Circle, FancyArrow
from matplotlib.widgets import Button
import pandas as pd
import json
from datetime import datetime
from typing import List, Optional, Union

# Import dei Layer
from L3_world import (
    WorldModel,
    Point,
    AgentState,
    SimulationState,
    Obstacle,
    ConfigurationError,
    load_map,
    AGENT_RADIUS,
    DEFAULT_DT,
    GOAL_THRESHOLD,
    TRAIL_EPSILON,
    STALL_TICKS
)
from L4_planning import AStarPlanner
from L5_decision import (
    BaseDecisionMaker,
    NavigationDecision,
    DWANavigationDecision,
    LocalPlanningLayer,
    LOCAL_PLANNERS,
    get_local_planner_class
)
from L5_decision.config import MAX_AGENT_SPEED, MAX_ROTATION_SPEED

logger = logging.getLogger(__name__)

DEFAULT_MAP = os.path.join(os.path.dirname(os.path.abspath(__file__)), "maps", "default_maze.json")
DEFAULT_STEPS = 5000


# =============================================================================
# Run Metrics (for evaluation)
# =============================================================================
class RunMetrics:
    """Per-tick record of a run, summarised and exported on request."""

    COLUMNS = ['time', 'x', 'y', 'vx', 'vy', 'speed',
               'target_x', 'target_y', 'clearance', 'fallback']

    def __init__(self):
        self.records = []
        self.planning_failures = []
        self.stalls = []

    def reset(self):
        self.records = []
        self.planning_failures = []
        self.stalls = []

    def record_tick(self, current_time: float, position: Point, velocity: np.ndarray,
                    decision: Optional[NavigationDecision], clearance: float):
        target = decision.target if decision is not None else None
        self.records.append({
            'time': current_time,
            'x': position.x,
            'y': position.y,
            'vx': float(velocity[0]),
            'vy': float(velocity[1]),
            'speed': float(np.linalg.norm(velocity)),
            'target_x': target.x if target is not None else np.nan,
            'target_y': target.y if target is not None else np.nan,
            'clearance': clearance,
            'fallback': bool(decision.fallback) if decision is not None else False
        })

    def record_planning_failure(self, current_time: float, revision: int):
        self.planning_failures.append({'time': current_time, 'revision': revision})

    def record_stall(self, current_time: float, position: Point):
        self.stalls.append({'time': current_time, 'x': position.x, 'y': position.y})

    def to_dataframe(self) -> pd.DataFrame:
        return pd.DataFrame(self.records, columns=self.COLUMNS)

    def summary(self) -> dict:
        df = self.to_dataframe()
        metrics = {
            'ticks': len(df),
            'simulation_time': float(df['time'].iloc[-1]) if len(df) else 0.0,
            'planning_failures': len(self.planning_failures),
            'stalls': len(self.stalls),
            'fallback_count': int(df['fallback'].sum()) if len(df) else 0,
        }

        if len(df):
            steps = np.diff(df[['x', 'y']].to_numpy(), axis=0)
            metrics['distance_travelled'] = float(np.linalg.norm(steps, axis=1).sum())
            metrics['mean_speed'] = float(df['speed'].mean())
            metrics['max_speed'] = float(df['speed'].max())
            finite = df['clearance'][np.isfinite(df['clearance'])]
            metrics['min_clearance'] = float(finite.min()) if len(finite) else None
        else:
            metrics['distance_travelled'] = 0.0
            metrics['mean_speed'] = 0.0
            metrics['max_speed'] = 0.0
            metrics['min_clearance'] = None

        return metrics

    def export(self, directory: str, prefix: str = "run") -> dict:
        """Write the tick log (CSV) and summary (JSON). Returns the file paths."""
        timestamp = datetime.now().strftime('%Y%m%d_%H%M%S')
        os.makedirs(directory, exist_ok=True)

        csv_file = os.path.join(directory, f"{prefix}_ticks_{timestamp}.csv")
        self.to_dataframe().to_csv(csv_file, index=False, encoding='utf-8')

        json_file = os.path.join(directory, f"{prefix}_summary_{timestamp}.json")
        output = {
            'timestamp': datetime.now().isoformat(),
            'metrics': self.summary(),
            'planning_failures': self.planning_failures,
            'stalls': self.stalls
        }
        with open(json_file, 'w', encoding='utf-8') as f:
            json.dump(output, f, indent=2, ensure_ascii=False, default=str)

        return {'ticks': csv_file, 'summary': json_file}


# =============================================================================
# Simulation Controller
# =============================================================================
class SimulationController:
    """
    Main controller that coordinates the three layers.

    Owns the run state machine (IDLE -> RUNNING -> FINISHED, any -> IDLE on
    reset), the agent kinematics and the traversed trail. Only start(),
    update() and reset() mutate; everything else is a read-only query for
    the presentation layer.
    """

    def __init__(self, world: WorldModel,
                 local_planner: Union[str, BaseDecisionMaker] = 'dwa',
                 max_speed: float = MAX_AGENT_SPEED,
                 max_rotation_speed: float = MAX_ROTATION_SPEED,
                 rng_seed: Optional[int] = None,
                 dt: float = DEFAULT_DT,
                 steps: int = DEFAULT_STEPS,
                 goal_threshold: float = GOAL_THRESHOLD,
                 agent_radius: float = AGENT_RADIUS,
                 stall_ticks: int = STALL_TICKS):
        """
        Args:
            world: World model to drive
            local_planner: Variant name ('dwa', 'pursuit') or a planner instance
            max_speed: Agent speed limit (grid units/s)
            max_rotation_speed: Heading perturbation limit per decision (rad)
            rng_seed: Seed for reproducible runs; each tick gets its own generator
            dt: Tick length used by step()
            steps: Tick budget used by run()
            goal_threshold: Distance to the goal that finishes the run
            agent_radius: Agent body radius
            stall_ticks: Ticks without getting closer to the goal before a
                stall is reported
        """
        self.world = world
        self.dt = dt
        self.steps = steps
        self.rng_seed = rng_seed
        self.goal_threshold = goal_threshold
        self.agent_radius = agent_radius
        self.stall_ticks = stall_ticks
        self._max_speed = max_speed
        self._max_rotation_speed = max_rotation_speed

        if isinstance(local_planner, str):
            NavigatorClass = get_local_planner_class(local_planner)
            navigator = NavigatorClass(max_speed=max_speed,
                                       max_rotation_speed=max_rotation_speed,
                                       agent_radius=agent_radius,
                                       control_dt=dt)
            self.local_planner_name = local_planner
        else:
            navigator = local_planner
            self.local_planner_name = type(local_planner).__name__

        # Layer 4: global route
        self.planner = AStarPlanner()
        # Layer 5: local planning
        self.navigation = LocalPlanningLayer(navigator)

        self.metrics = RunMetrics()
        self._state = SimulationState.IDLE
        self._agent = AgentState(position=world.get_start())
        self._trail: List[Point] = []
        self._elapsed = 0.0
        self._tick = 0
        self._failed_revision: Optional[int] = None
        self._best_goal_distance = float('inf')
        self._best_route_index = -1
        self._ticks_without_progress = 0
        self.show_path = False
        self.last_decision: Optional[NavigationDecision] = None

    # =========================================================================
    # Control surface
    # =========================================================================

    def _endpoint_valid(self, point: Point) -> bool:
        return self.world.is_in_bounds(point) and not self.world.is_obstructed(point)

    def start(self) -> bool:
        """
        Begin a run from the world start point.

        Returns:
            True if the run started; False (nothing changed) when start or
            goal is out of bounds or obstructed
        """
        start, goal = self.world.get_start(), self.world.get_goal()
        if not self._endpoint_valid(start) or not self._endpoint_valid(goal):
            logger.warning("Cannot start: start %s or goal %s is out of bounds or obstructed",
                           start, goal)
            return False

        self._clear_run()
        self._trail = [start]
        self._state = SimulationState.RUNNING
        logger.info("Run started: %s -> %s (%s)", start, goal, self.local_planner_name)
        return True

    def reset(self):
        """Abort any run and return to IDLE. Safe to call at any time."""
        self._clear_run()
        self._state = SimulationState.IDLE

    def _clear_run(self):
        self.world.clear_path()
        self.world.reset()
        self.navigation.reset()
        self.metrics.reset()
        self._agent = AgentState(position=self.world.get_start())
        self._trail = []
        self._elapsed = 0.0
        self._tick = 0
        self._failed_revision = None
        self._best_goal_distance = float('inf')
        self._best_route_index = -1
        self._ticks_without_progress = 0
        self.show_path = False
        self.last_decision = None

    def replan(self) -> bool:
        """Discard the current route and search again from the agent position."""
        if self._state != SimulationState.RUNNING:
            return False
        self.world.clear_path()
        self._failed_revision = None
        return self._plan()

    def _plan(self) -> bool:
        # A failed search is only retried once the world structure changes
        if self._failed_revision == self.world.revision:
            return False

        path = self.planner.plan(self.world, self._agent.position)
        if not path:
            self._failed_revision = self.world.revision
            self.metrics.record_planning_failure(self._elapsed, self.world.revision)
            logger.warning("No path from %s to %s; waiting for the map to change",
                           self._agent.position, self.world.get_goal())
            return False

        self._failed_revision = None
        self._best_route_index = -1
        self.world.set_path(path)
        logger.debug("Planned %d-point path", len(path))
        return True

    def _tick_rng(self) -> Optional[np.random.Generator]:
        if self.rng_seed is None:
            return None
        return np.random.default_rng([self.rng_seed, self._tick])

    def update(self, dt: float):
        """Advance the run by dt seconds. No-op unless RUNNING."""
        if self._state != SimulationState.RUNNING:
            return

        self._elapsed += dt
        self._tick += 1
        self.world.update(dt)

        if not self.world.has_path() and not self._plan():
            return

        position = self._agent.position
        decision = self.navigation.get_navigation_decision(
            self.world,
            self.world.get_path(),
            position,
            self._agent.velocity,
            rng=self._tick_rng(),
            max_speed=self._max_speed,
            max_rotation_speed=self._max_rotation_speed
        )
        self.last_decision = decision
        velocity = decision.velocity.copy()

        new_position = Point(position.x + velocity[0] * dt, position.y + velocity[1] * dt)
        self._agent = AgentState(position=new_position, velocity=velocity)
        if new_position.distance_to(position) > TRAIL_EPSILON:
            self._trail.append(new_position)

        self.metrics.record_tick(
            self._elapsed, new_position, velocity, decision,
            self.world.min_clearance(new_position, self.agent_radius)
        )

        if new_position.distance_to(self.world.get_goal()) < self.goal_threshold:
            if self._trail[-1] != new_position:
                self._trail.append(new_position)
            self.world.set_path(self._trail)
            self.show_path = True
            self._state = SimulationState.FINISHED
            logger.info("Goal reached after %.1fs (%d trail points)",
                        self._elapsed, len(self._trail))
        else:
            self._track_progress(new_position)

    def _track_progress(self, position: Point):
        # Progress: further along the route, or closer to the goal
        distance = position.distance_to(self.world.get_goal())
        route_index = LocalPlanningLayer.nearest_index(self.world.get_path(), position)
        if (route_index > self._best_route_index or
                distance < self._best_goal_distance - TRAIL_EPSILON):
            self._best_route_index = max(route_index, self._best_route_index)
            self._best_goal_distance = min(distance, self._best_goal_distance)
            self._ticks_without_progress = 0
            return

        self._ticks_without_progress += 1
        if self._ticks_without_progress == self.stall_ticks:
            self.metrics.record_stall(self._elapsed, position)
            logger.warning("No progress towards %s for %d ticks at %s; the route may be "
                           "too narrow for the local planner",
                           self.world.get_goal(), self.stall_ticks, position)

    def step(self) -> dict:
        """
        Executes one simulation step of length self.dt.

        Returns:
            Dictionary with all current frame data
        """
        self.update(self.dt)
        return {
            'time': self._elapsed,
            'state': self._state,
            'position': self._agent.position,
            'velocity': self._agent.velocity.copy(),
            'decision': self.last_decision,
            'goal_reached': self.is_finished
        }

    def run(self, steps: Optional[int] = None) -> dict:
        """Run headless until finished or the tick budget is spent."""
        budget = self.steps if steps is None else steps
        if self._state == SimulationState.IDLE and not self.start():
            return self.metrics.summary()
        for _ in range(budget):
            if self._state != SimulationState.RUNNING:
                break
            self.update(self.dt)
        return self.metrics.summary()

    # =========================================================================
    # Query surface
    # =========================================================================

    @property
    def state(self) -> SimulationState:
        return self._state

    @property
    def is_idle(self) -> bool:
        return self._state == SimulationState.IDLE

    @property
    def is_running(self) -> bool:
        return self._state == SimulationState.RUNNING

    @property
    def is_finished(self) -> bool:
        return self._state == SimulationState.FINISHED

    @property
    def max_speed(self) -> float:
        return self._max_speed

    @property
    def max_rotation_speed(self) -> float:
        return self._max_rotation_speed

    def get_start(self) -> Point:
        return self.world.get_start()

    def get_goal(self) -> Point:
        return self.world.get_goal()

    def get_current_position(self) -> Point:
        return self._agent.position

    def get_agent_state(self) -> AgentState:
        return AgentState(position=self._agent.position, velocity=self._agent.velocity.copy())

    def get_path(self) -> List[Point]:
        return self.world.get_path()

    def get_traversed_trail(self) -> List[Point]:
        return list(self._trail)

    def get_static_obstacles(self) -> tuple:
        return self.world.get_static_obstacles()

    def get_dynamic_obstacles(self) -> tuple:
        return self.world.get_dynamic_obstacles()

    def get_simulation_time(self) -> float:
        return self._elapsed

    def is_in_bounds(self, point: Point) -> bool:
        return self.world.is_in_bounds(point)

    def check_collision(self, point: Point, agent_radius: Optional[float] = None) -> bool:
        return self.world.check_collision(
            point, self.agent_radius if agent_radius is None else agent_radius
        )

    def save_logs(self, log_dir: str = "log") -> dict:
        """Saves the run log and metrics, then prints a summary."""
        files = self.metrics.export(log_dir, prefix=f"run_{self.local_planner_name}")
        print(f"Log saved: {files['ticks']}")
        print(f"Metrics saved: {files['summary']}")
        return files


def print_summary(controller: SimulationController, metrics: dict):
    print(f"\n{'='*60}")
    print("RUN SUMMARY")
    print(f"{'='*60}")
    print(f"State: {controller.state.value}")
    print(f"Simulated time: {controller.get_simulation_time():.1f}s | Ticks: {metrics['ticks']}")
    print(f"Distance travelled: {metrics['distance_travelled']:.2f} | "
          f"Mean speed: {metrics['mean_speed']:.2f}")
    if metrics['min_clearance'] is not None:
        print(f"Min clearance: {metrics['min_clearance']:.2f}")
    print(f"Fallbacks: {metrics['fallback_count']} | "
          f"Planning failures: {metrics['planning_failures']} | "
          f"Stalls: {metrics['stalls']}")
    print(f"{'='*60}\n")


# =============================================================================
# Visualization
# =============================================================================
class SimulationVisualizer:
    """
    Simulation visualization with matplotlib.
    Reads the controller through its query surface only.
    """

    def __init__(self, controller: SimulationController, save_logs: bool = False,
                 log_dir: str = "log"):
        self.controller = controller
        self.save_logs = save_logs
        self.log_dir = log_dir

        # Setup figure
        self.fig = plt.figure(figsize=(12, 10))
        gs = self.fig.add_gridspec(4, 1, hspace=0.3,
                                   left=0.08, right=0.97, top=0.95, bottom=0.08)
        self.ax_main = self.fig.add_subplot(gs[:3, 0])
        self.ax_info = self.fig.add_subplot(gs[3, 0])

        # Buttons
        ax_start = plt.axes([0.30, 0.01, 0.15, 0.04])
        ax_reset = plt.axes([0.55, 0.01, 0.15, 0.04])
        self.btn_start = Button(ax_start, 'Start', color='lightgreen')
        self.btn_reset = Button(ax_reset, 'Reset', color='lightcoral')
        self.btn_start.on_clicked(lambda e: self.controller.start())
        self.btn_reset.on_clicked(lambda e: self.controller.reset())

        self.fig.canvas.mpl_connect('close_event', self._on_close)

    def _on_close(self, event):
        if self.save_logs:
            print("\n" + "="*60)
            print("SAVING LOGS AND METRICS...")
            print("="*60)
            self.controller.save_logs(self.log_dir)

    def _draw_obstacles(self, obstacles, face: str, edge: str):
        for obs in obstacles:
            self.ax_main.add_patch(Circle(obs.position, obs.radius, fc=face, ec=edge,
                                          lw=1.5, alpha=0.8, zorder=4))

    def _draw_velocity(self, obs: Obstacle):
        velocity = (obs.predicted_position(1.0) - obs.position) * 0.5
        if np.linalg.norm(velocity) > 0.05:
            self.ax_main.add_patch(FancyArrow(obs.position[0], obs.position[1],
                                              velocity[0], velocity[1],
                                              width=0.05, head_width=0.2, head_length=0.15,
                                              fc='purple', ec='indigo', alpha=0.7, zorder=5))

    def animate(self, frame: int):
        """Animation function."""
        controller = self.controller
        data = controller.step()
        world = controller.world
        position = data['position']
        decision = data['decision']

        # === Main View ===
        self.ax_main.clear()
        self.ax_main.set_xlim(-0.5, world.width - 0.5)
        self.ax_main.set_ylim(-0.5, world.height - 0.5)
        self.ax_main.set_aspect('equal')
        self.ax_main.grid(True, alpha=0.25, linestyle='--')

        self._draw_obstacles(controller.get_static_obstacles(), 'lightgray', 'dimgray')
        self._draw_obstacles(controller.get_dynamic_obstacles(), 'gold', 'darkorange')
        for obs in controller.get_dynamic_obstacles():
            self._draw_velocity(obs)

        # Planned route (the frozen trail once finished)
        path = controller.get_path()
        if path:
            pts = np.array([[p.x, p.y] for p in path])
            style = 'g-' if controller.show_path else 'b:'
            self.ax_main.plot(pts[:, 0], pts[:, 1], style, alpha=0.6, linewidth=1.5, zorder=3)

        trail = controller.get_traversed_trail()
        if len(trail) > 1 and not controller.show_path:
            pts = np.array([[p.x, p.y] for p in trail])
            self.ax_main.plot(pts[:, 0], pts[:, 1], 'c--', alpha=0.5, linewidth=1.5, zorder=3)

        if isinstance(decision, DWANavigationDecision) and decision.predicted_trajectory:
            pts = np.array([[p.x, p.y] for p in decision.predicted_trajectory])
            self.ax_main.plot(pts[:, 0], pts[:, 1], 'm-', alpha=0.5, linewidth=1, zorder=6)

        start, goal = controller.get_start(), controller.get_goal()
        self.ax_main.plot(start.x, start.y, 'gD', markersize=12,
                          markeredgecolor='darkgreen', zorder=7)
        goal_color = 'g*' if controller.is_finished else 'r*'
        self.ax_main.plot(goal.x, goal.y, goal_color, markersize=18,
                          markeredgecolor='darkred', zorder=7)

        # Agent
        self.ax_main.add_patch(Circle((position.x, position.y), controller.agent_radius,
                                      fc='cyan', ec='blue', lw=2, alpha=0.9, zorder=10))

        self.ax_main.set_title(
            f'Grid Navigation | {controller.local_planner_name.upper()} | '
            f'{controller.state.value} | Time: {data["time"]:.1f}s',
            fontsize=10, fontweight='bold')

        # === Info Panel ===
        self.ax_info.clear()
        self.ax_info.axis('off')
        speed = float(np.linalg.norm(data['velocity']))
        info_lines = [
            f"Agent: ({position.x:.2f}, {position.y:.2f}) | V={speed:.2f} | "
            f"Goal dist: {position.distance_to(goal):.2f}",
            f"Static: {len(controller.get_static_obstacles())} | "
            f"Dynamic: {len(controller.get_dynamic_obstacles())} | "
            f"Trail: {len(trail)} pts",
            f"Reason: {decision.reason if decision is not None else '-'}",
            "Press Start to run, Reset to return to idle"
        ]
        y_pos = 0.9
        for line in info_lines:
            self.ax_info.text(0.02, y_pos, line, ha='left', va='top',
                              fontsize=9, family='monospace')
            y_pos -= 0.22

    def run(self):
        """Starts the animation."""
        self.ani = animation.FuncAnimation(
            self.fig, self.animate,
            interval=int(self.controller.dt * 1000),
            cache_frame_data=False
        )
        plt.show()


# =============================================================================
# Argument Parser
# =============================================================================
def parse_arguments(argv: Optional[List[str]] = None):
    """Parse command-line arguments."""
    parser = argparse.ArgumentParser(
        prog='simulation.py',
        description="""
  GRID NAVIGATION SIMULATION - LAYERED ARCHITECTURE

  A point agent crosses a grid world with static and moving obstacles.

  LAYERS:
    L3: World Model Layer  - Grid, start/goal, obstacles and their motion
    L4: Planning Layer     - A* route on the 8-connected grid
    L5: Decision Layer     - Per-tick local planner

  LOCAL PLANNERS (--local-planner):

    dwa      - Dynamic Window Approach. Samples velocities around the
               current one, predicts 2s trajectories against the moving
               obstacles' predicted positions and scores them on
               clearance, heading and distance to the next waypoint.

    pursuit  - Constant-speed waypoint follower. Trusts the A* route and
               ignores moving obstacles.
""",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
EXAMPLES:
  python simulation.py                                  # Default maze, DWA
  python simulation.py --local-planner pursuit          # Waypoint pursuit
  python simulation.py --headless --seed 7 --save-logs  # Reproducible batch run
"""
    )

    parser.add_argument(
        '--map',
        type=str,
        default=DEFAULT_MAP,
        metavar='FILE',
        help=f'Map configuration JSON (default: {DEFAULT_MAP})'
    )

    parser.add_argument(
        '--local-planner',
        type=str,
        choices=sorted(LOCAL_PLANNERS),
        default='dwa',
        help='Local planner: dwa, pursuit (default: dwa)'
    )

    parser.add_argument(
        '--dt',
        type=float,
        default=DEFAULT_DT,
        metavar='SEC',
        help=f'Simulation time step in seconds (default: {DEFAULT_DT})'
    )

    parser.add_argument(
        '--steps',
        type=int,
        default=DEFAULT_STEPS,
        metavar='N',
        help=f'Maximum simulation steps in headless mode (default: {DEFAULT_STEPS})'
    )

    parser.add_argument(
        '--seed',
        type=int,
        default=None,
        help='Random seed for reproducible local planning'
    )

    parser.add_argument(
        '--max-speed',
        type=float,
        default=MAX_AGENT_SPEED,
        help=f'Agent speed limit (default: {MAX_AGENT_SPEED})'
    )

    parser.add_argument(
        '--max-rotation-speed',
        type=float,
        default=MAX_ROTATION_SPEED,
        help=f'Heading perturbation limit in rad (default: {MAX_ROTATION_SPEED})'
    )

    parser.add_argument(
        '--headless',
        action='store_true',
        help='Run without the viewer and print a summary'
    )

    parser.add_argument(
        '--save-logs',
        action='store_true',
        help='Write the tick log (CSV) and metrics (JSON) when the run ends'
    )

    parser.add_argument(
        '--log-dir',
        type=str,
        default='log',
        help='Directory for --save-logs output (default: log)'
    )

    parser.add_argument(
        '--log-level',
        type=str,
        choices=['DEBUG', 'INFO', 'WARNING', 'ERROR'],
        default='INFO',
        help='Logging level (default: INFO)'
    )

    return parser.parse_args(argv)


# =============================================================================
# Main Entry Point
# =============================================================================
def main(argv: Optional[List[str]] = None) -> int:
    # Parse command-line arguments
    args = parse_arguments(argv)

    logging.basicConfig(
        level=getattr(logging, args.log_level),
        format='%(asctime)s %(levelname)s %(name)s: %(message)s'
    )

    print("="*60)
    print("GRID NAVIGATION SIMULATION - LAYERED ARCHITECTURE")
    print("="*60)
    print("LAYERS:")
    print("  L3: World Model Layer - Grid, Obstacles, Motion")
    print("  L4: Planning Layer    - A* Global Route")
    print("  L5: Decision Layer    - Local Planner")

    try:
        world = load_map(args.map)
    except ConfigurationError as e:
        print(f"Configuration error: {e}", file=sys.stderr)
        return 1

    controller = SimulationController(
        world,
        local_planner=args.local_planner,
        max_speed=args.max_speed,
        max_rotation_speed=args.max_rotation_speed,
        rng_seed=args.seed,
        dt=args.dt,
        steps=args.steps
    )
    print(f"  Map: {args.map} ({world.width}x{world.height})")
    print(f"  Local Planner: {args.local_planner.upper()}")
    print(f"  Start: {world.get_start()} Goal: {world.get_goal()}")

    if args.headless:
        if not controller.start():
            print("Start or goal is out of bounds or obstructed", file=sys.stderr)
            return 1
        metrics = controller.run()
        print_summary(controller, metrics)
        if args.save_logs:
            controller.save_logs(args.log_dir)
        return 0 if controller.is_finished else 2

    print("="*60)
    print("COMMANDS:")
    print("  - Start button to begin the run")
    print("  - Reset button to return to idle")
    print("  - Close window to exit" + (" and save logs" if args.save_logs else ""))
    print("="*60)

    # Create visualizer and start
    visualizer = SimulationVisualizer(controller, save_logs=args.save_logs,
                                      log_dir=args.log_dir)
    visualizer.run()
    return 0


if __name__ == "__main__":
    sys.exit(main())
