import json
import os

import numpy as np
import pytest

from L3_world import (
    WorldModel,
    Point,
    ObstacleGenerator,
    SimulationState,
    GOAL_THRESHOLD
)
from L5_decision import BaseDecisionMaker, NavigationDecision, PursuitDecisionMaker
from simulation import SimulationController, RunMetrics, parse_arguments, main

MAX_TICKS = 5000


class StandStill(BaseDecisionMaker):
    def decide(self, world, position, velocity, target, rng=None,
               max_speed=None, max_rotation_speed=None):
        return NavigationDecision(velocity=np.zeros(2), target=target, reason="hold")


def run_until_finished(controller, dt=0.1, max_ticks=MAX_TICKS):
    for _ in range(max_ticks):
        if controller.state != SimulationState.RUNNING:
            break
        controller.update(dt)
    return controller


class TestStart:
    def test_out_of_bounds_goal_stays_idle(self):
        world = WorldModel(10, 10, start=Point(0, 0), goal=Point(15, 3))
        controller = SimulationController(world, rng_seed=1)

        assert not controller.start()
        assert controller.state == SimulationState.IDLE
        assert controller.get_current_position() == Point(0, 0)
        assert controller.get_traversed_trail() == []
        assert controller.get_simulation_time() == 0.0
        assert controller.get_path() == []

    def test_obstructed_start_stays_idle(self, empty_world):
        empty_world.add_dynamic_obstacle(
            ObstacleGenerator.create_linear_obstacle(Point(0.3, 0.3), speed=1.0)
        )
        controller = SimulationController(empty_world)
        assert not controller.start()
        assert controller.is_idle

    def test_start_seeds_trail(self, empty_world):
        controller = SimulationController(empty_world, rng_seed=1)
        assert controller.start()
        assert controller.is_running
        assert controller.get_traversed_trail() == [Point(0, 0)]
        assert controller.get_agent_state().speed == 0.0


class TestUpdate:
    def test_update_while_idle_is_noop(self, empty_world):
        controller = SimulationController(empty_world, rng_seed=1)
        for _ in range(5):
            controller.update(0.1)
        assert controller.is_idle
        assert controller.get_current_position() == Point(0, 0)
        assert controller.get_traversed_trail() == []
        assert controller.get_simulation_time() == 0.0

    def test_first_update_plans_path(self, empty_world):
        controller = SimulationController(empty_world, rng_seed=1)
        controller.start()
        controller.update(0.1)
        path = controller.get_path()
        assert path[0] == Point(0, 0)
        assert path[-1] == Point(9, 9)
        assert controller.get_simulation_time() == pytest.approx(0.1)

    def test_obstacles_advance_each_tick(self, empty_world):
        obs = ObstacleGenerator.create_linear_obstacle(Point(5, 2), speed=1.0, direction=(0, 1))
        empty_world.add_dynamic_obstacle(obs)
        controller = SimulationController(empty_world, rng_seed=1)
        controller.start()
        for _ in range(3):
            controller.update(0.1)
        np.testing.assert_allclose(obs.position, [5.0, 2.3])

    def test_speed_bounded_every_tick(self, empty_world):
        controller = SimulationController(empty_world, max_speed=1.2, rng_seed=4)
        controller.start()
        for _ in range(50):
            controller.update(0.1)
            assert controller.get_agent_state().speed <= 1.2 + 1e-9
            if not controller.is_running:
                break


class TestEndToEnd:
    def test_dwa_reaches_goal_on_empty_grid(self, empty_world):
        controller = SimulationController(empty_world, rng_seed=7)
        controller.start()
        run_until_finished(controller)

        assert controller.state == SimulationState.FINISHED
        assert controller.get_simulation_time() > 0
        trail = controller.get_traversed_trail()
        assert trail[-1].distance_to(Point(9, 9)) < GOAL_THRESHOLD
        assert controller.show_path
        assert controller.get_path() == trail

    def test_pursuit_reaches_goal(self, empty_world):
        controller = SimulationController(empty_world, local_planner='pursuit')
        controller.start()
        run_until_finished(controller)
        assert controller.is_finished
        assert controller.get_traversed_trail()[-1].distance_to(Point(9, 9)) < GOAL_THRESHOLD

    def test_planner_instance_is_accepted(self, empty_world):
        controller = SimulationController(empty_world, local_planner=PursuitDecisionMaker())
        assert controller.local_planner_name == 'PursuitDecisionMaker'
        controller.start()
        run_until_finished(controller)
        assert controller.is_finished

    def test_dwa_goes_around_obstacle_on_route(self, empty_world):
        empty_world.add_static_obstacle(Point(5, 5), radius=0.5)
        controller = SimulationController(empty_world, rng_seed=11)
        controller.start()
        run_until_finished(controller)
        assert controller.is_finished
        for p in controller.get_traversed_trail():
            assert empty_world.is_in_bounds(p)

    def test_finished_ignores_updates(self, empty_world):
        controller = SimulationController(empty_world, local_planner='pursuit')
        controller.start()
        run_until_finished(controller)
        position = controller.get_current_position()
        elapsed = controller.get_simulation_time()
        controller.update(0.1)
        assert controller.get_current_position() == position
        assert controller.get_simulation_time() == elapsed


class TestStallAndRecovery:
    @pytest.fixture
    def boxed_world(self):
        world = WorldModel(10, 10, start=Point(0, 0), goal=Point(9, 9))
        for cell in [(1, 0), (0, 1), (1, 1)]:
            world.add_static_obstacle(Point(*cell), radius=0.5)
        return world

    def test_stalls_without_path(self, boxed_world, caplog):
        controller = SimulationController(boxed_world, rng_seed=3)
        controller.start()
        with caplog.at_level('WARNING', logger='simulation'):
            for _ in range(10):
                controller.update(0.1)

        assert controller.is_running
        assert controller.get_current_position() == Point(0, 0)
        assert controller.get_path() == []
        assert controller.get_simulation_time() == pytest.approx(1.0)
        # One warning per world revision, not per tick
        warnings = [r for r in caplog.records if 'No path' in r.getMessage()]
        assert len(warnings) == 1
        assert len(controller.metrics.planning_failures) == 1

    def test_recovers_after_obstacle_removed(self, boxed_world):
        controller = SimulationController(boxed_world, local_planner='pursuit')
        controller.start()
        controller.update(0.1)
        assert controller.get_path() == []

        assert boxed_world.remove_obstacle(Point(1, 0)) == 1
        assert boxed_world.remove_obstacle(Point(1, 1)) == 1
        controller.update(0.1)
        assert controller.get_path()
        assert len(controller.get_traversed_trail()) > 1

    def test_stall_warned_once_per_episode(self, empty_world, caplog):
        controller = SimulationController(empty_world, local_planner=StandStill(),
                                          stall_ticks=20)
        controller.start()
        with caplog.at_level('WARNING', logger='simulation'):
            for _ in range(45):
                controller.update(0.1)

        assert controller.is_running
        stalls = [r for r in caplog.records if 'No progress' in r.getMessage()]
        assert len(stalls) == 1
        assert controller.metrics.summary()['stalls'] == 1

    def test_moving_agent_never_stalls(self, empty_world, caplog):
        controller = SimulationController(empty_world, local_planner='pursuit', stall_ticks=5)
        with caplog.at_level('WARNING', logger='simulation'):
            controller.run(steps=200)
        assert controller.is_finished
        assert controller.metrics.summary()['stalls'] == 0

    def test_replan(self, empty_world):
        controller = SimulationController(empty_world, rng_seed=2)
        assert not controller.replan()
        controller.start()
        assert controller.replan()
        assert controller.get_path()[-1] == Point(9, 9)


class TestReset:
    def test_reset_restores_everything(self, empty_world):
        obs = ObstacleGenerator.create_circular_obstacle(
            Point(7, 3), center=Point(5, 3), orbit_radius=2.0, angular_speed=1.0
        )
        empty_world.add_dynamic_obstacle(obs)
        initial = obs.position.copy()

        controller = SimulationController(empty_world, rng_seed=5)
        controller.start()
        for _ in range(15):
            controller.update(0.1)
        controller.reset()

        assert controller.is_idle
        np.testing.assert_allclose(obs.position, initial, atol=1e-12)
        assert controller.get_traversed_trail() == []
        assert controller.get_path() == []
        assert controller.get_simulation_time() == 0.0
        assert controller.get_current_position() == Point(0, 0)
        assert controller.get_agent_state().speed == 0.0
        assert not controller.show_path

    def test_reset_is_idempotent(self, empty_world):
        controller = SimulationController(empty_world)
        controller.reset()
        controller.reset()
        assert controller.is_idle

    def test_restart_after_finish(self, empty_world):
        controller = SimulationController(empty_world, local_planner='pursuit')
        controller.start()
        run_until_finished(controller)
        controller.reset()
        assert controller.start()
        assert controller.get_traversed_trail() == [Point(0, 0)]


class TestSeeding:
    def test_same_seed_same_run(self):
        def trail(seed):
            world = WorldModel(10, 10, start=Point(0, 0), goal=Point(9, 9))
            world.add_static_obstacle(Point(4, 5))
            controller = SimulationController(world, rng_seed=seed)
            controller.start()
            for _ in range(30):
                controller.update(0.1)
            return [(p.x, p.y) for p in controller.get_traversed_trail()]

        assert trail(9) == trail(9)


class TestQueries:
    def test_query_surface(self, empty_world):
        empty_world.add_static_obstacle(Point(5, 5))
        controller = SimulationController(empty_world)
        assert controller.get_start() == Point(0, 0)
        assert controller.get_goal() == Point(9, 9)
        assert len(controller.get_static_obstacles()) == 1
        assert controller.get_dynamic_obstacles() == ()
        assert controller.is_in_bounds(Point(9, 9))
        assert not controller.is_in_bounds(Point(10, 0))
        assert controller.check_collision(Point(5.5, 5))
        assert controller.max_speed == 2.0


class TestMetrics:
    def test_summary_after_finished_run(self, empty_world):
        controller = SimulationController(empty_world, local_planner='pursuit')
        summary = controller.run(steps=500)

        assert controller.is_finished
        assert summary['ticks'] > 0
        assert summary['simulation_time'] == pytest.approx(controller.get_simulation_time())
        assert summary['distance_travelled'] == pytest.approx(9 * np.sqrt(2), rel=0.1)
        assert summary['max_speed'] <= 2.0 + 1e-9
        assert summary['fallback_count'] == 0
        assert summary['min_clearance'] is None

    def test_empty_summary(self):
        summary = RunMetrics().summary()
        assert summary['ticks'] == 0
        assert summary['mean_speed'] == 0.0

    def test_export_writes_csv_and_json(self, empty_world, tmp_path):
        empty_world.add_static_obstacle(Point(7, 2))
        controller = SimulationController(empty_world, local_planner='pursuit')
        controller.run(steps=20)
        files = controller.metrics.export(str(tmp_path / "logs"))

        df = controller.metrics.to_dataframe()
        assert list(df.columns) == RunMetrics.COLUMNS
        assert len(df) == 20
        with open(files['summary'], encoding='utf-8') as f:
            exported = json.load(f)
        assert exported['metrics']['ticks'] == 20
        assert (tmp_path / "logs").is_dir()


class TestCli:
    def test_defaults(self):
        args = parse_arguments([])
        assert args.local_planner == 'dwa'
        assert args.dt == 0.1
        assert not args.headless

    def test_bad_map_exits_with_error(self, tmp_path, capsys):
        assert main(['--map', str(tmp_path / 'missing.json'), '--headless']) == 1
        assert 'Configuration error' in capsys.readouterr().err

    def test_headless_run(self, tmp_path):
        map_file = tmp_path / 'map.json'
        map_file.write_text(json.dumps({
            "width": 8, "height": 8, "start": [0, 0], "goal": [7, 7]
        }), encoding='utf-8')
        code = main(['--map', str(map_file), '--headless', '--local-planner', 'pursuit',
                     '--save-logs', '--log-dir', str(tmp_path / 'log')])
        assert code == 0
        assert list((tmp_path / 'log').glob('*.csv'))

    def test_default_map_found_from_any_directory(self, tmp_path, monkeypatch):
        monkeypatch.chdir(tmp_path)
        args = parse_arguments([])
        assert os.path.isabs(args.map)
        assert os.path.isfile(args.map)

    def test_default_headless_run_reaches_goal(self, tmp_path, monkeypatch):
        monkeypatch.chdir(tmp_path)
        assert main(['--headless', '--seed', '0']) == 0
