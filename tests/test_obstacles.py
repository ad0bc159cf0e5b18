import math

import numpy as np
import pytest

from L3_world import (
    Obstacle,
    ObstacleKind,
    MotionType,
    ObstacleGenerator,
    Point,
    DYNAMIC_OBSTACLE_RADIUS
)

BOUNDS = (10, 10)


def in_bounds(position, bounds=BOUNDS):
    cell = Point.from_array(position).to_grid_cell()
    return 0 <= cell[0] < bounds[0] and 0 <= cell[1] < bounds[1]


class TestFactories:
    def test_static(self):
        obs = ObstacleGenerator.create_static_obstacle(Point(2, 3), radius=0.7)
        assert obs.kind == ObstacleKind.STATIC
        assert not obs.is_dynamic
        assert obs.motion is None
        assert obs.radius == 0.7
        assert obs.point == Point(2, 3)

    def test_linear_direction_is_normalized(self):
        obs = ObstacleGenerator.create_linear_obstacle(Point(1, 1), speed=2.0, direction=(3, 4))
        assert obs.is_dynamic
        assert obs.motion.type == MotionType.LINEAR
        np.testing.assert_allclose(obs.motion.direction, [0.6, 0.8])
        assert obs.radius == DYNAMIC_OBSTACLE_RADIUS

    def test_circular_starts_on_orbit(self):
        obs = ObstacleGenerator.create_circular_obstacle(
            Point(5, 8), center=Point(5, 5), orbit_radius=2.0, angular_speed=1.0
        )
        assert obs.motion.type == MotionType.CIRCULAR
        assert obs.motion.angle == pytest.approx(math.pi / 2)
        np.testing.assert_allclose(obs.position, [5.0, 7.0], atol=1e-9)

    def test_dynamic_without_motion_is_rejected(self):
        with pytest.raises(ValueError):
            Obstacle(position=np.zeros(2), radius=0.5, kind=ObstacleKind.DYNAMIC)


class TestLinearMotion:
    def test_moves_along_direction(self):
        obs = ObstacleGenerator.create_linear_obstacle(Point(2, 2), speed=2.0, direction=(0, 1))
        obs.advance(0.5, BOUNDS)
        np.testing.assert_allclose(obs.position, [2.0, 3.0])
        assert obs.elapsed == pytest.approx(0.5)

    def test_bounces_off_edge(self):
        obs = ObstacleGenerator.create_linear_obstacle(Point(9, 5), speed=1.0, direction=(1, 0))
        obs.advance(1.0, BOUNDS)
        assert obs.motion.direction[0] == pytest.approx(-1.0)
        np.testing.assert_allclose(obs.position, [8.0, 5.0])

    def test_never_leaves_bounds(self):
        obs = ObstacleGenerator.create_linear_obstacle(Point(5, 5), speed=3.0, direction=(1, 0.7))
        for _ in range(500):
            obs.advance(0.1, BOUNDS)
            assert in_bounds(obs.position)

    def test_predicted_position_is_pure(self):
        obs = ObstacleGenerator.create_linear_obstacle(Point(1, 1), speed=1.0, direction=(1, 0))
        before = obs.position.copy()
        np.testing.assert_allclose(obs.predicted_position(2.0), [3.0, 1.0])
        np.testing.assert_allclose(obs.position, before)
        assert obs.elapsed == 0.0


class TestCircularMotion:
    def test_follows_closed_form_inside_bounds(self):
        obs = ObstacleGenerator.create_circular_obstacle(
            Point(7, 5), center=Point(5, 5), orbit_radius=2.0, angular_speed=0.5
        )
        for _ in range(20):
            obs.advance(0.1, BOUNDS)
        angle = 0.5 * 2.0
        expected = [5 + 2 * math.cos(angle), 5 + 2 * math.sin(angle)]
        np.testing.assert_allclose(obs.position, expected, atol=1e-9)
        assert obs.elapsed == pytest.approx(2.0)

    def test_predicted_position_matches_advance(self):
        obs = ObstacleGenerator.create_circular_obstacle(
            Point(7, 5), center=Point(5, 5), orbit_radius=2.0, angular_speed=1.0
        )
        predicted = obs.predicted_position(0.3)
        obs.advance(0.3, BOUNDS)
        np.testing.assert_allclose(obs.position, predicted, atol=1e-9)

    def test_reverses_when_orbit_leaves_bounds(self):
        # Orbit around (1, 5) with radius 2 crosses x < -0.5
        obs = ObstacleGenerator.create_circular_obstacle(
            Point(1, 7), center=Point(1, 5), orbit_radius=2.0, angular_speed=1.0
        )
        speeds = set()
        for _ in range(100):
            obs.advance(0.1, BOUNDS)
            speeds.add(obs.motion.angular_speed)
            assert in_bounds(obs.position)
        assert speeds == {1.0, -1.0}


class TestReset:
    @pytest.mark.parametrize("factory", [
        lambda: ObstacleGenerator.create_linear_obstacle(Point(8, 2), speed=3.0, direction=(1, 1)),
        lambda: ObstacleGenerator.create_circular_obstacle(
            Point(3, 5), center=Point(1, 5), orbit_radius=2.0, angular_speed=1.5),
    ])
    def test_reset_restores_initial_pose(self, factory):
        obs = factory()
        initial_position = obs.position.copy()
        initial_motion = obs.motion.copy()

        for _ in range(73):
            obs.advance(0.1, BOUNDS)
        obs.reset()

        np.testing.assert_allclose(obs.position, initial_position, atol=1e-12)
        assert obs.elapsed == 0.0
        if obs.motion.type == MotionType.LINEAR:
            np.testing.assert_allclose(obs.motion.direction, initial_motion.direction)
        else:
            assert obs.motion.angular_speed == initial_motion.angular_speed
            assert obs.motion.angle == initial_motion.angle

    def test_reset_does_not_share_state_with_initial_copy(self):
        obs = ObstacleGenerator.create_linear_obstacle(Point(9, 5), speed=1.0, direction=(1, 0))
        obs.advance(1.0, BOUNDS)
        obs.reset()
        obs.advance(1.0, BOUNDS)
        obs.reset()
        assert obs.motion.direction[0] == pytest.approx(1.0)
