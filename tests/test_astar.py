import math

import pytest

from L3_world import WorldModel, Point, ObstacleGenerator
from L4_planning import AStarPlanner, SearchNode, QueueEntry, NO_PARENT


def chebyshev(a, b):
    return max(abs(a.x - b.x), abs(a.y - b.y))


def assert_valid_path(world, path, start, goal):
    assert path
    assert path[0] == start
    assert path[-1] == goal
    for a, b in zip(path, path[1:]):
        assert chebyshev(a, b) == 1
    for p in path:
        assert world.is_in_bounds(p)
        assert not world.is_statically_obstructed(p)


@pytest.fixture
def planner():
    return AStarPlanner()


class TestTypes:
    def test_node_f_is_g_plus_h(self):
        node = SearchNode(1, 2, g=1.5, h=2.0, parent=NO_PARENT)
        assert node.f == pytest.approx(3.5)
        assert node.cell == (1, 2)

    def test_queue_ties_resolve_by_index(self):
        assert QueueEntry(2.0, 3) < QueueEntry(2.0, 7)
        assert QueueEntry(1.0, 9) < QueueEntry(2.0, 0)


class TestAStar:
    def test_empty_5x5_diagonal(self, small_world, planner):
        path = planner.plan(small_world, small_world.get_start())
        assert len(path) == 5
        assert path == [Point(i, i) for i in range(5)]
        assert planner.last_stats['success']
        assert planner.last_stats['cost'] == pytest.approx(4 * math.sqrt(2))

    def test_deterministic(self, planner):
        world = WorldModel(15, 15, start=Point(0, 0), goal=Point(14, 12))
        for cell in [(5, y) for y in range(0, 12)] + [(10, y) for y in range(3, 15)]:
            world.add_static_obstacle(Point(*cell))

        first = planner.plan(world, world.get_start())
        for _ in range(5):
            again = planner.plan(world, world.get_start())
            assert len(again) == len(first)
            assert again == first

    def test_path_invariants_around_wall(self, planner):
        world = WorldModel(12, 12, start=Point(1, 5), goal=Point(10, 5))
        for y in range(0, 10):
            world.add_static_obstacle(Point(6, y))
        path = planner.plan(world, world.get_start())
        assert_valid_path(world, path, Point(1, 5), Point(10, 5))
        assert any(p.y >= 10 for p in path)

    def test_start_boxed_in(self, planner):
        world = WorldModel(10, 10, start=Point(5, 5), goal=Point(9, 9))
        for dx in (-1, 0, 1):
            for dy in (-1, 0, 1):
                if dx or dy:
                    assert world.add_static_obstacle(Point(5 + dx, 5 + dy))
        assert planner.plan(world, world.get_start()) == []
        assert not planner.last_stats['success']

    def test_goal_obstructed(self, planner, empty_world):
        empty_world.add_static_obstacle(Point(9, 9))
        assert planner.plan(empty_world, Point(0, 0)) == []

    def test_goal_out_of_bounds(self, planner, empty_world):
        assert planner.plan(empty_world, Point(0, 0), goal=Point(12, 3)) == []

    def test_start_equals_goal(self, planner, empty_world):
        assert planner.plan(empty_world, Point(4, 4), goal=Point(4, 4)) == [Point(4, 4)]

    def test_start_snaps_to_cell(self, planner, small_world):
        path = planner.plan(small_world, Point(0.3, -0.2))
        assert path[0] == Point(0, 0)
        assert path[-1] == Point(4, 4)

    def test_dynamic_obstacles_ignored(self, planner, small_world):
        small_world.add_dynamic_obstacle(
            ObstacleGenerator.create_linear_obstacle(Point(2, 2), speed=1.0)
        )
        path = planner.plan(small_world, small_world.get_start())
        assert Point(2, 2) in path

    def test_unreachable_goal(self, planner):
        world = WorldModel(8, 8, start=Point(0, 0), goal=Point(7, 7))
        for y in range(8):
            world.add_static_obstacle(Point(4, y))
        assert planner.plan(world, world.get_start()) == []
        assert planner.last_stats['nodes_expanded'] > 0
