import pytest

from L3_world import WorldModel, Point


@pytest.fixture
def empty_world():
    """10x10 world, start (0, 0), goal (9, 9), no obstacles."""
    return WorldModel(10, 10, start=Point(0, 0), goal=Point(9, 9))


@pytest.fixture
def small_world():
    """5x5 world, start (0, 0), goal (4, 4), no obstacles."""
    return WorldModel(5, 5, start=Point(0, 0), goal=Point(4, 4))
