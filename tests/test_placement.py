import random

import pytest

from gridsnake.config import GRID_SIZE, SPAWN_CENTER
from gridsnake.errors import PlacementExhausted
from gridsnake.placement import (
    FoodCategory, FoodSelector, ObstacleGenerator, RandomPlacer, manhattan,
)

from .conftest import FixedRandom


def test_food_table_sums_to_one():
    assert sum(c.probability for c in FoodCategory) == pytest.approx(1.0)
    assert [c.score for c in FoodCategory] == [10, 20, 15, 50]


def test_placer_returns_free_cell():
    rng = random.Random(3)
    occupied = {(x, y) for x in range(GRID_SIZE) for y in range(GRID_SIZE) if (x + y) % 2}
    placer = RandomPlacer(rng)
    for _ in range(50):
        x, y = placer.place(occupied)
        assert (x, y) not in occupied
        assert 0 <= x < GRID_SIZE and 0 <= y < GRID_SIZE


def test_placer_raises_when_board_full():
    full = {(x, y) for x in range(GRID_SIZE) for y in range(GRID_SIZE)}
    placer = RandomPlacer(random.Random(0))
    with pytest.raises(PlacementExhausted) as info:
        placer.place(full)
    assert info.value.attempts == 100


@pytest.mark.parametrize("draw, expected", [
    (0.0, FoodCategory.NORMAL),
    (0.69, FoodCategory.NORMAL),
    (0.7, FoodCategory.SPEED),
    (0.79, FoodCategory.SPEED),
    (0.85, FoodCategory.SLOW),
    (0.95, FoodCategory.BONUS),
])
def test_selector_walks_cumulative_table(draw, expected):
    assert FoodSelector(FixedRandom([draw])).select() is expected


def test_selector_falls_back_to_normal_past_the_table():
    assert FoodSelector(FixedRandom([1.0])).select() is FoodCategory.NORMAL


def test_selector_distribution_roughly_matches_weights():
    selector = FoodSelector(random.Random(1234))
    draws = [selector.select() for _ in range(20_000)]
    normal = draws.count(FoodCategory.NORMAL) / len(draws)
    bonus = draws.count(FoodCategory.BONUS) / len(draws)
    assert 0.67 < normal < 0.73
    assert 0.08 < bonus < 0.12


@pytest.mark.parametrize("seed", range(40))
def test_obstacles_respect_spawn_zone_and_never_overlap(seed):
    obstacles = ObstacleGenerator(random.Random(seed)).generate()
    assert 12 <= len(obstacles) <= 15
    assert len(set(obstacles)) == len(obstacles)
    for cell in obstacles:
        assert manhattan(cell, SPAWN_CENTER) >= 3
        assert 1 <= cell[0] <= GRID_SIZE - 2
        assert 1 <= cell[1] <= GRID_SIZE - 2


def test_obstacle_slots_are_skipped_when_nothing_fits():
    generator = ObstacleGenerator(random.Random(5), min_distance=100)
    assert generator.generate() == []
