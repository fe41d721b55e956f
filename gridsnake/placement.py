"""
placement.py — Randomized placement on the grid.

Classes:
    FoodCategory      — the four food kinds with their score and weight
    RandomPlacer      — uniform free-cell draws with bounded retry
    FoodSelector      — weighted draw over the food table
    ObstacleGenerator — obstacle layout kept clear of the spawn zone

Every class takes the random.Random it draws from, so a seeded
generator makes a whole run reproducible.
"""

from __future__ import annotations

import enum
import logging
import random

from .config import (
    GRID_SIZE, SPAWN_CENTER, FOOD_TYPES,
    FOOD_MAX_ATTEMPTS,
    OBSTACLE_MIN_COUNT, OBSTACLE_MAX_COUNT,
    OBSTACLE_MAX_ATTEMPTS, OBSTACLE_MIN_DISTANCE,
)
from .errors import PlacementExhausted

logger = logging.getLogger(__name__)

Cell = tuple[int, int]


# ────────────────────────── FoodCategory ─────────────────────────
class FoodCategory(enum.Enum):
    NORMAL = "NORMAL"
    SPEED  = "SPEED"
    SLOW   = "SLOW"
    BONUS  = "BONUS"

    @property
    def score(self) -> int:
        return FOOD_TYPES[self.value]["score"]

    @property
    def probability(self) -> float:
        return FOOD_TYPES[self.value]["probability"]

    @property
    def color(self) -> tuple:
        return FOOD_TYPES[self.value]["color"]

    @property
    def is_special(self) -> bool:
        return self is not FoodCategory.NORMAL


def manhattan(a: Cell, b: Cell) -> int:
    return abs(a[0] - b[0]) + abs(a[1] - b[1])


# ────────────────────────── RandomPlacer ─────────────────────────
class RandomPlacer:
    """Draws uniformly random cells that are not in an occupied set."""

    def __init__(
        self,
        rng: random.Random,
        grid_size: int = GRID_SIZE,
        max_attempts: int = FOOD_MAX_ATTEMPTS,
    ):
        self.rng = rng
        self.grid_size = grid_size
        self.max_attempts = max_attempts

    def place(self, occupied) -> Cell:
        """
        Return a free cell.

        Raises PlacementExhausted once max_attempts independent draws
        have all landed on occupied cells.
        """
        for _ in range(self.max_attempts):
            cell = (
                self.rng.randrange(self.grid_size),
                self.rng.randrange(self.grid_size),
            )
            if cell not in occupied:
                return cell
        raise PlacementExhausted(self.max_attempts)


# ────────────────────────── FoodSelector ─────────────────────────
class FoodSelector:
    """Weighted random choice over FoodCategory, in enumeration order."""

    def __init__(self, rng: random.Random):
        self.rng = rng

    def select(self) -> FoodCategory:
        draw = self.rng.random()
        cumulative = 0.0
        for category in FoodCategory:
            cumulative += category.probability
            if draw < cumulative:
                return category
        # accumulated mass can fall a hair short of 1.0
        return FoodCategory.NORMAL


# ─────────────────────── ObstacleGenerator ───────────────────────
class ObstacleGenerator:
    """
    Lays out 12–15 obstacles inside the border, each at least
    OBSTACLE_MIN_DISTANCE (Manhattan) from the spawn center.
    A slot that cannot be filled within max_attempts is skipped.
    """

    def __init__(
        self,
        rng: random.Random,
        grid_size: int = GRID_SIZE,
        center: Cell = SPAWN_CENTER,
        min_distance: int = OBSTACLE_MIN_DISTANCE,
        max_attempts: int = OBSTACLE_MAX_ATTEMPTS,
    ):
        self.rng = rng
        self.grid_size = grid_size
        self.center = center
        self.min_distance = min_distance
        self.max_attempts = max_attempts

    def generate(self) -> list[Cell]:
        target = self.rng.randint(OBSTACLE_MIN_COUNT, OBSTACLE_MAX_COUNT)
        obstacles: list[Cell] = []
        taken: set[Cell] = set()

        for _ in range(target):
            cell = self._place_one(taken)
            if cell is None:
                continue
            obstacles.append(cell)
            taken.add(cell)

        if len(obstacles) < target:
            logger.info("placed %d of %d obstacles", len(obstacles), target)
        return obstacles

    def _place_one(self, taken: set[Cell]) -> Cell | None:
        for _ in range(self.max_attempts):
            # border rows and columns stay clear
            cell = (
                self.rng.randint(1, self.grid_size - 2),
                self.rng.randint(1, self.grid_size - 2),
            )
            if manhattan(cell, self.center) < self.min_distance:
                continue
            if cell in taken:
                continue
            return cell
        return None
