"""
model.py — Model layer.

Owns the board and the rules of one run. Zero rendering, zero input
handling, zero audio: side effects leave as GameEvent values on the
StepResult and the caller decides what to do with them.

Classes:
    Direction        — immutable (dx, dy) value object
    GameEvent        — side-effect signals emitted by a step
    Collision        — why a run ended
    FoodItem         — a food cell and its category
    ActiveEffect     — the running speed modifier or banner
    BoardState       — read-only snapshot for renderers
    StepResult       — everything one step produced
    SimulationEngine — snake, food, obstacles, score and effects
"""

from __future__ import annotations

import enum
import logging
import math
import random
from collections import deque
from dataclasses import dataclass
from typing import Callable

from .config import (
    GRID_SIZE, SPAWN_CENTER, SPAWN_LENGTH, DIFFICULTIES,
    SPEED_FACTOR, SLOW_FACTOR,
    SPEED_DURATION_MS, SLOW_DURATION_MS, BONUS_DURATION_MS,
)
from .errors import PlacementExhausted
from .placement import (
    Cell, FoodCategory, FoodSelector, ObstacleGenerator, RandomPlacer,
)
from .timers import EffectTimer, TimerService

logger = logging.getLogger(__name__)


# ─────────────────────────── Direction ───────────────────────────
class Direction:
    """Immutable 2-D unit direction."""
    LEFT  = None  # filled below after class definition
    RIGHT = None
    UP    = None
    DOWN  = None

    __slots__ = ("x", "y", "name")

    def __init__(self, x: int, y: int, name: str = ""):
        self.x = x
        self.y = y
        self.name = name

    def is_opposite(self, other: "Direction") -> bool:
        return self.x == -other.x and self.y == -other.y

    def apply(self, cell: Cell) -> Cell:
        return cell[0] + self.x, cell[1] + self.y

    def __eq__(self, other):
        return isinstance(other, Direction) and self.x == other.x and self.y == other.y

    def __hash__(self):
        return hash((self.x, self.y))

    def __repr__(self):
        return f"Direction.{self.name}" if self.name else f"Direction({self.x}, {self.y})"


Direction.LEFT  = Direction(-1,  0, "LEFT")
Direction.RIGHT = Direction( 1,  0, "RIGHT")
Direction.UP    = Direction( 0, -1, "UP")
Direction.DOWN  = Direction( 0,  1, "DOWN")
ALL_DIRS = [Direction.UP, Direction.DOWN, Direction.LEFT, Direction.RIGHT]


# ──────────────────────────── Values ─────────────────────────────
class GameEvent(enum.Enum):
    EAT      = "eat"
    SPECIAL  = "special"
    GAME_OVER = "game_over"


class Collision(enum.Enum):
    WALL     = "wall"
    SELF     = "self"
    OBSTACLE = "obstacle"


@dataclass(frozen=True)
class FoodItem:
    cell: Cell
    category: FoodCategory


@dataclass(frozen=True)
class ActiveEffect:
    category: FoodCategory
    expires_at: int
    label: str


EFFECT_LABELS = {
    FoodCategory.SPEED: "SPEED UP",
    FoodCategory.SLOW:  "SLOW DOWN",
    FoodCategory.BONUS: "+50 BONUS",
}


@dataclass(frozen=True)
class BoardState:
    snake: tuple[Cell, ...]
    food: FoodItem | None
    obstacles: frozenset[Cell]
    score: int
    direction: Direction
    effect: ActiveEffect | None
    interval: int

    @property
    def head(self) -> Cell:
        return self.snake[0]


@dataclass(frozen=True)
class StepResult:
    board: BoardState
    events: tuple[GameEvent, ...] = ()
    collision: Collision | None = None
    eaten: FoodCategory | None = None

    @property
    def game_over(self) -> bool:
        return self.collision is not None


def base_interval(difficulty: str) -> int:
    try:
        return DIFFICULTIES[difficulty]["interval"]
    except KeyError:
        raise ValueError(f"unknown difficulty {difficulty!r}") from None


# ──────────────────────── SimulationEngine ───────────────────────
class SimulationEngine:
    """
    One run of the game. The state machine calls step() once per tick
    and request_direction() whenever input arrives.

    on_interval_change is called with the new effective interval every
    time an effect starts, is replaced, or expires.
    """

    def __init__(
        self,
        difficulty: str,
        timers: TimerService,
        obstacle_mode: bool = False,
        rng: random.Random | None = None,
        grid_size: int = GRID_SIZE,
        on_interval_change: Callable[[int], None] | None = None,
    ):
        self.difficulty = difficulty
        self.base_interval = base_interval(difficulty)
        self.interval = self.base_interval
        self.obstacle_mode = obstacle_mode
        self.grid_size = grid_size
        self.timers = timers
        self.rng = rng if rng is not None else random.Random()
        self.on_interval_change = on_interval_change

        self.placer = RandomPlacer(self.rng, grid_size)
        self.selector = FoodSelector(self.rng)
        self.effect_timer = EffectTimer(timers)

        cx, cy = SPAWN_CENTER
        self.snake: deque[Cell] = deque((cx - i, cy) for i in range(SPAWN_LENGTH))
        self.direction: Direction = Direction.RIGHT
        self._next_dir: Direction = Direction.RIGHT
        self.obstacles: frozenset[Cell] = frozenset()
        self.food: FoodItem | None = None
        self.score: int = 0
        self.effect: ActiveEffect | None = None

    # ── Accessors ────────────────────────────────────────────────
    @property
    def head(self) -> Cell:
        return self.snake[0]

    @property
    def pending_direction(self) -> Direction:
        return self._next_dir

    def board(self) -> BoardState:
        return BoardState(
            snake=tuple(self.snake),
            food=self.food,
            obstacles=self.obstacles,
            score=self.score,
            direction=self.direction,
            effect=self.effect,
            interval=self.interval,
        )

    # ── Setup ────────────────────────────────────────────────────
    def spawn(self) -> None:
        """Lay out obstacles (when enabled) and the first food."""
        if self.obstacle_mode:
            generator = ObstacleGenerator(self.rng, self.grid_size)
            self.obstacles = frozenset(generator.generate())
        self._spawn_food()

    def dispose(self) -> None:
        """Cancel the pending effect expiry; the engine is being dropped."""
        self.effect_timer.cancel()

    # ── Commands ─────────────────────────────────────────────────
    def request_direction(self, new_dir: Direction) -> bool:
        """
        Buffer a direction change. Checked against the direction already
        committed by the last step, so two quick turns can't reverse the
        snake in place. Returns False when the request was ignored.
        """
        if new_dir.is_opposite(self.direction):
            return False
        self._next_dir = new_dir
        return True

    def step(self) -> StepResult:
        self.direction = self._next_dir
        new_head = self.direction.apply(self.head)

        collision = self._collision_at(new_head)
        if collision is not None:
            logger.info("collision: %s at %s, score %d", collision.value, new_head, self.score)
            return StepResult(self.board(), (GameEvent.GAME_OVER,), collision)

        self.snake.appendleft(new_head)

        events: tuple[GameEvent, ...] = ()
        eaten = None
        if self.food is not None and new_head == self.food.cell:
            eaten = self.food.category
            events = (GameEvent.SPECIAL if eaten.is_special else GameEvent.EAT,)
            self.score += eaten.score
            if eaten.is_special:
                self._apply_effect(eaten)
            self._spawn_food()
        else:
            self.snake.pop()
            if self.food is None:
                self._spawn_food()

        return StepResult(self.board(), events, None, eaten)

    # ── Private helpers ──────────────────────────────────────────
    def _collision_at(self, cell: Cell) -> Collision | None:
        x, y = cell
        if not (0 <= x < self.grid_size and 0 <= y < self.grid_size):
            return Collision.WALL
        if cell in self.snake:
            return Collision.SELF
        if cell in self.obstacles:
            return Collision.OBSTACLE
        return None

    def _spawn_food(self) -> None:
        occupied = set(self.snake) | self.obstacles
        try:
            cell = self.placer.place(occupied)
        except PlacementExhausted as exc:
            logger.warning("food placement skipped: %s", exc)
            self.food = None
            return
        self.food = FoodItem(cell, self.selector.select())

    def _apply_effect(self, category: FoodCategory) -> None:
        # effects never stack: drop the old one and fall back to base first
        if self.effect is not None:
            self.effect_timer.cancel()
            self.effect = None
        self.interval = self.base_interval

        if category is FoodCategory.SPEED:
            self.interval = math.floor(self.base_interval * SPEED_FACTOR)
            duration = SPEED_DURATION_MS
        elif category is FoodCategory.SLOW:
            self.interval = math.floor(self.base_interval * SLOW_FACTOR)
            duration = SLOW_DURATION_MS
        else:
            duration = BONUS_DURATION_MS

        handle = self.effect_timer.arm(duration, self._expire_effect)
        self.effect = ActiveEffect(category, handle.deadline, EFFECT_LABELS[category])
        logger.debug("effect %s until %d, interval %dms",
                     category.value, handle.deadline, self.interval)
        self._notify_interval()

    def _expire_effect(self) -> None:
        logger.debug("effect %s expired", self.effect.category.value if self.effect else None)
        self.effect = None
        self.interval = self.base_interval
        self._notify_interval()

    def _notify_interval(self) -> None:
        if self.on_interval_change is not None:
            self.on_interval_change(self.interval)
