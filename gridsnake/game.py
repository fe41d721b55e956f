"""
game.py — Game lifecycle.

GameStateMachine drives menu → playing ⇄ paused → game over. It owns the
tick scheduler and one SimulationEngine per run, routes step events to
the audio sink and records finished runs in the leaderboard.

Transitions that don't apply to the current state are ignored.
"""

from __future__ import annotations

import logging
import random
import time
from datetime import datetime
from typing import Callable

from .audio import AudioSink
from .config import (
    DIFFICULTIES,
    STATE_MENU, STATE_PLAYING, STATE_PAUSED, STATE_OVER,
)
from .leaderboard import Leaderboard, LeaderboardEntry
from .model import (
    BoardState, Collision, Direction, GameEvent, SimulationEngine, StepResult,
)
from .storage import Settings, Storage, load_settings, save_settings
from .timers import TickScheduler, TimerService

logger = logging.getLogger(__name__)


def _wall_clock_ms() -> int:
    return int(time.time() * 1000)


def _today() -> str:
    return datetime.now().strftime("%Y-%m-%d")


class GameStateMachine:
    """
    Top-level game object. The controller forwards input to the public
    methods and advances `timers` once per frame; everything else
    happens in tick callbacks.
    """

    def __init__(
        self,
        storage: Storage,
        timers: TimerService | None = None,
        audio: AudioSink | None = None,
        rng: random.Random | None = None,
        clock_ms: Callable[[], int] = _wall_clock_ms,
        date_label: Callable[[], str] = _today,
    ):
        self.storage = storage
        self.timers = timers if timers is not None else TimerService()
        self.audio = audio if audio is not None else AudioSink()
        self.rng = rng if rng is not None else random.Random()
        self._clock_ms = clock_ms
        self._date_label = date_label

        self.state: str = STATE_MENU
        self.settings: Settings = load_settings(storage)
        self.leaderboard = Leaderboard(storage)
        self.scheduler = TickScheduler(self.timers)
        self.engine: SimulationEngine | None = None
        self.board: BoardState | None = None
        self.collision: Collision | None = None
        self.new_record: bool = False
        self.ticks: int = 0

    # ── Queries ──────────────────────────────────────────────────
    @property
    def score(self) -> int:
        return self.engine.score if self.engine is not None else 0

    @property
    def difficulty(self) -> str:
        return self.settings.difficulty

    @property
    def diff_config(self) -> dict:
        return DIFFICULTIES[self.settings.difficulty]

    # ── Settings (apply to the next run) ─────────────────────────
    def set_difficulty(self, name: str) -> None:
        if name not in DIFFICULTIES:
            raise ValueError(f"unknown difficulty {name!r}")
        if self.state in (STATE_MENU, STATE_OVER):
            self.settings.difficulty = name

    def set_obstacle_mode(self, enabled: bool) -> None:
        if self.state in (STATE_MENU, STATE_OVER):
            self.settings.obstacle_mode = enabled

    def toggle_obstacle_mode(self) -> None:
        self.set_obstacle_mode(not self.settings.obstacle_mode)

    def set_sound_enabled(self, enabled: bool) -> None:
        self.settings.sound_enabled = enabled
        if not enabled:
            self.audio.stop_music()
        elif self.state == STATE_PLAYING:
            self.audio.start_music()

    def toggle_sound(self) -> bool:
        self.set_sound_enabled(not self.settings.sound_enabled)
        return self.settings.sound_enabled

    # ── Transitions ──────────────────────────────────────────────
    def start(self) -> None:
        if self.state != STATE_MENU:
            logger.debug("start ignored in state %s", self.state)
            return
        self._begin_run()

    def pause(self) -> None:
        if self.state != STATE_PLAYING:
            return
        self.state = STATE_PAUSED
        self.scheduler.stop()
        self.audio.stop_music()

    def resume(self) -> None:
        if self.state != STATE_PAUSED:
            return
        self.state = STATE_PLAYING
        if self.settings.sound_enabled:
            self.audio.start_music()
        # an effect may have expired while paused; engine.interval is current
        self.scheduler.start(self.engine.interval, self._on_tick)

    def toggle_pause(self) -> None:
        if self.state == STATE_PLAYING:
            self.pause()
        elif self.state == STATE_PAUSED:
            self.resume()

    def restart(self) -> None:
        if self.state not in (STATE_PLAYING, STATE_PAUSED, STATE_OVER):
            logger.debug("restart ignored in state %s", self.state)
            return
        self._end_run()
        self._begin_run()

    def play_again(self) -> None:
        if self.state == STATE_OVER:
            self.restart()

    def return_to_menu(self) -> None:
        if self.state == STATE_MENU:
            return
        self._end_run()
        self.state = STATE_MENU

    def request_direction(self, direction: Direction) -> bool:
        if self.state != STATE_PLAYING:
            return False
        return self.engine.request_direction(direction)

    # ── Run lifecycle ────────────────────────────────────────────
    def _begin_run(self) -> None:
        save_settings(self.storage, self.settings)
        self.engine = SimulationEngine(
            self.settings.difficulty,
            self.timers,
            obstacle_mode=self.settings.obstacle_mode,
            rng=self.rng,
            on_interval_change=self._on_interval_change,
        )
        self.engine.spawn()
        self.board = self.engine.board()
        self.collision = None
        self.new_record = False
        self.ticks = 0
        self.state = STATE_PLAYING

        if self.settings.sound_enabled:
            self.audio.start_music()
        self.scheduler.start(self.engine.base_interval, self._on_tick)
        logger.info("run started: %s, obstacles %s, %d obstacles placed",
                    self.settings.difficulty,
                    "on" if self.settings.obstacle_mode else "off",
                    len(self.engine.obstacles))

    def _end_run(self) -> None:
        self.scheduler.stop()
        self.audio.stop_music()
        if self.engine is not None:
            self.engine.dispose()
        self.engine = None

    def _on_tick(self) -> None:
        if self.state != STATE_PLAYING:
            return
        self.ticks += 1
        result = self.engine.step()
        self.board = result.board
        self._play_events(result)
        if result.game_over:
            self._game_over(result.collision)

    def _on_interval_change(self, interval: int) -> None:
        # the effect state has already changed; only the tick needs a restart
        if self.state == STATE_PLAYING:
            self.scheduler.restart(interval)

    def _play_events(self, result: StepResult) -> None:
        if not self.settings.sound_enabled:
            return
        for event in result.events:
            if event is GameEvent.EAT:
                self.audio.eat()
            elif event is GameEvent.SPECIAL:
                self.audio.special()

    def _game_over(self, collision: Collision) -> None:
        self.state = STATE_OVER
        self.collision = collision
        self.scheduler.stop()
        self.audio.stop_music()
        if self.settings.sound_enabled:
            self.audio.game_over()

        entry = LeaderboardEntry(
            score=self.engine.score,
            difficulty=self.settings.difficulty,
            obstacle=self.settings.obstacle_mode,
            date=self._date_label(),
            timestamp=self._clock_ms(),
        )
        self.new_record = self.leaderboard.record(entry)
        logger.info("game over (%s) after %d ticks, score %d",
                    collision.value, self.ticks, entry.score)
