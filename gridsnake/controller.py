"""
controller.py — Controller layer.

Responsibilities:
  - Own the pygame event loop.
  - Translate raw keyboard events into state machine commands.
  - Feed the pygame clock to the timer service so ticks and effect
    expiries fire on the loop thread.
  - Ask the view to render once per frame.

The controller is the only layer that imports pygame directly for events.
"""

import logging
import sys

import pygame

from .audio import ToneBoard, pre_init_mixer
from .config import (
    WIDTH, HEIGHT, FPS,
    STATE_MENU, STATE_PLAYING, STATE_PAUSED, STATE_OVER,
)
from .game import GameStateMachine
from .model import Direction
from .storage import Storage
from .timers import TimerService
from .view import GameView

logger = logging.getLogger(__name__)

DIRECTION_KEYS = {
    pygame.K_UP:    Direction.UP,
    pygame.K_w:     Direction.UP,
    pygame.K_DOWN:  Direction.DOWN,
    pygame.K_s:     Direction.DOWN,
    pygame.K_LEFT:  Direction.LEFT,
    pygame.K_a:     Direction.LEFT,
    pygame.K_RIGHT: Direction.RIGHT,
    pygame.K_d:     Direction.RIGHT,
}

DIFFICULTY_KEYS = {
    pygame.K_1: "easy",
    pygame.K_2: "normal",
    pygame.K_3: "hard",
}


class GameController:
    """
    Owns the main loop.
    Glues GameStateMachine <-> GameView without them knowing about each other.
    """

    def __init__(self, storage: Storage, muted: bool = False):
        pre_init_mixer()
        pygame.init()
        self.screen = pygame.display.set_mode((WIDTH, HEIGHT))
        pygame.display.set_caption("SNAKE")
        self.clock  = pygame.time.Clock()
        self.audio  = ToneBoard()
        self.timers = TimerService(now=pygame.time.get_ticks(), coalesce=True)
        self.game   = GameStateMachine(storage, timers=self.timers, audio=self.audio)
        self.view   = GameView(self.screen)
        self.show_leaderboard = False
        if muted:
            self.game.set_sound_enabled(False)

    # ── Public entry point ────────────────────────────────────────
    def run(self) -> None:
        """Start and run the game loop until the player quits."""
        logger.info("window open, %dx%d at %d fps", WIDTH, HEIGHT, FPS)
        while True:
            self.clock.tick(FPS)
            self._handle_events()
            self.timers.advance(pygame.time.get_ticks())
            self.view.render(self.game, self.show_leaderboard)

    # ── Event dispatch ────────────────────────────────────────────
    def _handle_events(self) -> None:
        for event in pygame.event.get():
            if event.type == pygame.QUIT:
                self._quit()
            elif event.type == pygame.KEYDOWN:
                self._handle_keydown(event.key)

    def _handle_keydown(self, key: int) -> None:
        # Q quits from any state
        if key == pygame.K_q:
            self._quit()
        if key == pygame.K_m:
            self.game.toggle_sound()
            return

        if self.show_leaderboard:
            if key in (pygame.K_l, pygame.K_ESCAPE):
                self.show_leaderboard = False
            return

        state = self.game.state

        if state == STATE_MENU:
            self._handle_menu_keys(key)
        elif state == STATE_PLAYING:
            self._handle_playing_keys(key)
        elif state == STATE_PAUSED:
            self._handle_paused_keys(key)
        elif state == STATE_OVER:
            self._handle_over_keys(key)

    # ── Per-state key handlers ────────────────────────────────────
    def _handle_menu_keys(self, key: int) -> None:
        if key in (pygame.K_RETURN, pygame.K_SPACE):
            self.game.start()
        elif key == pygame.K_l:
            self.show_leaderboard = True
        else:
            self._handle_settings_keys(key)

    def _handle_playing_keys(self, key: int) -> None:
        if key in DIRECTION_KEYS:
            self.game.request_direction(DIRECTION_KEYS[key])
        elif key in (pygame.K_SPACE, pygame.K_ESCAPE, pygame.K_p):
            self.game.pause()
        elif key == pygame.K_r:
            self.game.restart()
        elif key == pygame.K_BACKSPACE:
            self.game.return_to_menu()
            self.view.clear()

    def _handle_paused_keys(self, key: int) -> None:
        if key in (pygame.K_SPACE, pygame.K_ESCAPE, pygame.K_p):
            self.game.resume()
        elif key == pygame.K_r:
            self.game.restart()
        elif key == pygame.K_BACKSPACE:
            self.game.return_to_menu()
            self.view.clear()

    def _handle_over_keys(self, key: int) -> None:
        if key in (pygame.K_r, pygame.K_SPACE, pygame.K_RETURN):
            self.game.play_again()
        elif key == pygame.K_l:
            self.show_leaderboard = True
        elif key in (pygame.K_BACKSPACE, pygame.K_ESCAPE):
            self.game.return_to_menu()
            self.view.clear()
        else:
            self._handle_settings_keys(key)

    def _handle_settings_keys(self, key: int) -> None:
        if key in DIFFICULTY_KEYS:
            self.game.set_difficulty(DIFFICULTY_KEYS[key])
        elif key == pygame.K_o:
            self.game.toggle_obstacle_mode()

    # ── Utilities ─────────────────────────────────────────────────
    def _quit(self) -> None:
        self.game.return_to_menu()
        self.audio.shutdown()
        pygame.quit()
        sys.exit()
