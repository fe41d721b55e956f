"""
view.py — View layer.

Draws one frame from the state machine: the board (head, fading body,
food coloured by category, obstacles), a HUD panel with score, best
score, difficulty and the active effect banner, and an overlay for
each non-playing state plus the leaderboard.

Public API:
    GameView(screen)                         — bind to a pygame surface
    view.render(game, show_leaderboard)      — draw the current frame
    view.clear()                             — wipe the surface
"""

import math
import pygame

from .config import (
    WIDTH, HEIGHT, PANEL_H, GAME_W, GAME_H,
    OFFSET_X, OFFSET_Y, CELL, GRID_SIZE,
    BG, GRID_COL, UI_COL, BLACK, ACCENT_COL, ALERT_COL,
    PANEL_BG, BORDER_COL, HEAD_COL, BODY_COL, TAIL_COL, OBSTACLE_COL,
    DIFFICULTIES,
    STATE_MENU, STATE_OVER, STATE_PAUSED,
)
from .game import GameStateMachine
from .model import BoardState, Collision, FoodItem

COLLISION_TEXT = {
    Collision.WALL:     "YOU HIT THE WALL",
    Collision.SELF:     "YOU BIT YOURSELF",
    Collision.OBSTACLE: "YOU HIT AN OBSTACLE",
}


# ─────────────────────── colour helpers ──────────────────────────
def _lerp_color(c1: tuple, c2: tuple, t: float) -> tuple:
    t = max(0.0, min(1.0, t))
    return tuple(int(c1[i] + (c2[i] - c1[i]) * t) for i in range(3))


def _with_alpha(color: tuple, alpha: int) -> tuple:
    return (*color[:3], max(0, min(255, alpha)))


def _brighten(color: tuple, factor: float) -> tuple:
    return tuple(min(255, int(c * factor)) for c in color[:3])


def _cell_rect(cell: tuple, inset: int = 1) -> pygame.Rect:
    x, y = cell
    return pygame.Rect(
        OFFSET_X + x * CELL + inset,
        OFFSET_Y + y * CELL + inset,
        CELL - 2 * inset,
        CELL - 2 * inset,
    )


# ─────────────────────────── GameView ────────────────────────────
class GameView:
    """Renders the complete game frame from a GameStateMachine."""

    def __init__(self, screen: pygame.Surface):
        self.screen = screen
        self._init_fonts()
        self._build_static_surfaces()
        self._anim_tick: int = 0

    # ── Main entry ───────────────────────────────────────────────
    def render(self, game: GameStateMachine, show_leaderboard: bool = False) -> None:
        self._anim_tick += 1

        self.screen.fill(BG)
        self.screen.blit(self._grid_surf, (OFFSET_X, OFFSET_Y))

        board = game.board
        if game.state != STATE_MENU and board is not None:
            self._draw_obstacles(board)
            if board.food is not None:
                self._draw_food(board.food)
            self._draw_snake(board, dead=game.state == STATE_OVER)

        self._draw_border()
        self._draw_panel(game)

        if show_leaderboard:
            self._draw_leaderboard_overlay(game)
        elif game.state == STATE_MENU:
            self._draw_menu_overlay(game)
        elif game.state == STATE_PAUSED:
            self._draw_paused_overlay()
        elif game.state == STATE_OVER:
            self._draw_game_over_overlay(game)

        pygame.display.flip()

    def clear(self) -> None:
        self.screen.fill(BG)
        pygame.display.flip()

    # ── Static surface pre-builds ─────────────────────────────────
    def _build_static_surfaces(self) -> None:
        self._grid_surf = pygame.Surface((GAME_W, GAME_H), pygame.SRCALPHA)
        for i in range(GRID_SIZE + 1):
            pygame.draw.line(self._grid_surf, (*GRID_COL, 160),
                             (i * CELL, 0), (i * CELL, GAME_H))
            pygame.draw.line(self._grid_surf, (*GRID_COL, 160),
                             (0, i * CELL), (GAME_W, i * CELL))

    # ── Board ────────────────────────────────────────────────────
    def _draw_obstacles(self, board: BoardState) -> None:
        for cell in board.obstacles:
            rect = _cell_rect(cell)
            pygame.draw.rect(self.screen, OBSTACLE_COL, rect, border_radius=3)
            pygame.draw.rect(self.screen, _brighten(OBSTACLE_COL, 1.4), rect, 1, border_radius=3)

    def _draw_food(self, food: FoodItem) -> None:
        color = food.category.color
        pulse = 0.75 + 0.25 * math.sin(self._anim_tick * 0.12)
        rect = _cell_rect(food.cell, 0)
        r = max(3, int((CELL // 2 - 1) * pulse))

        glow_r = r + 8
        glow = pygame.Surface((glow_r * 2, glow_r * 2), pygame.SRCALPHA)
        for gr in range(glow_r, r, -1):
            a = int(80 * (1 - (gr - r) / (glow_r - r)) * pulse)
            pygame.draw.circle(glow, _with_alpha(color, a), (glow_r, glow_r), gr)
        self.screen.blit(glow, (rect.centerx - glow_r, rect.centery - glow_r))
        pygame.draw.circle(self.screen, color, rect.center, r)

    def _draw_snake(self, board: BoardState, dead: bool) -> None:
        length = len(board.snake)
        for i, cell in reversed(list(enumerate(board.snake))):
            if i == 0:
                color = ALERT_COL if dead else HEAD_COL
                radius = CELL // 3
            else:
                t = (i - 1) / max(length - 2, 1)
                color = _lerp_color(BODY_COL, TAIL_COL, t)
                radius = CELL // 5
            pygame.draw.rect(self.screen, color, _cell_rect(cell), border_radius=radius)
        if length:
            self._draw_eyes(board)

    def _draw_eyes(self, board: BoardState) -> None:
        rect = _cell_rect(board.head)
        dx, dy = board.direction.x, board.direction.y
        px, py = -dy, dx  # perpendicular
        for sign in (+1, -1):
            ex = int(rect.centerx + dx * 4 + sign * px * 4)
            ey = int(rect.centery + dy * 4 + sign * py * 4)
            pygame.draw.circle(self.screen, (230, 230, 230), (ex, ey), 2)
            pygame.draw.rect(self.screen, BLACK, (ex, ey, 1, 1))

    def _draw_border(self) -> None:
        pygame.draw.rect(self.screen, BORDER_COL,
                         (OFFSET_X - 1, OFFSET_Y - 1, GAME_W + 2, GAME_H + 2), 1)

    # ── HUD Panel ─────────────────────────────────────────────────
    def _draw_panel(self, game: GameStateMachine) -> None:
        pygame.draw.rect(self.screen, PANEL_BG, (0, 0, WIDTH, PANEL_H))
        pygame.draw.line(self.screen, BORDER_COL,
                         (0, PANEL_H - 1), (WIDTH, PANEL_H - 1), 1)

        self.screen.blit(self.font_small.render("SCORE", True, UI_COL), (16, 6))
        self.screen.blit(self.font_big.render(str(game.score), True, HEAD_COL), (16, 22))

        diff = game.diff_config
        label = self.font_small.render(diff["label"], True, diff["color"])
        self.screen.blit(label, label.get_rect(center=(WIDTH // 2, 14)))

        best = self.font_tiny.render(f"BEST {game.leaderboard.best_score}", True, UI_COL)
        self.screen.blit(best, best.get_rect(topright=(WIDTH - 16, 8)))

        sound = "SOUND ON" if game.settings.sound_enabled else "SOUND OFF"
        snd = self.font_tiny.render(sound, True, UI_COL)
        self.screen.blit(snd, snd.get_rect(topright=(WIDTH - 16, 24)))

        board = game.board
        if game.state != STATE_MENU and board is not None and board.effect is not None:
            remaining = max(0, board.effect.expires_at - game.timers.now) / 1000
            color = board.effect.category.color
            text = self.font_small.render(f"{board.effect.label}  {remaining:.1f}s", True, color)
            self.screen.blit(text, text.get_rect(center=(WIDTH // 2, 38)))

    # ── Overlay infrastructure ────────────────────────────────────
    def _draw_overlay_base(self) -> None:
        surf = pygame.Surface((GAME_W, GAME_H), pygame.SRCALPHA)
        surf.fill((5, 5, 12, 215))
        self.screen.blit(surf, (OFFSET_X, OFFSET_Y))

    def _draw_animated_title(self, title: str, color: tuple,
                              cy: int, font: pygame.font.Font) -> int:
        pulse = 0.82 + 0.18 * math.sin(self._anim_tick * 0.05)
        surf = font.render(title, True, _brighten(color, pulse))
        self.screen.blit(surf, surf.get_rect(center=(WIDTH // 2, cy + surf.get_height() // 2)))
        return cy + surf.get_height() + 14

    def _draw_text_line(self, text: str, color: tuple,
                        cy: int, font: pygame.font.Font) -> int:
        surf = font.render(text, True, color)
        self.screen.blit(surf, surf.get_rect(center=(WIDTH // 2, cy)))
        return cy + surf.get_height() + 8

    def _draw_button(self, label: str, color: tuple, cy: int) -> int:
        btn_w = max(260, self.font_small.size(label)[0] + 40)
        btn_h = 34
        bx = WIDTH // 2 - btn_w // 2
        bg = pygame.Surface((btn_w, btn_h), pygame.SRCALPHA)
        bg.fill(_with_alpha(color, 22))
        self.screen.blit(bg, (bx, cy))
        pygame.draw.rect(self.screen, color, (bx, cy, btn_w, btn_h), 2, border_radius=4)
        txt = self.font_small.render(label, True, color)
        self.screen.blit(txt, txt.get_rect(center=(WIDTH // 2, cy + btn_h // 2)))
        return cy + btn_h + 10

    # ── State overlays ────────────────────────────────────────────
    def _draw_menu_overlay(self, game: GameStateMachine) -> None:
        self._draw_overlay_base()
        cy = OFFSET_Y + 40
        cy = self._draw_animated_title("SNAKE", HEAD_COL, cy, self.font_title)
        cy += 10

        for name, diff in DIFFICULTIES.items():
            selected = name == game.difficulty
            marker = "►" if selected else " "
            color = diff["color"] if selected else UI_COL
            cy = self._draw_text_line(f"{marker} {diff['label']:<6} {diff['interval']}ms",
                                      color, cy, self.font_med)
        cy = self._draw_text_line("PRESS 1 2 3 TO CHANGE", UI_COL, cy, self.font_tiny)
        cy += 10

        obstacles = "ON" if game.settings.obstacle_mode else "OFF"
        sound = "ON" if game.settings.sound_enabled else "OFF"
        cy = self._draw_text_line(f"[O] OBSTACLES {obstacles}    [M] SOUND {sound}",
                                  UI_COL, cy, self.font_small)
        cy += 18
        cy = self._draw_button("ENTER — START GAME", HEAD_COL, cy)
        cy = self._draw_text_line("L — LEADERBOARD    Q — QUIT", UI_COL, cy, self.font_tiny)
        self._draw_text_line("ARROWS/WASD MOVE   SPACE PAUSE   R RESTART",
                             UI_COL, cy + 6, self.font_tiny)

    def _draw_paused_overlay(self) -> None:
        self._draw_overlay_base()
        cy = OFFSET_Y + GAME_H // 2 - 50
        cy = self._draw_animated_title("PAUSED", ACCENT_COL, cy, self.font_title)
        cy = self._draw_text_line("SPACE / ESC — RESUME", UI_COL, cy, self.font_med)
        cy = self._draw_text_line("R — RESTART", UI_COL, cy, self.font_med)
        self._draw_text_line("BACKSPACE — MENU", UI_COL, cy, self.font_med)

    def _draw_game_over_overlay(self, game: GameStateMachine) -> None:
        self._draw_overlay_base()
        cy = OFFSET_Y + 60
        cy = self._draw_animated_title("GAME OVER", ALERT_COL, cy, self.font_title)
        if game.collision is not None:
            cy = self._draw_text_line(COLLISION_TEXT[game.collision], UI_COL, cy, self.font_med)
        cy += 10
        cy = self._draw_text_line(f"SCORE {game.score}", HEAD_COL, cy, self.font_big)
        if game.new_record:
            cy = self._draw_text_line("★  NEW RECORD  ★", ACCENT_COL, cy, self.font_small)
        cy += 16
        cy = self._draw_button("ENTER — PLAY AGAIN", HEAD_COL, cy)
        self._draw_text_line("L — LEADERBOARD    BACKSPACE — MENU", UI_COL, cy, self.font_tiny)

    def _draw_leaderboard_overlay(self, game: GameStateMachine) -> None:
        self._draw_overlay_base()
        cy = OFFSET_Y + 30
        cy = self._draw_animated_title("LEADERBOARD", ACCENT_COL, cy, self.font_title)
        entries = game.leaderboard.list()
        if not entries:
            cy = self._draw_text_line("NO RECORDS YET", UI_COL, cy + 40, self.font_med)
        for rank, entry in enumerate(entries, start=1):
            label = DIFFICULTIES[entry.difficulty]["label"]
            extra = " +OBST" if entry.obstacle else ""
            line = f"#{rank:<2} {entry.score:>6}  {label:<6}{extra:<6}  {entry.date}"
            color = ACCENT_COL if rank == 1 else UI_COL
            cy = self._draw_text_line(line, color, cy, self.font_med)
        self._draw_text_line("L / ESC — CLOSE", UI_COL, OFFSET_Y + GAME_H - 24, self.font_tiny)

    # ── Font init ─────────────────────────────────────────────────
    def _init_fonts(self) -> None:
        specs = [
            ("font_title", "courier", 42, True),
            ("font_big",   "courier", 26, True),
            ("font_med",   "courier", 17, False),
            ("font_small", "courier", 13, True),
            ("font_tiny",  "courier", 11, False),
        ]
        for attr, name, size, bold in specs:
            try:
                setattr(self, attr, pygame.font.SysFont(name, size, bold=bold))
            except (pygame.error, OSError):
                setattr(self, attr, pygame.font.SysFont(None, size))
