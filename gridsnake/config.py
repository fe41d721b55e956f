"""
config.py — Shared constants for the entire application.
No logic, no imports from internal modules.
"""

# ── Grid ──────────────────────────────────────────────────────────
GRID_SIZE       = 25
SPAWN_CENTER    = (12, 12)
SPAWN_LENGTH    = 3

# ── Window (pygame shell only) ────────────────────────────────────
CELL            = 20
PANEL_H         = 60
MARGIN          = 10
GAME_W = GAME_H = GRID_SIZE * CELL
WIDTH           = GAME_W + 2 * MARGIN
HEIGHT          = GAME_H + PANEL_H + 2 * MARGIN
OFFSET_X        = MARGIN
OFFSET_Y        = PANEL_H + MARGIN
FPS             = 60

# ── Colors ────────────────────────────────────────────────────────
BG          = (10,  10,  15)
GRID_COL    = (15,  20,  32)
HEAD_COL    = (0,   255, 136)
BODY_COL    = (0,   170, 95)
TAIL_COL    = (0,   90,  55)
OBSTACLE_COL = (90,  90,  120)
UI_COL      = (120, 120, 170)
ACCENT_COL  = (255, 228, 77)
ALERT_COL   = (255, 51,  102)
BLACK       = (0,   0,   0)
PANEL_BG    = (12,  12,  20)
BORDER_COL  = (26,  26,  62)

# ── Difficulty ────────────────────────────────────────────────────
# interval: base tick interval in milliseconds (smaller is faster)
DIFFICULTIES = {
    "easy":   {"label": "EASY",   "interval": 200, "color": (0,   200, 100)},
    "normal": {"label": "NORMAL", "interval": 120, "color": (255, 200, 0)},
    "hard":   {"label": "HARD",   "interval": 70,  "color": (255, 120, 0)},
}
DEFAULT_DIFFICULTY = "normal"

# ── Food ──────────────────────────────────────────────────────────
# Enumeration order matters: FoodSelector walks the table in this order.
FOOD_TYPES = {
    "NORMAL": {"score": 10, "probability": 0.7, "color": (255, 228, 77)},
    "SPEED":  {"score": 20, "probability": 0.1, "color": (66,  196, 255)},
    "SLOW":   {"score": 15, "probability": 0.1, "color": (170, 110, 255)},
    "BONUS":  {"score": 50, "probability": 0.1, "color": (255, 140, 60)},
}

# ── Effects ───────────────────────────────────────────────────────
SPEED_FACTOR        = 0.7
SLOW_FACTOR         = 1.4
SPEED_DURATION_MS   = 5000
SLOW_DURATION_MS    = 5000
BONUS_DURATION_MS   = 2000

# ── Placement ─────────────────────────────────────────────────────
FOOD_MAX_ATTEMPTS       = 100
OBSTACLE_MIN_COUNT      = 12
OBSTACLE_MAX_COUNT      = 15
OBSTACLE_MAX_ATTEMPTS   = 50
OBSTACLE_MIN_DISTANCE   = 3

# ── Leaderboard / persistence ─────────────────────────────────────
LEADERBOARD_SIZE    = 10
SETTINGS_KEY        = "settings"
LEADERBOARD_KEY     = "leaderboard"

# ── Game States ───────────────────────────────────────────────────
STATE_MENU    = "menu"
STATE_PLAYING = "playing"
STATE_PAUSED  = "paused"
STATE_OVER    = "gameover"
