"""
errors.py — Exception types raised by the game core.
"""


class GridSnakeError(Exception):
    """Base class for all game errors."""


class PlacementExhausted(GridSnakeError):
    """No free cell was found within the retry bound."""

    def __init__(self, attempts: int):
        super().__init__(f"no free cell found after {attempts} attempts")
        self.attempts = attempts
