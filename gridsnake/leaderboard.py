"""
leaderboard.py — Top-10 ranking of finished runs.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any

from .config import DIFFICULTIES, LEADERBOARD_KEY, LEADERBOARD_SIZE
from .storage import Storage

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class LeaderboardEntry:
    score: int
    difficulty: str
    obstacle: bool
    date: str
    timestamp: int

    @classmethod
    def from_dict(cls, data: Any) -> "LeaderboardEntry | None":
        """None when the stored record is malformed."""
        if not isinstance(data, dict):
            return None
        try:
            score = data["score"]
            timestamp = data["timestamp"]
            if not isinstance(score, int) or isinstance(score, bool) or score < 0:
                return None
            if not isinstance(timestamp, int):
                return None
            difficulty = data.get("difficulty")
            return cls(
                score=score,
                difficulty=difficulty if difficulty in DIFFICULTIES else "normal",
                obstacle=bool(data.get("obstacle", False)),
                date=str(data.get("date", "")),
                timestamp=timestamp,
            )
        except KeyError:
            return None

    def to_dict(self) -> dict:
        return {
            "score": self.score,
            "difficulty": self.difficulty,
            "obstacle": self.obstacle,
            "date": self.date,
            "timestamp": self.timestamp,
        }


class Leaderboard:
    """
    Persisted list of the best runs, highest score first.

    Sorting is stable, so among equal scores earlier entries stay ahead
    of later ones.
    """

    def __init__(self, storage: Storage, size: int = LEADERBOARD_SIZE):
        self.storage = storage
        self.size = size
        self._entries: list[LeaderboardEntry] = self._load()

    def _load(self) -> list[LeaderboardEntry]:
        raw = self.storage.load(LEADERBOARD_KEY)
        if raw is None:
            return []
        if not isinstance(raw, list):
            logger.warning("leaderboard record is not a list, starting empty")
            return []
        entries = [LeaderboardEntry.from_dict(item) for item in raw]
        valid = [e for e in entries if e is not None]
        if len(valid) != len(entries):
            logger.warning("dropped %d malformed leaderboard entries", len(entries) - len(valid))
        valid.sort(key=lambda e: -e.score)
        return valid[: self.size]

    def record(self, entry: LeaderboardEntry) -> bool:
        """
        Insert, re-rank, truncate and persist.
        Returns True when the new entry sits at rank 0 afterwards.
        """
        ranked = sorted(self._entries + [entry], key=lambda e: -e.score)
        is_new_record = ranked[0].timestamp == entry.timestamp
        self._entries = ranked[: self.size]
        self.storage.save(LEADERBOARD_KEY, [e.to_dict() for e in self._entries])
        logger.info("recorded score %d (%s)%s", entry.score, entry.difficulty,
                    ", new record" if is_new_record else "")
        return is_new_record

    def list(self) -> list[LeaderboardEntry]:
        return list(self._entries)

    @property
    def best_score(self) -> int:
        return self._entries[0].score if self._entries else 0

    def __len__(self):
        return len(self._entries)
