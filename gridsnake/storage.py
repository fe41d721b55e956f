"""
storage.py — Persistence port and user settings.

Two named records are persisted: "settings" and "leaderboard". A Storage
maps a record name to a JSON-compatible value. Anything that goes wrong
while reading or writing is logged and swallowed here, so the game
always falls back to defaults and keeps running.
"""

from __future__ import annotations

import json
import logging
import os
from dataclasses import asdict, dataclass
from typing import Any

from .config import DIFFICULTIES, DEFAULT_DIFFICULTY, SETTINGS_KEY

logger = logging.getLogger(__name__)


class Storage:
    """Key-value store interface. Returns None for missing keys."""

    def load(self, key: str) -> Any:
        raise NotImplementedError

    def save(self, key: str, value: Any) -> None:
        raise NotImplementedError


class MemoryStorage(Storage):
    """In-process store; values go through JSON so they behave like disk."""

    def __init__(self, initial: dict[str, Any] | None = None):
        self._data: dict[str, str] = {}
        for key, value in (initial or {}).items():
            self.save(key, value)

    def load(self, key: str) -> Any:
        raw = self._data.get(key)
        if raw is None:
            return None
        try:
            return json.loads(raw)
        except ValueError as exc:
            logger.warning("record %r is corrupt: %s", key, exc)
            return None

    def save(self, key: str, value: Any) -> None:
        self._data[key] = json.dumps(value)


class JsonFileStorage(Storage):
    """One <key>.json file per record inside a directory."""

    def __init__(self, directory: str):
        self.directory = directory

    def path_for(self, key: str) -> str:
        return os.path.join(self.directory, f"{key}.json")

    def load(self, key: str) -> Any:
        path = self.path_for(key)
        if not os.path.isfile(path):
            return None
        try:
            with open(path, "r", encoding="utf-8") as f:
                return json.load(f)
        except (OSError, ValueError) as exc:
            logger.warning("could not read %s: %s", path, exc)
            return None

    def save(self, key: str, value: Any) -> None:
        path = self.path_for(key)
        tmp = path + ".tmp"
        try:
            os.makedirs(self.directory, exist_ok=True)
            with open(tmp, "w", encoding="utf-8") as f:
                json.dump(value, f, ensure_ascii=False, indent=2)
            os.replace(tmp, path)
        except OSError as exc:
            logger.warning("could not write %s: %s", path, exc)


# ─────────────────────────── Settings ────────────────────────────
@dataclass
class Settings:
    difficulty: str = DEFAULT_DIFFICULTY
    obstacle_mode: bool = False
    sound_enabled: bool = True

    @classmethod
    def from_dict(cls, data: Any) -> "Settings":
        """Build from a stored record, keeping defaults for bad fields."""
        settings = cls()
        if not isinstance(data, dict):
            return settings
        if data.get("difficulty") in DIFFICULTIES:
            settings.difficulty = data["difficulty"]
        if isinstance(data.get("obstacleMode"), bool):
            settings.obstacle_mode = data["obstacleMode"]
        if isinstance(data.get("soundEnabled"), bool):
            settings.sound_enabled = data["soundEnabled"]
        return settings

    def to_dict(self) -> dict:
        d = asdict(self)
        return {
            "difficulty": d["difficulty"],
            "obstacleMode": d["obstacle_mode"],
            "soundEnabled": d["sound_enabled"],
        }


def load_settings(storage: Storage) -> Settings:
    data = storage.load(SETTINGS_KEY)
    if data is None:
        logger.debug("no stored settings, using defaults")
    return Settings.from_dict(data)


def save_settings(storage: Storage, settings: Settings) -> None:
    storage.save(SETTINGS_KEY, settings.to_dict())
