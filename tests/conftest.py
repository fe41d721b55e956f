import random

import pytest

from gridsnake.audio import AudioSink
from gridsnake.game import GameStateMachine
from gridsnake.storage import MemoryStorage
from gridsnake.timers import TimerService


class RecordingAudio(AudioSink):
    def __init__(self):
        self.calls = []

    def eat(self):
        self.calls.append("eat")

    def special(self):
        self.calls.append("special")

    def game_over(self):
        self.calls.append("game_over")

    def start_music(self):
        self.calls.append("start_music")

    def stop_music(self):
        self.calls.append("stop_music")


class FixedRandom:
    """Stands in for random.Random where a test needs exact draws."""

    def __init__(self, values):
        self._values = iter(values)

    def random(self):
        return next(self._values)


@pytest.fixture
def timers():
    return TimerService()


@pytest.fixture
def storage():
    return MemoryStorage()


@pytest.fixture
def audio():
    return RecordingAudio()


@pytest.fixture
def game(storage, timers, audio):
    stamps = iter(range(1, 10_000))
    return GameStateMachine(
        storage,
        timers=timers,
        audio=audio,
        rng=random.Random(7),
        clock_ms=lambda: next(stamps),
        date_label=lambda: "2026-10-17",
    )
