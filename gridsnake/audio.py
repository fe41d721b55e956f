"""
audio.py — Sound output.

AudioSink is the interface the game talks to and is itself silent, so
the core runs headless. ToneBoard synthesizes every sound with
pygame.mixer at startup; no audio files are needed.

If the mixer cannot be opened the game runs silently with a logged
warning.
"""

from __future__ import annotations

import logging
import math

import pygame

logger = logging.getLogger(__name__)

SAMPLE_RATE = 22050
AMPLITUDE   = 12000

# C5 D5 E5 G5, played in the pattern below, one note per beat
MUSIC_NOTES   = (523.25, 587.33, 659.25, 783.99)
MUSIC_PATTERN = (0, 2, 1, 3, 0, 2, 1, 2)
MUSIC_BEAT_S  = 0.3


class AudioSink:
    """Fire-and-forget sound triggers. This base class plays nothing."""

    def eat(self) -> None:
        pass

    def special(self) -> None:
        pass

    def game_over(self) -> None:
        pass

    def start_music(self) -> None:
        pass

    def stop_music(self) -> None:
        pass


# ──────────────────────── waveform helpers ───────────────────────
def _wave(shape: str, phase: float) -> float:
    """phase in cycles; returns a sample in [-1, 1]."""
    frac = phase % 1.0
    if shape == "square":
        return 1.0 if frac < 0.5 else -1.0
    if shape == "triangle":
        return 4.0 * abs(frac - 0.5) - 1.0
    if shape == "sawtooth":
        return 2.0 * frac - 1.0
    return math.sin(2 * math.pi * frac)


def tone_bytes(
    freq: float,
    duration: float,
    shape: str = "sine",
    volume: float = 0.3,
    end_freq: float | None = None,
    rate: int = SAMPLE_RATE,
    channels: int = 1,
) -> bytes:
    """
    Signed 16-bit PCM with an exponential fade-out (and optional sweep).
    Each sample is repeated once per channel, so the buffer matches a
    mixer opened with the same rate and channel count.
    """
    length = max(1, int(rate * duration))
    end_freq = end_freq or freq
    buf = bytearray()
    phase = 0.0
    for i in range(length):
        t = i / length
        f = freq * (end_freq / freq) ** t
        phase += f / rate
        envelope = volume * (0.01 / volume) ** t
        sample = int(AMPLITUDE * envelope / 0.3 * _wave(shape, phase))
        sample = max(-32767, min(32767, sample))
        buf += sample.to_bytes(2, byteorder="little", signed=True) * channels
    return bytes(buf)


def silence_bytes(duration: float, rate: int = SAMPLE_RATE, channels: int = 1) -> bytes:
    return bytes(2 * channels * int(rate * duration))


def pre_init_mixer() -> None:
    """Ask for the tone format before pygame.init() opens the mixer with its defaults."""
    pygame.mixer.pre_init(frequency=SAMPLE_RATE, size=-16, channels=1)


# ─────────────────────────── ToneBoard ───────────────────────────
class ToneBoard(AudioSink):
    """Synthesized sound effects and a looping background pattern."""

    def __init__(self):
        self.ok = False
        self.rate = SAMPLE_RATE
        self.channels = 1
        self._sounds: dict[str, pygame.mixer.Sound] = {}
        self._music_channel: pygame.mixer.Channel | None = None
        try:
            # no-op when pygame.init() already opened the mixer; build for
            # whatever format it ended up with
            pygame.mixer.init(frequency=SAMPLE_RATE, size=-16, channels=1)
            self.rate, size, self.channels = pygame.mixer.get_init()
            if size != -16:
                raise pygame.error(f"unsupported sample size {size}")
            self._build_sounds()
            self.ok = True
            logger.debug("[audio] tones built at %d Hz, %d channel(s)", self.rate, self.channels)
        except pygame.error as exc:
            logger.warning("[audio] mixer unavailable, running silently: %s", exc)

    def _tone(self, *args, **kwargs) -> bytes:
        return tone_bytes(*args, rate=self.rate, channels=self.channels, **kwargs)

    def _build_sounds(self) -> None:
        self._sounds["eat"] = pygame.mixer.Sound(buffer=self._tone(440, 0.05, "sine", 0.2))
        # two quick rising chirps
        self._sounds["special"] = pygame.mixer.Sound(
            buffer=self._tone(880, 0.05, "triangle", 0.3) + self._tone(1100, 0.05, "triangle", 0.2)
        )
        self._sounds["over"] = pygame.mixer.Sound(
            buffer=self._tone(440, 0.5, "sawtooth", 0.3, end_freq=110)
        )
        beat = bytearray()
        for idx in MUSIC_PATTERN:
            beat += self._tone(MUSIC_NOTES[idx], MUSIC_BEAT_S * 0.8, "square", 0.05)
            beat += silence_bytes(MUSIC_BEAT_S * 0.2, self.rate, self.channels)
        self._sounds["music"] = pygame.mixer.Sound(buffer=bytes(beat))

    def _play(self, name: str) -> pygame.mixer.Channel | None:
        if not self.ok:
            return None
        return self._sounds[name].play()

    def eat(self) -> None:
        self._play("eat")

    def special(self) -> None:
        self._play("special")

    def game_over(self) -> None:
        self._play("over")

    def start_music(self) -> None:
        """Start the loop from the beginning; no-op if it is already playing."""
        if not self.ok:
            return
        if self._music_channel is not None and self._music_channel.get_busy():
            return
        self._music_channel = self._sounds["music"].play(loops=-1)   # -1 = loop forever

    def stop_music(self) -> None:
        if self._music_channel is not None:
            self._music_channel.stop()
            self._music_channel = None

    def shutdown(self) -> None:
        self.stop_music()
        if self.ok:
            pygame.mixer.quit()
