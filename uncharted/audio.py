"""Synthesised sound cues played through ``pygame.mixer``."""

from __future__ import annotations

import logging
import math
import random
from array import array
from dataclasses import dataclass

import pygame

from .models import Cue
from .resources import ResourceManager

logger = logging.getLogger(__name__)

SAMPLE_RATE = 22050
PEAK = 32767


@dataclass(frozen=True)
class Tone:
    """A single oscillator burst inside a cue."""

    frequency: float
    duration: float
    wave: str = "sine"
    volume: float = 0.3
    offset: float = 0.0


def _excavation_rumble() -> list[Tone]:
    return [
        Tone(100 + random.random() * 100, 0.1, "sawtooth", 0.08, i * 0.05)
        for i in range(4)
    ]


CUE_TONES: dict[Cue, list[Tone]] = {
    Cue.SCAN: [Tone(800, 0.15, "sine", 0.2), Tone(1200, 0.1, "sine", 0.15, 0.08)],
    Cue.LIDAR: [Tone(300, 0.2, "sawtooth", 0.15), Tone(600, 0.15, "sine", 0.2, 0.1)],
    Cue.DRILL: [Tone(150, 0.3, "square", 0.1), Tone(200, 0.2, "square", 0.08, 0.15)],
    Cue.DRILL_HIT: [
        Tone(400, 0.2, "sine", 0.3),
        Tone(500, 0.15, "sine", 0.25),
        Tone(600, 0.2, "sine", 0.2, 0.1),
    ],
    Cue.EXCAVATE: _excavation_rumble(),
    Cue.DISCOVERY: [
        Tone(freq, 0.3, "sine", 0.25, i * 0.12)
        for i, freq in enumerate((523, 659, 784, 1047))
    ],
    Cue.TERRAQUEST: [Tone(200 + i * 100, 0.15, "sine", 0.2, i * 0.08) for i in range(8)],
    Cue.VICTORY: [
        Tone(freq, 0.4, "sine", 0.3, i * 0.15)
        for i, freq in enumerate((523, 659, 784, 880, 1047, 1319, 1568))
    ],
    Cue.ERROR: [Tone(200, 0.2, "square", 0.15), Tone(150, 0.3, "square", 0.12, 0.15)],
    Cue.CLICK: [Tone(1000, 0.05, "sine", 0.1)],
}


def _oscillate(wave: str, phase: float) -> float:
    cycle = phase % 1.0
    if wave == "square":
        return 1.0 if cycle < 0.5 else -1.0
    if wave == "sawtooth":
        return 2.0 * cycle - 1.0
    return math.sin(2 * math.pi * cycle)


def render_tones(tones: list[Tone], sample_rate: int = SAMPLE_RATE) -> list[float]:
    """Mix *tones* into mono samples in ``[-1, 1]`` with an exponential decay."""

    length = max((tone.offset + tone.duration for tone in tones), default=0.0)
    samples = [0.0] * int(length * sample_rate)
    for tone in tones:
        start = int(tone.offset * sample_rate)
        count = int(tone.duration * sample_rate)
        if count <= 0:
            continue
        # Gain falls from the tone volume to 0.01 over its duration.
        decay = math.log(0.01 / tone.volume) / count if tone.volume > 0.01 else 0.0
        for i in range(count):
            index = start + i
            if index >= len(samples):
                break
            gain = tone.volume * math.exp(decay * i)
            samples[index] += gain * _oscillate(tone.wave, tone.frequency * i / sample_rate)
    return [max(-1.0, min(1.0, sample)) for sample in samples]


class AudioCues:
    """Audio sink that plays a short sound for each game cue.

    A ``<cue>.wav`` file in the audio asset directory replaces the
    synthesised tone for that cue. When the mixer cannot start, every cue
    becomes a no-op.
    """

    def __init__(self, resources: ResourceManager | None = None, enabled: bool = True) -> None:
        self.resources = resources or ResourceManager()
        self.enabled = enabled
        self.sounds: dict[Cue, pygame.mixer.Sound] = {}
        self._initialised = False

    def toggle(self) -> bool:
        self.enabled = not self.enabled
        return self.enabled

    def play(self, cue: Cue) -> None:
        if not self.enabled or not self._ensure_mixer():
            return
        sound = self.sounds.get(cue)
        if sound is None:
            sound = self._load(cue)
            if sound is None:
                return
            self.sounds[cue] = sound
        sound.play()

    def _ensure_mixer(self) -> bool:
        if self._initialised:
            return True
        try:
            if pygame.mixer.get_init() is None:
                pygame.mixer.init(frequency=SAMPLE_RATE, size=-16, channels=1)
        except pygame.error as exc:
            logger.warning("Audio disabled: %s", exc)
            self.enabled = False
            return False
        self._initialised = True
        return True

    def _load(self, cue: Cue) -> pygame.mixer.Sound | None:
        override = self.resources.find(self.resources.config.audio_path(f"{cue.value}.wav"))
        try:
            if override is not None:
                return pygame.mixer.Sound(str(override))
            return self._synthesise(CUE_TONES[cue])
        except pygame.error as exc:
            logger.warning("Could not prepare %s cue: %s", cue.value, exc)
            return None

    @staticmethod
    def _synthesise(tones: list[Tone]) -> pygame.mixer.Sound:
        frequency, _, channels = pygame.mixer.get_init()
        pcm = array("h")
        for sample in render_tones(tones, frequency):
            value = int(sample * PEAK)
            for _ in range(channels):
                pcm.append(value)
        return pygame.mixer.Sound(buffer=pcm.tobytes())
