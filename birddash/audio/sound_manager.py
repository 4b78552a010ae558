"""
sound_manager.py
----------------
Synthesized sound effects played through pygame.mixer.

Every effect is a short stack of enveloped tones rendered once into a
16-bit buffer at startup. If the mixer cannot be opened the manager stays
silent and every play call becomes a no-op.
"""

import math
from array import array

import pygame

from birddash.core.debug.debug_logger import DebugLogger


INSTANCE = None


def get_sound_manager():
    return INSTANCE


# name -> [(frequency Hz, duration s, wave, volume, delay s), ...]
SOUND_DEFINITIONS = {
    "collect": [(800, 0.08, "sine", 0.3, 0.0), (1200, 0.06, "triangle", 0.15, 0.0)],
    "power_up": [
        (440, 0.10, "square", 0.4, 0.0),
        (660, 0.10, "square", 0.4, 0.08),
        (880, 0.15, "triangle", 0.3, 0.16),
    ],
    "explosion": [
        (60, 0.50, "sawtooth", 0.8, 0.0),
        (150, 0.30, "square", 0.6, 0.05),
        (800, 0.20, "sawtooth", 0.4, 0.10),
        (400, 0.15, "triangle", 0.3, 0.15),
    ],
    "obstacle_hit": [(150, 0.10, "sawtooth", 0.6, 0.0), (100, 0.15, "square", 0.4, 0.05)],
    "shield_block": [
        (300, 0.08, "triangle", 0.5, 0.0),
        (450, 0.06, "sawtooth", 0.3, 0.0),
        (600, 0.10, "sine", 0.2, 0.04),
    ],
    "dash": [
        (200, 0.15, "sawtooth", 0.4, 0.0),
        (300, 0.10, "sawtooth", 0.3, 0.05),
        (400, 0.08, "triangle", 0.2, 0.10),
    ],
    "jump": [(520, 0.06, "triangle", 0.25, 0.0), (780, 0.05, "sine", 0.15, 0.03)],
    "game_over": [
        (392, 0.20, "triangle", 0.5, 0.0),
        (330, 0.20, "triangle", 0.5, 0.2),
        (262, 0.45, "triangle", 0.5, 0.4),
    ],
    "high_score": [
        (800, 0.10, "sine", 0.6, 0.0),
        (1200, 0.08, "triangle", 0.4, 0.0),
        (1000, 0.12, "sine", 0.5, 0.1),
        (1200, 0.15, "sine", 0.4, 0.2),
    ],
    "first_place": [
        (523, 0.2, "triangle", 0.8, 0.0),
        (659, 0.2, "triangle", 0.8, 0.2),
        (784, 0.2, "triangle", 0.8, 0.4),
        (1047, 0.4, "triangle", 0.8, 0.6),
        (784, 0.2, "triangle", 0.8, 1.0),
        (1047, 0.6, "triangle", 0.8, 1.2),
    ],
}


# ===========================================================
# Waveform Synthesis
# ===========================================================

def _wave(kind, phase):
    """Sample a unit waveform at ``phase`` (cycles)."""
    frac = phase - math.floor(phase)
    if kind == "square":
        return 1.0 if frac < 0.5 else -1.0
    if kind == "sawtooth":
        return 2.0 * frac - 1.0
    if kind == "triangle":
        return 4.0 * abs(frac - 0.5) - 1.0
    return math.sin(2 * math.pi * phase)


def synthesize(layers, sample_rate=22050):
    """
    Mix tone layers into mono float samples in [-1, 1].

    Each tone has a 10 ms attack and an exponential decay to silence.
    """
    length = max(int((delay + duration) * sample_rate) for _, duration, _, _, delay in layers)
    mix = [0.0] * length

    for frequency, duration, kind, volume, delay in layers:
        start = int(delay * sample_rate)
        count = int(duration * sample_rate)
        attack = max(1, int(0.01 * sample_rate))
        for i in range(count):
            t = i / sample_rate
            envelope = min(1.0, i / attack) * math.exp(-5.0 * t / duration)
            mix[start + i] += _wave(kind, frequency * t) * volume * envelope

    peak = max(1.0, max(abs(s) for s in mix))
    return [s / peak for s in mix]


# ===========================================================
# Sound Manager
# ===========================================================

class SoundManager:
    """Builds and plays the effect bank."""

    def __init__(self, definitions=None):
        global INSTANCE
        INSTANCE = self

        self.sfx = {}
        self.enabled = False
        self.muted = False
        self.master_level = 100
        self.sfx_volume = 1.0
        self.master_volume = 1.0

        try:
            if not pygame.mixer.get_init():
                pygame.mixer.init(frequency=22050, size=-16, channels=1)
            self.enabled = True
        except pygame.error as e:
            DebugLogger.warn(f"Audio unavailable: {e}", category="audio")
            DebugLogger.init_entry("SoundManager", "OFFLINE")
            return

        self.build_sounds(definitions or SOUND_DEFINITIONS)
        DebugLogger.init_entry("SoundManager")

    # ===========================================================
    # Loading
    # ===========================================================

    def build_sounds(self, definitions):
        """Render every definition into a pygame Sound."""
        frequency, _, channels = pygame.mixer.get_init()
        for name, layers in definitions.items():
            samples = synthesize(layers, frequency)
            pcm = array("h")
            for s in samples:
                value = int(s * 32000)
                pcm.extend([value] * channels)
            try:
                self.sfx[name] = pygame.mixer.Sound(buffer=pcm.tobytes())
            except pygame.error as e:
                DebugLogger.warn(f"Failed to build sound '{name}': {e}", category="audio")
        self.update_sfx()
        DebugLogger.init_sub(f"{len(self.sfx)} sounds synthesized")

    # ===========================================================
    # Playback
    # ===========================================================

    def play_sfx(self, name):
        if not self.enabled or self.muted:
            return
        sound = self.sfx.get(name)
        if sound is None:
            DebugLogger.warn(f"Unknown sound '{name}'", category="audio")
            return
        sound.play()

    def play_ranking(self, rank):
        if rank == 1:
            self.play_sfx("first_place")
        else:
            self.play_sfx("high_score")

    def toggle_mute(self) -> bool:
        self.muted = not self.muted
        if self.muted and self.enabled:
            pygame.mixer.stop()
        return self.muted

    # ===========================================================
    # Volume
    # ===========================================================

    @staticmethod
    def volume_scale(level):
        """Map a 0-100 UI level onto a perceptual (squared) gain."""
        if level <= 0:
            return 0.0
        return min(max((level / 100) ** 2, 0.0), 1.0)

    def set_master_volume(self, level):
        self.master_level = level
        self.master_volume = self.volume_scale(level)
        self.update_sfx()

    def update_sfx(self):
        volume = self.master_volume * self.sfx_volume
        for sound in self.sfx.values():
            sound.set_volume(volume)
