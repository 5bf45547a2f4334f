"""
pygame.mixer implementation of the gameplay sound hooks.
This is a THIN ADAPTER - no game logic here.
"""
import logging
from pathlib import Path
from typing import Dict, Optional

import pygame

logger = logging.getLogger(__name__)

SOUND_NAMES = ("gunshot", "impact", "short_explosion", "long_explosion")


class MixerSounds:
    """
    Loads one .wav per effect from a directory and plays it on demand.
    Missing files are logged once at startup and then stay silent.
    """

    def __init__(self, sounds_dir: Optional[Path], volume: float = 0.6):
        self.sounds: Dict[str, pygame.mixer.Sound] = {}
        if sounds_dir is None:
            logger.info("No sounds directory configured, running silent")
            return

        if not pygame.mixer.get_init():
            try:
                pygame.mixer.init()
            except pygame.error as exc:
                logger.warning(f"Audio device unavailable, running silent: {exc}")
                return

        for name in SOUND_NAMES:
            path = Path(sounds_dir) / f"{name}.wav"
            if not path.exists():
                logger.warning(f"Missing sound file: {path}")
                continue
            sound = pygame.mixer.Sound(str(path))
            sound.set_volume(max(0.0, min(1.0, volume)))
            self.sounds[name] = sound
        logger.info(f"Loaded {len(self.sounds)} of {len(SOUND_NAMES)} sounds from {sounds_dir}")

    def _play(self, name: str) -> None:
        sound = self.sounds.get(name)
        if sound is not None:
            sound.play()

    def play_gunshot(self) -> None:
        self._play("gunshot")

    def play_impact(self) -> None:
        self._play("impact")

    def play_short_explosion(self) -> None:
        self._play("short_explosion")

    def play_long_explosion(self) -> None:
        self._play("long_explosion")
