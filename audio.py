"""
Sound cues on pygame.mixer.

Modes only ever call `play(name)`. Anything that is not ready yet (mixer
failed to start, file missing, unknown cue) turns into a logged no-op so a
missing sound never costs a frame.
"""

import logging
import os

import pygame

logger = logging.getLogger(__name__)

SOUND_DIR = "sound_effects"

DEFAULT_CUES = {
    "gun":      "mixkit-game-gun-shot-1662.mp3",
    "throw":    "basketball-throw.wav",
    "swish":    "mixkit-basketball-ball-hitting-the-net-2084.wav",
    "applause": "mixkit-girls-audience-applause-510.wav",
    "whip":     "mixkit-lasso-fast-whip-1513.wav",
}

_CUE_VOLUME = {"gun": 0.7, "applause": 0.5}


class SoundBoard:
    def __init__(self, sound_dir: str = SOUND_DIR, cues: dict | None = None,
                 master_volume: float = 0.5):
        self.sound_dir = sound_dir
        self.cues = dict(DEFAULT_CUES if cues is None else cues)
        self.master_volume = master_volume
        self._sounds: dict[str, "pygame.mixer.Sound"] = {}
        self.ready = False

    def load(self) -> int:
        """Start the mixer and load every cue file that exists. Returns the count loaded."""
        try:
            pygame.mixer.init()
        except pygame.error as e:
            logger.warning("Audio disabled, mixer failed to start: %s", e)
            return 0
        self.ready = True

        for name, filename in self.cues.items():
            path = os.path.join(self.sound_dir, filename)
            if not os.path.exists(path):
                logger.warning("Sound '%s' not found at %s", name, path)
                continue
            try:
                sound = pygame.mixer.Sound(path)
            except pygame.error as e:
                logger.warning("Failed to load sound '%s': %s", name, e)
                continue
            sound.set_volume(self.master_volume * _CUE_VOLUME.get(name, 1.0))
            self._sounds[name] = sound
        logger.info("Loaded %d/%d sounds", len(self._sounds), len(self.cues))
        return len(self._sounds)

    def is_loaded(self, name: str) -> bool:
        return name in self._sounds

    def play(self, name: str) -> bool:
        sound = self._sounds.get(name)
        if sound is None:
            logger.debug("Sound '%s' not loaded yet", name)
            return False
        try:
            sound.play()
        except pygame.error as e:
            logger.warning("Failed to play '%s': %s", name, e)
            return False
        return True

    def close(self):
        self._sounds.clear()
        if self.ready:
            pygame.mixer.quit()
            self.ready = False
