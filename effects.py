"""Visual cues: reusable particle bursts and a decaying camera shake."""

import logging

import numpy as np

from scene import Camera, Entity

logger = logging.getLogger(__name__)

BURST_SPREAD   = 0.5
BURST_GRAVITY  = -5.0
BURST_LIFETIME = 1.0


class ParticleBurst(Entity):
    """
    A fixed-size particle cloud that can be re-fired. Hidden when idle; a
    hidden burst is the signal that it is free for the next explosion.
    """
    kind = "burst"

    def __init__(self, count: int, color: tuple[int, int, int], size: float = 0.05,
                 rng: np.random.Generator | None = None):
        super().__init__(radius=size)
        self.count = count
        self.color = color
        self.visible = False
        self._rng = rng or np.random.default_rng()
        self.positions = np.zeros((count, 3))
        self.velocities = np.zeros((count, 3))
        self.lifetimes = np.zeros(count)

    def burst(self, position, speed: float = 5.0):
        position = np.asarray(position, dtype=float)
        self.position = position.copy()
        self.positions = position + (self._rng.random((self.count, 3)) - 0.5) * BURST_SPREAD

        dirs = self._rng.random((self.count, 3)) * 2 - 1
        norms = np.linalg.norm(dirs, axis=1, keepdims=True)
        norms[norms == 0] = 1.0
        scale = speed * (0.5 + self._rng.random((self.count, 1)) * 1.5)
        self.velocities = dirs / norms * scale

        self.lifetimes = np.full(self.count, BURST_LIFETIME)
        self.opacity = 1.0
        self.visible = True

    def update(self, dt: float):
        if not self.visible:
            return
        alive = self.lifetimes > 0
        if not alive.any():
            self.visible = False
            return
        self.positions[alive] += self.velocities[alive] * dt
        self.velocities[alive, 1] += BURST_GRAVITY * dt
        self.lifetimes[alive] -= dt
        self.opacity = float(np.clip(self.lifetimes, 0, None).mean() / BURST_LIFETIME)

    def hide(self):
        self.visible = False
        self.lifetimes[:] = 0


class CameraShake:
    """Random camera jitter whose amplitude falls linearly to zero."""

    def __init__(self, camera: Camera, rng: np.random.Generator | None = None):
        self.camera = camera
        self._rng = rng or np.random.default_rng()
        self.intensity = 0.0
        self.duration = 0.0
        self.elapsed = 0.0

    @property
    def active(self) -> bool:
        return self.elapsed < self.duration

    def start(self, intensity: float, duration: float):
        self.intensity = intensity
        self.duration = duration
        self.elapsed = 0.0

    def current_intensity(self) -> float:
        if not self.active:
            return 0.0
        return self.intensity * (1.0 - self.elapsed / self.duration)

    def update(self, dt: float):
        if not self.active:
            return
        self.elapsed += dt
        if self.active:
            jitter = (self._rng.random(3) - 0.5) * self.current_intensity()
            self.camera.offset(jitter)
        else:
            self.camera.restore()

    def stop(self):
        self.duration = 0.0
        self.elapsed = 0.0
        self.camera.restore()
