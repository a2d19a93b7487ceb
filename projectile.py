import logging
from collections import deque

import numpy as np

from scene import Entity, normalize, vec3

logger = logging.getLogger(__name__)

TRAIL_LENGTH = 7
GRAVITY      = -9.8


class Projectile(Entity):
    """Base for anything thrown or fired; inactive and hidden until launched."""
    kind = "projectile"

    def __init__(self, radius: float):
        super().__init__(radius=radius)
        self.velocity = vec3()
        self.active = False
        self.visible = False
        self.trail: deque[tuple[float, float, float]] = deque(maxlen=TRAIL_LENGTH)

    def _launch(self, start, velocity):
        self.position = vec3(*start)
        self.velocity = np.asarray(velocity, dtype=float).copy()
        self.trail.clear()
        self.active = True
        self.visible = True

    def _integrate(self, dt: float):
        self.trail.append(tuple(self.position))
        self.position = self.position + self.velocity * dt

    def reset(self):
        self.active = False
        self.visible = False
        self.velocity = vec3()
        self.trail.clear()


class Bullet(Projectile):
    kind = "bullet"
    SPEED     = 20.0
    MAX_RANGE = 50.0

    def __init__(self):
        super().__init__(radius=0.05)

    def shoot(self, start, direction):
        self._launch(start, normalize(np.asarray(direction, dtype=float)) * self.SPEED)

    def update(self, dt: float):
        if not self.active:
            return
        self._integrate(dt)
        if float(np.linalg.norm(self.position)) > self.MAX_RANGE:
            self.reset()


class Basketball(Projectile):
    kind = "basketball"

    def __init__(self, gravity: float = GRAVITY):
        super().__init__(radius=0.25)
        self.gravity = gravity

    def shoot(self, start, direction, power: float):
        self._launch(start, np.asarray(direction, dtype=float) * power)

    def update(self, dt: float):
        if not self.active:
            return
        self.velocity[1] += self.gravity * dt
        self._integrate(dt)
        self.rotation += (0.1, 0.05, 0.0)
        if self.position[1] < 0:
            self.reset()


class ProjectilePool:
    """
    Fixed set of bullets cycling between available and in flight.

    Bullets are created once; `acquire` pops from the free list and
    `release` pushes a reset bullet back. available + in_flight == capacity.
    """

    def __init__(self, capacity: int = 10, factory=Bullet):
        self.capacity = capacity
        self.items = [factory() for _ in range(capacity)]
        self._free: list = list(self.items)
        self.in_flight: list = []

    @property
    def available(self) -> int:
        return len(self._free)

    def acquire(self):
        if not self._free:
            return None
        item = self._free.pop()
        self.in_flight.append(item)
        return item

    def release(self, item):
        if item.active:
            raise ValueError("reset a projectile before returning it to the pool")
        if item in self.in_flight:
            self.in_flight.remove(item)
            self._free.append(item)

    def update(self, dt: float, on_move=None) -> list:
        """
        Advance bullets in flight; expired ones go back to the pool.

        `on_move(item)` runs for every item still active after its step and
        may reset it (a hit), in which case it is returned this same tick.
        """
        expired = []
        for item in list(self.in_flight):
            item.update(dt)
            if item.active and on_move is not None:
                on_move(item)
            if not item.active:
                expired.append(item)
                self.release(item)
        return expired

    def reset_all(self):
        for item in list(self.in_flight):
            item.reset()
            self.release(item)
        for item in self._free:
            item.reset()
