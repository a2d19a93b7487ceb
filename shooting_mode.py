"""
Target shooting: point with the index finger to aim, flick to fire.

Bullets come from a fixed pool and fly straight from the camera toward the
fingertip. A bullet passing within HIT_RADIUS of a ring knocks it down; the
row respawns a few seconds after its last ring is cleared.
"""

import logging
import math

import numpy as np

from config import COLORS, DESKTOP, TARGET_DEPTH, TARGET_SPACING, PlatformProfile
from effects import ParticleBurst
from gestures import GestureEvent, GestureType
from modes import BaseMode, ModeId
from projectile import ProjectilePool
from scene import Scene, vec3
from targets import RingTarget

logger = logging.getLogger(__name__)

POOL_SIZE     = 10
HIT_RADIUS    = 1.0
RESPAWN_DELAY = 3.0
TARGET_Y      = 0.8
SHAKE         = (0.15, 0.4)   # intensity, seconds

# (delay s, [(slot, offset, speed), ...]) around the hit point
_EXPLOSION_STAGES = [
    (0.00, [(0, (0.0, 0.0, 0.0), 20), (1, (-0.5, 0.0, 0.0), 16), (2, (0.5, 0.0, 0.0), 16)]),
    (0.05, [(3, (0.0, 0.6, 0.0), 18), (4, (0.0, -0.6, 0.0), 18)]),
    (0.10, [(5, (-0.7, 0.4, 0.0), 14), (6, (0.7, 0.4, 0.0), 14)]),
    (0.15, [(7, (0.0, 0.8, 0.0), 22)]),
]


def fingertip_to_world(position) -> np.ndarray:
    """Normalized fingertip → aim point in front of the camera."""
    x, y, z = position
    return vec3((x - 0.5) * 10, (1 - y) * 5 - 0.8, z * -5)


class ShootingMode(BaseMode):
    mode_id = ModeId.SHOOTING

    def __init__(self, scene: Scene, audio, profile: PlatformProfile = DESKTOP,
                 rng: np.random.Generator | None = None):
        super().__init__(scene, audio, profile)
        self.cooldown = profile.shoot_cooldown
        self.pool = ProjectilePool(POOL_SIZE)
        self.targets: list[RingTarget] = []
        self.explosions = [
            ParticleBurst(profile.particles_per_burst,
                          COLORS["cyan"] if i % 2 == 0 else COLORS["yellow"], 0.25, rng)
            for i in range(profile.explosion_count)
        ]
        self.aim_point = vec3()
        self.last_shot_time = -math.inf

    # ------------------------------------------------------------ lifecycle
    def _on_activate(self):
        for bullet in self.pool.items:
            self._add(bullet)
        for explosion in self.explosions:
            self._add(explosion)
        self._spawn_targets(self.profile.target_count)

    def _on_deactivate(self):
        self.pool.reset_all()
        for explosion in self.explosions:
            explosion.hide()
        self.targets = []

    # ----------------------------------------------------------------- tick
    def _on_update(self, dt: float, event: GestureEvent | None):
        if event is not None and event.type in (GestureType.GUN, GestureType.SHOOT):
            self.aim_point = fingertip_to_world(event.position)

        self.pool.update(dt, self._check_hits)

        for target in self.targets:
            if target.animating and target.update(dt):
                self.scene.remove(target)

        for explosion in self.explosions:
            explosion.update(dt)

        if self._wants_to_fire(event) and self.now - self.last_shot_time > self.cooldown:
            self.shoot()
            self.last_shot_time = self.now

    def _wants_to_fire(self, event: GestureEvent | None) -> bool:
        if event is None:
            return False
        if event.type == GestureType.SHOOT:
            return True
        return self.profile.shoot_on_gun and event.type == GestureType.GUN

    # -------------------------------------------------------------- firing
    def shoot(self) -> bool:
        bullet = self.pool.acquire()
        if bullet is None:
            logger.debug("Bullet pool empty, shot skipped")
            return False
        origin = self.scene.camera.position.copy()
        bullet.shoot(origin, self.aim_point - origin)
        self._play("gun")
        logger.debug("Shot from %s toward %s", origin, self.aim_point)
        return True

    # ------------------------------------------------------- hit detection
    def _check_hits(self, bullet):
        for target in self.targets:
            if target.destroyed:
                continue
            if np.linalg.norm(bullet.position - target.position) < HIT_RADIUS:
                bullet.reset()
                self._resolve_hit(target)
                return

    def _resolve_hit(self, target: RingTarget):
        target.hit()
        self.score += 1
        logger.info("Target hit at %s (score %d)", target.position.round(2), self.score)

        available = [e for e in self.explosions if not e.visible]
        self._stage_bursts(available, target.position.copy(), _EXPLOSION_STAGES)
        self.shake.start(*SHAKE)
        self._after(RESPAWN_DELAY, lambda: self._clear_target(target), "respawn")

    def _clear_target(self, target: RingTarget):
        self._remove(target)
        if target in self.targets:
            self.targets.remove(target)
        if not self.targets:
            self._spawn_targets(self.profile.target_count)

    def _spawn_targets(self, count: int):
        if not self.active:
            logger.debug("Shooting mode not active, skipping target spawn")
            return
        start_x = -(count - 1) * TARGET_SPACING / 2
        for i in range(count):
            target = RingTarget((start_x + i * TARGET_SPACING, TARGET_Y, TARGET_DEPTH))
            self._add(target)
            self.targets.append(target)
        logger.debug("Spawned %d targets", count)
