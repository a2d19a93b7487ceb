"""
Basketball free throw: an open hand pushed down (THROW) launches the ball at
the hoop. Power follows hand speed; the shot counts when the ball drops
through the rim plane inside the rim.
"""

import logging

import numpy as np

from config import COLORS, DESKTOP, TARGET_DEPTH, PlatformProfile
from effects import ParticleBurst
from gestures import GestureEvent, GestureType
from modes import BaseMode, ModeId
from projectile import Basketball
from scene import Scene, normalize
from targets import Hoop

logger = logging.getLogger(__name__)

HOOP_POSITION     = (0.0, 2.2, TARGET_DEPTH)
RELEASE_DROP      = 0.3    # ball leaves a little below the camera
THROW_LIFT        = 0.5    # upward bias added to the aim before renormalizing
RESET_AFTER_SCORE = 0.5
TRAIL_SPEED       = 8
SHAKE             = (0.2, 0.5)

_SCORE_COLORS = [
    "magenta", "cyan", "purple", "yellow", "hot_pink", "spring",
    "orange", "light_blue", "magenta", "cyan", "lime", "red_pink",
]

# slot 0 is the main burst, slot i (i >= 1) the i-th extra burst
_SCORE_STAGES = [
    (0.00, [(0, (0.0, 0.0, 0.0), 30), (1, (-0.7, 0.0, 0.0), 25), (2, (0.7, 0.0, 0.0), 25)]),
    (0.05, [(3, (0.0, 0.8, 0.0), 28), (4, (0.0, -0.8, 0.0), 28)]),
    (0.10, [(5, (-1.0, 0.6, 0.0), 22), (6, (1.0, 0.6, 0.0), 22),
            (7, (-1.0, -0.6, 0.0), 22), (8, (1.0, -0.6, 0.0), 22)]),
    (0.15, [(9, (0.0, 1.2, 0.0), 35), (10, (-1.5, 0.0, 0.0), 30),
            (11, (1.5, 0.0, 0.0), 30), (12, (0.0, -1.2, 0.0), 32),
            (0, (0.0, 0.0, 0.0), 28)]),
]


def throw_power(event: GestureEvent, profile: PlatformProfile) -> float:
    hand_speed = abs(event.velocity.vy) + event.velocity.speed
    return profile.throw_base_power + min(hand_speed * profile.throw_speed_gain,
                                          profile.throw_power_span)


class BasketballMode(BaseMode):
    mode_id = ModeId.BASKETBALL

    def __init__(self, scene: Scene, audio, profile: PlatformProfile = DESKTOP,
                 rng: np.random.Generator | None = None):
        super().__init__(scene, audio, profile)
        n = profile.particles_per_burst
        self.hoop = Hoop(HOOP_POSITION)
        self.ball = Basketball()
        self.trail = ParticleBurst(n, COLORS["cyan"], 0.15, rng)
        self.score_bursts = [ParticleBurst(n * 2, COLORS["yellow"], 0.35, rng)] + [
            ParticleBurst(n * 3 // 2, COLORS[_SCORE_COLORS[i]], 0.3, rng)
            for i in range(profile.score_effect_count)
        ]
        self.throws = 0
        self._reset_task = None

    def _on_activate(self):
        self._add(self.hoop)
        self._add(self.ball)
        self._add(self.trail)
        for burst in self.score_bursts:
            self._add(burst)

    def _on_deactivate(self):
        self._reset_task = None
        self.ball.reset()
        self.trail.hide()
        for burst in self.score_bursts:
            burst.hide()
        self.hoop.glow = 1.0

    def _on_update(self, dt: float, event: GestureEvent | None):
        if self.ball.active:
            previous = self.ball.position.copy()
            self.ball.update(dt)
            self.trail.burst(self.ball.position, TRAIL_SPEED)
            if self.hoop.check_score(self.ball.position, previous):
                self._on_score()

        self.hoop.update(dt)
        self.trail.update(dt)
        for burst in self.score_bursts:
            burst.update(dt)

        if event is not None and event.type == GestureType.THROW and not self.ball.active:
            self.throw(event)

    def throw(self, event: GestureEvent) -> bool:
        if self.ball.active:
            return False
        # a reset left over from the last score must not catch this ball
        if self._reset_task is not None:
            self._reset_task.cancel()
            self._reset_task = None
        start = self.scene.camera.position.copy()
        start[1] -= RELEASE_DROP

        direction = normalize(self.hoop.position - start)
        direction[1] += THROW_LIFT
        direction = normalize(direction)

        power = throw_power(event, self.profile)
        self.ball.shoot(start, direction, power)
        self.throws += 1
        self._play("throw")
        logger.info("Throw #%d, power %.2f (%s)", self.throws, power, self.profile.name)
        return True

    def _on_score(self):
        self.score += 1
        logger.info("Score! %d/%d", self.score, self.throws)
        self._play("swish")
        self._play("applause")
        self.hoop.pulse()

        self._stage_bursts(self.score_bursts, self.hoop.position.copy(), _SCORE_STAGES)
        self.shake.start(*SHAKE)
        self._reset_task = self._after(RESET_AFTER_SCORE, self._reset_ball, "ball-reset")

    def _reset_ball(self):
        self._reset_task = None
        self.ball.reset()

