"""
Whip combat: the moving hand leaves a trail; a fast fist swing (or a WHIP
gesture) cracks the trail forward toward the targets' depth and zaps the
first target it reaches.
"""

import logging
import math

import numpy as np

from config import COLORS, DESKTOP, TARGET_DEPTH, TARGET_SPACING, PlatformProfile
from effects import ParticleBurst
from gestures import GestureEvent, GestureType
from modes import BaseMode, ModeId
from scene import Scene, vec3
from targets import HumanTarget, WhipTrail

logger = logging.getLogger(__name__)

TRAIL_MOVE_SPEED = 0.2
FIST_SPEED       = 0.3
FIST_VX          = 0.4
FIST_MIN_TRAIL   = 3
WHIP_COOLDOWN    = 0.3
HIT_RANGE        = 2.5
EXTEND_STEPS     = 8
REMOVE_DELAY     = 1.0
TARGET_Y         = 0.0
SHAKE            = (0.25, 0.5)

_ELECTRIC_COLORS = ["magenta", "cyan", "purple", "yellow"]

# offsets are body-relative: chest/head, arms, waist/legs, ground ring
_ELECTRIC_STAGES = [
    (0.00, [(0, (0.0, 0.7, 0.0), 15), (1, (0.0, 1.4, 0.0), 12)]),
    (0.05, [(2, (-0.45, 0.5, 0.0), 10), (3, (0.45, 0.5, 0.0), 10)]),
    (0.10, [(4, (0.0, 0.2, 0.0), 11), (5, (-0.2, -0.5, 0.0), 9), (6, (0.2, -0.5, 0.0), 9)]),
    (0.15, [(7, (0.0, -1.0, 0.0), 18), (8, (-0.8, -1.0, 0.0), 14), (9, (0.8, -1.0, 0.0), 14)]),
]


def hand_to_world(position) -> np.ndarray:
    x, y, z = position
    return vec3((x - 0.5) * 10, (1 - y) * 5, z * -5)


def extend_trail(points: list, depth: float = TARGET_DEPTH,
                 steps: int = EXTEND_STEPS) -> list:
    """Trail plus `steps` points walking from its tip straight to `depth`."""
    extended = list(points)
    if not points:
        return extended
    last = points[-1]
    for i in range(1, steps + 1):
        p = last.copy()
        p[2] = last[2] + (depth - last[2]) * i / steps
        extended.append(p)
    return extended


class WhipMode(BaseMode):
    mode_id = ModeId.WHIP

    def __init__(self, scene: Scene, audio, profile: PlatformProfile = DESKTOP,
                 rng: np.random.Generator | None = None):
        super().__init__(scene, audio, profile)
        self._rng = rng or np.random.default_rng()
        self.trail = WhipTrail()
        self.targets: list[HumanTarget] = []
        self.effects = [
            ParticleBurst(profile.particles_per_burst * 5 // 4,
                          COLORS[_ELECTRIC_COLORS[i % len(_ELECTRIC_COLORS)]], 0.2, self._rng)
            for i in range(profile.electric_effect_count)
        ]
        self.hand_position = vec3()
        self.last_whip_time = -math.inf

    def _on_activate(self):
        self._add(self.trail)
        for effect in self.effects:
            self._add(effect)
        self._spawn_targets(self.profile.target_count)

    def _on_deactivate(self):
        self.trail.clear()
        self.targets = []
        for effect in self.effects:
            effect.hide()

    def _on_update(self, dt: float, event: GestureEvent | None):
        for effect in self.effects:
            effect.update(dt)
        for target in self.targets:
            if target.animating and target.update(dt):
                self.scene.remove(target)

        if event is None:
            self.trail.fade()
            return

        self.hand_position = hand_to_world(event.position)
        v = event.velocity
        if v.speed > TRAIL_MOVE_SPEED:
            self.trail.add_point(self.hand_position)
        else:
            # a resting hand drains the trail twice as fast as a lost one
            self.trail.fade()
            self.trail.fade()

        fist_swing = event.type == GestureType.NONE and v.speed > FIST_SPEED and abs(v.vx) > FIST_VX
        if fist_swing and len(self.trail) > FIST_MIN_TRAIL:
            logger.debug("Fist whip: vx=%.2f speed=%.2f trail=%d", v.vx, v.speed, len(self.trail))
            self.check_collision()

        if event.type == GestureType.WHIP:
            self.check_collision()

    @property
    def cooldown_ready(self) -> bool:
        return self.now - self.last_whip_time > WHIP_COOLDOWN

    def check_collision(self) -> HumanTarget | None:
        """Hit the first standing target the extended trail reaches, if off cooldown."""
        if not self.cooldown_ready:
            return None
        points = extend_trail(self.trail.points)
        for target in self.targets:
            if target.destroyed:
                continue
            for point in points:
                distance = float(np.linalg.norm(point - target.position))
                if distance < HIT_RANGE:
                    logger.info("Whip hit at distance %.2f", distance)
                    self._strike(target)
                    self.last_whip_time = self.now
                    return target
        return None

    def _strike(self, target: HumanTarget):
        self._play("whip")
        target.hit()
        self.score += 1

        available = [e for e in self.effects if not e.visible]
        self._stage_bursts(available, target.position.copy(), _ELECTRIC_STAGES)
        self.shake.start(*SHAKE)
        self._after(REMOVE_DELAY, lambda: self._clear_target(target), "respawn")

    def _clear_target(self, target: HumanTarget):
        self._remove(target)
        if target in self.targets:
            self.targets.remove(target)
        if all(t.destroyed for t in self.targets):
            self._spawn_targets(self.profile.target_count)

    def _spawn_targets(self, count: int):
        if not self.active:
            return
        start_x = -(count - 1) * TARGET_SPACING / 2
        for i in range(count):
            target = HumanTarget((start_x + i * TARGET_SPACING, TARGET_Y, TARGET_DEPTH), self._rng)
            self._add(target)
            self.targets.append(target)
