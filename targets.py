"""Targets and static props: ring targets, humanoid targets, the hoop, the whip trail."""

import logging
from collections import deque

import numpy as np

from scene import Entity, vec3

logger = logging.getLogger(__name__)

# Teardown animation, applied once per tick
FALL_ACCEL    = 0.02
FADE_STEP     = 0.01
MIN_OPACITY   = 0.01
FLOOR_Y       = -5.0


class Target(Entity):
    """Shared destroy/teardown behaviour; subclasses set spin and drift."""
    kind = "target"
    SPIN = (0.0, 0.0)   # rotation added per tick about x and z

    def __init__(self, position, radius: float):
        super().__init__(position, radius)
        self.destroyed = False
        self._fall_velocity = 0.0
        self._drift = vec3()

    def hit(self) -> bool:
        """Start the teardown. Returns False if the target was already down."""
        if self.destroyed:
            return False
        self.destroyed = True
        self._fall_velocity = 0.0
        return True

    @property
    def animating(self) -> bool:
        return self.destroyed and self.visible

    def update(self, dt: float) -> bool:
        """Advance the teardown one step; True once the target has vanished."""
        if not self.animating:
            return self.destroyed
        self._fall_velocity += FALL_ACCEL
        self.position[1] -= self._fall_velocity
        self.position += self._drift
        self.rotation[0] += self.SPIN[0]
        self.rotation[2] += self.SPIN[1]
        self.opacity = max(0.0, self.opacity - FADE_STEP)

        if self.position[1] <= FLOOR_Y or self.opacity <= MIN_OPACITY:
            self.visible = False
            return True
        return False


class RingTarget(Target):
    kind = "ring_target"
    SPIN = (0.1, 0.05)
    RING_COUNT = 5
    SCALE = 2.0

    def __init__(self, position):
        super().__init__(position, radius=0.5 * self.SCALE)
        self.ring_radii = [(0.5 - i * 0.08) * self.SCALE for i in range(self.RING_COUNT)]


class HumanTarget(Target):
    kind = "human_target"
    SPIN = (0.15, 0.105)
    # name -> (offset from the target origin, half extents for drawing)
    PARTS = {
        "head":      ((0.0, 1.4, 0.0),   (0.3, 0.3)),
        "body":      ((0.0, 0.5, 0.0),   (0.3, 0.5)),
        "left_arm":  ((-0.45, 0.5, 0.0), (0.075, 0.4)),
        "right_arm": ((0.45, 0.5, 0.0),  (0.075, 0.4)),
        "left_leg":  ((-0.2, -0.5, 0.0), (0.1, 0.5)),
        "right_leg": ((0.2, -0.5, 0.0),  (0.1, 0.5)),
    }

    def __init__(self, position, rng: np.random.Generator | None = None):
        super().__init__(position, radius=1.0)
        self._rng = rng or np.random.default_rng()

    def hit(self) -> bool:
        if not super().hit():
            return False
        dx, dz = (self._rng.random(2) - 0.5) * 0.1
        self._drift = vec3(dx, 0.0, dz)
        return True


class Hoop(Entity):
    kind = "hoop"
    SCORE_FRACTION = 0.9

    def __init__(self, position, radius: float = 0.5):
        super().__init__(position, radius)
        self.glow = 1.0

    def check_score(self, ball, previous) -> bool:
        """True when the ball drops through the rim plane inside the rim."""
        rim_y = self.position[1]
        if not (previous[1] > rim_y and ball[1] <= rim_y):
            return False
        horizontal = np.hypot(ball[0] - self.position[0], ball[2] - self.position[2])
        return bool(horizontal < self.radius * self.SCORE_FRACTION)

    def pulse(self):
        self.glow = 2.0

    def update(self, dt: float):
        if self.glow > 1.0:
            self.glow = max(1.0, self.glow - 0.05)


class WhipTrail(Entity):
    kind = "whip_trail"
    MAX_POINTS = 25

    def __init__(self, max_points: int = MAX_POINTS):
        super().__init__()
        self._points: deque[np.ndarray] = deque(maxlen=max_points)

    def add_point(self, point):
        self._points.append(vec3(*point))

    def fade(self):
        if self._points:
            self._points.popleft()

    def clear(self):
        self._points.clear()

    @property
    def points(self) -> list[np.ndarray]:
        return list(self._points)

    def __len__(self):
        return len(self._points)

    def smoothed(self, per_segment: int = 5) -> np.ndarray:
        """Catmull-Rom pass through the trail points, for drawing only."""
        pts = np.array(self._points)
        if len(pts) < 3:
            return pts
        padded = np.vstack([pts[0], pts, pts[-1]])
        t = np.linspace(0.0, 1.0, per_segment, endpoint=False)[:, None]
        t2, t3 = t * t, t * t * t
        out = []
        for i in range(1, len(padded) - 2):
            p0, p1, p2, p3 = padded[i - 1:i + 3]
            out.append(0.5 * (2 * p1 + (p2 - p0) * t
                              + (2 * p0 - 5 * p1 + 4 * p2 - p3) * t2
                              + (3 * p1 - p0 - 3 * p2 + p3) * t3))
        out.append(pts[-1][None, :])
        return np.vstack(out)
