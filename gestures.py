"""
Velocity + finger-pose gesture recognizer.

Hand signs and motions → gesture labels (first match wins):
  ☝✌🤟  1/2/3 fingers, hand still      → ONE_FINGER / TWO_FINGERS / THREE_FINGERS
  👉  Index only                        → GUN   (SHOOT when the hand flicks)
  🖐  Open hand pushed down fast        → THROW
  👋  Any fast horizontal/vertical move → WHIP
  ✊  Anything else                     → NONE

Raw labels are smoothed by a majority vote over the last few frames before a
GestureEvent is handed to the active mode.
"""

import logging
import math
import time
from collections import deque
from dataclasses import dataclass
from enum import Enum

import numpy as np

from config import DESKTOP, PlatformProfile

logger = logging.getLogger(__name__)

NUM_LANDMARKS = 21
WRIST         = 0
INDEX_TIP     = 8
HAND_CENTER   = 9   # middle-finger base

# (base, joint, joint, tip) per non-thumb finger
FINGER_CHAINS = {
    "index":  (5, 6, 7, 8),
    "middle": (9, 10, 11, 12),
    "ring":   (13, 14, 15, 16),
    "pinky":  (17, 18, 19, 20),
}

STRAIGHT_RATIO   = 0.85
STILL_SPEED      = 0.5
SHOOT_SPEED      = 0.8
WHIP_AXIS_SPEED  = 0.8
HISTORY_SIZE     = 5


class GestureType(str, Enum):
    GUN = "gun"
    SHOOT = "shoot"
    THROW = "throw"
    WHIP = "whip"
    ONE_FINGER = "one"
    TWO_FINGERS = "two"
    THREE_FINGERS = "three"
    NONE = "none"


_COUNT_TO_GESTURE = {
    1: GestureType.ONE_FINGER,
    2: GestureType.TWO_FINGERS,
    3: GestureType.THREE_FINGERS,
}
_FINGERTIP_GESTURES = (GestureType.GUN, GestureType.SHOOT)


@dataclass(frozen=True, eq=False)
class HandFrame:
    """One tracked hand: 21 (x, y, z) landmarks, x/y normalized to [0, 1]."""
    landmarks: np.ndarray
    handedness: str = "Right"
    confidence: float = 1.0

    def __post_init__(self):
        lm = np.array(self.landmarks, dtype=float)
        if lm.shape != (NUM_LANDMARKS, 3):
            raise ValueError(f"expected ({NUM_LANDMARKS}, 3) landmarks, got {lm.shape}")
        lm.setflags(write=False)
        object.__setattr__(self, "landmarks", lm)

    def point(self, index: int) -> tuple[float, float, float]:
        x, y, z = self.landmarks[index]
        return float(x), float(y), float(z)


@dataclass(frozen=True)
class Velocity:
    vx: float = 0.0
    vy: float = 0.0
    vz: float = 0.0
    speed: float = 0.0


ZERO_VELOCITY = Velocity()


@dataclass(frozen=True)
class GestureEvent:
    type: GestureType
    confidence: float
    position: tuple[float, float, float]
    velocity: Velocity


@dataclass(frozen=True)
class FingerPose:
    straight: dict
    count: int

    @property
    def index_only(self) -> bool:
        return self.straight["index"] and self.count == 1


# ----------------------------------------------------------------- velocity
def estimate_velocity(current: HandFrame, previous: HandFrame | None,
                      elapsed: float) -> Velocity:
    """Wrist velocity in normalized units per second."""
    if previous is None or elapsed == 0:
        return ZERO_VELOCITY
    d = (current.landmarks[WRIST] - previous.landmarks[WRIST]) / elapsed
    vx, vy, vz = (float(c) for c in d)
    return Velocity(vx, vy, vz, math.sqrt(vx * vx + vy * vy + vz * vz))


# ---------------------------------------------------------------- finger pose
def straightness_ratio(landmarks: np.ndarray, chain: tuple) -> float:
    """Direct base→tip distance over the summed joint path (1.0 = straight)."""
    pts = landmarks[list(chain)]
    path = float(np.linalg.norm(np.diff(pts, axis=0), axis=1).sum())
    if path == 0:
        return 0.0
    direct = float(np.linalg.norm(pts[-1] - pts[0]))
    return min(direct / path, 1.0)


def finger_pose(frame: HandFrame) -> FingerPose:
    straight = {
        name: straightness_ratio(frame.landmarks, chain) > STRAIGHT_RATIO
        for name, chain in FINGER_CHAINS.items()
    }
    return FingerPose(straight=straight, count=sum(straight.values()))


# ------------------------------------------------------------- classification
def classify_gesture(pose: FingerPose, velocity: Velocity,
                     profile: PlatformProfile = DESKTOP) -> GestureType:
    if velocity.speed < STILL_SPEED and pose.count in _COUNT_TO_GESTURE:
        return _COUNT_TO_GESTURE[pose.count]

    # Index-only is checked before THROW so a pointing hand never throws.
    if pose.index_only:
        return GestureType.SHOOT if velocity.speed > SHOOT_SPEED else GestureType.GUN

    if pose.count >= profile.throw_min_fingers and velocity.vy < profile.throw_max_vy:
        return GestureType.THROW

    if abs(velocity.vx) > WHIP_AXIS_SPEED or abs(velocity.vy) > WHIP_AXIS_SPEED:
        return GestureType.WHIP

    return GestureType.NONE


# ------------------------------------------------------------------ smoothing
class GestureStabilizer:
    """Majority vote over the last HISTORY_SIZE raw labels."""

    def __init__(self, size: int = HISTORY_SIZE):
        self._history: deque[GestureType] = deque(maxlen=size)

    def push(self, raw: GestureType) -> GestureType:
        self._history.append(raw)
        return self.current()

    def current(self) -> GestureType:
        if not self._history:
            return GestureType.NONE
        counts: dict[GestureType, int] = {}
        for g in self._history:
            counts[g] = counts.get(g, 0) + 1
        # max() keeps the first key reaching the top count, i.e. the oldest in the window
        return max(counts, key=counts.get)

    def __len__(self):
        return len(self._history)


class GestureRecognizer:
    """
    Full per-frame pipeline: velocity + finger pose → raw label → stable label.

    Holds the single previous frame needed for velocity; that cache is dropped
    whenever a frame is missing so no velocity is computed across a gap.
    """

    def __init__(self, profile: PlatformProfile = DESKTOP, clock=time.monotonic):
        self.profile = profile
        self._clock = clock
        self._stabilizer = GestureStabilizer()
        self._previous: HandFrame | None = None
        self._previous_time = clock()

    def recognize(self, frame: HandFrame | None, now: float | None = None) -> GestureEvent | None:
        if frame is None:
            self._previous = None
            return None

        now = self._clock() if now is None else now
        velocity = estimate_velocity(frame, self._previous, now - self._previous_time)
        raw = classify_gesture(finger_pose(frame), velocity, self.profile)
        stable = self._stabilizer.push(raw)

        self._previous = frame
        self._previous_time = now

        if raw != stable:
            logger.debug("raw %s smoothed to %s", raw.value, stable.value)

        anchor = INDEX_TIP if stable in _FINGERTIP_GESTURES else HAND_CENTER
        return GestureEvent(
            type=stable,
            confidence=frame.confidence,
            position=frame.point(anchor),
            velocity=velocity,
        )
