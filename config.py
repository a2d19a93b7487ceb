"""
Platform profile and world constants shared by the gesture pipeline and modes.

The profile is resolved once at startup and handed to every component that
needs it; nothing here caches a global "is mobile" answer.
"""

import logging
import os
import platform
from dataclasses import dataclass

logger = logging.getLogger(__name__)

PROFILE_ENV = "MOTION_ARENA_PROFILE"

# World layout (scene units, camera looks down -z)
CAMERA_POSITION = (0.0, 1.6, 3.0)
CAMERA_FOV_DEG  = 75.0
TARGET_DEPTH    = -6.0
TARGET_SPACING  = 3.0

# BGR, as OpenCV draws them
COLORS = {
    "cyan":       (255, 255, 0),
    "magenta":    (255, 0, 255),
    "purple":     (255, 0, 138),
    "yellow":     (0, 255, 255),
    "hot_pink":   (128, 0, 255),
    "spring":     (128, 255, 0),
    "orange":     (0, 128, 255),
    "light_blue": (255, 128, 0),
    "lime":       (0, 255, 128),
    "red_pink":   (64, 0, 255),
    "white":      (255, 255, 255),
}

_MOBILE_MACHINE_KEYWORDS = ("iphone", "ipad", "ipod")


@dataclass(frozen=True)
class PlatformProfile:
    name: str
    mobile: bool
    # gesture thresholds
    throw_min_fingers: int
    throw_max_vy: float
    # shooting
    shoot_cooldown: float
    shoot_on_gun: bool
    # entity / effect counts
    target_count: int
    explosion_count: int
    score_effect_count: int
    electric_effect_count: int
    particles_per_burst: int
    # basketball launch power: base + min(speed * gain, span)
    throw_base_power: float
    throw_speed_gain: float
    throw_power_span: float


DESKTOP = PlatformProfile(
    name="desktop",
    mobile=False,
    throw_min_fingers=3,
    throw_max_vy=-0.5,
    shoot_cooldown=0.3,
    shoot_on_gun=False,
    target_count=3,
    explosion_count=8,
    score_effect_count=12,
    electric_effect_count=10,
    particles_per_burst=400,
    throw_base_power=6.0,
    throw_speed_gain=3.0,
    throw_power_span=8.0,
)

MOBILE = PlatformProfile(
    name="mobile",
    mobile=True,
    throw_min_fingers=2,
    throw_max_vy=-0.3,
    shoot_cooldown=0.15,
    shoot_on_gun=True,
    target_count=1,
    explosion_count=4,
    score_effect_count=6,
    electric_effect_count=5,
    particles_per_burst=200,
    throw_base_power=8.0,
    throw_speed_gain=2.5,
    throw_power_span=6.0,
)

PROFILES = {DESKTOP.name: DESKTOP, MOBILE.name: MOBILE}


def detect_profile(env: dict | None = None, machine: str | None = None) -> PlatformProfile:
    """
    Pick the platform profile for this run.

    An explicit MOTION_ARENA_PROFILE ("desktop" / "mobile") wins; otherwise
    Android interpreters and iOS device machines get the mobile profile.
    """
    env = os.environ if env is None else env
    requested = env.get(PROFILE_ENV, "").strip().lower()
    if requested:
        if requested in PROFILES:
            profile = PROFILES[requested]
            logger.info("Profile from %s: %s", PROFILE_ENV, profile.name)
            return profile
        logger.warning("Unknown %s=%r, falling back to detection", PROFILE_ENV, requested)

    machine = (platform.machine() if machine is None else machine).lower()
    mobile = "ANDROID_ROOT" in env or any(k in machine for k in _MOBILE_MACHINE_KEYWORDS)
    profile = MOBILE if mobile else DESKTOP
    logger.info("Detected profile: %s (machine=%s)", profile.name, machine or "?")
    return profile
