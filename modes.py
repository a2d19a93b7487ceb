"""
Game modes share one contract: activate / deactivate / update / dispose.

`ModeSwitcher` maps a ModeId to its implementation and guarantees that at
most one mode is active; the old mode is always torn down first.
"""

import logging
from abc import ABC, abstractmethod
from enum import Enum

import numpy as np

from config import DESKTOP, PlatformProfile
from effects import CameraShake
from gestures import GestureEvent
from scene import Entity, Scene
from scheduler import Scheduler

logger = logging.getLogger(__name__)


class ModeId(str, Enum):
    SHOOTING = "shooting"
    BASKETBALL = "basketball"
    WHIP = "whip"


class BaseMode(ABC):
    mode_id: ModeId

    def __init__(self, scene: Scene, audio, profile: PlatformProfile = DESKTOP):
        self.scene = scene
        self.audio = audio
        self.profile = profile
        self.scheduler = Scheduler()
        self.shake = CameraShake(scene.camera)
        self.active = False
        self.score = 0
        self._owned: list[Entity] = []

    # clock shared by cooldowns and scheduled cues
    @property
    def now(self) -> float:
        return self.scheduler.now

    # ----------------------------------------------------------- entity ledger
    def _add(self, entity: Entity):
        self.scene.add(entity)
        if not any(e is entity for e in self._owned):
            self._owned.append(entity)

    def _remove(self, entity: Entity):
        self.scene.remove(entity)
        self._owned = [e for e in self._owned if e is not entity]

    def _remove_all(self):
        for entity in self._owned:
            self.scene.remove(entity)
        self._owned = []

    def owned_in_scene(self) -> list[Entity]:
        return [e for e in self._owned if e in self.scene]

    def _after(self, delay: float, callback, label: str = ""):
        """Schedule a cue that only runs if this mode is still active."""
        def guarded():
            if self.active:
                callback()
        return self.scheduler.call_later(delay, guarded, label)

    def _play(self, cue: str):
        self.audio.play(cue)

    def _stage_bursts(self, bursts: list, origin, stages) -> int:
        """
        Fire `stages` = [(delay_s, [(slot, (dx, dy, dz), speed), ...]), ...]
        around `origin`. Slots past the end of `bursts` are skipped; delay 0
        fires immediately, the rest are scheduled and die with the mode.
        """
        origin = np.array(origin, dtype=float)

        def fire(entries):
            for slot, offset, speed in entries:
                if slot < len(bursts):
                    bursts[slot].burst(origin + offset, speed)

        scheduled = 0
        for delay, entries in stages:
            if delay <= 0:
                fire(entries)
            else:
                self._after(delay, lambda entries=entries: fire(entries), "burst")
                scheduled += 1
        return scheduled

    # ---------------------------------------------------------------- contract
    def activate(self):
        if self.active:
            return
        self.active = True
        self._on_activate()
        logger.info("%s activated (%d entities)", self.mode_id.value, len(self.owned_in_scene()))

    def deactivate(self):
        cancelled = self.scheduler.cancel_all()
        self.shake.stop()
        self._on_deactivate()
        self._remove_all()
        if self.active:
            logger.info("%s deactivated, %d pending cues cancelled", self.mode_id.value, cancelled)
        self.active = False

    def update(self, dt: float, event: GestureEvent | None):
        if not self.active:
            return
        self.scheduler.advance(dt)
        if not self.active:
            return
        self.shake.update(dt)
        self._on_update(dt, event)

    def dispose(self):
        self.deactivate()
        self._on_dispose()

    @abstractmethod
    def _on_activate(self): ...

    @abstractmethod
    def _on_deactivate(self): ...

    @abstractmethod
    def _on_update(self, dt: float, event: GestureEvent | None): ...

    def _on_dispose(self):
        pass


class ModeSwitcher:
    def __init__(self, modes: dict | None = None):
        self.modes: dict[ModeId, BaseMode] = {}
        self.current: BaseMode | None = None
        for mode in (modes or {}).values():
            self.register(mode)

    def register(self, mode: BaseMode):
        self.modes[mode.mode_id] = mode

    @property
    def current_id(self) -> ModeId | None:
        return self.current.mode_id if self.current else None

    def switch(self, mode_id) -> bool:
        """Deactivate the current mode and activate `mode_id`. False if unknown."""
        if self.current is not None:
            self.current.deactivate()
            self.current = None

        try:
            mode = self.modes[ModeId(mode_id)]
        except (ValueError, KeyError):
            logger.error("Mode not found: %r", mode_id)
            return False

        logger.info("Switching to mode: %s", mode.mode_id.value)
        mode.activate()
        self.current = mode
        return True

    def update(self, dt: float, event: GestureEvent | None):
        if self.current is not None:
            self.current.update(dt, event)

    def dispose(self):
        for mode in self.modes.values():
            mode.dispose()
        self.current = None
