"""UI-facing game state plus the modeChange / gestureChange / handDetectionChange stream."""

import logging
from collections import deque
from dataclasses import dataclass, replace
from typing import Callable

from gestures import GestureType
from modes import ModeId

logger = logging.getLogger(__name__)

MODE_CHANGE = "modeChange"
GESTURE_CHANGE = "gestureChange"
HAND_DETECTION_CHANGE = "handDetectionChange"

FPS_WINDOW = 20


@dataclass
class GameState:
    current_mode: ModeId | str = ModeId.SHOOTING
    hand_detected: bool = False
    last_gesture: GestureType = GestureType.NONE
    score: int = 0


class StateManager:
    def __init__(self):
        self._state = GameState()
        self._listeners: dict[str, list[Callable]] = {}
        self._frame_times: deque[float] = deque(maxlen=FPS_WINDOW)

    @property
    def state(self) -> GameState:
        return replace(self._state)

    def on(self, event: str, callback: Callable):
        self._listeners.setdefault(event, []).append(callback)

    def _emit(self, event: str, data):
        for callback in self._listeners.get(event, []):
            callback(data)

    def set_mode(self, mode):
        self._state.current_mode = mode
        self._emit(MODE_CHANGE, mode)

    def set_hand_detected(self, detected: bool):
        changed = detected != self._state.hand_detected
        self._state.hand_detected = detected
        if changed:
            logger.debug("Hand %s", "detected" if detected else "lost")
        self._emit(HAND_DETECTION_CHANGE, detected)

    def set_last_gesture(self, gesture: GestureType):
        self._state.last_gesture = gesture
        self._emit(GESTURE_CHANGE, gesture)

    def set_score(self, score: int):
        self._state.score = score

    def record_frame(self, now: float):
        self._frame_times.append(now)

    @property
    def fps(self) -> float | None:
        """Frames per second over the recent window, None until it can be measured."""
        if len(self._frame_times) < 2:
            return None
        span = self._frame_times[-1] - self._frame_times[0]
        if span <= 0:
            return None
        return (len(self._frame_times) - 1) / span
