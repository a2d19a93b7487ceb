"""
Motion Arena – camera-overlay edition.

One webcam, one hand. The tracked hand drives the active mode:
  1  Target shooting  – point to aim, flick to fire
  2  Basketball       – open hand pushed down to throw at the hoop
  3  Whip             – swing a fist (or whip the hand) through the targets
"""

import argparse
import logging
import sys
import time

import cv2
import numpy as np

from audio import SOUND_DIR, SoundBoard
from basketball_mode import BasketballMode
from config import DESKTOP, MOBILE, PlatformProfile, detect_profile
from gestures import GestureRecognizer
from hand_detector import HandDetector
from modes import ModeId, ModeSwitcher
from renderer import OverlayRenderer
from scene import Scene
from shooting_mode import ShootingMode
from state_manager import GESTURE_CHANGE, MODE_CHANGE, StateManager
from whip_mode import WhipMode

logger = logging.getLogger(__name__)

WIN_TITLE = "Motion Arena  |  1/2/3 = mode  |  Q = quit"
MAX_DT    = 0.1    # clamp long stalls so physics never jumps

_KEY_TO_MODE = {
    ord("1"): ModeId.SHOOTING,
    ord("2"): ModeId.BASKETBALL,
    ord("3"): ModeId.WHIP,
}


def build_modes(scene: Scene, audio, profile: PlatformProfile) -> ModeSwitcher:
    return ModeSwitcher({
        ModeId.SHOOTING: ShootingMode(scene, audio, profile),
        ModeId.BASKETBALL: BasketballMode(scene, audio, profile),
        ModeId.WHIP: WhipMode(scene, audio, profile),
    })


class MotionGame:
    def __init__(self, profile: PlatformProfile, camera_index: int = 0,
                 sound_dir: str = SOUND_DIR):
        self.profile = profile
        self.cap = cv2.VideoCapture(camera_index)
        self.detector = HandDetector()
        self.recognizer = GestureRecognizer(profile)
        self.audio = SoundBoard(sound_dir)
        self.audio.load()

        self.scene = Scene()
        self.renderer = OverlayRenderer()
        self.state = StateManager()
        self.switcher = build_modes(self.scene, self.audio, profile)

        self.state.on(MODE_CHANGE, self._on_mode_change)
        self.state.on(GESTURE_CHANGE, self._on_gesture_change)

        self._last_event = None
        self._last_gesture = None

    # ----------------------------------------------------------------- events
    def _on_mode_change(self, mode):
        if not self.switcher.switch(mode):
            logger.error("No mode active after failed switch to %r", mode)

    def _on_gesture_change(self, gesture):
        if gesture != self._last_gesture:
            logger.debug("Gesture: %s", gesture.value)
            self._last_gesture = gesture

    # ----------------------------------------------------------------- camera
    def _read_frame(self):
        ret, frame = self.cap.read()
        if not ret:
            frame = np.zeros((480, 640, 3), np.uint8)
        return ret, frame

    # ----------------------------------------------------------------- tick
    def step(self, frame, dt: float):
        """Run one recognition + simulation tick on a raw BGR frame."""
        hand = self.detector.detect(frame)
        self.state.set_hand_detected(hand is not None)

        event = self.recognizer.recognize(hand)
        if event is not None:
            self.state.set_last_gesture(event.type)
        self._last_event = event

        self.switcher.update(min(dt, MAX_DT), event)
        if self.switcher.current is not None:
            self.state.set_score(self.switcher.current.score)
        return hand

    # ------------------------------------------------------------------- loop
    def run(self):
        self.state.set_mode(ModeId.SHOOTING)
        last = time.monotonic()
        while True:
            ok, frame = self._read_frame()
            now = time.monotonic()
            dt, last = now - last, now
            self.state.record_frame(now)

            hand = self.step(frame, dt) if ok else self.step_without_camera(dt)

            view = cv2.flip(frame, 1)
            if hand is not None:
                self.detector.draw_hand(view, hand)
            self.renderer.draw_scene(view, self.scene)
            st = self.state.state
            mode_name = self.switcher.current_id.value if self.switcher.current_id else "none"
            gesture = st.last_gesture.value if st.hand_detected else "-"
            self.renderer.draw_hud(view, mode_name, gesture, st.score, st.hand_detected, self.state.fps)

            cv2.imshow(WIN_TITLE, view)
            key = cv2.waitKey(1) & 0xFF
            if key in (27, ord("q")):
                break
            if key in _KEY_TO_MODE:
                self.state.set_mode(_KEY_TO_MODE[key])

        self._quit()

    def step_without_camera(self, dt: float):
        self.state.set_hand_detected(False)
        self.recognizer.recognize(None)
        self.switcher.update(min(dt, MAX_DT), None)
        return None

    def _quit(self):
        self.switcher.dispose()
        self.cap.release()
        self.detector.release()
        self.audio.close()
        cv2.destroyAllWindows()


def parse_args(argv=None):
    parser = argparse.ArgumentParser(description="Camera-driven motion game")
    group = parser.add_mutually_exclusive_group()
    group.add_argument("--mobile", action="store_true", help="force the mobile profile")
    group.add_argument("--desktop", action="store_true", help="force the desktop profile")
    parser.add_argument("--camera", type=int, default=0, help="camera index")
    parser.add_argument("--sounds", default=SOUND_DIR, help="directory with sound effects")
    parser.add_argument("-v", "--verbose", action="store_true")
    return parser.parse_args(argv)


def main(argv=None):
    args = parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="[%(name)s] %(message)s",
    )
    if args.mobile:
        profile = MOBILE
    elif args.desktop:
        profile = DESKTOP
    else:
        profile = detect_profile()

    MotionGame(profile, camera_index=args.camera, sound_dir=args.sounds).run()
    return 0


if __name__ == "__main__":
    sys.exit(main())
