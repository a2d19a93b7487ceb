"""
Hand tracking using the MediaPipe Tasks API (mediapipe >= 0.10.14).

Produces at most one HandFrame per camera frame. The model file
'hand_landmarker.task' is downloaded automatically on first run.
"""

import logging
import os
import time
import urllib.request

import cv2
import mediapipe as mp
from mediapipe.tasks import python as mp_python
from mediapipe.tasks.python import vision as mp_vision

from gestures import HandFrame

logger = logging.getLogger(__name__)

MODEL_PATH = "hand_landmarker.task"
MODEL_URL = (
    "https://storage.googleapis.com/mediapipe-models/"
    "hand_landmarker/hand_landmarker/float16/1/hand_landmarker.task"
)

# Connections between the 21 hand landmarks for drawing
_CONNECTIONS = [
    (0, 1), (1, 2), (2, 3), (3, 4),          # thumb
    (0, 5), (5, 6), (6, 7), (7, 8),          # index
    (0, 9), (9, 10), (10, 11), (11, 12),     # middle
    (0, 13), (13, 14), (14, 15), (15, 16),   # ring
    (0, 17), (17, 18), (18, 19), (19, 20),   # pinky
    (5, 9), (9, 13), (13, 17),               # palm
]


def _ensure_model(path: str = MODEL_PATH):
    if not os.path.exists(path):
        logger.info("Downloading model from MediaPipe CDN …")
        urllib.request.urlretrieve(MODEL_URL, path)
        logger.info("Model saved to '%s'.", path)


class HandDetector:
    """Single-hand tracker; x is mirrored so moving right moves right on screen."""

    def __init__(self, model_path: str = MODEL_PATH, mirror: bool = True):
        _ensure_model(model_path)

        options = mp_vision.HandLandmarkerOptions(
            base_options=mp_python.BaseOptions(model_asset_path=model_path),
            running_mode=mp_vision.RunningMode.VIDEO,
            num_hands=1,
            min_hand_detection_confidence=0.7,
            min_tracking_confidence=0.5,
        )
        self._landmarker = mp_vision.HandLandmarker.create_from_options(options)
        self._start_ms = int(time.time() * 1000)
        self._last_ts = -1
        self.mirror = mirror

    def detect(self, frame) -> HandFrame | None:
        """Process a BGR frame; returns the first hand or None."""
        rgb = cv2.cvtColor(frame, cv2.COLOR_BGR2RGB)
        mp_image = mp.Image(image_format=mp.ImageFormat.SRGB, data=rgb)
        # VIDEO mode rejects non-increasing timestamps
        timestamp_ms = max(int(time.time() * 1000) - self._start_ms, self._last_ts + 1)
        self._last_ts = timestamp_ms

        result = self._landmarker.detect_for_video(mp_image, timestamp_ms)
        if not result.hand_landmarks:
            return None

        lm_list = result.hand_landmarks[0]
        category = result.handedness[0][0]
        landmarks = [
            ((1 - lm.x) if self.mirror else lm.x, lm.y, lm.z) for lm in lm_list
        ]
        return HandFrame(
            landmarks=landmarks,
            handedness=category.category_name,
            confidence=float(category.score),
        )

    @staticmethod
    def draw_hand(frame, hand: HandFrame):
        """Draw the skeleton over a (mirrored) camera frame."""
        h, w = frame.shape[:2]
        pts = [(int(x * w), int(y * h)) for x, y, _ in hand.landmarks]
        for start, end in _CONNECTIONS:
            cv2.line(frame, pts[start], pts[end], (255, 255, 0), 2)
        for pt in pts:
            cv2.circle(frame, pt, 4, (255, 0, 255), -1)
        # Highlight wrist and fingertips
        for tip in [0, 4, 8, 12, 16, 20]:
            cv2.circle(frame, pts[tip], 6, (0, 180, 255), -1)

    def release(self):
        self._landmarker.close()
