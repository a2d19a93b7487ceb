"""
OpenCV overlay renderer: projects scene entities onto the camera frame and
draws the HUD. Reads the scene only; never mutates game state.
"""

import math

import cv2
import numpy as np

from config import COLORS
from scene import Camera, Scene

NEAR_PLANE = 0.1
_PARTICLE_STRIDE = 4   # draw every n-th particle


def _fade(color, alpha: float):
    return tuple(int(c * max(0.0, min(1.0, alpha))) for c in color)


class OverlayRenderer:
    def __init__(self, width: int = 640, height: int = 480):
        self.resize(width, height)

    def resize(self, width: int, height: int):
        self.width = width
        self.height = height

    # ------------------------------------------------------------- projection
    def project(self, point, camera: Camera):
        """World point → (x_px, y_px, px_per_unit), or None behind the camera."""
        rel = np.asarray(point, dtype=float) - camera.position
        depth = -rel[2]
        if depth < NEAR_PLANE:
            return None
        focal = (self.height / 2) / math.tan(math.radians(camera.fov_deg) / 2)
        scale = focal / depth
        return (int(self.width / 2 + rel[0] * scale),
                int(self.height / 2 - rel[1] * scale),
                scale)

    # ------------------------------------------------------------------ scene
    def draw_scene(self, frame, scene: Scene):
        self.resize(frame.shape[1], frame.shape[0])
        camera = scene.camera
        # far to near so closer entities paint over distant ones
        for entity in sorted(scene.entities(), key=lambda e: e.position[2]):
            if not entity.visible:
                continue
            draw = getattr(self, f"_draw_{entity.kind}", None)
            if draw is not None:
                draw(frame, entity, camera)

    def _draw_ring_target(self, frame, target, camera):
        p = self.project(target.position, camera)
        if p is None:
            return
        x, y, s = p
        for i, r in enumerate(target.ring_radii):
            col = COLORS["cyan"] if i % 2 == 0 else COLORS["magenta"]
            cv2.circle(frame, (x, y), max(1, int(r * s)), _fade(col, target.opacity), 3)
        cv2.circle(frame, (x, y), max(2, int(0.2 * s)), _fade(COLORS["yellow"], target.opacity), -1)

    def _draw_human_target(self, frame, target, camera):
        colors = {"head": "cyan", "body": "magenta", "left_arm": "purple",
                  "right_arm": "purple", "left_leg": "yellow", "right_leg": "yellow"}
        for name, (offset, (hw, hh)) in target.PARTS.items():
            p = self.project(target.position + offset, camera)
            if p is None:
                continue
            x, y, s = p
            col = _fade(COLORS[colors[name]], target.opacity)
            if name == "head":
                cv2.circle(frame, (x, y), max(2, int(hw * s)), col, 2)
            else:
                cv2.rectangle(frame, (int(x - hw * s), int(y - hh * s)),
                              (int(x + hw * s), int(y + hh * s)), col, 2)

    def _draw_bullet(self, frame, bullet, camera):
        trail = list(bullet.trail)
        for i, pt in enumerate(trail):
            p = self.project(pt, camera)
            if p is None:
                continue
            alpha = (i + 1) / len(trail)
            cv2.circle(frame, p[:2], max(2, int(bullet.radius * p[2] * 0.55 * alpha)),
                       _fade(COLORS["yellow"], alpha * 0.45), -1)
        p = self.project(bullet.position, camera)
        if p is not None:
            r = max(3, int(bullet.radius * p[2]))
            cv2.circle(frame, p[:2], r, COLORS["yellow"], -1)
            cv2.circle(frame, p[:2], max(2, r // 2), COLORS["white"], -1)

    def _draw_basketball(self, frame, ball, camera):
        p = self.project(ball.position, camera)
        if p is None:
            return
        r = max(3, int(ball.radius * p[2]))
        cv2.circle(frame, p[:2], r, COLORS["yellow"], -1)
        cv2.circle(frame, p[:2], r, (0, 0, 0), 1)

    def _draw_hoop(self, frame, hoop, camera):
        p = self.project(hoop.position, camera)
        if p is None:
            return
        x, y, s = p
        rx = max(2, int(hoop.radius * s))
        board = self.project(hoop.position + (0.0, 0.3, -hoop.radius), camera)
        if board is not None:
            bx, by, bs = board
            cv2.rectangle(frame, (int(bx - 0.8 * bs), int(by - 0.6 * bs)),
                          (int(bx + 0.8 * bs), int(by + 0.6 * bs)), _fade(COLORS["purple"], 0.6), 2)
        for k in range(12):
            a = k / 12 * 2 * math.pi
            top = (int(x + math.cos(a) * rx), int(y + math.sin(a) * rx * 0.3))
            bottom = (int(x + math.cos(a) * rx * 0.5), int(y + 0.6 * s))
            cv2.line(frame, top, bottom, COLORS["magenta"], 1)
        cv2.ellipse(frame, (x, y), (rx, max(1, int(rx * 0.3))), 0, 0, 360,
                    COLORS["cyan"], max(2, int(2 * hoop.glow)))

    def _draw_whip_trail(self, frame, trail, camera):
        pts = [self.project(p, camera) for p in trail.smoothed()]
        pts = np.array([p[:2] for p in pts if p is not None], dtype=np.int32)
        if len(pts) < 2:
            return
        for thickness, alpha in ((18, 0.15), (9, 0.35), (4, 0.8)):
            cv2.polylines(frame, [pts], False, _fade(COLORS["magenta"], alpha), thickness)

    def _draw_burst(self, frame, burst, camera):
        col = _fade(burst.color, burst.opacity)
        for pos, life in zip(burst.positions[::_PARTICLE_STRIDE], burst.lifetimes[::_PARTICLE_STRIDE]):
            if life <= 0:
                continue
            p = self.project(pos, camera)
            if p is not None:
                cv2.circle(frame, p[:2], 2, col, -1)

    # -------------------------------------------------------------------- HUD
    def draw_hud(self, frame, mode_name: str, gesture: str, score: int,
                 hand_detected: bool, fps: float | None = None):
        w = frame.shape[1]
        roi = frame[0:64, :]
        cv2.addWeighted(roi, 0.35, np.zeros_like(roi), 0.65, 0, roi)

        cv2.putText(frame, f"MODE: {mode_name.upper()}", (10, 26),
                    cv2.FONT_HERSHEY_DUPLEX, 0.8, COLORS["cyan"], 2)
        cv2.putText(frame, f"GESTURE: {gesture.upper()}", (10, 54),
                    cv2.FONT_HERSHEY_SIMPLEX, 0.6, COLORS["magenta"], 2)

        sc = f"SCORE {score}"
        (sw, _), _ = cv2.getTextSize(sc, cv2.FONT_HERSHEY_DUPLEX, 0.9, 2)
        cv2.putText(frame, sc, (w - sw - 10, 30),
                    cv2.FONT_HERSHEY_DUPLEX, 0.9, COLORS["yellow"], 2)

        status = "Hand Detected" if hand_detected else "No Hand Detected"
        col = (80, 255, 80) if hand_detected else (80, 80, 255)
        cv2.putText(frame, status, (w - 200, 54), cv2.FONT_HERSHEY_SIMPLEX, 0.55, col, 1)

        help_text = "1 = gun  2 = basketball  3 = whip  Q = quit"
        if fps is not None:
            help_text += f"   {fps:4.1f} fps"
        cv2.putText(frame, help_text, (10, frame.shape[0] - 12),
                    cv2.FONT_HERSHEY_SIMPLEX, 0.5, (200, 200, 200), 1)
