"""
Scene registry handed to the renderer.

Modes add and remove entities here; the renderer only reads position,
rotation, visibility and opacity, so nothing in this module draws anything.
"""

import logging

import numpy as np

from config import CAMERA_POSITION, CAMERA_FOV_DEG

logger = logging.getLogger(__name__)


def vec3(x=0.0, y=0.0, z=0.0) -> np.ndarray:
    return np.array([x, y, z], dtype=float)


def normalize(v: np.ndarray) -> np.ndarray:
    n = float(np.linalg.norm(v))
    return v / n if n > 0 else np.zeros(3)


class Entity:
    """Anything with a world transform the renderer can draw."""
    kind = "entity"

    def __init__(self, position=(0.0, 0.0, 0.0), radius: float = 0.1):
        self.position = vec3(*position)
        self.rotation = vec3()
        self.radius = radius
        self.visible = True
        self.opacity = 1.0

    def __repr__(self):
        x, y, z = self.position
        return f"{type(self).__name__}({x:.2f}, {y:.2f}, {z:.2f})"


class Camera:
    def __init__(self, position=CAMERA_POSITION, fov_deg: float = CAMERA_FOV_DEG):
        self.base_position = vec3(*position)
        self.position = self.base_position.copy()
        self.fov_deg = fov_deg

    def offset(self, delta: np.ndarray):
        self.position = self.base_position + delta

    def restore(self):
        self.position = self.base_position.copy()


class Scene:
    def __init__(self, camera: Camera | None = None):
        self.camera = camera or Camera()
        self._entities: list[Entity] = []

    def add(self, entity: Entity):
        if entity not in self._entities:
            self._entities.append(entity)

    def remove(self, entity: Entity) -> bool:
        """Remove if present; removing twice is harmless."""
        try:
            self._entities.remove(entity)
        except ValueError:
            return False
        return True

    def entities(self, kind: str | None = None) -> list[Entity]:
        if kind is None:
            return list(self._entities)
        return [e for e in self._entities if e.kind == kind]

    def __contains__(self, entity):
        return any(e is entity for e in self._entities)

    def __len__(self):
        return len(self._entities)
