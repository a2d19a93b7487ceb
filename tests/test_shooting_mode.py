import unittest
from unittest.mock import MagicMock, patch

import numpy as np

from hand_fixtures import make_event

from config import DESKTOP, MOBILE
from gestures import GestureType
from scene import Scene
from shooting_mode import POOL_SIZE, ShootingMode, fingertip_to_world

# fingertip that aims straight at the middle ring (0, 0.8, -6)
CENTER_AIM = (0.5, 0.68, 1.2)
# fingertip that aims high above every ring
SKY_AIM = (0.5, 0.0, 0.0)


class TestShootingMode(unittest.TestCase):
    def setUp(self):
        self.scene = Scene()
        self.audio = MagicMock()
        self.mode = self._make(DESKTOP)

    def _make(self, profile):
        mode = ShootingMode(self.scene, self.audio, profile, rng=np.random.default_rng(0))
        mode.activate()
        return mode

    def _visible_explosions(self, mode):
        return sum(1 for e in mode.explosions if e.visible)

    def _fire_at_center(self, mode, gesture=GestureType.SHOOT):
        mode.update(0.01, make_event(gesture, CENTER_AIM))
        self.assertEqual(len(mode.pool.in_flight), 1)
        distance = float(np.linalg.norm(mode.aim_point - self.scene.camera.position))
        mode.update(distance / 20.0, None)

    def test_row_of_rings_on_activate(self):
        xs = sorted(t.position[0] for t in self.mode.targets)
        self.assertEqual(xs, [-3.0, 0.0, 3.0])
        self.assertTrue(all(t.position[1] == 0.8 for t in self.mode.targets))
        self.assertEqual(len(self.scene.entities("ring_target")), 3)

    def test_fingertip_mapping(self):
        np.testing.assert_allclose(fingertip_to_world(CENTER_AIM), (0.0, 0.8, -6.0), atol=1e-9)

    def test_aimed_shot_knocks_down_target(self):
        self._fire_at_center(self.mode)
        middle = self.mode.targets[1]
        self.assertTrue(middle.destroyed)
        self.assertFalse(self.mode.targets[0].destroyed)
        self.assertEqual(self.mode.score, 1)
        self.assertEqual(self.mode.pool.available, POOL_SIZE)
        self.audio.play.assert_any_call("gun")
        self.assertTrue(self.mode.shake.active)

    def test_bullets_advance_through_the_pool(self):
        with patch.object(self.mode.pool, "update", wraps=self.mode.pool.update) as pool_update:
            self._fire_at_center(self.mode)
        self.assertEqual(pool_update.call_count, 2)
        self.assertTrue(self.mode.targets[1].destroyed)
        self.assertEqual(self.mode.pool.in_flight, [])

    def test_explosion_is_staged(self):
        self._fire_at_center(self.mode)
        self.assertEqual(self._visible_explosions(self.mode), 3)
        self.mode.update(0.2, None)
        self.assertEqual(self._visible_explosions(self.mode), DESKTOP.explosion_count)

    def test_gun_does_not_fire_on_desktop(self):
        self.mode.update(0.1, make_event(GestureType.GUN, SKY_AIM))
        self.assertEqual(self.mode.pool.in_flight, [])
        self.audio.play.assert_not_called()

    def test_gun_fires_on_mobile(self):
        mode = self._make(MOBILE)
        mode.update(0.1, make_event(GestureType.GUN, SKY_AIM))
        self.assertEqual(len(mode.pool.in_flight), 1)

    def test_cooldown_between_shots(self):
        shoot = make_event(GestureType.SHOOT, SKY_AIM)
        self.mode.update(0.25, shoot)
        self.mode.update(0.25, shoot)
        self.assertEqual(len(self.mode.pool.in_flight), 1)
        self.mode.update(0.25, shoot)
        self.assertEqual(len(self.mode.pool.in_flight), 2)

    def test_empty_pool_skips_shot(self):
        self.mode.cooldown = 0.0
        shoot = make_event(GestureType.SHOOT, SKY_AIM)
        for _ in range(POOL_SIZE + 2):
            self.mode.update(0.001, shoot)
            self.assertEqual(self.mode.pool.available + len(self.mode.pool.in_flight), POOL_SIZE)
        self.assertEqual(self.mode.pool.available, 0)
        self.assertFalse(self.mode.shoot())
        self.assertEqual(self.audio.play.call_count, POOL_SIZE)

    def test_row_respawns_after_last_ring(self):
        mode = self._make(MOBILE)
        old = mode.targets[0]
        self._fire_at_center(mode, GestureType.GUN)
        self.assertTrue(old.destroyed)
        for _ in range(31):
            mode.update(0.1, None)
        self.assertEqual(len(mode.targets), 1)
        self.assertIsNot(mode.targets[0], old)
        self.assertFalse(mode.targets[0].destroyed)
        self.assertNotIn(old, self.scene)
        self.assertIn(mode.targets[0], self.scene)

    def test_deactivate_clears_everything(self):
        self._fire_at_center(self.mode)
        self.assertGreater(len(self.mode.scheduler), 0)

        self.mode.deactivate()
        self.assertEqual(self.mode.owned_in_scene(), [])
        self.assertEqual(len(self.mode.scheduler), 0)
        self.assertEqual(len(self.scene), 0)
        self.assertFalse(self.mode.active)

        self.mode.deactivate()
        self.assertEqual(len(self.scene), 0)

    def test_inactive_mode_ignores_updates(self):
        self.mode.deactivate()
        self.mode.update(1.0, make_event(GestureType.SHOOT, CENTER_AIM))
        self.assertEqual(self.mode.scheduler.now, 0.0)
        self.assertEqual(self.mode.pool.in_flight, [])

    def test_reactivate_spawns_fresh_row(self):
        self._fire_at_center(self.mode)
        self.mode.deactivate()
        self.mode.activate()
        self.assertEqual(len(self.mode.targets), 3)
        self.assertFalse(any(t.destroyed for t in self.mode.targets))


if __name__ == "__main__":
    unittest.main()
