import unittest

import numpy as np

from hand_fixtures import make_hand, make_landmarks

from config import DESKTOP, MOBILE
from gestures import (
    FINGER_CHAINS,
    FingerPose,
    GestureRecognizer,
    GestureStabilizer,
    GestureType,
    HandFrame,
    Velocity,
    ZERO_VELOCITY,
    classify_gesture,
    estimate_velocity,
    finger_pose,
    straightness_ratio,
)

ALL = ("index", "middle", "ring", "pinky")


def pose(*fingers) -> FingerPose:
    straight = {name: name in fingers for name in ALL}
    return FingerPose(straight=straight, count=len(fingers))


class TestVelocity(unittest.TestCase):
    def test_no_previous_frame_is_zero(self):
        self.assertEqual(estimate_velocity(make_hand(), None, 0.1), ZERO_VELOCITY)

    def test_zero_elapsed_is_zero(self):
        a = make_hand(wrist=(0.5, 0.8, 0.0))
        b = make_hand(wrist=(0.9, 0.2, 0.1))
        self.assertEqual(estimate_velocity(b, a, 0.0), ZERO_VELOCITY)

    def test_finite_difference_of_wrist(self):
        a = make_hand(wrist=(0.5, 0.8, 0.0))
        b = make_hand(wrist=(0.6, 0.8, 0.0))
        v = estimate_velocity(b, a, 0.1)
        self.assertAlmostEqual(v.vx, 1.0)
        self.assertAlmostEqual(v.vy, 0.0)
        self.assertAlmostEqual(v.speed, 1.0)

    def test_speed_is_euclidean_norm(self):
        a = make_hand(wrist=(0.5, 0.5, 0.0))
        b = make_hand(wrist=(0.53, 0.54, 0.0))
        v = estimate_velocity(b, a, 0.1)
        self.assertAlmostEqual(v.speed, 0.5)


class TestFingerPose(unittest.TestCase):
    def test_collinear_finger_ratio_is_one(self):
        lm = np.zeros((21, 3))
        lm[5:9] = [(0, 0, 0), (0, -0.25, 0), (0, -0.5, 0), (0, -1.0, 0)]
        self.assertAlmostEqual(straightness_ratio(lm, FINGER_CHAINS["index"]), 1.0)

    def test_ratio_in_unit_interval(self):
        lm = make_landmarks(straight=("index", "ring"))
        for chain in FINGER_CHAINS.values():
            ratio = straightness_ratio(lm, chain)
            self.assertGreater(ratio, 0.0)
            self.assertLessEqual(ratio, 1.0)

    def test_curled_finger_is_not_straight(self):
        lm = make_landmarks(straight=())
        self.assertLess(straightness_ratio(lm, FINGER_CHAINS["middle"]), 0.85)

    def test_counts_and_index_only(self):
        p = finger_pose(make_hand(straight=("index",)))
        self.assertEqual(p.count, 1)
        self.assertTrue(p.index_only)

        p = finger_pose(make_hand(straight=("index", "middle", "ring")))
        self.assertEqual(p.count, 3)
        self.assertFalse(p.index_only)

        p = finger_pose(make_hand(straight=("middle",)))
        self.assertEqual(p.count, 1)
        self.assertFalse(p.index_only)


class TestClassifier(unittest.TestCase):
    def test_still_finger_counts(self):
        still = Velocity(0.1, 0.0, 0.0, 0.1)
        self.assertEqual(classify_gesture(pose("index"), still), GestureType.ONE_FINGER)
        self.assertEqual(classify_gesture(pose("index", "middle"), still), GestureType.TWO_FINGERS)
        self.assertEqual(classify_gesture(pose("index", "middle", "ring"), still),
                         GestureType.THREE_FINGERS)

    def test_gun_and_shoot(self):
        self.assertEqual(classify_gesture(pose("index"), Velocity(0.6, 0, 0, 0.6)), GestureType.GUN)
        self.assertEqual(classify_gesture(pose("index"), Velocity(0.9, 0, 0, 0.9)), GestureType.SHOOT)

    def test_index_only_never_throws(self):
        for vy in (-0.6, -1.0, -3.0):
            v = Velocity(0.0, vy, 0.0, abs(vy))
            for profile in (DESKTOP, MOBILE):
                self.assertIn(classify_gesture(pose("index"), v, profile),
                              (GestureType.GUN, GestureType.SHOOT))

    def test_throw_thresholds_follow_profile(self):
        down = Velocity(0.0, -0.6, 0.0, 0.6)
        two = pose("index", "middle")
        self.assertEqual(classify_gesture(two, down, DESKTOP), GestureType.NONE)
        self.assertEqual(classify_gesture(two, down, MOBILE), GestureType.THROW)
        self.assertEqual(classify_gesture(pose(*ALL), down, DESKTOP), GestureType.THROW)

        slow_down = Velocity(0.0, -0.55, 0.0, 0.55)
        self.assertEqual(classify_gesture(pose(*ALL), Velocity(0.0, -0.4, 0.3, 0.5), DESKTOP),
                         GestureType.NONE)
        self.assertEqual(classify_gesture(pose(*ALL), slow_down, DESKTOP), GestureType.THROW)

    def test_whip_and_none(self):
        fist = pose()
        self.assertEqual(classify_gesture(fist, Velocity(1.0, 0, 0, 1.0)), GestureType.WHIP)
        self.assertEqual(classify_gesture(fist, Velocity(0, 0.9, 0, 0.9)), GestureType.WHIP)
        self.assertEqual(classify_gesture(fist, Velocity(0.5, 0.5, 0, 0.71)), GestureType.NONE)
        self.assertEqual(classify_gesture(fist, ZERO_VELOCITY), GestureType.NONE)


class TestStabilizer(unittest.TestCase):
    def test_identical_history(self):
        s = GestureStabilizer()
        for _ in range(5):
            out = s.push(GestureType.WHIP)
        self.assertEqual(out, GestureType.WHIP)

    def test_single_glitch_is_suppressed(self):
        s = GestureStabilizer()
        for g in (GestureType.GUN, GestureType.GUN, GestureType.GUN, GestureType.SHOOT):
            out = s.push(g)
        self.assertEqual(out, GestureType.GUN)

    def test_tie_goes_to_first_seen(self):
        s = GestureStabilizer()
        for g in (GestureType.THROW, GestureType.NONE, GestureType.NONE, GestureType.THROW):
            out = s.push(g)
        self.assertEqual(out, GestureType.THROW)

    def test_window_evicts_oldest(self):
        s = GestureStabilizer()
        seq = [GestureType.GUN, GestureType.WHIP, GestureType.WHIP,
               GestureType.GUN, GestureType.GUN, GestureType.NONE]
        for g in seq:
            out = s.push(g)
        self.assertEqual(len(s), 5)
        # window is WHIP, WHIP, GUN, GUN, NONE
        self.assertEqual(out, GestureType.WHIP)

    def test_empty_is_none(self):
        self.assertEqual(GestureStabilizer().current(), GestureType.NONE)


class TestRecognizer(unittest.TestCase):
    def setUp(self):
        self.recognizer = GestureRecognizer(DESKTOP, clock=lambda: 0.0)

    def test_missing_frame_returns_none(self):
        self.assertIsNone(self.recognizer.recognize(None, now=0.1))

    def test_gap_clears_velocity_history(self):
        self.recognizer.recognize(make_hand(wrist=(0.2, 0.8, 0.0)), now=0.1)
        self.recognizer.recognize(None, now=0.2)
        event = self.recognizer.recognize(make_hand(wrist=(0.9, 0.8, 0.0)), now=0.3)
        self.assertEqual(event.velocity, ZERO_VELOCITY)

    def test_pointing_event_uses_fingertip(self):
        hand_at = lambda x: make_hand(straight=("index",), wrist=(x, 0.8, 0.0))
        self.recognizer.recognize(hand_at(0.30), now=0.1)
        self.recognizer.recognize(hand_at(0.36), now=0.2)
        event = self.recognizer.recognize(hand_at(0.42), now=0.3)
        self.assertEqual(event.type, GestureType.GUN)
        frame = hand_at(0.42)
        self.assertEqual(event.position, frame.point(8))
        self.assertAlmostEqual(event.velocity.vx, 0.6)

    def test_other_events_use_hand_center(self):
        frame = make_hand(straight=ALL)
        event = self.recognizer.recognize(frame, now=0.1)
        self.assertEqual(event.type, GestureType.NONE)
        self.assertEqual(event.position, frame.point(9))
        self.assertAlmostEqual(event.confidence, 0.9)

    def test_frames_compare_by_identity(self):
        a = make_hand()
        b = make_hand()
        self.assertEqual(a, a)
        self.assertNotEqual(a, b)
        self.assertEqual(len({a, b}), 2)

    def test_frame_rejects_wrong_shape(self):
        with self.assertRaises(ValueError):
            HandFrame(np.zeros((20, 3)))


if __name__ == "__main__":
    unittest.main()
