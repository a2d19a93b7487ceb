import os
import sys
import unittest

sys.path.append(os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from scheduler import Scheduler


class TestScheduler(unittest.TestCase):
    def setUp(self):
        self.scheduler = Scheduler()
        self.fired = []

    def test_fires_only_after_delay(self):
        self.scheduler.call_later(0.5, lambda: self.fired.append("a"))
        self.scheduler.advance(0.4)
        self.assertEqual(self.fired, [])
        self.scheduler.advance(0.1)
        self.assertEqual(self.fired, ["a"])
        self.assertEqual(len(self.scheduler), 0)

    def test_fires_in_due_order(self):
        self.scheduler.call_later(0.3, lambda: self.fired.append("late"))
        self.scheduler.call_later(0.1, lambda: self.fired.append("early"))
        self.scheduler.call_later(0.2, lambda: self.fired.append("middle"))
        self.assertEqual(self.scheduler.advance(1.0), 3)
        self.assertEqual(self.fired, ["early", "middle", "late"])

    def test_same_due_keeps_insertion_order(self):
        for name in ("first", "second", "third"):
            self.scheduler.call_later(0.2, lambda n=name: self.fired.append(n))
        self.scheduler.advance(0.2)
        self.assertEqual(self.fired, ["first", "second", "third"])

    def test_cancel_all(self):
        self.scheduler.call_later(0.1, lambda: self.fired.append("a"))
        self.scheduler.call_later(2.0, lambda: self.fired.append("b"))
        self.assertEqual(self.scheduler.cancel_all(), 2)
        self.scheduler.advance(5.0)
        self.assertEqual(self.fired, [])
        self.assertEqual(self.scheduler.pending, [])

    def test_cancel_single_task(self):
        task = self.scheduler.call_later(0.1, lambda: self.fired.append("a"))
        self.scheduler.call_later(0.1, lambda: self.fired.append("b"))
        task.cancel()
        self.assertEqual(len(self.scheduler), 1)
        self.scheduler.advance(0.2)
        self.assertEqual(self.fired, ["b"])

    def test_failing_callback_is_logged_and_others_still_run(self):
        def boom():
            raise RuntimeError("boom")

        self.scheduler.call_later(0.1, boom, "boom")
        self.scheduler.call_later(0.2, lambda: self.fired.append("after"))
        with self.assertLogs("scheduler", level="ERROR"):
            self.scheduler.advance(0.5)
        self.assertEqual(self.fired, ["after"])

    def test_clock_accumulates(self):
        self.scheduler.advance(0.25)
        self.scheduler.advance(0.25)
        self.assertAlmostEqual(self.scheduler.now, 0.5)


if __name__ == "__main__":
    unittest.main()
