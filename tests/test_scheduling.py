import unittest
import os
import sys

sys.path.append(os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))

from bubblemap.scheduling import ManualScheduler


class TestManualScheduler(unittest.TestCase):
    def setUp(self):
        self.scheduler = ManualScheduler()
        self.fired = []

    def test_fires_when_due(self):
        self.scheduler.schedule_after(500, lambda: self.fired.append("a"))
        self.assertEqual(self.scheduler.advance(499), 0)
        self.assertEqual(self.fired, [])
        self.assertEqual(self.scheduler.advance(1), 1)
        self.assertEqual(self.fired, ["a"])
        self.assertEqual(self.scheduler.now_ms, 500)

    def test_due_order_then_registration_order(self):
        self.scheduler.schedule_after(200, lambda: self.fired.append("late"))
        self.scheduler.schedule_after(100, lambda: self.fired.append("first"))
        self.scheduler.schedule_after(100, lambda: self.fired.append("second"))
        self.scheduler.advance(1000)
        self.assertEqual(self.fired, ["first", "second", "late"])

    def test_cancel(self):
        handle = self.scheduler.schedule_after(100, lambda: self.fired.append("x"))
        self.scheduler.cancel(handle)
        self.assertEqual(self.scheduler.pending, 0)
        self.scheduler.advance(1000)
        self.assertEqual(self.fired, [])

    def test_cancel_after_fire_and_twice_is_harmless(self):
        handle = self.scheduler.schedule_after(10, lambda: self.fired.append("x"))
        self.scheduler.advance(10)
        self.scheduler.cancel(handle)
        self.scheduler.cancel(handle)
        self.scheduler.cancel(12345)
        self.assertEqual(self.fired, ["x"])

    def test_negative_advance_rejected(self):
        self.scheduler.advance(200)
        with self.assertRaises(ValueError):
            self.scheduler.advance(-100)
        self.assertEqual(self.scheduler.now_ms, 200)

        # A timer scheduled afterwards still comes due after its own delay
        self.scheduler.schedule_after(50, lambda: self.fired.append("x"))
        self.scheduler.advance(50)
        self.assertEqual(self.fired, ["x"])

    def test_callback_can_schedule_follow_up(self):
        def first():
            self.fired.append("first")
            self.scheduler.schedule_after(50, lambda: self.fired.append("follow-up"))

        self.scheduler.schedule_after(100, first)
        self.scheduler.advance(120)
        self.assertEqual(self.fired, ["first"])
        self.scheduler.advance(30)
        self.assertEqual(self.fired, ["first", "follow-up"])


if __name__ == '__main__':
    unittest.main()
