import unittest
import os
import sys
import math

sys.path.append(os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))

from bubblemap.interaction import InteractionController, InteractionState
from bubblemap.scheduling import ManualScheduler
from bubblemap.simulation import Simulation


class LeakyScheduler(ManualScheduler):
    """A scheduler whose cancel never reaches the timer."""

    def cancel(self, handle):
        pass


class TestInteraction(unittest.TestCase):
    def setUp(self):
        self.sim = Simulation(800, 600, seed=5)
        self.scheduler = ManualScheduler()
        self.controller = InteractionController(self.sim, self.scheduler)
        self.node = self.sim.add_node(100, 100)

    def test_press_selects_and_arms_timer(self):
        hit = self.controller.pointer_down(105, 100)
        self.assertIs(hit, self.node)
        self.assertIs(self.controller.selected, self.node)
        self.assertTrue(self.node.is_dragging)
        self.assertEqual(self.controller.state, InteractionState.DRAGGING)
        self.assertTrue(self.controller.long_press_pending)
        self.assertEqual(self.scheduler.pending, 1)

    def test_press_on_empty_space_changes_nothing(self):
        self.assertIsNone(self.controller.pointer_down(500, 500))
        self.assertIsNone(self.controller.selected)
        self.assertEqual(self.controller.state, InteractionState.IDLE)
        self.assertEqual(self.scheduler.pending, 0)
        self.assertFalse(self.controller.pointer_move(510, 510))

    def test_drag_keeps_grab_offset(self):
        self.node.vx, self.node.vy = 3.0, -2.0
        self.controller.pointer_down(105, 95)
        self.assertTrue(self.controller.pointer_move(205, 145))
        self.assertEqual((self.node.x, self.node.y), (200, 150))
        self.assertEqual((self.node.vx, self.node.vy), (0.0, 0.0))

    def test_tick_does_not_move_dragged_node(self):
        other = self.sim.add_node(120, 100)
        self.sim.add_edge(self.node, other)
        self.controller.pointer_down(100, 100)
        self.controller.pointer_move(300, 300)
        for _ in range(5):
            self.sim.step()
        self.assertEqual((self.node.x, self.node.y), (300, 300))

    def test_release_before_long_press_creates_nothing(self):
        self.controller.pointer_down(100, 100)
        self.scheduler.advance(300)
        self.controller.pointer_up()
        self.scheduler.advance(1000)

        self.assertEqual(len(self.sim.nodes), 1)
        self.assertEqual(len(self.sim.edges), 0)
        self.assertIsNone(self.controller.selected)
        self.assertFalse(self.node.is_dragging)
        self.assertFalse(self.controller.long_press_pending)
        self.assertEqual(self.scheduler.pending, 0)

    def test_long_press_creates_connected_node(self):
        created = []
        self.controller.on_node_created = lambda n, e: created.append((n, e))

        self.controller.pointer_down(100, 100)
        self.scheduler.advance(499)
        self.assertEqual(len(self.sim.nodes), 1)
        self.scheduler.advance(1)

        self.assertEqual(len(self.sim.nodes), 2)
        self.assertEqual(len(self.sim.edges), 1)
        new_node = self.sim.nodes[1]
        edge = self.sim.edges[0]
        self.assertIs(edge.source, self.node)
        self.assertIs(edge.target, new_node)
        self.assertEqual(new_node.label, "Bubble 2")
        self.assertAlmostEqual(math.hypot(new_node.x - 100, new_node.y - 100), 100)
        self.assertEqual(created, [(new_node, edge)])

        self.assertIsNone(self.controller.selected)
        self.assertFalse(self.node.is_dragging)
        self.assertEqual(self.controller.state, InteractionState.IDLE)

        # The release of the same gesture is a no-op
        self.controller.pointer_up()
        self.assertEqual(len(self.sim.nodes), 2)
        self.assertEqual(len(self.sim.edges), 1)

    def test_move_after_long_press_does_not_drag(self):
        self.controller.pointer_down(100, 100)
        self.scheduler.advance(500)
        self.assertFalse(self.controller.pointer_move(400, 400))
        self.assertEqual((self.node.x, self.node.y), (100, 100))

    def test_stale_timer_never_fires_after_release(self):
        scheduler = LeakyScheduler()
        controller = InteractionController(self.sim, scheduler)
        controller.pointer_down(100, 100)
        controller.pointer_up()
        self.assertEqual(scheduler.advance(1000), 1)
        self.assertEqual(len(self.sim.nodes), 1)
        self.assertEqual(len(self.sim.edges), 0)

    def test_stale_timer_ignored_by_later_gesture(self):
        scheduler = LeakyScheduler()
        controller = InteractionController(self.sim, scheduler)
        controller.pointer_down(100, 100)
        scheduler.advance(400)
        controller.pointer_up()
        controller.pointer_down(100, 100)
        # First timer comes due here, the second one 400ms later
        scheduler.advance(100)
        self.assertEqual(len(self.sim.nodes), 1)
        scheduler.advance(400)
        self.assertEqual(len(self.sim.nodes), 2)

    def test_long_press_without_selection_is_noop(self):
        self.assertIsNone(self.controller.long_press_elapsed())
        self.assertEqual(len(self.sim.nodes), 1)

    def test_second_press_releases_first_gesture(self):
        other = self.sim.add_node(400, 400)
        self.controller.pointer_down(100, 100)
        self.controller.pointer_down(400, 400)
        self.assertFalse(self.node.is_dragging)
        self.assertIs(self.controller.selected, other)
        self.assertEqual(self.scheduler.pending, 1)

        self.scheduler.advance(500)
        self.assertEqual(len(self.sim.edges), 1)
        self.assertIs(self.sim.edges[0].source, other)

    def test_long_press_uses_configured_duration(self):
        self.sim.settings.long_press_ms = 800
        self.controller.pointer_down(100, 100)
        self.scheduler.advance(500)
        self.assertEqual(len(self.sim.nodes), 1)
        self.scheduler.advance(300)
        self.assertEqual(len(self.sim.nodes), 2)


if __name__ == '__main__':
    unittest.main()
