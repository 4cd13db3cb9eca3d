"""Tests for the animation tracker and its schedulers.

Most tests drive a ManualScheduler so that time only moves when the
test says so.

Validates:
  - Arranged ids stay animating for duration + padding, then clear
  - A new arrangement cancels the previous clear (no stale clear)
  - A new arrangement restarts the clock from now
  - animate() never shortens the pending deadline
  - end_drag keeps timed highlights, cancel_drag clears synchronously
  - close() leaves nothing scheduled
  - ThreadingScheduler runs and cancels real timers
"""

from __future__ import annotations

import threading
import time
import unittest

from dashgrid.layout.animation import AnimationTracker
from dashgrid.layout.models import AffectedComponent, Displacement, Phase
from dashgrid.layout.scheduling import ManualScheduler, ThreadingScheduler


def affected(cid: str) -> AffectedComponent:
    return AffectedComponent(id=cid, displacement=Displacement(2, 0), cause_id="d")


class TestArrangingClear(unittest.TestCase):

    def setUp(self):
        self.clock = ManualScheduler()
        self.tracker = AnimationTracker(self.clock)

    def test_clears_after_duration_plus_padding(self):
        self.tracker.start_arranging(["a", "b"], 400)
        self.assertEqual(self.tracker.phase, Phase.ARRANGING)
        self.assertEqual(self.tracker.animating_ids, {"a", "b"})
        self.assertEqual(self.clock.pending, 1)

        self.clock.advance(0.499)
        self.assertTrue(self.tracker.is_animating)

        self.clock.advance(0.002)
        self.assertFalse(self.tracker.is_animating)
        self.assertEqual(self.tracker.animating_ids, frozenset())
        self.assertEqual(self.tracker.phase, Phase.IDLE)
        self.assertEqual(self.clock.pending, 0)

    def test_new_arrangement_cancels_stale_clear(self):
        self.tracker.start_arranging(["a"], 400)   # clear due at 0.5
        self.clock.advance(0.3)
        self.tracker.start_arranging(["b"], 400)   # clear due at 0.8
        self.assertEqual(self.clock.pending, 1)

        self.clock.advance(0.25)                   # t=0.55
        self.assertEqual(self.tracker.animating_ids, {"b"})

        self.clock.advance(0.3)                    # t=0.85
        self.assertFalse(self.tracker.is_animating)

    def test_shorter_arrangement_restarts_clock(self):
        """A 300ms arrangement after a 600ms one clears at 0.4s, not 0.7s."""
        self.tracker.start_arranging(["a"], 600)
        self.tracker.start_arranging(["b"], 300)
        self.assertEqual(self.clock.pending, 1)

        self.clock.advance(0.39)
        self.assertEqual(self.tracker.animating_ids, {"b"})

        self.clock.advance(0.02)
        self.assertFalse(self.tracker.is_animating)
        self.assertEqual(self.tracker.phase, Phase.IDLE)
        self.assertEqual(self.clock.pending, 0)

    def test_deadline_never_shortened(self):
        self.tracker.start_arranging(["a"], 400)   # clear due at 0.5
        self.tracker.animate("x", 100)             # would be 0.1
        self.clock.advance(0.2)
        self.assertTrue(self.tracker.is_component_animating("a"))
        self.assertTrue(self.tracker.is_component_animating("x"))
        self.clock.advance(0.31)
        self.assertFalse(self.tracker.is_animating)

    def test_animate_single_component(self):
        self.tracker.animate("x", 200)
        self.assertTrue(self.tracker.has_pending_clear)
        self.clock.advance(0.2)
        self.assertFalse(self.tracker.is_component_animating("x"))
        self.assertFalse(self.tracker.has_pending_clear)

    def test_snapshot_is_a_copy(self):
        self.tracker.start_arranging(["a"], 400)
        snap = self.tracker.snapshot()
        snap.animating_ids.add("intruder")
        self.assertEqual(self.tracker.animating_ids, {"a"})


class TestDragPhases(unittest.TestCase):

    def setUp(self):
        self.clock = ManualScheduler()
        self.tracker = AnimationTracker(self.clock)

    def test_end_drag_clears_space_making(self):
        self.tracker.begin_drag()
        self.tracker.set_space_making([affected("s")])
        state = self.tracker.snapshot()
        self.assertEqual(state.phase, Phase.DRAGGING)
        self.assertTrue(state.space_making_active)

        self.tracker.end_drag()
        state = self.tracker.snapshot()
        self.assertEqual(state.phase, Phase.IDLE)
        self.assertFalse(state.space_making_active)
        self.assertEqual(state.affected_components, [])

    def test_end_drag_with_pending_highlight(self):
        self.tracker.start_arranging(["a"], 400)
        self.tracker.begin_drag()
        self.tracker.end_drag()
        self.assertEqual(self.tracker.phase, Phase.ARRANGING)
        self.clock.advance(1)
        self.assertEqual(self.tracker.phase, Phase.IDLE)

    def test_arranging_during_drag_keeps_phase(self):
        self.tracker.begin_drag()
        self.tracker.start_arranging(["a"], 400)
        self.assertEqual(self.tracker.phase, Phase.DRAGGING)
        self.clock.advance(1)
        self.assertEqual(self.tracker.phase, Phase.DRAGGING)
        self.assertFalse(self.tracker.is_animating)

    def test_cancel_drag_is_synchronous(self):
        self.tracker.start_arranging(["a"], 400)
        self.tracker.begin_drag()
        self.tracker.set_space_making([affected("s")])

        self.tracker.cancel_drag()
        state = self.tracker.snapshot()
        self.assertEqual(state.phase, Phase.IDLE)
        self.assertFalse(state.is_animating)
        self.assertFalse(state.space_making_active)
        self.assertEqual(self.clock.pending, 0)

    def test_close_leaves_nothing_scheduled(self):
        self.tracker.start_arranging(["a"], 400)
        self.tracker.close()
        self.assertEqual(self.clock.pending, 0)
        self.assertEqual(self.clock.advance(5), 0)


class TestManualScheduler(unittest.TestCase):

    def test_runs_in_due_order(self):
        clock = ManualScheduler()
        calls = []
        clock.call_later(0.2, lambda: calls.append(("late", clock.now())))
        clock.call_later(0.1, lambda: calls.append(("early", clock.now())))
        self.assertEqual(clock.advance(1), 2)
        self.assertEqual(calls, [("early", 0.1), ("late", 0.2)])
        self.assertEqual(clock.now(), 1)

    def test_cancelled_task_does_not_run(self):
        clock = ManualScheduler()
        calls = []
        task = clock.call_later(0.1, lambda: calls.append(1))
        task.cancel()
        self.assertTrue(task.cancelled)
        clock.advance(1)
        self.assertEqual(calls, [])


class TestThreadingScheduler(unittest.TestCase):

    def test_tracker_clears_on_timer_thread(self):
        tracker = AnimationTracker(ThreadingScheduler(), clear_padding_ms=20)
        tracker.start_arranging(["a"], 0)
        deadline = time.monotonic() + 2.0
        while tracker.is_animating and time.monotonic() < deadline:
            time.sleep(0.01)
        self.assertFalse(tracker.is_animating)
        self.assertEqual(tracker.phase, Phase.IDLE)

    def test_cancel(self):
        fired = threading.Event()
        task = ThreadingScheduler().call_later(0.05, fired.set)
        task.cancel()
        self.assertFalse(fired.wait(0.15))
        self.assertTrue(task.cancelled)


if __name__ == "__main__":
    unittest.main()
