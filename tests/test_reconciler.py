"""Tests for replaying suspended time through the clock (pomoflash.core.reconciler)."""

import unittest

from pomoflash.core.durations import DurationConfig, Phase
from pomoflash.core.phase_clock import PhaseClock
from pomoflash.core.reconciler import BackgroundReconciler
from tests.helpers import FakeTime, RecordingAlerts

T = 1_700_000_000.0


def make_running(work=60, brk=5, phase=Phase.WORK, remaining=10.0, last_active=T, **kwargs):
    now = FakeTime(last_active)
    alerts = RecordingAlerts()
    clock = PhaseClock(
        DurationConfig(work_seconds=work, break_seconds=brk),
        alerts=alerts,
        now=now,
        phase=phase,
        remaining=remaining,
        running=True,
        last_active_epoch=last_active,
        **kwargs,
    )
    return clock, BackgroundReconciler(clock), now, alerts


# Step-by-step reference: subtract, then keep adding the next phase's length while nothing is left.
def replay(work, brk, phase, remaining, elapsed):
    sessions = 0
    remaining -= elapsed
    while remaining <= 0:
        if phase is Phase.WORK:
            phase, sessions = Phase.BREAK, sessions + 1
            remaining += brk
        else:
            phase = Phase.WORK
            remaining += work
    return phase, remaining, sessions


class TestReconcile(unittest.TestCase):

    def test_noop_without_stamp(self):
        clock, rec, _, _ = make_running(last_active=0.0)
        before = clock.snapshot()
        result = rec.reconcile(T + 100)
        self.assertEqual(result.phases_completed, 0)
        self.assertFalse(result.resumed)
        self.assertEqual(clock.snapshot(), before)

    def test_noop_when_paused(self):
        clock, rec, _, _ = make_running()
        clock.running = False
        before = clock.snapshot()
        rec.reconcile(T + 100)
        self.assertEqual(clock.snapshot(), before)

    def test_zero_elapsed_leaves_state_unchanged(self):
        clock, rec, _, _ = make_running()
        before = clock.snapshot()
        result = rec.reconcile(clock.last_active_epoch)
        self.assertEqual(clock.snapshot(), before)
        self.assertEqual(result.elapsed, 0.0)

    def test_clock_going_backwards_is_ignored(self):
        clock, rec, _, _ = make_running()
        before = clock.snapshot()
        rec.reconcile(T - 30)
        self.assertEqual(clock.snapshot(), before)

    def test_within_same_phase(self):
        clock, rec, _, alerts = make_running(remaining=60.0)
        result = rec.reconcile(T + 20)
        self.assertIs(clock.phase, Phase.WORK)
        self.assertEqual(clock.remaining, 40.0)
        self.assertTrue(clock.running)
        self.assertTrue(result.resumed)
        self.assertEqual(clock.last_active_epoch, T + 20)
        self.assertEqual(alerts.armed[0], 40.0)

    def test_multi_phase_catch_up(self):
        clock, rec, _, _ = make_running(work=60, brk=5, remaining=10.0)
        result = rec.reconcile(T + 130)
        # -120, +5 (Break), +60 (Work), +5 (Break), +60 (Work) -> 10
        self.assertIs(clock.phase, Phase.WORK)
        self.assertEqual(clock.remaining, 10.0)
        self.assertEqual(clock.completed_sessions, 2)
        self.assertEqual(result.phases_completed, 4)
        self.assertTrue(clock.running)

    def test_matches_step_by_step_replay(self):
        cases = [
            (60, 5, Phase.WORK, 10.0, 12),
            (60, 5, Phase.BREAK, 3.0, 3),
            (1500, 300, Phase.WORK, 1500.0, 86400),
            (25, 7, Phase.BREAK, 6.5, 1000.25),
            (10, 0, Phase.WORK, 4.0, 45),
        ]
        for work, brk, phase, remaining, elapsed in cases:
            with self.subTest(work=work, brk=brk, phase=phase, remaining=remaining, elapsed=elapsed):
                clock, rec, _, _ = make_running(work, brk, phase=phase, remaining=remaining)
                rec.reconcile(T + elapsed)
                expected_phase, expected_remaining, expected_sessions = replay(work, brk, phase, remaining, elapsed)
                self.assertIs(clock.phase, expected_phase)
                self.assertAlmostEqual(clock.remaining, expected_remaining)
                self.assertEqual(clock.completed_sessions, expected_sessions)
                self.assertTrue(clock.running)

    def test_full_day_away(self):
        clock, rec, _, _ = make_running(work=1500, brk=300, remaining=1500.0)
        rec.reconcile(T + 86400)
        self.assertIs(clock.phase, Phase.WORK)
        self.assertEqual(clock.remaining, 1500.0)
        self.assertEqual(clock.completed_sessions, 48)

    def test_second_reconcile_does_not_double_count(self):
        clock, rec, _, _ = make_running(remaining=60.0)
        rec.reconcile(T + 20)
        result = rec.reconcile(T + 20)
        self.assertEqual(clock.remaining, 40.0)
        self.assertEqual(result.elapsed, 0.0)

    def test_catch_up_fires_no_cues(self):
        clock, rec, _, alerts = make_running(remaining=10.0)
        clock.foreground = False
        rec.reconcile(T + 130)
        self.assertEqual(alerts.feedbacks, 0)
        self.assertEqual(alerts.delivered, [])

    def test_both_zero_durations_terminate_paused(self):
        clock, rec, _, _ = make_running(work=0, brk=0, remaining=5.0)
        with self.assertLogs("pomoflash", level="WARNING"):
            result = rec.reconcile(T + 10)
        self.assertFalse(clock.running)
        self.assertFalse(result.resumed)
        self.assertEqual(clock.remaining, 0.0)

    def test_catch_up_stamps_the_reconcile_instant(self):
        clock, rec, now, _ = make_running(work=0, brk=0, remaining=5.0)
        with self.assertLogs("pomoflash", level="WARNING"):
            rec.reconcile(T + 10)
        self.assertEqual(now.t, T)
        self.assertEqual(clock.last_active_epoch, T + 10)


class TestSuspendResume(unittest.TestCase):

    def test_suspend_then_resume_replays_the_gap(self):
        now = FakeTime(T)
        clock = PhaseClock(DurationConfig(work_seconds=100, break_seconds=5), alerts=RecordingAlerts(), now=now)
        rec = BackgroundReconciler(clock)
        clock.start()
        clock.tick(5)
        rec.suspend(T + 5)
        self.assertFalse(clock.foreground)
        self.assertEqual(clock.last_active_epoch, T + 5)

        result = rec.resume(T + 65)
        self.assertTrue(clock.foreground)
        self.assertEqual(result.elapsed, 60)
        self.assertEqual(clock.remaining, 35)
        self.assertTrue(clock.running)

    def test_resume_after_foreground_ticks_replays_nothing_twice(self):
        now = FakeTime(T)
        clock = PhaseClock(DurationConfig(work_seconds=60, break_seconds=5), alerts=RecordingAlerts(), now=now)
        rec = BackgroundReconciler(clock)
        clock.start()
        now.advance(10)
        clock.tick(10)
        self.assertEqual(clock.last_active_epoch, T + 10)

        result = rec.resume(T + 10)
        self.assertEqual(result.elapsed, 0.0)
        self.assertEqual(clock.remaining, 50)
        self.assertTrue(clock.running)

    def test_double_suspend_keeps_the_interval(self):
        clock, rec, _, _ = make_running(remaining=60.0)
        rec.suspend(T)
        rec.suspend(T + 25)
        self.assertEqual(clock.remaining, 35.0)
        self.assertEqual(clock.last_active_epoch, T + 25)
        rec.resume(T + 30)
        self.assertEqual(clock.remaining, 30.0)

    def test_resume_while_paused_changes_nothing(self):
        now = FakeTime(T)
        clock = PhaseClock(DurationConfig(work_seconds=100, break_seconds=5), now=now)
        rec = BackgroundReconciler(clock)
        clock.start()
        clock.tick(40)
        clock.pause()
        rec.suspend(T + 40)
        rec.resume(T + 4000)
        self.assertEqual(clock.remaining, 60)
        self.assertFalse(clock.running)


if __name__ == "__main__":
    unittest.main()
