"""Tests for the Qt alert scheduler, run on the offscreen platform."""

import os
import unittest

os.environ.setdefault("QT_QPA_PLATFORM", "offscreen")

try:
    from PySide6.QtWidgets import QApplication
except ImportError as e:
    QApplication = None
    _QT_ERROR = str(e)
else:
    _QT_ERROR = ""

from pomoflash.core.alerts import AlertUnavailable
from pomoflash.core.durations import DurationConfig, Phase
from pomoflash.core.phase_clock import PhaseClock
from tests.helpers import FakeTime


@unittest.skipIf(QApplication is None, f"PySide6 unavailable: {_QT_ERROR}")
class TestQtAlertScheduler(unittest.TestCase):

    @classmethod
    def setUpClass(cls):
        cls.app = QApplication.instance() or QApplication([])

    def _scheduler(self):
        from pomoflash.ui.alerts import QtAlertScheduler
        return QtAlertScheduler(tray=None)

    def test_is_a_complete_scheduler(self):
        from pomoflash.core.alerts import AlertScheduler
        alerts = self._scheduler()
        self.assertIsInstance(alerts, AlertScheduler)
        alerts.cancel_pending()
        self.assertEqual(alerts.pending, 0)

    def test_schedule_without_tray_is_unavailable(self):
        alerts = self._scheduler()
        with self.assertRaises(AlertUnavailable):
            alerts.schedule(5, "t", "b")
        self.assertEqual(alerts.pending, 0)

    def test_background_cue_falls_back_to_feedback(self):
        alerts = self._scheduler()
        self.assertEqual(alerts.cue("t", "b", foreground=False), "feedback")

    def test_clock_runs_without_tray(self):
        clock = PhaseClock(DurationConfig(work_seconds=10, break_seconds=5), alerts=self._scheduler(), now=FakeTime())
        clock.start()
        clock.foreground = False
        clock.tick(10)
        self.assertIs(clock.phase, Phase.BREAK)
        self.assertTrue(clock.running)
        clock.pause()
        self.assertEqual(clock.alerts.pending, 0)


if __name__ == "__main__":
    unittest.main()
