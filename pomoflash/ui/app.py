import sys
import time
from PySide6.QtCore import Qt, QEvent, QTimer
from PySide6.QtGui import QAction, QFont
from PySide6.QtWidgets import (
    QApplication,
    QHBoxLayout,
    QLabel,
    QMainWindow,
    QMessageBox,
    QProgressBar,
    QPushButton,
    QStyle,
    QSystemTrayIcon,
    QVBoxLayout,
    QWidget,
)
from pomoflash.common.logger import log
from pomoflash.core.alerts import ALERT_TITLE
from pomoflash.core.durations import Phase
from pomoflash.core.stats import estimated_focus_seconds, format_focus
from pomoflash.core.store import open_clock
from pomoflash.ui.alerts import QtAlertScheduler
from pomoflash.ui.dialogs import SettingsDialog
from pomoflash.util import format_duration, format_epoch, format_time

# Foreground countdown cadence, in milliseconds (~60 Hz).
TICK_MS = 16

_PHASE_COLORS = {
    Phase.WORK: "#d64545",
    Phase.BREAK: "#3c9a5f",
}


# ---------------------------------------------------------------------------
# Main window
# ---------------------------------------------------------------------------

# Main window of PomoFlash. Owns the foreground tick source and forwards suspend/resume to the reconciler; all timer
# logic lives in the PhaseClock it drives.
class MainWindow(QMainWindow):

    def __init__(self):
        super().__init__()
        self.setWindowTitle("Pomodoro")

        # -- Tray icon doubles as the notification surface --
        self.tray = QSystemTrayIcon(self.style().standardIcon(QStyle.SP_MediaPlay), self)
        self.tray.setToolTip("PomoFlash")
        if QSystemTrayIcon.isSystemTrayAvailable():
            self.tray.show()
        self.alerts = QtAlertScheduler(self.tray, self)

        # -- Load persisted clock and replay any time spent closed --
        self.clock, self.reconciler, self.mirror = open_clock(alerts=self.alerts)
        self.clock.add_listener(self._on_clock_event)
        self._suspended = False

        self._build_ui()
        self._build_menus()

        # -- Tick timer --
        self._last_mono = None
        self._timer = QTimer(self)
        self._timer.setTimerType(Qt.PreciseTimer)
        self._timer.timeout.connect(self._tick)

        app = QApplication.instance()
        if app is not None:
            app.applicationStateChanged.connect(self._on_app_state_changed)

        self._refresh()
        self._sync_tick_source()

    # ------------------------------------------------------------------ #
    #  UI                                                                  #
    # ------------------------------------------------------------------ #

    def _build_ui(self):
        central = QWidget()
        self.setCentralWidget(central)
        lay = QVBoxLayout(central)
        lay.setSpacing(16)

        self._phase_lbl = QLabel()
        self._phase_lbl.setFont(QFont("Sans Serif", 20))
        self._phase_lbl.setAlignment(Qt.AlignCenter)
        lay.addWidget(self._phase_lbl)

        self._time_lbl = QLabel()
        self._time_lbl.setFont(QFont("Monospace", 44, QFont.Bold))
        self._time_lbl.setAlignment(Qt.AlignCenter)
        lay.addWidget(self._time_lbl)

        self._progress = QProgressBar()
        self._progress.setRange(0, 1000)
        self._progress.setTextVisible(False)
        lay.addWidget(self._progress)

        btn_row = QHBoxLayout()
        self._start_btn = QPushButton()
        self._start_btn.clicked.connect(self._on_start_pause)
        btn_row.addWidget(self._start_btn)
        reset_btn = QPushButton("Reset Timer")
        reset_btn.clicked.connect(self.clock.reset_phase)
        btn_row.addWidget(reset_btn)
        lay.addLayout(btn_row)

        self._stats_lbl = QLabel()
        self._stats_lbl.setAlignment(Qt.AlignCenter)
        self._stats_lbl.setStyleSheet("color: #888888;")
        lay.addWidget(self._stats_lbl)

    def _build_menus(self):
        timer_menu = self.menuBar().addMenu("Timer")
        self._add_action(timer_menu, "Settings…", self._on_settings)
        self._add_action(timer_menu, "Reset Everything", self._on_reset_everything)

        dev_menu = self.menuBar().addMenu("Dev Tools")
        self._add_action(dev_menu, "Runtime State", self._on_show_runtime_state)
        self._add_action(dev_menu, "Complete Current Phase", self.clock.complete_phase)
        dev_menu.addSeparator()
        self._add_action(dev_menu, "Send Test Notification Now", self._on_test_notification)
        self._add_action(dev_menu, "Schedule 5-sec Test Notification", lambda: self._on_test_notification(after=5))
        self._add_action(dev_menu, "Cancel Pending Notifications", self.alerts.cancel_pending)
        dev_menu.addSeparator()
        self._add_action(dev_menu, "Sessions +1", lambda: self.clock.adjust_sessions(1))
        self._add_action(dev_menu, "Sessions −1", lambda: self.clock.adjust_sessions(-1))
        self._add_action(dev_menu, "Clear Session Count", self.clock.clear_sessions)

    def _add_action(self, menu, text, slot):
        action = QAction(text, self)
        action.triggered.connect(lambda _=False: slot())
        menu.addAction(action)
        return action

    def _refresh(self):
        clock = self.clock
        color = _PHASE_COLORS[clock.phase]
        self._phase_lbl.setText(clock.label)
        self._phase_lbl.setStyleSheet(f"color: {color};")
        self._time_lbl.setText(format_time(clock.remaining))
        self._progress.setValue(int(clock.progress * 1000))
        self._start_btn.setText("Pause" if clock.running else "Start")
        focus = estimated_focus_seconds(clock.completed_sessions, clock.config.work_seconds)
        self._stats_lbl.setText(f"Sessions completed: {clock.completed_sessions}   ·   Focus: {format_focus(focus)}")

    # ------------------------------------------------------------------ #
    #  Clock wiring                                                        #
    # ------------------------------------------------------------------ #

    def _on_clock_event(self, clock, event):
        self._refresh()
        if event != "tick":
            self._sync_tick_source()

    # Runs the QTimer only while the clock is running and we're in the foreground.
    def _sync_tick_source(self):
        should_tick = self.clock.running and not self._suspended
        if should_tick and not self._timer.isActive():
            self._last_mono = time.monotonic()
            self._timer.start(TICK_MS)
        elif not should_tick and self._timer.isActive():
            self._timer.stop()
            self._last_mono = None

    def _tick(self):
        now = time.monotonic()
        elapsed = now - self._last_mono if self._last_mono is not None else TICK_MS / 1000
        self._last_mono = now
        self.clock.tick(elapsed)

    def _on_start_pause(self):
        if self.clock.running:
            self.clock.pause()
        else:
            self.clock.start()

    # ------------------------------------------------------------------ #
    #  Suspend / resume                                                    #
    # ------------------------------------------------------------------ #

    def _suspend(self):
        if self._suspended:
            return
        self._suspended = True
        self._sync_tick_source()
        self.reconciler.suspend()

    def _resume(self):
        if not self._suspended:
            return
        self._suspended = False
        self.reconciler.resume()
        self._refresh()
        self._sync_tick_source()

    def _on_app_state_changed(self, state):
        if state in (Qt.ApplicationHidden, Qt.ApplicationSuspended):
            self._suspend()
        elif state == Qt.ApplicationActive and not self.isMinimized():
            self._resume()

    def changeEvent(self, event):
        if event.type() == QEvent.WindowStateChange:
            if self.isMinimized():
                self._suspend()
            else:
                self._resume()
        super().changeEvent(event)

    # ------------------------------------------------------------------ #
    #  Menu actions                                                        #
    # ------------------------------------------------------------------ #

    def _on_settings(self):
        dlg = SettingsDialog(self, self.clock.config)
        if dlg.exec() == SettingsDialog.Accepted:
            self.clock.apply_config(dlg.chosen_config)

    def _on_reset_everything(self):
        reply = QMessageBox.question(
            self, "Reset Everything?",
            "This stops the timer, goes back to Work and clears the session count.",
            QMessageBox.Yes | QMessageBox.No, QMessageBox.No)
        if reply == QMessageBox.Yes:
            self.clock.reset_all()

    def _on_test_notification(self, after=None):
        title = f"{ALERT_TITLE} (Test)"
        if after is None:
            shown = self.alerts.cue(title, "Immediate test notification.", foreground=False)
            log.info(f"Sent test notification as {shown}")
        else:
            QTimer.singleShot(int(after * 1000), lambda: self.alerts.cue(
                title, f"Scheduled test notification in {after} seconds.", foreground=False))
            log.info(f"Scheduled test notification in {after}s")

    def _on_show_runtime_state(self):
        c = self.clock
        lines = [
            f"Timer type: {c.phase.value}",
            f"Is running: {str(c.running).lower()}",
            f"Time remaining: {format_time(c.remaining)}",
            f"Sessions completed: {c.completed_sessions}",
            f"Last active: {format_epoch(c.last_active_epoch)}",
            f"Pending notifications: {self.alerts.pending}",
            f"Work label: {c.config.work_label}",
            f"Break label: {c.config.break_label}",
            f"Work length: {format_duration(c.config.work_seconds)}",
            f"Break length: {format_duration(c.config.break_seconds)}",
        ]
        QMessageBox.information(self, "Runtime State", "\n".join(lines))

    # ------------------------------------------------------------------ #
    #  Window close                                                        #
    # ------------------------------------------------------------------ #

    # Closing counts as going to the background: the stamp lets the next launch replay the time we were gone.
    def closeEvent(self, event):
        try:
            self._timer.stop()
            self.reconciler.suspend()
        except OSError as e:
            QMessageBox.warning(self, "Save Error",
                                f"Failed to save state:\n{e}")
        self.tray.hide()
        event.accept()


# ---------------------------------------------------------------------------
# Entry point
# ---------------------------------------------------------------------------

def main():
    app = QApplication(sys.argv)
    app.setApplicationName("PomoFlash")
    window = MainWindow()
    window.show()
    sys.exit(app.exec())
