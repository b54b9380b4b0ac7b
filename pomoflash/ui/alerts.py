"""Qt-backed alert scheduler: a single-shot QTimer that pops a tray message."""

from PySide6.QtCore import Qt, QTimer
from PySide6.QtGui import QGuiApplication
from PySide6.QtWidgets import QApplication, QSystemTrayIcon
from pomoflash.common.logger import log
from pomoflash.core.alerts import AlertScheduler, AlertUnavailable


# Holds at most one pending phase-complete alert. Tray messages are the "notification"; QApplication.beep() is the
# local feedback cue used whenever the tray isn't there. The QTimer is owned by `parent` (the main window) so it
# lives and dies with the UI.
class QtAlertScheduler(AlertScheduler):

    def __init__(self, tray: QSystemTrayIcon | None = None, parent=None):
        self.tray = tray
        self._pending = None  # (title, body) of the armed alert

        self._timer = QTimer(parent)
        self._timer.setSingleShot(True)
        self._timer.timeout.connect(self._on_timeout)

    @property
    def available(self):
        return self.tray is not None and QSystemTrayIcon.isSystemTrayAvailable() and self.tray.isVisible()

    @property
    def pending(self):
        return 1 if self._pending is not None else 0

    def schedule(self, after_seconds, title, body):
        self.cancel_pending()
        if not self.available:
            raise AlertUnavailable("System tray is not available")
        self._pending = (title, body)
        self._timer.start(int(max(0.0, after_seconds) * 1000))
        log.debug(f"Armed '{self.alert_id}' to fire in {after_seconds:.1f}s")

    def cancel_pending(self):
        if self._pending is not None:
            log.debug(f"Cancelled pending '{self.alert_id}'")
        self._timer.stop()
        self._pending = None

    def deliver_now(self, title, body):
        if not self.available:
            raise AlertUnavailable("System tray is not available")
        self.tray.showMessage(title, body, QSystemTrayIcon.MessageIcon.Information)

    def feedback(self):
        QApplication.beep()

    # While the window is active the foreground tick fires its own cue at the same boundary, so the scheduled
    # message only goes out when the app is in the background.
    def _on_timeout(self):
        pending, self._pending = self._pending, None
        if pending is None:
            return
        if QGuiApplication.applicationState() == Qt.ApplicationState.ApplicationActive:
            log.debug(f"Dropped '{self.alert_id}', application is active")
            return
        title, body = pending
        try:
            self.deliver_now(title, body)
        except AlertUnavailable:
            self.feedback()
