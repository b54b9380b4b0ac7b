"""Alert scheduler interface used by the phase clock.

The clock only ever schedules and cancels; delivery belongs to whatever
implementation is plugged in (see ``pomoflash.ui.alerts`` for the Qt one).
"""

from abc import ABC, abstractmethod
from pomoflash.common.logger import log
from pomoflash.core.durations import DurationConfig, Phase

ALERT_ID = "pomodoroPhaseComplete"
ALERT_TITLE = "Pomodoro Timer"


class AlertUnavailable(Exception):
    """Notifications can't be delivered here (no permission, no tray, ...)."""


# Builds the (title, body) pair announcing the end of `phase`.
def completion_message(config: DurationConfig, phase: Phase):
    work = config.label_for(Phase.WORK)
    brk = config.label_for(Phase.BREAK)
    if phase is Phase.WORK:
        body = f"{work} session complete! Time for {brk.lower()}."
    else:
        body = f"{brk} over! Ready for {work.lower()}?"
    return ALERT_TITLE, body


class AlertScheduler(ABC):
    """Base collaborator. Subclasses implement the four delivery primitives."""

    alert_id = ALERT_ID

    # Arms the one pending alert, replacing any earlier one. May raise AlertUnavailable.
    @abstractmethod
    def schedule(self, after_seconds: float, title: str, body: str) -> None:
        ...

    @abstractmethod
    def cancel_pending(self) -> None:
        ...

    # Shows a notification right away. May raise AlertUnavailable.
    @abstractmethod
    def deliver_now(self, title: str, body: str) -> None:
        ...

    # Local audible/haptic cue, always available.
    @abstractmethod
    def feedback(self) -> None:
        ...

    @property
    def pending(self) -> int:
        return 0

    # Fires the phase-complete cue. In the foreground the local cue is enough; in the background we try a real
    # notification and fall back to the local cue if that's not possible. Returns which one went out.
    def cue(self, title: str, body: str, foreground: bool = True) -> str:
        if foreground:
            self.feedback()
            return "feedback"
        try:
            self.deliver_now(title, body)
            return "notification"
        except AlertUnavailable:
            log.info(f"Notification unavailable for '{title}', falling back to local feedback cue")
            self.feedback()
            return "feedback"


# Scheduler for headless use: nothing is ever delivered, every cue ends up as a (silent) feedback call.
class NullAlertScheduler(AlertScheduler):

    def schedule(self, after_seconds, title, body):
        raise AlertUnavailable("No alert delivery configured")

    def cancel_pending(self):
        pass

    def deliver_now(self, title, body):
        raise AlertUnavailable("No alert delivery configured")

    def feedback(self):
        pass
