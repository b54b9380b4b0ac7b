import time
from dataclasses import dataclass
from pomoflash.common.logger import log
from pomoflash.core.alerts import AlertUnavailable, NullAlertScheduler, completion_message
from pomoflash.core.durations import DurationConfig, Phase

# How many completions in a row may land on a zero-length phase before the chain is stopped. Only reachable when
# both durations are zero.
MAX_CHAIN = 16


# Read-only copy of the clock's five fields, handed to the UI and the store.
@dataclass(frozen=True)
class ClockSnapshot:
    phase: Phase
    remaining: float
    running: bool
    completed_sessions: int
    last_active_epoch: float


# This object is the work/break state machine. It owns phase, remaining, running, completed_sessions and
# last_active_epoch, and every change to them goes through the methods below. It never schedules its own ticks:
# whoever drives it calls tick(elapsed), and the reconciler replays time spent suspended.
class PhaseClock:

    def __init__(
            self,
            config: DurationConfig | None = None,
            alerts=None,
            now=None,
            max_chain: int = MAX_CHAIN,
            phase: Phase = Phase.WORK,
            remaining: float | None = None,
            running: bool = False,
            completed_sessions: int = 0,
            last_active_epoch: float = 0.0,
    ):
        self.config = config or DurationConfig()
        self.alerts = alerts or NullAlertScheduler()
        self._now = now or time.time
        self.max_chain = max(1, int(max_chain))

        self.phase = phase
        if remaining is None:
            remaining = self.config.duration_for(phase)
        self.remaining = max(0.0, float(remaining))
        self.running = bool(running)
        self.completed_sessions = max(0, int(completed_sessions))
        self.last_active_epoch = float(last_active_epoch)

        # False while the app is suspended; decides how the completion cue is delivered.
        self.foreground = True
        self._listeners = []

        log.debug(f"Initialized phase clock in {self.phase.value} with {self.remaining:.1f}s remaining, running={self.running}")

    #region === Observers ===

    # Listeners are called as fn(clock, event) after every mutation.
    def add_listener(self, fn):
        self._listeners.append(fn)

    def remove_listener(self, fn):
        if fn in self._listeners:
            self._listeners.remove(fn)

    def _emit(self, event):
        for fn in list(self._listeners):
            fn(self, event)

    def snapshot(self) -> ClockSnapshot:
        return ClockSnapshot(
            phase=self.phase,
            remaining=self.remaining,
            running=self.running,
            completed_sessions=self.completed_sessions,
            last_active_epoch=self.last_active_epoch,
        )

    def now(self) -> float:
        return self._now()

    def duration_for(self, phase: Phase) -> int:
        return self.config.duration_for(phase)

    @property
    def label(self) -> str:
        return self.config.label_for(self.phase)

    # Fraction of the current phase that has elapsed, 0..1.
    @property
    def progress(self) -> float:
        total = self.duration_for(self.phase)
        if total <= 0:
            return 1.0
        return min(1.0, max(0.0, 1.0 - self.remaining / total))

    #endregion === Observers ===

    #region === Commands ===

    def start(self):
        if self.running:
            return
        self.running = True
        self.last_active_epoch = self._now()
        log.debug(f"Started {self.phase.value} with {self.remaining:.1f}s remaining")
        if self.remaining <= 0:
            self.complete_phase()
            return
        self._arm_alert()
        self._emit("start")

    def pause(self):
        self._halt()
        log.debug(f"Paused {self.phase.value} with {self.remaining:.1f}s remaining")
        self._emit("pause")

    # Back to the full length of the current phase, paused. Phase and session count stay.
    def reset_phase(self):
        self._halt()
        self.remaining = float(self.duration_for(self.phase))
        log.debug(f"Reset {self.phase.value} to {self.remaining:.1f}s")
        self._emit("reset_phase")

    def reset_all(self):
        self._halt()
        self.phase = Phase.WORK
        self.remaining = float(self.duration_for(Phase.WORK))
        self.completed_sessions = 0
        self.last_active_epoch = 0.0
        log.info("Reset clock to a fresh Work phase")
        self._emit("reset_all")

    # Foreground countdown step. The overshoot past zero is dropped; the next phase starts at its full length. The
    # stamp moves with every tick (in memory only) so remaining and last_active_epoch always describe the same instant.
    def tick(self, elapsed: float):
        if not self.running or elapsed <= 0:
            return
        self.remaining -= elapsed
        self.last_active_epoch = self._now()
        if self.remaining <= 0:
            self.remaining = 0.0
            self.complete_phase()
        else:
            self._emit("tick")

    # Finishes the current phase and auto-starts the next one. With catch_up=True (reconciliation) the new phase's
    # length is added to the leftover negative remaining instead of replacing it, and no cue is fired. Zero-length
    # phases chain in a loop rather than through start(); the chain stops after max_chain consecutive zero-length
    # landings, leaving the clock paused. `now` is the instant the new phase starts at (the reconcile time during
    # catch-up). Returns the number of phase transitions made.
    def complete_phase(self, catch_up: bool = False, now: float | None = None) -> int:
        stamp = self._now() if now is None else now
        transitions = 0
        zero_run = 0
        while True:
            finished = self.phase
            self._cancel_alert()
            if not catch_up:
                title, body = completion_message(self.config, finished)
                self.alerts.cue(title, body, foreground=self.foreground)

            self.phase = finished.other
            if finished is Phase.WORK:
                self.completed_sessions += 1
            duration = self.duration_for(self.phase)
            if catch_up:
                self.remaining += duration
            else:
                self.remaining = float(duration)
            transitions += 1
            log.debug(f"Completed {finished.value}, now {self.phase.value} with {self.remaining:.1f}s (sessions={self.completed_sessions})")

            self.running = True
            self.last_active_epoch = stamp
            if self.remaining > 0:
                break

            zero_run = zero_run + 1 if duration == 0 else 0
            if zero_run >= self.max_chain:
                log.warning(f"Stopped phase chain after {zero_run} zero-length phases in a row, pausing the clock")
                self.running = False
                self.remaining = 0.0
                self._emit("complete")
                return transitions

        self._arm_alert()
        self._emit("complete")
        return transitions

    # Stamps the moment the app went to the background so a later reconcile knows how much time to replay.
    def suspend(self, now: float | None = None):
        self.last_active_epoch = self.now() if now is None else now
        self.foreground = False
        log.info(f"Suspended in {self.phase.value} with {self.remaining:.1f}s remaining, running={self.running}")
        self._emit("suspend")

    # Picks the countdown back up after a reconcile: re-stamps so the same interval can't be replayed twice, and
    # re-arms the alert for whatever phase we're in now.
    def resume_countdown(self, now: float | None = None):
        self.last_active_epoch = self.now() if now is None else now
        if self.running:
            self._arm_alert()
        self._emit("resume")

    def adjust_sessions(self, delta: int):
        self.completed_sessions = max(0, self.completed_sessions + int(delta))
        self._emit("sessions")

    def clear_sessions(self):
        self.completed_sessions = 0
        self._emit("sessions")

    # New durations never rescale a phase in progress, so swapping the config always resets everything.
    def apply_config(self, config: DurationConfig):
        self.config = config
        log.info(f"Applied durations work={config.work_seconds}s break={config.break_seconds}s")
        self._emit("config")
        self.reset_all()

    #endregion === Commands ===

    #region === Alerts ===

    def _halt(self):
        self.running = False
        self._cancel_alert()
        self.last_active_epoch = self._now()

    def _arm_alert(self):
        title, body = completion_message(self.config, self.phase)
        try:
            self.alerts.schedule(max(1.0, self.remaining), title, body)
        except AlertUnavailable as e:
            log.info(f"Could not schedule phase-complete alert ({e}), relying on the foreground countdown")

    def _cancel_alert(self):
        self.alerts.cancel_pending()

    #endregion === Alerts ===
