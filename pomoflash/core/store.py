"""Keeps the persisted state dict in step with a PhaseClock.

The clock is the only owner of its fields; the state file is a mirror that
is written after each mutation and read back only at cold start.
"""

from pomoflash.common.logger import log
from pomoflash.core import config
from pomoflash.core.durations import Phase
from pomoflash.core.phase_clock import PhaseClock
from pomoflash.core.reconciler import BackgroundReconciler


class ClockMirror:
    """Clock listener that writes the five clock fields plus durations and saves.

    Plain foreground ticks are not written: on disk, ``timeRemaining`` is
    always the value at ``lastActiveTime``, which is exactly what a
    reconcile after a crash needs.
    """

    skipped_events = frozenset({"tick"})

    def __init__(self, state):
        self.state = state
        self.writes = 0

    def attach(self, clock: PhaseClock):
        clock.add_listener(self)
        return self

    def __call__(self, clock, event):
        if event in self.skipped_events:
            return
        self.write(clock)
        config.save_state(self.state)
        self.writes += 1

    def write(self, clock: PhaseClock):
        config.store_config(self.state, clock.config)
        self.state["timeRemaining"] = float(clock.remaining)
        self.state["isRunning"] = clock.running
        self.state["timerType"] = clock.phase.value
        self.state["sessionsCompleted"] = clock.completed_sessions
        self.state["lastActiveTime"] = float(clock.last_active_epoch)


def restore_clock(state, alerts=None, now=None, **kwargs) -> PhaseClock:
    return PhaseClock(
        config=config.config_from_state(state),
        alerts=alerts,
        now=now,
        phase=Phase(state["timerType"]),
        remaining=state["timeRemaining"],
        running=state["isRunning"],
        completed_sessions=state["sessionsCompleted"],
        last_active_epoch=state["lastActiveTime"],
        **kwargs,
    )


# Cold start: read the state file, rebuild the clock from it, hook up the mirror, and replay whatever time passed
# while the app wasn't running. Returns (clock, reconciler, mirror).
def open_clock(alerts=None, now=None, **kwargs):
    state = config.load_state()
    clock = restore_clock(state, alerts=alerts, now=now, **kwargs)
    mirror = ClockMirror(state).attach(clock)
    reconciler = BackgroundReconciler(clock)
    result = reconciler.resume()
    log.info(f"Opened clock in {clock.phase.value} (running={clock.running}, sessions={clock.completed_sessions}) after replaying {result.elapsed:.1f}s")
    return clock, reconciler, mirror
