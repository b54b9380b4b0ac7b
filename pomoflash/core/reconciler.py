"""Replays wall-clock time spent suspended through a PhaseClock."""

from dataclasses import dataclass
from pomoflash.common.logger import log
from pomoflash.core.phase_clock import PhaseClock


@dataclass(frozen=True)
class ReconcileResult:
    elapsed: float = 0.0
    phases_completed: int = 0
    resumed: bool = False


NOTHING_TO_DO = ReconcileResult()


class BackgroundReconciler:
    """Makes the clock behave as if it had kept ticking while the app was away.

    ``resume()`` must run once per return to the foreground, after persisted
    state is loaded and before the UI starts its own tick loop. Each successful
    reconcile re-stamps ``last_active_epoch``, so replaying the same interval
    twice is a no-op rather than a double count.
    """

    def __init__(self, clock: PhaseClock):
        self.clock = clock

    # A second suspend without a resume in between first replays the time since the last stamp, so re-stamping
    # never throws that interval away.
    def suspend(self, now: float | None = None):
        if not self.clock.foreground:
            self.reconcile(now)
        self.clock.suspend(now)

    def resume(self, now: float | None = None) -> ReconcileResult:
        self.clock.foreground = True
        return self.reconcile(now)

    def reconcile(self, now_epoch: float | None = None) -> ReconcileResult:
        clock = self.clock
        if clock.last_active_epoch == 0 or not clock.running:
            return NOTHING_TO_DO

        now = clock.now() if now_epoch is None else now_epoch
        elapsed = now - clock.last_active_epoch
        if elapsed <= 0:
            return NOTHING_TO_DO

        # Step through phase boundaries one at a time; each catch-up completion adds the next phase's full length
        # to whatever is left over, so long absences walk through every phase in order.
        clock.remaining -= elapsed
        completed = 0
        while clock.remaining <= 0 and clock.running:
            completed += clock.complete_phase(catch_up=True, now=now)

        resumed = clock.running
        if resumed:
            clock.resume_countdown(now)
        log.info(f"Reconciled {elapsed:.1f}s in the background: {completed} phase(s) completed, now {clock.phase.value} with {clock.remaining:.1f}s remaining")
        return ReconcileResult(elapsed=elapsed, phases_completed=completed, resumed=resumed)
