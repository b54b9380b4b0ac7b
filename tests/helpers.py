"""Shared fakes for the clock tests: a controllable wall clock and a recording alert scheduler."""

from pomoflash.core.alerts import AlertScheduler, AlertUnavailable


class FakeTime:
    def __init__(self, t=1_700_000_000.0):
        self.t = t

    def __call__(self):
        return self.t

    def advance(self, seconds):
        self.t += seconds
        return self.t


class RecordingAlerts(AlertScheduler):
    def __init__(self, permitted=True):
        self.permitted = permitted
        self.armed = None
        self.scheduled = []
        self.cancels = 0
        self.delivered = []
        self.feedbacks = 0

    def schedule(self, after_seconds, title, body):
        self.cancel_pending()
        if not self.permitted:
            raise AlertUnavailable("denied")
        self.armed = (after_seconds, title, body)
        self.scheduled.append(self.armed)

    def cancel_pending(self):
        self.cancels += 1
        self.armed = None

    def deliver_now(self, title, body):
        if not self.permitted:
            raise AlertUnavailable("denied")
        self.delivered.append((title, body))

    def feedback(self):
        self.feedbacks += 1

    @property
    def pending(self):
        return 1 if self.armed is not None else 0
