"""Phase enum and the configured work/break lengths. Pure data, no timing."""

from dataclasses import dataclass, replace
from enum import Enum
from pomoflash.util import if_empty


class Phase(Enum):
    WORK = "Work"
    BREAK = "Break"

    @property
    def other(self):
        return Phase.BREAK if self is Phase.WORK else Phase.WORK


DEFAULT_WORK_SECONDS = 25 * 60
DEFAULT_BREAK_SECONDS = 5 * 60
DEFAULT_WORK_LABEL = "Work"
DEFAULT_BREAK_LABEL = "Break"

# Quick-pick lengths offered by the settings dialog, as (label, seconds).
WORK_PRESETS = [("15:00", 15 * 60), ("25:00", 25 * 60), ("50:00", 50 * 60)]
BREAK_PRESETS = [("03:00", 3 * 60), ("05:00", 5 * 60), ("10:00", 10 * 60)]

# Upper bounds of the minute/second pickers, in whole minutes.
WORK_MAX_MINUTES = 120
BREAK_MAX_MINUTES = 60


def clamp_duration(seconds, max_minutes):
    """Clamp a picker value into 0..max_minutes:59."""
    return max(0, min(int(seconds), max_minutes * 60 + 59))


@dataclass(frozen=True)
class DurationConfig:
    """Configured phase lengths and display labels.

    Negative lengths are clamped to zero on construction; everything past
    that boundary can assume non-negative durations.
    """
    work_seconds: int = DEFAULT_WORK_SECONDS
    break_seconds: int = DEFAULT_BREAK_SECONDS
    work_label: str = DEFAULT_WORK_LABEL
    break_label: str = DEFAULT_BREAK_LABEL

    def __post_init__(self):
        object.__setattr__(self, "work_seconds", max(0, int(self.work_seconds)))
        object.__setattr__(self, "break_seconds", max(0, int(self.break_seconds)))

    def duration_for(self, phase: Phase) -> int:
        return self.work_seconds if phase is Phase.WORK else self.break_seconds

    def label_for(self, phase: Phase) -> str:
        if phase is Phase.WORK:
            return if_empty(self.work_label, DEFAULT_WORK_LABEL)
        return if_empty(self.break_label, DEFAULT_BREAK_LABEL)

    def with_changes(self, **changes) -> "DurationConfig":
        return replace(self, **changes)
