"""PomoFlash: Pomodoro work/break timer with background resynchronization."""

__version__ = "1.0.0"
