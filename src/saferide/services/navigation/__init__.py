"""Navigation playback services."""

from .clock import IntervalClock
from .sessions import NavigationSession, NavigationSessionStore
from .simulator import ProgressSimulator, SimulatorStatus

__all__ = [
    "IntervalClock",
    "NavigationSession",
    "NavigationSessionStore",
    "ProgressSimulator",
    "SimulatorStatus",
]
