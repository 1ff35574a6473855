"""Quiz session engine: phases, events, reducer, timer and controller."""

from __future__ import annotations

from .controller import Listener, QuizSession
from .engine import advance
from .state import (
    Answered,
    ConfigChanged,
    Graded,
    Navigated,
    Phase,
    Reset,
    SessionEvent,
    SessionState,
    Started,
    Submitted,
    Tick,
    Uploaded,
    initial_state,
)
from .timer import (
    CountdownTimer,
    ManualScheduler,
    Scheduler,
    TimerHandle,
    asyncio_scheduler,
)

__all__ = [
    "Listener",
    "QuizSession",
    "advance",
    "Answered",
    "ConfigChanged",
    "Graded",
    "Navigated",
    "Phase",
    "Reset",
    "SessionEvent",
    "SessionState",
    "Started",
    "Submitted",
    "Tick",
    "Uploaded",
    "initial_state",
    "CountdownTimer",
    "ManualScheduler",
    "Scheduler",
    "TimerHandle",
    "asyncio_scheduler",
]
