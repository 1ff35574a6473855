"""Stateful wrapper that front-ends drive.

:class:`QuizSession` feeds events through :func:`advance`, keeps the latest
:class:`SessionState`, tells subscribers about every change and owns the one
countdown timer. The timer is started whenever the session enters the
Playing phase and cancelled whenever it leaves it, whatever the cause.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Callable, Optional

from ..config import QuizConfiguration
from ..errors import ExtractionFailure
from ..extract import ExtractionDependencies, extract_text
from ..scoring import QuestionReview, ScoreReport, review, score
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
from .timer import CountdownTimer, ManualScheduler, Scheduler

__all__ = ["QuizSession", "Listener"]

Listener = Callable[[SessionState], None]


class QuizSession:
    def __init__(
        self,
        config: Optional[QuizConfiguration] = None,
        *,
        scheduler: Optional[Scheduler] = None,
        logger: Optional[logging.Logger] = None,
        extraction: Optional[ExtractionDependencies] = None,
    ) -> None:
        self._state = initial_state(config)
        self._logger = logger or logging.getLogger("quizmaker.session")
        self._extraction = extraction
        self._timer = CountdownTimer(
            scheduler if scheduler is not None else ManualScheduler(),
            self._on_tick,
        )
        self._listeners: list[Listener] = []

    @property
    def state(self) -> SessionState:
        return self._state

    @property
    def timer_active(self) -> bool:
        return self._timer.active

    def subscribe(self, listener: Listener) -> None:
        self._listeners.append(listener)

    def dispatch(self, event: SessionEvent) -> SessionState:
        previous = self._state
        current = advance(previous, event)
        if current is previous:
            self._logger.debug(
                "Ignored session event",
                extra={"event": type(event).__name__, "phase": previous.phase.value},
            )
            return current
        self._state = current
        self._sync_timer(previous.phase, current.phase)
        if current.phase is not previous.phase:
            self._logger.info(
                "Session phase changed",
                extra={
                    "event": type(event).__name__,
                    "from": previous.phase.value,
                    "to": current.phase.value,
                    "time_left": current.time_left,
                },
            )
        if current.error is not None and current.error is not previous.error:
            self._logger.warning(
                "Upload rejected",
                extra={
                    "error": type(current.error).__name__,
                    "reason": str(current.error),
                },
            )
        for listener in list(self._listeners):
            listener(current)
        return current

    # Upload

    def upload_text(self, text: str) -> SessionState:
        return self.dispatch(Uploaded(text=text))

    def upload_file(self, path: Path) -> SessionState:
        """Extract ``path`` and feed the result in; failures stay in Upload."""

        try:
            text = extract_text(path, dependencies=self._extraction)
        except ExtractionFailure as exc:
            return self.dispatch(Uploaded(failure=exc))
        return self.dispatch(Uploaded(text=text))

    # Configure

    def update_config(self, name: str, value: object) -> SessionState:
        return self.dispatch(ConfigChanged(name, value))

    def start(self) -> SessionState:
        return self.dispatch(Started())

    # Playing

    def handle_answer_change(self, value: str) -> SessionState:
        return self.dispatch(Answered(value))

    def next(self) -> SessionState:
        return self.dispatch(Navigated(1))

    def previous(self) -> SessionState:
        return self.dispatch(Navigated(-1))

    def submit(self) -> SessionState:
        return self.dispatch(Submitted())

    def tick(self) -> SessionState:
        return self.dispatch(Tick())

    # Result

    def toggle_self_grading(self, question_id: int, is_correct: bool) -> SessionState:
        return self.dispatch(Graded(question_id, is_correct))

    def report(self) -> ScoreReport:
        state = self._state
        return score(
            state.questions, state.config, state.answers, state.self_grading
        )

    def review(self) -> list[QuestionReview]:
        state = self._state
        return review(state.questions, state.answers, state.self_grading)

    def reset(self) -> SessionState:
        return self.dispatch(Reset())

    def close(self) -> None:
        self._timer.cancel()

    def _on_tick(self) -> None:
        self.tick()

    def _sync_timer(self, before: Phase, after: Phase) -> None:
        if after is Phase.PLAYING and before is not Phase.PLAYING:
            self._timer.start()
        elif before is Phase.PLAYING and after is not Phase.PLAYING:
            self._timer.cancel()
