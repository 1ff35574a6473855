"""Pure phase reducer for a quiz session.

``advance(state, event)`` returns the next :class:`SessionState`. It never
mutates its input, never raises for upload problems (the error is recorded on
the returned state) and returns ``state`` itself for events that do not apply
to the current phase. The countdown timer lives outside, in
:class:`~quizmaker.session.controller.QuizSession`.
"""

from __future__ import annotations

from dataclasses import replace

from ..errors import EmptyParseResult, ExtractionFailure
from ..parser import parse_questions
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
    freeze,
    initial_state,
)

__all__ = ["advance"]


def advance(state: SessionState, event: SessionEvent) -> SessionState:
    if isinstance(event, Reset):
        return initial_state(state.config)
    if state.phase is Phase.UPLOAD:
        return _on_upload(state, event)
    if state.phase is Phase.CONFIGURE:
        return _on_configure(state, event)
    if state.phase is Phase.PLAYING:
        return _on_playing(state, event)
    return _on_result(state, event)


def _on_upload(state: SessionState, event: SessionEvent) -> SessionState:
    if not isinstance(event, Uploaded):
        return state
    if event.failure is not None or event.text is None:
        failure = event.failure or ExtractionFailure("No document text received.")
        return replace(state, error=failure)
    questions = tuple(parse_questions(event.text))
    if not questions:
        return replace(state, error=EmptyParseResult())
    return replace(
        state,
        phase=Phase.CONFIGURE,
        questions=questions,
        config=state.config.with_total_time(questions),
        current_index=0,
        error=None,
    )


def _on_configure(state: SessionState, event: SessionEvent) -> SessionState:
    if isinstance(event, ConfigChanged):
        return replace(
            state,
            config=state.config.update(
                state.questions, **{event.name: event.value}
            ),
        )
    if isinstance(event, Started):
        return replace(
            state,
            phase=Phase.PLAYING,
            time_left=state.config.total_time,
            current_index=0,
            answers=freeze(),
            self_grading=freeze(),
        )
    return state


def _on_playing(state: SessionState, event: SessionEvent) -> SessionState:
    if isinstance(event, Answered):
        question = state.current_question
        if question is None:
            return state
        answers = dict(state.answers)
        answers[question.id] = event.value
        return replace(state, answers=freeze(answers))
    if isinstance(event, Navigated):
        last = len(state.questions) - 1
        index = min(max(state.current_index + event.step, 0), last)
        if index == state.current_index:
            return state
        return replace(state, current_index=index)
    if isinstance(event, Submitted):
        if not state.is_last_question:
            return state
        return replace(state, phase=Phase.RESULT)
    if isinstance(event, Tick):
        if state.time_left <= 1:
            return replace(state, time_left=0, phase=Phase.RESULT)
        return replace(state, time_left=state.time_left - 1)
    return state


def _on_result(state: SessionState, event: SessionEvent) -> SessionState:
    if not isinstance(event, Graded):
        return state
    subjective = any(
        question.id == event.question_id and not question.is_mcq
        for question in state.questions
    )
    if not subjective:
        return state
    grading = dict(state.self_grading)
    grading[event.question_id] = bool(event.is_correct)
    return replace(state, self_grading=freeze(grading))
