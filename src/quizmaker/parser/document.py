"""Fold classified document lines into question records.

The parser is a small finite-state machine. :func:`step` is a pure reducer
taking the current :class:`ParserState` and one line event and returning the
next state plus, when a new question starts, the question that was just
finished. :func:`parse_questions` drives it over a whole document.

Out-of-place lines (an option or answer before any question, continuation
text before the first question) are dropped without error.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, replace
from enum import Enum
from typing import Iterable, Iterator

from ..errors import EmptyParseResult
from ..models import Option, Question, QuestionType
from .classifier import (
    AnswerLine,
    Continuation,
    LineEvent,
    OptionStart,
    QuestionStart,
    classify_line,
)

__all__ = [
    "ParseMode",
    "QuestionDraft",
    "ParserState",
    "step",
    "finalize",
    "iter_lines",
    "parse_questions",
    "parse_document",
]

_LOGGER = logging.getLogger("quizmaker.parser")

# Answer values shorter than this are read as an option label ("Answer: b").
SHORT_ANSWER_LIMIT = 5


class ParseMode(Enum):
    """Which field continuation text is appended to."""

    NONE = "none"
    IN_QUESTION = "question"
    IN_OPTION = "option"
    IN_ANSWER = "answer"


@dataclass(frozen=True)
class QuestionDraft:
    """A question whose lines are still being collected."""

    id: int
    text: str
    options: tuple[Option, ...] = ()
    correct_option: str | None = None
    model_answer: str | None = None


@dataclass(frozen=True)
class ParserState:
    mode: ParseMode = ParseMode.NONE
    draft: QuestionDraft | None = None


def step(
    state: ParserState, event: LineEvent
) -> tuple[ParserState, Question | None]:
    """Apply one line event; return the new state and any finished question."""

    draft = state.draft

    if isinstance(event, AnswerLine):
        if draft is None:
            return state, None
        draft = replace(
            draft,
            model_answer=event.raw_value,
            correct_option=_short_answer_label(event.raw_value)
            or draft.correct_option,
        )
        return ParserState(ParseMode.IN_ANSWER, draft), None

    if isinstance(event, QuestionStart):
        finished = finalize(draft) if draft is not None else None
        return (
            ParserState(
                ParseMode.IN_QUESTION,
                QuestionDraft(id=event.id, text=event.text),
            ),
            finished,
        )

    if isinstance(event, OptionStart):
        if draft is None:
            return state, None
        draft = replace(
            draft,
            options=draft.options + (Option(event.label, event.text),),
            correct_option=event.label
            if event.forced_correct
            else draft.correct_option,
        )
        return ParserState(ParseMode.IN_OPTION, draft), None

    if isinstance(event, Continuation):
        if draft is None:
            return state, None
        return ParserState(state.mode, _append(draft, state.mode, event.text)), None

    raise TypeError(f"Unsupported line event: {event!r}")


def finalize(draft: QuestionDraft) -> Question:
    """Freeze ``draft``; the type is decided here and never again."""

    kind = QuestionType.MCQ if draft.options else QuestionType.SUBJECTIVE
    return Question(
        id=draft.id,
        text=draft.text,
        type=kind,
        options=draft.options,
        correct_option=draft.correct_option,
        model_answer=draft.model_answer,
    )


def iter_lines(raw_text: str) -> Iterator[str]:
    """Yield the trimmed, non-empty lines of ``raw_text``."""

    for line in raw_text.split("\n"):
        stripped = line.strip()
        if stripped:
            yield stripped


def parse_questions(raw_text: str) -> list[Question]:
    """Parse ``raw_text`` into questions in document order (may be empty)."""

    return list(_fold(classify_line(line) for line in iter_lines(raw_text)))


def parse_document(
    raw_text: str, *, logger: logging.Logger | None = None
) -> list[Question]:
    """Parse ``raw_text`` and raise :class:`EmptyParseResult` if it is empty."""

    log = logger or _LOGGER
    questions = parse_questions(raw_text)
    if not questions:
        log.warning(
            "Document produced no questions",
            extra={"characters": len(raw_text)},
        )
        raise EmptyParseResult()
    mcq = sum(1 for question in questions if question.is_mcq)
    log.info(
        "Parsed document",
        extra={
            "questions": len(questions),
            "mcq": mcq,
            "subjective": len(questions) - mcq,
        },
    )
    return questions


def _fold(events: Iterable[LineEvent]) -> Iterator[Question]:
    state = ParserState()
    for event in events:
        state, finished = step(state, event)
        if finished is not None:
            yield finished
    if state.draft is not None:
        yield finalize(state.draft)


def _short_answer_label(raw_value: str) -> str | None:
    value = raw_value.strip()
    if not value or len(value) >= SHORT_ANSWER_LIMIT:
        return None
    first = value[0].lower()
    if "a" <= first <= "z":
        return first
    return None


def _append(draft: QuestionDraft, mode: ParseMode, text: str) -> QuestionDraft:
    if mode is ParseMode.IN_QUESTION:
        return replace(draft, text=f"{draft.text} {text}")
    if mode is ParseMode.IN_OPTION and draft.options:
        *head, last = draft.options
        return replace(
            draft,
            options=(*head, Option(last.label, f"{last.text} {text}")),
        )
    if mode is ParseMode.IN_ANSWER:
        return replace(draft, model_answer=f"{draft.model_answer} {text}")
    return draft
