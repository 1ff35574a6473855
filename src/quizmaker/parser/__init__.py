"""Line-oriented parser turning extracted document text into questions."""

from __future__ import annotations

from .classifier import (
    AnswerLine,
    Continuation,
    LineEvent,
    OptionStart,
    QuestionStart,
    classify_line,
)
from .document import (
    ParseMode,
    ParserState,
    QuestionDraft,
    finalize,
    iter_lines,
    parse_document,
    parse_questions,
    step,
)

__all__ = [
    "AnswerLine",
    "Continuation",
    "LineEvent",
    "OptionStart",
    "QuestionStart",
    "classify_line",
    "ParseMode",
    "ParserState",
    "QuestionDraft",
    "finalize",
    "iter_lines",
    "parse_document",
    "parse_questions",
    "step",
]
