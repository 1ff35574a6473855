"""Classify a single document line into a parser event."""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Union

__all__ = [
    "QuestionStart",
    "OptionStart",
    "AnswerLine",
    "Continuation",
    "LineEvent",
    "classify_line",
]

_ANSWER_RE = re.compile(r"^Answer:\s*(.+)", re.IGNORECASE)
_QUESTION_RE = re.compile(r"^(\d+)[.)]\s+(.+)")
_OPTION_RE = re.compile(r"^(\*\s*)?([a-zA-Z])[.)]\s+(.+)")


@dataclass(frozen=True)
class QuestionStart:
    id: int
    text: str


@dataclass(frozen=True)
class OptionStart:
    label: str
    text: str
    forced_correct: bool = False


@dataclass(frozen=True)
class AnswerLine:
    raw_value: str


@dataclass(frozen=True)
class Continuation:
    text: str


LineEvent = Union[QuestionStart, OptionStart, AnswerLine, Continuation]


def classify_line(line: str) -> LineEvent:
    """Map one trimmed, non-empty line to exactly one event.

    Patterns are tried in a fixed order: ``Answer:`` lines, then numbered
    question starts, then lettered options. Anything else is continuation
    text. An option is marked correct by a ``*`` either before its label
    (``*b) Paris``) or leading its text (``b) *Paris``); the marker and the
    whitespace around it are stripped.
    """

    match = _ANSWER_RE.match(line)
    if match:
        return AnswerLine(match.group(1))

    match = _QUESTION_RE.match(line)
    if match:
        return QuestionStart(int(match.group(1)), match.group(2))

    match = _OPTION_RE.match(line)
    if match:
        text = match.group(3)
        forced = match.group(1) is not None or text.startswith("*")
        if text.startswith("*"):
            text = text[1:].strip()
        return OptionStart(match.group(2).lower(), text, forced)

    return Continuation(line)
