"""Question records produced by the document parser."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Sequence


class QuestionType(Enum):
    """How a question is answered and scored."""

    MCQ = "mcq"
    SUBJECTIVE = "subjective"


@dataclass(frozen=True)
class Option:
    """One labelled choice of a multiple-choice question."""

    label: str
    text: str


@dataclass(frozen=True)
class Question:
    """A finalized question.

    ``id`` comes straight from the document and is not guaranteed to be
    unique. ``type`` is fixed at finalization: a question with no options is
    subjective, anything else is multiple choice.
    """

    id: int
    text: str
    type: QuestionType
    options: tuple[Option, ...] = field(default_factory=tuple)
    correct_option: str | None = None
    model_answer: str | None = None

    @property
    def is_mcq(self) -> bool:
        return self.type is QuestionType.MCQ

    def option_for(self, label: str | None) -> Option | None:
        if not label:
            return None
        for option in self.options:
            if option.label == label:
                return option
        return None

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "text": self.text,
            "type": self.type.value,
            "options": [
                {"label": option.label, "text": option.text}
                for option in self.options
            ],
            "correct_option": self.correct_option,
            "model_answer": self.model_answer,
        }


def count_by_type(questions: Sequence[Question]) -> dict[QuestionType, int]:
    """Return how many questions of each type ``questions`` holds."""

    counts = {kind: 0 for kind in QuestionType}
    for question in questions:
        counts[question.type] += 1
    return counts
