"""Session state and the events that move it between phases."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from types import MappingProxyType
from typing import Mapping, Optional, Union

from ..config import QuizConfiguration
from ..errors import QuizmakerError
from ..models import Question

__all__ = [
    "Phase",
    "SessionState",
    "initial_state",
    "Uploaded",
    "ConfigChanged",
    "Started",
    "Answered",
    "Navigated",
    "Tick",
    "Submitted",
    "Graded",
    "Reset",
    "SessionEvent",
    "freeze",
]


class Phase(Enum):
    UPLOAD = "upload"
    CONFIGURE = "config"
    PLAYING = "playing"
    RESULT = "result"


def freeze(values: Optional[Mapping] = None) -> Mapping:
    """Return a read-only copy of ``values``."""

    return MappingProxyType(dict(values or {}))


@dataclass(frozen=True)
class SessionState:
    """Everything a quiz session knows; replaced wholesale on each event."""

    phase: Phase = Phase.UPLOAD
    questions: tuple[Question, ...] = ()
    config: QuizConfiguration = field(default_factory=QuizConfiguration)
    current_index: int = 0
    answers: Mapping[int, str] = field(default_factory=freeze)
    self_grading: Mapping[int, bool] = field(default_factory=freeze)
    time_left: int = 0
    error: Optional[QuizmakerError] = None

    @property
    def current_question(self) -> Optional[Question]:
        if not self.questions:
            return None
        return self.questions[self.current_index]

    @property
    def is_first_question(self) -> bool:
        return self.current_index == 0

    @property
    def is_last_question(self) -> bool:
        return bool(self.questions) and (
            self.current_index == len(self.questions) - 1
        )

    def answer_for(self, question: Optional[Question] = None) -> Optional[str]:
        target = question or self.current_question
        if target is None:
            return None
        return self.answers.get(target.id)

    def answered_count(self) -> int:
        return sum(1 for question in self.questions if question.id in self.answers)


def initial_state(config: Optional[QuizConfiguration] = None) -> SessionState:
    """Fresh Upload-phase state keeping ``config``'s per-type settings."""

    base = config or QuizConfiguration()
    return SessionState(config=base.with_total_time(()))


@dataclass(frozen=True)
class Uploaded:
    """Text extraction finished: either ``text`` or a ``failure``."""

    text: Optional[str] = None
    failure: Optional[QuizmakerError] = None


@dataclass(frozen=True)
class ConfigChanged:
    name: str
    value: object


@dataclass(frozen=True)
class Started:
    pass


@dataclass(frozen=True)
class Answered:
    value: str


@dataclass(frozen=True)
class Navigated:
    step: int


@dataclass(frozen=True)
class Tick:
    pass


@dataclass(frozen=True)
class Submitted:
    pass


@dataclass(frozen=True)
class Graded:
    question_id: int
    is_correct: bool


@dataclass(frozen=True)
class Reset:
    pass


SessionEvent = Union[
    Uploaded,
    ConfigChanged,
    Started,
    Answered,
    Navigated,
    Tick,
    Submitted,
    Graded,
    Reset,
]
