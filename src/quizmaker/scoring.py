"""Score a finished quiz.

Multiple-choice questions are correct when the captured answer equals the
designated option label exactly. Subjective questions are correct only when
the test-taker graded their own answer as correct; no grade counts as wrong.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Mapping, Sequence

from .config import QuizConfiguration
from .models import Question

__all__ = [
    "ScoreReport",
    "QuestionReview",
    "score",
    "review",
    "is_correct",
    "percentage",
]

EXCELLENT_THRESHOLD = 80
NEEDS_WORK_THRESHOLD = 50


@dataclass(frozen=True)
class ScoreReport:
    score: int
    correct_count: int
    max_score: int

    @property
    def percentage(self) -> int:
        return percentage(self.score, self.max_score)

    @property
    def feedback(self) -> str:
        """``excellent``, ``good`` or ``needs_work`` based on the percentage."""

        value = self.percentage
        if value >= EXCELLENT_THRESHOLD:
            return "excellent"
        if value < NEEDS_WORK_THRESHOLD:
            return "needs_work"
        return "good"


@dataclass(frozen=True)
class QuestionReview:
    """What a result screen shows for one question."""

    position: int
    question: Question
    answer: str | None
    is_correct: bool
    self_grade: bool | None = None


def is_correct(
    question: Question,
    answers: Mapping[int, str],
    self_grading: Mapping[int, bool],
) -> bool:
    if question.is_mcq:
        answer = answers.get(question.id)
        return answer is not None and answer == question.correct_option
    return self_grading.get(question.id) is True


def score(
    questions: Sequence[Question],
    config: QuizConfiguration,
    answers: Mapping[int, str],
    self_grading: Mapping[int, bool],
) -> ScoreReport:
    """Total the points for ``questions``.

    ``max_score`` only depends on the questions and the configured marks.
    """

    total = 0
    correct_count = 0
    max_score = 0
    for question in questions:
        points = config.marks_for(question)
        max_score += points
        if is_correct(question, answers, self_grading):
            total += points
            correct_count += 1
    return ScoreReport(
        score=total, correct_count=correct_count, max_score=max_score
    )


def review(
    questions: Sequence[Question],
    answers: Mapping[int, str],
    self_grading: Mapping[int, bool],
) -> list[QuestionReview]:
    return [
        QuestionReview(
            position=position,
            question=question,
            answer=answers.get(question.id),
            is_correct=is_correct(question, answers, self_grading),
            self_grade=None if question.is_mcq else self_grading.get(question.id),
        )
        for position, question in enumerate(questions, start=1)
    ]


def percentage(points: int, max_score: int) -> int:
    """Whole-number percentage, rounding halves up; ``0`` for no max score."""

    if max_score <= 0:
        return 0
    return (200 * points + max_score) // (2 * max_score)
