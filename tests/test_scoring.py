from __future__ import annotations

import pytest

from quizmaker.config import QuizConfiguration
from quizmaker.parser import parse_questions
from quizmaker.scoring import ScoreReport, percentage, review, score


@pytest.fixture
def questions(sample_text):
    return parse_questions(sample_text)


def test_perfect_score(questions):
    report = score(
        questions,
        QuizConfiguration(),
        answers={1: "b", 2: "anything", 3: "c"},
        self_grading={2: True},
    )

    assert report == ScoreReport(score=14, correct_count=3, max_score=14)
    assert report.percentage == 100
    assert report.feedback == "excellent"


def test_unanswered_and_ungraded_count_as_wrong(questions):
    report = score(questions, QuizConfiguration(), answers={}, self_grading={})

    assert report.score == 0
    assert report.correct_count == 0
    assert report.max_score == 14
    assert report.feedback == "needs_work"


def test_mcq_match_is_exact(questions):
    report = score(
        questions,
        QuizConfiguration(),
        answers={1: "B", 3: "c"},
        self_grading={2: False},
    )

    assert report.score == 2
    assert report.correct_count == 1


def test_max_score_independent_of_answers(questions):
    config = QuizConfiguration(mcq_marks=1, subjective_marks=5)
    empty = score(questions, config, {}, {})
    full = score(questions, config, {1: "b", 3: "c"}, {2: True})

    assert empty.max_score == full.max_score == 7


def test_score_is_deterministic(questions):
    args = (questions, QuizConfiguration(), {1: "a", 3: "c"}, {2: True})

    assert score(*args) == score(*args)


@pytest.mark.parametrize(
    "points, max_score, expected",
    [(0, 0, 0), (1, 3, 33), (2, 3, 67), (1, 8, 13), (7, 14, 50), (14, 14, 100)],
)
def test_percentage_rounds_half_up(points, max_score, expected):
    assert percentage(points, max_score) == expected


def test_feedback_band_for_middle_scores():
    assert ScoreReport(score=6, correct_count=2, max_score=10).feedback == "good"
    assert ScoreReport(score=8, correct_count=2, max_score=10).feedback == "excellent"
    assert (
        ScoreReport(score=4, correct_count=1, max_score=10).feedback
        == "needs_work"
    )


def test_review_marks_each_question(questions):
    items = review(questions, answers={1: "a", 2: "text"}, self_grading={2: True})

    assert [item.position for item in items] == [1, 2, 3]
    assert [item.is_correct for item in items] == [False, True, False]
    assert items[0].self_grade is None
    assert items[1].self_grade is True
    assert items[2].answer is None
