from __future__ import annotations

import logging

import pytest

from quizmaker.errors import EmptyParseResult
from quizmaker.models import Option, QuestionType
from quizmaker.parser import (
    Continuation,
    OptionStart,
    ParseMode,
    ParserState,
    QuestionStart,
    finalize,
    iter_lines,
    parse_document,
    parse_questions,
    step,
)
from quizmaker.parser.document import QuestionDraft


class _ListHandler(logging.Handler):
    def __init__(self) -> None:
        super().__init__()
        self.records: list[logging.LogRecord] = []

    def emit(self, record: logging.LogRecord) -> None:
        self.records.append(record)


def _capture_logger(name: str) -> tuple[logging.Logger, _ListHandler]:
    logger = logging.getLogger(name)
    logger.setLevel(logging.DEBUG)
    logger.propagate = False
    handler = _ListHandler()
    logger.addHandler(handler)
    return logger, handler


def test_parse_sample_document(sample_text):
    questions = parse_questions(sample_text)

    assert [q.id for q in questions] == [1, 2, 3]
    first, second, third = questions

    assert first.type is QuestionType.MCQ
    assert first.options == (
        Option("a", "London"),
        Option("b", "Paris"),
        Option("c", "Berlin"),
    )
    assert first.correct_option == "b"

    assert second.type is QuestionType.SUBJECTIVE
    assert second.options == ()
    assert second.model_answer == "Plants convert light into chemical energy."

    assert third.type is QuestionType.MCQ
    assert third.correct_option == "c"
    assert third.model_answer == "c"


def test_mcq_with_star_marker():
    questions = parse_questions(
        "1. Capital of France?\na) London\n*b) Paris\nc) Berlin\nd) Rome"
    )

    assert len(questions) == 1
    question = questions[0]
    assert question.type is QuestionType.MCQ
    assert question.correct_option == "b"
    assert [option.label for option in question.options] == list("abcd")
    assert question.options[1] == Option("b", "Paris")
    assert question.options[3] == Option("d", "Rome")


def test_subjective_with_model_answer():
    questions = parse_questions("1. Explain gravity.\nAnswer: Mass attracts mass.")

    assert questions[0].type is QuestionType.SUBJECTIVE
    assert questions[0].model_answer == "Mass attracts mass."


def test_short_answer_sets_correct_option():
    questions = parse_questions("1. Q\na) x\nb) y\nAnswer: B")

    assert questions[0].correct_option == "b"
    assert questions[0].model_answer == "B"


def test_long_answer_keeps_starred_option():
    questions = parse_questions("1. Q\n*a) Paris\nb) Rome\nAnswer: Paris")

    assert questions[0].correct_option == "a"
    assert questions[0].model_answer == "Paris"


def test_short_non_letter_answer_keeps_prior_value():
    questions = parse_questions("1. Q\na) 42\nb) 7\nAnswer: 42")

    assert questions[0].correct_option is None


def test_short_answer_on_subjective_question_is_kept():
    questions = parse_questions("1. Is water wet?\nAnswer: yes")

    question = questions[0]
    assert question.type is QuestionType.SUBJECTIVE
    assert question.correct_option == "y"
    assert question.model_answer == "yes"


def test_later_star_overrides_earlier_correct_option():
    questions = parse_questions("1. Q\n*a) one\n*b) two")

    assert questions[0].correct_option == "b"


def test_continuation_lines_join_with_space():
    raw = "\n".join(
        [
            "1. A question that",
            "spans two lines",
            "a) An option that",
            "also wraps",
            "b) Short",
        ]
    )

    question = parse_questions(raw)[0]

    assert question.text == "A question that spans two lines"
    assert question.options[0].text == "An option that also wraps"
    assert question.options[1].text == "Short"


def test_out_of_place_lines_are_dropped():
    raw = "Intro text\na) stray option\nAnswer: stray\n1. Real question?"

    questions = parse_questions(raw)

    assert len(questions) == 1
    assert questions[0].text == "Real question?"
    assert questions[0].model_answer is None


def test_duplicate_ids_are_preserved():
    questions = parse_questions("1. First\n1. Second")

    assert [q.id for q in questions] == [1, 1]
    assert [q.text for q in questions] == ["First", "Second"]


def test_crlf_and_blank_lines():
    raw = "1. Q one\r\n\r\n   \r\na) yes\r\n*b) no\r\n"

    question = parse_questions(raw)[0]

    assert question.text == "Q one"
    assert question.options == (Option("a", "yes"), Option("b", "no"))


def test_iter_lines_trims_and_skips_empty():
    assert list(iter_lines("  a  \n\n\t\nb")) == ["a", "b"]


@pytest.mark.parametrize("raw", ["", "   \n\n", "just some notes\nno numbering"])
def test_empty_result_raises(raw):
    assert parse_questions(raw) == []
    with pytest.raises(EmptyParseResult) as excinfo:
        parse_document(raw)
    assert str(excinfo.value) == (
        "No questions found. Check format: '1. Question text'"
    )


def test_parse_document_logs_counts(sample_text):
    logger, handler = _capture_logger("quizmaker.tests.parser")

    questions = parse_document(sample_text, logger=logger)

    assert len(questions) == 3
    record = handler.records[-1]
    assert record.getMessage() == "Parsed document"
    assert record.mcq == 2
    assert record.subjective == 1
    logger.removeHandler(handler)


def test_step_is_pure_and_emits_finished_question():
    start = ParserState()

    state, finished = step(start, QuestionStart(1, "First"))
    assert finished is None
    assert start == ParserState()
    assert state.mode is ParseMode.IN_QUESTION

    state, finished = step(state, OptionStart("a", "yes"))
    assert state.mode is ParseMode.IN_OPTION

    after, finished = step(state, QuestionStart(2, "Second"))
    assert finished is not None
    assert finished.id == 1
    assert finished.options == (Option("a", "yes"),)
    assert after.draft.id == 2
    assert state.draft.id == 1


def test_step_ignores_continuation_without_draft():
    state = ParserState()

    new_state, finished = step(state, Continuation("noise"))

    assert new_state is state
    assert finished is None


def test_finalize_decides_type_from_options():
    assert finalize(QuestionDraft(id=1, text="q")).type is QuestionType.SUBJECTIVE
    draft = QuestionDraft(id=2, text="q", options=(Option("a", "x"),))
    assert finalize(draft).type is QuestionType.MCQ
