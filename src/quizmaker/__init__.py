"""Turn a formatted question document into a timed, scored quiz."""

from .config import (
    ConfigOverrides,
    QuizConfiguration,
    compute_total_time,
    load_config,
)
from .errors import (
    EmptyParseResult,
    ExtractionFailure,
    QuizConfigError,
    QuizmakerError,
)
from .extract import ExtractionDependencies, extract_text
from .models import Option, Question, QuestionType
from .parser import parse_document, parse_questions
from .scoring import ScoreReport, score
from .session import Phase, QuizSession, SessionState, advance, initial_state

__all__ = [
    "ConfigOverrides",
    "QuizConfiguration",
    "compute_total_time",
    "load_config",
    "EmptyParseResult",
    "ExtractionFailure",
    "QuizConfigError",
    "QuizmakerError",
    "ExtractionDependencies",
    "extract_text",
    "Option",
    "Question",
    "QuestionType",
    "parse_document",
    "parse_questions",
    "ScoreReport",
    "score",
    "Phase",
    "QuizSession",
    "SessionState",
    "advance",
    "initial_state",
]
