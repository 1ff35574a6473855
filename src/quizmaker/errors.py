"""Exception types surfaced by quizmaker."""

from __future__ import annotations

__all__ = [
    "QuizmakerError",
    "ExtractionFailure",
    "EmptyParseResult",
    "QuizConfigError",
]


class QuizmakerError(RuntimeError):
    """Base class for recoverable quizmaker failures."""


class ExtractionFailure(QuizmakerError):
    """Raised when a document's text could not be extracted."""


class EmptyParseResult(QuizmakerError):
    """Raised when a document yields no questions."""

    default_message = "No questions found. Check format: '1. Question text'"

    def __init__(self, message: str | None = None) -> None:
        super().__init__(message or self.default_message)


class QuizConfigError(QuizmakerError):
    """Raised when configuration parsing or validation fails."""
