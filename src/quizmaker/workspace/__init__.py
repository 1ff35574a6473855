"""Command-line helpers for the quizmaker workspace."""
