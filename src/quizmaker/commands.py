"""Argument parsing and handlers for the document-driven commands.

``inspect`` previews what the parser found in a document, ``play`` runs a
Rich console quiz and ``tui`` hosts the same session in the Textual app.
"""

from __future__ import annotations

import argparse
import logging
import time
from pathlib import Path
from typing import Callable, Optional, Sequence

from rich.console import Console
from rich.text import Text

from .config import ConfigOverrides, LoadResult, load_config
from .console import (
    InputProvider,
    configure_console_session,
    render_question_table,
    run_console_session,
)
from .core import configure_logger
from .core.workspace import WorkspaceError
from .errors import QuizmakerError
from .extract import extract_text
from .parser import parse_document
from .session import ManualScheduler, QuizSession

__all__ = [
    "build_arg_parser",
    "inspect_main",
    "play_main",
    "tui_main",
]

_LOGGER_NAME = "quizmaker"


def _non_negative(raw: str) -> int:
    try:
        value = int(raw)
    except ValueError as exc:
        raise argparse.ArgumentTypeError(f"expected an integer, got '{raw}'") from exc
    if value < 0:
        raise argparse.ArgumentTypeError("must not be negative")
    return value


def build_arg_parser(prog: str, *, description: str) -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog=prog, description=description)
    parser.add_argument("file", type=Path, help="Quiz document (.docx, .txt, .md).")
    timing = parser.add_argument_group("quiz settings")
    timing.add_argument("--mcq-time", type=_non_negative, help="Seconds per MCQ.")
    timing.add_argument("--mcq-marks", type=_non_negative, help="Marks per MCQ.")
    timing.add_argument(
        "--subjective-time",
        type=_non_negative,
        help="Seconds per subjective question.",
    )
    timing.add_argument(
        "--subjective-marks",
        type=_non_negative,
        help="Marks per subjective question.",
    )
    parser.add_argument(
        "--config",
        type=Path,
        help="Path to quizmaker.toml (defaults to the workspace config).",
    )
    parser.add_argument(
        "--workspace",
        type=Path,
        help="Override the workspace root.",
    )
    parser.add_argument("--log-level", help="File log level (e.g. DEBUG, INFO).")
    parser.add_argument(
        "--verbose",
        action="store_true",
        help="Echo logs to stderr and record DEBUG entries.",
    )
    return parser


def _overrides_from(args: argparse.Namespace) -> ConfigOverrides:
    return ConfigOverrides(
        mcq_time=args.mcq_time,
        mcq_marks=args.mcq_marks,
        subjective_time=args.subjective_time,
        subjective_marks=args.subjective_marks,
        log_level=args.log_level,
    )


def _prepare(
    args: argparse.Namespace,
) -> tuple[LoadResult, logging.Logger]:
    loaded = load_config(
        config_path=args.config,
        overrides=_overrides_from(args),
        workspace_path=args.workspace,
    )
    logger, _ = configure_logger(
        _LOGGER_NAME,
        log_dir=loaded.layout.logs_dir,
        level=loaded.log_level,
        verbose=args.verbose,
    )
    return loaded, logger


def _report_error(exc: Exception) -> int:
    Console(stderr=True).print(Text(f"Error: {exc}", style="bold red"))
    return 1


def inspect_main(
    argv: Sequence[str],
    *,
    console: Optional[Console] = None,
) -> int:
    parser = build_arg_parser(
        "quizmaker inspect",
        description="Parse a quiz document and list the questions found.",
    )
    parser.add_argument(
        "--json",
        action="store_true",
        help="Print the parsed questions as JSON instead of a table.",
    )
    args = parser.parse_args(list(argv))
    out = console or Console()
    try:
        loaded, logger = _prepare(args)
        questions = parse_document(extract_text(args.file), logger=logger)
    except (QuizmakerError, WorkspaceError) as exc:
        return _report_error(exc)
    if args.json:
        out.print_json(data=[question.to_dict() for question in questions])
        return 0
    render_question_table(out, questions, loaded.config)
    return 0


def play_main(
    argv: Sequence[str],
    *,
    console: Optional[Console] = None,
    input_provider: Optional[InputProvider] = None,
    clock: Callable[[], float] = time.monotonic,
) -> int:
    parser = build_arg_parser(
        "quizmaker play",
        description="Take a timed quiz in the terminal.",
    )
    parser.add_argument(
        "--configure",
        action="store_true",
        help="Review and edit time and marks before the quiz starts.",
    )
    args = parser.parse_args(list(argv))
    out = console or Console()
    try:
        loaded, logger = _prepare(args)
    except (QuizmakerError, WorkspaceError) as exc:
        return _report_error(exc)

    scheduler = ManualScheduler()
    session = QuizSession(
        loaded.config,
        scheduler=scheduler,
        logger=logger.getChild("session"),
    )
    state = session.upload_file(args.file)
    if state.error is not None:
        return _report_error(state.error)

    render_question_table(out, state.questions, state.config)
    provider = input_provider or (lambda: out.input("> "))
    if args.configure and not configure_console_session(
        session, out, provider
    ):
        logger.info("Quiz abandoned during configuration")
        return 0
    result = run_console_session(session, scheduler, out, provider, clock=clock)
    logger.info(
        "Quiz finished",
        extra={
            "exit_action": result.exit_action,
            "score": result.report.score,
            "max_score": result.report.max_score,
        },
    )
    return 0


def tui_main(argv: Sequence[str]) -> int:
    parser = build_arg_parser(
        "quizmaker tui",
        description="Take a timed quiz in the Textual interface.",
    )
    args = parser.parse_args(list(argv))
    try:
        loaded, logger = _prepare(args)
        text = extract_text(args.file)
    except (QuizmakerError, WorkspaceError) as exc:
        return _report_error(exc)

    from .tui import QuizApp

    app = QuizApp(text, loaded.config, logger=logger.getChild("session"))
    if app.state.error is not None:
        return _report_error(app.state.error)
    app.run()
    return 0
