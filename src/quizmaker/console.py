"""Rich-powered console front-end for a quiz session.

The loop reads one command at a time from an input provider. There is no
background thread: before each command is applied, wall-clock time elapsed
since the previous one is fed to the session's :class:`ManualScheduler`, which
delivers the matching number of timer ticks. A quiz whose time ran out while
the user was typing therefore ends before that input is used.
"""

from __future__ import annotations

import time
from dataclasses import dataclass
from typing import Callable, Literal, Optional, Sequence

from rich import box
from rich.console import Console
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from .config import (
    EDITABLE_FIELDS,
    QuizConfiguration,
    format_clock,
    format_duration,
)
from .models import Question, QuestionType, count_by_type
from .scoring import ScoreReport
from .session import ManualScheduler, Phase, QuizSession, SessionState

__all__ = [
    "SessionCommand",
    "ConsoleRunResult",
    "configure_console_session",
    "parse_session_command",
    "run_console_session",
    "render_question_table",
]

InputProvider = Callable[[], str]
Clock = Callable[[], float]
ExitAction = Literal["submitted", "timeout", "quit"]

LOW_TIME_SECONDS = 60

_FEEDBACK_STYLES = {
    "excellent": "bold green",
    "good": "bold blue",
    "needs_work": "bold yellow",
}


@dataclass(frozen=True)
class SessionCommand:
    """Normalized user command parsed from console input."""

    type: Literal["next", "prev", "submit", "quit", "answer"]
    value: Optional[str] = None


@dataclass(frozen=True)
class ConsoleRunResult:
    exit_action: ExitAction
    state: SessionState
    report: ScoreReport


def parse_session_command(
    raw: Optional[str], question: Optional[Question]
) -> Optional[SessionCommand]:
    """Parse raw input for ``question``.

    Navigation words win. On a multiple-choice question a single letter
    selects that option; on a subjective question any other text is the
    answer, and a leading ``>`` makes the rest literal answer text even when
    it spells a command.
    """

    if raw is None:
        return None
    text = raw.strip()
    if not text:
        return None
    if (
        question is not None
        and question.type is QuestionType.SUBJECTIVE
        and text.startswith(">")
    ):
        literal = text[1:].strip()
        return SessionCommand("answer", literal) if literal else None
    lowered = text.lower()
    if lowered in {"n", "next"}:
        return SessionCommand("next")
    if lowered in {"p", "prev", "previous"}:
        return SessionCommand("prev")
    if lowered in {"s", "submit"}:
        return SessionCommand("submit")
    if lowered in {"q", "quit", "exit"}:
        return SessionCommand("quit")
    if question is None:
        return None
    if question.type is QuestionType.SUBJECTIVE:
        return SessionCommand("answer", text)
    if len(text) == 1 and text.isalpha():
        return SessionCommand("answer", lowered)
    return None


def configure_console_session(
    session: QuizSession,
    console: Console,
    input_provider: InputProvider,
) -> bool:
    """Let the user edit time and marks before the quiz starts.

    Each line is ``field=value`` (or ``field value``); a blank line or
    ``start`` begins the quiz. Returns ``False`` when the user quits.
    """

    fields = ", ".join(EDITABLE_FIELDS)
    console.print(
        Text(
            f"Edit settings with field=value ({fields}); "
            "press Enter to start or type quit.",
            style="dim",
        )
    )
    while session.state.phase is Phase.CONFIGURE:
        _render_config(console, session.state)
        try:
            raw = (input_provider() or "").strip()
        except (EOFError, KeyboardInterrupt, StopIteration):
            console.print("\n[bold yellow]Session interrupted.[/]")
            return False
        if raw.lower() in {"", "start"}:
            return True
        if raw.lower() in {"q", "quit", "exit"}:
            return False
        name, _, value = raw.replace("=", " ", 1).partition(" ")
        name = name.strip().lower()
        if name not in EDITABLE_FIELDS:
            console.print(Text(f"Unknown setting '{name}'.", style="red"))
            continue
        session.update_config(name, value.strip())
    return True


def _render_config(console: Console, state: SessionState) -> None:
    config = state.config
    counts = count_by_type(state.questions)
    table = Table(show_header=False, box=box.SIMPLE)
    table.add_column("Setting", style="bold")
    table.add_column("Value", justify="right")
    for name in EDITABLE_FIELDS:
        table.add_row(name, str(getattr(config, name)))
    console.print(table)
    console.print(
        f"{counts[QuestionType.MCQ]} MCQs, "
        f"{counts[QuestionType.SUBJECTIVE]} Subjective | "
        f"Total duration: {format_duration(config.total_time)}"
    )


def run_console_session(
    session: QuizSession,
    scheduler: ManualScheduler,
    console: Console,
    input_provider: InputProvider,
    *,
    clock: Clock = time.monotonic,
) -> ConsoleRunResult:
    """Play a configured session to the end and run self-grading.

    ``session`` must be in the Configure phase and built with ``scheduler``.
    """

    if session.state.phase is not Phase.CONFIGURE:
        raise ValueError("Session must be configured before it can be played.")

    session.start()
    last = clock()
    exit_action: ExitAction = "submitted"

    while session.state.phase is Phase.PLAYING:
        _render_question(console, session.state)
        try:
            raw = input_provider()
        except (EOFError, KeyboardInterrupt, StopIteration):
            console.print("\n[bold yellow]Session interrupted.[/]")
            exit_action = "quit"
            break
        now = clock()
        scheduler.advance(now - last)
        last = now
        if session.state.phase is not Phase.PLAYING:
            console.print("\n[bold red]Time is up![/] Your answers were submitted.")
            exit_action = "timeout"
            break
        command = parse_session_command(raw, session.state.current_question)
        if command is None:
            console.print("[red]Unrecognized command. Try again.[/]")
            continue
        if command.type == "quit":
            console.print("\n[bold yellow]Ending session without submission.[/]")
            exit_action = "quit"
            break
        _apply_command(command, session, console)

    session.close()
    if session.state.phase is Phase.RESULT:
        if not _collect_self_grades(session, console, input_provider):
            exit_action = "quit"
        _render_summary(console, session)

    return ConsoleRunResult(
        exit_action=exit_action,
        state=session.state,
        report=session.report(),
    )


def _apply_command(
    command: SessionCommand, session: QuizSession, console: Console
) -> None:
    state = session.state
    question = state.current_question
    if command.type == "answer" and command.value is not None and question:
        if question.is_mcq and question.option_for(command.value) is None:
            console.print(
                "[red]'%s' is not a valid choice for this question.[/red]"
                % command.value,
            )
            return
        session.handle_answer_change(command.value)
        if question.is_mcq:
            console.print(f"Selected [bold]{command.value.upper()}[/].")
        return
    if command.type == "next":
        session.next()
        return
    if command.type == "prev":
        session.previous()
        return
    if command.type == "submit":
        if session.submit().phase is not Phase.RESULT:
            console.print("[yellow]Submit is available on the last question.[/]")


def _collect_self_grades(
    session: QuizSession, console: Console, input_provider: InputProvider
) -> bool:
    state = session.state
    subjective = [q for q in state.questions if not q.is_mcq]
    if not subjective:
        return True
    console.print()
    console.rule(Text("Self-grading", style="bold magenta"))
    for question in subjective:
        answer = state.answers.get(question.id)
        console.print(Text(question.text, style="bold"))
        console.print(
            Panel(
                Text(answer) if answer else Text("No answer provided", style="italic dim"),
                title="Your answer",
                border_style="magenta",
            )
        )
        console.print(
            Panel(
                Text(question.model_answer)
                if question.model_answer
                else Text("No model answer provided in doc.", style="italic"),
                title="Model answer",
                border_style="dim",
            )
        )
        console.print(
            Text(f"Mark as correct (+{state.config.subjective_marks})? [y/N]")
        )
        try:
            raw = input_provider()
        except (EOFError, KeyboardInterrupt, StopIteration):
            console.print("\n[bold yellow]Self-grading interrupted.[/]")
            return False
        verdict = (raw or "").strip().lower() in {"y", "yes"}
        session.toggle_self_grading(question.id, verdict)
    return True


def _render_question(console: Console, state: SessionState) -> None:
    question = state.current_question
    if question is None:  # pragma: no cover - Playing always has questions
        return
    total = len(state.questions)
    kind = "Multiple Choice" if question.is_mcq else "Subjective"
    clock_style = "bold red" if state.time_left < LOW_TIME_SECONDS else "bold cyan"
    header = Text.assemble(
        (f"Q{state.current_index + 1}", "bold cyan"),
        (f" / {total}", "dim"),
        (f"  {kind}", "magenta"),
        ("  ⏱ ", "dim"),
        (format_clock(state.time_left), clock_style),
    )
    console.print()
    console.rule(header)
    console.print(Text(question.text, style="bold"))

    selected = state.answer_for(question)
    if question.is_mcq:
        table = Table(show_header=False, box=box.SIMPLE, expand=True)
        table.add_column("Key", justify="center", style="cyan")
        table.add_column("Choice")
        for option in question.options:
            marker = "•" if option.label == selected else " "
            choice = Text(option.text)
            if option.label == selected:
                choice.stylize("bold green")
            row = Text(marker + " ")
            row += choice
            table.add_row(option.label.upper(), row)
        console.print(table)
        hint = "choices [{0}]".format(
            ", ".join(option.label for option in question.options)
        )
    else:
        if selected:
            console.print(
                Panel(Text(selected), title="Your answer", border_style="magenta")
            )
            console.print(Text(f"{len(selected)} characters", style="dim"))
        hint = "type your answer (start with > to answer n/p/s/q literally)"

    finish = "submit" if state.is_last_question else "n (next)"
    console.print(
        Text(
            f"Answered {state.answered_count()}/{total} | Commands: {hint}, "
            f"p (prev), {finish}, quit",
            style="dim",
        )
    )


def _render_summary(console: Console, session: QuizSession) -> None:
    report = session.report()
    console.print()
    console.rule(Text("Quiz Complete", style="bold magenta"))

    overview = Table(show_header=False, box=box.MINIMAL_DOUBLE_HEAD)
    overview.add_column("Metric", style="bold")
    overview.add_column("Value", justify="right")
    overview.add_row("Total score", f"{report.score} / {report.max_score}")
    overview.add_row("Correct", str(report.correct_count))
    overview.add_row(
        "Accuracy",
        Text(f"{report.percentage}%", style=_FEEDBACK_STYLES[report.feedback]),
    )
    console.print(overview)

    details = Table(title="Responses", box=box.SIMPLE, expand=True)
    details.add_column("#", justify="right")
    details.add_column("Question", overflow="fold")
    details.add_column("Your answer", overflow="fold")
    details.add_column("Key", overflow="fold")
    details.add_column("Result", justify="center")
    for item in session.review():
        question = item.question
        if question.is_mcq:
            yours = (item.answer or "-").upper()
            key = (question.correct_option or "-").upper()
        else:
            yours = item.answer or "-"
            key = question.model_answer or "-"
        details.add_row(
            str(item.position),
            Text(question.text),
            Text(yours),
            Text(key),
            "✅" if item.is_correct else "❌",
        )
    console.print(details)


def render_question_table(
    console: Console,
    questions: Sequence[Question],
    config: QuizConfiguration,
) -> None:
    """Print parsed questions plus type counts and the derived duration."""

    table = Table(title="Parsed questions", box=box.SIMPLE, expand=True)
    table.add_column("#", justify="right")
    table.add_column("ID", justify="right")
    table.add_column("Type")
    table.add_column("Question", overflow="fold")
    table.add_column("Options", justify="right")
    table.add_column("Key", overflow="fold")
    for position, question in enumerate(questions, start=1):
        if question.is_mcq:
            key = (question.correct_option or "?").upper()
        else:
            key = question.model_answer or "-"
        table.add_row(
            str(position),
            str(question.id),
            question.type.value,
            Text(question.text),
            str(len(question.options)),
            Text(key),
        )
    console.print(table)

    counts = count_by_type(questions)
    total_time = config.with_total_time(questions).total_time
    console.print(
        f"{counts[QuestionType.MCQ]} MCQs, "
        f"{counts[QuestionType.SUBJECTIVE]} Subjective | "
        f"Total duration: {format_duration(total_time)}"
    )
