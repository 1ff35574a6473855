"""Textual front-end for a quiz session.

The app owns a :class:`QuizSession` whose countdown runs on Textual's own
``set_interval`` timer. Navigation and selection helpers are plain methods
so they can be exercised without running the app.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Optional

from rich.text import Text
from textual.app import App, ComposeResult
from textual.containers import Container, Horizontal, Vertical
from textual.widgets import Button, Input, Static

from .config import (
    EDITABLE_FIELDS,
    QuizConfiguration,
    format_clock,
    format_duration,
)
from .models import Question, QuestionType, count_by_type
from .session import Phase, QuizSession, SessionState
from .session.timer import TimerHandle

FIELD_LABELS = {
    "mcq_time": "MCQ time (seconds)",
    "mcq_marks": "MCQ marks",
    "subjective_time": "Subjective time (seconds)",
    "subjective_marks": "Subjective marks",
}


class QuizApp(App):
    CSS_PATH = None
    CSS = """
#options Button.selected { background: $accent; color: black; }
#clock.low { color: $error; }
#footer { height: auto; }
.field { height: auto; }
.field Static { width: 28; padding: 1 1; }
.field Input { width: 16; }
"""
    BINDINGS = [
        ("n", "next", "Next"),
        ("p", "prev", "Prev"),
        ("a", "select('a')", "Select A"),
        ("b", "select('b')", "Select B"),
        ("c", "select('c')", "Select C"),
        ("d", "select('d')", "Select D"),
        ("s", "submit", "Submit"),
        ("q", "quit", "Quit"),
    ]

    def __init__(
        self,
        text: str,
        config: Optional[QuizConfiguration] = None,
        *,
        logger: Optional[logging.Logger] = None,
    ) -> None:
        super().__init__()
        self._rendered: tuple[Phase, int] | None = None
        self._stage_ready = False
        self.session = QuizSession(config, scheduler=self._schedule, logger=logger)
        self.session.subscribe(self._on_state)
        self.session.upload_text(text)

    # Session seams

    def _schedule(self, interval: float, callback) -> TimerHandle:
        return self.set_interval(interval, callback)

    def _on_state(self, state: SessionState) -> None:
        key = (state.phase, state.current_index)
        if key != self._rendered:
            self._update_stage()
        else:
            self._update_status()

    # Pure helpers for navigation and selection (testable without running App)

    @property
    def state(self) -> SessionState:
        return self.session.state

    def current_question(self) -> Optional[Question]:
        return self.state.current_question

    def next_question(self) -> int:
        return self.session.next().current_index

    def prev_question(self) -> int:
        return self.session.previous().current_index

    def select_answer(self, label: str) -> bool:
        question = self.current_question()
        key = str(label).strip().lower()[:1]
        if self.state.phase is not Phase.PLAYING or question is None:
            return False
        if not question.is_mcq or question.option_for(key) is None:
            return False
        self.session.handle_answer_change(key)
        return True

    def load_file(self, raw_path: str) -> SessionState:
        """Upload another document; a blank path leaves the state as is."""

        raw_path = raw_path.strip()
        if not raw_path:
            return self.state
        return self.session.upload_file(Path(raw_path).expanduser())

    def edit_config(self, name: str, value: str) -> int:
        """Apply a Configure-stage edit and return the new total time."""

        if name in EDITABLE_FIELDS and self.state.phase is Phase.CONFIGURE:
            self.session.update_config(name, value)
        return self.state.config.total_time

    def message_text(self) -> str:
        if self.state.error is not None:
            return str(self.state.error)
        return "Open a quiz document (.docx, .txt or .md) to continue."

    def status_text(self) -> str:
        state = self.state
        return (
            f"Answered: {state.answered_count()}/{len(state.questions)}  "
            f"Time left: {format_clock(state.time_left)}"
        )

    def config_text(self) -> str:
        state = self.state
        counts = count_by_type(state.questions)
        config = state.config
        return (
            f"{counts[QuestionType.MCQ]} MCQs "
            f"({config.mcq_time}s, {config.mcq_marks} marks each), "
            f"{counts[QuestionType.SUBJECTIVE]} Subjective "
            f"({config.subjective_time}s, {config.subjective_marks} marks "
            f"each)\nTotal duration: {format_duration(config.total_time)}"
        )

    def result_text(self) -> str:
        report = self.session.report()
        return (
            f"Score {report.score} / {report.max_score}  |  "
            f"Correct {report.correct_count}  |  Accuracy {report.percentage}%"
        )

    # Rendering

    def compose(self) -> ComposeResult:
        yield Container(id="stage")
        with Horizontal(id="footer"):
            yield Static(self.status_text(), id="status")

    def on_mount(self) -> None:
        self._stage_ready = True
        self._update_stage()

    def _update_stage(self) -> None:
        if not self._stage_ready:
            return
        stage = self.query_one("#stage", Container)
        stage.remove_children()
        # Removed children detach later; new ids live under a fresh wrapper.
        stage.mount(Vertical(*self._stage_widgets(self.state)))
        self._rendered = (self.state.phase, self.state.current_index)
        self._update_status()

    def _update_status(self) -> None:
        if not self._stage_ready:
            return
        self.query_one("#status", Static).update(self.status_text())
        for summary in self.query("#config"):
            summary.update(self.config_text())
        for message in self.query("#message"):
            message.update(self.message_text())
        for clock in self.query("#clock"):
            clock.update(format_clock(self.state.time_left))
            clock.set_class(self.state.time_left < 60, "low")

    def _stage_widgets(self, state: SessionState) -> list:
        if state.phase is Phase.UPLOAD:
            return [
                Static(self.message_text(), id="message"),
                Input(placeholder="Path to quiz document", id="path"),
                Horizontal(
                    Button("Load Quiz", id="load", variant="primary"),
                    Button("Quit", id="quit"),
                ),
            ]
        if state.phase is Phase.CONFIGURE:
            fields = [
                Horizontal(
                    Static(FIELD_LABELS[name]),
                    Input(
                        value=str(getattr(state.config, name)),
                        type="integer",
                        id=f"cfg-{name}",
                    ),
                    classes="field",
                )
                for name in EDITABLE_FIELDS
            ]
            return [
                *fields,
                Static(self.config_text(), id="config"),
                Horizontal(
                    Button("Start Quiz", id="start", variant="primary"),
                    Button("Back", id="reset"),
                ),
            ]
        if state.phase is Phase.PLAYING:
            return self._question_widgets(state)
        return self._result_widgets(state)

    def _question_widgets(self, state: SessionState) -> list:
        question = state.current_question
        kind = "Multiple Choice" if question.is_mcq else "Subjective"
        header = (
            f"Q{state.current_index + 1}/{len(state.questions)}  {kind}"
        )
        widgets: list = [
            Static(header, id="progress"),
            Static(format_clock(state.time_left), id="clock"),
            Static(Text(question.text), id="question"),
        ]
        selected = state.answer_for(question)
        if question.is_mcq:
            buttons = []
            for option in question.options:
                button = Button(
                    f"{option.label.upper()}) {option.text}",
                    id=f"option-{option.label}",
                )
                if option.label == selected:
                    button.add_class("selected")
                buttons.append(button)
            widgets.append(Vertical(*buttons, id="options"))
        else:
            widgets.append(
                Input(
                    value=selected or "",
                    placeholder="Type your answer here...",
                    id="answer",
                )
            )
        nav = [Button("Previous", id="prev", disabled=state.is_first_question)]
        if state.is_last_question:
            nav.append(Button("Submit", id="submit", variant="success"))
        else:
            nav.append(Button("Next", id="next"))
        widgets.append(Horizontal(*nav, id="nav"))
        return widgets

    def _result_widgets(self, state: SessionState) -> list:
        widgets: list = [Static(self.result_text(), id="result")]
        for item in self.session.review():
            question = item.question
            mark = "correct" if item.is_correct else "incorrect"
            if question.is_mcq:
                detail = (
                    f"{item.position}. {question.text}\n"
                    f"   Your answer: {(item.answer or '-').upper()}  "
                    f"Key: {(question.correct_option or '-').upper()}  ({mark})"
                )
                widgets.append(Static(Text(detail)))
                continue
            detail = (
                f"{item.position}. {question.text}\n"
                f"   Your answer: {item.answer or 'No answer provided'}\n"
                f"   Model answer: "
                f"{question.model_answer or 'No model answer provided in doc.'}"
            )
            widgets.append(Static(Text(detail)))
            widgets.append(
                Horizontal(
                    Button(
                        f"Correct (+{state.config.subjective_marks})",
                        id=f"grade-{item.position}-yes",
                    ),
                    Button("Incorrect (0)", id=f"grade-{item.position}-no"),
                )
            )
        widgets.append(Button("Create New Quiz", id="reset"))
        return widgets

    # Actions

    def action_next(self) -> None:
        self.next_question()

    def action_prev(self) -> None:
        self.prev_question()

    def action_select(self, label: str) -> None:
        if self.select_answer(label):
            self._update_stage()

    def action_submit(self) -> None:
        self.session.submit()

    def grade(self, position: int, is_correct: bool) -> None:
        questions = self.state.questions
        if 1 <= position <= len(questions):
            self.session.toggle_self_grading(questions[position - 1].id, is_correct)
            self._update_stage()

    def on_input_changed(self, event: Input.Changed) -> None:
        input_id = event.input.id or ""
        if input_id.startswith("cfg-"):
            name = input_id[len("cfg-"):]
            if event.value != str(getattr(self.state.config, name)):
                self.edit_config(name, event.value)
            return
        if input_id != "answer":
            return
        if event.value == (self.state.answer_for() or ""):
            return
        self.session.handle_answer_change(event.value)

    def on_input_submitted(self, event: Input.Submitted) -> None:
        if event.input.id == "path":
            self.load_file(event.value)

    def on_button_pressed(self, event: Button.Pressed) -> None:
        bid = getattr(event.button, "id", "") or ""
        if bid.startswith("option-"):
            self.action_select(bid[len("option-"):])
        elif bid.startswith("grade-"):
            _, position, verdict = bid.split("-")
            self.grade(int(position), verdict == "yes")
        elif bid == "start":
            self.session.start()
        elif bid == "submit":
            self.action_submit()
        elif bid == "next":
            self.action_next()
        elif bid == "prev":
            self.action_prev()
        elif bid == "reset":
            self.session.reset()
        elif bid == "load":
            self.load_file(self.query_one("#path", Input).value)
        elif bid == "quit":
            self.exit()

    def on_unmount(self) -> None:
        self._stage_ready = False
        self.session.close()
