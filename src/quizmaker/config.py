"""Quiz timing and marks configuration.

:class:`QuizConfiguration` is the value object the session engine works
with. Its ``total_time`` is always derived from the per-type times and a
question set; use :meth:`QuizConfiguration.with_total_time` or
:meth:`QuizConfiguration.update` rather than setting it by hand.

:func:`load_config` resolves the defaults a session starts from, applying
precedence CLI overrides > ``QUIZMAKER_*`` environment > TOML file >
built-in defaults.
"""

from __future__ import annotations

import os
from dataclasses import dataclass, replace
from pathlib import Path
from typing import Any, Mapping, MutableMapping, Optional, Sequence

from .core import config as core_config
from .core import workspace as workspace_mod
from .errors import QuizConfigError
from .models import Question

CONFIG_FILENAME = workspace_mod.CONFIG_FILENAME
CONFIG_ENV = "QUIZMAKER_CONFIG"
ENV_PREFIX = "QUIZMAKER_"

DEFAULT_MCQ_TIME = 60
DEFAULT_MCQ_MARKS = 2
DEFAULT_SUBJECTIVE_TIME = 180
DEFAULT_SUBJECTIVE_MARKS = 10
_DEFAULT_LOG_LEVEL = "INFO"

EDITABLE_FIELDS: tuple[str, ...] = (
    "mcq_time",
    "mcq_marks",
    "subjective_time",
    "subjective_marks",
)


@dataclass(frozen=True)
class QuizConfiguration:
    """Per-type time (seconds) and marks, plus the derived total duration."""

    mcq_time: int = DEFAULT_MCQ_TIME
    mcq_marks: int = DEFAULT_MCQ_MARKS
    subjective_time: int = DEFAULT_SUBJECTIVE_TIME
    subjective_marks: int = DEFAULT_SUBJECTIVE_MARKS
    total_time: int = 0

    def time_for(self, question: Question) -> int:
        return self.mcq_time if question.is_mcq else self.subjective_time

    def marks_for(self, question: Question) -> int:
        return self.mcq_marks if question.is_mcq else self.subjective_marks

    def with_total_time(
        self, questions: Sequence[Question]
    ) -> "QuizConfiguration":
        return replace(self, total_time=compute_total_time(questions, self))

    def update(
        self, questions: Sequence[Question], **changes: object
    ) -> "QuizConfiguration":
        """Return a copy with ``changes`` applied and total time re-derived.

        Values are coerced like a numeric form field: anything that is not
        an integer becomes ``0`` and negatives are clamped to ``0``.
        """

        unknown = sorted(set(changes) - set(EDITABLE_FIELDS))
        if unknown:
            raise QuizConfigError(
                "Unknown configuration field(s): {0}".format(", ".join(unknown))
            )
        coerced = {key: coerce_field_value(value) for key, value in changes.items()}
        return replace(self, **coerced).with_total_time(questions)


def compute_total_time(
    questions: Sequence[Question], config: QuizConfiguration
) -> int:
    """Sum the per-type time of every question."""

    return sum(config.time_for(question) for question in questions)


def coerce_field_value(value: object) -> int:
    if isinstance(value, bool):
        return int(value)
    if isinstance(value, int):
        number = value
    elif isinstance(value, float):
        number = int(value)
    elif isinstance(value, str):
        try:
            number = int(value.strip())
        except ValueError:
            return 0
    else:
        return 0
    return max(number, 0)


def format_duration(seconds: int) -> str:
    """Render ``seconds`` as ``"{m}m {s}s"`` like the configuration screen."""

    return f"{seconds // 60}m {seconds % 60}s"


def format_clock(seconds: int) -> str:
    """Render ``seconds`` as a ``m:ss`` countdown."""

    return f"{seconds // 60}:{seconds % 60:02d}"


@dataclass(frozen=True)
class ConfigOverrides:
    """CLI-sourced values applied on top of env and file options."""

    mcq_time: Optional[int] = None
    mcq_marks: Optional[int] = None
    subjective_time: Optional[int] = None
    subjective_marks: Optional[int] = None
    log_level: Optional[str] = None


@dataclass(frozen=True)
class LoadResult:
    """Resolved defaults together with the workspace they came from."""

    config: QuizConfiguration
    log_level: str
    layout: workspace_mod.WorkspaceLayout
    config_path: Optional[Path]


def load_config(
    *,
    config_path: Optional[Path] = None,
    overrides: Optional[ConfigOverrides] = None,
    env: Optional[Mapping[str, str]] = None,
    workspace_path: Optional[Path] = None,
) -> LoadResult:
    """Resolve quiz defaults and the log level.

    A missing config file is fine when it was not asked for explicitly
    (``config_path`` or ``QUIZMAKER_CONFIG``); otherwise it is an error.
    """

    overrides = overrides or ConfigOverrides()
    env_map = os.environ if env is None else env

    layout = workspace_mod.ensure_workspace(env=env_map, path=workspace_path)
    requested = _resolve_config_path(
        config_path=config_path,
        env_map=env_map,
        default_path=layout.config_file,
    )

    table = _default_table()
    loaded_path: Optional[Path] = None
    if requested.exists():
        try:
            core_config.apply_config_file(
                table, core_config.read_config_file(requested)
            )
        except core_config.ConfigFileError as exc:
            raise QuizConfigError(str(exc)) from exc
        loaded_path = requested
    elif config_path is not None or (env_map.get(CONFIG_ENV) or "").strip():
        raise QuizConfigError(f"Config file not found: {requested}")

    file_values = {
        "mcq_time": table["timing"]["mcq_time"],
        "subjective_time": table["timing"]["subjective_time"],
        "mcq_marks": table["marks"]["mcq_marks"],
        "subjective_marks": table["marks"]["subjective_marks"],
    }

    values: dict[str, int] = {}
    for key in EDITABLE_FIELDS:
        values[key] = _pick_count(
            key,
            getattr(overrides, key),
            _parse_env_count(env_map, key),
            file_values[key],
        )

    log_level = _resolve_log_level(
        overrides.log_level,
        _parse_env_string(env_map, "LOG_LEVEL"),
        table["logging"]["level"],
    )

    return LoadResult(
        config=QuizConfiguration(**values),
        log_level=log_level,
        layout=layout,
        config_path=loaded_path,
    )


def _default_table() -> MutableMapping[str, MutableMapping[str, Any]]:
    return {
        "timing": {
            "mcq_time": DEFAULT_MCQ_TIME,
            "subjective_time": DEFAULT_SUBJECTIVE_TIME,
        },
        "marks": {
            "mcq_marks": DEFAULT_MCQ_MARKS,
            "subjective_marks": DEFAULT_SUBJECTIVE_MARKS,
        },
        "logging": {"level": _DEFAULT_LOG_LEVEL},
    }


def _resolve_config_path(
    *,
    config_path: Optional[Path],
    env_map: Mapping[str, str],
    default_path: Path,
) -> Path:
    if config_path is not None:
        return config_path.expanduser()
    env_candidate = (env_map.get(CONFIG_ENV) or "").strip()
    if env_candidate:
        return Path(env_candidate).expanduser()
    return default_path


def _pick_count(key: str, *candidates: object) -> int:
    for candidate in candidates:
        if candidate is None:
            continue
        if isinstance(candidate, bool) or not isinstance(candidate, int):
            raise QuizConfigError(f"{key} must be an integer.")
        if candidate < 0:
            raise QuizConfigError(f"{key} must not be negative.")
        return candidate
    raise QuizConfigError(f"{key} must be provided.")  # pragma: no cover


def _parse_env_count(env_map: Mapping[str, str], key: str) -> Optional[int]:
    raw = _parse_env_string(env_map, key.upper())
    if raw is None:
        return None
    try:
        return int(raw)
    except ValueError as exc:
        raise QuizConfigError(
            f"{ENV_PREFIX}{key.upper()} must be an integer, got '{raw}'."
        ) from exc


def _parse_env_string(env_map: Mapping[str, str], key: str) -> Optional[str]:
    raw = env_map.get(f"{ENV_PREFIX}{key}")
    if raw is None:
        return None
    value = raw.strip()
    return value or None


def _resolve_log_level(*candidates: object) -> str:
    for candidate in candidates:
        if candidate is None:
            continue
        if not isinstance(candidate, str) or not candidate.strip():
            raise QuizConfigError("logging.level must be a non-empty string.")
        return candidate.strip().upper()
    raise QuizConfigError("logging.level must be provided.")  # pragma: no cover
