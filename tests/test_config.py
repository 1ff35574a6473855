from __future__ import annotations

from pathlib import Path

import pytest

from quizmaker.config import (
    ConfigOverrides,
    QuizConfiguration,
    coerce_field_value,
    compute_total_time,
    format_clock,
    format_duration,
    load_config,
)
from quizmaker.core import write_template
from quizmaker.errors import QuizConfigError
from quizmaker.parser import parse_questions


@pytest.fixture
def questions(sample_text):
    return parse_questions(sample_text)


def test_total_time_sums_per_type(questions):
    config = QuizConfiguration()

    assert compute_total_time(questions, config) == 60 + 180 + 60
    assert config.with_total_time(questions).total_time == 300


def test_update_rederives_total_time(questions):
    config = QuizConfiguration().with_total_time(questions)

    updated = config.update(questions, mcq_time=30)

    assert updated.mcq_time == 30
    assert updated.total_time == 30 + 180 + 30
    assert config.total_time == 300


@pytest.mark.parametrize(
    "raw, expected",
    [("90", 90), (" 45 ", 45), ("abc", 0), ("", 0), (-5, 0), (7.9, 7), (None, 0)],
)
def test_coerce_field_value(raw, expected):
    assert coerce_field_value(raw) == expected


def test_update_coerces_form_values(questions):
    config = QuizConfiguration().update(questions, subjective_time="oops")

    assert config.subjective_time == 0
    assert config.total_time == 120


def test_update_rejects_unknown_fields(questions):
    with pytest.raises(QuizConfigError):
        QuizConfiguration().update(questions, total_time=5)


def test_formatters():
    assert format_duration(300) == "5m 0s"
    assert format_duration(59) == "0m 59s"
    assert format_clock(65) == "1:05"
    assert format_clock(0) == "0:00"


def test_load_config_defaults(tmp_path):
    result = load_config(env={}, workspace_path=tmp_path / "ws")

    assert result.config == QuizConfiguration()
    assert result.log_level == "INFO"
    assert result.config_path is None
    assert result.layout.logs_dir.is_dir()


def _write_config(path: Path, body: str) -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(body, encoding="utf-8")
    return path


def test_load_config_reads_workspace_file(tmp_path):
    workspace = tmp_path / "ws"
    _write_config(
        workspace / "config" / "quizmaker.toml",
        "[timing]\nmcq_time = 45\n[logging]\nlevel = 'debug'\n",
    )

    result = load_config(env={}, workspace_path=workspace)

    assert result.config.mcq_time == 45
    assert result.config.subjective_time == 180
    assert result.log_level == "DEBUG"
    assert result.config_path == workspace / "config" / "quizmaker.toml"


def test_load_config_precedence(tmp_path):
    path = _write_config(
        tmp_path / "custom.toml",
        "[timing]\nmcq_time = 45\nsubjective_time = 100\n"
        "[marks]\nmcq_marks = 3\n",
    )
    env = {
        "QUIZMAKER_MCQ_TIME": "50",
        "QUIZMAKER_SUBJECTIVE_MARKS": "7",
        "QUIZMAKER_LOG_LEVEL": "warning",
    }

    result = load_config(
        config_path=path,
        overrides=ConfigOverrides(mcq_time=20),
        env=env,
        workspace_path=tmp_path / "ws",
    )

    assert result.config.mcq_time == 20
    assert result.config.subjective_time == 100
    assert result.config.mcq_marks == 3
    assert result.config.subjective_marks == 7
    assert result.log_level == "WARNING"


def test_load_config_uses_env_config_path(tmp_path):
    path = _write_config(tmp_path / "env.toml", "[marks]\nsubjective_marks = 4\n")

    result = load_config(
        env={"QUIZMAKER_CONFIG": str(path)}, workspace_path=tmp_path / "ws"
    )

    assert result.config.subjective_marks == 4


def test_load_config_missing_explicit_file_errors(tmp_path):
    with pytest.raises(QuizConfigError):
        load_config(
            config_path=tmp_path / "missing.toml",
            env={},
            workspace_path=tmp_path / "ws",
        )


@pytest.mark.parametrize(
    "body",
    [
        "[timing]\nmcq_time = -1\n",
        "[timing]\nmcq_time = 'soon'\n",
        "[timing]\nunknown = 1\n",
        "[timing\n",
    ],
)
def test_load_config_rejects_bad_files(tmp_path, body):
    path = _write_config(tmp_path / "bad.toml", body)

    with pytest.raises(QuizConfigError):
        load_config(config_path=path, env={}, workspace_path=tmp_path / "ws")


def test_load_config_rejects_bad_env(tmp_path):
    with pytest.raises(QuizConfigError):
        load_config(
            env={"QUIZMAKER_MCQ_MARKS": "lots"}, workspace_path=tmp_path / "ws"
        )


def test_packaged_template_loads_as_defaults(tmp_path):
    path = write_template(tmp_path / "q.toml")

    result = load_config(config_path=path, env={}, workspace_path=tmp_path / "ws")

    assert result.config == QuizConfiguration()
    assert result.log_level == "INFO"
