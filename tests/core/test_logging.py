from __future__ import annotations

import json
import logging
from pathlib import Path

import pytest

from quizmaker.core import logging as core_logging


@pytest.fixture
def quiz_logger(tmp_path):
    logger, path = core_logging.configure_logger(
        "quizmaker", log_dir=tmp_path / "logs", level="INFO"
    )
    yield logger, path
    for handler in list(logger.handlers):
        handler.close()
        logger.removeHandler(handler)


def _entries(path: Path) -> list[dict]:
    return [
        json.loads(line)
        for line in path.read_text(encoding="utf-8").splitlines()
    ]


def test_session_child_logger_lands_in_quizmaker_log(quiz_logger):
    logger, path = quiz_logger

    logger.getChild("session").info(
        "Session phase changed",
        extra={"from_phase": "configure", "to_phase": "playing"},
    )

    assert path.name == "quizmaker.log"
    (entry,) = _entries(path)
    assert entry["logger"] == "quizmaker.session"
    assert entry["level"] == "INFO"
    assert entry["extra"] == {"from_phase": "configure", "to_phase": "playing"}
    assert entry["timestamp"].endswith("+00:00")


def test_level_filters_file_and_values_are_made_jsonable(quiz_logger):
    logger, path = quiz_logger

    logger.debug("Ignored event", extra={"event": "Tick"})
    try:
        raise ValueError("bad docx")
    except ValueError:
        logger.exception(
            "Upload rejected",
            extra={
                "source": Path("quiz.docx"),
                "ids": (1, 2),
                "config": {"mcq_time": 60},
                "phase": object(),
            },
        )

    (entry,) = _entries(path)
    assert entry["message"] == "Upload rejected"
    assert "ValueError: bad docx" in entry["exception"]
    assert entry["extra"]["source"] == "quiz.docx"
    assert entry["extra"]["ids"] == [1, 2]
    assert entry["extra"]["config"] == {"mcq_time": 60}
    assert entry["extra"]["phase"].startswith("<object object")


def test_verbose_echoes_to_stderr_and_keeps_debug(tmp_path, capsys):
    logger, path = core_logging.configure_logger(
        "quizmaker", log_dir=tmp_path, level="ERROR", verbose=True
    )

    logger.debug("Parsed document")

    assert "DEBUG Parsed document" in capsys.readouterr().err
    assert _entries(path)[0]["message"] == "Parsed document"


def test_second_run_reuses_file_and_drops_stderr(tmp_path):
    logger, first = core_logging.configure_logger(
        "quizmaker", log_dir=tmp_path / "a", verbose=True
    )
    _, second = core_logging.configure_logger(
        "quizmaker", log_dir=tmp_path / "b", verbose=False
    )

    assert second == first
    assert len(logger.handlers) == 1


def test_unwritable_log_dir_uses_temp_logs(tmp_path, monkeypatch):
    blocked = tmp_path / "blocked"
    real_mkdir = Path.mkdir

    def fake_mkdir(self, *args, **kwargs):  # noqa: ANN001
        if self == blocked:
            raise PermissionError("denied")
        return real_mkdir(self, *args, **kwargs)

    monkeypatch.setattr(Path, "mkdir", fake_mkdir)
    monkeypatch.setattr(
        core_logging, "_fallback_log_dir", lambda: tmp_path / "quizmaker-logs"
    )

    logger, path = core_logging.configure_logger("quizmaker", log_dir=blocked)
    logger.warning("Quiz finished")

    assert path == tmp_path / "quizmaker-logs" / "quizmaker.log"
    assert _entries(path)[0]["message"] == "Quiz finished"
