from __future__ import annotations

import logging
import sys
from pathlib import Path
from typing import Iterator

import pytest

TESTS_DIR = Path(__file__).resolve().parent
ROOT = TESTS_DIR.parent
for extra in (ROOT, ROOT / "src"):
    path_str = str(extra)
    if path_str not in sys.path:
        sys.path.insert(0, path_str)

SAMPLE_QUIZ = """\
Quiz: General knowledge
1. What is the capital of France?
a) London
*b) Paris
c) Berlin
2. Explain photosynthesis.
Answer: Plants convert light
into chemical energy.
3) Pick the prime number
a. 4
b. 9
c. 7
Answer: c
"""


@pytest.fixture(autouse=True)
def _isolated_environment(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch
) -> Iterator[Path]:
    """Point the workspace at a tmp dir and clear QUIZMAKER_* overrides."""

    import os

    for key in list(os.environ):
        if key.startswith("QUIZMAKER_"):
            monkeypatch.delenv(key, raising=False)
    home = tmp_path / "quizmaker-home"
    monkeypatch.setenv("QUIZMAKER_DATA_HOME", str(home))
    yield home

    logger = logging.getLogger("quizmaker")
    for handler in list(logger.handlers):
        handler.close()
        logger.removeHandler(handler)
    logger.propagate = True


@pytest.fixture
def sample_text() -> str:
    return SAMPLE_QUIZ


@pytest.fixture
def quiz_file(tmp_path: Path) -> Path:
    """Write the sample quiz to a ``.txt`` document."""

    path = tmp_path / "quiz.txt"
    path.write_text(SAMPLE_QUIZ, encoding="utf-8")
    return path
