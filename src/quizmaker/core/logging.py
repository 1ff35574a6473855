"""JSON-lines log file for quizmaker runs.

Each command writes to ``<workspace>/logs/quizmaker.log``; session events
arrive through the ``quizmaker.session`` child logger and land in the same
file. ``--verbose`` echoes records to stderr as well.
"""

from __future__ import annotations

import json
import logging
import sys
import tempfile
from datetime import datetime, timezone
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Any

__all__ = ["JsonLogFormatter", "configure_logger", "LOG_FILENAME"]

LOG_FILENAME = "quizmaker.log"
LOG_MAX_BYTES = 2 * 1024 * 1024
LOG_BACKUPS = 3


class JsonLogFormatter(logging.Formatter):
    """One JSON object per line; ``extra=`` fields are nested under "extra"."""

    _STANDARD = frozenset(vars(logging.makeLogRecord({}))) | {
        "message",
        "asctime",
        "taskName",
    }

    def format(self, record: logging.LogRecord) -> str:
        entry: dict[str, Any] = {
            "timestamp": datetime.fromtimestamp(
                record.created, timezone.utc
            ).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        extra = {
            key: value
            for key, value in vars(record).items()
            if key not in self._STANDARD
        }
        if extra:
            entry["extra"] = extra
        if record.exc_info:
            entry["exception"] = self.formatException(record.exc_info)
        return json.dumps(entry, default=_json_fallback)


class _QuizFileHandler(RotatingFileHandler):
    pass


class _EchoHandler(logging.StreamHandler):
    pass


def configure_logger(
    name: str,
    *,
    log_dir: Path,
    level: str = "INFO",
    verbose: bool = False,
) -> tuple[logging.Logger, Path]:
    """Attach the JSON file handler (once) and return the logger and file.

    The file keeps records at ``level`` and above, or everything when
    ``verbose``. A later call in the same process keeps the first file.
    """

    logger = logging.getLogger(name)
    logger.setLevel(logging.DEBUG)
    logger.propagate = False

    file_handler = next(
        (h for h in logger.handlers if isinstance(h, _QuizFileHandler)), None
    )
    if file_handler is None:
        file_handler = _open_file_handler(log_dir)
        file_handler.setFormatter(JsonLogFormatter())
        logger.addHandler(file_handler)
    file_handler.setLevel(logging.DEBUG if verbose else _parse_level(level))

    echo = [h for h in logger.handlers if isinstance(h, _EchoHandler)]
    if verbose and not echo:
        handler = _EchoHandler(sys.stderr)
        handler.setFormatter(logging.Formatter("%(levelname)s %(message)s"))
        logger.addHandler(handler)
    elif not verbose:
        for handler in echo:
            logger.removeHandler(handler)
            handler.close()

    return logger, Path(file_handler.baseFilename)


def _open_file_handler(log_dir: Path) -> _QuizFileHandler:
    for directory in (log_dir, _fallback_log_dir()):
        try:
            directory.mkdir(parents=True, exist_ok=True)
            return _QuizFileHandler(
                directory / LOG_FILENAME,
                maxBytes=LOG_MAX_BYTES,
                backupCount=LOG_BACKUPS,
                encoding="utf-8",
            )
        except PermissionError:
            continue
    raise PermissionError(f"No writable log directory (tried {log_dir}).")


def _parse_level(level: str) -> int:
    value = logging.getLevelName(level.strip().upper())
    return value if isinstance(value, int) else logging.INFO


def _json_fallback(value: Any) -> Any:
    if isinstance(value, Path):
        return str(value)
    if isinstance(value, (set, frozenset)):
        return sorted(value, key=repr)
    return repr(value)


def _fallback_log_dir() -> Path:
    return Path(tempfile.gettempdir()) / "quizmaker-logs"
