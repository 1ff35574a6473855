"""Reading and writing ``quizmaker.toml``.

The file has three tables, ``[timing]``, ``[marks]`` and ``[logging]``, each
holding plain scalar settings. A commented copy ships inside the package
and is what ``quizmaker config init`` writes out.
"""

from __future__ import annotations

import tomllib
from importlib import resources
from pathlib import Path
from typing import Any, Mapping, MutableMapping

__all__ = [
    "ConfigFileError",
    "read_config_file",
    "apply_config_file",
    "template_text",
    "write_template",
]

Sections = MutableMapping[str, MutableMapping[str, Any]]


class ConfigFileError(RuntimeError):
    """The config file is missing, malformed or has unknown settings."""


def read_config_file(path: Path) -> dict[str, Any]:
    try:
        return tomllib.loads(path.read_text(encoding="utf-8"))
    except FileNotFoundError as exc:
        raise ConfigFileError(f"Config file not found: {path}") from exc
    except tomllib.TOMLDecodeError as exc:
        raise ConfigFileError(f"Failed to parse {path.name}: {exc}") from exc


def apply_config_file(
    sections: Sections, document: Mapping[str, Any]
) -> None:
    """Overwrite values in ``sections`` with those set in ``document``.

    Every table and key in ``document`` must already exist in ``sections``,
    so a typo such as ``[timing] mcq_tme`` is an error instead of being
    silently ignored.
    """

    for table, values in document.items():
        if table not in sections:
            raise ConfigFileError(f"Unknown config table [{table}].")
        if not isinstance(values, Mapping):
            raise ConfigFileError(
                f"Expected [{table}] to be a table, found "
                f"{type(values).__name__}."
            )
        known = sections[table]
        for key, value in values.items():
            if key not in known:
                raise ConfigFileError(f"Unknown config key '{table}.{key}'.")
            known[key] = value


def template_text() -> str:
    return (
        resources.files("quizmaker")
        .joinpath("quizmaker.toml")
        .read_text(encoding="utf-8")
    )


def write_template(path: Path, *, force: bool = False) -> Path:
    """Write the packaged template to ``path``; existing files need ``force``."""

    if path.exists() and not force:
        raise ConfigFileError(
            f"Config already exists: {path} (use --force to replace it)"
        )
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(template_text(), encoding="utf-8")
    path.chmod(0o600)
    return path
