"""Where quizmaker keeps its config file and JSON logs.

The workspace is a single directory holding ``config/quizmaker.toml`` and
``logs/quizmaker.log``. Its root is ``--path``, else ``QUIZMAKER_DATA_HOME``,
else ``~/.quizmaker-data``.
"""

from __future__ import annotations

import os
import tempfile
from dataclasses import dataclass
from pathlib import Path
from typing import Mapping


WORKSPACE_ENV = "QUIZMAKER_DATA_HOME"
DEFAULT_WORKSPACE = Path.home() / ".quizmaker-data"
CONFIG_FILENAME = "quizmaker.toml"


class WorkspaceError(RuntimeError):
    """Raised when the workspace layout cannot be prepared."""


@dataclass(frozen=True)
class WorkspaceLayout:
    home: Path
    config_dir: Path
    logs_dir: Path
    # Names among "home", "config", "logs" created by this call.
    created: frozenset[str] = frozenset()

    @property
    def config_file(self) -> Path:
        return self.config_dir / CONFIG_FILENAME

    def status(self, name: str) -> str:
        return "created" if name in self.created else "exists"


def ensure_workspace(
    *,
    env: Mapping[str, str] | None = None,
    path: Path | None = None,
) -> WorkspaceLayout:
    """Create (if needed) and return the workspace layout.

    Only the default root may move to ``<tmp>/quizmaker-data`` when the home
    directory is not writable; a root chosen by flag or env var is used as-is.
    """

    env_map = os.environ if env is None else env
    if path is not None:
        root, may_fall_back = path, False
    elif (env_map.get(WORKSPACE_ENV) or "").strip():
        root, may_fall_back = Path(env_map[WORKSPACE_ENV].strip()), False
    else:
        root, may_fall_back = DEFAULT_WORKSPACE, True
    root = root.expanduser().resolve()

    try:
        return _build(root)
    except PermissionError as exc:
        if not may_fall_back:
            raise WorkspaceError(
                f"Unable to prepare workspace at {root}"
            ) from exc
        fallback = Path(tempfile.gettempdir()) / "quizmaker-data"
        try:
            return _build(fallback)
        except PermissionError as again:
            raise WorkspaceError(
                f"Unable to prepare workspace at {root} or {fallback}"
            ) from again


def _build(root: Path) -> WorkspaceLayout:
    created = set()
    for name, directory in (
        ("home", root),
        ("config", root / "config"),
        ("logs", root / "logs"),
    ):
        if directory.exists():
            if not directory.is_dir():
                raise WorkspaceError(
                    f"Workspace path exists and is not a directory: {directory}"
                )
            continue
        directory.mkdir(parents=True)
        directory.chmod(0o700)
        created.add(name)
    return WorkspaceLayout(
        home=root,
        config_dir=root / "config",
        logs_dir=root / "logs",
        created=frozenset(created),
    )
