"""Workspace, config file and logging plumbing behind the quiz commands."""

from __future__ import annotations

from .config import (
    ConfigFileError,
    apply_config_file,
    read_config_file,
    template_text,
    write_template,
)
from .logging import JsonLogFormatter, configure_logger
from .workspace import WorkspaceError, WorkspaceLayout, ensure_workspace

__all__ = [
    "ConfigFileError",
    "apply_config_file",
    "read_config_file",
    "template_text",
    "write_template",
    "JsonLogFormatter",
    "configure_logger",
    "WorkspaceError",
    "WorkspaceLayout",
    "ensure_workspace",
]
