"""CLI entry points for workspace and config bootstrap."""

from __future__ import annotations

import argparse
import sys
from pathlib import Path
from typing import Sequence

from ..config import CONFIG_FILENAME
from ..core import config as core_config
from ..core import workspace as workspace_mod


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="quizmaker init",
        description=(
            "Bootstrap the quizmaker workspace and ensure its config and "
            "logs subdirectories exist."
        ),
    )
    parser.add_argument(
        "--path",
        type=Path,
        help=(
            "Override the workspace root (defaults to QUIZMAKER_DATA_HOME "
            "or ~/.quizmaker-data)."
        ),
    )
    parser.add_argument(
        "--quiet",
        action="store_true",
        help="Suppress informational output on success.",
    )
    return parser


def main(argv: Sequence[str] | None = None) -> int:
    parser = _build_parser()
    args = parser.parse_args(list(argv) if argv is not None else None)

    try:
        layout = workspace_mod.ensure_workspace(path=args.path)
    except workspace_mod.WorkspaceError as exc:
        sys.stderr.write(f"{exc}\n")
        return 1

    if args.quiet:
        return 0

    lines = [
        f"Workspace ready at {layout.home} ({layout.status('home')})",
        "Subdirectories:",
        f"  config  {layout.config_dir} ({layout.status('config')})",
        f"  logs    {layout.logs_dir} ({layout.status('logs')})",
    ]

    sys.stdout.write("\n".join(lines) + "\n")
    return 0


def _build_config_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="quizmaker config",
        description="Manage the quizmaker configuration file.",
    )
    sub = parser.add_subparsers(dest="action", required=True)
    init = sub.add_parser(
        "init", help=f"Write the default {CONFIG_FILENAME} template."
    )
    init.add_argument(
        "--path",
        type=Path,
        help=(
            "Destination file (defaults to <workspace>/config/"
            f"{CONFIG_FILENAME})."
        ),
    )
    init.add_argument(
        "--workspace",
        type=Path,
        help="Override the workspace root used for the default destination.",
    )
    init.add_argument(
        "--force",
        action="store_true",
        help="Overwrite an existing file.",
    )
    return parser


def config_main(argv: Sequence[str] | None = None) -> int:
    parser = _build_config_parser()
    args = parser.parse_args(list(argv) if argv is not None else None)

    destination = args.path
    try:
        if destination is None:
            layout = workspace_mod.ensure_workspace(path=args.workspace)
            destination = layout.config_file
        written = core_config.write_template(destination, force=args.force)
    except (workspace_mod.WorkspaceError, core_config.ConfigFileError) as exc:
        sys.stderr.write(f"{exc}\n")
        return 1

    sys.stdout.write(f"Wrote config template to {written}\n")
    return 0


if __name__ == "__main__":  # pragma: no cover - module CLI guard
    raise SystemExit(main())
