"""``quizmaker`` console script: routes a subcommand to its handler."""

from __future__ import annotations

import sys
from dataclasses import dataclass
from importlib import import_module, metadata
from typing import Optional, Sequence


@dataclass(frozen=True)
class CommandSpec:
    """A subcommand whose handler is ``module:function`` taking ``argv``."""

    name: str
    summary: str
    target: str
    is_tui: bool = False

    def run(self, argv: Sequence[str]) -> int:
        module_name, _, func_name = self.target.partition(":")
        handler = getattr(import_module(module_name), func_name)
        try:
            return handler(list(argv))
        except SystemExit as exc:
            # argparse exits 0 for --help and 2 for usage errors.
            return exc.code if isinstance(exc.code, int) else 1


COMMANDS: dict[str, CommandSpec] = {
    spec.name: spec
    for spec in (
        CommandSpec(
            "init",
            "Bootstrap the quizmaker workspace.",
            "quizmaker.workspace.cli:main",
        ),
        CommandSpec(
            "config",
            "Write the default quizmaker.toml template.",
            "quizmaker.workspace.cli:config_main",
        ),
        CommandSpec(
            "inspect",
            "Parse a quiz document and list its questions.",
            "quizmaker.commands:inspect_main",
        ),
        CommandSpec(
            "play",
            "Take a timed quiz in the terminal.",
            "quizmaker.commands:play_main",
        ),
        CommandSpec(
            "tui",
            "Take a timed quiz in the Textual interface.",
            "quizmaker.commands:tui_main",
            is_tui=True,
        ),
    )
}


def format_command_table() -> str:
    width = max(len(name) for name in COMMANDS)
    lines = ["Available commands:"]
    for spec in COMMANDS.values():
        suffix = " (TUI)" if spec.is_tui else ""
        lines.append(f"  {spec.name.ljust(width)}  {spec.summary}{suffix}")
    return "\n".join(lines)


def format_usage() -> str:
    return "\n".join(
        [
            "Usage: quizmaker <command> [args...]",
            "Run `quizmaker list` for commands or `quizmaker help <name>` "
            "for details.",
            "",
            format_command_table(),
        ]
    )


def _unknown(name: str) -> int:
    sys.stderr.write(f"Unknown command '{name}'.\n{format_command_table()}\n")
    return 2


def _version() -> str:
    try:
        return metadata.version("quizmaker")
    except metadata.PackageNotFoundError:
        return "unknown"


def main(argv: Optional[Sequence[str]] = None) -> int:
    args = list(sys.argv[1:] if argv is None else argv)
    if not args:
        print(format_usage())
        return 2

    head, *tail = args
    if head in ("-h", "--help"):
        print(format_usage())
        return 0
    if head in ("-V", "--version", "version"):
        print(_version())
        return 0
    if head == "list":
        print(format_command_table())
        return 0
    if head == "help":
        if not tail:
            print(format_usage())
            return 0
        spec = COMMANDS.get(tail[0])
        if spec is None:
            return _unknown(tail[0])
        print(f"{spec.name}: {spec.summary}")
        print(f"Run `quizmaker {spec.name} --help` for CLI-specific options.")
        return 0

    spec = COMMANDS.get(head)
    if spec is None:
        return _unknown(head)
    return spec.run(tail)


if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main())
