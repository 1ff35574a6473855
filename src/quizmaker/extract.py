"""Plain-text extraction for uploaded quiz documents.

Backends are injected through :class:`ExtractionDependencies` so callers and
tests can swap them. The default ``.docx`` backend uses ``python-docx`` and
joins paragraph text with newlines; ``.txt`` and ``.md`` files are read as
UTF-8. Every failure is reported as :class:`ExtractionFailure`.
"""

from __future__ import annotations

import importlib
from dataclasses import dataclass
from pathlib import Path
from typing import Callable, Optional

from .errors import ExtractionFailure

__all__ = [
    "ExtractionDependencies",
    "SUPPORTED_EXTENSIONS",
    "default_dependencies",
    "extract_text",
]

_DOCX_EXTENSIONS: frozenset[str] = frozenset({"docx"})
_PLAIN_EXTENSIONS: frozenset[str] = frozenset({"txt", "md"})

SUPPORTED_EXTENSIONS: frozenset[str] = _DOCX_EXTENSIONS | _PLAIN_EXTENSIONS


@dataclass(frozen=True)
class ExtractionDependencies:
    """Callable seams for format-specific text extraction."""

    docx: Callable[[Path], str]
    plain_text: Callable[[Path], str]


def default_dependencies() -> ExtractionDependencies:
    return ExtractionDependencies(docx=_docx_text, plain_text=_plain_text)


def extract_text(
    source: Path,
    *,
    dependencies: Optional[ExtractionDependencies] = None,
) -> str:
    """Return the newline-delimited text of ``source``."""

    deps = dependencies or default_dependencies()
    path = Path(source).expanduser()
    if not path.exists():
        raise ExtractionFailure(f"Source file not found: {path}")
    if not path.is_file():
        raise ExtractionFailure(f"Source path is not a file: {path}")

    extension = path.suffix.lstrip(".").lower()
    if extension in _DOCX_EXTENSIONS:
        backend = deps.docx
    elif extension in _PLAIN_EXTENSIONS:
        backend = deps.plain_text
    else:
        expected = ", ".join(f".{ext}" for ext in sorted(SUPPORTED_EXTENSIONS))
        raise ExtractionFailure(
            f"Unsupported file type '{path.suffix or path.name}'. "
            f"Expected one of: {expected}."
        )

    try:
        return backend(path)
    except ExtractionFailure:
        raise
    except Exception as exc:
        raise ExtractionFailure(f"Error reading {path.name}: {exc}") from exc


def _plain_text(path: Path) -> str:
    return path.read_text(encoding="utf-8", errors="replace")


def _docx_text(path: Path) -> str:
    docx = _import_module("docx", "Document")
    document = docx.Document(str(path))
    return "\n".join(paragraph.text for paragraph in document.paragraphs)


def _import_module(module: str, required_attribute: str):
    try:
        imported = importlib.import_module(module)
    except ImportError as exc:
        raise ExtractionFailure(
            "The DOCX reader is not available. Install it with "
            "`pip install python-docx`."
        ) from exc
    if not hasattr(imported, required_attribute):
        raise ExtractionFailure(
            f"Dependency '{module}' is installed but missing the "
            f"'{required_attribute}' attribute. Upgrade or reinstall "
            "python-docx."
        )
    return imported
