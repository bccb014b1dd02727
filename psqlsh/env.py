"""Environment bootstrapping: default file locations and file inclusion."""

from __future__ import annotations

import logging
import os
from contextlib import contextmanager
from pathlib import Path
from typing import Iterator, TextIO

from . import COMMAND_NAME
from .errors import CannotIncludeDirectoriesError, NoSuchFileOrDirectoryError

LOG = logging.getLogger(__name__)


def getenv(*keys: str) -> str:
    """Return the first non-empty value among the given environment variables."""

    for key in keys:
        value = os.environ.get(key, "")
        if value:
            return value
    return ""


def expand(path: str | Path, home: Path | None = None) -> Path:
    """Expand a leading ``~`` or ``~/`` to the user's home directory."""

    text = str(path)
    base = home if home is not None else Path.home()
    if text == "~":
        return base
    if text.startswith("~/"):
        return base / text[2:]
    return Path(text)


def _dotfile(suffix: str, home: Path | None) -> Path:
    name = COMMAND_NAME.upper() + suffix
    path = getenv(name) or "~/." + name.lower()
    return expand(path, home)


def history_file(home: Path | None = None) -> Path:
    """Path of the history file (``~/.psqlsh_history``, ``PSQLSH_HISTORY``)."""

    return _dotfile("_HISTORY", home)


def rc_file(home: Path | None = None) -> Path:
    """Path of the startup file (``~/.psqlshrc``, ``PSQLSHRC``)."""

    return _dotfile("RC", home)


def pass_file(home: Path | None = None) -> Path:
    """Path of the password file (``~/.psqlshpass``, ``PSQLSHPASS``)."""

    return _dotfile("PASS", home)


@contextmanager
def open_file(
    path: str | Path,
    *,
    home: Path | None = None,
    relative_to: Path | None = None,
) -> Iterator[tuple[Path, TextIO]]:
    """Open a file for inclusion, yielding its resolved path and a text handle."""

    candidate = expand(path, home)
    if relative_to is not None and not candidate.is_absolute():
        candidate = relative_to / candidate
    try:
        resolved = candidate.resolve(strict=True)
    except FileNotFoundError as exc:
        raise NoSuchFileOrDirectoryError(candidate) from exc
    if resolved.is_dir():
        raise CannotIncludeDirectoriesError(resolved)
    LOG.debug("Opening file", extra={"path": str(resolved)})
    with resolved.open("r", encoding="utf-8") as handle:
        yield resolved, handle


__all__ = [
    "expand",
    "getenv",
    "history_file",
    "open_file",
    "pass_file",
    "rc_file",
]
