"""Query buffer holding the statement being typed."""

from __future__ import annotations

import re
from dataclasses import dataclass

from .quoting import unquote
from .variables import VariableStore

# Quoted literals are matched first so references inside them are left alone.
_REFERENCE_RE = re.compile(
    r"""'(?:[^']|'')*'"""
    r'''|"(?:[^"]|"")*"'''
    r"""|(?<!:):(?:'[A-Za-z_]\w*'|"[A-Za-z_]\w*"|[A-Za-z_]\w*)"""
)
_LITERAL_RE = re.compile(r"""'(?:[^']|'')*'|"(?:[^"]|"")*"|--[^\n]*""")


def interpolate(text: str, variables: VariableStore) -> str:
    """Substitute ``:name``, ``:'name'`` and ``:"name"`` references in SQL text."""

    def _replace(match: re.Match[str]) -> str:
        token = match.group(0)
        if not token.startswith(":"):
            return token
        return unquote(token, variables)

    return _REFERENCE_RE.sub(_replace, text)


def is_terminated(text: str) -> bool:
    """True when ``text`` ends with a ``;`` outside quotes and comments."""

    return _LITERAL_RE.sub("", text).rstrip().endswith(";")


@dataclass(frozen=True, slots=True)
class Statement:
    """A completed statement in raw and interpolated form."""

    raw: str
    text: str


class QueryBuffer:
    """Accumulates input lines until a statement is complete."""

    def __init__(self, variables: VariableStore) -> None:
        self._variables = variables
        self._lines: list[str] = []

    @property
    def is_empty(self) -> bool:
        return not self._lines

    def append(self, line: str) -> None:
        self._lines.append(line.rstrip("\n"))

    def raw(self) -> str:
        return "\n".join(self._lines)

    def text(self) -> str:
        return interpolate(self.raw(), self._variables)

    @property
    def ready(self) -> bool:
        return bool(self._lines) and is_terminated(self.raw())

    def reset(self, lines: list[str] | None = None) -> None:
        self._lines = list(lines or [])

    def pop(self) -> Statement:
        """Return the buffered statement and clear the buffer."""

        statement = Statement(raw=self.raw(), text=self.text())
        self._lines.clear()
        return statement


__all__ = ["QueryBuffer", "Statement", "interpolate", "is_terminated"]
