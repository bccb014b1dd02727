"""Session variable store backing \\set, \\unset and :name references."""

from __future__ import annotations

import re
from typing import Iterator, Mapping

from .errors import InvalidIdentifierError

IDENTIFIER_RE = re.compile(r"^[A-Za-z_][A-Za-z0-9_]*$")


def valid_identifier(name: str) -> None:
    """Raise InvalidIdentifierError unless ``name`` is a valid variable name."""

    if not IDENTIFIER_RE.match(name):
        raise InvalidIdentifierError(name)


class VariableStore:
    """Mutable name -> value mapping scoped to one interactive session."""

    def __init__(self, initial: Mapping[str, str] | None = None) -> None:
        self._vars: dict[str, str] = {}
        for name, value in (initial or {}).items():
            self.set(name, value)

    def set(self, name: str, value: str) -> None:
        valid_identifier(name)
        self._vars[name] = value

    def unset(self, name: str) -> None:
        valid_identifier(name)
        self._vars.pop(name, None)

    def get(self, name: str) -> str | None:
        return self._vars.get(name)

    def all(self) -> dict[str, str]:
        """Return a snapshot copy of every variable."""

        return dict(self._vars)

    def __contains__(self, name: object) -> bool:
        return name in self._vars

    def __iter__(self) -> Iterator[str]:
        return iter(tuple(self._vars))

    def __len__(self) -> int:
        return len(self._vars)


__all__ = ["IDENTIFIER_RE", "VariableStore", "valid_identifier"]
