"""Meta-command contract primitives shared by the registry and handlers."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import TYPE_CHECKING, Callable, Mapping, NamedTuple, Protocol, Sequence, TextIO

from psqlsh.formatting import FormatOptions
from psqlsh.models import ConnectionURL
from psqlsh.quoting import unquote
from psqlsh.variables import VariableStore

if TYPE_CHECKING:
    from psqlsh.buffer import QueryBuffer

    from .registry import CommandRegistry


class Section(str, Enum):
    """Help sections, declared in listing order."""

    GENERAL = "General"
    HELP = "Help"
    QUERY_BUFFER = "Query Buffer"
    INPUT_OUTPUT = "Input/Output"
    FORMATTING = "Formatting"
    TRANSACTION = "Transaction"
    CONNECTION = "Connection"
    VARIABLES = "Variables"


SECTION_ORDER: tuple[Section, ...] = tuple(Section)


class CommandKind(str, Enum):
    """Every meta-command the shell understands."""

    QUIT = "quit"
    COPYRIGHT = "copyright"
    HELP = "help"
    PRINT = "print"
    RESET = "reset"
    ECHO = "echo"
    INCLUDE = "include"
    PSET = "pset"
    TRANSACT = "transact"
    CONNINFO = "conninfo"
    PASSWORD = "password"
    PROMPT = "prompt"
    SET = "set"
    UNSET = "unset"


class Handler(Protocol):
    """External collaborators a command may act on."""

    @property
    def stdout(self) -> TextIO: ...

    @property
    def interactive(self) -> bool: ...

    @property
    def buffer(self) -> QueryBuffer: ...

    def url(self) -> ConnectionURL | None: ...

    def last(self) -> str: ...

    def last_raw(self) -> str: ...

    def highlight(self, sql: str) -> str: ...

    def reset(self) -> None: ...

    def begin(self) -> None: ...

    def commit(self) -> None: ...

    def rollback(self) -> None: ...

    def change_password(self, user: str) -> str: ...

    def read_var(self, typ: str, prompt: str) -> str: ...

    def include(self, path: str, relative: bool) -> None: ...


class SessionContext(NamedTuple):
    """Everything a command handler may touch."""

    handler: Handler
    variables: VariableStore
    formats: FormatOptions
    registry: CommandRegistry


@dataclass(slots=True)
class Result:
    """Outcome of a dispatched command."""

    quit: bool = False


class Params:
    """Cursor over a command's raw arguments, unquoting each as it is read."""

    def __init__(self, ctx: SessionContext, name: str, args: Sequence[str]) -> None:
        self.ctx = ctx
        self.name = name
        self.result = Result()
        self._args = tuple(args)
        self._pos = 0

    @property
    def remaining(self) -> int:
        return len(self._args) - self._pos

    @property
    def handler(self) -> Handler:
        return self.ctx.handler

    def peek(self) -> str:
        """Return the next raw argument without consuming it."""

        if self._pos >= len(self._args):
            return ""
        return self._args[self._pos]

    def get(self) -> str:
        """Return the next argument, or an empty string when exhausted."""

        if self._pos >= len(self._args):
            return ""
        token = self._args[self._pos]
        self._pos += 1
        return unquote(token, self.ctx.variables)

    def get_optional(self, default: str) -> str:
        """Consume a leading ``-flag`` argument, returning ``default`` when absent."""

        if self._pos < len(self._args):
            token = self._args[self._pos]
            if len(token) > 1 and token.startswith("-"):
                self._pos += 1
                return token[1:]
        return default

    def get_all(self) -> list[str]:
        values: list[str] = []
        while self.remaining:
            values.append(self.get())
        return values


CommandHandler = Callable[[Params], None]


@dataclass(frozen=True, slots=True)
class Command:
    """Declaration of a meta-command and its aliases.

    ``desc`` and alias descriptions use ``text,ARGS``: the part after the last
    comma is the argument synopsis shown in help. An alias with an empty
    description is not listed on its own line.
    """

    kind: CommandKind
    section: Section
    name: str
    desc: str
    handler: CommandHandler
    min_args: int = 0
    aliases: Mapping[str, str] = field(default_factory=dict)

    def names(self) -> tuple[str, ...]:
        return (self.name, *self.aliases)


__all__ = [
    "Command",
    "CommandHandler",
    "CommandKind",
    "Handler",
    "Params",
    "Result",
    "SECTION_ORDER",
    "Section",
    "SessionContext",
]
