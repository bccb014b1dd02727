"""Interactive shell: the concrete handler behind meta-commands and the input loop."""

from __future__ import annotations

import getpass
import logging
import sys
from pathlib import Path
from typing import Callable, Iterable, TextIO

from . import COMMAND_NAME, env
from .buffer import QueryBuffer, Statement
from .config import ShellConfig
from .database import SUPPORTED_DRIVERS, AsyncpgDatabase, Database
from .errors import (
    InvalidFileEncodingError,
    InvalidVariableTypeError,
    NotConnectedError,
    PasswordNotSupportedByDriverError,
    ShellError,
)
from .formatting import BOOL_TOKENS, FormatOptions
from .highlight import SqlHighlighter
from .metacmd import CommandRegistry, Result, SessionContext, build_registry
from .models import ConnectionURL
from .passfile import resolve_credential
from .variables import VariableStore

LOG = logging.getLogger(__name__)

PROMPT = f"{COMMAND_NAME}=> "
CONTINUATION_PROMPT = f"{COMMAND_NAME}-> "
QUOTES = ("'", '"')


def split_command(text: str) -> tuple[str, list[str]]:
    """Split a meta-command line (without its backslash) into name and raw arguments.

    Quoted sections stay inside their token with the quotes intact so the
    resolver can decide what they mean.
    """

    tokens: list[str] = []
    current: list[str] = []
    quote = ""
    for char in text:
        if quote:
            current.append(char)
            if char == quote:
                quote = ""
        elif char in QUOTES:
            quote = char
            current.append(char)
        elif char.isspace():
            if current:
                tokens.append("".join(current))
                current = []
        else:
            current.append(char)
    if current:
        tokens.append("".join(current))
    if not tokens:
        return "", []
    return tokens[0], tokens[1:]


def _parse_bool(value: str) -> str:
    token = BOOL_TOKENS.get(value.strip().lower())
    if token is None:
        raise ValueError(value)
    return "true" if token == "on" else "false"


def _parse_uint(value: str) -> str:
    number = int(value)
    if number < 0:
        raise ValueError(value)
    return str(number)


VAR_TYPES: dict[str, Callable[[str], str]] = {
    "string": lambda value: value,
    "int": lambda value: str(int(value)),
    "uint": _parse_uint,
    "float": lambda value: str(float(value)),
    "bool": _parse_bool,
}


class Shell:
    """Reads input, dispatches meta-commands and feeds SQL to the database handle."""

    def __init__(
        self,
        *,
        config: ShellConfig | None = None,
        stdin: TextIO | None = None,
        stdout: TextIO | None = None,
        stderr: TextIO | None = None,
        interactive: bool | None = None,
        database: Database | None = None,
        highlighter: SqlHighlighter | None = None,
        registry: CommandRegistry | None = None,
        read_password: Callable[[str], str] | None = None,
        home: Path | None = None,
    ) -> None:
        self._config = config or ShellConfig()
        self._stdin = stdin or sys.stdin
        self._stdout = stdout or sys.stdout
        self._stderr = stderr or sys.stderr
        self._interactive = self._stdin.isatty() if interactive is None else interactive
        self._db = database or AsyncpgDatabase(connect_timeout=self._config.connect_timeout)
        self._highlighter = highlighter or SqlHighlighter()
        self._read_password = read_password or getpass.getpass
        self._home = home
        self.variables = VariableStore(self._config.variables)
        self.formats = FormatOptions()
        for name, value in self._config.pset.items():
            try:
                self.formats.set(name, value)
            except ShellError as exc:
                LOG.warning("Ignoring configured format option", extra={"option": name, "error": str(exc)})
        self._buffer = QueryBuffer(self.variables)
        self._last = Statement(raw="", text="")
        self._include_stack: list[Path] = []
        self._quit = False
        self.error_count = 0
        self.ctx = SessionContext(
            handler=self,
            variables=self.variables,
            formats=self.formats,
            registry=registry or build_registry(),
        )

    @property
    def stdout(self) -> TextIO:
        return self._stdout

    @property
    def interactive(self) -> bool:
        return self._interactive

    @property
    def buffer(self) -> QueryBuffer:
        return self._buffer

    @property
    def quit_requested(self) -> bool:
        return self._quit

    def url(self) -> ConnectionURL | None:
        return self._db.url

    def last(self) -> str:
        return self._last.text

    def last_raw(self) -> str:
        return self._last.raw

    def highlight(self, sql: str) -> str:
        return self._highlighter.highlight(sql)

    def reset(self) -> None:
        self._buffer.reset()

    def begin(self) -> None:
        self._db.begin()

    def commit(self) -> None:
        self._db.commit()

    def rollback(self) -> None:
        self._db.rollback()

    def connect(self, url: str) -> None:
        """Connect to ``url``, filling in credentials from the password file."""

        parsed = ConnectionURL.parse(url)
        credential = resolve_credential(parsed, home=self._home)
        if credential is not None:
            parsed = parsed.with_credential(credential)
        self._db.connect(parsed)

    def change_password(self, user: str) -> str:
        url = self._db.url
        if url is None:
            raise NotConnectedError()
        if url.driver not in SUPPORTED_DRIVERS:
            raise PasswordNotSupportedByDriverError(url.driver)
        user = user or url.username
        password = self._read_password(f'Enter new password for user "{user}": ')
        confirm = self._read_password("Enter it again: ")
        if password != confirm:
            raise ShellError("passwords didn't match")
        self._db.change_password(user, password)
        return user

    def read_var(self, typ: str, prompt: str) -> str:
        parse = VAR_TYPES.get(typ)
        if parse is None:
            raise InvalidVariableTypeError(f"invalid -TYPE: {typ}")
        if prompt:
            self._stdout.write(prompt)
            self._stdout.flush()
        value = self._stdin.readline().rstrip("\r\n")
        try:
            return parse(value)
        except ValueError:
            raise InvalidVariableTypeError(f"invalid {typ} value '{value}'") from None

    def include(self, path: str, relative: bool) -> None:
        relative_to: Path | None = None
        if relative:
            relative_to = self._include_stack[-1].parent if self._include_stack else Path.cwd()
        with env.open_file(path, home=self._home, relative_to=relative_to) as (resolved, handle):
            try:
                lines = handle.readlines()
            except UnicodeDecodeError as exc:
                raise InvalidFileEncodingError(resolved) from exc
        LOG.debug("Including file", extra={"path": str(resolved), "lines": len(lines)})
        self._include_stack.append(resolved)
        try:
            self.run(lines)
        finally:
            self._include_stack.pop()

    def dispatch(self, name: str, args: list[str]) -> Result:
        result = self.ctx.registry.dispatch(name, args, self.ctx)
        if result.quit:
            self._quit = True
        return result

    def process_line(self, line: str) -> Result:
        """Handle one input line: a meta-command or part of a statement."""

        stripped = line.strip()
        if stripped.startswith("\\"):
            name, args = split_command(stripped[1:])
            return self.dispatch(name, args)
        if not stripped and self._buffer.is_empty:
            return Result()
        self._buffer.append(line)
        if self._buffer.ready:
            self._execute(self._buffer.pop())
        return Result()

    def run(self, lines: Iterable[str]) -> bool:
        """Process ``lines`` until exhausted or \\q; returns True when quitting."""

        for line in lines:
            try:
                self.process_line(line)
            except ShellError as exc:
                self.report(exc)
            if self._quit:
                return True
        return False

    def run_rc(self) -> None:
        path = env.rc_file(self._home)
        if not path.exists():
            return
        try:
            self.include(str(path), False)
        except ShellError as exc:
            self.report(exc)

    def interact(self) -> None:
        """Read from stdin until EOF or \\q."""

        while not self._quit:
            if self._interactive:
                self._stdout.write(PROMPT if self._buffer.is_empty else CONTINUATION_PROMPT)
                self._stdout.flush()
            line = self._stdin.readline()
            if not line:
                break
            self.run([line])

    def report(self, exc: Exception) -> None:
        self.error_count += 1
        self._stderr.write(f"{COMMAND_NAME}: error: {exc}\n")
        self._stderr.flush()

    def close(self) -> None:
        self._db.shutdown()

    def _execute(self, statement: Statement) -> None:
        self._last = statement
        self._record_history(statement.raw)
        status = self._db.execute(statement.text)
        self._stdout.write(status + "\n")

    def _record_history(self, raw: str) -> None:
        if not self._interactive:
            return
        path = env.history_file(self._home)
        try:
            with path.open("a", encoding="utf-8") as handle:
                handle.write(raw + "\n")
        except OSError:
            LOG.warning("Unable to write history file", extra={"path": str(path)}, exc_info=True)


__all__ = ["Shell", "VAR_TYPES", "split_command"]
