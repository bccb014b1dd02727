"""Built-in meta-commands."""

from __future__ import annotations

import logging

from psqlsh import COMMAND_NAME, __version__
from psqlsh.errors import (
    MissingRequiredArgumentError,
    NotConnectedError,
    PasswordChangeFailedError,
    PasswordNotSupportedByDriverError,
    ShellError,
)
from psqlsh.highlight import HighlightError
from psqlsh.variables import valid_identifier

from .registry import CommandRegistry
from .types import Command, CommandKind, Params, Section

LOG = logging.getLogger(__name__)

COPYRIGHT = (
    f"{COMMAND_NAME} {__version__}, an interactive shell for PostgreSQL.\n"
    "Distributed under the MIT license. This software comes with no warranty."
)
NOT_CONNECTED = "Not connected."
CONN_INFO = "Connected with driver {driver} ({dsn})"
QUERY_BUFFER_EMPTY = "Query buffer is empty."
QUERY_BUFFER_RESET = "Query buffer reset (cleared)."
SYNTAX_HL_VAR = "SYNTAX_HL"

# Single-letter \pset shortcuts: alias -> (field, discriminator).
PSET_ALIASES: dict[str, tuple[str, str]] = {
    "a": ("format", ""),
    "C": ("title", ""),
    "f": ("fieldsep", ""),
    "H": ("format", "html"),
    "T": ("tableattr", ""),
    "t": ("tuples_only", ""),
    "x": ("expanded", ""),
}


def _write(params: Params, text: str = "", end: str = "\n") -> None:
    params.handler.stdout.write(text + end)


def _quit(params: Params) -> None:
    params.result.quit = True


def _copyright(params: Params) -> None:
    _write(params, COPYRIGHT)
    _write(params)


def _help(params: Params) -> None:
    params.ctx.registry.listing(params.handler.stdout)


def _print(params: Params) -> None:
    handler = params.handler
    raw = params.name == "raw"
    text = handler.last_raw() if raw else handler.last()
    if not handler.buffer.is_empty:
        text = handler.buffer.raw() if raw else handler.buffer.text()
    if not text:
        text = QUERY_BUFFER_EMPTY
    elif handler.interactive and params.ctx.variables.get(SYNTAX_HL_VAR) == "true":
        try:
            text = handler.highlight(text)
        except HighlightError as exc:
            LOG.debug("Highlighting failed, printing plain text", extra={"error": str(exc)})
    _write(params, text)


def _reset(params: Params) -> None:
    params.handler.reset()
    _write(params, QUERY_BUFFER_RESET)


def _echo(params: Params) -> None:
    end = "\n"
    if params.peek() == "-n":
        params.get()
        end = ""
    _write(params, " ".join(params.get_all()), end=end)


def _include(params: Params) -> None:
    relative = params.name in {"ir", "include_relative"}
    params.handler.include(params.get(), relative)


def _transact(params: Params) -> None:
    handler = params.handler
    actions = {
        "begin": handler.begin,
        "commit": handler.commit,
        "rollback": handler.rollback,
    }
    actions[params.name]()


def _conninfo(params: Params) -> None:
    url = params.handler.url()
    if url is None:
        _write(params, NOT_CONNECTED)
        return
    _write(params, CONN_INFO.format(driver=url.driver, dsn=url.dsn()))


def _password(params: Params) -> None:
    user = params.get()
    try:
        params.handler.change_password(user)
    except (NotConnectedError, PasswordNotSupportedByDriverError):
        raise
    except ShellError as exc:
        raise PasswordChangeFailedError(user or _current_user(params), exc) from exc


def _current_user(params: Params) -> str:
    url = params.handler.url()
    return url.username if url is not None else ""


def _prompt(params: Params) -> None:
    typ = params.get_optional("string")
    name = params.get()
    if not name:
        raise MissingRequiredArgumentError()
    valid_identifier(name)
    value = params.handler.read_var(typ, " ".join(params.get_all()))
    params.ctx.variables.set(name, value)


def _set(params: Params) -> None:
    variables = params.ctx.variables
    if params.remaining == 0:
        values = variables.all()
        for name in sorted(values):
            _write(params, f"{name} = '{values[name]}'")
        return
    name = params.get()
    variables.set(name, "".join(params.get_all()))


def _unset(params: Params) -> None:
    params.ctx.variables.unset(params.get())


def _pset(params: Params) -> None:
    formats = params.ctx.formats
    if params.name == "pset" and params.remaining == 0:
        for line in formats.listing():
            _write(params, line)
        return

    if params.name == "pset":
        field, extra = params.get(), ""
    else:
        field, extra = PSET_ALIASES[params.name]

    if params.remaining == 0:
        value = formats.toggle(field, extra)
    else:
        value = formats.set(field, params.get())
    _write(params, formats.status_line(field, value))


COMMANDS: tuple[Command, ...] = (
    Command(
        kind=CommandKind.QUIT,
        section=Section.GENERAL,
        name="q",
        desc=f"quit {COMMAND_NAME}",
        handler=_quit,
        aliases={"quit": ""},
    ),
    Command(
        kind=CommandKind.COPYRIGHT,
        section=Section.GENERAL,
        name="copyright",
        desc=f"show {COMMAND_NAME} usage and distribution terms",
        handler=_copyright,
    ),
    Command(
        kind=CommandKind.HELP,
        section=Section.HELP,
        name="?",
        desc="show help on backslash commands",
        handler=_help,
    ),
    Command(
        kind=CommandKind.PRINT,
        section=Section.QUERY_BUFFER,
        name="p",
        desc="show the contents of the query buffer",
        handler=_print,
        aliases={
            "print": "",
            "raw": "show the raw (non-interpolated) contents of the query buffer",
        },
    ),
    Command(
        kind=CommandKind.RESET,
        section=Section.QUERY_BUFFER,
        name="r",
        desc="reset (clear) the query buffer",
        handler=_reset,
        aliases={"reset": ""},
    ),
    Command(
        kind=CommandKind.ECHO,
        section=Section.INPUT_OUTPUT,
        name="echo",
        desc="write string to standard output (-n for no newline),[-n] [STRING]",
        handler=_echo,
    ),
    Command(
        kind=CommandKind.INCLUDE,
        section=Section.INPUT_OUTPUT,
        name="i",
        desc="execute commands from file,FILE",
        handler=_include,
        min_args=1,
        aliases={
            "include": "",
            "ir": "as \\i, but relative to location of current script,FILE",
            "include_relative": "as \\i, but relative to location of current script,FILE",
        },
    ),
    Command(
        kind=CommandKind.PSET,
        section=Section.FORMATTING,
        name="pset",
        desc="set table output option,[NAME [VALUE]]",
        handler=_pset,
        aliases={
            "a": "toggle between unaligned and aligned output mode",
            "C": "set table title, or unset if none,[STRING]",
            "f": "show or set field separator for unaligned query output,[STRING]",
            "H": "toggle HTML output mode",
            "T": "set HTML <table> tag attributes, or unset if none,[STRING]",
            "t": "show only rows,[on|off]",
            "x": "toggle expanded output,[on|off|auto]",
        },
    ),
    Command(
        kind=CommandKind.TRANSACT,
        section=Section.TRANSACTION,
        name="begin",
        desc="begin a transaction",
        handler=_transact,
        aliases={
            "commit": "commit current transaction",
            "rollback": "rollback (abort) current transaction",
        },
    ),
    Command(
        kind=CommandKind.CONNINFO,
        section=Section.CONNECTION,
        name="conninfo",
        desc="display information about the current database connection",
        handler=_conninfo,
    ),
    Command(
        kind=CommandKind.PASSWORD,
        section=Section.CONNECTION,
        name="password",
        desc="change the password for a user,[USERNAME]",
        handler=_password,
        aliases={"passwd": ""},
    ),
    Command(
        kind=CommandKind.PROMPT,
        section=Section.VARIABLES,
        name="prompt",
        desc="prompt user to set variable,[-TYPE] <VAR> [PROMPT]",
        handler=_prompt,
        min_args=1,
    ),
    Command(
        kind=CommandKind.SET,
        section=Section.VARIABLES,
        name="set",
        desc="set internal variable, or list all if no parameters,[NAME [VALUE]]",
        handler=_set,
    ),
    Command(
        kind=CommandKind.UNSET,
        section=Section.VARIABLES,
        name="unset",
        desc="unset (delete) internal variable,NAME",
        handler=_unset,
        min_args=1,
    ),
)


def build_registry() -> CommandRegistry:
    """Build the registry of built-in meta-commands."""

    return CommandRegistry(COMMANDS)


__all__ = ["COMMANDS", "PSET_ALIASES", "build_registry"]
