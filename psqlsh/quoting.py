"""Argument unquoting and ``:name`` variable substitution."""

from __future__ import annotations

from .errors import UnterminatedStringError
from .variables import VariableStore

QUOTES = ("'", '"')


def _strip_quotes(token: str, quote: str) -> str:
    if len(token) < 2 or token[-1] != quote:
        raise UnterminatedStringError()
    return token[1:-1]


def getvar(token: str, variables: VariableStore) -> tuple[bool, str]:
    """Look up the variable named by ``token`` (the text after the colon).

    A quoted name (``'name'`` or ``"name"``) is looked up unquoted and the
    value comes back wrapped in the same quote character. Unknown names
    return ``(False, token)``.
    """

    quote, name = "", token
    if token and token[0] in QUOTES:
        quote = token[0]
        name = _strip_quotes(token, quote)
    value = variables.get(name)
    if value is None:
        return False, token
    return True, quote + value + quote


def unquote(token: str, variables: VariableStore) -> str:
    """Resolve a raw meta-command argument to its final string value."""

    if len(token) < 2:
        return token
    first = token[0]
    if first == ":":
        found, value = getvar(token[1:], variables)
        return value if found else token
    if first in QUOTES:
        return _strip_quotes(token, first)
    return token


__all__ = ["getvar", "unquote"]
