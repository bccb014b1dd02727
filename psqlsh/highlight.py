"""ANSI syntax highlighting for SQL, built on the sqlglot tokenizer."""

from __future__ import annotations

from typing import Mapping

from sqlglot.dialects.dialect import Dialect
from sqlglot.errors import SqlglotError
from sqlglot.tokens import Token, TokenType

from .errors import ShellError

RESET = "\x1b[0m"

DEFAULT_STYLES: Mapping[str, str] = {
    "keyword": "\x1b[1;34m",
    "string": "\x1b[32m",
    "number": "\x1b[36m",
}

_STRING_TYPES = frozenset({TokenType.STRING, TokenType.NATIONAL_STRING, TokenType.BIT_STRING, TokenType.HEX_STRING})
_PLAIN_TYPES = frozenset({TokenType.VAR, TokenType.IDENTIFIER, TokenType.PARAMETER, TokenType.PLACEHOLDER})


class HighlightError(ShellError):
    """Raised when a statement cannot be tokenized for highlighting."""


class SqlHighlighter:
    """Colors keywords, literals and numbers while keeping the text intact."""

    def __init__(self, dialect: str = "postgres", styles: Mapping[str, str] | None = None) -> None:
        self._dialect = Dialect.get_or_raise(dialect)
        self._styles = dict(styles or DEFAULT_STYLES)

    def highlight(self, sql: str) -> str:
        try:
            tokens = self._dialect.tokenize(sql)
        except SqlglotError as exc:
            raise HighlightError(str(exc)) from exc
        parts: list[str] = []
        position = 0
        for token in tokens:
            start, end = token.start, token.end + 1
            if start < position or end > len(sql):
                continue
            parts.append(sql[position:start])
            parts.append(self._paint(token, sql[start:end]))
            position = end
        parts.append(sql[position:])
        return "".join(parts)

    def _paint(self, token: Token, text: str) -> str:
        style = self._styles.get(self._category(token), "")
        if not style:
            return text
        return f"{style}{text}{RESET}"

    @staticmethod
    def _category(token: Token) -> str:
        if token.token_type in _STRING_TYPES:
            return "string"
        if token.token_type is TokenType.NUMBER:
            return "number"
        if token.token_type in _PLAIN_TYPES:
            return ""
        if token.text[:1].isalpha():
            return "keyword"
        return ""


__all__ = ["HighlightError", "SqlHighlighter"]
