"""Output format options driven by \\pset and its single-letter shortcuts."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Iterator, Mapping

from .errors import InvalidFormatValueError, UnknownFormatFieldError


class FieldKind(str, Enum):
    """Value domain of a format option."""

    BOOL = "bool"
    CHOICE = "choice"
    INT = "int"
    TEXT = "text"


class Toggle(str, Enum):
    """What a value-less \\pset does to a field."""

    NONE = "none"
    FLIP = "flip"
    FORMAT = "format"
    CLEAR = "clear"


class QuoteMode(str, Enum):
    """When a value is ASCII-quoted for display."""

    NEVER = "never"
    ALWAYS = "always"
    NON_EMPTY = "non_empty"


BOOL_TOKENS: Mapping[str, str] = {
    "on": "on",
    "true": "on",
    "t": "on",
    "yes": "on",
    "y": "on",
    "1": "on",
    "off": "off",
    "false": "off",
    "f": "off",
    "no": "off",
    "n": "off",
    "0": "off",
}

AUTO = "auto"


@dataclass(frozen=True, slots=True)
class FormatField:
    """Descriptor for one format option."""

    name: str
    default: str
    kind: FieldKind
    template: str
    choices: tuple[str, ...] = ()
    toggle: Toggle = Toggle.NONE
    minimum: int = 0
    maximum: int | None = None
    unset_template: str | None = None
    quote: QuoteMode = QuoteMode.NEVER

    def allowed(self) -> str:
        if self.kind is FieldKind.BOOL:
            return ", ".join(("on", "off", *self.choices))
        if self.kind is FieldKind.CHOICE:
            return ", ".join(self.choices)
        if self.kind is FieldKind.INT:
            upper = "" if self.maximum is None else str(self.maximum)
            return f"integer {self.minimum}..{upper}"
        return "any string"


FIELDS: tuple[FormatField, ...] = (
    FormatField("border", "1", FieldKind.INT, "Border style is %d.", maximum=2),
    FormatField("columns", "0", FieldKind.INT, "Target width is %d."),
    FormatField("csv_fieldsep", ",", FieldKind.TEXT, 'Field separator for CSV is "%s".'),
    FormatField("expanded", "off", FieldKind.BOOL, "Expanded display is %s.", choices=(AUTO,), toggle=Toggle.FLIP),
    FormatField("fieldsep", "|", FieldKind.TEXT, "Field separator is %s.", quote=QuoteMode.ALWAYS),
    FormatField("fieldsep_zero", "off", FieldKind.BOOL, "Field separator zero byte is %s.", toggle=Toggle.FLIP),
    FormatField("footer", "on", FieldKind.BOOL, "Default footer is %s.", toggle=Toggle.FLIP),
    FormatField(
        "format",
        "aligned",
        FieldKind.CHOICE,
        "Output format is %s.",
        choices=(
            "aligned",
            "asciidoc",
            "csv",
            "html",
            "json",
            "latex",
            "latex-longtable",
            "troff-ms",
            "unaligned",
            "vertical",
            "wrapped",
        ),
        toggle=Toggle.FORMAT,
    ),
    FormatField("linestyle", "ascii", FieldKind.CHOICE, "Line style is %s.", choices=("ascii", "old-ascii", "unicode")),
    FormatField("locale", "en-US", FieldKind.TEXT, 'Locale is "%s".'),
    FormatField("null", "", FieldKind.TEXT, "Null display is %s.", quote=QuoteMode.ALWAYS),
    FormatField("numericlocale", "off", FieldKind.BOOL, "Locale-adjusted numeric output is %s.", toggle=Toggle.FLIP),
    FormatField("pager", "off", FieldKind.BOOL, "Pager usage is %s.", choices=("always",), toggle=Toggle.FLIP),
    FormatField("pager_min_lines", "0", FieldKind.INT, "Pager won't be used for less than %d line(s)."),
    FormatField("recordsep", "\n", FieldKind.TEXT, "Record separator is %s.", quote=QuoteMode.ALWAYS),
    FormatField("recordsep_zero", "off", FieldKind.BOOL, "Record separator zero byte is %s.", toggle=Toggle.FLIP),
    FormatField(
        "tableattr",
        "",
        FieldKind.TEXT,
        "Table attributes are %s.",
        toggle=Toggle.CLEAR,
        unset_template="Table attributes unset.",
        quote=QuoteMode.NON_EMPTY,
    ),
    FormatField("time", "RFC3339Nano", FieldKind.TEXT, 'Time display is "%s".'),
    FormatField(
        "title",
        "",
        FieldKind.TEXT,
        "Title is %s.",
        toggle=Toggle.CLEAR,
        unset_template="Title is unset.",
        quote=QuoteMode.NON_EMPTY,
    ),
    FormatField("tuples_only", "off", FieldKind.BOOL, "Tuples only is %s.", toggle=Toggle.FLIP),
    FormatField(
        "unicode_border_linestyle",
        "single",
        FieldKind.CHOICE,
        "Unicode border line style is %s.",
        choices=("single", "double"),
    ),
    FormatField(
        "unicode_column_linestyle",
        "single",
        FieldKind.CHOICE,
        "Unicode column line style is %s.",
        choices=("single", "double"),
    ),
    FormatField(
        "unicode_header_linestyle",
        "single",
        FieldKind.CHOICE,
        "Unicode header line style is %s.",
        choices=("single", "double"),
    ),
)

# Status templates keyed by display name; "<field>_auto" is used when the value is "auto".
TEMPLATES: Mapping[str, str] = {
    **{field.name: field.template for field in FIELDS},
    "expanded_auto": "Expanded display is used automatically.",
}


_ESCAPES: Mapping[str, str] = {
    '"': '\\"',
    "\\": "\\\\",
    "\a": "\\a",
    "\b": "\\b",
    "\f": "\\f",
    "\n": "\\n",
    "\r": "\\r",
    "\t": "\\t",
    "\v": "\\v",
}


def quote_ascii(value: str) -> str:
    """Double-quote ``value`` with Go-style escapes, leaving only printable ASCII.

    Other control bytes become ``\\xNN``, code points in the BMP ``\\uNNNN``
    and anything above it ``\\UNNNNNNNN``.
    """

    parts = ['"']
    for char in value:
        code = ord(char)
        if char in _ESCAPES:
            parts.append(_ESCAPES[char])
        elif 0x20 <= code < 0x7F:
            parts.append(char)
        elif code < 0x20 or code == 0x7F:
            parts.append(f"\\x{code:02x}")
        elif code < 0x10000:
            parts.append(f"\\u{code:04x}")
        else:
            parts.append(f"\\U{code:08x}")
    parts.append('"')
    return "".join(parts)


class FormatOptions:
    """Current format option values with validation and toggle rules."""

    def __init__(self, fields: tuple[FormatField, ...] = FIELDS) -> None:
        self._fields: dict[str, FormatField] = {field.name: field for field in fields}
        self._values: dict[str, str] = {field.name: field.default for field in fields}

    def field(self, name: str) -> FormatField:
        try:
            return self._fields[name]
        except KeyError:
            raise UnknownFormatFieldError(name) from None

    def get(self, name: str) -> str:
        self.field(name)
        return self._values[name]

    def all(self) -> dict[str, str]:
        return dict(self._values)

    def set(self, name: str, raw: str) -> str:
        """Validate and store ``raw`` for ``name``; returns the stored value."""

        field = self.field(name)
        value = self._validate(field, raw)
        self._values[name] = value
        return value

    def toggle(self, name: str, extra: str = "") -> str:
        """Apply the field's value-less behavior; returns the resulting value."""

        field = self.field(name)
        current = self._values[name]
        if field.toggle is Toggle.FLIP:
            value = "on" if current == "off" else "off"
        elif field.toggle is Toggle.FORMAT:
            target = extra or "unaligned"
            value = target if current != target else "aligned"
        elif field.toggle is Toggle.CLEAR:
            value = ""
        else:
            value = current
        self._values[name] = value
        return value

    def display_value(self, name: str, value: str) -> str:
        field = self.field(name)
        if field.quote is QuoteMode.ALWAYS or (field.quote is QuoteMode.NON_EMPTY and value):
            return quote_ascii(value)
        return value

    def status_line(self, name: str, value: str) -> str:
        """Render the message shown after \\pset changes or shows a field."""

        field = self.field(name)
        key = f"{name}_auto"
        if value != AUTO or key not in TEMPLATES:
            key = name
        template = TEMPLATES[key]
        if "%d" in template:
            try:
                number = int(value)
            except ValueError:
                number = 0
            return template % number
        if field.unset_template and value == "":
            return field.unset_template
        if "%" not in template:
            return template
        return template % self.display_value(name, value)

    def listing(self) -> Iterator[str]:
        """Yield ``name value`` lines for every option, sorted by name."""

        names = sorted(self._values)
        width = max((len(name) for name in names), default=0)
        for name in names:
            yield f"{name.ljust(width)} {self.display_value(name, self._values[name])}"

    @staticmethod
    def _validate(field: FormatField, raw: str) -> str:
        if field.kind is FieldKind.TEXT:
            return raw
        token = raw.strip().lower()
        if field.kind is FieldKind.BOOL:
            if token in field.choices:
                return token
            if token in BOOL_TOKENS:
                return BOOL_TOKENS[token]
        elif field.kind is FieldKind.CHOICE:
            if token in field.choices:
                return token
        elif field.kind is FieldKind.INT:
            try:
                number = int(token)
            except ValueError:
                number = None
            if number is not None and number >= field.minimum and (field.maximum is None or number <= field.maximum):
                return str(number)
        raise InvalidFormatValueError(field.name, raw, field.allowed())


__all__ = [
    "AUTO",
    "FIELDS",
    "FieldKind",
    "FormatField",
    "FormatOptions",
    "QuoteMode",
    "TEMPLATES",
    "Toggle",
    "quote_ascii",
]
