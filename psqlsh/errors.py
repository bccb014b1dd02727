"""Error types surfaced by meta-commands, variables, and credential lookups."""

from __future__ import annotations

from pathlib import Path


class ShellError(RuntimeError):
    """Base error for anything the REPL reports back to the user."""


class UnterminatedStringError(ShellError):
    """Raised when a quoted argument is missing its closing quote."""

    def __init__(self) -> None:
        super().__init__("unterminated quoted string")


class MissingRequiredArgumentError(ShellError):
    """Raised when a meta-command is invoked without enough arguments."""

    def __init__(self) -> None:
        super().__init__("missing required argument")


class UnknownCommandError(ShellError):
    """Raised when dispatching a name that is not in the registry."""

    def __init__(self, name: str) -> None:
        super().__init__(f"invalid command \\{name}")
        self.name = name


class InvalidIdentifierError(ShellError):
    """Raised when a variable name does not satisfy the identifier grammar."""

    def __init__(self, name: str) -> None:
        super().__init__(f"invalid identifier '{name}'")
        self.name = name


class InvalidVariableTypeError(ShellError):
    """Raised when \\prompt is given an unknown -TYPE or a value of the wrong type."""


class UnknownFormatFieldError(ShellError):
    """Raised for unrecognized format option names."""

    def __init__(self, field: str) -> None:
        super().__init__(f"\\pset: unknown option: {field}")
        self.field = field


class InvalidFormatValueError(ShellError):
    """Raised when a format option value is outside the field's domain."""

    def __init__(self, field: str, value: str, allowed: str) -> None:
        super().__init__(f"\\pset: invalid value '{value}' for {field}, allowed values: {allowed}")
        self.field = field
        self.value = value


class PassFileError(ShellError):
    """Raised when the secrets file cannot be used."""

    def __init__(self, path: Path | str, message: str | None = None) -> None:
        super().__init__(message or f"bad pass file {path}")
        self.path = Path(path)


class PassFileModeError(PassFileError):
    """Raised when the secrets file is accessible by group or other."""

    def __init__(self, path: Path | str) -> None:
        super().__init__(
            path,
            f"bad pass file {path}: permissions must deny group and other access (chmod 0600)",
        )


class PassFileLineError(PassFileError):
    """Raised when a secrets file line does not have exactly six fields."""

    def __init__(self, path: Path | str, line_no: int) -> None:
        super().__init__(path, f"bad pass file {path}: line {line_no} must have 6 fields")
        self.line_no = line_no


class PassFileFieldEmptyError(PassFileError):
    """Raised when a secrets file line contains an empty field."""

    def __init__(self, path: Path | str, line_no: int, field: int) -> None:
        super().__init__(path, f"bad pass file {path}: line {line_no}, field {field} is empty")
        self.line_no = line_no
        self.field = field


class PassFileEncodingError(PassFileError):
    """Raised when a secrets file line is not valid UTF-8."""

    def __init__(self, path: Path | str, line_no: int) -> None:
        super().__init__(path, f"bad pass file {path}: line {line_no} is not valid UTF-8")
        self.line_no = line_no


class NoSuchFileOrDirectoryError(ShellError):
    """Raised when an included path does not exist."""

    def __init__(self, path: Path | str) -> None:
        super().__init__(f"{path}: no such file or directory")
        self.path = Path(path)


class CannotIncludeDirectoriesError(ShellError):
    """Raised when an included path is a directory."""

    def __init__(self, path: Path | str) -> None:
        super().__init__(f"{path}: cannot include directories")
        self.path = Path(path)


class InvalidFileEncodingError(ShellError):
    """Raised when an included file is not valid UTF-8 text."""

    def __init__(self, path: Path | str) -> None:
        super().__init__(f"{path}: not valid UTF-8 text")
        self.path = Path(path)


class InvalidConnectionURLError(ShellError):
    """Raised when a connection URL cannot be parsed."""


class NotConnectedError(ShellError):
    """Raised when an action requires an open database connection."""

    def __init__(self) -> None:
        super().__init__("not connected")


class PasswordNotSupportedByDriverError(ShellError):
    """Raised when the active driver cannot change passwords."""

    def __init__(self, driver: str = "") -> None:
        suffix = f" ({driver})" if driver else ""
        super().__init__(f"\\password is not supported by the driver{suffix}")
        self.driver = driver


class PasswordChangeFailedError(ShellError):
    """Wraps a driver failure while changing a user's password."""

    def __init__(self, user: str, cause: Exception | str) -> None:
        super().__init__(f"\\password for '{user}' failed: {cause}")
        self.user = user


class DatabaseError(ShellError):
    """Raised when the database driver reports a failure."""


__all__ = [
    "CannotIncludeDirectoriesError",
    "DatabaseError",
    "InvalidConnectionURLError",
    "InvalidFileEncodingError",
    "InvalidFormatValueError",
    "InvalidIdentifierError",
    "InvalidVariableTypeError",
    "MissingRequiredArgumentError",
    "NoSuchFileOrDirectoryError",
    "NotConnectedError",
    "PassFileEncodingError",
    "PassFileError",
    "PassFileFieldEmptyError",
    "PassFileLineError",
    "PassFileModeError",
    "PasswordChangeFailedError",
    "PasswordNotSupportedByDriverError",
    "ShellError",
    "UnknownCommandError",
    "UnknownFormatFieldError",
    "UnterminatedStringError",
]
