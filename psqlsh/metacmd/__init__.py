"""Meta-command registry exports."""

from .commands import COMMANDS, build_registry
from .registry import CommandRegistry
from .types import (
    Command,
    CommandKind,
    Handler,
    Params,
    Result,
    SECTION_ORDER,
    Section,
    SessionContext,
)

__all__ = [
    "COMMANDS",
    "Command",
    "CommandKind",
    "CommandRegistry",
    "Handler",
    "Params",
    "Result",
    "SECTION_ORDER",
    "Section",
    "SessionContext",
    "build_registry",
]
