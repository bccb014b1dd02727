"""Registry that indexes meta-commands and dispatches invocations."""

from __future__ import annotations

import logging
from typing import Iterable, Sequence, TextIO

from psqlsh.errors import MissingRequiredArgumentError, UnknownCommandError

from .types import SECTION_ORDER, Command, Params, Result, Section, SessionContext

LOG = logging.getLogger(__name__)


def split_desc(desc: str) -> tuple[str, str]:
    """Split ``text,ARGS`` into its description and argument synopsis."""

    text, sep, args = desc.rpartition(",")
    if not sep:
        return desc, ""
    return text, args


class CommandRegistry:
    """Immutable name and section indices over a fixed command table."""

    def __init__(self, commands: Iterable[Command]) -> None:
        self._commands: tuple[Command, ...] = tuple(commands)
        self._by_name: dict[str, Command] = {}
        self._by_section: dict[Section, list[Command]] = {section: [] for section in SECTION_ORDER}
        for command in self._commands:
            for name in command.names():
                if name in self._by_name:
                    raise ValueError(f"Meta-command name '{name}' is registered twice")
                self._by_name[name] = command
            self._by_section[command.section].append(command)

    def lookup(self, name: str) -> Command:
        try:
            return self._by_name[name]
        except KeyError:
            raise UnknownCommandError(name) from None

    def __contains__(self, name: object) -> bool:
        return name in self._by_name

    def list_commands(self) -> list[Command]:
        return list(self._commands)

    def section(self, section: Section) -> tuple[Command, ...]:
        return tuple(self._by_section[section])

    def dispatch(self, name: str, args: Sequence[str], ctx: SessionContext) -> Result:
        """Run the command registered under ``name`` with raw ``args``."""

        command = self.lookup(name)
        params = Params(ctx, name, args)
        if params.remaining < command.min_args:
            raise MissingRequiredArgumentError()
        LOG.debug("Dispatching meta-command", extra={"command": name, "kind": command.kind.value})
        command.handler(params)
        return params.result

    def listing(self, out: TextIO) -> None:
        """Write the help listing: sections in order, commands as declared."""

        lines: list[str] = []
        for section in SECTION_ORDER:
            commands = self._by_section[section]
            if not commands:
                continue
            if lines:
                lines.append("")
            lines.append(section.value)
            for command in commands:
                # Aliases without their own description share the command's line.
                names = [command.name, *(alias for alias, desc in command.aliases.items() if not desc)]
                lines.append(_usage_line(names, command.desc))
                for alias, desc in command.aliases.items():
                    if desc:
                        lines.append(_usage_line([alias], desc))
        out.write("\n".join(lines) + "\n")


def _usage_line(names: Sequence[str], desc: str) -> str:
    text, args = split_desc(desc)
    joined = ", ".join("\\" + name for name in names)
    usage = f"{joined} {args}".strip()
    return f"  {usage:<21} {text}"


__all__ = ["CommandRegistry", "split_desc"]
