"""Command-line entry point for psqlsh."""

from __future__ import annotations

import argparse
import logging
import sys
from typing import Sequence

from . import COMMAND_NAME, __version__
from .config import ShellConfig, load_config
from .errors import ShellError
from .shell import Shell

LOG = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog=COMMAND_NAME, description="Interactive PostgreSQL shell.")
    parser.add_argument("url", nargs="?", help="database URL, e.g. postgres://user@localhost/dbname")
    parser.add_argument(
        "-c",
        "--command",
        action="append",
        default=[],
        help="run a single command or statement and exit (repeatable)",
    )
    parser.add_argument("-f", "--file", help="execute commands from a file, then exit")
    parser.add_argument("-X", "--no-rc", action="store_true", help=f"do not read the {COMMAND_NAME}rc file")
    parser.add_argument(
        "-v",
        "--set",
        dest="variables",
        action="append",
        default=[],
        metavar="NAME=VALUE",
        help="set a session variable before startup (repeatable)",
    )
    parser.add_argument("--debug", action="store_true", help="enable debug logging")
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    return parser


def _apply_variables(config: ShellConfig, assignments: Sequence[str]) -> ShellConfig:
    updates: dict[str, str] = {}
    for assignment in assignments:
        name, _, value = assignment.partition("=")
        updates[name] = value
    return config.with_variables(**updates) if updates else config


def main(argv: Sequence[str] | None = None) -> int:
    """Run the shell and return its exit status."""

    args = build_parser().parse_args(argv)
    logging.basicConfig(level=logging.DEBUG if args.debug else logging.WARNING)
    config = _apply_variables(load_config(), args.variables)
    try:
        shell = Shell(config=config)
    except ShellError as exc:
        LOG.debug("Startup failed", exc_info=True)
        print(f"{COMMAND_NAME}: error: {exc}", file=sys.stderr)
        return 1
    try:
        if args.url:
            try:
                shell.connect(args.url)
            except ShellError as exc:
                shell.report(exc)
                return 2
        if config.rc_enabled and not args.no_rc:
            shell.run_rc()
        if args.command:
            shell.run(args.command)
        elif args.file:
            try:
                shell.include(args.file, False)
            except ShellError as exc:
                shell.report(exc)
        else:
            shell.interact()
    finally:
        shell.close()
    return 1 if shell.error_count and not shell.interactive else 0


__all__ = ["build_parser", "main"]
