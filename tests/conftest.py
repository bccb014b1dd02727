"""Shared fixtures: an in-memory database handle and a shell factory."""

from __future__ import annotations

import io
from pathlib import Path
from typing import Callable

import pytest

from psqlsh.errors import NotConnectedError
from psqlsh.models import ConnectionURL
from psqlsh.shell import Shell


class FakeDatabase:
    def __init__(self, status: str = "SELECT 1") -> None:
        self.url: ConnectionURL | None = None
        self.status = status
        self.executed: list[str] = []
        self.passwords: list[tuple[str, str]] = []
        self.shut_down = False

    def connect(self, url: ConnectionURL) -> None:
        self.url = url

    def execute(self, sql: str) -> str:
        if self.url is None:
            raise NotConnectedError()
        self.executed.append(sql)
        return self.status

    def begin(self) -> None:
        self.execute("BEGIN")

    def commit(self) -> None:
        self.execute("COMMIT")

    def rollback(self) -> None:
        self.execute("ROLLBACK")

    def change_password(self, user: str, password: str) -> None:
        if self.url is None:
            raise NotConnectedError()
        self.passwords.append((user, password))

    def shutdown(self) -> None:
        self.shut_down = True


class ShellHarness:
    def __init__(self, shell: Shell, stdout: io.StringIO, stderr: io.StringIO, database: FakeDatabase) -> None:
        self.shell = shell
        self.stdout = stdout
        self.stderr = stderr
        self.database = database

    def run(self, *lines: str) -> str:
        """Run lines and return what they printed."""

        start = len(self.stdout.getvalue())
        self.shell.run(lines)
        return self.stdout.getvalue()[start:]


@pytest.fixture(autouse=True)
def _isolated_environment(monkeypatch: pytest.MonkeyPatch) -> None:
    for name in ("PSQLSHPASS", "PSQLSHRC", "PSQLSH_HISTORY"):
        monkeypatch.delenv(name, raising=False)


@pytest.fixture
def fake_database() -> FakeDatabase:
    return FakeDatabase()


@pytest.fixture
def make_shell(tmp_path: Path) -> Callable[..., ShellHarness]:
    def _factory(
        *,
        stdin: str = "",
        interactive: bool = False,
        database: FakeDatabase | None = None,
        read_password: Callable[[str], str] | None = None,
        **kwargs: object,
    ) -> ShellHarness:
        stdout = io.StringIO()
        stderr = io.StringIO()
        database = database or FakeDatabase()
        shell = Shell(
            stdin=io.StringIO(stdin),
            stdout=stdout,
            stderr=stderr,
            interactive=interactive,
            database=database,
            read_password=read_password,
            home=tmp_path,
            **kwargs,  # type: ignore[arg-type]
        )
        return ShellHarness(shell, stdout, stderr, database)

    return _factory
