"""Blocking database handle over asyncpg used by the shell."""

from __future__ import annotations

import asyncio
import logging
import threading
from typing import Any, Coroutine, Protocol, TypeVar, runtime_checkable

import asyncpg

from .errors import DatabaseError, NotConnectedError
from .models import ConnectionURL

LOG = logging.getLogger(__name__)

T = TypeVar("T")

SUPPORTED_DRIVERS = frozenset({"postgres"})


def quote_ident(name: str) -> str:
    return '"' + name.replace('"', '""') + '"'


def quote_literal(value: str) -> str:
    return "'" + value.replace("'", "''") + "'"


@runtime_checkable
class Database(Protocol):
    """Database handle the shell drives."""

    @property
    def url(self) -> ConnectionURL | None: ...

    def connect(self, url: ConnectionURL) -> None: ...

    def execute(self, sql: str) -> str: ...

    def begin(self) -> None: ...

    def commit(self) -> None: ...

    def rollback(self) -> None: ...

    def change_password(self, user: str, password: str) -> None: ...

    def shutdown(self) -> None: ...


class AsyncpgDatabase:
    """Holds one asyncpg connection driven from a private event loop thread."""

    def __init__(self, *, connect_timeout: float = 5.0) -> None:
        self._connect_timeout = connect_timeout
        self._conn: Any | None = None
        self._url: ConnectionURL | None = None
        self._loop = asyncio.new_event_loop()
        self._loop_thread = threading.Thread(
            target=self._loop.run_forever,
            name="psqlsh-asyncpg",
            daemon=True,
        )
        self._loop_thread.start()

    @property
    def connected(self) -> bool:
        return self._conn is not None

    @property
    def url(self) -> ConnectionURL | None:
        return self._url

    def connect(self, url: ConnectionURL) -> None:
        """Open a connection, replacing any existing one."""

        if url.driver not in SUPPORTED_DRIVERS:
            raise DatabaseError(f"driver '{url.driver}' is not supported")
        if self._conn is not None:
            self.close()
        try:
            self._conn = self._run(asyncpg.connect(**self._connect_kwargs(url)))
        except Exception as exc:
            raise DatabaseError(f"failed to connect to {url.dsn()}: {exc}") from exc
        self._url = url
        LOG.debug("Connected", extra={"dsn": url.dsn()})

    def close(self) -> None:
        conn, self._conn, self._url = self._conn, None, None
        if conn is None:
            return
        try:
            self._run(conn.close())
        except Exception:  # pragma: no cover
            LOG.warning("Failed to close connection cleanly", exc_info=True)

    def execute(self, sql: str) -> str:
        """Run ``sql`` and return the server's command status."""

        conn = self._require()
        try:
            return str(self._run(conn.execute(sql)))
        except Exception as exc:
            raise DatabaseError(str(exc)) from exc

    def begin(self) -> None:
        self.execute("BEGIN")

    def commit(self) -> None:
        self.execute("COMMIT")

    def rollback(self) -> None:
        self.execute("ROLLBACK")

    def change_password(self, user: str, password: str) -> None:
        self.execute(f"ALTER ROLE {quote_ident(user)} PASSWORD {quote_literal(password)}")

    def shutdown(self) -> None:
        """Close the connection and stop the background event loop."""

        self.close()
        if not self._loop.is_running():  # pragma: no cover
            return
        self._loop.call_soon_threadsafe(self._loop.stop)
        self._loop_thread.join(timeout=1)

    def _require(self) -> Any:
        if self._conn is None:
            raise NotConnectedError()
        return self._conn

    def _run(self, coro: Coroutine[Any, Any, T]) -> T:
        future = asyncio.run_coroutine_threadsafe(coro, self._loop)
        return future.result()

    def _connect_kwargs(self, url: ConnectionURL) -> dict[str, object]:
        kwargs: dict[str, object] = {"host": url.host or "localhost"}
        if url.port:
            kwargs["port"] = int(url.port)
        if url.user:
            kwargs["user"] = url.user
        if url.password is not None:
            kwargs["password"] = url.password
        if url.database:
            kwargs["database"] = url.database
        kwargs["timeout"] = self._connect_timeout
        return kwargs


__all__ = ["AsyncpgDatabase", "Database", "SUPPORTED_DRIVERS", "quote_ident", "quote_literal"]
