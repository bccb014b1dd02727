"""Shared dataclasses: connection URLs and resolved credentials."""

from __future__ import annotations

from dataclasses import dataclass, replace
from typing import Mapping
from urllib.parse import unquote as url_unquote
from urllib.parse import urlsplit

from .errors import InvalidConnectionURLError

DRIVER_ALIASES: Mapping[str, str] = {
    "pg": "postgres",
    "pgsql": "postgres",
    "postgres": "postgres",
    "postgresql": "postgres",
    "my": "mysql",
    "mariadb": "mysql",
    "mysql": "mysql",
    "ms": "sqlserver",
    "mssql": "sqlserver",
    "sqlserver": "sqlserver",
    "sq": "sqlite3",
    "sqlite": "sqlite3",
    "sqlite3": "sqlite3",
    "file": "sqlite3",
}

DEFAULT_PORTS: Mapping[str, str] = {
    "postgres": "5432",
    "mysql": "3306",
    "sqlserver": "1433",
}

MIN_IDENTITY_COMPONENTS = 3


@dataclass(frozen=True, slots=True)
class Credential:
    """Username/password pair resolved for a connection."""

    username: str
    password: str


@dataclass(frozen=True, slots=True)
class ConnectionURL:
    """Parsed database URL such as ``postgres://user@host/dbname``."""

    driver: str
    host: str = ""
    port: str = ""
    database: str = ""
    user: str | None = None
    password: str | None = None
    scheme: str = ""

    @classmethod
    def parse(cls, url: str) -> ConnectionURL:
        """Parse ``url``, normalizing driver aliases and default ports."""

        if ":" not in url:
            raise InvalidConnectionURLError(f"invalid database url '{url}'")
        parts = urlsplit(url)
        scheme = parts.scheme.lower()
        driver = DRIVER_ALIASES.get(scheme.split("+", 1)[0])
        if driver is None:
            raise InvalidConnectionURLError(f"unknown database scheme '{parts.scheme}'")
        if driver == "sqlite3":
            database = parts.netloc + parts.path if parts.netloc else parts.path
            return cls(driver=driver, database=url_unquote(database), scheme=scheme)
        try:
            port = parts.port
        except ValueError as exc:
            raise InvalidConnectionURLError(f"invalid port in database url '{url}'") from exc
        user = url_unquote(parts.username) if parts.username is not None else None
        password = url_unquote(parts.password) if parts.password is not None else None
        return cls(
            driver=driver,
            host=parts.hostname or "",
            port=str(port) if port is not None else DEFAULT_PORTS.get(driver, ""),
            database=url_unquote(parts.path.lstrip("/")),
            user=user,
            password=password,
            scheme=scheme,
        )

    @property
    def has_password(self) -> bool:
        return self.password is not None

    @property
    def username(self) -> str:
        return self.user or ""

    def identity(self) -> tuple[str, ...]:
        """Ordered components used to match password file entries."""

        components = [self.driver, self.host, self.port, self.database]
        while len(components) > MIN_IDENTITY_COMPONENTS and not components[-1]:
            components.pop()
        return tuple(components)

    def with_credential(self, credential: Credential) -> ConnectionURL:
        return replace(self, user=credential.username, password=credential.password)

    def dsn(self) -> str:
        """Human readable form with the password masked."""

        if self.driver == "sqlite3":
            return self.database
        userinfo = ""
        if self.user:
            userinfo = self.user + (":***" if self.password else "") + "@"
        hostport = self.host + (f":{self.port}" if self.port else "")
        return f"{self.driver}://{userinfo}{hostport}/{self.database}"


__all__ = ["ConnectionURL", "Credential", "DEFAULT_PORTS", "DRIVER_ALIASES"]
