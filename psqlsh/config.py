"""Shell configuration loading helpers."""

from __future__ import annotations

import logging
from pathlib import Path

import tomllib

from pydantic import BaseModel, Field, ValidationError

from . import COMMAND_NAME

LOG = logging.getLogger(__name__)

CONFIG_FILE = Path.home() / ".config" / COMMAND_NAME / "config.toml"


class ShellConfig(BaseModel):
    """Shape of the configuration file."""

    variables: dict[str, str] = Field(default_factory=dict)
    pset: dict[str, str] = Field(default_factory=dict)
    connect_timeout: float = 5.0
    rc_enabled: bool = True

    def with_variables(self, **updates: str) -> ShellConfig:
        """Return a copy with extra initial variables merged in."""

        variables = dict(self.variables)
        variables.update(updates)
        return self.model_copy(update={"variables": variables})


def load_config() -> ShellConfig:
    """Load configuration from disk; fall back to defaults if missing or invalid."""

    try:
        data = _read_config_file()
    except FileNotFoundError:
        return ShellConfig()
    except (tomllib.TOMLDecodeError, OSError):
        LOG.warning("Ignoring unreadable config file", extra={"path": str(CONFIG_FILE)})
        return ShellConfig()
    try:
        return ShellConfig(**data)
    except ValidationError:
        LOG.warning("Ignoring invalid config file", extra={"path": str(CONFIG_FILE)})
        return ShellConfig()


def _read_config_file() -> dict[str, object]:
    with CONFIG_FILE.open("rb") as handle:
        raw = tomllib.load(handle)
    data: dict[str, object] = {}
    for section in ("variables", "pset"):
        table = raw.get(section)
        if isinstance(table, dict):
            data[section] = {str(name): _as_text(value) for name, value in table.items()}
    timeout = raw.get("connect_timeout")
    if isinstance(timeout, (int, float)) and not isinstance(timeout, bool):
        data["connect_timeout"] = float(timeout)
    rc_enabled = raw.get("rc_enabled")
    if isinstance(rc_enabled, bool):
        data["rc_enabled"] = rc_enabled
    return data


def _as_text(value: object) -> str:
    if isinstance(value, bool):
        return "on" if value else "off"
    return str(value)


__all__ = ["CONFIG_FILE", "ShellConfig", "load_config"]
