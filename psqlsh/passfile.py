"""Credential lookup from the owner-only password file.

Each non-comment line holds six colon separated fields::

    driver:host:port:dbname:username:password

The first four fields are matched against the connection identity, ``*``
matching anything. A username of ``*`` keeps the username already present
on the URL. The first matching line wins.
"""

from __future__ import annotations

import logging
import re
import stat
import sys
from pathlib import Path
from typing import Sequence

from . import env
from .errors import (
    PassFileEncodingError,
    PassFileError,
    PassFileFieldEmptyError,
    PassFileLineError,
    PassFileModeError,
    ShellError,
)
from .models import MIN_IDENTITY_COMPONENTS, ConnectionURL, Credential

LOG = logging.getLogger(__name__)

WILDCARD = "*"
FIELD_COUNT = 6
USERNAME_FIELD = 4
PASSWORD_FIELD = 5
GROUP_OTHER_MASK = 0o077

_COMMENT_RE = re.compile(r"#.*")

PassEntry = tuple[str, ...]


def read_pass_entries(path: Path) -> list[PassEntry]:
    """Parse every entry in ``path``; any malformed line aborts the read."""

    entries: list[PassEntry] = []
    with path.open("rb") as handle:
        for line_no, data in enumerate(handle, start=1):
            try:
                raw = data.decode("utf-8")
            except UnicodeDecodeError as exc:
                raise PassFileEncodingError(path, line_no) from exc
            line = _COMMENT_RE.sub("", raw).strip()
            if not line:
                continue
            fields = tuple(line.split(":"))
            if len(fields) != FIELD_COUNT:
                raise PassFileLineError(path, line_no)
            for index, value in enumerate(fields):
                if not value:
                    raise PassFileFieldEmptyError(path, line_no, index)
            entries.append(fields)
    return entries


def match_pass_entry(identity: Sequence[str], entry: PassEntry) -> Credential | None:
    """Return the entry's credential when every identity component matches."""

    for index, component in enumerate(identity):
        if entry[index] != WILDCARD and entry[index] != component:
            return None
    return Credential(username=entry[USERNAME_FIELD], password=entry[PASSWORD_FIELD])


def _check_file(path: Path) -> bool:
    try:
        info = path.stat()
    except FileNotFoundError:
        return False
    if stat.S_ISDIR(info.st_mode):
        raise PassFileError(path)
    if sys.platform != "win32" and stat.S_IMODE(info.st_mode) & GROUP_OTHER_MASK:
        raise PassFileModeError(path)
    return True


def resolve_credential(url: ConnectionURL, *, home: Path | None = None) -> Credential | None:
    """Find the password file credential for ``url``.

    Returns ``None`` when the URL already carries a password, when the
    password file does not exist, or when no entry matches.
    """

    if url.has_password:
        return None
    path = env.pass_file(home)
    if not _check_file(path):
        LOG.debug("No password file", extra={"path": str(path)})
        return None
    entries = read_pass_entries(path)
    identity = url.identity()
    if len(identity) < MIN_IDENTITY_COMPONENTS:
        raise ShellError(f"unable to normalize connection url for {url.driver}")
    for entry in entries:
        credential = match_pass_entry(identity, entry)
        if credential is None:
            continue
        LOG.debug("Matched password file entry", extra={"path": str(path), "driver": url.driver})
        if credential.username == WILDCARD:
            credential = Credential(username=url.username, password=credential.password)
        return credential
    return None


__all__ = [
    "PassEntry",
    "match_pass_entry",
    "read_pass_entries",
    "resolve_credential",
]
