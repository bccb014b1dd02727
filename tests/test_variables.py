"""Tests for the session variable store."""

from __future__ import annotations

import pytest

from psqlsh.errors import InvalidIdentifierError
from psqlsh.variables import VariableStore, valid_identifier


@pytest.mark.parametrize("value", ["", "plain", "  padded  ", "line\nbreak", "'quoted'", "ünïcode"])
def test_set_then_get_returns_value_unchanged(value: str) -> None:
    store = VariableStore()

    store.set("_var1", value)

    assert store.get("_var1") == value


@pytest.mark.parametrize("name", ["", "1abc", "a-b", "has space", "dollar$"])
def test_set_rejects_invalid_identifiers(name: str) -> None:
    store = VariableStore()

    with pytest.raises(InvalidIdentifierError):
        store.set(name, "value")
    assert len(store) == 0


def test_set_overwrites_existing_value() -> None:
    store = VariableStore({"a": "1"})

    store.set("a", "2")
    store.set("a", "2")

    assert store.all() == {"a": "2"}


def test_unset_removes_and_ignores_absent_names() -> None:
    store = VariableStore({"a": "1"})

    store.unset("a")
    store.unset("a")

    assert "a" not in store


def test_all_returns_a_snapshot() -> None:
    store = VariableStore({"a": "1"})

    snapshot = store.all()
    snapshot["b"] = "2"
    store.set("c", "3")

    assert "b" not in store
    assert "c" not in snapshot


def test_valid_identifier_accepts_underscores_and_digits() -> None:
    valid_identifier("_")
    valid_identifier("SYNTAX_HL")
    valid_identifier("a1_b2")
