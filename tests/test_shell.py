"""Tests for the shell input loop and its handler methods."""

from __future__ import annotations

from pathlib import Path

import pytest

from psqlsh.config import ShellConfig
from psqlsh.errors import InvalidVariableTypeError, NotConnectedError
from psqlsh.shell import split_command


@pytest.mark.parametrize(
    "text, expected",
    [
        ("", ("", [])),
        ("q", ("q", [])),
        ("set name value", ("set", ["name", "value"])),
        ("set  name 'a b'   \"c d\"", ("set", ["name", "'a b'", '"c d"'])),
        ("echo 'it''s'", ("echo", ["'it''s'"])),
        ("echo 'open", ("echo", ["'open"])),
    ],
)
def test_split_command(text: str, expected: tuple[str, list[str]]) -> None:
    assert split_command(text) == expected


def test_statements_execute_when_terminated(make_shell) -> None:
    harness = make_shell()
    harness.shell.connect("pg://localhost/app")

    output = harness.run("select", "  1;", "", "select 2; -- trailing")

    assert harness.database.executed == ["select\n  1;", "select 2; -- trailing"]
    assert output == "SELECT 1\nSELECT 1\n"
    assert harness.shell.buffer.is_empty


def test_statement_errors_are_reported_and_counted(make_shell) -> None:
    harness = make_shell()

    harness.run("select 1;", "\\echo still running")

    assert harness.stderr.getvalue() == "psqlsh: error: not connected\n"
    assert harness.stdout.getvalue() == "still running\n"
    assert harness.shell.error_count == 1
    assert harness.shell.buffer.is_empty


def test_initial_configuration_is_applied(make_shell) -> None:
    config = ShellConfig(variables={"limit": "10"}, pset={"format": "csv", "border": "9"})

    harness = make_shell(config=config)

    assert harness.shell.variables.get("limit") == "10"
    assert harness.shell.formats.get("format") == "csv"
    assert harness.shell.formats.get("border") == "1"


def test_interact_prompts_and_records_history(make_shell, tmp_path: Path) -> None:
    harness = make_shell(stdin="select\n1;\n\\q\n\\echo unreachable\n", interactive=True)
    harness.shell.connect("pg://localhost/app")

    harness.shell.interact()

    assert harness.stdout.getvalue() == "psqlsh=> psqlsh-> SELECT 1\npsqlsh=> "
    assert (tmp_path / ".psqlsh_history").read_text() == "select\n1;\n"


def test_non_interactive_does_not_prompt_or_record_history(make_shell, tmp_path: Path) -> None:
    harness = make_shell(stdin="select 1;\n")
    harness.shell.connect("pg://localhost/app")

    harness.shell.interact()

    assert harness.stdout.getvalue() == "SELECT 1\n"
    assert not (tmp_path / ".psqlsh_history").exists()


def test_history_location_follows_environment(make_shell, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    custom = tmp_path / "custom_history"
    monkeypatch.setenv("PSQLSH_HISTORY", str(custom))
    harness = make_shell(interactive=True)
    harness.shell.connect("pg://localhost/app")

    harness.run("select 1;")

    assert custom.read_text() == "select 1;\n"


def test_run_rc_executes_startup_file(make_shell, tmp_path: Path) -> None:
    (tmp_path / ".psqlshrc").write_text("\\set from_rc yes\n\\pset bogus\n\\echo done\n")
    harness = make_shell()

    harness.shell.run_rc()

    assert harness.shell.variables.get("from_rc") == "yes"
    assert harness.stdout.getvalue() == "done\n"
    assert harness.shell.error_count == 1


def test_run_rc_without_file_is_silent(make_shell) -> None:
    harness = make_shell()

    harness.shell.run_rc()

    assert harness.stdout.getvalue() == ""
    assert harness.stderr.getvalue() == ""


def test_quit_inside_include_stops_the_shell(make_shell, tmp_path: Path) -> None:
    script = tmp_path / "quit.sql"
    script.write_text("\\echo one\n\\q\n\\echo two\n")
    harness = make_shell()

    output = harness.run(f"\\i {script}", "\\echo three")

    assert output == "one\n"
    assert harness.shell.quit_requested


@pytest.mark.parametrize(
    "typ, raw, expected",
    [
        ("string", " padded ", " padded "),
        ("int", "-7", "-7"),
        ("uint", "7", "7"),
        ("float", "2.5", "2.5"),
        ("bool", "off", "false"),
        ("bool", "TRUE", "true"),
    ],
)
def test_read_var_parses_types(make_shell, typ: str, raw: str, expected: str) -> None:
    harness = make_shell(stdin=raw + "\n")

    assert harness.shell.read_var(typ, "") == expected


def test_read_var_rejects_bad_values(make_shell) -> None:
    harness = make_shell(stdin="maybe\n")

    with pytest.raises(InvalidVariableTypeError):
        harness.shell.read_var("bool", "")


def test_connect_uses_password_file(make_shell, tmp_path: Path) -> None:
    passfile = tmp_path / ".psqlshpass"
    passfile.write_text("postgres:localhost:5432:app:*:from-file\n")
    passfile.chmod(0o600)
    harness = make_shell()

    harness.shell.connect("pg://dave@localhost/app")

    url = harness.database.url
    assert url is not None
    assert url.user == "dave"
    assert url.password == "from-file"


def test_connect_keeps_explicit_password(make_shell, tmp_path: Path) -> None:
    passfile = tmp_path / ".psqlshpass"
    passfile.write_text("*:*:*:*:other:from-file\n")
    passfile.chmod(0o600)
    harness = make_shell()

    harness.shell.connect("pg://dave:given@localhost/app")

    assert harness.database.url.password == "given"


def test_change_password_requires_connection(make_shell) -> None:
    harness = make_shell(read_password=lambda prompt: "x")

    with pytest.raises(NotConnectedError):
        harness.shell.change_password("bob")


def test_close_shuts_down_database(make_shell) -> None:
    harness = make_shell()

    harness.shell.close()

    assert harness.database.shut_down
