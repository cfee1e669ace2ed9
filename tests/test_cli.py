"""CLI tests."""

import pytest
from typer.testing import CliRunner

from vdir import cli, database
from vdir.models.node import Node

runner = CliRunner()


@pytest.fixture(autouse=True)
def cli_session(monkeypatch, session_factory):
    """Point the CLI at the test database and keep logging configuration out of it."""
    monkeypatch.setattr(database, "SessionLocal", session_factory)
    monkeypatch.setattr(cli, "setup_logging", lambda: None)


def test_create_and_list(db):
    """Test one-shot create and list commands."""
    result = runner.invoke(cli.app, ["create", "root", "folder"])
    assert result.exit_code == 0, result.output
    assert "Created folder" in result.output

    result = runner.invoke(cli.app, ["create", "notes.txt", "file", "root"])
    assert result.exit_code == 0, result.output

    result = runner.invoke(cli.app, ["list", "root"])
    assert result.exit_code == 0
    assert "notes.txt" in result.output

    assert db.query(Node).count() == 2


def test_list_empty_folder():
    """Test listing a folder with no children."""
    runner.invoke(cli.app, ["create", "root", "folder"])

    result = runner.invoke(cli.app, ["list", "root"])
    assert result.exit_code == 0
    assert "root is empty" in result.output


def test_failure_exits_with_error_code():
    """Test that a rejected command prints its error code and exits 1."""
    result = runner.invoke(cli.app, ["create", "x", "file", "missing"])
    assert result.exit_code == 1
    assert "PARENT_NOT_FOUND" in result.output


def test_rename_move_remove():
    """Test the remaining one-shot commands."""
    runner.invoke(cli.app, ["create", "a", "folder"])
    runner.invoke(cli.app, ["create", "b", "folder"])

    result = runner.invoke(cli.app, ["move", "b", "a"])
    assert result.exit_code == 0, result.output
    assert "Moved" in result.output

    result = runner.invoke(cli.app, ["rename", "b", "c"])
    assert result.exit_code == 0, result.output

    result = runner.invoke(cli.app, ["move", "a", "c"])
    assert result.exit_code == 1
    assert "CANNOT_MOVE_INTO_DESCENDANT" in result.output

    result = runner.invoke(cli.app, ["remove", "a"])
    assert result.exit_code == 0, result.output
    assert "2 nodes" in result.output

    result = runner.invoke(cli.app, ["info", "c"])
    assert result.exit_code == 1
    assert "NODE_NOT_FOUND" in result.output


def test_shell_session(db):
    """Test the interactive shell end to end."""
    commands = "\n".join(
        [
            "create root folder",
            "create 'my docs' folder root",
            "create readme file 'my docs'",
            "list root",
            "rename readme README",
            "move README root",
            "remove 'my docs'",
            "list root",
            "exit",
        ]
    )
    result = runner.invoke(cli.app, ["shell"], input=commands + "\n")

    assert result.exit_code == 0, result.output
    assert "DB ready" in result.output
    assert "Exiting..." in result.output
    assert "Removed my docs (1 nodes)" in result.output
    assert [node.name for node in db.query(Node).order_by(Node.name)] == ["README", "root"]


def test_shell_rejects_bad_input():
    """Test unknown commands, wrong arity and unbalanced quotes."""
    commands = "\n".join(["frobnicate", "rename onlyone", "create 'broken", "help", "exit"])
    result = runner.invoke(cli.app, ["shell"], input=commands + "\n")

    assert result.exit_code == 0, result.output
    assert "Invalid command: frobnicate" in result.output
    assert "usage: rename <name> <new_name>" in result.output
    assert result.output.count("list [parent_name]") == 2


def test_shell_stops_at_end_of_input():
    """Test that the shell exits cleanly when input runs out."""
    result = runner.invoke(cli.app, ["shell"], input="create root folder\n")
    assert result.exit_code == 0, result.output
    assert "Created folder" in result.output


def test_init_db():
    """Test creating tables through the CLI."""
    result = runner.invoke(cli.app, ["init-db"])
    assert result.exit_code == 0, result.output
    assert "Database initialized" in result.output
