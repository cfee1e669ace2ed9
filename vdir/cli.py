"""
Command-Line Interface

Commands:
    vdir shell                          - Interactive prompt
    vdir create <name> <type> [parent]  - Create a file or folder
    vdir list [parent]                  - List a folder (root level if omitted)
    vdir rename <name> <new_name>       - Rename a node
    vdir move <name> [new_parent]       - Move a node (to root if omitted)
    vdir remove <name>                  - Remove a node and everything below it
    vdir info <name>                    - Show a single node
    vdir init-db                        - Create the nodes table

Inside the shell the same commands are typed without the ``vdir`` prefix;
``help`` prints usage and ``exit`` leaves.
"""

from __future__ import annotations

import shlex
from typing import Optional

import typer
from rich.console import Console
from rich.markup import escape
from rich.table import Table
from sqlalchemy.orm import Session

from vdir import database
from vdir.logging_config import setup_logging
from vdir.schemas.node import NodeResponse, OperationResult
from vdir.services.namespace_service import NamespaceService

__all__ = ["main", "app"]

app = typer.Typer(
    name="vdir",
    help="Virtual directory tree stored in a database table",
    no_args_is_help=True,
)
console = Console()

USAGE = {
    "create": "create <name> <file|folder> [parent_name]",
    "list": "list [parent_name]",
    "rename": "rename <name> <new_name>",
    "move": "move <name> [new_parent_name]",
    "remove": "remove <name>",
    "info": "info <name>",
    "exit": "exit",
}

# (min, max) positional arguments per shell command
ARITY = {
    "create": (2, 3),
    "list": (0, 1),
    "rename": (2, 2),
    "move": (1, 2),
    "remove": (1, 1),
    "info": (1, 1),
}


def _arg(args: list[str], index: int) -> str | None:
    return args[index] if len(args) > index else None


def dispatch(service: NamespaceService, command: str, args: list[str]) -> OperationResult:
    """Run one command against the service."""
    if command == "create":
        return service.create_node(args[0], args[1], _arg(args, 2))
    if command == "list":
        return service.list_nodes(_arg(args, 0))
    if command == "rename":
        return service.rename_node(args[0], args[1])
    if command == "move":
        return service.move_node(args[0], _arg(args, 1))
    if command == "remove":
        return service.remove_node(args[0])
    if command == "info":
        return service.get_node(args[0])
    raise ValueError(f"Unknown command: {command}")


def _nodes_table(title: str, nodes: list[NodeResponse]) -> Table:
    table = Table(title=escape(title))
    table.add_column("Name", style="bold")
    table.add_column("Type")
    table.add_column("Updated")
    for node in nodes:
        table.add_row(
            escape(node.name),
            node.type.value,
            node.updated_at.strftime("%Y-%m-%d %H:%M:%S"),
        )
    return table


def render(command: str, args: list[str], result: OperationResult) -> None:
    """Print a command result."""
    if not result.ok:
        console.print(f"[red]{result.error.value}[/]: {escape(result.message or '')}")
        return

    if command == "list":
        where = args[0] if args else "/"
        if not result.value:
            console.print(f"[dim]{escape(where)} is empty[/]")
            return
        console.print(_nodes_table(where, result.value))
    elif command == "remove":
        console.print(f"[green]Removed[/] {escape(args[0])} ({result.value} nodes)")
    else:
        node: NodeResponse = result.value
        verb = {"create": "Created", "rename": "Renamed", "move": "Moved"}.get(command, "Node")
        console.print(f"[green]{verb}[/] {node.type.value} [bold]{escape(node.name)}[/]")
        console.print(f"  id: {node.id}")
        console.print(f"  parent: {node.parent_id or '-'}")


def _open_service() -> tuple[Session, NamespaceService]:
    db = database.SessionLocal()
    database.check_connection(db)
    return db, NamespaceService(db)


def _run_once(command: str, args: list[str]) -> None:
    setup_logging()
    db, service = _open_service()
    try:
        result = dispatch(service, command, args)
    finally:
        db.close()
    render(command, args, result)
    if not result.ok:
        raise typer.Exit(code=1)


def _print_usage() -> None:
    for usage in USAGE.values():
        console.print(f"  {escape(usage)}")


@app.command()
def create(
    name: str = typer.Argument(..., help="Name of the new node"),
    node_type: str = typer.Argument(..., metavar="TYPE", help="file or folder"),
    parent: Optional[str] = typer.Argument(None, help="Name of the parent folder"),
) -> None:
    """Create a file or folder."""
    _run_once("create", [name, node_type] + ([parent] if parent else []))


@app.command("list")
def list_(
    parent: Optional[str] = typer.Argument(None, help="Folder to list (root level if omitted)"),
) -> None:
    """List the children of a folder."""
    _run_once("list", [parent] if parent else [])


@app.command()
def rename(
    name: str = typer.Argument(..., help="Current name"),
    new_name: str = typer.Argument(..., help="New name"),
) -> None:
    """Rename a node."""
    _run_once("rename", [name, new_name])


@app.command()
def move(
    name: str = typer.Argument(..., help="Node to move"),
    new_parent: Optional[str] = typer.Argument(None, help="Destination folder (root if omitted)"),
) -> None:
    """Move a node under another folder."""
    _run_once("move", [name] + ([new_parent] if new_parent else []))


@app.command()
def remove(name: str = typer.Argument(..., help="Node to remove")) -> None:
    """Remove a node and everything below it."""
    _run_once("remove", [name])


@app.command()
def info(name: str = typer.Argument(..., help="Node to show")) -> None:
    """Show a single node."""
    _run_once("info", [name])


@app.command("init-db")
def init_db() -> None:
    """Create the nodes table if it does not exist."""
    setup_logging()
    db = database.SessionLocal()
    try:
        database.init_db(bind=db.get_bind())
    finally:
        db.close()
    console.print("[green]Database initialized[/]")


@app.command()
def shell() -> None:
    """Interactive prompt accepting create/list/rename/move/remove/info."""
    setup_logging()
    db, service = _open_service()
    console.print("[green]DB ready[/]")
    _print_usage()

    try:
        while True:
            try:
                line = console.input("[bold]vdir>[/] ")
            except EOFError:
                break

            try:
                parts = shlex.split(line)
            except ValueError as e:
                console.print(f"[red]Invalid command[/]: {escape(str(e))}")
                continue
            if not parts:
                continue

            command, args = parts[0], parts[1:]
            if command == "exit":
                console.print("Exiting...")
                break
            if command == "help":
                _print_usage()
                continue
            if command not in ARITY:
                console.print(f"[red]Invalid command[/]: {escape(command)}")
                continue

            low, high = ARITY[command]
            if not low <= len(args) <= high:
                console.print(f"[red]Invalid command[/], usage: {escape(USAGE[command])}")
                continue

            render(command, args, dispatch(service, command, args))
    finally:
        db.close()


def main() -> None:
    """Entry point for the ``vdir`` console script."""
    app()


if __name__ == "__main__":
    main()
