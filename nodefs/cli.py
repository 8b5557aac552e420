import json
import logging
from pathlib import Path
from typing import Dict, Optional, Tuple

import typer
from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape
from rich.table import Table
from rich.traceback import install
from rich.tree import Tree

from .config import load_config, get_config_path, update_config
from .decorators import console as error_console, handle_vfs_errors
from .vfs import FileSystem, LocalFileSystem, Node, NodeType

# Initialize Rich Traceback for better error messages
install(show_locals=False)

# Initialize Rich Console
console = Console()

# Configure logging to use Rich's RichHandler
logging.basicConfig(
    level=logging.INFO,  # Set to INFO by default, DEBUG if verbose
    format="%(message)s",
    datefmt="[%X]",
    handlers=[RichHandler(rich_tracebacks=True)]
)
logger = logging.getLogger(__name__)

# Main app
app = typer.Typer(help="Browse, copy and move trees through the nodefs virtual filesystem")

# Command groups
config_app = typer.Typer(help="Show and change nodefs configuration")

# Register command groups
app.add_typer(config_app, name="config")


@app.callback()
def main(
    ctx: typer.Context,
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable verbose mode"),
    root: Optional[Path] = typer.Option(
        None, "--root", "-r", help="Directory used as the filesystem root (default: configured root, then cwd)"
    ),
):
    """
    nodefs - one interface over hierarchical storage.

    Every PATH is resolved relative to the filesystem root, with or
    without a leading slash.
    """
    config = load_config()
    verbose = verbose or config.cli.verbose
    logging.getLogger("nodefs").setLevel(logging.DEBUG if verbose else logging.INFO)
    if verbose:
        console.print("[bold green]Verbose mode enabled.[/bold green]")
    console.no_color = not config.cli.color
    error_console.no_color = not config.cli.color

    ctx.obj = {"root": root, "config": config}


def _open_filesystem(ctx: typer.Context) -> FileSystem:
    """Open the local filesystem selected by --root or the configuration."""
    config = ctx.obj["config"]
    if config.storage.backend != "local":
        console.print(f"[red]Error: Unsupported storage backend: {escape(config.storage.backend)}[/red]")
        raise typer.Exit(code=1)

    root = ctx.obj["root"] or config.storage.root or Path.cwd()
    fs = LocalFileSystem(root)
    if not fs.root.exists():
        raise FileNotFoundError(f"Root directory does not exist: {fs.root_path}")
    logger.debug(f"Using {fs}")
    return fs


def _find_node(fs: FileSystem, path: str) -> Optional[Node]:
    """Return the existing folder or file at path, or None."""
    folder = fs.resolve_folder(path)
    if folder.exists():
        return folder
    # The root always exists, so folder has a parent here
    file = folder.parent.file(folder.name)
    if file.exists():
        return file
    return None


def _require_node(fs: FileSystem, path: str) -> Node:
    node = _find_node(fs, path)
    if node is None:
        raise FileNotFoundError(f"No such file or folder: {path}")
    return node


@app.command(name="ls")
@handle_vfs_errors
def list_folder(
    ctx: typer.Context,
    path: str = typer.Argument("", help="Folder to list"),
):
    """
    List the direct children of a folder.

    Example:
        nodefs --root ~/data ls reports
    """
    fs = _open_filesystem(ctx)
    node = _require_node(fs, path)
    if node.node_type is NodeType.FILE:
        console.print(escape(node.name))
        return

    table = Table(title=escape(node.path), show_header=True, header_style="bold magenta")
    table.add_column("Type", style="cyan")
    table.add_column("Name", style="green")

    for child in sorted(node.children(), key=lambda c: (c.node_type.value, c.name)):
        name = child.name + "/" if child.node_type is NodeType.FOLDER else child.name
        table.add_row(child.node_type.value, escape(name))

    console.print(table)


@app.command()
@handle_vfs_errors
def tree(
    ctx: typer.Context,
    path: str = typer.Argument("", help="Folder to show"),
):
    """
    Show a folder and everything below it as a tree.
    """
    fs = _open_filesystem(ctx)
    folder = fs.resolve_folder(path)
    if not folder.exists():
        raise FileNotFoundError(f"No such folder: {path}")

    top = Tree(f"[bold blue]{escape(folder.path)}[/bold blue]")
    branches: Dict[Tuple[str, ...], Tree] = {folder.parts: top}
    # walk() is pre-order, so a parent branch always exists before its children
    for node in folder.walk():
        parent_branch = branches[node.parts[:-1]]
        if node.node_type is NodeType.FOLDER:
            branches[node.parts] = parent_branch.add(f"[bold]{escape(node.name)}/[/bold]")
        else:
            parent_branch.add(escape(node.name))

    console.print(top)


@app.command()
@handle_vfs_errors
def cat(
    ctx: typer.Context,
    path: str = typer.Argument(..., help="File to print"),
):
    """
    Print the content of a file.
    """
    fs = _open_filesystem(ctx)
    file = fs.resolve_file(path)
    typer.echo(file.read_text(), nl=False)


@app.command()
@handle_vfs_errors
def mkdir(
    ctx: typer.Context,
    path: str = typer.Argument(..., help="Folder to create, with its parents"),
):
    """
    Create a folder and any missing parents.
    """
    fs = _open_filesystem(ctx)
    folder = fs.resolve_folder(path)
    folder.create()
    console.print(f"[green]Created {escape(folder.path)}[/green]")


@app.command()
@handle_vfs_errors
def touch(
    ctx: typer.Context,
    path: str = typer.Argument(..., help="File to create"),
):
    """
    Create an empty file if it does not exist.
    """
    fs = _open_filesystem(ctx)
    file = fs.resolve_file(path)
    file.create()
    console.print(f"[green]Created {escape(file.path)}[/green]")


@app.command()
@handle_vfs_errors
def rm(
    ctx: typer.Context,
    path: str = typer.Argument(..., help="File or folder to remove"),
):
    """
    Remove a file, or a folder with everything in it.

    Removing something that does not exist is not an error.
    """
    fs = _open_filesystem(ctx)
    node = _find_node(fs, path)
    if node is None:
        console.print(f"[yellow]Nothing to remove at {escape(path)}[/yellow]")
        return

    node.delete()
    console.print(f"[green]Removed {escape(node.path)}[/green]")


@app.command()
@handle_vfs_errors
def cp(
    ctx: typer.Context,
    source: str = typer.Argument(..., help="File or folder to copy"),
    target: str = typer.Argument(..., help="Destination, replaced if it exists"),
):
    """
    Copy a file or folder to (not into) TARGET.

    Whatever exists at TARGET is replaced, not merged.

    Example:
        nodefs cp reports/2024 archive/2024
    """
    fs = _open_filesystem(ctx)
    node = _require_node(fs, source)
    if node.node_type is NodeType.FOLDER:
        destination = fs.resolve_folder(target)
    else:
        destination = fs.resolve_file(target)

    node.copy_to(destination)
    console.print(f"[green]Copied {escape(node.path)} to {escape(destination.path)}[/green]")


@app.command()
@handle_vfs_errors
def mv(
    ctx: typer.Context,
    source: str = typer.Argument(..., help="File or folder to move"),
    target: str = typer.Argument(..., help="Destination, replaced if it exists"),
):
    """
    Move a file or folder to TARGET, replacing whatever is there.
    """
    fs = _open_filesystem(ctx)
    node = _require_node(fs, source)
    if node.node_type is NodeType.FOLDER:
        destination = fs.resolve_folder(target)
    else:
        destination = fs.resolve_file(target)

    node.move_to(destination)
    console.print(f"[green]Moved {escape(node.path)} to {escape(destination.path)}[/green]")


# ============================================================================
# Configuration Commands
# ============================================================================

@config_app.command(name="show")
def config_show():
    """Show the current configuration."""
    config = load_config()
    console.print(f"[bold]Config file:[/bold] {escape(str(get_config_path()))}")
    console.print_json(json.dumps(config.to_dict()))


@config_app.command(name="set")
def config_set(
    root: Optional[str] = typer.Option(None, "--root", help="Default filesystem root directory"),
    verbose: Optional[bool] = typer.Option(None, "--verbose/--no-verbose", help="Verbose logging by default"),
    color: Optional[bool] = typer.Option(None, "--color/--no-color", help="Colored output"),
):
    """Change configuration values. Options not given stay unchanged."""
    if root is None and verbose is None and color is None:
        console.print("[yellow]Nothing to change[/yellow]")
        raise typer.Exit(code=1)

    if root is not None:
        root = str(Path(root).expanduser().resolve())
    update_config(storage_root=root, cli_verbose=verbose, cli_color=color)
    console.print(f"[green]Configuration saved to {escape(str(get_config_path()))}[/green]")


if __name__ == "__main__":
    app()
