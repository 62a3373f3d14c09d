"""CLI for the Zettel index (browse, allocate, reorganise, MCP server)."""

import json
from pathlib import Path
from typing import Annotated, Any

import typer
from loguru import logger

from zettel_index.config import DEFAULT_ID_PROPERTY, resolve_vault_directory
from zettel_index.core.snapshot import TreeCache
from zettel_index.core.tree.allocator import next_child, next_root
from zettel_index.core.tree.markdown import render_tree_as_markdown
from zettel_index.core.tree.navigation import find_node
from zettel_index.core.vault.store import MarkdownVault, PathFilter
from zettel_index.core.write.reorganize import (
    create_child_note,
    create_root_note,
    move_node,
    renumber_node,
    set_identifier,
)
from zettel_index.logging_config import configure_logging
from zettel_index.models.node import ZettelNode

app = typer.Typer(help="Zettel index: browse and reorganise Luhmann-style note identifiers.")

VaultDir = Annotated[
    Path | None,
    typer.Option("--vault-dir", "-d", help="Vault directory with markdown notes"),
]
IdProperty = Annotated[
    str,
    typer.Option("--property", "-p", help="Front matter property holding the identifier"),
]
Exclude = Annotated[
    list[str] | None,
    typer.Option("--exclude", "-x", help="Folder or .md file to ignore (repeatable)"),
]
Include = Annotated[
    list[str] | None,
    typer.Option("--include", "-i", help="Only use notes below this folder (repeatable)"),
]


@app.callback()
def main(
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable debug logging"),
) -> None:
    configure_logging(verbose=verbose)


def _open_vault(
    vault_dir: Path | None,
    id_property: str,
    exclude: list[str] | None,
    include: list[str] | None,
) -> MarkdownVault:
    """Open the vault, exiting if the directory doesn't exist."""
    root = vault_dir or resolve_vault_directory()
    if not root.is_dir():
        logger.error("Vault directory not found: {}", root)
        raise typer.Exit(1)
    return MarkdownVault(
        root,
        id_property=id_property,
        path_filter=PathFilter(exclude=exclude or (), include=include or ()),
    )


def _report(result: dict[str, Any]) -> None:
    """Print a reorganisation result, exiting non-zero on failure."""
    if not result["success"]:
        typer.echo(f"Error: {result['error']}")
        raise typer.Exit(1)
    remap = result["remap"]
    for old_id, new_id in remap.items():
        typer.echo(f"  {old_id} -> {new_id}")
    if result.get("dry_run"):
        typer.echo(f"Dry run: {len(remap)} identifiers would change.")
    else:
        typer.echo(f"Updated {result['updated']} notes ({len(remap)} identifiers).")


def _node_as_dict(node: ZettelNode) -> dict[str, Any]:
    return {
        "id": node.id,
        "notes": [d.rel_path for d in node.documents],
        "children": [_node_as_dict(c) for c in node.children],
    }


@app.command()
def tree(
    below: Annotated[
        str | None,
        typer.Option("--below", "-b", help="Only show the subtree of this identifier"),
    ] = None,
    max_depth: Annotated[
        int | None,
        typer.Option("--max-depth", "-m", help="Max depth levels to render"),
    ] = None,
    descending: bool = typer.Option(False, "--desc", help="Sort siblings in descending order"),
    output_json: bool = typer.Option(False, "--json", "-j", help="Output as JSON"),
    vault_dir: VaultDir = None,
    id_property: IdProperty = DEFAULT_ID_PROPERTY,
    exclude: Exclude = None,
    include: Include = None,
) -> None:
    """Show the identifier hierarchy."""
    vault = _open_vault(vault_dir, id_property, exclude, include)
    snapshot = TreeCache(vault.entries, descending=descending).current()

    if output_json:
        if below:
            node = find_node(snapshot, below)
            if node is None:
                typer.echo(f"Node '{below}' not found.")
                raise typer.Exit(1)
            nodes = [node]
        else:
            nodes = list(snapshot.root.children)
        typer.echo(json.dumps([_node_as_dict(n) for n in nodes], indent=2))
        return

    md = render_tree_as_markdown(snapshot, below=below, max_depth=max_depth)
    if below and not md:
        typer.echo(f"Node '{below}' not found.")
        raise typer.Exit(1)
    typer.echo(md.rstrip("\n") if md else "No notes with identifiers.")


@app.command()
def unfiled(
    vault_dir: VaultDir = None,
    id_property: IdProperty = DEFAULT_ID_PROPERTY,
    exclude: Exclude = None,
    include: Include = None,
) -> None:
    """List notes that have no identifier."""
    vault = _open_vault(vault_dir, id_property, exclude, include)
    notes = vault.unfiled()
    typer.echo(f"{len(notes)} notes without {id_property}:\n")
    for note in notes:
        typer.echo(f"  {note.title}  ({note.rel_path})")


@app.command(name="next-id")
def next_id(
    parent: str = typer.Argument("", help="Parent identifier (empty for a new top-level id)"),
    vault_dir: VaultDir = None,
    id_property: IdProperty = DEFAULT_ID_PROPERTY,
    exclude: Exclude = None,
    include: Include = None,
) -> None:
    """Print the next free identifier under a parent."""
    vault = _open_vault(vault_dir, id_property, exclude, include)
    snapshot = TreeCache(vault.entries).current()
    if not parent:
        typer.echo(next_root(snapshot).text)
        return
    node = find_node(snapshot, parent)
    if node is None:
        typer.echo(f"Node '{parent}' not found.")
        raise typer.Exit(1)
    typer.echo(next_child(node).text)


@app.command()
def new(
    parent: str = typer.Argument("", help="Parent identifier (empty for a new top-level note)"),
    folder: Annotated[
        Path | None,
        typer.Option("--folder", "-f", help="Vault-relative folder for the new note"),
    ] = None,
    vault_dir: VaultDir = None,
    id_property: IdProperty = DEFAULT_ID_PROPERTY,
    exclude: Exclude = None,
    include: Include = None,
) -> None:
    """Create a note with the next free identifier."""
    vault = _open_vault(vault_dir, id_property, exclude, include)
    cache = TreeCache(vault.entries)
    if parent:
        result = create_child_note(cache, vault, parent_id=parent, folder=folder)
    else:
        result = create_root_note(cache, vault, folder=folder)
    if not result["success"]:
        typer.echo(f"Error: {result['error']}")
        raise typer.Exit(1)
    typer.echo(f"Created {result['note'].rel_path} ({result['identifier']})")


@app.command()
def move(
    source: str = typer.Argument(..., help="Identifier of the node to move"),
    target: str = typer.Argument("", help="New parent identifier"),
    to_root: bool = typer.Option(False, "--to-root", help="Move to the top level"),
    dry_run: bool = typer.Option(False, "--dry-run", "-n", help="Show changes without writing"),
    vault_dir: VaultDir = None,
    id_property: IdProperty = DEFAULT_ID_PROPERTY,
    exclude: Exclude = None,
    include: Include = None,
) -> None:
    """Move a node and its subtree under a new parent, renumbering it."""
    if not target and not to_root:
        typer.echo("Give a target parent or --to-root.")
        raise typer.Exit(1)
    vault = _open_vault(vault_dir, id_property, exclude, include)
    cache = TreeCache(vault.entries)
    result = move_node(
        cache,
        vault,
        source_id=source,
        target_parent_id=None if to_root else target,
        dry_run=dry_run,
    )
    _report(result)


@app.command()
def renumber(
    source: str = typer.Argument(..., help="Identifier of the node to renumber"),
    new_id: str = typer.Argument(..., help="Identifier to give it"),
    dry_run: bool = typer.Option(False, "--dry-run", "-n", help="Show changes without writing"),
    vault_dir: VaultDir = None,
    id_property: IdProperty = DEFAULT_ID_PROPERTY,
    exclude: Exclude = None,
    include: Include = None,
) -> None:
    """Give a node an explicit identifier and renumber its subtree."""
    vault = _open_vault(vault_dir, id_property, exclude, include)
    cache = TreeCache(vault.entries)
    result = renumber_node(cache, vault, source_id=source, new_id=new_id, dry_run=dry_run)
    _report(result)


@app.command(name="set-id")
def set_id(
    note_path: str = typer.Argument(..., help="Vault-relative path of the note"),
    identifier: str = typer.Argument(..., help="Identifier to write"),
    vault_dir: VaultDir = None,
    id_property: IdProperty = DEFAULT_ID_PROPERTY,
    exclude: Exclude = None,
    include: Include = None,
) -> None:
    """Set one note's identifier without renumbering anything else."""
    vault = _open_vault(vault_dir, id_property, exclude, include)
    note = vault.find_note(note_path)
    if note is None:
        typer.echo(f"Note '{note_path}' not found.")
        raise typer.Exit(1)
    result = set_identifier(TreeCache(vault.entries), vault, document=note, identifier=identifier)
    if not result["success"]:
        typer.echo(f"Error: {result['error']}")
        raise typer.Exit(1)
    typer.echo(f"Set {id_property} of {note.rel_path} to {result['identifier']}")


@app.command()
def serve() -> None:
    """Start the MCP server (stdio transport)."""
    from zettel_index.mcp.server import run_mcp_server

    run_mcp_server()
