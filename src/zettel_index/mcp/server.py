"""MCP server exposing Zettel hierarchy browsing and reorganisation tools."""

import asyncio
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from dataclasses import dataclass, field
from typing import Any

from loguru import logger
from mcp.server.fastmcp import Context, FastMCP

from zettel_index.config import DEFAULT_ID_PROPERTY, resolve_vault_directory
from zettel_index.core.snapshot import TreeCache
from zettel_index.core.tree.allocator import next_child, next_root
from zettel_index.core.tree.markdown import render_tree_as_markdown
from zettel_index.core.tree.navigation import find_node, get_breadcrumbs
from zettel_index.core.vault.store import MarkdownVault
from zettel_index.core.write.reorganize import move_node, renumber_node

# --- Core functions (testable without MCP context) ---


def zettel_get_tree(
    cache: TreeCache,
    *,
    below: str | None = None,
    max_depth: int | None = None,
    descending: bool = False,
) -> dict[str, Any]:
    """Render the identifier hierarchy as markdown.

    Args:
        below: Identifier of the subtree to show (None = whole tree).
        max_depth: Max depth levels to include (None = unlimited).
        descending: Sort siblings in descending order.
    """
    cache.set_descending(descending)
    tree = cache.current()
    md = render_tree_as_markdown(tree, below=below, max_depth=max_depth)
    if below and not md:
        return {"error": f"Node '{below}' not found."}

    result: dict[str, Any] = {"content": md, "node_count": len(tree)}
    if below:
        crumbs = get_breadcrumbs(tree, below)
        result["breadcrumbs"] = " > ".join(c.id for c in crumbs)
    return result


def zettel_list_unfiled(vault: MarkdownVault) -> dict[str, Any]:
    """List notes that have no identifier yet."""
    notes = vault.unfiled()
    return {
        "notes": [{"title": n.title, "path": n.rel_path} for n in notes],
        "count": len(notes),
    }


def zettel_next_id(cache: TreeCache, *, parent: str | None = None) -> dict[str, Any]:
    """Return the next free identifier under ``parent`` (or at the top level).

    Args:
        parent: Parent identifier; None or "" for a new top-level identifier.
    """
    tree = cache.current()
    if not parent:
        return {"identifier": next_root(tree).text}
    node = find_node(tree, parent)
    if node is None:
        return {"error": f"Node '{parent}' not found."}
    return {"identifier": next_child(node).text, "parent": node.id}


def zettel_move_node(
    vault: MarkdownVault,
    cache: TreeCache,
    *,
    source: str,
    target_parent: str | None = None,
    dry_run: bool = False,
) -> dict[str, Any]:
    """Move a node and its subtree under a new parent, renumbering identifiers.

    Args:
        source: Identifier of the node to move.
        target_parent: New parent identifier (None = top level).
        dry_run: Only compute the remapping.
    """
    return move_node(
        cache, vault, source_id=source, target_parent_id=target_parent, dry_run=dry_run
    )


def zettel_renumber_node(
    vault: MarkdownVault,
    cache: TreeCache,
    *,
    source: str,
    new_id: str,
    dry_run: bool = False,
) -> dict[str, Any]:
    """Give a node an explicit identifier, renumbering its subtree below it."""
    return renumber_node(cache, vault, source_id=source, new_id=new_id, dry_run=dry_run)


# --- MCP Server Setup ---


@dataclass
class ServerContext:
    """Shared resources for the MCP server lifetime."""

    vault: MarkdownVault
    cache: TreeCache
    write_lock: asyncio.Lock = field(default_factory=asyncio.Lock)


def _resolve_vault() -> MarkdownVault:
    return MarkdownVault(resolve_vault_directory(), id_property=DEFAULT_ID_PROPERTY)


@asynccontextmanager
async def server_lifespan(_server: FastMCP) -> AsyncIterator[ServerContext]:
    """Open the vault on startup."""
    vault = _resolve_vault()
    logger.info("Serving vault {}", vault.root)
    yield ServerContext(vault=vault, cache=TreeCache(vault.entries))


mcp_server = FastMCP(
    "zettel-index",
    instructions="""\
Notes are organised by Luhmann-style identifiers such as 1, 1.a, 1.a.2, 1.b.
Segments alternate between numbers and letters at each level.

1. Use zettel_get_tree_tool to see the hierarchy (max_depth keeps it short).
2. Use zettel_next_id_tool to find where a new note would go.
3. Use zettel_move_node_tool with dry_run=true first to preview a renumbering.
""",
    lifespan=server_lifespan,
)


def _ctx(mcp_ctx: Context) -> ServerContext:
    return mcp_ctx.request_context.lifespan_context  # type: ignore[return-value]


def _refresh(ctx: ServerContext) -> None:
    # Notes may have been edited outside the server since the last call.
    ctx.cache.invalidate("tool call")


# --- MCP Tool Wrappers ---


@mcp_server.tool()
async def zettel_get_tree_tool(
    ctx: Context,
    below: str | None = None,
    max_depth: int | None = None,
    descending: bool = False,
) -> dict[str, Any]:
    """Show the identifier hierarchy as a markdown outline.

    Args:
        below: Identifier of the subtree to show (None = whole tree).
        max_depth: Max depth levels (None = unlimited).
        descending: Sort siblings in descending order.
    """
    server = _ctx(ctx)
    _refresh(server)
    return zettel_get_tree(
        server.cache, below=below, max_depth=max_depth, descending=descending
    )


@mcp_server.tool()
async def zettel_list_unfiled_tool(ctx: Context) -> dict[str, Any]:
    """List notes without an identifier."""
    return zettel_list_unfiled(_ctx(ctx).vault)


@mcp_server.tool()
async def zettel_next_id_tool(ctx: Context, parent: str | None = None) -> dict[str, Any]:
    """Get the next free identifier under a parent, or at the top level.

    Args:
        parent: Parent identifier; omit for a new top-level identifier.
    """
    server = _ctx(ctx)
    _refresh(server)
    return zettel_next_id(server.cache, parent=parent)


@mcp_server.tool()
async def zettel_move_node_tool(
    ctx: Context,
    source: str,
    target_parent: str | None = None,
    dry_run: bool = True,
) -> dict[str, Any]:
    """Move a node and its whole subtree under a new parent.

    Every identifier in the subtree is renumbered so nothing collides with
    existing notes. Writes the new identifiers into the notes' front matter
    unless dry_run is true.

    Args:
        source: Identifier of the node to move.
        target_parent: New parent identifier (omit for the top level).
        dry_run: Preview the remapping without writing (default true).
    """
    server = _ctx(ctx)
    async with server.write_lock:
        _refresh(server)
        return zettel_move_node(
            server.vault, server.cache, source=source, target_parent=target_parent, dry_run=dry_run
        )


@mcp_server.tool()
async def zettel_renumber_node_tool(
    ctx: Context,
    source: str,
    new_id: str,
    dry_run: bool = True,
) -> dict[str, Any]:
    """Give a node an explicit identifier and renumber its subtree below it.

    Args:
        source: Identifier of the node to renumber.
        new_id: Identifier to assign; fails if already used elsewhere.
        dry_run: Preview the remapping without writing (default true).
    """
    server = _ctx(ctx)
    async with server.write_lock:
        _refresh(server)
        return zettel_renumber_node(
            server.vault, server.cache, source=source, new_id=new_id, dry_run=dry_run
        )


def run_mcp_server() -> None:
    """Run the MCP server with stdio transport."""
    from zettel_index.logging_config import configure_logging

    configure_logging(verbose=False)
    mcp_server.run(transport="stdio")
