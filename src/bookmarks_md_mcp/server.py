"""MCP Server exposing a workspace's BOOKMARKS.md as a navigable outline."""

import asyncio
import json
import logging
import os
import sys
from pathlib import Path
from typing import Any, Optional

from mcp.server import Server
from mcp.server.lowlevel.helper_types import ReadResourceContents
from mcp.server.stdio import stdio_server
from mcp.types import Resource, TextContent, Tool
from pydantic import AnyUrl

from .parser.hierarchy import count_links, render_outline
from .refresher import BookmarksRefresher
from .storage.bookmarks_store import BookmarksStore
from .tools.get_bookmarks import (
    NO_BOOKMARKS_MESSAGE,
    get_bookmarks as do_get_bookmarks,
    get_bookmark_outline as do_get_bookmark_outline,
)
from .tools.search_bookmarks import search_bookmarks as do_search_bookmarks
from .tools.open_link import open_link as do_open_link
from .tools.create_bookmarks_file import create_bookmarks_file as do_create_bookmarks_file

logger = logging.getLogger(__name__)

OUTLINE_URI = "bookmarks://outline"

# Create MCP server
server = Server("bookmarks-md-mcp")

_refresher: Optional[BookmarksRefresher] = None


def get_refresher() -> BookmarksRefresher:
    """Return the refresher for the configured workspace, creating it on first use."""
    global _refresher
    if _refresher is None:
        _refresher = BookmarksRefresher(BookmarksStore())
    return _refresher


_WORKSPACE_PROPERTIES = {
    "workspace": {
        "type": "string",
        "description": "Workspace directory holding the bookmarks file (defaults to the server's workspace)",
    },
    "filename": {
        "type": "string",
        "description": "Bookmarks file name inside the workspace (default: BOOKMARKS.md)",
    },
}


@server.list_tools()
async def list_tools() -> list[Tool]:
    """List available tools."""
    return [
        Tool(
            name="get_bookmarks",
            description="""Get the bookmark tree of a workspace.

Reads BOOKMARKS.md and returns its headings as nested directories and its
links as bookmarks inside them. A heading groups everything up to the next
heading of the same or a higher level.

If the file does not exist, returns found=false and suggests
create_bookmarks_file.""",
            inputSchema={
                "type": "object",
                "properties": dict(_WORKSPACE_PROPERTIES),
            },
        ),
        Tool(
            name="get_bookmark_outline",
            description="""Get the bookmark tree as an indented markdown outline.

Directories are rendered in bold, bookmarks as markdown links. Compact
alternative to get_bookmarks for display.""",
            inputSchema={
                "type": "object",
                "properties": dict(_WORKSPACE_PROPERTIES),
            },
        ),
        Tool(
            name="search_bookmarks",
            description="""Search bookmarks by title, URL, or enclosing directory.

Case-insensitive substring match. Returns matching links with the path of
directory titles leading to them.""",
            inputSchema={
                "type": "object",
                "properties": {
                    "query": {
                        "type": "string",
                        "description": "Text to search for",
                    },
                    "max_results": {
                        "type": "integer",
                        "description": "Maximum number of results to return",
                        "default": 10,
                    },
                    **_WORKSPACE_PROPERTIES,
                },
                "required": ["query"],
            },
        ),
        Tool(
            name="open_link",
            description="""Open a bookmark target in the system browser.

Only http, https, ftp and mailto links are opened.""",
            inputSchema={
                "type": "object",
                "properties": {
                    "url": {
                        "type": "string",
                        "description": "Bookmark target to open",
                    },
                },
                "required": ["url"],
            },
        ),
        Tool(
            name="create_bookmarks_file",
            description="""Create a default BOOKMARKS.md in the workspace.

The file holds one example bookmark. An existing file is never
overwritten.""",
            inputSchema={
                "type": "object",
                "properties": dict(_WORKSPACE_PROPERTIES),
            },
        ),
        Tool(
            name="refresh_bookmarks",
            description="""Re-read the server workspace's bookmarks file now.

The server also re-reads it periodically. Returns whether the displayed
bookmarks changed.""",
            inputSchema={
                "type": "object",
                "properties": {},
            },
        ),
    ]


@server.call_tool()
async def call_tool(name: str, arguments: dict[str, Any]) -> list[TextContent]:
    """Handle tool calls."""
    try:
        if name == "get_bookmarks":
            result = do_get_bookmarks(
                workspace=arguments.get("workspace"),
                filename=arguments.get("filename"),
            )
        elif name == "get_bookmark_outline":
            result = do_get_bookmark_outline(
                workspace=arguments.get("workspace"),
                filename=arguments.get("filename"),
            )
        elif name == "search_bookmarks":
            result = do_search_bookmarks(
                query=arguments["query"],
                workspace=arguments.get("workspace"),
                filename=arguments.get("filename"),
                max_results=arguments.get("max_results", 10),
            )
        elif name == "open_link":
            result = do_open_link(url=arguments["url"])
        elif name == "create_bookmarks_file":
            result = do_create_bookmarks_file(
                workspace=arguments.get("workspace"),
                filename=arguments.get("filename"),
            )
            if result.get("success") and Path(result["file"]) == get_refresher().store.bookmarks_path:
                _handle_refresh_bookmarks()
        elif name == "refresh_bookmarks":
            result = _handle_refresh_bookmarks()
        else:
            result = {"error": f"Unknown tool: {name}"}

        return [TextContent(type="text", text=json.dumps(result, indent=2))]

    except Exception as e:
        error_result = {"error": str(e)}
        return [TextContent(type="text", text=json.dumps(error_result, indent=2))]


def _handle_refresh_bookmarks() -> dict:
    """Handle refresh_bookmarks tool call."""
    refresher = get_refresher()
    changed = refresher.refresh()
    snapshot = refresher.snapshot
    return {
        "changed": changed,
        "found": snapshot.found,
        "file": snapshot.path,
        "bookmark_count": count_links(snapshot.forest),
        "loaded_at": snapshot.loaded_at,
    }


@server.list_resources()
async def list_resources() -> list[Resource]:
    """List available resources."""
    return [
        Resource(
            uri=OUTLINE_URI,
            name="Bookmarks outline",
            description="Latest bookmark tree of the workspace, as an indented markdown list",
            mimeType="text/markdown",
        ),
    ]


@server.read_resource()
async def read_resource(uri: AnyUrl) -> list[ReadResourceContents]:
    """Serve the outline of the most recent refresh."""
    if str(uri).rstrip("/") != OUTLINE_URI:
        raise ValueError(f"Unknown resource: {uri}")

    refresher = get_refresher()
    if refresher.snapshot is None:
        refresher.refresh()

    snapshot = refresher.snapshot
    text = render_outline(snapshot.forest) if snapshot.found else NO_BOOKMARKS_MESSAGE
    return [ReadResourceContents(content=text, mime_type="text/markdown")]


async def run_server():
    """Run the MCP server with the bookmarks refresher alongside."""
    refresher = get_refresher()
    refresh_task = asyncio.create_task(refresher.run())
    try:
        async with stdio_server() as (read_stream, write_stream):
            await server.run(
                read_stream,
                write_stream,
                server.create_initialization_options(),
            )
    finally:
        refresh_task.cancel()
        try:
            await refresh_task
        except asyncio.CancelledError:
            pass


def main():
    """Entry point for the MCP server."""
    # stdout carries the protocol, so logs go to stderr
    logging.basicConfig(
        stream=sys.stderr,
        level=os.environ.get("BOOKMARKS_MD_LOG_LEVEL", "WARNING").upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    asyncio.run(run_server())


if __name__ == "__main__":
    main()
