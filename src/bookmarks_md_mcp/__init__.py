"""MCP server that turns a workspace BOOKMARKS.md into a navigable bookmark tree."""

__version__ = "0.1.0"
