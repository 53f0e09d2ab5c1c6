"""MCP tool implementations."""

from .get_bookmarks import get_bookmarks, get_bookmark_outline
from .search_bookmarks import search_bookmarks
from .open_link import open_link
from .create_bookmarks_file import create_bookmarks_file

__all__ = [
    "get_bookmarks",
    "get_bookmark_outline",
    "search_bookmarks",
    "open_link",
    "create_bookmarks_file",
]
