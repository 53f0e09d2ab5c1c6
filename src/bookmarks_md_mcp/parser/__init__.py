"""Markdown bookmark parsing utilities."""

from .markdown import HeadingEvent, LinkEvent, iter_markdown_events
from .hierarchy import Directory, Link, Node, build_bookmark_tree


def parse_bookmarks(content: str) -> list[Node]:
    """Parse markdown text into a fresh bookmark forest."""
    return build_bookmark_tree(iter_markdown_events(content))


__all__ = [
    "HeadingEvent",
    "LinkEvent",
    "iter_markdown_events",
    "Directory",
    "Link",
    "Node",
    "build_bookmark_tree",
    "parse_bookmarks",
]
