"""Bookmarks file storage."""

from .bookmarks_store import BookmarksSnapshot, BookmarksStore

__all__ = ["BookmarksSnapshot", "BookmarksStore"]
