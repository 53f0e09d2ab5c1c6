"""Tools to get the bookmark tree of a workspace."""

import logging
from typing import Optional

from ..parser.hierarchy import count_links, iter_links, node_to_dict, render_outline
from ..security import scan_link_for_secrets
from ..storage.bookmarks_store import BookmarksSnapshot, BookmarksStore

logger = logging.getLogger(__name__)

NO_BOOKMARKS_MESSAGE = "No bookmarks file found. Use create_bookmarks_file to create one."


def _open_store(
    workspace: Optional[str],
    filename: Optional[str],
) -> tuple[Optional[BookmarksStore], Optional[dict]]:
    """Build a store for the workspace and return (store, error_dict)."""
    try:
        return BookmarksStore(workspace, filename), None
    except ValueError as e:
        return None, {"error": str(e)}


def _secret_warnings(snapshot: BookmarksSnapshot) -> list[dict]:
    """Collect bookmark targets that appear to embed credentials."""
    warnings = []
    for link, _ in iter_links(snapshot.forest):
        detected = scan_link_for_secrets(link.target)
        if detected:
            logger.warning("Bookmark '%s' embeds credentials: %s", link.title, ', '.join(detected))
            warnings.append({"title": link.title, "detected": detected})
    return warnings


def _build_meta(snapshot: BookmarksSnapshot) -> dict:
    """Build standard _meta envelope from a snapshot."""
    return {
        "content_hash": snapshot.content_hash,
        "loaded_at": snapshot.loaded_at,
    }


def snapshot_to_dict(snapshot: BookmarksSnapshot, workspace: str) -> dict:
    """Shape a snapshot as the get_bookmarks result."""
    if not snapshot.found:
        return {
            "workspace": workspace,
            "file": snapshot.path,
            "found": False,
            "bookmark_count": 0,
            "bookmarks": [],
            "message": NO_BOOKMARKS_MESSAGE,
            "action": "create_bookmarks_file",
        }

    result = {
        "workspace": workspace,
        "file": snapshot.path,
        "found": True,
        "bookmark_count": count_links(snapshot.forest),
        "bookmarks": [node_to_dict(node) for node in snapshot.forest],
        "_meta": _build_meta(snapshot),
    }
    warnings = _secret_warnings(snapshot)
    if warnings:
        result["warnings"] = warnings
    return result


def get_bookmarks(
    workspace: Optional[str] = None,
    filename: Optional[str] = None,
) -> dict:
    """
    Get the bookmark tree for a workspace.

    Args:
        workspace: Workspace directory (defaults to $BOOKMARKS_MD_WORKSPACE or cwd)
        filename: Bookmarks file name (defaults to BOOKMARKS.md)

    Returns:
        Dict with the nested bookmark tree, or the no-bookmarks state
    """
    store, err = _open_store(workspace, filename)
    if err:
        return err

    return snapshot_to_dict(store.load(), str(store.workspace))


def get_bookmark_outline(
    workspace: Optional[str] = None,
    filename: Optional[str] = None,
) -> dict:
    """
    Get the bookmark tree rendered as an indented markdown outline.

    Args:
        workspace: Workspace directory (defaults to $BOOKMARKS_MD_WORKSPACE or cwd)
        filename: Bookmarks file name (defaults to BOOKMARKS.md)

    Returns:
        Dict with the outline text
    """
    store, err = _open_store(workspace, filename)
    if err:
        return err

    snapshot = store.load()
    if not snapshot.found:
        return {
            "file": snapshot.path,
            "found": False,
            "outline": "",
            "message": NO_BOOKMARKS_MESSAGE,
        }

    return {
        "file": snapshot.path,
        "found": True,
        "outline": render_outline(snapshot.forest),
        "_meta": _build_meta(snapshot),
    }
