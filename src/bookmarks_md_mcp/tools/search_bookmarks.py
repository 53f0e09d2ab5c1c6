"""Tool to search bookmarks within a workspace."""

from typing import Optional

from ..parser.hierarchy import iter_links
from .get_bookmarks import NO_BOOKMARKS_MESSAGE, _open_store


def search_bookmarks(
    query: str,
    workspace: Optional[str] = None,
    filename: Optional[str] = None,
    max_results: int = 10,
) -> dict:
    """
    Search for bookmarks matching a query.

    Matches case-insensitively against link titles, targets, and the
    titles of the directories that contain them. Results keep document
    order.

    Args:
        query: Text to look for
        workspace: Workspace directory (defaults to $BOOKMARKS_MD_WORKSPACE or cwd)
        filename: Bookmarks file name (defaults to BOOKMARKS.md)
        max_results: Maximum number of results to return

    Returns:
        Dict with matching links and their directory paths
    """
    query_lower = query.strip().lower()
    if not query_lower:
        return {"error": "Query must not be empty"}

    store, err = _open_store(workspace, filename)
    if err:
        return err

    snapshot = store.load()
    if not snapshot.found:
        return {"error": NO_BOOKMARKS_MESSAGE}

    matches = []
    for link, path in iter_links(snapshot.forest):
        haystack = [link.title.lower(), link.target.lower()] + [p.lower() for p in path]
        if any(query_lower in text for text in haystack):
            matches.append({"title": link.title, "target": link.target, "path": path})

    matches = matches[:max(0, max_results)]

    return {
        "query": query,
        "result_count": len(matches),
        "results": matches,
    }
