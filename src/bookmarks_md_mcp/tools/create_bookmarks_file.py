"""Tool to scaffold a default bookmarks file."""

from typing import Optional

from .get_bookmarks import _open_store


def create_bookmarks_file(
    workspace: Optional[str] = None,
    filename: Optional[str] = None,
) -> dict:
    """
    Create a bookmarks file with a single default bookmark.

    An existing file is never overwritten.

    Args:
        workspace: Workspace directory (defaults to $BOOKMARKS_MD_WORKSPACE or cwd)
        filename: Bookmarks file name (defaults to BOOKMARKS.md)

    Returns:
        Dict with the created file path
    """
    store, err = _open_store(workspace, filename)
    if err:
        return {"success": False, **err}

    try:
        path = store.create_default()
    except FileExistsError:
        return {"success": False, "error": f"Bookmarks file already exists: {store.bookmarks_path}"}
    except OSError as e:
        return {"success": False, "error": f"Error creating {store.bookmarks_path.name}: {e}"}

    return {
        "success": True,
        "file": str(path),
        "message": f"{path.name} created successfully",
    }
