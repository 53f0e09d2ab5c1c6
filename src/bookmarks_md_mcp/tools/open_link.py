"""Tool to open a bookmark target in the system browser."""

import logging
import webbrowser
from typing import Callable

from ..security import is_openable_link

logger = logging.getLogger(__name__)


def open_link(url: str, opener: Callable[[str], bool] = webbrowser.open) -> dict:
    """
    Open a bookmark target externally.

    Args:
        url: The link target to open
        opener: Callable handing the URL to the system (webbrowser.open by default)

    Returns:
        Dict with success flag
    """
    url = url.strip()
    if not is_openable_link(url):
        logger.warning("Refusing to open link: %s", url)
        return {"success": False, "url": url, "error": f"Refusing to open link: {url}"}

    opened = bool(opener(url))
    if opened:
        logger.info("Opened link %s", url)
        return {"success": True, "url": url}
    return {"success": False, "url": url, "error": "No browser available to open the link"}
