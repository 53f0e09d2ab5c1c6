"""Bookmarks file location, reading and scaffolding."""

import hashlib
import logging
import os
from dataclasses import dataclass, field
from datetime import datetime
from pathlib import Path
from typing import Optional

from ..parser import Node, parse_bookmarks
from ..security import validate_path_traversal

logger = logging.getLogger(__name__)

DEFAULT_FILENAME = "BOOKMARKS.md"

# Extensions accepted for the bookmarks file
BOOKMARK_EXTENSIONS = ('.md', '.markdown')

DEFAULT_CONTENT = "# Default Bookmark\n- [Good for Now](https://www.example.com)\n"


@dataclass
class BookmarksSnapshot:
    """One parse of the bookmarks file. Replaced wholesale, never mutated."""
    found: bool
    path: str
    forest: list[Node] = field(default_factory=list)
    content_hash: str = ""
    loaded_at: str = ""


class BookmarksStore:
    """Locates, reads and scaffolds the bookmarks file of a workspace."""

    def __init__(self, workspace: Optional[str] = None, filename: Optional[str] = None):
        workspace = workspace or os.environ.get("BOOKMARKS_MD_WORKSPACE") or os.getcwd()
        filename = filename or os.environ.get("BOOKMARKS_MD_FILENAME") or DEFAULT_FILENAME

        self.workspace = Path(workspace).expanduser().resolve()

        if Path(filename).suffix.lower() not in BOOKMARK_EXTENSIONS:
            raise ValueError(f"Bookmarks file must be a markdown file: {filename}")

        self.bookmarks_path = (self.workspace / filename).resolve()
        if not validate_path_traversal(self.bookmarks_path, self.workspace):
            raise ValueError(f"Bookmarks file escapes the workspace: {filename}")

    def exists(self) -> bool:
        return self.bookmarks_path.is_file()

    def read(self) -> Optional[str]:
        """
        Read the bookmarks file.

        Returns:
            The text with line endings normalized to \\n, or None when the
            file is missing or cannot be read.
        """
        if not self.exists():
            return None
        try:
            content = self.bookmarks_path.read_text(encoding="utf-8", errors="replace")
        except OSError as e:
            logger.warning("Could not read bookmarks file %s: %s", self.bookmarks_path, e)
            return None
        return content.replace('\r\n', '\n')

    @staticmethod
    def content_hash(content: str) -> str:
        """Compute SHA256 hash of the file content."""
        return hashlib.sha256(content.encode('utf-8')).hexdigest()

    def load(self) -> BookmarksSnapshot:
        """Read and parse the bookmarks file into a fresh snapshot."""
        loaded_at = datetime.now(tz=None).isoformat()
        content = self.read()
        if content is None:
            return BookmarksSnapshot(
                found=False,
                path=str(self.bookmarks_path),
                loaded_at=loaded_at,
            )

        return BookmarksSnapshot(
            found=True,
            path=str(self.bookmarks_path),
            forest=parse_bookmarks(content),
            content_hash=self.content_hash(content),
            loaded_at=loaded_at,
        )

    def create_default(self) -> Path:
        """
        Write the default bookmarks file.

        Raises:
            FileNotFoundError: the workspace directory does not exist
            FileExistsError: a bookmarks file is already there
        """
        if not self.workspace.is_dir():
            raise FileNotFoundError(f"Workspace does not exist: {self.workspace}")

        # Exclusive create: never overwrite an existing file
        with open(self.bookmarks_path, "x", encoding="utf-8", newline='') as f:
            f.write(DEFAULT_CONTENT)

        logger.info("Created bookmarks file %s", self.bookmarks_path)
        return self.bookmarks_path
