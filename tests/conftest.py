"""Shared test fixtures for bookmarks-md-mcp tests."""

import pytest


@pytest.fixture
def sample_bookmarks():
    """Return a bookmarks document with nested headings and links."""
    return """# Work

- [Issue Tracker](https://issues.example.com)
- [CI Dashboard](https://ci.example.com/builds)

## Docs

- [Python](https://docs.python.org/3/)
- [Markdown Guide](https://www.markdownguide.org)

### Internal

- [Runbooks](https://wiki.example.com/runbooks)

## Meetings

Standup notes live in the wiki: [Standup](https://wiki.example.com/standup).

# Personal

- [News](https://news.example.org)
"""


@pytest.fixture
def sample_frontmatter():
    """Return a bookmarks document with YAML front-matter."""
    return """---
title: My Bookmarks
owner: someone
---

# Reading

- [Blog](https://blog.example.com)
"""


@pytest.fixture
def workspace(tmp_path, sample_bookmarks):
    """Provide a workspace directory holding BOOKMARKS.md."""
    (tmp_path / "BOOKMARKS.md").write_text(sample_bookmarks, encoding="utf-8")
    return tmp_path


@pytest.fixture
def empty_workspace(tmp_path):
    """Provide a workspace directory with no bookmarks file."""
    d = tmp_path / "empty"
    d.mkdir()
    return d
