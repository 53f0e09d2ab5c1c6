"""Tests for the periodic bookmarks refresher."""

import asyncio

import pytest

from bookmarks_md_mcp.refresher import BookmarksRefresher, DEFAULT_REFRESH_SECONDS
from bookmarks_md_mcp.storage.bookmarks_store import BookmarksStore


class TestInterval:
    def test_default(self, workspace, monkeypatch):
        monkeypatch.delenv("BOOKMARKS_MD_REFRESH_SECONDS", raising=False)
        refresher = BookmarksRefresher(BookmarksStore(str(workspace)))
        assert refresher.interval == DEFAULT_REFRESH_SECONDS

    def test_explicit(self, workspace):
        refresher = BookmarksRefresher(BookmarksStore(str(workspace)), interval=0.5)
        assert refresher.interval == 0.5

    def test_from_env(self, workspace, monkeypatch):
        monkeypatch.setenv("BOOKMARKS_MD_REFRESH_SECONDS", "10")
        refresher = BookmarksRefresher(BookmarksStore(str(workspace)))
        assert refresher.interval == 10.0

    @pytest.mark.parametrize("value", ["soon", "0", "-2"])
    def test_invalid_env_falls_back(self, workspace, monkeypatch, value):
        monkeypatch.setenv("BOOKMARKS_MD_REFRESH_SECONDS", value)
        refresher = BookmarksRefresher(BookmarksStore(str(workspace)))
        assert refresher.interval == DEFAULT_REFRESH_SECONDS


class TestRefresh:
    def test_first_refresh_sets_snapshot(self, workspace):
        refresher = BookmarksRefresher(BookmarksStore(str(workspace)))
        assert refresher.snapshot is None
        assert refresher.refresh() is True
        assert refresher.snapshot.found is True
        assert [n.title for n in refresher.snapshot.forest] == ["Work", "Personal"]

    def test_unchanged_file_keeps_snapshot(self, workspace):
        refresher = BookmarksRefresher(BookmarksStore(str(workspace)))
        refresher.refresh()
        first = refresher.snapshot
        assert refresher.refresh() is False
        assert refresher.snapshot is first

    def test_changed_file_replaces_snapshot(self, workspace):
        refresher = BookmarksRefresher(BookmarksStore(str(workspace)))
        refresher.refresh()
        first = refresher.snapshot

        (workspace / "BOOKMARKS.md").write_text("# Only\n- [One](http://one)\n", encoding="utf-8")
        assert refresher.refresh() is True
        assert refresher.snapshot is not first
        assert [n.title for n in refresher.snapshot.forest] == ["Only"]
        # The previous tree is left untouched
        assert [n.title for n in first.forest] == ["Work", "Personal"]

    def test_file_appears_and_disappears(self, empty_workspace):
        refresher = BookmarksRefresher(BookmarksStore(str(empty_workspace)))
        assert refresher.refresh() is True
        assert refresher.snapshot.found is False
        assert refresher.refresh() is False

        path = empty_workspace / "BOOKMARKS.md"
        path.write_text("# New\n", encoding="utf-8")
        assert refresher.refresh() is True
        assert refresher.snapshot.found is True

        path.unlink()
        assert refresher.refresh() is True
        assert refresher.snapshot.found is False
        assert refresher.snapshot.forest == []

    def test_listeners_called_on_change(self, workspace):
        refresher = BookmarksRefresher(BookmarksStore(str(workspace)))
        seen = []
        refresher.add_listener(seen.append)

        refresher.refresh()
        refresher.refresh()
        assert len(seen) == 1
        assert seen[0] is refresher.snapshot

    def test_failing_listener_does_not_stop_others(self, workspace):
        refresher = BookmarksRefresher(BookmarksStore(str(workspace)))
        seen = []

        def broken(snapshot):
            raise RuntimeError("boom")

        refresher.add_listener(broken)
        refresher.add_listener(seen.append)
        assert refresher.refresh() is True
        assert len(seen) == 1


class TestRun:
    @pytest.mark.asyncio
    async def test_run_until_stopped(self, workspace):
        refresher = BookmarksRefresher(BookmarksStore(str(workspace)), interval=0.01)
        stop = asyncio.Event()
        task = asyncio.create_task(refresher.run(stop))

        await asyncio.sleep(0.05)
        (workspace / "BOOKMARKS.md").write_text("# Changed\n", encoding="utf-8")
        await asyncio.sleep(0.05)

        stop.set()
        await asyncio.wait_for(task, timeout=1.0)
        assert [n.title for n in refresher.snapshot.forest] == ["Changed"]

    @pytest.mark.asyncio
    async def test_run_cancellable(self, workspace):
        refresher = BookmarksRefresher(BookmarksStore(str(workspace)), interval=0.01)
        task = asyncio.create_task(refresher.run())
        await asyncio.sleep(0.03)
        task.cancel()
        with pytest.raises(asyncio.CancelledError):
            await task
        assert refresher.snapshot is not None

    @pytest.mark.asyncio
    async def test_run_survives_refresh_errors(self, workspace, monkeypatch):
        refresher = BookmarksRefresher(BookmarksStore(str(workspace)), interval=0.01)
        calls = []

        def flaky_load():
            calls.append(1)
            raise OSError("disk gone")

        monkeypatch.setattr(refresher.store, "load", flaky_load)
        stop = asyncio.Event()
        task = asyncio.create_task(refresher.run(stop))
        await asyncio.sleep(0.05)
        stop.set()
        await asyncio.wait_for(task, timeout=1.0)
        assert len(calls) > 1
        assert refresher.snapshot is None
