"""
Integration tests for the command-line interface.

Commands run end to end against a temporary archive and data directory.
"""

import io

import pytest

from shelfwise.cli import main


@pytest.fixture
def run(tmp_path, archive_dir, monkeypatch):
    """Run the CLI and capture its exit status and output."""
    for name in ("SHELFWISE_CONFIG", "SHELFWISE_USER_ID", "SHELFWISE_CACHE"):
        monkeypatch.delenv(name, raising=False)

    data_dir = tmp_path / "data"

    def invoke(*argv, user_id="42"):
        args = ["--data-dir", str(data_dir), "--archive", str(archive_dir)]
        if user_id:
            args += ["--user-id", user_id]

        stdout, stderr = io.StringIO(), io.StringIO()
        status = main(args + list(argv), stdout=stdout, stderr=stderr)
        return status, stdout.getvalue(), stderr.getvalue()

    invoke.data_dir = data_dir
    return invoke


class TestFindBooks:
    """Tests for the find-books command."""

    def test_recommends_unread_books(self, run):
        status, out, _ = run("find-books", "--percentile", "0")

        assert status == 0
        assert out.startswith("Dune | p100\n")
        assert "Author: Frank Herbert" in out
        assert "[View book](https://www.goodreads.com/book/show/3)" in out
        assert "Excession" not in out

    def test_unknown_core_book(self, run):
        status, out, err = run("find-books", "--book-id", "99")

        assert status == 1
        assert out == ""
        assert "No book found with ID: 99" in err

    def test_missing_user(self, run):
        status, _, err = run("find-books", user_id=None)

        assert status == 1
        assert "A user ID is required" in err

    def test_invalid_shelf_percentile(self, run):
        with pytest.raises(SystemExit):
            run("--shelf-percentile", "150", "find-books")


class TestFindReaders:
    """Tests for the find-readers command."""

    def test_lists_readers(self, run):
        status, out, _ = run("find-readers")

        assert status == 0
        assert out.index("Seven\n=====") < out.index("Nine\n====")
        assert "Eight" not in out
        assert "Shared Books: 1" in out

    def test_min_books(self, run):
        status, out, _ = run("find-readers", "--min-books", "2")

        assert status == 0
        assert out == "\n"

    def test_unknown_book(self, run):
        status, _, err = run("find-readers", "--book-id", "99")

        assert status == 1
        assert "No book found with ID: 99" in err


class TestSummarize:
    """Tests for sync-books and summarize."""

    def test_summarizes_synced_books(self, run):
        assert run("sync-books")[0] == 0

        status, out, _ = run("summarize", "--section", "publishers")

        assert status == 0
        assert out == "All Publishers\n==============\n\n* Ace Books (1)\n* Orbit (1)\n"

    def test_only_synced_books(self, run):
        run("sync-books", "--recent", "1")

        _, out, _ = run("summarize", "--section", "books-by-author")

        assert "Excession (ID=2)" in out
        assert "Left Hand" not in out

    def test_config_file(self, run, tmp_path):
        config = tmp_path / "config.json"
        config.write_text('{"mergePublishers": {"Orbit Books": ["Orbit"]}}', encoding="utf-8")

        run("--config", str(config), "sync-books")
        _, out, _ = run("--config", str(config), "summarize", "--section", "publishers")

        assert "* Orbit Books (1)" in out

    def test_invalid_config_file(self, run, tmp_path):
        config = tmp_path / "config.json"
        config.write_text("{", encoding="utf-8")

        status, _, err = run("--config", str(config), "summarize")

        assert status == 1
        assert "Invalid JSON" in err


class TestCache:
    """Tests for the cache commands."""

    def test_stats_and_clear(self, run):
        run("sync-books")

        status, out, _ = run("show-cache-stats")
        assert status == 0
        assert out == "books: 2\nread-books: 1\n"

        run("clear-cache", "--namespace", "books")
        _, out, _ = run("show-cache-stats")
        assert out == "read-books: 1\n"

        run("clear-cache")
        _, out, _ = run("show-cache-stats")
        assert out == ""

    def test_cache_commands_need_no_user(self, run):
        status, _, _ = run("show-cache-stats", user_id=None)

        assert status == 0
