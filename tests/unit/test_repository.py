"""
Unit tests for the repository and the archive source.
"""

import json

import pytest

from shelfwise.config import Configuration
from shelfwise.errors import NotFoundError, OperationalError
from shelfwise.storage.cache import JSONCache
from shelfwise.storage.models import Shelf
from shelfwise.storage.repository import Repository
from shelfwise.storage.sources import ArchiveSource


@pytest.fixture
def repo_config():
    return Configuration(
        ignore_shelves=["to-read"],
        merge_shelves={"science-fiction": ["sci-fi"]},
        merge_publishers={"Ace Books": ["Ace"]},
    )


@pytest.fixture
def repository(archive_dir, tmp_path, repo_config):
    return Repository(
        ArchiveSource(archive_dir),
        JSONCache(tmp_path / "cache"),
        repo_config,
    )


class TestArchiveSource:
    """Tests for ArchiveSource."""

    def test_fetch_book(self, archive_dir):
        assert ArchiveSource(archive_dir).fetch_book("2")["title"] == "Excession"

    def test_missing_book(self, archive_dir):
        with pytest.raises(NotFoundError) as exc_info:
            ArchiveSource(archive_dir).fetch_book("99")

        assert exc_info.value.code == "NOT_FOUND"
        assert exc_info.value.identifier == "99"

    def test_missing_reviews(self, archive_dir):
        assert ArchiveSource(archive_dir).fetch_reviews("2") == []

    def test_invalid_json(self, archive_dir):
        (archive_dir / "books" / "bad.json").write_text("{not json", encoding="utf-8")

        with pytest.raises(OperationalError, match="Invalid JSON"):
            ArchiveSource(archive_dir).fetch_book("bad")


class TestGetBook:
    """Tests for Repository.get_book()."""

    def test_normalizes_book(self, repository):
        book = repository.get_book("1")

        assert book.title == "The Left Hand of Darkness"
        assert book.author.name == "Ursula K. Le Guin"
        assert book.publisher == "Ace Books"
        assert book.canonical_id == "1"
        assert book.average_rating == 4.5
        assert book.total_ratings == 4
        assert book.shelves == (Shelf("science-fiction", 10), Shelf("classics", 3))
        assert book.similar_book_ids == ["3", "2"]
        assert book.similar_books[0].author.name == "Frank Herbert"
        assert book.similar_books[0].work_id == "w3"

    def test_without_ratings(self, repository):
        book = repository.get_book("2")

        assert book.average_rating is None
        assert book.total_ratings == 0

    def test_served_from_cache(self, repository, archive_dir):
        first = repository.get_book("1")
        (archive_dir / "books" / "1.json").unlink()

        assert repository.get_book("1") == first

    def test_missing_book(self, repository):
        with pytest.raises(NotFoundError):
            repository.get_book("99")


class TestGetLocalBooks:
    """Tests for Repository.get_local_books()."""

    def test_lists_cached_books(self, repository):
        repository.get_book("1")
        repository.get_book("3")

        books = repository.get_local_books(["1", "2", "3"])

        assert [b.title for b in books] == ["Dune", "The Left Hand of Darkness"]

    def test_filters_by_id(self, repository):
        repository.get_book("1")
        repository.get_book("3")

        assert [b.id for b in repository.get_local_books(["3"])] == ["3"]

    def test_empty_cache(self, repository):
        assert repository.get_local_books(["1"]) == []


class TestGetReadBooks:
    """Tests for Repository.get_read_books()."""

    def test_most_recent_first(self, repository):
        read_books = repository.get_read_books("42")

        assert [r.id for r in read_books] == ["r2", "r1"]
        assert [r.rating for r in read_books] == [4, 5]

    def test_recent(self, repository):
        assert [r.id for r in repository.get_read_books("42", recent=1)] == ["r2"]

    def test_unknown_user(self, repository):
        with pytest.raises(NotFoundError):
            repository.get_read_books("404")

    def test_zero_rating_means_unrated(self, archive_dir, repository):
        path = archive_dir / "read-books" / "43.json"
        path.write_text(json.dumps([
            {"id": "r9", "book_id": "3", "work_id": "w3", "rating": 0},
        ]), encoding="utf-8")

        [read_book] = repository.get_read_books("43")

        assert read_book.rating is None
        assert not read_book.is_rated


class TestGetSimilarReviews:
    """Tests for Repository.get_similar_reviews()."""

    def test_same_rating_other_readers(self, repository):
        book = repository.get_book("1")
        read_book = next(r for r in repository.get_read_books("42") if r.book_id == "1")

        reviews = repository.get_similar_reviews(book, read_book, 10)

        assert [r.user.id for r in reviews] == ["7", "9"]

    def test_limit(self, repository):
        book = repository.get_book("1")
        read_book = next(r for r in repository.get_read_books("42") if r.book_id == "1")

        assert [r.id for r in repository.get_similar_reviews(book, read_book, 1)] == ["x1"]

    def test_no_reviews(self, repository):
        book = repository.get_book("2")
        read_book = next(r for r in repository.get_read_books("42") if r.book_id == "2")

        assert repository.get_similar_reviews(book, read_book, 10) == []
