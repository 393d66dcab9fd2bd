"""
Pytest configuration and fixtures for Shelfwise tests.
"""

import json
import sys
from pathlib import Path
from typing import Iterable, Optional
from unittest.mock import Mock

import pytest
from loguru import logger

# Add project root to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from shelfwise.config import Configuration
from shelfwise.errors import NotFoundError
from shelfwise.storage.models import Book, Review
from shelfwise.storage.repository import Repository


# =============================================================================
# Logging
# =============================================================================

@pytest.fixture(autouse=True)
def quiet_logging():
    """Keep progress logging out of test output."""
    logger.disable("shelfwise")
    yield
    logger.enable("shelfwise")


# =============================================================================
# Configuration
# =============================================================================

@pytest.fixture
def config() -> Configuration:
    """Configuration that lets every shelf through."""
    return Configuration(shelf_percentile=0)


# =============================================================================
# Repository Doubles
# =============================================================================

@pytest.fixture
def make_repository():
    """
    Build a mocked repository over in-memory books and reviews.

    Unknown book IDs raise NotFoundError, like a real source would.
    """
    def make(
        books: Iterable[Book] = (),
        reviews: Optional[dict[str, list[Review]]] = None,
    ) -> Mock:
        by_id = {book.id: book for book in books}
        reviews = reviews or {}

        def get_book(book_id: str) -> Book:
            if book_id not in by_id:
                raise NotFoundError("Book", book_id)
            return by_id[book_id]

        def get_similar_reviews(book, read_book, limit):
            return list(reviews.get(book.id, []))

        repo = Mock(spec=Repository)
        repo.get_book.side_effect = get_book
        repo.get_similar_reviews.side_effect = get_similar_reviews
        return repo

    return make


# =============================================================================
# Archive Fixtures
# =============================================================================

@pytest.fixture
def archive_dir(tmp_path: Path) -> Path:
    """A small archive of raw records for one reader."""
    root = tmp_path / "archive"

    def write(relative: str, data):
        path = root / relative
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(json.dumps(data), encoding="utf-8")

    write("books/1.json", {
        "id": "1",
        "title": "  The   Left Hand of Darkness ",
        "author": {"id": "a1", "name": "Ursula K.  Le Guin"},
        "publisher": "Ace",
        "review_publishers": ["Ace Books", "Ace Books"],
        "work_id": "w1",
        "ratings_count": 4,
        "ratings_sum": 18,
        "shelves": [
            {"name": "sci-fi", "count": 4},
            {"name": "science-fiction", "count": 6},
            {"name": "to-read", "count": 20},
            {"name": "classics", "count": 3},
        ],
        "similar_books": [
            {"id": "3", "author": {"id": "a3", "name": "Frank Herbert"}, "work_id": "w3"},
            {"id": "2", "author": {"id": "a2", "name": "Iain M. Banks"}, "work_id": "w2"},
        ],
    })

    write("books/2.json", {
        "id": "2",
        "title": "Excession",
        "author": {"id": "a2", "name": "Iain M. Banks"},
        "publisher": "Orbit",
        "work_id": "w2",
        "shelves": [{"name": "science-fiction", "count": 5}],
        "similar_books": [
            {"id": "3", "author": {"id": "a3", "name": "Frank Herbert"}, "work_id": "w3"},
        ],
    })

    write("books/3.json", {
        "id": "3",
        "title": "Dune",
        "author": {"id": "a3", "name": "Frank Herbert"},
        "publisher": "Chilton",
        "work_id": "w3",
        "shelves": [{"name": "sci-fi", "count": 2}],
    })

    write("read-books/42.json", [
        {"id": "r1", "book_id": "1", "work_id": "w1", "rating": 5, "posted": 100},
        {"id": "r2", "book_id": "2", "work_id": "w2", "rating": 4, "posted": 200},
    ])

    write("reviews/1.json", [
        {"id": "r1", "book_id": "1", "work_id": "w1", "rating": 5,
         "user": {"id": "42", "name": "Me", "profile_url": "profile/42"}},
        {"id": "x1", "book_id": "1", "work_id": "w1", "rating": 5,
         "user": {"id": "7", "name": "Seven", "profile_url": "profile/7"}},
        {"id": "x2", "book_id": "1", "work_id": "w1", "rating": 2,
         "user": {"id": "8", "name": "Eight", "profile_url": "profile/8"}},
        {"id": "x3", "book_id": "1", "work_id": "w1", "rating": 5,
         "user": {"id": "9", "name": "Nine", "profile_url": "profile/9"}},
    ])

    return root
