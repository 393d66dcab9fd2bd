"""
Book Repository for Shelfwise

Cached access to normalized books, read books and reviews:
- Raw records come from a BookSource
- Normalization (whitespace, shelf and publisher rules) happens once,
  before a record is cached
- Locally cached books can be listed without touching the source

The engines only ever see the records this repository returns; errors
raised by the source propagate unchanged.
"""

from typing import Iterable, Optional

from loguru import logger

from shelfwise.config import Configuration
from shelfwise.storage.cache import JSONCache
from shelfwise.storage.models import Author, Book, ReadBook, Review, Shelf, SimilarBook, User
from shelfwise.storage.normalization import (
    determine_publisher,
    normalize_string,
    resolve_publisher,
    sanitize_shelves,
)
from shelfwise.storage.sources import BookSource


NAMESPACES = {
    "books": "books",
    "read_books": "read-books",
    "reviews": "reviews",
}


class Repository:
    """
    Repository for normalized book data.

    Usage:
        repo = Repository(ArchiveSource("./archive"), JSONCache("./cache"), config)

        book = repo.get_book("123")
        read_books = repo.get_read_books("42", recent=10)
    """

    def __init__(
        self,
        source: BookSource,
        cache: JSONCache,
        config: Configuration,
    ):
        """
        Initialize repository.

        Args:
            source: Provider of raw records
            cache: Cache for normalized records
            config: Shelf and publisher rules
        """
        self.source = source
        self.cache = cache
        self.config = config

    def get_book(self, book_id: str) -> Book:
        """Get a normalized book."""
        def load() -> dict:
            raw = self.source.fetch_book(book_id)
            logger.debug(f"Normalize book ID={book_id}")
            return self.normalize_book(raw).to_dict()

        return Book.from_dict(self.cache.fetch([NAMESPACES["books"], book_id], load))

    def get_local_books(self, book_ids: Iterable[str]) -> list[Book]:
        """Get all cached books whose IDs are in a list, sorted by title then ID."""
        wanted = set(book_ids)

        books = [
            Book.from_dict(data)
            for data in self.cache.entries([NAMESPACES["books"]])
            if str(data["id"]) in wanted
        ]

        return sorted(books, key=lambda b: (b.title, b.id))

    def get_read_books(self, user_id: str, recent: Optional[int] = None) -> list[ReadBook]:
        """
        Get a user's read books, most recently posted first.

        Args:
            user_id: Reader whose books to load
            recent: Only return this many of the most recent books
        """
        def load() -> list[dict]:
            raw = self.source.fetch_read_books(user_id)
            return [self.normalize_read_book(r).to_dict() for r in raw]

        cached = self.cache.fetch([NAMESPACES["read_books"], user_id], load)

        read_books = sorted(
            (ReadBook.from_dict(data) for data in cached),
            key=lambda r: (-r.posted, r.id),
        )

        if recent is not None:
            read_books = read_books[:recent]

        return read_books

    def get_similar_reviews(
        self,
        book: Book,
        read_book: ReadBook,
        limit: int,
    ) -> list[Review]:
        """
        Get reviews of a book by other readers who gave it the same rating.

        Args:
            book: Reviewed book
            read_book: The reader's own review of the book
            limit: Maximum number of reviews

        Returns:
            At most `limit` reviews, excluding the reader's own
        """
        def load() -> list[dict]:
            raw = self.source.fetch_reviews(book.canonical_id)
            return [self.normalize_read_book(r).to_dict() for r in raw]

        cached = self.cache.fetch([NAMESPACES["reviews"], book.canonical_id], load)

        similar = []
        for data in cached:
            review = Review.from_dict(data)

            if review.id == read_book.id or review.user is None:
                continue
            if review.rating != read_book.rating:
                continue

            similar.append(review)
            if len(similar) >= limit:
                break

        return similar

    def normalize_book(self, raw: dict) -> Book:
        """Convert a raw book record into a normalized book."""
        book_id = str(raw["id"])
        author = raw["author"]

        total_ratings = int(raw.get("ratings_count", 0) or 0)
        ratings_sum = float(raw.get("ratings_sum", 0) or 0)

        publisher = determine_publisher(
            raw.get("publisher"),
            raw.get("review_publishers", []),
        )

        shelves = sanitize_shelves(
            (Shelf(name=s["name"], count=int(s["count"])) for s in raw.get("shelves", [])),
            self.config,
        )

        similar_books = tuple(
            SimilarBook(
                id=str(s["id"]),
                author=Author(id=str(s["author"]["id"]), name=normalize_string(s["author"]["name"])),
                work_id=str(s["work_id"]),
            )
            for s in raw.get("similar_books", [])
        )

        return Book(
            id=book_id,
            title=normalize_string(raw["title"]),
            author=Author(id=str(author["id"]), name=normalize_string(author["name"])),
            publisher=resolve_publisher(publisher, self.config) if publisher else "",
            work_id=str(raw["work_id"]),
            canonical_id=str(raw.get("canonical_id") or book_id),
            average_rating=ratings_sum / total_ratings if total_ratings > 0 else None,
            total_ratings=total_ratings,
            shelves=shelves,
            similar_books=similar_books,
        )

    def normalize_read_book(self, raw: dict) -> ReadBook:
        """Convert a raw read book or review into a normalized record."""
        rating = raw.get("rating")
        user = raw.get("user")

        return ReadBook(
            id=str(raw["id"]),
            book_id=str(raw["book_id"]),
            work_id=str(raw["work_id"]),
            rating=int(rating) if rating else None,
            shelves=tuple(normalize_string(s) for s in raw.get("shelves", [])),
            posted=int(raw.get("posted", 0)),
            user=User(
                id=str(user["id"]),
                name=normalize_string(user["name"]),
                profile_url=user.get("profile_url", ""),
            ) if user else None,
        )
