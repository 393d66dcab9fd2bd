"""
Domain records for Shelfwise.

Normalized, immutable views of books, readers and their reviews:
- Authors and shelves
- Books with their similar-books graph
- Read books / reviews left by readers
- Users

All records are frozen dataclasses. Aggregation code never mutates them and
builds new collections instead.
"""

from dataclasses import dataclass, field
from typing import Optional


@dataclass(frozen=True)
class Author:
    """A book's primary author."""

    id: str
    name: str

    def to_dict(self) -> dict:
        return {"id": self.id, "name": self.name}

    @classmethod
    def from_dict(cls, data: dict) -> "Author":
        return cls(id=str(data["id"]), name=data["name"])


@dataclass(frozen=True)
class Shelf:
    """A named shelf and how many readers placed a book on it."""

    name: str
    count: int

    def to_dict(self) -> dict:
        return {"name": self.name, "count": self.count}

    @classmethod
    def from_dict(cls, data: dict) -> "Shelf":
        return cls(name=data["name"], count=int(data["count"]))


@dataclass(frozen=True)
class SimilarBook:
    """An edge in the similar-books graph."""

    id: str
    author: Author
    work_id: str

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "author": self.author.to_dict(),
            "work_id": self.work_id,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "SimilarBook":
        return cls(
            id=str(data["id"]),
            author=Author.from_dict(data["author"]),
            work_id=str(data["work_id"]),
        )


@dataclass(frozen=True)
class Book:
    """A normalized book."""

    id: str
    title: str
    author: Author
    publisher: str
    work_id: str
    canonical_id: str

    average_rating: Optional[float] = None
    total_ratings: int = 0

    # Already sanitized: ignored shelves removed, merged shelves folded
    shelves: tuple[Shelf, ...] = ()
    similar_books: tuple[SimilarBook, ...] = ()

    @property
    def similar_book_ids(self) -> list[str]:
        """IDs of all similar books, in source order."""
        return [similar.id for similar in self.similar_books]

    def shelf_count(self, name: str) -> Optional[int]:
        """Get the count for a shelf, or None if the book is not on it."""
        for shelf in self.shelves:
            if shelf.name == name:
                return shelf.count
        return None

    def to_dict(self) -> dict:
        """Convert to dictionary for caching."""
        return {
            "id": self.id,
            "title": self.title,
            "author": self.author.to_dict(),
            "publisher": self.publisher,
            "work_id": self.work_id,
            "canonical_id": self.canonical_id,
            "average_rating": self.average_rating,
            "total_ratings": self.total_ratings,
            "shelves": [shelf.to_dict() for shelf in self.shelves],
            "similar_books": [similar.to_dict() for similar in self.similar_books],
        }

    @classmethod
    def from_dict(cls, data: dict) -> "Book":
        """Create from a cached dictionary."""
        return cls(
            id=str(data["id"]),
            title=data["title"],
            author=Author.from_dict(data["author"]),
            publisher=data.get("publisher") or "",
            work_id=str(data["work_id"]),
            canonical_id=str(data.get("canonical_id") or data["id"]),
            average_rating=data.get("average_rating"),
            total_ratings=int(data.get("total_ratings", 0)),
            shelves=tuple(Shelf.from_dict(s) for s in data.get("shelves", [])),
            similar_books=tuple(
                SimilarBook.from_dict(s) for s in data.get("similar_books", [])
            ),
        )


@dataclass(frozen=True)
class User:
    """A reader."""

    id: str
    name: str
    profile_url: str

    def to_dict(self) -> dict:
        return {"id": self.id, "name": self.name, "profile_url": self.profile_url}

    @classmethod
    def from_dict(cls, data: dict) -> "User":
        return cls(
            id=str(data["id"]),
            name=data["name"],
            profile_url=data.get("profile_url", ""),
        )


@dataclass(frozen=True)
class ReadBook:
    """A reader's interaction with a book."""

    id: str
    book_id: str
    work_id: str

    # None for unrated entries
    rating: Optional[int] = None
    shelves: tuple[str, ...] = field(default_factory=tuple)

    # Unix timestamp in milliseconds
    posted: int = 0
    user: Optional[User] = None

    @property
    def is_rated(self) -> bool:
        return self.rating is not None and self.rating > 0

    def to_dict(self) -> dict:
        """Convert to dictionary for caching."""
        return {
            "id": self.id,
            "book_id": self.book_id,
            "work_id": self.work_id,
            "rating": self.rating,
            "shelves": list(self.shelves),
            "posted": self.posted,
            "user": self.user.to_dict() if self.user else None,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "ReadBook":
        """Create from a cached dictionary."""
        rating = data.get("rating")
        user = data.get("user")

        return cls(
            id=str(data["id"]),
            book_id=str(data["book_id"]),
            work_id=str(data["work_id"]),
            rating=int(rating) if rating else None,
            shelves=tuple(data.get("shelves", [])),
            posted=int(data.get("posted", 0)),
            user=User.from_dict(user) if user else None,
        )


# Reviews by other readers share the read-book shape
Review = ReadBook
