"""
Bookshelf Aggregator for Shelfwise

Grouped and ranked views over a fixed set of books:
- Shelf totals ranked across the whole collection
- Books whose shelves are central to them
- Groupings by shelf, author and publisher
- Narrowed bookshelves restricted to a set of shelves

Design Decisions:
1. Two percentile concepts, kept apart:
   - shelf dominance: a shelf's count relative to the same book's top shelf
   - shelf rank: a shelf's collection-wide total, ranked with partition()
2. One threshold (shelf_percentile) gates both
3. Immutable: every view is a pure read over the books given at creation
"""

from collections import defaultdict
from dataclasses import dataclass
from typing import Iterable, Optional, TYPE_CHECKING

from shelfwise.intelligence.percentile import PartitionedItem, partition, round_half_up
from shelfwise.storage.models import Author, Book, Shelf
from shelfwise.storage.normalization import formalize_author_name

if TYPE_CHECKING:
    from shelfwise.config import Configuration


@dataclass(frozen=True)
class ShelvedBook:
    """A book within a shelf group, with its dominance for that shelf."""

    book: Book
    percentile: int


@dataclass(frozen=True)
class ShelfGroup:
    """Books grouped under one shelf."""

    shelf_name: str
    total_count: int
    percentile: int
    books: tuple[ShelvedBook, ...]


@dataclass(frozen=True)
class AuthorGroup:
    """Books grouped under one author."""

    author: Author
    books: tuple[Book, ...]


@dataclass(frozen=True)
class PublisherGroup:
    """Books grouped under one publisher."""

    publisher_name: str
    books: tuple[Book, ...]


def shelf_dominance(book: Book, shelf_name: str) -> Optional[int]:
    """
    Get how central a shelf is to a book.

    Args:
        book: Book to inspect
        shelf_name: Shelf to measure

    Returns:
        The shelf's count as a percentage of the book's highest shelf count,
        or None if the book is not on the shelf
    """
    count = book.shelf_count(shelf_name)
    if count is None:
        return None

    max_count = max(shelf.count for shelf in book.shelves)
    return round_half_up(count / max_count * 100)


def sort_books(books: Iterable[Book]) -> list[Book]:
    """Sort books by title, then ID."""
    return sorted(books, key=lambda b: (b.title, b.id))


class Bookshelf:
    """
    Aggregated views over a set of books.

    Usage:
        bookshelf = Bookshelf(books, shelf_percentile=75)

        for item in bookshelf.shelves():
            print(item.data.name, item.percentile)

        fantasy = bookshelf.restrict_shelves("fantasy")
    """

    def __init__(self, books: Iterable[Book], shelf_percentile: int):
        """
        Initialize bookshelf.

        Args:
            books: Books to aggregate
            shelf_percentile: Minimum dominance and rank percentile (0-100)
        """
        self._books = tuple(books)
        self.shelf_percentile = shelf_percentile

    @classmethod
    def from_config(
        cls,
        books: Iterable[Book],
        config: "Configuration",
    ) -> "Bookshelf":
        """Create a bookshelf using the configured shelf percentile."""
        return cls(books, shelf_percentile=config.shelf_percentile)

    def __len__(self) -> int:
        return len(self._books)

    def books(self) -> list[Book]:
        """Get all books, sorted by title then ID."""
        return sort_books(self._books)

    def shelf_dominance(self, book: Book, shelf_name: str) -> Optional[int]:
        """Get the dominance of a shelf for a book."""
        return shelf_dominance(book, shelf_name)

    def books_in_shelves(self, *shelf_names: str) -> list[Book]:
        """
        Get all books that belong to at least one of the given shelves.

        A book belongs to a shelf when the shelf's dominance for that book
        meets the shelf percentile.
        """
        names = set(shelf_names)

        def qualifies(book: Book) -> bool:
            for name in names:
                dominance = shelf_dominance(book, name)
                if dominance is not None and dominance >= self.shelf_percentile:
                    return True
            return False

        return sort_books(book for book in self._books if qualifies(book))

    def all_shelves(self) -> list[PartitionedItem[Shelf]]:
        """
        Rank the total count of every shelf across all books.

        Returns:
            Ranked shelves, highest percentile first, ties by name
        """
        totals: dict[str, int] = defaultdict(int)
        for book in self._books:
            for shelf in book.shelves:
                totals[shelf.name] += shelf.count

        ranked = partition(
            [Shelf(name=name, count=count) for name, count in totals.items()],
            lambda s: s.count,
        )

        return sorted(ranked, key=lambda s: (-s.percentile, s.data.name))

    def shelves(self) -> list[PartitionedItem[Shelf]]:
        """Get all shelves whose rank meets the shelf percentile."""
        return [
            shelf for shelf in self.all_shelves()
            if shelf.percentile >= self.shelf_percentile
        ]

    def group_by_shelf(self) -> list[ShelfGroup]:
        """
        Group books by the shelves that are central to them.

        Only (book, shelf) pairs whose dominance meets the shelf percentile
        contribute, both to a group's books and to its total count. Group
        totals are then ranked, and groups below the shelf percentile are
        dropped.
        """
        totals: dict[str, int] = {}
        members: dict[str, list[ShelvedBook]] = defaultdict(list)

        for book in self._books:
            for shelf in book.shelves:
                dominance = shelf_dominance(book, shelf.name)
                if dominance < self.shelf_percentile:
                    continue

                totals[shelf.name] = totals.get(shelf.name, 0) + shelf.count
                members[shelf.name].append(ShelvedBook(book=book, percentile=dominance))

        ranked = partition(list(totals.items()), lambda t: t[1])

        groups = []
        for item in ranked:
            if item.percentile < self.shelf_percentile:
                continue

            name, total = item.data
            groups.append(ShelfGroup(
                shelf_name=name,
                total_count=total,
                percentile=item.percentile,
                # sorted() is stable, so equal percentiles keep book order
                books=tuple(sorted(members[name], key=lambda b: -b.percentile)),
            ))

        return sorted(groups, key=lambda g: (-g.percentile, g.shelf_name))

    def group_by_author(self) -> list[AuthorGroup]:
        """Group books by author, ordered by the author's last name."""
        authors: dict[str, Author] = {}
        by_author: dict[str, list[Book]] = defaultdict(list)

        for book in self._books:
            authors.setdefault(book.author.id, book.author)
            by_author[book.author.id].append(book)

        author_ids = sorted(
            authors,
            key=lambda id: (formalize_author_name(authors[id].name), id),
        )

        return [
            AuthorGroup(author=authors[id], books=tuple(sort_books(by_author[id])))
            for id in author_ids
        ]

    def group_by_publisher(self) -> list[PublisherGroup]:
        """Group books by publisher, skipping books without one."""
        by_publisher: dict[str, list[Book]] = defaultdict(list)

        for book in self._books:
            if book.publisher:
                by_publisher[book.publisher].append(book)

        return [
            PublisherGroup(publisher_name=name, books=tuple(sort_books(books)))
            for name, books in sorted(by_publisher.items())
        ]

    def restrict_shelves(self, *shelf_names: str) -> "Bookshelf":
        """
        Create a new bookshelf with only the books in the given shelves.

        Books keep their full shelf lists, so rankings on the new bookshelf
        are recomputed from the narrowed totals.
        """
        return Bookshelf(
            self.books_in_shelves(*shelf_names),
            shelf_percentile=self.shelf_percentile,
        )
