"""
Similar Reader search for Shelfwise

Finds other readers who rated the same books the same way:
- One review lookup per rated read book
- Readers ranked by how many books they share with the reader
- Shared shelves summarized against the reader's own prominent shelves
"""

from collections import defaultdict
from dataclasses import dataclass
from typing import Iterable, TYPE_CHECKING

from loguru import logger

from shelfwise.intelligence.bookshelf import Bookshelf, sort_books
from shelfwise.log import run_sequence
from shelfwise.storage.models import Book, ReadBook, Shelf, User

if TYPE_CHECKING:
    from shelfwise.config import Configuration
    from shelfwise.storage.repository import Repository


@dataclass(frozen=True)
class SimilarReader:
    """Another reader, the books they share with the reader and their shelves."""

    user: User
    books: tuple[Book, ...]

    # Shelves of the reader that the shared books sit in, with book counts
    shelves: tuple[Shelf, ...]


def summarize_shared_shelves(
    shared_books: Iterable[Book],
    shelf_names: Iterable[str],
    config: "Configuration",
) -> tuple[Shelf, ...]:
    """
    Count the shared books that sit in each of the given shelves.

    Shelves with no shared books are dropped.
    """
    bookshelf = Bookshelf.from_config(shared_books, config)

    shelves = []
    for name in shelf_names:
        count = len(bookshelf.books_in_shelves(name))
        if count:
            shelves.append(Shelf(name=name, count=count))

    return tuple(sorted(shelves, key=lambda s: (-s.count, s.name)))


def find_similar_readers(
    read_books: Iterable[ReadBook],
    repository: "Repository",
    config: "Configuration",
    *,
    max_reviews: int,
) -> list[SimilarReader]:
    """
    Find readers who left similar reviews of the reader's books.

    Args:
        read_books: The reader's read books
        repository: Source of books and reviews
        config: Shelf percentile used for shelf summaries
        max_reviews: Maximum number of reviews to request per book

    Returns:
        Similar readers, most shared books first, ties by user ID
    """
    rated = [r for r in read_books if r.is_rated]

    books_by_id: dict[str, Book] = {}

    def load_book(read_book: ReadBook):
        books_by_id[read_book.book_id] = repository.get_book(read_book.book_id)

    run_sequence("Load data on read books", rated, load_book)

    users_by_id: dict[str, User] = {}
    shared_ids: dict[str, list[str]] = defaultdict(list)

    def find_reviewers(read_book: ReadBook):
        book = books_by_id[read_book.book_id]
        reviews = repository.get_similar_reviews(book, read_book, max_reviews)

        for review in reviews:
            user = review.user
            shared_ids[user.id].append(read_book.book_id)
            users_by_id.setdefault(user.id, user)

    run_sequence("Find similar readers", rated, find_reviewers)

    user_ids = sorted(shared_ids, key=lambda id: (-len(shared_ids[id]), id))

    shelf_names = sorted(
        s.data.name
        for s in Bookshelf.from_config(books_by_id.values(), config).shelves()
    )

    logger.info(f"Found {len(user_ids)} readers across {len(rated)} rated books")

    readers = []
    for user_id in user_ids:
        books = sort_books(books_by_id[id] for id in shared_ids[user_id])

        readers.append(SimilarReader(
            user=users_by_id[user_id],
            books=tuple(books),
            shelves=summarize_shared_shelves(books, shelf_names, config),
        ))

    return readers
