"""
Book Recommender for Shelfwise

Collaborative recommendations from a reader's rated books:
- Source books: read books at or above a minimum rating, optionally
  narrowed to specific books or shelves
- Candidates: books reached through the source books' similar-books graph
- Ranking: each candidate's tally of incoming edges, ranked with partition()

Design Decisions:
1. Exclusions are explicit: ignored authors and already-read works never
   become candidates
2. Each book is resolved at most once per call
3. Ordering is total (percentile, then title, then ID) so results are
   deterministic
"""

from collections import Counter
from dataclasses import dataclass
from typing import Iterable, Optional, TYPE_CHECKING

from loguru import logger

from shelfwise.errors import UnknownBookError
from shelfwise.intelligence.bookshelf import Bookshelf
from shelfwise.intelligence.percentile import PartitionedItem, partition
from shelfwise.log import run_sequence
from shelfwise.storage.models import Book, ReadBook

if TYPE_CHECKING:
    from shelfwise.config import Configuration
    from shelfwise.storage.repository import Repository


@dataclass(frozen=True)
class RecommendedBook:
    """A recommended book and how many source books pointed to it."""

    book: Book
    recommendations: int


PartitionedRecommendation = PartitionedItem[RecommendedBook]


def select_source_ids(
    read_books: Iterable[ReadBook],
    min_rating: int,
    core_book_ids: Optional[Iterable[str]] = None,
) -> list[str]:
    """
    Pick the IDs of the read books used as recommendation sources.

    Args:
        read_books: The reader's read books
        min_rating: Minimum rating for a read book to count
        core_book_ids: Only use these books, when given

    Returns:
        Unique book IDs, sorted

    Raises:
        UnknownBookError: If a core book ID is not among the read books
    """
    read_books = list(read_books)

    book_ids = {
        r.book_id for r in read_books
        if r.is_rated and r.rating >= min_rating
    }

    if core_book_ids is not None:
        core_ids = list(core_book_ids)
        known_ids = {r.book_id for r in read_books}

        for book_id in core_ids:
            if book_id not in known_ids:
                raise UnknownBookError(book_id)

        book_ids &= set(core_ids)

    return sorted(book_ids)


def count_similar_books(
    books: Iterable[Book],
    ignore_authors: Iterable[str],
    read_work_ids: Iterable[str],
) -> Counter:
    """
    Tally how many source books point to each similar book.

    Candidates by ignored authors or matching an already-read work are
    excluded.
    """
    ignored = set(ignore_authors)
    read_works = set(read_work_ids)

    counts: Counter = Counter()
    for book in books:
        for similar in book.similar_books:
            if similar.author.name in ignored or similar.work_id in read_works:
                continue
            counts[similar.id] += 1

    return counts


def find_recommended_books(
    read_books: Iterable[ReadBook],
    repository: "Repository",
    config: "Configuration",
    *,
    min_rating: int,
    percentile: int,
    core_book_ids: Optional[Iterable[str]] = None,
    limit: Optional[int] = None,
    shelves: Optional[Iterable[str]] = None,
) -> list[PartitionedRecommendation]:
    """
    Find books to recommend from a reader's read books.

    Args:
        read_books: The reader's read books
        repository: Source of full book records
        config: Ignored authors and the shelf percentile
        min_rating: Minimum rating for a read book to act as a source
        percentile: Minimum recommendation percentile to keep
        core_book_ids: Only use these read books as sources
        limit: Maximum number of recommendations
        shelves: Only use source books that sit in one of these shelves

    Returns:
        Recommendations, highest percentile first, then by title and ID
    """
    read_books = list(read_books)
    source_ids = select_source_ids(read_books, min_rating, core_book_ids)

    books_by_id: dict[str, Book] = {}

    def resolve(book_id: str) -> Book:
        if book_id not in books_by_id:
            books_by_id[book_id] = repository.get_book(book_id)
        return books_by_id[book_id]

    sources = run_sequence("Find similar books", source_ids, resolve)

    if shelves is not None:
        sources = Bookshelf.from_config(sources, config).books_in_shelves(*shelves)

    counts = count_similar_books(
        sources,
        config.ignore_authors,
        (r.work_id for r in read_books),
    )

    ranked = partition(list(counts.items()), lambda c: c[1])

    queries = sorted(
        (r for r in ranked if r.percentile >= percentile),
        key=lambda r: (-r.percentile, r.data[0]),
    )

    if limit is not None:
        queries = queries[:limit]

    logger.info(
        f"Ranked {len(counts)} candidates from {len(sources)} source books, "
        f"keeping {len(queries)}"
    )

    recommendations = run_sequence(
        "Expand recommendations",
        queries,
        lambda r: PartitionedItem(
            data=RecommendedBook(book=resolve(r.data[0]), recommendations=r.data[1]),
            percentile=r.percentile,
        ),
    )

    return sorted(
        recommendations,
        key=lambda r: (-r.percentile, r.data.book.title, r.data.book.id),
    )
