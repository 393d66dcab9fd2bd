"""
Printable summaries of bookshelves, recommendations and similar readers.

Output is plain Markdown-flavoured text meant for a terminal.
"""

from typing import Iterable, Optional

from shelfwise.intelligence.bookshelf import Bookshelf
from shelfwise.intelligence.percentile import partition
from shelfwise.intelligence.readers import SimilarReader
from shelfwise.intelligence.recommender import PartitionedRecommendation
from shelfwise.storage.normalization import formalize_author_name


SECTION_IDS = (
    "books-by-author",
    "books-by-publisher",
    "publishers",
    "popular-shelves",
    "shelves",
)

BOOK_URL = "https://www.goodreads.com/book/show/{id}"
USER_BOOKS_URL = "https://www.goodreads.com/review/list/{id}"


def underline(value: str, character: str = "=") -> str:
    """Underline a string."""
    return f"{value}\n{character * len(value)}"


def summarize_bookshelf(
    bookshelf: Bookshelf,
    sections: Optional[Iterable[str]] = None,
) -> list[str]:
    """
    Generate a printable summary of a bookshelf.

    Args:
        bookshelf: Books to summarize
        sections: IDs of the sections to include (all when omitted)

    Returns:
        One block of text per section, in a fixed order
    """
    wanted = set(sections) if sections is not None else set(SECTION_IDS)

    unknown = wanted - set(SECTION_IDS)
    if unknown:
        raise ValueError(f"Unknown summary sections: {', '.join(sorted(unknown))}")

    builders = {
        "books-by-author": ("Books by Author", _summarize_books_by_author),
        "books-by-publisher": ("Books by Publisher", _summarize_books_by_publisher),
        "publishers": ("All Publishers", _summarize_publishers),
        "popular-shelves": ("Popular Shelves", _summarize_popular_shelves),
        "shelves": ("All Shelves", _summarize_shelves),
    }

    parts = []
    for section_id in SECTION_IDS:
        if section_id in wanted:
            title, build = builders[section_id]
            parts.append(f"{underline(title)}\n\n{build(bookshelf)}")

    return parts


def _summarize_books_by_author(bookshelf: Bookshelf) -> str:
    groups = []
    for group in bookshelf.group_by_author():
        lines = [f"* {formalize_author_name(group.author.name)}"]
        lines += [f"  - {book.title} (ID={book.id})" for book in group.books]
        groups.append("\n".join(lines))

    return "\n\n".join(groups)


def _summarize_books_by_publisher(bookshelf: Bookshelf) -> str:
    groups = []
    for group in bookshelf.group_by_publisher():
        lines = [f"* {group.publisher_name}"]
        lines += [f"  - {book.title}" for book in group.books]
        groups.append("\n".join(lines))

    return "\n\n".join(groups)


def _summarize_publishers(bookshelf: Bookshelf) -> str:
    return "\n".join(
        f"* {group.publisher_name} ({len(group.books)})"
        for group in bookshelf.group_by_publisher()
    )


def _summarize_popular_shelves(bookshelf: Bookshelf) -> str:
    groups = []
    for group in bookshelf.group_by_shelf():
        width = len(str(max(b.percentile for b in group.books))) + 1

        lines = [f"* {group.shelf_name} | p{group.percentile}"]
        lines += [
            f"  - {('p' + str(b.percentile)).ljust(width)} | {b.book.title}"
            for b in group.books
        ]
        groups.append("\n".join(lines))

    return "\n\n".join(groups)


def _summarize_shelves(bookshelf: Bookshelf) -> str:
    return "\n".join(
        f"* p{str(group.percentile).ljust(3)} | {group.shelf_name}"
        for group in bookshelf.group_by_shelf()
    )


def summarize_recommended_books(
    recommendations: Iterable[PartitionedRecommendation],
    genre_percentile: int = 95,
) -> str:
    """
    Produce a summary of recommended books.

    Args:
        recommendations: Ranked recommendations
        genre_percentile: Minimum rank a book's shelf needs to be listed
    """
    blocks = []
    for item in recommendations:
        book = item.data.book

        shelves = sorted(
            s.data.name
            for s in partition(book.shelves, lambda s: s.count)
            if s.percentile >= genre_percentile
        )

        lines = [
            underline(f"{book.title} | p{item.percentile}"),
            "",
            f"Author: {book.author.name}",
            f"Shelves: {', '.join(shelves)}",
        ]

        if book.average_rating:
            lines.append(f"Average Rating: {book.average_rating:.2f}")

        lines += ["", f"[View book]({BOOK_URL.format(id=book.id)})"]
        blocks.append("\n".join(lines))

    return "\n\n\n".join(blocks)


def summarize_similar_readers(readers: Iterable[SimilarReader]) -> str:
    """Produce a summary of similar readers."""
    blocks = []
    for reader in readers:
        lines = [
            underline(reader.user.name),
            "",
            f"[Profile]({reader.user.profile_url})",
            f"[Books]({USER_BOOKS_URL.format(id=reader.user.id)})",
            "",
            underline(f"Shared Books: {len(reader.books)}", "-"),
            "",
        ]
        lines += [f"* {book.title}" for book in reader.books]

        if reader.shelves:
            lines += ["", underline("Shared Shelves", "-"), ""]
            lines += [f"* {shelf.name}: {shelf.count}" for shelf in reader.shelves]

        blocks.append("\n".join(lines))

    return "\n\n\n".join(blocks)
