"""
Command-line interface for Shelfwise.

Commands:
- find-books: recommend books from your rated books
- find-readers: find readers with similar tastes
- summarize: summarize your locally cached books
- sync-books: cache data on your read books
- clear-cache / show-cache-stats: manage the local cache
"""

import argparse
import sys
from pathlib import Path
from typing import Optional, Sequence, TextIO

from loguru import logger

from shelfwise.config import Configuration, Settings, load_config
from shelfwise.errors import CLIError, ShelfwiseException
from shelfwise.intelligence.bookshelf import Bookshelf
from shelfwise.intelligence.readers import find_similar_readers
from shelfwise.intelligence.recommender import find_recommended_books
from shelfwise.intelligence.summary import (
    SECTION_IDS,
    summarize_bookshelf,
    summarize_recommended_books,
    summarize_similar_readers,
)
from shelfwise.log import LOG_LEVELS, configure_logging, run_sequence
from shelfwise.storage.cache import JSONCache
from shelfwise.storage.repository import Repository
from shelfwise.storage.sources import ArchiveSource


class CLI:
    """Runs commands against a repository on behalf of one reader."""

    def __init__(
        self,
        repository: Repository,
        config: Configuration,
        user_id: str,
        stdout: TextIO = sys.stdout,
    ):
        self.repository = repository
        self.config = config
        self.user_id = user_id
        self.stdout = stdout

    def find_books(
        self,
        min_rating: int,
        percentile: int,
        core_book_ids: Optional[list[str]] = None,
        limit: Optional[int] = None,
        shelves: Optional[list[str]] = None,
    ):
        """Find recommended books."""
        read_books = self.repository.get_read_books(self.user_id)

        recommendations = find_recommended_books(
            read_books,
            self.repository,
            self.config,
            min_rating=min_rating,
            percentile=percentile,
            core_book_ids=core_book_ids,
            limit=limit,
            shelves=shelves,
        )

        self._write(summarize_recommended_books(recommendations))

    def find_readers(
        self,
        max_reviews: int,
        book_ids: Optional[list[str]] = None,
        min_books: int = 0,
    ):
        """Find readers with similar tastes."""
        read_books = self.repository.get_read_books(self.user_id)

        if book_ids:
            by_book_id = {r.book_id: r for r in read_books}

            selected = []
            for book_id in book_ids:
                if book_id not in by_book_id:
                    raise CLIError(f"No book found with ID: {book_id}")
                selected.append(by_book_id[book_id])

            read_books = selected

        readers = find_similar_readers(
            read_books,
            self.repository,
            self.config,
            max_reviews=max_reviews,
        )

        self._write(summarize_similar_readers(
            r for r in readers if len(r.books) >= min_books
        ))

    def summarize(
        self,
        sections: Optional[list[str]] = None,
        shelves: Optional[list[str]] = None,
    ):
        """Summarize the locally cached read books."""
        read_books = self.repository.get_read_books(self.user_id)
        books = self.repository.get_local_books(r.book_id for r in read_books)

        bookshelf = Bookshelf.from_config(books, self.config)
        if shelves:
            bookshelf = bookshelf.restrict_shelves(*shelves)

        self._write("\n\n".join(summarize_bookshelf(bookshelf, sections)))

    def sync_books(self, recent: Optional[int] = None):
        """Cache data on read books."""
        read_books = self.repository.get_read_books(self.user_id, recent=recent)
        run_sequence("Sync books", read_books, lambda r: self.repository.get_book(r.book_id))

    def _write(self, text: str):
        self.stdout.write(text + "\n")


def percentile_type(value: str) -> int:
    """Parse a percentile argument."""
    try:
        number = int(value)
    except ValueError:
        raise argparse.ArgumentTypeError(f"{value!r} is not an integer")

    if not 0 <= number <= 100:
        raise argparse.ArgumentTypeError(f"{value} is not between 0 and 100")

    return number


def build_parser(settings: Settings) -> argparse.ArgumentParser:
    """Build the argument parser."""
    parser = argparse.ArgumentParser(
        prog="shelfwise",
        description="Recommendations and summaries from your reading history",
    )

    parser.add_argument("--data-dir", default=settings.data_dir,
                        help="Directory for the archive, cache and config")
    parser.add_argument("--config", default=settings.config_path,
                        help="Path to a JSON configuration file")
    parser.add_argument("--archive",
                        help="Directory of raw JSON records (default: <data-dir>/archive)")
    parser.add_argument("--user-id", default=settings.user_id,
                        help="ID of the reader whose books to use")
    parser.add_argument("--log-level", default=settings.log_level, choices=LOG_LEVELS,
                        type=str.upper, help="The log level to use")
    parser.add_argument("--log-time", action="store_true", default=settings.log_time,
                        help="Show the elapsed time in log entries")
    parser.add_argument("--no-cache", dest="cache", action="store_false",
                        default=settings.cache_enabled,
                        help="Always reload data instead of using the cache")
    parser.add_argument("--shelf-percentile", type=percentile_type,
                        help="Minimum per-book and global percentile for a shelf to count")

    commands = parser.add_subparsers(dest="command", required=True)

    find_books = commands.add_parser("find-books", help="Find recommended books")
    find_books.add_argument("--book-id", action="append",
                            help="A book that must be related to the recommendations")
    find_books.add_argument("--min-rating", type=int, default=3,
                            help="Minimum rating of a read book used for recommendations")
    find_books.add_argument("--percentile", type=percentile_type, default=75,
                            help="Minimum percentile of recommendations to show")
    find_books.add_argument("--limit", type=int,
                            help="Maximum number of books to show")
    find_books.add_argument("--shelf", action="append",
                            help="A shelf a source book must appear in")

    find_readers = commands.add_parser("find-readers", help="Find readers with similar tastes")
    find_readers.add_argument("--book-id", action="append",
                              help="A book that readers must have rated")
    find_readers.add_argument("--reviews", type=int, default=10,
                              help="Maximum number of reviews per book to query")
    find_readers.add_argument("--min-books", type=int, default=0,
                              help="Minimum number of shared books to show a reader")

    summarize = commands.add_parser("summarize", help="Summarize your locally cached books")
    summarize.add_argument("--section", action="append", choices=SECTION_IDS,
                           help="A specific section to show")
    summarize.add_argument("--shelf", action="append",
                           help="A shelf that summarized books must appear in")

    sync = commands.add_parser("sync-books", help="Cache data on your read books")
    sync.add_argument("--recent", type=int, help="Only sync this many recent books")

    clear = commands.add_parser("clear-cache", help="Clear the cache")
    clear.add_argument("--namespace", action="append", help="A specific namespace to clear")

    commands.add_parser("show-cache-stats", help="Show information on the cache")

    return parser


def run(args: argparse.Namespace, stdout: TextIO) -> None:
    """Run a parsed command."""
    data_dir = Path(args.data_dir).expanduser()
    cache = JSONCache(data_dir / "cache", enabled=args.cache)

    if args.command == "clear-cache":
        cache.clear(args.namespace)
        return

    if args.command == "show-cache-stats":
        for stats in cache.stats():
            stdout.write(f"{stats.namespace}: {stats.items}\n")
        return

    if args.config:
        config = load_config(args.config)
    else:
        config = load_config(data_dir / "config.json", allow_missing=True)

    if args.shelf_percentile is not None:
        config = config.model_copy(update={"shelf_percentile": args.shelf_percentile})

    if not args.user_id:
        raise CLIError("A user ID is required: pass --user-id or set SHELFWISE_USER_ID")

    source = ArchiveSource(args.archive or data_dir / "archive")
    cli = CLI(Repository(source, cache, config), config, args.user_id, stdout)

    if args.command == "find-books":
        cli.find_books(
            min_rating=args.min_rating,
            percentile=args.percentile,
            core_book_ids=args.book_id,
            limit=args.limit,
            shelves=args.shelf,
        )
    elif args.command == "find-readers":
        cli.find_readers(
            max_reviews=args.reviews,
            book_ids=args.book_id,
            min_books=args.min_books,
        )
    elif args.command == "summarize":
        cli.summarize(sections=args.section, shelves=args.shelf)
    elif args.command == "sync-books":
        cli.sync_books(recent=args.recent)


def main(
    argv: Optional[Sequence[str]] = None,
    stdout: TextIO = sys.stdout,
    stderr: TextIO = sys.stderr,
) -> int:
    """
    Entry point for the shelfwise command.

    Returns:
        Exit status: 0 on success, 1 on a handled error
    """
    settings = Settings.from_env()
    parser = build_parser(settings)
    args = parser.parse_args(argv)

    configure_logging(args.log_level, show_time=args.log_time)

    try:
        run(args, stdout)
    except ShelfwiseException as e:
        logger.debug(f"Command failed: {e.code}")
        stderr.write(f"{e}\n")
        return 1

    return 0


if __name__ == "__main__":
    sys.exit(main())
