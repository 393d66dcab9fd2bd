"""
Book sources: where the repository gets raw records from.

BookSource is the port; ArchiveSource reads a directory of raw JSON
records laid out as:

    books/<book id>.json         one raw book
    read-books/<user id>.json    a list of raw read books
    reviews/<book id>.json       a list of raw reviews, each with a user
"""

import json
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Any, Union

from loguru import logger

from shelfwise.errors import NotFoundError, OperationalError


class BookSource(ABC):
    """Abstraction for a provider of raw book data."""

    @abstractmethod
    def fetch_book(self, book_id: str) -> dict:
        """Return the raw record for a book."""
        ...

    @abstractmethod
    def fetch_read_books(self, user_id: str) -> list[dict]:
        """Return the raw read books of a user."""
        ...

    @abstractmethod
    def fetch_reviews(self, book_id: str) -> list[dict]:
        """Return the raw reviews of a book, best first."""
        ...


class ArchiveSource(BookSource):
    """Book source backed by a directory of JSON files."""

    def __init__(self, directory: Union[str, Path]):
        self.directory = Path(directory).expanduser()
        logger.debug(f"ArchiveSource initialized: directory={self.directory}")

    def _load(self, resource: str, *parts: str) -> Any:
        path = self.directory.joinpath(*parts)

        try:
            text = path.read_text(encoding="utf-8")
        except FileNotFoundError:
            raise NotFoundError(resource, path.stem)

        try:
            return json.loads(text)
        except json.JSONDecodeError as e:
            raise OperationalError(f"Invalid JSON in archive file: {path}", detail=str(e)) from e

    def fetch_book(self, book_id: str) -> dict:
        return self._load("Book", "books", f"{book_id}.json")

    def fetch_read_books(self, user_id: str) -> list[dict]:
        return self._load("Read books", "read-books", f"{user_id}.json")

    def fetch_reviews(self, book_id: str) -> list[dict]:
        try:
            return self._load("Reviews", "reviews", f"{book_id}.json")
        except NotFoundError:
            logger.debug(f"No archived reviews for book {book_id}")
            return []
