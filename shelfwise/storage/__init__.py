"""
Storage Module for Shelfwise

Normalized records and the cached repository that serves them:
- Immutable domain records
- Normalization rules (shelves, publishers, names)
- Filesystem JSON cache
- Book sources and the repository over them
"""

from shelfwise.storage.models import (
    Author,
    Book,
    ReadBook,
    Review,
    Shelf,
    SimilarBook,
    User,
)
from shelfwise.storage.cache import (
    JSONCache,
    NamespaceStats,
)
from shelfwise.storage.sources import (
    ArchiveSource,
    BookSource,
)
from shelfwise.storage.repository import Repository

__all__ = [
    # Records
    "Author",
    "Book",
    "ReadBook",
    "Review",
    "Shelf",
    "SimilarBook",
    "User",
    # Cache
    "JSONCache",
    "NamespaceStats",
    # Sources
    "ArchiveSource",
    "BookSource",
    # Repository
    "Repository",
]
