"""
Shelf Intelligence Module for Shelfwise

Ranking and aggregation over a reader's books:
- Dense-rank percentiles
- Shelf, author and publisher groupings
- Collaborative book recommendations
- Similar reader discovery
- Printable summaries

Components:
- partition: Rank items by weight
- Bookshelf: Aggregated views over a set of books
- find_recommended_books: Recommend books from rated books
- find_similar_readers: Find readers who share rated books
"""

from shelfwise.intelligence.percentile import (
    PartitionedItem,
    partition,
    round_half_up,
)
from shelfwise.intelligence.bookshelf import (
    AuthorGroup,
    Bookshelf,
    PublisherGroup,
    ShelfGroup,
    ShelvedBook,
    shelf_dominance,
)
from shelfwise.intelligence.recommender import (
    PartitionedRecommendation,
    RecommendedBook,
    find_recommended_books,
)
from shelfwise.intelligence.readers import (
    SimilarReader,
    find_similar_readers,
)

__all__ = [
    # Ranking
    "PartitionedItem",
    "partition",
    "round_half_up",
    # Bookshelf
    "AuthorGroup",
    "Bookshelf",
    "PublisherGroup",
    "ShelfGroup",
    "ShelvedBook",
    "shelf_dominance",
    # Recommendations
    "PartitionedRecommendation",
    "RecommendedBook",
    "find_recommended_books",
    # Readers
    "SimilarReader",
    "find_similar_readers",
]
