"""
Normalization rules applied to raw records before they reach the engines.

- Whitespace cleanup for titles and names
- Author names in "Last, First" form for sorting
- Shelf ignore/merge rules
- Publisher merge rules
"""

import re
from collections import Counter
from typing import Iterable, Optional, TYPE_CHECKING

from shelfwise.storage.models import Shelf

if TYPE_CHECKING:
    from shelfwise.config import Configuration


WHITESPACE_PATTERN = re.compile(r"\s{2,}")


def normalize_string(value: str) -> str:
    """Trim a string and collapse runs of whitespace."""
    return WHITESPACE_PATTERN.sub(" ", value.strip())


def formalize_author_name(name: str) -> str:
    """
    Display an author's name in "Last, First" form.

    Single-word names are returned unchanged.
    """
    parts = normalize_string(name).split()
    if not parts:
        return ""

    last = parts[-1]
    rest = " ".join(parts[:-1])

    return ", ".join(p for p in (last, rest) if p)


def sanitize_shelves(
    shelves: Iterable[Shelf],
    config: "Configuration",
) -> tuple[Shelf, ...]:
    """
    Apply the configured shelf rules to a book's shelves.

    Ignored shelves are dropped and merged shelves are folded into their
    canonical name with their counts summed.

    Args:
        shelves: Raw shelves
        config: Active configuration

    Returns:
        Shelves ordered by count (descending), then name
    """
    ignored = set(config.ignore_shelves)

    canonical_names = {}
    for canonical, aliases in config.merge_shelves.items():
        for alias in aliases:
            canonical_names[alias] = canonical

    counts: Counter = Counter()
    for shelf in shelves:
        name = normalize_string(shelf.name)
        name = canonical_names.get(name, name)

        if not name or name in ignored or shelf.count <= 0:
            continue

        counts[name] += shelf.count

    return tuple(
        Shelf(name=name, count=count)
        for name, count in sorted(counts.items(), key=lambda c: (-c[1], c[0]))
    )


def resolve_publisher(name: str, config: "Configuration") -> str:
    """Map a publisher alias to its canonical name."""
    name = normalize_string(name)

    for canonical, aliases in config.merge_publishers.items():
        if name in aliases:
            return canonical

    return name


def determine_publisher(
    official: Optional[str],
    from_reviews: Iterable[str],
) -> Optional[str]:
    """
    Pick the most common publisher across a book and its reviews.

    The official publisher counts once. Ties go to the alphabetically first.
    """
    counts: Counter = Counter()

    if official:
        counts[official] += 1

    for publisher in from_reviews:
        if publisher:
            counts[publisher] += 1

    if not counts:
        return None

    ranked = sorted(counts.items(), key=lambda c: (-c[1], c[0]))
    return ranked[0][0]
