"""
Filesystem JSON Cache

Persistent caching of normalized records:
- Hierarchical keys (namespace/.../name) mapped to JSON files
- Read-through fetch with a compute callback
- Namespace listing, clearing and statistics
"""

import json
import shutil
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Callable, Optional, Sequence, Union

from loguru import logger


KeyPath = Sequence[Union[str, int]]


@dataclass
class NamespaceStats:
    """Item count for one cache namespace."""

    namespace: str
    items: int


class JSONCache:
    """
    Cache of JSON documents stored on disk.

    Usage:
        cache = JSONCache("~/.shelfwise/data")

        book = cache.fetch(["books", "123"], lambda: load_book("123"))
        books = cache.entries(["books"])
    """

    def __init__(self, directory: Union[str, Path], enabled: bool = True):
        """
        Initialize cache.

        Args:
            directory: Root directory for cached files
            enabled: When False, values are always recomputed (and stored)
        """
        self.directory = Path(directory).expanduser()
        self.enabled = enabled

        self._hits = 0
        self._misses = 0

        logger.debug(f"JSONCache initialized: directory={self.directory}, enabled={enabled}")

    def _path_for(self, key_path: KeyPath) -> Path:
        """Get the file used to store a key."""
        if not key_path:
            raise ValueError("A cache key needs at least one part")

        parts = [str(p) for p in key_path]
        return self.directory.joinpath(*parts[:-1], f"{parts[-1]}.json")

    def fetch(self, key_path: KeyPath, compute_value: Callable[[], Any]) -> Any:
        """
        Get a cached value, computing and storing it on a miss.

        Args:
            key_path: Namespaced key
            compute_value: Produces the JSON-serializable value on a miss

        Returns:
            The cached or computed value
        """
        path = self._path_for(key_path)

        if self.enabled and path.exists():
            self._hits += 1
            return json.loads(path.read_text(encoding="utf-8"))

        self._misses += 1
        value = compute_value()

        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(json.dumps(value, indent=2, sort_keys=True), encoding="utf-8")

        return value

    def entries(self, namespace: KeyPath) -> list[Any]:
        """Get every value stored directly under a namespace, ordered by key."""
        directory = self.directory.joinpath(*[str(p) for p in namespace])
        if not directory.is_dir():
            return []

        return [
            json.loads(path.read_text(encoding="utf-8"))
            for path in sorted(directory.glob("*.json"))
        ]

    def clear(self, namespaces: Optional[Sequence[str]] = None):
        """
        Remove cached values.

        Args:
            namespaces: Top-level namespaces to remove (all when omitted)
        """
        if not self.directory.is_dir():
            return

        if namespaces is None:
            targets = sorted(p for p in self.directory.iterdir() if p.is_dir())
        else:
            targets = [self.directory / name for name in sorted(namespaces)]

        for target in targets:
            if target.is_dir():
                shutil.rmtree(target)
                logger.info(f"Cleared cache namespace: {target.name}")

    def stats(self) -> list[NamespaceStats]:
        """Count the items in each top-level namespace."""
        if not self.directory.is_dir():
            return []

        return [
            NamespaceStats(namespace=path.name, items=sum(1 for _ in path.rglob("*.json")))
            for path in sorted(self.directory.iterdir())
            if path.is_dir()
        ]

    @property
    def hit_rate(self) -> float:
        """Cache hit rate for this instance."""
        total = self._hits + self._misses
        if total == 0:
            return 0.0
        return self._hits / total
