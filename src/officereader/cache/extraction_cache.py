"""In-memory, single-flight cache of extracted document text."""

import logging
import os
import threading
from collections import OrderedDict
from contextlib import contextmanager
from dataclasses import dataclass, field
from pathlib import Path
from typing import Iterator, Optional

from officereader.backends import BackendSelector
from officereader.errors import DocumentAccessError, DocumentNotFoundError
from officereader.models import CacheEntry, CacheStats, DocumentKind
from officereader.utils import detect_kind

logger = logging.getLogger(__name__)


@dataclass
class _KeyLock:
    lock: threading.Lock = field(default_factory=threading.Lock)
    users: int = 0


class ExtractionCache:
    """Maps a file to its extracted text, extracting at most once per key.

    Concurrent callers asking for the same uncached file collapse onto one
    extraction: the first takes the key's lock and extracts, the others
    block on that lock and then read the stored entry. Different files
    use different locks and never wait on each other.

    Failed extractions are not stored, so the next call retries.

    Capacity is unbounded unless ``max_entries`` or ``max_bytes`` is set,
    in which case least-recently-used entries are evicted.
    """

    def __init__(
        self,
        selector: Optional[BackendSelector] = None,
        max_entries: Optional[int] = None,
        max_bytes: Optional[int] = None,
        check_staleness: bool = True,
    ):
        """Initialize the cache.

        Args:
            selector: Backend selector used on misses
            max_entries: Evict LRU entries beyond this count
            max_bytes: Evict LRU entries beyond this memory estimate
            check_staleness: Re-extract when a file's mtime or size changed
        """
        self.selector = selector or BackendSelector()
        self.max_entries = max_entries
        self.max_bytes = max_bytes
        self.check_staleness = check_staleness

        self._entries: OrderedDict[str, CacheEntry] = OrderedDict()
        self._total_bytes = 0
        # Guards _entries, _key_locks and counters; never held while extracting
        self._guard = threading.Lock()
        # A key's lock exists only while some caller holds or waits on it
        self._key_locks: dict[str, _KeyLock] = {}

        self._hits = 0
        self._misses = 0
        self._extractions = 0
        self._evictions = 0

    @staticmethod
    def key_for(path: Path | str) -> str:
        """Canonical cache key for a file path."""
        return str(Path(path).expanduser().resolve())

    def get_or_extract(
        self,
        path: Path | str,
        kind: Optional[DocumentKind] = None,
    ) -> CacheEntry:
        """Return the cached entry for ``path``, extracting it if needed.

        Args:
            path: Document path
            kind: Document kind; detected from the extension when omitted

        Raises:
            DocumentNotFoundError: the path does not name a readable file
                (no backend runs)
            DocumentAccessError: permission denied on the file or its parents
            UnsupportedDocumentKindError: unknown extension
            AllBackendsFailedError: every backend failed (not cached)
        """
        key, stat = self._stat(path)
        if kind is None:
            kind = detect_kind(key)

        entry = self._lookup(key, stat.st_mtime_ns, stat.st_size)
        if entry is not None:
            return entry

        with self._key_lock(key):
            # Another caller may have populated the entry while we waited
            entry = self._lookup(key, stat.st_mtime_ns, stat.st_size, count=False)
            if entry is not None:
                return entry

            logger.info(f"Extracting {Path(key).name} ({kind.value})")
            result = self.selector.select_and_extract(key, kind)
            entry = CacheEntry.build(
                key,
                result,
                mtime_ns=stat.st_mtime_ns,
                file_size=stat.st_size,
            )
            self._store(entry)
            logger.info(
                f"Cached {Path(key).name}: {entry.total_chars} chars, "
                f"{entry.total_pages} pages via {entry.backend} "
                f"in {result.elapsed_ms:.1f} ms"
            )
            return entry

    def peek(self, path: Path | str) -> Optional[CacheEntry]:
        """Return the entry for ``path`` if cached, without extracting."""
        with self._guard:
            return self._entries.get(self.key_for(path))

    def invalidate(self, path: Path | str) -> bool:
        """Drop one file's entry. Returns True if something was removed."""
        key = self.key_for(path)
        with self._guard:
            entry = self._entries.pop(key, None)
            if entry is None:
                return False
            self._total_bytes -= entry.size_bytes
        logger.debug(f"Invalidated {key}")
        return True

    def clear(self) -> None:
        """Drop every entry."""
        with self._guard:
            count = len(self._entries)
            self._entries.clear()
            self._total_bytes = 0
        logger.info(f"Cache cleared ({count} entries)")

    def stats(self) -> CacheStats:
        """Entry count, memory estimate and activity counters."""
        with self._guard:
            return CacheStats(
                entry_count=len(self._entries),
                total_bytes=self._total_bytes,
                hits=self._hits,
                misses=self._misses,
                extractions=self._extractions,
                evictions=self._evictions,
                max_entries=self.max_entries,
                max_bytes=self.max_bytes,
            )

    def __len__(self) -> int:
        with self._guard:
            return len(self._entries)

    def _stat(self, path: Path | str) -> tuple[str, os.stat_result]:
        """Canonical key and stat of a regular file, or a reader error."""
        try:
            key = self.key_for(path)
            stat = os.stat(key)
        except PermissionError:
            raise DocumentAccessError(str(path)) from None
        except (OSError, ValueError) as e:
            # Missing files, paths through a regular file, embedded NUL bytes
            logger.debug(f"Cannot stat {path!r}: {e}")
            raise DocumentNotFoundError(str(path)) from None
        if not os.path.isfile(key):
            raise DocumentNotFoundError(str(path))
        return key, stat

    @contextmanager
    def _key_lock(self, key: str) -> Iterator[None]:
        """Hold the single-flight lock for ``key``.

        The lock is shared by every caller holding or waiting on it and is
        dropped when the last of them leaves.
        """
        with self._guard:
            slot = self._key_locks.get(key)
            if slot is None:
                slot = self._key_locks[key] = _KeyLock()
            slot.users += 1
        try:
            with slot.lock:
                yield
        finally:
            with self._guard:
                slot.users -= 1
                if slot.users == 0:
                    del self._key_locks[key]

    def _lookup(
        self,
        key: str,
        mtime_ns: int,
        file_size: int,
        count: bool = True,
    ) -> Optional[CacheEntry]:
        with self._guard:
            entry = self._entries.get(key)
            if entry is not None and self.check_staleness and not entry.is_fresh(mtime_ns, file_size):
                logger.info(f"File changed on disk, dropping cached text: {key}")
                del self._entries[key]
                self._total_bytes -= entry.size_bytes
                entry = None
            if entry is None:
                if count:
                    self._misses += 1
                return None
            self._entries.move_to_end(key)
            if count:
                self._hits += 1
            return entry

    def _store(self, entry: CacheEntry) -> None:
        with self._guard:
            previous = self._entries.pop(entry.key, None)
            if previous is not None:
                self._total_bytes -= previous.size_bytes
            self._entries[entry.key] = entry
            self._total_bytes += entry.size_bytes
            self._extractions += 1
            self._evict_locked(keep=entry.key)

    def _evict_locked(self, keep: str) -> None:
        """Evict LRU entries over capacity; the newest entry always stays."""
        while len(self._entries) > 1 and self._over_capacity():
            key, entry = next(iter(self._entries.items()))
            if key == keep:
                break
            del self._entries[key]
            self._total_bytes -= entry.size_bytes
            self._evictions += 1
            logger.info(f"Evicted {key} ({entry.size_bytes} bytes)")

    def _over_capacity(self) -> bool:
        if self.max_entries is not None and len(self._entries) > self.max_entries:
            return True
        if self.max_bytes is not None and self._total_bytes > self.max_bytes:
            return True
        return False
