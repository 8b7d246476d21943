"""Request facade: one entry point per read operation, returning records."""

import logging
from pathlib import Path
from typing import Iterator, Optional

from officereader.backends import BackendSelector
from officereader.cache import ExtractionCache
from officereader.chunkers import PaginationView, StreamingChunker
from officereader.config import ReaderSettings, get_settings
from officereader.errors import DocumentNotFoundError, OfficeReaderError
from officereader.models import (
    CacheEntry,
    CacheStats,
    FullTextResult,
    PageResult,
    SizeProbeResult,
    StreamRecord,
)
from officereader.utils.pages import PageSelection

logger = logging.getLogger(__name__)


class DocumentReader:
    """Reads office documents through a shared extraction cache.

    Every operation returns a result record. Expected failures (missing
    file, unsupported kind, failed extraction, bad chunk or page
    arguments) are reported in the record's ``error`` and ``error_kind``
    fields instead of being raised.
    """

    def __init__(
        self,
        cache: Optional[ExtractionCache] = None,
        chunker: Optional[StreamingChunker] = None,
        pagination: Optional[PaginationView] = None,
        settings: Optional[ReaderSettings] = None,
    ):
        self.settings = settings or get_settings()
        self.cache = cache or ExtractionCache(
            selector=BackendSelector(disabled=self.settings.disabled_backend_names),
            max_entries=self.settings.cache_max_entries,
            max_bytes=self.settings.cache_max_bytes,
            check_staleness=self.settings.check_staleness,
        )
        self.chunker = chunker or StreamingChunker(self.settings.lookback_ratio)
        self.pagination = pagination or PaginationView()

    @classmethod
    def from_settings(cls, settings: Optional[ReaderSettings] = None) -> "DocumentReader":
        return cls(settings=settings or get_settings())

    def read_full(self, path: str | Path, pages: PageSelection = None) -> FullTextResult:
        """Full text, or only the selected pages/sheets/slides."""
        file_path = str(path)
        requested = "all" if pages is None or str(pages).strip().lower() in ("", "all") else str(pages)
        try:
            entry = self._entry(path)
            content, numbers = self.pagination.select_pages(entry, pages)
        except OfficeReaderError as exc:
            return FullTextResult(
                file_path=file_path,
                requested_pages=requested,
                **_error_fields(exc),
            )
        return FullTextResult(
            file_path=file_path,
            content=content,
            total_length=entry.total_chars,
            total_pages=entry.total_pages,
            requested_pages=requested,
            returned_pages=numbers,
            backend=entry.backend,
        )

    def read_range(
        self,
        path: str | Path,
        offset: int = 0,
        max_size: Optional[int] = None,
    ) -> PageResult:
        """Up to ``max_size`` characters from ``offset``."""
        if max_size is None:
            max_size = self.settings.default_page_size
        try:
            entry = self._entry(path)
            return self.pagination.read(entry, offset, max_size, file_path=str(path))
        except OfficeReaderError as exc:
            return PageResult(file_path=str(path), offset=offset, **_error_fields(exc))

    def stream(
        self,
        path: str | Path,
        chunk_size: Optional[int] = None,
        start_position: int = 0,
        word_boundary: Optional[bool] = None,
    ) -> StreamRecord:
        """Return one chunk starting at ``start_position``.

        Callers continue by passing the record's ``current_position``
        back as the next ``start_position`` until ``is_complete``.
        """
        if chunk_size is None:
            chunk_size = self.settings.default_chunk_size
        if word_boundary is None:
            word_boundary = self.settings.word_boundary

        entry: Optional[CacheEntry] = None
        try:
            entry = self._entry(path)
            session = self.chunker.open_session(
                entry,
                chunk_size=chunk_size,
                start_position=start_position,
                word_boundary=word_boundary,
            )
            chunk = self.chunker.next_chunk(entry, session)
        except OfficeReaderError as exc:
            return StreamRecord(
                file_path=str(path),
                current_position=start_position,
                total_length=entry.total_chars if entry is not None else None,
                **_error_fields(exc),
            )
        return StreamRecord(
            file_path=str(path),
            current_position=session.cursor,
            total_length=entry.total_chars,
            chunk=chunk.text,
            progress=chunk.progress,
            is_complete=chunk.is_complete,
        )

    def iter_stream(
        self,
        path: str | Path,
        chunk_size: Optional[int] = None,
        word_boundary: Optional[bool] = None,
    ) -> Iterator[StreamRecord]:
        """Stream the whole document, one record per chunk.

        Stops after the final chunk or after the first error record.
        """
        position = 0
        while True:
            record = self.stream(path, chunk_size, position, word_boundary)
            yield record
            if record.error is not None or record.is_complete:
                return
            position = record.current_position

    def probe(self, path: str | Path) -> SizeProbeResult:
        """Total characters and pages, extracting (and caching) if needed."""
        try:
            entry = self._entry(path)
        except DocumentNotFoundError as exc:
            return SizeProbeResult(file_path=str(path), file_exists=False, **_error_fields(exc))
        except OfficeReaderError as exc:
            return SizeProbeResult(file_path=str(path), **_error_fields(exc))
        return SizeProbeResult(
            file_path=str(path),
            total_length=entry.total_chars,
            total_pages=entry.total_pages,
            backend=entry.backend,
        )

    def cache_stats(self) -> CacheStats:
        return self.cache.stats()

    def clear_cache(self) -> None:
        self.cache.clear()

    def _entry(self, path: str | Path) -> CacheEntry:
        return self.cache.get_or_extract(self.settings.resolve_path(path))


def _error_fields(exc: OfficeReaderError) -> dict:
    logger.debug(f"{exc.error_kind}: {exc}")
    return {"error": str(exc), "error_kind": exc.error_kind}
