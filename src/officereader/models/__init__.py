"""Data models for the office reader."""

from officereader.models.document import (
    PAGE_BREAK,
    CacheEntry,
    CacheStats,
    Chunk,
    DocumentKind,
    ExtractionResult,
    StreamingSession,
    build_char_index,
    find_page_starts,
)
from officereader.models.results import (
    FullTextResult,
    PageResult,
    SizeProbeResult,
    StreamRecord,
)

__all__ = [
    "PAGE_BREAK",
    "CacheEntry",
    "CacheStats",
    "Chunk",
    "DocumentKind",
    "ExtractionResult",
    "StreamingSession",
    "build_char_index",
    "find_page_starts",
    "FullTextResult",
    "PageResult",
    "SizeProbeResult",
    "StreamRecord",
]
