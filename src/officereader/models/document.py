"""Core data models for extracted documents, cache entries and sessions."""

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Optional

import numpy as np

PAGE_BREAK = "\f"


class DocumentKind(str, Enum):
    """Document formats the reader knows how to extract."""

    PDF = "pdf"
    XLSX = "xlsx"
    DOCX = "docx"
    PPTX = "pptx"


@dataclass(frozen=True)
class ExtractionResult:
    """Text produced by the backend that won selection."""

    text: str
    backend: str
    attempts: list[str] = field(default_factory=list)
    elapsed_ms: float = 0.0


def build_char_index(text: str) -> np.ndarray:
    """Map every character offset of ``text`` to its UTF-8 byte offset.

    The result has ``len(text) + 1`` entries; the last one is the UTF-8
    length of the whole text. Built in one vectorised pass over the
    code points.
    """
    index = np.zeros(len(text) + 1, dtype=np.int64)
    if not text:
        return index

    # surrogatepass keeps lone surrogates (3 bytes each in UTF-8 terms)
    codepoints = np.frombuffer(
        text.encode("utf-32-le", "surrogatepass"), dtype=np.uint32
    )
    widths = (
        1
        + (codepoints >= 0x80).astype(np.int64)
        + (codepoints >= 0x800)
        + (codepoints >= 0x10000)
    )
    np.cumsum(widths, out=index[1:])
    return index


def find_page_starts(text: str) -> list[int]:
    """Return the character offset where each page begins."""
    starts = [0]
    pos = text.find(PAGE_BREAK)
    while pos != -1:
        starts.append(pos + 1)
        pos = text.find(PAGE_BREAK, pos + 1)
    return starts


@dataclass(frozen=True, eq=False)
class CacheEntry:
    """Fully extracted text of one file, immutable once built."""

    key: str
    text: str = field(repr=False)
    char_index: np.ndarray = field(repr=False)
    page_starts: list[int] = field(repr=False)
    backend: str
    mtime_ns: int
    file_size: int
    extracted_at: datetime
    size_bytes: int

    @classmethod
    def build(
        cls,
        key: str,
        result: ExtractionResult,
        mtime_ns: int = 0,
        file_size: int = 0,
    ) -> "CacheEntry":
        """Create an entry from a backend result, indexing it once."""
        char_index = build_char_index(result.text)
        return cls(
            key=key,
            text=result.text,
            char_index=char_index,
            page_starts=find_page_starts(result.text),
            backend=result.backend,
            mtime_ns=mtime_ns,
            file_size=file_size,
            extracted_at=datetime.now(),
            size_bytes=int(char_index[-1]) + char_index.nbytes,
        )

    @property
    def total_chars(self) -> int:
        return len(self.char_index) - 1

    @property
    def total_bytes(self) -> int:
        """UTF-8 length of the text."""
        return int(self.char_index[-1])

    @property
    def total_pages(self) -> int:
        return len(self.page_starts)

    def is_fresh(self, mtime_ns: int, file_size: int) -> bool:
        """Check whether the file still matches what was extracted."""
        return self.mtime_ns == mtime_ns and self.file_size == file_size

    def slice(self, start: int, end: int) -> str:
        """Return characters ``[start, end)``, clamped to the text."""
        start = max(0, min(start, self.total_chars))
        end = max(start, min(end, self.total_chars))
        return self.text[start:end]

    def byte_range(self, start: int, end: int) -> tuple[int, int]:
        """UTF-8 byte offsets of the character range ``[start, end)``."""
        start = max(0, min(start, self.total_chars))
        end = max(start, min(end, self.total_chars))
        return int(self.char_index[start]), int(self.char_index[end])

    def page_span(self, page_number: int) -> tuple[int, int]:
        """Character range of a 1-based page, excluding its page break."""
        start = self.page_starts[page_number - 1]
        if page_number < len(self.page_starts):
            end = self.page_starts[page_number] - 1
        else:
            end = self.total_chars
        return start, end


@dataclass
class StreamingSession:
    """Caller-held cursor over one cached document.

    A session has a single owner that advances it serially; only the
    chunker moves ``cursor``.
    """

    file_key: str
    chunk_size_chars: int
    total_chars: int
    cursor: int = 0
    is_complete: bool = False
    word_boundary: bool = True

    @property
    def progress(self) -> float:
        """Percentage of characters consumed; empty documents count as done."""
        if self.total_chars == 0:
            return 100.0 if self.is_complete else 0.0
        return self.cursor / self.total_chars * 100.0


@dataclass(frozen=True)
class Chunk:
    """One slice produced by a streaming session."""

    text: str
    start_char: int
    end_char: int
    start_byte: int
    end_byte: int
    progress: float
    is_complete: bool


@dataclass(frozen=True)
class CacheStats:
    """Snapshot of cache occupancy and activity."""

    entry_count: int
    total_bytes: int
    hits: int = 0
    misses: int = 0
    extractions: int = 0
    evictions: int = 0
    max_entries: Optional[int] = None
    max_bytes: Optional[int] = None
