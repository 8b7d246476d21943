"""Cursor-driven chunking of cached document text."""

import logging
from typing import Iterator

from officereader.errors import (
    InvalidChunkConfigurationError,
    NonAdvancingIterationError,
)
from officereader.models import CacheEntry, Chunk, StreamingSession

logger = logging.getLogger(__name__)


class StreamingChunker:
    """Split cached text into bounded chunks, one session advance at a time.

    With word-boundary mode on, a cut that would land inside a word moves
    back to the nearest whitespace, looking back at most
    ``chunk_size * lookback_ratio`` characters; beyond that the hard cut
    is kept. A ratio of 0 always keeps the hard cut. Chunks never drop
    characters, so concatenating them always reproduces the text.
    """

    DEFAULT_CHUNK_SIZE = 10000
    LOOKBACK_RATIO = 0.1

    def __init__(self, lookback_ratio: float = LOOKBACK_RATIO):
        if not 0 <= lookback_ratio < 1:
            raise InvalidChunkConfigurationError(
                f"lookback_ratio must be in [0, 1), got {lookback_ratio}"
            )
        self.lookback_ratio = lookback_ratio

    def open_session(
        self,
        entry: CacheEntry,
        chunk_size: int = DEFAULT_CHUNK_SIZE,
        start_position: int = 0,
        word_boundary: bool = True,
    ) -> StreamingSession:
        """Create a session over ``entry``, optionally resuming at a cursor.

        Raises:
            InvalidChunkConfigurationError: chunk_size below 1
            NonAdvancingIterationError: start_position outside the text
        """
        self._check_chunk_size(chunk_size)
        if start_position < 0 or start_position > entry.total_chars:
            raise NonAdvancingIterationError(
                f"Start position {start_position} is outside the document "
                f"(0-{entry.total_chars})"
            )
        return StreamingSession(
            file_key=entry.key,
            chunk_size_chars=chunk_size,
            total_chars=entry.total_chars,
            cursor=start_position,
            # An empty document still yields one (empty, final) chunk
            is_complete=start_position >= entry.total_chars and entry.total_chars > 0,
            word_boundary=word_boundary,
        )

    def next_chunk(self, entry: CacheEntry, session: StreamingSession) -> Chunk:
        """Produce the next chunk and advance ``session``.

        Raises:
            InvalidChunkConfigurationError: chunk size below 1
            NonAdvancingIterationError: the session cannot move forward
                (already complete, cursor out of range, or stale)
        """
        self._check_chunk_size(session.chunk_size_chars)
        total = entry.total_chars
        cursor = session.cursor

        if session.file_key != entry.key or session.total_chars != total:
            raise NonAdvancingIterationError(
                f"Session for {session.file_key} ({session.total_chars} chars) "
                f"does not match cached text ({total} chars)"
            )
        if session.is_complete:
            raise NonAdvancingIterationError("Session is already complete")
        if cursor < 0 or cursor > total:
            raise NonAdvancingIterationError(
                f"Cursor {cursor} is outside the document (0-{total})"
            )

        if total == 0:
            session.is_complete = True
            return Chunk(
                text="",
                start_char=0,
                end_char=0,
                start_byte=0,
                end_byte=0,
                progress=100.0,
                is_complete=True,
            )

        end = min(cursor + session.chunk_size_chars, total)
        if session.word_boundary:
            end = self._boundary_end(entry.text, cursor, end, session.chunk_size_chars)

        if end <= cursor:
            raise NonAdvancingIterationError(
                f"Chunk at cursor {cursor} would not advance (end={end})"
            )

        start_byte, end_byte = entry.byte_range(cursor, end)
        session.cursor = end
        session.is_complete = end >= total
        chunk = Chunk(
            text=entry.text[cursor:end],
            start_char=cursor,
            end_char=end,
            start_byte=start_byte,
            end_byte=end_byte,
            progress=session.progress,
            is_complete=session.is_complete,
        )
        logger.debug(
            f"chunk {cursor}-{end} of {total} ({chunk.progress:.1f}%) "
            f"for {session.file_key}"
        )
        return chunk

    def iter_chunks(
        self,
        entry: CacheEntry,
        chunk_size: int = DEFAULT_CHUNK_SIZE,
        word_boundary: bool = True,
    ) -> Iterator[Chunk]:
        """Yield every chunk of ``entry`` from the start."""
        session = self.open_session(entry, chunk_size, word_boundary=word_boundary)
        while not session.is_complete:
            yield self.next_chunk(entry, session)

    def _boundary_end(self, text: str, cursor: int, end: int, chunk_size: int) -> int:
        """Move ``end`` back to whitespace within the lookback window."""
        if self.lookback_ratio == 0 or end >= len(text) or text[end].isspace():
            return end
        window = max(1, int(chunk_size * self.lookback_ratio))
        floor = max(cursor + 1, end - window)
        for pos in range(end - 1, floor - 1, -1):
            if text[pos].isspace():
                return pos
        return end

    @staticmethod
    def _check_chunk_size(chunk_size: int) -> None:
        if chunk_size < 1:
            raise InvalidChunkConfigurationError(
                f"Chunk size must be at least 1 character, got {chunk_size}"
            )
