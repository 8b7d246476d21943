"""FastMCP server exposing the document reader as tools."""

import asyncio
import json
import logging
from functools import partial
from typing import Any, Callable, Optional, TypeVar

from mcp.server.fastmcp import FastMCP

from officereader.config import ReaderSettings, get_settings
from officereader.models import (
    CacheStats,
    FullTextResult,
    PageResult,
    SizeProbeResult,
    StreamRecord,
)
from officereader.reader import DocumentReader

logger = logging.getLogger(__name__)

T = TypeVar("T")

INSTRUCTIONS = """\
Reads office documents (PDF, Excel, Word, PowerPoint) and returns their text.

For Excel files pages are sheets, for PowerPoint files pages are slides, and
Word documents have a single page. Call get_document_page_info first to see
the size of a document, then read it whole, by page selection ("1,3,5-7"),
by character range, or in chunks with stream_office_document.

Relative paths are resolved against PROJECT_ROOT when it is set, otherwise
against the server's working directory. Extracted text is cached, so
repeated calls on the same file are cheap.
"""


def _fenced(data: dict[str, Any]) -> str:
    return "```json\n" + json.dumps(data, indent=2, ensure_ascii=False) + "\n```"


def render_probe(result: SizeProbeResult) -> str:
    return _fenced(result.to_dict())


def render_full_text(result: FullTextResult) -> str:
    """JSON header with page information, followed by the text."""
    header = result.to_dict()
    content = header.pop("content")
    if result.error is not None:
        return _fenced(header)
    return f"{_fenced(header)}\n\n{content}"


def render_page(result: PageResult) -> str:
    header = result.to_dict()
    content = header.pop("content")
    if result.error is not None:
        return _fenced(header)
    return f"{_fenced(header)}\n\n{content}"


def render_stream(record: StreamRecord) -> str:
    """Progress record, then the chunk.

    The caller continues by passing ``current_position`` back as
    ``start_position`` until ``is_complete`` is true.
    """
    header = _fenced(record.to_dict(include_chunk=False))
    if record.error is not None:
        return header
    return f"{header}\n\n{record.chunk}"


def render_stats(stats: CacheStats) -> str:
    return _fenced(
        {
            "entry_count": stats.entry_count,
            "total_bytes": stats.total_bytes,
            "hits": stats.hits,
            "misses": stats.misses,
            "extractions": stats.extractions,
            "evictions": stats.evictions,
            "max_entries": stats.max_entries,
            "max_bytes": stats.max_bytes,
        }
    )


def render_timeout(file_path: str, timeout: float) -> str:
    return _fenced(
        {
            "file_path": file_path,
            "error": (
                f"Extraction did not finish within {timeout:g}s; it continues "
                "in the background, try again later"
            ),
            "error_kind": "extraction_timeout",
        }
    )


def create_mcp_server(
    reader: Optional[DocumentReader] = None,
    settings: Optional[ReaderSettings] = None,
) -> FastMCP:
    """Create an MCP server around a document reader.

    One reader (and so one extraction cache) is shared by every tool call
    for the lifetime of the server. Reader calls run in worker threads so
    a long extraction never blocks calls for other files.

    Args:
        reader: Reader to serve; built from settings when omitted
        settings: Settings used for defaults and the extraction timeout

    Returns:
        Configured FastMCP server instance
    """
    settings = settings or (reader.settings if reader is not None else get_settings())
    reader = reader or DocumentReader(settings=settings)
    timeout = settings.extraction_timeout

    mcp = FastMCP(name="office-reader", instructions=INSTRUCTIONS)

    async def run(func: Callable[[], T]) -> Optional[T]:
        """Run a reader call off the event loop; None on timeout."""
        call = asyncio.to_thread(func)
        if timeout is None:
            return await call
        try:
            return await asyncio.wait_for(call, timeout)
        except asyncio.TimeoutError:
            # The worker thread keeps going and fills the cache
            logger.warning(f"Reader call timed out after {timeout}s")
            return None

    @mcp.tool()
    async def get_document_page_info(file_path: str) -> str:
        """Get the size of an office document without returning its text.

        Args:
            file_path: Path to a .pdf, .xlsx, .docx or .pptx file

        Returns:
            JSON with total_length (characters), total_pages (pages, sheets
            or slides), the backend used, and whether the file exists
        """
        result = await run(partial(reader.probe, file_path))
        if result is None:
            return render_timeout(file_path, timeout)
        return render_probe(result)

    @mcp.tool()
    async def read_office_document(file_path: str, pages: str | int = "all") -> str:
        """Read an office document (PDF, Excel, Word, PowerPoint) as text.

        Args:
            file_path: Path to the document
            pages: "all", a page number, or a selection like "1,3,5-7".
                Excel pages are sheets, PowerPoint pages are slides.

        Returns:
            JSON header with page information, followed by the text
        """
        result = await run(partial(reader.read_full, file_path, pages))
        if result is None:
            return render_timeout(file_path, timeout)
        return render_full_text(result)

    @mcp.tool()
    async def read_office_document_range(
        file_path: str,
        offset: int = 0,
        max_size: Optional[int] = None,
    ) -> str:
        """Read a character range of an office document.

        Args:
            file_path: Path to the document
            offset: First character to return
            max_size: Maximum characters to return (default 50000)

        Returns:
            JSON header with offset, returned_length and has_more,
            followed by the text
        """
        result = await run(partial(reader.read_range, file_path, offset, max_size))
        if result is None:
            return render_timeout(file_path, timeout)
        return render_page(result)

    @mcp.tool()
    async def stream_office_document(
        file_path: str,
        chunk_size: Optional[int] = None,
        start_position: int = 0,
        word_boundary: Optional[bool] = None,
    ) -> str:
        """Read an office document in chunks with progress.

        Call repeatedly, passing current_position from the previous
        response as start_position, until is_complete is true.

        Args:
            file_path: Path to the document
            chunk_size: Maximum characters per chunk (default 10000)
            start_position: Character position to continue from
            word_boundary: Prefer to end chunks at whitespace (default true)

        Returns:
            JSON progress record, followed by the chunk text
        """
        record = await run(
            partial(reader.stream, file_path, chunk_size, start_position, word_boundary)
        )
        if record is None:
            return render_timeout(file_path, timeout)
        return render_stream(record)

    @mcp.tool()
    async def get_cache_stats() -> str:
        """Show how many documents are cached and how much memory they use."""
        return render_stats(reader.cache_stats())

    @mcp.tool()
    async def clear_cache() -> str:
        """Drop all cached document text. The next read re-extracts."""
        reader.clear_cache()
        return "Cache cleared"

    return mcp
