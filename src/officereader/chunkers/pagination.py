"""Read-only slicing of cached text by offset or by page."""

from typing import Optional

from officereader.errors import InvalidChunkConfigurationError
from officereader.models import CacheEntry, PageResult
from officereader.utils.pages import PageSelection, parse_pages_parameter


class PaginationView:
    """Offset/length and page-number views over a cache entry.

    Unlike a streaming session nothing is remembered between calls, so
    any offset may be requested in any order.
    """

    DEFAULT_PAGE_SIZE = 50000

    def read(
        self,
        entry: CacheEntry,
        offset: int = 0,
        max_chars: int = DEFAULT_PAGE_SIZE,
        file_path: Optional[str] = None,
    ) -> PageResult:
        """Return up to ``max_chars`` characters starting at ``offset``.

        The offset is clamped to ``[0, total]``.

        Raises:
            InvalidChunkConfigurationError: max_chars below 1
        """
        if max_chars < 1:
            raise InvalidChunkConfigurationError(
                f"max_chars must be at least 1, got {max_chars}"
            )
        total = entry.total_chars
        offset = max(0, min(offset, total))
        end = min(offset + max_chars, total)
        content = entry.slice(offset, end)
        returned = end - offset
        return PageResult(
            file_path=file_path or entry.key,
            offset=offset,
            total_length=total,
            returned_length=returned,
            has_more=offset + returned < total,
            content=content,
        )

    def select_pages(
        self,
        entry: CacheEntry,
        pages: PageSelection = None,
    ) -> tuple[str, list[int]]:
        """Return the text of the selected pages and their numbers.

        Pages are separated by form feeds in the cached text; sheets and
        slides count as pages.

        Raises:
            InvalidPageSelectionError: see parse_pages_parameter
        """
        numbers = parse_pages_parameter(pages, entry.total_pages)
        if numbers == list(range(1, entry.total_pages + 1)):
            return entry.text, numbers

        parts = []
        for number in numbers:
            start, end = entry.page_span(number)
            parts.append(f"=== Page {number} ===\n{entry.slice(start, end).strip()}")
        return "\n\n".join(parts), numbers
