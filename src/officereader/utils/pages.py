"""Page selection parsing ("1,3,5-7", "all", 2)."""

from typing import Union

from officereader.errors import InvalidPageSelectionError

PageSelection = Union[str, int, None]


def parse_pages_parameter(pages: PageSelection, total_pages: int) -> list[int]:
    """Parse a page selection into sorted, de-duplicated 1-based numbers.

    Args:
        pages: None, "" or "all" for every page; an int for one page;
               or a comma-separated list of numbers and inclusive ranges
        total_pages: Number of pages in the document

    Returns:
        Sorted list of page numbers

    Raises:
        InvalidPageSelectionError: on malformed parts, page 0, reversed
            ranges or pages past the end
    """
    if pages is None:
        return list(range(1, total_pages + 1))
    if isinstance(pages, int):
        pages = str(pages)

    selection = pages.strip().lower()
    if not selection or selection == "all":
        return list(range(1, total_pages + 1))

    numbers: set[int] = set()
    for part in selection.split(","):
        part = part.strip()
        if "-" in part:
            bounds = part.split("-")
            if len(bounds) != 2:
                raise InvalidPageSelectionError(f"Invalid range format: {part}")
            start = _parse_number(bounds[0])
            end = _parse_number(bounds[1])
            if start > end:
                raise InvalidPageSelectionError(f"Invalid range: {start} > {end}")
            _check_bounds(end, total_pages)
            numbers.update(range(start, end + 1))
        else:
            page = _parse_number(part)
            _check_bounds(page, total_pages)
            numbers.add(page)

    return sorted(numbers)


def _parse_number(raw: str) -> int:
    raw = raw.strip()
    if not raw.isdigit():
        raise InvalidPageSelectionError(f"Invalid page number: {raw!r}")
    page = int(raw)
    if page == 0:
        raise InvalidPageSelectionError("Page numbers must start from 1")
    return page


def _check_bounds(page: int, total_pages: int) -> None:
    if page > total_pages:
        raise InvalidPageSelectionError(
            f"Page {page} exceeds total pages ({total_pages})"
        )
