"""Protocol for format-specific text extractors."""

from pathlib import Path
from typing import Protocol, runtime_checkable


@runtime_checkable
class TextExtractor(Protocol):
    """Callable that turns one file into its complete text.

    Implementations wrap a third-party parser (pypdf, PyMuPDF, openpyxl...).
    They return the whole document at once, separating pages, sheets or
    slides with a form feed, and raise on any failure. Uses structural
    subtyping - plain functions qualify.
    """

    def __call__(self, path: Path) -> str:
        ...
