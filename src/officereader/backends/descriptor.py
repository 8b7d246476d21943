"""Backend descriptors and the fixed priority table."""

import importlib.util
from dataclasses import dataclass, field
from enum import IntEnum

from officereader.models import PAGE_BREAK, DocumentKind
from officereader.protocols import TextExtractor

PAGE_SEPARATOR = f"\n{PAGE_BREAK}\n"


class BackendTier(IntEnum):
    """Speed class of a backend; the value is its priority (lower first)."""

    FAST_NATIVE = 0
    MID_NATIVE = 1
    COMPAT_NATIVE = 2
    PURE_FALLBACK = 3


@dataclass(frozen=True)
class BackendDescriptor:
    """One extraction backend for one document kind.

    ``available`` is decided when the catalogue is built and never
    re-evaluated afterwards.
    """

    name: str
    kind: DocumentKind
    tier: BackendTier
    extract: TextExtractor = field(compare=False, repr=False)
    available: bool = True
    description: str = ""

    @property
    def priority(self) -> int:
        return int(self.tier)


def has_module(name: str) -> bool:
    """Check if a module is importable without importing it."""
    try:
        return importlib.util.find_spec(name) is not None
    except (ImportError, ValueError):
        return False


def join_pages(pages: list[str]) -> str:
    """Join page texts with form-feed page breaks.

    Stray form feeds inside a page are turned into newlines so page
    numbering stays aligned with the source document.
    """
    cleaned = [page.replace("\r", "").replace(PAGE_BREAK, "\n").strip("\n") for page in pages]
    return PAGE_SEPARATOR.join(cleaned)
