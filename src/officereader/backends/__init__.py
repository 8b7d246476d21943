"""Extraction backends and their catalogue."""

from officereader.backends.descriptor import (
    PAGE_SEPARATOR,
    BackendDescriptor,
    BackendTier,
    join_pages,
)
from officereader.backends.registry import (
    all_backends,
    default_catalogue,
    get_backends,
    register_backend,
)
from officereader.backends.selector import BackendSelector

__all__ = [
    "PAGE_SEPARATOR",
    "BackendDescriptor",
    "BackendSelector",
    "BackendTier",
    "all_backends",
    "default_catalogue",
    "get_backends",
    "join_pages",
    "register_backend",
]
