"""Catalogue of extraction backends."""

from functools import lru_cache
from typing import Iterable

from officereader.backends.descriptor import BackendDescriptor
from officereader.backends.office import office_backends
from officereader.backends.pdf import pdf_backends
from officereader.models import DocumentKind

# Backends added at runtime (plugins/extensions)
_REGISTERED: list[BackendDescriptor] = []


@lru_cache(maxsize=1)
def default_catalogue() -> tuple[BackendDescriptor, ...]:
    """Built-in backends; availability is detected on the first call only."""
    return (*pdf_backends(), *office_backends())


def all_backends() -> list[BackendDescriptor]:
    """Built-in plus registered backends."""
    return [*default_catalogue(), *_REGISTERED]


def get_backends(
    kind: DocumentKind,
    catalogue: Iterable[BackendDescriptor] | None = None,
) -> list[BackendDescriptor]:
    """List the backends for a document kind in priority order.

    Args:
        kind: Document kind to filter on
        catalogue: Descriptors to choose from; defaults to the built-in
                   catalogue plus registered backends

    Returns:
        Descriptors (available or not) sorted by priority, lowest first
    """
    if catalogue is None:
        catalogue = all_backends()
    matching = [d for d in catalogue if d.kind is kind]
    return sorted(matching, key=lambda d: d.priority)


def register_backend(descriptor: BackendDescriptor) -> None:
    """Register a custom backend alongside the built-in ones.

    Args:
        descriptor: A BackendDescriptor for any DocumentKind
    """
    _REGISTERED.append(descriptor)
