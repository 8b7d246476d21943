from __future__ import annotations

import threading
from pathlib import Path
from typing import Callable, Optional

import pytest

from officereader.backends import BackendDescriptor, BackendSelector, BackendTier
from officereader.cache import ExtractionCache
from officereader.config import ReaderSettings
from officereader.models import CacheEntry, DocumentKind, ExtractionResult
from officereader.reader import DocumentReader


class FakeBackend:
    """Callable extractor that counts calls and can fail or block."""

    def __init__(
        self,
        text: str = "hello world",
        error: Optional[Exception] = None,
        gate: Optional[threading.Event] = None,
    ) -> None:
        self.text = text
        self.error = error
        self.gate = gate
        self.calls: list[Path] = []
        self._lock = threading.Lock()

    def __call__(self, path: Path) -> str:
        with self._lock:
            self.calls.append(Path(path))
        if self.gate is not None:
            assert self.gate.wait(timeout=5), "gate never opened"
        if self.error is not None:
            raise self.error
        return self.text

    @property
    def call_count(self) -> int:
        with self._lock:
            return len(self.calls)


def descriptor(
    name: str,
    backend: Callable[[Path], str],
    kind: DocumentKind = DocumentKind.PDF,
    tier: BackendTier = BackendTier.PURE_FALLBACK,
    available: bool = True,
) -> BackendDescriptor:
    return BackendDescriptor(name=name, kind=kind, tier=tier, extract=backend, available=available)


def make_entry(text: str, key: str = "/docs/sample.pdf") -> CacheEntry:
    return CacheEntry.build(key, ExtractionResult(text=text, backend="fake"))


@pytest.fixture
def fake_backend() -> FakeBackend:
    return FakeBackend()


@pytest.fixture
def make_cache() -> Callable[..., ExtractionCache]:
    """Build a cache whose PDF extraction goes through one fake backend."""

    def _make(backend: Callable[[Path], str], **kwargs) -> ExtractionCache:
        selector = BackendSelector(catalogue=[descriptor("fake", backend)])
        return ExtractionCache(selector=selector, **kwargs)

    return _make


@pytest.fixture
def write_doc(tmp_path: Path) -> Callable[..., Path]:
    """Create a placeholder document file; fake backends ignore its bytes."""

    def _write(name: str = "doc.pdf", content: bytes = b"%PDF-1.4 placeholder") -> Path:
        path = tmp_path / name
        path.write_bytes(content)
        return path

    return _write


@pytest.fixture
def settings(tmp_path: Path) -> ReaderSettings:
    return ReaderSettings(project_root=tmp_path)


@pytest.fixture
def make_reader(make_cache, settings) -> Callable[..., DocumentReader]:
    def _make(backend: Callable[[Path], str], **settings_overrides) -> DocumentReader:
        reader_settings = settings.model_copy(update=settings_overrides)
        return DocumentReader(cache=make_cache(backend), settings=reader_settings)

    return _make
