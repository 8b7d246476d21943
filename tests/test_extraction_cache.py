import os
import threading
import time
from pathlib import Path

import pytest

from officereader.errors import (
    AllBackendsFailedError,
    DocumentNotFoundError,
    UnsupportedDocumentKindError,
)

from conftest import FakeBackend


def wait_for(condition, timeout: float = 5.0) -> None:
    deadline = time.monotonic() + timeout
    while not condition():
        if time.monotonic() > deadline:
            raise AssertionError("condition not met in time")
        time.sleep(0.005)


def test_extracts_once_per_file(make_cache, write_doc) -> None:
    backend = FakeBackend("cached text")
    cache = make_cache(backend)
    path = write_doc()

    first = cache.get_or_extract(path)
    second = cache.get_or_extract(path)

    assert first is second
    assert first.text == "cached text"
    assert backend.call_count == 1


def test_concurrent_callers_share_one_extraction(make_cache, write_doc) -> None:
    gate = threading.Event()
    backend = FakeBackend("shared", gate=gate)
    cache = make_cache(backend)
    path = write_doc()

    results = []
    errors = []

    def worker() -> None:
        try:
            results.append(cache.get_or_extract(path))
        except Exception as e:  # surfaced by the assertions below
            errors.append(e)

    threads = [threading.Thread(target=worker) for _ in range(8)]
    for thread in threads:
        thread.start()
    wait_for(lambda: backend.call_count == 1)
    time.sleep(0.05)
    gate.set()
    for thread in threads:
        thread.join(timeout=5)

    assert errors == []
    assert len(results) == 8
    assert backend.call_count == 1
    assert all(entry is results[0] for entry in results)


def test_unrelated_file_is_not_blocked(make_cache, write_doc) -> None:
    gate = threading.Event()
    slow = FakeBackend("slow", gate=gate)
    fast = FakeBackend("fast")

    def dispatch(path: Path) -> str:
        return slow(path) if path.name == "slow.pdf" else fast(path)

    cache = make_cache(dispatch)
    slow_path = write_doc("slow.pdf")
    fast_path = write_doc("fast.pdf")

    thread = threading.Thread(target=cache.get_or_extract, args=(slow_path,))
    thread.start()
    try:
        wait_for(lambda: slow.call_count == 1)
        entry = cache.get_or_extract(fast_path)
        assert entry.text == "fast"
        assert thread.is_alive()
    finally:
        gate.set()
        thread.join(timeout=5)
    assert cache.peek(slow_path).text == "slow"


def test_failures_are_not_cached(make_cache, write_doc) -> None:
    backend = FakeBackend("second try", error=RuntimeError("transient"))
    cache = make_cache(backend)
    path = write_doc()

    with pytest.raises(AllBackendsFailedError):
        cache.get_or_extract(path)
    assert len(cache) == 0

    backend.error = None
    entry = cache.get_or_extract(path)
    assert entry.text == "second try"
    assert backend.call_count == 2


def test_missing_file_runs_no_backend(make_cache, tmp_path) -> None:
    backend = FakeBackend()
    cache = make_cache(backend)
    with pytest.raises(DocumentNotFoundError):
        cache.get_or_extract(tmp_path / "absent.pdf")
    assert backend.call_count == 0


def test_directory_is_not_a_document(make_cache, tmp_path) -> None:
    folder = tmp_path / "folder.pdf"
    folder.mkdir()
    with pytest.raises(DocumentNotFoundError):
        make_cache(FakeBackend()).get_or_extract(folder)


def test_unsupported_kind_runs_no_backend(make_cache, write_doc) -> None:
    backend = FakeBackend()
    cache = make_cache(backend)
    with pytest.raises(UnsupportedDocumentKindError) as excinfo:
        cache.get_or_extract(write_doc("notes.txt", b"plain"))
    assert excinfo.value.extension == "txt"
    assert backend.call_count == 0


def test_changed_file_is_re_extracted(make_cache, write_doc) -> None:
    backend = FakeBackend("v1")
    cache = make_cache(backend)
    path = write_doc(content=b"short")
    cache.get_or_extract(path)

    backend.text = "v2"
    path.write_bytes(b"a longer body")
    assert cache.get_or_extract(path).text == "v2"
    assert backend.call_count == 2
    assert len(cache) == 1


def test_staleness_check_can_be_disabled(make_cache, write_doc) -> None:
    backend = FakeBackend("v1")
    cache = make_cache(backend, check_staleness=False)
    path = write_doc(content=b"short")
    cache.get_or_extract(path)

    backend.text = "v2"
    path.write_bytes(b"a longer body")
    assert cache.get_or_extract(path).text == "v1"
    assert backend.call_count == 1


def test_lru_eviction_by_count(make_cache, write_doc) -> None:
    cache = make_cache(FakeBackend(), max_entries=2)
    a, b, c = write_doc("a.pdf"), write_doc("b.pdf"), write_doc("c.pdf")

    cache.get_or_extract(a)
    cache.get_or_extract(b)
    cache.get_or_extract(a)
    cache.get_or_extract(c)

    assert cache.peek(a) is not None
    assert cache.peek(b) is None
    assert cache.peek(c) is not None
    assert cache.stats().evictions == 1


def test_newest_entry_survives_byte_limit(make_cache, write_doc) -> None:
    cache = make_cache(FakeBackend("x" * 1000), max_bytes=10)
    first, second = write_doc("first.pdf"), write_doc("second.pdf")

    cache.get_or_extract(first)
    assert len(cache) == 1
    cache.get_or_extract(second)
    assert cache.peek(first) is None
    assert cache.peek(second) is not None


def test_stats_and_clear(make_cache, write_doc) -> None:
    cache = make_cache(FakeBackend("abc"))
    path = write_doc()

    cache.get_or_extract(path)
    cache.get_or_extract(path)
    stats = cache.stats()
    assert stats.entry_count == 1
    assert stats.misses == 1
    assert stats.hits == 1
    assert stats.extractions == 1
    assert stats.total_bytes == cache.peek(path).size_bytes

    cache.clear()
    stats = cache.stats()
    assert stats.entry_count == 0
    assert stats.total_bytes == 0


def test_invalidate(make_cache, write_doc) -> None:
    backend = FakeBackend()
    cache = make_cache(backend)
    path = write_doc()
    cache.get_or_extract(path)

    assert cache.invalidate(path)
    assert not cache.invalidate(path)
    cache.get_or_extract(path)
    assert backend.call_count == 2


def test_relative_and_absolute_paths_share_a_key(make_cache, write_doc, monkeypatch) -> None:
    backend = FakeBackend()
    cache = make_cache(backend)
    path = write_doc()
    monkeypatch.chdir(path.parent)

    cache.get_or_extract(path.name)
    cache.get_or_extract(os.fspath(path))
    assert backend.call_count == 1


def test_key_locks_are_released(make_cache, write_doc) -> None:
    backend = FakeBackend(error=RuntimeError("broken"))
    cache = make_cache(backend)
    path = write_doc()

    with pytest.raises(AllBackendsFailedError):
        cache.get_or_extract(path)
    assert cache._key_locks == {}

    backend.error = None
    for name in ("a.pdf", "b.pdf", "c.pdf"):
        cache.get_or_extract(write_doc(name))
    assert cache._key_locks == {}


def test_key_lock_is_shared_while_waited_on(make_cache, write_doc) -> None:
    gate = threading.Event()
    backend = FakeBackend(gate=gate)
    cache = make_cache(backend)
    path = write_doc()

    threads = [threading.Thread(target=cache.get_or_extract, args=(path,)) for _ in range(3)]
    for thread in threads:
        thread.start()
    try:
        wait_for(lambda: backend.call_count == 1)
        assert len(cache._key_locks) == 1
    finally:
        gate.set()
        for thread in threads:
            thread.join(timeout=5)
    assert backend.call_count == 1
    assert cache._key_locks == {}
