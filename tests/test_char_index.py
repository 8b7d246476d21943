import numpy as np
import pytest

from officereader.models import build_char_index

from conftest import make_entry


def test_ascii_index_is_identity() -> None:
    index = build_char_index("hello")
    assert index.tolist() == [0, 1, 2, 3, 4, 5]
    assert index.dtype == np.int64


def test_empty_text_has_single_zero() -> None:
    assert build_char_index("").tolist() == [0]


def test_multibyte_widths() -> None:
    # 1, 2, 3 and 4 byte code points
    assert build_char_index("aé中😀").tolist() == [0, 1, 3, 6, 10]


@pytest.mark.parametrize(
    "text",
    [
        "plain ascii text",
        "中文测试 مرحبا بالعالم 😀🎉",
        "mixed: naïve café, 東京, emoji 🚀 and more",
    ],
)
def test_index_matches_utf8_encoding(text: str) -> None:
    index = build_char_index(text)
    assert len(index) == len(text) + 1
    assert index[-1] == len(text.encode("utf-8"))
    assert all(index[i] < index[i + 1] for i in range(len(text)))
    for i, char in enumerate(text):
        assert index[i + 1] - index[i] == len(char.encode("utf-8"))


def test_entry_byte_range_and_totals() -> None:
    entry = make_entry("ab中😀cd")
    assert entry.total_chars == 6
    assert entry.total_bytes == len("ab中😀cd".encode("utf-8"))
    start, end = entry.byte_range(2, 4)
    assert "ab中😀cd".encode("utf-8")[start:end].decode("utf-8") == "中😀"


def test_entry_slice_is_clamped() -> None:
    entry = make_entry("abcdef")
    assert entry.slice(-3, 2) == "ab"
    assert entry.slice(4, 100) == "ef"
    assert entry.slice(10, 20) == ""
    assert entry.slice(4, 2) == ""


def test_page_starts_and_spans() -> None:
    entry = make_entry("first\n\f\nsecond\n\f\nthird")
    assert entry.total_pages == 3
    spans = [entry.page_span(n) for n in (1, 2, 3)]
    assert [entry.slice(s, e).strip() for s, e in spans] == ["first", "second", "third"]


def test_text_without_breaks_is_one_page() -> None:
    assert make_entry("").total_pages == 1
    assert make_entry("only page").total_pages == 1


def test_entry_freshness() -> None:
    entry = make_entry("x")
    assert entry.is_fresh(0, 0)
    assert not entry.is_fresh(1, 0)
    assert not entry.is_fresh(0, 1)
