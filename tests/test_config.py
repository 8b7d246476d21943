from pathlib import Path

import pytest
from pydantic import ValidationError

from officereader.config import ReaderSettings

ENV_NAMES = [
    "PROJECT_ROOT",
    "OFFICE_READER_PROJECT_ROOT",
    "OFFICE_READER_DEFAULT_CHUNK_SIZE",
    "OFFICE_READER_DISABLED_BACKENDS",
    "OFFICE_READER_EXTRACTION_TIMEOUT",
    "OFFICE_READER_WORD_BOUNDARY",
]


@pytest.fixture(autouse=True)
def clean_env(monkeypatch) -> None:
    for name in ENV_NAMES:
        monkeypatch.delenv(name, raising=False)


def test_defaults() -> None:
    settings = ReaderSettings()
    assert settings.project_root is None
    assert settings.default_chunk_size == 10000
    assert settings.default_page_size == 50000
    assert settings.word_boundary is True
    assert settings.lookback_ratio == 0.1
    assert settings.cache_max_entries is None
    assert settings.extraction_timeout is None
    assert settings.disabled_backend_names == []


def test_environment_overrides(monkeypatch) -> None:
    monkeypatch.setenv("OFFICE_READER_DEFAULT_CHUNK_SIZE", "2500")
    monkeypatch.setenv("OFFICE_READER_DISABLED_BACKENDS", "pdfium, pymupdf,,")
    monkeypatch.setenv("OFFICE_READER_EXTRACTION_TIMEOUT", "30")
    monkeypatch.setenv("OFFICE_READER_WORD_BOUNDARY", "false")

    settings = ReaderSettings()
    assert settings.default_chunk_size == 2500
    assert settings.disabled_backend_names == ["pdfium", "pymupdf"]
    assert settings.extraction_timeout == 30.0
    assert settings.word_boundary is False


def test_plain_project_root_variable(monkeypatch, tmp_path: Path) -> None:
    monkeypatch.setenv("PROJECT_ROOT", str(tmp_path))
    assert ReaderSettings().project_root == tmp_path


def test_zero_chunk_size_is_rejected(monkeypatch) -> None:
    monkeypatch.setenv("OFFICE_READER_DEFAULT_CHUNK_SIZE", "0")
    with pytest.raises(ValidationError):
        ReaderSettings()


def test_resolve_path(tmp_path: Path) -> None:
    settings = ReaderSettings(project_root=tmp_path)
    assert settings.resolve_path("docs/a.pdf") == tmp_path / "docs" / "a.pdf"
    assert settings.resolve_path("/abs/b.pdf") == Path("/abs/b.pdf")


def test_resolve_path_without_root() -> None:
    assert ReaderSettings().resolve_path("a.pdf") == Path("a.pdf")
