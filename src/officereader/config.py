"""Reader settings, loaded from OFFICE_READER_* environment variables."""

from functools import lru_cache
from pathlib import Path
from typing import Optional

from pydantic import AliasChoices, Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class ReaderSettings(BaseSettings):
    """Settings shared by the MCP server, the CLI and the Flight Deck."""

    model_config = SettingsConfigDict(
        env_prefix="OFFICE_READER_",
        case_sensitive=False,
        populate_by_name=True,
        extra="ignore",
    )

    # Relative document paths are resolved against this directory
    project_root: Optional[Path] = Field(
        default=None,
        validation_alias=AliasChoices("OFFICE_READER_PROJECT_ROOT", "PROJECT_ROOT"),
        description="Base directory for relative document paths",
    )

    # ==========================================================================
    # CHUNKING / PAGING
    # ==========================================================================

    default_chunk_size: int = Field(
        default=10000,
        gt=0,
        description="Characters per streamed chunk",
    )
    default_page_size: int = Field(
        default=50000,
        gt=0,
        description="Characters per offset/length page",
    )
    word_boundary: bool = Field(
        default=True,
        description="Prefer cutting chunks at whitespace",
    )
    lookback_ratio: float = Field(
        default=0.1,
        ge=0,
        lt=1,
        description="Fraction of the chunk size searched back for whitespace",
    )

    # ==========================================================================
    # CACHE
    # ==========================================================================

    cache_max_entries: Optional[int] = Field(default=None, gt=0)
    cache_max_bytes: Optional[int] = Field(default=None, gt=0)
    check_staleness: bool = Field(
        default=True,
        description="Re-extract when a file's mtime or size changes",
    )

    # ==========================================================================
    # EXTRACTION
    # ==========================================================================

    extraction_timeout: Optional[float] = Field(
        default=None,
        gt=0,
        description="Seconds an MCP call waits for extraction before giving up",
    )
    disabled_backends: str = Field(
        default="",
        description="Comma-separated backend names never to use",
    )

    log_level: str = Field(default="INFO")

    @property
    def disabled_backend_names(self) -> list[str]:
        return [name.strip() for name in self.disabled_backends.split(",") if name.strip()]

    def resolve_path(self, path: str | Path) -> Path:
        """Join a relative path onto ``project_root`` (or leave it for the CWD)."""
        candidate = Path(path).expanduser()
        if candidate.is_absolute() or self.project_root is None:
            return candidate
        return self.project_root.expanduser() / candidate


@lru_cache(maxsize=1)
def get_settings() -> ReaderSettings:
    """Settings from the environment, read once per process."""
    return ReaderSettings()
