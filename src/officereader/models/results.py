"""Result records returned across the reader boundary.

Every record carries ``error`` and ``error_kind``; a populated ``error``
means the other fields hold defaults and should not be trusted.
"""

from dataclasses import asdict, dataclass, field
from typing import Any, Optional


@dataclass
class FullTextResult:
    file_path: str
    content: str = ""
    total_length: Optional[int] = None
    total_pages: Optional[int] = None
    requested_pages: str = "all"
    returned_pages: list[int] = field(default_factory=list)
    backend: Optional[str] = None
    error: Optional[str] = None
    error_kind: Optional[str] = None

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


@dataclass
class PageResult:
    """Offset/length page over the extracted text."""

    file_path: str
    offset: int = 0
    total_length: Optional[int] = None
    returned_length: int = 0
    has_more: bool = False
    content: str = ""
    error: Optional[str] = None
    error_kind: Optional[str] = None

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


@dataclass
class StreamRecord:
    """One advance of a streaming session.

    ``current_position`` is the cursor to pass back for the next chunk.
    ``total_length`` stays None when extraction never completed.
    """

    file_path: str
    current_position: int = 0
    total_length: Optional[int] = None
    chunk: str = ""
    progress: float = 0.0
    is_complete: bool = False
    error: Optional[str] = None
    error_kind: Optional[str] = None

    def to_dict(self, include_chunk: bool = True) -> dict[str, Any]:
        data = asdict(self)
        if not include_chunk:
            data.pop("chunk")
        return data


@dataclass
class SizeProbeResult:
    file_path: str
    total_length: Optional[int] = None
    total_pages: Optional[int] = None
    file_exists: bool = True
    backend: Optional[str] = None
    error: Optional[str] = None
    error_kind: Optional[str] = None

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)
