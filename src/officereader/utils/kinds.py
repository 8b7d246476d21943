"""Document kind detection utilities."""

from pathlib import Path
from typing import Optional

from officereader.errors import UnsupportedDocumentKindError
from officereader.models import DocumentKind

# Extensions we can extract, mapped to their kind
KIND_EXTENSIONS = {
    ".pdf": DocumentKind.PDF,
    ".xlsx": DocumentKind.XLSX,
    ".xlsm": DocumentKind.XLSX,
    ".docx": DocumentKind.DOCX,
    ".pptx": DocumentKind.PPTX,
}


def kind_for_extension(path: str | Path) -> Optional[DocumentKind]:
    """Return the document kind for a path's extension, or None."""
    return KIND_EXTENSIONS.get(Path(path).suffix.lower())


def detect_kind(path: str | Path) -> DocumentKind:
    """Detect the document kind of a file or raise.

    Args:
        path: File path (only the extension is inspected)

    Returns:
        The matching DocumentKind

    Raises:
        UnsupportedDocumentKindError: for legacy (.doc, .xls, .ppt), unknown or missing extensions
    """
    kind = kind_for_extension(path)
    if kind is None:
        raise UnsupportedDocumentKindError(str(path), Path(path).suffix.lower().lstrip("."))
    return kind


def is_supported(path: str | Path) -> bool:
    """Check if a file could be read by any backend."""
    return kind_for_extension(path) is not None
