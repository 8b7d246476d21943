"""Office Reader - cached, streamable text extraction for office documents."""

from officereader.cache import ExtractionCache
from officereader.config import ReaderSettings, get_settings
from officereader.reader import DocumentReader

__version__ = "0.1.0"

__all__ = [
    "DocumentReader",
    "ExtractionCache",
    "ReaderSettings",
    "get_settings",
]
