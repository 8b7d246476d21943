"""Extraction cache."""

from officereader.cache.extraction_cache import ExtractionCache

__all__ = ["ExtractionCache"]
