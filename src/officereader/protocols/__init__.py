"""Protocol definitions for extensible components."""

from officereader.protocols.extractor import TextExtractor

__all__ = ["TextExtractor"]
