"""Chunking and pagination over cached text."""

from officereader.chunkers.pagination import PaginationView
from officereader.chunkers.streaming_chunker import StreamingChunker

__all__ = ["PaginationView", "StreamingChunker"]
