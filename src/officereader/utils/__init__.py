"""Utility functions for the office reader."""

from officereader.utils.kinds import detect_kind, is_supported, kind_for_extension
from officereader.utils.pages import parse_pages_parameter

__all__ = ["detect_kind", "is_supported", "kind_for_extension", "parse_pages_parameter"]
