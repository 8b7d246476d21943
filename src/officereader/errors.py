"""Error taxonomy for document extraction and reading."""


class OfficeReaderError(Exception):
    """Base class for expected reader failures.

    Each subclass carries an ``error_kind`` that outer layers report to
    callers, and a ``retryable`` flag telling them whether asking again
    can help.
    """

    error_kind = "error"
    retryable = False


class DocumentNotFoundError(OfficeReaderError):
    """The requested file does not exist."""

    error_kind = "file_not_found"

    def __init__(self, path: str):
        self.path = path
        super().__init__(f"File not found: {path}")


class DocumentAccessError(OfficeReaderError):
    """The file exists but the process may not read it."""

    error_kind = "access_denied"

    def __init__(self, path: str):
        self.path = path
        super().__init__(f"Permission denied: {path}")


class UnsupportedDocumentKindError(OfficeReaderError):
    """The file extension does not map to a supported document kind."""

    error_kind = "unsupported_document_kind"

    def __init__(self, path: str, extension: str):
        self.path = path
        self.extension = extension
        if extension:
            message = f"Unsupported file type: {extension}"
        else:
            message = "Unable to determine file type (no extension)"
        super().__init__(message)


class AllBackendsFailedError(OfficeReaderError):
    """Every available backend failed to extract the document."""

    error_kind = "extraction_failed"
    retryable = True

    def __init__(self, path: str, failures: list[tuple[str, str]]):
        self.path = path
        self.failures = failures
        if failures:
            reasons = "; ".join(f"{name}: {reason}" for name, reason in failures)
        else:
            reasons = "no backend available"
        super().__init__(f"All extraction backends failed for {path} ({reasons})")


class InvalidChunkConfigurationError(OfficeReaderError):
    """Chunk or page size is zero, negative, or otherwise unusable."""

    error_kind = "invalid_chunk_configuration"


class NonAdvancingIterationError(OfficeReaderError):
    """A streaming call would not move the cursor forward.

    The session that raised this must be discarded, never retried with
    the same cursor.
    """

    error_kind = "non_advancing_iteration"


class InvalidPageSelectionError(OfficeReaderError):
    """A page/sheet/slide selection string could not be satisfied."""

    error_kind = "invalid_page_selection"
