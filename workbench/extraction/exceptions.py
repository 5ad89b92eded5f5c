"""Custom exceptions for document text extraction."""

from pathlib import Path
from typing import Union

from workbench.exceptions import WorkbenchError


class ExtractionError(WorkbenchError):
    """Base exception for all extraction errors.

    Every extraction error carries the path of the offending document so the
    caller can report it without re-threading the argument.
    """

    def __init__(self, message: str, path: Union[str, Path, None] = None) -> None:
        """Initialize extraction error.

        Args:
            message: Human-readable error message
            path: Document that failed
        """
        super().__init__(message)
        self.path = Path(path) if path is not None else None


class DocumentNotFoundError(ExtractionError):
    """The document path does not exist or is not a regular file."""

    pass


class WrongFormatError(ExtractionError):
    """Extension or content does not match the extractor."""

    pass


class EncryptedDocumentError(ExtractionError):
    """The PDF is password-protected."""

    pass


class EmptyDocumentError(ExtractionError):
    """No text remained after normalization."""

    pass


class DocumentTooLargeError(ExtractionError):
    """The document exceeds the configured size cap."""

    def __init__(self, message: str, path: Union[str, Path, None] = None, size: int = 0, limit: int = 0) -> None:
        super().__init__(message, path)
        self.size = size
        self.limit = limit


class DocumentIOError(ExtractionError):
    """Any other failure while reading the document."""

    pass
