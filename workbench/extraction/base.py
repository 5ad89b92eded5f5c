"""Base extractor class with shared functionality for all document formats.

This module provides the abstract base class that every text extractor
implements, along with shared path validation, normalization and logging.
"""

import time
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Callable, Tuple, Union

from workbench.logging import get_logger

from .exceptions import DocumentNotFoundError, EmptyDocumentError, WrongFormatError
from .normalize import normalize_text

logger = get_logger(__name__, component="extraction")

PathLike = Union[str, Path]


class BaseExtractor(ABC):
    """Base class for all text extractors.

    Subclasses declare the file extensions they accept and implement
    ``_read_text()`` to pull raw text out of an opened document. ``extract()``
    validates the path, normalizes the raw text and guarantees a non-empty
    result.

    Attributes:
        format_name: Short label used in logs and error messages
        extensions: Lowercase file extensions (with dot) accepted by the extractor
    """

    format_name: str = ""
    extensions: Tuple[str, ...] = ()

    def extract(self, path: PathLike) -> str:
        """Extract normalized text from a document.

        Args:
            path: Document path

        Returns:
            Non-empty normalized text

        Raises:
            DocumentNotFoundError: Path does not exist
            WrongFormatError: Extension or content does not match
            EmptyDocumentError: No text after normalization
            DocumentIOError: Any other read failure
        """
        return self._extract(path, self._read_text)

    @abstractmethod
    def _read_text(self, path: Path) -> str:
        """Return the raw text of the document at ``path``.

        The path has already been checked for existence and extension. The
        implementation must release any opened handle before returning.
        """
        pass

    def _extract(self, path: PathLike, reader: Callable[[Path], str]) -> str:
        document = self._check_path(path)
        started = time.perf_counter()

        raw_text = reader(document)
        text = normalize_text(raw_text)

        if not text:
            logger.warning(
                f"No text content found in {self.format_name} document",
                extra={"event": "extraction.document.empty", "document": str(document)},
            )
            raise EmptyDocumentError(
                f"No text content found in {self.format_name} document: {document}",
                path=document,
            )

        logger.info(
            f"Extracted text from {self.format_name} document",
            extra={
                "event": "extraction.document.extracted",
                "document": str(document),
                "format": self.format_name,
                "raw_chars": len(raw_text),
                "chars": len(text),
                "duration_ms": round((time.perf_counter() - started) * 1000, 2),
            },
        )
        return text

    def _check_path(self, path: PathLike) -> Path:
        """Validate that ``path`` is an existing file with a supported extension.

        Raises:
            DocumentNotFoundError: Path missing or not a regular file
            WrongFormatError: Extension not in ``extensions``
        """
        if path is None or str(path).strip() == "":
            raise DocumentNotFoundError(f"{self.format_name} document path is empty", path=None)

        document = Path(path)
        if not document.is_file():
            raise DocumentNotFoundError(
                f"{self.format_name} document does not exist: {document}", path=document
            )

        if document.suffix.lower() not in self.extensions:
            raise WrongFormatError(
                f"File is not a {self.format_name} document: {document}", path=document
            )

        return document

    def supports(self, filename: PathLike) -> bool:
        """Whether the filename has one of this extractor's extensions."""
        return Path(filename).suffix.lower() in self.extensions
