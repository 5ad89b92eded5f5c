"""PDF text extraction using PyMuPDF."""

from contextlib import contextmanager
from pathlib import Path
from typing import Any, Dict, Iterator, Optional

import pymupdf

from workbench.exceptions import InvalidArgumentError
from workbench.logging import get_logger

from .base import BaseExtractor, PathLike
from .exceptions import (
    DocumentIOError,
    EmptyDocumentError,
    EncryptedDocumentError,
    WrongFormatError,
)

logger = get_logger(__name__, component="extraction")


class PdfExtractor(BaseExtractor):
    """Extract text from PDF documents.

    Text is taken page by page in reading order (blocks sorted by position)
    and pages are joined with a single newline. Password-protected documents
    are rejected.

    Example:
        >>> extractor = PdfExtractor()
        >>> text = extractor.extract("resume.pdf")
        >>> first_two = extractor.extract("resume.pdf", start_page=1, end_page=2)
    """

    format_name = "PDF"
    extensions = (".pdf",)

    def extract(
        self,
        path: PathLike,
        start_page: Optional[int] = None,
        end_page: Optional[int] = None,
    ) -> str:
        """Extract normalized text, optionally limited to a page range.

        Args:
            path: PDF path
            start_page: First page to include (1-based, default first page)
            end_page: Last page to include (1-based, inclusive, default last page)

        Raises:
            InvalidArgumentError: Page range outside the document
            EncryptedDocumentError: Document is password-protected
        """
        if start_page is None and end_page is None:
            return self._extract(path, self._read_text)
        return self._extract(path, lambda p: self._read_pages(p, start_page, end_page))

    def page_count(self, path: PathLike) -> int:
        """Number of pages in the document."""
        document = self._check_path(path)
        with self._open(document) as doc:
            self._ensure_unlocked(doc, document)
            return doc.page_count

    def is_encrypted(self, path: PathLike) -> bool:
        """Whether opening the document requires a password."""
        document = self._check_path(path)
        with self._open(document) as doc:
            return bool(doc.needs_pass)

    def metadata(self, path: PathLike) -> Dict[str, Any]:
        """Document information dictionary plus page count and encryption flag.

        Available for encrypted documents too; their fields are usually empty.
        """
        document = self._check_path(path)
        with self._open(document) as doc:
            info = doc.metadata or {}
            encrypted = bool(doc.needs_pass)
            return {
                "title": info.get("title") or "",
                "author": info.get("author") or "",
                "subject": info.get("subject") or "",
                "keywords": info.get("keywords") or "",
                "creator": info.get("creator") or "",
                "producer": info.get("producer") or "",
                "creation_date": info.get("creationDate") or "",
                "modification_date": info.get("modDate") or "",
                "pages": 0 if encrypted else doc.page_count,
                "encrypted": encrypted,
            }

    def _read_text(self, path: Path) -> str:
        return self._read_pages(path, None, None)

    def _read_pages(self, path: Path, start_page: Optional[int], end_page: Optional[int]) -> str:
        with self._open(path) as doc:
            self._ensure_unlocked(doc, path)

            total = doc.page_count
            first = 1 if start_page is None else start_page
            last = total if end_page is None else end_page
            if first < 1 or last > total or first > last:
                raise InvalidArgumentError(
                    f"Invalid page range {first}-{last}: document has {total} pages"
                )

            pages = [doc[number].get_text("text", sort=True) for number in range(first - 1, last)]

        logger.debug(
            "Read PDF pages",
            extra={
                "event": "extraction.pdf.pages_read",
                "document": str(path),
                "first_page": first,
                "last_page": last,
                "total_pages": total,
            },
        )
        return "\n".join(page.rstrip("\n") for page in pages)

    @staticmethod
    def _ensure_unlocked(doc: "pymupdf.Document", path: Path) -> None:
        if doc.needs_pass:
            raise EncryptedDocumentError(
                f"PDF is encrypted and cannot be processed: {path}", path=path
            )

    @contextmanager
    def _open(self, path: Path) -> Iterator["pymupdf.Document"]:
        """Open a PDF and close it on every exit path.

        Raises:
            EmptyDocumentError: Zero-length file
            WrongFormatError: File is not a readable PDF
            DocumentIOError: Any other failure from the PDF library
        """
        try:
            doc = pymupdf.open(path)
        except pymupdf.EmptyFileError as e:
            raise EmptyDocumentError(f"PDF file is empty: {path}", path=path) from e
        except pymupdf.FileDataError as e:
            raise WrongFormatError(f"File is not a valid PDF: {path}: {e}", path=path) from e
        except (RuntimeError, OSError) as e:
            raise DocumentIOError(f"Failed to open PDF {path}: {e}", path=path) from e

        try:
            if not doc.is_pdf:
                raise WrongFormatError(f"File is not a PDF document: {path}", path=path)
            yield doc
        except (RuntimeError, OSError) as e:
            raise DocumentIOError(f"Failed to read PDF {path}: {e}", path=path) from e
        finally:
            doc.close()
