"""Word (.docx) text extraction using python-docx."""

import zipfile
from pathlib import Path
from typing import Any, Dict, List

import docx
from docx.opc.exceptions import PackageNotFoundError

from workbench.utils.timestamps import ensure_utc

from .base import BaseExtractor, PathLike
from .exceptions import DocumentIOError, WrongFormatError

CELL_SEPARATOR = " | "


class WordExtractor(BaseExtractor):
    """Extract text from Office Open XML word documents.

    Paragraphs come first in document order, then every table row with its
    non-empty cells joined by ``" | "``. Empty paragraphs are skipped.
    """

    format_name = "DOCX"
    extensions = (".docx",)

    def extract_paragraphs(self, path: PathLike) -> str:
        """Normalized text of the body paragraphs only."""
        return self._extract(path, lambda p: "\n".join(self._paragraph_lines(self._load(p))))

    def extract_tables(self, path: PathLike) -> str:
        """Normalized text of the tables only."""
        return self._extract(path, lambda p: "\n".join(self._table_lines(self._load(p))))

    def metadata(self, path: PathLike) -> Dict[str, Any]:
        """Core document properties plus paragraph and table counts."""
        document = self._load(self._check_path(path))
        props = document.core_properties
        return {
            "title": props.title or "",
            "author": props.author or "",
            "subject": props.subject or "",
            "keywords": props.keywords or "",
            "last_modified_by": props.last_modified_by or "",
            "created": ensure_utc(props.created),
            "modified": ensure_utc(props.modified),
            "paragraphs": len(document.paragraphs),
            "tables": len(document.tables),
        }

    def _read_text(self, path: Path) -> str:
        document = self._load(path)
        lines = self._paragraph_lines(document) + self._table_lines(document)
        return "\n".join(lines)

    @staticmethod
    def _paragraph_lines(document) -> List[str]:
        return [p.text for p in document.paragraphs if p.text and p.text.strip()]

    @staticmethod
    def _table_lines(document) -> List[str]:
        lines = []
        for table in document.tables:
            for row in table.rows:
                cells = [cell.text.strip() for cell in row.cells]
                lines.append(CELL_SEPARATOR.join(text for text in cells if text))
        return lines

    @staticmethod
    def _load(path: Path):
        """Open and parse the document; the file handle is closed before returning.

        Raises:
            WrongFormatError: Not a word-processing package
            DocumentIOError: Any other read failure
        """
        try:
            with open(path, "rb") as fh:
                return docx.Document(fh)
        except (PackageNotFoundError, zipfile.BadZipFile, KeyError, ValueError) as e:
            raise WrongFormatError(f"File is not a valid DOCX document: {path}: {e}", path=path) from e
        except OSError as e:
            raise DocumentIOError(f"Failed to read DOCX {path}: {e}", path=path) from e
