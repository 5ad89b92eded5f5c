"""Document text extraction: PDF, DOCX and plain text.

Every extractor returns a single normalized, non-empty text string or raises
an ExtractionError subclass.
"""

from .base import BaseExtractor
from .exceptions import (
    DocumentIOError,
    DocumentNotFoundError,
    DocumentTooLargeError,
    EmptyDocumentError,
    EncryptedDocumentError,
    ExtractionError,
    WrongFormatError,
)
from .factory import SUPPORTED_EXTENSIONS, extract_text, get_extractor, is_supported
from .normalize import normalize_text
from .pdf import PdfExtractor
from .text import PlainTextExtractor, TextFileStats
from .word import WordExtractor

__all__ = [
    "BaseExtractor",
    "PdfExtractor",
    "WordExtractor",
    "PlainTextExtractor",
    "TextFileStats",
    "extract_text",
    "get_extractor",
    "is_supported",
    "normalize_text",
    "SUPPORTED_EXTENSIONS",
    "ExtractionError",
    "DocumentNotFoundError",
    "WrongFormatError",
    "EncryptedDocumentError",
    "EmptyDocumentError",
    "DocumentTooLargeError",
    "DocumentIOError",
]
