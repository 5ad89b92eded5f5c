"""Extension-based dispatch to the right text extractor."""

from pathlib import Path
from typing import Dict, Optional, Type

from workbench.config.models import MAX_TEXT_BYTES
from workbench.logging import get_logger

from .base import BaseExtractor, PathLike
from .exceptions import WrongFormatError
from .pdf import PdfExtractor
from .text import PlainTextExtractor
from .word import WordExtractor

logger = get_logger(__name__, component="extraction")

EXTRACTOR_MAP: Dict[str, Type[BaseExtractor]] = {
    ".pdf": PdfExtractor,
    ".docx": WordExtractor,
    ".txt": PlainTextExtractor,
}

SUPPORTED_EXTENSIONS = tuple(sorted(EXTRACTOR_MAP))


def is_supported(filename: Optional[PathLike]) -> bool:
    """Whether the filename has an extension an extractor accepts.

    Example:
        >>> is_supported("CV.PDF")
        True
        >>> is_supported("notes.odt")
        False
    """
    if not filename:
        return False
    return Path(filename).suffix.lower() in EXTRACTOR_MAP


def get_extractor(path: PathLike, max_text_bytes: int = MAX_TEXT_BYTES) -> BaseExtractor:
    """Instantiate the extractor for the file's extension.

    Args:
        path: Document path (only the extension is inspected)
        max_text_bytes: Size cap passed to the plain-text extractor

    Raises:
        WrongFormatError: Extension not supported
    """
    suffix = Path(path).suffix.lower()
    extractor_class = EXTRACTOR_MAP.get(suffix)

    if extractor_class is None:
        raise WrongFormatError(
            f"Unsupported file type '{suffix or path}'. Supported types: {', '.join(SUPPORTED_EXTENSIONS)}",
            path=path,
        )

    logger.debug(
        "Selected extractor",
        extra={
            "event": "extraction.extractor.selected",
            "document": str(path),
            "extractor_class": extractor_class.__name__,
        },
    )

    if extractor_class is PlainTextExtractor:
        return PlainTextExtractor(max_bytes=max_text_bytes)
    return extractor_class()


def extract_text(path: PathLike, max_text_bytes: int = MAX_TEXT_BYTES) -> str:
    """Extract normalized text from a PDF, DOCX or plain-text document.

    Raises:
        WrongFormatError: Unsupported extension or unreadable content
        ExtractionError: Any other extraction failure (see the subclasses)
    """
    return get_extractor(path, max_text_bytes=max_text_bytes).extract(path)
