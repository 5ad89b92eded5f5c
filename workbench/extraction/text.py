"""Plain-text extraction with BOM sniffing and a Latin-1 fallback."""

import codecs
import re
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from workbench.config.models import MAX_TEXT_BYTES
from workbench.exceptions import InvalidArgumentError
from workbench.logging import get_logger

from .base import BaseExtractor, PathLike
from .exceptions import DocumentIOError, DocumentTooLargeError, EmptyDocumentError, WrongFormatError

logger = get_logger(__name__, component="extraction")

BOMS = (
    (codecs.BOM_UTF8, "utf-8-sig"),
    (codecs.BOM_UTF16_LE, "utf-16"),
    (codecs.BOM_UTF16_BE, "utf-16"),
)

FALLBACK_ENCODING = "latin-1"


@dataclass(frozen=True)
class TextFileStats:
    """Size and shape of a plain-text document."""

    file_size: int
    characters: int
    lines: int
    words: int
    paragraphs: int

    def __str__(self) -> str:
        return (
            f"File Size: {self.file_size} bytes\n"
            f"Characters: {self.characters}\n"
            f"Lines: {self.lines}\n"
            f"Words: {self.words}\n"
            f"Paragraphs: {self.paragraphs}"
        )


class PlainTextExtractor(BaseExtractor):
    """Extract text from ``.txt`` files.

    Decoding honors a UTF-8 or UTF-16 byte-order mark, otherwise tries UTF-8
    and falls back to Latin-1, which accepts any byte sequence.

    Attributes:
        max_bytes: Largest accepted file size in bytes
    """

    format_name = "text"
    extensions = (".txt",)

    def __init__(self, max_bytes: int = MAX_TEXT_BYTES) -> None:
        if max_bytes <= 0:
            raise InvalidArgumentError(f"max_bytes must be positive, got: {max_bytes}")
        self.max_bytes = max_bytes

    def extract(self, path: PathLike, encoding: Optional[str] = None) -> str:
        """Extract normalized text.

        Args:
            path: Text file path
            encoding: Explicit codec name; when given, no detection or fallback

        Raises:
            InvalidArgumentError: Unknown encoding name
            DocumentTooLargeError: File larger than ``max_bytes``
            WrongFormatError: Content cannot be decoded with the explicit encoding
        """
        if encoding is None:
            return self._extract(path, self._read_text)

        if not encoding.strip():
            raise InvalidArgumentError("Encoding cannot be empty")
        try:
            codec = codecs.lookup(encoding).name
        except LookupError as e:
            raise InvalidArgumentError(f"Unsupported encoding: {encoding}") from e

        return self._extract(path, lambda p: self._decode(p, self._read_bytes(p), codec))

    def detect_encoding(self, path: PathLike) -> str:
        """Codec name that ``extract`` would use for the file.

        Returns one of ``utf-8-sig``, ``utf-16``, ``utf-8`` or ``latin-1``.
        """
        return self._detect(self._read_bytes(self._check_path(path)))

    def stats(self, path: PathLike) -> TextFileStats:
        """Size, character, line, word and paragraph counts of the normalized text."""
        document = self._check_path(path)
        text = self.extract(document)
        return TextFileStats(
            file_size=document.stat().st_size,
            characters=len(text),
            lines=len(text.split("\n")),
            words=len(text.split()),
            paragraphs=len(re.split(r"\n\s*\n", text)),
        )

    def _read_text(self, path: Path) -> str:
        data = self._read_bytes(path)
        return self._decode(path, data, self._detect(data))

    def _read_bytes(self, path: Path) -> bytes:
        try:
            size = path.stat().st_size
            if size > self.max_bytes:
                raise DocumentTooLargeError(
                    f"Text file is too large ({size} bytes, max {self.max_bytes}): {path}",
                    path=path,
                    size=size,
                    limit=self.max_bytes,
                )
            if size == 0:
                raise EmptyDocumentError(f"Text file is empty: {path}", path=path)
            return path.read_bytes()
        except OSError as e:
            raise DocumentIOError(f"Failed to read text file {path}: {e}", path=path) from e

    @staticmethod
    def _detect(data: bytes) -> str:
        for bom, codec in BOMS:
            if data.startswith(bom):
                return codec
        try:
            data.decode("utf-8")
        except UnicodeDecodeError:
            return FALLBACK_ENCODING
        return "utf-8"

    @staticmethod
    def _decode(path: Path, data: bytes, codec: str) -> str:
        try:
            text = data.decode(codec)
        except UnicodeDecodeError as e:
            raise WrongFormatError(
                f"Text file cannot be decoded as {codec}: {path}", path=path
            ) from e

        logger.debug(
            "Decoded text file",
            extra={"event": "extraction.text.decoded", "document": str(path), "encoding": codec},
        )
        # explicit utf-16-le/-be and utf-8 leave the BOM in place
        return text.lstrip("\ufeff")
