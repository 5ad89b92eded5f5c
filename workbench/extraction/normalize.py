"""Text normalization shared by every extractor.

Character-level rewrites run before the whitespace passes so that a
normalized string is a fixed point of ``normalize_text``.
"""

import re

# Typographic punctuation and bullet glyphs mapped to plain equivalents
PUNCTUATION_MAP = str.maketrans(
    {
        "\u00a0": " ",  # non-breaking space
        "\u2013": "-",  # en dash
        "\u2014": "-",  # em dash
        "\u201c": '"',
        "\u201d": '"',
        "\u2018": "'",
        "\u2019": "'",
        "\u2023": "\u2022",  # triangular bullet
        "\u2043": "\u2022",  # hyphen bullet
        "\u25aa": "\u2022",  # small black square
        "\u25cf": "\u2022",  # black circle
        "\u25e6": "\u2022",  # white bullet
        "\u2219": "\u2022",  # bullet operator
    }
)

CONTROL_CHARS_PATTERN = re.compile(r"[\x00-\x08\x0B\x0C\x0E-\x1F\x7F]")
HORIZONTAL_SPACE_PATTERN = re.compile(r"[ \t]+")
LEADING_SPACE_PATTERN = re.compile(r"\n[ \t]+")
TRAILING_SPACE_PATTERN = re.compile(r"[ \t]+\n")
EXCESS_NEWLINES_PATTERN = re.compile(r"\n{3,}")


def normalize_text(text: str) -> str:
    """Clean extracted document text.

    Performs the following transformations:
    1. Normalize line endings (CRLF and CR become LF)
    2. Replace non-breaking spaces, dashes, curly quotes and bullet glyphs
    3. Strip control characters except TAB and LF
    4. Collapse runs of spaces and tabs to a single space
    5. Strip leading and trailing whitespace on each line
    6. Collapse 3+ consecutive newlines to exactly two
    7. Trim the result

    Args:
        text: Raw text from a document

    Returns:
        Normalized text, empty string if nothing remains

    Example:
        >>> normalize_text("Hello  \\u00a0World \\r\\n\\r\\n\\r\\nNext")
        'Hello World\\n\\nNext'
    """
    if not text:
        return ""

    text = text.replace("\r\n", "\n").replace("\r", "\n")
    text = text.translate(PUNCTUATION_MAP)
    text = CONTROL_CHARS_PATTERN.sub("", text)
    text = HORIZONTAL_SPACE_PATTERN.sub(" ", text)
    text = LEADING_SPACE_PATTERN.sub("\n", text)
    text = TRAILING_SPACE_PATTERN.sub("\n", text)
    text = EXCESS_NEWLINES_PATTERN.sub("\n\n", text)

    return text.strip()
