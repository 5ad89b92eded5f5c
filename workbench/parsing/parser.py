"""Heuristic résumé parser.

Turns normalized résumé text into a Candidate by running field extractors in
a fixed order: name, e-mail, phone, education, experience, skills. The name
falls back to one derived from the e-mail address when no header line looks
like a name. Missing fields are reported as empty values; only empty input
is an error.
"""

import re
import time
from pathlib import Path
from typing import Optional, Sequence, Union

from workbench.config.models import MAX_TEXT_BYTES
from workbench.domain.models import Candidate
from workbench.exceptions import InvalidArgumentError
from workbench.extraction.factory import extract_text
from workbench.logging import get_logger
from workbench.utils.timestamps import current_year

from .patterns import extract_email, extract_phone
from .skills import extract_skills, load_skill_vocabulary

logger = get_logger(__name__, component="parsing")

NAME_SCAN_LINES = 5

# Lines are lowercased first; "cv" counts anywhere as a whole word ("John Smith CV" is
# a header), never inside a word such as "Cvetan"
HEADER_LINE_PATTERN = re.compile(r"resume|curriculum vitae|\bcv\b")
HONORIFIC_PATTERN = re.compile(r"^(?:mr\.?|mrs\.?|ms\.?|dr\.?|prof\.?)\s+", re.IGNORECASE)
SUFFIX_PATTERN = re.compile(r"\s+(?:jr\.?|sr\.?|ii|iii|iv)$", re.IGNORECASE)
NAME_WORD_PATTERN = re.compile(r"^[A-Z][a-z]+$")
EMAIL_SEPARATOR_PATTERN = re.compile(r"[._-]")

EDUCATION_KEYWORDS = (
    "bachelor",
    "master",
    "phd",
    "doctorate",
    "degree",
    "university",
    "college",
    "b.s.",
    "b.a.",
    "m.s.",
    "m.a.",
    "m.b.a.",
    "ph.d.",
    "b.tech",
    "m.tech",
)

EXPLICIT_EXPERIENCE_PATTERN = re.compile(
    r"(\d+)\s*\+?\s*years?\s*(?:of\s*)?(?:experience|exp)", re.IGNORECASE
)
DATE_RANGE_PATTERN = re.compile(
    r"(\d{4})\s*[-–—]\s*(\d{4}|present|current)", re.IGNORECASE
)
WHITESPACE_PATTERN = re.compile(r"\s+")


def looks_like_name(line: str) -> bool:
    """Whether a line reads as a 2-4 word capitalized personal name.

    Honorifics (Mr., Dr., ...) and suffixes (Jr., III, ...) are ignored.

    Example:
        >>> looks_like_name("Dr. Jane Marie Doe")
        True
        >>> looks_like_name("Senior software engineer")
        False
    """
    stripped = SUFFIX_PATTERN.sub("", HONORIFIC_PATTERN.sub("", line.strip()))
    words = stripped.split()
    if not 2 <= len(words) <= 4:
        return False
    return all(len(word) >= 2 and NAME_WORD_PATTERN.match(word) for word in words)


def name_from_email(email: str) -> str:
    """Derive a display name from an e-mail local part.

    Example:
        >>> name_from_email("jane.q.public@example.com")
        'Jane Q Public'
    """
    if not email:
        return ""
    local_part = email.split("@", 1)[0]
    segments = [s for s in EMAIL_SEPARATOR_PATTERN.split(local_part) if s]
    return " ".join(segment[0].upper() + segment[1:].lower() for segment in segments)


class ResumeParser:
    """Extract candidate fields from résumé text.

    Instances hold only read-only configuration and can be shared between
    threads.

    Attributes:
        skills: Vocabulary used for known-skill lookup
        reference_year: Year substituted for "present"/"current" in date
            ranges; None means the current UTC year at parse time
    """

    def __init__(
        self,
        skills: Optional[Sequence[str]] = None,
        reference_year: Optional[int] = None,
    ) -> None:
        self.skills = tuple(skills) if skills is not None else load_skill_vocabulary()
        self.reference_year = reference_year

    def parse_text(self, text: str) -> Candidate:
        """Parse résumé text into a Candidate.

        Args:
            text: Normalized résumé text

        Returns:
            Candidate with ``resume_text`` set to the input

        Raises:
            InvalidArgumentError: If text is None, empty or whitespace-only
        """
        if text is None or not text.strip():
            raise InvalidArgumentError("Resume text cannot be empty")

        started = time.perf_counter()

        email = extract_email(text)
        name = self.extract_name(text) or name_from_email(email)

        candidate = Candidate(
            name=name,
            email=email,
            phone=extract_phone(text),
            education=self.extract_education(text),
            experience_years=self.extract_experience(text),
            resume_text=text,
            skills=extract_skills(text, self.skills),
        )

        logger.info(
            "Parsed resume",
            extra={
                "event": "parsing.resume.parsed",
                "has_name": bool(candidate.name),
                "has_email": bool(candidate.email),
                "has_phone": bool(candidate.phone),
                "experience_years": candidate.experience_years,
                "skill_count": candidate.skill_count,
                "duration_ms": round((time.perf_counter() - started) * 1000, 2),
            },
        )
        return candidate

    def parse_file(self, path: Union[str, Path], max_text_bytes: int = MAX_TEXT_BYTES) -> Candidate:
        """Extract text from a PDF, DOCX or plain-text résumé and parse it.

        Raises:
            ExtractionError: If the document cannot be read (see subclasses)
        """
        return self.parse_text(extract_text(path, max_text_bytes=max_text_bytes))

    def extract_name(self, text: str) -> str:
        """First of the leading non-empty lines that looks like a name, or ''."""
        scanned = 0
        for raw_line in text.split("\n"):
            line = raw_line.strip()
            if not line:
                continue
            scanned += 1
            if scanned > NAME_SCAN_LINES:
                break
            if HEADER_LINE_PATTERN.search(line.lower()):
                continue
            if looks_like_name(line):
                return line
        return ""

    def extract_education(self, text: str) -> str:
        """Education lines (lowercased, whitespace-collapsed) joined with '; '."""
        entries = []
        for line in text.lower().split("\n"):
            if not any(keyword in line for keyword in EDUCATION_KEYWORDS):
                continue
            cleaned = WHITESPACE_PATTERN.sub(" ", line.strip())
            if 10 < len(cleaned) < 200:
                entries.append(cleaned)
        return "; ".join(entries)

    def extract_experience(self, text: str) -> int:
        """Larger of the explicit "N years of experience" figure and the summed date ranges."""
        explicit = max(
            (int(m.group(1)) for m in EXPLICIT_EXPERIENCE_PATTERN.finditer(text)),
            default=0,
        )

        year = self.reference_year if self.reference_year is not None else current_year()
        derived = 0
        for match in DATE_RANGE_PATTERN.finditer(text):
            start = int(match.group(1))
            end_text = match.group(2).lower()
            end = year if end_text in ("present", "current") else int(end_text)
            derived += max(0, end - start)

        return max(explicit, derived)


def parse_resume(
    path: Union[str, Path],
    parser: Optional[ResumeParser] = None,
    max_text_bytes: int = MAX_TEXT_BYTES,
) -> Candidate:
    """Extract and parse a résumé file with a default or supplied parser."""
    return (parser or ResumeParser()).parse_file(path, max_text_bytes=max_text_bytes)
