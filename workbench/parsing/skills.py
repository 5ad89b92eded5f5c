"""Skill vocabulary loading and skill-mention detection."""

import re
from functools import lru_cache
from importlib import resources
from pathlib import Path
from typing import Iterable, List, Optional, Sequence, Tuple, Union

import yaml

from workbench.config.exceptions import ConfigurationError
from workbench.domain.models import dedupe_skills
from workbench.logging import get_logger

logger = get_logger(__name__, component="parsing")

DEFAULT_SKILLS_RESOURCE = "skills.yaml"

# A section is the rest of the heading line, or the line below a bare heading
SKILLS_SECTION_PATTERN = re.compile(
    r"(?:technical\s+)?skills?\s*:?\s*([^\n]*(?:\n[^\n]*)*?)(?=\n\s*[A-Z][^:\n]*:|$)",
    re.IGNORECASE | re.MULTILINE,
)
SECTION_SPLIT_PATTERN = re.compile(r"[,;|•\n]")
LIST_MARKER_PATTERN = re.compile(r"^[-•*]\s*")
SKILL_CHARSET_PATTERN = re.compile(r"^[a-zA-Z0-9\s.+#-]+$")
STOP_WORD_PATTERN = re.compile(r"\b(?:and|or|the|with|in|of|for|to|at)\b")


def _parse_vocabulary(data, source: str) -> Tuple[str, ...]:
    entries = data.get("skills") if isinstance(data, dict) else data
    if not isinstance(entries, list) or not entries:
        raise ConfigurationError(
            f"Skill vocabulary {source} must contain a non-empty 'skills' list",
            suggestions=["Use the layout of workbench/data/skills.yaml"],
        )

    invalid = [repr(entry) for entry in entries if not isinstance(entry, str) or not entry.strip()]
    if invalid:
        raise ConfigurationError(
            f"Skill vocabulary {source} contains invalid entries",
            errors=[f"Not a skill name: {entry}" for entry in invalid],
        )

    return tuple(dedupe_skills(entries))


@lru_cache(maxsize=1)
def _builtin_vocabulary() -> Tuple[str, ...]:
    text = resources.files("workbench").joinpath("data", DEFAULT_SKILLS_RESOURCE).read_text(
        encoding="utf-8"
    )
    return _parse_vocabulary(yaml.safe_load(text), "built-in")


def load_skill_vocabulary(path: Optional[Union[str, Path]] = None) -> Tuple[str, ...]:
    """Load a skill vocabulary.

    Args:
        path: YAML file with a top-level ``skills`` list (or a bare list).
            None returns the built-in vocabulary, which is cached.

    Returns:
        Skill names in file order, case-insensitive duplicates removed

    Raises:
        ConfigurationError: File missing, unreadable, or not a list of names
    """
    if path is None:
        return _builtin_vocabulary()

    source = Path(path)
    try:
        with open(source, "r", encoding="utf-8") as f:
            data = yaml.safe_load(f)
    except FileNotFoundError as e:
        raise ConfigurationError(
            f"Skill vocabulary file not found: {source}",
            suggestions=["Check parsing.skills_file or WORKBENCH_SKILLS_FILE"],
        ) from e
    except (OSError, yaml.YAMLError) as e:
        raise ConfigurationError(f"Failed to read skill vocabulary {source}: {e}") from e

    vocabulary = _parse_vocabulary(data, str(source))
    logger.debug(
        "Loaded skill vocabulary",
        extra={"event": "parsing.vocabulary.loaded", "source": str(source), "skill_count": len(vocabulary)},
    )
    return vocabulary


@lru_cache(maxsize=512)
def _skill_pattern(skill: str) -> "re.Pattern[str]":
    # Alphanumeric look-arounds instead of \b so "C++" and "C#" match
    return re.compile(
        r"(?<![A-Za-z0-9])" + re.escape(skill) + r"(?![A-Za-z0-9])", re.IGNORECASE
    )


def contains_skill(text: str, skill: str) -> bool:
    """Whole-word, case-insensitive presence of ``skill`` in ``text``.

    Example:
        >>> contains_skill("Built APIs in c++ and Go", "C++")
        True
        >>> contains_skill("JavaScript only", "Java")
        False
    """
    if not text or not skill:
        return False
    return _skill_pattern(skill).search(text) is not None


def find_known_skills(text: str, vocabulary: Sequence[str]) -> List[str]:
    """Vocabulary skills mentioned in the text, in vocabulary order with canonical casing."""
    return [skill for skill in vocabulary if contains_skill(text, skill)]


def is_valid_skill(token: str) -> bool:
    """Whether a section token looks like a skill name.

    Tokens must use letters, digits, whitespace and ``. + # -`` only and must
    not contain a stop-word such as 'and' or 'with'.
    """
    return (
        SKILL_CHARSET_PATTERN.match(token) is not None
        and STOP_WORD_PATTERN.search(token.lower()) is None
    )


def iter_section_skills(text: str) -> Iterable[str]:
    """Yield skill tokens listed under "Skills:" style headings.

    Each captured section is split on commas, semicolons, pipes, bullets and
    newlines; list markers are stripped and tokens of 3 to 49 characters that
    pass ``is_valid_skill`` are yielded in order. Duplicates are not removed.
    """
    for match in SKILLS_SECTION_PATTERN.finditer(text):
        section = match.group(1)
        if not section:
            continue
        for token in SECTION_SPLIT_PATTERN.split(section):
            token = LIST_MARKER_PATTERN.sub("", token.strip())
            if 2 < len(token) < 50 and is_valid_skill(token):
                yield token


def extract_skills(text: str, vocabulary: Sequence[str]) -> List[str]:
    """Known-vocabulary hits followed by section tokens, duplicates (ignoring case) removed."""
    if not text:
        return []
    found = find_known_skills(text, vocabulary)
    found.extend(iter_section_skills(text))
    return dedupe_skills(found)
