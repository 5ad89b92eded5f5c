"""Résumé parsing: field extraction and skill vocabulary."""

from .parser import ResumeParser, looks_like_name, name_from_email, parse_resume
from .patterns import (
    clean_phone,
    extract_all_emails,
    extract_all_phones,
    extract_email,
    extract_phone,
    is_valid_email,
    is_valid_phone,
)
from .skills import contains_skill, extract_skills, load_skill_vocabulary

__all__ = [
    "ResumeParser",
    "parse_resume",
    "looks_like_name",
    "name_from_email",
    "extract_email",
    "extract_all_emails",
    "extract_phone",
    "extract_all_phones",
    "clean_phone",
    "is_valid_email",
    "is_valid_phone",
    "load_skill_vocabulary",
    "contains_skill",
    "extract_skills",
]
