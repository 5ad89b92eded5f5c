"""Domain models for the recruitment workbench."""

from .models import Candidate, JobPosting, MatchGrade, MatchResult, dedupe_skills

__all__ = ["Candidate", "JobPosting", "MatchResult", "MatchGrade", "dedupe_skills"]
