"""Core domain models for candidates, job postings, and match results.

This module defines the records shared by every layer of the workbench:
- Candidate: normalized job-seeker record produced by the résumé parser
- JobPosting: recruiter-defined target with required/preferred skills
- MatchResult: immutable, scored comparison of a candidate against a job
- MatchGrade: discrete label for a numeric score

Skill strings are compared case-insensitively but keep their original casing.
Candidate and JobPosting refresh ``updated_at`` whenever another attribute is
assigned.
"""

from datetime import datetime
from decimal import Decimal
from enum import Enum
from typing import Any, Iterable, List, Optional, Tuple

from pydantic import BaseModel, Field, ValidationError, field_validator, model_validator

from workbench.utils.timestamps import ensure_utc, utc_now

# Attributes whose assignment does not count as a modification
_UNTRACKED_FIELDS = frozenset({"created_at", "updated_at"})


def dedupe_skills(skills: Iterable[Any]) -> List[str]:
    """Strip, drop blanks, and remove case-insensitive duplicates.

    The first spelling of each skill wins and input order is preserved.

    Example:
        >>> dedupe_skills(["Java", " python ", "JAVA", ""])
        ['Java', 'python']
    """
    seen = set()
    result = []
    for skill in skills:
        if skill is None:
            continue
        text = str(skill).strip()
        if not text or text.lower() in seen:
            continue
        seen.add(text.lower())
        result.append(text)
    return result


class MatchGrade(str, Enum):
    """Discrete label for a match score."""

    EXCELLENT = "Excellent"
    VERY_GOOD = "Very Good"
    GOOD = "Good"
    FAIR = "Fair"
    POOR = "Poor"
    VERY_POOR = "Very Poor"

    @classmethod
    def for_score(cls, score: float) -> "MatchGrade":
        """Map a score in [0, 100] to its grade."""
        if score >= 90:
            return cls.EXCELLENT
        if score >= 80:
            return cls.VERY_GOOD
        if score >= 70:
            return cls.GOOD
        if score >= 60:
            return cls.FAIR
        if score >= 50:
            return cls.POOR
        return cls.VERY_POOR


class _TrackedModel(BaseModel):
    """Base for mutable records with created/updated timestamps."""

    created_at: datetime = Field(default_factory=utc_now, description="Creation time (UTC)")
    updated_at: datetime = Field(default_factory=utc_now, description="Last modification time (UTC)")

    model_config = {"validate_assignment": True}

    def __setattr__(self, name: str, value: Any) -> None:
        # Model validators run after the value is stored; undo a rejected assignment
        saved_dict = dict(self.__dict__)
        saved_fields_set = set(self.__pydantic_fields_set__)
        try:
            super().__setattr__(name, value)
        except ValidationError:
            object.__setattr__(self, "__dict__", saved_dict)
            object.__setattr__(self, "__pydantic_fields_set__", saved_fields_set)
            raise
        if name not in _UNTRACKED_FIELDS and name in type(self).model_fields:
            now = utc_now()
            if now < self.created_at:
                now = self.created_at
            super().__setattr__("updated_at", now)

    @field_validator("created_at", "updated_at")
    @classmethod
    def ensure_utc(cls, v: datetime) -> datetime:
        """Ensure datetime is timezone-aware and in UTC."""
        return ensure_utc(v)

    @model_validator(mode="after")
    def check_timestamps(self):
        if self.updated_at < self.created_at:
            raise ValueError("updated_at must not be earlier than created_at")
        return self


class Candidate(_TrackedModel):
    """Normalized job-seeker record.

    Absent fields are empty strings, zero, or an empty skill list. The e-mail
    is stored lowercase; e-mail uniqueness is enforced by the persistence
    layer, not here.
    """

    id: Optional[int] = Field(None, description="Database identity, None until stored")
    name: str = Field("", description="Full name")
    email: str = Field("", description="Lowercase e-mail address")
    phone: str = Field("", description="Digits, optionally with a leading '+'")
    education: str = Field("", description="Education lines joined with '; '")
    experience_years: int = Field(0, ge=0, description="Years of professional experience")
    resume_text: str = Field("", description="Normalized résumé text")
    skills: List[str] = Field(default_factory=list, description="Skills, unique ignoring case")

    @field_validator("name", "phone", "education", mode="before")
    @classmethod
    def strip_text(cls, v: Optional[str]) -> str:
        """Strip whitespace; None becomes an empty string."""
        if v is None:
            return ""
        return str(v).strip()

    @field_validator("resume_text", mode="before")
    @classmethod
    def none_to_empty(cls, v: Optional[str]) -> str:
        return "" if v is None else v

    @field_validator("email", mode="before")
    @classmethod
    def normalize_email(cls, v: Optional[str]) -> str:
        """Lowercase and strip the e-mail address."""
        if v is None:
            return ""
        return str(v).strip().lower()

    @field_validator("skills", mode="before")
    @classmethod
    def normalize_skills(cls, v: Optional[Iterable[Any]]) -> List[str]:
        if v is None:
            return []
        return dedupe_skills(v)

    def add_skill(self, skill: str) -> bool:
        """Add a skill unless it is blank or already present.

        Returns:
            True if the skill was added
        """
        if not skill or not skill.strip() or self.has_skill(skill):
            return False
        self.skills = [*self.skills, skill.strip()]
        return True

    def remove_skill(self, skill: str) -> bool:
        """Remove a skill, ignoring case. Returns True if it was present."""
        if not self.has_skill(skill):
            return False
        key = skill.strip().lower()
        self.skills = [s for s in self.skills if s.lower() != key]
        return True

    def has_skill(self, skill: str) -> bool:
        """Case-insensitive skill membership."""
        if not skill:
            return False
        key = skill.strip().lower()
        return any(s.lower() == key for s in self.skills)

    @property
    def skill_count(self) -> int:
        return len(self.skills)

    def is_experienced(self, required_years: int) -> bool:
        return self.experience_years >= required_years

    def summary(self) -> str:
        """Multi-line display text for the candidate."""
        lines = [f"Name: {self.name}", f"Email: {self.email}"]
        if self.phone:
            lines.append(f"Phone: {self.phone}")
        lines.append(f"Experience: {self.experience_years} years")
        if self.education:
            lines.append(f"Education: {self.education}")
        if self.skills:
            lines.append(f"Skills: {', '.join(self.skills)}")
        return "\n".join(lines)

    def __str__(self) -> str:
        return (
            f"Candidate(id={self.id}, name='{self.name}', email='{self.email}', "
            f"experience={self.experience_years} years, skills={self.skill_count})"
        )

    model_config = {
        "validate_assignment": True,
        "json_schema_extra": {
            "example": {
                "name": "Jane Q Public",
                "email": "jane.q.public@example.com",
                "phone": "+15551234567",
                "education": "b.s. in computer science, state university",
                "experience_years": 6,
                "skills": ["Python", "SQL", "Docker"],
            }
        },
    }


class JobPosting(_TrackedModel):
    """Recruiter-defined job posting.

    Required and preferred skills are ordered, deduplicated ignoring case,
    and must not overlap. Salary bounds are optional decimals with
    ``salary_min <= salary_max`` when both are present.
    """

    id: Optional[int] = Field(None, description="Database identity, None until stored")
    title: str = Field(..., description="Job title")
    description: str = Field("", description="Free-text description")
    location: str = Field("", description="Job location")
    salary_min: Optional[Decimal] = Field(None, ge=0, description="Minimum salary")
    salary_max: Optional[Decimal] = Field(None, ge=0, description="Maximum salary")
    required_experience: int = Field(0, ge=0, description="Minimum years of experience")
    required_skills: List[str] = Field(default_factory=list, description="Required skills in order")
    preferred_skills: List[str] = Field(default_factory=list, description="Preferred skills in order")
    is_active: bool = Field(True, description="Whether the posting is open")

    @field_validator("title")
    @classmethod
    def strip_title(cls, v: str) -> str:
        if not v or not v.strip():
            raise ValueError("title cannot be empty or whitespace-only")
        return v.strip()

    @field_validator("description", "location", mode="before")
    @classmethod
    def strip_text(cls, v: Optional[str]) -> str:
        if v is None:
            return ""
        return str(v).strip()

    @field_validator("required_skills", "preferred_skills", mode="before")
    @classmethod
    def normalize_skills(cls, v: Optional[Iterable[Any]]) -> List[str]:
        if v is None:
            return []
        return dedupe_skills(v)

    @model_validator(mode="after")
    def check_consistency(self):
        """Salary bounds must be ordered and skill lists disjoint."""
        if (
            self.salary_min is not None
            and self.salary_max is not None
            and self.salary_min > self.salary_max
        ):
            raise ValueError(
                f"salary_min ({self.salary_min}) must not exceed salary_max ({self.salary_max})"
            )

        required = {s.lower() for s in self.required_skills}
        overlap = [s for s in self.preferred_skills if s.lower() in required]
        if overlap:
            raise ValueError(
                f"skills cannot be both required and preferred: {', '.join(overlap)}"
            )
        return self

    def add_required_skill(self, skill: str) -> bool:
        """Append a required skill. Returns False if blank or already required.

        Raises:
            ValueError: If the skill is already a preferred skill
        """
        if not skill or not skill.strip() or self.requires_skill(skill):
            return False
        if self.prefers_skill(skill):
            raise ValueError(f"'{skill}' is already a preferred skill")
        self.required_skills = [*self.required_skills, skill.strip()]
        return True

    def add_preferred_skill(self, skill: str) -> bool:
        """Append a preferred skill. Returns False if blank or already preferred.

        Raises:
            ValueError: If the skill is already a required skill
        """
        if not skill or not skill.strip() or self.prefers_skill(skill):
            return False
        if self.requires_skill(skill):
            raise ValueError(f"'{skill}' is already a required skill")
        self.preferred_skills = [*self.preferred_skills, skill.strip()]
        return True

    def remove_required_skill(self, skill: str) -> bool:
        if not self.requires_skill(skill):
            return False
        key = skill.strip().lower()
        self.required_skills = [s for s in self.required_skills if s.lower() != key]
        return True

    def remove_preferred_skill(self, skill: str) -> bool:
        if not self.prefers_skill(skill):
            return False
        key = skill.strip().lower()
        self.preferred_skills = [s for s in self.preferred_skills if s.lower() != key]
        return True

    def requires_skill(self, skill: str) -> bool:
        if not skill:
            return False
        key = skill.strip().lower()
        return any(s.lower() == key for s in self.required_skills)

    def prefers_skill(self, skill: str) -> bool:
        if not skill:
            return False
        key = skill.strip().lower()
        return any(s.lower() == key for s in self.preferred_skills)

    @property
    def all_skills(self) -> List[str]:
        """Required skills followed by preferred skills."""
        return [*self.required_skills, *self.preferred_skills]

    @property
    def salary_range(self) -> str:
        """Display text for the salary bounds, e.g. ``$50,000 - $80,000``."""
        if self.salary_min is not None and self.salary_max is not None:
            return f"${self.salary_min:,.0f} - ${self.salary_max:,.0f}"
        if self.salary_min is not None:
            return f"${self.salary_min:,.0f}+"
        if self.salary_max is not None:
            return f"Up to ${self.salary_max:,.0f}"
        return "Salary not specified"

    def activate(self) -> None:
        self.is_active = True

    def deactivate(self) -> None:
        self.is_active = False

    def summary(self) -> str:
        """Multi-line display text for the posting."""
        lines = [
            f"Title: {self.title}",
            f"Location: {self.location}",
            f"Experience Required: {self.required_experience} years",
            f"Salary: {self.salary_range}",
        ]
        if self.required_skills:
            lines.append(f"Required Skills: {', '.join(self.required_skills)}")
        if self.preferred_skills:
            lines.append(f"Preferred Skills: {', '.join(self.preferred_skills)}")
        if self.description:
            lines.append(f"Description: {self.description}")
        return "\n".join(lines)

    def __str__(self) -> str:
        return (
            f"JobPosting(id={self.id}, title='{self.title}', location='{self.location}', "
            f"experience={self.required_experience} years, skills={len(self.all_skills)})"
        )

    model_config = {
        "validate_assignment": True,
        "json_schema_extra": {
            "example": {
                "title": "Backend Engineer",
                "location": "Remote",
                "salary_min": "90000",
                "salary_max": "120000",
                "required_experience": 3,
                "required_skills": ["Java", "SQL"],
                "preferred_skills": ["Docker"],
            }
        },
    }


class MatchResult(BaseModel):
    """Scored comparison of a candidate against a job posting.

    Produced by the matching engine and immutable afterwards. ``total_skills``
    counts required skills only while ``skill_match_count`` counts required
    and preferred hits, so the match count can exceed the total.
    """

    candidate: Candidate = Field(..., description="Candidate that was scored")
    job: JobPosting = Field(..., description="Job posting scored against")
    score: float = Field(..., description="Match score in [0, 100]")
    skill_match_count: int = Field(0, ge=0, description="Required plus preferred skill hits")
    total_skills: int = Field(0, ge=0, description="Number of required skills")
    experience_match: bool = Field(False, description="Candidate meets the experience requirement")
    matched_skills: Tuple[str, ...] = Field(default_factory=tuple, description="Lowercase matched skills")
    missing_skills: Tuple[str, ...] = Field(default_factory=tuple, description="Lowercase missing required skills")
    computed_at: datetime = Field(default_factory=utc_now, description="When the score was computed (UTC)")
    summary: str = Field("", description="Human-readable explanation")

    model_config = {"frozen": True}

    @field_validator("score")
    @classmethod
    def clamp_score(cls, v: float) -> float:
        """Clamp the score into [0, 100]."""
        return max(0.0, min(100.0, float(v)))

    @field_validator("computed_at")
    @classmethod
    def ensure_utc(cls, v: datetime) -> datetime:
        return ensure_utc(v)

    @property
    def grade(self) -> MatchGrade:
        return MatchGrade.for_score(self.score)

    @property
    def skill_match_percentage(self) -> float:
        """skill_match_count / total_skills as a percentage, 0 when no skills are required."""
        if self.total_skills == 0:
            return 0.0
        return self.skill_match_count / self.total_skills * 100

    @property
    def is_strong_match(self) -> bool:
        return self.score >= 80

    @property
    def is_good_match(self) -> bool:
        return self.score >= 70

    @property
    def is_fair_match(self) -> bool:
        return self.score >= 60

    def __str__(self) -> str:
        return (
            f"MatchResult(candidate='{self.candidate.name}', job='{self.job.title}', "
            f"score={self.score:.1f}, grade={self.grade.value})"
        )
