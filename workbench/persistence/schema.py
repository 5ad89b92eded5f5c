"""Database schema definition and ORM models.

This module defines SQLAlchemy ORM models for candidates, job postings and
their skills, and the conversions between ORM models and domain models.
Timestamps are stored as ISO 8601 strings with a 'Z' suffix.
"""

from decimal import Decimal
from typing import List, Optional

from sqlalchemy import (
    Boolean,
    Column,
    ForeignKey,
    Index,
    Integer,
    Numeric,
    String,
    Text,
    UniqueConstraint,
    inspect,
)
from sqlalchemy.engine import Engine
from sqlalchemy.orm import declarative_base, relationship

from workbench.domain.models import Candidate, JobPosting
from workbench.logging import get_logger
from workbench.utils.timestamps import format_timestamp, parse_timestamp

logger = get_logger(__name__, component="database")

Base = declarative_base()

IMPORTANCE_REQUIRED = "required"
IMPORTANCE_PREFERRED = "preferred"

_CENTS = Decimal("0.01")


class CandidateModel(Base):
    """ORM model for candidates table."""

    __tablename__ = "candidates"

    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String(255), nullable=False, default="")
    email = Column(String(255), nullable=False, unique=True)
    phone = Column(String(50), nullable=False, default="")
    education = Column(Text, nullable=False, default="")
    experience_years = Column(Integer, nullable=False, default=0)
    resume_text = Column(Text, nullable=False, default="")

    # Timestamps (stored as ISO 8601 strings)
    created_at = Column(String(50), nullable=False)
    updated_at = Column(String(50), nullable=False)

    skills = relationship(
        "CandidateSkillModel",
        order_by="CandidateSkillModel.position",
        cascade="all, delete-orphan",
        passive_deletes=True,
        lazy="selectin",
    )

    __table_args__ = (Index("idx_candidates_experience", "experience_years"),)

    def to_domain(self) -> Candidate:
        """Convert ORM model to domain model."""
        return Candidate(
            id=self.id,
            name=self.name,
            email=self.email,
            phone=self.phone,
            education=self.education,
            experience_years=self.experience_years,
            resume_text=self.resume_text,
            skills=[row.skill for row in self.skills],
            created_at=parse_timestamp(self.created_at),
            updated_at=parse_timestamp(self.updated_at),
        )

    @classmethod
    def from_domain(cls, candidate: Candidate) -> "CandidateModel":
        """Create ORM model from domain model (the id is left to the database)."""
        model = cls()
        model.apply(candidate)
        model.created_at = format_timestamp(candidate.created_at)
        return model

    def apply(self, candidate: Candidate) -> None:
        """Copy every mutable field of the domain model onto this row."""
        self.name = candidate.name
        self.email = candidate.email
        self.phone = candidate.phone
        self.education = candidate.education
        self.experience_years = candidate.experience_years
        self.resume_text = candidate.resume_text
        self.updated_at = format_timestamp(candidate.updated_at)
        self.skills = [
            CandidateSkillModel(skill=skill, position=position)
            for position, skill in enumerate(candidate.skills)
        ]


class CandidateSkillModel(Base):
    """ORM model for candidate_skills table."""

    __tablename__ = "candidate_skills"

    id = Column(Integer, primary_key=True, autoincrement=True)
    candidate_id = Column(
        Integer, ForeignKey("candidates.id", ondelete="CASCADE"), nullable=False
    )
    skill = Column(String(100), nullable=False)
    position = Column(Integer, nullable=False, default=0)

    __table_args__ = (
        UniqueConstraint("candidate_id", "skill", name="uq_candidate_skill"),
        Index("idx_candidate_skills_skill", "skill"),
    )


class JobPostingModel(Base):
    """ORM model for job_postings table."""

    __tablename__ = "job_postings"

    id = Column(Integer, primary_key=True, autoincrement=True)
    title = Column(Text, nullable=False)
    description = Column(Text, nullable=False, default="")
    location = Column(String(255), nullable=False, default="")

    # Floats on the wire, converted back to 2-place Decimals in to_domain()
    salary_min = Column(Numeric(12, 2, asdecimal=False), nullable=True)
    salary_max = Column(Numeric(12, 2, asdecimal=False), nullable=True)

    required_experience = Column(Integer, nullable=False, default=0)
    is_active = Column(Boolean, nullable=False, default=True)

    # Timestamps (stored as ISO 8601 strings)
    created_at = Column(String(50), nullable=False)
    updated_at = Column(String(50), nullable=False)

    skills = relationship(
        "JobSkillModel",
        order_by="JobSkillModel.position",
        cascade="all, delete-orphan",
        passive_deletes=True,
        lazy="selectin",
    )

    __table_args__ = (Index("idx_job_postings_active", "is_active"),)

    def to_domain(self) -> JobPosting:
        """Convert ORM model to domain model."""
        return JobPosting(
            id=self.id,
            title=self.title,
            description=self.description,
            location=self.location,
            salary_min=_to_decimal(self.salary_min),
            salary_max=_to_decimal(self.salary_max),
            required_experience=self.required_experience,
            required_skills=self._skills_with(IMPORTANCE_REQUIRED),
            preferred_skills=self._skills_with(IMPORTANCE_PREFERRED),
            is_active=self.is_active,
            created_at=parse_timestamp(self.created_at),
            updated_at=parse_timestamp(self.updated_at),
        )

    def _skills_with(self, importance: str) -> List[str]:
        return [row.skill for row in self.skills if row.importance == importance]

    @classmethod
    def from_domain(cls, job: JobPosting) -> "JobPostingModel":
        """Create ORM model from domain model (the id is left to the database)."""
        model = cls()
        model.apply(job)
        model.created_at = format_timestamp(job.created_at)
        return model

    def apply(self, job: JobPosting) -> None:
        """Copy every mutable field of the domain model onto this row."""
        self.title = job.title
        self.description = job.description
        self.location = job.location
        self.salary_min = _to_float(job.salary_min)
        self.salary_max = _to_float(job.salary_max)
        self.required_experience = job.required_experience
        self.is_active = job.is_active
        self.updated_at = format_timestamp(job.updated_at)

        rows = [
            JobSkillModel(skill=skill, importance=IMPORTANCE_REQUIRED, position=position)
            for position, skill in enumerate(job.required_skills)
        ]
        offset = len(rows)
        rows.extend(
            JobSkillModel(skill=skill, importance=IMPORTANCE_PREFERRED, position=offset + position)
            for position, skill in enumerate(job.preferred_skills)
        )
        self.skills = rows


class JobSkillModel(Base):
    """ORM model for job_skills table.

    Required skills come first by position, followed by preferred skills.
    """

    __tablename__ = "job_skills"

    id = Column(Integer, primary_key=True, autoincrement=True)
    job_id = Column(Integer, ForeignKey("job_postings.id", ondelete="CASCADE"), nullable=False)
    skill = Column(String(100), nullable=False)
    importance = Column(String(16), nullable=False, default=IMPORTANCE_REQUIRED)
    position = Column(Integer, nullable=False, default=0)

    __table_args__ = (
        UniqueConstraint("job_id", "skill", name="uq_job_skill"),
        Index("idx_job_skills_skill", "skill"),
    )


def _to_float(value: Optional[Decimal]) -> Optional[float]:
    return None if value is None else float(value)


def _to_decimal(value: Optional[float]) -> Optional[Decimal]:
    if value is None:
        return None
    return Decimal(str(value)).quantize(_CENTS)


def create_schema(engine: Engine) -> None:
    """Create all tables and indexes if they don't exist (idempotent).

    Args:
        engine: SQLAlchemy engine instance
    """
    Base.metadata.create_all(engine, checkfirst=True)

    tables = inspect(engine).get_table_names()
    logger.info(
        f"Database schema ready. Tables: {', '.join(tables)}",
        extra={"event": "database.schema.ready", "table_count": len(tables)},
    )
