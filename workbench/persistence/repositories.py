"""Data access layer (repositories) for persistence operations.

This module provides repository classes for CRUD operations on candidates
and job postings. Repositories encapsulate database operations and return
domain models rather than ORM models.
"""

from decimal import Decimal
from typing import List, Optional

from sqlalchemy import and_, delete, func, or_, select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from workbench.domain.models import Candidate, JobPosting
from workbench.exceptions import InvalidArgumentError
from workbench.logging import get_logger
from workbench.parsing.patterns import is_valid_email
from workbench.utils.timestamps import format_timestamp, utc_now

from .exceptions import DataIntegrityError, PersistenceError, RecordNotFoundError
from .schema import (
    IMPORTANCE_REQUIRED,
    CandidateModel,
    CandidateSkillModel,
    JobPostingModel,
    JobSkillModel,
)

logger = get_logger(__name__, component="database")


def _like_pattern(term: str) -> str:
    return f"%{term.strip().lower()}%"


class CandidateRepository:
    """Repository for candidate-related database operations."""

    def __init__(self, session: Session):
        """Initialize repository with database session.

        Args:
            session: SQLAlchemy session for database operations
        """
        self.session = session

    def add(self, candidate: Candidate) -> Candidate:
        """Insert a new candidate with its skills.

        Args:
            candidate: Candidate domain model (its id is ignored)

        Returns:
            Persisted Candidate with the database id

        Raises:
            InvalidArgumentError: If the e-mail address is missing or malformed
            DataIntegrityError: If the e-mail address is already stored
            PersistenceError: If database error occurs
        """
        self._require_valid_email(candidate)

        try:
            model = CandidateModel.from_domain(candidate)
            self.session.add(model)
            self.session.flush()

            logger.info(
                "Candidate stored",
                extra={"event": "database.candidate.added", "candidate_id": model.id},
            )
            return model.to_domain()

        except IntegrityError as e:
            self.session.rollback()
            logger.error(
                f"Integrity error adding candidate {candidate.email}: {e}",
                extra={"event": "database.candidate.integrity_error"},
            )
            raise DataIntegrityError(
                f"Candidate with email {candidate.email} already exists"
            ) from e
        except SQLAlchemyError as e:
            logger.error(f"Error adding candidate: {e}", exc_info=True)
            raise PersistenceError(f"Failed to add candidate: {e}") from e

    def update(self, candidate: Candidate) -> Candidate:
        """Overwrite a stored candidate and replace its skills.

        Raises:
            InvalidArgumentError: If candidate has no id or an invalid e-mail
            RecordNotFoundError: If no candidate has that id
            DataIntegrityError: If the new e-mail belongs to another candidate
            PersistenceError: If database error occurs
        """
        if candidate.id is None:
            raise InvalidArgumentError("Candidate id is required for update")
        self._require_valid_email(candidate)

        try:
            existing = self.session.get(CandidateModel, candidate.id)
            if existing is None:
                raise RecordNotFoundError(f"Candidate with id {candidate.id} not found")

            existing.skills.clear()
            self.session.flush()
            existing.apply(candidate)
            self.session.flush()
            return existing.to_domain()

        except IntegrityError as e:
            self.session.rollback()
            raise DataIntegrityError(
                f"Failed to update candidate {candidate.id} due to constraint violation: {e}"
            ) from e
        except SQLAlchemyError as e:
            logger.error(f"Error updating candidate {candidate.id}: {e}", exc_info=True)
            raise PersistenceError(f"Failed to update candidate: {e}") from e

    def get(self, candidate_id: int) -> Optional[Candidate]:
        """Retrieve candidate by id, None if absent."""
        try:
            model = self.session.get(CandidateModel, candidate_id)
            return model.to_domain() if model else None
        except SQLAlchemyError as e:
            logger.error(f"Error retrieving candidate {candidate_id}: {e}", exc_info=True)
            raise PersistenceError(f"Failed to retrieve candidate: {e}") from e

    def get_by_email(self, email: str) -> Optional[Candidate]:
        """Retrieve candidate by e-mail (case-insensitive), None if absent."""
        if not email or not email.strip():
            return None
        stmt = select(CandidateModel).where(CandidateModel.email == email.strip().lower())
        models = self._fetch(stmt, "retrieve candidate by email")
        return models[0] if models else None

    def list_all(self) -> List[Candidate]:
        """All candidates, newest first."""
        stmt = select(CandidateModel).order_by(
            CandidateModel.created_at.desc(), CandidateModel.id.desc()
        )
        return self._fetch(stmt, "list candidates")

    def find_by_skill(self, skill: str) -> List[Candidate]:
        """Candidates listing the skill (case-insensitive), newest first."""
        if not skill or not skill.strip():
            return []
        stmt = (
            select(CandidateModel)
            .join(CandidateSkillModel, CandidateSkillModel.candidate_id == CandidateModel.id)
            .where(func.lower(CandidateSkillModel.skill) == skill.strip().lower())
            .distinct()
            .order_by(CandidateModel.created_at.desc(), CandidateModel.id.desc())
        )
        return self._fetch(stmt, "find candidates by skill")

    def find_by_min_experience(self, min_years: int) -> List[Candidate]:
        """Candidates with at least ``min_years`` of experience, most experienced first."""
        stmt = (
            select(CandidateModel)
            .where(CandidateModel.experience_years >= min_years)
            .order_by(CandidateModel.experience_years.desc(), CandidateModel.id)
        )
        return self._fetch(stmt, "find candidates by experience")

    def search(self, term: str) -> List[Candidate]:
        """Candidates whose name or e-mail contains ``term``; all candidates for a blank term."""
        if not term or not term.strip():
            return self.list_all()
        pattern = _like_pattern(term)
        stmt = (
            select(CandidateModel)
            .where(
                or_(
                    func.lower(CandidateModel.name).like(pattern),
                    func.lower(CandidateModel.email).like(pattern),
                )
            )
            .order_by(CandidateModel.name, CandidateModel.id)
        )
        return self._fetch(stmt, "search candidates")

    def delete(self, candidate_id: int) -> bool:
        """Delete a candidate and its skills. Returns False if it did not exist."""
        try:
            result = self.session.execute(
                delete(CandidateModel).where(CandidateModel.id == candidate_id)
            )
            self.session.flush()
            deleted = result.rowcount > 0
            if deleted:
                logger.info(
                    "Candidate deleted",
                    extra={"event": "database.candidate.deleted", "candidate_id": candidate_id},
                )
            return deleted
        except SQLAlchemyError as e:
            logger.error(f"Error deleting candidate {candidate_id}: {e}", exc_info=True)
            raise PersistenceError(f"Failed to delete candidate: {e}") from e

    def count(self) -> int:
        try:
            return self.session.execute(select(func.count(CandidateModel.id))).scalar_one()
        except SQLAlchemyError as e:
            raise PersistenceError(f"Failed to count candidates: {e}") from e

    def email_exists(self, email: str) -> bool:
        """Whether any candidate uses the e-mail (case-insensitive)."""
        if not email or not email.strip():
            return False
        try:
            stmt = select(func.count(CandidateModel.id)).where(
                CandidateModel.email == email.strip().lower()
            )
            return self.session.execute(stmt).scalar_one() > 0
        except SQLAlchemyError as e:
            raise PersistenceError(f"Failed to check candidate email: {e}") from e

    def _fetch(self, stmt, action: str) -> List[Candidate]:
        try:
            models = self.session.execute(stmt).scalars().unique().all()
            return [model.to_domain() for model in models]
        except SQLAlchemyError as e:
            logger.error(f"Failed to {action}: {e}", exc_info=True)
            raise PersistenceError(f"Failed to {action}: {e}") from e

    @staticmethod
    def _require_valid_email(candidate: Candidate) -> None:
        if not is_valid_email(candidate.email):
            raise InvalidArgumentError(
                f"Candidate email is missing or invalid: '{candidate.email}'"
            )


class JobPostingRepository:
    """Repository for job posting database operations."""

    def __init__(self, session: Session):
        """Initialize repository with database session.

        Args:
            session: SQLAlchemy session for database operations
        """
        self.session = session

    def add(self, job: JobPosting) -> JobPosting:
        """Insert a new job posting with its required and preferred skills.

        Returns:
            Persisted JobPosting with the database id

        Raises:
            DataIntegrityError: If a constraint is violated
            PersistenceError: If database error occurs
        """
        try:
            model = JobPostingModel.from_domain(job)
            self.session.add(model)
            self.session.flush()

            logger.info(
                "Job posting stored",
                extra={"event": "database.job.added", "job_id": model.id},
            )
            return model.to_domain()

        except IntegrityError as e:
            self.session.rollback()
            raise DataIntegrityError(
                f"Failed to add job posting due to constraint violation: {e}"
            ) from e
        except SQLAlchemyError as e:
            logger.error(f"Error adding job posting: {e}", exc_info=True)
            raise PersistenceError(f"Failed to add job posting: {e}") from e

    def update(self, job: JobPosting) -> JobPosting:
        """Overwrite a stored job posting and replace its skills.

        Raises:
            InvalidArgumentError: If job has no id
            RecordNotFoundError: If no job posting has that id
            PersistenceError: If database error occurs
        """
        if job.id is None:
            raise InvalidArgumentError("Job posting id is required for update")

        try:
            existing = self.session.get(JobPostingModel, job.id)
            if existing is None:
                raise RecordNotFoundError(f"Job posting with id {job.id} not found")

            existing.skills.clear()
            self.session.flush()
            existing.apply(job)
            self.session.flush()
            return existing.to_domain()

        except IntegrityError as e:
            self.session.rollback()
            raise DataIntegrityError(
                f"Failed to update job posting {job.id} due to constraint violation: {e}"
            ) from e
        except SQLAlchemyError as e:
            logger.error(f"Error updating job posting {job.id}: {e}", exc_info=True)
            raise PersistenceError(f"Failed to update job posting: {e}") from e

    def get(self, job_id: int) -> Optional[JobPosting]:
        """Retrieve job posting by id, None if absent."""
        try:
            model = self.session.get(JobPostingModel, job_id)
            return model.to_domain() if model else None
        except SQLAlchemyError as e:
            logger.error(f"Error retrieving job posting {job_id}: {e}", exc_info=True)
            raise PersistenceError(f"Failed to retrieve job posting: {e}") from e

    def list_all(self) -> List[JobPosting]:
        """All job postings, newest first."""
        return self._fetch(self._newest_first(select(JobPostingModel)), "list job postings")

    def list_active(self) -> List[JobPosting]:
        """Active job postings, newest first."""
        stmt = select(JobPostingModel).where(JobPostingModel.is_active.is_(True))
        return self._fetch(self._newest_first(stmt), "list active job postings")

    def find_by_location(self, location: str) -> List[JobPosting]:
        """Active postings whose location contains the text (case-insensitive)."""
        if not location or not location.strip():
            return []
        stmt = select(JobPostingModel).where(
            JobPostingModel.is_active.is_(True),
            func.lower(JobPostingModel.location).like(_like_pattern(location)),
        )
        return self._fetch(self._newest_first(stmt), "find job postings by location")

    def find_by_required_skill(self, skill: str) -> List[JobPosting]:
        """Active postings that require the skill (case-insensitive)."""
        if not skill or not skill.strip():
            return []
        stmt = (
            select(JobPostingModel)
            .join(JobSkillModel, JobSkillModel.job_id == JobPostingModel.id)
            .where(
                JobPostingModel.is_active.is_(True),
                JobSkillModel.importance == IMPORTANCE_REQUIRED,
                func.lower(JobSkillModel.skill) == skill.strip().lower(),
            )
            .distinct()
        )
        return self._fetch(self._newest_first(stmt), "find job postings by skill")

    def find_by_salary_range(
        self, min_salary: Optional[Decimal] = None, max_salary: Optional[Decimal] = None
    ) -> List[JobPosting]:
        """Active postings whose salary range overlaps ``[min_salary, max_salary]``.

        Postings without any salary bound never match. A missing bound on
        either side is open-ended.

        Raises:
            InvalidArgumentError: If min_salary > max_salary
        """
        if min_salary is not None and max_salary is not None and min_salary > max_salary:
            raise InvalidArgumentError(
                f"min_salary ({min_salary}) must not exceed max_salary ({max_salary})"
            )

        conditions = [
            JobPostingModel.is_active.is_(True),
            or_(JobPostingModel.salary_min.is_not(None), JobPostingModel.salary_max.is_not(None)),
        ]
        if min_salary is not None:
            conditions.append(
                or_(
                    JobPostingModel.salary_max.is_(None),
                    JobPostingModel.salary_max >= float(min_salary),
                )
            )
        if max_salary is not None:
            conditions.append(
                or_(
                    JobPostingModel.salary_min.is_(None),
                    JobPostingModel.salary_min <= float(max_salary),
                )
            )

        stmt = select(JobPostingModel).where(and_(*conditions))
        return self._fetch(self._newest_first(stmt), "find job postings by salary")

    def search(self, term: str) -> List[JobPosting]:
        """Active postings whose title or description contains ``term``.

        A blank term returns every active posting.
        """
        if not term or not term.strip():
            return self.list_active()
        pattern = _like_pattern(term)
        stmt = select(JobPostingModel).where(
            JobPostingModel.is_active.is_(True),
            or_(
                func.lower(JobPostingModel.title).like(pattern),
                func.lower(JobPostingModel.description).like(pattern),
            ),
        )
        return self._fetch(self._newest_first(stmt), "search job postings")

    def activate(self, job_id: int) -> JobPosting:
        """Mark a posting active. Raises RecordNotFoundError if absent."""
        return self._set_active(job_id, True)

    def deactivate(self, job_id: int) -> JobPosting:
        """Mark a posting inactive. Raises RecordNotFoundError if absent."""
        return self._set_active(job_id, False)

    def delete(self, job_id: int) -> bool:
        """Delete a job posting and its skills. Returns False if it did not exist."""
        try:
            result = self.session.execute(
                delete(JobPostingModel).where(JobPostingModel.id == job_id)
            )
            self.session.flush()
            return result.rowcount > 0
        except SQLAlchemyError as e:
            logger.error(f"Error deleting job posting {job_id}: {e}", exc_info=True)
            raise PersistenceError(f"Failed to delete job posting: {e}") from e

    def count(self) -> int:
        try:
            return self.session.execute(select(func.count(JobPostingModel.id))).scalar_one()
        except SQLAlchemyError as e:
            raise PersistenceError(f"Failed to count job postings: {e}") from e

    def active_count(self) -> int:
        try:
            stmt = select(func.count(JobPostingModel.id)).where(
                JobPostingModel.is_active.is_(True)
            )
            return self.session.execute(stmt).scalar_one()
        except SQLAlchemyError as e:
            raise PersistenceError(f"Failed to count active job postings: {e}") from e

    def _set_active(self, job_id: int, active: bool) -> JobPosting:
        try:
            model = self.session.get(JobPostingModel, job_id)
            if model is None:
                raise RecordNotFoundError(f"Job posting with id {job_id} not found")

            model.is_active = active
            model.updated_at = format_timestamp(utc_now())
            self.session.flush()

            logger.info(
                f"Job posting {'activated' if active else 'deactivated'}",
                extra={"event": "database.job.status_changed", "job_id": job_id, "is_active": active},
            )
            return model.to_domain()

        except SQLAlchemyError as e:
            logger.error(f"Error changing status of job posting {job_id}: {e}", exc_info=True)
            raise PersistenceError(f"Failed to change job posting status: {e}") from e

    @staticmethod
    def _newest_first(stmt):
        return stmt.order_by(JobPostingModel.created_at.desc(), JobPostingModel.id.desc())

    def _fetch(self, stmt, action: str) -> List[JobPosting]:
        try:
            models = self.session.execute(stmt).scalars().unique().all()
            return [model.to_domain() for model in models]
        except SQLAlchemyError as e:
            logger.error(f"Failed to {action}: {e}", exc_info=True)
            raise PersistenceError(f"Failed to {action}: {e}") from e
