"""CSV export of candidates, job postings and match results.

Files are written as UTF-8 with a header row. Multi-valued fields (skills)
are joined with ", " and timestamps use the display format
``YYYY-MM-DD HH:MM:SS``.
"""

import csv
from pathlib import Path
from typing import Any, Dict, Iterable, List, Sequence, Union

from workbench.domain.models import Candidate, JobPosting, MatchResult
from workbench.logging import get_logger
from workbench.matching.utils import build_result_dict
from workbench.utils.timestamps import format_for_display

from .exceptions import ExportError

logger = get_logger(__name__, component="export")

PathLike = Union[str, Path]

SKILL_SEPARATOR = ", "

CANDIDATE_COLUMNS = (
    "id",
    "name",
    "email",
    "phone",
    "education",
    "experience_years",
    "skills",
    "created_at",
    "updated_at",
)

JOB_POSTING_COLUMNS = (
    "id",
    "title",
    "description",
    "location",
    "salary_min",
    "salary_max",
    "required_experience",
    "required_skills",
    "preferred_skills",
    "active",
    "created_at",
    "updated_at",
)

MATCH_RESULT_COLUMNS = (
    "rank",
    "candidate_name",
    "candidate_email",
    "job_title",
    "score",
    "grade",
    "skill_match_count",
    "total_skills",
    "experience_match",
    "matched_skills",
    "missing_skills",
    "computed_at",
)


def _yes_no(value: bool) -> str:
    return "Yes" if value else "No"


def _optional(value: Any) -> str:
    return "" if value is None else str(value)


def candidate_row(candidate: Candidate) -> Dict[str, str]:
    """Flatten a candidate into one CSV row."""
    return {
        "id": _optional(candidate.id),
        "name": candidate.name,
        "email": candidate.email,
        "phone": candidate.phone,
        "education": candidate.education,
        "experience_years": str(candidate.experience_years),
        "skills": SKILL_SEPARATOR.join(candidate.skills),
        "created_at": format_for_display(candidate.created_at),
        "updated_at": format_for_display(candidate.updated_at),
    }


def job_posting_row(job: JobPosting) -> Dict[str, str]:
    """Flatten a job posting into one CSV row."""
    return {
        "id": _optional(job.id),
        "title": job.title,
        "description": job.description,
        "location": job.location,
        "salary_min": _optional(job.salary_min),
        "salary_max": _optional(job.salary_max),
        "required_experience": str(job.required_experience),
        "required_skills": SKILL_SEPARATOR.join(job.required_skills),
        "preferred_skills": SKILL_SEPARATOR.join(job.preferred_skills),
        "active": _yes_no(job.is_active),
        "created_at": format_for_display(job.created_at),
        "updated_at": format_for_display(job.updated_at),
    }


def match_result_row(result: MatchResult, rank: int) -> Dict[str, str]:
    """Flatten a match result into one CSV row."""
    flat = build_result_dict(result, rank=rank)
    return {
        "rank": str(rank),
        "candidate_name": flat["candidate_name"],
        "candidate_email": flat["candidate_email"],
        "job_title": flat["job_title"],
        "score": f"{result.score:.1f}",
        "grade": flat["grade"],
        "skill_match_count": str(flat["skill_match_count"]),
        "total_skills": str(flat["total_skills"]),
        "experience_match": _yes_no(flat["experience_match"]),
        "matched_skills": SKILL_SEPARATOR.join(flat["matched_skills"]),
        "missing_skills": SKILL_SEPARATOR.join(flat["missing_skills"]),
        "computed_at": flat["computed_at"],
    }


def _write_rows(
    path: PathLike, columns: Sequence[str], rows: List[Dict[str, str]], kind: str
) -> Path:
    output = Path(path)
    try:
        output.parent.mkdir(parents=True, exist_ok=True)
        with output.open("w", encoding="utf-8", newline="") as fh:
            writer = csv.DictWriter(fh, fieldnames=list(columns))
            writer.writeheader()
            writer.writerows(rows)
    except OSError as e:
        logger.error(
            f"Failed to write {kind} export to {output}: {e}",
            extra={"event": "export.write_failed", "export_kind": kind},
        )
        raise ExportError(f"Failed to write {kind} export to {output}: {e}") from e

    logger.info(
        f"Exported {len(rows)} {kind}",
        extra={"event": "export.written", "export_kind": kind, "rows": len(rows), "path": str(output)},
    )
    return output


def export_candidates(candidates: Iterable[Candidate], path: PathLike) -> Path:
    """Write candidates to a CSV file.

    Args:
        candidates: Candidates to export
        path: Destination file (parent directories are created)

    Returns:
        Path of the written file

    Raises:
        ExportError: If the file cannot be written
    """
    rows = [candidate_row(candidate) for candidate in candidates]
    return _write_rows(path, CANDIDATE_COLUMNS, rows, "candidates")


def export_job_postings(jobs: Iterable[JobPosting], path: PathLike) -> Path:
    """Write job postings to a CSV file. See export_candidates."""
    rows = [job_posting_row(job) for job in jobs]
    return _write_rows(path, JOB_POSTING_COLUMNS, rows, "job postings")


def export_match_results(results: Iterable[MatchResult], path: PathLike) -> Path:
    """Write match results to a CSV file, ranked 1..n in the given order."""
    rows = [match_result_row(result, rank) for rank, result in enumerate(results, start=1)]
    return _write_rows(path, MATCH_RESULT_COLUMNS, rows, "match results")
