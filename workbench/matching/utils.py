"""Helpers for presenting match results to downstream consumers.

This module builds the human-readable summary attached to every result and
the flat dictionaries used by the CLI and the CSV export.
"""

from typing import Any, Dict, Sequence

from workbench.domain.models import MatchGrade, MatchResult
from workbench.utils.timestamps import format_for_display


def skill_match_percentage(skill_match_count: int, total_skills: int) -> float:
    """skill_match_count / total_skills as a percentage, 0 when total is 0."""
    if total_skills == 0:
        return 0.0
    return skill_match_count / total_skills * 100


def format_match_summary(
    score: float,
    skill_match_count: int,
    total_skills: int,
    experience_match: bool,
    matched_skills: Sequence[str],
    missing_skills: Sequence[str],
) -> str:
    """Format the explanation text of a match.

    Example:
        >>> print(format_match_summary(72.0, 2, 3, False, ["java", "sql"], ["go"]))
        Match Score: 72.0% (Good)
        Skills Match: 2/3 (66.7%)
        Experience Match: ✗ Below requirement
        Matched Skills: java, sql
        Missing Skills: go
    """
    grade = MatchGrade.for_score(score)
    percentage = skill_match_percentage(skill_match_count, total_skills)
    verdict = "✓ Meets requirement" if experience_match else "✗ Below requirement"

    lines = [
        f"Match Score: {score:.1f}% ({grade.value})",
        f"Skills Match: {skill_match_count}/{total_skills} ({percentage:.1f}%)",
        f"Experience Match: {verdict}",
    ]
    if matched_skills:
        lines.append(f"Matched Skills: {', '.join(matched_skills)}")
    if missing_skills:
        lines.append(f"Missing Skills: {', '.join(missing_skills)}")

    return "\n".join(lines)


def build_result_dict(match_result: MatchResult, rank: int = 0) -> Dict[str, Any]:
    """Flatten a MatchResult for JSON output or CSV rows.

    Args:
        match_result: Result to flatten
        rank: 1-based position in a ranking, 0 when unranked

    Returns:
        Dict with candidate/job identity, score, grade, skill counts,
        experience verdict, skill lists and computed-at time
    """
    return {
        "rank": rank,
        "candidate_id": match_result.candidate.id,
        "candidate_name": match_result.candidate.name,
        "candidate_email": match_result.candidate.email,
        "job_id": match_result.job.id,
        "job_title": match_result.job.title,
        "score": round(match_result.score, 1),
        "grade": match_result.grade.value,
        "skill_match_count": match_result.skill_match_count,
        "total_skills": match_result.total_skills,
        "experience_match": match_result.experience_match,
        "matched_skills": list(match_result.matched_skills),
        "missing_skills": list(match_result.missing_skills),
        "computed_at": format_for_display(match_result.computed_at),
    }
