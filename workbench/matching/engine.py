"""Weighted matching engine for scoring candidates against job postings.

This module implements the scoring logic that:
1. Compares candidate skills with required and preferred job skills
2. Scores experience against the job requirement, with a bonus for surplus
3. Produces explainable MatchResults and batch rankings/statistics

The engine holds no mutable state and performs no I/O.
"""

import logging
from typing import Iterable, List, Optional

from workbench.domain.models import Candidate, JobPosting, MatchResult
from workbench.exceptions import InvalidArgumentError
from workbench.logging import get_logger

from .models import DEFAULT_WEIGHTS, MatchingStats, ScoringWeights
from .utils import format_match_summary

logger = get_logger(__name__, component="matching")


class MatchingEngine:
    """Scores candidates against job postings.

    Score (before clamping to [0, 100]):
    - required coverage (100 when the job lists none) x required weight
    - preferred coverage (100 when the job lists none) x preferred weight
    - experience (100 when met, else proportional) x experience weight
    - experience bonus: per-year surplus, capped, only when the requirement is met
    - perfect-skills bonus when every required skill is present

    Skills are compared case-insensitively and reported lowercase.
    """

    def __init__(
        self,
        weights: ScoringWeights = DEFAULT_WEIGHTS,
        logger_instance: Optional[logging.LoggerAdapter] = None,
    ):
        """Initialize MatchingEngine.

        Args:
            weights: Scoring weights and bonuses
            logger_instance: Optional logger instance (defaults to module logger)
        """
        self.weights = weights
        self.logger = logger_instance or logger

    def match(self, candidate: Candidate, job: JobPosting) -> MatchResult:
        """Score one candidate against one job posting.

        Args:
            candidate: Candidate to score
            job: Job posting to score against

        Returns:
            MatchResult with score, skill lists, experience verdict and summary

        Raises:
            InvalidArgumentError: If candidate or job is None
        """
        if candidate is None:
            raise InvalidArgumentError("candidate cannot be None")
        if job is None:
            raise InvalidArgumentError("job cannot be None")

        candidate_skills = {skill.lower() for skill in candidate.skills}
        required = [skill.lower() for skill in job.required_skills]
        preferred = [skill.lower() for skill in job.preferred_skills]

        matched_skills: List[str] = []
        missing_skills: List[str] = []
        required_hits = 0
        for skill in required:
            if skill in candidate_skills:
                matched_skills.append(skill)
                required_hits += 1
            else:
                missing_skills.append(skill)

        preferred_hits = 0
        for skill in preferred:
            if skill in candidate_skills and skill not in matched_skills:
                matched_skills.append(skill)
                preferred_hits += 1

        experience_match = candidate.experience_years >= job.required_experience

        score = self._score(
            required_hits=required_hits,
            required_total=len(required),
            preferred_hits=preferred_hits,
            preferred_total=len(preferred),
            candidate_years=candidate.experience_years,
            required_years=job.required_experience,
        )

        skill_match_count = required_hits + preferred_hits
        total_skills = len(required)

        result = MatchResult(
            candidate=candidate,
            job=job,
            score=score,
            skill_match_count=skill_match_count,
            total_skills=total_skills,
            experience_match=experience_match,
            matched_skills=matched_skills,
            missing_skills=missing_skills,
            summary=format_match_summary(
                score,
                skill_match_count,
                total_skills,
                experience_match,
                matched_skills,
                missing_skills,
            ),
        )

        self.logger.debug(
            "Computed match",
            extra={
                "event": "matching.match.computed",
                "candidate_id": candidate.id,
                "job_id": job.id,
                "score": round(result.score, 2),
                "required_matched": required_hits,
                "required_total": len(required),
                "preferred_matched": preferred_hits,
                "preferred_total": len(preferred),
                "experience_match": experience_match,
            },
        )
        return result

    def _score(
        self,
        required_hits: int,
        required_total: int,
        preferred_hits: int,
        preferred_total: int,
        candidate_years: int,
        required_years: int,
    ) -> float:
        w = self.weights

        required_component = 100.0 if required_total == 0 else 100.0 * required_hits / required_total
        preferred_component = 100.0 if preferred_total == 0 else 100.0 * preferred_hits / preferred_total

        if candidate_years >= required_years:
            experience_component = 100.0
        elif required_years > 0:
            experience_component = 100.0 * min(1.0, candidate_years / required_years)
        else:
            experience_component = 100.0

        score = (
            required_component * w.required_skills
            + preferred_component * w.preferred_skills
            + experience_component * w.experience
        )

        if candidate_years >= required_years:
            surplus = candidate_years - required_years
            score += min(w.experience_bonus_cap, w.experience_bonus_per_year * surplus)

        if required_total > 0 and required_hits == required_total:
            score += w.perfect_skills_bonus

        return max(0.0, min(100.0, score))

    def _rank(self, results: Iterable[MatchResult]) -> List[MatchResult]:
        # sorted() is stable, so equal scores keep input order
        return sorted(results, key=lambda result: -result.score)

    def top_k(
        self, job: JobPosting, candidates: Optional[Iterable[Candidate]], k: int
    ) -> List[MatchResult]:
        """Best candidates for a job, highest score first.

        Args:
            job: Job posting
            candidates: Candidates to score (None is treated as empty)
            k: Maximum results; k <= 0 returns all

        Returns:
            Results sorted by descending score, ties in input order
        """
        if job is None or candidates is None:
            return []

        ranked = self._rank(self.match(candidate, job) for candidate in candidates)
        if k > 0:
            ranked = ranked[:k]

        self._log_batch("top_k", job_id=job.id, returned=len(ranked), limit=k)
        return ranked

    def above_threshold(
        self, job: JobPosting, candidates: Optional[Iterable[Candidate]], min_score: float
    ) -> List[MatchResult]:
        """Candidates scoring at least ``min_score``, highest score first."""
        if job is None or candidates is None:
            return []

        ranked = self._rank(
            result
            for result in (self.match(candidate, job) for candidate in candidates)
            if result.score >= min_score
        )

        self._log_batch("above_threshold", job_id=job.id, returned=len(ranked), min_score=min_score)
        return ranked

    def suitable_jobs(
        self, candidate: Candidate, jobs: Optional[Iterable[JobPosting]], k: int
    ) -> List[MatchResult]:
        """Best active jobs for a candidate, highest score first.

        Inactive postings are skipped; k <= 0 returns all active jobs.
        """
        if candidate is None or jobs is None:
            return []

        ranked = self._rank(self.match(candidate, job) for job in jobs if job.is_active)
        if k > 0:
            ranked = ranked[:k]

        self._log_batch("suitable_jobs", candidate_id=candidate.id, returned=len(ranked), limit=k)
        return ranked

    def stats(self, job: JobPosting, candidates: Optional[Iterable[Candidate]]) -> MatchingStats:
        """Score distribution of the candidates against a job."""
        if job is None or candidates is None:
            return MatchingStats()

        scores = [self.match(candidate, job).score for candidate in candidates]
        if not scores:
            return MatchingStats()

        excellent = sum(1 for s in scores if s >= 90)
        good = sum(1 for s in scores if 70 <= s < 90)
        fair = sum(1 for s in scores if 50 <= s < 70)

        stats = MatchingStats(
            total=len(scores),
            excellent=excellent,
            good=good,
            fair=fair,
            poor=len(scores) - excellent - good - fair,
            average=sum(scores) / len(scores),
            highest=max(scores),
            lowest=min(scores),
        )

        self._log_batch("stats", job_id=job.id, returned=stats.total)
        return stats

    def _log_batch(self, operation: str, **fields) -> None:
        self.logger.info(
            f"Ranked matches ({operation})",
            extra={"event": "matching.batch.ranked", "operation": operation, **fields},
        )
