"""Unit tests for the matching engine.

Tests the MatchingEngine for:
- Weighted scoring of required skills, preferred skills and experience
- Experience and perfect-skills bonuses, and clamping
- Ranking (top-k, threshold, suitable jobs) with stable tie-breaks
- Score distribution statistics
- Summary text and flattened result dictionaries
"""

import pytest

from workbench.domain.models import Candidate, JobPosting, MatchGrade
from workbench.exceptions import InvalidArgumentError
from workbench.matching import (
    DEFAULT_WEIGHTS,
    MatchingEngine,
    MatchingStats,
    ScoringWeights,
    build_result_dict,
    format_match_summary,
)


@pytest.fixture
def engine():
    return MatchingEngine()


def make_candidate(name="Jane Doe", skills=(), years=0, email=None, candidate_id=None):
    return Candidate(
        id=candidate_id,
        name=name,
        email=email or f"{name.lower().replace(' ', '.')}@example.com",
        skills=list(skills),
        experience_years=years,
    )


def make_job(title="Engineer", required=(), preferred=(), years=0, active=True, job_id=None):
    return JobPosting(
        id=job_id,
        title=title,
        required_skills=list(required),
        preferred_skills=list(preferred),
        required_experience=years,
        is_active=active,
    )


class TestScoring:
    """Tests for single candidate/job scores."""

    def test_required_only_scoring(self, engine):
        job = make_job(required=["Java", "SQL"], years=3)
        candidate = make_candidate(skills=["Java", "SQL", "Go"], years=5)

        result = engine.match(candidate, job)

        assert result.score == 100.0
        assert result.grade is MatchGrade.EXCELLENT
        assert result.experience_match is True
        assert result.matched_skills == ("java", "sql")
        assert result.missing_skills == ()
        assert result.skill_match_count == 2
        assert result.total_skills == 2

    def test_partial_experience(self, engine):
        job = make_job(years=4)
        candidate = make_candidate(years=2)

        result = engine.match(candidate, job)

        assert result.score == pytest.approx(90.0)
        assert result.grade is MatchGrade.EXCELLENT
        assert result.experience_match is False

    def test_no_required_skills_counts_full(self, engine):
        job = make_job(preferred=["Docker", "AWS"])
        candidate = make_candidate(skills=["docker"])

        result = engine.match(candidate, job)

        # 60 required + 10 preferred + 20 experience
        assert result.score == pytest.approx(90.0)
        assert result.matched_skills == ("docker",)
        assert result.skill_match_count == 1
        assert result.total_skills == 0

    def test_zero_experience_against_zero_requirement(self, engine):
        job = make_job(required=["Java", "SQL"])
        candidate = make_candidate(skills=["Java"], years=0)

        result = engine.match(candidate, job)

        # 30 required + 20 preferred + 20 experience, no bonuses
        assert result.score == pytest.approx(70.0)
        assert result.experience_match is True

    def test_experience_bonus(self, engine):
        job = make_job(required=["Java", "SQL"])

        assert engine.match(make_candidate(skills=["Java"], years=3), job).score == pytest.approx(76.0)
        assert engine.match(make_candidate(skills=["Java"], years=10), job).score == pytest.approx(80.0)

    def test_no_experience_bonus_below_requirement(self, engine):
        job = make_job(required=["Java", "SQL"], years=10)
        candidate = make_candidate(skills=["Java"], years=5)

        # 30 required + 20 preferred + 10 experience
        assert engine.match(candidate, job).score == pytest.approx(60.0)

    def test_perfect_skills_bonus_requires_all_required(self, engine):
        job = make_job(required=["Java"], preferred=["Docker"])

        with_java = engine.match(make_candidate(skills=["Java"]), job)
        without_java = engine.match(make_candidate(skills=[]), job)

        assert with_java.score == pytest.approx(85.0)
        assert without_java.score == pytest.approx(20.0)

    def test_no_perfect_bonus_without_required_skills(self, engine):
        job = make_job(preferred=["Docker"])
        candidate = make_candidate(skills=[])

        # 60 required + 0 preferred + 20 experience
        assert engine.match(candidate, job).score == pytest.approx(80.0)

    def test_matching_ignores_case(self, engine):
        job = make_job(required=["Java", "SQL"])
        candidate = make_candidate(skills=["JAVA"])

        result = engine.match(candidate, job)

        assert result.matched_skills == ("java",)
        assert result.missing_skills == ("sql",)

    def test_match_count_can_exceed_total(self, engine):
        job = make_job(required=["Java"], preferred=["Docker", "AWS"])
        candidate = make_candidate(skills=["Java", "Docker", "AWS"])

        result = engine.match(candidate, job)

        assert result.skill_match_count == 3
        assert result.total_skills == 1
        assert result.skill_match_percentage == 300.0

    def test_score_clamped_high(self):
        weights = ScoringWeights(required_skills=2.0, preferred_skills=2.0, experience=2.0)
        result = MatchingEngine(weights=weights).match(make_candidate(), make_job())

        assert result.score == 100.0

    def test_score_clamped_low(self):
        weights = ScoringWeights(
            required_skills=-1.0,
            preferred_skills=-1.0,
            experience=-1.0,
            experience_bonus_per_year=0.0,
            perfect_skills_bonus=0.0,
        )
        result = MatchingEngine(weights=weights).match(make_candidate(), make_job())

        assert result.score == 0.0

    def test_result_invariants(self, engine):
        job = make_job(required=["Java", "SQL", "Go"], preferred=["Docker"], years=2)
        candidate = make_candidate(skills=["go", "Docker", "Rust"], years=1)

        result = engine.match(candidate, job)
        job_skills = {s.lower() for s in job.all_skills}

        assert 0.0 <= result.score <= 100.0
        assert result.experience_match == (candidate.experience_years >= job.required_experience)
        assert not set(result.matched_skills) & set(result.missing_skills)
        assert set(result.matched_skills) <= job_skills

    def test_matching_is_deterministic(self, engine):
        job = make_job(required=["Java", "SQL"], preferred=["Docker"], years=3)
        candidate = make_candidate(skills=["SQL", "Docker"], years=1)

        first = engine.match(candidate, job)
        second = engine.match(candidate, job)

        assert first.model_dump(exclude={"computed_at"}) == second.model_dump(exclude={"computed_at"})

    def test_summary_text(self, engine):
        job = make_job(required=["Java", "SQL"], years=3)
        candidate = make_candidate(skills=["Java", "SQL"], years=5)

        result = engine.match(candidate, job)

        assert result.summary == (
            "Match Score: 100.0% (Excellent)\n"
            "Skills Match: 2/2 (100.0%)\n"
            "Experience Match: ✓ Meets requirement\n"
            "Matched Skills: java, sql"
        )

    def test_none_arguments_rejected(self, engine):
        with pytest.raises(InvalidArgumentError):
            engine.match(None, make_job())
        with pytest.raises(InvalidArgumentError):
            engine.match(make_candidate(), None)

    def test_default_weights(self):
        assert DEFAULT_WEIGHTS.required_skills == 0.6
        assert DEFAULT_WEIGHTS.preferred_skills == 0.2
        assert DEFAULT_WEIGHTS.experience == 0.2


class TestRanking:
    """Tests for batch ranking operations."""

    @pytest.fixture
    def job(self):
        return make_job(required=["Java", "SQL", "Go"], years=5)

    @pytest.fixture
    def candidates(self):
        # a and b both score 72: 40 required + 20 preferred + 12 experience
        return {
            "a": make_candidate("Alice Able", skills=["Java", "SQL"], years=3),
            "b": make_candidate("Bob Baker", skills=["Java", "Go"], years=3),
            "c": make_candidate("Carol Cole", skills=["Java"], years=3),
            "d": make_candidate("Dan Dunn", skills=["Java", "SQL", "Go"], years=5),
        }

    def test_tie_keeps_input_order(self, engine, job, candidates):
        a, b, c = candidates["a"], candidates["b"], candidates["c"]

        results = engine.top_k(job, [a, b, c], 2)

        assert [r.candidate.name for r in results] == ["Alice Able", "Bob Baker"]
        assert results[0].score == pytest.approx(72.0)
        assert results[1].score == pytest.approx(72.0)

    def test_top_k_sorted_descending(self, engine, job, candidates):
        ordered = [candidates[k] for k in ("c", "a", "b", "d")]

        results = engine.top_k(job, ordered, 3)

        assert [r.candidate.name for r in results] == ["Dan Dunn", "Alice Able", "Bob Baker"]
        scores = [r.score for r in results]
        assert scores == sorted(scores, reverse=True)

    def test_top_k_non_positive_returns_all(self, engine, job, candidates):
        assert len(engine.top_k(job, list(candidates.values()), 0)) == 4
        assert len(engine.top_k(job, list(candidates.values()), -1)) == 4

    def test_top_k_larger_than_input(self, engine, job, candidates):
        assert len(engine.top_k(job, [candidates["a"]], 10)) == 1

    def test_none_inputs_return_empty(self, engine, job, candidates):
        assert engine.top_k(None, list(candidates.values()), 3) == []
        assert engine.top_k(job, None, 3) == []
        assert engine.above_threshold(job, None, 50) == []
        assert engine.suitable_jobs(None, [job], 3) == []
        assert engine.top_k(job, [], 3) == []

    def test_above_threshold(self, engine, job, candidates):
        results = engine.above_threshold(job, list(candidates.values()), 71.5)

        assert [r.candidate.name for r in results] == ["Dan Dunn", "Alice Able", "Bob Baker"]
        assert all(r.score >= 71.5 for r in results)

    def test_suitable_jobs_skips_inactive(self, engine):
        candidate = make_candidate(skills=["Python", "Docker"], years=4)
        jobs = [
            make_job("Data Engineer", required=["Python", "Spark"], years=3),
            make_job("Platform Engineer", required=["Docker"], years=2),
            make_job("Closed Role", required=["Python", "Docker"], active=False),
        ]

        results = engine.suitable_jobs(candidate, jobs, 5)

        assert [r.job.title for r in results] == ["Platform Engineer", "Data Engineer"]

    def test_suitable_jobs_limit(self, engine):
        candidate = make_candidate(skills=["Python"])
        jobs = [make_job(f"Job {i}", required=["Python"]) for i in range(4)]

        assert len(engine.suitable_jobs(candidate, jobs, 2)) == 2


class TestStats:
    """Tests for score distribution statistics."""

    def test_stats(self, engine):
        job = make_job(required=["Java", "SQL"], years=4)
        candidates = [
            make_candidate("Ann Ames", skills=["Java", "SQL"], years=4),  # 100
            make_candidate("Ben Bell", skills=["Java"], years=4),  # 70
            make_candidate("Cat Cruz", skills=[], years=4),  # 40
            make_candidate("Don Diaz", skills=["Java"], years=0),  # 50
        ]

        stats = engine.stats(job, candidates)

        assert stats.total == 4
        assert stats.excellent == 1
        assert stats.good == 1
        assert stats.fair == 1
        assert stats.poor == 1
        assert stats.highest == pytest.approx(100.0)
        assert stats.lowest == pytest.approx(40.0)
        assert stats.average == pytest.approx(65.0)

    def test_stats_empty(self, engine):
        stats = engine.stats(make_job(), [])

        assert stats == MatchingStats()
        assert stats.as_dict()["total"] == 0

    def test_stats_str(self):
        stats = MatchingStats(total=2, excellent=1, poor=1, average=55.0, highest=95.0, lowest=15.0)

        text = str(stats)

        assert text.startswith("Total Candidates: 2\n")
        assert "Average Score: 55.0%" in text
        assert text.endswith("Lowest Score: 15.0%")


class TestPresentation:
    """Tests for summary text and flattened results."""

    def test_format_match_summary_below_requirement(self):
        text = format_match_summary(72.0, 2, 3, False, ["java", "sql"], ["go"])

        assert text == (
            "Match Score: 72.0% (Good)\n"
            "Skills Match: 2/3 (66.7%)\n"
            "Experience Match: ✗ Below requirement\n"
            "Matched Skills: java, sql\n"
            "Missing Skills: go"
        )

    def test_format_match_summary_without_skills(self):
        text = format_match_summary(45.0, 0, 0, True, [], [])

        assert text == (
            "Match Score: 45.0% (Very Poor)\n"
            "Skills Match: 0/0 (0.0%)\n"
            "Experience Match: ✓ Meets requirement"
        )

    def test_build_result_dict(self, engine):
        job = make_job(required=["Java"], job_id=7)
        candidate = make_candidate(skills=["Java"], candidate_id=3)

        flat = build_result_dict(engine.match(candidate, job), rank=1)

        assert flat["rank"] == 1
        assert flat["candidate_id"] == 3
        assert flat["job_id"] == 7
        assert flat["score"] == 100.0
        assert flat["grade"] == "Excellent"
        assert flat["matched_skills"] == ["java"]
