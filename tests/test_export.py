"""Unit tests for CSV export."""

import csv
from datetime import datetime, timezone
from decimal import Decimal

import pytest

from workbench.domain.models import Candidate, JobPosting
from workbench.exceptions import WorkbenchError
from workbench.export import (
    CANDIDATE_COLUMNS,
    JOB_POSTING_COLUMNS,
    MATCH_RESULT_COLUMNS,
    ExportError,
    export_candidates,
    export_job_postings,
    export_match_results,
)
from workbench.matching import MatchingEngine

CREATED = datetime(2025, 3, 1, 9, 30, 15, 500, tzinfo=timezone.utc)


def read_csv(path):
    with open(path, encoding="utf-8", newline="") as fh:
        reader = csv.DictReader(fh)
        return reader.fieldnames, list(reader)


@pytest.fixture
def candidate():
    return Candidate(
        id=1,
        name="Jane Doe",
        email="jane@example.com",
        phone="5551234567",
        education="b.s. in computer science, mit",
        experience_years=5,
        skills=["Python", "SQL"],
        created_at=CREATED,
        updated_at=CREATED,
    )


@pytest.fixture
def job():
    return JobPosting(
        id=3,
        title="Backend Engineer",
        description="APIs, data, and more",
        location="Remote",
        salary_min=Decimal("90000.00"),
        required_experience=3,
        required_skills=["Python", "SQL"],
        preferred_skills=["Docker"],
        created_at=CREATED,
        updated_at=CREATED,
    )


class TestCandidateExport:
    """Tests for export_candidates."""

    def test_header_and_row(self, tmp_path, candidate):
        path = export_candidates([candidate], tmp_path / "candidates.csv")

        header, rows = read_csv(path)

        assert tuple(header) == CANDIDATE_COLUMNS
        assert rows == [
            {
                "id": "1",
                "name": "Jane Doe",
                "email": "jane@example.com",
                "phone": "5551234567",
                "education": "b.s. in computer science, mit",
                "experience_years": "5",
                "skills": "Python, SQL",
                "created_at": "2025-03-01 09:30:15",
                "updated_at": "2025-03-01 09:30:15",
            }
        ]

    def test_unsaved_candidate_has_blank_id(self, tmp_path):
        path = export_candidates([Candidate(name="New Person")], tmp_path / "c.csv")

        _, rows = read_csv(path)

        assert rows[0]["id"] == ""
        assert rows[0]["skills"] == ""

    def test_empty_export_writes_header_only(self, tmp_path):
        path = export_candidates([], tmp_path / "empty.csv")

        header, rows = read_csv(path)

        assert tuple(header) == CANDIDATE_COLUMNS
        assert rows == []

    def test_creates_parent_directories(self, tmp_path, candidate):
        path = export_candidates([candidate], tmp_path / "reports" / "2025" / "c.csv")

        assert path.exists()

    def test_unicode_is_preserved(self, tmp_path):
        path = export_candidates([Candidate(name="Jos\xe9 M\xfcller")], tmp_path / "u.csv")

        _, rows = read_csv(path)

        assert rows[0]["name"] == "Jos\xe9 M\xfcller"


class TestJobPostingExport:
    """Tests for export_job_postings."""

    def test_header_and_row(self, tmp_path, job):
        path = export_job_postings([job], tmp_path / "jobs.csv")

        header, rows = read_csv(path)

        assert tuple(header) == JOB_POSTING_COLUMNS
        row = rows[0]
        assert row["title"] == "Backend Engineer"
        assert row["description"] == "APIs, data, and more"
        assert row["salary_min"] == "90000.00"
        assert row["salary_max"] == ""
        assert row["required_skills"] == "Python, SQL"
        assert row["preferred_skills"] == "Docker"
        assert row["active"] == "Yes"

    def test_inactive_posting(self, tmp_path, job):
        job.deactivate()

        _, rows = read_csv(export_job_postings([job], tmp_path / "jobs.csv"))

        assert rows[0]["active"] == "No"


class TestMatchResultExport:
    """Tests for export_match_results."""

    def test_rows_ranked_in_order(self, tmp_path, candidate, job):
        engine = MatchingEngine()
        weaker = Candidate(name="John Roe", email="john@example.com", skills=["Python"])
        results = engine.top_k(job, [weaker, candidate], 0)

        header, rows = read_csv(export_match_results(results, tmp_path / "matches.csv"))

        assert tuple(header) == MATCH_RESULT_COLUMNS
        assert [row["rank"] for row in rows] == ["1", "2"]
        assert rows[0]["candidate_name"] == "Jane Doe"
        assert rows[1]["candidate_name"] == "John Roe"

    def test_row_values(self, tmp_path, candidate, job):
        result = MatchingEngine().match(candidate, job)

        _, rows = read_csv(export_match_results([result], tmp_path / "m.csv"))

        row = rows[0]
        assert row["score"] == "89.0"
        assert row["grade"] == "Very Good"
        assert row["skill_match_count"] == "2"
        assert row["total_skills"] == "2"
        assert row["experience_match"] == "Yes"
        assert row["matched_skills"] == "python, sql"
        assert row["missing_skills"] == ""
        assert row["job_title"] == "Backend Engineer"


class TestExportErrors:
    """Tests for export failures."""

    def test_unwritable_destination(self, tmp_path, candidate):
        blocker = tmp_path / "not-a-dir"
        blocker.write_text("x")

        with pytest.raises(ExportError):
            export_candidates([candidate], blocker / "c.csv")

    def test_export_error_is_workbench_error(self):
        assert issubclass(ExportError, WorkbenchError)
