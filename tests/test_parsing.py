"""Unit tests for the résumé parser and contact-detail patterns."""

import pytest

from workbench.exceptions import InvalidArgumentError
from workbench.extraction import DocumentNotFoundError
from workbench.parsing import (
    ResumeParser,
    clean_phone,
    extract_all_emails,
    extract_all_phones,
    extract_email,
    extract_phone,
    is_valid_email,
    is_valid_phone,
    looks_like_name,
    name_from_email,
    parse_resume,
)

from tests.helpers import SAMPLE_RESUME, make_docx, write_text


@pytest.fixture
def parser():
    return ResumeParser(reference_year=2025)


class TestEmailExtraction:
    """Tests for e-mail helpers."""

    def test_first_email_lowercased(self):
        assert extract_email("Contact: Jane.Doe@Example.com or jd@work.io") == "jane.doe@example.com"

    def test_no_email(self):
        assert extract_email("no address here") == ""
        assert extract_email("") == ""

    def test_all_emails_deduplicated(self):
        text = "a@x.com, B@Y.org, A@X.COM"
        assert extract_all_emails(text) == ["a@x.com", "b@y.org"]

    @pytest.mark.parametrize(
        "email,valid",
        [
            ("jane@example.com", True),
            ("first.last+tag@sub.example.co", True),
            ("jane@example", False),
            ("not an email", False),
            ("", False),
        ],
    )
    def test_is_valid_email(self, email, valid):
        assert is_valid_email(email) is valid


class TestPhoneExtraction:
    """Tests for phone helpers."""

    @pytest.mark.parametrize(
        "text,expected",
        [
            ("Call (555) 123-4567 today", "5551234567"),
            ("Phone: 555.123.4567", "5551234567"),
            ("Tel 555 123 4567", "5551234567"),
            ("Mobile 5551234567", "5551234567"),
        ],
    )
    def test_us_formats(self, text, expected):
        assert extract_phone(text) == expected

    def test_international_keeps_plus(self):
        assert extract_phone("Phone: +441234567890") == "+441234567890"

    def test_no_phone(self):
        assert extract_phone("Years 2019 - 2021") == ""

    def test_clean_phone(self):
        assert clean_phone("+1 (555) 123-4567") == "+15551234567"
        assert clean_phone("(555) 123-4567") == "5551234567"
        assert clean_phone("") == ""

    def test_extract_all_phones(self):
        text = "Home (555) 123-4567, work 555-987-6543, again 555.123.4567"
        assert extract_all_phones(text) == ["5551234567", "5559876543"]

    def test_is_valid_phone(self):
        assert is_valid_phone("555-123-4567")
        assert is_valid_phone("+1 (555) 123-4567")
        assert not is_valid_phone("12345")
        assert not is_valid_phone("")


class TestNameHeuristics:
    """Tests for name detection helpers."""

    @pytest.mark.parametrize(
        "line,expected",
        [
            ("Jane Doe", True),
            ("Jane Marie Doe", True),
            ("Dr. Jane Doe", True),
            ("John Smith Jr.", True),
            ("Jane", False),
            ("JANE DOE", False),
            ("Senior software engineer", False),
            ("Jane Doe Smith Jones Brown", False),
        ],
    )
    def test_looks_like_name(self, line, expected):
        assert looks_like_name(line) is expected

    def test_name_from_email(self):
        assert name_from_email("jane.q.public@example.com") == "Jane Q Public"
        assert name_from_email("john_smith-jr@x.io") == "John Smith Jr"
        assert name_from_email("") == ""


class TestResumeParser:
    """Tests for ResumeParser."""

    def test_parse_full_resume(self, parser):
        candidate = parser.parse_text(SAMPLE_RESUME)

        assert candidate.name == "Jane Marie Doe"
        assert candidate.email == "jane.doe@example.com"
        assert candidate.phone == "5551234567"
        assert candidate.education == "b.s. in computer science, state university"
        assert candidate.experience_years == 8
        assert candidate.skills == ["Python", "Docker", "Kubernetes", "SQL"]
        assert candidate.resume_text == SAMPLE_RESUME
        assert candidate.id is None

    def test_minimal_resume(self, parser):
        text = "John Smith\njohn.smith@example.com\nSkills: Java, Python, SQL"

        candidate = parser.parse_text(text)

        assert candidate.name == "John Smith"
        assert candidate.email == "john.smith@example.com"
        assert candidate.phone == ""
        assert candidate.experience_years == 0
        assert candidate.skills == ["Java", "Python", "SQL"]

    def test_name_falls_back_to_email(self, parser):
        text = "RESUME\nsoftware engineer\njane.q.public@example.com"
        assert parser.parse_text(text).name == "Jane Q Public"

    def test_header_lines_skipped(self, parser):
        text = "Curriculum Vitae\nJane Doe\njane@example.com"
        assert parser.parse_text(text).name == "Jane Doe"

    def test_cv_must_be_a_whole_word(self, parser):
        assert parser.extract_name("Cvetan Petrov\nx@y.com") == "Cvetan Petrov"
        assert parser.extract_name("My CV\nJane Doe") == "Jane Doe"
        assert parser.extract_name("John Smith CV\nJane Doe") == "Jane Doe"

    def test_name_scan_limited_to_leading_lines(self, parser):
        text = "one\ntwo\nthree\nfour\nfive\nJane Doe"
        assert parser.extract_name(text) == ""

    def test_empty_text_rejected(self, parser):
        with pytest.raises(InvalidArgumentError):
            parser.parse_text("")
        with pytest.raises(InvalidArgumentError):
            parser.parse_text("   \n ")
        with pytest.raises(InvalidArgumentError):
            parser.parse_text(None)

    def test_text_without_fields(self, parser):
        candidate = parser.parse_text("lorem ipsum dolor sit amet")

        assert candidate.name == ""
        assert candidate.email == ""
        assert candidate.phone == ""
        assert candidate.education == ""
        assert candidate.experience_years == 0
        assert candidate.skills == []

    def test_explicit_experience(self, parser):
        assert parser.extract_experience("Over 7+ years of experience in Java") == 7

    def test_largest_explicit_figure_wins(self, parser):
        text = "3 years experience in Go. 10 yrs nothing. 6 years of exp in Java"
        assert parser.extract_experience(text) == 6

    def test_date_ranges_summed(self, parser):
        text = "Acme 2010 - 2014\nGlobex 2014-2016"
        assert parser.extract_experience(text) == 6

    def test_present_uses_reference_year(self):
        text = "Initech 2020 - Present"
        assert ResumeParser(reference_year=2024).extract_experience(text) == 4
        assert ResumeParser(reference_year=2030).extract_experience(text) == 10

    def test_reversed_range_counts_zero(self, parser):
        assert parser.extract_experience("Acme 2020 - 2018") == 0

    def test_experience_takes_larger_source(self, parser):
        text = "2 years of experience\nAcme 2010 - 2020"
        assert parser.extract_experience(text) == 10

    def test_education_lines_joined(self, parser):
        text = (
            "Education\n"
            "Bachelor of Science, MIT\n"
            "Master of   Engineering, Stanford University\n"
            "PhD"
        )
        assert parser.extract_education(text) == (
            "bachelor of science, mit; master of engineering, stanford university"
        )

    def test_skills_line_does_not_absorb_later_sections(self, parser):
        text = (
            "Jane Doe\n"
            "jane@example.com\n"
            "Skills: Python, SQL\n"
            "EXPERIENCE\n"
            "Senior Engineer\n"
            "Acme Corp 2018 - 2020\n"
            "Team Lead"
        )

        candidate = parser.parse_text(text)

        assert candidate.skills == ["Python", "SQL"]
        assert candidate.experience_years == 2

    def test_custom_vocabulary(self):
        parser = ResumeParser(skills=["COBOL"], reference_year=2025)
        candidate = parser.parse_text("Jane Doe\nWrote COBOL and Python")
        assert candidate.skills == ["COBOL"]

    def test_parse_file(self, parser, tmp_path):
        path = write_text(tmp_path / "resume.txt", SAMPLE_RESUME.replace("\n", "\r\n"))

        candidate = parser.parse_file(path)

        assert candidate.email == "jane.doe@example.com"
        assert candidate.resume_text == SAMPLE_RESUME

    def test_parse_resume_docx(self, tmp_path):
        path = make_docx(
            tmp_path / "resume.docx",
            ["John Smith", "john.smith@example.com", "Skills: Java, Docker"],
        )

        candidate = parse_resume(path, parser=ResumeParser(reference_year=2025))

        assert candidate.name == "John Smith"
        assert candidate.skills == ["Java", "Docker"]

    def test_parse_missing_file(self, parser, tmp_path):
        with pytest.raises(DocumentNotFoundError):
            parser.parse_file(tmp_path / "missing.pdf")
