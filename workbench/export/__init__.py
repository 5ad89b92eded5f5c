"""CSV export of candidates, job postings and match results."""

from .csv_export import (
    CANDIDATE_COLUMNS,
    JOB_POSTING_COLUMNS,
    MATCH_RESULT_COLUMNS,
    export_candidates,
    export_job_postings,
    export_match_results,
)
from .exceptions import ExportError

__all__ = [
    "export_candidates",
    "export_job_postings",
    "export_match_results",
    "CANDIDATE_COLUMNS",
    "JOB_POSTING_COLUMNS",
    "MATCH_RESULT_COLUMNS",
    "ExportError",
]
