"""Command-line entry point for the recruitment workbench."""

from dotenv import load_dotenv
load_dotenv()

import argparse
import json
import os
import sys
import time
from pathlib import Path
from typing import List, Optional, Sequence, Tuple

import yaml
from pydantic import ValidationError

from workbench.config.environment import EnvironmentConfig
from workbench.config.exceptions import ConfigurationError
from workbench.config.loader import load_config
from workbench.config.models import AppConfig
from workbench.domain.models import Candidate, JobPosting, MatchResult
from workbench.exceptions import InvalidArgumentError, WorkbenchError
from workbench.export import export_candidates, export_job_postings, export_match_results
from workbench.logging import get_logger
from workbench.logging.config import configure_logging
from workbench.logging.context import log_context
from workbench.matching.engine import MatchingEngine
from workbench.parsing.parser import ResumeParser
from workbench.parsing.skills import load_skill_vocabulary
from workbench.persistence.database import close_database, get_session, init_database
from workbench.persistence.exceptions import RecordNotFoundError
from workbench.persistence.repositories import CandidateRepository, JobPostingRepository

logger = get_logger(__name__, component="cli")

LOG_LEVEL_CHOICES = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]


def load_runtime_config(
    config_path: Optional[Path], log_level_override: Optional[str]
) -> Tuple[AppConfig, EnvironmentConfig]:
    """
    Load and prepare runtime configuration.

    Args:
        config_path: Path to configuration file (None searches the defaults)
        log_level_override: Log level from CLI (takes precedence)

    Returns:
        Tuple of (AppConfig, EnvironmentConfig) with the effective log level
        stored on the environment config

    Raises:
        ConfigurationError: If configuration is invalid
    """
    app_config, env_config = load_config(config_path)

    # Apply log level priority: CLI > Environment > Config
    if log_level_override:
        env_config.log_level = log_level_override
    elif env_config.log_level:
        pass
    elif app_config.logging and app_config.logging.level:
        env_config.log_level = app_config.logging.level
    else:
        env_config.log_level = "INFO"

    return app_config, env_config


def build_arg_parser() -> argparse.ArgumentParser:
    """Create the argument parser with one sub-command per operation."""
    parser = argparse.ArgumentParser(
        prog="workbench",
        description="Recruitment workbench - résumé parsing and candidate/job matching",
    )
    parser.add_argument(
        "--config",
        type=Path,
        default=None,
        help="Path to configuration file (default: workbench.yaml or config/workbench.yaml)",
    )
    parser.add_argument(
        "--log-level",
        default=None,
        choices=LOG_LEVEL_CHOICES,
        help="Log level (overrides config and environment)",
    )

    commands = parser.add_subparsers(dest="command", required=True)

    parse_cmd = commands.add_parser("parse", help="Parse a résumé and print the candidate as JSON")
    parse_cmd.add_argument("file", type=Path, help="Résumé file (.pdf, .docx or .txt)")
    parse_cmd.add_argument("--save", action="store_true", help="Store the candidate in the database")

    import_cmd = commands.add_parser("import-jobs", help="Load job postings from a YAML file")
    import_cmd.add_argument("file", type=Path, help="YAML list of job postings")

    rank_cmd = commands.add_parser("rank", help="Rank stored candidates for a job posting")
    rank_cmd.add_argument("job_id", type=int, help="Job posting id")
    rank_cmd.add_argument("--top", type=int, default=None, help="Number of results (0 = all)")
    rank_cmd.add_argument("--min-score", type=float, default=None, help="Minimum score (0-100)")

    suitable_cmd = commands.add_parser("suitable", help="Best active job postings for a candidate")
    suitable_cmd.add_argument("email", help="Candidate e-mail address")
    suitable_cmd.add_argument("--top", type=int, default=None, help="Number of results (0 = all)")

    stats_cmd = commands.add_parser("stats", help="Score distribution of candidates for a job")
    stats_cmd.add_argument("job_id", type=int, help="Job posting id")

    export_cmd = commands.add_parser("export", help="Export records to CSV")
    export_cmd.add_argument("kind", choices=["candidates", "jobs", "matches"])
    export_cmd.add_argument("output", type=Path, help="Destination CSV file")
    export_cmd.add_argument("--job-id", type=int, default=None, help="Job posting id (matches only)")

    return parser


def build_parser(app_config: AppConfig) -> ResumeParser:
    """Create a résumé parser using the configured skill vocabulary."""
    skills_file = app_config.parsing.skills_file
    vocabulary = load_skill_vocabulary(skills_file) if skills_file else None
    return ResumeParser(skills=vocabulary)


def load_job_postings(path: Path) -> List[JobPosting]:
    """Read job postings from a YAML file.

    The file holds either a list of postings or a mapping with a ``jobs`` list.

    Raises:
        InvalidArgumentError: If the file is unreadable or a posting is invalid
    """
    try:
        with open(path, "r", encoding="utf-8") as f:
            data = yaml.safe_load(f)
    except (OSError, yaml.YAMLError) as e:
        raise InvalidArgumentError(f"Cannot read job postings from {path}: {e}") from e

    if isinstance(data, dict):
        data = data.get("jobs")
    if not isinstance(data, list):
        raise InvalidArgumentError(f"{path} must contain a list of job postings")

    jobs = []
    for index, item in enumerate(data, start=1):
        if not isinstance(item, dict):
            raise InvalidArgumentError(f"Job posting #{index} in {path} is not a mapping")
        try:
            jobs.append(JobPosting(**item))
        except ValidationError as e:
            raise InvalidArgumentError(f"Job posting #{index} in {path} is invalid: {e}") from e
    return jobs


def _resolve_top(requested: Optional[int], app_config: AppConfig) -> int:
    return app_config.matching.default_top_k if requested is None else requested


def _get_job(job_id: int) -> JobPosting:
    with get_session() as session:
        job = JobPostingRepository(session).get(job_id)
    if job is None:
        raise RecordNotFoundError(f"Job posting with id {job_id} not found")
    return job


def _list_candidates() -> List[Candidate]:
    with get_session() as session:
        return CandidateRepository(session).list_all()


def _print_results(results: Sequence[MatchResult], label: str) -> None:
    if not results:
        print(f"No matches for {label}")
        return
    print(f"Matches for {label}:")
    for rank, result in enumerate(results, start=1):
        print(
            f"{rank:>3}. {result.candidate.name or '(unnamed)'} <{result.candidate.email}> | "
            f"{result.job.title} | {result.score:.1f} ({result.grade.value})"
        )


def cmd_parse(args: argparse.Namespace, app_config: AppConfig, env_config: EnvironmentConfig) -> int:
    """Parse a résumé, print it, and optionally store it (updating by e-mail)."""
    with log_context(document=str(args.file)):
        candidate = build_parser(app_config).parse_file(
            args.file, max_text_bytes=app_config.extraction.max_text_bytes
        )

        if args.save:
            init_database(env_config.database_url)
            with get_session() as session:
                repo = CandidateRepository(session)
                existing = repo.get_by_email(candidate.email) if candidate.email else None
                if existing is not None:
                    candidate = repo.update(
                        candidate.model_copy(
                            update={"id": existing.id, "created_at": existing.created_at}
                        )
                    )
                else:
                    candidate = repo.add(candidate)

            logger.info(
                "Candidate saved",
                extra={"event": "cli.candidate.saved", "candidate_id": candidate.id},
            )

    print(json.dumps(candidate.model_dump(mode="json", exclude={"resume_text"}), indent=2))
    return 0


def cmd_import_jobs(args: argparse.Namespace, app_config: AppConfig, env_config: EnvironmentConfig) -> int:
    """Store every job posting of a YAML file."""
    jobs = load_job_postings(args.file)
    init_database(env_config.database_url)
    with get_session() as session:
        repo = JobPostingRepository(session)
        stored = [repo.add(job) for job in jobs]

    for job in stored:
        print(f"{job.id}: {job.title}")
    print(f"Imported {len(stored)} job postings")
    return 0


def cmd_rank(args: argparse.Namespace, app_config: AppConfig, env_config: EnvironmentConfig) -> int:
    """Rank stored candidates for one job posting."""
    init_database(env_config.database_url)
    top = _resolve_top(args.top, app_config)
    min_score = app_config.matching.min_score if args.min_score is None else args.min_score

    with log_context(job_id=args.job_id):
        job = _get_job(args.job_id)
        engine = MatchingEngine()
        results = engine.above_threshold(job, _list_candidates(), min_score)
        if top > 0:
            results = results[:top]

    _print_results(results, f"job {job.id} ({job.title})")
    return 0


def cmd_suitable(args: argparse.Namespace, app_config: AppConfig, env_config: EnvironmentConfig) -> int:
    """List the best active job postings for a stored candidate."""
    init_database(env_config.database_url)
    with get_session() as session:
        candidate = CandidateRepository(session).get_by_email(args.email)
        jobs = JobPostingRepository(session).list_active()
    if candidate is None:
        raise RecordNotFoundError(f"Candidate with email {args.email} not found")

    results = MatchingEngine().suitable_jobs(candidate, jobs, _resolve_top(args.top, app_config))
    _print_results(results, f"candidate {candidate.email}")
    return 0


def cmd_stats(args: argparse.Namespace, app_config: AppConfig, env_config: EnvironmentConfig) -> int:
    """Print the score distribution of stored candidates for a job posting."""
    init_database(env_config.database_url)
    with log_context(job_id=args.job_id):
        job = _get_job(args.job_id)
        stats = MatchingEngine().stats(job, _list_candidates())

    print(f"Job {job.id}: {job.title}")
    print(stats)
    return 0


def cmd_export(args: argparse.Namespace, app_config: AppConfig, env_config: EnvironmentConfig) -> int:
    """Export candidates, job postings or the ranking for one job to CSV."""
    if args.kind == "matches" and args.job_id is None:
        raise InvalidArgumentError("--job-id is required when exporting matches")

    init_database(env_config.database_url)
    if args.kind == "candidates":
        output = export_candidates(_list_candidates(), args.output)
    elif args.kind == "jobs":
        with get_session() as session:
            jobs = JobPostingRepository(session).list_all()
        output = export_job_postings(jobs, args.output)
    else:
        with log_context(job_id=args.job_id):
            job = _get_job(args.job_id)
            results = MatchingEngine().top_k(job, _list_candidates(), 0)
        output = export_match_results(results, args.output)

    print(f"Exported {args.kind} to {output}")
    return 0


COMMANDS = {
    "parse": cmd_parse,
    "import-jobs": cmd_import_jobs,
    "rank": cmd_rank,
    "suitable": cmd_suitable,
    "stats": cmd_stats,
    "export": cmd_export,
}


def main(argv: Optional[Sequence[str]] = None) -> int:
    """
    Main entry point for the recruitment workbench.

    Args:
        argv: Command-line arguments (defaults to sys.argv[1:])

    Returns:
        Exit code (0 for success, 1 for any workbench error).
    """
    start_time = time.time()
    args = build_arg_parser().parse_args(argv)

    try:
        # Step 1: Load configuration early (before logging for format detection)
        app_config, env_config = load_runtime_config(args.config, args.log_level)

        # Step 2: Configure logging
        log_format = app_config.logging.format if app_config.logging else "key-value"
        environment = os.environ.get("ENVIRONMENT", "local")
        configure_logging(level=env_config.log_level, format_type=log_format, environment=environment)

        logger.info(
            "Workbench command starting",
            extra={
                "event": "cli.command.starting",
                "command": args.command,
                "log_level": env_config.log_level,
            },
        )

        # Step 3: Run the command
        exit_code = COMMANDS[args.command](args, app_config, env_config)

        logger.info(
            "Workbench command finished",
            extra={
                "event": "cli.command.finished",
                "command": args.command,
                "duration_seconds": round(time.time() - start_time, 3),
            },
        )
        return exit_code

    except ConfigurationError as e:
        # Configuration errors are already formatted nicely
        print(f"Configuration Error: {e}", file=sys.stderr)
        return 1
    except WorkbenchError as e:
        print(f"Error: {e}", file=sys.stderr)
        logger.error(
            f"Command failed: {e}",
            extra={
                "event": "cli.command.failed",
                "command": args.command,
                "error_type": type(e).__name__,
            },
        )
        return 1
    except KeyboardInterrupt:
        print("\nInterrupted by user", file=sys.stderr)
        return 130
    finally:
        close_database()


if __name__ == "__main__":
    sys.exit(main())
