"""Persistence layer for candidates and job postings using SQLAlchemy.

This module provides the public API for database operations including:
- Database initialization and connection management
- Repository classes for CRUD and query operations
- Custom exceptions for error handling

Public API:
    # Database initialization and session management
    - init_database(database_url: str) -> None
    - get_session() -> ContextManager[Session]
    - close_database() -> None
    - get_engine() -> Engine

    # Repository classes
    - CandidateRepository: candidates and their skills
    - JobPostingRepository: job postings and their required/preferred skills

    # Exceptions
    - PersistenceError: Base exception for all persistence errors
    - DatabaseConnectionError: Database connection/initialization failures
    - RecordNotFoundError: Required record not found
    - DataIntegrityError: Constraint violations

Example usage:
    >>> from workbench.persistence import init_database, get_session, CandidateRepository
    >>>
    >>> init_database("sqlite:///./data/workbench.db")
    >>>
    >>> with get_session() as session:
    ...     repo = CandidateRepository(session)
    ...     candidate = repo.get_by_email("jane@example.com")
"""

# Database initialization and session management
from .database import close_database, get_engine, get_session, init_database

# Repository classes
from .repositories import CandidateRepository, JobPostingRepository

# Exceptions
from .exceptions import (
    DatabaseConnectionError,
    DataIntegrityError,
    PersistenceError,
    RecordNotFoundError,
)

# Public API exports
__all__ = [
    # Database functions
    "init_database",
    "get_session",
    "close_database",
    "get_engine",
    # Repositories
    "CandidateRepository",
    "JobPostingRepository",
    # Exceptions
    "PersistenceError",
    "DatabaseConnectionError",
    "RecordNotFoundError",
    "DataIntegrityError",
]
