"""Persistence layer exceptions.

This module defines custom exceptions for database and persistence operations.
All persistence exceptions inherit from PersistenceError for easy catching.
"""

from workbench.exceptions import WorkbenchError


class PersistenceError(WorkbenchError):
    """Base exception for all persistence layer errors.

    All database-related exceptions inherit from this class so callers can
    catch every persistence failure with a single except clause.
    """

    pass


class DatabaseConnectionError(PersistenceError):
    """Raised when database connection or initialization fails.

    Examples:
    - Invalid database URL
    - Database file not accessible
    - Session requested before init_database()
    """

    pass


class RecordNotFoundError(PersistenceError):
    """Raised when an operation needs a record that does not exist.

    Plain lookups (get, get_by_email) return None instead.
    """

    pass


class DataIntegrityError(PersistenceError):
    """Raised when a database constraint is violated.

    Examples:
    - Duplicate candidate e-mail
    - Duplicate skill on the same candidate or job
    """

    pass
