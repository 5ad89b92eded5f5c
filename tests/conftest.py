"""Shared pytest fixtures."""

import pytest

from workbench.logging.context import clear_log_context
from workbench.persistence import close_database, init_database

from tests.helpers import SAMPLE_RESUME


@pytest.fixture(autouse=True)
def _isolate_state():
    """Drop logging context and database handles left over by a test."""
    yield
    clear_log_context()
    close_database()


@pytest.fixture
def test_database(tmp_path):
    """Initialize a file-backed SQLite database in a temporary directory."""
    db_url = f"sqlite:///{tmp_path / 'workbench_test.db'}"
    init_database(db_url)
    yield db_url
    close_database()


@pytest.fixture
def sample_resume_text():
    return SAMPLE_RESUME
