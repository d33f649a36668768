"""
Pytest fixtures for the QA compliance core test suite.

Provides:
- Structured logging configured for tests, plus a JSON log capture fixture
- In-memory SQLite engine / session with all QA tables created
- A DeterministicClock pinned to 2024-01-01 12:00 (naive, for SQLite)
"""

import json
import logging
from datetime import datetime
from io import StringIO

import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker

import qa_kernel.models  # noqa: F401  (registers all tables on Base.metadata)
from qa_kernel.db.base import Base
from qa_kernel.domain.clock import DeterministicClock
from qa_kernel.logging_config import (
    LogContext,
    StructuredFormatter,
    configure_logging,
    reset_logging,
)

TODAY = datetime(2024, 1, 1, 12, 0, 0)


# =============================================================================
# Logging fixtures
# =============================================================================


@pytest.fixture(autouse=True, scope="session")
def _configure_test_logging():
    """Configure structured logging for the test suite."""
    reset_logging()
    configure_logging(level=logging.DEBUG)
    yield
    reset_logging()


@pytest.fixture(autouse=True)
def _clear_log_context():
    """Clear LogContext between tests to prevent cross-test contamination."""
    LogContext.clear()
    yield
    LogContext.clear()


@pytest.fixture
def captured_logs():
    """
    Capture qa_kernel logs as parsed JSON dicts.

    Usage::

        def test_something(captured_logs, work_queue_service):
            work_queue_service.build_queue()
            logs = captured_logs()
            assert any(r["message"] == "work_queue_built" for r in logs)
    """
    stream = StringIO()
    handler = logging.StreamHandler(stream)
    handler.setFormatter(StructuredFormatter())
    root = logging.getLogger("qa_kernel")
    previous_level = root.level
    root.setLevel(logging.DEBUG)
    root.addHandler(handler)

    def _get_records() -> list[dict]:
        lines = stream.getvalue().strip().split("\n")
        return [json.loads(line) for line in lines if line]

    yield _get_records

    root.removeHandler(handler)
    root.setLevel(previous_level)


# =============================================================================
# Database fixtures
# =============================================================================


@pytest.fixture
def engine():
    eng = create_engine("sqlite:///:memory:")
    Base.metadata.create_all(eng)
    yield eng
    eng.dispose()


@pytest.fixture
def session_factory(engine):
    return sessionmaker(bind=engine, expire_on_commit=False)


@pytest.fixture
def db_session(session_factory):
    session = session_factory()
    try:
        yield session
    finally:
        session.close()


# =============================================================================
# Clock
# =============================================================================


@pytest.fixture
def clock():
    # Naive datetimes for SQLite compatibility (SQLite strips tzinfo)
    return DeterministicClock(fixed_time=TODAY)
