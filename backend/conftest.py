"""Root conftest: load test environment variables, route structlog to caplog, provide stats storage."""

from pathlib import Path

import pytest
import structlog
from dotenv import load_dotenv

from shared.logging import configure_structlog
from shared.storage import LocalStatsStorage

load_dotenv(Path(__file__).resolve().parent.parent / ".env.tests")

configure_structlog()


@pytest.fixture(autouse=True)
def _clear_log_context():
    """Prevent match_id context leaking between tests."""
    structlog.contextvars.clear_contextvars()
    yield
    structlog.contextvars.clear_contextvars()


@pytest.fixture
def stats_storage(tmp_path) -> LocalStatsStorage:
    return LocalStatsStorage(tmp_path / "stats")
