import pytest

from game.session.stats_session import StatsSession
from game.session.stats_store import StatsRepository
from game.tests.helpers.stats import LOCAL_PLAYER


@pytest.fixture
def repository(stats_storage):
    return StatsRepository(stats_storage)


@pytest.fixture
def session(repository):
    """Stats session for LOCAL_PLAYER backed by a temporary directory."""
    return StatsSession(repository, LOCAL_PLAYER)
