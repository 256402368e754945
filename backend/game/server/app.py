"""Read-only HTTP surface over the local player's statistics.

Serves the lifetime profile, the latest radar snapshot and match stats to a
presentation client as JSON. Nothing here mutates the profile; match
lifecycle calls go through StatsSession directly.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

import structlog
from starlette.applications import Starlette
from starlette.responses import JSONResponse
from starlette.routing import Route

from game.server.settings import StatsSettings
from game.session.stats_session import StatsSession
from game.session.stats_store import StatsLoadError, StatsRepository
from game.stats.match_stats import calculate_match_stats
from shared.logging import setup_logging
from shared.storage import LocalStatsStorage

if TYPE_CHECKING:
    from starlette.requests import Request

logger = structlog.get_logger()


async def health(_request: Request) -> JSONResponse:
    return JSONResponse({"status": "ok"})


async def profile(request: Request) -> JSONResponse:
    session: StatsSession = request.app.state.session
    return JSONResponse(session.profile.model_dump(mode="json"))


async def latest_radar(request: Request) -> JSONResponse:
    session: StatsSession = request.app.state.session
    snapshot = session.profile.latest_snapshot
    if snapshot is None:
        return JSONResponse({"error": "no radar snapshot yet"}, status_code=404)
    return JSONResponse(snapshot.model_dump(mode="json"))


async def last_match(request: Request) -> JSONResponse:
    session: StatsSession = request.app.state.session
    stats = session.last_match_stats
    if stats is None:
        return JSONResponse({"error": "no finished match in this session"}, status_code=404)
    return JSONResponse(stats.model_dump(mode="json"))


async def match_stats(request: Request) -> JSONResponse:
    """Recalculate stats for an archived match."""
    repository: StatsRepository = request.app.state.repository
    match_id = request.path_params["match_id"]
    try:
        ledger = repository.load_archived_match(match_id)
    except ValueError:
        return JSONResponse({"error": "invalid match id"}, status_code=400)
    except StatsLoadError:
        logger.exception("archived match unreadable", match_id=match_id)
        return JSONResponse({"error": "archived match unreadable"}, status_code=500)
    if ledger is None:
        return JSONResponse({"error": "match not found"}, status_code=404)
    return JSONResponse(calculate_match_stats(ledger).model_dump(mode="json"))


def create_app(
    settings: StatsSettings | None = None,
    session: StatsSession | None = None,
    repository: StatsRepository | None = None,
) -> Starlette:
    if settings is None:
        settings = StatsSettings()
    if repository is None:
        repository = StatsRepository(LocalStatsStorage(settings.data_dir))
    if session is None:
        session = StatsSession(repository, settings.local_player())

    routes = [
        Route("/health", health, methods=["GET"]),
        Route("/profile", profile, methods=["GET"]),
        Route("/profile/radar", latest_radar, methods=["GET"]),
        Route("/matches/last", last_match, methods=["GET"]),
        Route("/matches/{match_id}/stats", match_stats, methods=["GET"]),
    ]

    app = Starlette(routes=routes)
    app.state.settings = settings
    app.state.session = session
    app.state.repository = repository

    logger.info("stats server ready", player_id=settings.local_player_id)
    return app


def get_app() -> Starlette:  # pragma: no cover
    """ASGI application factory for production use (e.g., uvicorn --factory)."""
    settings = StatsSettings()
    setup_logging(log_dir=settings.log_dir)
    return create_app(settings=settings)
