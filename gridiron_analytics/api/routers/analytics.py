"""API endpoints for team and player film analytics."""

import logging

from fastapi import APIRouter, Depends, Header, Query

from ...analytics.service import AdvancedAnalyticsService
from ...config.settings import settings
from ...database.connection import SessionLocal
from ...database.store import SqlAlchemyAnalyticsStore
from ..schemas import ErrorResponse, TierFeatureDisabledResponse, TierUpdateRequest

logger = logging.getLogger(__name__)

# Error bodies the exception handlers in api.main produce, documented per router
TIER_GATED_RESPONSES = {
    403: {"model": TierFeatureDisabledResponse, "description": "Statistic not included in the team's tier"},
    502: {"model": ErrorResponse, "description": "Data store failure"},
}

router = APIRouter(prefix="/teams/{team_id}/analytics", tags=["Team Analytics"], responses=TIER_GATED_RESPONSES)
capabilities_router = APIRouter(
    prefix="/analytics", tags=["Team Analytics"], responses={422: {"model": ErrorResponse}}
)
players_router = APIRouter(
    prefix="/players/{player_id}/analytics",
    tags=["Player Analytics"],
    responses={**TIER_GATED_RESPONSES, 404: {"model": ErrorResponse, "description": "Unknown player"}},
)


async def get_service() -> AdvancedAnalyticsService:
    """Service over the configured database (overridden in tests)."""
    return AdvancedAnalyticsService(SqlAlchemyAnalyticsStore(SessionLocal), settings)


GameFilter = Query(default=None, description="Restrict to one game's film")


# ========== TIER ==========


@router.get("/tier")
async def get_tier(team_id: str, service: AdvancedAnalyticsService = Depends(get_service)) -> dict:
    """Current analytics configuration (default tier if none stored)."""
    config = await service.get_team_tier(team_id)
    return config.to_dict()


@router.put("/tier", responses={401: {"model": ErrorResponse, "description": "No X-User-Id header"}})
async def update_tier(
    team_id: str,
    request: TierUpdateRequest,
    x_user_id: str | None = Header(default=None),
    service: AdvancedAnalyticsService = Depends(get_service),
) -> dict:
    """Change the team's tier or default tagging mode.

    The caller identity comes from the X-User-Id header; without it the
    request is rejected with 401 before anything is written.
    """
    config = await service.update_team_tier(team_id, request.changes(), caller_id=x_user_id)
    return config.to_dict()


@capabilities_router.get("/capabilities/{tier}")
async def get_capabilities(tier: str) -> dict:
    """What a tier unlocks (no team needed)."""
    return AdvancedAnalyticsService.get_tier_capabilities(tier).to_dict()


# ========== TEAM STATISTICS ==========


@router.get("/drives")
async def get_drives(
    team_id: str, game_id: str | None = GameFilter, service: AdvancedAnalyticsService = Depends(get_service)
) -> dict:
    return (await service.get_drive_analytics(team_id, game_id)).to_dict()


@router.get("/drives/defense")
async def get_defensive_drives(
    team_id: str, game_id: str | None = GameFilter, service: AdvancedAnalyticsService = Depends(get_service)
) -> dict:
    return (await service.get_defensive_drive_analytics(team_id, game_id)).to_dict()


@router.get("/players")
async def get_player_attribution(
    team_id: str, game_id: str | None = GameFilter, service: AdvancedAnalyticsService = Depends(get_service)
) -> list[dict]:
    return [s.to_dict() for s in await service.get_player_attribution_stats(team_id, game_id)]


@router.get("/offensive-line")
async def get_offensive_line(
    team_id: str, game_id: str | None = GameFilter, service: AdvancedAnalyticsService = Depends(get_service)
) -> list[dict]:
    return [s.to_dict() for s in await service.get_offensive_line_stats(team_id, game_id)]


@router.get("/defense")
async def get_defense(
    team_id: str, game_id: str | None = GameFilter, service: AdvancedAnalyticsService = Depends(get_service)
) -> list[dict]:
    return [s.to_dict() for s in await service.get_defensive_stats(team_id, game_id)]


@router.get("/defense/downs")
async def get_defensive_downs(
    team_id: str, game_id: str | None = GameFilter, service: AdvancedAnalyticsService = Depends(get_service)
) -> list[dict]:
    return [s.to_dict() for s in await service.get_defensive_down_breakdown(team_id, game_id)]


@router.get("/situational")
async def get_situational(
    team_id: str, game_id: str | None = GameFilter, service: AdvancedAnalyticsService = Depends(get_service)
) -> list[dict]:
    return [s.to_dict() for s in await service.get_situational_splits(team_id, game_id)]


@router.get("/unified")
async def get_unified(
    team_id: str, game_id: str | None = GameFilter, service: AdvancedAnalyticsService = Depends(get_service)
) -> list[dict]:
    """One row per player across offense, offensive line and defense."""
    return [s.to_dict() for s in await service.get_unified_player_stats(team_id, game_id)]


# ========== PLAYER PROFILES ==========


@players_router.get("/qb")
async def get_qb_profile(
    player_id: str, game_id: str | None = GameFilter, service: AdvancedAnalyticsService = Depends(get_service)
) -> dict | None:
    stats = await service.get_qb_stats(player_id, game_id)
    return stats.to_dict() if stats else None


@players_router.get("/rb")
async def get_rb_profile(
    player_id: str, game_id: str | None = GameFilter, service: AdvancedAnalyticsService = Depends(get_service)
) -> dict | None:
    stats = await service.get_rb_stats(player_id, game_id)
    return stats.to_dict() if stats else None


@players_router.get("/wrte")
async def get_wrte_profile(
    player_id: str, game_id: str | None = GameFilter, service: AdvancedAnalyticsService = Depends(get_service)
) -> dict | None:
    stats = await service.get_wrte_stats(player_id, game_id)
    return stats.to_dict() if stats else None
