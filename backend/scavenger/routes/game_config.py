from __future__ import annotations
from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession
from scavenger.db import get_session
from scavenger.schemas.game_config import GameConfigPublicView
from scavenger.services.clock import Clock, get_clock
from scavenger.services.game_config import get_config, game_state

router = APIRouter(prefix="/config", tags=["config"])

@router.get("", response_model=GameConfigPublicView)
async def public_config(session: AsyncSession = Depends(get_session), clock: Clock = Depends(get_clock)):
    config = await get_config(session)
    return GameConfigPublicView(
        game_title=config.game_title,
        game_subtitle=config.game_subtitle,
        game_active=config.game_active,
        game_state=game_state(config, clock.now()),
        map_center_lat=config.map_center_lat,
        map_center_lng=config.map_center_lng,
        map_zoom=config.map_zoom,
        boundary_radius_meters=config.boundary_radius_meters,
        allow_registration=config.allow_registration,
        leaderboard_mode=config.leaderboard_mode,
        hint_reveal_delay_sec=config.hint_reveal_delay_sec,
        location_reveal_delay_sec=config.location_reveal_delay_sec,
        game_end_time=config.game_end_time,
    )
