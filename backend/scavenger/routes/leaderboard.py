from __future__ import annotations
from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession
from scavenger.db import get_session
from scavenger.schemas.leaderboard import LeaderboardRow
from scavenger.services.leaderboard import leaderboard

router = APIRouter(prefix="/leaderboard", tags=["leaderboard"])

@router.get("", response_model=list[LeaderboardRow])
async def get_leaderboard(session: AsyncSession = Depends(get_session)):
    return await leaderboard(session)
