from __future__ import annotations
from datetime import datetime
import structlog
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession
from scavenger.models.game_config import GameConfig, SINGLETON_ID
from scavenger.schemas.game_config import GameConfigUpdate

log = structlog.get_logger()

# Columns that may be explicitly cleared with null
NULLABLE_FIELDS = {"game_end_time"}


async def get_config(session: AsyncSession) -> GameConfig:
    """Return the single config row, creating it with defaults on first access."""
    config = await session.get(GameConfig, SINGLETON_ID)
    if config:
        return config
    session.add(GameConfig(id=SINGLETON_ID))
    try:
        await session.commit()
    except IntegrityError:
        # Lost the race against a concurrent first access; the row exists now
        await session.rollback()
    config = await session.get(GameConfig, SINGLETON_ID, populate_existing=True)
    log.info("game_config_initialized")
    return config


async def update_config(session: AsyncSession, patch: GameConfigUpdate) -> GameConfig:
    config = await get_config(session)
    changes = patch.model_dump(exclude_unset=True)
    applied = {}
    for field, value in changes.items():
        if value is None and field not in NULLABLE_FIELDS:
            continue
        setattr(config, field, value)
        applied[field] = value
    await session.commit()
    await session.refresh(config)
    log.info("game_config_updated", fields=sorted(applied))
    return config


def game_state(config: GameConfig, now: datetime) -> str:
    """running | paused | ended. gameEndTime wins over the active flag once passed."""
    if config.game_end_time is not None and now >= config.game_end_time:
        return "ended"
    if not config.game_active:
        return "paused"
    return "running"
