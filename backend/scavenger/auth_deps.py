from __future__ import annotations
import uuid
import jwt
import structlog
from fastapi import Depends
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from sqlalchemy.ext.asyncio import AsyncSession
from scavenger.db import get_session
from scavenger.errors import Unauthorized, Forbidden
from scavenger.security import decode_token
from scavenger.models.team import Team

security = HTTPBearer(auto_error=False)

async def get_current_team(
    credentials: HTTPAuthorizationCredentials | None = Depends(security),
    session: AsyncSession = Depends(get_session),
) -> Team:
    if credentials is None:
        raise Unauthorized("No token provided")
    try:
        data = decode_token(credentials.credentials)
    except jwt.PyJWTError:
        raise Unauthorized("Invalid or expired token")
    if data.get("type") != "access":
        raise Unauthorized("Wrong token type")
    try:
        team_id = uuid.UUID(str(data.get("sub")))
    except ValueError:
        raise Unauthorized("Invalid token subject")
    team = await session.get(Team, team_id)
    if not team:
        raise Unauthorized("Team not found")
    structlog.contextvars.bind_contextvars(team_id=str(team.id))
    return team

async def require_admin(team: Team = Depends(get_current_team)) -> Team:
    # Role is read from the database row, not from the token claims
    if not team.is_admin:
        raise Forbidden("Admin access required")
    return team
