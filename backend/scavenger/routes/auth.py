from __future__ import annotations
import hmac
from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from scavenger.auth_deps import get_current_team
from scavenger.config import settings
from scavenger.db import get_session
from scavenger.errors import Unauthorized, Forbidden
from scavenger.models.team import Team
from scavenger.schemas.auth import LoginRequest, AdminSetupRequest, ProfileUpdate, TeamIdentity, TokenResponse
from scavenger.security import verify_password, make_access_token
from scavenger.services.teams import create_admin, update_profile

router = APIRouter(prefix="/auth", tags=["auth"])

def _token_response(team: Team) -> TokenResponse:
    return TokenResponse(
        token=make_access_token(str(team.id), team.name, team.role),
        team=TeamIdentity.model_validate(team),
    )

@router.post("/login", response_model=TokenResponse)
async def login(payload: LoginRequest, session: AsyncSession = Depends(get_session)):
    team = await session.scalar(select(Team).where(Team.name == payload.name.strip()))
    if not team or not verify_password(payload.password, team.password_hash):
        raise Unauthorized("Invalid credentials")
    return _token_response(team)

@router.post("/register")
async def register():
    # Teams are created by the admin only
    return JSONResponse(
        status_code=410,
        content={"error": "Gone", "detail": "Registration is disabled. Ask the organiser for your team login."},
    )

@router.post("/admin-setup", response_model=TokenResponse, status_code=201)
async def admin_setup(payload: AdminSetupRequest, session: AsyncSession = Depends(get_session)):
    key = settings.admin_setup_key
    if not key or not hmac.compare_digest(payload.setup_key.encode(), key.encode()):
        raise Forbidden("Invalid setup key")
    admin = await create_admin(session, payload.name.strip(), payload.password)
    return _token_response(admin)

@router.get("/me", response_model=TeamIdentity)
async def me(team: Team = Depends(get_current_team)):
    return TeamIdentity.model_validate(team)

@router.put("/profile", response_model=TokenResponse)
async def profile(
    payload: ProfileUpdate,
    session: AsyncSession = Depends(get_session),
    team: Team = Depends(get_current_team),
):
    # The name is baked into the token, so a fresh one is issued
    team = await update_profile(session, team, payload.name, payload.password)
    return _token_response(team)
