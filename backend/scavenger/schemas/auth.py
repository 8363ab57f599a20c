from __future__ import annotations
from uuid import UUID
from pydantic import BaseModel, Field
from scavenger.schemas.base import CamelModel

class LoginRequest(BaseModel):
    name: str
    password: str

class AdminSetupRequest(CamelModel):
    name: str = Field(min_length=1, max_length=40)
    password: str = Field(min_length=4, max_length=128)
    setup_key: str

class ProfileUpdate(BaseModel):
    name: str | None = Field(default=None, max_length=40)
    password: str | None = Field(default=None, min_length=4, max_length=128)

class TeamIdentity(CamelModel):
    id: UUID
    name: str
    avatar_color: str
    role: str
    profile_edited: bool = False

class TokenResponse(BaseModel):
    token: str
    team: TeamIdentity
