from __future__ import annotations
from uuid import UUID
from datetime import datetime
from pydantic import Field
from scavenger.schemas.base import CamelModel

class TeamCreate(CamelModel):
    name: str = Field(min_length=1, max_length=40)
    password: str = Field(min_length=4, max_length=128)
    avatar_color: str | None = Field(default=None, pattern=r"^#[0-9a-fA-F]{6}$")

class TeamBulkCreate(CamelModel):
    count: int = Field(ge=1, le=200)
    prefix: str = Field(default="Team", min_length=1, max_length=30)

class TeamPublic(CamelModel):
    id: UUID
    name: str
    role: str
    avatar_color: str
    task_queue: list[UUID]
    profile_edited: bool
    created_at: datetime

class GeneratedCredential(CamelModel):
    """Returned once at generation time; the password is not retrievable later."""
    id: UUID
    name: str
    password: str

class ReshuffleResponse(CamelModel):
    message: str
    task_queue: list[UUID]
