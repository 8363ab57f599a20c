from __future__ import annotations
from typing import Literal
from uuid import UUID
from datetime import datetime
from pydantic import BaseModel, Field
from scavenger.schemas.base import CamelModel
from scavenger.schemas.submission import TeamBrief

SideQuestStatus = Literal["pending", "approved", "rejected"]


class SideQuestCreate(CamelModel):
    title: str = Field(min_length=1, max_length=200)
    description: str = ""
    is_active: bool = True


class SideQuestUpdate(CamelModel):
    title: str | None = Field(default=None, min_length=1, max_length=200)
    description: str | None = None
    is_active: bool | None = None


class SideQuestPublic(CamelModel):
    id: UUID
    title: str
    description: str
    is_active: bool
    created_at: datetime


class SideQuestForTeam(SideQuestPublic):
    submitted: bool
    status: SideQuestStatus | None = None
    photo_url: str | None = None


class SideQuestSummary(CamelModel):
    submitted: int
    approved: int
    rejected: int
    pending: int


class SideQuestListing(CamelModel):
    quests: list[SideQuestForTeam]
    summary: SideQuestSummary


class SideQuestBrief(CamelModel):
    id: UUID
    title: str
    description: str


class SideQuestSubmissionPublic(CamelModel):
    id: UUID
    team_id: UUID
    side_quest_id: UUID
    photo_url: str | None = None
    status: SideQuestStatus
    reviewed_by: UUID | None = None
    reviewed_at: datetime | None = None
    submitted_at: datetime


class SideQuestGalleryItem(SideQuestSubmissionPublic):
    team: TeamBrief | None = None
    side_quest: SideQuestBrief | None = None


class SideQuestSubmitResponse(BaseModel):
    message: str
    submission: SideQuestSubmissionPublic
