from __future__ import annotations
from typing import Any, Literal
from uuid import UUID
from datetime import datetime
from pydantic import BaseModel, Field
from scavenger.schemas.base import CamelModel
from scavenger.schemas.task import TaskView

SubmissionStatus = Literal["in-progress", "completed", "blocked"]


class SubmissionPublic(CamelModel):
    id: UUID
    team_id: UUID
    task_id: UUID
    riddle_opened_at: datetime
    photo_submitted_at: datetime | None = None
    elapsed_ms: int | None = None
    status: SubmissionStatus
    # storage key only reachable through the authenticated /media proxy
    photo_url: str | None = None   # served via /media proxy endpoint


class SubmissionAdmin(SubmissionPublic):
    blocked_at: datetime | None = None
    blocked_by: UUID | None = None
    block_reason: str = ""
    photo_points: int | None = None
    scored_at: datetime | None = None
    scored_by: UUID | None = None


class TeamBrief(CamelModel):
    id: UUID
    name: str
    avatar_color: str


class TaskBrief(CamelModel):
    id: UUID
    title: str
    location_hint: str
    order: int


class SubmissionModerationRow(SubmissionAdmin):
    team: TeamBrief | None = None
    task: TaskBrief | None = None
    possible_duplicate_of: UUID | None = None


class FeedItem(CamelModel):
    id: UUID
    photo_url: str
    photo_submitted_at: datetime
    elapsed_ms: int | None = None
    team: TeamBrief
    task: TaskBrief


class TaskWithSubmission(CamelModel):
    task: TaskView
    submission: SubmissionPublic | None = None


class UploadResult(CamelModel):
    id: UUID
    elapsed_ms: int
    photo_url: str
    status: SubmissionStatus


class UploadResponse(BaseModel):
    message: str
    submission: UploadResult


class BlockRequest(BaseModel):
    reason: str | None = Field(default=None, max_length=255)


class ScoreRequest(BaseModel):
    # Validated by the service so a bad value maps to InvalidScore, not a 422
    points: Any = None


class ModerationResponse(BaseModel):
    message: str
    submission: SubmissionAdmin
