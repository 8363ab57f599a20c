from __future__ import annotations
from uuid import UUID
from datetime import datetime
from typing import Literal
from pydantic import Field
from scavenger.schemas.base import CamelModel

TaskStatus = Literal["not-started", "in-progress", "completed", "blocked"]


class TaskCreate(CamelModel):
    title: str = Field(min_length=1, max_length=200)
    description: str = Field(min_length=1)
    location_hint: str = Field(min_length=1)
    detailed_hint: str = ""
    points: int | None = Field(default=None, ge=0)  # None -> config defaultTaskPoints
    order: int = 0
    is_active: bool = True
    lat: float | None = Field(default=None, ge=-90, le=90)
    lng: float | None = Field(default=None, ge=-180, le=180)
    map_label: str = Field(default="", max_length=80)


class TaskUpdate(CamelModel):
    title: str | None = Field(default=None, min_length=1, max_length=200)
    description: str | None = Field(default=None, min_length=1)
    location_hint: str | None = Field(default=None, min_length=1)
    detailed_hint: str | None = None
    points: int | None = Field(default=None, ge=0)
    order: int | None = None
    is_active: bool | None = None
    lat: float | None = Field(default=None, ge=-90, le=90)
    lng: float | None = Field(default=None, ge=-180, le=180)
    map_label: str | None = Field(default=None, max_length=80)


class TaskAdmin(CamelModel):
    id: UUID
    title: str
    description: str
    location_hint: str
    detailed_hint: str
    points: int
    order: int
    is_active: bool
    lat: float | None = None
    lng: float | None = None
    map_label: str
    created_at: datetime


class TaskSummary(CamelModel):
    """Row of the team task list. No riddle text."""
    id: UUID
    title: str
    location_hint: str
    points: int
    order: int
    queue_position: int
    status: TaskStatus
    elapsed_ms: int | None = None


class TaskView(CamelModel):
    """
    A task as a given viewer may see it right now.
    detailed_hint / lat / lng are None until their reveal delay has passed.
    """
    id: UUID
    title: str
    description: str
    location_hint: str
    points: int
    order: int
    is_active: bool
    map_label: str
    detailed_hint: str | None = None
    lat: float | None = None
    lng: float | None = None
    hint_revealed: bool = False
    location_revealed: bool = False
    hint_reveal_at: datetime | None = None
    location_reveal_at: datetime | None = None
