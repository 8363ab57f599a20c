from __future__ import annotations
from datetime import datetime, timezone as dt_tz
from typing import Literal
from pydantic import Field, field_validator
from scavenger.schemas.base import CamelModel

LeaderboardMode = Literal["fastest", "most-tasks"]


class GameConfigPublic(CamelModel):
    """Everything the admin panel edits."""
    default_task_points: int
    time_bonus_threshold_sec: int
    time_bonus_points: int
    hint_penalty_points: int
    leaderboard_mode: LeaderboardMode
    game_active: bool
    game_title: str
    game_subtitle: str
    allow_registration: bool
    map_center_lat: float
    map_center_lng: float
    map_zoom: int
    boundary_radius_meters: int
    shuffle_task_order: bool
    hint_reveal_delay_sec: int
    location_reveal_delay_sec: int
    game_end_time: datetime | None = None
    game_duration_minutes: int
    updated_at: datetime


class GameConfigUpdate(CamelModel):
    """Allow-listed fields for PUT /admin/config. Omitted fields stay unchanged."""
    default_task_points: int | None = Field(default=None, ge=0)
    time_bonus_threshold_sec: int | None = Field(default=None, ge=0)
    time_bonus_points: int | None = Field(default=None, ge=0)
    hint_penalty_points: int | None = Field(default=None, ge=0)
    leaderboard_mode: LeaderboardMode | None = None
    game_active: bool | None = None
    game_title: str | None = Field(default=None, max_length=120)
    game_subtitle: str | None = Field(default=None, max_length=120)
    allow_registration: bool | None = None
    map_center_lat: float | None = Field(default=None, ge=-90, le=90)
    map_center_lng: float | None = Field(default=None, ge=-180, le=180)
    map_zoom: int | None = Field(default=None, ge=0, le=22)
    boundary_radius_meters: int | None = Field(default=None, ge=0)
    shuffle_task_order: bool | None = None
    hint_reveal_delay_sec: int | None = Field(default=None, ge=0)
    location_reveal_delay_sec: int | None = Field(default=None, ge=0)
    game_end_time: datetime | None = None
    game_duration_minutes: int | None = Field(default=None, ge=0)

    @field_validator("game_end_time")
    @classmethod
    def assume_utc(cls, v: datetime | None):
        if v is not None and v.tzinfo is None:
            return v.replace(tzinfo=dt_tz.utc)
        return v


class GameConfigPublicView(CamelModel):
    """Non-sensitive subset served to teams at GET /config."""
    game_title: str
    game_subtitle: str
    game_active: bool
    game_state: Literal["running", "paused", "ended"]
    map_center_lat: float
    map_center_lng: float
    map_zoom: int
    boundary_radius_meters: int
    allow_registration: bool
    leaderboard_mode: LeaderboardMode
    hint_reveal_delay_sec: int
    location_reveal_delay_sec: int
    game_end_time: datetime | None = None
